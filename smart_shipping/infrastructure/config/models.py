"""
Configuration models and data structures.

This module defines the configuration consumed by the upload pipeline,
with validation of every value in ``__post_init__``.
"""

import socket
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Optional

from ...core.domain.files import MIB
from ...core.exceptions import ConfigError

LOOPBACK_HOSTS = frozenset({"localhost", "127.0.0.1", "::1"})


@dataclass
class BackendConfig:
    """Upload backend configuration."""
    local_url: str = "http://localhost:3000"
    remote_url: str = "https://smart-shipping.onrender.com"
    base_url: Optional[str] = None
    hostname: Optional[str] = None
    request_timeout: float = 300.0

    def __post_init__(self) -> None:
        if self.request_timeout <= 0:
            raise ConfigError(
                f"Request timeout must be positive, got {self.request_timeout}")

    def resolve_base_url(self, hostname: Optional[str] = None) -> str:
        """
        Pick the endpoint for this process.

        An explicit ``base_url`` wins. Otherwise a loopback host name selects
        the local backend and anything else the remote one.
        """
        if self.base_url:
            return self.base_url.rstrip("/")

        host = hostname or self.hostname or socket.gethostname()
        if host.lower() in LOOPBACK_HOSTS:
            return self.local_url.rstrip("/")
        return self.remote_url.rstrip("/")


@dataclass
class UploadConfig:
    """Upload pipeline configuration."""
    max_file_size: int = 20 * MIB
    result_display_delay: float = 3.0
    session_error_display: float = 5.0

    def __post_init__(self) -> None:
        if self.max_file_size <= 0:
            raise ConfigError(
                f"Max file size must be positive, got {self.max_file_size}")
        if self.result_display_delay < 0:
            raise ConfigError(
                f"Result display delay cannot be negative, got {self.result_display_delay}")
        if self.session_error_display < 0:
            raise ConfigError(
                f"Session error display cannot be negative, got {self.session_error_display}")


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "INFO"
    log_directory: str = "logs"
    max_file_size: str = "10 MB"
    retention: int = 5
    console_enabled: bool = True
    file_enabled: bool = False


@dataclass
class ApplicationConfig:
    """Main application configuration."""

    name: str = "Smart Shipping"
    version: str = "0.1.0"
    debug: bool = False

    backend: BackendConfig = field(default_factory=BackendConfig)
    upload: UploadConfig = field(default_factory=UploadConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    config_file_path: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ApplicationConfig':
        """Create configuration from dictionary."""
        try:
            return cls(
                name=data.get('name', 'Smart Shipping'),
                version=data.get('version', '0.1.0'),
                debug=data.get('debug', False),
                backend=BackendConfig(**data.get('backend', {})),
                upload=UploadConfig(**data.get('upload', {})),
                logging=LoggingConfig(**data.get('logging', {})),
                config_file_path=data.get('config_file_path')
            )
        except TypeError as e:
            raise ConfigError(f"Invalid configuration: {e}") from e
