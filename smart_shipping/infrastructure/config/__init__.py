"""
Configuration models and loading.
"""

from .loader import ConfigLoader
from .models import ApplicationConfig, BackendConfig, LoggingConfig, UploadConfig

__all__ = [
    "ConfigLoader",
    "ApplicationConfig",
    "BackendConfig",
    "LoggingConfig",
    "UploadConfig",
]
