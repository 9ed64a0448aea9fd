"""
Upload session value object.
"""

import time
from dataclasses import dataclass, field
from urllib.parse import urlsplit


@dataclass(frozen=True)
class UploadSession:
    """
    Backend-issued upload session.

    Only the URL is stored; the session id is always derived from it so a
    refreshed session can never carry a stale id. Sessions are replaced
    wholesale on refresh, never mutated.
    """

    url: str
    fetched_at: float = field(default_factory=time.time, compare=False)

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError(f"Session URL has no path segment: {self.url!r}")

    @property
    def id(self) -> str:
        """Final path segment of the session URL."""
        path = urlsplit(self.url).path.rstrip("/")
        return path.rsplit("/", 1)[-1]
