"""
Preview resources.

A displayable preview holds a local reference to the file's bytes. The
reference must be released once the preview is no longer shown; releasing
it again does nothing.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional


class PreviewKind(Enum):
    """Preview categories, by declared mime type."""
    IMAGE = "image"
    VIDEO = "video"
    AUDIO = "audio"
    UNSUPPORTED = "unsupported"

    @classmethod
    def from_mime_type(cls, mime_type: str) -> 'PreviewKind':
        category = (mime_type or "").split("/", 1)[0].lower()
        for kind in (cls.IMAGE, cls.VIDEO, cls.AUDIO):
            if category == kind.value:
                return kind
        return cls.UNSUPPORTED


class LocalReference:
    """Locally-created reference to a file's bytes."""

    def __init__(self, uri: str, data: bytes,
                 on_release: Optional[Callable[['LocalReference'], None]] = None):
        self.uri = uri
        self._data: Optional[bytes] = data
        self._on_release = on_release

    @property
    def released(self) -> bool:
        return self._data is None

    @property
    def data(self) -> bytes:
        if self._data is None:
            raise RuntimeError(f"Reference {self.uri} has been released")
        return self._data

    def release(self) -> bool:
        """Release the reference. Returns False if it was already released."""
        if self._data is None:
            return False
        self._data = None
        if self._on_release is not None:
            self._on_release(self)
        return True

    def __repr__(self) -> str:
        state = "released" if self.released else f"{len(self._data or b'')} bytes"
        return f"LocalReference({self.uri!r}, {state})"


@dataclass
class PreviewResource:
    """Displayable representation of a single file."""

    kind: PreviewKind
    data: Optional[LocalReference] = None
    name: str = ""

    @property
    def displayable(self) -> bool:
        return self.kind is not PreviewKind.UNSUPPORTED

    def release(self) -> bool:
        if self.data is None:
            return False
        return self.data.release()
