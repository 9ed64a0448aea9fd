"""
File candidate models.

A candidate is a local file the user has selected or dropped. The candidate
set keeps them in insertion order, duplicates included.
"""

import io
import mimetypes
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, BinaryIO, Iterable, Iterator, Tuple, Union

MIB = 1024 * 1024
DEFAULT_MIME_TYPE = "application/octet-stream"


@dataclass(frozen=True)
class FileCandidate:
    """A file offered for upload."""

    name: str
    size_bytes: int
    mime_type: str = DEFAULT_MIME_TYPE
    raw: Any = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        if self.size_bytes < 0:
            raise ValueError(f"File size cannot be negative: {self.size_bytes}")

    @classmethod
    def from_path(cls, path: Union[str, os.PathLike]) -> 'FileCandidate':
        """Build a candidate from a local file."""
        file_path = Path(path)
        mime_type, _ = mimetypes.guess_type(file_path.name)
        return cls(
            name=file_path.name,
            size_bytes=file_path.stat().st_size,
            mime_type=mime_type or DEFAULT_MIME_TYPE,
            raw=file_path
        )

    @classmethod
    def from_bytes(cls, name: str, content: bytes, mime_type: str = "") -> 'FileCandidate':
        """Build an in-memory candidate."""
        if not mime_type:
            mime_type = mimetypes.guess_type(name)[0] or DEFAULT_MIME_TYPE
        return cls(name=name, size_bytes=len(content), mime_type=mime_type, raw=content)

    @property
    def size_mb(self) -> str:
        """Size in MiB with two decimals, e.g. ``5.00 MB``."""
        return f"{self.size_bytes / MIB:.2f} MB"

    def open(self) -> BinaryIO:
        """
        Open the underlying content for binary reading.

        The returned reader belongs to the caller and should be closed. A
        stream handed in as ``raw`` is never returned itself: its content is
        copied and its position restored, so it can be opened repeatedly.
        """
        if isinstance(self.raw, (str, os.PathLike)):
            return open(self.raw, "rb")
        if isinstance(self.raw, (bytes, bytearray)):
            return io.BytesIO(self.raw)
        return io.BytesIO(self.read_bytes())

    def read_bytes(self) -> bytes:
        """Read the whole content."""
        if isinstance(self.raw, (str, os.PathLike)):
            return Path(self.raw).read_bytes()
        if isinstance(self.raw, (bytes, bytearray)):
            return bytes(self.raw)
        if not hasattr(self.raw, "read"):
            raise ValueError(f"Candidate {self.name!r} has no readable content")
        if not _is_seekable(self.raw):
            raise ValueError(f"Candidate {self.name!r} wraps a stream that cannot be re-read")

        position = self.raw.tell()
        self.raw.seek(0)
        try:
            return bytes(self.raw.read())
        finally:
            self.raw.seek(position)


def _is_seekable(stream: Any) -> bool:
    seekable = getattr(stream, "seekable", None)
    return (
        callable(seekable)
        and not getattr(stream, "closed", False)
        and bool(seekable())
    )


@dataclass(frozen=True)
class CandidateSet:
    """Ordered, immutable sequence of file candidates."""

    files: Tuple[FileCandidate, ...] = ()

    def __len__(self) -> int:
        return len(self.files)

    def __iter__(self) -> Iterator[FileCandidate]:
        return iter(self.files)

    def __getitem__(self, index: int) -> FileCandidate:
        return self.files[index]

    def __bool__(self) -> bool:
        return bool(self.files)

    @property
    def total_bytes(self) -> int:
        return sum(f.size_bytes for f in self.files)

    def extend(self, incoming: Iterable[FileCandidate]) -> 'CandidateSet':
        """Return a new set with ``incoming`` appended."""
        return CandidateSet(self.files + tuple(incoming))

    def without(self, index: int) -> 'CandidateSet':
        """Return a new set with the entry at ``index`` removed."""
        if not 0 <= index < len(self.files):
            raise IndexError(f"No candidate at position {index}")
        return CandidateSet(self.files[:index] + self.files[index + 1:])


@dataclass(frozen=True)
class OversizeSummary:
    """Oversized members of a candidate set and the message shown for them."""

    oversized_count: int = 0
    message: str = ""
    rejected: Tuple[FileCandidate, ...] = ()

    @property
    def has_oversized(self) -> bool:
        return self.oversized_count > 0

    def describe(self) -> Tuple[str, ...]:
        """One line per rejected file."""
        return tuple(f"• {f.name} ({f.size_mb})" for f in self.rejected)
