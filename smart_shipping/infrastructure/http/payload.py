"""
Multipart payload with upload progress reporting.
"""

from typing import Any, Awaitable, BinaryIO, Callable, Optional, Sequence, Tuple

from aiohttp import MultipartWriter, hdrs
from aiohttp.abc import AbstractStreamWriter
from aiohttp.payload import Payload, get_payload

from ...core.domain.files import FileCandidate

FIELD_NAME = "files"

BytesWritten = Callable[[int, Optional[int]], Awaitable[None]]


def build_form(files: Sequence[Tuple[FileCandidate, BinaryIO]]) -> MultipartWriter:
    """One ``files`` part per candidate, in order."""
    writer = MultipartWriter("form-data")
    for candidate, stream in files:
        part = get_payload(stream, headers={hdrs.CONTENT_TYPE: candidate.mime_type})
        part.set_content_disposition("form-data", name=FIELD_NAME, filename=candidate.name)
        writer.append_payload(part)
    return writer


class _CountingWriter:
    """Forwards writes and reports the running byte count."""

    def __init__(self, writer: AbstractStreamWriter, total: Optional[int],
                 on_written: BytesWritten):
        self._writer = writer
        self._total = total
        self._on_written = on_written
        self.sent = 0

    async def write(self, chunk: Any) -> None:
        await self._writer.write(chunk)
        self.sent += len(chunk)
        await self._on_written(self.sent, self._total)

    def __getattr__(self, name: str) -> Any:
        return getattr(self._writer, name)


class ProgressPayload(Payload):
    """
    Wraps a multipart writer and reports bytes sent against its size.

    The size is known up front when every part has a known length, which
    holds for regular files and in-memory buffers.
    """

    def __init__(self, form: MultipartWriter, on_written: BytesWritten, **kwargs: Any):
        super().__init__(form, content_type=form.content_type, **kwargs)
        self._form = form
        self._on_written = on_written
        self._size = form.size

    async def write(self, writer: AbstractStreamWriter) -> None:
        counting = _CountingWriter(writer, self._size, self._on_written)
        await self._form.write(counting)  # type: ignore[arg-type]

    def decode(self, encoding: str = "utf-8", errors: str = "strict") -> str:
        raise TypeError("Multipart upload bodies cannot be decoded to text")
