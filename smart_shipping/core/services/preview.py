"""
Preview resolution.

Produces a displayable representation of one candidate without blocking
the rest of the pipeline. Image, video and audio files get a local
reference to their bytes; every other type is unsupported.
"""

import asyncio
import itertools
import os
from typing import Dict, Optional
from urllib.parse import quote

import aiofiles
from loguru import logger

from ..domain.files import FileCandidate
from ..domain.preview import LocalReference, PreviewKind, PreviewResource
from ..interfaces.upload import IPreviewResolver


class PreviewResolver(IPreviewResolver):
    """Creates previews and tracks their unreleased local references."""

    def __init__(self) -> None:
        self._counter = itertools.count(1)
        self._references: Dict[str, LocalReference] = {}

    @property
    def active_references(self) -> int:
        return len(self._references)

    async def resolve(self, candidate: FileCandidate) -> PreviewResource:
        kind = PreviewKind.from_mime_type(candidate.mime_type)
        if kind is PreviewKind.UNSUPPORTED:
            return PreviewResource(kind=kind, data=None, name=candidate.name)

        content = await self._read(candidate)
        uri = f"preview://{next(self._counter)}/{quote(candidate.name)}"
        reference = LocalReference(uri, content, on_release=self._forget)
        self._references[uri] = reference
        logger.debug(f"Created preview reference {uri} ({len(content)} bytes)")
        return PreviewResource(kind=kind, data=reference, name=candidate.name)

    def release_all(self) -> int:
        """Release every outstanding reference. Returns how many were released."""
        released = 0
        for reference in list(self._references.values()):
            if reference.release():
                released += 1
        return released

    def _forget(self, reference: LocalReference) -> None:
        self._references.pop(reference.uri, None)
        logger.debug(f"Released preview reference {reference.uri}")

    async def _read(self, candidate: FileCandidate) -> bytes:
        raw = candidate.raw
        if isinstance(raw, (str, os.PathLike)):
            async with aiofiles.open(raw, "rb") as f:
                return await f.read()
        if isinstance(raw, (bytes, bytearray)):
            return bytes(raw)

        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, candidate.read_bytes)


class PreviewSlot:
    """
    The preview currently on display.

    Showing another preview or dismissing the current one releases the
    previous reference.
    """

    def __init__(self, resolver: PreviewResolver):
        self._resolver = resolver
        self._current: Optional[PreviewResource] = None

    @property
    def current(self) -> Optional[PreviewResource]:
        return self._current

    async def show(self, candidate: FileCandidate) -> PreviewResource:
        resource = await self._resolver.resolve(candidate)
        self.dismiss()
        self._current = resource
        return resource

    def dismiss(self) -> None:
        if self._current is not None:
            self._current.release()
            self._current = None
