"""
Tests for preview resolution and reference release.
"""

import io
from pathlib import Path

import pytest

from smart_shipping.core.domain.files import FileCandidate
from smart_shipping.core.domain.preview import LocalReference, PreviewKind
from smart_shipping.core.services.preview import PreviewResolver, PreviewSlot


@pytest.fixture
def resolver() -> PreviewResolver:
    return PreviewResolver()


class TestPreviewKind:
    """Test cases for mime type categories."""

    @pytest.mark.parametrize("mime_type,kind", [
        ("image/png", PreviewKind.IMAGE),
        ("video/mp4", PreviewKind.VIDEO),
        ("audio/mpeg", PreviewKind.AUDIO),
        ("application/pdf", PreviewKind.UNSUPPORTED),
        ("text/plain", PreviewKind.UNSUPPORTED),
        ("", PreviewKind.UNSUPPORTED),
    ])
    def test_from_mime_type(self, mime_type: str, kind: PreviewKind) -> None:
        assert PreviewKind.from_mime_type(mime_type) is kind


class TestLocalReference:
    """Test cases for LocalReference."""

    def test_release_is_idempotent(self) -> None:
        released = []
        reference = LocalReference("preview://1/a", b"abc", on_release=released.append)

        assert reference.data == b"abc"
        assert reference.release()
        assert not reference.release()
        assert reference.released
        assert released == [reference]

    def test_data_unavailable_after_release(self) -> None:
        reference = LocalReference("preview://1/a", b"abc")
        reference.release()

        with pytest.raises(RuntimeError):
            _ = reference.data


class TestPreviewResolver:
    """Test cases for PreviewResolver."""

    async def test_image_from_path(self, resolver: PreviewResolver, tmp_path: Path) -> None:
        """Test an image file resolves to a reference to its bytes."""
        path = tmp_path / "photo.png"
        path.write_bytes(b"\x89PNG-data")

        resource = await resolver.resolve(FileCandidate.from_path(path))

        assert resource.kind is PreviewKind.IMAGE
        assert resource.displayable
        assert resource.name == "photo.png"
        assert resource.data is not None
        assert resource.data.data == b"\x89PNG-data"
        assert resource.data.uri.startswith("preview://")
        assert resolver.active_references == 1

    async def test_audio_from_bytes(self, resolver: PreviewResolver) -> None:
        candidate = FileCandidate(name="clip.mp3", size_bytes=3, mime_type="audio/mpeg",
                                  raw=b"ID3")

        resource = await resolver.resolve(candidate)

        assert resource.kind is PreviewKind.AUDIO
        assert resource.data is not None
        assert resource.data.data == b"ID3"

    async def test_video_from_file_object(self, resolver: PreviewResolver) -> None:
        candidate = FileCandidate(name="clip.mp4", size_bytes=4, mime_type="video/mp4",
                                  raw=io.BytesIO(b"moov"))

        resource = await resolver.resolve(candidate)

        assert resource.kind is PreviewKind.VIDEO
        assert resource.data is not None
        assert resource.data.data == b"moov"

    async def test_unsupported_type(self, resolver: PreviewResolver) -> None:
        """Test other types resolve to Unsupported without reading the file."""
        candidate = FileCandidate(name="report.pdf", size_bytes=10,
                                  mime_type="application/pdf")

        resource = await resolver.resolve(candidate)

        assert resource.kind is PreviewKind.UNSUPPORTED
        assert not resource.displayable
        assert resource.data is None
        assert not resource.release()
        assert resolver.active_references == 0

    async def test_references_are_distinct(self, resolver: PreviewResolver) -> None:
        candidate = FileCandidate.from_bytes("a.png", b"x")

        first = await resolver.resolve(candidate)
        second = await resolver.resolve(candidate)

        assert first.data is not None and second.data is not None
        assert first.data.uri != second.data.uri
        assert resolver.active_references == 2

    async def test_release_all(self, resolver: PreviewResolver) -> None:
        first = await resolver.resolve(FileCandidate.from_bytes("a.png", b"x"))
        await resolver.resolve(FileCandidate.from_bytes("b.png", b"y"))
        first.release()

        assert resolver.release_all() == 1
        assert resolver.active_references == 0


class TestPreviewSlot:
    """Replacing or dismissing a preview releases the previous reference."""

    async def test_show_releases_previous(self, resolver: PreviewResolver) -> None:
        slot = PreviewSlot(resolver)

        first = await slot.show(FileCandidate.from_bytes("a.png", b"x"))
        second = await slot.show(FileCandidate.from_bytes("b.png", b"y"))

        assert first.data is not None and first.data.released
        assert second.data is not None and not second.data.released
        assert slot.current is second
        assert resolver.active_references == 1

    async def test_dismiss(self, resolver: PreviewResolver) -> None:
        slot = PreviewSlot(resolver)
        resource = await slot.show(FileCandidate.from_bytes("a.png", b"x"))

        slot.dismiss()
        slot.dismiss()

        assert resource.data is not None and resource.data.released
        assert slot.current is None
        assert resolver.active_references == 0
