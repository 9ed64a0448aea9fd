"""
Shared fixtures for the upload pipeline tests.
"""

from typing import Any, AsyncGenerator, List, Optional, Sequence, Tuple

import pytest

from smart_shipping.core.domain.events import Event
from smart_shipping.core.domain.files import MIB, FileCandidate
from smart_shipping.core.domain.state import PipelineState
from smart_shipping.core.interfaces.transport import IBackendClient, ProgressCallback
from smart_shipping.core.services.event_bus import EventBus
from smart_shipping.core.services.intake import FileIntakeValidator
from smart_shipping.core.services.notifications import NotificationCenter
from smart_shipping.core.services.orchestrator import UploadOrchestrator
from smart_shipping.core.services.session_manager import SessionManager

SESSION_URL = "https://backend.test/session/abc123"


class FakeBackendClient(IBackendClient):
    """Scriptable stand-in for the HTTP client."""

    def __init__(self) -> None:
        self.session_urls: List[str] = [SESSION_URL]
        self.session_error: Optional[Exception] = None
        self.progress: List[Tuple[int, Optional[int]]] = [(0, 100), (50, 100), (100, 100)]
        self.upload_error: Optional[Exception] = None
        self.upload_status = 200
        self.fetch_calls = 0
        self.upload_calls: List[Tuple[str, Tuple[FileCandidate, ...]]] = []

    @property
    def base_url(self) -> str:
        return "https://backend.test"

    async def fetch_session_descriptor(self) -> str:
        self.fetch_calls += 1
        if self.session_error is not None:
            raise self.session_error
        if len(self.session_urls) > 1:
            return self.session_urls.pop(0)
        return self.session_urls[0]

    async def upload(self, session_id: str, files: Sequence[FileCandidate],
                     on_progress: Optional[ProgressCallback] = None) -> int:
        self.upload_calls.append((session_id, tuple(files)))
        for sent, total in self.progress:
            if on_progress is not None:
                await on_progress(sent, total)
        if self.upload_error is not None:
            raise self.upload_error
        return self.upload_status


def make_file(name: str, size_mb: float, mime_type: str = "application/octet-stream") -> FileCandidate:
    return FileCandidate(name=name, size_bytes=int(size_mb * MIB), mime_type=mime_type)


@pytest.fixture
def fake_client() -> FakeBackendClient:
    return FakeBackendClient()


@pytest.fixture
def validator() -> FileIntakeValidator:
    return FileIntakeValidator(max_file_size=20 * MIB)


@pytest.fixture
def state(validator: FileIntakeValidator) -> PipelineState:
    return PipelineState(validator.summarize)


@pytest.fixture
async def event_bus() -> AsyncGenerator[EventBus, None]:
    bus = EventBus()
    await bus.start()
    yield bus
    await bus.stop()


@pytest.fixture
async def events(event_bus: EventBus) -> List[Event]:
    """Every event published on the bus, in order."""
    received: List[Event] = []
    await event_bus.subscribe("*", received.append)
    return received


@pytest.fixture
def notifications(event_bus: EventBus) -> NotificationCenter:
    return NotificationCenter(event_bus)


@pytest.fixture
def session_manager(fake_client: FakeBackendClient, state: PipelineState,
                    event_bus: EventBus, notifications: NotificationCenter) -> SessionManager:
    return SessionManager(fake_client, state, event_bus, notifications)


@pytest.fixture
def orchestrator(fake_client: FakeBackendClient, state: PipelineState,
                 validator: FileIntakeValidator, event_bus: EventBus,
                 notifications: NotificationCenter) -> UploadOrchestrator:
    return UploadOrchestrator(fake_client, state, validator, event_bus, notifications,
                              result_display_delay=3.0)


def names(events: List[Event], prefix: str = "") -> List[str]:
    return [e.name for e in events if e.name.startswith(prefix)]


def payloads(events: List[Event], name: str) -> List[Any]:
    return [e.data for e in events if e.name == name]
