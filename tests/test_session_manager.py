"""
Tests for upload session acquisition.
"""

import asyncio
from typing import List

import pytest

from smart_shipping.core.domain.events import Event, EventNames
from smart_shipping.core.domain.notifications import NotificationLevel
from smart_shipping.core.domain.state import PipelineState
from smart_shipping.core.exceptions import ErrorCode, SessionUnavailable
from smart_shipping.core.services.notifications import NotificationCenter
from smart_shipping.core.services.session_manager import SessionManager

from conftest import SESSION_URL, FakeBackendClient, names


class TestAcquire:
    """Test cases for SessionManager.acquire."""

    async def test_acquire_sets_session(self, session_manager: SessionManager,
                                        state: PipelineState, events: List[Event]) -> None:
        """Test a successful fetch becomes the held session."""
        session = await session_manager.acquire()

        assert session.url == SESSION_URL
        assert session.id == "abc123"
        assert session_manager.current is session
        assert state.session is session
        assert not session_manager.loading
        assert names(events, "session.") == [EventNames.SESSION_LOADING,
                                              EventNames.SESSION_ACQUIRED]

    async def test_loading_flag_during_fetch(self, session_manager: SessionManager,
                                             fake_client: FakeBackendClient) -> None:
        """Test the loading flag is raised while the fetch is pending."""
        observed: List[bool] = []
        wrapped = fake_client.fetch_session_descriptor

        async def fetch() -> str:
            observed.append(session_manager.loading)
            return await wrapped()

        fake_client.fetch_session_descriptor = fetch  # type: ignore[method-assign]

        await session_manager.acquire()

        assert observed == [True]
        assert not session_manager.loading

    async def test_refresh_replaces_session(self, session_manager: SessionManager,
                                            fake_client: FakeBackendClient) -> None:
        """Test a refresh replaces the held session and its id."""
        fake_client.session_urls = ["https://backend.test/session/first",
                                    "https://backend.test/session/second"]

        first = await session_manager.acquire()
        second = await session_manager.refresh()

        assert first.id == "first"
        assert second.id == "second"
        assert session_manager.current is second


class TestAcquireFailure:
    """Test cases for failed session fetches."""

    async def test_failure_without_session(self, session_manager: SessionManager,
                                           fake_client: FakeBackendClient,
                                           notifications: NotificationCenter,
                                           events: List[Event]) -> None:
        """Test a failed fetch raises and shows an error notification."""
        fake_client.session_error = SessionUnavailable(details="connection refused")

        with pytest.raises(SessionUnavailable) as exc_info:
            await session_manager.acquire()

        assert exc_info.value.code is ErrorCode.SESSION_UNAVAILABLE
        assert session_manager.current is None
        assert not session_manager.loading

        shown = notifications.active
        assert len(shown) == 1
        assert shown[0].level is NotificationLevel.ERROR
        assert shown[0].message == "Failed to connect to the server"
        assert shown[0].auto_close == 5.0
        assert EventNames.SESSION_FAILED in names(events)

    async def test_failure_keeps_previous_session(self, session_manager: SessionManager,
                                                  fake_client: FakeBackendClient,
                                                  state: PipelineState) -> None:
        """Test a failed refresh leaves the held session untouched."""
        held = await session_manager.acquire()
        fake_client.session_error = SessionUnavailable()

        with pytest.raises(SessionUnavailable):
            await session_manager.refresh()

        assert session_manager.current is held
        assert state.session_error == "Failed to connect to the server"
        assert state.session_stale

    async def test_success_clears_stale_flag(self, session_manager: SessionManager,
                                             fake_client: FakeBackendClient,
                                             state: PipelineState) -> None:
        await session_manager.acquire()
        fake_client.session_error = SessionUnavailable()
        with pytest.raises(SessionUnavailable):
            await session_manager.refresh()

        fake_client.session_error = None
        await session_manager.refresh()

        assert state.session_error is None
        assert not state.session_stale

    async def test_unusable_url_is_unavailable(self, session_manager: SessionManager,
                                               fake_client: FakeBackendClient) -> None:
        """Test a descriptor URL without an id counts as a failed fetch."""
        fake_client.session_urls = ["https://backend.test/"]

        with pytest.raises(SessionUnavailable):
            await session_manager.acquire()

        assert session_manager.current is None


class TestOverlappingRequests:
    """Overlapping acquisitions are not blocked."""

    async def test_last_response_wins(self, session_manager: SessionManager,
                                      fake_client: FakeBackendClient) -> None:
        """Test the response arriving last determines the held session."""
        slow = asyncio.Event()
        responses = iter([("https://backend.test/session/slow", slow),
                          ("https://backend.test/session/fast", None)])

        async def fetch() -> str:
            url, gate = next(responses)
            if gate is not None:
                await gate.wait()
            return url

        fake_client.fetch_session_descriptor = fetch  # type: ignore[method-assign]

        slow_task = asyncio.ensure_future(session_manager.acquire())
        await asyncio.sleep(0)
        await session_manager.acquire()

        assert session_manager.current.id == "fast"  # type: ignore[union-attr]
        assert session_manager.loading

        slow.set()
        await slow_task

        assert session_manager.current.id == "slow"  # type: ignore[union-attr]
        assert not session_manager.loading
