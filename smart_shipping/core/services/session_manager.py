"""
Upload session acquisition.
"""

from typing import Optional

from loguru import logger

from ..exceptions import SessionUnavailable
from ..domain.events import EventNames
from ..domain.notifications import NotificationLevel
from ..domain.session import UploadSession
from ..domain.state import PipelineState
from ..interfaces.messaging import IEventBus
from ..interfaces.transport import IBackendClient
from ..interfaces.upload import ISessionManager
from .notifications import NotificationCenter


class SessionManager(ISessionManager):
    """
    Acquires and refreshes the upload session held in the pipeline state.

    Overlapping requests are not blocked; whichever response arrives last
    determines the held session. A failed request leaves the held session
    untouched and records the failure so that callers can tell the session
    is stale.
    """

    def __init__(
        self,
        client: IBackendClient,
        state: PipelineState,
        event_bus: IEventBus,
        notifications: NotificationCenter,
        failure_auto_close: Optional[float] = 5.0
    ):
        self._client = client
        self._state = state
        self._event_bus = event_bus
        self._notifications = notifications
        self._failure_auto_close = failure_auto_close
        self._in_flight = 0

    @property
    def loading(self) -> bool:
        return self._state.session_loading

    @property
    def current(self) -> Optional[UploadSession]:
        return self._state.session

    async def acquire(self) -> UploadSession:
        self._begin()
        await self._event_bus.publish(EventNames.SESSION_LOADING, True, source="session")
        try:
            url = await self._client.fetch_session_descriptor()
            session = UploadSession(url=url)
        except SessionUnavailable as e:
            await self._fail(e)
            raise
        except ValueError as e:
            error = SessionUnavailable(details=str(e))
            await self._fail(error)
            raise error from e
        finally:
            self._end()

        self._state.session = session
        self._state.session_error = None
        logger.info(f"Acquired upload session {session.id}")
        await self._event_bus.publish(EventNames.SESSION_ACQUIRED, session, source="session")
        return session

    async def refresh(self) -> UploadSession:
        return await self.acquire()

    def _begin(self) -> None:
        self._in_flight += 1
        self._state.session_loading = True

    def _end(self) -> None:
        self._in_flight -= 1
        self._state.session_loading = self._in_flight > 0

    async def _fail(self, error: SessionUnavailable) -> None:
        self._state.session_error = error.message
        logger.warning(f"Session fetch from {self._client.base_url} failed: "
                       f"{error.message} ({error.details})")
        await self._event_bus.publish(EventNames.SESSION_FAILED, error.message, source="session")
        await self._notifications.show(
            error.message,
            level=NotificationLevel.ERROR,
            auto_close=self._failure_auto_close
        )
