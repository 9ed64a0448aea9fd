"""
Upload orchestration.

Drives the submission state machine ``Idle -> Sending -> Succeeded|Failed
-> Idle``: builds the payload from the eligible candidates, sends it to the
session's endpoint, tracks progress and reports the outcome. Terminal
states are shown for a fixed delay and reset to Idle on the next read after
it, or immediately on the next submit.
"""

import asyncio
import time
import uuid
from typing import Any, Dict, Optional, Sequence

from loguru import logger

from ..domain.events import EventNames
from ..domain.files import CandidateSet, FileCandidate
from ..domain.notifications import NotificationLevel
from ..domain.session import UploadSession
from ..domain.state import PipelineState
from ..domain.upload import UploadPhase, UploadTask
from ..exceptions import (
    TRANSPORT_ERROR_MESSAGE, NoEligibleFiles, NoSession, TransmissionFailed
)
from ..interfaces.messaging import IEventBus
from ..interfaces.transport import IBackendClient
from ..interfaces.upload import IUploadOrchestrator, IUploadSubmission
from .intake import FileIntakeValidator
from .notifications import NotificationCenter

SENDING_MESSAGE = "Sending files..."
SUCCESS_MESSAGE = "Upload succeeded!"


def percent_of(sent: int, total: int) -> int:
    """``round(sent / total * 100)`` with halves rounded up, clamped to 0..100."""
    percent = (sent * 200 + total) // (2 * total)
    return max(0, min(100, percent))


class ProgressChannel:
    """
    Progress and outcome channel of one submission.

    Reported percentages never decrease and stay within 0..100; progress
    with an unknown total carries no percent. Exactly one terminal event is
    accepted, after which everything is ignored.
    """

    def __init__(self, submission_id: str, event_bus: IEventBus):
        self.submission_id = submission_id
        self._event_bus = event_bus
        self._last_percent = -1
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def last_percent(self) -> Optional[int]:
        return self._last_percent if self._last_percent >= 0 else None

    async def progress(self, sent: int, total: Optional[int]) -> Optional[int]:
        """Report bytes sent. Returns the new percent, or None if nothing was emitted."""
        if self._closed or not total or total <= 0:
            return None

        percent = percent_of(sent, total)
        if percent <= self._last_percent:
            return None

        self._last_percent = percent
        await self._event_bus.publish(
            EventNames.UPLOAD_PROGRESS,
            {"percent": percent, "bytes_sent": sent, "total_bytes": total},
            correlation_id=self.submission_id,
            source="orchestrator"
        )
        return percent

    async def succeed(self, data: Any = None) -> bool:
        return await self._terminate(EventNames.UPLOAD_SUCCEEDED, data)

    async def fail(self, data: Any = None) -> bool:
        return await self._terminate(EventNames.UPLOAD_FAILED, data)

    async def _terminate(self, event_name: str, data: Any) -> bool:
        if self._closed:
            return False
        self._closed = True
        await self._event_bus.publish(
            event_name, data, correlation_id=self.submission_id, source="orchestrator"
        )
        return True


class UploadSubmission(IUploadSubmission):
    """Handle on a running submission."""

    def __init__(self, submission_id: str, task: 'asyncio.Future[UploadTask]'):
        self._submission_id = submission_id
        self._task = task

    @property
    def submission_id(self) -> str:
        return self._submission_id

    @property
    def done(self) -> bool:
        return self._task.done()

    async def wait(self) -> UploadTask:
        return await self._task


class UploadOrchestrator(IUploadOrchestrator):
    """Sends the eligible candidates and tracks the submission's state."""

    def __init__(
        self,
        client: IBackendClient,
        state: PipelineState,
        validator: FileIntakeValidator,
        event_bus: IEventBus,
        notifications: NotificationCenter,
        result_display_delay: float = 3.0
    ):
        self._client = client
        self._state = state
        self._validator = validator
        self._event_bus = event_bus
        self._notifications = notifications
        self._result_display_delay = result_display_delay

    @property
    def current_task(self) -> UploadTask:
        task = self._state.task
        if task.phase.is_terminal and task.finished_at is not None:
            if time.time() - task.finished_at >= self._result_display_delay:
                self._state.task = UploadTask()
        return self._state.task

    def submit(self, session: Optional[UploadSession],
               candidates: CandidateSet) -> UploadSubmission:
        eligible = self._validator.eligible(candidates)
        if not eligible:
            raise NoEligibleFiles()
        if session is None:
            raise NoSession()
        if self.current_task.phase is UploadPhase.SENDING:
            raise RuntimeError("An upload is already in progress")

        submission_id = str(uuid.uuid4())
        self._state.task = UploadTask.sending(submission_id, len(eligible))
        logger.info(f"Submitting {len(eligible)} of {len(candidates)} file(s) "
                    f"to session {session.id} (submission {submission_id})")

        channel = ProgressChannel(submission_id, self._event_bus)
        task = asyncio.ensure_future(self._run(session, eligible, channel))
        return UploadSubmission(submission_id, task)

    async def _run(
        self,
        session: UploadSession,
        eligible: Sequence[FileCandidate],
        channel: ProgressChannel
    ) -> UploadTask:
        try:
            return await self._send(session, eligible, channel)
        finally:
            task = self._state.task
            if task.phase is UploadPhase.SENDING and task.submission_id == channel.submission_id:
                logger.warning(f"Submission {channel.submission_id} ended without an outcome")
                self._state.task = task.failed(TRANSPORT_ERROR_MESSAGE)
                self._state.candidates = CandidateSet()

    async def _send(
        self,
        session: UploadSession,
        eligible: Sequence[FileCandidate],
        channel: ProgressChannel
    ) -> UploadTask:
        notification_id: Optional[str] = None

        async def on_progress(sent: int, total: Optional[int]) -> None:
            percent = await channel.progress(sent, total)
            if percent is None:
                if total is None and channel.last_percent is None:
                    self._state.task = self._state.task.with_percent(None)
                return
            logger.debug(f"Submission {channel.submission_id}: {percent}%")
            self._state.task = self._state.task.with_percent(percent)
            if notification_id is not None:
                await self._notifications.update(notification_id, percent=percent)

        try:
            notification_id = await self._announce(session, eligible, channel)
            status = await self._client.upload(session.id, eligible, on_progress)
        except TransmissionFailed as e:
            return await self._finish_failed(channel, notification_id, e.message, e.status)
        except OSError as e:
            logger.error(f"Submission {channel.submission_id} could not read its files: {e}")
            return await self._finish_failed(channel, notification_id,
                                             TRANSPORT_ERROR_MESSAGE, None)
        except Exception as e:
            logger.exception(f"Submission {channel.submission_id} aborted: {e}")
            return await self._finish_failed(channel, notification_id,
                                             TRANSPORT_ERROR_MESSAGE, None)

        return await self._finish_succeeded(channel, notification_id, status)

    async def _announce(self, session: UploadSession, eligible: Sequence[FileCandidate],
                        channel: ProgressChannel) -> str:
        await self._event_bus.publish(
            EventNames.UPLOAD_STARTED,
            {
                "session_id": session.id,
                "files": [f.name for f in eligible],
                "total_bytes": sum(f.size_bytes for f in eligible)
            },
            correlation_id=channel.submission_id,
            source="orchestrator"
        )

        if self._state.session_stale:
            await self._notifications.show(
                "Session refresh failed, sending to the previous session",
                level=NotificationLevel.WARNING,
                auto_close=self._result_display_delay
            )

        notification = await self._notifications.show(
            SENDING_MESSAGE, loading=True, percent=0
        )
        return notification.notification_id

    async def _finish_succeeded(self, channel: ProgressChannel,
                                notification_id: Optional[str], status: int) -> UploadTask:
        self._state.task = self._state.task.succeeded()
        await self._clear_candidates()
        logger.info(f"Submission {channel.submission_id} succeeded (status {status})")
        await channel.succeed(self._outcome(status=status))
        await self._report(notification_id, SUCCESS_MESSAGE, NotificationLevel.SUCCESS)
        return self._state.task

    async def _finish_failed(self, channel: ProgressChannel, notification_id: Optional[str],
                             message: str, status: Optional[int]) -> UploadTask:
        self._state.task = self._state.task.failed(message)
        await self._clear_candidates()
        logger.error(f"Submission {channel.submission_id} failed: {message}")
        await channel.fail(self._outcome(status=status, error=message))
        await self._report(notification_id, message, NotificationLevel.ERROR)
        return self._state.task

    async def _report(self, notification_id: Optional[str], message: str,
                      level: NotificationLevel) -> None:
        """Turn the sending notification into the outcome, or show one if it never appeared."""
        updated = None
        if notification_id is not None:
            updated = await self._notifications.update(
                notification_id,
                message=message,
                level=level,
                loading=False,
                percent=None,
                auto_close=self._result_display_delay
            )
        if updated is None:
            await self._notifications.show(message, level=level,
                                           auto_close=self._result_display_delay)

    async def _clear_candidates(self) -> None:
        self._state.candidates = CandidateSet()
        await self._event_bus.publish(
            EventNames.INTAKE_CHANGED, self._state.summary, source="orchestrator"
        )

    def _outcome(self, **extra: Any) -> Dict[str, Any]:
        return {**self._state.task.to_dict(), **extra}
