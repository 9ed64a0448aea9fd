"""
Upload pipeline facade.

Ties the session manager, intake validation, upload orchestrator and
preview resolver to one ``PipelineState``. This is the surface a
presentation layer talks to: every failure that reaches it is turned into
a notification and a defined state.
"""

import os
from typing import Iterable, Optional, Union

from loguru import logger

from ..core.domain.events import EventNames
from ..core.domain.files import CandidateSet, FileCandidate, OversizeSummary
from ..core.domain.notifications import NotificationLevel
from ..core.domain.preview import PreviewResource
from ..core.domain.session import UploadSession
from ..core.domain.state import PipelineState
from ..core.domain.upload import UploadTask
from ..core.exceptions import NoEligibleFiles, NoSession, SessionUnavailable
from ..core.interfaces.messaging import IEventBus
from ..core.services.intake import FileIntakeValidator
from ..core.services.notifications import NotificationCenter
from ..core.services.orchestrator import UploadOrchestrator, UploadSubmission
from ..core.services.preview import PreviewResolver, PreviewSlot
from ..core.services.session_manager import SessionManager

FileLike = Union[FileCandidate, str, "os.PathLike[str]"]


class UploadPipeline:
    """The session-scoped multi-file upload pipeline of one client."""

    def __init__(
        self,
        state: PipelineState,
        validator: FileIntakeValidator,
        sessions: SessionManager,
        orchestrator: UploadOrchestrator,
        previews: PreviewResolver,
        event_bus: IEventBus,
        notifications: NotificationCenter
    ):
        self._state = state
        self._validator = validator
        self._sessions = sessions
        self._orchestrator = orchestrator
        self._previews = previews
        self._preview_slot = PreviewSlot(previews)
        self._event_bus = event_bus
        self._notifications = notifications

    @property
    def state(self) -> PipelineState:
        return self._state

    @property
    def validator(self) -> FileIntakeValidator:
        return self._validator

    @property
    def notifications(self) -> NotificationCenter:
        return self._notifications

    @property
    def event_bus(self) -> IEventBus:
        return self._event_bus

    @property
    def candidates(self) -> CandidateSet:
        return self._state.candidates

    @property
    def summary(self) -> OversizeSummary:
        return self._state.summary

    @property
    def session(self) -> Optional[UploadSession]:
        return self._state.session

    @property
    def session_loading(self) -> bool:
        return self._sessions.loading

    @property
    def task(self) -> UploadTask:
        return self._orchestrator.current_task

    @property
    def can_submit(self) -> bool:
        """At least one candidate is under the size ceiling."""
        return bool(self._validator.eligible(self._state.candidates))

    async def refresh_session(self) -> Optional[UploadSession]:
        """Fetch a new session. Returns None if it failed; the user was notified."""
        try:
            return await self._sessions.refresh()
        except SessionUnavailable:
            return None

    async def add_files(self, files: Iterable[FileLike]) -> OversizeSummary:
        """Add selected or dropped files to the candidate set."""
        incoming = [f if isinstance(f, FileCandidate) else FileCandidate.from_path(f)
                    for f in files]
        self._state.candidates = self._validator.add(self._state.candidates, incoming)
        logger.debug(f"Added {len(incoming)} file(s), {len(self._state.candidates)} selected")
        return await self._intake_changed()

    async def remove_file(self, index: int) -> OversizeSummary:
        self._state.candidates = self._validator.remove(self._state.candidates, index)
        return await self._intake_changed()

    def submit(self) -> UploadSubmission:
        """
        Start sending the eligible candidates.

        Raises:
            NoEligibleFiles: If every candidate is oversized or none is selected
            NoSession: If no session is held
        """
        return self._orchestrator.submit(self._state.session, self._state.candidates)

    async def send(self) -> Optional[UploadTask]:
        """
        Submit and wait for the outcome.

        Returns the terminal task, or None when a precondition failed; in
        that case the state is unchanged and the user was notified.
        """
        try:
            submission = self.submit()
        except (NoEligibleFiles, NoSession) as e:
            logger.warning(f"Upload not started: {e.message}")
            await self._notifications.show(e.message, level=NotificationLevel.WARNING)
            return None
        return await submission.wait()

    async def preview(self, index: int) -> PreviewResource:
        """Show the preview of one candidate, releasing the one shown before."""
        resource = await self._preview_slot.show(self._state.candidates[index])
        await self._event_bus.publish(
            EventNames.PREVIEW_RESOLVED, resource, source="pipeline"
        )
        return resource

    async def dismiss_preview(self) -> None:
        current = self._preview_slot.current
        self._preview_slot.dismiss()
        if current is not None:
            await self._event_bus.publish(
                EventNames.PREVIEW_RELEASED, current, source="pipeline"
            )

    def close(self) -> None:
        """Release every preview still held."""
        self._preview_slot.dismiss()
        released = self._previews.release_all()
        if released:
            logger.debug(f"Released {released} outstanding preview reference(s)")

    async def _intake_changed(self) -> OversizeSummary:
        summary = self._state.summary
        await self._event_bus.publish(EventNames.INTAKE_CHANGED, summary, source="pipeline")
        return summary
