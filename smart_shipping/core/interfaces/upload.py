"""
Upload pipeline service interfaces.

This module defines the contracts for the session manager, the upload
orchestrator and the preview resolver.
"""

from abc import ABC, abstractmethod
from typing import Optional

from ..domain.files import CandidateSet, FileCandidate
from ..domain.preview import PreviewResource
from ..domain.session import UploadSession
from ..domain.upload import UploadTask


class ISessionManager(ABC):
    """Interface for acquiring the upload session."""

    @property
    @abstractmethod
    def loading(self) -> bool:
        """True while a session request is in flight."""
        pass

    @property
    @abstractmethod
    def current(self) -> Optional[UploadSession]:
        """The session currently held, if any."""
        pass

    @abstractmethod
    async def acquire(self) -> UploadSession:
        """
        Fetch a session descriptor and hold the resulting session.

        Raises:
            SessionUnavailable: If the fetch failed. The previously held
                session is kept.
        """
        pass

    @abstractmethod
    async def refresh(self) -> UploadSession:
        """Same operation as acquire(), invoked on demand."""
        pass


class IUploadSubmission(ABC):
    """Handle on one running submission."""

    @property
    @abstractmethod
    def submission_id(self) -> str:
        pass

    @abstractmethod
    async def wait(self) -> UploadTask:
        """Wait for the terminal state of this submission."""
        pass


class IUploadOrchestrator(ABC):
    """Interface for the upload state machine."""

    @property
    @abstractmethod
    def current_task(self) -> UploadTask:
        """The task as it should be displayed right now."""
        pass

    @abstractmethod
    def submit(self, session: Optional[UploadSession],
               candidates: CandidateSet) -> IUploadSubmission:
        """
        Start sending the eligible candidates to the session's endpoint.

        Raises:
            NoSession: If ``session`` is None
            NoEligibleFiles: If no candidate is under the size ceiling
        """
        pass


class IPreviewResolver(ABC):
    """Interface for producing file previews."""

    @property
    @abstractmethod
    def active_references(self) -> int:
        """Number of local references created and not yet released."""
        pass

    @abstractmethod
    async def resolve(self, candidate: FileCandidate) -> PreviewResource:
        """Produce a displayable representation of ``candidate``."""
        pass
