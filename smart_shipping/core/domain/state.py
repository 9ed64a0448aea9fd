"""
Owned pipeline state.

One ``PipelineState`` is shared by reference between the session manager,
the upload orchestrator and the intake operations. Every field is replaced
wholesale; nothing is mutated in place.
"""

from typing import Callable, Optional

from .files import CandidateSet, OversizeSummary
from .session import UploadSession
from .upload import UploadTask

Summarizer = Callable[[CandidateSet], OversizeSummary]


class PipelineState:
    """Session, candidate set and upload task of one client."""

    def __init__(self, summarize: Summarizer) -> None:
        self._summarize = summarize
        self.session: Optional[UploadSession] = None
        self.session_loading = False
        self.session_error: Optional[str] = None
        self.task = UploadTask()
        self._candidates = CandidateSet()
        self._summary = summarize(self._candidates)

    @property
    def candidates(self) -> CandidateSet:
        return self._candidates

    @candidates.setter
    def candidates(self, value: CandidateSet) -> None:
        # the summary is recomputed with every assignment so it cannot go stale
        self._candidates = value
        self._summary = self._summarize(value)

    @property
    def summary(self) -> OversizeSummary:
        return self._summary

    @property
    def session_stale(self) -> bool:
        """A session is held but the last refresh of it failed."""
        return self.session is not None and self.session_error is not None
