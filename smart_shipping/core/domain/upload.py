"""
Upload task state.
"""

import time
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, Optional


class UploadPhase(Enum):
    """Upload phase enumeration."""
    IDLE = "idle"
    SENDING = "sending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (UploadPhase.SUCCEEDED, UploadPhase.FAILED)


@dataclass(frozen=True)
class UploadTask:
    """
    State of the current submission.

    ``percent`` is ``None`` while sending a body whose total size is not
    known in advance.
    """

    phase: UploadPhase = UploadPhase.IDLE
    percent: Optional[int] = 0
    error_message: Optional[str] = None
    submission_id: Optional[str] = None
    file_count: int = 0
    finished_at: Optional[float] = None

    @classmethod
    def sending(cls, submission_id: str, file_count: int) -> 'UploadTask':
        return cls(
            phase=UploadPhase.SENDING,
            submission_id=submission_id,
            file_count=file_count
        )

    def with_percent(self, percent: Optional[int]) -> 'UploadTask':
        return replace(self, percent=percent)

    def succeeded(self) -> 'UploadTask':
        return replace(self, phase=UploadPhase.SUCCEEDED, percent=0,
                       error_message=None, finished_at=time.time())

    def failed(self, message: str) -> 'UploadTask':
        return replace(self, phase=UploadPhase.FAILED, percent=0,
                       error_message=message, finished_at=time.time())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "phase": self.phase.value,
            "percent": self.percent,
            "error_message": self.error_message,
            "submission_id": self.submission_id,
            "file_count": self.file_count,
            "finished_at": self.finished_at
        }
