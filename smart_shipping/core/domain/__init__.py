"""
Domain models for the upload pipeline.

This module contains plain value objects and state without I/O.
"""

from .events import Event, EventNames
from .files import CandidateSet, FileCandidate, OversizeSummary, MIB
from .notifications import Notification, NotificationLevel
from .preview import LocalReference, PreviewKind, PreviewResource
from .session import UploadSession
from .state import PipelineState
from .upload import UploadPhase, UploadTask

__all__ = [
    "Event",
    "EventNames",
    "CandidateSet",
    "FileCandidate",
    "OversizeSummary",
    "MIB",
    "Notification",
    "NotificationLevel",
    "LocalReference",
    "PreviewKind",
    "PreviewResource",
    "UploadSession",
    "PipelineState",
    "UploadPhase",
    "UploadTask",
]
