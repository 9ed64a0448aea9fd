"""
Smart Shipping - session-scoped multi-file upload client.

Acquires an upload session from the backend, validates selected files
against a per-file size ceiling and sends the eligible ones with live
progress reporting.
"""

__version__ = "0.1.0"

from .application.pipeline import UploadPipeline
from .application.startup import ApplicationStartup
from .core.domain import CandidateSet, FileCandidate, UploadPhase, UploadSession, UploadTask
from .core.exceptions import (
    NoEligibleFiles, NoSession, SessionUnavailable, ShippingError, TransmissionFailed
)

__all__ = [
    "UploadPipeline",
    "ApplicationStartup",
    "CandidateSet",
    "FileCandidate",
    "UploadPhase",
    "UploadSession",
    "UploadTask",
    "NoEligibleFiles",
    "NoSession",
    "SessionUnavailable",
    "ShippingError",
    "TransmissionFailed",
]
