"""
Core services of the upload pipeline.
"""

from .event_bus import EventBus
from .intake import DEFAULT_MAX_FILE_SIZE, FileIntakeValidator
from .notifications import NotificationCenter
from .orchestrator import ProgressChannel, UploadOrchestrator, UploadSubmission
from .preview import PreviewResolver, PreviewSlot
from .session_manager import SessionManager

__all__ = [
    "EventBus",
    "DEFAULT_MAX_FILE_SIZE",
    "FileIntakeValidator",
    "NotificationCenter",
    "ProgressChannel",
    "UploadOrchestrator",
    "UploadSubmission",
    "PreviewResolver",
    "PreviewSlot",
    "SessionManager",
]
