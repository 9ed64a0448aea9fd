"""
Event domain models for the upload pipeline.

Events are the observer channel between the core services and whatever
presentation layer displays their state.
"""

import time
import uuid
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional


class EventNames:
    """Names of the events published by the core services."""

    SESSION_LOADING = "session.loading"
    SESSION_ACQUIRED = "session.acquired"
    SESSION_FAILED = "session.failed"

    INTAKE_CHANGED = "intake.changed"

    UPLOAD_STARTED = "upload.started"
    UPLOAD_PROGRESS = "upload.progress"
    UPLOAD_SUCCEEDED = "upload.succeeded"
    UPLOAD_FAILED = "upload.failed"

    PREVIEW_RESOLVED = "preview.resolved"
    PREVIEW_RELEASED = "preview.released"

    NOTIFICATION_SHOWN = "notification.shown"
    NOTIFICATION_UPDATED = "notification.updated"
    NOTIFICATION_DISMISSED = "notification.dismissed"


@dataclass(frozen=True)
class Event:
    """
    Immutable event representing something that happened in the pipeline.
    """

    name: str
    """Event name/type identifier."""

    data: Any = None
    """Event payload data."""

    timestamp: float = field(default_factory=time.time)
    """Unix timestamp when event was created."""

    event_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    """Unique event identifier."""

    source: Optional[str] = None
    """Component that generated the event."""

    correlation_id: Optional[str] = None
    """ID for correlating related events, e.g. one submission."""

    metadata: Dict[str, Any] = field(default_factory=dict)
    """Additional event metadata."""

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Event name cannot be empty")

    def with_correlation_id(self, correlation_id: str) -> 'Event':
        """Create a new event with a correlation ID."""
        return replace(self, correlation_id=correlation_id)

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary representation."""
        return {
            'name': self.name,
            'data': self.data,
            'timestamp': self.timestamp,
            'event_id': self.event_id,
            'source': self.source,
            'correlation_id': self.correlation_id,
            'metadata': self.metadata
        }
