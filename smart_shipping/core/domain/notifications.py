"""
User-visible notifications.
"""

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class NotificationLevel(Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Notification:
    """
    A notification as displayed to the user.

    ``auto_close`` is the number of seconds it stays visible; ``None`` keeps
    it open until updated or dismissed.
    """

    message: str
    level: NotificationLevel = NotificationLevel.INFO
    auto_close: Optional[float] = None
    loading: bool = False
    percent: Optional[int] = None
    notification_id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "notification_id": self.notification_id,
            "message": self.message,
            "level": self.level.value,
            "auto_close": self.auto_close,
            "loading": self.loading,
            "percent": self.percent
        }
