"""
Notification center.

Keeps the notifications currently visible to the user and publishes every
change on the event bus for the presentation layer to render. A notification
with ``auto_close`` drops out of view once that many seconds have passed
since it was shown or its ``auto_close`` was last set.
"""

import time
from dataclasses import replace
from typing import Any, Dict, List, Optional

from loguru import logger

from ..domain.events import EventNames
from ..domain.notifications import Notification, NotificationLevel
from ..interfaces.messaging import IEventBus

_UNSET: Any = object()


class NotificationCenter:
    """Shows, updates and dismisses user-visible notifications."""

    def __init__(self, event_bus: IEventBus):
        self._event_bus = event_bus
        self._active: Dict[str, Notification] = {}
        self._deadlines: Dict[str, float] = {}

    @property
    def active(self) -> List[Notification]:
        self._expire()
        return list(self._active.values())

    def get(self, notification_id: str) -> Optional[Notification]:
        self._expire()
        return self._active.get(notification_id)

    async def show(
        self,
        message: str,
        level: NotificationLevel = NotificationLevel.INFO,
        auto_close: Optional[float] = None,
        loading: bool = False,
        percent: Optional[int] = None
    ) -> Notification:
        notification = Notification(
            message=message,
            level=level,
            auto_close=auto_close,
            loading=loading,
            percent=percent
        )
        self._active[notification.notification_id] = notification
        self._schedule(notification.notification_id, auto_close)
        logger.log(_log_level(level), f"Notification: {message}")
        await self._event_bus.publish(
            EventNames.NOTIFICATION_SHOWN, notification, source="notifications"
        )
        return notification

    async def update(
        self,
        notification_id: str,
        message: Optional[str] = None,
        level: Optional[NotificationLevel] = None,
        auto_close: Optional[float] = _UNSET,
        loading: Optional[bool] = None,
        percent: Optional[int] = _UNSET
    ) -> Optional[Notification]:
        """Update a visible notification in place. Unknown ids are ignored."""
        current = self.get(notification_id)
        if current is None:
            return None

        changes: Dict[str, Any] = {}
        if message is not None:
            changes["message"] = message
        if level is not None:
            changes["level"] = level
        if auto_close is not _UNSET:
            changes["auto_close"] = auto_close
            self._schedule(notification_id, auto_close)
        if loading is not None:
            changes["loading"] = loading
        if percent is not _UNSET:
            changes["percent"] = percent

        updated = replace(current, **changes)
        self._active[notification_id] = updated
        if message is not None:
            logger.log(_log_level(updated.level), f"Notification: {updated.message}")
        await self._event_bus.publish(
            EventNames.NOTIFICATION_UPDATED, updated, source="notifications"
        )
        return updated

    async def dismiss(self, notification_id: str) -> bool:
        self._expire()
        self._deadlines.pop(notification_id, None)
        notification = self._active.pop(notification_id, None)
        if notification is None:
            return False
        await self._event_bus.publish(
            EventNames.NOTIFICATION_DISMISSED, notification, source="notifications"
        )
        return True

    def _schedule(self, notification_id: str, auto_close: Optional[float]) -> None:
        if auto_close is None:
            self._deadlines.pop(notification_id, None)
        else:
            self._deadlines[notification_id] = time.time() + auto_close

    def _expire(self) -> None:
        now = time.time()
        for notification_id, deadline in list(self._deadlines.items()):
            if now >= deadline:
                del self._deadlines[notification_id]
                self._active.pop(notification_id, None)
                logger.debug(f"Notification {notification_id} closed after its display time")


def _log_level(level: NotificationLevel) -> str:
    return {
        NotificationLevel.INFO: "INFO",
        NotificationLevel.SUCCESS: "SUCCESS",
        NotificationLevel.WARNING: "WARNING",
        NotificationLevel.ERROR: "ERROR",
    }[level]
