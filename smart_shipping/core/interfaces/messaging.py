"""
Messaging interface for the event bus.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional, Union

from ..domain.events import Event


class IEventBus(ABC):
    """Interface for event bus implementations."""

    @abstractmethod
    async def publish(self, event: Union[Event, str], data: Any = None,
                      correlation_id: Optional[str] = None,
                      source: Optional[str] = None) -> str:
        """
        Publish an event and deliver it to every matching subscriber.

        Delivery completes before this coroutine returns, so two events
        published one after the other reach each subscriber in that order.

        Args:
            event: Event object or event name string
            data: Event data (if event is a string)
            correlation_id: Correlation id (if event is a string)
            source: Publishing component (if event is a string)

        Returns:
            Event ID for tracking
        """
        pass

    @abstractmethod
    async def subscribe(self, event_name: str, handler: Callable[[Event], Any]) -> str:
        """
        Subscribe to events with the given name.

        Args:
            event_name: Name of events to subscribe to (supports wildcards)
            handler: Sync or async function to handle events

        Returns:
            Subscription ID for unsubscribing
        """
        pass

    @abstractmethod
    async def unsubscribe(self, subscription_id: str) -> bool:
        """Unsubscribe using the ID returned from subscribe()."""
        pass

    @abstractmethod
    async def get_metrics(self) -> Dict[str, Any]:
        """Get event bus metrics."""
        pass
