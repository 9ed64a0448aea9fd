"""
Event bus implementation for publish-subscribe messaging.

Events are delivered inline: ``publish`` awaits every matching handler in
subscription order before returning, so subscribers observe events in
exactly the order they were published.
"""

import asyncio
import fnmatch
import itertools
import time
import uuid
from collections import defaultdict
from typing import Any, Callable, Dict, List, Optional, Union

from loguru import logger

from ..domain.events import Event
from ..interfaces.lifecycle import IComponent
from ..interfaces.messaging import IEventBus


class EventSubscription:
    """Represents an event subscription."""

    _sequence = itertools.count()

    def __init__(self, subscription_id: str, event_pattern: str,
                 handler: Callable[[Event], Any]):
        self.subscription_id = subscription_id
        self.event_pattern = event_pattern
        self.handler = handler
        self.sequence = next(EventSubscription._sequence)
        self.created_at = time.time()
        self.call_count = 0
        self.last_called: Optional[float] = None
        self.error_count = 0


class EventBus(IComponent, IEventBus):
    """
    In-process event bus.

    Supports exact and wildcard (``fnmatch``) subscriptions, sync and async
    handlers, and basic metrics. A failing handler is logged and counted;
    it never affects the publisher or the other handlers.
    """

    def __init__(self, history_size: int = 1000):
        self._subscriptions: Dict[str, List[EventSubscription]] = defaultdict(list)
        self._wildcard_subscriptions: List[EventSubscription] = []
        self._history_size = history_size
        self._running = False

        self._metrics: Dict[str, Any] = {
            'events_published': 0,
            'events_processed': 0,
            'events_failed': 0,
            'subscriptions_count': 0,
            'processing_times': []
        }

    @property
    def name(self) -> str:
        return "EventBus"

    @property
    def running(self) -> bool:
        return self._running

    async def start(self) -> None:
        """Start accepting events."""
        if self._running:
            return
        self._running = True
        logger.debug("Event bus started")

    async def stop(self) -> None:
        """Stop accepting events and drop all subscriptions."""
        if not self._running:
            return
        self._running = False
        self._subscriptions.clear()
        self._wildcard_subscriptions.clear()
        self._metrics['subscriptions_count'] = 0
        logger.debug("Event bus stopped")

    async def check_health(self) -> Dict[str, Any]:
        return {
            'healthy': True,
            'status': 'running' if self._running else 'stopped',
            'details': {
                'subscriptions_count': self._metrics['subscriptions_count'],
                'events_published': self._metrics['events_published'],
                'events_processed': self._metrics['events_processed'],
                'events_failed': self._metrics['events_failed']
            }
        }

    async def publish(self, event: Union[Event, str], data: Any = None,
                      correlation_id: Optional[str] = None,
                      source: Optional[str] = None) -> str:
        """Publish an event and deliver it to all matching handlers."""
        if not self._running:
            raise RuntimeError("Event bus is not running")

        if isinstance(event, str):
            event = Event(
                name=event,
                data=data,
                correlation_id=correlation_id,
                source=source
            )

        self._metrics['events_published'] += 1
        logger.trace(f"Published event: {event.name} (ID: {event.event_id})")

        await self._process_event(event)
        return event.event_id

    async def subscribe(self, event_name: str, handler: Callable[[Event], Any]) -> str:
        """Subscribe to events with the given name pattern."""
        subscription_id = str(uuid.uuid4())
        subscription = EventSubscription(
            subscription_id=subscription_id,
            event_pattern=event_name,
            handler=handler
        )

        if '*' in event_name or '?' in event_name:
            self._wildcard_subscriptions.append(subscription)
        else:
            self._subscriptions[event_name].append(subscription)

        self._metrics['subscriptions_count'] += 1
        logger.debug(f"Added subscription for '{event_name}' (ID: {subscription_id})")
        return subscription_id

    async def unsubscribe(self, subscription_id: str) -> bool:
        """Unsubscribe using subscription ID."""
        for event_name, subscriptions in self._subscriptions.items():
            for i, subscription in enumerate(subscriptions):
                if subscription.subscription_id == subscription_id:
                    subscriptions.pop(i)
                    self._metrics['subscriptions_count'] -= 1
                    logger.debug(f"Removed subscription {subscription_id} for '{event_name}'")
                    return True

        for i, subscription in enumerate(self._wildcard_subscriptions):
            if subscription.subscription_id == subscription_id:
                self._wildcard_subscriptions.pop(i)
                self._metrics['subscriptions_count'] -= 1
                logger.debug(f"Removed wildcard subscription {subscription_id}")
                return True

        return False

    async def get_metrics(self) -> Dict[str, Any]:
        """Get event bus metrics."""
        times = self._metrics['processing_times']
        avg_processing_time = sum(times) / len(times) if times else 0.0
        return {
            **self._metrics,
            'avg_processing_time': avg_processing_time
        }

    def _matching_subscriptions(self, event_name: str) -> List[EventSubscription]:
        matching = list(self._subscriptions.get(event_name, ()))
        matching.extend(
            s for s in self._wildcard_subscriptions
            if fnmatch.fnmatch(event_name, s.event_pattern)
        )
        matching.sort(key=lambda s: s.sequence)
        return matching

    async def _process_event(self, event: Event) -> None:
        """Call every handler matching the event."""
        start_time = time.time()

        for subscription in self._matching_subscriptions(event.name):
            try:
                result = subscription.handler(event)
                if asyncio.iscoroutine(result):
                    await result

                subscription.call_count += 1
                subscription.last_called = time.time()

            except Exception as e:
                subscription.error_count += 1
                self._metrics['events_failed'] += 1
                logger.error(f"Handler error for event {event.name}: {e}")

        self._metrics['events_processed'] += 1

        processing_times = self._metrics['processing_times']
        processing_times.append(time.time() - start_time)
        if len(processing_times) > self._history_size:
            del processing_times[:-self._history_size]
