"""
Typed event bus for navigation notifications.

Uses Enums for event types so subscribers never match on magic strings.

Usage:
    bus = EventBus()
    bus.subscribe(NavigationEvent.FOCUS_CHANGED, on_focus_changed)

    navigator = SpatialNavigator(event_bus=bus)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Callable

logger = logging.getLogger(__name__)


class NavigationEvent(Enum):
    """Events published by the navigator."""
    FOCUS_CHANGED = auto()
    NODE_REGISTERED = auto()
    NODE_UNREGISTERED = auto()
    NAVIGATION_PREVENTED = auto()
    PAUSED = auto()
    RESUMED = auto()


@dataclass
class Event:
    """
    Event data container.

    Attributes:
        type: The event type (Enum member)
        data: Dictionary of event-specific data
        consumed: Whether the event has been handled
    """
    type: Enum
    data: dict[str, Any] = field(default_factory=dict)
    consumed: bool = False

    def consume(self) -> None:
        """Mark event as consumed (stops propagation)."""
        self.consumed = True

    def get(self, key: str, default: Any = None) -> Any:
        """Get event data by key."""
        return self.data.get(key, default)

    def __getitem__(self, key: str) -> Any:
        return self.data[key]


EventHandler = Callable[[Event], None]


@dataclass(eq=False)
class _Subscription:
    priority: int
    handler: EventHandler
    one_shot: bool


class EventBus:
    """
    Publish/subscribe messaging between the navigator and its host.

    Features:
    - Typed events (Enum-based)
    - Priority ordering (higher first)
    - One-shot handlers
    - Event consumption (stops propagation)
    - Events published from inside a handler are queued, not nested
    """

    def __init__(self):
        self._handlers: dict[Enum, list[_Subscription]] = {}
        self._event_queue: list[Event] = []
        self._is_publishing = False

    def subscribe(
        self,
        event_type: Enum,
        handler: EventHandler,
        priority: int = 0,
        one_shot: bool = False,
    ) -> None:
        """
        Subscribe to an event type.

        Args:
            event_type: The event type to listen for
            handler: Callback function(event: Event)
            priority: Higher priority handlers are called first (default 0)
            one_shot: If True, handler is removed after first call
        """
        handlers = self._handlers.setdefault(event_type, [])
        subscription = _Subscription(priority, handler, one_shot)

        # Stable insert: equal priorities keep subscription order
        index = len(handlers)
        for i, existing in enumerate(handlers):
            if priority > existing.priority:
                index = i
                break
        handlers.insert(index, subscription)

    def unsubscribe(self, event_type: Enum, handler: EventHandler) -> None:
        """Remove a handler. Unknown handlers are ignored."""
        if event_type not in self._handlers:
            return

        self._handlers[event_type] = [
            s for s in self._handlers[event_type] if s.handler != handler
        ]

    def publish(self, event_type: Enum, **data: Any) -> Event:
        """
        Publish an event.

        Returns:
            The Event object (check .consumed to see if it was handled)
        """
        event = Event(type=event_type, data=data)

        if self._is_publishing:
            self._event_queue.append(event)
        else:
            self._dispatch(event)

        return event

    def clear(self, event_type: Enum | None = None) -> None:
        """Clear handlers for one event type, or all of them."""
        if event_type is None:
            self._handlers.clear()
        else:
            self._handlers.pop(event_type, None)

    def _remove_subscription(self, event_type: Enum, subscription: _Subscription) -> None:
        handlers = self._handlers.get(event_type, [])
        if subscription in handlers:
            handlers.remove(subscription)

    def _dispatch(self, event: Event) -> None:
        self._is_publishing = True
        try:
            handlers = list(self._handlers.get(event.type, []))
            for subscription in handlers:
                if subscription.one_shot:
                    self._remove_subscription(event.type, subscription)

                try:
                    subscription.handler(event)
                except Exception:
                    logger.exception(f"Error in event handler for {event.type}")

                if event.consumed:
                    break
        finally:
            self._is_publishing = False

        while self._event_queue:
            self._dispatch(self._event_queue.pop(0))
