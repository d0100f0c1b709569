"""
Typed event bus for build sessions.

A BuildSession publishes one ProgressionEvent per transition; listeners
such as a sheet view or a persistence layer subscribe to the kinds they
care about, or to every kind at once.

Usage:
    # Refresh the ability list whenever the build changes
    event_bus.subscribe(ProgressionEvent.ABILITY_SELECTED, refresh_abilities)

    # Save every committed change
    event_bus.subscribe_all(save_sheet)

    # Publish (done by BuildSession)
    event_bus.publish(ProgressionEvent.ABILITY_SELECTED, ability_id="hacking-1")
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)


class ProgressionEvent(Enum):
    """Events published by a build session after each transition."""
    # Class
    CLASS_SELECTED = auto()

    # Abilities
    ABILITY_SELECTED = auto()
    ABILITY_REMOVED = auto()

    # Specialization
    SPECIALIZATION_SELECTED = auto()
    SPECIALIZATION_CLEARED = auto()

    # Legendary
    LEGENDARY_SELECTED = auto()
    LEGENDARY_REMOVED = auto()

    # Resources
    TP_ADJUSTED = auto()

    # Failures
    TRANSITION_REJECTED = auto()

    @property
    def is_commit(self) -> bool:
        """True for events that report a changed progression."""
        return self is not ProgressionEvent.TRANSITION_REJECTED


@dataclass(frozen=True)
class Event:
    """
    Event data container.

    Attributes:
        type: The event kind
        data: Event-specific data (progression, tp_delta, ids...)
    """
    type: ProgressionEvent
    data: dict[str, Any] = field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        """Get event data by key."""
        return self.data.get(key, default)

    def __getitem__(self, key: str) -> Any:
        """Get event data by key (dict-style)."""
        return self.data[key]


# Type alias for event handlers
EventHandler = Callable[[Event], None]


class EventBus:
    """
    Publish/subscribe hub for ProgressionEvents.

    Handlers run in subscription order; catch-all handlers run after the
    handlers of the specific kind. A handler that triggers another
    transition (and so another publish) does not interrupt delivery: the
    new event is queued and delivered once the current one has reached
    every handler, so listeners always see events in commit order.
    """

    def __init__(self):
        self._handlers: dict[ProgressionEvent, list[EventHandler]] = {}
        self._catch_all: list[EventHandler] = []
        self._queue: list[Event] = []
        self._dispatching = False

    def subscribe(self, event_type: ProgressionEvent, handler: EventHandler) -> None:
        """Call handler for every event of one kind."""
        self._handlers.setdefault(event_type, []).append(handler)

    def subscribe_all(self, handler: EventHandler) -> None:
        """Call handler for every event of any kind."""
        self._catch_all.append(handler)

    def unsubscribe(
        self,
        handler: EventHandler,
        event_type: Optional[ProgressionEvent] = None,
    ) -> None:
        """
        Remove a handler.

        Args:
            handler: The handler to remove
            event_type: Only remove it for this kind; None removes it
                everywhere, catch-all subscriptions included
        """
        if event_type is not None:
            handlers = self._handlers.get(event_type, [])
            self._handlers[event_type] = [h for h in handlers if h != handler]
            return

        for kind, handlers in self._handlers.items():
            self._handlers[kind] = [h for h in handlers if h != handler]
        self._catch_all = [h for h in self._catch_all if h != handler]

    def publish(self, event_type: ProgressionEvent, **data: Any) -> Event:
        """Publish an event and return it."""
        event = Event(type=event_type, data=data)
        self._queue.append(event)

        if not self._dispatching:
            self._dispatching = True
            try:
                while self._queue:
                    self._dispatch(self._queue.pop(0))
            finally:
                self._dispatching = False

        return event

    def clear(self) -> None:
        """Remove every handler."""
        self._handlers.clear()
        self._catch_all.clear()

    def _dispatch(self, event: Event) -> None:
        # Copy so handlers may (un)subscribe while being called
        handlers = list(self._handlers.get(event.type, ())) + list(self._catch_all)
        for handler in handlers:
            try:
                handler(event)
            except Exception:
                # A broken listener must not undo a committed transition
                logger.exception(f"Error in event handler for {event.type}")
