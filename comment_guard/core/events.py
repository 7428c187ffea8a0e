"""
Hook system for the comment guard.

Handlers subscribe to event types and are called synchronously, in
registration order, when the guard publishes an event. Handlers observe;
they cannot change a block decision.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Any, List, Callable, Optional
from enum import Enum
import logging

from comment_guard.domain.models import SubmissionFields
from comment_guard.foundation.types import SubmissionField

logger = logging.getLogger(__name__)


class EventType(Enum):
    """Events published while processing a submission."""
    SUBMISSION_ALLOWED = "submission_allowed"
    BEFORE_NOTIFICATION = "before_notification"
    SUBMISSION_BLOCKED = "submission_blocked"


@dataclass(frozen=True)
class Event:
    """Base class for all events."""
    event_type: EventType
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    source: str = ""

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary."""
        return {
            "event_type": self.event_type.value,
            "timestamp": self.timestamp.isoformat(),
            "source": self.source,
        }


@dataclass(frozen=True)
class SubmissionEvent(Event):
    """Event carrying the (immutable) submission being processed."""
    fields: SubmissionFields = field(default_factory=SubmissionFields)
    post_id: Optional[str] = None


@dataclass(frozen=True)
class BlockedSubmissionEvent(SubmissionEvent):
    """A submission matched a stopword."""
    matched_field: Optional[SubmissionField] = None
    matched_term: str = ""
    notification_sent: bool = False

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({
            "post_id": self.post_id,
            "matched_field": self.matched_field.value if self.matched_field else None,
            "matched_term": self.matched_term,
            "notification_sent": self.notification_sent,
        })
        return data


Handler = Callable[[Event], None]


class HookRegistry:
    """
    Synchronous publish-subscribe registry.

    Handlers for a specific event type run first, then wildcard handlers,
    each group in registration order. A failing handler is logged and the
    remaining handlers still run.
    """

    def __init__(self):
        self._subscribers: Dict[EventType, List[Handler]] = {}
        self._wildcard_subscribers: List[Handler] = []

    def subscribe(self, event_type: Optional[EventType], handler: Handler) -> None:
        """Subscribe to events of a specific type.

        Args:
            event_type: Type of events to subscribe to (None for all events)
            handler: Function to call when event occurs
        """
        if event_type is None:
            self._wildcard_subscribers.append(handler)
        else:
            self._subscribers.setdefault(event_type, []).append(handler)

        logger.debug(f"Subscribed handler {getattr(handler, '__name__', handler)!r} to {event_type}")

    def unsubscribe(self, event_type: Optional[EventType], handler: Handler) -> None:
        """Remove a handler; unknown handlers are ignored."""
        handlers = self._wildcard_subscribers if event_type is None else self._subscribers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)

    def publish(self, event: Event) -> int:
        """Dispatch an event to all relevant subscribers.

        Args:
            event: Event to dispatch

        Returns:
            Number of handlers that completed without raising
        """
        completed = 0
        # Copy so handlers may (un)subscribe while being dispatched
        handlers = list(self._subscribers.get(event.event_type, [])) + list(self._wildcard_subscribers)

        for handler in handlers:
            try:
                handler(event)
                completed += 1
            except Exception as e:
                logger.error(f"Error in {event.event_type.value} handler: {e}", exc_info=True)

        return completed

    def get_subscriber_count(self, event_type: Optional[EventType] = None) -> int:
        """Get count of subscribers for an event type (None for total count)."""
        if event_type is None:
            return len(self._wildcard_subscribers) + sum(
                len(handlers) for handlers in self._subscribers.values()
            )
        return len(self._subscribers.get(event_type, []))
