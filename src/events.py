"""
Event Recording - Kubernetes-style events for listener reconciliation.

Reconcilers report what they did to the owner of a resource through an
EventRecorder. Recording is fire-and-forget: it never raises and its
return value is never consumed.
"""

import logging
from collections import deque
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Deque, Dict, List

logger = logging.getLogger(__name__)


class EventType(Enum):
    """Severity of a recorded event."""

    NORMAL = "Normal"
    WARNING = "Warning"


@dataclass
class RecordedEvent:
    """A single event reported against a resource."""

    event_type: EventType
    reason: str
    message: str
    involved_object: str
    timestamp: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event_type": self.event_type.value,
            "reason": self.reason,
            "message": self.message,
            "involved_object": self.involved_object,
            "timestamp": self.timestamp,
        }


class EventRecorder:
    """
    Bounded in-memory event sink.

    Keeps the most recent ``max_events`` events. Older events are dropped
    once the buffer is full.
    """

    def __init__(self, involved_object: str = "", max_events: int = 256):
        self.involved_object = involved_object
        self._events: Deque[RecordedEvent] = deque(maxlen=max_events)

    def eventf(self, event_type: EventType, reason: str, fmt: str, *args: Any) -> None:
        """
        Record an event with a %-style formatted message.

        Args:
            event_type: Normal or Warning.
            reason: Short machine-readable reason (e.g. 'CREATE').
            fmt: Message format string.
            *args: Values interpolated into ``fmt``.
        """
        try:
            message = fmt % args if args else fmt
        except (TypeError, ValueError) as e:
            message = f"{fmt} {args!r}"
            logger.warning(f"Could not format event message: {e}")

        event = RecordedEvent(
            event_type=event_type,
            reason=reason,
            message=message,
            involved_object=self.involved_object,
            timestamp=datetime.now(timezone.utc).isoformat(),
        )
        self._events.append(event)

        level = logging.WARNING if event_type is EventType.WARNING else logging.INFO
        logger.log(
            level,
            f"Event({self.involved_object or '-'}): "
            f"type={event_type.value} reason={reason} message={message}",
        )

    @property
    def events(self) -> List[RecordedEvent]:
        """Return a copy of the recorded events, oldest first."""
        return list(self._events)

    def clear(self) -> None:
        self._events.clear()

    def __len__(self) -> int:
        return len(self._events)
