"""
ui/events.py - Composer Event System

Typed event channels between the composer, its host and any other open
views. Each channel is an EventType member, never a free-form string name.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional
from datetime import datetime, timezone
from enum import Enum
import uuid
import logging

logger = logging.getLogger("ui.events")


class EventType(Enum):
    """Types of composer events."""

    # Save flow
    SAVE_REQUESTED = "save_requested"
    MISSION_SAVED = "mission_saved"
    PERSISTENCE_FAILED = "persistence_failed"

    # Delete flow
    MISSION_DELETED = "mission_deleted"

    # Composer state
    COMPOSER_STATE_CHANGED = "composer_state_changed"
    STAGE_CHANGED = "stage_changed"
    FOCUS_REQUESTED = "focus_requested"

    # Reference data
    REFERENCE_DATA_LOADED = "reference_data_loaded"


@dataclass
class UIEvent:
    """A composer event with payload."""

    event_id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    event_type: EventType = EventType.COMPOSER_STATE_CHANGED
    source: str = ""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    payload: Dict[str, Any] = field(default_factory=dict)
    propagate: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event_id": self.event_id,
            "type": self.event_type.value,
            "source": self.source,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
            "payload": self.payload,
        }

    @classmethod
    def save_requested(cls, mission_id: str = "", source: str = "host") -> "UIEvent":
        """Create a save request addressed to the mounted composer."""
        return cls(
            event_type=EventType.SAVE_REQUESTED,
            source=source,
            payload={"mission_id": mission_id},
        )

    @classmethod
    def mission_saved(cls, mission: Dict[str, Any], source: str = "host") -> "UIEvent":
        """Create a mission saved event."""
        return cls(
            event_type=EventType.MISSION_SAVED,
            source=source,
            payload={"id": mission.get("id"), "mission": mission},
        )

    @classmethod
    def mission_deleted(cls, mission_id: str, source: str = "host") -> "UIEvent":
        """Create a delete completion event."""
        return cls(
            event_type=EventType.MISSION_DELETED,
            source=source,
            payload={"id": mission_id},
        )

    @classmethod
    def focus_requested(cls, target: str, scroll: bool = True, source: str = "navigator") -> "UIEvent":
        """Create a focus request for a form field or section header."""
        return cls(
            event_type=EventType.FOCUS_REQUESTED,
            source=source,
            payload={"target": target, "scroll": scroll},
        )

    @classmethod
    def stage_changed(cls, old_stage: Optional[str], new_stage: Optional[str], source: str = "navigator") -> "UIEvent":
        """Create a stage changed event. None means all sections closed."""
        return cls(
            event_type=EventType.STAGE_CHANGED,
            source=source,
            payload={"old_stage": old_stage, "new_stage": new_stage},
        )

    @classmethod
    def persistence_failed(cls, error: Dict[str, Any], operation: str, source: str = "host") -> "UIEvent":
        """Create a persistence failure event carrying a structured error."""
        return cls(
            event_type=EventType.PERSISTENCE_FAILED,
            source=source,
            payload={"operation": operation, "error": error},
        )


# Type alias for event handlers
EventHandler = Callable[[UIEvent], None]


class EventBus:
    """
    Event bus for composer communication.

    Supports:
    - Event subscription by type
    - Wildcard subscriptions (receive all events)
    - Event history for debugging

    Components take a bus explicitly so tests and embedded hosts can use
    isolated buses. The module-level ``event_bus`` is the process default.
    """

    def __init__(self, max_history: int = 100):
        self._handlers: Dict[EventType, List[EventHandler]] = {}
        self._wildcard_handlers: List[EventHandler] = []
        self._history: List[UIEvent] = []
        self._max_history: int = max_history
        self._paused: bool = False

    def subscribe(self, event_type: EventType, handler: EventHandler) -> None:
        """
        Subscribe to events of a specific type.

        Args:
            event_type: Type of events to receive
            handler: Callback function(event) -> None
        """
        if event_type not in self._handlers:
            self._handlers[event_type] = []

        if handler not in self._handlers[event_type]:
            self._handlers[event_type].append(handler)
            logger.debug(f"Subscribed handler to {event_type.value}")

    def subscribe_all(self, handler: EventHandler) -> None:
        """Subscribe to all events."""
        if handler not in self._wildcard_handlers:
            self._wildcard_handlers.append(handler)
            logger.debug("Subscribed wildcard handler")

    def unsubscribe(self, event_type: EventType, handler: EventHandler) -> bool:
        """
        Unsubscribe from events of a specific type.

        Returns:
            True if handler was removed
        """
        if event_type in self._handlers:
            try:
                self._handlers[event_type].remove(handler)
                logger.debug(f"Unsubscribed handler from {event_type.value}")
                return True
            except ValueError:
                pass
        return False

    def unsubscribe_all(self, handler: EventHandler) -> bool:
        try:
            self._wildcard_handlers.remove(handler)
            return True
        except ValueError:
            return False

    def emit(self, event: UIEvent) -> None:
        """
        Emit an event to all subscribers.

        A failing handler is logged and does not stop delivery to the rest.
        """
        if self._paused:
            logger.debug(f"Event bus paused, dropping event: {event.event_type.value}")
            return

        self._history.append(event)
        if len(self._history) > self._max_history:
            self._history = self._history[-self._max_history:]

        logger.debug(f"Emitting event: {event.event_type.value} from {event.source}")

        for handler in list(self._handlers.get(event.event_type, [])):
            try:
                handler(event)
            except Exception as e:
                logger.error(f"Event handler failed for {event.event_type.value}: {e}")

        if event.propagate:
            for handler in list(self._wildcard_handlers):
                try:
                    handler(event)
                except Exception as e:
                    logger.error(f"Wildcard handler failed: {e}")

    def emit_simple(
        self,
        event_type: EventType,
        source: str = "",
        **payload,
    ) -> UIEvent:
        """Emit a simple event with payload and return it."""
        event = UIEvent(
            event_type=event_type,
            source=source,
            payload=payload,
        )
        self.emit(event)
        return event

    def pause(self) -> None:
        """Pause event emission."""
        self._paused = True
        logger.debug("Event bus paused")

    def resume(self) -> None:
        """Resume event emission."""
        self._paused = False
        logger.debug("Event bus resumed")

    def clear_handlers(self, event_type: Optional[EventType] = None) -> None:
        if event_type:
            self._handlers.pop(event_type, None)
        else:
            self._handlers.clear()
            self._wildcard_handlers.clear()

    def get_history(self, limit: int = 20, event_type: Optional[EventType] = None) -> List[UIEvent]:
        """
        Get event history.

        Args:
            limit: Maximum events to return
            event_type: Filter by type

        Returns:
            List of recent events
        """
        history = self._history
        if event_type:
            history = [e for e in history if e.event_type == event_type]
        return history[-limit:]

    def clear_history(self) -> None:
        self._history.clear()

    def handler_count(self, event_type: Optional[EventType] = None) -> int:
        """Number of registered handlers, for one type or in total."""
        if event_type is not None:
            return len(self._handlers.get(event_type, []))
        count = sum(len(handlers) for handlers in self._handlers.values())
        count += len(self._wildcard_handlers)
        return count


# Process-wide default bus
event_bus = EventBus()


def emit_mission_deleted(mission_id: str, bus: Optional[EventBus] = None, source: str = "host") -> None:
    """Convenience function to broadcast a delete completion."""
    (bus or event_bus).emit(UIEvent.mission_deleted(mission_id, source))


def emit_mission_saved(mission: Dict[str, Any], bus: Optional[EventBus] = None, source: str = "host") -> None:
    """Convenience function to broadcast a saved mission."""
    (bus or event_bus).emit(UIEvent.mission_saved(mission, source))
