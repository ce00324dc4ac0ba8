"""
Event system for the hotspot workflow.

Provides a decoupled way for the session to notify renderers and other
collaborators about state changes without depending on a UI framework.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, DefaultDict, Dict, List

logger = logging.getLogger(__name__)


class EventType(Enum):
    """Types of events that can occur during a hotspot session."""

    # Collection events
    COLLECTION_LOADED = "collection_loaded"
    COLLECTION_SAVED = "collection_saved"
    IMAGES_ADDED = "images_added"
    IMAGE_REMOVED = "image_removed"
    ACTIVE_IMAGE_CHANGED = "active_image_changed"

    # Hotspot events
    HOTSPOT_ADDED = "hotspot_added"
    HOTSPOT_UPDATED = "hotspot_updated"
    HOTSPOT_REMOVED = "hotspot_removed"
    HOTSPOT_SELECTED = "hotspot_selected"

    # Tour events
    TOUR_STARTED = "tour_started"
    TOUR_STEP_CHANGED = "tour_step_changed"
    TOUR_ENDED = "tour_ended"

    # Session events
    STATE_CHANGED = "state_changed"


@dataclass(frozen=True)
class HotspotEvent:
    """Event that occurs during a hotspot session."""

    event_type: EventType
    data: Dict[str, Any] = field(default_factory=dict)


Listener = Callable[[HotspotEvent], None]


class EventEmitter:
    """
    Pub/sub hub between the session and its renderers.

    ``on`` hands back a zero-argument callable that removes the listener,
    so collaborators can keep that instead of the callback itself.
    """

    def __init__(self):
        self._listeners: DefaultDict[EventType, List[Listener]] = defaultdict(list)

    def on(self, event_type: EventType, callback: Listener) -> Callable[[], None]:
        self._listeners[event_type].append(callback)
        return lambda: self.off(event_type, callback)

    def once(self, event_type: EventType, callback: Listener) -> Callable[[], None]:
        """Subscribe for the next event of ``event_type`` only."""

        def wrapper(event: HotspotEvent):
            self.off(event_type, wrapper)
            callback(event)

        return self.on(event_type, wrapper)

    def off(self, event_type: EventType, callback: Listener):
        listeners = self._listeners.get(event_type)
        if listeners and callback in listeners:
            listeners.remove(callback)

    def emit(self, event: HotspotEvent):
        # Snapshot: listeners may unsubscribe while being called
        for callback in tuple(self._listeners.get(event.event_type, ())):
            try:
                callback(event)
            except Exception:
                logger.exception(f"Error in listener for {event.event_type.value}")

    def listener_count(self, event_type: EventType) -> int:
        return len(self._listeners.get(event_type, ()))

    def clear(self):
        self._listeners.clear()
