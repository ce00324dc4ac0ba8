"""
Core hotspot module - UI-agnostic hotspot and tour logic.

This module provides the data model, pure collection operations and the
guided tour state machine that any front end (GUI, web, CLI) can drive.
"""

from .session import HotspotSession
from .events import HotspotEvent, EventType, EventEmitter
from .state import AppState, Hotspot, Image, TourState
from .coords import BoundingBox, to_percent, to_pixels
from .tour import TourStateMachine, TourStep
from .ids import generate_id

__all__ = [
    "HotspotSession",
    "HotspotEvent",
    "EventType",
    "EventEmitter",
    "AppState",
    "Hotspot",
    "Image",
    "TourState",
    "BoundingBox",
    "to_percent",
    "to_pixels",
    "TourStateMachine",
    "TourStep",
    "generate_id",
]
