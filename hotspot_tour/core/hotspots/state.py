"""
State management for hotspot annotation.

Contains the data classes for images, their hotspots and the
application-level state that session operations replace as a whole.
"""

import math
from dataclasses import dataclass, field
from numbers import Real
from typing import Optional, Tuple


def _require_str(data: dict, key: str, default: Optional[str] = None) -> str:
    value = data.get(key, default)
    if not isinstance(value, str):
        raise ValueError(f"Field '{key}' must be a string, got {type(value).__name__}")
    return value


def _require_percent(data: dict, key: str) -> float:
    value = data.get(key)
    if isinstance(value, bool) or not isinstance(value, Real):
        raise ValueError(f"Field '{key}' must be a number, got {value!r}")
    value = float(value)
    if not math.isfinite(value) or not 0 <= value <= 100:
        raise ValueError(f"Field '{key}' must be within [0, 100], got {value}")
    return value


@dataclass(frozen=True)
class Hotspot:
    """A commentable marker anchored to a percentage position on an image."""

    id: str
    x: float
    y: float
    comment: str = ""

    def to_dict(self):
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "x": self.x,
            "y": self.y,
            "comment": self.comment,
        }

    @classmethod
    def from_dict(cls, data: dict):
        """
        Create from dictionary.

        Raises:
            ValueError: If a field is missing or out of range
        """
        if not isinstance(data, dict):
            raise ValueError(f"Hotspot record must be an object, got {type(data).__name__}")
        return cls(
            id=_require_str(data, "id"),
            x=_require_percent(data, "x"),
            y=_require_percent(data, "y"),
            comment=_require_str(data, "comment", ""),
        )


@dataclass(frozen=True)
class Image:
    """An uploaded image and its ordered hotspot sequence."""

    id: str
    src: str
    filename: str
    hotspots: Tuple[Hotspot, ...] = ()

    def to_dict(self):
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "src": self.src,
            "filename": self.filename,
            "hotspots": [h.to_dict() for h in self.hotspots],
        }

    @classmethod
    def from_dict(cls, data: dict):
        """
        Create from dictionary.

        Raises:
            ValueError: If the record or one of its hotspots is malformed
        """
        if not isinstance(data, dict):
            raise ValueError(f"Image record must be an object, got {type(data).__name__}")
        hotspots = data.get("hotspots", [])
        if not isinstance(hotspots, list):
            raise ValueError("Field 'hotspots' must be a list")
        return cls(
            id=_require_str(data, "id"),
            src=_require_str(data, "src"),
            filename=_require_str(data, "filename", ""),
            hotspots=tuple(Hotspot.from_dict(h) for h in hotspots),
        )


@dataclass(frozen=True)
class TourState:
    """
    Guided playback state.

    The tour is active while ``image_id`` is set. When inactive,
    ``step_index`` holds the pending index for the next start.
    """

    image_id: Optional[str] = None
    step_index: int = 0

    @property
    def is_active(self) -> bool:
        return self.image_id is not None


@dataclass(frozen=True)
class AppState:
    """
    Complete state of a hotspot session.

    Selection of the active image and hotspot lives here rather than on
    the entities, so the collection stays a plain container.
    """

    images: Tuple[Image, ...] = ()
    active_image_id: Optional[str] = None
    selected_hotspot_id: Optional[str] = None
    tour: TourState = field(default_factory=TourState)

    @property
    def active_image(self) -> Optional[Image]:
        for image in self.images:
            if image.id == self.active_image_id:
                return image
        return None
