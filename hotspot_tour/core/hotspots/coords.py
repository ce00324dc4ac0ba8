"""
Conversion between viewport pixels and image-relative percentages.

Bounding boxes are always passed in explicitly; nothing here talks to a
rendering surface, so every function can be tested in isolation.
"""

import math
from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class BoundingBox:
    """Viewport-space rectangle of a rendered image element."""

    left: float
    top: float
    width: float
    height: float

    @property
    def is_usable(self) -> bool:
        """True once the element has been laid out with a non-zero size."""
        values = (self.left, self.top, self.width, self.height)
        if not all(math.isfinite(v) for v in values):
            return False
        return self.width > 0 and self.height > 0

    def to_dict(self):
        return {
            "left": self.left,
            "top": self.top,
            "width": self.width,
            "height": self.height,
        }

    @classmethod
    def from_dict(cls, data: dict):
        return cls(
            left=float(data.get("left", 0)),
            top=float(data.get("top", 0)),
            width=float(data["width"]),
            height=float(data["height"]),
        )


def round_percent(value: float) -> float:
    """Round half-up to two decimal places."""
    return math.floor(value * 100 + 0.5) / 100


def _clamp_percent(value: float) -> float:
    return min(max(value, 0.0), 100.0)


def to_percent(
    pointer_x: float, pointer_y: float, box: Optional[BoundingBox]
) -> Optional[Tuple[float, float]]:
    """
    Convert a pointer position to percentages of the rendered image.

    Args:
        pointer_x: Pointer X in viewport pixels
        pointer_y: Pointer Y in viewport pixels
        box: Bounding box of the rendered image

    Returns:
        (x, y) in [0, 100] rounded to 2 decimals, or None when the box is
        missing or has no area yet
    """
    if box is None or not box.is_usable:
        return None
    if not (math.isfinite(pointer_x) and math.isfinite(pointer_y)):
        return None

    x = (pointer_x - box.left) / box.width * 100
    y = (pointer_y - box.top) / box.height * 100
    return _clamp_percent(round_percent(x)), _clamp_percent(round_percent(y))


def to_pixels(
    percent_x: float, percent_y: float, box: Optional[BoundingBox]
) -> Optional[Tuple[float, float]]:
    """
    Convert a percentage position back to viewport pixels.

    Used to anchor overlays (editor popups, tour tooltips) to a hotspot.
    Must be called again with a fresh box after every resize.

    Returns:
        (left, top) in viewport pixels, or None when the box is unusable
    """
    if box is None or not box.is_usable:
        return None
    left = percent_x / 100 * box.width + box.left
    top = percent_y / 100 * box.height + box.top
    return left, top
