"""
Renderer adapter for hotspot sessions.

Bridges a HotspotSession with a rendering front end: forwards interaction
events into the session, remembers the latest bounding box of the rendered
image and produces an annotated preview image.
"""

from typing import Callable, Optional, Sequence

import cv2
import numpy as np

from ..core.hotspots import BoundingBox, EventType, HotspotEvent, HotspotSession
from ..core.hotspots.state import Hotspot
from .image_source import decode_image_source

MARKER_COLOR = (239, 68, 68)
SELECTED_COLOR = (59, 130, 246)
BORDER_COLOR = (255, 255, 255)

REFRESH_EVENTS = (
    EventType.COLLECTION_LOADED,
    EventType.IMAGES_ADDED,
    EventType.IMAGE_REMOVED,
    EventType.ACTIVE_IMAGE_CHANGED,
    EventType.HOTSPOT_ADDED,
    EventType.HOTSPOT_UPDATED,
    EventType.HOTSPOT_REMOVED,
    EventType.HOTSPOT_SELECTED,
    EventType.TOUR_STARTED,
    EventType.TOUR_STEP_CHANGED,
    EventType.TOUR_ENDED,
)


def hotspot_pixels(hotspots: Sequence[Hotspot], width: int, height: int) -> np.ndarray:
    """
    Map hotspot percentages onto an image of the given intrinsic size.

    Returns:
        Integer array of shape (N, 2) with (x, y) pixel positions
    """
    if not hotspots:
        return np.zeros((0, 2), dtype=np.int32)
    percents = np.array([(h.x, h.y) for h in hotspots], dtype=np.float64)
    scale = np.array([width - 1, height - 1], dtype=np.float64) / 100.0
    return np.rint(percents * scale).astype(np.int32)


class RendererAdapter:
    """
    Adapter connecting HotspotSession to a renderer.

    Provides a layer that:
    - Translates renderer interactions into session operations
    - Tracks the bounding box of the rendered image across resizes
    - Calls back into the renderer whenever the session changes
    - Renders hotspot markers onto the active image
    """

    def __init__(
        self,
        session: HotspotSession,
        refresh_callback: Optional[Callable[[], None]] = None,
        marker_radius: Optional[int] = None,
    ):
        """
        Initialize adapter.

        Args:
            session: Core hotspot session
            refresh_callback: Called after every visible state change
            marker_radius: Radius for drawing hotspot markers
        """
        self.session = session
        self.refresh_callback = refresh_callback
        if marker_radius is None:
            marker_radius = session.config.render.marker_radius
        self.marker_radius = marker_radius
        self.box: Optional[BoundingBox] = None

        self._setup_event_handlers()

    def _setup_event_handlers(self):
        """Setup event handlers for session events."""
        self._unsubscribe = [
            self.session.events.on(event_type, self._on_change)
            for event_type in REFRESH_EVENTS
        ]

    def detach(self):
        while self._unsubscribe:
            self._unsubscribe.pop()()

    def _on_change(self, event: HotspotEvent):
        if self.refresh_callback:
            self.refresh_callback()

    # Renderer interactions

    def on_resize(self, box: Optional[BoundingBox]):
        """Record the bounding box after layout, load or resize."""
        self.box = box

    def on_pointer_click(self, pointer_x: float, pointer_y: float, box: Optional[BoundingBox] = None):
        if box is not None:
            self.box = box
        return self.session.place_hotspot(pointer_x, pointer_y, self.box)

    def on_hotspot_click(self, hotspot_id: str):
        return self.session.select_hotspot(hotspot_id)

    def on_editor_close(self):
        return self.session.clear_selection()

    def on_comment_change(self, text: str):
        hotspot_id = self.session.state.selected_hotspot_id
        if hotspot_id is None:
            return False
        return self.session.update_comment(hotspot_id, text)

    def on_delete_hotspot(self):
        hotspot_id = self.session.state.selected_hotspot_id
        if hotspot_id is None:
            return False
        return self.session.delete_hotspot(hotspot_id)

    def on_delete_image(self, image_id: str):
        return self.session.delete_image(image_id)

    def on_upload_batch(self, images):
        return self.session.add_images(images)

    def editor_position(self):
        """Popup anchor for the selected hotspot, from the latest bounding box."""
        return self.session.editor_anchor(self.box)

    # Visualization

    def get_visualization(self, marker_radius: Optional[int] = None) -> Optional[np.ndarray]:
        """
        Get a preview of the active image with its hotspot markers.

        The selected hotspot, or the current tour step while touring, is
        drawn in the highlight color.

        Returns:
            RGB image, or None without an active image
        """
        if marker_radius is None:
            marker_radius = self.marker_radius

        data = self.session.get_render_data()
        image = data["active_image"]
        step = data["tour_step"]
        if step is not None:
            image = next(img for img in data["images"] if img.id == step.image_id)
            highlighted = step.hotspot.id
        else:
            highlighted = data["selected_hotspot_id"]
        if image is None:
            return None

        vis = decode_image_source(image.src)
        height, width = vis.shape[:2]
        positions = hotspot_pixels(image.hotspots, width, height)

        for hotspot, (x, y) in zip(image.hotspots, positions):
            color = SELECTED_COLOR if hotspot.id == highlighted else MARKER_COLOR
            center = (int(x), int(y))
            # Draw filled circle
            cv2.circle(vis, center, marker_radius, color, -1)
            # Draw white border
            cv2.circle(vis, center, marker_radius + 1, BORDER_COLOR, 2)

        return vis
