"""
Hotspot session management.

Core logic for annotating images with hotspots and replaying them as a
guided tour. UI-agnostic - renderers feed interaction events in and listen
to the emitted events to refresh.
"""

import logging
from dataclasses import replace
from typing import Any, Dict, Iterable, Optional, Sequence

from .collection import (
    add_images,
    count_hotspots,
    find_image,
    remove_image,
    replace_hotspots,
)
from .coords import BoundingBox, to_percent, to_pixels
from .events import EventEmitter, EventType, HotspotEvent
from .ids import IdFactory, generate_id
from .state import AppState, Hotspot, Image
from .store import add_hotspot, create_hotspot, find_hotspot, remove_hotspot, update_comment
from .tour import TourStateMachine, TourStep

logger = logging.getLogger(__name__)


class HotspotSession:
    """
    Manages the state and logic of a hotspot annotation session.

    This class handles:
    - Image collection updates (upload batches, deletion)
    - Hotspot placement, comments and removal on the active image
    - Active image / selected hotspot bookkeeping
    - Guided tour playback
    - Persistence after every collection change
    - Event emission for UI updates

    The whole state is an immutable ``AppState`` that each operation
    replaces, so collaborators can detect changes by identity.
    """

    def __init__(self, gateway=None, config=None, id_factory: Optional[IdFactory] = None):
        """
        Initialize hotspot session.

        Args:
            gateway: PersistenceGateway used to load/save the collection
            config: Configuration tree (see ``hotspot_tour.utils.config``)
            id_factory: Callable producing ids from a prefix
        """
        from ...utils.config import default_config

        self.config = config if config is not None else default_config()

        if gateway is None:
            from ...persistence.gateway import PersistenceGateway

            gateway = PersistenceGateway(key=self.config.storage.key)
        self.gateway = gateway

        self.id_factory = id_factory or generate_id

        # Current state
        self.state = AppState()

        # Event emitter for UI notifications
        self.events = EventEmitter()

        self.tour = TourStateMachine(self._hotspots_for)

    # Internal helpers

    def _hotspots_for(self, image_id: str) -> Optional[Sequence[Hotspot]]:
        image = find_image(self.state.images, image_id)
        return None if image is None else image.hotspots

    def _emit(self, event_type: EventType, **data):
        self.events.emit(HotspotEvent(event_type, data))

    def _set_state(self, **changes):
        self.state = replace(self.state, **changes)
        self._emit(EventType.STATE_CHANGED)

    def _sync_tour(self):
        """Copy the machine's (reconciled) state into the app state."""
        was_active = self.state.tour.is_active
        tour_state = self.tour.state
        if tour_state != self.state.tour:
            self._set_state(tour=tour_state)
        if was_active and not tour_state.is_active:
            self._emit(EventType.TOUR_ENDED, reason="no_hotspots")

    def _persist(self):
        if self.gateway.save(self.state.images):
            self._emit(EventType.COLLECTION_SAVED, num_images=len(self.state.images))

    def _commit_images(self, images):
        # Images and tour change together, listeners never see a stale tour
        was_active = self.state.tour.is_active
        tour_image = find_image(images, self.state.tour.image_id)
        tour_state = self.tour.reconcile(
            None if tour_image is None else len(tour_image.hotspots)
        )
        self._set_state(images=images, tour=tour_state)
        if was_active and not tour_state.is_active:
            self._emit(EventType.TOUR_ENDED, reason="no_hotspots")
        self._persist()

    # Collection

    def load(self) -> int:
        """
        Restore the collection from storage.

        Returns:
            Number of images loaded
        """
        images = self.gateway.load()
        self.tour.exit()
        self._set_state(
            images=images,
            active_image_id=images[0].id if images else None,
            selected_hotspot_id=None,
            tour=self.tour.state,
        )
        self._emit(EventType.COLLECTION_LOADED, num_images=len(images))
        return len(images)

    def new_image(self, src: str, filename: str) -> Image:
        """Build an image record with a fresh id (not yet added)."""
        return Image(
            id=self.id_factory(self.config.ids.image_prefix),
            src=src,
            filename=filename,
        )

    def add_images(self, images: Iterable[Image]) -> Sequence[Image]:
        """
        Merge an upload batch into the collection.

        Args:
            images: Newly acquired images, in upload order

        Returns:
            The images that were added
        """
        images = tuple(images)
        if not images:
            return ()
        merged, activate = add_images(self.state.images, images)
        if self.state.active_image_id is None:
            activate = activate or merged[0].id

        self._commit_images(merged)
        self._emit(EventType.IMAGES_ADDED, image_ids=[img.id for img in images])
        if activate is not None:
            self.select_image(activate)
        return images

    def select_image(self, image_id: Optional[str]) -> bool:
        """
        Make an image the active one.

        Returns:
            True if the active image changed
        """
        if image_id is not None and find_image(self.state.images, image_id) is None:
            logger.debug(f"Cannot select unknown image {image_id}")
            return False
        if image_id == self.state.active_image_id:
            return False

        self.tour.image_changed(image_id)
        self._set_state(
            active_image_id=image_id,
            selected_hotspot_id=None,
            tour=self.tour.state,
        )
        self._emit(EventType.ACTIVE_IMAGE_CHANGED, image_id=image_id)
        return True

    def delete_image(self, image_id: str) -> bool:
        """
        Delete an image and its hotspots.

        Returns:
            True if an image was removed
        """
        if find_image(self.state.images, image_id) is None:
            return False

        if self.state.tour.image_id == image_id:
            self.exit_tour()

        was_active = self.state.active_image_id == image_id
        self._commit_images(remove_image(self.state.images, image_id))
        self._emit(EventType.IMAGE_REMOVED, image_id=image_id)
        if was_active:
            self._set_state(active_image_id=None, selected_hotspot_id=None)
            self._emit(EventType.ACTIVE_IMAGE_CHANGED, image_id=None)
        return True

    # Hotspots

    def place_hotspot(
        self, pointer_x: float, pointer_y: float, box: Optional[BoundingBox]
    ) -> Optional[Hotspot]:
        """
        Place a hotspot where the user clicked on the active image.

        Args:
            pointer_x: Pointer X in viewport pixels
            pointer_y: Pointer Y in viewport pixels
            box: Current bounding box of the rendered image

        Returns:
            The new hotspot, or None if placement was skipped
        """
        image = self.state.active_image
        if image is None:
            return None
        if self.tour.is_active:
            logger.debug("Hotspot placement is disabled during a tour")
            return None

        position = to_percent(pointer_x, pointer_y, box)
        if position is None:
            logger.debug(f"Skipping placement, unusable bounding box {box}")
            return None

        return self.add_hotspot_at(image.id, *position)

    def add_hotspot_at(
        self, image_id: str, x: float, y: float, comment: str = ""
    ) -> Optional[Hotspot]:
        """Add a hotspot at a percentage position on any image."""
        image = find_image(self.state.images, image_id)
        if image is None:
            return None

        hotspot = create_hotspot(
            min(max(x, 0.0), 100.0),
            min(max(y, 0.0), 100.0),
            comment=comment,
            prefix=self.config.ids.hotspot_prefix,
            id_factory=self.id_factory,
        )
        locked = self.tour.is_active
        hotspots = add_hotspot(image.hotspots, hotspot, locked=locked)
        if len(hotspots) == len(image.hotspots):
            return None

        self._commit_images(replace_hotspots(self.state.images, image_id, hotspots))
        self._emit(EventType.HOTSPOT_ADDED, image_id=image_id, hotspot=hotspot.to_dict())
        if image_id == self.state.active_image_id:
            self.select_hotspot(hotspot.id)
        return hotspot

    def select_hotspot(self, hotspot_id: Optional[str]) -> bool:
        """Select a hotspot of the active image (None clears the selection)."""
        image = self.state.active_image
        if hotspot_id is not None and (
            image is None or find_hotspot(image.hotspots, hotspot_id) is None
        ):
            return False
        if hotspot_id == self.state.selected_hotspot_id:
            return False
        self._set_state(selected_hotspot_id=hotspot_id)
        self._emit(EventType.HOTSPOT_SELECTED, hotspot_id=hotspot_id)
        return True

    def clear_selection(self) -> bool:
        return self.select_hotspot(None)

    def update_comment(
        self, hotspot_id: str, text: str, image_id: Optional[str] = None
    ) -> bool:
        """
        Replace a hotspot's comment.

        Args:
            hotspot_id: Hotspot to edit
            text: New comment
            image_id: Owning image, defaults to the active one

        Returns:
            True if a hotspot was updated
        """
        image = find_image(self.state.images, image_id or self.state.active_image_id)
        if image is None or find_hotspot(image.hotspots, hotspot_id) is None:
            return False

        hotspots = update_comment(image.hotspots, hotspot_id, text)
        self._commit_images(replace_hotspots(self.state.images, image.id, hotspots))
        self._emit(
            EventType.HOTSPOT_UPDATED, image_id=image.id, hotspot_id=hotspot_id, comment=text
        )
        return True

    def delete_hotspot(self, hotspot_id: str, image_id: Optional[str] = None) -> bool:
        """
        Remove a hotspot.

        Clears the selection if it pointed at the removed hotspot and ends
        the tour if its image has no hotspots left.

        Returns:
            True if a hotspot was removed
        """
        image = find_image(self.state.images, image_id or self.state.active_image_id)
        if image is None or find_hotspot(image.hotspots, hotspot_id) is None:
            return False

        hotspots = remove_hotspot(image.hotspots, hotspot_id)
        self._commit_images(replace_hotspots(self.state.images, image.id, hotspots))
        self._emit(EventType.HOTSPOT_REMOVED, image_id=image.id, hotspot_id=hotspot_id)
        if self.state.selected_hotspot_id == hotspot_id:
            self.clear_selection()
        return True

    def editor_anchor(self, box: Optional[BoundingBox]):
        """
        Viewport position for the selected hotspot's editor popup.

        Returns:
            (left, top) in pixels, or None without a selection or usable box
        """
        image = self.state.active_image
        if image is None:
            return None
        hotspot = find_hotspot(image.hotspots, self.state.selected_hotspot_id)
        if hotspot is None:
            return None
        return to_pixels(hotspot.x, hotspot.y, box)

    # Tour

    def start_tour(self, image_id: Optional[str] = None) -> bool:
        """
        Start guided playback.

        Args:
            image_id: Image to tour, defaults to the active one

        Returns:
            True if the tour started
        """
        image_id = image_id or self.state.active_image_id
        if image_id is None or not self.tour.start(image_id):
            return False
        self._set_state(tour=self.tour.state)
        self._emit(EventType.TOUR_STARTED, image_id=image_id)
        self._emit_step()
        return True

    def next_step(self) -> bool:
        moved = self.tour.next()
        self._sync_tour()
        if moved:
            self._emit_step()
        return moved

    def prev_step(self) -> bool:
        moved = self.tour.prev()
        self._sync_tour()
        if moved:
            self._emit_step()
        return moved

    def exit_tour(self) -> bool:
        if not self.tour.exit():
            return False
        self._set_state(tour=self.tour.state)
        self._emit(EventType.TOUR_ENDED, reason="exit")
        return True

    def current_tour_step(self) -> Optional[TourStep]:
        step = self.tour.current_step()
        self._sync_tour()
        return step

    def _emit_step(self):
        step = self.tour.current_step()
        if step is not None:
            self._emit(EventType.TOUR_STEP_CHANGED, **step.to_dict())

    # Rendering

    def get_render_data(self) -> Dict[str, Any]:
        """
        Get data needed by a renderer.

        Returns:
            Dictionary with the collection, selections and tour step
        """
        step = self.current_tour_step()
        return {
            "images": self.state.images,
            "active_image": self.state.active_image,
            "active_image_id": self.state.active_image_id,
            "selected_hotspot_id": self.state.selected_hotspot_id,
            "tour_active": step is not None,
            "tour_step": step,
            "hotspot_count": count_hotspots(self.state.images),
        }
