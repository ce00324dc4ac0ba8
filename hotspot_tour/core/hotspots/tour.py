"""
Tour state machine for guided playback of an image's hotspots.

States are ``Inactive`` (``TourState.image_id is None``) and
``Active(image_id, step_index)``. Transitions are pure functions of the
current state and the hotspot count of the tour image; ``TourStateMachine``
bundles them with a read-only view of the collection.
"""

import logging
from dataclasses import dataclass, replace
from gettext import gettext as _
from typing import Callable, Optional, Sequence

from .state import Hotspot, TourState

logger = logging.getLogger(__name__)

INACTIVE = TourState()


def start_tour(state: TourState, image_id: str, count: int) -> TourState:
    """Start (or restart) on ``image_id``; rejected when it has no hotspots."""
    if count <= 0:
        logger.debug(f"Refusing to start a tour on {image_id}: no hotspots")
        return state
    return TourState(image_id=image_id, step_index=0)


def next_step(state: TourState, count: int) -> TourState:
    if not state.is_active:
        return state
    return replace(state, step_index=min(state.step_index + 1, max(count - 1, 0)))


def prev_step(state: TourState, count: int) -> TourState:
    if not state.is_active:
        return state
    return replace(state, step_index=max(state.step_index - 1, 0))


def exit_tour(state: TourState) -> TourState:
    return INACTIVE


def image_changed(state: TourState, image_id: Optional[str]) -> TourState:
    """Reset the pending step when the active image changes outside a tour."""
    if state.is_active:
        return state
    return replace(state, step_index=0)


def reconcile(state: TourState, count: Optional[int]) -> TourState:
    """
    Bring an active tour back in line with its image's hotspot sequence.

    Args:
        state: Current tour state
        count: Number of hotspots on the tour image, None if the image is gone

    Returns:
        Clamped state, or the inactive state if nothing is left to show
    """
    if not state.is_active:
        return state
    if not count:
        logger.debug(f"Ending tour on {state.image_id}: no hotspots left")
        return INACTIVE
    if state.step_index >= count:
        return replace(state, step_index=count - 1)
    if state.step_index < 0:
        return replace(state, step_index=0)
    return state


@dataclass(frozen=True)
class TourStep:
    """What a renderer needs to show for the current step."""

    image_id: str
    step_index: int
    step_count: int
    hotspot: Hotspot

    @property
    def is_first(self) -> bool:
        return self.step_index == 0

    @property
    def is_last(self) -> bool:
        return self.step_index == self.step_count - 1

    @property
    def label(self) -> str:
        return _("Step {current} / {total}").format(
            current=self.step_index + 1, total=self.step_count
        )

    @property
    def description(self) -> str:
        return self.hotspot.comment or _("No description provided.")

    def to_dict(self):
        return {
            "image_id": self.image_id,
            "step_index": self.step_index,
            "step_count": self.step_count,
            "hotspot": self.hotspot.to_dict(),
            "label": self.label,
            "description": self.description,
            "is_first": self.is_first,
            "is_last": self.is_last,
        }


HotspotLookup = Callable[[str], Optional[Sequence[Hotspot]]]


class TourStateMachine:
    """
    Tracks the guided tour over a live hotspot collection.

    The machine never mutates the collection. It reads it through
    ``hotspots_for`` and reconciles before every read and transition, so
    hotspots deleted mid-tour clamp the step index or end the tour.
    """

    def __init__(self, hotspots_for: HotspotLookup, state: TourState = INACTIVE):
        """
        Args:
            hotspots_for: Returns the current hotspot sequence of an image,
                or None if the image does not exist
            state: Initial state
        """
        self._hotspots_for = hotspots_for
        self._state = state

    def _count(self, image_id: Optional[str]) -> Optional[int]:
        if image_id is None:
            return None
        hotspots = self._hotspots_for(image_id)
        return None if hotspots is None else len(hotspots)

    def _sync(self) -> TourState:
        self._state = reconcile(self._state, self._count(self._state.image_id))
        return self._state

    @property
    def state(self) -> TourState:
        return self._sync()

    @property
    def is_active(self) -> bool:
        return self._sync().is_active

    def start(self, image_id: str) -> bool:
        """Returns True if the tour is running on ``image_id`` afterwards."""
        self._state = start_tour(self._sync(), image_id, self._count(image_id) or 0)
        return self._state.image_id == image_id

    def next(self) -> bool:
        """Returns True if the step index moved."""
        before = self._sync()
        self._state = next_step(before, self._count(before.image_id) or 0)
        return self._state != before

    def prev(self) -> bool:
        """Returns True if the step index moved."""
        before = self._sync()
        self._state = prev_step(before, self._count(before.image_id) or 0)
        return self._state != before

    def reconcile(self, count: Optional[int]) -> TourState:
        """Reconcile against a hotspot count the collection is about to have."""
        self._state = reconcile(self._state, count)
        return self._state

    def exit(self) -> bool:
        """Returns True if a tour was running."""
        was_active = self._state.is_active
        self._state = exit_tour(self._state)
        return was_active

    def image_changed(self, image_id: Optional[str]):
        self._state = image_changed(self._sync(), image_id)

    def current_step(self) -> Optional[TourStep]:
        state = self._sync()
        if not state.is_active:
            return None
        hotspots = self._hotspots_for(state.image_id)
        return TourStep(
            image_id=state.image_id,
            step_index=state.step_index,
            step_count=len(hotspots),
            hotspot=hotspots[state.step_index],
        )
