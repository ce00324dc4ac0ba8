"""
Operations on one image's hotspot sequence.

Every function returns a new tuple and leaves its input untouched, so a
changed sequence always means a changed identity for the owning image.
"""

import logging
from dataclasses import replace
from typing import Optional, Sequence, Tuple

from .coords import round_percent
from .ids import IdFactory, generate_id
from .state import Hotspot

logger = logging.getLogger(__name__)

Hotspots = Tuple[Hotspot, ...]


def create_hotspot(
    x: float,
    y: float,
    comment: str = "",
    prefix: str = "hs",
    id_factory: IdFactory = generate_id,
) -> Hotspot:
    """Create a hotspot with a fresh id and coordinates rounded to 2 decimals."""
    return Hotspot(
        id=id_factory(prefix),
        x=round_percent(x),
        y=round_percent(y),
        comment=comment,
    )


def find_hotspot(hotspots: Sequence[Hotspot], hotspot_id: Optional[str]) -> Optional[Hotspot]:
    for hotspot in hotspots:
        if hotspot.id == hotspot_id:
            return hotspot
    return None


def add_hotspot(
    hotspots: Sequence[Hotspot], hotspot: Hotspot, locked: bool = False
) -> Hotspots:
    """
    Append a hotspot.

    Args:
        hotspots: Current sequence
        hotspot: Hotspot to append
        locked: True while a guided tour runs; placement is then refused

    Returns:
        New sequence (unchanged if locked or the id is already present)
    """
    if locked:
        logger.debug("Ignoring hotspot placement while a tour is active")
        return tuple(hotspots)
    if find_hotspot(hotspots, hotspot.id) is not None:
        logger.debug(f"Hotspot {hotspot.id} already present, not adding it twice")
        return tuple(hotspots)
    return (*hotspots, hotspot)


def update_comment(hotspots: Sequence[Hotspot], hotspot_id: str, text: str) -> Hotspots:
    """Replace the comment of the matching hotspot; no-op if not found."""
    return tuple(
        replace(h, comment=text) if h.id == hotspot_id else h for h in hotspots
    )


def remove_hotspot(hotspots: Sequence[Hotspot], hotspot_id: str) -> Hotspots:
    """Remove the matching hotspot; no-op if not found."""
    return tuple(h for h in hotspots if h.id != hotspot_id)
