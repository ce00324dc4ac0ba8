"""
Operations on the ordered image collection.

The collection is a plain container. Which image is active, or touring,
is tracked by the caller; these helpers only report what the caller
should do about it.
"""

from dataclasses import replace
from typing import Iterable, Optional, Sequence, Tuple

from .state import Hotspot, Image

Images = Tuple[Image, ...]


def find_image(images: Sequence[Image], image_id: Optional[str]) -> Optional[Image]:
    for image in images:
        if image.id == image_id:
            return image
    return None


def add_images(
    images: Sequence[Image], new_images: Iterable[Image]
) -> Tuple[Images, Optional[str]]:
    """
    Append a batch of images.

    Returns:
        (new collection, id of the image that becomes implicitly active).
        The second item is only set when the collection was empty before
        and the batch is not.
    """
    new_images = tuple(new_images)
    merged = (*images, *new_images)
    activate = new_images[0].id if not images and new_images else None
    return merged, activate


def update_image(images: Sequence[Image], new_image: Image) -> Images:
    """Replace the entry with the same id; no-op if not found."""
    return tuple(new_image if img.id == new_image.id else img for img in images)


def remove_image(images: Sequence[Image], image_id: str) -> Images:
    """Remove the entry with the given id; no-op if not found."""
    return tuple(img for img in images if img.id != image_id)


def replace_hotspots(
    images: Sequence[Image], image_id: str, hotspots: Sequence[Hotspot]
) -> Images:
    """Swap in a new hotspot sequence for one image."""
    image = find_image(images, image_id)
    if image is None:
        return tuple(images)
    return update_image(images, replace(image, hotspots=tuple(hotspots)))


def count_hotspots(images: Sequence[Image]) -> int:
    return sum(len(img.hotspots) for img in images)
