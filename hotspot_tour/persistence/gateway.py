"""
Serialization boundary between the image collection and a blob store.
"""

import json
import logging
from gettext import gettext as _
from typing import Optional, Sequence, Tuple

from ..core.hotspots.state import Image
from ..utils.config import STORAGE_KEY
from .blob_store import BlobStore, MemoryBlobStore

logger = logging.getLogger(__name__)


def serialize_collection(images: Sequence[Image]) -> str:
    """Encode the collection as a JSON array of image records."""
    return json.dumps([img.to_dict() for img in images])


def deserialize_collection(blob: str) -> Tuple[Image, ...]:
    """
    Decode a JSON array of image records.

    Raises:
        ValueError: If the blob is not valid JSON or a record is malformed
    """
    data = json.loads(blob)
    if not isinstance(data, list):
        raise ValueError(f"Expected a list of images, got {type(data).__name__}")
    return tuple(Image.from_dict(item) for item in data)


class PersistenceGateway:
    """
    Loads and saves the image collection through a blob store.

    Failures never propagate: a broken blob loads as an empty collection,
    and a failed save is logged and dropped. The in-memory session state
    stays the source of truth.
    """

    def __init__(self, store: Optional[BlobStore] = None, key: str = STORAGE_KEY):
        """
        Initialize gateway.

        Args:
            store: Blob store backend (an isolated in-memory store if omitted)
            key: Key the collection is stored under
        """
        self.store = store if store is not None else MemoryBlobStore()
        self.key = key

    def load(self) -> Tuple[Image, ...]:
        """
        Load the stored collection.

        Returns:
            Images in stored order, or an empty tuple if nothing usable is stored
        """
        try:
            blob = self.store.load(self.key)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(_("Could not read stored collection: {error}").format(error=e))
            return ()
        if blob is None:
            return ()
        try:
            images = deserialize_collection(blob)
        except (ValueError, RecursionError) as e:
            # json.JSONDecodeError is a ValueError too
            logger.warning(_("Could not parse stored collection: {error}").format(error=e))
            return ()
        logger.debug(f"Loaded {len(images)} images from '{self.key}'")
        return images

    def save(self, images: Sequence[Image]) -> bool:
        """
        Save the collection, last write wins.

        Returns:
            True if the store accepted the write
        """
        blob = serialize_collection(images)
        try:
            self.store.save(self.key, blob)
        except (OSError, ValueError) as e:
            logger.error(_("Could not save collection: {error}").format(error=e))
            return False
        return True
