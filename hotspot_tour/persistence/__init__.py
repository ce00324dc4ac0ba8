"""
Persistence module - saving and restoring the image collection.

The core never talks to storage directly; it goes through a
``PersistenceGateway`` wrapping any ``BlobStore`` backend.
"""

from .blob_store import BlobStore, MemoryBlobStore, FileBlobStore
from .gateway import PersistenceGateway, serialize_collection, deserialize_collection

__all__ = [
    "BlobStore",
    "MemoryBlobStore",
    "FileBlobStore",
    "PersistenceGateway",
    "serialize_collection",
    "deserialize_collection",
]
