"""
Key-value blob stores used by the persistence gateway.
"""

import logging
import os
import re
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional

logger = logging.getLogger(__name__)


class BlobStore(ABC):
    """Abstract base class for pluggable blob store backends."""

    @abstractmethod
    def load(self, key: str) -> Optional[str]:
        """Return the blob stored under ``key``, or None if there is none."""

    @abstractmethod
    def save(self, key: str, blob: str) -> None:
        """Store ``blob`` under ``key``, replacing any previous value."""


class MemoryBlobStore(BlobStore):
    """In-process store; every instance is isolated."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._blobs: Dict[str, str] = dict(initial or {})

    def load(self, key: str) -> Optional[str]:
        return self._blobs.get(key)

    def save(self, key: str, blob: str) -> None:
        self._blobs[key] = blob


class FileBlobStore(BlobStore):
    """
    Stores each key as ``<directory>/<key>.json``.

    Writes go through a temporary file in the same directory followed by
    ``os.replace`` so a crash never leaves a truncated blob behind.
    """

    _SAFE_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")

    def __init__(self, directory: Path):
        self.directory = Path(directory).expanduser()

    def path_for(self, key: str) -> Path:
        if not self._SAFE_KEY.match(key) or key.startswith("."):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self.directory / f"{key}.json"

    def load(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        if not path.exists():
            logger.debug(f"No stored blob at {path}")
            return None
        return path.read_text(encoding="utf-8")

    def save(self, key: str, blob: str) -> None:
        path = self.path_for(key)
        self.directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=str(self.directory), prefix=f".{key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(blob)
            os.replace(tmp_name, path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
        logger.debug(f"Saved {len(blob)} bytes to {path}")
