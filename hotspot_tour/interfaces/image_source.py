"""
Image source producer.

Turns raw uploaded bytes into ``Image`` records whose ``src`` is a
self-contained ``data:`` URI. Decoding runs in an executor so a batch of
uploads is acquired concurrently and merged into a single batch.
"""

import asyncio
import base64
import binascii
import logging
import mimetypes
from gettext import gettext as _
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

import cv2
import numpy as np

from ..core.hotspots.ids import IdFactory, generate_id
from ..core.hotspots.state import Image

logger = logging.getLogger(__name__)

DEFAULT_MIME = "image/png"


def decode_image_bytes(data: bytes) -> np.ndarray:
    """
    Decode encoded image bytes into an RGB array.

    Raises:
        ValueError: If the bytes are not a decodable image
    """
    if not data:
        raise ValueError("Image data is empty")
    buffer = np.frombuffer(data, np.uint8)
    img = cv2.imdecode(buffer, cv2.IMREAD_COLOR)
    if img is None:
        raise ValueError("Image data could not be decoded")
    return cv2.cvtColor(img, cv2.COLOR_BGR2RGB)


def guess_mime_type(filename: str) -> str:
    mime, _encoding = mimetypes.guess_type(filename)
    if mime is None or not mime.startswith("image/"):
        return DEFAULT_MIME
    return mime


def to_data_uri(data: bytes, mime: str) -> str:
    return f"data:{mime};base64,{base64.b64encode(data).decode('ascii')}"


def decode_image_source(src: str) -> np.ndarray:
    """
    Decode an image ``src`` (a base64 ``data:`` URI) into an RGB array.

    Raises:
        ValueError: If ``src`` is not a base64 data URI holding an image
    """
    header, sep, payload = src.partition(",")
    if not sep or not header.startswith("data:") or not header.endswith(";base64"):
        raise ValueError("Image source is not a base64 data URI")
    try:
        data = base64.b64decode(payload, validate=True)
    except binascii.Error as e:
        raise ValueError(f"Invalid base64 payload: {e}") from e
    return decode_image_bytes(data)


def read_image_source(
    data: bytes,
    filename: str,
    prefix: str = "img",
    id_factory: IdFactory = generate_id,
) -> Image:
    """
    Build an image record from uploaded bytes.

    Args:
        data: Encoded image file contents
        filename: Original file name, kept for display
        prefix: Prefix for the generated image id
        id_factory: Id generator

    Returns:
        Image without hotspots

    Raises:
        ValueError: If the bytes are not a decodable image
    """
    decode_image_bytes(data)
    return Image(
        id=id_factory(prefix),
        src=to_data_uri(data, guess_mime_type(filename)),
        filename=filename,
    )


async def acquire_images(
    files: Iterable[Tuple[str, bytes]],
    prefix: str = "img",
    id_factory: IdFactory = generate_id,
) -> List[Image]:
    """
    Acquire a batch of uploads concurrently.

    Args:
        files: (filename, contents) pairs

    Returns:
        Images in input order; files that fail to decode are skipped
    """
    loop = asyncio.get_running_loop()

    async def acquire(filename: str, data: bytes) -> Optional[Image]:
        try:
            return await loop.run_in_executor(
                None, read_image_source, data, filename, prefix, id_factory
            )
        except ValueError as e:
            logger.warning(
                _("Skipping {filename}: {error}").format(filename=filename, error=e)
            )
            return None

    results = await asyncio.gather(*(acquire(name, data) for name, data in files))
    return [img for img in results if img is not None]


def load_image_files(paths: Iterable[Path]) -> List[Tuple[str, bytes]]:
    """Read image files from disk as (filename, contents) pairs."""
    files = []
    for path in paths:
        path = Path(path)
        if not path.is_file():
            logger.warning(_("Skipping {path}: not a file").format(path=path))
            continue
        files.append((path.name, path.read_bytes()))
    return files
