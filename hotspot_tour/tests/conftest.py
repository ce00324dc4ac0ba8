"""
Test fixtures and utilities for hotspot_tour tests.

Provides reusable fixtures for images, stores and sessions.
"""

import pytest
import numpy as np
import cv2

from hotspot_tour.utils.misc import incrf


@pytest.fixture
def id_factory():
    """Deterministic id generator: img_1, hs_2, ..."""
    counter = incrf()

    def factory(prefix):
        return f"{prefix}_{next(counter)}"

    return factory


@pytest.fixture
def test_image():
    """Create a test RGB image."""
    return np.random.randint(0, 255, (60, 80, 3), dtype=np.uint8)


@pytest.fixture
def png_bytes(test_image):
    """Test image encoded as PNG."""
    ok, encoded = cv2.imencode(".png", cv2.cvtColor(test_image, cv2.COLOR_RGB2BGR))
    assert ok
    return encoded.tobytes()


@pytest.fixture
def memory_gateway():
    """Gateway on an isolated in-memory store."""
    from hotspot_tour.persistence import MemoryBlobStore, PersistenceGateway

    return PersistenceGateway(MemoryBlobStore())


@pytest.fixture
def session(memory_gateway, id_factory):
    """Create a HotspotSession with an isolated store."""
    from hotspot_tour.core.hotspots import HotspotSession

    return HotspotSession(gateway=memory_gateway, id_factory=id_factory)


@pytest.fixture
def box():
    """A rendered image at (100, 50) of 400x200 pixels."""
    from hotspot_tour.core.hotspots import BoundingBox

    return BoundingBox(left=100, top=50, width=400, height=200)


def make_image(image_id, hotspots=(), filename=None):
    """Build an Image record with the given hotspots."""
    from hotspot_tour.core.hotspots import Image

    return Image(
        id=image_id,
        src=f"data:image/png;base64,{image_id}",
        filename=filename or f"{image_id}.png",
        hotspots=tuple(hotspots),
    )


def make_hotspot(hotspot_id, x=50.0, y=50.0, comment=""):
    from hotspot_tour.core.hotspots import Hotspot

    return Hotspot(id=hotspot_id, x=x, y=y, comment=comment)
