"""
Interfaces module - adapters around the hotspot core.

Provides the image source producer (uploads to image records) and a
renderer adapter connecting the core session to a front end.
"""

from .renderer_adapter import RendererAdapter
from .image_source import acquire_images, read_image_source, decode_image_source

__all__ = ['RendererAdapter', 'acquire_images', 'read_image_source', 'decode_image_source']
