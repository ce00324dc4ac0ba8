"""
Identifier generation for images and hotspots.

Identifiers are a prefix plus a short random base-36 suffix. Collisions are
unlikely at annotation-tool scale but not impossible; callers that need
stronger guarantees can inject their own factory into the session.
"""

import random
import string
from typing import Callable

ALPHABET = string.digits + string.ascii_lowercase
SUFFIX_LENGTH = 7

IdFactory = Callable[[str], str]


def generate_id(prefix: str = "id") -> str:
    """Return ``<prefix>_<random suffix>``."""
    suffix = "".join(random.choices(ALPHABET, k=SUFFIX_LENGTH))
    return f"{prefix}_{suffix}"
