"""
Configuration for hotspot sessions.

Defaults live in a nested EasyDict tree that can be overridden from the
environment (``HOTSPOT_storage__directory=/tmp/hs`` and friends).
"""

import os
from pathlib import Path
from typing import Dict, Optional

from easydict import EasyDict as edict

from .env import load_cfg_from_env

STORAGE_KEY = "hotspot_poc_v1"


def default_config() -> edict:
    """Build a fresh configuration tree with the default values."""
    return edict(
        storage=edict(
            key=STORAGE_KEY,
            directory=str(Path.home() / ".local" / "share" / "hotspot_tour"),
        ),
        ids=edict(
            image_prefix="img",
            hotspot_prefix="hs",
        ),
        render=edict(
            marker_radius=8,
        ),
    )


def load_config(env: Optional[Dict[str, str]] = None) -> edict:
    """
    Build the configuration and apply environment overrides.

    Args:
        env: Mapping of environment variables, defaults to ``os.environ``

    Returns:
        Configuration tree
    """
    if env is None:
        env = dict(os.environ)
    return load_cfg_from_env(default_config(), env)
