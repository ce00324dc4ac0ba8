import logging
from gettext import gettext as _
from typing import Any, Dict, Iterator, List, Tuple

from easydict import EasyDict as edict

logger = logging.getLogger(__name__)

ENV_PREFIX = "HOTSPOT_"
TRUE_VALUES = {"1", "true", "yes", "on"}


def iter_env_overrides(env: Dict[str, Any]) -> Iterator[Tuple[List[str], Any]]:
    """Yield ``(key path, raw value)`` for every ``HOTSPOT_`` variable."""
    for name, value in env.items():
        if not name.startswith(ENV_PREFIX):
            continue
        path = name[len(ENV_PREFIX):].split("__")
        if all(path):
            yield path, value
        else:
            logger.warning(_("Ignoring malformed configuration variable {name}").format(name=name))


def coerce_value(raw: Any, current: Any) -> Any:
    """
    Convert an environment string to the type of the value it replaces.

    Unknown keys and non-string input are kept as given.
    """
    if not isinstance(raw, str) or current is None or isinstance(current, str):
        return raw
    if isinstance(current, bool):
        return raw.strip().lower() in TRUE_VALUES
    if isinstance(current, (int, float)):
        try:
            return type(current)(raw)
        except ValueError:
            raise ValueError(
                _("Configuration entry expects {kind}, got {raw!r}").format(
                    kind=type(current).__name__, raw=raw
                )
            ) from None
    return raw


def load_cfg_from_env(cfg: edict, env: Dict[str, Any]) -> edict:
    """Apply ``HOTSPOT_section__key=value`` overrides onto ``cfg`` in place."""
    for path, raw in iter_env_overrides(env):
        *parents, leaf = path
        node = cfg
        for part in parents:
            if not isinstance(node.get(part), dict):
                node[part] = edict()
            node = node[part]
        value = coerce_value(raw, node.get(leaf))
        logger.warning(
            _("Changing configuration entry from environment variable: {k}={v}").format(
                k=".".join(path), v=value
            )
        )
        node[leaf] = value
    return cfg
