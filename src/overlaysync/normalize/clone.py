"""Deep-copy boundary between caller configuration and the engine.

The engine mutates some of the nested values it receives (coordinate paths,
positions, point datasets). Whitelisted fields are deep-copied right before
each construct/update call so the caller's configuration never changes
underneath it.
"""

from __future__ import annotations

import copy
from collections.abc import Iterable, Mapping
from typing import Any


def clone_value(value: Any) -> Any:
    if value is None or isinstance(value, (str, bytes, int, float, bool)):
        return value
    return copy.deepcopy(value)


def clone_fields(options: Mapping[str, Any], fields: Iterable[str] | None = None) -> dict[str, Any]:
    """Return a copy of *options* with *fields* deep-copied.

    Fields outside the whitelist are shared by reference. With ``fields=None``
    every value is deep-copied.
    """
    if fields is None:
        return {key: clone_value(value) for key, value in options.items()}

    cloned = dict(options)
    for key in fields:
        if key in cloned:
            cloned[key] = clone_value(cloned[key])
    return cloned
