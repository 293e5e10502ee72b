"""Value-gated field diffing shared by every overlay adapter."""

from __future__ import annotations

from collections.abc import Collection, Mapping
from typing import Any

from overlaysync.contracts.overlay import OptionsSnapshot
from overlaysync.normalize.equality import is_shallow_equal

VISIBLE = "visible"


def field_changed(previous: OptionsSnapshot, current: OptionsSnapshot, name: str) -> bool:
    """True when *name* is present in *current* and differs by value from *previous*.

    An omitted field never counts as a change; comparison runs on the raw
    (pre-coercion) values because coercion allocates fresh engine objects.
    """
    if name not in current.raw:
        return False
    if name not in previous.raw:
        return True
    return not is_shallow_equal(previous.raw[name], current.raw[name])


def visibility_transition(previous: OptionsSnapshot, current: OptionsSnapshot) -> bool | None:
    """``True`` to show, ``False`` to hide, ``None`` when nothing should happen."""
    before = previous.raw.get(VISIBLE)
    after = current.raw.get(VISIBLE)
    if before is True and after is False:
        return False
    if before is False and after is True:
        return True
    return None


def apply_setters(host: Any, previous: OptionsSnapshot, current: OptionsSnapshot, setters: Mapping[str, str]) -> list[str]:
    """Call ``host.<setter>(value)`` for each changed field; return the fields touched."""
    changed: list[str] = []
    for name, method in setters.items():
        if field_changed(previous, current, name):
            getattr(host, method)(current.coerced.get(name))
            changed.append(name)
    return changed


def apply_master_setter(
    host: Any,
    previous: OptionsSnapshot,
    current: OptionsSnapshot,
    method: str,
    *,
    exclude: Collection[str] = (VISIBLE,),
) -> bool:
    """Issue one ``host.<method>(options)`` call if any field changed by value."""
    names = [name for name in current.raw if name not in exclude]
    if not any(field_changed(previous, current, name) for name in names):
        return False
    getattr(host, method)({name: value for name, value in current.coerced.items() if name not in exclude})
    return True
