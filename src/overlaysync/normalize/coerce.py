"""Tuple-shorthand coercion into engine value objects.

Every coercer is idempotent: a value that already is the engine type is
returned unchanged, so ``coerce(coerce(x))`` is ``coerce(x)``.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from typing import Any

Coercer = Callable[[Any, Any], Any]


def _is_tuple_shorthand(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


def to_pixel(engine: Any, value: Any, default: tuple[float, float] | None = None) -> Any:
    if isinstance(value, engine.Pixel):
        return value
    if _is_tuple_shorthand(value):
        return engine.Pixel(*value)
    if default is not None:
        return engine.Pixel(*default)
    return value


def to_size(engine: Any, value: Any) -> Any:
    if isinstance(value, engine.Size):
        return value
    if _is_tuple_shorthand(value):
        return engine.Size(*value)
    return value


def to_lnglat(engine: Any, value: Any) -> Any:
    if isinstance(value, engine.LngLat):
        return value
    if _is_tuple_shorthand(value):
        return engine.LngLat(*value)
    return value


def to_bounds(engine: Any, value: Any) -> Any:
    """``[[south_west], [north_east]]`` -> ``engine.Bounds``."""
    if isinstance(value, engine.Bounds):
        return value
    if _is_tuple_shorthand(value):
        south_west, north_east = value
        return engine.Bounds(to_lnglat(engine, south_west), to_lnglat(engine, north_east))
    return value


def to_icon(engine: Any, value: Any) -> Any:
    """Icon options or an image URL -> ``engine.Icon``; ``None`` clears the icon."""
    if value is None:
        return None
    if isinstance(value, engine.Icon) or isinstance(value, str):
        return value
    if isinstance(value, Mapping):
        return engine.Icon(
            {
                "image": value.get("image"),
                "image_offset": to_pixel(engine, value.get("image_offset"), (0, 0)),
                "image_size": to_size(engine, value.get("image_size")),
                "size": to_size(engine, value.get("size")),
            }
        )
    return value


def to_label(engine: Any, value: Any) -> Any:
    """Label options with a coerced ``offset``; ``None`` clears the label."""
    if value is None:
        return None
    if isinstance(value, Mapping):
        return {**value, "offset": to_pixel(engine, value.get("offset"), (0, 0))}
    return value


def _mass_style(engine: Any, style: Mapping[str, Any]) -> dict[str, Any]:
    return {
        **style,
        "anchor": to_pixel(engine, style.get("anchor")),
        "size": to_size(engine, style.get("size")),
    }


def to_mass_style(engine: Any, value: Any) -> Any:
    """A single style or a list of styles with coerced ``anchor`` and ``size``."""
    if isinstance(value, Mapping):
        return _mass_style(engine, value)
    if _is_tuple_shorthand(value):
        return [_mass_style(engine, style) for style in value]
    return value


def coerce_fields(engine: Any, options: Mapping[str, Any], coercers: Mapping[str, Coercer]) -> dict[str, Any]:
    """Apply *coercers* to the fields present in *options*."""
    coerced = dict(options)
    for name, coercer in coercers.items():
        if name in coerced:
            coerced[name] = coercer(engine, coerced[name])
    return coerced
