"""Option normalization: splitting, coercion, deep-copy boundary, equality, field diff."""

from overlaysync.normalize.clone import clone_fields, clone_value
from overlaysync.normalize.coerce import (
    coerce_fields,
    to_bounds,
    to_icon,
    to_label,
    to_lnglat,
    to_mass_style,
    to_pixel,
    to_size,
)
from overlaysync.normalize.diff import (
    VISIBLE,
    apply_master_setter,
    apply_setters,
    field_changed,
    visibility_transition,
)
from overlaysync.normalize.equality import is_shallow_equal, same_value
from overlaysync.normalize.split import split_config

__all__ = [
    "VISIBLE",
    "apply_master_setter",
    "apply_setters",
    "clone_fields",
    "clone_value",
    "coerce_fields",
    "field_changed",
    "is_shallow_equal",
    "same_value",
    "split_config",
    "to_bounds",
    "to_icon",
    "to_label",
    "to_lnglat",
    "to_mass_style",
    "to_pixel",
    "to_size",
    "visibility_transition",
]
