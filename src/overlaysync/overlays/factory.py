"""Factory for creating overlay adapters by name.

Lets declarative configs name their overlay type (``"Marker"``,
``"Polygon"``, ...) without importing the concrete adapter classes.
"""

from __future__ import annotations

from overlaysync.contracts.exceptions import UnknownOverlayError
from overlaysync.contracts.overlay import OverlayAdapter
from overlaysync.overlays.info_window import InfoWindowAdapter
from overlaysync.overlays.map import MapAdapter
from overlaysync.overlays.marker import MarkerAdapter
from overlaysync.overlays.mass_marks import MassMarksAdapter
from overlaysync.overlays.path_navigator import PathNavigatorAdapter
from overlaysync.overlays.path_simplifier import PathSimplifierAdapter
from overlaysync.overlays.shapes import BezierCurveAdapter, CircleAdapter, PolygonAdapter, PolylineAdapter
from overlaysync.overlays.traffic import TileLayerTrafficAdapter
from overlaysync.overlays.visual_layer import VisualLayerAdapter

# Registry mapping overlay type names to adapter classes
_REGISTRY: dict[str, type[OverlayAdapter]] = {}


def register(name: str, adapter_cls: type[OverlayAdapter]) -> None:
    """Register an adapter class under *name*, replacing any previous entry."""
    _REGISTRY[name] = adapter_cls


def registered_names() -> list[str]:
    return sorted(_REGISTRY)


def create_adapter(name: str) -> OverlayAdapter:
    """Create a fresh adapter instance by name.

    Raises:
        UnknownOverlayError: If *name* is not registered.
    """
    adapter_cls = _REGISTRY.get(name)
    if adapter_cls is None:
        available = ", ".join(registered_names()) or "(none registered)"
        raise UnknownOverlayError(f"Unknown overlay: {name!r}. Available: {available}")
    return adapter_cls()


for _adapter_cls in (
    MapAdapter,
    MarkerAdapter,
    InfoWindowAdapter,
    PolygonAdapter,
    PolylineAdapter,
    BezierCurveAdapter,
    CircleAdapter,
    MassMarksAdapter,
    TileLayerTrafficAdapter,
    VisualLayerAdapter,
    PathSimplifierAdapter,
    PathNavigatorAdapter,
):
    register(_adapter_cls.name, _adapter_cls)
