"""Overlay adapters, one per engine overlay type."""

from overlaysync.overlays.base import BaseOverlayAdapter
from overlaysync.overlays.factory import create_adapter, register, registered_names
from overlaysync.overlays.info_window import InfoWindowAdapter
from overlaysync.overlays.map import MapAdapter
from overlaysync.overlays.marker import MarkerAdapter
from overlaysync.overlays.mass_marks import MassMarksAdapter
from overlaysync.overlays.path_navigator import PathNavigatorAdapter
from overlaysync.overlays.path_simplifier import PathSimplifierAdapter
from overlaysync.overlays.shapes import BezierCurveAdapter, CircleAdapter, PolygonAdapter, PolylineAdapter, ShapeAdapter
from overlaysync.overlays.traffic import TileLayerTrafficAdapter
from overlaysync.overlays.visual_layer import VisualLayerAdapter

__all__ = [
    "BaseOverlayAdapter",
    "BezierCurveAdapter",
    "CircleAdapter",
    "InfoWindowAdapter",
    "MapAdapter",
    "MarkerAdapter",
    "MassMarksAdapter",
    "PathNavigatorAdapter",
    "PathSimplifierAdapter",
    "PolygonAdapter",
    "PolylineAdapter",
    "ShapeAdapter",
    "TileLayerTrafficAdapter",
    "VisualLayerAdapter",
    "create_adapter",
    "register",
    "registered_names",
]
