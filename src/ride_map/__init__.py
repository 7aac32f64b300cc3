"""Coordination core of an interactive map screen.

Keeps the map presentation (idle follow-user view or a destination with its
route) consistent while location fixes, destination picks and slow route
answers arrive in any order.
"""

from .coordinator import MapCoordinator
from .location_tracker import LocationTracker, load_track
from .map_config import MapConfig
from .models import (
    BoundingExtent,
    Coord,
    Destination,
    EdgePadding,
    MapOptions,
    OverlayStyle,
    Route,
    RouteFailure,
    Span,
    ViewMode,
    Viewport,
)
from .presentation_state import MapPresentationState
from .renderer import LoggingRenderer, MapRenderer
from .route_service import GraphRouteService, OsrmRouteService, RouteService

__all__ = [
    "BoundingExtent",
    "Coord",
    "Destination",
    "EdgePadding",
    "GraphRouteService",
    "LocationTracker",
    "LoggingRenderer",
    "MapConfig",
    "MapCoordinator",
    "MapOptions",
    "MapPresentationState",
    "MapRenderer",
    "OsrmRouteService",
    "OverlayStyle",
    "Route",
    "RouteFailure",
    "RouteService",
    "Span",
    "ViewMode",
    "Viewport",
    "load_track",
]
