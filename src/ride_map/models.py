# models.py
# Shared value types and enums used across all modules.
# Everything here is immutable: state changes replace values, never edit them.

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional, Tuple, Union

from .errors import InvalidCoordinateError
from .geo_utils import polyline_bounds, polyline_length


# ---------------------------------------------------------------------------
# Coordinate
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Coord:
    """Immutable geographic coordinate in decimal degrees."""
    lat: float
    lon: float

    def __post_init__(self) -> None:
        if not -90.0 <= self.lat <= 90.0:
            raise InvalidCoordinateError(f"Latitude out of range: {self.lat}")
        if not -180.0 <= self.lon <= 180.0:
            raise InvalidCoordinateError(f"Longitude out of range: {self.lon}")

    def __str__(self) -> str:
        return f"({self.lat:.5f}, {self.lon:.5f})"


# ---------------------------------------------------------------------------
# Viewport geometry
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Span:
    """Angular size of the visible region, in degrees per axis."""
    lat_delta: float
    lon_delta: float

    def __post_init__(self) -> None:
        if self.lat_delta <= 0 or self.lon_delta <= 0:
            raise ValueError(f"Span deltas must be positive: {self.lat_delta}, {self.lon_delta}")


@dataclass(frozen=True)
class Viewport:
    """Visible map region."""
    center: Coord
    span: Span


@dataclass(frozen=True)
class BoundingExtent:
    """Axis-aligned lat/lon box around a route."""
    min_lat: float
    min_lon: float
    max_lat: float
    max_lon: float

    @property
    def center(self) -> Coord:
        return Coord((self.min_lat + self.max_lat) / 2, (self.min_lon + self.max_lon) / 2)

    @property
    def lat_delta(self) -> float:
        return self.max_lat - self.min_lat

    @property
    def lon_delta(self) -> float:
        return self.max_lon - self.min_lon


@dataclass(frozen=True)
class EdgePadding:
    """Insets, in device-independent points, kept clear around a fitted route."""
    top: float = 64.0
    left: float = 32.0
    bottom: float = 500.0
    right: float = 32.0


# ---------------------------------------------------------------------------
# Presentation
# ---------------------------------------------------------------------------

class ViewMode(Enum):
    IDLE                 = "idle"
    DESTINATION_SELECTED = "destination_selected"


@dataclass(frozen=True)
class Destination:
    """
    A selected destination.

    selection_id grows with every selection, so picking the same place twice
    still yields two different destinations.
    """
    coord: Coord
    label: str
    selection_id: int


@dataclass(frozen=True)
class OverlayStyle:
    """How the route polyline is stroked."""
    stroke_color: str = "systemBlue"
    line_width: float = 6.0


@dataclass(frozen=True)
class MapOptions:
    """Static map behaviour, sent to the renderer once at start."""
    rotate_enabled: bool = False
    shows_user_location: bool = True
    follows_user: bool = True


# ---------------------------------------------------------------------------
# Routing results
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Route:
    """A computed path: ordered polyline plus its bounding extent."""
    polyline: Tuple[Coord, ...]
    extent: BoundingExtent
    distance_m: Optional[float] = None
    duration_s: Optional[float] = None

    def __post_init__(self) -> None:
        if len(self.polyline) < 2:
            raise ValueError(f"A route needs at least 2 points, got {len(self.polyline)}")

    @classmethod
    def from_polyline(
        cls,
        points: Iterable[Coord],
        distance_m: Optional[float] = None,
        duration_s: Optional[float] = None,
    ) -> "Route":
        polyline = tuple(points)
        if len(polyline) < 2:
            raise ValueError(f"A route needs at least 2 points, got {len(polyline)}")
        points_ll = [(c.lat, c.lon) for c in polyline]
        min_lat, min_lon, max_lat, max_lon = polyline_bounds(points_ll)
        if distance_m is None:
            distance_m = polyline_length(points_ll)
        return cls(
            polyline=polyline,
            extent=BoundingExtent(min_lat, min_lon, max_lat, max_lon),
            distance_m=distance_m,
            duration_s=duration_s,
        )

    @property
    def origin(self) -> Coord:
        return self.polyline[0]

    @property
    def end(self) -> Coord:
        return self.polyline[-1]


@dataclass(frozen=True)
class RouteFailure:
    """Returned by a RouteService instead of a Route."""
    reason: str = field(default="No route found.")

    def __str__(self) -> str:
        return self.reason


RouteOutcome = Union[Route, RouteFailure]
