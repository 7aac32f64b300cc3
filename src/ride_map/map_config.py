# map_config.py
# All tuneable constants in one place.
# Pass a MapConfig instance to every module that needs settings.

from dataclasses import dataclass, field
from typing import Tuple

from .models import EdgePadding, MapOptions, OverlayStyle


# ---------------------------------------------------------------------------
# Road type constants (used by OSM parser)
# ---------------------------------------------------------------------------

ROUTABLE_TYPES: frozenset = frozenset({
    'motorway', 'motorway_link', 'trunk', 'trunk_link',
    'primary', 'primary_link', 'secondary', 'secondary_link',
    'tertiary', 'tertiary_link', 'residential', 'living_street',
    'service', 'unclassified', 'road',
})

FORBIDDEN_TYPES: frozenset = frozenset({'construction', 'proposed', 'footway', 'steps'})

SLOW_TYPES: frozenset = frozenset({'service', 'living_street'})

TRAVEL_SPEED_KMH: float = 30.0  # km/h, urban driving


# ---------------------------------------------------------------------------
# Main config
# ---------------------------------------------------------------------------

@dataclass
class MapConfig:
    # Viewport
    follow_span: float = 0.05              # degrees per axis around the user
    min_route_span: float = 0.005          # never zoom in closer than this on a route
    edge_padding: EdgePadding = field(default_factory=EdgePadding)
    view_size: Tuple[float, float] = (390.0, 844.0)   # (width, height) in points

    # Presentation
    destination_title: str = "Destination"
    overlay_style: OverlayStyle = field(default_factory=OverlayStyle)
    map_options: MapOptions = field(default_factory=MapOptions)

    # Local graph routing
    travel_speed_kmh: float = TRAVEL_SPEED_KMH
    slow_road_penalty: float = 2.0         # multiplier for SLOW_TYPES
    max_snap_distance_m: float = 500.0     # coordinate → nearest graph node

    # OSRM routing
    osrm_base_url: str = "https://router.project-osrm.org"
    osrm_profile: str = "driving"
    osrm_timeout_s: float = 6.0

    # Location replay
    location_replay_interval_s: float = 0.5

    def __post_init__(self) -> None:
        if self.follow_span <= 0 or self.min_route_span <= 0:
            raise ValueError("Viewport spans must be positive.")
        width, height = self.view_size
        pad = self.edge_padding
        if width - pad.left - pad.right <= 0 or height - pad.top - pad.bottom <= 0:
            raise ValueError(
                f"Edge padding {pad} leaves no drawable area in a {width}x{height} view."
            )
