# viewport.py
# The two viewport policies: follow the user (idle) and fit the route
# (destination selected). Pure functions of their inputs.

from typing import Optional

from .map_config import MapConfig
from .models import Coord, Route, Span, Viewport

MAX_LAT_SPAN = 180.0
MAX_LON_SPAN = 360.0


def follow_user(location: Coord, config: Optional[MapConfig] = None) -> Viewport:
    """Center on the user with the fixed street-level span."""
    config = config or MapConfig()
    return Viewport(center=location, span=Span(config.follow_span, config.follow_span))


def fit_route(route: Route, config: Optional[MapConfig] = None) -> Viewport:
    """
    Viewport that keeps the whole route visible inside the edge padding.

    The extent is inflated so that, once the padding is taken out of the
    view, the remaining area still spans the full route. Each axis is
    clamped to config.min_route_span so very short routes do not over-zoom,
    and to the whole globe so very long ones stay displayable.

    Args:
        route:  Route to fit.
        config: MapConfig providing padding, view size and minimum span.

    Returns:
        Viewport centered on the middle of the route extent.
    """
    config = config or MapConfig()
    width, height = config.view_size
    pad = config.edge_padding

    lat_scale = height / (height - pad.top - pad.bottom)
    lon_scale = width / (width - pad.left - pad.right)

    extent = route.extent
    lat_span = min(max(extent.lat_delta * lat_scale, config.min_route_span), MAX_LAT_SPAN)
    lon_span = min(max(extent.lon_delta * lon_scale, config.min_route_span), MAX_LON_SPAN)

    return Viewport(center=extent.center, span=Span(lat_span, lon_span))
