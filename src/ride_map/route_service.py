# route_service.py
# Directions providers. Every provider answers compute_route(origin, destination)
# with a Route or a RouteFailure; failures are returned, not raised.

import asyncio
import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

import httpx

from .errors import RoutingError
from .map_config import MapConfig
from .models import Coord, Route, RouteFailure, RouteOutcome
from .osm_parser import RoutingDB
from .route_calculator import RouteCalculator

logger = logging.getLogger(__name__)


class RouteService(ABC):
    """
    Stateless, reentrant directions provider.

    Concurrent calls are allowed and independent of each other.
    """

    @abstractmethod
    async def compute_route(self, origin: Coord, destination: Coord) -> RouteOutcome:
        """
        Compute one route from origin to destination.

        Returns:
            Route on success, RouteFailure with a readable reason otherwise.
        """

    async def aclose(self) -> None:
        """Release any held resources."""


# ---------------------------------------------------------------------------
# Local graph routing
# ---------------------------------------------------------------------------

class GraphRouteService(RouteService):
    """
    A* routing over an in-memory RoutingDB.

    The search is CPU-bound, so it runs in a worker thread and the event
    loop keeps handling location and selection events meanwhile.

    Args:
        db:     RoutingDB from osm_parser.load_map() or graph_to_routing_db().
        config: MapConfig instance.
    """

    def __init__(self, db: RoutingDB, config: Optional[MapConfig] = None) -> None:
        self.config = config or MapConfig()
        self._calculator = RouteCalculator(db, self.config)

    async def compute_route(self, origin: Coord, destination: Coord) -> RouteOutcome:
        logger.info(f"Calculating route: {origin} -> {destination}")
        polyline, distance_m, msg = await asyncio.to_thread(
            self._calculator.calculate, origin, destination
        )
        if not polyline:
            logger.warning(f"Route calculation failed: {msg}")
            return RouteFailure(msg)

        speed_ms = self.config.travel_speed_kmh * 1000 / 3600
        route = Route.from_polyline(polyline, distance_m=distance_m, duration_s=distance_m / speed_ms)
        logger.info(f"Route ready: {len(polyline)} points, {int(distance_m)} m.")
        return route


# ---------------------------------------------------------------------------
# OSRM HTTP routing
# ---------------------------------------------------------------------------

def _parse_geometry(coords: List[List[float]]) -> List[Coord]:
    # GeoJSON order is [lon, lat]
    return [Coord(float(lat), float(lon)) for lon, lat in coords]


class OsrmRouteService(RouteService):
    """
    Routes through an OSRM server's /route/v1 endpoint.

    Args:
        config: MapConfig providing base URL, profile and timeout.
        client: Optional pre-built httpx.AsyncClient (tests inject one with a
                MockTransport). A client created here is closed by aclose().
    """

    def __init__(
        self,
        config: Optional[MapConfig] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.config = config or MapConfig()
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=self.config.osrm_timeout_s)

    def _url(self, origin: Coord, destination: Coord) -> str:
        base = self.config.osrm_base_url.rstrip("/")
        return (
            f"{base}/route/v1/{self.config.osrm_profile}/"
            f"{origin.lon},{origin.lat};{destination.lon},{destination.lat}"
        )

    async def _fetch(self, origin: Coord, destination: Coord) -> Dict[str, Any]:
        params = {
            "alternatives": "false",
            "geometries": "geojson",
            "overview": "full",
            "steps": "false",
        }
        try:
            resp = await self._client.get(self._url(origin, destination), params=params)
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise RoutingError(f"Directions server answered {e.response.status_code}.") from e
        except httpx.HTTPError as e:
            raise RoutingError(f"Directions server unreachable: {e}") from e
        try:
            return resp.json()
        except ValueError as e:
            raise RoutingError("Directions server sent an unreadable response.") from e

    async def compute_route(self, origin: Coord, destination: Coord) -> RouteOutcome:
        started = time.perf_counter()
        try:
            data = await self._fetch(origin, destination)
        except RoutingError as e:
            logger.warning(f"OSRM route fetch failed: {e}")
            return RouteFailure(str(e))

        if data.get("code") != "Ok":
            reason = data.get("message") or data.get("code") or "Unknown error"
            logger.warning(f"OSRM returned no route: {reason}")
            return RouteFailure(f"No route: {reason}")

        routes = data.get("routes") or []
        if not routes:
            return RouteFailure("No route found between these points.")

        best = routes[0]
        polyline = _parse_geometry((best.get("geometry") or {}).get("coordinates") or [])
        if len(polyline) < 2:
            return RouteFailure("Route geometry is empty.")

        route = Route.from_polyline(
            polyline,
            distance_m=float(best.get("distance", 0.0)),
            duration_s=float(best.get("duration", 0.0)),
        )
        elapsed = (time.perf_counter() - started) * 1000
        logger.info(
            "OSRM route origin=%s dest=%s distance=%.0fm duration=%.0fs latency=%.1fms",
            origin,
            destination,
            route.distance_m,
            route.duration_s,
            elapsed,
        )
        return route

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
