import asyncio

from ride_map.main import DEFAULT_TRACK, SECOND_PICK, build_route_service, simulate
from ride_map.map_config import MapConfig
from ride_map.models import Coord, Route, ViewMode
from ride_map.route_service import GraphRouteService, RouteService


class InstantRouteService(RouteService):
    def __init__(self):
        self.calls = []

    async def compute_route(self, origin, destination):
        self.calls.append((origin, destination))
        return Route.from_polyline([origin, destination])


def test_simulated_session_ends_idle():
    service = InstantRouteService()
    config = MapConfig(location_replay_interval_s=0)

    coordinator = asyncio.run(simulate(DEFAULT_TRACK, service, config))

    assert service.calls[0][0] == DEFAULT_TRACK[0]
    assert service.calls[-1][1] == SECOND_PICK[0]
    assert coordinator.state.mode is ViewMode.IDLE
    assert coordinator.state.user_location == DEFAULT_TRACK[-1]
    assert coordinator.in_flight == 0


def test_osmnx_loader_option_builds_local_service(osm_file):
    service = build_route_service(osm_file, MapConfig(), loader="osmnx")
    assert isinstance(service, GraphRouteService)

    outcome = asyncio.run(service.compute_route(Coord(40.00001, 49.0), Coord(40.00101, 49.002)))
    assert isinstance(outcome, Route)
    assert outcome.end == Coord(40.001, 49.002)
