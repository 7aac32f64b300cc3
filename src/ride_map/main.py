# main.py
# Entry point. Simulates a map screen session with a GPS feed and a user who
# picks a destination, changes their mind, and finally clears the selection.
# Every render command is logged instead of drawn.
#
# Usage:
#   python -m ride_map.main                      # OSRM public server, built-in track
#   python -m ride_map.main --osm map.osm        # local A* routing on an OSM extract
#   python -m ride_map.main --osm map.osm.gz --loader osmnx
#   python -m ride_map.main --track fixes.csv    # replay a recorded GPS track (lat,lon columns)

import argparse
import asyncio
import logging
from typing import List, Optional

from .coordinator import MapCoordinator
from .events import DestinationCleared, DestinationSelected, LocationUpdated, MapEvent, Shutdown
from .location_tracker import LocationTracker, load_track
from .map_config import MapConfig
from .models import Coord
from .osm_parser import load_map, load_map_osmnx
from .renderer import LoggingRenderer
from .route_service import GraphRouteService, OsrmRouteService, RouteService

# ------------------------------------------------------------------
# Logging setup: configure once here, all modules inherit
# ------------------------------------------------------------------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger("ride_map")

# ------------------------------------------------------------------
# Simulation data (central Baku)
# ------------------------------------------------------------------
DEFAULT_TRACK = [
    Coord(40.37767, 49.85010),
    Coord(40.37802, 49.85103),
    Coord(40.37851, 49.85219),
    Coord(40.37893, 49.85344),
    Coord(40.37940, 49.85466),
]

FIRST_PICK  = (Coord(40.36610, 49.83520), "Boulevard")
SECOND_PICK = (Coord(40.40930, 49.86710), "Flame Towers")


def build_route_service(osm_path: Optional[str], config: MapConfig, loader: str = "sax") -> RouteService:
    if osm_path:
        logger.info(f"Routing locally on {osm_path} ({loader} loader)")
        load = load_map_osmnx if loader == "osmnx" else load_map
        return GraphRouteService(load(osm_path, config), config)
    logger.info(f"Routing through OSRM at {config.osrm_base_url} ({config.osrm_profile})")
    return OsrmRouteService(config)


async def simulate(track: List[Coord], service: RouteService, config: MapConfig) -> MapCoordinator:
    queue: "asyncio.Queue[MapEvent]" = asyncio.Queue()
    coordinator = MapCoordinator(service, LoggingRenderer(), config)
    tracker = LocationTracker()
    tracker.subscribe(lambda coord: queue.put_nowait(LocationUpdated(coord)))

    runner = asyncio.create_task(coordinator.run(queue))
    interval = config.location_replay_interval_s

    # 1. User picks a destination before the first GPS fix: request is deferred
    queue.put_nowait(DestinationSelected(*FIRST_PICK))

    # 2. GPS comes alive; halfway through, the user switches destination
    half = max(1, len(track) // 2)
    await tracker.replay(track[:half], interval)
    queue.put_nowait(DestinationSelected(*SECOND_PICK))
    await tracker.replay(track[half:], interval)

    # 3. Let the route land, then clear
    await queue.join()
    await coordinator.drain()
    queue.put_nowait(DestinationCleared())
    queue.put_nowait(Shutdown())
    await runner
    return coordinator


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Simulate a map screen routing session.")
    parser.add_argument("--osm", help="OSM extract for local routing (default: OSRM server)")
    parser.add_argument(
        "--loader", choices=("sax", "osmnx"), default="sax",
        help="how to read --osm: streaming parser or osmnx (also reads .osm.gz)",
    )
    parser.add_argument("--track", help="CSV GPS track with lat/lon columns")
    parser.add_argument("--interval", type=float, default=None, help="seconds between GPS fixes")
    args = parser.parse_args(argv)

    config = MapConfig()
    if args.interval is not None:
        config.location_replay_interval_s = args.interval

    track = load_track(args.track) if args.track else DEFAULT_TRACK
    service = build_route_service(args.osm, config, args.loader)

    async def _session() -> MapCoordinator:
        try:
            return await simulate(track, service, config)
        finally:
            await service.aclose()

    coordinator = asyncio.run(_session())

    print("\n--- Session complete ---")
    print(f"    Route requests issued:  {coordinator.requests_issued}")
    print(f"    Stale results dropped:  {coordinator.stale_results_discarded}")
    print(f"    Final state:            {coordinator.state}")


if __name__ == "__main__":
    main()
