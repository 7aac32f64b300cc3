# route_calculator.py
# A* pathfinding on a RoutingDB graph.
# Returns the path as a polyline of coordinates.

import heapq
from typing import List, Optional, Tuple

from .geo_utils import haversine_distance
from .map_config import MapConfig
from .models import Coord
from .osm_parser import RoutingDB, Node


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _find_nearest_node(db: RoutingDB, coord: Coord) -> Tuple[Optional[Node], float]:
    """Return the closest graph node to coord and its distance in metres."""
    best_node = None
    min_dist = float("inf")
    for node in db.nodes.values():
        d = haversine_distance(coord.lat, coord.lon, node.lat, node.lon)
        if d < min_dist:
            min_dist = d
            best_node = node
    return best_node, min_dist


def _reconstruct_path(came_from, start: Node, end: Node) -> List[Node]:
    path = [end]
    curr = end
    seen: set = set()
    while curr is not start:
        if curr in seen:
            raise RuntimeError("Cycle detected while rebuilding path.")
        seen.add(curr)
        curr = came_from[curr]
        path.append(curr)
    path.reverse()
    return path


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

class RouteCalculator:
    """
    Calculates a route between two coordinates using A*.

    Args:
        db:     Populated RoutingDB from osm_parser.load_map().
        config: MapConfig instance.
    """

    def __init__(self, db: RoutingDB, config: Optional[MapConfig] = None) -> None:
        self.db = db
        self.config = config or MapConfig()

    def calculate(
        self, origin: Coord, destination: Coord
    ) -> Tuple[Optional[List[Coord]], float, str]:
        """
        Run A* from origin to destination.

        Returns:
            (polyline, distance_m, message); polyline is None on failure.
        """
        start_node, start_snap = _find_nearest_node(self.db, origin)
        end_node, end_snap = _find_nearest_node(self.db, destination)

        if not start_node or not end_node:
            return None, 0.0, "Could not find nearby nodes for given coordinates."

        max_snap = self.config.max_snap_distance_m
        if start_snap > max_snap or end_snap > max_snap:
            return None, 0.0, f"No road within {int(max_snap)} m of origin or destination."

        if start_node is end_node:
            return None, 0.0, "Origin and destination map to the same node."

        # A* search on travel time
        counter = 0
        open_set: list = []
        heapq.heappush(open_set, (0.0, counter, start_node))
        came_from: dict = {start_node: None}
        cost_so_far: dict = {start_node: 0.0}
        distance_so_far: dict = {start_node: 0.0}
        visited: set = set()
        speed_ms = self.config.travel_speed_kmh * 1000 / 3600

        while open_set:
            _, _, current = heapq.heappop(open_set)
            if current in visited:
                continue
            visited.add(current)
            if current is end_node:
                break
            for edge in current.edges:
                new_cost = cost_so_far[current] + edge.time
                neighbor = edge.target
                if neighbor not in cost_so_far or new_cost < cost_so_far[neighbor]:
                    cost_so_far[neighbor] = new_cost
                    distance_so_far[neighbor] = distance_so_far[current] + edge.distance
                    heuristic = haversine_distance(neighbor.lat, neighbor.lon, end_node.lat, end_node.lon) / speed_ms
                    counter += 1
                    heapq.heappush(open_set, (new_cost + heuristic, counter, neighbor))
                    came_from[neighbor] = current

        if end_node not in came_from:
            return None, 0.0, "No connected route found between these points."

        nodes = _reconstruct_path(came_from, start_node, end_node)
        polyline = [Coord(n.lat, n.lon) for n in nodes]
        return polyline, distance_so_far[end_node], "OK"
