# osm_parser.py
# Builds the in-memory routing graph used by GraphRouteService.
# Reads an .osm file with a streaming SAX parser, or converts an osmnx graph.

import logging
import xml.sax as sax
from typing import Dict, List, Optional

from .errors import MapLoadError
from .geo_utils import haversine_distance
from .map_config import MapConfig, ROUTABLE_TYPES, FORBIDDEN_TYPES, SLOW_TYPES

logger = logging.getLogger(__name__)

ONEWAY_VALUES = {"yes", "true", "1"}


# ---------------------------------------------------------------------------
# Graph primitives
# ---------------------------------------------------------------------------

class Edge:
    """Directed weighted edge between two graph nodes."""

    __slots__ = ["target", "distance", "time", "name", "road_type"]

    def __init__(
        self,
        target: "Node",
        distance: float,
        road_type: str,
        name: str,
        speed_kmh: float,
        slow_penalty: float,
    ) -> None:
        self.target = target
        self.distance = distance
        self.name = name
        self.road_type = road_type

        speed_ms = speed_kmh * 1000 / 3600
        factor = slow_penalty if road_type in SLOW_TYPES else 1.0
        self.time = (distance / speed_ms) * factor


class Node:
    """A graph node representing an OSM node (intersection or shape point)."""

    __slots__ = ["id", "lat", "lon", "edges"]

    def __init__(self, nid: str, lat: float, lon: float) -> None:
        self.id = nid
        self.lat = float(lat)
        self.lon = float(lon)
        self.edges: List[Edge] = []


# ---------------------------------------------------------------------------
# Routing graph
# ---------------------------------------------------------------------------

class RoutingDB:
    """In-memory graph of routable nodes and edges."""

    def __init__(self) -> None:
        self.nodes: Dict[str, Node] = {}

    def add_node(self, node: Node) -> None:
        self.nodes[node.id] = node

    def add_edge(
        self,
        u: str,
        v: str,
        road_type: str,
        name: str,
        config: MapConfig,
        oneway: bool = False,
        distance: Optional[float] = None,
    ) -> None:
        n1 = self.nodes.get(u)
        n2 = self.nodes.get(v)
        if not n1 or not n2:
            return
        d = distance if distance is not None else haversine_distance(n1.lat, n1.lon, n2.lat, n2.lon)
        edge_kwargs = dict(
            distance=d,
            road_type=road_type,
            name=name,
            speed_kmh=config.travel_speed_kmh,
            slow_penalty=config.slow_road_penalty,
        )
        n1.edges.append(Edge(target=n2, **edge_kwargs))
        if not oneway:
            n2.edges.append(Edge(target=n1, **edge_kwargs))

    def cleanup(self) -> None:
        """Remove nodes no edge touches, to save memory."""
        targets = {edge.target.id for node in self.nodes.values() for edge in node.edges}
        self.nodes = {k: v for k, v in self.nodes.items() if v.edges or k in targets}


# ---------------------------------------------------------------------------
# SAX content handler
# ---------------------------------------------------------------------------

class OSMHandler(sax.ContentHandler):
    """Stream-parse an OSM XML file and populate a RoutingDB."""

    def __init__(self, db: RoutingDB, config: MapConfig) -> None:
        self.db = db
        self.config = config
        self._curr_nodes: List[str] = []
        self._tags: Dict[str, str] = {}
        self._in_way = False

    def startElement(self, name: str, attrs) -> None:  # type: ignore[override]
        if name == "node":
            self.db.add_node(Node(attrs["id"], attrs["lat"], attrs["lon"]))
        elif name == "way":
            self._in_way = True
            self._curr_nodes = []
            self._tags = {}
        elif name == "nd" and self._in_way:
            self._curr_nodes.append(attrs["ref"])
        elif name == "tag" and self._in_way:
            self._tags[attrs["k"]] = attrs["v"]

    def endElement(self, name: str) -> None:  # type: ignore[override]
        if name == "way":
            self._process_way()
            self._in_way = False

    def _process_way(self) -> None:
        if "highway" not in self._tags:
            return
        road_type = self._tags["highway"]
        if road_type in FORBIDDEN_TYPES or road_type not in ROUTABLE_TYPES:
            return
        name = self._tags.get("name", "Unnamed road")
        oneway_tag = self._tags.get("oneway", "").lower()
        nodes = self._curr_nodes
        if oneway_tag == "-1":
            nodes = list(reversed(nodes))
        oneway = oneway_tag in ONEWAY_VALUES or oneway_tag == "-1"
        for i in range(len(nodes) - 1):
            self.db.add_edge(nodes[i], nodes[i + 1], road_type, name, self.config, oneway=oneway)


# ---------------------------------------------------------------------------
# Public loaders
# ---------------------------------------------------------------------------

def load_map(osm_file: str, config: Optional[MapConfig] = None) -> RoutingDB:
    """
    Parse an OSM file and return a populated RoutingDB.

    Args:
        osm_file: Path to the .osm file.
        config:   MapConfig instance (defaults to MapConfig() if omitted).

    Returns:
        RoutingDB ready for route calculation.

    Raises:
        MapLoadError: If the file is missing or is not valid OSM XML.
    """
    if config is None:
        config = MapConfig()

    logger.info(f"Loading map: {osm_file}")
    db = RoutingDB()
    parser = sax.make_parser()
    parser.setContentHandler(OSMHandler(db, config))
    try:
        with open(osm_file, 'r', encoding='utf-8') as f:
            parser.parse(f)
    except (OSError, sax.SAXParseException) as e:
        raise MapLoadError(f"Could not load map {osm_file}: {e}") from e
    db.cleanup()
    logger.info(f"Map ready: {len(db.nodes)} routable nodes.")
    return db


def _first(value, default: str) -> str:
    # osmnx collapses merged ways into lists of tag values
    if isinstance(value, (list, tuple)):
        value = value[0] if value else None
    return str(value) if value else default


def graph_to_routing_db(graph, config: Optional[MapConfig] = None) -> RoutingDB:
    """
    Convert an osmnx / networkx MultiDiGraph into a RoutingDB.

    osmnx graphs are already directed, so every edge is added one way.
    Node coordinates come from the 'y' / 'x' attributes, edge lengths from
    'length' when present.
    """
    if config is None:
        config = MapConfig()

    db = RoutingDB()
    for nid, data in graph.nodes(data=True):
        db.add_node(Node(str(nid), data["y"], data["x"]))
    for u, v, data in graph.edges(data=True):
        road_type = _first(data.get("highway"), "road")
        if road_type in FORBIDDEN_TYPES:
            continue
        db.add_edge(
            str(u),
            str(v),
            road_type,
            _first(data.get("name"), "Unnamed road"),
            config,
            oneway=True,
            distance=data.get("length"),
        )
    db.cleanup()
    logger.info(f"Graph converted: {len(db.nodes)} routable nodes.")
    return db


def load_map_osmnx(osm_file: str, config: Optional[MapConfig] = None) -> RoutingDB:
    """
    Load an OSM extract through osmnx (handles .osm / .osm.gz and simplifies the graph).

    Raises:
        MapLoadError: If osmnx cannot read the file.
    """
    import osmnx as ox

    logger.info(f"Loading map with osmnx: {osm_file}")
    try:
        graph = ox.graph_from_xml(osm_file, simplify=True, bidirectional=False)
    except (OSError, ValueError) as e:
        raise MapLoadError(f"Could not load map {osm_file}: {e}") from e
    return graph_to_routing_db(graph, config)
