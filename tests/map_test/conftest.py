import asyncio
from typing import List, Tuple

import pytest

from ride_map.map_config import MapConfig
from ride_map.models import Coord, Route
from ride_map.renderer import MapRenderer
from ride_map.route_service import RouteService


class RecordingRenderer(MapRenderer):
    """Keeps every command, plus the presentation those commands add up to."""

    def __init__(self) -> None:
        self.commands: List[tuple] = []
        self.options = None
        self.viewport = None
        self.annotations: List[Tuple[Coord, str]] = []
        self.overlay = None

    def configure(self, options):
        self.commands.append(("configure", options))
        self.options = options

    def set_viewport(self, center, span):
        self.commands.append(("set_viewport", center, span))
        self.viewport = (center, span)

    def show_annotation(self, coord, title):
        self.commands.append(("show_annotation", coord, title))
        self.annotations.append((coord, title))

    def hide_all_annotations(self):
        self.commands.append(("hide_all_annotations",))
        self.annotations = []

    def show_route_overlay(self, polyline, style):
        self.commands.append(("show_route_overlay", tuple(polyline), style))
        self.overlay = tuple(polyline)

    def hide_route_overlay(self):
        self.commands.append(("hide_route_overlay",))
        self.overlay = None

    def count(self, name: str) -> int:
        return sum(1 for c in self.commands if c[0] == name)


class ScriptedRouteService(RouteService):
    """
    Route service whose answers are handed out by the test.

    Every call parks on a future; resolve(i, outcome) completes the i-th call,
    so tests decide the order in which responses come back.
    """

    def __init__(self) -> None:
        self.calls: List[Tuple[Coord, Coord]] = []
        self._futures: List[asyncio.Future] = []

    async def compute_route(self, origin, destination):
        fut = asyncio.get_running_loop().create_future()
        self.calls.append((origin, destination))
        self._futures.append(fut)
        return await fut

    def resolve(self, index: int, outcome) -> None:
        self._futures[index].set_result(outcome)

    def fail(self, index: int, exc: Exception) -> None:
        self._futures[index].set_exception(exc)


def straight_route(a: Coord, b: Coord) -> Route:
    mid = Coord((a.lat + b.lat) / 2, (a.lon + b.lon) / 2)
    return Route.from_polyline([a, mid, b])


async def settle(rounds: int = 5) -> None:
    """Let scheduled tasks and their callbacks run."""
    for _ in range(rounds):
        await asyncio.sleep(0)


@pytest.fixture
def config():
    return MapConfig()


@pytest.fixture
def renderer():
    return RecordingRenderer()


@pytest.fixture
def service():
    return ScriptedRouteService()


@pytest.fixture
def make_route():
    return straight_route


@pytest.fixture
def tick():
    return settle


OSM_XML = """<?xml version="1.0" encoding="UTF-8"?>
<osm version="0.6">
  <node id="1" lat="40.0000" lon="49.0000"/>
  <node id="2" lat="40.0000" lon="49.0010"/>
  <node id="3" lat="40.0000" lon="49.0020"/>
  <node id="4" lat="40.0010" lon="49.0020"/>
  <node id="5" lat="40.0100" lon="49.0100"/>
  <way id="10">
    <nd ref="1"/><nd ref="2"/><nd ref="3"/>
    <tag k="highway" v="residential"/>
    <tag k="name" v="Main Street"/>
  </way>
  <way id="11">
    <nd ref="3"/><nd ref="4"/>
    <tag k="highway" v="tertiary"/>
    <tag k="oneway" v="yes"/>
  </way>
  <way id="12">
    <nd ref="4"/><nd ref="5"/>
    <tag k="highway" v="footway"/>
  </way>
</osm>
"""


@pytest.fixture
def osm_file(tmp_path):
    path = tmp_path / "map.osm"
    path.write_text(OSM_XML, encoding="utf-8")
    return str(path)
