import asyncio

import pytest

from ride_map.location_tracker import LocationTracker, load_track
from ride_map.models import Coord


def test_push_notifies_listeners_in_order():
    tracker = LocationTracker()
    seen = []
    tracker.subscribe(lambda c: seen.append(("a", c)))
    tracker.subscribe(lambda c: seen.append(("b", c)))

    assert not tracker.has_fix
    tracker.push(Coord(1, 2))

    assert tracker.last_fix == Coord(1, 2)
    assert seen == [("a", Coord(1, 2)), ("b", Coord(1, 2))]


def test_unsubscribed_listener_is_not_called():
    tracker = LocationTracker()
    seen = []
    tracker.subscribe(seen.append)
    tracker.unsubscribe(seen.append)
    tracker.push(Coord(1, 2))
    assert seen == []


def test_replay_pushes_every_fix():
    tracker = LocationTracker()
    seen = []
    tracker.subscribe(seen.append)
    fixes = [Coord(0, 0), Coord(0, 1), Coord(0, 2)]

    count = asyncio.run(tracker.replay(fixes, interval_s=0))

    assert count == 3
    assert seen == fixes
    assert tracker.last_fix == Coord(0, 2)


def test_load_track_skips_incomplete_rows(tmp_path):
    path = tmp_path / "track.csv"
    path.write_text("time,lat,lon\n1,40.1,49.8\n2,,49.9\n3,40.2,49.9\n", encoding="utf-8")

    assert load_track(str(path)) == [Coord(40.1, 49.8), Coord(40.2, 49.9)]


def test_load_track_requires_lat_lon(tmp_path):
    path = tmp_path / "track.csv"
    path.write_text("x,y\n1,2\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_track(str(path))
