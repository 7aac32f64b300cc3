# location_tracker.py
# Holds the latest user fix and fans it out to listeners.
# Also loads recorded GPS tracks so a session can be replayed without hardware.

import asyncio
import logging
from typing import Callable, Iterable, List, Optional

import pandas as pd

from .models import Coord

logger = logging.getLogger(__name__)

LocationListener = Callable[[Coord], None]


class LocationTracker:
    """
    Source of truth for the user's position.

    Usage:
        tracker = LocationTracker()
        tracker.subscribe(coordinator.on_user_location_updated)

        # GPS loop:
        tracker.push(Coord(lat, lon))
    """

    def __init__(self) -> None:
        self._last_fix: Optional[Coord] = None
        self._listeners: List[LocationListener] = []

    def subscribe(self, listener: LocationListener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: LocationListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def push(self, coord: Coord) -> None:
        """Record a new fix and notify every listener in subscription order."""
        if self._last_fix is None:
            logger.info(f"First location fix: {coord}")
        self._last_fix = coord
        for listener in list(self._listeners):
            listener(coord)

    @property
    def last_fix(self) -> Optional[Coord]:
        return self._last_fix

    @property
    def has_fix(self) -> bool:
        return self._last_fix is not None

    async def replay(self, fixes: Iterable[Coord], interval_s: float = 0.5) -> int:
        """
        Push recorded fixes one by one, yielding to the event loop in between.

        Returns:
            Number of fixes pushed.
        """
        count = 0
        for coord in fixes:
            self.push(coord)
            count += 1
            await asyncio.sleep(interval_s)
        return count


def load_track(csv_path: str) -> List[Coord]:
    """
    Read a recorded GPS track.

    Args:
        csv_path: CSV file with 'lat' and 'lon' columns, one fix per row.

    Returns:
        Fixes in file order; rows with missing values are skipped.

    Raises:
        ValueError: If the lat/lon columns are missing.
    """
    df = pd.read_csv(csv_path)
    missing = {"lat", "lon"} - set(df.columns)
    if missing:
        raise ValueError(f"{csv_path}: missing columns {sorted(missing)}")
    df = df.dropna(subset=["lat", "lon"])
    track = [Coord(float(lat), float(lon)) for lat, lon in zip(df["lat"], df["lon"])]
    logger.info(f"Loaded {len(track)} fixes from {csv_path}")
    return track
