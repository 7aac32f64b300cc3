# events.py
# Inbound events for MapCoordinator.run(). Each one is handled to completion
# before the next is taken off the queue.

from dataclasses import dataclass
from typing import Optional, Union

from .models import Coord


@dataclass(frozen=True)
class DestinationSelected:
    coord: Coord
    label: Optional[str] = None


@dataclass(frozen=True)
class DestinationCleared:
    pass


@dataclass(frozen=True)
class LocationUpdated:
    coord: Coord


@dataclass(frozen=True)
class MapLoadFailed:
    reason: str


@dataclass(frozen=True)
class Shutdown:
    """Stops MapCoordinator.run() after in-flight routes settle."""


MapEvent = Union[DestinationSelected, DestinationCleared, LocationUpdated, MapLoadFailed, Shutdown]
