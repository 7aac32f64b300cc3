# presentation_state.py
# The map's presentation data model and its invariants.
# Only MapCoordinator mutates it; every mutation goes through a method below.

import itertools
import logging
from typing import Optional

from .errors import StateInvariantError
from .map_config import MapConfig
from .models import Coord, Destination, Route, ViewMode, Viewport
from .viewport import fit_route, follow_user

logger = logging.getLogger(__name__)


class MapPresentationState:
    """
    Single live view of what the map should show.

    Invariants (checked after every mutation):
        - a route exists only while a destination is selected
        - IDLE mode means no destination, and vice versa
        - last_failure only ever describes the current destination

    Usage:
        state = MapPresentationState(config)
        dest = state.select_destination(Coord(10, 10), "Airport")
        state.apply_route(route, dest)
    """

    def __init__(self, config: Optional[MapConfig] = None) -> None:
        self.config = config or MapConfig()
        self._selection_ids = itertools.count(1)

        self.mode: ViewMode = ViewMode.IDLE
        self.user_location: Optional[Coord] = None
        self.destination: Optional[Destination] = None
        self.route: Optional[Route] = None
        self.viewport: Optional[Viewport] = None
        self.last_failure: Optional[str] = None

    # ------------------------------------------------------------------
    # Destination lifecycle
    # ------------------------------------------------------------------

    def clear(self) -> None:
        """Back to IDLE: drop destination and route, follow the user again."""
        self.mode = ViewMode.IDLE
        self.destination = None
        self.route = None
        self.last_failure = None
        if self.user_location is not None:
            self.viewport = follow_user(self.user_location, self.config)
        self.check_invariants()

    def select_destination(self, coord: Coord, label: str) -> Destination:
        """
        Make coord the live destination.

        Any previous route disappears immediately so a route to the old
        destination is never shown next to the new annotation.

        Returns:
            The new Destination; route results must be applied against it.
        """
        self.destination = Destination(coord=coord, label=label, selection_id=next(self._selection_ids))
        self.mode = ViewMode.DESTINATION_SELECTED
        self.route = None
        self.last_failure = None
        self.check_invariants()
        return self.destination

    # ------------------------------------------------------------------
    # Routing results
    # ------------------------------------------------------------------

    def is_current(self, destination: Destination) -> bool:
        return self.destination is not None and self.destination == destination

    def apply_route(self, route: Route, for_destination: Destination) -> bool:
        """
        Show route if it was computed for the current destination.

        Returns:
            True if applied, False if the result was stale and discarded.
        """
        if not self.is_current(for_destination):
            logger.debug(f"Stale route for selection {for_destination.selection_id} rejected.")
            return False
        self.route = route
        self.viewport = fit_route(route, self.config)
        self.check_invariants()
        return True

    def record_failure(self, reason: str, for_destination: Destination) -> bool:
        """Remember why the current destination has no route. Stale failures are ignored."""
        if not self.is_current(for_destination):
            logger.debug(f"Stale failure for selection {for_destination.selection_id} rejected.")
            return False
        self.route = None
        self.last_failure = reason
        self.check_invariants()
        return True

    # ------------------------------------------------------------------
    # Location
    # ------------------------------------------------------------------

    def update_user_location(self, coord: Coord) -> bool:
        """
        Store the newest fix.

        Returns:
            True if the viewport was recomputed (IDLE mode only).
        """
        self.user_location = coord
        if self.mode is ViewMode.IDLE:
            self.viewport = follow_user(coord, self.config)
            return True
        return False

    # ------------------------------------------------------------------
    # Invariants
    # ------------------------------------------------------------------

    def check_invariants(self) -> None:
        if self.route is not None and (
            self.mode is not ViewMode.DESTINATION_SELECTED or self.destination is None
        ):
            raise StateInvariantError("Route present without a selected destination.")
        if (self.mode is ViewMode.IDLE) != (self.destination is None):
            raise StateInvariantError(
                f"Mode {self.mode.name} inconsistent with destination {self.destination}."
            )
        if self.last_failure is not None and self.destination is None:
            raise StateInvariantError("Routing failure recorded without a destination.")

    def __repr__(self) -> str:
        return (
            f"MapPresentationState(mode={self.mode.name}, destination={self.destination}, "
            f"route={'yes' if self.route else 'no'}, viewport={self.viewport})"
        )
