# coordinator.py
# Public entry point for the map screen.
# Turns selection and location events into state changes and render commands.

import asyncio
import logging
from typing import Optional, Set

from .events import (
    DestinationCleared,
    DestinationSelected,
    LocationUpdated,
    MapEvent,
    MapLoadFailed,
    Shutdown,
)
from .map_config import MapConfig
from .models import Coord, Destination, RouteFailure, RouteOutcome
from .presentation_state import MapPresentationState
from .renderer import MapRenderer
from .route_service import RouteService

logger = logging.getLogger(__name__)


class MapCoordinator:
    """
    Orchestrates the map presentation.

    Typical lifecycle:
        coordinator = MapCoordinator(OsrmRouteService(), renderer)
        coordinator.start()
        tracker.subscribe(coordinator.on_user_location_updated)

        # from the search UI:
        coordinator.on_destination_selected(Coord(40.41, 49.86), "Airport")
        coordinator.on_destination_cleared()

    All handlers must be called from the running event loop. Route requests
    run as tasks on that loop; when one finishes, its result is checked
    against the destination that is current at that moment, so a slow answer
    for an older selection is never shown.

    Args:
        route_service: Any RouteService.
        renderer:      Receiver of presentation commands.
        config:        Optional MapConfig; defaults to MapConfig().
        state:         Optional pre-built MapPresentationState.
    """

    def __init__(
        self,
        route_service: RouteService,
        renderer: MapRenderer,
        config: Optional[MapConfig] = None,
        state: Optional[MapPresentationState] = None,
    ) -> None:
        self.config = config or MapConfig()
        self.state = state or MapPresentationState(self.config)
        self._service = route_service
        self._renderer = renderer

        self._pending: Optional[Destination] = None
        self._in_flight: Set[asyncio.Task] = set()

        # Diagnostics
        self.requests_issued = 0
        self.stale_results_discarded = 0

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Send static map options and the current viewport, if any."""
        self._renderer.configure(self.config.map_options)
        self._push_viewport()

    # ------------------------------------------------------------------
    # Inbound: destination search
    # ------------------------------------------------------------------

    def on_destination_selected(self, coord: Coord, label: Optional[str] = None) -> Destination:
        """
        Show coord as the destination and route to it.

        Without a location fix the request is parked; only the newest
        parked destination is ever sent.
        """
        title = label or self.config.destination_title
        destination = self.state.select_destination(coord, title)

        self._renderer.hide_route_overlay()
        self._renderer.hide_all_annotations()
        self._renderer.show_annotation(coord, title)

        origin = self.state.user_location
        if origin is None:
            if self._pending is not None:
                logger.info(f"Replacing deferred route request for '{self._pending.label}'.")
            logger.info(f"Location unavailable, deferring route to '{title}' {coord}.")
            self._pending = destination
            return destination

        self._pending = None
        self._request_route(origin, destination)
        return destination

    def on_destination_cleared(self) -> None:
        """Back to the idle follow-user view. Late route answers are ignored."""
        self._pending = None
        previous = self.state.viewport
        self.state.clear()

        self._renderer.hide_all_annotations()
        self._renderer.hide_route_overlay()
        if self.state.viewport is not previous:
            self._push_viewport()

    # ------------------------------------------------------------------
    # Inbound: location
    # ------------------------------------------------------------------

    def on_user_location_updated(self, coord: Coord) -> None:
        if self.state.update_user_location(coord):
            self._push_viewport()

        pending = self._pending
        if pending is None:
            return
        self._pending = None
        if self.state.is_current(pending):
            logger.info(f"Location known, sending deferred route to '{pending.label}'.")
            self._request_route(coord, pending)

    # ------------------------------------------------------------------
    # Inbound: map surface
    # ------------------------------------------------------------------

    def on_map_load_failed(self, error: object) -> None:
        logger.error(f"Map failed to load: {error}")

    # ------------------------------------------------------------------
    # Serialized event loop
    # ------------------------------------------------------------------

    def dispatch(self, event: MapEvent) -> None:
        if isinstance(event, DestinationSelected):
            self.on_destination_selected(event.coord, event.label)
        elif isinstance(event, DestinationCleared):
            self.on_destination_cleared()
        elif isinstance(event, LocationUpdated):
            self.on_user_location_updated(event.coord)
        elif isinstance(event, MapLoadFailed):
            self.on_map_load_failed(event.reason)
        else:
            raise TypeError(f"Unknown map event: {event!r}")

    async def run(self, queue: "asyncio.Queue[MapEvent]") -> None:
        """Handle events from queue in arrival order until Shutdown."""
        self.start()
        while True:
            event = await queue.get()
            try:
                if isinstance(event, Shutdown):
                    break
                self.dispatch(event)
            finally:
                queue.task_done()
        await self.drain()

    async def drain(self) -> None:
        """Wait until every in-flight route request has been handled."""
        while self._in_flight:
            await asyncio.gather(*list(self._in_flight))

    # ------------------------------------------------------------------
    # Read-only properties
    # ------------------------------------------------------------------

    @property
    def pending_destination(self) -> Optional[Destination]:
        return self._pending

    @property
    def in_flight(self) -> int:
        return len(self._in_flight)

    # ------------------------------------------------------------------
    # Routing
    # ------------------------------------------------------------------

    def _request_route(self, origin: Coord, destination: Destination) -> None:
        self.requests_issued += 1
        task = asyncio.get_running_loop().create_task(self._route_task(origin, destination))
        self._in_flight.add(task)
        task.add_done_callback(self._in_flight.discard)

    async def _route_task(self, origin: Coord, destination: Destination) -> None:
        try:
            outcome = await self._service.compute_route(origin, destination.coord)
        except Exception as e:
            logger.exception(f"Route service raised for '{destination.label}'")
            outcome = RouteFailure(f"Routing failed: {e}")
        self._handle_outcome(destination, outcome)

    def _handle_outcome(self, destination: Destination, outcome: RouteOutcome) -> None:
        if isinstance(outcome, RouteFailure):
            if not self.state.record_failure(outcome.reason, destination):
                self._discard_stale(destination)
                return
            logger.warning(f"No route to '{destination.label}': {outcome.reason}")
            self._renderer.hide_route_overlay()
            return

        if not self.state.apply_route(outcome, destination):
            self._discard_stale(destination)
            return
        self._renderer.show_route_overlay(outcome.polyline, self.config.overlay_style)
        self._push_viewport()

    def _discard_stale(self, destination: Destination) -> None:
        self.stale_results_discarded += 1
        logger.debug(
            f"Discarding stale route result for '{destination.label}' "
            f"(selection {destination.selection_id})."
        )

    def _push_viewport(self) -> None:
        viewport = self.state.viewport
        if viewport is not None:
            self._renderer.set_viewport(viewport.center, viewport.span)
