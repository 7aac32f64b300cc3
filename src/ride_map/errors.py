# errors.py
# Exception hierarchy for the map coordination core.
# Nothing here is fatal to a running map screen: routing errors are turned
# into RouteFailure values at the coordinator boundary.


class RideMapError(Exception):
    """Base class for every error raised by ride_map."""


class InvalidCoordinateError(RideMapError, ValueError):
    """Latitude or longitude outside the valid range."""


class StateInvariantError(RideMapError):
    """MapPresentationState ended up in an impossible combination."""


class RoutingError(RideMapError):
    """A route service could not produce a route."""


class MapLoadError(RideMapError):
    """The routing map could not be read or parsed."""
