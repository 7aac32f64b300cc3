# renderer.py
# Outbound command interface towards whatever draws the map.
# Commands describe desired presentation, not deltas: sending one twice is harmless.

import logging
from abc import ABC, abstractmethod
from typing import Sequence

from .models import Coord, MapOptions, OverlayStyle, Span

logger = logging.getLogger(__name__)


class MapRenderer(ABC):
    """Receiver of presentation commands issued by MapCoordinator."""

    @abstractmethod
    def configure(self, options: MapOptions) -> None:
        """Apply static map behaviour (rotation, user dot, tracking)."""

    @abstractmethod
    def set_viewport(self, center: Coord, span: Span) -> None: ...

    @abstractmethod
    def show_annotation(self, coord: Coord, title: str) -> None:
        """Show and select the destination pin."""

    @abstractmethod
    def hide_all_annotations(self) -> None: ...

    @abstractmethod
    def show_route_overlay(self, polyline: Sequence[Coord], style: OverlayStyle) -> None: ...

    @abstractmethod
    def hide_route_overlay(self) -> None: ...


class LoggingRenderer(MapRenderer):
    """Renderer that only logs what it is asked to draw. Used by the demo loop."""

    def configure(self, options: MapOptions) -> None:
        logger.info(
            f"[Map] configure rotate={options.rotate_enabled} "
            f"user_dot={options.shows_user_location} follow={options.follows_user}"
        )

    def set_viewport(self, center: Coord, span: Span) -> None:
        logger.info(f"[Map] viewport center={center} span=({span.lat_delta:.4f}, {span.lon_delta:.4f})")

    def show_annotation(self, coord: Coord, title: str) -> None:
        logger.info(f"[Map] annotation '{title}' at {coord}")

    def hide_all_annotations(self) -> None:
        logger.info("[Map] annotations cleared")

    def show_route_overlay(self, polyline: Sequence[Coord], style: OverlayStyle) -> None:
        logger.info(
            f"[Map] route overlay {len(polyline)} points "
            f"({style.stroke_color}, {style.line_width:g}px)"
        )

    def hide_route_overlay(self) -> None:
        logger.info("[Map] route overlay removed")
