"""Mounted drop zones and the locate-at-point lookup."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Mapping, Sequence

import pygame

from .drag import DropTarget
from .errors import UnknownTarget

Point = Sequence[float]


@dataclass(slots=True)
class DropZone:
    """Screen rectangle that accepts drops of a given kind."""

    zone_id: str
    rect: pygame.Rect
    target: DropTarget

    @classmethod
    def from_attributes(
        cls, zone_id: str, rect: pygame.Rect, attributes: Mapping[str, Any]
    ) -> "DropZone":
        return cls(zone_id, pygame.Rect(rect), DropTarget.from_attributes(attributes))

    def contains(self, point: Point) -> bool:
        return self.rect.collidepoint(int(point[0]), int(point[1]))


class ZoneRegistry:
    """Zones currently on screen, in paint order (last is on top)."""

    def __init__(self, zones: Iterable[DropZone] | None = None) -> None:
        self._zones: list[DropZone] = []
        if zones:
            self.replace(zones)

    def __iter__(self) -> Iterator[DropZone]:
        return iter(list(self._zones))

    def __len__(self) -> int:
        return len(self._zones)

    def add(self, zone: DropZone) -> None:
        """Mount *zone* above every zone already registered."""

        if self.get(zone.zone_id) is not None:
            raise ValueError(f"Duplicate zone id: {zone.zone_id!r}")
        self._zones.append(zone)

    def replace(self, zones: Iterable[DropZone]) -> None:
        """Swap the mounted zones, e.g. after a re-render."""

        self._zones = []
        for zone in zones:
            self.add(zone)

    def clear(self) -> None:
        self._zones.clear()

    def get(self, zone_id: str) -> DropZone | None:
        for zone in self._zones:
            if zone.zone_id == zone_id:
                return zone
        return None

    def locate(self, point: Point) -> DropZone | None:
        """Return the top-most zone containing *point*, if any."""

        for candidate in reversed(self._zones):
            if candidate.contains(point):
                return candidate
        return None

    def require(self, point: Point) -> DropZone:
        """Like :meth:`locate` but raise :class:`UnknownTarget` when nothing is hit."""

        zone = self.locate(point)
        if zone is None:
            raise UnknownTarget(f"No drop zone at ({point[0]}, {point[1]})")
        return zone

    def targets(self) -> list[tuple[str, DropTarget]]:
        return [(zone.zone_id, zone.target) for zone in self._zones]
