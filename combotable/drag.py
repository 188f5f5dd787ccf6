"""Typed drag payloads and drop targets exchanged by a single gesture."""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping

from .errors import MalformedGesture
from .models import Card


class Origin(str, Enum):
    HAND = "hand"
    TABLE = "table"


class PointerKind(str, Enum):
    MOUSE = "mouse"
    TOUCH = "touch"


class ZoneKind(str, Enum):
    HAND_REORDER = "hand-reorder"
    HAND_INTAKE = "hand-intake"
    COMBINATION_INTAKE = "combination-intake"


# Zone names still emitted by older table templates.
ZONE_ALIASES = {
    "hand": ZoneKind.HAND_INTAKE,
    "add-to-combination": ZoneKind.COMBINATION_INTAKE,
}


@dataclass(frozen=True, slots=True)
class DragContext:
    """The card being dragged and where it was picked up from.

    ``position`` is the index of the card in the hand when it comes from the
    hand, or its index inside ``origin_combination`` when it comes from the
    table.
    """

    card: Card
    origin: Origin
    position: int
    origin_combination: str | None = None
    pointer_kind: PointerKind = PointerKind.MOUSE

    def __post_init__(self) -> None:
        if self.position < 0:
            raise MalformedGesture(f"Negative card position: {self.position}")
        if self.origin is Origin.TABLE and not self.origin_combination:
            raise MalformedGesture("Table drags need the combination they come from")
        if self.origin is Origin.HAND and self.origin_combination is not None:
            raise MalformedGesture("Hand drags cannot name a source combination")

    def to_payload(self) -> dict[str, Any]:
        """Wire form carried alongside the dragged element."""

        return {
            "position": self.position,
            "source": self.origin.value,
            "combination_name": self.origin_combination,
            "card_value": self.card.rank,
            "card_type": self.card.suit,
            "deck": self.card.deck_index,
        }

    @classmethod
    def from_payload(
        cls,
        raw: Mapping[str, Any] | str | bytes | None,
        pointer_kind: PointerKind = PointerKind.MOUSE,
    ) -> "DragContext":
        """Decode the wire form produced by :meth:`to_payload`."""

        data = _load_mapping(raw, "drag payload")
        try:
            origin = Origin(data["source"])
            card = Card.parse(data["card_value"], data["card_type"], data.get("deck"))
            position = _as_int(data["position"], "position")
        except KeyError as exc:
            raise MalformedGesture(f"Drag payload is missing {exc.args[0]!r}") from exc
        except (TypeError, ValueError) as exc:
            if isinstance(exc, MalformedGesture):
                raise
            raise MalformedGesture(f"Invalid drag payload: {exc}") from exc
        return cls(
            card=card,
            origin=origin,
            position=position,
            origin_combination=data.get("combination_name") or None,
            pointer_kind=pointer_kind,
        )


@dataclass(frozen=True, slots=True)
class DropTarget:
    """Where a drag may land."""

    zone_kind: ZoneKind
    target_position: int | None = None
    target_combination: str | None = None

    def __post_init__(self) -> None:
        if self.zone_kind is ZoneKind.HAND_REORDER and self.target_position is None:
            raise MalformedGesture("hand-reorder targets need a position")
        if self.zone_kind is ZoneKind.COMBINATION_INTAKE and not self.target_combination:
            raise MalformedGesture("combination-intake targets need a combination name")

    @classmethod
    def from_attributes(cls, raw: Mapping[str, Any] | str | bytes | None) -> "DropTarget":
        """Decode zone attributes: ``drop_zone``, ``position``, ``combination_name``."""

        data = _load_mapping(raw, "drop target")
        zone_name = data.get("drop_zone")
        if zone_name in ZONE_ALIASES:
            zone_kind = ZONE_ALIASES[zone_name]
        else:
            try:
                zone_kind = ZoneKind(zone_name)
            except ValueError as exc:
                raise MalformedGesture(f"Unknown drop zone: {zone_name!r}") from exc

        position = data.get("position")
        return cls(
            zone_kind=zone_kind,
            target_position=None if position in (None, "") else _as_int(position, "position"),
            target_combination=data.get("combination_name") or None,
        )


def _load_mapping(raw: Mapping[str, Any] | str | bytes | None, what: str) -> Mapping[str, Any]:
    if raw is None:
        raise MalformedGesture(f"No {what}")
    if isinstance(raw, (str, bytes)):
        try:
            raw = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise MalformedGesture(f"Undecodable {what}: {exc}") from exc
    if not isinstance(raw, Mapping):
        raise MalformedGesture(f"The {what} must be an object")
    return raw


def _as_int(value: Any, name: str) -> int:
    if isinstance(value, bool):
        raise MalformedGesture(f"{name} must be an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise MalformedGesture(f"{name} must be an integer, got {value!r}") from exc
