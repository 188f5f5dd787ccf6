"""Read-only view of the hand and table as last rendered from server state."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Iterator, Mapping, Protocol

from .errors import SnapshotError
from .logging_utils import get_logger
from .models import Card, CombinationSlot, HandSlot

_log = get_logger(__name__)


class Snapshot(Protocol):
    """Queries the legality checks are allowed to make against table state."""

    def cards_in_combination(self, name: str) -> int | None: ...

    def is_player_turn_active(self) -> bool: ...

    def combination_of_card(self, card: Card) -> str | None: ...

    def cards_of_combination(self, name: str) -> tuple[Card, ...] | None: ...


@dataclass(frozen=True)
class TableSnapshot:
    """Immutable snapshot built from one server state push."""

    hand: HandSlot = field(default_factory=HandSlot)
    combinations: tuple[CombinationSlot, ...] = ()
    turn_active: bool = False

    def __post_init__(self) -> None:
        names = [combination.name for combination in self.combinations]
        if len(set(names)) != len(names):
            raise SnapshotError(f"Duplicate combination names: {names}")

    # Snapshot protocol ------------------------------------------------

    def cards_in_combination(self, name: str) -> int | None:
        combination = self.combination(name)
        if combination is None:
            return None
        return len(combination.cards)

    def is_player_turn_active(self) -> bool:
        return self.turn_active

    def combination_of_card(self, card: Card) -> str | None:
        for combination in self.combinations:
            if card in combination.cards:
                return combination.name
        return None

    def cards_of_combination(self, name: str) -> tuple[Card, ...] | None:
        combination = self.combination(name)
        if combination is None:
            return None
        return tuple(combination.cards)

    # Convenience ------------------------------------------------------

    def combination(self, name: str) -> CombinationSlot | None:
        for combination in self.combinations:
            if combination.name == name:
                return combination
        return None

    def __iter__(self) -> Iterator[CombinationSlot]:
        return iter(self.combinations)

    @classmethod
    def from_state(cls, state: Mapping[str, Any] | str) -> "TableSnapshot":
        """Decode a server state document (mapping or JSON text)."""

        if isinstance(state, str):
            try:
                state = json.loads(state)
            except json.JSONDecodeError as exc:
                raise SnapshotError(f"State is not valid JSON: {exc}") from exc
        if not isinstance(state, Mapping):
            raise SnapshotError("State document must be an object")

        turn_active = state.get("is_current_turn", False)
        if not isinstance(turn_active, bool):
            raise SnapshotError("is_current_turn must be a boolean")

        hand = HandSlot(_decode_cards(state.get("hand", []), "hand"))

        combinations: list[CombinationSlot] = []
        table = state.get("table", [])
        if not isinstance(table, list):
            raise SnapshotError("table must be a list of combinations")
        for index, entry in enumerate(table):
            if not isinstance(entry, Mapping):
                raise SnapshotError(f"table[{index}] must be an object")
            name = entry.get("name")
            if not isinstance(name, str) or not name:
                raise SnapshotError(f"table[{index}] has no name")
            cards = _decode_cards(entry.get("cards", []), f"combination {name!r}")
            combinations.append(CombinationSlot(name, cards))

        snapshot = cls(hand=hand, combinations=tuple(combinations), turn_active=turn_active)
        _log.debug(
            "Snapshot decoded: hand=%d combinations=%d turn=%s",
            len(hand),
            len(combinations),
            turn_active,
        )
        return snapshot


def card_from_state(entry: Mapping[str, Any]) -> Card:
    """Decode a single ``{"value", "suit", "deck"}`` card entry."""

    if not isinstance(entry, Mapping):
        raise SnapshotError(f"Card entry must be an object, got {entry!r}")
    try:
        return Card.parse(entry["value"], entry["suit"], entry.get("deck", 0))
    except (KeyError, TypeError, ValueError) as exc:
        raise SnapshotError(f"Invalid card entry {dict(entry)!r}: {exc}") from exc


def _decode_cards(entries: Any, where: str) -> list[Card]:
    if not isinstance(entries, list):
        raise SnapshotError(f"Cards of {where} must be a list")
    return [card_from_state(entry) for entry in entries]
