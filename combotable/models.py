"""Card and table domain models for the combotable client."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List

from .rules import combination_kind

RANKS = ("A", "2", "3", "4", "5", "6", "7", "8", "9", "10", "J", "Q", "K")

_FACE_ORDINALS = {"A": 1, "J": 11, "Q": 12, "K": 13}


@dataclass(frozen=True, slots=True)
class Card:
    """A dealt card, identified by rank, suit and the deck it came from."""

    rank: str
    suit: str
    deck_index: int = 0

    def __post_init__(self) -> None:
        if self.rank not in RANKS:
            raise ValueError(f"Unknown rank: {self.rank!r}")
        if not self.suit or "_" in self.suit:
            raise ValueError(f"Invalid suit: {self.suit!r}")
        if isinstance(self.deck_index, bool) or not isinstance(self.deck_index, int):
            raise ValueError(f"Deck index must be an integer: {self.deck_index!r}")

    @classmethod
    def parse(cls, rank: str, suit: str, deck_index: int | str | None = 0) -> "Card":
        """Build a card from loosely formatted values such as ``("q", "Hearts", "1")``."""

        normalized_rank = str(rank).strip().upper()
        normalized_suit = str(suit).strip().lower()
        deck = 0 if deck_index is None or deck_index == "" else int(deck_index)
        return cls(normalized_rank, normalized_suit, deck)

    @classmethod
    def from_id(cls, card_id: str) -> "Card":
        """Inverse of :attr:`card_id`."""

        parts = card_id.split("_")
        if len(parts) != 3:
            raise ValueError(f"Invalid card id: {card_id!r}")
        rank, suit, deck = parts
        return cls.parse(rank, suit, deck)

    @property
    def ordinal(self) -> int:
        """Value used for run adjacency: A=1, J=11, Q=12, K=13."""

        return _FACE_ORDINALS.get(self.rank) or int(self.rank)

    @property
    def card_id(self) -> str:
        return f"{self.rank}_{self.suit}_{self.deck_index}"

    def __str__(self) -> str:
        return self.card_id


@dataclass(slots=True)
class CombinationSlot:
    """A named group of cards resting on the table."""

    name: str
    cards: List[Card] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.cards)

    def __contains__(self, card: object) -> bool:
        return card in self.cards

    @property
    def kind(self) -> str | None:
        """``"trio"``, ``"run"`` or ``None``, derived from the member cards."""

        return combination_kind(self.cards)


@dataclass(slots=True)
class HandSlot:
    """Cards held by the local player, addressable by position."""

    cards: List[Card] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self.cards)

    def card_at(self, position: int) -> Card | None:
        """Return the card at *position* or ``None`` when out of range."""

        if 0 <= position < len(self.cards):
            return self.cards[position]
        return None
