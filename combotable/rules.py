"""Combination rules used for local legality pre-checks.

Only the checks the client can make from what is on screen live here. The
server re-validates every move; the table-take checks only enforce the size
floor unless strict checking is requested.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from .models import Card, CombinationSlot

MIN_COMBINATION_SIZE = 3


def is_valid_trio(cards: Sequence["Card"]) -> bool:
    """Return ``True`` when *cards* are at least three cards of one rank."""

    if len(cards) < MIN_COMBINATION_SIZE:
        return False
    first = cards[0].rank
    return all(card.rank == first for card in cards)


def is_valid_run(cards: Sequence["Card"]) -> bool:
    """Return ``True`` when *cards* are consecutive ranks of a single suit."""

    if len(cards) < MIN_COMBINATION_SIZE:
        return False
    suit = cards[0].suit
    if any(card.suit != suit for card in cards):
        return False
    values = sorted(card.ordinal for card in cards)
    return all(current == previous + 1 for previous, current in zip(values, values[1:]))


def combination_kind(cards: Sequence["Card"]) -> str | None:
    if is_valid_trio(cards):
        return "trio"
    if is_valid_run(cards):
        return "run"
    return None


def leaves_minimum(size: int, minimum: int = MIN_COMBINATION_SIZE) -> bool:
    """Return ``True`` when a combination of *size* cards can lose one card."""

    return size - 1 >= minimum


def can_shrink(
    combination: "CombinationSlot", card: "Card", minimum: int = MIN_COMBINATION_SIZE
) -> bool:
    """Return ``True`` when *card* can leave *combination* without breaking the size floor.

    The shape of the remaining cards is not re-checked.
    """

    if card not in combination.cards:
        return False
    return leaves_minimum(len(combination.cards), minimum)


def can_take_from_combination(
    cards: Sequence["Card"], card: "Card", minimum: int = MIN_COMBINATION_SIZE
) -> bool:
    """Strict form of :func:`can_shrink`: the remainder must still be a trio or a run."""

    if card not in cards:
        return False
    remaining = list(cards)
    remaining.remove(card)
    if len(remaining) < minimum:
        return False
    return is_valid_trio(remaining) or is_valid_run(remaining)
