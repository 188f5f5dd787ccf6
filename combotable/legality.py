"""Decide whether a drag may land on a drop target.

The verdicts are advisory: they spare the server moves that are obviously
futile (wrong turn, same combination, combination too small) and leave every
other judgement to it.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Mapping

from .drag import DragContext, DropTarget, Origin, ZoneKind
from .errors import StaleSnapshot
from .logging_utils import get_logger
from .models import Card, CombinationSlot
from .rules import MIN_COMBINATION_SIZE, can_shrink, can_take_from_combination
from .snapshot import Snapshot

_log = get_logger(__name__)


class Verdict(Enum):
    ALLOW = "allow"
    DENY = "deny"

    @property
    def allowed(self) -> bool:
        return self is Verdict.ALLOW

    @classmethod
    def of(cls, allowed: bool) -> "Verdict":
        return cls.ALLOW if allowed else cls.DENY


@dataclass(frozen=True)
class Resolver:
    """Drop legality rules, parameterised by the size floor and strictness."""

    minimum_size: int = MIN_COMBINATION_SIZE
    strict_shrink: bool = False

    def resolve(
        self,
        drag: DragContext,
        target: DropTarget,
        turn_active: bool,
        snapshot: Snapshot,
    ) -> Verdict:
        """Return the verdict for dropping *drag* on *target*."""

        origin = drag.origin
        zone = target.zone_kind

        if origin is Origin.HAND and zone is ZoneKind.HAND_REORDER:
            return Verdict.ALLOW

        if origin is Origin.TABLE and zone is ZoneKind.HAND_INTAKE:
            if not turn_active:
                return Verdict.DENY
            return Verdict.of(self._source_can_shrink(drag, snapshot))

        if origin is Origin.HAND and zone is ZoneKind.COMBINATION_INTAKE:
            # The server decides whether the grown combination is still valid.
            return Verdict.of(turn_active and _target_exists(target, snapshot))

        if origin is Origin.TABLE and zone is ZoneKind.COMBINATION_INTAKE:
            if not turn_active:
                return Verdict.DENY
            if target.target_combination == drag.origin_combination:
                _log.debug("Denied: %s dropped on its own combination", drag.card)
                return Verdict.DENY
            if not _target_exists(target, snapshot):
                return Verdict.DENY
            return Verdict.of(self._source_can_shrink(drag, snapshot))

        return Verdict.DENY

    def classify(
        self,
        drag: DragContext,
        targets: Iterable[tuple[str, DropTarget]],
        turn_active: bool,
        snapshot: Snapshot,
    ) -> Mapping[str, Verdict]:
        """Resolve every ``(zone_id, target)`` pair, e.g. to highlight zones at pickup."""

        return {
            zone_id: self.resolve(drag, target, turn_active, snapshot)
            for zone_id, target in targets
        }

    def _source_can_shrink(self, drag: DragContext, snapshot: Snapshot) -> bool:
        name = drag.origin_combination
        if name is None:
            return False
        try:
            source = CombinationSlot(name, list(_require_cards(snapshot, name)))
        except StaleSnapshot as exc:
            # Expected when the table changed mid-drag.
            _log.debug("Denied: %s", exc)
            return False

        if not can_shrink(source, drag.card, self.minimum_size):
            _log.debug(
                "Denied: %s cannot leave %r (%d cards)",
                drag.card,
                name,
                len(source),
            )
            return False

        if self.strict_shrink and not can_take_from_combination(
            source.cards, drag.card, self.minimum_size
        ):
            _log.debug("Denied: %r would not stay a trio or run without %s", name, drag.card)
            return False
        return True


def _require_cards(snapshot: Snapshot, name: str) -> tuple[Card, ...]:
    cards = snapshot.cards_of_combination(name)
    if cards is None:
        raise StaleSnapshot(name)
    return cards


def _target_exists(target: DropTarget, snapshot: Snapshot) -> bool:
    name = target.target_combination
    if name is None or snapshot.cards_in_combination(name) is None:
        _log.debug("Denied: target combination %r is not on the table", name)
        return False
    return True


_default_resolver = Resolver()


def resolve(
    drag: DragContext, target: DropTarget, turn_active: bool, snapshot: Snapshot
) -> Verdict:
    """Module-level shortcut using the default (permissive) rules."""

    return _default_resolver.resolve(drag, target, turn_active, snapshot)
