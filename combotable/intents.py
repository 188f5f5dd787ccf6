"""Move intents sent to the authoritative server.

The event names and payload keys are the wire contract with the backend and
must stay field-for-field stable.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, ClassVar, Tuple

from .drag import DragContext, DropTarget, Origin, ZoneKind
from .errors import TransportUnavailable
from .logging_utils import get_logger, log_intent

if TYPE_CHECKING:
    from .transport import Transport

_log = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class Intent:
    event: ClassVar[str] = ""

    def payload(self) -> dict[str, Any]:
        raise NotImplementedError


@dataclass(frozen=True, slots=True)
class ReorderHand(Intent):
    event: ClassVar[str] = "reorder_hand_card"

    from_position: int
    to_position: int

    def payload(self) -> dict[str, Any]:
        return {"from_position": self.from_position, "to_position": self.to_position}


@dataclass(frozen=True, slots=True)
class TakeTableCard(Intent):
    event: ClassVar[str] = "take_table_card"

    combination_name: str
    card_position: int

    def payload(self) -> dict[str, Any]:
        return {
            "combination_name": self.combination_name,
            "card_position": self.card_position,
        }


@dataclass(frozen=True, slots=True)
class AddToCombination(Intent):
    event: ClassVar[str] = "add_cards_to_combination"

    combination_name: str
    card_positions: Tuple[int, ...]

    def payload(self) -> dict[str, Any]:
        return {
            "combination_name": self.combination_name,
            "card_positions": list(self.card_positions),
        }


@dataclass(frozen=True, slots=True)
class MoveBetweenCombinations(Intent):
    event: ClassVar[str] = "move_card_between_combinations"

    source_combination: str
    target_combination: str
    card_id: str

    def payload(self) -> dict[str, Any]:
        return {
            "source_combination": self.source_combination,
            "target_combination": self.target_combination,
            "card_id": self.card_id,
        }


def build_intent(drag: DragContext, target: DropTarget) -> Intent:
    """Map an allowed ``(drag, target)`` pair to its intent."""

    origin = drag.origin
    zone = target.zone_kind

    if origin is Origin.HAND and zone is ZoneKind.HAND_REORDER:
        assert target.target_position is not None
        return ReorderHand(from_position=drag.position, to_position=target.target_position)

    if origin is Origin.TABLE and zone is ZoneKind.HAND_INTAKE:
        assert drag.origin_combination is not None
        return TakeTableCard(
            combination_name=drag.origin_combination,
            card_position=drag.position,
        )

    if origin is Origin.HAND and zone is ZoneKind.COMBINATION_INTAKE:
        assert target.target_combination is not None
        return AddToCombination(
            combination_name=target.target_combination,
            card_positions=(drag.position,),
        )

    if origin is Origin.TABLE and zone is ZoneKind.COMBINATION_INTAKE:
        assert drag.origin_combination is not None
        assert target.target_combination is not None
        return MoveBetweenCombinations(
            source_combination=drag.origin_combination,
            target_combination=target.target_combination,
            card_id=drag.card.card_id,
        )

    raise ValueError(f"No intent for a {origin.value} card dropped on {zone.value}")


class IntentEmitter:
    """Hands intents to the transport without waiting for an answer."""

    def __init__(self, transport: "Transport") -> None:
        self.transport = transport

    def emit(self, drag: DragContext, target: DropTarget) -> Intent:
        """Build the intent for an allowed drop and send it once."""

        intent = build_intent(drag, target)
        try:
            self.transport.send(intent.event, intent.payload())
        except TransportUnavailable as exc:
            _log.warning("Intent %s not delivered: %s", intent.event, exc)
        else:
            log_intent(_log, intent)
        return intent
