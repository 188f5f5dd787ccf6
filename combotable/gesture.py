"""State machine for one drag gesture, from pickup to drop or cancel.

Mouse and touch input share the same vocabulary (``pickup``, ``move``,
``release``, ``cancel``). Only one drag exists at a time: a pickup while a
drag is active is ignored. Every terminal path clears the affordance state
before the machine returns to idle.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Callable, Mapping

from .drag import DragContext, DropTarget, PointerKind
from .errors import MalformedGesture, UnknownTarget
from .intents import Intent, IntentEmitter
from .legality import Resolver, Verdict
from .logging_utils import get_logger
from .snapshot import Snapshot
from .zones import Point, ZoneRegistry

_log = get_logger(__name__)

DragPayload = DragContext | Mapping[str, Any] | str | bytes


class GestureState(Enum):
    IDLE = "idle"
    ACTIVE = "active"
    DROPPED = "dropped"
    CANCELLED = "cancelled"


@dataclass(slots=True)
class Affordances:
    """Visual state the renderer reads while a drag is in progress."""

    hints: dict[str, bool] = field(default_factory=dict)
    hovered: str | None = None
    hovered_allowed: bool = False
    drag_active: bool = False
    touch_offset: tuple[float, float] | None = None

    def hover(self, zone_id: str | None, allowed: bool = False) -> None:
        """Move the single hovered indicator to *zone_id* (``None`` clears it)."""

        self.hovered = zone_id
        self.hovered_allowed = allowed if zone_id is not None else False

    def clear(self) -> None:
        self.hints.clear()
        self.hovered = None
        self.hovered_allowed = False
        self.drag_active = False
        self.touch_offset = None

    @property
    def is_clear(self) -> bool:
        return (
            not self.hints
            and self.hovered is None
            and not self.drag_active
            and self.touch_offset is None
        )


@dataclass(frozen=True, slots=True)
class GestureOutcome:
    """How a gesture ended."""

    state: GestureState
    drag: DragContext | None
    target: DropTarget | None = None
    intent: Intent | None = None
    reason: str = ""

    @property
    def dropped(self) -> bool:
        return self.state is GestureState.DROPPED


@dataclass(slots=True)
class _Press:
    drag: DragContext
    point: tuple[float, float]


class GestureMachine:
    """Tracks the active drag and turns a legal drop into exactly one intent."""

    def __init__(
        self,
        zones: ZoneRegistry,
        snapshot_provider: Callable[[], Snapshot],
        emitter: IntentEmitter,
        resolver: Resolver | None = None,
        drag_threshold: float = 5.0,
    ) -> None:
        self.zones = zones
        self.snapshot_provider = snapshot_provider
        self.emitter = emitter
        self.resolver = resolver or Resolver()
        self.drag_threshold = drag_threshold
        self.state = GestureState.IDLE
        self.drag: DragContext | None = None
        self.affordances = Affordances()
        self._press: _Press | None = None
        self._start_point: tuple[float, float] | None = None

    @property
    def active(self) -> bool:
        return self.state is GestureState.ACTIVE

    @property
    def pressed(self) -> bool:
        return self._press is not None

    # Input vocabulary -------------------------------------------------

    def press(
        self,
        payload: DragPayload,
        point: Point,
        pointer_kind: PointerKind | None = None,
    ) -> bool:
        """Arm a drag that starts once the pointer moves past the threshold."""

        if self.active:
            _log.debug("Press ignored: a drag is already active")
            return False
        drag = self._decode(payload, pointer_kind)
        if drag is None:
            return False
        if self.drag_threshold <= 0:
            return self._activate(drag, point)
        self._press = _Press(drag, (float(point[0]), float(point[1])))
        return True

    def pickup(
        self,
        payload: DragPayload,
        point: Point | None = None,
        pointer_kind: PointerKind | None = None,
    ) -> bool:
        """Start a drag immediately. Returns ``False`` when the pickup was ignored."""

        if self.active:
            _log.debug("Pickup ignored: a drag is already active")
            return False
        drag = self._decode(payload, pointer_kind)
        if drag is None:
            return False
        return self._activate(drag, point)

    def move(self, point: Point) -> None:
        """Track the pointer: promote an armed press and update the hovered zone."""

        if self._press is not None and not self.active:
            origin = self._press.point
            if math.dist(origin, (point[0], point[1])) < self.drag_threshold:
                return
            press, self._press = self._press, None
            self._activate(press.drag, origin)

        if not self.active:
            return
        drag = self.drag
        assert drag is not None

        if drag.pointer_kind is PointerKind.TOUCH and self._start_point is not None:
            self.affordances.touch_offset = (
                point[0] - self._start_point[0],
                point[1] - self._start_point[1],
            )

        zone = self.zones.locate(point)
        if zone is None:
            self.affordances.hover(None)
            return
        verdict = self._resolve(drag, zone.target)
        self.affordances.hover(zone.zone_id, verdict.allowed)

    def release(self, point: Point) -> GestureOutcome | None:
        """Finish the drag at *point*. A press that never became a drag is a click."""

        if self._press is not None and not self.active:
            self._press = None
            return None
        if not self.active:
            return None
        drag = self.drag
        assert drag is not None

        try:
            zone = self.zones.require(point)
        except UnknownTarget as exc:
            _log.debug("Cancelled: %s", exc)
            return self._finish(GestureState.CANCELLED, drag, reason="outside")
        return self._complete(drag, zone.target)

    def drop(
        self,
        raw_payload: DragPayload | None,
        target: DropTarget | Mapping[str, Any] | str,
        pointer_kind: PointerKind | None = None,
    ) -> GestureOutcome:
        """Native drop: the payload travels with the drop event itself."""

        self._press = None
        try:
            if raw_payload is None:
                raise MalformedGesture("Drop carried no drag payload")
            drag = _as_context(raw_payload, pointer_kind)
            if not isinstance(target, DropTarget):
                target = DropTarget.from_attributes(target)
        except MalformedGesture as exc:
            _log.debug("Cancelled malformed drop: %s", exc)
            return self._finish(GestureState.CANCELLED, self.drag, reason="malformed")
        return self._complete(drag, target)

    def cancel(self, reason: str = "cancelled") -> GestureOutcome | None:
        """Abort the current drag (escape key, lost focus, pointer left the window)."""

        self._press = None
        if not self.active:
            # Nothing to cancel, but stale affordances must never survive.
            self.affordances.clear()
            return None
        return self._finish(GestureState.CANCELLED, self.drag, reason=reason)

    def refresh(self) -> None:
        """Recompute the pickup hints, e.g. after a snapshot arrived mid-drag."""

        if self.active and self.drag is not None:
            self._highlight(self.drag)

    # Internal helpers -------------------------------------------------

    def _decode(self, payload: DragPayload, pointer_kind: PointerKind | None) -> DragContext | None:
        try:
            return _as_context(payload, pointer_kind)
        except MalformedGesture as exc:
            _log.debug("Pickup ignored: %s", exc)
            return None

    def _activate(self, drag: DragContext, point: Point | None) -> bool:
        self.affordances.clear()
        self.drag = drag
        self.state = GestureState.ACTIVE
        self._start_point = None if point is None else (float(point[0]), float(point[1]))
        self.affordances.drag_active = True
        if drag.pointer_kind is PointerKind.TOUCH:
            self.affordances.touch_offset = (0.0, 0.0)
        self._highlight(drag)
        _log.debug("Drag started: %s from %s", drag.card, drag.origin.value)
        return True

    def _highlight(self, drag: DragContext) -> None:
        snapshot = self.snapshot_provider()
        verdicts = self.resolver.classify(
            drag, self.zones.targets(), snapshot.is_player_turn_active(), snapshot
        )
        self.affordances.hints = {zone_id: verdict.allowed for zone_id, verdict in verdicts.items()}

    def _resolve(self, drag: DragContext, target: DropTarget) -> Verdict:
        snapshot = self.snapshot_provider()
        return self.resolver.resolve(drag, target, snapshot.is_player_turn_active(), snapshot)

    def _complete(self, drag: DragContext, target: DropTarget) -> GestureOutcome:
        verdict = self._resolve(drag, target)
        if not verdict.allowed:
            return self._finish(GestureState.CANCELLED, drag, target, reason="denied")
        return self._finish(GestureState.DROPPED, drag, target)

    def _finish(
        self,
        state: GestureState,
        drag: DragContext | None,
        target: DropTarget | None = None,
        reason: str = "",
    ) -> GestureOutcome:
        self.state = state
        self.affordances.clear()
        intent: Intent | None = None
        try:
            if state is GestureState.DROPPED:
                assert drag is not None and target is not None
                intent = self.emitter.emit(drag, target)
        finally:
            self.drag = None
            self._press = None
            self._start_point = None
            self.state = GestureState.IDLE

        outcome = GestureOutcome(state, drag, target, intent, reason)
        _log.debug("Drag %s%s", state.value, f" ({reason})" if reason else "")
        return outcome


def _as_context(payload: DragPayload, pointer_kind: PointerKind | None) -> DragContext:
    """Decode *payload*, stamping it with the pointer that actually carries it.

    With no *pointer_kind* a ready-made context keeps its own and a raw
    payload is taken to come from a mouse.
    """

    if isinstance(payload, DragContext):
        if pointer_kind is None or payload.pointer_kind is pointer_kind:
            return payload
        return replace(payload, pointer_kind=pointer_kind)
    return DragContext.from_payload(payload, pointer_kind or PointerKind.MOUSE)
