import os

os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

import pygame
import pytest

from combotable.drag import DragContext, DropTarget, Origin, PointerKind, ZoneKind
from combotable.errors import TransportUnavailable
from combotable.gesture import GestureMachine
from combotable.intents import IntentEmitter
from combotable.legality import Resolver
from combotable.models import Card, CombinationSlot, HandSlot
from combotable.snapshot import TableSnapshot
from combotable.zones import DropZone, ZoneRegistry


def card(label):
    """``"7h"`` -> seven of hearts, ``"Qs1"`` -> queen of spades from deck 1."""
    suits = {"h": "hearts", "d": "diamonds", "c": "clubs", "s": "spades"}
    deck = 0
    if label[-1].isdigit() and label[-2] in suits:
        deck = int(label[-1])
        label = label[:-1]
    return Card(label[:-1].upper(), suits[label[-1]], deck)


def cards(*labels):
    return [card(label) for label in labels]


def make_snapshot(turn=True, hand=(), **combinations):
    return TableSnapshot(
        hand=HandSlot(cards(*hand)),
        combinations=tuple(
            CombinationSlot(name.replace("_", "-"), cards(*labels))
            for name, labels in combinations.items()
        ),
        turn_active=turn,
    )


def hand_drag(position=0, label="7h", pointer_kind=PointerKind.MOUSE):
    return DragContext(card(label), Origin.HAND, position, pointer_kind=pointer_kind)


def table_drag(combination, position=0, label="7h", pointer_kind=PointerKind.MOUSE):
    return DragContext(card(label), Origin.TABLE, position, combination, pointer_kind)


class RecordingTransport:
    def __init__(self):
        self.sent = []
        self.available = True

    def send(self, event, payload):
        if not self.available:
            raise TransportUnavailable("offline")
        self.sent.append((event, dict(payload)))


@pytest.fixture
def transport():
    return RecordingTransport()


@pytest.fixture
def zones():
    """Three zones side by side plus a hand-intake strip below them."""
    return ZoneRegistry(
        [
            DropZone("hand-intake", pygame.Rect(0, 300, 400, 50), DropTarget(ZoneKind.HAND_INTAKE)),
            DropZone(
                "hand-slot-5",
                pygame.Rect(0, 400, 100, 100),
                DropTarget(ZoneKind.HAND_REORDER, target_position=5),
            ),
            DropZone(
                "combination-run-1",
                pygame.Rect(0, 0, 100, 100),
                DropTarget(ZoneKind.COMBINATION_INTAKE, target_combination="run-1"),
            ),
            DropZone(
                "combination-trio-A",
                pygame.Rect(150, 0, 100, 100),
                DropTarget(ZoneKind.COMBINATION_INTAKE, target_combination="trio-A"),
            ),
            DropZone(
                "combination-run-2",
                pygame.Rect(300, 0, 100, 100),
                DropTarget(ZoneKind.COMBINATION_INTAKE, target_combination="run-2"),
            ),
        ]
    )


# Points inside each fixture zone.
HAND_INTAKE = (50, 320)
HAND_SLOT_5 = (50, 450)
RUN_1 = (50, 50)
TRIO_A = (200, 50)
RUN_2 = (350, 50)
NOWHERE = (600, 600)


@pytest.fixture
def table():
    """Mutable holder so tests can swap the snapshot between events."""

    class Table:
        snapshot = make_snapshot(
            turn=True,
            hand=("2c", "3c", "7h1"),
            run_1=("3h", "4h", "5h", "6h"),
            trio_A=("7c", "7d", "7s", "7h"),
            run_2=("8s", "9s", "10s"),
        )

    return Table


@pytest.fixture
def machine(zones, table, transport):
    return GestureMachine(
        zones=zones,
        snapshot_provider=lambda: table.snapshot,
        emitter=IntentEmitter(transport),
        resolver=Resolver(),
        drag_threshold=5.0,
    )
