"""Screen layout of the hand, the table combinations and their drop zones."""

from __future__ import annotations

from dataclasses import dataclass, field

import pygame

from .drag import DragContext, DropTarget, Origin, ZoneKind
from .models import Card
from .snapshot import TableSnapshot
from .zones import DropZone, Point

CARD_SIZE = (90, 132)


@dataclass(slots=True)
class CardPlacement:
    """A card drawn on screen together with the drag it starts when picked up."""

    card: Card
    rect: pygame.Rect
    drag: DragContext


@dataclass(slots=True)
class TableLayout:
    cards: list[CardPlacement] = field(default_factory=list)
    zones: list[DropZone] = field(default_factory=list)
    hand_area: pygame.Rect = field(default_factory=lambda: pygame.Rect(0, 0, 0, 0))
    intake_area: pygame.Rect = field(default_factory=lambda: pygame.Rect(0, 0, 0, 0))
    combination_areas: dict[str, pygame.Rect] = field(default_factory=dict)

    def card_at(self, point: Point) -> CardPlacement | None:
        """Return the top-most card under *point* if any."""

        for placement in reversed(self.cards):
            if placement.rect.collidepoint(int(point[0]), int(point[1])):
                return placement
        return None


class LayoutEngine:
    """Place cards and zones for a snapshot on a screen of a given size."""

    HAND_ZONE_HEIGHT_RATIO = 0.25
    INTAKE_HEIGHT_RATIO = 0.08
    LEFT_RIGHT_MARGIN_RATIO = 0.08
    CARD_GAP = 12
    FAN_OVERLAP = 30
    TABLE_PADDING = 24
    ZONE_PADDING = 8

    def __init__(self, card_size: tuple[int, int] = CARD_SIZE) -> None:
        self.card_size = card_size

    def layout(self, snapshot: TableSnapshot, screen_size: tuple[int, int]) -> TableLayout:
        result = TableLayout()
        self._layout_hand(snapshot, screen_size, result)
        self._layout_table(snapshot, screen_size, result)
        return result

    # Internal helpers -------------------------------------------------

    def _layout_hand(
        self, snapshot: TableSnapshot, screen_size: tuple[int, int], result: TableLayout
    ) -> None:
        screen_width, screen_height = screen_size
        card_width, card_height = self.card_size

        hand_top = int(screen_height * (1.0 - self.HAND_ZONE_HEIGHT_RATIO))
        intake_top = int(hand_top - screen_height * self.INTAKE_HEIGHT_RATIO)
        result.hand_area = pygame.Rect(0, hand_top, screen_width, screen_height - hand_top)
        result.intake_area = pygame.Rect(0, intake_top, screen_width, hand_top - intake_top)
        result.zones.append(
            DropZone("hand-intake", result.intake_area.copy(), DropTarget(ZoneKind.HAND_INTAKE))
        )

        count = len(snapshot.hand)
        if not count:
            return

        margin = screen_width * self.LEFT_RIGHT_MARGIN_RATIO
        available_width = max(0.0, screen_width - 2 * margin)
        step = min(card_width + self.CARD_GAP, available_width / count)
        row_width = step * (count - 1) + card_width
        left = (screen_width - row_width) / 2.0
        top = result.hand_area.centery - card_height // 2

        for position, card in enumerate(snapshot.hand.cards):
            rect = pygame.Rect(int(round(left + step * position)), top, card_width, card_height)
            result.cards.append(
                CardPlacement(card, rect, DragContext(card, Origin.HAND, position))
            )
            result.zones.append(
                DropZone(
                    f"hand-slot-{position}",
                    rect.copy(),
                    DropTarget(ZoneKind.HAND_REORDER, target_position=position),
                )
            )

    def _layout_table(
        self, snapshot: TableSnapshot, screen_size: tuple[int, int], result: TableLayout
    ) -> None:
        screen_width, _ = screen_size
        card_width, card_height = self.card_size
        padding = self.TABLE_PADDING
        x = y = padding

        for combination in snapshot.combinations:
            count = max(1, len(combination.cards))
            width = card_width + (count - 1) * self.FAN_OVERLAP
            if x > padding and x + width > screen_width - padding:
                x = padding
                y += card_height + padding
            area = pygame.Rect(x, y, width, card_height)
            result.combination_areas[combination.name] = area
            result.zones.append(
                DropZone(
                    f"combination-{combination.name}",
                    area.inflate(2 * self.ZONE_PADDING, 2 * self.ZONE_PADDING),
                    DropTarget(ZoneKind.COMBINATION_INTAKE, target_combination=combination.name),
                )
            )
            for position, card in enumerate(combination.cards):
                rect = pygame.Rect(x + position * self.FAN_OVERLAP, y, card_width, card_height)
                drag = DragContext(card, Origin.TABLE, position, combination.name)
                result.cards.append(CardPlacement(card, rect, drag))
            x += width + padding
