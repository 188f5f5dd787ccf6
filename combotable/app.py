"""Pygame front end: draws the table and feeds input into the gesture machine."""

from __future__ import annotations

from typing import Any, Mapping

import pygame

from .config import ClientConfig
from .drag import PointerKind
from .errors import SnapshotError
from .events import SNAPSHOT_RECEIVED
from .game_objects import SpriteCache
from .gesture import GestureMachine
from .intents import IntentEmitter
from .layout import CardPlacement, LayoutEngine, TableLayout
from .legality import Resolver
from .logging_utils import get_logger
from .resources import ResourceManager
from .snapshot import TableSnapshot
from .transport import PygameEventTransport, Transport
from .zones import DropZone, ZoneRegistry

_log = get_logger(__name__)


class TableClientApp:
    """Minimal pygame wrapper that wires together the systems."""

    BACKGROUND = (32, 48, 64)
    ZONE_IDLE_COLOR = pygame.Color(255, 255, 255, 40)
    ZONE_VALID_COLOR = pygame.Color(80, 200, 120, 90)
    ZONE_INVALID_COLOR = pygame.Color(220, 70, 70, 90)
    HOVER_VALID_COLOR = pygame.Color(80, 230, 120)
    HOVER_INVALID_COLOR = pygame.Color(240, 60, 60)
    HOVER_LINE_WIDTH = 4
    DRAG_LIFT = (0, -8)

    def __init__(
        self,
        config: ClientConfig | None = None,
        transport: Transport | None = None,
        snapshot: TableSnapshot | None = None,
    ) -> None:
        self.config = config or ClientConfig()
        self.resources = ResourceManager(self.config.assets)
        self.screen: pygame.Surface | None = None
        self.clock: pygame.time.Clock | None = None
        self.running = False
        self.snapshot = snapshot or TableSnapshot()
        self.layout_engine = LayoutEngine()
        self.layout = TableLayout()
        self.zones = ZoneRegistry()
        self.sprites = SpriteCache()
        self.pointer = pygame.Vector2()
        self.press_point = pygame.Vector2()
        self.dragged: CardPlacement | None = None
        self.active_finger: int | None = None

        interaction = self.config.interaction
        self.gestures = GestureMachine(
            zones=self.zones,
            snapshot_provider=lambda: self.snapshot,
            emitter=IntentEmitter(transport or PygameEventTransport()),
            resolver=Resolver(
                minimum_size=interaction.min_combination_size,
                strict_shrink=interaction.strict_shrink,
            ),
            drag_threshold=interaction.drag_threshold,
        )

    def setup(self) -> None:
        """Initialise pygame and the display surface."""

        pygame.init()
        display = self.config.display
        flags = 0
        size = (display.width, display.height)

        if display.fullscreen:
            flags |= pygame.FULLSCREEN
            if display.width <= 0 or display.height <= 0:
                info = pygame.display.Info()
                size = (info.current_w, info.current_h)

        self.screen = pygame.display.set_mode(size, flags)
        pygame.display.set_caption(display.caption)
        self.clock = pygame.time.Clock()
        self.running = True
        self._relayout()

    # Snapshots --------------------------------------------------------

    def apply_snapshot(self, snapshot: TableSnapshot) -> None:
        """Re-render from a new authoritative snapshot."""

        self.snapshot = snapshot
        self._relayout()
        self.gestures.refresh()

    def apply_state(self, state: Mapping[str, Any] | str) -> bool:
        """Decode a server state document; keep the current snapshot when it is invalid."""

        try:
            snapshot = TableSnapshot.from_state(state)
        except SnapshotError as exc:
            _log.error("Ignoring undecodable table state: %s", exc)
            return False
        self.apply_snapshot(snapshot)
        return True

    # Input ------------------------------------------------------------

    def handle_events(self) -> None:
        """Consume pygame events."""

        for event in pygame.event.get():
            self.handle_event(event)

    def handle_event(self, event: pygame.event.Event) -> None:
        if event.type == pygame.QUIT:
            self.running = False
        elif event.type == pygame.KEYDOWN:
            if event.key == pygame.K_ESCAPE:
                self._cancel("escape")
        elif event.type in (pygame.WINDOWLEAVE, pygame.WINDOWFOCUSLOST):
            self._cancel("window")
        elif event.type == SNAPSHOT_RECEIVED:
            self.apply_state(event.state)
        elif self._is_mouse_event(event):
            self._handle_mouse(event)
        elif event.type in (pygame.FINGERDOWN, pygame.FINGERMOTION, pygame.FINGERUP):
            if self.config.interaction.touch_enabled:
                self._handle_touch(event)

    def _is_mouse_event(self, event: pygame.event.Event) -> bool:
        if event.type not in (pygame.MOUSEBUTTONDOWN, pygame.MOUSEMOTION, pygame.MOUSEBUTTONUP):
            return False
        # Touch input is also delivered as emulated mouse events.
        return not (getattr(event, "touch", False) and self.config.interaction.touch_enabled)

    def _handle_mouse(self, event: pygame.event.Event) -> None:
        point = pygame.Vector2(event.pos)
        self.pointer = point
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            self._begin(point, PointerKind.MOUSE)
        elif event.type == pygame.MOUSEMOTION:
            self._track(point)
        elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
            self._end(point)

    def _handle_touch(self, event: pygame.event.Event) -> None:
        point = self._finger_to_screen(event.x, event.y)
        if event.type == pygame.FINGERDOWN:
            if self.active_finger is not None:
                return
            self.pointer = point
            if self._begin(point, PointerKind.TOUCH):
                self.active_finger = event.finger_id
            return

        if event.finger_id != self.active_finger:
            return
        self.pointer = point
        if event.type == pygame.FINGERMOTION:
            self._track(point)
        else:
            self.active_finger = None
            self._end(point)

    def _begin(self, point: pygame.Vector2, pointer_kind: PointerKind) -> bool:
        placement = self.layout.card_at(point)
        if placement is None:
            return False
        if pointer_kind is PointerKind.TOUCH:
            started = self.gestures.pickup(placement.drag, point, pointer_kind)
        else:
            started = self.gestures.press(placement.drag, point, pointer_kind)
        if started:
            self.dragged = placement
            self.press_point = pygame.Vector2(point)
        return started

    def _track(self, point: pygame.Vector2) -> None:
        self.gestures.move(point)

    def _end(self, point: pygame.Vector2) -> None:
        self.gestures.release(point)
        self.dragged = None

    def _cancel(self, reason: str) -> None:
        self.gestures.cancel(reason)
        self.dragged = None
        self.active_finger = None

    def _finger_to_screen(self, x: float, y: float) -> pygame.Vector2:
        if self.screen is not None:
            width, height = self.screen.get_size()
        else:
            width, height = self.config.display.width, self.config.display.height
        return pygame.Vector2(x * width, y * height)

    # Frame ------------------------------------------------------------

    def update(self, dt: float) -> None:
        """Advance the client state by *dt* seconds."""

        if self.dragged is not None and not (self.gestures.active or self.gestures.pressed):
            self.dragged = None

    def draw(self) -> None:
        """Render the current frame."""

        assert self.screen is not None
        self.screen.fill(self.BACKGROUND)
        overlay = pygame.Surface(self.screen.get_size(), pygame.SRCALPHA)
        for zone in self.zones:
            self._draw_zone(overlay, zone)
        self.screen.blit(overlay, (0, 0))

        dragging = self.dragged if self.gestures.active else None
        for placement in self.layout.cards:
            if placement is dragging:
                continue
            self.sprites.get(placement.card).draw(self.screen, placement.rect)

        self._draw_hover(self.screen)
        if dragging is not None:
            self.sprites.get(dragging.card).draw(self.screen, self._drag_rect(dragging))
        pygame.display.flip()

    def _draw_zone(self, surface: pygame.Surface, zone: DropZone) -> None:
        hint = self.gestures.affordances.hints.get(zone.zone_id)
        if hint is None:
            color = self.ZONE_IDLE_COLOR
        elif hint:
            color = self.ZONE_VALID_COLOR
        else:
            color = self.ZONE_INVALID_COLOR
        pygame.draw.rect(surface, color, zone.rect, border_radius=10)

    def _draw_hover(self, surface: pygame.Surface) -> None:
        affordances = self.gestures.affordances
        if affordances.hovered is None:
            return
        zone = self.zones.get(affordances.hovered)
        if zone is None:
            return
        color = self.HOVER_VALID_COLOR if affordances.hovered_allowed else self.HOVER_INVALID_COLOR
        pygame.draw.rect(surface, color, zone.rect, width=self.HOVER_LINE_WIDTH, border_radius=10)

    def _drag_rect(self, placement: CardPlacement) -> pygame.Rect:
        offset = self.gestures.affordances.touch_offset
        if offset is None:
            delta = self.pointer - self.press_point
            offset = (delta.x, delta.y)
        return placement.rect.move(
            int(round(offset[0])) + self.DRAG_LIFT[0],
            int(round(offset[1])) + self.DRAG_LIFT[1],
        )

    def _relayout(self) -> None:
        size = (
            self.screen.get_size()
            if self.screen is not None
            else (self.config.display.width, self.config.display.height)
        )
        self.layout = self.layout_engine.layout(self.snapshot, size)
        self.zones.replace(self.layout.zones)
        if self.dragged is not None:
            self.dragged = next(
                (p for p in self.layout.cards if p.drag == self.dragged.drag), self.dragged
            )

    def run(self) -> None:
        """Run the main loop until the app stops."""

        if not self.running:
            self.setup()

        assert self.clock is not None
        display = self.config.display

        while self.running:
            self.handle_events()
            dt = self.clock.tick(display.frame_rate) / 1000.0
            self.update(dt)
            self.draw()

        pygame.quit()
