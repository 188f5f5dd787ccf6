import pygame
import pytest

from combotable.app import TableClientApp
from combotable.config import ClientConfig
from combotable.drag import Origin, PointerKind
from combotable.events import SNAPSHOT_RECEIVED
from combotable.gesture import GestureState

from conftest import make_snapshot


@pytest.fixture
def app(transport):
    client = TableClientApp(ClientConfig(), transport=transport)
    client.apply_snapshot(
        make_snapshot(
            turn=True,
            hand=("2c", "3c", "Kd"),
            run_1=("3h", "4h", "5h", "6h"),
            trio_A=("7c", "7d", "7s"),
        )
    )
    return client


def mouse(kind, pos, **extra):
    attributes = {"pos": pos, **extra}
    if kind != pygame.MOUSEMOTION:
        attributes.setdefault("button", 1)
    return pygame.event.Event(kind, attributes)


def finger(kind, pos, finger_id=1):
    # Finger coordinates are normalised to the window size.
    return pygame.event.Event(
        kind,
        touch_id=0,
        finger_id=finger_id,
        x=pos[0] / 1280,
        y=pos[1] / 720,
        dx=0.0,
        dy=0.0,
    )


def centre(rect):
    return rect.center


def hand_card(app, position):
    return next(p for p in app.layout.cards if p.drag.origin is Origin.HAND and p.drag.position == position)


def table_card(app, name, position):
    return next(
        p
        for p in app.layout.cards
        if p.drag.origin_combination == name and p.drag.position == position
    )


def drag(app, start, end):
    app.handle_event(mouse(pygame.MOUSEBUTTONDOWN, start))
    app.handle_event(mouse(pygame.MOUSEMOTION, end))
    app.handle_event(mouse(pygame.MOUSEBUTTONUP, end))


def test_mouse_drag_reorders_hand(app, transport):
    start = centre(hand_card(app, 0).rect)
    end = app.zones.get("hand-slot-2").rect.center
    drag(app, start, end)
    assert transport.sent == [("reorder_hand_card", {"from_position": 0, "to_position": 2})]
    assert app.gestures.state is GestureState.IDLE


def test_take_from_table_into_hand(app, transport):
    start = table_card(app, "run-1", 3).rect.move(-5, 0).midright
    drag(app, start, app.layout.intake_area.center)
    assert transport.sent == [("take_table_card", {"combination_name": "run-1", "card_position": 3})]


def test_take_from_minimum_combination_is_refused(app, transport):
    start = table_card(app, "trio-A", 2).rect.move(-5, 0).midright
    drag(app, start, app.layout.intake_area.center)
    assert transport.sent == []


def test_click_without_motion_sends_nothing(app, transport):
    point = centre(hand_card(app, 1).rect)
    app.handle_event(mouse(pygame.MOUSEBUTTONDOWN, point))
    app.handle_event(mouse(pygame.MOUSEBUTTONUP, point))
    assert transport.sent == []


def test_escape_cancels_active_drag(app, transport):
    start = centre(hand_card(app, 0).rect)
    app.handle_event(mouse(pygame.MOUSEBUTTONDOWN, start))
    app.handle_event(mouse(pygame.MOUSEMOTION, app.zones.get("hand-slot-2").rect.center))
    assert app.gestures.active
    app.handle_event(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_ESCAPE))
    assert not app.gestures.active
    assert app.gestures.affordances.is_clear
    app.handle_event(mouse(pygame.MOUSEBUTTONUP, app.zones.get("hand-slot-2").rect.center))
    assert transport.sent == []


def test_emulated_touch_mouse_events_are_ignored(app):
    start = centre(hand_card(app, 0).rect)
    app.handle_event(mouse(pygame.MOUSEBUTTONDOWN, start, touch=True))
    assert not app.gestures.pressed


def test_snapshot_event_replaces_table(app):
    app.handle_event(
        pygame.event.Event(
            SNAPSHOT_RECEIVED,
            state={"is_current_turn": False, "hand": [{"value": "A", "suit": "clubs"}]},
        )
    )
    assert not app.snapshot.is_player_turn_active()
    assert [zone.zone_id for zone in app.zones] == ["hand-intake", "hand-slot-0"]


def test_invalid_snapshot_keeps_previous(app, caplog):
    before = app.snapshot
    with caplog.at_level("ERROR"):
        assert not app.apply_state("{oops")
    assert app.snapshot is before
    assert "undecodable" in caplog.text


def empty_point(app):
    return next(
        (x, y)
        for x in range(20, 1280, 40)
        for y in range(20, 720, 40)
        if app.zones.locate((x, y)) is None
    )


def test_touch_drag_takes_card(app, transport):
    start = table_card(app, "run-1", 3).rect.move(-5, 0).midright
    end = app.layout.intake_area.center
    app.handle_event(finger(pygame.FINGERDOWN, start))
    assert app.gestures.active
    assert app.gestures.drag.pointer_kind is PointerKind.TOUCH
    assert app.gestures.affordances.touch_offset == (0.0, 0.0)

    app.handle_event(finger(pygame.FINGERMOTION, end))
    offset = app.gestures.affordances.touch_offset
    assert offset == pytest.approx((end[0] - start[0], end[1] - start[1]), abs=1e-3)

    app.handle_event(finger(pygame.FINGERUP, end))
    assert transport.sent == [("take_table_card", {"combination_name": "run-1", "card_position": 3})]
    assert app.gestures.affordances.is_clear


def test_touch_release_outside_cancels(app, transport):
    outside = empty_point(app)
    app.handle_event(finger(pygame.FINGERDOWN, centre(hand_card(app, 0).rect)))
    app.handle_event(finger(pygame.FINGERMOTION, outside))
    app.handle_event(finger(pygame.FINGERUP, outside))
    assert app.gestures.state is GestureState.IDLE
    assert app.gestures.affordances.is_clear
    assert app.active_finger is None
    assert transport.sent == []


def test_second_finger_is_ignored(app, transport):
    slot = app.zones.get("hand-slot-2").rect.center
    app.handle_event(finger(pygame.FINGERDOWN, centre(hand_card(app, 0).rect), finger_id=1))
    app.handle_event(finger(pygame.FINGERDOWN, centre(hand_card(app, 1).rect), finger_id=2))
    assert app.gestures.drag.position == 0

    app.handle_event(finger(pygame.FINGERUP, slot, finger_id=2))
    assert app.gestures.active
    assert transport.sent == []

    app.handle_event(finger(pygame.FINGERUP, slot, finger_id=1))
    assert transport.sent == [("reorder_hand_card", {"from_position": 0, "to_position": 2})]


@pytest.mark.parametrize("kind", [pygame.WINDOWLEAVE, pygame.WINDOWFOCUSLOST])
def test_leaving_the_window_cancels(app, transport, kind):
    start = table_card(app, "run-1", 3).rect.move(-5, 0).midright
    end = app.layout.intake_area.center
    app.handle_event(finger(pygame.FINGERDOWN, start))
    app.handle_event(finger(pygame.FINGERMOTION, end))
    assert not app.gestures.affordances.is_clear

    app.handle_event(pygame.event.Event(kind))
    assert not app.gestures.active
    assert app.gestures.affordances.is_clear
    assert app.active_finger is None

    app.handle_event(finger(pygame.FINGERUP, end))
    assert transport.sent == []


@pytest.mark.parametrize("kind", [pygame.WINDOWLEAVE, pygame.WINDOWFOCUSLOST])
def test_leaving_the_window_cancels_mouse_drag(app, transport, kind):
    slot = app.zones.get("hand-slot-2").rect.center
    app.handle_event(mouse(pygame.MOUSEBUTTONDOWN, centre(hand_card(app, 0).rect)))
    app.handle_event(mouse(pygame.MOUSEMOTION, slot))
    assert app.gestures.active

    app.handle_event(pygame.event.Event(kind))
    assert app.gestures.affordances.is_clear
    app.handle_event(mouse(pygame.MOUSEBUTTONUP, slot))
    assert transport.sent == []


def test_update_forgets_finished_drag(app):
    app.handle_event(finger(pygame.FINGERDOWN, centre(hand_card(app, 0).rect)))
    assert app.dragged is not None
    app.gestures.cancel()
    app.update(0.016)
    assert app.dragged is None
