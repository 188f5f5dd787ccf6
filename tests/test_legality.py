from types import SimpleNamespace

import pytest

from combotable.drag import DropTarget, Origin, ZoneKind
from combotable.legality import Resolver, Verdict, resolve

from conftest import card, hand_drag, make_snapshot, table_drag

HAND_REORDER = DropTarget(ZoneKind.HAND_REORDER, target_position=5)
HAND_INTAKE = DropTarget(ZoneKind.HAND_INTAKE)


def into(name):
    return DropTarget(ZoneKind.COMBINATION_INTAKE, target_combination=name)


@pytest.fixture
def snapshot():
    return make_snapshot(
        turn=True,
        run_1=("3h", "4h", "5h", "6h"),
        trio_A=("7c", "7d", "7s", "7h"),
        run_2=("8s", "9s", "10s"),
        small=("Kc", "Kd", "Ks"),
    )


class TestDecisionTable:
    def test_hand_reorder_always_allowed(self, snapshot):
        assert resolve(hand_drag(2), HAND_REORDER, True, snapshot) is Verdict.ALLOW
        assert resolve(hand_drag(2), HAND_REORDER, False, snapshot) is Verdict.ALLOW

    def test_table_card_cannot_reorder_hand(self, snapshot):
        drag = table_drag("run-1", 3, "6h")
        assert resolve(drag, HAND_REORDER, True, snapshot) is Verdict.DENY

    def test_hand_card_cannot_go_to_hand_intake(self, snapshot):
        assert resolve(hand_drag(), HAND_INTAKE, True, snapshot) is Verdict.DENY

    def test_take_from_large_combination(self, snapshot):
        drag = table_drag("run-1", 3, "6h")
        assert resolve(drag, HAND_INTAKE, True, snapshot) is Verdict.ALLOW

    def test_take_from_minimum_combination(self, snapshot):
        drag = table_drag("small", 0, "Kc")
        assert resolve(drag, HAND_INTAKE, True, snapshot) is Verdict.DENY

    def test_hand_to_combination_is_permissive(self, snapshot):
        # No shape check: a queen of clubs on a hearts run is still provisionally fine.
        drag = hand_drag(0, "Qc")
        assert resolve(drag, into("run-1"), True, snapshot) is Verdict.ALLOW
        assert resolve(drag, into("small"), True, snapshot) is Verdict.ALLOW

    def test_move_between_combinations(self, snapshot):
        drag = table_drag("trio-A", 3, "7h")
        assert resolve(drag, into("run-2"), True, snapshot) is Verdict.ALLOW

    def test_move_onto_same_combination(self, snapshot):
        drag = table_drag("trio-A", 3, "7h")
        assert resolve(drag, into("trio-A"), True, snapshot) is Verdict.DENY

    def test_move_from_minimum_combination(self, snapshot):
        drag = table_drag("small", 1, "Kd")
        assert resolve(drag, into("run-2"), True, snapshot) is Verdict.DENY


class TestInvariants:
    @pytest.mark.parametrize("size, expected", [(3, Verdict.DENY), (4, Verdict.ALLOW), (7, Verdict.ALLOW)])
    @pytest.mark.parametrize("target", [HAND_INTAKE, into("elsewhere")])
    def test_minimum_size(self, size, expected, target):
        labels = ("2d", "3d", "4d", "5d", "6d", "7d", "8d")[:size]
        snapshot = make_snapshot(turn=True, source=labels, elsewhere=("9c", "9d", "9s"))
        drag = table_drag("source", 0, "2d")
        assert resolve(drag, target, True, snapshot) is expected

    @pytest.mark.parametrize(
        "drag, target",
        [
            (table_drag("run-1", 3, "6h"), HAND_INTAKE),
            (hand_drag(0, "Qc"), into("run-1")),
            (table_drag("trio-A", 3, "7h"), into("run-2")),
        ],
    )
    def test_turn_gating(self, snapshot, drag, target):
        assert resolve(drag, target, True, snapshot) is Verdict.ALLOW
        assert resolve(drag, target, False, snapshot) is Verdict.DENY

    def test_turn_comes_from_argument(self, snapshot):
        off_turn = make_snapshot(turn=False, run_1=("3h", "4h", "5h", "6h"))
        drag = table_drag("run-1", 3, "6h")
        assert resolve(drag, HAND_INTAKE, True, off_turn) is Verdict.ALLOW

    def test_stale_source_combination_is_denied(self, snapshot, caplog):
        drag = table_drag("gone", 0, "6h")
        with caplog.at_level("WARNING"):
            assert resolve(drag, HAND_INTAKE, True, snapshot) is Verdict.DENY
            assert resolve(drag, into("run-1"), True, snapshot) is Verdict.DENY
        assert not caplog.records


class TestStrictShrink:
    def test_rejects_breaking_a_run(self, snapshot):
        resolver = Resolver(strict_shrink=True)
        assert resolver.resolve(table_drag("run-1", 1, "4h"), HAND_INTAKE, True, snapshot) is Verdict.DENY
        assert resolver.resolve(table_drag("run-1", 3, "6h"), HAND_INTAKE, True, snapshot) is Verdict.ALLOW

    def test_permissive_by_default(self, snapshot):
        assert Resolver().resolve(table_drag("run-1", 1, "4h"), HAND_INTAKE, True, snapshot) is Verdict.ALLOW

    def test_custom_minimum(self, snapshot):
        resolver = Resolver(minimum_size=4)
        assert resolver.resolve(table_drag("run-1", 3, "6h"), HAND_INTAKE, True, snapshot) is Verdict.DENY


def test_classify_every_zone(snapshot):
    drag = table_drag("trio-A", 3, "7h")
    verdicts = Resolver().classify(
        drag,
        [
            ("slot", HAND_REORDER),
            ("intake", HAND_INTAKE),
            ("trio", into("trio-A")),
            ("run", into("run-2")),
        ],
        True,
        snapshot,
    )
    assert verdicts == {
        "slot": Verdict.DENY,
        "intake": Verdict.ALLOW,
        "trio": Verdict.DENY,
        "run": Verdict.ALLOW,
    }


class TestStaleTargets:
    def test_vanished_target_is_denied(self, snapshot, caplog):
        with caplog.at_level("WARNING"):
            assert resolve(hand_drag(0, "Qc"), into("vanished"), True, snapshot) is Verdict.DENY
            assert resolve(table_drag("trio-A", 3, "7h"), into("vanished"), True, snapshot) is Verdict.DENY
        assert not caplog.records

    def test_card_no_longer_in_source_is_denied(self, snapshot):
        drag = table_drag("run-1", 0, "9c")
        assert resolve(drag, HAND_INTAKE, True, snapshot) is Verdict.DENY
        assert resolve(drag, into("run-2"), True, snapshot) is Verdict.DENY

    def test_table_drag_without_origin_is_denied(self, snapshot):
        drag = SimpleNamespace(origin=Origin.TABLE, origin_combination=None, card=card("6h"))
        assert resolve(drag, HAND_INTAKE, True, snapshot) is Verdict.DENY
