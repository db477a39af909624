"""
Tests for parallel composition.
"""

from enstate import Embedding, ZippedMachine, step_machine
from tests.fixtures import (
    Action,
    Buttons,
    Display,
    ModalAction,
    ModalResult,
    count_dialog,
    count_dialog_mapped,
    counter,
)


def doubler():
    """Same alphabet as the counter, but moves in steps of two."""
    return step_machine(
        0,
        (Action.INCREMENT, Action.DECREMENT),
        lambda n, action: n + 2 if action is Action.INCREMENT else n - 2,
    )


class TestZipWith:

    def test_broadcast_advances_both(self):
        left, right = counter(), doubler()
        m = left.zip_with(right, lambda a, b: (a, b))
        assert isinstance(m, ZippedMachine)

        m.traverse(Action.INCREMENT)

        assert left.state() == 1
        assert right.state() == 2
        assert m.state() == (left.state(), right.state())

    def test_edges_are_first_machines_edges(self):
        m = counter().zip_with(doubler(), lambda a, b: a + b)
        assert m.edges() == (Action.INCREMENT, Action.DECREMENT)

    def test_combine_is_applied_on_every_read(self):
        m = counter().zip_with(doubler(), lambda a, b: a + b)
        m.traverse(Action.INCREMENT)
        m.traverse(Action.INCREMENT)
        m.traverse(Action.DECREMENT)
        assert m.state() == 1 + 2

    def test_illegal_edge_is_noop(self):
        m = counter().zip_with(doubler(), lambda a, b: (a, b))
        m.traverse(ModalAction.OK)
        assert m.state() == (0, 0)


class TestZipWithInto:

    def test_modal_dialog_decrement(self, dialog):
        assert dialog.state() is None

        dialog.traverse(Display(Action.DECREMENT))
        assert dialog.state() is None

        dialog.traverse(Buttons(ModalAction.OK))
        assert dialog.state() == ModalResult.ok(-1)

    def test_modal_dialog_increment(self, dialog):
        dialog.traverse(Display(Action.INCREMENT))
        assert dialog.state() is None

        dialog.traverse(Buttons(ModalAction.OK))
        assert dialog.state() == ModalResult.ok(1)

    def test_modal_dialog_cancel(self, dialog):
        dialog.traverse(Display(Action.INCREMENT))
        dialog.traverse(Buttons(ModalAction.CANCEL))
        assert dialog.state() == ModalResult.cancel()

    def test_menu_is_the_dialogs_menu(self, dialog):
        assert dialog.edges() == (Buttons(ModalAction.OK), Buttons(ModalAction.CANCEL))

    def test_contents_keep_running_after_dialog_finishes(self, dialog):
        dialog.traverse(Buttons(ModalAction.OK))
        assert dialog.edges() == ()

        dialog.traverse(Display(Action.INCREMENT))
        assert dialog.state() == ModalResult.ok(1)

    def test_edge_for_neither_side_is_noop(self, dialog):
        dialog.traverse(Display(Action.INCREMENT))
        dialog.traverse("stray")
        dialog.traverse(Buttons("not a modal action"))
        assert dialog.machine1.state() is None
        assert dialog.machine2.state() == 1

    def test_matches_map_actions_construction(self):
        script = [
            Display(Action.INCREMENT),
            Display(Action.INCREMENT),
            Buttons(ModalAction.OK),
            Display(Action.DECREMENT),
        ]
        into, mapped = count_dialog(), count_dialog_mapped()
        for edge in script:
            into.traverse(edge)
            mapped.traverse(edge)
            assert into.state() == mapped.state()

    def test_edge_valid_for_both_sides_is_delivered_to_both(self):
        # Both embeddings accept every Action, so one edge moves both sides.
        # This double delivery is a documented property of zip_with_into.
        left, right = counter(), doubler()
        m = left.zip_with_into(
            right,
            lambda a, b: (a, b),
            Embedding.of_type(Action),
            Embedding.of_type(Action),
        )

        m.traverse(Action.INCREMENT)
        assert m.state() == (1, 2)
