"""
Tests for elementary machines built from generators.
"""

import pytest

from enstate import (
    AsChainMachine,
    AsMachine,
    Completed,
    ProcessContractError,
    Yielded,
    machine,
)
from tests.fixtures import (
    Action,
    Tick,
    VendingAction,
    countdown,
    counter,
    modal,
    ModalAction,
    ModalResult,
)


class TestAsMachine:
    """Standard (never-finishing) processes."""

    def test_primed_to_first_choice_point(self, counter_machine):
        assert counter_machine.state() == 0
        assert counter_machine.edges() == (Action.INCREMENT, Action.DECREMENT)
        assert isinstance(counter_machine.outcome, Yielded)

    def test_counter_scenario(self, counter_machine):
        counter_machine.traverse(Action.INCREMENT)
        assert counter_machine.state() == 1

        counter_machine.traverse(Action.DECREMENT)
        assert counter_machine.state() == 0

    def test_factory_arguments_are_passed_through(self):
        assert counter(start=5).state() == 5

    def test_decorator_keeps_function_name(self):
        assert counter.__name__ == "counter"

    def test_vending_scenario(self, vending):
        assert vending.state() == 0

        vending.traverse(VendingAction.INSERT_COIN)
        assert vending.state() == 1

        vending.traverse(VendingAction.SELECT_ITEM)
        assert vending.state() == 1  # Not enough coins

        vending.traverse(VendingAction.INSERT_COIN)
        assert vending.state() == 2

        vending.traverse(VendingAction.SELECT_ITEM)
        assert vending.state() == 0  # Purchase successful

    def test_vending_return_change(self, vending):
        for _ in range(3):
            vending.traverse(VendingAction.INSERT_COIN)
        vending.traverse(VendingAction.RETURN_CHANGE)
        assert vending.state() == 0

    def test_illegal_edge_does_not_resume_process(self):
        sent = []

        @machine
        def recorder():
            while True:
                edge = yield len(sent), ("a", "b")
                sent.append(edge)

        m = recorder()
        m.traverse("z")
        assert sent == []
        assert m.state() == 0

        m.traverse("a")
        assert sent == ["a"]
        assert m.state() == 1

    def test_menu_may_depend_on_state(self):
        @machine
        def door():
            is_open = False
            while True:
                if is_open:
                    yield "open", ("close",)
                    is_open = False
                else:
                    yield "closed", ("open",)
                    is_open = True

        m = door()
        m.traverse("close")
        assert m.state() == "closed"

        m.traverse("open")
        assert m.state() == "open"
        assert m.edges() == ("close",)

    def test_empty_menu_is_allowed(self):
        @machine
        def stuck():
            while True:
                yield "stuck", ()

        m = stuck()
        m.traverse("anything")
        assert m.edges() == ()
        assert m.state() == "stuck"

    def test_process_that_finishes_violates_contract(self):
        def finishes():
            yield 0, ("go",)
            return "oops"

        m = AsMachine(finishes())
        with pytest.raises(ProcessContractError):
            m.traverse("go")

    def test_process_that_never_yields_violates_contract(self):
        def empty():
            return
            yield  # pragma: no cover

        with pytest.raises(ProcessContractError):
            AsMachine(empty())

    def test_malformed_yield_violates_contract(self):
        def bare_state():
            while True:
                yield 0

        with pytest.raises(ProcessContractError):
            AsMachine(bare_state())

    def test_non_iterable_menu_violates_contract(self):
        def bad_menu():
            while True:
                yield 0, 42

        with pytest.raises(ProcessContractError):
            AsMachine(bad_menu())


class TestAsChainMachine:
    """Chain-style processes that finish with a result."""

    def test_running_state_is_none(self):
        m = countdown(2)
        assert m.state() is None
        assert m.edges() == (Tick.TICK,)
        assert not m.finished

    def test_completes_with_return_value(self):
        m = countdown(2, result=42)
        m.traverse(Tick.TICK)
        assert m.state() is None

        m.traverse(Tick.TICK)
        assert m.state() == 42
        assert m.finished
        assert isinstance(m.outcome, Completed)

    def test_completed_machine_has_no_edges_and_ignores_traverse(self):
        m = countdown(1)
        m.traverse(Tick.TICK)

        assert m.edges() == ()
        m.traverse(Tick.TICK)
        assert m.state() == "done"

    def test_zero_ticks_is_finished_on_construction(self):
        m = countdown(0, result="now")
        assert m.state() == "now"
        assert m.edges() == ()

    def test_falsy_results_count_as_finished(self):
        m = countdown(1, result=0)
        m.traverse(Tick.TICK)
        assert m.state() == 0
        assert m.is_finished()

    def test_returning_none_violates_contract(self):
        def no_result():
            yield ("go",)

        m = AsChainMachine(no_result())
        with pytest.raises(ProcessContractError):
            m.traverse("go")

    def test_illegal_edge_is_ignored(self):
        m = modal()
        m.traverse(Tick.TICK)
        assert m.state() is None
        assert m.edges() == (ModalAction.OK, ModalAction.CANCEL)

    def test_modal_result_is_a_function_of_contents(self):
        m = modal()
        m.traverse(ModalAction.OK)
        assert m.state()(3) == ModalResult.ok(3)

        m = modal()
        m.traverse(ModalAction.CANCEL)
        assert m.state()(3) == ModalResult.cancel()
