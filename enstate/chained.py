"""Sequencing combinators for machines with Optional state.

A machine of type ``Machine[Optional[R], E]`` is "running" while its state
is None and "finished with r" once its state is r. The combinators here run
such machines one after another:

    chain       run m1 to a result, then run m2 (m1's result is dropped)
    join        run m1 to a result which is itself a machine, then run that
    flat_map    run m1 to a result r, then run f(r)
    pure        a machine that is finished from the start

Hand-off is one-way: once the second phase starts the first machine is never
driven again.
"""

from __future__ import annotations

from enum import Enum, auto
from typing import Any, Generic, Optional, TypeVar

from enstate.machine import Machine
from enstate.utils.logging import get_logger

logger = get_logger("enstate.chained")

T = TypeVar("T")
U = TypeVar("U")
E = TypeVar("E")


class Phase(Enum):
    """Which sub-machine a sequencing combinator is delegating to."""

    FIRST = auto()
    SECOND = auto()


class PureMachine(Machine[T, E], Generic[T, E]):
    """Terminal machine with no edges and a constant state."""

    def __init__(self, value: T) -> None:
        self.value = value

    def edges(self) -> tuple[E, ...]:
        return ()

    def state(self) -> T:
        return self.value

    def traverse(self, edge: E) -> None:
        pass

    def __repr__(self) -> str:
        return f"PureMachine({self.value!r})"


class ChainedMachine(Machine[Optional[U], E], Generic[U, E]):
    """
    Strict left-to-right sequencing of two machines.

    While in the first phase the state is always None. The phase flips as
    soon as machine1 has a result, on construction if it already has one,
    otherwise on the traverse that gives it one. From then on everything is
    delegated to machine2.
    """

    def __init__(
        self,
        machine1: Machine[Optional[Any], E],
        machine2: Machine[Optional[U], E],
    ) -> None:
        self.machine1 = machine1
        self.machine2 = machine2
        self.in_second_machine = False
        self._hand_off()

    @property
    def phase(self) -> Phase:
        return Phase.SECOND if self.in_second_machine else Phase.FIRST

    def edges(self) -> tuple[E, ...]:
        if self.in_second_machine:
            return self.machine2.edges()
        return self.machine1.edges()

    def state(self) -> Optional[U]:
        if self.in_second_machine:
            return self.machine2.state()
        return None

    def traverse(self, edge: E) -> None:
        if self.in_second_machine:
            self.machine2.traverse(edge)
            return

        self.machine1.traverse(edge)
        self._hand_off(edge)

    def _hand_off(self, edge: Optional[E] = None) -> None:
        if self.machine1.state() is not None:
            self.in_second_machine = True
            logger.debug("chain_phase_switched", edge=edge)


class JoinedMachine(Machine[Optional[T], E], Generic[T, E]):
    """
    Flattens a machine whose result is a machine.

    In the first phase the outer machine is driven and the state is None.
    As soon as the outer machine has a result, whether at construction or
    after a traverse, that result replaces the outer machine for good.
    """

    def __init__(self, outer: Machine[Optional[Machine[Optional[T], E]], E]) -> None:
        self._phase = Phase.FIRST
        self._active: Machine[Any, E] = outer
        self._hand_off()

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def active(self) -> Machine[Any, E]:
        """The sub-machine currently being delegated to."""
        return self._active

    def edges(self) -> tuple[E, ...]:
        return self._active.edges()

    def state(self) -> Optional[T]:
        if self._phase is Phase.FIRST:
            return None
        return self._active.state()

    def traverse(self, edge: E) -> None:
        self._active.traverse(edge)

        if self._phase is Phase.FIRST:
            self._hand_off(edge)

    def _hand_off(self, edge: Optional[E] = None) -> None:
        inner = self._active.state()
        if inner is not None:
            self._phase = Phase.SECOND
            self._active = inner
            logger.debug(
                "join_phase_switched",
                edge=edge,
                inner=type(inner).__name__,
            )
