"""Session driver for machines.

A machine is passive: something has to read its menu, choose an edge and
traverse it. The Driver is that something for one interaction session. It
owns the (possibly deeply composed) machine, checks each chosen edge against
the menu, keeps a history of the steps taken, and reports rejected edges
through a Result rather than swallowing them the way machines do.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Generic, Iterable, Optional, TypeVar

from enstate.config.settings import DriverConfig
from enstate.errors import TransitionError
from enstate.machine import Machine
from enstate.utils.logging import get_logger, get_session_id
from enstate.utils.result import Err, Ok, Result

logger = get_logger("enstate.driver")

T = TypeVar("T")
E = TypeVar("E")


def edge_label(edge: Any) -> str:
    """Human-readable name for an edge: the member name for enums, else str()."""
    if isinstance(edge, Enum):
        return edge.name
    return str(edge)


@dataclass(frozen=True)
class Step:
    """One traversed edge and the state it led to."""

    index: int
    edge: Any
    state: Any

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "index": self.index,
            "edge": edge_label(self.edge),
            "state": self.state,
        }


class Driver(Generic[T, E]):
    """
    Drives a single machine through an interaction session.

    Usage:
        driver = Driver(counter())
        driver.step(Action.INCREMENT)
        driver.run([Action.INCREMENT, Action.DECREMENT])
        driver.current_state()
    """

    def __init__(
        self,
        machine: Machine[T, E],
        config: Optional[DriverConfig] = None,
    ) -> None:
        self.machine = machine
        self.config = config or DriverConfig()
        self.session_id = get_session_id()
        self.history: list[Step] = []
        self.steps_taken = 0
        self.rejected = 0

    def menu(self) -> tuple[E, ...]:
        """Edges that are legal right now."""
        return self.machine.edges()

    def current_state(self) -> T:
        return self.machine.state()

    @property
    def finished(self) -> bool:
        """
        True once the machine state is not None.

        This is the result test for Optional-state machines; for any other
        machine it is True whenever the state is not None.
        """
        return self.machine.state() is not None

    def select(self, label: str) -> Optional[E]:
        """
        Find the edge on the current menu with the given label.

        Args:
            label: Enum member name or str() of an edge (case-insensitive)

        Returns:
            Matching edge, or None if nothing on the menu matches
        """
        wanted = label.strip().lower()
        for edge in self.menu():
            if edge_label(edge).lower() == wanted or str(edge).lower() == wanted:
                return edge
        return None

    def step(self, edge: E) -> Result[T, TransitionError]:
        """
        Traverse one edge.

        Args:
            edge: Edge to traverse

        Returns:
            Ok with the new state, or Err if the edge was rejected

        Raises:
            TransitionError: If the edge was rejected and the driver is strict
        """
        legal = self.menu()
        if self.config.enforce_menu and edge not in legal:
            return self._reject(edge, legal)

        self.machine.traverse(edge)
        state = self.machine.state()
        self.steps_taken += 1

        if self.config.record_history:
            self.history.append(Step(index=self.steps_taken, edge=edge, state=state))

        logger.debug(
            "transition_applied",
            step=self.steps_taken,
            edge=edge_label(edge),
        )

        return Ok(state)

    def step_label(self, label: str) -> Result[T, TransitionError]:
        """Traverse the menu edge named by label (see select)."""
        edge = self.select(label)
        if edge is None:
            return self._reject(label, self.menu())
        return self.step(edge)

    def run(self, edges: Iterable[E]) -> Result[T, TransitionError]:
        """
        Traverse a sequence of edges.

        Stops at the first rejected edge, when max_steps is reached, or
        (with stop_when_finished) once the machine has a result.

        Args:
            edges: Edges to traverse in order

        Returns:
            Ok with the final state, or the first rejection
        """
        return self._run(edges, self.step)

    def run_labels(self, labels: Iterable[str]) -> Result[T, TransitionError]:
        """Like run, but each edge is named by its label (see select)."""
        return self._run(labels, self.step_label)

    def _run(
        self,
        items: Iterable[Any],
        step: Callable[[Any], Result[T, TransitionError]],
    ) -> Result[T, TransitionError]:
        taken = 0
        if self.config.stop_when_finished and self.finished:
            logger.warning(
                "run_already_finished",
                state=repr(self.current_state()),
                machine=type(self.machine).__name__,
            )

        for item in items:
            if self.config.stop_when_finished and self.finished:
                logger.debug("run_stopped", reason="finished", steps=taken)
                break

            if self.config.max_steps is not None and taken >= self.config.max_steps:
                logger.info("run_stopped", reason="max_steps", steps=taken)
                break

            result = step(item)
            if result.is_err():
                return result
            taken += 1

        return Ok(self.current_state())

    def summary(self) -> dict[str, Any]:
        """Summary of the session so far."""
        return {
            "session_id": self.session_id,
            "steps": self.steps_taken,
            "rejected": self.rejected,
            "state": self.current_state(),
            "menu": [edge_label(edge) for edge in self.menu()],
            "history": [step.to_dict() for step in self.history],
        }

    def _reject(self, edge: Any, legal: tuple) -> Err[TransitionError]:
        self.rejected += 1
        error = TransitionError(edge, legal)

        logger.info(
            "transition_rejected",
            edge=edge_label(edge),
            menu=[edge_label(e) for e in legal],
        )

        if self.config.strict:
            raise error
        return Err(error)
