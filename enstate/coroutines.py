"""Elementary machines built from generators.

A generator is the natural Python form of a process that suspends at a
choice point, hands a menu of transitions to its caller, and resumes with
the transition that was chosen.

Two shapes of generator are supported:

Standard processes never finish. Each ``yield`` exposes the current state
and the legal transitions, and evaluates to the chosen transition::

    @machine
    def counter():
        count = 0
        while True:
            action = yield count, (Action.INCREMENT, Action.DECREMENT)
            count += 1 if action is Action.INCREMENT else -1

Chain-style processes expose only the menu and eventually ``return`` their
result. As machines their state is None until the result is produced::

    @chain_machine
    def confirm():
        action = yield (Button.OK, Button.CANCEL)
        return action is Button.OK
"""

from __future__ import annotations

import functools
from dataclasses import dataclass
from typing import (
    Any,
    Callable,
    Generator,
    Generic,
    Optional,
    Sequence,
    TypeVar,
    Union,
)

from enstate.errors import ProcessContractError
from enstate.machine import Machine
from enstate.utils.logging import get_logger

logger = get_logger("enstate.coroutines")

T = TypeVar("T")
E = TypeVar("E")
R = TypeVar("R")

StateProcess = Generator[tuple[T, Sequence[E]], E, Any]
ChainProcess = Generator[Sequence[E], E, R]


@dataclass(frozen=True)
class Yielded(Generic[T, E]):
    """The process is paused at a choice point."""

    state: T
    transitions: tuple[E, ...]


@dataclass(frozen=True)
class Completed(Generic[R]):
    """A chain-style process has finished with a result."""

    result: R


def _menu(process: Any, transitions: Any) -> tuple:
    try:
        return tuple(transitions)
    except TypeError as e:
        raise ProcessContractError(
            f"{_name(process)} yielded a non-iterable transition menu: {transitions!r}"
        ) from e


def _name(process: Any) -> str:
    return getattr(process, "__qualname__", None) or type(process).__name__


class AsMachine(Machine[T, E], Generic[T, E]):
    """
    Treats a standard generator process as a machine.

    The process is advanced to its first choice point on construction.
    Edges not on the current menu are ignored without resuming the process.
    """

    def __init__(self, process: StateProcess[T, E]) -> None:
        self.process = process
        self.outcome: Yielded[T, E] = self._suspend(lambda: next(process))

    def _suspend(self, resume: Callable[[], Any]) -> Yielded[T, E]:
        try:
            yielded = resume()
        except StopIteration as e:
            raise ProcessContractError(
                f"{_name(self.process)} returned {e.value!r}; "
                "standard machine processes must never finish"
            ) from e

        if not isinstance(yielded, tuple) or len(yielded) != 2:
            raise ProcessContractError(
                f"{_name(self.process)} must yield (state, transitions), got {yielded!r}"
            )

        state, transitions = yielded
        return Yielded(state, _menu(self.process, transitions))

    def edges(self) -> tuple[E, ...]:
        return self.outcome.transitions

    def state(self) -> T:
        return self.outcome.state

    def traverse(self, edge: E) -> None:
        if edge not in self.outcome.transitions:
            return
        self.outcome = self._suspend(lambda: self.process.send(edge))


class AsChainMachine(Machine[Optional[R], E], Generic[R, E]):
    """
    Treats a chain-style generator process as a machine with Optional state.

    While the process is paused the state is None; once it returns, the
    state is its return value and there are no more edges.
    """

    def __init__(self, process: ChainProcess[E, R]) -> None:
        self.process = process
        self.outcome: Union[Yielded[None, E], Completed[R]] = self._suspend(
            lambda: next(process)
        )

    def _suspend(self, resume: Callable[[], Any]) -> Union[Yielded[None, E], Completed[R]]:
        try:
            transitions = resume()
        except StopIteration as e:
            if e.value is None:
                raise ProcessContractError(
                    f"{_name(self.process)} finished without a result; "
                    "chain machine processes must return a value other than None"
                ) from e
            logger.debug("process_completed", process=_name(self.process))
            return Completed(e.value)

        return Yielded(None, _menu(self.process, transitions))

    @property
    def finished(self) -> bool:
        return isinstance(self.outcome, Completed)

    def edges(self) -> tuple[E, ...]:
        if isinstance(self.outcome, Completed):
            return ()
        return self.outcome.transitions

    def state(self) -> Optional[R]:
        if isinstance(self.outcome, Completed):
            return self.outcome.result
        return None

    def traverse(self, edge: E) -> None:
        if edge not in self.edges():
            return
        self.outcome = self._suspend(lambda: self.process.send(edge))


def machine(
    fn: Callable[..., StateProcess[T, E]],
) -> Callable[..., AsMachine[T, E]]:
    """Decorator turning a standard generator function into a machine factory."""

    @functools.wraps(fn)
    def factory(*args: Any, **kwargs: Any) -> AsMachine[T, E]:
        return AsMachine(fn(*args, **kwargs))

    return factory


def chain_machine(
    fn: Callable[..., ChainProcess[E, R]],
) -> Callable[..., AsChainMachine[R, E]]:
    """Decorator turning a chain-style generator function into a machine factory."""

    @functools.wraps(fn)
    def factory(*args: Any, **kwargs: Any) -> AsChainMachine[R, E]:
        return AsChainMachine(fn(*args, **kwargs))

    return factory


def step_machine(
    initial: T,
    choices: Union[Sequence[E], Callable[[T], Sequence[E]]],
    step: Callable[[T, E], T],
) -> AsMachine[T, E]:
    """
    Build an elementary machine from an explicit step function.

    Args:
        initial: Starting state
        choices: The menu, either fixed or computed from the current state
        step: Pure function (state, chosen edge) -> next state

    Returns:
        Machine that loops forever: expose (state, menu), receive an edge,
        apply step
    """
    menu: Callable[[T], Sequence[E]] = choices if callable(choices) else (lambda _: choices)

    def process() -> StateProcess[T, E]:
        state = initial
        while True:
            edge = yield state, menu(state)
            state = step(state, edge)

    return AsMachine(process())
