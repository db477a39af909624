"""Composable state machine interface.

A machine exposes three things: the edges that can be traversed right now,
its current state, and a way to traverse one edge. Everything else in the
package is either a way of building a machine out of a generator
(``enstate.coroutines``) or a way of building a machine out of other
machines (the combinator methods below).

Generally speaking only machines with the same transition type can be
composed. Machines with different alphabets are lifted into a shared one
with ``map_actions`` (or ``zip_with_into``) first.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Callable, Generic, Optional, TypeVar

if TYPE_CHECKING:
    from enstate.chained import ChainedMachine, JoinedMachine, PureMachine
    from enstate.mapped import Embedding, MappedMachine, MappedTransitionMachine
    from enstate.zipped import ZippedMachine

T = TypeVar("T")  # State type
E = TypeVar("E")  # Transition type
U = TypeVar("U")
V = TypeVar("V")
F = TypeVar("F")


class Machine(ABC, Generic[T, E]):
    """
    A composable state machine with state of type T and transitions of type E.

    Implementations must keep ``edges()`` free of side effects and must treat
    a ``traverse()`` along an edge that is not currently legal as a no-op.
    Machines are driven by a single owner, one call at a time.
    """

    @abstractmethod
    def edges(self) -> tuple[E, ...]:
        """
        Get the edges which can be used to transition out of the current
        state of the machine.
        """

    @abstractmethod
    def state(self) -> T:
        """Get the current state of the machine."""

    @abstractmethod
    def traverse(self, edge: E) -> None:
        """
        Traverse along an edge to update the state of the machine.

        If the edge is not in the current edges, this is a no-op.
        """

    def can_traverse(self, edge: E) -> bool:
        """Check whether edge is on the current menu."""
        return edge in self.edges()

    def is_finished(self) -> bool:
        """For machines with Optional state: has a result been produced?"""
        return self.state() is not None

    def map(self, f: Callable[[T], U]) -> "MappedMachine[T, U, E]":
        """Transform the state of a machine by applying a function."""
        from enstate.mapped import MappedMachine

        return MappedMachine(self, f)

    def map_actions(
        self,
        forward: Callable[[E], F],
        backward: Callable[[F], Optional[E]],
    ) -> "MappedTransitionMachine[T, E, F]":
        """
        Re-expose the machine with a different transition alphabet.

        Args:
            forward: Total map from this machine's edges to the new alphabet
            backward: Partial inverse; returning None drops the edge

        Returns:
            Machine over the new alphabet with the same state
        """
        from enstate.mapped import MappedTransitionMachine

        return MappedTransitionMachine(self, forward, backward)

    def zip_with(
        self,
        other: "Machine[U, E]",
        combine: Callable[[T, U], V],
    ) -> "ZippedMachine[T, U, V, E]":
        """
        Combine two machines "horizontally", combining their state with a
        function. Both machines share an alphabet and every edge is
        delivered to both.
        """
        from enstate.zipped import ZippedMachine

        return ZippedMachine(self, other, combine)

    def zip_with_into(
        self,
        other: "Machine[U, Any]",
        combine: Callable[[T, U], V],
        left: "Embedding[E, Any]",
        right: "Embedding[Any, Any]",
    ) -> "ZippedMachine[T, U, V, Any]":
        """
        Combine two machines with different alphabets.

        Each side is lifted into the shared alphabet with its embedding.
        The combined menu is this machine's menu; an incoming edge is
        projected onto each side independently and delivered wherever the
        projection succeeds.

        Args:
            other: Machine to run alongside this one
            combine: Function of (this state, other state)
            left: Embedding of this machine's alphabet
            right: Embedding of the other machine's alphabet

        Returns:
            Zipped machine over the shared alphabet
        """
        from enstate.zipped import ZippedMachine

        return ZippedMachine(
            self.map_actions(left.inject, left.project),
            other.map_actions(right.inject, right.project),
            combine,
        )

    def chain(self, second: "Machine[Optional[U], E]") -> "ChainedMachine[U, E]":
        """
        Run this machine until it produces a result, then run second.

        The result of this machine is discarded; use flat_map to feed it
        into the continuation.
        """
        from enstate.chained import ChainedMachine

        return ChainedMachine(self, second)

    def join(self) -> "JoinedMachine[Any, E]":
        """
        Flatten a machine whose result is itself a machine.

        Runs this machine until it produces a machine, then behaves as that
        machine from then on.
        """
        from enstate.chained import JoinedMachine

        return JoinedMachine(self)

    def flat_map(
        self, f: Callable[[Any], "Machine[Optional[U], E]"]
    ) -> "JoinedMachine[U, E]":
        """Run this machine to a result r, then behave as f(r)."""
        return self.map(lambda result: None if result is None else f(result)).join()


def pure(value: T) -> "PureMachine[T, Any]":
    """A finished machine: no edges, and value as its state forever."""
    from enstate.chained import PureMachine

    return PureMachine(value)
