"""Parallel composition of two machines."""

from __future__ import annotations

from typing import Callable, Generic, TypeVar

from enstate.machine import Machine

T = TypeVar("T")
U = TypeVar("U")
V = TypeVar("V")
E = TypeVar("E")


class ZippedMachine(Machine[V, E], Generic[T, U, V, E]):
    """
    Two machines run side by side over one alphabet.

    The menu is the first machine's menu. Every traversed edge is broadcast
    to both machines, first machine first; each decides for itself whether
    the edge means anything to it. When built by ``zip_with_into`` the two
    sides are ``MappedTransitionMachine``s, so an edge reaches exactly the
    sides whose projection accepts it, which may be both.
    """

    def __init__(
        self,
        machine1: Machine[T, E],
        machine2: Machine[U, E],
        combine: Callable[[T, U], V],
    ) -> None:
        self.machine1 = machine1
        self.machine2 = machine2
        self.combine = combine

    def edges(self) -> tuple[E, ...]:
        return self.machine1.edges()

    def state(self) -> V:
        state1 = self.machine1.state()
        state2 = self.machine2.state()
        return self.combine(state1, state2)

    def traverse(self, edge: E) -> None:
        self.machine1.traverse(edge)
        self.machine2.traverse(edge)
