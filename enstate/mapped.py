"""State and transition mapping combinators."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, TypeVar

from enstate.machine import Machine

T = TypeVar("T")
U = TypeVar("U")
E = TypeVar("E")
F = TypeVar("F")


def _identity(value: Any) -> Any:
    return value


@dataclass(frozen=True)
class Embedding(Generic[E, F]):
    """
    Explicit alphabet translation between a machine and a shared alphabet.

    ``inject`` is total (every sub-alphabet edge has a shared form).
    ``project`` is partial: it returns None for shared edges that do not
    belong to the sub-alphabet.
    """

    inject: Callable[[E], F]
    project: Callable[[F], Optional[E]]

    @classmethod
    def identity(cls) -> "Embedding[Any, Any]":
        """The sub-alphabet already is the shared alphabet."""
        return cls(_identity, _identity)

    @classmethod
    def of_type(
        cls,
        kind: type,
        wrap: Optional[Callable[[Any], Any]] = None,
        unwrap: Optional[Callable[[Any], Any]] = None,
    ) -> "Embedding[Any, Any]":
        """
        Embedding selected by runtime type.

        Args:
            kind: Type that shared edges belonging to this side are instances of
            wrap: Builds the shared edge from a sub-alphabet edge (default: as is)
            unwrap: Recovers the sub-alphabet edge from a shared one (default: as is)

        Returns:
            Embedding whose projection rejects anything not an instance of kind
        """
        inject = wrap or _identity
        extract = unwrap or _identity

        def project(edge: Any) -> Any:
            if isinstance(edge, kind):
                return extract(edge)
            return None

        return cls(inject, project)


class MappedMachine(Machine[U, E], Generic[T, U, E]):
    """
    MappedMachine transforms the state of a machine while keeping its
    edges and transitions as they are.
    """

    def __init__(self, machine: Machine[T, E], f: Callable[[T], U]) -> None:
        self.machine = machine
        self.f = f

    def edges(self) -> tuple[E, ...]:
        return self.machine.edges()

    def state(self) -> U:
        return self.f(self.machine.state())

    def traverse(self, edge: E) -> None:
        self.machine.traverse(edge)


class MappedTransitionMachine(Machine[T, F], Generic[T, E, F]):
    """
    MappedTransitionMachine re-exposes a machine with a different
    transition alphabet while keeping its state as it is.

    ``backward`` is the source of truth for whether an outer edge means
    anything to the inner machine: an edge it maps to None is dropped.
    """

    def __init__(
        self,
        machine: Machine[T, E],
        forward: Callable[[E], F],
        backward: Callable[[F], Optional[E]],
    ) -> None:
        self.machine = machine
        self.forward = forward
        self.backward = backward

    def edges(self) -> tuple[F, ...]:
        return tuple(self.forward(edge) for edge in self.machine.edges())

    def state(self) -> T:
        return self.machine.state()

    def traverse(self, edge: F) -> None:
        inner = self.backward(edge)
        if inner is not None:
            self.machine.traverse(inner)
