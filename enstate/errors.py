"""Exception types for enstate.

Machines never raise for an illegal transition; that is always a silent
no-op. The exceptions here cover the boundaries around the machine algebra:
elementary processes that break the generator contract, and drivers running
in strict mode.
"""

from __future__ import annotations

from typing import Any, Sequence


class MachineError(Exception):
    """Base class for enstate errors."""

    pass


class ProcessContractError(MachineError):
    """An elementary process did not behave like a machine process."""

    pass


class TransitionError(MachineError):
    """A driver was asked to take an edge that is not on the current menu."""

    def __init__(self, edge: Any, legal: Sequence[Any]) -> None:
        self.edge = edge
        self.legal = tuple(legal)
        super().__init__(
            f"Invalid transition: {edge!r} not in {list(self.legal)!r}"
        )
