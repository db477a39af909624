"""Application machines used across the test suite."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Callable, Optional

from enstate import Embedding, chain_machine, machine, step_machine


class Action(Enum):
    INCREMENT = auto()
    DECREMENT = auto()


@machine
def counter(start: int = 0):
    count = start
    while True:
        action = yield count, (Action.INCREMENT, Action.DECREMENT)
        if action is Action.INCREMENT:
            count += 1
        else:
            count -= 1


class VendingAction(Enum):
    INSERT_COIN = auto()
    SELECT_ITEM = auto()
    RETURN_CHANGE = auto()


def _vend(coins: int, action: VendingAction) -> int:
    if action is VendingAction.INSERT_COIN:
        return coins + 1
    if action is VendingAction.SELECT_ITEM:
        return coins - 2 if coins >= 2 else coins
    return 0


def vending_machine():
    return step_machine(0, tuple(VendingAction), _vend)


class Tick(Enum):
    TICK = auto()


@chain_machine
def countdown(ticks: int, result: Any = "done"):
    """Finishes with result after the given number of ticks."""
    for _ in range(ticks):
        yield (Tick.TICK,)
    return result


# Modal dialog


class ModalAction(Enum):
    OK = auto()
    CANCEL = auto()


@dataclass(frozen=True)
class ModalResult:
    value: Any = None
    cancelled: bool = False

    @classmethod
    def ok(cls, value: Any) -> "ModalResult":
        return cls(value=value)

    @classmethod
    def cancel(cls) -> "ModalResult":
        return cls(cancelled=True)


@chain_machine
def modal():
    """Generic dialog: finishes with a function from the contents' state to a ModalResult."""
    action = yield (ModalAction.OK, ModalAction.CANCEL)
    if action is ModalAction.OK:
        return ModalResult.ok
    return lambda _: ModalResult.cancel()


@dataclass(frozen=True)
class Buttons:
    action: ModalAction


@dataclass(frozen=True)
class Display:
    action: Action


BUTTONS = Embedding.of_type(Buttons, wrap=Buttons, unwrap=lambda edge: edge.action)
DISPLAY = Embedding.of_type(Display, wrap=Display, unwrap=lambda edge: edge.action)


def apply_dialog(
    dialog_state: Optional[Callable[[int], ModalResult]],
    count: int,
) -> Optional[ModalResult]:
    if dialog_state is None:
        return None
    return dialog_state(count)


def count_dialog():
    """A modal dialog around a counter, zipped over the Buttons/Display alphabet."""
    return modal().zip_with_into(counter(), apply_dialog, BUTTONS, DISPLAY)


def count_dialog_mapped():
    """Same dialog, built from map_actions and zip_with."""
    buttons = modal().map_actions(
        Buttons,
        lambda edge: edge.action if isinstance(edge, Buttons) else None,
    )
    display = counter().map_actions(
        Display,
        lambda edge: edge.action if isinstance(edge, Display) else None,
    )
    return buttons.zip_with(display, apply_dialog)
