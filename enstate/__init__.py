"""
enstate - composable finite-interaction state machines.

Build elementary machines from generators, then combine them:

- map / map_actions: change a machine's state or its transition alphabet
- zip_with / zip_with_into: run two machines side by side
- chain / join / flat_map / pure: run machines one after another
"""

__version__ = "0.1.0"

from enstate.chained import ChainedMachine, JoinedMachine, Phase, PureMachine
from enstate.coroutines import (
    AsChainMachine,
    AsMachine,
    Completed,
    Yielded,
    chain_machine,
    machine,
    step_machine,
)
from enstate.driver import Driver, Step, edge_label
from enstate.errors import MachineError, ProcessContractError, TransitionError
from enstate.machine import Machine, pure
from enstate.mapped import Embedding, MappedMachine, MappedTransitionMachine
from enstate.zipped import ZippedMachine

__all__ = [
    # Interface
    "Machine",
    "pure",
    # Elementary machines
    "AsMachine",
    "AsChainMachine",
    "Yielded",
    "Completed",
    "machine",
    "chain_machine",
    "step_machine",
    # Combinators
    "MappedMachine",
    "MappedTransitionMachine",
    "Embedding",
    "ZippedMachine",
    "ChainedMachine",
    "JoinedMachine",
    "PureMachine",
    "Phase",
    # Driving
    "Driver",
    "Step",
    "edge_label",
    # Errors
    "MachineError",
    "ProcessContractError",
    "TransitionError",
]
