from .controller import (
    ActionResult,
    CommandRejection,
    FUEL_EMPTY,
    PreconditionFailure,
    UNKNOWN_COMMAND,
    UPDATE_EVENT,
    UnknownCommand,
    VehicleController,
)
from .state import SimulationState, Snapshot
from .ticker import TickDriver

__all__ = [
    "ActionResult",
    "CommandRejection",
    "FUEL_EMPTY",
    "PreconditionFailure",
    "UNKNOWN_COMMAND",
    "UPDATE_EVENT",
    "UnknownCommand",
    "SimulationState",
    "Snapshot",
    "TickDriver",
    "VehicleController",
]
