import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from libs.event_bus import Listener, NotificationBus
from .state import SimulationState, Snapshot

logger = logging.getLogger(__name__)

UPDATE_EVENT = "update"


@dataclass(frozen=True)
class CommandRejection:
    code: str
    message: str
    detail: Dict[str, Any] = field(default_factory=dict)
    retryable: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "message": self.message, "detail": dict(self.detail), "retryable": self.retryable}


class PreconditionFailure(CommandRejection):
    """The action is known but the vehicle cannot perform it right now."""


class UnknownCommand(CommandRejection):
    pass


FUEL_EMPTY = "fuel_empty"
UNKNOWN_COMMAND = "unknown_command"


@dataclass(frozen=True)
class ActionResult:
    action: str
    snapshot: Snapshot
    error: Optional[CommandRejection] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class VehicleController:
    """Driver-facing operations on one SimulationState.

    Each operation mutates the state and then publishes exactly one
    ``update`` notification with the resulting snapshot. A rejected action
    mutates nothing and publishes nothing.
    """

    def __init__(self, state: Optional[SimulationState] = None, bus: Optional[NotificationBus] = None) -> None:
        self.state = state if state is not None else SimulationState()
        self.bus = bus if bus is not None else NotificationBus()

    def subscribe(self, listener: Listener) -> None:
        self.bus.subscribe(UPDATE_EVENT, listener)

    def unsubscribe(self, listener: Listener) -> None:
        self.bus.unsubscribe(UPDATE_EVENT, listener)

    def snapshot(self) -> Snapshot:
        return self.state.snapshot()

    def accelerate(self) -> ActionResult:
        if not self.state.has_fuel:
            failure = PreconditionFailure(
                code=FUEL_EMPTY,
                message="Cannot accelerate: Fuel is empty!",
                detail={"fuel": self.state.fuel},
            )
            logger.warning("accelerate rejected: fuel=%.2f", self.state.fuel)
            return ActionResult("accelerate", self.state.snapshot(), failure)
        # rpm follows speed; temperature only moves on tick
        self.state.speed_up()
        return self._commit("accelerate")

    def brake(self) -> ActionResult:
        self.state.slow_down()
        return self._commit("brake")

    def refuel(self) -> ActionResult:
        self.state.reset()
        return self._commit("refuel")

    def tick(self) -> Snapshot:
        snap = self.state.tick()
        self.bus.publish(UPDATE_EVENT, snap)
        return snap

    def _commit(self, action: str) -> ActionResult:
        snap = self.state.snapshot()
        logger.debug("%s -> speed=%.0f rpm=%.0f fuel=%.2f", action, snap.speed, snap.rpm, snap.fuel)
        self.bus.publish(UPDATE_EVENT, snap)
        return ActionResult(action, snap)
