import asyncio
import logging
import os
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Set

from libs.config import get_setting
from libs.event_bus import TopicBus
from libs.log.tracing import envelope
from .presentation import AlertSettings, DashboardView
from .simulator import UNKNOWN_COMMAND, ActionResult, TickDriver, UnknownCommand, VehicleController

logger = logging.getLogger(__name__)

DASHBOARD_TOPIC = "dashboard.update"
SESSION_ID = "demo"


def _setting(path: str, env_name: str, default: Any) -> Any:
    # an exported env var beats the config files
    env = os.getenv(env_name)
    if env:
        return env
    return get_setting(path, default)


def _as_bool(v: Any) -> bool:
    if isinstance(v, str):
        return v.strip().lower() in {"1", "true", "yes", "on"}
    return bool(v)


@dataclass(frozen=True)
class DashboardSettings:
    host: str = "127.0.0.1"
    port: int = 8003
    tick_interval_s: float = 1.0
    autostart: bool = True
    log_level: str = "INFO"
    alerts: AlertSettings = field(default_factory=AlertSettings)

    @classmethod
    def from_config(cls) -> "DashboardSettings":
        return cls(
            host=str(_setting("services.host", "DASHBOARD_HOST", "127.0.0.1")),
            port=int(_setting("services.dashboard_port", "DASHBOARD_SERVICE_PORT", 8003)),
            tick_interval_s=float(_setting("simulation.tick_interval_s", "TICK_INTERVAL_S", 1.0)),
            autostart=_as_bool(_setting("simulation.autostart", "TICK_AUTOSTART", True)),
            log_level=str(_setting("logging.level", "LOG_LEVEL", "INFO")),
            alerts=AlertSettings(
                overspeed_kph=float(get_setting("alerts.overspeed_kph", 80)),
                low_fuel_pct=float(get_setting("alerts.low_fuel_pct", 20)),
                empty_fuel_pct=float(get_setting("alerts.empty_fuel_pct", 0)),
                overheat_c=float(get_setting("alerts.overheat_c", 90)),
            ),
        )


class DashboardRuntime:
    """Everything one dashboard service owns: the controller (with its state
    and bus), the presentation view, the tick driver and the websocket
    fan-out."""

    def __init__(self, settings: Optional[DashboardSettings] = None) -> None:
        self.settings = settings or DashboardSettings()
        self.controller = VehicleController()
        self.view = DashboardView(self.settings.alerts)
        self.controller.subscribe(self.view.on_update)
        self.ticker = TickDriver(self.controller.tick, self.settings.tick_interval_s)
        self.topics = TopicBus()
        self.view.add_sink(self._broadcast)
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._pending: Set[asyncio.Task] = set()
        self._actions: Dict[str, Callable[[], ActionResult]] = {
            "accelerate": self.controller.accelerate,
            "brake": self.controller.brake,
            "refuel": self.controller.refuel,
            "tick": self._tick,
            "get_state": self._get_state,
        }

    def attach_loop(self, loop: asyncio.AbstractEventLoop) -> None:
        self._loop = loop

    async def shutdown(self) -> None:
        await self.ticker.stop()
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)
        self._loop = None

    def perform(self, action: str) -> ActionResult:
        handler = self._actions.get(action)
        if handler is None:
            logger.warning("unknown action %r", action)
            failure = UnknownCommand(
                code=UNKNOWN_COMMAND,
                message=f"unknown action: {action}",
                detail={"action": action},
            )
            return ActionResult(action, self.controller.snapshot(), failure)
        return handler()

    def event_envelope(self, result: ActionResult, trace: Optional[dict] = None, session_id: str = SESSION_ID) -> dict:
        payload: Dict[str, Any] = {
            "event": "state_changed" if result.ok else "command_rejected",
            "action": result.action,
            "state": result.snapshot.as_dict(),
        }
        if result.error is not None:
            payload["error"] = result.error.to_dict()
        return envelope("dashboard", "dashboard.event", session_id, trace, payload)

    def state_envelope(self, session_id: str = SESSION_ID) -> dict:
        payload = self.view.render(self.controller.snapshot())
        payload["ticker"] = self.ticker.status()
        return envelope("dashboard", "dashboard.state", session_id, None, payload)

    def _tick(self) -> ActionResult:
        return ActionResult("tick", self.controller.tick())

    def _get_state(self) -> ActionResult:
        return ActionResult("get_state", self.controller.snapshot())

    def _broadcast(self, frame: Dict[str, Any]) -> None:
        if self._loop is None:
            return
        msg = envelope("dashboard", DASHBOARD_TOPIC, SESSION_ID, None, frame)
        task = self._loop.create_task(self.topics.publish(DASHBOARD_TOPIC, msg))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
