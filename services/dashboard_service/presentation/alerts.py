import logging
from dataclasses import dataclass
from typing import Callable, Dict, List

from ..simulator.state import Snapshot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AlertSettings:
    overspeed_kph: float = 80.0
    low_fuel_pct: float = 20.0
    empty_fuel_pct: float = 0.0
    overheat_c: float = 90.0


@dataclass(frozen=True)
class Alert:
    code: str
    message: str

    def to_dict(self) -> Dict[str, str]:
        return {"code": self.code, "message": self.message}


class _Latch:
    def __init__(self, code: str, message: str, condition: Callable[[Snapshot], bool]) -> None:
        self.alert = Alert(code, message)
        self.condition = condition
        self.shown = False

    def check(self, snap: Snapshot) -> bool:
        if self.condition(snap):
            if self.shown:
                return False
            self.shown = True
            return True
        self.shown = False
        return False


class AlertMonitor:
    """Threshold alerts that fire once per crossing.

    An alert re-arms only after its condition has cleared on a later
    snapshot, so a sustained condition does not repeat every tick.
    """

    def __init__(self, settings: AlertSettings = AlertSettings()) -> None:
        s = settings
        self.settings = s
        self._latches = [
            _Latch("overspeed", "Speed limit exceeded! Reduce speed immediately.", lambda snap: snap.speed > s.overspeed_kph),
            _Latch("low_fuel", "Fuel is almost empty!", lambda snap: snap.fuel < s.low_fuel_pct),
            _Latch("fuel_empty", "Fuel is empty! Refuel now.", lambda snap: snap.fuel <= s.empty_fuel_pct),
            _Latch("overheat", "Engine is overheating! Stop and cool down.", lambda snap: snap.temperature > s.overheat_c),
        ]

    def check(self, snap: Snapshot) -> List[Alert]:
        fired = [latch.alert for latch in self._latches if latch.check(snap)]
        for alert in fired:
            logger.warning("alert %s: %s", alert.code, alert.message)
        return fired

    def active(self) -> List[str]:
        return [latch.alert.code for latch in self._latches if latch.shown]
