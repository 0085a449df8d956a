import math
from typing import Any, Callable, Dict, List, Optional

from ..simulator.state import Snapshot
from .alerts import AlertMonitor, AlertSettings

Frame = Dict[str, Any]


def _round(value: float) -> int:
    # half-up, the way a dashboard readout rounds
    return int(math.floor(value + 0.5))


def render_readouts(snap: Snapshot) -> Dict[str, str]:
    return {
        "speed": f"{_round(snap.speed)} km/h",
        "rpm": f"{_round(snap.rpm)} rpm",
        "fuel": f"{max(_round(snap.fuel), 0)}%",
        "temperature": f"{_round(snap.temperature)} °C",
        "distance": f"{_round(snap.distance)} km",
    }


class DashboardView:
    """Presentation-side listener: formats each snapshot and raises alerts.

    Subscribe ``on_update`` to the controller. Every rendered frame is
    handed to the registered sinks in order.
    """

    def __init__(self, alert_settings: Optional[AlertSettings] = None) -> None:
        self.alerts = AlertMonitor(alert_settings or AlertSettings())
        self._sinks: List[Callable[[Frame], None]] = []
        self.last_frame: Optional[Frame] = None

    def add_sink(self, sink: Callable[[Frame], None]) -> None:
        self._sinks.append(sink)

    def render(self, snap: Snapshot) -> Frame:
        return {
            "snapshot": snap.as_dict(),
            "readouts": render_readouts(snap),
            "alerts": [],
            "active_alerts": self.alerts.active(),
        }

    def on_update(self, snap: Snapshot) -> None:
        fired = self.alerts.check(snap)
        frame = self.render(snap)
        frame["alerts"] = [a.to_dict() for a in fired]
        self.last_frame = frame
        for sink in list(self._sinks):
            sink(frame)
