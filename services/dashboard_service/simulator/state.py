from dataclasses import asdict, dataclass
from typing import Dict

SPEED_STEP_KPH = 10.0
RPM_PER_KPH = 50.0
MAX_RPM = 7000.0
TEMP_STEP_C = 5.0
MAX_TEMP_C = 100.0
MIN_TEMP_C = 0.0
FULL_TANK_PCT = 100.0


def fuel_consumption(speed: float) -> float:
    # Per-tick burn is speed * 0.1 * 0.1 (i.e. 1% of speed). The double 0.1
    # looks like a unit-scaling slip but is kept for compatibility.
    return (speed * 0.1) * 0.1


def rpm_for(speed: float) -> float:
    return min(speed * RPM_PER_KPH, MAX_RPM)


def advance_distance(distance: float, speed: float) -> float:
    return distance + speed / 10


def heat_up(temperature: float) -> float:
    return min(temperature + TEMP_STEP_C, MAX_TEMP_C)


def cool_down(temperature: float) -> float:
    return max(temperature - TEMP_STEP_C, MIN_TEMP_C)


@dataclass(frozen=True)
class Snapshot:
    speed: float
    rpm: float
    fuel: float
    temperature: float
    distance: float

    def as_dict(self) -> Dict[str, float]:
        return asdict(self)


class SimulationState:
    """The single mutable dashboard record.

    rpm is not stored; it is always derived from speed. fuel is not clamped
    here and may dip below zero on the tick that empties the tank.
    """

    def __init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        self._speed = 0.0
        self._fuel = FULL_TANK_PCT
        self._temperature = 0.0
        self._distance = 0.0

    @property
    def speed(self) -> float:
        return self._speed

    @property
    def rpm(self) -> float:
        return rpm_for(self._speed)

    @property
    def fuel(self) -> float:
        return self._fuel

    @property
    def temperature(self) -> float:
        return self._temperature

    @property
    def distance(self) -> float:
        return self._distance

    @property
    def has_fuel(self) -> bool:
        return self._fuel > 0

    def speed_up(self) -> None:
        self._speed += SPEED_STEP_KPH

    def slow_down(self) -> None:
        self._speed = max(self._speed - SPEED_STEP_KPH, 0.0)

    def tick(self) -> Snapshot:
        if self._speed > 0:
            self._fuel -= fuel_consumption(self._speed)
            self._distance = advance_distance(self._distance, self._speed)
            self._temperature = heat_up(self._temperature)
        elif self._temperature > 0:
            self._temperature = cool_down(self._temperature)
        return self.snapshot()

    def snapshot(self) -> Snapshot:
        return Snapshot(
            speed=self._speed,
            rpm=self.rpm,
            fuel=self._fuel,
            temperature=self._temperature,
            distance=self._distance,
        )
