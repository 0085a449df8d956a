import os
from typing import Callable

import pytest

# keep a developer's local overrides out of test runs
os.environ.setdefault("APP_CONFIG_SKIP_LOCAL", "1")

from services.dashboard_service.simulator import SimulationState, VehicleController  # noqa: E402


@pytest.fixture
def state() -> SimulationState:
    return SimulationState()


@pytest.fixture
def controller(state: SimulationState) -> VehicleController:
    return VehicleController(state)


@pytest.fixture
def drain() -> Callable[[VehicleController], None]:
    def _drain(ctl: VehicleController, speed_steps: int = 10) -> None:
        for _ in range(speed_steps):
            ctl.accelerate()
        while ctl.state.fuel > 0:
            ctl.tick()

    return _drain
