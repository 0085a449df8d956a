import pytest

from services.dashboard_service.simulator.state import (
    MAX_RPM,
    SimulationState,
    Snapshot,
    advance_distance,
    cool_down,
    fuel_consumption,
    heat_up,
    rpm_for,
)


def test_initial_record(state: SimulationState) -> None:
    assert state.snapshot() == Snapshot(speed=0, rpm=0, fuel=100, temperature=0, distance=0)


def test_pure_helpers() -> None:
    assert fuel_consumption(30) == pytest.approx(0.3)
    assert rpm_for(30) == 1500
    assert rpm_for(200) == MAX_RPM
    assert advance_distance(2.0, 30) == pytest.approx(5.0)
    assert heat_up(98) == 100
    assert cool_down(3) == 0


def test_tick_while_moving_accumulates(state: SimulationState) -> None:
    for _ in range(3):
        state.speed_up()

    snap = state.tick()

    assert snap.speed == 30
    assert snap.rpm == 1500
    assert snap.fuel == pytest.approx(100 - 30 * 0.01)
    assert snap.distance == pytest.approx(3.0)
    assert snap.temperature == 5


def test_tick_while_stopped_only_cools(state: SimulationState) -> None:
    state.speed_up()
    state.tick()
    state.tick()
    state.slow_down()
    fuel, distance = state.fuel, state.distance

    assert state.tick().temperature == 5
    assert state.tick().temperature == 0
    assert state.tick().temperature == 0
    assert state.fuel == fuel
    assert state.distance == distance


def test_distance_is_sum_of_speed_over_ticks(state: SimulationState) -> None:
    speeds = []
    for step in (1, 1, 0, 1, -1, 1, 1, 0):
        if step > 0:
            state.speed_up()
        elif step < 0:
            state.slow_down()
        speeds.append(state.speed)
        before = state.distance
        state.tick()
        assert state.distance >= before

    assert state.distance == pytest.approx(sum(s / 10 for s in speeds))


def test_temperature_stays_bounded(state: SimulationState) -> None:
    for _ in range(5):
        state.speed_up()
    for _ in range(40):
        state.tick()
        assert 0 <= state.temperature <= 100
    assert state.temperature == 100

    for _ in range(5):
        state.slow_down()
    for _ in range(40):
        state.tick()
        assert 0 <= state.temperature <= 100
    assert state.temperature == 0


def test_fuel_is_not_clamped_internally(state: SimulationState) -> None:
    for _ in range(30):
        state.speed_up()
    while state.fuel > 0:
        state.tick()
    # 300 km/h burns 3% per tick; 100 is not a multiple of 3
    assert state.fuel < 0


def test_reset_reinitializes_in_place(state: SimulationState) -> None:
    for _ in range(4):
        state.speed_up()
    state.tick()

    ident = id(state)
    state.reset()

    assert id(state) == ident
    assert state.snapshot().as_dict() == {"speed": 0, "rpm": 0, "fuel": 100, "temperature": 0, "distance": 0}


def test_slow_down_floors_at_zero(state: SimulationState) -> None:
    state.slow_down()
    assert state.speed == 0
    assert state.rpm == 0


def test_snapshot_is_immutable(state: SimulationState) -> None:
    snap = state.snapshot()
    with pytest.raises(AttributeError):
        snap.speed = 10  # type: ignore[misc]
