import math

import numpy as np
import pytest

from maneuver_sim.core.config import PHYSICS_CFG, PhysicsCfg
from maneuver_sim.core.errors import CentralBodyCollisionError, ConfigError
from maneuver_sim.core.model import Satellite
from maneuver_sim.core.physics import (
    acceleration,
    advance,
    angular_momentum,
    circular_speed,
    eccentricity,
    energy_specific,
    orbital_period,
    period_from_semi_major_axis,
    radial_velocity,
    semi_major_axis,
    semi_major_axis_from_energy,
    symplectic_euler_step,
)


def test_circular_speed_for_default_constants():
    assert circular_speed(200.0) == pytest.approx(math.sqrt(500.0))
    assert PHYSICS_CFG.circular_speed() == pytest.approx(22.3607, abs=1e-4)


def test_acceleration_points_at_the_centre():
    a = acceleration(np.array([200.0, 0.0]))
    assert a == pytest.approx([-2.5, 0.0])

    a3 = acceleration(np.array([0.0, 0.0, -100.0]))
    assert a3 == pytest.approx([0.0, 0.0, 10.0])


def test_step_uses_updated_velocity_for_position():
    r = np.array([200.0, 0.0])
    v = np.array([0.0, 20.0])
    r_next, v_next = symplectic_euler_step(r, v, 0.1)

    assert v_next == pytest.approx([-0.25, 20.0])
    # position moves with the new velocity, not the old one
    assert r_next == pytest.approx([200.0 - 0.025, 2.0])
    assert r == pytest.approx([200.0, 0.0])


def test_advance_mutates_the_satellite_in_place():
    sat = Satellite(position=np.array([200.0, 0.0]), velocity=np.array([0.0, 20.0]))
    expected_r, expected_v = symplectic_euler_step(sat.position, sat.velocity, 0.1)
    advance(sat, 0.1)
    assert sat.position == pytest.approx(expected_r)
    assert sat.velocity == pytest.approx(expected_v)


def test_collision_with_central_body_fails_fast():
    with pytest.raises(CentralBodyCollisionError):
        symplectic_euler_step(np.zeros(2), np.array([1.0, 0.0]), 0.1)
    with pytest.raises(CentralBodyCollisionError):
        acceleration(np.array([np.nan, 0.0]))


def test_circular_orbit_energy_has_no_secular_drift():
    r = np.array([200.0, 0.0])
    v = np.array([0.0, circular_speed(200.0)])
    e0 = energy_specific(r, v)

    worst = 0.0
    for _ in range(20_000):
        r, v = symplectic_euler_step(r, v, PHYSICS_CFG.dt)
        worst = max(worst, abs((energy_specific(r, v) - e0) / e0))

    assert worst < 1e-2
    assert np.linalg.norm(r) == pytest.approx(200.0, rel=2e-2)


def test_radial_velocity_sign():
    r = np.array([100.0, 0.0])
    assert radial_velocity(r, np.array([3.0, 5.0])) == pytest.approx(3.0)
    assert radial_velocity(r, np.array([-2.0, 5.0])) == pytest.approx(-2.0)
    assert radial_velocity(r, np.array([0.0, 5.0])) == 0.0


def test_orbital_elements_of_an_ellipse():
    v_p = math.sqrt(1.5) * circular_speed(200.0)
    r = np.array([200.0, 0.0])
    v = np.array([0.0, v_p])

    assert eccentricity(r, v) == pytest.approx(0.5)
    assert semi_major_axis(r, v) == pytest.approx(400.0)
    assert orbital_period(r, v) == pytest.approx(2 * math.pi * math.sqrt(400.0**3 / 1e5))


def test_angular_momentum_is_scalar_in_2d_and_a_vector_in_3d():
    h2 = angular_momentum(np.array([200.0, 0.0]), np.array([0.0, 20.0]))
    assert isinstance(h2, float)
    assert h2 == pytest.approx(4000.0)

    h3 = angular_momentum(np.array([200.0, 0.0, 0.0]), np.array([0.0, 0.0, 20.0]))
    assert h3 == pytest.approx([0.0, -4000.0, 0.0])


def test_elements_from_energy():
    assert semi_major_axis_from_energy(-250.0, 1e5) == pytest.approx(200.0)
    assert semi_major_axis_from_energy(0.0, 1e5) is None
    assert period_from_semi_major_axis(200.0, 1e5) == pytest.approx(2 * math.pi * math.sqrt(200.0**3 / 1e5))
    assert period_from_semi_major_axis(None, 1e5) is None


def test_open_trajectory_has_no_period():
    r = np.array([200.0, 0.0])
    v = np.array([0.0, 40.0])
    assert semi_major_axis(r, v) is None
    assert orbital_period(r, v) is None


@pytest.mark.parametrize(
    "overrides",
    [
        {"dt": 0.0},
        {"gravitational_constant": -1.0},
        {"dimensions": 4},
        {"up_axis": (0.0, 0.0, 0.0)},
        {"max_prediction_steps": 0},
    ],
)
def test_invalid_config_is_rejected(overrides):
    with pytest.raises(ConfigError):
        PhysicsCfg(**overrides).validate()
