import math

import numpy as np
import pytest

from maneuver_sim.core.config import PHYSICS_CFG, PhysicsCfg, Termination
from maneuver_sim.core.prediction import (
    APOAPSIS,
    PERIAPSIS,
    apsis_passages,
    find_extremes,
    is_apsis_crossing,
    predict_trajectory,
)

V_CIRC = math.sqrt(500.0)
ESCAPE_CFG = PhysicsCfg(termination=Termination.ESCAPE)


def _ellipse(a=400.0, e=0.5, n=400, offset=0.3):
    """Analytic Kepler ellipse sampled in eccentric anomaly, focus at origin."""

    b = a * math.sqrt(1 - e * e)
    step = 2 * math.pi / n
    positions, velocities = [], []
    for k in range(n):
        anomaly = -math.pi / 2 + step * (k + offset)
        positions.append(np.array([a * (math.cos(anomaly) - e), b * math.sin(anomaly)]))
        velocities.append(np.array([-a * math.sin(anomaly), b * math.cos(anomaly)]))
    return positions, velocities


def test_prediction_leaves_inputs_untouched():
    r = np.array([200.0, 0.0])
    v = np.array([0.0, V_CIRC])
    predict_trajectory(r, v)
    assert r.tolist() == [200.0, 0.0]
    assert v.tolist() == [0.0, V_CIRC]


def test_closed_orbit_stops_after_one_revolution():
    points = predict_trajectory(np.array([200.0, 0.0]), np.array([0.0, V_CIRC]))

    period_steps = 2 * math.pi * 200.0 / V_CIRC / PHYSICS_CFG.dt
    assert points[0].tolist() == [200.0, 0.0]
    assert len(points) < PHYSICS_CFG.max_prediction_steps
    assert abs(len(points) - period_steps) < 30


def test_closed_orbit_ellipse_reaches_apoapsis():
    v_p = math.sqrt(1.5) * V_CIRC
    points = predict_trajectory(np.array([200.0, 0.0]), np.array([0.0, v_p]))

    assert 1400 < len(points) < PHYSICS_CFG.max_prediction_steps
    extremes = find_extremes(points)
    assert extremes.periapsis_distance == pytest.approx(200.0, abs=1.0)
    assert extremes.apoapsis_distance == pytest.approx(600.0, rel=0.03)


def test_closed_orbit_in_three_dimensions():
    cfg = PhysicsCfg(dimensions=3)
    points = predict_trajectory(np.array([200.0, 0.0, 0.0]), np.array([0.0, 0.0, V_CIRC]), cfg=cfg)
    assert len(points) < cfg.max_prediction_steps
    assert all(p.shape == (3,) for p in points)


def test_unbound_orbit_runs_to_the_step_cap_with_closed_orbit_detection():
    points = predict_trajectory(np.array([200.0, 0.0]), np.array([0.0, 50.0]), max_steps=300)
    assert len(points) == 300


def test_escape_strategy_caps_bound_orbits():
    points = predict_trajectory(np.array([200.0, 0.0]), np.array([0.0, V_CIRC]), cfg=ESCAPE_CFG)
    assert len(points) == ESCAPE_CFG.max_prediction_steps


def test_escape_strategy_keeps_minimum_point_count():
    points = predict_trajectory(np.array([200.0, 0.0]), np.array([0.0, 200.0]), cfg=ESCAPE_CFG)
    assert len(points) == ESCAPE_CFG.escape_min_points + 1
    assert np.linalg.norm(points[-1]) > ESCAPE_CFG.escape_radius


def test_escape_strategy_stops_once_past_the_escape_radius():
    points = predict_trajectory(np.array([200.0, 0.0]), np.array([0.0, 50.0]), cfg=ESCAPE_CFG)
    assert ESCAPE_CFG.escape_min_points < len(points) < ESCAPE_CFG.max_prediction_steps
    assert np.linalg.norm(points[-1]) > ESCAPE_CFG.escape_radius
    assert np.linalg.norm(points[-2]) <= ESCAPE_CFG.escape_radius or len(points) == ESCAPE_CFG.escape_min_points + 1


def test_extremes_need_two_points():
    assert find_extremes([]) is None
    assert find_extremes([np.array([1.0, 0.0])]) is None


def test_extremes_of_a_perfect_circle():
    points = [
        np.array([200.0, 0.0]),
        np.array([0.0, 200.0]),
        np.array([-200.0, 0.0]),
        np.array([0.0, -200.0]),
    ]
    extremes = find_extremes(points)
    assert extremes.periapsis_distance == pytest.approx(extremes.apoapsis_distance)
    assert extremes.periapsis_index == 0
    assert extremes.apoapsis_index == 0


def test_extremes_ties_keep_first_occurrence():
    points = [
        np.array([300.0, 0.0]),
        np.array([100.0, 0.0]),
        np.array([0.0, 300.0]),
        np.array([0.0, 100.0]),
    ]
    extremes = find_extremes(points)
    assert extremes.periapsis_index == 1
    assert extremes.apoapsis_index == 0
    assert extremes.altitudes(PHYSICS_CFG) == pytest.approx((70.0, 270.0))


def test_apsis_crossings_match_analytic_ellipse():
    positions, velocities = _ellipse()

    passages = apsis_passages(positions, velocities)
    assert [(p.index, p.kind) for p in passages] == [(100, PERIAPSIS), (300, APOAPSIS)]

    extremes = find_extremes(positions)
    assert extremes.periapsis_index == 100
    assert extremes.apoapsis_index == 300
    assert extremes.periapsis_distance == pytest.approx(200.0, rel=1e-3)
    assert extremes.apoapsis_distance == pytest.approx(600.0, rel=1e-3)


def test_is_apsis_crossing():
    assert is_apsis_crossing(-1.0, 0.5)
    assert is_apsis_crossing(0.5, -1.0)
    assert is_apsis_crossing(-1.0, 0.0)
    assert not is_apsis_crossing(0.2, 0.5)
    assert not is_apsis_crossing(-0.2, -0.5)
    assert not is_apsis_crossing(0.0, 0.0)
