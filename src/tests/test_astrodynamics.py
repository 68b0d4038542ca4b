"""
===============================================================================
ERIS SIMULATOR - Astrodynamics Utilities Test Suite
===============================================================================
Tests for the standard gravitational parameter, escape velocity, circular
orbital velocity and period, and circular-orbit seeding.
===============================================================================
"""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import numpy as np
import pytest
from numpy.testing import assert_allclose

from eris.core.config import SimulationConstants
from eris.dynamics.astrodynamics import (
    standard_gravitational_parameter,
    escape_velocity,
    circular_velocity_at_radius,
    circular_orbital_period,
    circular_orbit_state,
)
from eris.dynamics.body import Body


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def planet():
    """mass = 1e6, radius = 10."""
    return Body('planet', mass=1.0e6, radius=10.0)


# =============================================================================
# Test: Reference formulas
# =============================================================================

class TestReferenceValues:

    def test_standard_gravitational_parameter(self, planet, reference_constants):
        assert_allclose(standard_gravitational_parameter(planet, reference_constants),
                        1.0e-7 * 1.0e6, rtol=1e-15)

    def test_escape_velocity(self, planet, reference_constants):
        v = escape_velocity(planet, reference_constants)
        assert_allclose(v, np.sqrt(2.0 * 1.0e-7 * 1.0e6 / 10.0), rtol=1e-15)
        assert_allclose(v, 0.1414213562, rtol=1e-9)

    def test_circular_velocity(self, planet, reference_constants):
        v = circular_velocity_at_radius(planet, 100.0, reference_constants)
        assert_allclose(v, np.sqrt(1.0e-7 * 1.0e6 / 100.0), rtol=1e-15)
        assert_allclose(v, 0.0316227766, rtol=1e-9)

    def test_escape_is_sqrt2_times_circular_at_surface(self, planet, reference_constants):
        v_esc = escape_velocity(planet, reference_constants)
        v_circ = circular_velocity_at_radius(planet, planet.radius, reference_constants)
        assert_allclose(v_esc, np.sqrt(2.0) * v_circ, rtol=1e-14)

    def test_sim_scale_multiplies_g(self, planet):
        base = SimulationConstants(gravitational_constant=1.0e-7)
        scaled = SimulationConstants(gravitational_constant=1.0e-7, sim_scale=4.0)
        assert_allclose(escape_velocity(planet, scaled),
                        2.0 * escape_velocity(planet, base), rtol=1e-14)

    def test_circular_period(self, planet, reference_constants):
        r = 100.0
        period = circular_orbital_period(planet, r, reference_constants)
        v = circular_velocity_at_radius(planet, r, reference_constants)
        assert_allclose(period, 2.0 * np.pi * r / v, rtol=1e-12)

    @pytest.mark.parametrize("r", [0.0, -5.0])
    def test_non_positive_radius_rejected(self, planet, reference_constants, r):
        with pytest.raises(ValueError):
            circular_velocity_at_radius(planet, r, reference_constants)
        with pytest.raises(ValueError):
            circular_orbital_period(planet, r, reference_constants)

    def test_pure_functions(self, planet, reference_constants):
        """Repeated calls return identical results and leave the body alone."""
        before = planet.position.copy()
        values = {escape_velocity(planet, reference_constants) for _ in range(5)}
        assert len(values) == 1
        assert np.array_equal(planet.position, before)


# =============================================================================
# Test: Circular orbit seeding
# =============================================================================

class TestCircularOrbitState:

    def test_default_plane(self, unit_constants):
        parent = Body('star', mass=4.0, radius=0.5,
                      position=[1.0, 2.0, 3.0], velocity=[0.1, 0.0, 0.0])
        position, velocity = circular_orbit_state(parent, 4.0, unit_constants)

        assert_allclose(position, [5.0, 2.0, 3.0], atol=1e-15)
        # v_circ = sqrt(4 / 4) = 1, prograde about +Z
        assert_allclose(velocity, [0.1, 1.0, 0.0], atol=1e-15)

    def test_phase_rotates_in_plane(self, unit_constants):
        parent = Body('star', mass=1.0, radius=0.1)
        position, velocity = circular_orbit_state(parent, 2.0, unit_constants, phase=np.pi / 2)
        assert_allclose(position, [0.0, 2.0, 0.0], atol=1e-12)
        assert_allclose(velocity, [-np.sqrt(0.5), 0.0, 0.0], atol=1e-12)

    @pytest.mark.parametrize("normal", [[0.0, 0.0, 1.0], [0.0, 1.0, 1.0], [1.0, 0.0, 0.0], [1.0, 2.0, -3.0]])
    def test_velocity_perpendicular_to_radius(self, unit_constants, normal):
        parent = Body('star', mass=9.0, radius=0.1,
                      position=[-3.0, 0.5, 2.0], velocity=[0.2, -0.1, 0.05])
        r = 3.0
        position, velocity = circular_orbit_state(parent, r, unit_constants,
                                                  phase=0.7, normal=np.array(normal))
        r_rel = position - parent.position
        v_rel = velocity - parent.velocity

        assert_allclose(np.linalg.norm(r_rel), r, rtol=1e-12)
        assert_allclose(np.linalg.norm(v_rel), np.sqrt(9.0 / r), rtol=1e-12)
        assert_allclose(np.dot(r_rel, v_rel), 0.0, atol=1e-12)

        # Angular momentum points along the requested normal
        h = np.cross(r_rel, v_rel)
        n_hat = np.array(normal) / np.linalg.norm(normal)
        assert_allclose(h / np.linalg.norm(h), n_hat, atol=1e-12)

    def test_zero_normal_rejected(self, unit_constants):
        parent = Body('star', mass=1.0, radius=0.1)
        with pytest.raises(ValueError):
            circular_orbit_state(parent, 1.0, unit_constants, normal=np.zeros(3))
