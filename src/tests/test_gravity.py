"""
===============================================================================
ERIS SIMULATOR - Force Accumulator Test Suite
===============================================================================
Newton's third law, self-mass independence, the degenerate-pair guard,
snapshot isolation and the energy / momentum diagnostics.
===============================================================================
"""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import logging
import numpy as np
import pytest
from numpy.testing import assert_allclose, assert_array_equal

from eris.core.config import SimulationConstants
from eris.dynamics.body import Body
from eris.dynamics.gravity import (
    ForceAccumulator,
    SystemSnapshot,
    pairwise_force,
    total_energy,
    total_momentum,
)


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def three_bodies():
    return [
        Body('a', mass=3.0, radius=0.1, position=[0.0, 0.0, 0.0], velocity=[0.0, 0.1, 0.0]),
        Body('b', mass=1.5, radius=0.1, position=[2.0, 0.5, 0.0], velocity=[-0.2, 0.0, 0.0]),
        Body('c', mass=0.7, radius=0.1, position=[-1.0, 1.0, 3.0], velocity=[0.0, 0.0, 0.3]),
    ]


# =============================================================================
# Test: Pairwise force
# =============================================================================

class TestPairwiseForce:

    def test_newtons_third_law(self, three_bodies, unit_constants):
        a, b, _ = three_bodies
        assert_array_equal(pairwise_force(a, b, unit_constants),
                           -pairwise_force(b, a, unit_constants))

    def test_inverse_square_magnitude(self, unit_constants):
        a = Body('a', mass=2.0, radius=0.1)
        b = Body('b', mass=3.0, radius=0.1, position=[0.0, 2.0, 0.0])
        force = pairwise_force(a, b, unit_constants)
        assert_allclose(force, [0.0, 2.0 * 3.0 / 4.0, 0.0], rtol=1e-15)

    def test_coincident_pair_is_zero(self, unit_constants):
        a = Body('a', mass=1.0, radius=0.1, position=[1.0, 1.0, 1.0])
        b = Body('b', mass=1.0, radius=0.1, position=[1.0, 1.0, 1.0])
        assert_array_equal(pairwise_force(a, b, unit_constants), np.zeros(3))


# =============================================================================
# Test: Accumulated accelerations
# =============================================================================

class TestAccelerations:

    def test_single_body_has_no_acceleration(self, unit_constants):
        snapshot = SystemSnapshot.capture([Body('solo', mass=5.0, radius=1.0)])
        acc = ForceAccumulator(unit_constants).accelerations(snapshot)
        assert acc.shape == (1, 3)
        assert_array_equal(acc, np.zeros((1, 3)))

    def test_two_body_reference(self, unit_constants):
        bodies = [
            Body('a', mass=1.0, radius=0.1),
            Body('b', mass=4.0, radius=0.1, position=[2.0, 0.0, 0.0]),
        ]
        acc = ForceAccumulator(unit_constants).accelerations(SystemSnapshot.capture(bodies))
        assert_allclose(acc[0], [1.0, 0.0, 0.0], rtol=1e-15)
        assert_allclose(acc[1], [-0.25, 0.0, 0.0], rtol=1e-15)

    def test_mass_times_acceleration_matches_pair_forces(self, three_bodies, unit_constants):
        acc = ForceAccumulator(unit_constants).accelerations(SystemSnapshot.capture(three_bodies))
        for i, body in enumerate(three_bodies):
            expected = sum(pairwise_force(body, other, unit_constants)
                           for other in three_bodies if other is not body)
            assert_allclose(body.mass * acc[i], expected, rtol=1e-12)

    def test_net_force_sums_to_zero(self, three_bodies, unit_constants):
        snapshot = SystemSnapshot.capture(three_bodies)
        acc = ForceAccumulator(unit_constants).accelerations(snapshot)
        assert_allclose(np.sum(snapshot.masses[:, None] * acc, axis=0), np.zeros(3), atol=1e-14)

    def test_own_mass_does_not_enter(self, three_bodies, unit_constants):
        accumulator = ForceAccumulator(unit_constants)
        before = accumulator.accelerations(SystemSnapshot.capture(three_bodies))

        heavy = [Body('a', mass=3.0e6, radius=0.1, position=three_bodies[0].position)] + three_bodies[1:]
        after = accumulator.accelerations(SystemSnapshot.capture(heavy))

        assert_array_equal(after[0], before[0])
        assert not np.allclose(after[1], before[1])

    def test_effective_g_includes_sim_scale(self, three_bodies):
        snapshot = SystemSnapshot.capture(three_bodies)
        base = ForceAccumulator(SimulationConstants(gravitational_constant=1.0)).accelerations(snapshot)
        scaled = ForceAccumulator(SimulationConstants(gravitational_constant=1.0,
                                                      sim_scale=10.0)).accelerations(snapshot)
        assert_allclose(scaled, 10.0 * base, rtol=1e-14)


# =============================================================================
# Test: Degenerate pairs
# =============================================================================

class TestDegeneratePairs:

    def test_coincident_bodies_are_skipped(self, unit_constants, caplog):
        bodies = [
            Body('a', mass=1.0, radius=0.1, position=[1.0, 0.0, 0.0]),
            Body('b', mass=1.0, radius=0.1, position=[1.0, 0.0, 0.0]),
            Body('c', mass=2.0, radius=0.1, position=[4.0, 0.0, 0.0]),
        ]
        with caplog.at_level(logging.WARNING, logger='eris.dynamics.gravity'):
            acc = ForceAccumulator(unit_constants).accelerations(SystemSnapshot.capture(bodies))

        assert np.all(np.isfinite(acc))
        # a and b only feel c
        assert_allclose(acc[0], [2.0 / 9.0, 0.0, 0.0], rtol=1e-14)
        assert_allclose(acc[1], [2.0 / 9.0, 0.0, 0.0], rtol=1e-14)
        assert any("'a' and 'b'" in record.getMessage() for record in caplog.records)

    def test_pairs_inside_min_separation_are_skipped(self):
        constants = SimulationConstants(gravitational_constant=1.0, min_separation=0.5)
        bodies = [
            Body('a', mass=1.0, radius=0.1),
            Body('b', mass=1.0, radius=0.1, position=[0.1, 0.0, 0.0]),
        ]
        acc = ForceAccumulator(constants).accelerations(SystemSnapshot.capture(bodies))
        assert_array_equal(acc, np.zeros((2, 3)))

    def test_no_warning_for_separated_bodies(self, three_bodies, unit_constants, caplog):
        with caplog.at_level(logging.WARNING, logger='eris.dynamics.gravity'):
            ForceAccumulator(unit_constants).accelerations(SystemSnapshot.capture(three_bodies))
        assert not caplog.records


# =============================================================================
# Test: Snapshot
# =============================================================================

class TestSnapshot:

    def test_snapshot_is_read_only(self, three_bodies):
        snapshot = SystemSnapshot.capture(three_bodies)
        with pytest.raises(ValueError):
            snapshot.positions[0, 0] = 10.0
        with pytest.raises(ValueError):
            snapshot.masses[0] = 10.0

    def test_snapshot_isolated_from_later_mutation(self, three_bodies):
        snapshot = SystemSnapshot.capture(three_bodies)
        three_bodies[0].integrate(np.array([1.0, 1.0, 1.0]), 1.0)
        assert_array_equal(snapshot.positions[0], [0.0, 0.0, 0.0])
        assert_array_equal(snapshot.velocities[0], [0.0, 0.1, 0.0])

    def test_names_in_storage_order(self, three_bodies):
        snapshot = SystemSnapshot.capture(three_bodies)
        assert snapshot.names == ('a', 'b', 'c')
        assert len(snapshot) == 3


# =============================================================================
# Test: Diagnostics
# =============================================================================

class TestDiagnostics:

    def test_energy_of_two_bodies_at_rest(self, unit_constants):
        bodies = [
            Body('a', mass=1.0, radius=0.1),
            Body('b', mass=1.0, radius=0.1, position=[2.0, 0.0, 0.0]),
        ]
        assert total_energy(SystemSnapshot.capture(bodies), unit_constants) == pytest.approx(-0.5)

    def test_kinetic_energy_only(self, unit_constants):
        bodies = [Body('a', mass=2.0, radius=0.1, velocity=[3.0, 0.0, 0.0])]
        assert total_energy(SystemSnapshot.capture(bodies), unit_constants) == pytest.approx(9.0)

    def test_momentum(self, three_bodies):
        momentum = total_momentum(SystemSnapshot.capture(three_bodies))
        assert_allclose(momentum, [1.5 * -0.2, 3.0 * 0.1, 0.7 * 0.3], rtol=1e-15)
