"""
eris - gravitational dynamics core for a small, fixed set of celestial bodies.

Each animation tick the SimulationEngine takes the elapsed time, evaluates
all pairwise gravitational accelerations from a frozen snapshot of the
bodies, then integrates every body with a semi-implicit Euler step. The
resulting poses (position, velocity, orientation) are handed to a rendering
client as read-only data.
"""

from eris.core.config import SimulationConstants, load_config
from eris.core.quaternion import Quaternion
from eris.dynamics.body import Body, BodyState
from eris.dynamics.astrodynamics import (
    standard_gravitational_parameter,
    escape_velocity,
    circular_velocity_at_radius,
    circular_orbital_period,
    circular_orbit_state,
)
from eris.dynamics.gravity import (
    ForceAccumulator,
    SystemSnapshot,
    pairwise_force,
    total_energy,
    total_momentum,
)
from eris.simulation.sim_engine import SimulationEngine
from eris.simulation.scenario import Scenario, build_scenario, load_scenario

__version__ = "0.1.0"

__all__ = [
    "SimulationConstants",
    "load_config",
    "Quaternion",
    "Body",
    "BodyState",
    "standard_gravitational_parameter",
    "escape_velocity",
    "circular_velocity_at_radius",
    "circular_orbital_period",
    "circular_orbit_state",
    "ForceAccumulator",
    "SystemSnapshot",
    "pairwise_force",
    "total_energy",
    "total_momentum",
    "SimulationEngine",
    "Scenario",
    "build_scenario",
    "load_scenario",
]
