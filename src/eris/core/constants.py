"""
===============================================================================
ERIS SIMULATOR - Physical and Simulation Constants
===============================================================================
Central repository for the constants used throughout the simulator. SI
units throughout (meters, seconds, kilograms, radians) unless a scenario
chooses scaled units via SIM_SCALE.

These are defaults only. The values actually used by a running session are
carried by a SimulationConstants instance (see core.config) so that tests
and scenarios can exercise different constants without process-wide state.
===============================================================================
"""

import numpy as np


# =============================================================================
# MATHEMATICAL CONSTANTS
# =============================================================================
PI = np.pi
TWO_PI = 2.0 * np.pi
DEG2RAD = PI / 180.0
RAD2DEG = 180.0 / PI

# =============================================================================
# FUNDAMENTAL PHYSICAL CONSTANTS
# =============================================================================
GRAVITATIONAL_CONSTANT = 6.67430e-11   # m^3 / (kg * s^2)

# =============================================================================
# SIMULATION DEFAULTS
# =============================================================================
DEFAULT_SIM_SCALE = 1.0                # multiplier applied to G
DEFAULT_SIM_SPEED = 1.0                # multiplier applied to dt
DEFAULT_MIN_SEPARATION = 1.0e-6        # pairs closer than this exert no force

# Reference axes
X_AXIS = np.array([1.0, 0.0, 0.0])
Y_AXIS = np.array([0.0, 1.0, 0.0])
Z_AXIS = np.array([0.0, 0.0, 1.0])
