"""
Shared fixtures for the Eris test suite.
"""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import pytest

from eris.core.config import SimulationConstants


@pytest.fixture
def unit_constants():
    """G = 1, no scaling, no speed-up."""
    return SimulationConstants(gravitational_constant=1.0)


@pytest.fixture
def reference_constants():
    """G = 1e-7, the constant used by the reference formula checks."""
    return SimulationConstants(gravitational_constant=1.0e-7)
