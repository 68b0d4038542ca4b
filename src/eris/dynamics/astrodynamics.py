"""
===============================================================================
ERIS SIMULATOR - Astrodynamics Utilities
===============================================================================
Pure functions of a gravitating body's mass and radius:

    mu      = G * M                      standard gravitational parameter
    v_esc   = sqrt(2 * mu / R)           escape velocity at the surface
    v_circ  = sqrt(mu / r)               circular orbital velocity at r
    T       = 2*pi * sqrt(r^3 / mu)      circular orbital period

plus ``circular_orbit_state``, which seeds a satellite's initial position
and velocity on a circular orbit around a parent body. The circular helpers
are used at initialization only; none of these functions are called from
the per-tick update.

G is always taken from the SimulationConstants passed in (already scaled by
SIM_SCALE), never from a module global.

References
----------
    [1] Curtis, "Orbital Mechanics for Engineering Students", 4th ed.
    [2] Vallado, "Fundamentals of Astrodynamics and Applications", 4th ed.
===============================================================================
"""

import numpy as np
from typing import Tuple

from eris.core.config import SimulationConstants
from eris.core.constants import TWO_PI, Z_AXIS, X_AXIS, Y_AXIS


def standard_gravitational_parameter(body, constants: SimulationConstants) -> float:
    """
    Standard gravitational parameter mu = G * M.

    Parameters
    ----------
    body : Body
        Any object with a ``mass`` attribute.
    constants : SimulationConstants
        Supplies the effective G.

    Returns
    -------
    float
        mu in length^3 / time^2.
    """
    return constants.G * body.mass


def escape_velocity(body, constants: SimulationConstants) -> float:
    """
    Minimum speed at the body's surface needed to escape to infinity.

        v_esc = sqrt(2 * G * M / R)

    Raises
    ------
    ValueError
        If the body radius is not positive. Bodies enforce this at
        construction, so this only triggers for foreign objects.
    """
    if body.radius <= 0.0:
        raise ValueError(f"Escape velocity undefined for radius {body.radius!r}")
    return float(np.sqrt(2.0 * standard_gravitational_parameter(body, constants) / body.radius))


def circular_velocity_at_radius(body, r: float, constants: SimulationConstants) -> float:
    """
    Speed a massless test particle needs for a circular orbit of radius r.

        v_circ = sqrt(G * M / r)

    Raises
    ------
    ValueError
        If r is not positive.
    """
    if r <= 0.0:
        raise ValueError(f"Orbital radius must be positive (got {r!r})")
    return float(np.sqrt(standard_gravitational_parameter(body, constants) / r))


def circular_orbital_period(body, r: float, constants: SimulationConstants) -> float:
    """
    Period of a circular orbit of radius r (Kepler's third law).

    Raises
    ------
    ValueError
        If r is not positive.
    """
    if r <= 0.0:
        raise ValueError(f"Orbital radius must be positive (got {r!r})")
    mu = standard_gravitational_parameter(body, constants)
    return float(TWO_PI * np.sqrt(r ** 3 / mu))


def _orbital_plane_basis(normal: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """
    Two orthonormal in-plane axes (e1, e2) for the plane perpendicular to
    ``normal``, with e1 x e2 = n. For normal = +Z this is (+X, +Y).
    """
    n = normal / np.linalg.norm(normal)
    reference = X_AXIS if abs(np.dot(n, X_AXIS)) < 0.9 else Y_AXIS
    e1 = reference - np.dot(reference, n) * n
    e1 /= np.linalg.norm(e1)
    e2 = np.cross(n, e1)
    return e1, e2


def circular_orbit_state(
    parent,
    r: float,
    constants: SimulationConstants,
    phase: float = 0.0,
    normal: np.ndarray = Z_AXIS,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Initial position and velocity of a satellite on a circular orbit.

    The satellite is placed at distance ``r`` from the parent at angle
    ``phase`` in the orbital plane, moving prograde about ``normal`` with
    the parent's velocity plus the circular speed:

        p = p_parent + r * (cos(phase) e1 + sin(phase) e2)
        v = v_parent + v_circ * (n x r_hat)

    Parameters
    ----------
    parent : Body
        Central body; its current position and velocity are used.
    r : float
        Orbital radius (> 0).
    constants : SimulationConstants
        Supplies the effective G.
    phase : float, optional
        In-plane angle (rad) measured from the plane's first axis.
    normal : np.ndarray, optional
        Orbit normal (angular momentum direction). Defaults to +Z.

    Returns
    -------
    tuple of (np.ndarray, np.ndarray)
        (position, velocity) in the same frame as the parent.

    Raises
    ------
    ValueError
        If r is not positive or ``normal`` is a zero vector.
    """
    normal = np.asarray(normal, dtype=np.float64)
    if np.linalg.norm(normal) < 1e-12:
        raise ValueError("Orbit normal must be a non-zero vector")

    v_circ = circular_velocity_at_radius(parent, r, constants)

    e1, e2 = _orbital_plane_basis(normal)
    r_hat = np.cos(phase) * e1 + np.sin(phase) * e2
    n_hat = normal / np.linalg.norm(normal)
    t_hat = np.cross(n_hat, r_hat)

    position = np.asarray(parent.position, dtype=np.float64) + r * r_hat
    velocity = np.asarray(parent.velocity, dtype=np.float64) + v_circ * t_hat
    return position, velocity
