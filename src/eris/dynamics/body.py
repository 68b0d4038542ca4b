"""
===============================================================================
ERIS SIMULATOR - Body Model
===============================================================================
The physics-only celestial body and its read-only pose export.

A Body holds exactly the state the gravitational update needs (mass,
radius, position, velocity) plus a cosmetic orientation and spin rate.
Presentation resources (meshes, textures, transform buffers) are not part
of a Body; the rendering layer keeps its own table keyed by body name.

Identity (name), mass and radius are fixed at construction. Position,
velocity and orientation are mutated in place by ``integrate`` once per
tick.
===============================================================================
"""

import numpy as np
from dataclasses import dataclass
from typing import Optional, Sequence, Union

from eris.core.quaternion import Quaternion

Vector = Union[Sequence[float], np.ndarray]


def as_vector3(value: Vector, label: str) -> np.ndarray:
    """
    Coerce a sequence into a finite float64 3-vector.

    Raises
    ------
    ValueError
        If the value is not a 3-element, all-finite vector.
    """
    vec = np.array(value, dtype=np.float64)
    if vec.shape != (3,):
        raise ValueError(f"{label} must be a 3-element vector (got shape {vec.shape})")
    if not np.all(np.isfinite(vec)):
        raise ValueError(f"{label} must be finite (got {vec})")
    return vec


# =============================================================================
# READ-ONLY POSE
# =============================================================================

@dataclass(frozen=True)
class BodyState:
    """
    Snapshot of one body's pose handed to the rendering and UI layers.

    Attributes
    ----------
    name : str
        Stable body identifier.
    position : np.ndarray
        3-element position (read-only copy).
    velocity : np.ndarray
        3-element velocity (read-only copy).
    orientation : Quaternion
        Current orientation.
    """
    name: str
    position: np.ndarray
    velocity: np.ndarray
    orientation: Quaternion

    @property
    def speed(self) -> float:
        """Velocity magnitude, as displayed by the UI."""
        return float(np.linalg.norm(self.velocity))


# =============================================================================
# BODY
# =============================================================================

class Body:
    """
    A gravitating point mass with a visual radius.

    Parameters
    ----------
    name : str
        Stable identifier, unique within a simulation session.
    mass : float
        Mass, strictly positive (kg, or scaled units).
    radius : float
        Radius, strictly positive. Used for escape velocity and, externally,
        for visual scale.
    position : array-like
        Initial 3D position.
    velocity : array-like
        Initial 3D velocity.
    orientation : Quaternion, optional
        Initial orientation. Defaults to identity.
    spin : array-like, optional
        Constant body-frame angular rate (rad/s) applied to the orientation
        each tick. Defaults to zero.

    Raises
    ------
    ValueError
        If mass or radius is not strictly positive and finite, or if any
        vector is malformed.
    """

    def __init__(
        self,
        name: str,
        mass: float,
        radius: float,
        position: Vector = (0.0, 0.0, 0.0),
        velocity: Vector = (0.0, 0.0, 0.0),
        orientation: Optional[Quaternion] = None,
        spin: Optional[Vector] = None,
    ) -> None:
        if not name:
            raise ValueError("Body name must be a non-empty string")

        mass = float(mass)
        radius = float(radius)
        if not np.isfinite(mass) or mass <= 0.0:
            raise ValueError(f"Body '{name}': mass must be positive (got {mass!r})")
        if not np.isfinite(radius) or radius <= 0.0:
            raise ValueError(f"Body '{name}': radius must be positive (got {radius!r})")

        self._name = str(name)
        self._mass = mass
        self._radius = radius

        self.position = as_vector3(position, f"Body '{name}' position")
        self.velocity = as_vector3(velocity, f"Body '{name}' velocity")
        self.orientation = orientation.copy() if orientation is not None else Quaternion.identity()
        self.spin = (as_vector3(spin, f"Body '{name}' spin")
                     if spin is not None else np.zeros(3, dtype=np.float64))

    # -------------------------------------------------------------------------
    # Immutable identity and physical properties
    # -------------------------------------------------------------------------

    @property
    def name(self) -> str:
        return self._name

    @property
    def mass(self) -> float:
        return self._mass

    @property
    def radius(self) -> float:
        return self._radius

    @property
    def speed(self) -> float:
        return float(np.linalg.norm(self.velocity))

    # -------------------------------------------------------------------------
    # Integration
    # -------------------------------------------------------------------------

    def integrate(self, acceleration: np.ndarray, dt: float,
                  spin_enabled: bool = True) -> None:
        """
        Advance this body by one semi-implicit Euler step.

            v <- v + a * dt
            r <- r + v * dt

        The velocity is updated first and the new velocity moves the
        position. This is more stable than fully explicit Euler but still
        drifts in energy over long runs.

        If ``spin_enabled`` is set and the body has a non-zero spin, the
        orientation is advanced by ``spin * dt``.

        Parameters
        ----------
        acceleration : np.ndarray
            Net gravitational acceleration for this tick.
        dt : float
            Time step; the caller guarantees it is finite and non-negative.
        spin_enabled : bool, optional
            Whether to advance the orientation.
        """
        self.velocity += acceleration * dt
        self.position += self.velocity * dt

        if spin_enabled and np.any(self.spin):
            self.orientation = self.orientation.advance(self.spin, dt)

    # -------------------------------------------------------------------------
    # Export
    # -------------------------------------------------------------------------

    def state(self) -> BodyState:
        """Return a read-only pose snapshot of this body."""
        position = self.position.copy()
        velocity = self.velocity.copy()
        position.setflags(write=False)
        velocity.setflags(write=False)
        return BodyState(
            name=self._name,
            position=position,
            velocity=velocity,
            orientation=self.orientation.copy(),
        )

    def __repr__(self) -> str:
        return (f"Body(name={self._name!r}, mass={self._mass:.6g}, "
                f"radius={self._radius:.6g}, position={self.position.tolist()}, "
                f"velocity={self.velocity.tolist()})")
