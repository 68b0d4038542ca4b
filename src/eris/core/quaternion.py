"""
===============================================================================
ERIS SIMULATOR - Orientation Quaternion
===============================================================================

Unit quaternion used to carry the orientation of every simulated body.
Orientation is purely cosmetic in this simulator: it is advanced each tick
by the body's spin rate and handed to the rendering layer, but it never
feeds back into the gravitational dynamics.

Convention
----------
Scalar-first:

    q = [q_w, q_x, q_y, q_z] = q_w + q_x*i + q_y*j + q_z*k

A vector is rotated by the sandwich product

    v' = q * v * q_conjugate

and a unit quaternion always has w >= 0 (q and -q are the same rotation).

References
----------
    [1] Kuipers, "Quaternions and Rotation Sequences", Princeton, 1999.
    [2] Markley & Crassidis, "Fundamentals of Spacecraft Attitude
        Determination and Control", Springer, 2014.

===============================================================================
"""

import numpy as np


class Quaternion:
    """
    Unit quaternion for 3D rotation representation.

    A unit quaternion q = [w, x, y, z] parameterizes a rotation by angle
    theta about unit axis n as:

        q = [cos(theta/2), sin(theta/2) * n]

    Instances are treated as values: every operation returns a new
    Quaternion and the components are never mutated after construction.

    Examples
    --------
    >>> q = Quaternion.from_axis_angle(np.array([0.0, 0.0, 1.0]), np.pi / 2)
    >>> q.rotate_vector(np.array([1.0, 0.0, 0.0]))  # -> [0, 1, 0]
    """

    _NORM_TOLERANCE = 1e-10
    _COMPARISON_TOLERANCE = 1e-9

    def __init__(self, w: float, x: float, y: float, z: float,
                 normalize: bool = True) -> None:
        """
        Parameters
        ----------
        w, x, y, z : float
            Scalar part followed by the vector part.
        normalize : bool, optional
            If True (default), scale to unit magnitude and enforce w >= 0.
            Internal callers pass False when the input is already unit-length.
        """
        self._q = np.array([w, x, y, z], dtype=np.float64)

        if normalize:
            self._normalize_in_place()

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def w(self) -> float:
        """Scalar (real) part of the quaternion."""
        return float(self._q[0])

    @property
    def x(self) -> float:
        return float(self._q[1])

    @property
    def y(self) -> float:
        return float(self._q[2])

    @property
    def z(self) -> float:
        return float(self._q[3])

    @property
    def vector(self) -> np.ndarray:
        """Vector (imaginary) part [x, y, z] as a new array."""
        return self._q[1:4].copy()

    @property
    def components(self) -> np.ndarray:
        """Full quaternion [w, x, y, z] as a new array."""
        return self._q.copy()

    @property
    def norm(self) -> float:
        return float(np.linalg.norm(self._q))

    # =========================================================================
    # INTERNAL HELPERS
    # =========================================================================

    def _normalize_in_place(self) -> None:
        """
        Normalize to unit magnitude and enforce the scalar-positive form.

        Raises
        ------
        ValueError
            If the quaternion has near-zero norm.
        """
        n = np.linalg.norm(self._q)

        if not np.isfinite(n) or n < self._NORM_TOLERANCE:
            raise ValueError(
                f"Cannot normalize degenerate quaternion (norm = {n:.2e})."
            )

        self._q /= n

        if self._q[0] < 0.0:
            self._q = -self._q

    # =========================================================================
    # FACTORY METHODS
    # =========================================================================

    @staticmethod
    def identity() -> 'Quaternion':
        """The identity quaternion [1, 0, 0, 0] (no rotation)."""
        return Quaternion(1.0, 0.0, 0.0, 0.0, normalize=False)

    @staticmethod
    def from_axis_angle(axis: np.ndarray, angle: float) -> 'Quaternion':
        """
        Create a quaternion from an axis-angle representation.

            q = [cos(theta/2), sin(theta/2) * n]

        Parameters
        ----------
        axis : np.ndarray
            3-element rotation axis. Normalized internally.
        angle : float
            Rotation angle in radians.

        Raises
        ------
        ValueError
            If axis has near-zero magnitude.
        """
        axis = np.asarray(axis, dtype=np.float64)
        axis_norm = np.linalg.norm(axis)

        if axis_norm < 1e-12:
            raise ValueError(
                "Rotation axis has near-zero magnitude. "
                "Cannot define a rotation about a zero vector."
            )

        n = axis / axis_norm
        half_angle = angle / 2.0
        sin_half = np.sin(half_angle)

        return Quaternion(np.cos(half_angle),
                          sin_half * n[0], sin_half * n[1], sin_half * n[2])

    @staticmethod
    def from_rotation_vector(rot_vec: np.ndarray) -> 'Quaternion':
        """
        Create a quaternion from a rotation vector theta * n.

        A zero (or near-zero) vector yields the identity.
        """
        rot_vec = np.asarray(rot_vec, dtype=np.float64)
        angle = np.linalg.norm(rot_vec)

        if angle < 1e-12:
            return Quaternion.identity()

        return Quaternion.from_axis_angle(rot_vec / angle, angle)

    # =========================================================================
    # ARITHMETIC AND ROTATION
    # =========================================================================

    def conjugate(self) -> 'Quaternion':
        """Conjugate [w, -x, -y, -z]; the inverse rotation for unit q."""
        return Quaternion(self.w, -self.x, -self.y, -self.z, normalize=False)

    def multiply(self, other: 'Quaternion') -> 'Quaternion':
        """
        Hamilton product self * other.

        The product rotates a vector first by ``other`` and then by ``self``.
        The result is renormalized, so repeated composition does not drift
        away from unit norm.
        """
        a1, b1, c1, d1 = self.w, self.x, self.y, self.z
        a2, b2, c2, d2 = other.w, other.x, other.y, other.z

        w = a1 * a2 - b1 * b2 - c1 * c2 - d1 * d2
        x = a1 * b2 + b1 * a2 + c1 * d2 - d1 * c2
        y = a1 * c2 - b1 * d2 + c1 * a2 + d1 * b2
        z = a1 * d2 + b1 * c2 - c1 * b2 + d1 * a2

        return Quaternion(w, x, y, z)

    def rotate_vector(self, v: np.ndarray) -> np.ndarray:
        """
        Rotate a 3D vector by this quaternion.

        Uses the Rodrigues form of the sandwich product:

            t  = 2 * (u x v)
            v' = v + w*t + u x t

        where u is the vector part of q.
        """
        v = np.asarray(v, dtype=np.float64)
        u = self.vector

        t = 2.0 * np.cross(u, v)
        return v + self.w * t + np.cross(u, t)

    def advance(self, omega: np.ndarray, dt: float) -> 'Quaternion':
        """
        Advance the orientation by a constant body-frame angular rate.

        Composes the exact rotation for the step instead of integrating
        the kinematic equation, so a constant spin never accumulates
        normalization error:

            q(t + dt) = q(t) * q_rot(omega * dt)

        Parameters
        ----------
        omega : np.ndarray
            Angular rate (rad/s) in the body frame.
        dt : float
            Time step (s).
        """
        step = Quaternion.from_rotation_vector(np.asarray(omega, dtype=np.float64) * dt)
        return self.multiply(step)

    # =========================================================================
    # CONVERSIONS
    # =========================================================================

    def to_dcm(self) -> np.ndarray:
        """
        Convert to the 3x3 rotation matrix R with R @ v == rotate_vector(v).

            R = | 1-2(y^2+z^2)    2(xy-wz)      2(xz+wy)   |
                | 2(xy+wz)      1-2(x^2+z^2)    2(yz-wx)   |
                | 2(xz-wy)      2(yz+wx)      1-2(x^2+y^2) |

        The rendering layer builds its model matrix from this.
        """
        w, x, y, z = self.w, self.x, self.y, self.z

        xx = x * x
        yy = y * y
        zz = z * z
        xy = x * y
        xz = x * z
        yz = y * z
        wx = w * x
        wy = w * y
        wz = w * z

        return np.array([
            [1.0 - 2.0 * (yy + zz),  2.0 * (xy - wz),        2.0 * (xz + wy)],
            [2.0 * (xy + wz),         1.0 - 2.0 * (xx + zz),  2.0 * (yz - wx)],
            [2.0 * (xz - wy),         2.0 * (yz + wx),         1.0 - 2.0 * (xx + yy)]
        ], dtype=np.float64)

    # =========================================================================
    # OPERATOR OVERLOADS
    # =========================================================================

    def __mul__(self, other: 'Quaternion') -> 'Quaternion':
        if isinstance(other, Quaternion):
            return self.multiply(other)
        return NotImplemented

    def __eq__(self, other: object) -> bool:
        """
        Two quaternions are equal if they represent the same rotation,
        accounting for the q/-q ambiguity and floating-point tolerance.
        """
        if not isinstance(other, Quaternion):
            return NotImplemented

        diff_pos = np.linalg.norm(self._q - other._q)
        diff_neg = np.linalg.norm(self._q + other._q)
        return min(diff_pos, diff_neg) < self._COMPARISON_TOLERANCE

    def __repr__(self) -> str:
        return (f"Quaternion(w={self.w:+.8f}, x={self.x:+.8f}, "
                f"y={self.y:+.8f}, z={self.z:+.8f})")

    # =========================================================================
    # UTILITY METHODS
    # =========================================================================

    def copy(self) -> 'Quaternion':
        return Quaternion(self.w, self.x, self.y, self.z, normalize=False)
