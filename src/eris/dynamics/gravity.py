"""
===============================================================================
ERIS SIMULATOR - Gravitational Force Accumulation
===============================================================================
All-pairs Newtonian gravity evaluated from a single, immutable snapshot of
the body set.

For each ordered pair (i, j), i != j:

    delta  = p_j - p_i
    dist2  = |delta|^2
    a_ij   = (delta / |delta|) * G * m_j / dist2
    a_i    = sum_j a_ij

The acceleration on body i never involves m_i: the m_i of the force
G*m_i*m_j/dist2 cancels against the division by m_i, so it is never
introduced in the first place.

Every pair is evaluated from the same SystemSnapshot, taken before any body
is mutated (a Jacobi-style update). The result is therefore independent of
the order in which bodies are stored or processed.

Pairs closer than ``SimulationConstants.min_separation`` (including exactly
coincident bodies) have no defined direction; they are skipped, reported
through a logging warning, and never inject NaN or Inf into the state.

The O(N^2) cost is irrelevant for the handful of bodies simulated here.
===============================================================================
"""

import logging
import numpy as np
from dataclasses import dataclass
from typing import Iterable, Tuple

from eris.core.config import SimulationConstants

logger = logging.getLogger(__name__)


# =============================================================================
# IMMUTABLE SNAPSHOT
# =============================================================================

@dataclass(frozen=True)
class SystemSnapshot:
    """
    Read-only view of every body at the start of a tick.

    Attributes
    ----------
    names : tuple of str
        Body names, in storage order.
    masses : np.ndarray, shape (N,)
    positions : np.ndarray, shape (N, 3)
    velocities : np.ndarray, shape (N, 3)

    All arrays are private copies flagged non-writeable, so nothing that
    holds a snapshot can observe or cause a mid-tick mutation.
    """
    names: Tuple[str, ...]
    masses: np.ndarray
    positions: np.ndarray
    velocities: np.ndarray

    @classmethod
    def capture(cls, bodies: Iterable) -> 'SystemSnapshot':
        """Copy the current state of ``bodies`` into a frozen snapshot."""
        bodies = tuple(bodies)
        masses = np.array([b.mass for b in bodies], dtype=np.float64)
        positions = np.array([b.position for b in bodies], dtype=np.float64).reshape(-1, 3)
        velocities = np.array([b.velocity for b in bodies], dtype=np.float64).reshape(-1, 3)
        for arr in (masses, positions, velocities):
            arr.setflags(write=False)
        return cls(
            names=tuple(b.name for b in bodies),
            masses=masses,
            positions=positions,
            velocities=velocities,
        )

    def __len__(self) -> int:
        return len(self.names)


# =============================================================================
# FORCE ACCUMULATOR
# =============================================================================

class ForceAccumulator:
    """
    Computes the net gravitational acceleration of every body.

    Parameters
    ----------
    constants : SimulationConstants
        Supplies the effective G and the minimum-separation guard.
    """

    def __init__(self, constants: SimulationConstants) -> None:
        self.constants = constants

    def _pair_geometry(self, positions: np.ndarray):
        """
        Pairwise offsets, squared distances and the mask of pairs that
        contribute force (off-diagonal and not degenerate).
        """
        # delta[i, j] = p_j - p_i
        delta = positions[None, :, :] - positions[:, None, :]
        dist2 = np.einsum('ijk,ijk->ij', delta, delta)

        valid = (dist2 > 0.0) & (dist2 >= self.constants.min_separation_sq)
        np.fill_diagonal(valid, False)
        return delta, dist2, valid

    def accelerations(self, snapshot: SystemSnapshot) -> np.ndarray:
        """
        Net gravitational acceleration on each body.

        Parameters
        ----------
        snapshot : SystemSnapshot
            State of all N bodies at the start of the tick.

        Returns
        -------
        np.ndarray, shape (N, 3)
            Row i is the acceleration of body i. A new, writeable array.
        """
        n = len(snapshot)
        acc = np.zeros((n, 3), dtype=np.float64)
        if n < 2:
            return acc

        delta, dist2, valid = self._pair_geometry(snapshot.positions)
        self._report_degenerate_pairs(snapshot, valid)

        dist = np.sqrt(dist2, where=valid, out=np.ones_like(dist2))
        direction = np.zeros_like(delta)
        direction[valid] = delta[valid] / dist[valid][:, None]

        # Magnitude of a_ij depends on m_j only
        magnitude = np.zeros_like(dist2)
        m_j = np.broadcast_to(snapshot.masses[None, :], dist2.shape)
        magnitude[valid] = self.constants.G * m_j[valid] / dist2[valid]

        acc = np.sum(direction * magnitude[..., None], axis=1)
        return acc

    def _report_degenerate_pairs(self, snapshot: SystemSnapshot, valid: np.ndarray) -> None:
        skipped = np.argwhere(np.triu(~valid, k=1))
        for i, j in skipped:
            logger.warning(
                "Bodies '%s' and '%s' are closer than %.3e; "
                "pairwise force skipped this tick",
                snapshot.names[i], snapshot.names[j],
                self.constants.min_separation,
            )


# =============================================================================
# PAIRWISE FORCE AND SYSTEM DIAGNOSTICS
# =============================================================================

def pairwise_force(body_i, body_j, constants: SimulationConstants) -> np.ndarray:
    """
    Gravitational force on ``body_i`` due to ``body_j``.

        F_ij = G * m_i * m_j / |p_j - p_i|^2 * (p_j - p_i) / |p_j - p_i|

    Swapping the arguments yields the same magnitude with the opposite
    direction (Newton's third law). Returns zero for a degenerate pair.
    """
    delta = np.asarray(body_j.position, dtype=np.float64) - np.asarray(body_i.position, dtype=np.float64)
    dist2 = float(np.dot(delta, delta))
    if dist2 <= 0.0 or dist2 < constants.min_separation_sq:
        return np.zeros(3, dtype=np.float64)

    direction = delta / np.sqrt(dist2)
    return direction * (constants.G * (body_i.mass * body_j.mass) / dist2)


def total_energy(snapshot: SystemSnapshot, constants: SimulationConstants) -> float:
    """
    Total mechanical energy: kinetic plus pairwise gravitational potential.

        E = sum_i 0.5 m_i |v_i|^2  -  sum_{i<j} G m_i m_j / |p_i - p_j|

    Degenerate pairs contribute no potential, matching the force model.
    """
    masses = snapshot.masses
    kinetic = 0.5 * float(np.sum(masses * np.einsum('ij,ij->i', snapshot.velocities,
                                                    snapshot.velocities)))
    if len(snapshot) < 2:
        return kinetic

    delta = snapshot.positions[None, :, :] - snapshot.positions[:, None, :]
    dist2 = np.einsum('ijk,ijk->ij', delta, delta)
    upper = np.triu(np.ones_like(dist2, dtype=bool), k=1)
    valid = upper & (dist2 > 0.0) & (dist2 >= constants.min_separation_sq)

    mass_products = masses[:, None] * masses[None, :]
    potential = -constants.G * float(np.sum(mass_products[valid] / np.sqrt(dist2[valid])))
    return kinetic + potential


def total_momentum(snapshot: SystemSnapshot) -> np.ndarray:
    """Total linear momentum sum_i m_i v_i."""
    return np.sum(snapshot.masses[:, None] * snapshot.velocities, axis=0)
