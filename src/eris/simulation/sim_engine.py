"""
===============================================================================
ERIS SIMULATOR - Simulation Engine (tick driver)
===============================================================================
Orchestrates one simulation tick for a fixed set of bodies. The external
render/event loop calls ``step(dt)`` once per animation frame with the
elapsed wall-clock time.

Each tick runs two phases, always in this order:

    1. ACCUMULATE -- capture an immutable SystemSnapshot of every body and
                     compute the full (N, 3) acceleration array from it.
    2. APPLY      -- call Body.integrate once per body with its
                     precomputed acceleration.

No body is written while any other body's acceleration is still being
computed, so tick results do not depend on body storage order.

A tick whose ``dt`` is negative, NaN or infinite is rejected: nothing is
mutated, the rejection is logged and counted, and the next valid tick
proceeds normally.

Optionally every applied tick is recorded as telemetry (one record per
body), exposed as a pandas DataFrame for post-run analysis.
===============================================================================
"""

import logging
import math
import time
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from eris.core.config import SimulationConstants
from eris.dynamics.astrodynamics import escape_velocity, standard_gravitational_parameter
from eris.dynamics.body import Body, BodyState
from eris.dynamics.gravity import ForceAccumulator, SystemSnapshot, total_energy, total_momentum

logger = logging.getLogger(__name__)


class SimulationEngine:
    """
    Fixed-body-set gravitational simulation driven one tick at a time.

    Parameters
    ----------
    bodies : sequence of Body
        The complete body set. Fixed for the lifetime of the engine.
    constants : SimulationConstants, optional
        Physical and time-scaling constants. Defaults to SI values.
    record_telemetry : bool, optional
        If True, append one telemetry record per body on every applied tick.

    Attributes
    ----------
    current_time : float
        Simulation time elapsed (after SIM_SPEED scaling).
    tick_count : int
        Number of applied ticks.
    rejected_ticks : int
        Number of ticks rejected for an invalid dt.

    Raises
    ------
    ValueError
        If the body set is empty or contains duplicate names.
    """

    def __init__(
        self,
        bodies: Sequence[Body],
        constants: Optional[SimulationConstants] = None,
        record_telemetry: bool = False,
    ) -> None:
        self._bodies: Tuple[Body, ...] = tuple(bodies)
        if not self._bodies:
            raise ValueError("A simulation needs at least one body")

        names = [b.name for b in self._bodies]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ValueError(f"Duplicate body names: {duplicates}")

        self.constants = constants if constants is not None else SimulationConstants()
        self.accumulator = ForceAccumulator(self.constants)
        self.record_telemetry = record_telemetry

        self._index: Dict[str, int] = {name: i for i, name in enumerate(names)}

        self.current_time: float = 0.0
        self.tick_count: int = 0
        self.rejected_ticks: int = 0
        self.telemetry: List[Dict[str, Any]] = []

        initial = SystemSnapshot.capture(self._bodies)
        self._initial_energy = total_energy(initial, self.constants)
        self._initial_momentum = total_momentum(initial)

        logger.info(
            "SimulationEngine created.  %d bodies, G=%.4e, sim_speed=%.3f",
            len(self._bodies), self.constants.G, self.constants.sim_speed,
        )

    # =========================================================================
    # BODY ACCESS
    # =========================================================================

    @property
    def bodies(self) -> Tuple[Body, ...]:
        """The fixed body set, in storage order."""
        return self._bodies

    def body(self, name: str) -> Body:
        """
        Look up a body by name.

        Raises
        ------
        KeyError
            If no body has that name.
        """
        return self._bodies[self.body_id(name)]

    def body_id(self, name: str) -> int:
        """Fixed integer index of a body, in storage order."""
        if name not in self._index:
            raise KeyError(f"Unknown body: {name}. Valid: {list(self._index)}")
        return self._index[name]

    def states(self) -> Tuple[BodyState, ...]:
        """Read-only pose of every body, for the rendering and UI layers."""
        return tuple(b.state() for b in self._bodies)

    def derived_quantities(self, name: str) -> Dict[str, float]:
        """
        On-demand display values for one body.

        Returns
        -------
        dict
            escape_velocity, standard_gravitational_parameter, speed
        """
        body = self.body(name)
        return {
            'escape_velocity': escape_velocity(body, self.constants),
            'standard_gravitational_parameter': standard_gravitational_parameter(
                body, self.constants
            ),
            'speed': body.speed,
        }

    # =========================================================================
    # CORE SIMULATION STEP
    # =========================================================================

    def step(self, dt: float) -> bool:
        """
        Execute one simulation tick.

        Parameters
        ----------
        dt : float
            Elapsed wall-clock time since the previous tick. Scaled by
            SIM_SPEED before integration.

        Returns
        -------
        bool
            True if the tick was applied, False if it was rejected.
        """
        try:
            dt = float(dt)
        except (TypeError, ValueError):
            return self._reject(dt)
        if not math.isfinite(dt) or dt < 0.0:
            return self._reject(dt)

        sim_dt = self.constants.scale_dt(dt)

        # ------------------------------------------------------------------
        # 1. ACCUMULATE: read-only pass over a frozen snapshot
        # ------------------------------------------------------------------
        snapshot = SystemSnapshot.capture(self._bodies)
        accelerations = self.accumulator.accelerations(snapshot)

        # ------------------------------------------------------------------
        # 2. APPLY: write-only pass, one body at a time
        # ------------------------------------------------------------------
        for body, acceleration in zip(self._bodies, accelerations):
            body.integrate(acceleration, sim_dt, self.constants.spin_enabled)

        self.current_time += sim_dt
        self.tick_count += 1

        if self.record_telemetry:
            self._log_telemetry()
        return True

    def _reject(self, dt: Any) -> bool:
        self.rejected_ticks += 1
        logger.error("Rejected tick with invalid dt=%r; body state unchanged", dt)
        return False

    # =========================================================================
    # RUN LOOP
    # =========================================================================

    def run(self, dts: Iterable[float]) -> pd.DataFrame:
        """
        Apply a sequence of elapsed-time values, one tick each.

        Parameters
        ----------
        dts : iterable of float
            Elapsed wall-clock time per tick.

        Returns
        -------
        pd.DataFrame
            Telemetry recorded so far (empty if recording is disabled).
        """
        wall_start = time.time()
        applied = 0

        logger.info("Simulation run started at t=%.3f", self.current_time)

        for dt in dts:
            if not self.step(dt):
                continue
            applied += 1

            if applied % 10000 == 0:
                logger.info("Tick %d  t=%.3f  wall=%.1f s",
                            self.tick_count, self.current_time, time.time() - wall_start)

        logger.info(
            "Simulation complete.  %d ticks in %.2f s wall time.  Sim time: %.3f",
            applied, time.time() - wall_start, self.current_time,
        )
        return self.get_telemetry()

    # =========================================================================
    # TELEMETRY
    # =========================================================================

    def _log_telemetry(self) -> None:
        for body in self._bodies:
            pos = body.position
            vel = body.velocity
            att = body.orientation
            self.telemetry.append({
                'time': self.current_time,
                'tick': self.tick_count,
                'body': body.name,
                'pos_x': pos[0],
                'pos_y': pos[1],
                'pos_z': pos[2],
                'vel_x': vel[0],
                'vel_y': vel[1],
                'vel_z': vel[2],
                'speed': body.speed,
                'quat_w': att.w,
                'quat_x': att.x,
                'quat_y': att.y,
                'quat_z': att.z,
            })

    def get_telemetry(self) -> pd.DataFrame:
        """
        Telemetry records as a DataFrame indexed by time.

        Columns: tick, body, pos_x/y/z, vel_x/y/z, speed, quat_w/x/y/z.
        """
        if not self.telemetry:
            logger.warning("No telemetry recorded.")
            return pd.DataFrame()

        df = pd.DataFrame(self.telemetry)
        df.set_index('time', inplace=True)
        return df

    def save_telemetry(self, filepath: str) -> None:
        """Write the telemetry DataFrame to CSV."""
        df = self.get_telemetry()
        df.to_csv(filepath)
        logger.info("Telemetry saved to %s  (%d records)", filepath, len(df))

    # =========================================================================
    # RUN SUMMARY
    # =========================================================================

    def summary(self) -> Dict[str, Any]:
        """
        Conservation diagnostics and counters for the run so far.

        Returns
        -------
        dict
            ticks, rejected_ticks, sim_time, energy, energy_drift
            (relative to the initial energy), momentum_drift (norm of the
            change in total momentum).
        """
        snapshot = SystemSnapshot.capture(self._bodies)
        energy = total_energy(snapshot, self.constants)
        if self._initial_energy != 0.0:
            energy_drift = abs((energy - self._initial_energy) / self._initial_energy)
        else:
            energy_drift = abs(energy)
        momentum_drift = float(np.linalg.norm(total_momentum(snapshot) - self._initial_momentum))

        summary = {
            'ticks': self.tick_count,
            'rejected_ticks': self.rejected_ticks,
            'sim_time': self.current_time,
            'energy': energy,
            'energy_drift': energy_drift,
            'momentum_drift': momentum_drift,
        }

        logger.info("Run Summary:")
        for key, value in summary.items():
            if isinstance(value, float):
                logger.info("  %-16s: %.6g", key, value)
            else:
                logger.info("  %-16s: %s", key, value)

        return summary

    def __repr__(self) -> str:
        return (
            f"SimulationEngine(bodies={len(self._bodies)}, "
            f"t={self.current_time:.3f}, ticks={self.tick_count})"
        )
