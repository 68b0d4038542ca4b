"""
===============================================================================
ERIS SIMULATOR - Scenario Builder
===============================================================================
Turns a configuration mapping (usually loaded from YAML) into the constants
and the fixed body set for a session.

Each body entry gives ``name``, ``mass`` and ``radius`` and then either an
explicit state::

    position: [x, y, z]
    velocity: [vx, vy, vz]

or a circular orbit around a body defined earlier in the list::

    orbit:
      parent: star
      radius: 10.0
      phase_deg: 0.0        # optional, in-plane angle
      normal: [0, 0, 1]     # optional, orbit normal

Optional per-body keys: ``spin`` (rad/s, body frame) and ``orientation``
as ``{axis: [x, y, z], angle_deg: a}``.
===============================================================================
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Union

import numpy as np

from eris.core.config import SimulationConstants, load_config
from eris.core.constants import DEG2RAD, Z_AXIS
from eris.core.quaternion import Quaternion
from eris.dynamics.astrodynamics import circular_orbit_state
from eris.dynamics.body import Body
from eris.simulation.sim_engine import SimulationEngine

logger = logging.getLogger(__name__)


@dataclass
class Scenario:
    """
    A fully built session: constants, bodies and run parameters.

    Attributes
    ----------
    name : str
    constants : SimulationConstants
    bodies : list of Body
    dt : float
        Default elapsed time per tick for headless runs.
    ticks : int
        Default number of ticks for headless runs.
    record_telemetry : bool
    """
    name: str
    constants: SimulationConstants
    bodies: List[Body]
    dt: float = 1.0 / 60.0
    ticks: int = 600
    record_telemetry: bool = True

    def create_engine(self) -> SimulationEngine:
        return SimulationEngine(self.bodies, self.constants,
                                record_telemetry=self.record_telemetry)


def _orientation_from_config(entry: Mapping[str, Any]) -> Quaternion:
    orientation = entry.get('orientation')
    if orientation is None:
        return Quaternion.identity()
    return Quaternion.from_axis_angle(
        np.asarray(orientation['axis'], dtype=np.float64),
        float(orientation.get('angle_deg', 0.0)) * DEG2RAD,
    )


def build_body(entry: Mapping[str, Any], built: Mapping[str, Body],
               constants: SimulationConstants) -> Body:
    """
    Build a single Body from its configuration entry.

    Parameters
    ----------
    entry : mapping
        One element of the ``bodies`` list.
    built : mapping of str to Body
        Bodies already built, available as orbit parents.
    constants : SimulationConstants

    Raises
    ------
    KeyError
        If a required key is missing.
    ValueError
        If an orbit parent is unknown or the body is invalid.
    """
    name = entry['name']
    mass = entry['mass']
    radius = entry['radius']

    orbit = entry.get('orbit')
    if orbit is not None:
        parent_name = orbit['parent']
        if parent_name not in built:
            raise ValueError(
                f"Body '{name}' orbits unknown parent '{parent_name}'. "
                "Parents must be listed before their satellites."
            )
        position, velocity = circular_orbit_state(
            built[parent_name],
            float(orbit['radius']),
            constants,
            phase=float(orbit.get('phase_deg', 0.0)) * DEG2RAD,
            normal=np.asarray(orbit.get('normal', Z_AXIS), dtype=np.float64),
        )
        logger.debug("Body '%s' seeded on circular orbit r=%.4g around '%s'",
                     name, float(orbit['radius']), parent_name)
    else:
        position = entry.get('position', (0.0, 0.0, 0.0))
        velocity = entry.get('velocity', (0.0, 0.0, 0.0))

    return Body(
        name=name,
        mass=mass,
        radius=radius,
        position=position,
        velocity=velocity,
        orientation=_orientation_from_config(entry),
        spin=entry.get('spin'),
    )


def build_scenario(config: Mapping[str, Any]) -> Scenario:
    """
    Build constants and bodies from a parsed configuration mapping.

    Raises
    ------
    ValueError
        On duplicate names, unknown orbit parents or invalid bodies.
    """
    section = config.get('simulation') or {}
    constants = SimulationConstants.from_dict(section)

    built: Dict[str, Body] = {}
    for entry in config['bodies']:
        body = build_body(entry, built, constants)
        if body.name in built:
            raise ValueError(f"Duplicate body name: {body.name}")
        built[body.name] = body

    scenario = Scenario(
        name=str(section.get('name', 'unnamed')),
        constants=constants,
        bodies=list(built.values()),
        dt=float(section.get('dt', 1.0 / 60.0)),
        ticks=int(section.get('ticks', 600)),
        record_telemetry=bool(section.get('record_telemetry', True)),
    )
    logger.info("Scenario '%s' built: %s", scenario.name,
                ", ".join(b.name for b in scenario.bodies))
    return scenario


def load_scenario(config_path: Union[str, Path]) -> Scenario:
    """Load a YAML configuration file and build its scenario."""
    return build_scenario(load_config(config_path))
