"""
===============================================================================
ERIS SIMULATOR - Simulation Configuration
===============================================================================
Immutable simulation constants and YAML configuration loading.

SimulationConstants is threaded explicitly into the force accumulator and
the tick driver at construction. It is a frozen dataclass: once a session
starts, G, the scale/speed multipliers and the separation guard never
change.

Configuration file layout (YAML)::

    simulation:
      name: Demo system
      gravitational_constant: 6.6743e-11
      sim_scale: 1.0e4
      sim_speed: 10.0
      min_separation: 1.0e-6
      spin_enabled: true
      dt: 0.016
      ticks: 3600
      record_telemetry: true
    bodies:
      - {name: star, mass: 1.0e6, radius: 1.0, position: [0, 0, 0], velocity: [0, 0, 0]}
      - {name: planet, mass: 1.0e3, radius: 0.1, orbit: {parent: star, radius: 10.0}}
===============================================================================
"""

import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from eris.core.constants import (
    GRAVITATIONAL_CONSTANT,
    DEFAULT_SIM_SCALE,
    DEFAULT_SIM_SPEED,
    DEFAULT_MIN_SEPARATION,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SimulationConstants:
    """
    Process-wide, read-only simulation constants.

    Attributes
    ----------
    gravitational_constant : float
        Newtonian G before scaling (m^3 / (kg s^2) in SI scenarios).
    sim_scale : float
        Multiplier applied to G to keep magnitudes numerically tractable at
        visualization scale.
    sim_speed : float
        Multiplier applied to every elapsed-time value before integration.
    min_separation : float
        Pairs of bodies closer than this distance contribute no force.
        Strictly positive.
    spin_enabled : bool
        Whether body orientations are advanced by their spin rate each tick.
    """
    gravitational_constant: float = GRAVITATIONAL_CONSTANT
    sim_scale: float = DEFAULT_SIM_SCALE
    sim_speed: float = DEFAULT_SIM_SPEED
    min_separation: float = DEFAULT_MIN_SEPARATION
    spin_enabled: bool = True

    def __post_init__(self) -> None:
        for field_name in ('gravitational_constant', 'sim_scale', 'sim_speed'):
            value = getattr(self, field_name)
            if not math.isfinite(value) or value <= 0.0:
                raise ValueError(
                    f"{field_name} must be positive and finite (got {value!r})"
                )
        if not math.isfinite(self.min_separation) or self.min_separation <= 0.0:
            raise ValueError(
                f"min_separation must be positive and finite "
                f"(got {self.min_separation!r})"
            )

    @property
    def G(self) -> float:
        """Effective gravitational constant, G * SIM_SCALE."""
        return self.gravitational_constant * self.sim_scale

    @property
    def min_separation_sq(self) -> float:
        """Squared separation threshold used by the degenerate-pair guard."""
        return self.min_separation * self.min_separation

    def scale_dt(self, dt: float) -> float:
        """Map elapsed wall-clock time onto simulation time."""
        return dt * self.sim_speed

    @classmethod
    def from_dict(cls, section: Optional[Dict[str, Any]]) -> 'SimulationConstants':
        """
        Build constants from the ``simulation`` section of a config file.

        Unknown keys are ignored so that the same section can also carry
        run parameters (dt, ticks, name).
        """
        section = section or {}
        return cls(
            gravitational_constant=float(
                section.get('gravitational_constant', GRAVITATIONAL_CONSTANT)
            ),
            sim_scale=float(section.get('sim_scale', DEFAULT_SIM_SCALE)),
            sim_speed=float(section.get('sim_speed', DEFAULT_SIM_SPEED)),
            min_separation=float(
                section.get('min_separation', DEFAULT_MIN_SEPARATION)
            ),
            spin_enabled=bool(section.get('spin_enabled', True)),
        )


def load_config(config_path: Union[str, Path]) -> Dict[str, Any]:
    """
    Load a simulation configuration from a YAML file.

    Parameters
    ----------
    config_path : str or Path
        Path to the YAML file.

    Returns
    -------
    dict
        Parsed configuration with at least a ``bodies`` list.

    Raises
    ------
    ValueError
        If the file does not contain a mapping with a ``bodies`` list.
    """
    config_path = Path(config_path)
    logger.info("Loading configuration from: %s", config_path)
    with open(config_path, 'r') as f:
        config = yaml.safe_load(f)

    if not isinstance(config, dict):
        raise ValueError(f"Configuration {config_path} is not a mapping")
    if not isinstance(config.get('bodies'), list) or not config['bodies']:
        raise ValueError(f"Configuration {config_path} defines no bodies")

    name = (config.get('simulation') or {}).get('name', config_path.stem)
    logger.info("Scenario: %s (%d bodies)", name, len(config['bodies']))
    return config
