#!/usr/bin/env python3
"""
===============================================================================
ERIS SIMULATOR - HEADLESS RUN ENTRY POINT
===============================================================================
Runs a scenario without a rendering client: builds the body set from a YAML
configuration, drives a fixed number of ticks, then writes telemetry and
(optionally) trajectory plots.

USAGE:
    eris-sim                                  # default scenario
    eris-sim --config my_system.yaml          # custom scenario
    eris-sim --ticks 20000 --dt 0.05 --plot   # longer run with plots

OUTPUTS:
    output/telemetry.csv   - Per-body, per-tick state
    output/plots/          - Trajectory and speed plots (--plot)
    output/simulation.log  - Run log (--log-file)

===============================================================================
"""

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from eris.simulation.scenario import load_scenario

PROJECT_ROOT = Path(__file__).resolve().parent
DEFAULT_CONFIG = PROJECT_ROOT / 'config' / 'simulation.yaml'

logger = logging.getLogger('ERIS_MAIN')


def setup_logging(log_file: Optional[str] = None, quiet: bool = False) -> None:
    """Configure root logging to stdout and, optionally, a log file."""
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        os.makedirs(os.path.dirname(os.path.abspath(log_file)), exist_ok=True)
        handlers.append(logging.FileHandler(log_file, mode='w'))

    logging.basicConfig(
        level=logging.WARNING if quiet else logging.INFO,
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        handlers=handlers,
        force=True,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Eris Simulator: headless N-body gravity run',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  eris-sim                              Default scenario
  eris-sim --ticks 5000 --plot          Longer run with plots
  eris-sim --config system.yaml         Custom scenario
        """
    )
    parser.add_argument('--config', type=str, default=str(DEFAULT_CONFIG),
                        help='Path to scenario config YAML')
    parser.add_argument('--ticks', type=int, default=None,
                        help='Number of ticks (overrides config)')
    parser.add_argument('--dt', type=float, default=None,
                        help='Elapsed time per tick before SIM_SPEED (overrides config)')
    parser.add_argument('--output', type=str, default='output',
                        help='Output directory (default: output)')
    parser.add_argument('--plot', action='store_true',
                        help='Write trajectory plots')
    parser.add_argument('--log-file', type=str, default=None,
                        help='Also write the run log to this file')
    parser.add_argument('--quiet', action='store_true',
                        help='Only log warnings and errors')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Parse arguments, run the scenario and write outputs.

    Returns
    -------
    int
        Process exit status.
    """
    args = build_parser().parse_args(argv)
    setup_logging(args.log_file, args.quiet)

    scenario = load_scenario(args.config)
    ticks = args.ticks if args.ticks is not None else scenario.ticks
    dt = args.dt if args.dt is not None else scenario.dt
    if ticks < 0:
        logger.error("Tick count must be non-negative (got %d)", ticks)
        return 2

    engine = scenario.create_engine()
    telemetry = engine.run(dt for _ in range(ticks))

    os.makedirs(args.output, exist_ok=True)
    if not telemetry.empty:
        engine.save_telemetry(os.path.join(args.output, 'telemetry.csv'))

    if args.plot:
        if telemetry.empty:
            logger.warning("Plots requested but no telemetry was recorded")
        else:
            from eris.visualization.trajectory_plots import generate_all_plots
            generate_all_plots(telemetry, os.path.join(args.output, 'plots'))

    summary = engine.summary()
    for state in engine.states():
        derived = engine.derived_quantities(state.name)
        logger.info(
            "%-10s pos=[%+.4g, %+.4g, %+.4g]  speed=%.4g  v_esc=%.4g  mu=%.4g",
            state.name, *state.position, state.speed,
            derived['escape_velocity'], derived['standard_gravitational_parameter'],
        )

    return 0 if summary['rejected_ticks'] == 0 else 1


if __name__ == '__main__':
    sys.exit(main())
