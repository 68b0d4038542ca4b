"""
===============================================================================
ERIS SIMULATOR - Trajectory Plots
===============================================================================
Post-run plots built from the telemetry DataFrame recorded by the
SimulationEngine:

  1. Orbital-plane (X-Y) trajectories of every body
  2. 3D trajectories
  3. Speed of every body versus simulation time

These are offline analysis figures written to disk, independent of the
real-time rendering client.
===============================================================================
"""

import logging
import os
from typing import Dict, Optional

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
import pandas as pd

logger = logging.getLogger(__name__)

plt.rcParams.update({
    'font.size': 11,
    'axes.labelsize': 12,
    'axes.titlesize': 14,
    'legend.fontsize': 10,
    'figure.dpi': 100,
    'lines.linewidth': 1.5,
    'axes.grid': True,
    'grid.alpha': 0.3,
})

BODY_COLORS = ['#f1c40f', '#3498db', '#95a5a6', '#e67e22',
               '#27ae60', '#9b59b6', '#e74c3c', '#1abc9c']


def _body_tracks(telemetry: pd.DataFrame) -> Dict[str, pd.DataFrame]:
    if telemetry.empty:
        raise ValueError("Telemetry is empty; nothing to plot")
    return {name: group for name, group in telemetry.groupby('body', sort=False)}


def plot_orbital_plane(telemetry: pd.DataFrame, output_path: str,
                       title: Optional[str] = None) -> str:
    """
    Plot X-Y trajectories of every body, with its final position marked.

    Returns
    -------
    str
        The path written.
    """
    tracks = _body_tracks(telemetry)

    fig, ax = plt.subplots(figsize=(9, 9))
    for i, (name, track) in enumerate(tracks.items()):
        color = BODY_COLORS[i % len(BODY_COLORS)]
        ax.plot(track['pos_x'], track['pos_y'], color=color, label=name, alpha=0.8)
        ax.plot(track['pos_x'].iloc[-1], track['pos_y'].iloc[-1], 'o', color=color)

    ax.set_xlabel('X')
    ax.set_ylabel('Y')
    ax.set_aspect('equal', adjustable='datalim')
    ax.set_title(title or 'Body Trajectories (orbital plane)')
    ax.legend(loc='upper right')

    fig.tight_layout()
    fig.savefig(output_path, bbox_inches='tight', facecolor='white')
    plt.close(fig)
    logger.info("Saved: %s", output_path)
    return output_path


def plot_trajectories_3d(telemetry: pd.DataFrame, output_path: str) -> str:
    """Plot 3D trajectories of every body."""
    tracks = _body_tracks(telemetry)

    fig = plt.figure(figsize=(10, 8))
    ax = fig.add_subplot(111, projection='3d')
    for i, (name, track) in enumerate(tracks.items()):
        ax.plot(track['pos_x'], track['pos_y'], track['pos_z'],
                color=BODY_COLORS[i % len(BODY_COLORS)], label=name)

    ax.set_xlabel('X')
    ax.set_ylabel('Y')
    ax.set_zlabel('Z')
    ax.set_title('Body Trajectories (3D)')
    ax.legend(loc='upper left')

    fig.tight_layout()
    fig.savefig(output_path, bbox_inches='tight', facecolor='white')
    plt.close(fig)
    logger.info("Saved: %s", output_path)
    return output_path


def plot_speed_history(telemetry: pd.DataFrame, output_path: str) -> str:
    """Plot the speed of every body against simulation time."""
    tracks = _body_tracks(telemetry)

    fig, ax = plt.subplots(figsize=(12, 5))
    for i, (name, track) in enumerate(tracks.items()):
        ax.plot(track.index, track['speed'],
                color=BODY_COLORS[i % len(BODY_COLORS)], label=name)

    ax.set_xlabel('Simulation time')
    ax.set_ylabel('Speed')
    ax.set_title('Body Speed History')
    ax.legend(loc='upper right')

    fig.tight_layout()
    fig.savefig(output_path, bbox_inches='tight', facecolor='white')
    plt.close(fig)
    logger.info("Saved: %s", output_path)
    return output_path


def generate_all_plots(telemetry: pd.DataFrame, output_dir: str) -> Dict[str, str]:
    """
    Write every standard plot into ``output_dir``.

    Returns
    -------
    dict
        Plot name -> file path.
    """
    os.makedirs(output_dir, exist_ok=True)
    return {
        'orbital_plane': plot_orbital_plane(
            telemetry, os.path.join(output_dir, 'orbital_plane.png')),
        'trajectories_3d': plot_trajectories_3d(
            telemetry, os.path.join(output_dir, 'trajectories_3d.png')),
        'speed_history': plot_speed_history(
            telemetry, os.path.join(output_dir, 'speed_history.png')),
    }
