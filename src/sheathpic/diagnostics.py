"""
Diagnostic output for sheath simulations.

- results.dat: node table (position, densities, rho, velocities, phi, E),
  rewritten on every diagnostic step
- ke.dat: one appended line per diagnostic step (time, ion KE, electron KE)
- phase-space dumps (pos, vel per particle)
- snapshot plots
"""

import logging
import os

import numpy as np

from .pic.diagnostics import (
    SNAPSHOT_COLUMNS,
    compute_kinetic_energy,
    grid_snapshot,
    phase_space,
)

logger = logging.getLogger(__name__)

RESULTS_FILE = "results.dat"
KE_FILE = "ke.dat"
FMT = "%g"
DELIMITER = " \t "


class DiagnosticsWriter:
    """
    Writes results.dat and ke.dat into an output directory.

    ke.dat is truncated when the writer is created and appended to
    afterwards; results.dat is overwritten on every write_snapshot call.

    Attributes:
        output_dir: Directory holding the files
        results_path: Path of results.dat
        ke_path: Path of ke.dat
        n_snapshots: Number of snapshots written
    """

    def __init__(self, output_dir=".", results_file=RESULTS_FILE, ke_file=KE_FILE):
        self.output_dir = output_dir
        os.makedirs(output_dir, exist_ok=True)
        self.results_path = os.path.join(output_dir, results_file)
        self.ke_path = os.path.join(output_dir, ke_file)
        self.n_snapshots = 0

        open(self.ke_path, "w").close()

    def write_snapshot(self, grid):
        """Overwrite results.dat with the current node table."""
        with open(self.results_path, "w") as fh:
            np.savetxt(fh, grid_snapshot(grid), fmt=FMT, delimiter=DELIMITER)
        self.n_snapshots += 1

    def write_kinetic_energy(self, time, ions, electrons):
        """Append time, ion KE [eV] and electron KE [eV] to ke.dat."""
        row = (time, compute_kinetic_energy(ions), compute_kinetic_energy(electrons))
        with open(self.ke_path, "a") as fh:
            fh.write(DELIMITER.join(FMT % value for value in row) + "\n")

    def __call__(self, simulation):
        """Diagnostic hook for SheathSimulation.run."""
        self.write_kinetic_energy(simulation.time, simulation.ions, simulation.electrons)
        self.write_snapshot(simulation.grid)

    def __repr__(self):
        return f"DiagnosticsWriter(output_dir={self.output_dir!r}, n_snapshots={self.n_snapshots})"


def write_phase_space(species, path):
    """
    Write pos/vel of every live particle to path.

    Args:
        species: Species instance
        path: Output file path
    """
    with open(path, "w") as fh:
        np.savetxt(fh, phase_space(species), fmt=FMT, delimiter=DELIMITER)
    logger.info("Wrote %d %s particles to %s", species.n_particles, species.name, path)


def load_results(path):
    """
    Read a results.dat file.

    Returns:
        data: dict mapping SNAPSHOT_COLUMNS names to node arrays
    """
    table = np.atleast_2d(np.loadtxt(path))
    return {name: table[:, j] for j, name in enumerate(SNAPSHOT_COLUMNS)}


def load_kinetic_energy(path):
    """
    Read a ke.dat file.

    Returns:
        time, ke_ions, ke_electrons: Arrays, one entry per diagnostic step
    """
    table = np.atleast_2d(np.loadtxt(path))
    return table[:, 0], table[:, 1], table[:, 2]


def plot_snapshot(results, output):
    """
    Plot densities, potential and field from a results table.

    Args:
        results: Path to results.dat or a dict from load_results
        output: Image path to save
    """
    import matplotlib

    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    if isinstance(results, (str, os.PathLike)):
        results = load_results(results)

    x_mm = results["position"] * 1e3

    fig, (ax1, ax2, ax3) = plt.subplots(3, 1, figsize=(10, 10), sharex=True)

    ax1.plot(x_mm, results["ion_density"], "r-", label="Ions")
    ax1.plot(x_mm, results["electron_density"], "b-", label="Electrons")
    ax1.set_ylabel("Density [m$^{-3}$]")
    ax1.set_title("Plasma Sheath Structure")
    ax1.legend()
    ax1.grid(True, alpha=0.3)

    ax2.plot(x_mm, results["potential"], "k-")
    ax2.set_ylabel("Potential [V]")
    ax2.grid(True, alpha=0.3)

    ax3.plot(x_mm, results["field"], "g-")
    ax3.set_xlabel("Position [mm]")
    ax3.set_ylabel("Electric Field [V/m]")
    ax3.grid(True, alpha=0.3)

    plt.tight_layout()
    plt.savefig(output, dpi=150)
    plt.close(fig)
    logger.info("Saved snapshot plot: %s", output)
