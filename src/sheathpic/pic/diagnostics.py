"""
Diagnostic Queries for the Sheath PIC

Pure functions over Grid1D / Species state. Nothing here writes files or
mutates the simulation; sheathpic.diagnostics handles output.
"""

import numpy as np
from numba import njit

from ..constants import e

SNAPSHOT_COLUMNS = (
    "position",
    "ion_density",
    "electron_density",
    "charge_density",
    "ion_velocity",
    "electron_velocity",
    "potential",
    "field",
)


@njit
def sum_squared_velocity(vel, n_particles):
    total = 0.0
    for k in range(n_particles):
        total += vel[k] * vel[k]
    return total


def compute_kinetic_energy(species):
    """
    Species kinetic energy as written to ke.dat [eV].

        KE = (sum_p v_p² + 0.5 * spwt * mass) / e

    Note:
        The 0.5*spwt*mass factor is added once per call, not multiplied
        into the velocity sum, so the result is not the physical kinetic
        energy of the macroparticles. It is kept unchanged so that ke.dat
        stays comparable with earlier runs; see
        compute_kinetic_energy_physical for the physical quantity.
    """
    ke = sum_squared_velocity(species.vel, species.n_particles)
    ke += 0.5 * (species.spwt * species.mass)
    return ke / e


def compute_kinetic_energy_physical(species):
    """
    Physical kinetic energy of all real particles a species represents [eV].

        KE = 0.5 * mass * spwt * sum_p v_p² / e
    """
    v_sq = sum_squared_velocity(species.vel, species.n_particles)
    return 0.5 * species.mass * species.spwt * v_sq / e


def mean_energy_eV(species):
    """Mean kinetic energy per particle [eV] (0 for an empty species)."""
    if species.n_particles == 0:
        return 0.0
    v_sq = sum_squared_velocity(species.vel, species.n_particles)
    return 0.5 * species.mass * v_sq / species.n_particles / e


def potential_drop(grid):
    """max(phi) - phi[0]: plasma potential relative to the wall [V]."""
    return float(np.max(grid.phi) - grid.phi[0])


def grid_snapshot(grid, ion_slot=0, electron_slot=1):
    """
    Node table written to results.dat.

    Returns:
        table: Array [ni, 8] with columns SNAPSHOT_COLUMNS
    """
    return np.column_stack(
        (
            grid.x,
            grid.nd[ion_slot],
            grid.nd[electron_slot],
            grid.rho,
            grid.vel[ion_slot],
            grid.vel[electron_slot],
            grid.phi,
            grid.ef,
        )
    )


def phase_space(species):
    """
    Particle positions and velocities.

    Returns:
        table: Array [n_particles, 2] (pos [m], vel [m/s])
    """
    return np.column_stack((species.positions(), species.velocities()))
