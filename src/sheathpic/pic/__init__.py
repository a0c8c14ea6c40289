"""
Particle-in-Cell (PIC) Module

Implements the 1D-1V electrostatic PIC cycle for the plasma sheath problem.

Components:
- mesh: uniform node grid with field and per-species moment arrays
- field_solver: Poisson solvers (Thomas algorithm, SOR) and E = -dphi/dx
- mover: linear scatter/gather, leap-frog push with absorbing walls
- diagnostics: kinetic energy and grid snapshot queries
"""

from .mesh import Grid1D, check_courant_condition
from .field_solver import (
    SingularSystemError,
    solve_fields,
    solve_potential_direct,
    solve_potential_sor,
    compute_electric_field_1d,
    compute_charge_density,
)
from .mover import (
    scatter,
    gather,
    scatter_species,
    scatter_species_vel,
    push_species,
    rewind_species,
)
from .diagnostics import (
    compute_kinetic_energy,
    compute_kinetic_energy_physical,
    grid_snapshot,
    potential_drop,
)

__all__ = [
    # Mesh
    "Grid1D",
    "check_courant_condition",
    # Field solver
    "SingularSystemError",
    "solve_fields",
    "solve_potential_direct",
    "solve_potential_sor",
    "compute_electric_field_1d",
    "compute_charge_density",
    # Mover
    "scatter",
    "gather",
    "scatter_species",
    "scatter_species_vel",
    "push_species",
    "rewind_species",
    # Diagnostics
    "compute_kinetic_energy",
    "compute_kinetic_energy_physical",
    "grid_snapshot",
    "potential_drop",
]
