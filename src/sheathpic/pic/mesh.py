"""
1D PIC Grid for Electrostatic Sheath Simulations

Implements a uniform node-centered 1D grid:
- Potential (phi), electric field (ef) and charge density (rho) at nodes
- Per-species number density (nd) and bulk velocity (vel) at nodes

Design Philosophy:
- All node arrays share the same indexing: node i sits at x0 + i*dx
- Arrays are allocated once and overwritten in place every step
- Numba-compatible data structures (pure numpy arrays)
"""

import numpy as np

from ..constants import e, eps0


class Grid1D:
    """
    Uniform 1D node grid.

    Grid layout (ni = 5 example):

    Node:     0     1     2     3     4
              |-----|-----|-----|-----|
             x0                      xmax

    Boundary nodes 0 and ni-1 sit on the walls and own half a cell each.

    Attributes:
        ni: Number of nodes (cells + 1)
        x0: Left wall position [m]
        dx: Node spacing [m]
        xl: Domain length (ni-1)*dx [m]
        xmax: Right wall position x0 + xl [m]
        x: Node positions [ni] [m]
        phi: Electric potential [ni] [V]
        ef: Electric field [ni] [V/m]
        rho: Charge density [ni] [C/m^3]
        nd: Number density per species [n_species, ni] [m^-3]
        vel: Density-weighted velocity per species [n_species, ni] [m^-2 s^-1]
    """

    ION = 0
    ELECTRON = 1

    def __init__(self, ni, dx, x0=0.0, n_species=2):
        """
        Initialize grid.

        Args:
            ni: Number of nodes
            dx: Node spacing [m]
            x0: Left wall position [m] (default: 0)
            n_species: Number of species slots for nd/vel (default: 2)
        """
        if ni < 3:
            raise ValueError(f"Grid needs at least 3 nodes, got {ni}")
        if not dx > 0:
            raise ValueError(f"Node spacing must be positive, got {dx}")
        if n_species < 1:
            raise ValueError(f"n_species must be at least 1, got {n_species}")

        self.ni = int(ni)
        self.dx = float(dx)
        self.x0 = float(x0)
        self.xl = (self.ni - 1) * self.dx
        self.xmax = self.x0 + self.xl
        self.n_species = n_species

        self.x = self.x0 + np.arange(self.ni, dtype=np.float64) * self.dx

        self.phi = np.zeros(self.ni, dtype=np.float64)
        self.ef = np.zeros(self.ni, dtype=np.float64)
        self.rho = np.zeros(self.ni, dtype=np.float64)
        self.nd = np.zeros((n_species, self.ni), dtype=np.float64)
        self.vel = np.zeros((n_species, self.ni), dtype=np.float64)

    @classmethod
    def from_cells(cls, n_cells, dx, x0=0.0, n_species=2):
        """Create a grid with n_cells cells (n_cells + 1 nodes)."""
        return cls(n_cells + 1, dx, x0=x0, n_species=n_species)

    @classmethod
    def from_config(cls, config):
        return cls(config.n_nodes, config.dx, x0=config.x0)

    # Two-species views
    @property
    def ndi(self):
        return self.nd[self.ION]

    @property
    def nde(self):
        return self.nd[self.ELECTRON]

    @property
    def veli(self):
        return self.vel[self.ION]

    @property
    def vele(self):
        return self.vel[self.ELECTRON]

    def x_to_l(self, pos):
        """Physical position [m] to logical coordinate (fractional node index)."""
        return (np.asarray(pos) - self.x0) / self.dx

    def contains(self, pos):
        """True where x0 <= pos < xmax."""
        pos = np.asarray(pos)
        return (pos >= self.x0) & (pos < self.xmax)

    def reset(self):
        """Zero all node arrays."""
        for arr in (self.phi, self.ef, self.rho, self.nd, self.vel):
            arr[...] = 0.0

    def check_debye_resolution(self, n_e, T_e):
        """
        Check if the grid resolves the Debye length: dx <= lambda_D.

        Args:
            n_e: Electron density [m^-3]
            T_e: Electron temperature [eV]

        Returns:
            is_resolved: True if dx <= lambda_D
            lambda_D: Debye length [m]
            ratio: dx / lambda_D

        Reference:
            Birdsall & Langdon (2004), Section 4.2
        """
        lambda_D = np.sqrt(eps0 * T_e * e / (n_e * e**2))
        ratio = self.dx / lambda_D
        return ratio <= 1.0, lambda_D, ratio

    def __repr__(self):
        return (
            f"Grid1D(ni={self.ni}, "
            f"dx={self.dx*1e3:.3f} mm, "
            f"domain=[{self.x0*1e3:.1f}, {self.xmax*1e3:.1f}] mm)"
        )


def check_courant_condition(dt, n_e):
    """
    Check plasma-frequency resolution: omega_pe * dt < 0.2

    Args:
        dt: Timestep [s]
        n_e: Electron density [m^-3]

    Returns:
        is_stable: True if omega_pe * dt < 0.2
        omega_pe: Plasma frequency [rad/s]
        omega_dt: omega_pe * dt (dimensionless)

    Reference:
        Birdsall & Langdon (2004), Section 4.3
    """
    from ..constants import plasma_frequency

    omega_pe = plasma_frequency(n_e)
    omega_dt = omega_pe * dt
    return omega_dt < 0.2, omega_pe, omega_dt
