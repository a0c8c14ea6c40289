"""
1D Electrostatic Field Solver for PIC

Solves Poisson's equation: d²φ/dx² = -ρ/ε₀ on the grid nodes with grounded
walls, φ[0] = φ[ni-1] = 0, and differentiates φ to get E = -dφ/dx.

Two interchangeable potential solvers with the same contract
(charge density in, node potential out):
- direct: Thomas algorithm (O(N) tridiagonal elimination), used every step
- sor: Gauss-Seidel with successive over-relaxation, for cross-validation

Reference:
    Birdsall & Langdon (2004), Chapter 4
"""

import logging

import numpy as np
import numba

from ..constants import eps0 as EPS0, RHO_NOISE_FLOOR

logger = logging.getLogger(__name__)

SOR_OMEGA = 1.4
SOR_TOLERANCE = 1e-4
SOR_MAX_ITERATIONS = 200000
SOR_CHECK_INTERVAL = 25

PIVOT_TOLERANCE = 1e-12


class SingularSystemError(ValueError):
    """The tridiagonal Poisson system has a vanishing pivot (degenerate grid)."""


# ==================== KERNELS ====================


@numba.njit
def sor_poisson_1d(phi, rho, dx, eps0, omega, tolerance, max_iterations, check_interval):
    """
    Gauss-Seidel/SOR iterations for the node Poisson equation.

    Update for interior node i:
        g = 0.5 * (phi[i-1] + phi[i+1] + dx² * rho[i] / eps0)
        phi[i] += omega * (g - phi[i])

    Every check_interval iterations the residual

        R[i] = -rho[i]/eps0 - (phi[i-1] - 2 phi[i] + phi[i+1]) / dx²

    is reduced to L2 = sqrt(sum R²) / ni over interior nodes.

    Args:
        phi: Potential [ni] [V] (initial guess, modified in-place)
        rho: Charge density [ni] [C/m^3]
        dx: Node spacing [m]
        eps0: Permittivity [F/m]
        omega: Over-relaxation factor
        tolerance: Convergence threshold on L2
        max_iterations: Iteration cap
        check_interval: Iterations between residual checks

    Returns:
        converged: True if L2 < tolerance
        L2: Last computed residual norm
        iterations: Iterations performed
    """
    ni = phi.shape[0]
    dx2 = dx * dx
    phi[0] = 0.0
    phi[ni - 1] = 0.0

    L2 = np.inf
    for it in range(max_iterations):
        for i in range(1, ni - 1):
            g = 0.5 * (phi[i - 1] + phi[i + 1] + dx2 * rho[i] / eps0)
            phi[i] = phi[i] + omega * (g - phi[i])

        if it % check_interval == 0:
            total = 0.0
            for i in range(1, ni - 1):
                R = -rho[i] / eps0 - (phi[i - 1] - 2.0 * phi[i] + phi[i + 1]) / dx2
                total += R * R
            L2 = np.sqrt(total) / ni
            if L2 < tolerance:
                return True, L2, it + 1

    return False, L2, max_iterations


@numba.njit
def thomas_poisson_1d(phi_out, rho, dx, eps0, pivot_tolerance):
    """
    Direct tridiagonal solve of the node Poisson equation.

    Interior rows:  phi[i-1] - 2 phi[i] + phi[i+1] = -rho[i] dx² / eps0
    Boundary rows:  phi[0] = 0, phi[ni-1] = 0   (identity rows)

    Forward elimination followed by back substitution, written into phi_out.

    Returns:
        ok: False if a pivot fell below pivot_tolerance (phi_out is then invalid)

    Reference:
        https://en.wikipedia.org/wiki/Tridiagonal_matrix_algorithm
    """
    ni = phi_out.shape[0]
    dx2 = dx * dx

    a = np.ones(ni)
    b = np.full(ni, -2.0)
    c = np.ones(ni)

    # Dirichlet rows
    a[0] = 0.0
    b[0] = 1.0
    c[0] = 0.0
    a[ni - 1] = 0.0
    b[ni - 1] = 1.0
    c[ni - 1] = 0.0

    x = phi_out
    for i in range(1, ni - 1):
        x[i] = -rho[i] * dx2 / eps0
    x[0] = 0.0
    x[ni - 1] = 0.0

    c[0] /= b[0]
    x[0] /= b[0]

    for i in range(1, ni):
        denom = b[i] - c[i - 1] * a[i]
        if abs(denom) < pivot_tolerance:
            return False
        c[i] /= denom
        x[i] = (x[i] - x[i - 1] * a[i]) / denom

    for i in range(ni - 2, -1, -1):
        x[i] = x[i] - c[i] * x[i + 1]

    return True


@numba.njit
def compute_electric_field_1d(phi, dx, E_out):
    """
    Compute electric field from potential: E = -∇φ

    Uses 2nd order central difference for interior points:
        E[i] = -(phi[i+1] - phi[i-1]) / (2*dx)

    For boundaries, uses forward/backward difference.

    Args:
        phi: Electric potential at nodes [ni] [V]
        dx: Node spacing [m]
        E_out: Output electric field at nodes [ni] [V/m] (modified in-place)
    """
    ni = len(phi)

    for i in range(1, ni - 1):
        E_out[i] = -(phi[i + 1] - phi[i - 1]) / (2.0 * dx)

    E_out[0] = -(phi[1] - phi[0]) / dx
    E_out[ni - 1] = -(phi[ni - 1] - phi[ni - 2]) / dx


# ==================== SOLVER ENTRY POINTS ====================


def solve_potential_sor(
    phi,
    rho,
    dx,
    eps0=EPS0,
    omega=SOR_OMEGA,
    tolerance=SOR_TOLERANCE,
    max_iterations=SOR_MAX_ITERATIONS,
    check_interval=SOR_CHECK_INTERVAL,
):
    """
    Iterative potential solve (warm-started from the current phi).

    Non-convergence is not fatal: a warning is logged and the last
    iterate stays in phi.

    Returns:
        converged: True if the residual dropped below tolerance
    """
    converged, L2, iterations = sor_poisson_1d(
        phi, rho, dx, eps0, omega, tolerance, max_iterations, check_interval
    )
    if converged:
        logger.debug("SOR converged in %d iterations, L2=%g", iterations, L2)
    else:
        logger.warning(
            "Gauss-Seidel solver failed to converge in %d iterations, L2=%g",
            iterations,
            L2,
        )
    return converged


def solve_potential_direct(phi, rho, dx, eps0=EPS0):
    """
    Direct (Thomas) potential solve into phi.

    Raises:
        SingularSystemError: On a vanishing pivot or non-finite result
    """
    if not thomas_poisson_1d(phi, rho, dx, eps0, PIVOT_TOLERANCE):
        raise SingularSystemError(
            f"Tridiagonal Poisson system is singular (ni={len(phi)}, dx={dx})"
        )
    if not np.all(np.isfinite(phi)):
        raise SingularSystemError(
            f"Direct solve produced non-finite potential (ni={len(phi)}, dx={dx})"
        )
    return True


SOLVERS = {
    "direct": solve_potential_direct,
    "sor": solve_potential_sor,
}


def compute_charge_density(grid, species, noise_floor=False):
    """
    Assemble charge density from the scattered number densities.

        rho[i] = sum_k charge_k * nd[k][i]

    Args:
        grid: Grid1D instance (grid.rho is overwritten)
        species: Species in grid slot order (ions first, then electrons)
        noise_floor: Zero |rho| below 1e8 * e [C/m^3] (default: off)
    """
    grid.rho[:] = 0.0
    for k, sp in enumerate(species):
        grid.rho += sp.charge * grid.nd[k]

    if noise_floor:
        grid.rho[np.abs(grid.rho) < RHO_NOISE_FLOOR] = 0.0


def solve_fields(grid, method="direct", eps0=EPS0):
    """
    Solve Poisson equation and compute electric field for the grid.

    Updates grid.phi and grid.ef in-place.

    Args:
        grid: Grid1D instance
        method: "direct" or "sor"
        eps0: Permittivity [F/m]

    Returns:
        converged: Solver status (always True for "direct")

    Example:
        >>> grid = Grid1D(101, 1e-4)
        >>> grid.rho[:] = 1e-9
        >>> solve_fields(grid, method="direct")
        True
    """
    try:
        solver = SOLVERS[method]
    except KeyError:
        raise ValueError(f"Unknown field solver: {method!r}") from None

    converged = solver(grid.phi, grid.rho, grid.dx, eps0=eps0)
    compute_electric_field_1d(grid.phi, grid.dx, grid.ef)
    return converged


# ==================== ANALYTICAL SOLUTIONS FOR VALIDATION ====================


def analytical_uniform_charge(x, rho0, eps0=EPS0):
    """
    Analytical solution for uniform charge between grounded walls.

    Given: rho(x) = rho0 on [x[0], x[-1]], phi = 0 at both ends

        phi(s) = (rho0 / (2*eps0)) * s * (L - s),   s = x - x[0]
        E(s)   = (rho0 / eps0) * (s - L/2)

    Args:
        x: Node positions [m]
        rho0: Uniform charge density [C/m^3]
        eps0: Permittivity [F/m]

    Returns:
        phi: Analytical potential [V]
        E: Analytical electric field [V/m]
    """
    s = np.asarray(x) - x[0]
    L = s[-1]
    phi = (rho0 / (2.0 * eps0)) * s * (L - s)
    E = (rho0 / eps0) * (s - L / 2.0)
    return phi, E
