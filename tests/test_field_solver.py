"""
Tests for the Poisson solvers, field differentiation and charge assembly
"""

import logging

import pytest
import numpy as np
from scipy.linalg import solve_banded

from sheathpic.particles import Species
from sheathpic.pic.mesh import Grid1D
from sheathpic.pic.field_solver import (
    SingularSystemError,
    analytical_uniform_charge,
    compute_charge_density,
    compute_electric_field_1d,
    solve_fields,
    solve_potential_direct,
    solve_potential_sor,
)
from sheathpic.constants import AMU, e, eps0, m_e, RHO_NOISE_FLOOR


def reference_solve(rho, dx):
    """Same tridiagonal system solved with scipy's banded solver."""
    ni = len(rho)
    ab = np.zeros((3, ni))
    ab[0, 2:] = 1.0  # super-diagonal (row 0 is an identity row)
    ab[1, :] = -2.0
    ab[1, 0] = ab[1, -1] = 1.0
    ab[2, :-2] = 1.0  # sub-diagonal (row ni-1 is an identity row)
    b = -rho * dx**2 / eps0
    b[0] = b[-1] = 0.0
    return solve_banded((1, 1), ab, b)


class TestDirectSolver:
    """Thomas algorithm"""

    def test_uniform_charge_parabola(self):
        """Uniform rho gives the closed-form parabola phi = rho0 s (L-s) / 2 eps0"""
        grid = Grid1D(101, 1e-4)
        rho0 = 1e-6
        rho = np.full(grid.ni, rho0)

        solve_potential_direct(grid.phi, rho, grid.dx)

        phi_exact, _ = analytical_uniform_charge(grid.x, rho0)
        np.testing.assert_allclose(grid.phi, phi_exact, rtol=1e-8, atol=1e-14)

    def test_dirichlet_boundaries(self):
        grid = Grid1D(41, 1e-4)
        rho = np.random.default_rng(1).normal(size=grid.ni) * 1e-4

        solve_potential_direct(grid.phi, rho, grid.dx)

        assert grid.phi[0] == 0.0
        assert grid.phi[-1] == 0.0

    def test_matches_banded_reference(self):
        """Agrees with scipy.linalg.solve_banded on a random charge density"""
        grid = Grid1D(401, 1e-4)
        rho = np.random.default_rng(2).normal(size=grid.ni) * 1.6e-4

        solve_potential_direct(grid.phi, rho, grid.dx)

        phi_ref = reference_solve(rho, grid.dx)
        np.testing.assert_allclose(
            grid.phi, phi_ref, rtol=1e-7, atol=1e-8 * np.max(np.abs(phi_ref))
        )

    def test_discrete_poisson_satisfied(self):
        """Second difference of phi reproduces -rho/eps0 at interior nodes"""
        grid = Grid1D(51, 1e-4)
        rho = np.sin(np.linspace(0, 3 * np.pi, grid.ni)) * 1e-5

        solve_potential_direct(grid.phi, rho, grid.dx)

        phi = grid.phi
        lap = (phi[:-2] - 2 * phi[1:-1] + phi[2:]) / grid.dx**2
        np.testing.assert_allclose(lap, -rho[1:-1] / eps0, rtol=1e-6, atol=1e-3)

    def test_non_finite_spacing_is_fatal(self):
        """A degenerate system raises instead of returning NaN"""
        phi = np.zeros(11)
        rho = np.ones(11)

        with pytest.raises(SingularSystemError):
            solve_potential_direct(phi, rho, float("nan"))

    def test_singular_is_value_error(self):
        assert issubclass(SingularSystemError, ValueError)


class TestSORSolver:
    """Gauss-Seidel with over-relaxation"""

    def test_agrees_with_direct(self):
        """Converged SOR matches the direct solve within 1e-3 relative"""
        grid = Grid1D(21, 1e-4)
        rho = 1e-6 * (1.0 + 0.5 * np.sin(np.linspace(0, 2 * np.pi, grid.ni)))

        phi_direct = np.zeros(grid.ni)
        solve_potential_direct(phi_direct, rho, grid.dx)
        phi_sor = np.zeros(grid.ni)
        converged = solve_potential_sor(phi_sor, rho, grid.dx)

        assert converged
        np.testing.assert_allclose(phi_sor, phi_direct, rtol=1e-3, atol=1e-12)

    def test_warm_start(self):
        """Starting from the solution converges at the first check"""
        grid = Grid1D(21, 1e-4)
        rho = np.full(grid.ni, 1e-6)
        solve_potential_direct(grid.phi, rho, grid.dx)
        phi = grid.phi.copy()

        assert solve_potential_sor(phi, rho, grid.dx, max_iterations=1)
        np.testing.assert_allclose(phi, grid.phi, rtol=1e-6)

    def test_boundaries_reset(self):
        """Dirichlet values are enforced even if the initial guess differs"""
        phi = np.ones(21)
        rho = np.zeros(21)

        solve_potential_sor(phi, rho, 1e-4)

        assert phi[0] == 0.0
        assert phi[-1] == 0.0

    def test_non_convergence_is_warning(self, caplog):
        """Hitting the iteration cap logs a warning and keeps the last iterate"""
        grid = Grid1D(101, 1e-4)
        rho = np.full(grid.ni, 1e-3)
        phi = np.zeros(grid.ni)

        with caplog.at_level(logging.WARNING, logger="sheathpic.pic.field_solver"):
            converged = solve_potential_sor(phi, rho, grid.dx, max_iterations=3)

        assert not converged
        assert "failed to converge" in caplog.text
        assert np.all(np.isfinite(phi))
        assert np.any(phi != 0.0)


class TestElectricField:
    """E = -dphi/dx"""

    def test_linear_potential(self):
        """phi[i] = i*dx gives E = -1 at every node, boundaries included"""
        dx = 1e-4
        phi = np.arange(31) * dx
        ef = np.zeros(31)

        compute_electric_field_1d(phi, dx, ef)

        np.testing.assert_allclose(ef, -1.0, rtol=1e-10)

    def test_quadratic_potential_interior(self):
        """Central difference is exact for a parabola at interior nodes"""
        dx = 0.1
        x = np.arange(21) * dx
        phi = x**2
        ef = np.zeros(21)

        compute_electric_field_1d(phi, dx, ef)

        np.testing.assert_allclose(ef[1:-1], -2 * x[1:-1], rtol=1e-10)
        assert ef[0] == pytest.approx(-(phi[1] - phi[0]) / dx)
        assert ef[-1] == pytest.approx(-(phi[-1] - phi[-2]) / dx)

    def test_solve_fields_uniform_charge(self):
        """Positive charge pushes the field outward toward both walls"""
        grid = Grid1D(101, 1e-4)
        grid.rho[:] = 1e-6

        assert solve_fields(grid, method="direct")

        _, E_exact = analytical_uniform_charge(grid.x, 1e-6)
        np.testing.assert_allclose(grid.ef[1:-1], E_exact[1:-1], rtol=1e-6, atol=1e-3)
        assert grid.ef[0] < 0 < grid.ef[-1]

    def test_solve_fields_methods_agree(self):
        grid_a = Grid1D(21, 1e-4)
        grid_b = Grid1D(21, 1e-4)
        grid_a.rho[:] = grid_b.rho[:] = 2e-6

        solve_fields(grid_a, method="direct")
        solve_fields(grid_b, method="sor")

        np.testing.assert_allclose(grid_b.phi, grid_a.phi, rtol=1e-3, atol=1e-12)
        np.testing.assert_allclose(grid_b.ef, grid_a.ef, rtol=1e-3, atol=1e-3)

    def test_unknown_method(self):
        with pytest.raises(ValueError, match="Unknown field solver"):
            solve_fields(Grid1D(11, 1e-4), method="multigrid")


class TestChargeDensity:
    """rho = q_i n_i + q_e n_e"""

    def setup_method(self):
        self.grid = Grid1D(5, 1e-4)
        self.ions = Species("ions", 40 * AMU, e, 1.0, 1, 0.1)
        self.electrons = Species("electrons", m_e, -e, 1.0, 1, 2.0)

    def test_assembly(self):
        self.grid.nd[0][:] = [1e16, 1e16, 1e16, 1e16, 1e16]
        self.grid.nd[1][:] = [0.0, 5e15, 1e16, 5e15, 0.0]

        compute_charge_density(self.grid, [self.ions, self.electrons])

        expected = e * self.grid.nd[0] - e * self.grid.nd[1]
        np.testing.assert_allclose(self.grid.rho, expected)

    def test_noise_floor_off_by_default(self):
        self.grid.nd[0][:] = 1e7
        compute_charge_density(self.grid, [self.ions, self.electrons])
        np.testing.assert_allclose(self.grid.rho, 1e7 * e)

    def test_noise_floor_clamps_small_values(self):
        """|rho| < 1e8 e is zeroed when enabled; larger values survive"""
        self.grid.nd[0][:] = [1e7, 1e9, 1e7, 1e9, 0.0]

        compute_charge_density(self.grid, [self.ions, self.electrons], noise_floor=True)

        np.testing.assert_allclose(self.grid.rho, [0.0, 1e9 * e, 0.0, 1e9 * e, 0.0])
        assert RHO_NOISE_FLOOR == pytest.approx(1e8 * e)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
