"""
Tests for the 1D PIC grid
"""

import pytest
import numpy as np
from sheathpic.pic.mesh import Grid1D, check_courant_condition
from sheathpic.config import SheathConfig


class TestGrid1D:
    """Test grid geometry and arrays."""

    def test_geometry(self):
        """ni = cells + 1, xl = (ni-1)*dx, xmax = x0 + xl."""
        grid = Grid1D.from_cells(400, 1e-4, x0=0.0)

        assert grid.ni == 401
        assert grid.xl == 400 * 1e-4
        assert grid.xmax == grid.x0 + grid.xl
        np.testing.assert_allclose(grid.x, np.arange(401) * 1e-4)

    def test_arrays_share_indexing(self):
        """All seven node arrays have length ni."""
        grid = Grid1D(21, 1e-3)

        for arr in (grid.phi, grid.ef, grid.rho, grid.ndi, grid.nde, grid.veli, grid.vele):
            assert arr.shape == (21,)
            assert np.all(arr == 0.0)

    def test_species_views_write_through(self):
        """ndi/nde/veli/vele are views of the nd/vel slots."""
        grid = Grid1D(11, 1e-3)

        grid.ndi[3] = 5.0
        grid.vele[4] = -2.0

        assert grid.nd[Grid1D.ION, 3] == 5.0
        assert grid.vel[Grid1D.ELECTRON, 4] == -2.0

    def test_from_config(self):
        config = SheathConfig(n_cells=50, dx=2e-4, x0=1e-3)
        grid = Grid1D.from_config(config)

        assert grid.ni == 51
        assert grid.dx == 2e-4
        assert grid.x0 == 1e-3

    def test_logical_coordinate(self):
        """x_to_l maps node positions to integer indices."""
        grid = Grid1D(11, 0.5, x0=1.0)

        np.testing.assert_allclose(grid.x_to_l(grid.x), np.arange(11))
        assert grid.x_to_l(1.25) == pytest.approx(0.5)

    def test_contains_is_half_open(self):
        """Domain is [x0, xmax): left wall inside, right wall outside."""
        grid = Grid1D(11, 1.0)

        assert grid.contains(0.0)
        assert grid.contains(9.999)
        assert not grid.contains(10.0)
        assert not grid.contains(-1e-12)

    def test_reset(self):
        grid = Grid1D(5, 1.0)
        grid.phi[:] = 1.0
        grid.nd[:] = 2.0

        grid.reset()

        assert np.all(grid.phi == 0.0)
        assert np.all(grid.nd == 0.0)

    @pytest.mark.parametrize("ni, dx", [(2, 1e-4), (11, 0.0), (11, -1e-4)])
    def test_degenerate_grid_rejected(self, ni, dx):
        with pytest.raises(ValueError):
            Grid1D(ni, dx)

    def test_debye_resolution(self):
        """Reference grid (0.1 mm) resolves lambda_D at 1e16 m^-3, 2 eV."""
        grid = Grid1D.from_cells(400, 1e-4)

        is_resolved, lambda_D, ratio = grid.check_debye_resolution(1e16, 2.0)

        assert is_resolved
        assert lambda_D == pytest.approx(1.05e-4, rel=0.01)
        assert ratio < 1.0


def test_courant_condition():
    """omega_pe * dt < 0.2 holds at 10 ps but not at 50 ps (1e16 m^-3)."""
    is_stable, omega_pe, omega_dt = check_courant_condition(1e-11, 1e16)

    assert is_stable
    assert omega_pe == pytest.approx(5.64e9, rel=0.01)
    assert omega_dt == pytest.approx(omega_pe * 1e-11)

    is_stable, _, omega_dt = check_courant_condition(5e-11, 1e16)
    assert not is_stable
    assert omega_dt == pytest.approx(0.282, rel=0.01)
