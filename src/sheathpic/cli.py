"""
Command line entry point: run a sheath simulation and write diagnostics.

    sheathpic --num-ts 2000 --output-dir run1 --plot
"""

import argparse
import logging
import os

from .config import SheathConfig, SOLVERS
from .diagnostics import DiagnosticsWriter, write_phase_space, plot_snapshot
from .simulation import SheathSimulation

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s: %(message)s"


def parse_args(argv=None):
    """Parse command line arguments; unset options keep SheathConfig defaults."""
    defaults = SheathConfig()
    p = argparse.ArgumentParser(
        description="1D-1V electrostatic PIC plasma sheath (grounded absorbing walls)"
    )

    # Grid & time
    p.add_argument("--n-cells", type=int, help=f"Number of cells (default: {defaults.n_cells})")
    p.add_argument("--dx", type=float, help=f"Cell spacing [m] (default: {defaults.dx})")
    p.add_argument("--dt", type=float, help=f"Timestep [s] (default: {defaults.dt})")
    p.add_argument("--num-ts", type=int, help=f"Number of timesteps (default: {defaults.num_ts})")
    p.add_argument(
        "--diag-interval",
        type=int,
        help=f"Steps between diagnostic writes (default: {defaults.diag_interval})",
    )

    # Plasma
    p.add_argument("--plasma-den", type=float, help=f"Plasma density [m^-3] (default: {defaults.plasma_den})")
    p.add_argument("--electron-temp", type=float, help=f"Electron temperature [eV] (default: {defaults.electron_temp})")
    p.add_argument("--ion-temp", type=float, help=f"Ion temperature [eV] (default: {defaults.ion_temp})")
    p.add_argument("--num-ions", type=int, help=f"Ion macroparticles (default: {defaults.num_ions})")
    p.add_argument("--num-electrons", type=int, help=f"Electron macroparticles (default: {defaults.num_electrons})")
    p.add_argument("--seed", type=int, help=f"Sampler seed (default: {defaults.seed})")

    # Numerics & policies
    p.add_argument("--solver", choices=SOLVERS, help=f"Per-step potential solver (default: {defaults.solver})")
    p.add_argument("--rho-noise-floor", action="store_true", default=None, help="Zero |rho| below 1e8 e/m^3")
    p.add_argument("--reinject", action="store_true", default=None, help="Replace absorbed particles")

    # Output
    p.add_argument("--output-dir", help=f"Directory for results.dat/ke.dat (default: {defaults.output_dir})")
    p.add_argument("--phase-space", action="store_true", help="Dump final ion/electron phase space")
    p.add_argument("--plot", action="store_true", help="Save a plot of the final snapshot")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    return p.parse_args(argv)


def config_from_args(args):
    """Build a SheathConfig from parsed arguments."""
    return SheathConfig().with_overrides(
        n_cells=args.n_cells,
        dx=args.dx,
        dt=args.dt,
        num_ts=args.num_ts,
        diag_interval=args.diag_interval,
        plasma_den=args.plasma_den,
        electron_temp=args.electron_temp,
        ion_temp=args.ion_temp,
        num_ions=args.num_ions,
        num_electrons=args.num_electrons,
        seed=args.seed,
        solver=args.solver,
        rho_noise_floor=args.rho_noise_floor,
        reinject=args.reinject,
        output_dir=args.output_dir,
    )


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO, format=LOG_FORMAT
    )

    config = config_from_args(args)
    sim = SheathSimulation(config)
    writer = DiagnosticsWriter(config.output_dir)

    logger.info("Grid: %r", sim.grid)
    sim.run(diagnostics=writer)

    if args.phase_space:
        for sp, fname in ((sim.ions, "phase_ions.dat"), (sim.electrons, "phase_electrons.dat")):
            write_phase_space(sp, os.path.join(config.output_dir, fname))

    if args.plot:
        plot_snapshot(writer.results_path, os.path.join(config.output_dir, "sheath.png"))

    logger.info(
        "Completed %d steps (t = %.3e s); absorbed: %s",
        sim.ts,
        sim.time,
        sim.n_absorbed,
    )
    return 0
