"""
Sheath Simulation Driver

SheathSimulation is the explicit context of one run: it owns the grid, the
ion and electron species, the particle sampler and the clock. Several
instances can coexist, each fully determined by its SheathConfig.

Per-step order (the field that pushes step n comes from step n's pre-push
charge density):

    1. Scatter ion and electron number densities
    2. Scatter ion and electron velocity moments
    3. Assemble charge density
    4. Solve potential
    5. Compute electric field
    6. Push ions, push electrons (absorbing walls)
"""

import logging

from .config import SheathConfig
from .constants import AMU, e, m_e, ION_NAME, ELECTRON_NAME
from .particles import Species, VelocitySampler
from .pic.mesh import Grid1D
from .pic.field_solver import compute_charge_density, solve_fields
from .pic.mover import (
    scatter_species,
    scatter_species_vel,
    push_species,
    rewind_species,
)
from .pic.diagnostics import potential_drop

logger = logging.getLogger(__name__)


class SheathSimulation:
    """
    1D-1V electrostatic sheath between two grounded absorbing walls.

    Attributes:
        config: SheathConfig
        grid: Grid1D
        ions: Ion species (grid slot 0)
        electrons: Electron species (grid slot 1)
        species: [ions, electrons]
        sampler: VelocitySampler seeded from config.seed
        ts: Number of completed steps
        time: Simulation time [s]
        n_absorbed: Total particles absorbed per species name
        initialized: True once initialize() has run
    """

    def __init__(self, config=None, sampler=None):
        self.config = config if config is not None else SheathConfig()
        self.config.validate()

        cfg = self.config
        self.grid = Grid1D.from_config(cfg)
        self.sampler = sampler if sampler is not None else VelocitySampler(cfg.seed)

        self.ions = Species.from_density(
            ION_NAME,
            cfg.ion_mass_amu * AMU,
            e,
            cfg.plasma_den,
            self.grid.xl,
            cfg.num_ions,
            cfg.ion_temp,
        )
        self.electrons = Species.from_density(
            ELECTRON_NAME,
            m_e,
            -e,
            cfg.plasma_den,
            self.grid.xl,
            cfg.num_electrons,
            cfg.electron_temp,
        )
        self.species = [self.ions, self.electrons]

        self.ts = 0
        self.time = 0.0
        self.n_absorbed = {sp.name: 0 for sp in self.species}
        self.initialized = False

    # ==================== STAGES ====================

    def scatter_densities(self):
        for k, sp in enumerate(self.species):
            scatter_species(sp, self.grid, self.grid.nd[k])

    def scatter_velocities(self):
        for k, sp in enumerate(self.species):
            scatter_species_vel(sp, self.grid, self.grid.vel[k])

    def compute_rho(self):
        compute_charge_density(
            self.grid, self.species, noise_floor=self.config.rho_noise_floor
        )

    def solve_fields(self, method=None):
        """Potential and field from grid.rho; returns the solver status."""
        method = method if method is not None else self.config.solver
        return solve_fields(self.grid, method=method, eps0=self.config.eps0)

    def push(self):
        """
        Push both species and apply the wall/reinjection policy.

        Returns:
            n_lost: Particles absorbed this step (all species)
        """
        n_lost = 0
        for sp in self.species:
            n = push_species(sp, self.grid, self.config.dt)
            self.n_absorbed[sp.name] += n
            n_lost += n
            if n and self.config.reinject:
                self.sampler.load(sp, self.grid, n)
        return n_lost

    # ==================== LIFECYCLE ====================

    def load_particles(self):
        for sp in self.species:
            self.sampler.load(sp, self.grid)
            logger.info(
                "Loaded %s: mass=%g kg, charge=%g C, spwt=%g, n=%d",
                sp.name,
                sp.mass,
                sp.charge,
                sp.spwt,
                sp.n_particles,
            )

    def initialize(self):
        """
        Load particles, compute the initial field and rewind velocities
        by half a step for the leap-frog stagger.
        """
        if self.initialized:
            raise RuntimeError("Simulation already initialized")

        self.load_particles()
        self.scatter_densities()
        self.compute_rho()
        self.solve_fields(method=self.config.initial_solver)

        for sp in self.species:
            rewind_species(sp, self.grid, self.config.dt)

        self.initialized = True

    def step(self):
        """
        Advance one timestep.

        Returns:
            n_lost: Particles absorbed at the walls during this step
        """
        if not self.initialized:
            raise RuntimeError("Call initialize() before step()")

        self.scatter_densities()
        self.scatter_velocities()
        self.compute_rho()
        self.solve_fields()
        n_lost = self.push()

        self.ts += 1
        return n_lost

    def run(self, diagnostics=None, num_ts=None):
        """
        Run num_ts + 1 steps (defaults to config.num_ts).

        Args:
            diagnostics: Callable taking the simulation, invoked after the
                push on every step with ts % diag_interval == 0
                (e.g. DiagnosticsWriter)
            num_ts: Override config.num_ts

        Returns:
            self
        """
        if not self.initialized:
            self.initialize()

        num_ts = self.config.num_ts if num_ts is None else num_ts
        interval = self.config.diag_interval

        for ts in range(num_ts + 1):
            n_lost = self.step()
            logger.debug("TS %d: %d particles absorbed", ts, n_lost)

            if ts % interval == 0:
                logger.info(
                    "TS: %d \t delta_phi: %.3g \t ions: %d \t electrons: %d",
                    ts,
                    potential_drop(self.grid),
                    self.ions.n_particles,
                    self.electrons.n_particles,
                )
                if diagnostics is not None:
                    diagnostics(self)

            self.time += self.config.dt

        return self

    def __repr__(self):
        return (
            f"SheathSimulation(ts={self.ts}, time={self.time:.3e} s, "
            f"ions={self.ions.n_particles}, electrons={self.electrons.n_particles})"
        )
