"""
Run Configuration for the 1D Sheath Simulation

All tunable parameters of a run live in one dataclass so that several
independent simulations (and tests) can use different settings side by side.
Defaults reproduce the standard Ar+/electron sheath run:

    n = 1e16 m^-3, T_e = 2 eV, T_i = 0.1 eV,
    400 cells of 0.1 mm, dt = 50 ps, 10,000 steps
"""

from dataclasses import dataclass, asdict, replace

from .constants import eps0 as EPS0, ARGON_MASS_AMU

SOLVERS = ("direct", "sor")


@dataclass
class SheathConfig:
    """
    Simulation parameters.

    Attributes:
        eps0: Vacuum permittivity [F/m]
        plasma_den: Initial plasma density (both species) [m^-3]
        dx: Cell spacing [m]
        dt: Timestep [s]
        electron_temp: Electron temperature [eV]
        ion_temp: Ion temperature [eV]
        ion_mass_amu: Ion mass [AMU]
        num_ions: Initial number of ion macroparticles
        num_electrons: Initial number of electron macroparticles
        n_cells: Number of cells (nodes = n_cells + 1)
        num_ts: Number of timesteps (the loop runs num_ts + 1 steps)
        diag_interval: Write diagnostics every diag_interval steps
        x0: Left wall position [m]
        seed: Seed for the particle sampler
        solver: Potential solver used every step ("direct" or "sor")
        initial_solver: Potential solver used once before the rewind
        rho_noise_floor: Zero |rho| < 1e8*e after charge assembly
        reinject: Replace absorbed particles with freshly sampled ones
        output_dir: Directory for results.dat / ke.dat
    """

    eps0: float = EPS0
    plasma_den: float = 1e16
    dx: float = 1e-4
    dt: float = 5e-11
    electron_temp: float = 2.0
    ion_temp: float = 0.1
    ion_mass_amu: float = ARGON_MASS_AMU
    num_ions: int = 30000
    num_electrons: int = 80000
    n_cells: int = 400
    num_ts: int = 10000
    diag_interval: int = 200
    x0: float = 0.0
    seed: int = 0
    solver: str = "direct"
    initial_solver: str = "sor"
    rho_noise_floor: bool = False
    reinject: bool = False
    output_dir: str = "."

    def __post_init__(self):
        self.validate()

    @property
    def n_nodes(self):
        return self.n_cells + 1

    @property
    def domain_length(self):
        return self.n_cells * self.dx

    def validate(self):
        """
        Check parameter ranges.

        Raises:
            ValueError: If any parameter is out of range
        """
        for name in ("eps0", "plasma_den", "dx", "dt", "ion_mass_amu"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)}")
        for name in ("electron_temp", "ion_temp"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative, got {getattr(self, name)}")
        for name in ("num_ions", "num_electrons"):
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be at least 1, got {getattr(self, name)}")
        if self.n_cells < 2:
            raise ValueError(f"n_cells must be at least 2, got {self.n_cells}")
        if self.num_ts < 0:
            raise ValueError(f"num_ts must be non-negative, got {self.num_ts}")
        if self.diag_interval < 1:
            raise ValueError(f"diag_interval must be at least 1, got {self.diag_interval}")
        for name in ("solver", "initial_solver"):
            if getattr(self, name) not in SOLVERS:
                raise ValueError(
                    f"Unknown {name}: {getattr(self, name)!r} (expected one of {SOLVERS})"
                )

    def with_overrides(self, **overrides):
        """Return a copy with the given fields replaced (None values ignored)."""
        overrides = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **overrides)

    def to_dict(self):
        return asdict(self)
