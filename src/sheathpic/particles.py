"""
Particle Data Structures for the 1D-1V Sheath PIC

Each species keeps its macroparticles in a contiguous Structure-of-Arrays
store (position, velocity, identity) so that the Numba kernels in
sheathpic.pic.mover can iterate over plain arrays. Removal is done by stable
compaction, which keeps insertion order and never reuses an identity.
"""

import numpy as np

from .constants import thermal_velocity


class Particle:
    """
    A single macroparticle.

    Attributes:
        pos: Position [m]
        vel: Velocity [m/s]
        id: Identity, unique within the owning species (-1 until added)
    """

    __slots__ = ("pos", "vel", "id")

    def __init__(self, pos, vel, id=-1):
        self.pos = float(pos)
        self.vel = float(vel)
        self.id = int(id)

    def __eq__(self, other):
        if not isinstance(other, Particle):
            return NotImplemented
        return (self.pos, self.vel, self.id) == (other.pos, other.vel, other.id)

    def __repr__(self):
        return f"Particle(pos={self.pos:.6e}, vel={self.vel:.6e}, id={self.id})"


def compute_specific_weight(plasma_den, domain_length, n_particles):
    """
    Number of real particles represented by one macroparticle.

    Args:
        plasma_den: Plasma density [m^-3]
        domain_length: Domain length [m]
        n_particles: Initial number of macroparticles

    Returns:
        spwt: Specific weight
    """
    if n_particles < 1:
        raise ValueError(f"n_particles must be at least 1, got {n_particles}")
    return (plasma_den * domain_length) / n_particles


class Species:
    """
    Ordered particle collection with species-wide physical parameters.

    Attributes:
        name: Species label
        mass: Particle mass [kg]
        charge: Particle charge [C] (signed)
        spwt: Specific weight (real particles per macroparticle)
        num: Target initial number of macroparticles
        temp: Temperature [eV]
        pos: Position store [capacity] [m] (first n_particles entries live)
        vel: Velocity store [capacity] [m/s]
        ids: Identity store [capacity]
        n_particles: Number of live particles
    """

    def __init__(self, name, mass, charge, spwt, num, temp, capacity=None):
        if mass <= 0:
            raise ValueError(f"mass must be positive, got {mass}")
        if spwt <= 0:
            raise ValueError(f"spwt must be positive, got {spwt}")

        self.name = name
        self.mass = mass
        self.charge = charge
        self.spwt = spwt
        self.num = num
        self.temp = temp

        capacity = max(int(capacity if capacity is not None else num), 1)
        self.pos = np.zeros(capacity, dtype=np.float64)
        self.vel = np.zeros(capacity, dtype=np.float64)
        self.ids = np.zeros(capacity, dtype=np.int64)
        self.n_particles = 0
        self._next_id = 0

    @classmethod
    def from_density(cls, name, mass, charge, plasma_den, domain_length, num, temp):
        """Create a species whose weight reproduces plasma_den over the domain."""
        spwt = compute_specific_weight(plasma_den, domain_length, num)
        return cls(name, mass, charge, spwt, num, temp)

    @property
    def capacity(self):
        return len(self.pos)

    @property
    def q_over_m(self):
        return self.charge / self.mass

    @property
    def next_id(self):
        return self._next_id

    def _ensure_capacity(self, n_extra):
        needed = self.n_particles + n_extra
        if needed <= self.capacity:
            return
        new_capacity = max(needed, 2 * self.capacity)
        for attr in ("pos", "vel", "ids"):
            old = getattr(self, attr)
            new = np.zeros(new_capacity, dtype=old.dtype)
            new[:self.n_particles] = old[:self.n_particles]
            setattr(self, attr, new)

    def add(self, particle):
        """
        Append one particle and assign its identity.

        Args:
            particle: Particle instance (its id is overwritten)

        Returns:
            id: Identity assigned to the particle
        """
        self._ensure_capacity(1)
        k = self.n_particles
        particle.id = self._next_id
        self.pos[k] = particle.pos
        self.vel[k] = particle.vel
        self.ids[k] = particle.id
        self._next_id += 1
        self.n_particles += 1
        return particle.id

    def add_particles(self, x, v):
        """
        Append many particles at once.

        Args:
            x: Positions, shape (n,) [m]
            v: Velocities, shape (n,) [m/s]

        Returns:
            ids: Identities assigned to the new particles
        """
        x = np.atleast_1d(np.asarray(x, dtype=np.float64))
        v = np.atleast_1d(np.asarray(v, dtype=np.float64))
        if x.shape != v.shape:
            raise ValueError(f"Position and velocity shapes differ: {x.shape} vs {v.shape}")

        n_add = x.shape[0]
        self._ensure_capacity(n_add)

        start, end = self.n_particles, self.n_particles + n_add
        ids = np.arange(self._next_id, self._next_id + n_add, dtype=np.int64)
        self.pos[start:end] = x
        self.vel[start:end] = v
        self.ids[start:end] = ids
        self._next_id += n_add
        self.n_particles = end
        return ids

    def compact(self, keep):
        """
        Remove particles where keep is False, preserving order of the rest.

        Args:
            keep: Boolean mask over the live particles

        Returns:
            n_removed: Number of particles removed
        """
        keep = np.asarray(keep, dtype=np.bool_)
        n = self.n_particles
        if keep.shape != (n,):
            raise ValueError(f"keep mask must have shape ({n},), got {keep.shape}")

        n_keep = int(np.sum(keep))
        self.pos[:n_keep] = self.pos[:n][keep]
        self.vel[:n_keep] = self.vel[:n][keep]
        self.ids[:n_keep] = self.ids[:n][keep]
        self.n_particles = n_keep
        return n - n_keep

    def clear(self):
        """Remove all particles (identities are not reused)."""
        self.n_particles = 0

    def positions(self):
        """View of live positions [m]."""
        return self.pos[:self.n_particles]

    def velocities(self):
        """View of live velocities [m/s]."""
        return self.vel[:self.n_particles]

    def identities(self):
        return self.ids[:self.n_particles]

    def __getitem__(self, k):
        if k < 0:
            k += self.n_particles
        if not 0 <= k < self.n_particles:
            raise IndexError(f"particle index {k} out of range")
        return Particle(self.pos[k], self.vel[k], self.ids[k])

    def __iter__(self):
        for k in range(self.n_particles):
            yield Particle(self.pos[k], self.vel[k], self.ids[k])

    def __len__(self):
        return self.n_particles

    def __repr__(self):
        return (f"Species(name={self.name!r}, n_particles={self.n_particles}, "
                f"spwt={self.spwt:.3e}, q/m={self.q_over_m:.3e})")


# ==================== SAMPLING ====================


class VelocitySampler:
    """
    Seeded source of initial particle positions and velocities.

    Velocities follow the Birdsall sum-of-three-uniforms approximation
    to a Maxwellian:

        v = v_th * sqrt(2) * (r1 + r2 + r3 - 1.5),   v_th = sqrt(2 k T / m)

    The formula is kept as is so that runs stay reproducible; it is not
    replaced by a true Gaussian sampler.
    """

    def __init__(self, seed=None):
        self.seed = seed
        self.rng = np.random.default_rng(seed)

    def sample_velocity(self, T_eV, mass, n_samples=1):
        """
        Sample velocities [m/s] at temperature T_eV [eV].

        Returns:
            v: Array of shape (n_samples,)
        """
        v_th = thermal_velocity(T_eV, mass)
        r = self.rng.random((n_samples, 3))
        return v_th * np.sqrt(2) * (r.sum(axis=1) - 1.5)

    def sample_positions(self, x0, length, n_samples=1):
        """Uniform positions on [x0, x0 + length)."""
        return x0 + self.rng.random(n_samples) * length

    def load(self, species, grid, n_particles=None):
        """
        Load a species uniformly over the grid at its temperature.

        Args:
            species: Species to fill
            grid: Grid1D defining [x0, xmax)
            n_particles: Number to load (default: species.num)

        Returns:
            ids: Identities of the loaded particles
        """
        if n_particles is None:
            n_particles = species.num
        x = self.sample_positions(grid.x0, grid.xl, n_particles)
        v = self.sample_velocity(species.temp, species.mass, n_particles)
        return species.add_particles(x, v)
