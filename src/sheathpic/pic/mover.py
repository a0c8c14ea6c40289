"""
PIC Particle Mover with Linear (Cloud-in-Cell) Weighting

Implements:
- Linear weighting for density/velocity deposition (particles → grid)
- Linear field interpolation with the same weights (grid → particles)
- Leap-frog particle push with absorbing walls
- Half-step velocity rewind for leap-frog initialization

Using identical weights for scatter and gather keeps the particle-mesh
coupling free of self-forces (momentum conserving).

Reference:
    Birdsall & Langdon (2004), "Plasma Physics via Computer Simulation"
    Chapter 4: The Electrostatic Program
"""

import numpy as np
import numba


# ==================== COORDINATE MAPPING ====================


@numba.njit
def x_to_logical(pos, x0, dx):
    """Physical position [m] to logical coordinate (fractional node index)."""
    return (pos - x0) / dx


@numba.njit
def locate(lc, ni):
    """
    Split a logical coordinate into left node index and fractional offset.

    A particle sitting just below xmax can round onto the last node; the
    index is clamped to ni-2 so that i+1 stays a valid node.

    Returns:
        i: Left node index
        di: Fractional distance from node i (0 <= di <= 1)
    """
    i = int(lc)
    if i > ni - 2:
        i = ni - 2
    return i, lc - i


# ==================== SCATTER / GATHER ====================


@numba.njit
def scatter(lc, value, field):
    """
    Deposit value at logical coordinate lc onto the two adjacent nodes.

    field[i] += value*(1-di), field[i+1] += value*di
    """
    i, di = locate(lc, field.shape[0])
    field[i] += value * (1.0 - di)
    field[i + 1] += value * di


@numba.njit
def gather(lc, field):
    """Interpolate field at logical coordinate lc with the scatter weights."""
    i, di = locate(lc, field.shape[0])
    return field[i] * (1.0 - di) + field[i + 1] * di


@numba.njit
def _to_node_density(field, dx):
    """Divide by cell volume; boundary nodes own half a cell, so double them."""
    ni = field.shape[0]
    for i in range(ni):
        field[i] /= dx
    field[0] *= 2.0
    field[ni - 1] *= 2.0


@numba.njit
def deposit_density_1d(pos, n_particles, x0, dx, spwt, field_out):
    """
    Number density of one species at the nodes.

    Args:
        pos: Particle positions [>= n_particles] [m]
        n_particles: Number of live particles
        x0: Left wall position [m]
        dx: Node spacing [m]
        spwt: Specific weight
        field_out: Output density [ni] [m^-3] (overwritten)
    """
    field_out[:] = 0.0
    for k in range(n_particles):
        scatter((pos[k] - x0) / dx, spwt, field_out)
    _to_node_density(field_out, dx)


@numba.njit
def deposit_velocity_1d(pos, vel, n_particles, x0, dx, spwt, field_out):
    """
    Density-weighted velocity (particle flux) of one species at the nodes.

    Same as deposit_density_1d with each particle carrying spwt*v.
    """
    field_out[:] = 0.0
    for k in range(n_particles):
        scatter((pos[k] - x0) / dx, spwt * vel[k], field_out)
    _to_node_density(field_out, dx)


@numba.njit
def interpolate_field_1d(pos, n_particles, x0, dx, ef, ef_out):
    """Electric field at each particle position [V/m]."""
    for k in range(n_particles):
        ef_out[k] = gather((pos[k] - x0) / dx, ef)


# ==================== LEAP-FROG PUSHER ====================


@numba.njit
def push_particles_1d(pos, vel, ids, n_particles, ef, x0, dx, xmax, q_over_m, dt):
    """
    Leap-frog push with absorbing walls.

        v^{n+1/2} = v^{n-1/2} + (q/m) * E(x^n) * dt
        x^{n+1}   = x^n + v^{n+1/2} * dt

    Particles that end outside [x0, xmax) are dropped. Survivors are
    compacted to the front of the arrays in their original order, in the
    same pass, so every particle is visited exactly once.

    Args:
        pos, vel, ids: Particle stores (modified in-place)
        n_particles: Number of live particles
        ef: Electric field at nodes [ni] [V/m]
        x0, xmax: Wall positions [m]
        dx: Node spacing [m]
        q_over_m: Charge-to-mass ratio [C/kg]
        dt: Timestep [s]

    Returns:
        n_alive: Number of particles left
    """
    n_alive = 0
    for k in range(n_particles):
        e_p = gather((pos[k] - x0) / dx, ef)

        v = vel[k] + dt * q_over_m * e_p
        x = pos[k] + dt * v

        if x < x0 or x >= xmax:
            continue

        pos[n_alive] = x
        vel[n_alive] = v
        ids[n_alive] = ids[k]
        n_alive += 1

    return n_alive


@numba.njit
def rewind_velocities_1d(pos, vel, n_particles, ef, x0, dx, q_over_m, dt):
    """Move velocities back half a step: v -= 0.5 * dt * (q/m) * E(x)."""
    for k in range(n_particles):
        e_p = gather((pos[k] - x0) / dx, ef)
        vel[k] -= 0.5 * dt * q_over_m * e_p


# ==================== SPECIES-LEVEL WRAPPERS ====================


def scatter_species(species, grid, field):
    """
    Deposit species number density onto field.

    Args:
        species: Species instance
        grid: Grid1D instance
        field: Node array to overwrite (e.g. grid.nd[k])
    """
    deposit_density_1d(
        species.pos, species.n_particles, grid.x0, grid.dx, species.spwt, field
    )


def scatter_species_vel(species, grid, field):
    """Deposit species density-weighted velocity onto field."""
    deposit_velocity_1d(
        species.pos,
        species.vel,
        species.n_particles,
        grid.x0,
        grid.dx,
        species.spwt,
        field,
    )


def gather_species_field(species, grid):
    """
    Electric field at every live particle of a species.

    Returns:
        ef_particles: Array [n_particles] [V/m]
    """
    ef_particles = np.zeros(species.n_particles, dtype=np.float64)
    interpolate_field_1d(
        species.pos, species.n_particles, grid.x0, grid.dx, grid.ef, ef_particles
    )
    return ef_particles


def push_species(species, grid, dt):
    """
    Advance a species one timestep in grid.ef and absorb wall hits.

    Args:
        species: Species instance (modified in-place)
        grid: Grid1D instance
        dt: Timestep [s]

    Returns:
        n_absorbed: Number of particles removed at the walls
    """
    n_before = species.n_particles
    if n_before == 0:
        return 0

    species.n_particles = push_particles_1d(
        species.pos,
        species.vel,
        species.ids,
        n_before,
        grid.ef,
        grid.x0,
        grid.dx,
        grid.xmax,
        species.q_over_m,
        dt,
    )
    return n_before - species.n_particles


def rewind_species(species, grid, dt):
    """Stagger species velocities to t - dt/2 (run once before the first push)."""
    if species.n_particles == 0:
        return
    rewind_velocities_1d(
        species.pos,
        species.vel,
        species.n_particles,
        grid.ef,
        grid.x0,
        grid.dx,
        species.q_over_m,
        dt,
    )
