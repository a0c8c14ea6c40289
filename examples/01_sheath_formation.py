"""
Sheath Formation Between Grounded Absorbing Walls

Runs the standard Ar+/electron sheath problem and plots the final
density, potential and field profiles.

Physics:
    Uniform quasi-neutral plasma (n = 1e16 m^-3, T_e = 2 eV, T_i = 0.1 eV)
    → Fast electrons reach the walls first and are absorbed
    → Net positive space charge raises the plasma potential
    → Electrons are confined, ions accelerated toward the walls
    → A sheath a few Debye lengths thick forms at each wall

Expected Result:
    - Potential drop plasma → wall of a few T_e/e
    - n_i > n_e inside the sheaths, n_i ≈ n_e in the bulk
"""

import numpy as np
import matplotlib.pyplot as plt

from sheathpic import SheathConfig, SheathSimulation
from sheathpic.constants import debye_length, bohm_velocity, AMU
from sheathpic.diagnostics import DiagnosticsWriter, load_kinetic_energy
from sheathpic.pic.diagnostics import potential_drop

# ==================== SETUP ====================

config = SheathConfig(num_ts=4000, diag_interval=200, output_dir="sheath_run")

lambda_D = debye_length(config.plasma_den, config.electron_temp)
u_B = bohm_velocity(config.electron_temp, config.ion_mass_amu * AMU)

print("=" * 60)
print("1D Plasma Sheath Formation")
print("=" * 60)
print()
print("Setup:")
print(f"  Domain: {config.domain_length*1e3:.1f} mm ({config.n_cells} cells)")
print(f"  lambda_D = {lambda_D*1e3:.3f} mm, dx/lambda_D = {config.dx/lambda_D:.2f}")
print(f"  Bohm velocity = {u_B:.0f} m/s")
print(f"  Ions: {config.num_ions}, Electrons: {config.num_electrons}")
print(f"  Steps: {config.num_ts} x {config.dt*1e12:.0f} ps")
print()

# ==================== RUN ====================

sim = SheathSimulation(config)
writer = DiagnosticsWriter(config.output_dir)
sim.run(diagnostics=writer)

print()
print("Results:")
print(f"  Potential drop: {potential_drop(sim.grid):.2f} V "
      f"({potential_drop(sim.grid)/config.electron_temp:.2f} T_e/e)")
print(f"  Ions left:      {sim.ions.n_particles}")
print(f"  Electrons left: {sim.electrons.n_particles}")
print()

# ==================== PLOT ====================

grid = sim.grid
x_mm = grid.x * 1e3
time, ke_i, ke_e = load_kinetic_energy(writer.ke_path)

fig, axes = plt.subplots(2, 2, figsize=(12, 8))

ax = axes[0, 0]
ax.plot(x_mm, grid.ndi, "r-", label="Ions")
ax.plot(x_mm, grid.nde, "b-", label="Electrons")
ax.set_xlabel("Position [mm]")
ax.set_ylabel("Density [m$^{-3}$]")
ax.legend()
ax.grid(True, alpha=0.3)

ax = axes[0, 1]
ax.plot(x_mm, grid.phi, "k-")
ax.set_xlabel("Position [mm]")
ax.set_ylabel("Potential [V]")
ax.grid(True, alpha=0.3)

ax = axes[1, 0]
with np.errstate(divide="ignore", invalid="ignore"):
    u_i = np.where(grid.ndi > 0, grid.veli / grid.ndi, 0.0)
ax.plot(x_mm, u_i / u_B, "r-")
ax.axhline(1.0, color="gray", linestyle=":")
ax.axhline(-1.0, color="gray", linestyle=":")
ax.set_xlabel("Position [mm]")
ax.set_ylabel("Ion velocity / u_B")
ax.grid(True, alpha=0.3)

ax = axes[1, 1]
ax.plot(time * 1e9, ke_e, "b-", label="Electrons")
ax.plot(time * 1e9, ke_i, "r-", label="Ions")
ax.set_xlabel("Time [ns]")
ax.set_ylabel("Kinetic energy [eV]")
ax.set_yscale("log")
ax.legend()
ax.grid(True, alpha=0.3)

plt.tight_layout()
plt.savefig("sheath_formation.png", dpi=150)
print("Saved: sheath_formation.png")
print("=" * 60)
