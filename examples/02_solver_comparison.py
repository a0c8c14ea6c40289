"""
Poisson Solver Cross-Check: Thomas Algorithm vs SOR

Solves the same noisy charge density (a freshly loaded plasma) with both
potential solvers and reports the node-wise difference and timing.
"""

import time

import numpy as np

from sheathpic import SheathConfig, SheathSimulation
from sheathpic.pic.field_solver import solve_potential_direct, solve_potential_sor

config = SheathConfig(n_cells=100, num_ions=20000, num_electrons=20000, seed=3)
sim = SheathSimulation(config)
sim.load_particles()
sim.scatter_densities()
sim.compute_rho()

rho = sim.grid.rho
dx = sim.grid.dx

phi_direct = np.zeros(sim.grid.ni)
start = time.perf_counter()
solve_potential_direct(phi_direct, rho, dx)
t_direct = time.perf_counter() - start

phi_sor = np.zeros(sim.grid.ni)
start = time.perf_counter()
converged = solve_potential_sor(phi_sor, rho, dx)
t_sor = time.perf_counter() - start

scale = np.max(np.abs(phi_direct))
print("=" * 60)
print("Poisson Solver Cross-Check")
print("=" * 60)
print(f"  Nodes: {sim.grid.ni}")
print(f"  SOR converged: {converged}")
print(f"  max |phi|:           {scale:.4e} V")
print(f"  max |phi_sor - phi|: {np.max(np.abs(phi_sor - phi_direct)):.4e} V")
print(f"  Direct: {t_direct*1e3:.3f} ms (includes JIT on first call)")
print(f"  SOR:    {t_sor*1e3:.3f} ms (includes JIT on first call)")
print("=" * 60)
