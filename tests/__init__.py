"""
SheathPIC Test Suite

Tests organized by:
- test_particles.py: Particle/Species store and velocity sampler
- test_pic_mesh.py: Grid geometry and node arrays
- test_pic_mover.py: Scatter/gather, deposition, leap-frog push, rewind
- test_field_solver.py: Thomas and SOR Poisson solvers, field, charge density
- test_diagnostics.py: Kinetic energy queries and output files
- test_simulation.py: Configuration, driver step order, CLI
"""
