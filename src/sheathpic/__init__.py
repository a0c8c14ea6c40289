"""
SheathPIC: 1D-1V Electrostatic Plasma Sheath Simulation

Particle-in-Cell toolkit for the collisionless two-species (ion/electron)
sheath between grounded absorbing walls.
"""

__version__ = "0.1.0"

from .config import SheathConfig
from .particles import Particle, Species, VelocitySampler
from .pic.mesh import Grid1D
from .simulation import SheathSimulation

__all__ = [
    "SheathConfig",
    "Particle",
    "Species",
    "VelocitySampler",
    "Grid1D",
    "SheathSimulation",
]
