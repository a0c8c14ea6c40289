"""
Physical Constants and Plasma Parameters

All units in SI unless otherwise noted. Temperatures are given in eV
and converted to kelvin with EV_TO_K where a Boltzmann factor is needed.
"""

import numpy as np

# ==================== FUNDAMENTAL CONSTANTS ====================

eps0 = 8.85418782e-12  # Vacuum permittivity [F/m]
kB = 1.38065e-23  # Boltzmann constant [J/K]
m_e = 9.10938215e-31  # Electron mass [kg]
e = 1.602176565e-19  # Elementary charge [C]
AMU = 1.660538921e-27  # Atomic mass unit [kg]
EV_TO_K = 11604.52  # 1 eV expressed as a temperature [K]
eV = e  # 1 eV in Joules [J]

# ==================== SPECIES DEFAULTS ====================

ION_NAME = "Ar+ Ions"
ELECTRON_NAME = "Electrons"
ARGON_MASS_AMU = 40.0

# Charge density magnitude below which the optional noise floor zeroes rho
RHO_NOISE_FLOOR = 1e8 * e  # [C/m^3]

# ==================== PLASMA PARAMETERS ====================


def debye_length(n_e, T_e):
    """
    Electron Debye length.

    Args:
        n_e: Electron density [m^-3]
        T_e: Electron temperature [eV]

    Returns:
        lambda_D: Debye length [m]
    """
    T_e_J = T_e * eV
    return np.sqrt(eps0 * T_e_J / (n_e * e**2))


def plasma_frequency(n_e):
    """
    Electron plasma frequency.

    Args:
        n_e: Electron density [m^-3]

    Returns:
        omega_pe: Plasma frequency [rad/s]
    """
    return np.sqrt(n_e * e**2 / (m_e * eps0))


def thermal_velocity(T_eV, mass):
    """
    Thermal velocity v_th = sqrt(2 kT / m).

    Args:
        T_eV: Temperature [eV]
        mass: Particle mass [kg]

    Returns:
        v_th: Thermal velocity [m/s]
    """
    return np.sqrt(2 * kB * T_eV * EV_TO_K / mass)


def bohm_velocity(T_e, ion_mass):
    """
    Ion sound (Bohm) speed at the sheath edge.

    Args:
        T_e: Electron temperature [eV]
        ion_mass: Ion mass [kg]

    Returns:
        u_B: Bohm velocity [m/s]
    """
    return np.sqrt(T_e * eV / ion_mass)


# ==================== CONSTANTS SUMMARY ====================

if __name__ == "__main__":
    print("=" * 60)
    print("SheathPIC Physical Constants")
    print("=" * 60)

    print("\nFundamental Constants:")
    print(f"  Elementary charge:     e = {e:.6e} C")
    print(f"  Electron mass:         m_e = {m_e:.6e} kg")
    print(f"  Boltzmann constant:    kB = {kB:.6e} J/K")
    print(f"  Vacuum permittivity:   eps0 = {eps0:.6e} F/m")

    print("\nPlasma Parameters (n_e=1e16 m^-3, T_e=2 eV, Ar+):")
    print(f"  Debye length:     {debye_length(1e16, 2.0)*1e3:.3f} mm")
    print(f"  Plasma frequency: {plasma_frequency(1e16)/1e9:.2f} Grad/s")
    print(f"  Electron v_th:    {thermal_velocity(2.0, m_e)/1e3:.1f} km/s")
    print(f"  Bohm velocity:    {bohm_velocity(2.0, ARGON_MASS_AMU*AMU):.1f} m/s")
    print("=" * 60)
