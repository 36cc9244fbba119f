# =============================================================================
# physics/qd_emission.py — AgGaS2 Quantum-Dot Emission Energy
# =============================================================================
# Maps particle radius, reaction time and ZnS shell growth to the
# characteristic emission energy and peak wavelength of AgGaS2 nanocrystals.
#
# The model is an empirical fit, not a first-principles calculation. It
# reproduces three synthesis observations:
#   - smaller dots emit at higher energy (simplified Brus confinement)
#   - longer reaction time BLUE-shifts emission (~570 -> 520 nm over
#     30 -> 90 min), opposite to ordinary growth-driven red shift;
#     attributed to Ga2S3 alloying / surface passivation
#   - a ZnS shell red-shifts emission (~20 nm) through wave-function
#     leakage and lattice-mismatch strain
#
# References:
#   - Brus, J. Chem. Phys. 80, 4403 (1984)
# =============================================================================

from dataclasses import dataclass

from utils.constants import eV_to_nm
from .model_config import ModelConfig, DEFAULT_MODEL


@dataclass(frozen=True)
class EmissionParams:
    """Characteristic emission of one parameter set."""
    energy_eV: float            # 3 decimals
    peak_wavelength_nm: float   # 1 decimal, within [400, 700]


# =============================================================================
# ENERGY TERMS
# =============================================================================

def energy_terms(radius_nm: float, config: ModelConfig = DEFAULT_MODEL) -> dict:
    """
    Individual contributions to the base emission energy.

    E = E_g,bulk + a/r² - b/r - (ΔE_defect + c/r)

    Args:
        radius_nm: Particle radius in nm (> 0)
        config: Model constants

    Returns:
        Dict with 'bulk', 'confinement', 'coulomb', 'defect' (all eV;
        coulomb and defect are the magnitudes subtracted)
    """
    return {
        'bulk': config.bulk_bandgap_eV,
        'confinement': config.confinement_coeff / (radius_nm * radius_nm),
        'coulomb': config.coulomb_coeff / radius_nm,
        'defect': config.defect_shift_eV + config.defect_radius_coeff / radius_nm,
    }


def emission_energy(radius_nm: float, reaction_time_min: float = 30.0,
                    is_core_shell: bool = False,
                    config: ModelConfig = DEFAULT_MODEL) -> float:
    """
    Unrounded emission energy in eV.

    Reaction time beyond 30 min adds a linear ramp of 0.17 eV per 60 min;
    a ZnS shell subtracts 0.09 eV.

    Raises:
        ZeroDivisionError: radius_nm == 0
    """
    t = energy_terms(radius_nm, config)
    energy = t['bulk'] + t['confinement'] - t['coulomb'] - t['defect']

    if reaction_time_min > config.reference_time_min:
        energy += (reaction_time_min - config.reference_time_min) * config.blue_shift_eV_per_min

    if is_core_shell:
        energy -= config.shell_shift_eV

    return energy


def wavelength_from_energy(energy_eV: float,
                           config: ModelConfig = DEFAULT_MODEL) -> float:
    """
    λ = 1240 / E, clamped to the displayable 400-700 nm window.
    """
    wl = eV_to_nm(energy_eV, config.hc_eV_nm)
    return min(max(wl, config.min_wavelength_nm), config.max_wavelength_nm)


# =============================================================================
# PUBLIC ENTRY POINT
# =============================================================================

def compute_emission(radius_nm: float, reaction_time_min: float = 30.0,
                     is_core_shell: bool = False,
                     config: ModelConfig = DEFAULT_MODEL) -> EmissionParams:
    """
    Emission energy and peak wavelength of an AgGaS2 quantum dot.

    The energy is reported to 3 decimals and the wavelength to 1 decimal;
    callers should not read more precision into either.

    Args:
        radius_nm: Particle radius in nm, must be > 0
        reaction_time_min: Synthesis time in minutes (30-90)
        is_core_shell: True if a ZnS shell was grown
        config: Model constants

    Returns:
        EmissionParams

    Raises:
        ZeroDivisionError: radius_nm == 0 (validate inputs first)
    """
    energy = emission_energy(radius_nm, reaction_time_min, is_core_shell, config)
    wl = wavelength_from_energy(energy, config)
    return EmissionParams(energy_eV=round(energy, 3),
                          peak_wavelength_nm=round(wl, 1))


# =============================================================================
# SELF-TEST
# =============================================================================

def test_qd_emission():
    """Print the emission trends the model is fitted to reproduce."""
    print("=" * 70)
    print("AgGaS2 EMISSION MODEL — TRENDS")
    print("=" * 70)

    print("\n1. SIZE (t = 30 min, bare core)")
    for r in (2.0, 3.0, 3.5, 4.0, 5.0, 6.0):
        e = compute_emission(r)
        print(f"  r = {r:.1f} nm  ->  E = {e.energy_eV:.3f} eV, λ = {e.peak_wavelength_nm:.1f} nm")

    print("\n2. REACTION TIME (r = 3.5 nm)")
    for t in (30, 45, 60, 75, 90):
        e = compute_emission(3.5, t)
        print(f"  t = {t:3d} min  ->  λ = {e.peak_wavelength_nm:.1f} nm")

    print("\n3. ZnS SHELL (r = 3.5 nm, t = 30 min)")
    bare = compute_emission(3.5, 30, False)
    shell = compute_emission(3.5, 30, True)
    print(f"  bare:  {bare.peak_wavelength_nm:.1f} nm")
    print(f"  shell: {shell.peak_wavelength_nm:.1f} nm "
          f"(+{shell.peak_wavelength_nm - bare.peak_wavelength_nm:.1f} nm)")


if __name__ == '__main__':
    test_qd_emission()
