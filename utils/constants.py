# utils/constants.py
"""
Physical Constants for the AgGaS2 Quantum-Dot Emission Lab

Fundamental constants (SI units unless noted) plus the energy/wavelength
conversions used by the emission model.

The emission model works with the rounded product hc = 1240 eV·nm, the
value the empirical fits were made with. The CODATA value is kept
alongside it for reference.

References:
    - CODATA 2018 recommended values
"""

# =============================================================================
# FUNDAMENTAL PHYSICAL CONSTANTS
# =============================================================================

# Electron charge (C)
Q = 1.602176634e-19

# Planck constant (J·s)
H = 6.62607015e-34

# Speed of light in vacuum (m/s)
C = 299792458.0

# =============================================================================
# DERIVED CONSTANTS
# =============================================================================

# h·c product for wavelength-energy conversion (eV·nm)
HC_EV_NM_CODATA = (H * C) / Q * 1e9  # ≈ 1239.84 eV·nm

# Rounded h·c used by the empirical emission fits (eV·nm)
HC_EV_NM = 1240.0

# FWHM = 2·sqrt(2·ln2)·σ, rounded as in the spectral fits
FWHM_TO_SIGMA = 2.355

# =============================================================================
# UNIT CONVERSION HELPERS
# =============================================================================

def nm_to_eV(wavelength_nm, hc=HC_EV_NM):
    """Convert wavelength (nm) to photon energy (eV)."""
    return hc / wavelength_nm

def eV_to_nm(energy_eV, hc=HC_EV_NM):
    """Convert photon energy (eV) to wavelength (nm)."""
    return hc / energy_eV


# =============================================================================
# SELF-TEST
# =============================================================================

if __name__ == "__main__":
    print("Physical Constants Module")
    print("=" * 50)
    print(f"Electron charge q:     {Q:.6e} C")
    print(f"Planck constant h:     {H:.6e} J·s")
    print(f"Speed of light c:      {C:.0f} m/s")
    print(f"h·c (CODATA):          {HC_EV_NM_CODATA:.2f} eV·nm")
    print(f"h·c (model):           {HC_EV_NM:.2f} eV·nm")
    print()
    print("Conversions:")
    print(f"  2.73 eV → {eV_to_nm(2.73):.1f} nm (AgGaS2 bulk gap)")
    print(f"  470 nm  → {nm_to_eV(470):.3f} eV (Zr emission)")
