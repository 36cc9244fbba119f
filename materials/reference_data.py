# =============================================================================
# REFERENCE DATA: Colorimetry Tables & AgGaS2 Crystal Data
# =============================================================================
# Sources:
#   - CIE 15:2004, "Colorimetry", 1931 2° standard observer (10 nm table)
#   - Materials Project / ICSD, AgGaS2 chalcopyrite (space group I-42d)
#   - Zr:AgGaS2 / AgGaS2@ZnS synthesis observations (emission shifts)
#
# This file is the SINGLE SOURCE OF TRUTH for tabulated data used by the
# physics engine. Empirical fit coefficients live in
# physics/model_config.py.
# =============================================================================

import numpy as np

# =============================================================================
# CIE 1931 STANDARD OBSERVER (2°)
# =============================================================================
# Rows are (x̄, ȳ, z̄) at 380, 390, ..., 730 nm. Stored dense so a lookup is
# an index computation: idx = (λ - CMF_START_NM) / CMF_STEP_NM.

CMF_START_NM = 380
CMF_STOP_NM = 730
CMF_STEP_NM = 10

CIE1931_CMF = np.array([
    # x̄       ȳ       z̄          λ (nm)
    [0.0014, 0.0000, 0.0065],  # 380
    [0.0042, 0.0001, 0.0201],  # 390
    [0.0143, 0.0004, 0.0679],  # 400
    [0.0435, 0.0012, 0.2074],  # 410
    [0.1344, 0.0040, 0.6456],  # 420
    [0.2839, 0.0116, 1.3856],  # 430
    [0.3483, 0.0230, 1.7471],  # 440
    [0.3362, 0.0380, 1.7721],  # 450
    [0.2908, 0.0600, 1.6692],  # 460
    [0.1954, 0.0910, 1.2876],  # 470
    [0.0956, 0.1390, 0.8130],  # 480
    [0.0320, 0.2080, 0.4652],  # 490
    [0.0049, 0.3230, 0.2720],  # 500
    [0.0093, 0.5030, 0.1582],  # 510
    [0.0633, 0.7100, 0.0782],  # 520
    [0.1655, 0.8620, 0.0422],  # 530
    [0.2904, 0.9540, 0.0203],  # 540
    [0.4334, 0.9950, 0.0087],  # 550
    [0.5945, 0.9950, 0.0039],  # 560
    [0.7621, 0.9520, 0.0021],  # 570
    [0.9163, 0.8700, 0.0017],  # 580
    [1.0263, 0.7570, 0.0011],  # 590
    [1.0622, 0.6310, 0.0008],  # 600
    [1.0026, 0.5030, 0.0003],  # 610
    [0.8544, 0.3810, 0.0002],  # 620
    [0.6424, 0.2650, 0.0000],  # 630
    [0.4479, 0.1750, 0.0000],  # 640
    [0.2835, 0.1070, 0.0000],  # 650
    [0.1649, 0.0610, 0.0000],  # 660
    [0.0874, 0.0320, 0.0000],  # 670
    [0.0468, 0.0170, 0.0000],  # 680
    [0.0227, 0.0082, 0.0000],  # 690
    [0.0114, 0.0041, 0.0000],  # 700
    [0.0058, 0.0021, 0.0000],  # 710
    [0.0029, 0.0010, 0.0000],  # 720
    [0.0014, 0.0005, 0.0000],  # 730
])
CIE1931_CMF.setflags(write=False)

CMF_WAVELENGTHS_NM = np.arange(CMF_START_NM, CMF_STOP_NM + 1, CMF_STEP_NM)

# Linear XYZ -> sRGB (D65), IEC 61966-2-1
XYZ_TO_SRGB = np.array([
    [ 3.2406, -1.5372, -0.4986],
    [-0.9689,  1.8758,  0.0415],
    [ 0.0557, -0.2040,  1.0570],
])
XYZ_TO_SRGB.setflags(write=False)


# =============================================================================
# AgGaS2 MATERIAL DATA
# =============================================================================

MATERIALS = {}

# ---- SILVER GALLIUM SULFIDE (AgGaS2) ----
MATERIALS['AgGaS2'] = {
    'name': 'Silver Gallium Sulfide',
    'crystal_structure': 'Chalcopyrite',
    'space_group': 'I-42d',
    'bandgap_type': 'direct',

    'E_g_300K_eV': 2.73,           # Bulk gap (room temperature)
    'a_angstrom': 5.757,           # Lattice constant a
    'c_angstrom': 10.304,          # Lattice constant c
    'c_over_a_display': 1.8,       # Rounded c/a used for the display lattice
}

# ---- ZINC SULFIDE SHELL (ZnS) ----
MATERIALS['ZnS'] = {
    'name': 'Zinc Sulfide',
    'crystal_structure': 'Zinc Blende',
    'bandgap_type': 'direct',

    'E_g_300K_eV': 3.54,
    'a_angstrom': 5.41,
}


# =============================================================================
# CHALCOPYRITE BASIS (fractional coordinates)
# =============================================================================
# Wyckoff 4a (Ag), 4b (Ga), 8d (S, x≈0.25). The second half of each set is
# the body-centering translation (½, ½, ½) of the first.

CHALCOPYRITE_BASIS = (
    # Ag (4a)
    (0.00, 0.00, 0.000, 'Ag'),
    (0.00, 0.50, 0.250, 'Ag'),
    (0.50, 0.50, 0.500, 'Ag'),
    (0.50, 0.00, 0.750, 'Ag'),

    # Ga (4b)
    (0.00, 0.00, 0.500, 'Ga'),
    (0.00, 0.50, 0.750, 'Ga'),
    (0.50, 0.50, 0.000, 'Ga'),
    (0.50, 0.00, 0.250, 'Ga'),

    # S (8d)
    (0.25, 0.25, 0.125, 'S'),
    (0.75, 0.25, 0.875, 'S'),
    (0.25, 0.75, 0.125, 'S'),
    (0.75, 0.75, 0.875, 'S'),
    (0.75, 0.75, 0.625, 'S'),
    (0.25, 0.75, 0.375, 'S'),
    (0.75, 0.25, 0.625, 'S'),
    (0.25, 0.25, 0.375, 'S'),
)

# Display radius (scene units), colour, label
ATOM_DEFS = {
    'Ag': {'radius': 0.15, 'color': '#C0C0C0', 'label': 'Silver'},
    'Ga': {'radius': 0.12, 'color': '#DAA520', 'label': 'Gallium'},
    'S':  {'radius': 0.08, 'color': '#FFFF00', 'label': 'Sulfur'},
    'Zr': {'radius': 0.12, 'color': '#3b82f6', 'label': 'Zirconium'},
}

CATIONS = ('Ag', 'Ga', 'Zr')
ANION = 'S'


# =============================================================================
# REFERENCE LIGHT SOURCE
# =============================================================================
# Conventional YAG:Ce phosphor-converted white LED used as comparison.

REFERENCE_LED = {
    'label': 'Traditional LED',
    'peak_wavelength_nm': 564.0,
    'cri': 61.5,
}


# =============================================================================
# VERIFICATION
# =============================================================================
def verify_data():
    """Quick sanity checks on all reference data."""
    print("=" * 70)
    print("REFERENCE DATA VERIFICATION")
    print("=" * 70)

    n_rows = (CMF_STOP_NM - CMF_START_NM) // CMF_STEP_NM + 1
    print(f"\nCIE 1931 table: {CIE1931_CMF.shape[0]} rows (expected {n_rows})", end=" ")
    assert CIE1931_CMF.shape == (n_rows, 3), "CMF table shape mismatch!"
    print("[PASS]")

    # ȳ peaks near 555 nm
    y_peak = CMF_WAVELENGTHS_NM[np.argmax(CIE1931_CMF[:, 1])]
    print(f"ȳ peak: {y_peak} nm", end=" ")
    assert 550 <= y_peak <= 560, "ȳ peak misplaced"
    print("[PASS]")

    # Chalcopyrite stoichiometry: Ag:Ga:S = 1:1:2
    species = [b[3] for b in CHALCOPYRITE_BASIS]
    counts = {s: species.count(s) for s in ('Ag', 'Ga', 'S')}
    print(f"Basis counts: {counts}", end=" ")
    assert counts == {'Ag': 4, 'Ga': 4, 'S': 8}, "Basis stoichiometry wrong"
    print("[PASS]")

    print(f"\n{'=' * 70}")
    print(f"MATERIALS: {', '.join(MATERIALS.keys())}")
    print(f"ALL CHECKS PASSED")
    print(f"{'=' * 70}")
    return True


if __name__ == '__main__':
    verify_data()
