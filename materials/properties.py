# =============================================================================
# materials/properties.py — Table Lookups over the Reference Data
# =============================================================================
# Accessors for the CIE 1931 observer table and the material records in
# materials/reference_data.py.
#
# Lookups snap a wavelength to the nearest table row (half-up, so 385 nm
# reads the 390 nm row). Wavelengths whose row falls outside the table
# contribute zero weight rather than raising: the emission grid runs to
# 780 nm while the observer table stops at 730 nm.
# =============================================================================

import numpy as np
from .reference_data import (
    CIE1931_CMF, CMF_START_NM, CMF_STEP_NM, MATERIALS,
)

_N_ROWS = CIE1931_CMF.shape[0]


# =============================================================================
# COLOUR MATCHING FUNCTIONS
# =============================================================================

def cmf_index(wavelength_nm):
    """
    Table row for a wavelength, or -1 when it lies outside the table.

    Works on scalars and arrays.

    Args:
        wavelength_nm: Wavelength(s) in nm

    Returns:
        int row index (or int array) in [0, 35], -1 where out of range
    """
    wl = np.asarray(wavelength_nm, dtype=float)
    idx = np.floor((wl - CMF_START_NM) / CMF_STEP_NM + 0.5).astype(int)
    idx = np.where((idx >= 0) & (idx < _N_ROWS), idx, -1)
    if idx.ndim == 0:
        return int(idx)
    return idx


def cmf_weights(wavelength_nm) -> tuple:
    """
    (x̄, ȳ, z̄) for a single wavelength.

    Returns (0.0, 0.0, 0.0) when the wavelength rounds outside 380-730 nm.
    """
    idx = cmf_index(wavelength_nm)
    if idx < 0:
        return (0.0, 0.0, 0.0)
    row = CIE1931_CMF[idx]
    return (float(row[0]), float(row[1]), float(row[2]))


def cmf_weights_array(wavelengths_nm: np.ndarray) -> np.ndarray:
    """
    Vectorised lookup: (N, 3) array of observer weights.

    Rows for out-of-table wavelengths are zero.
    """
    idx = cmf_index(np.atleast_1d(wavelengths_nm))
    weights = np.zeros((idx.size, 3))
    inside = idx >= 0
    weights[inside] = CIE1931_CMF[idx[inside]]
    return weights


# =============================================================================
# MATERIAL RECORDS
# =============================================================================

def bulk_bandgap(material_name: str = 'AgGaS2') -> float:
    """
    Room-temperature bulk bandgap.

    Args:
        material_name: Key into MATERIALS (e.g. 'AgGaS2', 'ZnS')

    Returns:
        E_g in eV
    """
    return MATERIALS[material_name]['E_g_300K_eV']


def get_material(name: str) -> dict:
    """Return a copy of a material record."""
    if name not in MATERIALS:
        raise ValueError(f"Unknown material: {name}. Available: {list(MATERIALS.keys())}")
    return dict(MATERIALS[name])


def list_materials() -> list:
    """Names of all tabulated materials."""
    return sorted(MATERIALS.keys())
