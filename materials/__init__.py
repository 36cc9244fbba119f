# materials/__init__.py
"""
Reference data for the AgGaS2 Quantum-Dot Emission Lab.

Provides the CIE 1931 observer table, AgGaS2 / ZnS material records and the
chalcopyrite basis used by the lattice generator.

Usage:
    from materials import cmf_weights, bulk_bandgap

    cmf_weights(555)        # (0.5945, 0.995, 0.0039) -> 560 nm row
    cmf_weights(775)        # (0.0, 0.0, 0.0) -> outside the table
    bulk_bandgap('AgGaS2')  # 2.73 eV
"""

from .reference_data import (
    CIE1931_CMF,
    CMF_START_NM,
    CMF_STOP_NM,
    CMF_STEP_NM,
    CMF_WAVELENGTHS_NM,
    XYZ_TO_SRGB,
    MATERIALS,
    CHALCOPYRITE_BASIS,
    ATOM_DEFS,
    CATIONS,
    ANION,
    REFERENCE_LED,
)
from .properties import (
    cmf_index,
    cmf_weights,
    cmf_weights_array,
    bulk_bandgap,
    get_material,
    list_materials,
)

__all__ = [
    'CIE1931_CMF',
    'CMF_START_NM',
    'CMF_STOP_NM',
    'CMF_STEP_NM',
    'CMF_WAVELENGTHS_NM',
    'XYZ_TO_SRGB',
    'MATERIALS',
    'CHALCOPYRITE_BASIS',
    'ATOM_DEFS',
    'CATIONS',
    'ANION',
    'REFERENCE_LED',
    'cmf_index',
    'cmf_weights',
    'cmf_weights_array',
    'bulk_bandgap',
    'get_material',
    'list_materials',
]
