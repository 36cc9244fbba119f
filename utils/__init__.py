# utils/__init__.py
"""
Utility modules for the AgGaS2 Quantum-Dot Emission Lab.
"""

from .constants import (
    Q,
    H,
    C,
    HC_EV_NM,
    HC_EV_NM_CODATA,
    FWHM_TO_SIGMA,
    nm_to_eV, eV_to_nm,
)

__all__ = [
    'Q',
    'H',
    'C',
    'HC_EV_NM',
    'HC_EV_NM_CODATA',
    'FWHM_TO_SIGMA',
    'nm_to_eV', 'eV_to_nm',
]
