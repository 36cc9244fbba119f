# physics/__init__.py
"""
Physics engine for the AgGaS2 Quantum-Dot Emission Lab.

Pure functions from synthesis parameters to spectra and colour:

    qd_emission  - radius / reaction time / shell -> (energy, peak wavelength)
    spectra      - Gaussian lines, blue excitation, host + Zr composite
    colorimetry  - spectrum -> CIE XYZ -> chromaticity + sRGB colour
    cri          - band-balance colour-rendering estimate
    lattice      - chalcopyrite point cloud for 3D display
    model_config - immutable empirical constants
"""

from .model_config import ModelConfig, DEFAULT_MODEL
from .spectra import (
    WavelengthSample,
    Spectrum,
    generate_gaussian,
    excitation_spectrum,
    composite_spectrum,
    normalized_dopant_fraction,
    mix_spectra,
)
from .qd_emission import EmissionParams, compute_emission, emission_energy
from .colorimetry import ColorResult, spectrum_to_color, spectrum_to_xyz
from .cri import estimate_cri, band_energies
from .lattice import (
    Atom,
    Bond,
    LatticeStructure,
    LATTICE_MODES,
    generate_lattice,
)

__all__ = [
    'ModelConfig',
    'DEFAULT_MODEL',
    'WavelengthSample',
    'Spectrum',
    'generate_gaussian',
    'excitation_spectrum',
    'composite_spectrum',
    'normalized_dopant_fraction',
    'mix_spectra',
    'EmissionParams',
    'compute_emission',
    'emission_energy',
    'ColorResult',
    'spectrum_to_color',
    'spectrum_to_xyz',
    'estimate_cri',
    'band_energies',
    'Atom',
    'Bond',
    'LatticeStructure',
    'LATTICE_MODES',
    'generate_lattice',
]
