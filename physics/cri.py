# =============================================================================
# physics/cri.py — Colour-Rendering Estimate from Band Balance
# =============================================================================
# NOT a CIE 13.3 colour rendering index. A real CRI integrates the source
# against 14 test-colour reflectance samples and a reference illuminant.
# This is a white-balance heuristic for live feedback: it rewards spectra
# whose red, green and blue band energies are even.
#
#   blue  : λ <= 510 nm
#   green : 510 < λ <= 600 nm
#   red   : λ > 600 nm
#
#   balance = min(R, G, 1.5·B) / (total / 3.5)
#   score   = round(60 + 40·balance), capped at 98
#
# The band edges and the 60-98 range were picked to look plausible, not
# derived. Keep them as they are.
# =============================================================================

import math

import numpy as np

from .model_config import ModelConfig, DEFAULT_MODEL
from .spectra import Spectrum


def band_energies(spectrum: Spectrum,
                  config: ModelConfig = DEFAULT_MODEL) -> dict:
    """
    Summed intensity per colour band.

    Returns:
        Dict with 'red', 'green', 'blue', 'total'
    """
    wl = spectrum.wavelength_nm
    inten = spectrum.intensity
    red = wl > config.cri_red_edge_nm
    green = (wl > config.cri_green_edge_nm) & ~red
    blue = ~(red | green)
    return {
        'red': float(np.sum(inten[red])),
        'green': float(np.sum(inten[green])),
        'blue': float(np.sum(inten[blue])),
        'total': float(np.sum(inten)),
    }


def estimate_cri(spectrum: Spectrum,
                 config: ModelConfig = DEFAULT_MODEL) -> int:
    """
    Coarse colour-rendering score (60-98 for any lit spectrum, 0 if dark).

    Args:
        spectrum: Usually the excitation-mixed spectrum
        config: Band edges and score constants

    Returns:
        Integer score
    """
    bands = band_energies(spectrum, config)
    if bands['total'] == 0:
        return 0

    balance = min(bands['red'], bands['green'],
                  bands['blue'] * config.cri_blue_weight) / (bands['total'] / config.cri_band_divisor)
    score = math.floor(config.cri_base + balance * config.cri_span + 0.5)
    return int(min(score, config.cri_cap))
