# =============================================================================
# physics/colorimetry.py — Spectrum -> CIE XYZ -> sRGB Display Colour
# =============================================================================
# Integrates an emission spectrum against the CIE 1931 2° observer to get
# tristimulus values, chromaticity (x, y) and a displayable sRGB colour.
#
# Tone mapping is deliberately simple: linear RGB is divided by
# max(r, g, b, 1) so no channel exceeds 1 and dim colours are never
# brightened. This gives a paint colour for the emitter, not a
# colour-managed rendering.
#
# References:
#   - CIE 15:2004, "Colorimetry"
#   - IEC 61966-2-1 (sRGB transfer function and primaries)
# =============================================================================

from dataclasses import dataclass
from typing import Tuple

import numpy as np

from materials.properties import cmf_weights_array
from materials.reference_data import XYZ_TO_SRGB
from .spectra import Spectrum


@dataclass(frozen=True)
class ColorResult:
    """Display colour and chromaticity of a spectrum."""
    display_color: str          # 'rgb(R,G,B)'
    chromaticity_x: float       # 4 decimals
    chromaticity_y: float       # 4 decimals
    rgb: Tuple[int, int, int] = (0, 0, 0)

    @property
    def hex(self) -> str:
        return '#{:02x}{:02x}{:02x}'.format(*self.rgb)

    def to_dict(self) -> dict:
        return {
            'display_color': self.display_color,
            'hex': self.hex,
            'chromaticity_x': self.chromaticity_x,
            'chromaticity_y': self.chromaticity_y,
        }


BLACK = ColorResult(display_color='rgb(0,0,0)', chromaticity_x=0.0,
                    chromaticity_y=0.0, rgb=(0, 0, 0))


# =============================================================================
# TRISTIMULUS
# =============================================================================

def spectrum_to_xyz(spectrum: Spectrum) -> np.ndarray:
    """
    Tristimulus (X, Y, Z) as a plain weighted sum.

    X = Σ I(λ_i) · x̄(round10(λ_i))   (same for Y, Z)

    Samples whose wavelength rounds outside 380-730 nm add nothing.
    """
    weights = cmf_weights_array(spectrum.wavelength_nm)
    return spectrum.intensity @ weights


def xyz_to_chromaticity(xyz: np.ndarray) -> Tuple[float, float]:
    """(x, y) = (X, Y) / (X + Y + Z); (0, 0) for a dark spectrum."""
    total = float(np.sum(xyz))
    if total == 0:
        return 0.0, 0.0
    return float(xyz[0] / total), float(xyz[1] / total)


# =============================================================================
# sRGB ENCODING
# =============================================================================

def srgb_gamma(c):
    """
    sRGB transfer function (linear -> encoded).

    12.92·c                 for c <= 0.0031308
    1.055·c^(1/2.4) - 0.055 otherwise
    """
    c = np.asarray(c, dtype=float)
    return np.where(c > 0.0031308,
                    1.055 * np.power(np.maximum(c, 0.0031308), 1 / 2.4) - 0.055,
                    12.92 * c)


def xyz_to_rgb255(xyz: np.ndarray) -> Tuple[int, int, int]:
    """
    Linear sRGB via the XYZ matrix, scaled by max(r, g, b, 1), clipped at
    0, gamma-encoded and quantised to 0-255 (half-up).
    """
    rgb = XYZ_TO_SRGB @ np.asarray(xyz, dtype=float)
    rgb = rgb / max(float(np.max(rgb)), 1.0)
    encoded = srgb_gamma(np.maximum(rgb, 0.0))
    r, g, b = np.floor(encoded * 255 + 0.5).astype(int)
    return int(r), int(g), int(b)


# =============================================================================
# PUBLIC ENTRY POINT
# =============================================================================

def spectrum_to_color(spectrum: Spectrum) -> ColorResult:
    """
    Display colour and CIE 1931 chromaticity of an emission spectrum.

    An all-dark spectrum (X + Y + Z == 0) returns black with chromaticity
    (0, 0) instead of dividing by zero.

    Args:
        spectrum: Spectrum on any grid (only 380-730 nm contributes)

    Returns:
        ColorResult
    """
    xyz = spectrum_to_xyz(spectrum)
    if float(np.sum(xyz)) == 0:
        return BLACK

    x, y = xyz_to_chromaticity(xyz)
    rgb = xyz_to_rgb255(xyz)
    return ColorResult(
        display_color='rgb({},{},{})'.format(*rgb),
        chromaticity_x=round(x, 4),
        chromaticity_y=round(y, 4),
        rgb=rgb,
    )
