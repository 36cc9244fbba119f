# =============================================================================
# physics/spectra.py — Emission Spectra on the Visible Grid
# =============================================================================
# Gaussian line shapes on the fixed 380-780 nm / 5 nm grid, the blue
# excitation source, and the host + Zr-dopant composite spectrum.
#
# All spectra are peak-normalised (1.0 at the centre when the centre is a
# grid point), not area-normalised: intensities are relative, unitless.
#
# References:
#   - Schubert, "Light-Emitting Diodes", 2nd Ed. (Gaussian LED line shape)
# =============================================================================

from dataclasses import dataclass
from functools import lru_cache
from typing import Iterator, List, NamedTuple

import numpy as np

from .model_config import ModelConfig, DEFAULT_MODEL


class WavelengthSample(NamedTuple):
    wavelength_nm: float
    intensity: float


@dataclass(frozen=True, eq=False)
class Spectrum:
    """
    Ordered intensity-vs-wavelength samples.

    Both arrays are stored read-only, so a Spectrum can be shared or cached
    without defensive copies.
    """

    wavelength_nm: np.ndarray
    intensity: np.ndarray

    def __post_init__(self):
        wl = np.array(self.wavelength_nm, dtype=float)
        inten = np.array(self.intensity, dtype=float)
        if wl.shape != inten.shape or wl.ndim != 1:
            raise ValueError(
                f"Spectrum arrays must be 1-D and equal length "
                f"(got {wl.shape} and {inten.shape})")
        wl.setflags(write=False)
        inten.setflags(write=False)
        object.__setattr__(self, 'wavelength_nm', wl)
        object.__setattr__(self, 'intensity', inten)

    def __len__(self) -> int:
        return self.wavelength_nm.size

    def __iter__(self) -> Iterator[WavelengthSample]:
        for wl, inten in zip(self.wavelength_nm, self.intensity):
            yield WavelengthSample(float(wl), float(inten))

    def __getitem__(self, i) -> WavelengthSample:
        return WavelengthSample(float(self.wavelength_nm[i]), float(self.intensity[i]))

    def __eq__(self, other):
        if not isinstance(other, Spectrum):
            return NotImplemented
        return (np.array_equal(self.wavelength_nm, other.wavelength_nm)
                and np.array_equal(self.intensity, other.intensity))

    def __repr__(self):
        return (f"Spectrum({len(self)} samples, "
                f"{self.wavelength_nm[0]:.0f}-{self.wavelength_nm[-1]:.0f} nm, "
                f"peak {self.peak_wavelength_nm():.0f} nm)")

    def intensity_at(self, wavelength_nm: float) -> float:
        """Intensity at an exact grid wavelength."""
        hits = np.flatnonzero(self.wavelength_nm == wavelength_nm)
        if hits.size == 0:
            raise KeyError(f"{wavelength_nm} nm is not a grid point")
        return float(self.intensity[hits[0]])

    def peak_wavelength_nm(self) -> float:
        """Grid wavelength of maximum intensity."""
        return float(self.wavelength_nm[np.argmax(self.intensity)])

    def total(self) -> float:
        """Plain sum of intensities over the grid."""
        return float(np.sum(self.intensity))

    def to_records(self) -> List[dict]:
        """[{'wavelength_nm': ..., 'intensity': ...}, ...] for charting."""
        return [s._asdict() for s in self]


# =============================================================================
# LINE SHAPES
# =============================================================================

def _gaussian_profile(grid: np.ndarray, center_nm: float, fwhm_nm: float,
                      fwhm_to_sigma: float) -> np.ndarray:
    """exp(-(λ-c)² / (2σ²)) with σ = FWHM / 2.355."""
    sigma = fwhm_nm / fwhm_to_sigma
    return np.exp(-(grid - center_nm) ** 2 / (2 * sigma ** 2))


def generate_gaussian(center_nm: float, fwhm_nm: float,
                      config: ModelConfig = DEFAULT_MODEL) -> Spectrum:
    """
    Peak-normalised Gaussian emission line on the model grid.

    I(λ) = exp( -(λ - λ_c)² / (2σ²) ),   σ = FWHM / 2.355

    Args:
        center_nm: Centre wavelength in nm (need not be a grid point)
        fwhm_nm: Full-width at half-maximum in nm
        config: Model constants (grid, FWHM conversion)

    Returns:
        Spectrum with config.n_samples points
    """
    grid = config.wavelength_grid()
    return Spectrum(grid, _gaussian_profile(grid, center_nm, fwhm_nm,
                                            config.fwhm_to_sigma))


@lru_cache(maxsize=None)
def excitation_spectrum(config: ModelConfig = DEFAULT_MODEL) -> Spectrum:
    """Blue pump LED (455 nm, 20 nm FWHM). Constant per config, cached."""
    return generate_gaussian(config.excitation_peak_nm,
                             config.excitation_fwhm_nm, config)


# =============================================================================
# COMPOSITE (HOST + DOPANT)
# =============================================================================

def normalized_dopant_fraction(zr_conc_mmol: float,
                               config: ModelConfig = DEFAULT_MODEL) -> float:
    """Dopant loading as a fraction of the maximum, capped at 1."""
    return min(zr_conc_mmol / config.dopant_max_conc_mmol, 1.0)


def composite_spectrum(base_wavelength_nm: float, fwhm_nm: float,
                       zr_conc_mmol: float = 0.0,
                       config: ModelConfig = DEFAULT_MODEL) -> Spectrum:
    """
    Host emission plus the Zr-induced 470 nm band.

    Energy transfer from the AgGaS2 host to Zr centres quenches the host
    peak while the dopant band grows:

        n      = min(c_Zr / 0.3 mmol, 1)
        I(λ)   = (1 - n)·G(λ; λ_host, FWHM) + 1.5·n·G(λ; 470, 25)

    The sum is not renormalised; at n = 1 the dopant peak reaches 1.5.

    Args:
        base_wavelength_nm: Host peak from compute_emission()
        fwhm_nm: Host line width in nm
        zr_conc_mmol: Zr precursor concentration (0-0.3 mmol)
        config: Model constants

    Returns:
        Spectrum on the model grid
    """
    grid = config.wavelength_grid()
    n = normalized_dopant_fraction(zr_conc_mmol, config)
    host_weight = 1.0 - n
    dopant_weight = n * config.dopant_peak_gain

    host = _gaussian_profile(grid, base_wavelength_nm, fwhm_nm, config.fwhm_to_sigma)
    dopant = _gaussian_profile(grid, config.dopant_peak_nm, config.dopant_fwhm_nm,
                               config.fwhm_to_sigma)
    return Spectrum(grid, host_weight * host + dopant_weight * dopant)


def mix_spectra(primary: Spectrum, secondary: Spectrum,
                primary_weight: float = 1.0,
                secondary_weight: float = 1.0) -> Spectrum:
    """
    Pointwise weighted sum of two spectra sharing one grid.

    Raises:
        ValueError: if the grids differ
    """
    if not np.array_equal(primary.wavelength_nm, secondary.wavelength_nm):
        raise ValueError(
            f"Spectrum grids differ ({len(primary)} vs {len(secondary)} samples)")
    return Spectrum(primary.wavelength_nm,
                    primary.intensity * primary_weight
                    + secondary.intensity * secondary_weight)
