# physics/model_config.py
"""
ModelConfig - Immutable bundle of the empirical emission-model constants.

Every coefficient of the spectrum/colour pipeline lives here instead of as a
literal inside the physics functions, so a fit can be audited or swapped
without touching the code.

Usage:
    from physics.model_config import ModelConfig, DEFAULT_MODEL

    cfg = DEFAULT_MODEL                              # published fit
    cfg = DEFAULT_MODEL.replace(shell_shift_eV=0.12) # variant
    cfg.save('my_model.json')
    cfg = ModelConfig.load('my_model.json')
"""

import json
from dataclasses import dataclass, asdict, fields, replace
from pathlib import Path

import numpy as np

from utils.constants import HC_EV_NM, FWHM_TO_SIGMA


@dataclass(frozen=True)
class ModelConfig:
    """Empirical constants of the AgGaS2 emission model."""

    # -- Wavelength grid -------------------------------------------------------
    grid_start_nm: float = 380.0
    grid_stop_nm: float = 780.0
    grid_step_nm: float = 5.0
    fwhm_to_sigma: float = FWHM_TO_SIGMA

    # -- Emission energy (eV) --------------------------------------------------
    bulk_bandgap_eV: float = 2.73
    confinement_coeff: float = 0.8         # eV·nm²,  + a / r²
    coulomb_coeff: float = 0.3             # eV·nm,   - b / r
    defect_shift_eV: float = 0.65          # Stokes shift to the defect level
    defect_radius_coeff: float = 0.1       # eV·nm,   - c / r
    reference_time_min: float = 30.0
    blue_shift_eV_per_min: float = 0.17 / 60
    shell_shift_eV: float = 0.09
    hc_eV_nm: float = HC_EV_NM
    min_wavelength_nm: float = 400.0
    max_wavelength_nm: float = 700.0

    # -- Zr dopant emission ----------------------------------------------------
    dopant_peak_nm: float = 470.0
    dopant_fwhm_nm: float = 25.0
    dopant_max_conc_mmol: float = 0.3
    dopant_peak_gain: float = 1.5

    # -- Blue excitation source ------------------------------------------------
    excitation_peak_nm: float = 455.0
    excitation_fwhm_nm: float = 20.0
    excitation_bleed: float = 0.4
    quench_slope: float = 2.0              # per mmol
    min_intensity_factor: float = 0.2

    # -- CRI heuristic ---------------------------------------------------------
    cri_red_edge_nm: float = 600.0
    cri_green_edge_nm: float = 510.0
    cri_blue_weight: float = 1.5
    cri_band_divisor: float = 3.5
    cri_base: float = 60.0
    cri_span: float = 40.0
    cri_cap: int = 98

    # -------------------------------------------------------------------------
    # Grid
    # -------------------------------------------------------------------------

    @property
    def n_samples(self) -> int:
        """Number of grid points (81 for 380-780 nm / 5 nm)."""
        return int(round((self.grid_stop_nm - self.grid_start_nm) / self.grid_step_nm)) + 1

    def wavelength_grid(self) -> np.ndarray:
        """Read-only ascending wavelength grid in nm."""
        grid = self.grid_start_nm + self.grid_step_nm * np.arange(self.n_samples)
        grid.setflags(write=False)
        return grid

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def to_dict(self) -> dict:
        """Convert to plain dict."""
        return asdict(self)

    def to_json(self, indent: int = 2) -> str:
        """Serialize to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    def save(self, path) -> None:
        """Save model constants to JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.to_json(), encoding='utf-8')

    @classmethod
    def from_dict(cls, data: dict) -> 'ModelConfig':
        # Filter out unknown keys so old files still load
        valid_fields = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in valid_fields})

    @classmethod
    def load(cls, path) -> 'ModelConfig':
        """Load model constants from JSON file."""
        path = Path(path)
        return cls.from_dict(json.loads(path.read_text(encoding='utf-8')))

    def replace(self, **changes) -> 'ModelConfig':
        """Copy with some constants changed."""
        return replace(self, **changes)

    def __str__(self) -> str:
        return (f"ModelConfig(Eg={self.bulk_bandgap_eV} eV, "
                f"grid={self.grid_start_nm:.0f}-{self.grid_stop_nm:.0f}/"
                f"{self.grid_step_nm:g} nm, "
                f"dopant={self.dopant_peak_nm:.0f} nm)")


DEFAULT_MODEL = ModelConfig()
