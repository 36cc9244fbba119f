# simulation/pipeline.py
"""
Emission Pipeline: inputs -> emission -> spectrum -> colour / CRI

Orchestrates one evaluation of the physics engine:
    1. compute_emission      (radius, time, shell)  -> peak, energy
    2. composite_spectrum    (peak, FWHM, Zr)       -> host spectrum
    3. excitation_spectrum   ()                     -> 455 nm pump
    4. intensity factor      max(0.2, 1 - 2·Zr)     -> dopant dimming
    5. mixed = host·k + 0.4·pump
    6. colour  <- host spectrum (unmixed)
    7. CRI     <- mixed spectrum

Colour and CRI deliberately read different spectra: the colour is that of
the quantum dots alone, the CRI that of the packaged light source with
pump bleed-through.

Every run is pure and deterministic, so sweeps are just repeated runs.

Usage:
    from simulation.pipeline import run_simulation, sweep

    result = run_simulation(SimulationInputs(radius_nm=3.0))
    results = sweep('reaction_time_min', [30, 60, 90])
"""

import dataclasses
import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

import numpy as np

from materials.reference_data import REFERENCE_LED
from physics.model_config import ModelConfig, DEFAULT_MODEL
from physics.qd_emission import compute_emission
from physics.spectra import Spectrum, composite_spectrum, excitation_spectrum, mix_spectra
from physics.colorimetry import ColorResult, spectrum_to_color
from physics.cri import estimate_cri
from .inputs import SimulationInputs

logger = logging.getLogger(__name__)

SWEEPABLE = ('radius_nm', 'reaction_time_min', 'zr_concentration_mmol',
             'fwhm_nm', 'is_core_shell')


@dataclass(frozen=True)
class SimulationResult:
    """Everything the display layer needs for one parameter set."""
    inputs: SimulationInputs
    spectrum: Spectrum              # host·k + pump bleed-through
    host_spectrum: Spectrum         # quantum-dot emission only
    peak_wavelength_nm: float
    energy_eV: float
    color: ColorResult
    cri: int

    def to_dict(self) -> dict:
        return {
            'inputs': self.inputs.to_dict(),
            'peak_wavelength_nm': self.peak_wavelength_nm,
            'energy_eV': self.energy_eV,
            'color': self.color.to_dict(),
            'cri': self.cri,
            'spectrum': self.spectrum.to_records(),
            'host_spectrum': self.host_spectrum.to_records(),
        }

    def __str__(self) -> str:
        return (f"SimulationResult(peak={self.peak_wavelength_nm:.1f} nm, "
                f"E={self.energy_eV:.3f} eV, color={self.color.display_color}, "
                f"CRI={self.cri})")


def intensity_factor(zr_conc_mmol: float, config: ModelConfig = DEFAULT_MODEL) -> float:
    """Global dopant dimming of the host emission, floored at 0.2."""
    return max(config.min_intensity_factor, 1 - zr_conc_mmol * config.quench_slope)


def run_simulation(inputs: Optional[SimulationInputs] = None,
                   config: ModelConfig = DEFAULT_MODEL,
                   validate: bool = False) -> SimulationResult:
    """
    Evaluate the emission pipeline for one parameter set.

    Args:
        inputs: Synthesis parameters (defaults to SimulationInputs())
        config: Model constants
        validate: Check bounds first and raise InputValidationError

    Returns:
        SimulationResult
    """
    inputs = dataclasses.replace(inputs) if inputs is not None else SimulationInputs()
    if validate:
        inputs.validate(config)

    emission = compute_emission(inputs.radius_nm, inputs.reaction_time_min,
                                inputs.is_core_shell, config)
    host = composite_spectrum(emission.peak_wavelength_nm, inputs.fwhm_nm,
                              inputs.zr_concentration_mmol, config)
    pump = excitation_spectrum(config)
    k = intensity_factor(inputs.zr_concentration_mmol, config)
    mixed = mix_spectra(host, pump, k, config.excitation_bleed)

    color = spectrum_to_color(host)
    cri = estimate_cri(mixed, config)

    logger.debug("%s -> peak %.1f nm, E %.3f eV, %s, CRI %d",
                 inputs, emission.peak_wavelength_nm, emission.energy_eV,
                 color.display_color, cri)

    return SimulationResult(
        inputs=inputs,
        spectrum=mixed,
        host_spectrum=host,
        peak_wavelength_nm=emission.peak_wavelength_nm,
        energy_eV=emission.energy_eV,
        color=color,
        cri=cri,
    )


def compare_to_reference(result: SimulationResult,
                         reference: Optional[dict] = None) -> dict:
    """
    Peak and CRI against a conventional phosphor LED (564 nm, CRI 61.5).

    Returns:
        Dict with the reference values, ours, and the differences
    """
    ref = reference or REFERENCE_LED
    return {
        'reference_label': ref['label'],
        'reference_peak_nm': ref['peak_wavelength_nm'],
        'reference_cri': ref['cri'],
        'peak_nm': result.peak_wavelength_nm,
        'cri': result.cri,
        'delta_peak_nm': round(result.peak_wavelength_nm - ref['peak_wavelength_nm'], 1),
        'delta_cri': round(result.cri - ref['cri'], 1),
    }


# =============================================================================
# SWEEPS
# =============================================================================

def sweep(parameter: str, values: Iterable,
          base_inputs: Optional[SimulationInputs] = None,
          config: ModelConfig = DEFAULT_MODEL,
          validate: bool = False) -> List[SimulationResult]:
    """
    Re-run the pipeline with one input varied.

    Args:
        parameter: SimulationInputs field name (see SWEEPABLE)
        values: Values to substitute
        base_inputs: Inputs held fixed (defaults to SimulationInputs())
        config: Model constants
        validate: Check every point before running any; raises
                  InputValidationError naming the first bad point

    Returns:
        One SimulationResult per value, in order
    """
    if parameter not in SWEEPABLE:
        raise ValueError(f"Cannot sweep '{parameter}'. Valid: {list(SWEEPABLE)}")
    base = base_inputs or SimulationInputs()

    points = [dataclasses.replace(base, **{parameter: v}) for v in values]
    if validate:
        for p in points:
            p.validate(config)
    results = [run_simulation(p, config) for p in points]
    logger.info("Sweep %s: %d points", parameter, len(results))
    return results


def sweep_table(results: List[SimulationResult], parameter: str) -> Dict[str, np.ndarray]:
    """Column arrays of a sweep, keyed by output name."""
    return {
        parameter: np.array([getattr(r.inputs, parameter) for r in results]),
        'peak_wavelength_nm': np.array([r.peak_wavelength_nm for r in results]),
        'energy_eV': np.array([r.energy_eV for r in results]),
        'cri': np.array([r.cri for r in results]),
        'chromaticity_x': np.array([r.color.chromaticity_x for r in results]),
        'chromaticity_y': np.array([r.color.chromaticity_y for r in results]),
    }
