# simulation/__init__.py
"""
Simulation layer for the AgGaS2 Quantum-Dot Emission Lab.

    inputs   - SimulationInputs dataclass, presets, bounds checking
    pipeline - inputs -> spectrum / colour / CRI orchestrator, sweeps
    session  - export directories for results, spectra and plots
"""

from .inputs import (
    SimulationInputs,
    InputValidationError,
    PARAMETER_BOUNDS,
    validate_inputs,
    format_validation_report,
)
from .pipeline import (
    SimulationResult,
    run_simulation,
    intensity_factor,
    compare_to_reference,
    sweep,
    sweep_table,
    SWEEPABLE,
)
from .session import SessionManager

__all__ = [
    'SimulationInputs',
    'InputValidationError',
    'PARAMETER_BOUNDS',
    'validate_inputs',
    'format_validation_report',
    'SimulationResult',
    'run_simulation',
    'intensity_factor',
    'compare_to_reference',
    'sweep',
    'sweep_table',
    'SWEEPABLE',
    'SessionManager',
]
