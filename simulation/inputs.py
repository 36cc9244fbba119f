# simulation/inputs.py
"""
SimulationInputs - the user-controlled synthesis parameters.

Holds the five scalars the pipeline varies (radius, reaction time, Zr
concentration, shell flag, line width), JSON presets, and bounds checking.

The physics functions never reject values themselves; callers validate
before running the pipeline:

    from simulation.inputs import SimulationInputs

    inputs = SimulationInputs.from_preset('core_shell')
    inputs.validate()                 # raises InputValidationError
    report = validate_inputs({'radius_nm': 8.0})
    print(format_validation_report(report))
"""

import json
import logging
from dataclasses import dataclass, asdict, fields
from pathlib import Path

from physics.model_config import ModelConfig, DEFAULT_MODEL
from physics.qd_emission import emission_energy

logger = logging.getLogger(__name__)

PRESETS_DIR = Path(__file__).parent / 'presets'


# Physical bounds for each input: (min, max, unit)
PARAMETER_BOUNDS = {
    'radius_nm':              (2.0,  6.0,   'nm'),
    'reaction_time_min':      (30.0, 90.0,  'min'),
    'zr_concentration_mmol':  (0.0,  0.3,   'mmol'),
    'fwhm_nm':                (5.0,  120.0, 'nm'),
}

METADATA_FIELDS = ('preset_name', 'description')


class InputValidationError(ValueError):
    """Inputs outside the model's domain; carries the per-field errors."""

    def __init__(self, errors):
        self.errors = list(errors)
        detail = '; '.join(f"{name}={value!r}: {msg}" for name, value, msg in self.errors)
        super().__init__(f"Invalid simulation inputs: {detail}")


@dataclass
class SimulationInputs:
    """Synthesis parameters of one AgGaS2 sample."""

    radius_nm: float = 3.5
    reaction_time_min: float = 30.0
    zr_concentration_mmol: float = 0.0
    is_core_shell: bool = False
    fwhm_nm: float = 35.0

    # -- Metadata --------------------------------------------------------------
    preset_name: str = ''
    description: str = ''

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def check(self, config: ModelConfig = DEFAULT_MODEL) -> dict:
        """Bounds report for these inputs (see validate_inputs)."""
        return validate_inputs(self.to_dict(), config)

    def validate(self, config: ModelConfig = DEFAULT_MODEL) -> 'SimulationInputs':
        """
        Raise if any input is outside its bounds.

        Returns:
            self, for chaining

        Raises:
            InputValidationError
        """
        result = self.check(config)
        if result['errors']:
            raise InputValidationError(result['errors'])
        return self

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
        """Save inputs to JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.to_json(), encoding='utf-8')

    @classmethod
    def from_dict(cls, data: dict) -> 'SimulationInputs':
        # Filter out unknown keys so old files still load
        valid_fields = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in valid_fields})

    @classmethod
    def load(cls, path) -> 'SimulationInputs':
        """Load inputs from JSON file."""
        path = Path(path)
        return cls.from_dict(json.loads(path.read_text(encoding='utf-8')))

    @classmethod
    def from_preset(cls, name: str) -> 'SimulationInputs':
        """
        Load a named preset from simulation/presets/.

        Args:
            name: Preset name (without .json extension)

        Returns:
            SimulationInputs with preset values
        """
        path = PRESETS_DIR / f'{name}.json'
        if not path.exists():
            available = cls.list_presets()
            raise FileNotFoundError(
                f"Preset '{name}' not found. Available: {available}")
        return cls.load(path)

    @classmethod
    def list_presets(cls) -> list:
        """List available preset names."""
        if not PRESETS_DIR.exists():
            return []
        return sorted(p.stem for p in PRESETS_DIR.glob('*.json'))

    def __str__(self) -> str:
        name = self.preset_name or 'Custom'
        shell = ', ZnS shell' if self.is_core_shell else ''
        return (f"SimulationInputs({name}: "
                f"r={self.radius_nm:g} nm, t={self.reaction_time_min:g} min, "
                f"Zr={self.zr_concentration_mmol:g} mmol, "
                f"FWHM={self.fwhm_nm:g} nm{shell})")


# =============================================================================
# BOUNDS CHECKING
# =============================================================================

def validate_inputs(params: dict, config: ModelConfig = DEFAULT_MODEL) -> dict:
    """
    Validate simulation inputs against the model's domain.

    Args:
        params: Dict of input name -> value.
        config: Model constants (used for the peak-clamping cross-check).

    Returns:
        Dict with:
            'valid': list of (name, value, status) tuples
            'warnings': list of (name, value, message) tuples
            'errors': list of (name, value, message) tuples
    """
    valid = []
    warnings = []
    errors = []

    for name, value in params.items():
        if name in METADATA_FIELDS:
            valid.append((name, value, 'ok'))
            continue

        if name == 'is_core_shell':
            if isinstance(value, bool):
                valid.append((name, value, 'ok'))
            else:
                errors.append((name, value, f"Not a boolean: {value!r}"))
            continue

        if name in PARAMETER_BOUNDS:
            lo, hi, unit = PARAMETER_BOUNDS[name]
            # bool is an int subclass and str converts with float(); reject both
            if isinstance(value, (bool, str)):
                errors.append((name, value, f"Not a number: {value}"))
                continue
            try:
                val = float(value)
            except (TypeError, ValueError):
                errors.append((name, value, f"Not a number: {value}"))
                continue

            if lo <= val <= hi:
                valid.append((name, val, 'ok'))
            elif val < lo:
                errors.append((name, val, f"Below minimum: {val} < {lo} {unit}"))
            else:
                errors.append((name, val, f"Above maximum: {val} > {hi} {unit}"))
        else:
            # Unknown field — pass through
            valid.append((name, value, 'unknown_field'))

    if not errors:
        warnings.extend(_cross_validate(params, config))

    logger.info("Input validation: %d valid, %d warnings, %d errors",
                len(valid), len(warnings), len(errors))
    return {
        'valid': valid,
        'valid_count': len(valid),
        'warnings': warnings,
        'errors': errors,
    }


def _cross_validate(params: dict, config: ModelConfig) -> list:
    """Cross-check parameter relationships."""
    warnings = []

    radius = params.get('radius_nm')
    if radius is not None:
        energy = emission_energy(float(radius),
                                 float(params.get('reaction_time_min', config.reference_time_min)),
                                 bool(params.get('is_core_shell', False)),
                                 config)
        wl = config.hc_eV_nm / energy
        if wl < config.min_wavelength_nm or wl > config.max_wavelength_nm:
            warnings.append(('radius_nm', radius,
                f"Host peak {wl:.1f} nm lies outside "
                f"{config.min_wavelength_nm:.0f}-{config.max_wavelength_nm:.0f} nm "
                f"and will be clamped"))

    zr = params.get('zr_concentration_mmol')
    fwhm = params.get('fwhm_nm')
    if zr is not None and fwhm is not None and float(zr) > 0:
        if float(fwhm) < config.dopant_fwhm_nm / 2:
            warnings.append(('fwhm_nm', fwhm,
                f"Host line ({fwhm} nm) much narrower than the Zr band "
                f"({config.dopant_fwhm_nm:.0f} nm)"))

    return warnings


def format_validation_report(result: dict) -> str:
    """Format validation result into a readable text report."""
    lines = []
    lines.append("=== Input Validation Report ===\n")

    if result['errors']:
        lines.append(f"ERRORS ({len(result['errors'])}):")
        for name, val, msg in result['errors']:
            lines.append(f"  [X] {name} = {val} -- {msg}")
        lines.append("")

    if result['warnings']:
        lines.append(f"WARNINGS ({len(result['warnings'])}):")
        for name, val, msg in result['warnings']:
            lines.append(f"  [!] {name} = {val} -- {msg}")
        lines.append("")

    lines.append(f"VALID: {result.get('valid_count', len(result['valid']))} parameters passed bounds check")
    return "\n".join(lines)
