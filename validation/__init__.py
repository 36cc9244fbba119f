"""
validation/ — Experimental Observation Checks & Figure Generation Registry
==========================================================================

Each observation module provides:
  - PARAMS dict (synthesis conditions)
  - TARGETS dict (observed trend the model must reproduce)
  - run_validation(output_dir) -> bool (generates figures + returns pass/fail)

Usage:
  from validation import OBSERVATIONS, run_observation, run_all_observations
"""

import logging

from validation import blue_shift
from validation import core_shell
from validation import zr_doping

logger = logging.getLogger(__name__)


OBSERVATIONS = {
    'blue_shift': {
        'label': 'Reaction-time blue shift',
        'reference': '30 -> 90 min synthesis, ~50 nm toward blue',
        'module': blue_shift,
        'run': blue_shift.run_validation,
    },
    'core_shell': {
        'label': 'ZnS shell red shift',
        'reference': 'AgGaS2@ZnS, ~20 nm toward red',
        'module': core_shell,
        'run': core_shell.run_validation,
    },
    'zr_doping': {
        'label': 'Zr dopant band',
        'reference': 'Zr-doped AgGaS2, 470 nm emission',
        'module': zr_doping,
        'run': zr_doping.run_validation,
    },
}


def run_observation(name, output_dir=None):
    """Run validation for a single observation."""
    if name not in OBSERVATIONS:
        raise ValueError(f"Unknown observation: {name}. "
                         f"Available: {list(OBSERVATIONS.keys())}")
    return OBSERVATIONS[name]['run'](output_dir)


def run_all_observations(base_dir=None):
    """Run validation for all observations. Returns dict of results."""
    import os
    if base_dir is None:
        base_dir = os.path.join('workspace', 'validation')
    results = {}
    for name, info in OBSERVATIONS.items():
        out = os.path.join(base_dir, name)
        try:
            results[name] = info['run'](out)
        except Exception as e:
            logger.exception("Observation %s failed", name)
            print(f"\n  ERROR in {name}: {e}")
            results[name] = False
    return results


def list_observations():
    """Return list of (name, label, reference) tuples."""
    return [(k, v['label'], v['reference']) for k, v in OBSERVATIONS.items()]
