"""
Reaction-Time Blue Shift - Observation Validation & Figures
===========================================================

Observation: extending the AgGaS2 synthesis from 30 to 90 min moves the
emission peak from ~570 nm to ~520 nm (≈ 50 nm, +0.17 eV), the opposite
of ordinary growth-driven red shift. Attributed to Ga2S3 alloying and
surface-state passivation.

Figures:
  - Peak wavelength vs reaction time
  - Spectra at 30 / 60 / 90 min
"""

import os
import numpy as np
import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt

from physics.qd_emission import compute_emission
from simulation.inputs import SimulationInputs
from simulation.pipeline import sweep, sweep_table
from validation.figures import plot_spectra_family

PARAMS = {
    'radius_nm': 3.5,
    'fwhm_nm': 35.0,
    'time_start_min': 30.0,
    'time_end_min': 90.0,
    'time_step_min': 5.0,
}

TARGETS = {
    'blue_shift_nm': 50.0,
    'tolerance_pct': 25.0,
    'energy_ramp_eV': 0.17,
}


def evaluate():
    """Shift, energy ramp and monotonicity over the time window."""
    r = PARAMS['radius_nm']
    start = compute_emission(r, PARAMS['time_start_min'])
    end = compute_emission(r, PARAMS['time_end_min'])

    times = np.arange(PARAMS['time_start_min'],
                      PARAMS['time_end_min'] + PARAMS['time_step_min'] / 2,
                      PARAMS['time_step_min'])
    base = SimulationInputs(radius_nm=r, fwhm_nm=PARAMS['fwhm_nm'])
    results = sweep('reaction_time_min', times, base)
    table = sweep_table(results, 'reaction_time_min')

    return {
        'shift_nm': start.peak_wavelength_nm - end.peak_wavelength_nm,
        'energy_ramp_eV': end.energy_eV - start.energy_eV,
        'monotonic': bool(np.all(np.diff(table['peak_wavelength_nm']) <= 0)),
        'table': table,
        'results': results,
    }


def _plot_peak_vs_time(table, output_dir):
    fig, ax = plt.subplots(figsize=(10, 6))
    ax.plot(table['reaction_time_min'], table['peak_wavelength_nm'], 'b-o',
            markersize=4, linewidth=1.5, label='Model')
    ax.set_xlabel('Reaction Time (min)', fontsize=12)
    ax.set_ylabel('Peak Wavelength (nm)', fontsize=12)
    ax.set_title('Anomalous Blue Shift with Reaction Time', fontsize=14, fontweight='bold')
    ax.legend(fontsize=11); ax.grid(True, alpha=0.3)
    path = os.path.join(output_dir, 'blue_shift_peak_vs_time.png')
    plt.savefig(path, dpi=150, bbox_inches='tight'); plt.close()
    print(f"    Saved: {path}")


def run_validation(output_dir=None):
    if output_dir is None:
        output_dir = os.path.join('workspace', 'validation_blue_shift')
    os.makedirs(output_dir, exist_ok=True)

    print("\n" + "=" * 60)
    print("  REACTION-TIME BLUE SHIFT")
    print("=" * 60)

    res = evaluate()
    err = abs(res['shift_nm'] - TARGETS['blue_shift_nm']) / TARGETS['blue_shift_nm'] * 100
    print(f"  Shift 30->90 min: {res['shift_nm']:.1f} nm "
          f"(target ~{TARGETS['blue_shift_nm']:.0f} nm, err={err:.1f}%)")
    print(f"  Energy ramp: {res['energy_ramp_eV']:+.3f} eV "
          f"(target {TARGETS['energy_ramp_eV']:+.2f} eV)")
    print(f"  Monotonic blue shift: {res['monotonic']}")

    passed = (err <= TARGETS['tolerance_pct']
              and abs(res['energy_ramp_eV'] - TARGETS['energy_ramp_eV']) < 1.5e-3
              and res['monotonic'])
    print(f"  Status: {'PASS' if passed else 'FAIL'}")

    print("\n  Generating figures...")
    _plot_peak_vs_time(res['table'], output_dir)
    picks = [r for r in res['results'] if r.inputs.reaction_time_min in (30.0, 60.0, 90.0)]
    plot_spectra_family([r.host_spectrum for r in picks],
                        [f"{r.inputs.reaction_time_min:.0f} min "
                         f"({r.peak_wavelength_nm:.1f} nm)" for r in picks],
                        os.path.join(output_dir, 'blue_shift_spectra.png'),
                        title='Host Emission vs Reaction Time')

    print(f"  Output: {output_dir}")
    return passed


if __name__ == "__main__":
    run_validation()
