"""
Observation validation tests for the AgGaS2 Quantum-Dot Emission Lab.

Tests that:
1. Each experimental trend (blue shift, shell red shift, Zr band) is met
2. The observation registry runs and reports pass/fail
3. Figures are written where asked

Run with:  pytest tests/test_observations.py -v
"""

import sys
from pathlib import Path

import numpy as np
import pytest

_PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(_PROJECT_ROOT))


# ============================================================================
# 1. Reaction-Time Blue Shift
# ============================================================================

class TestBlueShift:
    """30 -> 90 min synthesis shifts emission toward blue."""

    def test_shift_within_tolerance(self):
        from validation.blue_shift import evaluate, TARGETS
        res = evaluate()
        assert res['shift_nm'] == pytest.approx(47.1, abs=0.05)
        err = abs(res['shift_nm'] - TARGETS['blue_shift_nm']) / TARGETS['blue_shift_nm'] * 100
        assert err <= TARGETS['tolerance_pct']

    def test_energy_ramp(self):
        from validation.blue_shift import evaluate
        assert evaluate()['energy_ramp_eV'] == pytest.approx(0.17, abs=1e-9)

    def test_monotonic(self):
        from validation.blue_shift import evaluate
        res = evaluate()
        assert res['monotonic']
        assert len(res['table']['reaction_time_min']) == 13

    def test_run_validation(self, tmp_path):
        from validation.blue_shift import run_validation
        assert run_validation(str(tmp_path)) is True
        assert (tmp_path / 'blue_shift_peak_vs_time.png').exists()
        assert (tmp_path / 'blue_shift_spectra.png').exists()


# ============================================================================
# 2. ZnS Core-Shell Red Shift
# ============================================================================

class TestCoreShell:
    """ZnS shell moves emission ~20 nm toward red."""

    def test_red_shift(self):
        from validation.core_shell import evaluate
        res = evaluate()
        assert res['bare'].peak_wavelength_nm == pytest.approx(563.4)
        assert res['shell'].peak_wavelength_nm == pytest.approx(587.4)
        assert res['red_shift_nm'] == pytest.approx(24.0)

    def test_energy_drop_exact(self):
        from validation.core_shell import evaluate
        assert evaluate()['energy_drop_eV'] == pytest.approx(0.09, abs=1e-6)

    def test_run_validation(self, tmp_path):
        from validation.core_shell import run_validation
        assert run_validation(str(tmp_path)) is True
        assert (tmp_path / 'core_shell_spectra.png').exists()


# ============================================================================
# 3. Zr Dopant Band
# ============================================================================

class TestZrDoping:
    """Zr band at 470 nm grows while the host is quenched."""

    def test_full_loading(self):
        from validation.zr_doping import evaluate
        res = evaluate()
        assert res['doped_peak_nm'] == 470
        assert res['doped_470'] == 1.5
        assert res['host_residual'] < 1e-6

    def test_growth_with_loading(self):
        from validation.zr_doping import evaluate, PARAMS
        res = evaluate()
        assert res['monotonic']
        assert len(res['at_470']) == len(PARAMS['zr_levels_mmol'])
        np.testing.assert_allclose(res['at_470'],
                                   1.5 * np.array(PARAMS['zr_levels_mmol']) / 0.3,
                                   atol=1e-12)

    def test_run_validation(self, tmp_path):
        from validation.zr_doping import run_validation
        assert run_validation(str(tmp_path)) is True
        assert (tmp_path / 'zr_doping_spectra.png').exists()
        assert (tmp_path / 'zr_doping_intensity.png').exists()


# ============================================================================
# 4. Registry
# ============================================================================

class TestRegistry:
    """validation/__init__.py registry."""

    def test_all_registered(self):
        from validation import OBSERVATIONS
        assert set(OBSERVATIONS) == {'blue_shift', 'core_shell', 'zr_doping'}
        for info in OBSERVATIONS.values():
            assert hasattr(info['module'], 'PARAMS')
            assert hasattr(info['module'], 'TARGETS')
            assert callable(info['run'])

    def test_list_observations(self):
        from validation import list_observations
        rows = list_observations()
        assert len(rows) == 3
        assert all(len(row) == 3 for row in rows)

    def test_unknown_observation(self):
        from validation import run_observation
        with pytest.raises(ValueError, match='Unknown observation'):
            run_observation('photoluminescence_qy')

    def test_run_all(self, tmp_path):
        from validation import run_all_observations
        results = run_all_observations(str(tmp_path))
        assert results == {'blue_shift': True, 'core_shell': True, 'zr_doping': True}
        assert (tmp_path / 'zr_doping').is_dir()

    def test_cli_validate(self, tmp_path, capsys):
        from cli import main
        main(['validate', 'core_shell', '-o', str(tmp_path)])
        assert 'Result: PASS' in capsys.readouterr().out


# ============================================================================
# 5. Figures
# ============================================================================

class TestFigures:
    """validation/figures.py static exports."""

    def test_plot_spectrum(self, tmp_path):
        from simulation import run_simulation
        from validation.figures import plot_spectrum
        path = tmp_path / 'sub' / 'spectrum.png'
        plot_spectrum(run_simulation(), str(path), show_reference=True)
        assert path.exists()

    def test_plot_sweep(self, tmp_path):
        from simulation import sweep, sweep_table
        from validation.figures import plot_sweep
        table = sweep_table(sweep('radius_nm', [2, 4, 6]), 'radius_nm')
        path = tmp_path / 'sweep.png'
        plot_sweep(table, 'radius_nm', str(path))
        assert path.exists()

    def test_plot_lattice(self, tmp_path):
        from physics import generate_lattice
        from validation.figures import plot_lattice
        path = tmp_path / 'lattice.png'
        plot_lattice(generate_lattice('cluster', 0.3, seed=0), str(path))
        assert path.exists()
