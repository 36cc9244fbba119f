"""
Comprehensive test suite for the AgGaS2 Quantum-Dot Emission Lab.

Covers: CIE table, spectral primitives, emission model, composite spectrum,
colorimetry, CRI estimate, pipeline, model constants, input validation,
presets, sweeps, session export, lattice generation and the CLI.

Run with:  pytest tests/test_suite.py -v
"""

import sys
import json
import math
import dataclasses
from pathlib import Path

import numpy as np
import pytest

# ---------------------------------------------------------------------------
# Path setup: ensure the project root is on sys.path
# ---------------------------------------------------------------------------
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(_PROJECT_ROOT))


# ============================================================================
# 1. CIE 1931 Table
# ============================================================================

class TestColorimetryTable:
    """Tests for materials/reference_data.py and materials/properties.py."""

    def test_table_shape(self):
        from materials import CIE1931_CMF, CMF_WAVELENGTHS_NM
        assert CIE1931_CMF.shape == (36, 3)
        assert CMF_WAVELENGTHS_NM[0] == 380
        assert CMF_WAVELENGTHS_NM[-1] == 730

    def test_table_is_read_only(self):
        from materials import CIE1931_CMF
        with pytest.raises(ValueError):
            CIE1931_CMF[0, 0] = 1.0

    def test_exact_row(self):
        from materials import cmf_weights, CIE1931_CMF
        assert cmf_weights(560) == tuple(float(v) for v in CIE1931_CMF[18])

    def test_rounds_half_up(self):
        from materials import cmf_index
        # 385 nm is exactly between rows; half-up picks 390 nm
        assert cmf_index(385) == 1
        assert cmf_index(555) == 18
        assert cmf_index(384.9) == 0

    @pytest.mark.parametrize('wl', [374, 735, 740, 780, 1000, 0])
    def test_outside_table_is_zero(self, wl):
        from materials import cmf_weights
        assert cmf_weights(wl) == (0.0, 0.0, 0.0)

    def test_edges_inside(self):
        from materials import cmf_index
        assert cmf_index(376) == 0       # rounds up to 380
        assert cmf_index(734) == 35      # rounds down to 730

    def test_vectorised_lookup(self):
        from materials import cmf_weights_array, cmf_weights
        wl = np.array([380.0, 555.0, 780.0])
        w = cmf_weights_array(wl)
        assert w.shape == (3, 3)
        assert tuple(w[1]) == cmf_weights(555)
        assert np.all(w[2] == 0)

    def test_y_bar_peaks_near_555(self):
        from materials import CIE1931_CMF, CMF_WAVELENGTHS_NM
        assert 550 <= CMF_WAVELENGTHS_NM[np.argmax(CIE1931_CMF[:, 1])] <= 560

    def test_bulk_bandgap(self):
        from materials import bulk_bandgap
        assert bulk_bandgap('AgGaS2') == pytest.approx(2.73)

    def test_unknown_material(self):
        from materials import get_material
        with pytest.raises(ValueError, match='Unknown material'):
            get_material('Unobtainium')

    def test_list_materials(self):
        from materials import list_materials
        assert 'AgGaS2' in list_materials()
        assert 'ZnS' in list_materials()


class TestConstants:
    """Tests for utils/constants.py."""

    def test_conversions(self):
        from utils import nm_to_eV, eV_to_nm, HC_EV_NM
        assert HC_EV_NM == 1240.0
        assert eV_to_nm(2.48) == pytest.approx(500.0)
        assert nm_to_eV(eV_to_nm(2.2)) == pytest.approx(2.2)

    def test_codata_close_to_model(self):
        from utils import HC_EV_NM, HC_EV_NM_CODATA
        assert HC_EV_NM_CODATA == pytest.approx(HC_EV_NM, rel=1e-3)


# ============================================================================
# 2. Spectral Primitives
# ============================================================================

class TestSpectralPrimitives:
    """Tests for physics/spectra.py."""

    def test_grid(self):
        from physics import DEFAULT_MODEL
        grid = DEFAULT_MODEL.wavelength_grid()
        assert DEFAULT_MODEL.n_samples == 81
        assert grid[0] == 380 and grid[-1] == 780
        assert np.all(np.diff(grid) == 5)

    def test_gaussian_peak_normalised(self):
        from physics import generate_gaussian
        spec = generate_gaussian(500, 30)
        assert len(spec) == 81
        assert spec.intensity_at(500) == 1.0
        assert spec.intensity.max() == 1.0

    def test_gaussian_half_max(self):
        from physics import generate_gaussian
        # centre 500, FWHM 30: 515 nm is at half the width
        spec = generate_gaussian(500, 30)
        sigma = 30 / 2.355
        expected = math.exp(-15 ** 2 / (2 * sigma ** 2))
        assert spec.intensity_at(515) == pytest.approx(expected)
        assert spec.intensity_at(515) == pytest.approx(0.5, abs=1e-3)

    def test_gaussian_off_grid_centre(self):
        from physics import generate_gaussian
        spec = generate_gaussian(502.5, 20)
        assert spec.intensity.max() < 1.0
        assert spec.intensity_at(500) == pytest.approx(spec.intensity_at(505))

    def test_gaussian_symmetric(self):
        from physics import generate_gaussian
        spec = generate_gaussian(580, 40)
        assert spec.intensity_at(560) == pytest.approx(spec.intensity_at(600))

    def test_excitation_spectrum(self):
        from physics import excitation_spectrum, generate_gaussian
        pump = excitation_spectrum()
        assert pump == generate_gaussian(455, 20)
        assert pump.peak_wavelength_nm() == 455

    def test_excitation_spectrum_cached(self):
        from physics import excitation_spectrum
        assert excitation_spectrum() is excitation_spectrum()

    def test_spectrum_read_only(self):
        from physics import generate_gaussian
        spec = generate_gaussian(500, 30)
        with pytest.raises(ValueError):
            spec.intensity[0] = 5.0

    def test_spectrum_shape_mismatch(self):
        from physics import Spectrum
        with pytest.raises(ValueError):
            Spectrum([380, 385], [1.0])

    def test_iteration_yields_samples(self):
        from physics import generate_gaussian, WavelengthSample
        spec = generate_gaussian(500, 30)
        samples = list(spec)
        assert isinstance(samples[0], WavelengthSample)
        assert samples[0].wavelength_nm == 380.0
        assert samples[-1].wavelength_nm == 780.0

    def test_to_records(self):
        from physics import generate_gaussian
        recs = generate_gaussian(500, 30).to_records()
        assert len(recs) == 81
        assert set(recs[0]) == {'wavelength_nm', 'intensity'}

    def test_intensity_at_off_grid_raises(self):
        from physics import generate_gaussian
        with pytest.raises(KeyError):
            generate_gaussian(500, 30).intensity_at(501)

    def test_mix_spectra(self):
        from physics import generate_gaussian, mix_spectra
        a = generate_gaussian(500, 30)
        b = generate_gaussian(600, 30)
        mixed = mix_spectra(a, b, 0.5, 2.0)
        np.testing.assert_allclose(mixed.intensity, 0.5 * a.intensity + 2.0 * b.intensity)

    def test_mix_spectra_grid_mismatch(self):
        from physics import Spectrum, generate_gaussian, mix_spectra
        short = Spectrum([380.0, 385.0], [0.0, 1.0])
        with pytest.raises(ValueError, match='grids differ'):
            mix_spectra(generate_gaussian(500, 30), short)


# ============================================================================
# 3. Emission Model
# ============================================================================

class TestEmissionModel:
    """Tests for physics/qd_emission.py."""

    def test_literal_default(self):
        from physics import compute_emission
        energy = 2.73 + 0.8 / 12.25 - 0.3 / 3.5 - (0.65 + 0.1 / 3.5)
        e = compute_emission(3.5, 30, False)
        assert e.energy_eV == round(energy, 3) == 2.031
        assert e.peak_wavelength_nm == round(1240 / energy, 1) == 610.5

    def test_long_reaction(self):
        from physics import compute_emission
        e = compute_emission(3.5, 90)
        assert e.energy_eV == pytest.approx(2.201)
        assert e.peak_wavelength_nm == pytest.approx(563.4)

    def test_no_ramp_before_reference_time(self):
        from physics import emission_energy
        assert emission_energy(3.5, 20) == emission_energy(3.5, 30)

    def test_core_shell_lowers_energy_by_009(self):
        from physics import emission_energy, compute_emission
        for r in (2.0, 3.0, 3.5, 4.5, 6.0):
            bare = emission_energy(r, 30, False)
            shell = emission_energy(r, 30, True)
            assert bare - shell == pytest.approx(0.09, abs=1e-12)
            assert (compute_emission(r, 30, False).energy_eV
                    - compute_emission(r, 30, True).energy_eV) == pytest.approx(0.09, abs=1.5e-3)

    def test_core_shell_red_shift(self):
        from physics import compute_emission
        assert compute_emission(3.5, 30, True).peak_wavelength_nm == pytest.approx(638.8)
        assert compute_emission(3.5, 90, True).peak_wavelength_nm == pytest.approx(587.4)

    @pytest.mark.parametrize('r', [2.0, 2.5, 3.5, 5.0, 6.0])
    def test_reaction_time_blue_shift(self, r):
        from physics import compute_emission
        times = np.arange(30, 91, 5)
        energies = [compute_emission(r, t).energy_eV for t in times]
        wavelengths = [compute_emission(r, t).peak_wavelength_nm for t in times]
        # energy never falls and wavelength never rises with reaction time
        assert all(b >= a for a, b in zip(energies, energies[1:]))
        assert all(b <= a for a, b in zip(wavelengths, wavelengths[1:]))

    def test_smaller_dots_emit_bluer(self):
        from physics import compute_emission
        assert compute_emission(2.0).peak_wavelength_nm < compute_emission(6.0).peak_wavelength_nm

    def test_clamped_low(self):
        from physics import compute_emission
        assert compute_emission(0.5).peak_wavelength_nm == 400.0

    def test_clamped_high(self):
        from physics import compute_emission, DEFAULT_MODEL
        cfg = DEFAULT_MODEL.replace(bulk_bandgap_eV=2.0)
        assert compute_emission(3.5, config=cfg).peak_wavelength_nm == 700.0

    def test_zero_radius_raises(self):
        from physics import compute_emission
        with pytest.raises(ZeroDivisionError):
            compute_emission(0)

    def test_energy_terms(self):
        from physics.qd_emission import energy_terms
        t = energy_terms(2.0)
        assert t['confinement'] == pytest.approx(0.2)
        assert t['coulomb'] == pytest.approx(0.15)
        assert t['defect'] == pytest.approx(0.7)


# ============================================================================
# 4. Composite Spectrum
# ============================================================================

class TestCompositeSpectrum:
    """Tests for composite_spectrum in physics/spectra.py."""

    @pytest.mark.parametrize('wl,fwhm', [(610.5, 35), (520, 20), (455, 80)])
    def test_undoped_equals_gaussian(self, wl, fwhm):
        from physics import composite_spectrum, generate_gaussian
        assert np.array_equal(composite_spectrum(wl, fwhm, 0).intensity,
                              generate_gaussian(wl, fwhm).intensity)

    def test_full_doping_470_is_exactly_15(self):
        from physics import composite_spectrum
        spec = composite_spectrum(610.5, 35, 0.3)
        assert spec.intensity_at(470) == 1.5
        assert spec.intensity[18] == 1.5
        assert spec.peak_wavelength_nm() == 470

    def test_full_doping_quenches_host(self):
        from physics import composite_spectrum
        spec = composite_spectrum(610.5, 35, 0.3)
        assert spec.intensity_at(610) < 1e-6

    def test_above_max_concentration_saturates(self):
        from physics import composite_spectrum
        assert composite_spectrum(600, 35, 0.6) == composite_spectrum(600, 35, 0.3)

    def test_half_doping(self):
        from physics import composite_spectrum, generate_gaussian
        spec = composite_spectrum(600, 35, 0.15)
        expected = 0.5 * generate_gaussian(600, 35).intensity + 0.75 * generate_gaussian(470, 25).intensity
        np.testing.assert_allclose(spec.intensity, expected)

    def test_normalized_fraction(self):
        from physics import normalized_dopant_fraction
        assert normalized_dopant_fraction(0.0) == 0.0
        assert normalized_dopant_fraction(0.15) == pytest.approx(0.5)
        assert normalized_dopant_fraction(1.0) == 1.0


# ============================================================================
# 5. Colorimetry
# ============================================================================

class TestColorimetry:
    """Tests for physics/colorimetry.py."""

    def test_dark_spectrum_is_black(self):
        from physics import Spectrum, DEFAULT_MODEL, spectrum_to_color
        dark = Spectrum(DEFAULT_MODEL.wavelength_grid(), np.zeros(81))
        c = spectrum_to_color(dark)
        assert c.display_color == 'rgb(0,0,0)'
        assert (c.chromaticity_x, c.chromaticity_y) == (0.0, 0.0)

    def test_light_beyond_table_is_black(self):
        from physics import generate_gaussian, spectrum_to_color
        # only the 780 nm sample is lit, and it lies outside the table
        c = spectrum_to_color(generate_gaussian(780, 1))
        assert c.rgb == (0, 0, 0)

    def test_green_monochromatic(self):
        from physics import generate_gaussian, spectrum_to_color
        c = spectrum_to_color(generate_gaussian(555, 1))
        assert c.chromaticity_y > c.chromaticity_x
        assert c.rgb[1] == 255
        assert c.display_color == 'rgb({},{},{})'.format(*c.rgb)

    def test_red_emitter(self):
        from physics import generate_gaussian, spectrum_to_color
        c = spectrum_to_color(generate_gaussian(640, 30))
        assert c.rgb[0] == 255
        assert c.rgb[0] > c.rgb[1]

    def test_blue_emitter(self):
        from physics import generate_gaussian, spectrum_to_color
        c = spectrum_to_color(generate_gaussian(450, 20))
        assert c.rgb[2] == 255
        assert c.chromaticity_y < 0.1

    def test_chromaticity_rounded(self):
        from physics import generate_gaussian, spectrum_to_color
        c = spectrum_to_color(generate_gaussian(520, 35))
        assert c.chromaticity_x == round(c.chromaticity_x, 4)
        assert c.chromaticity_y == round(c.chromaticity_y, 4)

    def test_scaling_invariance_of_chromaticity(self):
        from physics import Spectrum, generate_gaussian, spectrum_to_color
        a = generate_gaussian(580, 35)
        b = Spectrum(a.wavelength_nm, a.intensity * 0.25)
        assert spectrum_to_color(a).chromaticity_x == spectrum_to_color(b).chromaticity_x

    def test_rgb_in_range(self):
        from physics import generate_gaussian, spectrum_to_color
        for centre in range(380, 781, 20):
            rgb = spectrum_to_color(generate_gaussian(centre, 35)).rgb
            assert all(0 <= ch <= 255 for ch in rgb)

    def test_hex(self):
        from physics import ColorResult
        c = ColorResult('rgb(255,128,0)', 0.5, 0.4, (255, 128, 0))
        assert c.hex == '#ff8000'

    def test_srgb_gamma_linear_segment(self):
        from physics.colorimetry import srgb_gamma
        assert float(srgb_gamma(0.001)) == pytest.approx(0.01292)
        assert float(srgb_gamma(1.0)) == pytest.approx(1.0)


# ============================================================================
# 6. CRI Estimate
# ============================================================================

class TestCRI:
    """Tests for physics/cri.py."""

    def test_flat_spectrum(self):
        from physics import Spectrum, DEFAULT_MODEL, estimate_cri, band_energies
        flat = Spectrum(DEFAULT_MODEL.wavelength_grid(), np.ones(81))
        bands = band_energies(flat)
        assert (bands['red'], bands['green'], bands['blue']) == (36, 18, 27)
        # balance = 18 / (81 / 3.5)
        assert estimate_cri(flat) == 91

    def test_dark_spectrum(self):
        from physics import Spectrum, DEFAULT_MODEL, estimate_cri
        assert estimate_cri(Spectrum(DEFAULT_MODEL.wavelength_grid(), np.zeros(81))) == 0

    def test_single_band_is_floor(self):
        from physics import generate_gaussian, estimate_cri
        assert estimate_cri(generate_gaussian(455, 20)) == 60

    def test_capped_at_98(self):
        from physics import Spectrum, DEFAULT_MODEL, estimate_cri
        grid = DEFAULT_MODEL.wavelength_grid()
        # heavy green, balanced red and blue: balance > 1
        inten = np.where(grid > 600, 1.0, np.where(grid > 510, 2.0, 1.0))
        assert estimate_cri(Spectrum(grid, inten)) == 98

    @pytest.mark.parametrize('centre', [400, 470, 520, 560, 600, 650, 700])
    @pytest.mark.parametrize('fwhm', [10, 35, 120])
    def test_range(self, centre, fwhm):
        from physics import generate_gaussian, estimate_cri
        assert 60 <= estimate_cri(generate_gaussian(centre, fwhm)) <= 98

    def test_band_edges(self):
        from physics import Spectrum, band_energies
        spec = Spectrum([505, 510, 515, 600, 605], [1, 2, 4, 8, 16])
        bands = band_energies(spec)
        assert bands['blue'] == 3
        assert bands['green'] == 12
        assert bands['red'] == 16


# ============================================================================
# 7. Pipeline
# ============================================================================

class TestPipeline:
    """Tests for simulation/pipeline.py."""

    def test_default_run(self):
        from simulation import run_simulation
        r = run_simulation()
        assert r.peak_wavelength_nm == 610.5
        assert r.energy_eV == 2.031
        assert len(r.spectrum) == 81
        assert 60 <= r.cri <= 98

    def test_deterministic(self):
        from simulation import run_simulation, SimulationInputs
        inputs = SimulationInputs(radius_nm=3.0, reaction_time_min=70,
                                  zr_concentration_mmol=0.12, is_core_shell=True,
                                  fwhm_nm=50)
        a = run_simulation(inputs)
        b = run_simulation(inputs)
        assert a.spectrum == b.spectrum
        assert a.to_dict() == b.to_dict()

    def test_color_from_host_cri_from_mixed(self):
        from physics import spectrum_to_color, estimate_cri
        from simulation import run_simulation, SimulationInputs
        r = run_simulation(SimulationInputs(zr_concentration_mmol=0.1))
        assert r.color == spectrum_to_color(r.host_spectrum)
        assert r.cri == estimate_cri(r.spectrum)
        assert r.spectrum != r.host_spectrum

    def test_mixed_spectrum(self):
        from physics import excitation_spectrum
        from simulation import run_simulation, SimulationInputs, intensity_factor
        r = run_simulation(SimulationInputs(zr_concentration_mmol=0.1))
        k = intensity_factor(0.1)
        assert k == pytest.approx(0.8)
        np.testing.assert_allclose(
            r.spectrum.intensity,
            r.host_spectrum.intensity * k + 0.4 * excitation_spectrum().intensity)

    def test_intensity_factor_floor(self):
        from simulation import intensity_factor
        assert intensity_factor(0.0) == 1.0
        assert intensity_factor(0.3) == pytest.approx(0.4)
        assert intensity_factor(1.0) == 0.2

    def test_inputs_not_aliased(self):
        from simulation import run_simulation, SimulationInputs
        inputs = SimulationInputs()
        r = run_simulation(inputs)
        inputs.radius_nm = 5.0
        assert r.inputs.radius_nm == 3.5

    def test_pipeline_accepts_out_of_range(self):
        from simulation import run_simulation, SimulationInputs
        r = run_simulation(SimulationInputs(radius_nm=10.0))
        assert 400 <= r.peak_wavelength_nm <= 700

    def test_validate_flag_rejects(self):
        from simulation import run_simulation, SimulationInputs, InputValidationError
        with pytest.raises(InputValidationError):
            run_simulation(SimulationInputs(radius_nm=10.0), validate=True)

    def test_to_dict_is_json_serialisable(self):
        from simulation import run_simulation
        d = json.loads(json.dumps(run_simulation().to_dict()))
        assert d['peak_wavelength_nm'] == 610.5
        assert len(d['spectrum']) == 81

    def test_compare_to_reference(self):
        from simulation import run_simulation, compare_to_reference
        cmp = compare_to_reference(run_simulation())
        assert cmp['reference_peak_nm'] == 564.0
        assert cmp['reference_cri'] == 61.5
        assert cmp['delta_peak_nm'] == pytest.approx(46.5)

    def test_custom_config(self):
        from physics import DEFAULT_MODEL
        from simulation import run_simulation, SimulationInputs
        cfg = DEFAULT_MODEL.replace(shell_shift_eV=0.0)
        a = run_simulation(SimulationInputs(is_core_shell=True), cfg)
        b = run_simulation(SimulationInputs(is_core_shell=False), cfg)
        assert a.peak_wavelength_nm == b.peak_wavelength_nm


# ============================================================================
# 8. Sweeps
# ============================================================================

class TestSweep:
    """Tests for sweep / sweep_table."""

    def test_sweep_time(self):
        from simulation import sweep, sweep_table
        results = sweep('reaction_time_min', [30, 60, 90])
        table = sweep_table(results, 'reaction_time_min')
        assert list(table['reaction_time_min']) == [30, 60, 90]
        assert np.all(np.diff(table['peak_wavelength_nm']) < 0)

    def test_sweep_shell(self):
        from simulation import sweep
        bare, shell = sweep('is_core_shell', [False, True])
        assert shell.peak_wavelength_nm > bare.peak_wavelength_nm

    def test_sweep_keeps_base(self):
        from simulation import sweep, SimulationInputs
        base = SimulationInputs(radius_nm=4.0, fwhm_nm=60)
        results = sweep('zr_concentration_mmol', [0.0, 0.3], base)
        assert all(r.inputs.radius_nm == 4.0 for r in results)
        assert base.zr_concentration_mmol == 0.0

    def test_sweep_unknown_parameter(self):
        from simulation import sweep
        with pytest.raises(ValueError, match='Cannot sweep'):
            sweep('temperature', [300])

    def test_sweep_validate_rejects_bad_point(self):
        from simulation import sweep, InputValidationError
        with pytest.raises(InputValidationError) as exc:
            sweep('radius_nm', [3.0, 0.0], validate=True)
        assert exc.value.errors[0][0] == 'radius_nm'

    def test_sweep_validate_passes_good_points(self):
        from simulation import sweep
        assert len(sweep('radius_nm', [2.0, 6.0], validate=True)) == 2


# ============================================================================
# 9. Model Constants
# ============================================================================

class TestModelConfig:
    """Tests for physics/model_config.py."""

    def test_defaults(self):
        from physics import DEFAULT_MODEL
        assert DEFAULT_MODEL.bulk_bandgap_eV == 2.73
        assert DEFAULT_MODEL.shell_shift_eV == 0.09
        assert DEFAULT_MODEL.dopant_peak_nm == 470
        assert DEFAULT_MODEL.blue_shift_eV_per_min * 60 == pytest.approx(0.17)

    def test_frozen(self):
        from physics import DEFAULT_MODEL
        with pytest.raises(dataclasses.FrozenInstanceError):
            DEFAULT_MODEL.bulk_bandgap_eV = 3.0

    def test_replace(self):
        from physics import DEFAULT_MODEL
        cfg = DEFAULT_MODEL.replace(dopant_peak_nm=480)
        assert cfg.dopant_peak_nm == 480
        assert DEFAULT_MODEL.dopant_peak_nm == 470

    def test_hashable(self):
        from physics import DEFAULT_MODEL, ModelConfig
        assert hash(DEFAULT_MODEL) == hash(ModelConfig())

    def test_save_load_roundtrip(self, tmp_path):
        from physics import ModelConfig
        cfg = ModelConfig(excitation_peak_nm=450.0)
        path = tmp_path / 'model.json'
        cfg.save(path)
        assert ModelConfig.load(path) == cfg

    def test_from_dict_ignores_unknown(self):
        from physics import ModelConfig
        cfg = ModelConfig.from_dict({'shell_shift_eV': 0.1, 'bogus': 1})
        assert cfg.shell_shift_eV == 0.1

    def test_other_config_has_own_excitation(self):
        from physics import DEFAULT_MODEL, excitation_spectrum
        cfg = DEFAULT_MODEL.replace(excitation_peak_nm=450.0)
        assert excitation_spectrum(cfg).peak_wavelength_nm() == 450


# ============================================================================
# 10. Inputs & Validation
# ============================================================================

class TestInputs:
    """Tests for simulation/inputs.py."""

    def test_defaults(self):
        from simulation import SimulationInputs
        inputs = SimulationInputs()
        assert inputs.radius_nm == 3.5
        assert inputs.reaction_time_min == 30
        assert inputs.zr_concentration_mmol == 0
        assert inputs.is_core_shell is False
        assert inputs.fwhm_nm == 35

    def test_valid_defaults(self):
        from simulation import SimulationInputs
        result = SimulationInputs().check()
        assert result['errors'] == []
        assert result['warnings'] == []

    @pytest.mark.parametrize('field,value', [
        ('radius_nm', 1.9), ('radius_nm', 6.1),
        ('reaction_time_min', 29), ('reaction_time_min', 91),
        ('zr_concentration_mmol', -0.01), ('zr_concentration_mmol', 0.31),
        ('fwhm_nm', 0),
    ])
    def test_out_of_range(self, field, value):
        from simulation import validate_inputs
        result = validate_inputs({field: value})
        assert [e[0] for e in result['errors']] == [field]

    def test_bounds_inclusive(self):
        from simulation import validate_inputs
        result = validate_inputs({'radius_nm': 2, 'reaction_time_min': 90,
                                  'zr_concentration_mmol': 0.3})
        assert result['errors'] == []

    def test_non_numeric(self):
        from simulation import validate_inputs
        result = validate_inputs({'radius_nm': 'big'})
        assert 'Not a number' in result['errors'][0][2]

    def test_numeric_string_rejected(self):
        from simulation import validate_inputs, SimulationInputs, InputValidationError
        assert validate_inputs({'radius_nm': '3.5'})['errors']
        with pytest.raises(InputValidationError):
            SimulationInputs(radius_nm='3.5').validate()

    def test_bool_is_not_a_number(self):
        from simulation import validate_inputs
        assert validate_inputs({'radius_nm': True})['errors']

    def test_core_shell_must_be_bool(self):
        from simulation import validate_inputs
        assert validate_inputs({'is_core_shell': 1})['errors']
        assert not validate_inputs({'is_core_shell': True})['errors']

    def test_unknown_field_passes(self):
        from simulation import validate_inputs
        result = validate_inputs({'colour': 'teal'})
        assert result['valid'] == [('colour', 'teal', 'unknown_field')]

    def test_clamp_warning(self):
        from physics import DEFAULT_MODEL
        from simulation import validate_inputs
        cfg = DEFAULT_MODEL.replace(bulk_bandgap_eV=2.0)
        result = validate_inputs({'radius_nm': 3.5}, cfg)
        assert result['warnings'] and 'clamped' in result['warnings'][0][2]

    def test_narrow_line_warning(self):
        from simulation import validate_inputs
        result = validate_inputs({'zr_concentration_mmol': 0.1, 'fwhm_nm': 10})
        assert result['warnings'][0][0] == 'fwhm_nm'

    def test_validate_raises(self):
        from simulation import SimulationInputs, InputValidationError
        with pytest.raises(InputValidationError) as exc:
            SimulationInputs(radius_nm=0).validate()
        assert exc.value.errors[0][0] == 'radius_nm'
        assert isinstance(exc.value, ValueError)

    def test_validate_returns_self(self):
        from simulation import SimulationInputs
        inputs = SimulationInputs()
        assert inputs.validate() is inputs

    def test_report(self):
        from simulation import validate_inputs, format_validation_report
        text = format_validation_report(validate_inputs({'radius_nm': 9}))
        assert 'ERRORS (1)' in text
        assert 'radius_nm' in text

    def test_save_load_roundtrip(self, tmp_path):
        from simulation import SimulationInputs
        inputs = SimulationInputs(radius_nm=4.2, is_core_shell=True)
        path = tmp_path / 'inputs.json'
        inputs.save(path)
        assert SimulationInputs.load(path) == inputs

    def test_from_dict_ignores_unknown(self):
        from simulation import SimulationInputs
        inputs = SimulationInputs.from_dict({'radius_nm': 5.0, 'legacy': 1})
        assert inputs.radius_nm == 5.0


# ============================================================================
# 11. Presets
# ============================================================================

class TestPresets:
    """Tests for simulation/presets/*.json."""

    def test_list(self):
        from simulation import SimulationInputs
        names = SimulationInputs.list_presets()
        for expected in ('default', 'long_reaction', 'core_shell', 'zr_doped', 'white_led'):
            assert expected in names

    def test_all_presets_valid(self):
        from simulation import SimulationInputs
        for name in SimulationInputs.list_presets():
            inputs = SimulationInputs.from_preset(name)
            assert inputs.preset_name == name
            inputs.validate()

    def test_default_preset_matches_defaults(self):
        from simulation import SimulationInputs
        preset = SimulationInputs.from_preset('default')
        assert dataclasses.replace(preset, preset_name='', description='') == SimulationInputs()

    def test_long_reaction(self):
        from simulation import SimulationInputs, run_simulation
        r = run_simulation(SimulationInputs.from_preset('long_reaction'))
        assert r.peak_wavelength_nm == pytest.approx(563.4)

    def test_unknown_preset(self):
        from simulation import SimulationInputs
        with pytest.raises(FileNotFoundError, match='Available'):
            SimulationInputs.from_preset('nope')


# ============================================================================
# 12. Session Manager
# ============================================================================

class TestSessionManager:
    """Tests for simulation/session.py."""

    def test_create_session_creates_subdirs(self, tmp_path):
        from simulation import SessionManager
        sm = SessionManager(workspace=tmp_path)
        session = sm.create_session(label='test')
        assert session.exists()
        assert (session / 'data').is_dir()
        assert (session / 'plots').is_dir()
        assert session.name.endswith('_test')

    def test_unique_names(self, tmp_path):
        from simulation import SessionManager
        sm = SessionManager(workspace=tmp_path)
        a = sm.create_session(label='x')
        b = sm.create_session(label='x')
        assert a != b

    def test_label_sanitised(self, tmp_path):
        from simulation import SessionManager
        session = SessionManager(workspace=tmp_path).create_session(label='a/b c')
        assert session.parent == tmp_path

    def test_save_load_inputs(self, tmp_path):
        from simulation import SessionManager, SimulationInputs
        sm = SessionManager(workspace=tmp_path)
        session = sm.create_session()
        inputs = SimulationInputs(radius_nm=2.5)
        sm.save_inputs(session, inputs)
        assert sm.load_inputs(session) == inputs

    def test_save_result_and_csv(self, tmp_path):
        from simulation import SessionManager, run_simulation
        sm = SessionManager(workspace=tmp_path)
        session = sm.create_session()
        result = run_simulation()
        json_path = sm.save_result(session, result)
        csv_path = sm.save_spectrum_csv(session, result)
        assert json.loads(json_path.read_text())['cri'] == result.cri
        data = np.loadtxt(csv_path, delimiter=',', skiprows=1)
        assert data.shape == (81, 3)
        assert data[0, 0] == 380
        assert csv_path.read_text().startswith('wavelength_nm,intensity_mixed,intensity_host')

    def test_list_and_latest(self, tmp_path):
        from simulation import SessionManager
        sm = SessionManager(workspace=tmp_path)
        assert sm.list_sessions() == []
        assert sm.get_latest_session() is None
        sm.create_session()
        assert len(sm.list_sessions()) == 1

    def test_summary_and_delete(self, tmp_path):
        from simulation import SessionManager, SimulationInputs
        sm = SessionManager(workspace=tmp_path)
        session = sm.create_session()
        sm.save_inputs(session, SimulationInputs())
        summary = sm.session_summary(session)
        assert summary['has_inputs'] is True
        assert summary['n_data'] == 0
        sm.delete_session(session)
        assert not session.exists()


# ============================================================================
# 13. Lattice
# ============================================================================

class TestLattice:
    """Tests for physics/lattice.py."""

    def test_unit_cell_composition(self):
        from physics import generate_lattice
        lat = generate_lattice('unit', seed=0)
        assert len(lat.atoms) == 16
        assert lat.species_counts() == {'Ag': 4, 'Ga': 4, 'S': 8}

    def test_no_zr_without_doping(self):
        from physics import generate_lattice
        lat = generate_lattice('cluster', 0.0, seed=1)
        assert 'Zr' not in lat.species_counts()

    def test_full_substitution(self):
        from physics import generate_lattice
        # probability saturates at 1 far above the dopant maximum
        counts = generate_lattice('unit', 2.0, seed=3).species_counts()
        assert counts.get('Ga', 0) == 0
        assert counts['Zr'] == 4

    def test_seed_reproducible(self):
        from physics import generate_lattice
        a = generate_lattice('cluster', 0.3, seed=42)
        b = generate_lattice('cluster', 0.3, seed=42)
        assert a.to_dict() == b.to_dict()

    def test_cluster_cropped(self):
        from physics import generate_lattice
        from physics.lattice import CLUSTER_RADIUS
        lat = generate_lattice('cluster', seed=0)
        radii = np.linalg.norm(lat.positions(), axis=1)
        assert np.all(radii <= CLUSTER_RADIUS)
        assert 0 < len(lat.atoms) < 128

    def test_bonds(self):
        from physics import generate_lattice
        lat = generate_lattice('cluster', 0.3, seed=7)
        s_positions = {a.position for a in lat.atoms if a.species == 'S'}
        cation_positions = {a.position for a in lat.atoms if a.species != 'S'}
        assert lat.bonds
        for bond in lat.bonds:
            assert bond.length < 0.8
            assert bond.start in s_positions
            assert bond.end in cation_positions
        assert len({(b.start, b.end) for b in lat.bonds}) == len(lat.bonds)

    def test_atom_display_data(self):
        from physics import generate_lattice
        atoms = {a.species: a for a in generate_lattice('unit', 2.0, seed=0).atoms}
        assert atoms['Zr'].color == '#3b82f6'
        assert atoms['S'].label == 'Sulfur'

    def test_unknown_mode(self):
        from physics import generate_lattice
        with pytest.raises(ValueError, match='Unknown lattice mode'):
            generate_lattice('slab')

    def test_substitution_probability(self):
        from physics.lattice import substitution_probability
        assert substitution_probability(0.3) == pytest.approx(0.15)
        assert substitution_probability(0.0) == 0.0


# ============================================================================
# 14. CLI
# ============================================================================

class TestCLI:
    """Tests for cli.py."""

    def test_parser(self):
        from cli import build_parser
        args = build_parser().parse_args(['simulate', '--radius', '4', '--core-shell'])
        assert args.radius == 4.0
        assert args.core_shell is True
        assert build_parser().parse_args(['simulate']).core_shell is None

    def test_simulate_json(self, capsys):
        from cli import main
        main(['simulate', '--json'])
        out = json.loads(capsys.readouterr().out)
        assert out['peak_wavelength_nm'] == 610.5

    def test_simulate_preset_override(self, capsys):
        from cli import main
        main(['simulate', '--preset', 'long_reaction', '--core-shell', '--json'])
        out = json.loads(capsys.readouterr().out)
        assert out['inputs']['is_core_shell'] is True
        assert out['peak_wavelength_nm'] == pytest.approx(587.4)

    def test_simulate_invalid_exits(self, capsys):
        from cli import main
        with pytest.raises(SystemExit) as exc:
            main(['simulate', '--radius', '10'])
        assert exc.value.code == 1
        assert 'ERROR:' in capsys.readouterr().out

    def test_sweep(self, capsys):
        from cli import main
        main(['sweep', 'time', '30', '90', '30'])
        out = capsys.readouterr().out
        assert '563.4' in out and '610.5' in out

    def test_sweep_needs_range(self):
        from cli import main
        with pytest.raises(SystemExit):
            main(['sweep', 'radius'])

    def test_presets(self, capsys):
        from cli import main
        main(['presets'])
        assert 'white_led' in capsys.readouterr().out

    def test_config_save(self, tmp_path):
        from cli import main
        from physics import ModelConfig, DEFAULT_MODEL
        path = tmp_path / 'model.json'
        main(['config', '--save', str(path)])
        assert ModelConfig.load(path) == DEFAULT_MODEL

    def test_lattice(self, capsys):
        from cli import main
        main(['lattice', '--seed', '0'])
        assert 'Atoms: 16' in capsys.readouterr().out

    def test_sweep_out_of_range_rejected(self, capsys):
        from cli import main
        with pytest.raises(SystemExit) as exc:
            main(['sweep', 'radius', '8', '10', '1'])
        assert exc.value.code == 1
        out = capsys.readouterr().out
        assert 'ERROR:' in out and 'radius_nm' in out
        assert 'SWEEP' not in out

    def test_sweep_zero_radius_rejected(self, capsys):
        from cli import main
        with pytest.raises(SystemExit) as exc:
            main(['sweep', 'radius', '0', '6', '2'])
        assert exc.value.code == 1
        out = capsys.readouterr().out
        assert 'Below minimum' in out
        assert 'NaN' not in out

    def test_no_core_shell_overrides_preset(self, capsys):
        from cli import main
        main(['simulate', '--preset', 'core_shell', '--no-core-shell', '--json'])
        out = json.loads(capsys.readouterr().out)
        assert out['inputs']['is_core_shell'] is False
        assert out['peak_wavelength_nm'] == 610.5

    def test_simulate_with_model_file(self, tmp_path, capsys):
        from cli import main
        from physics import DEFAULT_MODEL
        path = tmp_path / 'model.json'
        DEFAULT_MODEL.replace(shell_shift_eV=0.0).save(path)
        main(['simulate', '--core-shell', '--model', str(path), '--json'])
        out = json.loads(capsys.readouterr().out)
        assert out['peak_wavelength_nm'] == 610.5

    def test_sweep_with_model_file(self, tmp_path, capsys):
        from cli import main
        from physics import DEFAULT_MODEL
        path = tmp_path / 'model.json'
        DEFAULT_MODEL.replace(blue_shift_eV_per_min=0.0).save(path)
        main(['sweep', 'time', '30', '90', '60', '--model', str(path)])
        out = capsys.readouterr().out
        assert out.count('610.5') == 2
        assert '563.4' not in out

    def test_missing_model_file(self, tmp_path, capsys):
        from cli import main
        with pytest.raises(SystemExit):
            main(['simulate', '--model', str(tmp_path / 'absent.json')])
        assert 'ERROR:' in capsys.readouterr().out
