#!/usr/bin/env python
"""
AgGaS2 Quantum-Dot Emission Lab CLI
===================================
Usage:  python cli.py [-v] <command> [options]
"""

import sys, os, argparse, json, logging, numpy as np

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

logger = logging.getLogger('cli')

# Short names accepted by `sweep`
PARAM_ALIASES = {
    'radius': 'radius_nm',
    'time':   'reaction_time_min',
    'zr':     'zr_concentration_mmol',
    'fwhm':   'fwhm_nm',
    'shell':  'is_core_shell',
}


# ── helpers ──────────────────────────────────────────────────────────────
def _header(title):
    print(f"\n{'='*50}")
    print(f"  {title}")
    print(f"{'='*50}\n")


def _configure_logging(verbose):
    level = logging.DEBUG if verbose >= 2 else logging.INFO if verbose == 1 else logging.WARNING
    logging.basicConfig(
        level=level,
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
    )


def _inputs_from_args(args):
    """Preset (or defaults) overridden by any explicit flags."""
    from simulation.inputs import SimulationInputs

    inputs = SimulationInputs.from_preset(args.preset) if args.preset else SimulationInputs()
    overrides = {
        'radius_nm': args.radius,
        'reaction_time_min': args.time,
        'zr_concentration_mmol': args.zr,
        'fwhm_nm': args.fwhm,
        'is_core_shell': args.core_shell,
    }
    for name, value in overrides.items():
        if value is not None:
            setattr(inputs, name, value)
    return inputs


def _model_from_args(args):
    """Model constants from --model, or the default fit."""
    from physics.model_config import DEFAULT_MODEL, ModelConfig

    if not getattr(args, 'model', None):
        return DEFAULT_MODEL
    try:
        return ModelConfig.load(args.model)
    except (OSError, ValueError, TypeError) as e:
        _fail(f"cannot load model constants from {args.model}: {e}")


def _fail(msg):
    print(f"  ERROR: {msg}")
    sys.exit(1)


# ── commands ─────────────────────────────────────────────────────────────

def cmd_test(args):
    """Run quick module self-checks."""
    _header("TEST SUITE")
    ok = fail = 0

    def check(name, fn):
        nonlocal ok, fail
        try:
            fn(); ok += 1; print(f"  PASS  {name}")
        except Exception as e:
            fail += 1; print(f"  FAIL  {name}: {e}")

    def expect(cond, msg):
        if not cond:
            raise ValueError(msg)

    from materials import cmf_weights
    from materials.reference_data import verify_data
    from physics import (generate_gaussian, excitation_spectrum, compute_emission,
                         composite_spectrum, spectrum_to_color, estimate_cri,
                         generate_lattice)
    from simulation import run_simulation, SimulationInputs

    check("CIE table",      lambda: expect(verify_data() and cmf_weights(1000) == (0.0, 0.0, 0.0), "bad table"))
    check("Gaussian",       lambda: expect(generate_gaussian(500, 30).intensity_at(500) == 1.0, "peak != 1"))
    check("Excitation",     lambda: expect(excitation_spectrum() is excitation_spectrum(), "not cached"))
    check("Emission",       lambda: expect(compute_emission(3.5).peak_wavelength_nm == 610.5, "peak != 610.5"))
    check("Composite",      lambda: expect(composite_spectrum(600, 35, 0.3).intensity_at(470) == 1.5, "dopant != 1.5"))
    check("Colour",         lambda: expect(spectrum_to_color(generate_gaussian(600, 40)).rgb[0] == 255, "not red"))
    check("CRI",            lambda: expect(estimate_cri(excitation_spectrum()) == 60, "CRI != 60"))
    check("Pipeline",       lambda: expect(run_simulation(SimulationInputs()).cri >= 60, "CRI < 60"))
    check("Presets",        lambda: [SimulationInputs.from_preset(n).validate() for n in SimulationInputs.list_presets()])
    check("Lattice",        lambda: expect(len(generate_lattice('unit', seed=0).atoms) == 16, "atoms != 16"))

    print(f"\n  {ok} passed, {fail} failed")
    if fail:
        sys.exit(1)


def cmd_simulate(args):
    """Run the emission pipeline for one parameter set."""
    from simulation.inputs import InputValidationError
    from simulation.pipeline import run_simulation, compare_to_reference

    config = _model_from_args(args)
    try:
        inputs = _inputs_from_args(args)
        result = run_simulation(inputs, config, validate=True)
    except (InputValidationError, FileNotFoundError) as e:
        _fail(e)

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
        return

    _header("EMISSION SIMULATION")
    print(f"  Inputs:   {result.inputs}")
    print()
    print(f"  {'Energy':22s}  {result.energy_eV:.3f} eV")
    print(f"  {'Peak wavelength':22s}  {result.peak_wavelength_nm:.1f} nm")
    print(f"  {'Display colour':22s}  {result.color.display_color}  ({result.color.hex})")
    print(f"  {'Chromaticity (x, y)':22s}  ({result.color.chromaticity_x:.4f}, "
          f"{result.color.chromaticity_y:.4f})")
    print(f"  {'CRI (estimate)':22s}  {result.cri}")

    if args.compare:
        cmp = compare_to_reference(result)
        print(f"\n  --- vs {cmp['reference_label']} ---")
        print(f"    {'Peak':20s}  {cmp['peak_nm']:.1f} nm vs {cmp['reference_peak_nm']:.1f} nm "
              f"({cmp['delta_peak_nm']:+.1f})")
        print(f"    {'CRI':20s}  {cmp['cri']} vs {cmp['reference_cri']} "
              f"({cmp['delta_cri']:+.1f})")

    if args.plot:
        from validation.figures import plot_spectrum
        plot_spectrum(result, args.plot, show_reference=args.compare)

    if args.save:
        from simulation.session import SessionManager
        from validation.figures import plot_spectrum

        sm = SessionManager()
        session = sm.create_session(label=result.inputs.preset_name or 'custom')
        sm.save_inputs(session, result.inputs)
        sm.save_result(session, result)
        sm.save_spectrum_csv(session, result)
        plot_spectrum(result, os.path.join(session, 'plots', 'spectrum.png'),
                      show_reference=args.compare)
        print(f"\n  Session dir: {session}")


def cmd_sweep(args):
    """Vary one input and tabulate peak, energy, colour and CRI."""
    from simulation.inputs import SimulationInputs
    from simulation.pipeline import sweep, sweep_table

    parameter = PARAM_ALIASES.get(args.parameter, args.parameter)
    if parameter == 'is_core_shell':
        values = [False, True]
    else:
        if None in (args.start, args.stop, args.step):
            _fail(f"sweep {args.parameter} needs START STOP STEP")
        if args.step <= 0:
            _fail("STEP must be positive")
        values = [float(v) for v in np.arange(args.start, args.stop + args.step / 2, args.step)]

    config = _model_from_args(args)
    try:
        base = SimulationInputs.from_preset(args.preset) if args.preset else SimulationInputs()
        results = sweep(parameter, values, base, config, validate=True)
    except (ValueError, FileNotFoundError) as e:
        _fail(e)
    table = sweep_table(results, parameter)

    _header(f"SWEEP: {parameter}")
    print(f"  {parameter:>22}  {'E (eV)':>8}  {'Peak (nm)':>9}  {'x':>7}  {'y':>7}  {'CRI':>4}")
    print(f"  {'-'*22}  {'-'*8}  {'-'*9}  {'-'*7}  {'-'*7}  {'-'*4}")
    for i in range(len(results)):
        print(f"  {str(table[parameter][i]):>22}  {table['energy_eV'][i]:8.3f}  "
              f"{table['peak_wavelength_nm'][i]:9.1f}  {table['chromaticity_x'][i]:7.4f}  "
              f"{table['chromaticity_y'][i]:7.4f}  {table['cri'][i]:4d}")

    if args.plot:
        from validation.figures import plot_sweep
        plot_sweep(table, parameter, args.plot)


def cmd_lattice(args):
    """Generate the AgGaS2 crystal structure."""
    from physics.lattice import generate_lattice

    _header(f"LATTICE ({args.mode})")
    try:
        lattice = generate_lattice(args.mode, args.zr, seed=args.seed)
    except ValueError as e:
        _fail(e)

    print(f"  Atoms: {len(lattice.atoms)},  Bonds: {len(lattice.bonds)}")
    for species, n in sorted(lattice.species_counts().items()):
        print(f"    {species:4s}  {n}")

    if args.json:
        print(json.dumps(lattice.to_dict(), indent=2))
    if args.plot:
        from validation.figures import plot_lattice
        plot_lattice(lattice, args.plot)


def cmd_presets(args):
    """List or inspect available presets."""
    from simulation.inputs import SimulationInputs

    if args.name:
        _header(f"PRESET: {args.name}")
        try:
            inputs = SimulationInputs.from_preset(args.name)
        except FileNotFoundError as e:
            _fail(e)
        print(inputs.to_json())
    else:
        _header("AVAILABLE PRESETS")
        for name in SimulationInputs.list_presets():
            inputs = SimulationInputs.from_preset(name)
            print(f"  {name:20s}  {inputs.description or '(no description)'}")


def cmd_validate(args):
    """Check the model against experimental observations & generate figures."""
    from validation import OBSERVATIONS, run_observation, run_all_observations, list_observations

    if args.list:
        _header("AVAILABLE OBSERVATIONS")
        for name, label, ref in list_observations():
            print(f"  {name:20s}  {label}")
            print(f"  {' '*20}  {ref}")
        return

    if args.name:
        _header(f"VALIDATE: {args.name}")
        out = args.output or os.path.join('workspace', f'validation_{args.name}')
        try:
            passed = run_observation(args.name, out)
        except ValueError as e:
            _fail(e)
        print(f"\n  Result: {'PASS' if passed else 'FAIL'}")
    else:
        _header("VALIDATE ALL OBSERVATIONS")
        base = args.output or os.path.join('workspace', 'validation')
        results = run_all_observations(base)
        print("\n" + "=" * 50)
        print("  SUMMARY")
        print("=" * 50)
        for name, passed in results.items():
            label = OBSERVATIONS[name]['label']
            print(f"  {'PASS' if passed else 'FAIL'}  {label}")
        total = sum(results.values())
        print(f"\n  {total}/{len(results)} observations passed")
        passed = total == len(results)

    if not passed:
        sys.exit(1)


def cmd_config(args):
    """Show the model constants."""
    from physics.model_config import DEFAULT_MODEL, ModelConfig

    cfg = ModelConfig.load(args.load) if args.load else DEFAULT_MODEL
    if args.save:
        cfg.save(args.save)
        print(f"  Saved: {args.save}")
        return

    _header("MODEL CONSTANTS")
    for k, v in cfg.to_dict().items():
        print(f"  {k:28s}  {v}")


# ── parser ───────────────────────────────────────────────────────────────

def build_parser():
    p = argparse.ArgumentParser(
        prog='aggas2-lab',
        description='AgGaS2 Quantum-Dot Emission Lab CLI')
    p.add_argument('-v', '--verbose', action='count', default=0,
                   help='Log INFO (-v) or DEBUG (-vv) to stderr')
    sub = p.add_subparsers(dest='command', help='command')

    # test
    sub.add_parser('test', help='Run quick module self-checks')

    # simulate
    s = sub.add_parser('simulate', help='Run the emission pipeline')
    s.add_argument('--preset', help='Start from a preset')
    s.add_argument('--radius', type=float, help='Particle radius (nm)')
    s.add_argument('--time', type=float, help='Reaction time (min)')
    s.add_argument('--zr', type=float, help='Zr concentration (mmol)')
    s.add_argument('--core-shell', action=argparse.BooleanOptionalAction, default=None,
                   help='ZnS shell (--no-core-shell overrides a preset)')
    s.add_argument('--fwhm', type=float, help='Emission FWHM (nm)')
    s.add_argument('--json', action='store_true', help='Print result as JSON')
    s.add_argument('--plot', help='Save spectrum figure to file')
    s.add_argument('--compare', action='store_true', help='Compare to a traditional LED')
    s.add_argument('--save', action='store_true', help='Export to a session directory')
    s.add_argument('--model', help='Model constants JSON (see `config --save`)')

    # sweep
    sw = sub.add_parser('sweep', help='Sweep one input')
    sw.add_argument('parameter', help='radius | time | zr | fwhm | shell (or field name)')
    sw.add_argument('start', type=float, nargs='?')
    sw.add_argument('stop', type=float, nargs='?')
    sw.add_argument('step', type=float, nargs='?')
    sw.add_argument('--preset', help='Inputs held fixed')
    sw.add_argument('--plot', help='Save sweep figure to file')
    sw.add_argument('--model', help='Model constants JSON (see `config --save`)')

    # lattice
    la = sub.add_parser('lattice', help='Generate crystal structure')
    la.add_argument('--mode', choices=['unit', 'cluster'], default='unit')
    la.add_argument('--zr', type=float, default=0.0, help='Zr concentration (mmol)')
    la.add_argument('--seed', type=int, help='Random seed for Zr substitution')
    la.add_argument('--json', action='store_true', help='Print atoms and bonds as JSON')
    la.add_argument('--plot', help='Save 3D figure to file')

    # presets
    ps = sub.add_parser('presets', help='List/inspect presets')
    ps.add_argument('name', nargs='?', help='Preset to inspect')

    # validate
    va = sub.add_parser('validate', help='Check experimental observations & generate figures')
    va.add_argument('name', nargs='?', help='Observation key (e.g. blue_shift)')
    va.add_argument('--list', action='store_true', help='List available observations')
    va.add_argument('-o', '--output', help='Output directory')

    # config
    co = sub.add_parser('config', help='Show/save model constants')
    co.add_argument('--load', help='Load constants from JSON')
    co.add_argument('--save', help='Write constants to JSON')

    return p


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    commands = {
        'test':     cmd_test,
        'simulate': cmd_simulate,
        'sweep':    cmd_sweep,
        'lattice':  cmd_lattice,
        'presets':  cmd_presets,
        'validate': cmd_validate,
        'config':   cmd_config,
    }

    if args.command in commands:
        logger.debug("Command %s: %s", args.command, vars(args))
        commands[args.command](args)
    else:
        parser.print_help()


if __name__ == '__main__':
    main()
