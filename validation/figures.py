"""
Static figure export for simulation results.

  - plot_spectrum: mixed emission spectrum filled with the emitter colour
  - plot_sweep:    peak wavelength and CRI against a swept input
  - plot_lattice:  3D scatter of a generated AgGaS2 structure

Files only (Agg backend); interactive display is left to the caller.
"""

import os
import numpy as np
import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt

from materials.reference_data import REFERENCE_LED

_AXIS_LABELS = {
    'radius_nm': 'Radius (nm)',
    'reaction_time_min': 'Reaction Time (min)',
    'zr_concentration_mmol': 'Zr Concentration (mmol)',
    'fwhm_nm': 'FWHM (nm)',
    'is_core_shell': 'ZnS Shell',
}


def _save(fig, path):
    os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
    fig.savefig(path, dpi=150, bbox_inches='tight')
    plt.close(fig)
    print(f"    Saved: {path}")
    return path


def plot_spectrum(result, path, show_reference=False, show_host=True):
    """Mixed spectrum of one SimulationResult, with peak marker."""
    wl = result.spectrum.wavelength_nm
    color = result.color.hex

    fig, ax = plt.subplots(figsize=(10, 6))
    ax.fill_between(wl, result.spectrum.intensity, color=color, alpha=0.5)
    ax.plot(wl, result.spectrum.intensity, color=color, linewidth=2,
            label=f"Mixed (CRI {result.cri})")
    if show_host:
        ax.plot(wl, result.host_spectrum.intensity, 'k--', linewidth=1,
                alpha=0.6, label='QD emission only')
    ax.axvline(result.peak_wavelength_nm, color='gray', linestyle=':',
               linewidth=1.2, label=f"Host peak {result.peak_wavelength_nm:.1f} nm")
    if show_reference:
        ax.axvline(REFERENCE_LED['peak_wavelength_nm'], color='#fbbf24',
                   linestyle='--', linewidth=1.5,
                   label=f"{REFERENCE_LED['label']} "
                         f"{REFERENCE_LED['peak_wavelength_nm']:.0f} nm")
    ax.set_xlabel('Wavelength (nm)', fontsize=12)
    ax.set_ylabel('Intensity (a.u.)', fontsize=12)
    ax.set_title(f"Emission Spectrum (E = {result.energy_eV:.3f} eV, "
                 f"{result.color.display_color})", fontsize=14, fontweight='bold')
    ax.set_xlim([wl[0], wl[-1]])
    ax.set_ylim(bottom=0)
    ax.legend(fontsize=10); ax.grid(True, alpha=0.3)
    return _save(fig, path)


def plot_sweep(table, parameter, path):
    """Peak wavelength (left) and CRI (right) against the swept input."""
    x = table[parameter].astype(float)

    fig, ax = plt.subplots(figsize=(10, 6))
    ax.plot(x, table['peak_wavelength_nm'], 'b-o', markersize=4, linewidth=1.5)
    ax.set_xlabel(_AXIS_LABELS.get(parameter, parameter), fontsize=12)
    ax.set_ylabel('Peak Wavelength (nm)', fontsize=12, color='b')
    ax2 = ax.twinx()
    ax2.plot(x, table['cri'], 'r-s', markersize=4, linewidth=1.5)
    ax2.set_ylabel('CRI (estimate)', fontsize=12, color='r')
    ax.set_title(f"Sweep: {_AXIS_LABELS.get(parameter, parameter)}",
                 fontsize=14, fontweight='bold')
    ax.grid(True, alpha=0.3)
    return _save(fig, path)


def plot_spectra_family(spectra, labels, path, title='Emission Spectra'):
    """Overlay several spectra on one axis."""
    fig, ax = plt.subplots(figsize=(10, 6))
    for spec, label in zip(spectra, labels):
        ax.plot(spec.wavelength_nm, spec.intensity, linewidth=1.5, label=label)
    ax.set_xlabel('Wavelength (nm)', fontsize=12)
    ax.set_ylabel('Intensity (a.u.)', fontsize=12)
    ax.set_title(title, fontsize=14, fontweight='bold')
    ax.legend(fontsize=10); ax.grid(True, alpha=0.3)
    return _save(fig, path)


def plot_lattice(lattice, path):
    """Atoms coloured by species, bonds as thin grey lines."""
    fig = plt.figure(figsize=(8, 8))
    ax = fig.add_subplot(projection='3d')
    for bond in lattice.bonds:
        seg = np.array([bond.start, bond.end])
        ax.plot(seg[:, 0], seg[:, 1], seg[:, 2], color='#666666',
                linewidth=0.8, alpha=0.5)
    for species in sorted({a.species for a in lattice.atoms}):
        group = [a for a in lattice.atoms if a.species == species]
        pos = np.array([a.position for a in group])
        ax.scatter(pos[:, 0], pos[:, 1], pos[:, 2], s=group[0].radius * 1500,
                   c=group[0].color, edgecolors='k', linewidths=0.3,
                   label=f"{group[0].label} ({len(group)})")
    ax.set_title(f"AgGaS2 {lattice.mode} ({len(lattice.atoms)} atoms, "
                 f"{len(lattice.bonds)} bonds)", fontsize=14, fontweight='bold')
    ax.legend(fontsize=9)
    ax.set_box_aspect((1, 1, 1))
    return _save(fig, path)
