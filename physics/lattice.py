# =============================================================================
# physics/lattice.py — Chalcopyrite AgGaS2 Point Cloud for Display
# =============================================================================
# Builds the atom and bond lists handed to a 3D renderer:
#
#   1. enumerate the 16-atom chalcopyrite basis (I-42d)
#   2. tile it into a supercell (1x1x1 'unit', 2x2x2 'cluster')
#   3. centre, stretch c by c/a = 1.8 and scale by 1.5 display units
#   4. 'cluster' only: keep atoms within a 2.2-unit sphere
#   5. swap Ga -> Zr with probability 0.15 · (c_Zr / 0.3 mmol)
#   6. bond every S to each cation (Ag, Ga, Zr) closer than 0.8 units
#
# Positions are display units, not Ångström. The spectral pipeline does not
# depend on this module; it only shares the Zr concentration input.
# =============================================================================

import logging
from collections import Counter
from dataclasses import dataclass, asdict
from typing import List, Optional, Tuple

import numpy as np
from scipy.spatial import cKDTree

from materials.reference_data import (
    CHALCOPYRITE_BASIS, ATOM_DEFS, MATERIALS, CATIONS, ANION,
)
from .model_config import ModelConfig, DEFAULT_MODEL

logger = logging.getLogger(__name__)

LATTICE_MODES = ('unit', 'cluster')

SUPERCELL = {'unit': (1, 1, 1), 'cluster': (2, 2, 2)}
DISPLAY_SCALE = 1.5           # spacing multiplier
CLUSTER_RADIUS = 2.2          # spherical crop, display units
BOND_THRESHOLD = 0.8          # S-cation cutoff, display units
MAX_SUBSTITUTION = 0.15       # Ga -> Zr probability at full loading


@dataclass(frozen=True)
class Atom:
    position: Tuple[float, float, float]
    species: str
    radius: float
    color: str
    label: str


@dataclass(frozen=True)
class Bond:
    start: Tuple[float, float, float]
    end: Tuple[float, float, float]

    @property
    def length(self) -> float:
        return float(np.linalg.norm(np.subtract(self.end, self.start)))


@dataclass
class LatticeStructure:
    """Atoms and bonds of one generated structure."""
    atoms: List[Atom]
    bonds: List[Bond]
    mode: str = 'unit'

    def positions(self) -> np.ndarray:
        """(N, 3) array of atom positions."""
        if not self.atoms:
            return np.empty((0, 3))
        return np.array([a.position for a in self.atoms])

    def species_counts(self) -> dict:
        return dict(Counter(a.species for a in self.atoms))

    def to_dict(self) -> dict:
        return {
            'mode': self.mode,
            'atoms': [asdict(a) for a in self.atoms],
            'bonds': [asdict(b) for b in self.bonds],
        }


def substitution_probability(zr_conc_mmol: float,
                             config: ModelConfig = DEFAULT_MODEL) -> float:
    """Ga -> Zr swap probability; 0.3 mmol gives 15 %."""
    return min(zr_conc_mmol / config.dopant_max_conc_mmol * MAX_SUBSTITUTION, 1.0)


def _tile_basis(mode: str) -> Tuple[np.ndarray, np.ndarray]:
    """Centred, scaled positions and species for the supercell."""
    c_over_a = MATERIALS['AgGaS2']['c_over_a_display']
    nx, ny, nz = SUPERCELL[mode]
    frac = np.array([b[:3] for b in CHALCOPYRITE_BASIS])
    species = np.array([b[3] for b in CHALCOPYRITE_BASIS])

    cells = np.array([(x, y, z) for x in range(nx) for y in range(ny) for z in range(nz)])
    pos = (cells[:, None, :] + frac[None, :, :]).reshape(-1, 3)
    species = np.tile(species, len(cells))

    center = np.array([nx / 2, ny / 2, nz / 2])
    pos = pos - center
    pos[:, 2] *= c_over_a
    return pos * DISPLAY_SCALE, species


def _find_bonds(positions: np.ndarray, species: np.ndarray) -> List[Bond]:
    """S-cation pairs closer than BOND_THRESHOLD, one bond per pair."""
    anion_idx = np.flatnonzero(species == ANION)
    cation_idx = np.flatnonzero(np.isin(species, CATIONS))
    if anion_idx.size == 0 or cation_idx.size == 0:
        return []

    tree = cKDTree(positions[cation_idx])
    bonds = []
    for i in anion_idx:
        for j in sorted(tree.query_ball_point(positions[i], BOND_THRESHOLD)):
            k = cation_idx[j]
            # query_ball_point includes the boundary; the cutoff is strict
            if np.linalg.norm(positions[i] - positions[k]) < BOND_THRESHOLD:
                bonds.append(Bond(start=tuple(float(v) for v in positions[i]),
                                  end=tuple(float(v) for v in positions[k])))
    return bonds


def generate_lattice(mode: str = 'unit', zr_conc_mmol: float = 0.0,
                     seed: Optional[int] = None,
                     config: ModelConfig = DEFAULT_MODEL) -> LatticeStructure:
    """
    Chalcopyrite AgGaS2 atoms and S-cation bonds, optionally Zr-doped.

    Args:
        mode: 'unit' (single cell) or 'cluster' (2x2x2, sphere-cropped)
        zr_conc_mmol: Zr concentration driving Ga -> Zr substitution
        seed: Seed for the substitution draw; None for a fresh draw
        config: Model constants (dopant saturation concentration)

    Returns:
        LatticeStructure

    Raises:
        ValueError: unknown mode
    """
    if mode not in LATTICE_MODES:
        raise ValueError(f"Unknown lattice mode: {mode}. Valid: {list(LATTICE_MODES)}")

    positions, species = _tile_basis(mode)

    if mode == 'cluster':
        keep = np.linalg.norm(positions, axis=1) <= CLUSTER_RADIUS
        positions, species = positions[keep], species[keep]

    rng = np.random.default_rng(seed)
    p_sub = substitution_probability(zr_conc_mmol, config)
    ga = np.flatnonzero(species == 'Ga')
    swap = ga[rng.random(ga.size) < p_sub]
    species = species.copy()
    species[swap] = 'Zr'

    atoms = [Atom(position=tuple(float(v) for v in p), species=str(s), **ATOM_DEFS[str(s)])
             for p, s in zip(positions, species)]
    bonds = _find_bonds(positions, species)

    logger.debug("Lattice %s: %d atoms (%d Zr), %d bonds",
                 mode, len(atoms), swap.size, len(bonds))
    return LatticeStructure(atoms=atoms, bonds=bonds, mode=mode)
