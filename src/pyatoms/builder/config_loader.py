"""
Configuration loader for YAML-based structure setup.

Provides functions to load an Atoms object from a YAML structure file
and to write one back out.
"""
import logging
from pathlib import Path
from typing import Any, Dict, Union

import numpy as np
import yaml

from pyatoms.core import Atom, Atoms, AtomConfig, StructureConfig

logger = logging.getLogger(__name__)


def load_yaml(path: Union[str, Path]) -> Dict[str, Any]:
    """
    Load YAML configuration file.

    Args:
        path: Path to YAML file.

    Returns:
        Dictionary with configuration (empty for an empty file).
    """
    with open(path, "r") as f:
        config = yaml.safe_load(f)
    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ValueError(f"{path}: top level of a structure file must be a mapping")
    return config


def _build_atom(atom_config: AtomConfig) -> Atom:
    """Create a detached Atom from its configuration."""
    position = atom_config.position
    return Atom(
        atom_config.symbol,
        position=(0.0, 0.0, 0.0) if position is None else position,
        tag=atom_config.tag,
        momentum=atom_config.momentum,
        mass=atom_config.mass,
        magmom=atom_config.magmom,
        charge=atom_config.charge,
    )


def build_atoms_from_config(config: Union[Dict[str, Any], StructureConfig]) -> Atoms:
    """
    Build an Atoms object from a configuration.

    Args:
        config: Configuration dictionary (typically from YAML) or a
            StructureConfig.

    Returns:
        Atoms with one atom per entry of ``atoms``.

    Example config:
        cell: [4.05, 4.05, 4.05]
        pbc: true
        info:
          name: fcc-al
        atoms:
          - symbol: Al
            position: [0.0, 0.0, 0.0]
          - symbol: Al
            scaled_position: [0.5, 0.5, 0.0]
            magmom: 1.0
    """
    if not isinstance(config, StructureConfig):
        config = StructureConfig.from_dict(config)

    atoms = Atoms(
        [_build_atom(a) for a in config.atoms],
        cell=config.cell,
        pbc=config.pbc,
        info=config.info,
    )
    # Scaled positions need the cell, so they are applied through the views.
    for atom, atom_config in zip(atoms, config.atoms):
        if atom_config.scaled_position is not None:
            atom.scaled_position = atom_config.scaled_position
    return atoms


def load_atoms(path: Union[str, Path]) -> Atoms:
    """Load an Atoms object from a YAML structure file."""
    atoms = build_atoms_from_config(load_yaml(path))
    logger.info("Loaded %d atoms (%s) from %s", len(atoms),
                atoms.get_chemical_formula(), path)
    return atoms


def _plain(value: Any) -> Any:
    """Convert numpy values to plain Python for YAML output."""
    return np.asarray(value).tolist()


def atoms_to_config(atoms: Atoms) -> StructureConfig:
    """
    Describe an Atoms object as a StructureConfig.

    Only fields that are explicitly set are written, so a structure
    without tags produces no tag entries.
    """
    atom_configs = []
    for atom in atoms:
        optional = {}
        for name in ("tag", "momentum", "mass", "magmom", "charge"):
            value = atom.get_raw(name)
            if value is not None:
                optional[name] = _plain(value)
        atom_configs.append(
            AtomConfig(symbol=atom.symbol, position=_plain(atom.position), **optional)
        )

    pbc = atoms.pbc.tolist()
    return StructureConfig(
        atoms=atom_configs,
        cell=None if atoms.cell.is_singular() else atoms.cell.tolist(),
        pbc=pbc[0] if len(set(pbc)) == 1 else pbc,
        info=dict(atoms.info),
    )


def save_atoms(atoms: Atoms, path: Union[str, Path]) -> None:
    """Write an Atoms object to a YAML structure file."""
    with open(path, "w") as f:
        yaml.safe_dump(atoms_to_config(atoms).to_dict(), f, sort_keys=False)
    logger.info("Saved %d atoms to %s", len(atoms), path)
