"""
Builder module for loading and saving structures.

Provides YAML-based structure configuration:
- load_atoms / save_atoms: Read and write structure files
- build_atoms_from_config: Build Atoms from a configuration dictionary
"""

from .config_loader import (
    atoms_to_config,
    build_atoms_from_config,
    load_atoms,
    load_yaml,
    save_atoms,
)

__all__ = [
    "atoms_to_config",
    "build_atoms_from_config",
    "load_atoms",
    "load_yaml",
    "save_atoms",
]
