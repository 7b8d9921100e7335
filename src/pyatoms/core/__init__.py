"""
Core module for atomic structures.

This module provides the fundamental classes:
- Atom: A single atom, standalone or a view into an Atoms object
- Atoms: Collection of atoms with columnar per-atom arrays
- Cell: Unit cell with fractional/cartesian conversion
- ElementRegistry: Database of chemical element properties
"""

from .atom import Atom
from .atoms import Atoms, parse_formula
from .cell import Cell
from .element_registry import ElementData, ElementRegistry, elements
from .errors import (
    AtomError,
    DetachedAtomError,
    IllegalDeletionError,
    ShapeMismatchError,
    UnknownFieldError,
    UnknownSymbolError,
)
from .fields import FIELD_NAMES, AtomField, FieldSpec
from .schemas import AtomConfig, StructureConfig

__all__ = [
    # Classes
    "Atom",
    "Atoms",
    "Cell",
    "ElementData",
    "ElementRegistry",
    "AtomConfig",
    "StructureConfig",
    # Field table
    "AtomField",
    "FieldSpec",
    "FIELD_NAMES",
    # Singleton instance
    "elements",
    # Functions
    "parse_formula",
    # Errors
    "AtomError",
    "DetachedAtomError",
    "IllegalDeletionError",
    "ShapeMismatchError",
    "UnknownFieldError",
    "UnknownSymbolError",
]
