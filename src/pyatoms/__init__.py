"""
pyatoms - Atoms and atomic structures with columnar storage.

A Python library for describing atomic structures. An Atoms object
keeps per-atom quantities in named numpy arrays; indexing it gives
Atom views that read and write those arrays in place, and an Atom can
be detached to become an independent record.

Main features:
- Atom views with lazily created per-atom arrays
- Element registry with standard atomic masses
- Unit cells with fractional/cartesian conversion
- YAML configuration for structure setup
"""

__version__ = "0.1.0"
__author__ = "pyatoms Team"

from .core import Atom, Atoms, Cell, elements

__all__ = ["Atom", "Atoms", "Cell", "elements"]
