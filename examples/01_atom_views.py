#!/usr/bin/env python3
"""
Example 1: Atom Views and Detached Atoms

Loads a rock salt structure and edits it one atom at a time.

Shows:
- Atom objects from indexing are live views into the Atoms arrays
- Setting a field on one atom creates the per-atom array on demand
- pop() returns a detached atom that keeps its own copy of the data

Usage:
    python examples/01_atom_views.py
"""
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from pyatoms import Atom, Atoms
from pyatoms.builder import load_atoms


def main():
    print("=" * 55)
    print("  Example 1: ATOM VIEWS")
    print("  Editing a structure through its atoms")
    print("=" * 55)

    atoms = load_atoms(Path(__file__).parent / "nacl.yaml")
    print(f"\nLoaded {atoms!r}")

    # No atom has a tag yet, so there is no 'tags' array
    print(f"Has tags array: {atoms.has('tags')}")
    for atom in atoms:
        if atom.symbol == "Cl":
            atom.tag = 1
    print(f"Tags after tagging Cl: {atoms.get_tags()}")

    # Move the first sodium along c in fractional units
    atoms[0].c = 0.1
    print(f"Na position after c = 0.1: {atoms[0].position}")

    # Pop a chlorine: it keeps its values after leaving the collection
    cl = atoms.pop(1)
    print(f"\nPopped {cl!r}")
    cl.z += 1.0
    print(f"Moved detached atom: {cl!r}")

    # Put it into a new structure together with a fresh atom
    molecule = Atoms([cl, Atom("Na", (0.0, 0.0, 0.0))])
    print(f"New structure: {molecule!r}")
    print(f"Masses: {molecule.get_masses()}")


if __name__ == "__main__":
    main()
