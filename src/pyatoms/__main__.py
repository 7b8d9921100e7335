"""
CLI entry-point: print a summary of a YAML structure file.

Usage::

    python -m pyatoms structure.yaml
    python -m pyatoms structure.yaml --verbose
"""
from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

import yaml

import pyatoms
from pyatoms.builder import load_atoms
from pyatoms.core import AtomError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m pyatoms",
        description=f"pyatoms {pyatoms.__version__}: show an atomic structure file.",
    )
    parser.add_argument("path", help="YAML structure file")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        atoms = load_atoms(args.path)
    except (OSError, ValueError, yaml.YAMLError, AtomError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print(f"Formula: {atoms.get_chemical_formula()}")
    print(f"Cell:    {atoms.cell!r}")
    print(f"PBC:     {atoms.pbc.tolist()}")
    for atom in atoms:
        print(f"  {atom!r}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
