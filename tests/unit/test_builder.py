"""
Unit tests for builder module and the command line entry point.
"""
from pathlib import Path

import numpy as np
import pytest
import yaml

from pyatoms.__main__ import main
from pyatoms.builder import (
    atoms_to_config,
    build_atoms_from_config,
    load_atoms,
    load_yaml,
    save_atoms,
)
from pyatoms.core import Atoms, StructureConfig, UnknownSymbolError

AL_CONFIG = """\
cell: [4.0, 4.0, 4.0]
pbc: true
info:
  name: fcc-al
atoms:
  - symbol: Al
    position: [0.0, 0.0, 0.0]
    tag: 1
  - symbol: Al
    scaled_position: [0.5, 0.5, 0.0]
    magmom: 1.5
"""


@pytest.fixture
def al_file(tmp_path: Path) -> Path:
    """Write a two-atom aluminium structure file."""
    path = tmp_path / "al.yaml"
    path.write_text(AL_CONFIG)
    return path


class TestLoadYaml:
    """Tests for raw YAML loading."""

    def test_load(self, al_file: Path) -> None:
        """Test that the file is read as a mapping."""
        config = load_yaml(al_file)
        assert config["pbc"] is True
        assert len(config["atoms"]) == 2

    def test_empty_file(self, tmp_path: Path) -> None:
        """Test that an empty file gives an empty mapping."""
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_yaml(path) == {}

    def test_non_mapping(self, tmp_path: Path) -> None:
        """Test that a top-level list is rejected."""
        path = tmp_path / "list.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(ValueError, match="mapping"):
            load_yaml(path)


class TestBuildAtoms:
    """Tests for building Atoms from configuration."""

    def test_build(self, al_file: Path) -> None:
        """Test a complete structure."""
        atoms = load_atoms(al_file)
        assert atoms.get_chemical_formula() == "Al2"
        assert atoms.pbc.tolist() == [True, True, True]
        assert atoms.info == {"name": "fcc-al"}
        np.testing.assert_allclose(atoms[1].position, [2.0, 2.0, 0.0])

    def test_only_set_fields_become_arrays(self, al_file: Path) -> None:
        """Test that unset fields stay unset after loading."""
        atoms = load_atoms(al_file)
        assert atoms.get_tags().tolist() == [1, 0]
        np.testing.assert_array_equal(atoms.arrays["initial_magmoms"], [0.0, 1.5])
        assert not atoms.has("masses")
        assert not atoms.has("momenta")

    def test_from_structure_config(self) -> None:
        """Test building from a StructureConfig object."""
        config = StructureConfig.from_dict({"atoms": [{"symbol": 8}]})
        atoms = build_atoms_from_config(config)
        assert atoms.get_chemical_symbols() == ["O"]

    def test_empty_structure(self) -> None:
        """Test that a structure without atoms is valid."""
        atoms = build_atoms_from_config({})
        assert len(atoms) == 0

    def test_unknown_key(self) -> None:
        """Test that misspelled keys are reported."""
        with pytest.raises(ValueError, match="Unknown AtomConfig keys: postion"):
            build_atoms_from_config({"atoms": [{"symbol": "H", "postion": [0, 0, 0]}]})

    def test_both_positions(self) -> None:
        """Test that position and scaled_position are exclusive."""
        entry = {"symbol": "H", "position": [0, 0, 0], "scaled_position": [0, 0, 0]}
        with pytest.raises(ValueError, match="only one"):
            build_atoms_from_config({"atoms": [entry]})

    def test_unknown_symbol(self) -> None:
        """Test that unknown elements are rejected."""
        with pytest.raises(UnknownSymbolError):
            build_atoms_from_config({"atoms": [{"symbol": "Qq"}]})


class TestSaveAtoms:
    """Tests for writing structure files."""

    def test_round_trip(self, al_file: Path, tmp_path: Path) -> None:
        """Test that a saved structure loads back unchanged."""
        atoms = load_atoms(al_file)
        out = tmp_path / "out.yaml"
        save_atoms(atoms, out)
        loaded = load_atoms(out)
        np.testing.assert_allclose(loaded.get_positions(), atoms.get_positions())
        np.testing.assert_array_equal(loaded.get_tags(), atoms.get_tags())
        assert loaded.cell == atoms.cell
        assert loaded.info == atoms.info

    def test_only_explicit_fields_written(self) -> None:
        """Test that defaults are not written out."""
        atoms = Atoms("HO", tags=[0, 3])
        config = atoms_to_config(atoms).to_dict()
        assert config["atoms"][0] == {
            "symbol": "H",
            "position": [0.0, 0.0, 0.0],
            "tag": 0,
        }
        assert "cell" not in config
        assert config["pbc"] is False

    def test_mixed_pbc(self, tmp_path: Path) -> None:
        """Test that mixed periodicity is written per axis."""
        out = tmp_path / "slab.yaml"
        save_atoms(Atoms("Cu", cell=[2.0, 2.0, 10.0], pbc=(1, 1, 0)), out)
        with open(out) as f:
            data = yaml.safe_load(f)
        assert data["pbc"] == [True, True, False]
        assert data["cell"][2] == [0.0, 0.0, 10.0]


class TestCommandLine:
    """Tests for python -m pyatoms."""

    def test_summary(self, al_file: Path, capsys: pytest.CaptureFixture) -> None:
        """Test the printed structure summary."""
        assert main([str(al_file)]) == 0
        out = capsys.readouterr().out
        assert "Formula: Al2" in out
        assert "Cell:    Cell([4.0, 4.0, 4.0])" in out
        assert "Atom('Al', [0.0, 0.0, 0.0], tag=1, magmom=0.0, index=0)" in out

    def test_missing_file(self, tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
        """Test that a missing file is reported with exit code 1."""
        assert main([str(tmp_path / "missing.yaml")]) == 1
        assert capsys.readouterr().err.startswith("Error:")

    def test_bad_structure(self, tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
        """Test that invalid structures are reported, not raised."""
        path = tmp_path / "bad.yaml"
        path.write_text("atoms:\n  - symbol: Qq\n")
        assert main([str(path)]) == 1
        assert "Qq" in capsys.readouterr().err
