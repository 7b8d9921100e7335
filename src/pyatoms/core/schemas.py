"""
Structure description schemas.

Plain dataclasses mirroring the YAML structure format, so a structure
can be validated and passed around before any Atoms object is built.
"""
from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Optional, Union


def _check_keys(cls: type, d: Dict[str, Any]) -> None:
    """Reject keys that are not fields of the dataclass."""
    known = {f.name for f in fields(cls)}
    unknown = sorted(set(d) - known)
    if unknown:
        raise ValueError(f"Unknown {cls.__name__} keys: {', '.join(unknown)}")


@dataclass
class AtomConfig:
    """One atom of a structure file. Unset fields stay None."""

    symbol: Union[str, int] = "X"
    position: Optional[List[float]] = None
    scaled_position: Optional[List[float]] = None
    tag: Optional[int] = None
    momentum: Optional[List[float]] = None
    mass: Optional[float] = None
    magmom: Optional[Union[float, List[float]]] = None
    charge: Optional[float] = None

    def __post_init__(self) -> None:
        if self.position is not None and self.scaled_position is not None:
            raise ValueError("Use only one of position and scaled_position")

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "AtomConfig":
        _check_keys(cls, d)
        return cls(**d)

    def to_dict(self) -> Dict[str, Any]:
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }


@dataclass
class StructureConfig:
    """A complete structure: atoms plus cell, periodicity and metadata."""

    atoms: List[AtomConfig] = field(default_factory=list)
    cell: Optional[List[Any]] = None
    pbc: Union[bool, List[bool]] = False
    info: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "StructureConfig":
        _check_keys(cls, d)
        return cls(
            atoms=[AtomConfig.from_dict(a) for a in d.get("atoms") or []],
            cell=d.get("cell"),
            pbc=d.get("pbc", False),
            info=dict(d.get("info") or {}),
        )

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"atoms": [a.to_dict() for a in self.atoms]}
        if self.cell is not None:
            d["cell"] = self.cell
        d["pbc"] = self.pbc
        if self.info:
            d["info"] = self.info
        return d
