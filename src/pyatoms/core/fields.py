"""
Per-atom field catalog.

Maps every singular per-atom field to the plural array that stores it
in an Atoms collection, together with the value an atom reports when
the field was never set. This table is the single source of truth for
how Atom attributes relate to collection storage.
"""
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, NamedTuple

import numpy as np

from .errors import UnknownFieldError


class AtomField(Enum):
    """Stored per-atom fields. ``symbol`` is a view of NUMBER, not a field."""
    NUMBER = "number"
    POSITION = "position"
    TAG = "tag"
    MOMENTUM = "momentum"
    MASS = "mass"
    MAGMOM = "magmom"
    CHARGE = "charge"


class FieldSpec(NamedTuple):
    """
    Storage description of one field.

    Attributes:
        plural: Name of the array in ``Atoms.arrays``.
        default: Value reported when unset. ``None`` for mass, meaning
            the standard mass of the element is used instead.
    """
    plural: str
    default: Any


FIELD_NAMES: Mapping[str, FieldSpec] = MappingProxyType({
    "position": FieldSpec("positions", np.zeros(3)),
    "number": FieldSpec("numbers", 0),
    "tag": FieldSpec("tags", 0),
    "momentum": FieldSpec("momenta", np.zeros(3)),
    "mass": FieldSpec("masses", None),
    "magmom": FieldSpec("initial_magmoms", 0.0),
    "charge": FieldSpec("initial_charges", 0.0),
})

SINGULAR_NAMES: Mapping[str, str] = MappingProxyType(
    {spec.plural: name for name, spec in FIELD_NAMES.items()}
)

# Fields stored as 3-vectors in both the private store and the arrays.
VECTOR_FIELDS = frozenset({"position", "momentum"})

# Fields an atom can never lose.
PERMANENT_FIELDS = frozenset({"number", "symbol", "position"})


def resolve_field(name: str) -> AtomField:
    """
    Return the AtomField for a singular field name.

    Raises:
        UnknownFieldError: If name is not one of the stored fields.
    """
    try:
        return AtomField(name)
    except ValueError:
        raise UnknownFieldError(f"'{name}' is not an atom field") from None


def plural_name(name: str) -> str:
    """Return the collection array name for a singular field name."""
    return FIELD_NAMES[resolve_field(name).value].plural


def default_value(name: str) -> Any:
    """
    Return a fresh copy of the default for a field.

    Vector defaults are copied so a caller can never modify the table.
    """
    default = FIELD_NAMES[resolve_field(name).value].default
    if isinstance(default, np.ndarray):
        return default.copy()
    return default


def default_array(name: str, n_atoms: int) -> np.ndarray:
    """
    Allocate an array filled with the default of a field for n_atoms rows.

    Not valid for mass, whose default depends on each atom's element.
    """
    if resolve_field(name) is AtomField.MASS:
        raise ValueError("Mass has no fixed default, use Atoms.get_masses()")
    default = np.asarray(default_value(name))
    return np.zeros((n_atoms,) + default.shape, dtype=default.dtype)
