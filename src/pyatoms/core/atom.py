"""
Atom class: a single atom, standalone or as a view into an Atoms object.

An Atom either owns its field values (detached) or refers to one row of
the arrays of a parent Atoms collection (attached). Every attribute
access is routed through get/set/delete, which consult the field table
in :mod:`pyatoms.core.fields` and then branch on the attachment state.
"""
import logging
from typing import Any, Dict, Optional, TYPE_CHECKING, Union

import numpy as np
from numpy.typing import ArrayLike

from .element_registry import elements
from .errors import DetachedAtomError, IllegalDeletionError, ShapeMismatchError
from .fields import (
    FIELD_NAMES,
    PERMANENT_FIELDS,
    VECTOR_FIELDS,
    AtomField,
    default_array,
    default_value,
    plural_name,
    resolve_field,
)

if TYPE_CHECKING:
    from .atoms import Atoms

logger = logging.getLogger(__name__)


def _coerce(name: str, value: Any) -> Any:
    """
    Convert a value to the type stored for a field.

    Vectors are always copied, so the stored value never aliases the
    caller's array or a row of a collection.
    """
    if name in VECTOR_FIELDS:
        vector = np.array(value, dtype=np.float64)
        if vector.shape != (3,):
            raise ShapeMismatchError(
                f"{name} must have 3 components, got shape {vector.shape}"
            )
        return vector
    if name == "magmom":
        magmom = np.array(value, dtype=np.float64)
        if magmom.ndim == 0:
            return float(magmom)
        if magmom.shape != (3,):
            raise ShapeMismatchError(
                "magmom must be a scalar or have 3 components, "
                f"got shape {magmom.shape}"
            )
        return magmom
    if name == "number":
        return elements.to_number(value)
    if name == "tag":
        return int(value)
    return float(value)


def _check_row(name: str, array: np.ndarray, value: Any) -> np.ndarray:
    """
    Validate a value against one row of a collection array.

    Vectors and magnetic moments must match the row exactly, so a
    collinear magmom array only takes scalars and a non-collinear one
    only takes 3-vectors. Scalar fields accept anything that broadcasts
    to the row.
    """
    row_shape = array.shape[1:]
    value = np.asarray(value)
    if name in VECTOR_FIELDS or name == "magmom":
        if value.shape != row_shape:
            expected = "3 components" if row_shape == (3,) else "a scalar"
            raise ShapeMismatchError(
                f"{name} stores {expected} per atom, got shape {value.shape}"
            )
        return value
    try:
        return np.broadcast_to(value, row_shape)
    except ValueError:
        raise ShapeMismatchError(
            f"Cannot write shape {value.shape} into {name} rows of shape {row_shape}"
        ) from None


class FieldProperty:
    """Descriptor routing a per-atom field through Atom.get/set/delete."""

    def __init__(self, name: str, doc: str) -> None:
        self.name = name
        self.__doc__ = doc

    def __get__(self, instance: Optional["Atom"], owner: type = None) -> Any:
        if instance is None:
            return self
        return instance.get(self.name)

    def __set__(self, instance: "Atom", value: Any) -> None:
        instance.set(self.name, value)

    def __delete__(self, instance: "Atom") -> None:
        instance.delete(self.name)


class ScaledPositionProperty:
    """
    Descriptor for the position in units of the parent's cell.

    Detached atoms have no cell, so reading gives None and writing
    raises DetachedAtomError.
    """

    def __get__(self, instance: Optional["Atom"], owner: type = None) -> Any:
        if instance is None:
            return self
        if instance.atoms is None:
            return None
        return instance.atoms.cell.scaled_positions(instance.position)

    def __set__(self, instance: "Atom", value: ArrayLike) -> None:
        if instance.atoms is None:
            raise DetachedAtomError(
                "scaled_position needs an atom inside an Atoms object"
            )
        instance.position = instance.atoms.cell.cartesian_positions(value)


class AxisProperty:
    """
    Descriptor for one component of a vector attribute.

    Gives ``atom.x`` for ``atom.position[0]`` and ``atom.a`` for
    ``atom.scaled_position[0]``. Writes replace the whole vector so they
    go through the same validation as any other write.
    """

    def __init__(self, attrname: str, index: int) -> None:
        self.attrname = attrname
        self.index = index
        self.__doc__ = f"Component {index} of {attrname}."

    def __get__(self, instance: Optional["Atom"], owner: type = None) -> Any:
        if instance is None:
            return self
        vector = getattr(instance, self.attrname)
        if vector is None:
            return None
        return vector[self.index]

    def __set__(self, instance: "Atom", value: float) -> None:
        vector = getattr(instance, self.attrname)
        if vector is None:
            raise DetachedAtomError(f"{self.attrname} is undefined for a detached atom")
        vector = np.array(vector, dtype=np.float64)
        vector[self.index] = value
        setattr(instance, self.attrname, vector)


class Atom:
    """
    Class for representing a single atom.

    Args:
        symbol: Chemical symbol (str) or atomic number (int).
        position: Cartesian position, 3 floats.
        tag: Special purpose integer tag.
        momentum: Momentum, 3 floats.
        mass: Atomic mass in amu. Defaults to the standard mass of the
            element, looked up each time it is read.
        magmom: Magnetic moment, a float (collinear) or 3 floats
            (non-collinear).
        charge: Atomic charge.
        atoms: Parent Atoms object. When given, the atom is a view of
            row ``index`` and the field arguments above are ignored.
        index: Row of the atom in ``atoms``.

    Fields that were never set report None from get_raw() and their
    default from get() and attribute access.

    Example:
        >>> atom = Atom('H', (0.0, 0.0, 0.74), tag=1)
        >>> atom.z = 1.0
        >>> atom.position
        array([0., 0., 1.])
        >>> atom.mass
        1.008
    """

    __slots__ = ("data", "atoms", "index")

    def __init__(
        self,
        symbol: Union[str, int] = "X",
        position: ArrayLike = (0, 0, 0),
        tag: Optional[int] = None,
        momentum: Optional[ArrayLike] = None,
        mass: Optional[float] = None,
        magmom: Optional[Union[float, ArrayLike]] = None,
        charge: Optional[float] = None,
        atoms: Optional["Atoms"] = None,
        index: Optional[int] = None,
    ) -> None:
        self.data: Dict[str, Any] = {}
        if atoms is None:
            if index is not None:
                raise ValueError("index requires a parent Atoms object")
            self.data["number"] = _coerce("number", symbol)
            self.data["position"] = _coerce("position", position)
            optional = {
                "tag": tag,
                "momentum": momentum,
                "mass": mass,
                "magmom": magmom,
                "charge": charge,
            }
            for name, value in optional.items():
                if value is not None:
                    self.data[name] = _coerce(name, value)
        elif index is None:
            raise ValueError("An atom attached to an Atoms object needs an index")
        self.atoms = atoms
        self.index = None if index is None else int(index)

    def __repr__(self) -> str:
        s = f"Atom('{self.symbol}', {np.asarray(self.position).tolist()}"
        for name in ("tag", "momentum", "mass", "magmom", "charge"):
            value = self.get_raw(name)
            if value is not None:
                s += f", {name}={np.asarray(value).tolist()}"
        if self.atoms is None:
            return s + ")"
        return s + f", index={self.index})"

    def _explicit_fields(self) -> Dict[str, Any]:
        """Return independent copies of all explicitly set fields."""
        fields = {}
        for name in FIELD_NAMES:
            value = self.get_raw(name)
            if value is not None:
                fields[name] = _coerce(name, value)
        return fields

    def cut_reference_to_atoms(self) -> None:
        """
        Detach the atom from its parent Atoms object.

        Every explicitly set field is copied out of the parent's arrays
        into the private store; unset fields stay unset. Afterwards the
        atom no longer changes when the parent does.

        Callers sharing the parent between threads must hold their own
        lock around this call.
        """
        if self.atoms is None:
            return
        data = self._explicit_fields()
        logger.debug(
            "Detaching atom %d (%s) from %r", self.index, self.symbol, self.atoms
        )
        self.data = data
        self.atoms = None
        self.index = None

    def copy(self) -> "Atom":
        """Return a detached copy of the atom."""
        atom = Atom(self.number, self.position)
        atom.data = self._explicit_fields()
        return atom

    def get_raw(self, name: str) -> Any:
        """
        Get name attribute, return None if not explicitly set.

        Raises:
            UnknownFieldError: If name is not an atom field.
        """
        if name == "symbol":
            return elements.get_symbol(self.get_raw("number"))

        field = resolve_field(name)
        if self.atoms is None:
            return self.data.get(field.value)

        plural = plural_name(field.value)
        if plural in self.atoms.arrays:
            return self.atoms.arrays[plural][self.index]
        return None

    def get(self, name: str) -> Any:
        """Get name attribute, return default if not explicitly set."""
        value = self.get_raw(name)
        if value is None:
            if name == "mass":
                value = elements.get_mass(self.number)
            else:
                value = default_value(name)
        return value

    def set(self, name: str, value: Any) -> None:
        """
        Set name attribute to value.

        For an attached atom the value is written into the parent's
        array, creating that array first if no atom had the field set.

        Raises:
            UnknownSymbolError: If a symbol or atomic number is unknown.
            ShapeMismatchError: If the value does not fit the field.
        """
        if name == "symbol":
            name = "number"
            value = elements.get_number(value)
        field = resolve_field(name)

        if self.atoms is None:
            self.data[name] = _coerce(name, value)
            return

        if field is AtomField.NUMBER:
            value = elements.to_number(value)

        plural = plural_name(name)
        if plural in self.atoms.arrays:
            array = self.atoms.arrays[plural]
            array[self.index] = _check_row(name, array, value)
        else:
            self._materialize_array(field, plural, value)

    def _materialize_array(self, field: AtomField, plural: str, value: Any) -> None:
        """Create the parent's array for a field and write this atom's row."""
        n_atoms = len(self.atoms)
        if field is AtomField.MAGMOM and np.ndim(value) == 1:
            array = np.zeros((n_atoms, 3))
        elif field is AtomField.MASS:
            array = self.atoms.get_masses()
        else:
            array = default_array(field.value, n_atoms)
        array[self.index] = _check_row(field.value, array, value)
        self.atoms.new_array(plural, array)
        logger.debug("Created array '%s' with shape %s", plural, array.shape)

    def delete(self, name: str) -> None:
        """
        Delete name attribute, so that get() returns the default again.

        Raises:
            IllegalDeletionError: For number, symbol and position, or
                when the atom belongs to an Atoms object.
        """
        if name in PERMANENT_FIELDS:
            raise IllegalDeletionError(f"Cannot delete the {name} of an atom")
        if self.atoms is not None:
            raise IllegalDeletionError(
                f"Cannot delete {name} of an atom inside an Atoms object"
            )
        self.data.pop(resolve_field(name).value, None)

    symbol = FieldProperty("symbol", "Chemical symbol")
    number = FieldProperty("number", "Integer atomic number")
    position = FieldProperty("position", "XYZ-coordinates")
    tag = FieldProperty("tag", "Integer tag")
    momentum = FieldProperty("momentum", "XYZ-momentum")
    mass = FieldProperty("mass", "Atomic mass")
    magmom = FieldProperty("magmom", "Initial magnetic moment")
    charge = FieldProperty("charge", "Initial atomic charge")
    scaled_position = ScaledPositionProperty()

    x = AxisProperty("position", 0)
    y = AxisProperty("position", 1)
    z = AxisProperty("position", 2)
    a = AxisProperty("scaled_position", 0)
    b = AxisProperty("scaled_position", 1)
    c = AxisProperty("scaled_position", 2)
