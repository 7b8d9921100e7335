"""
Atoms class: a collection of atoms with columnar per-atom storage.

Per-atom quantities live in named numpy arrays (``arrays``), one row
per atom. ``numbers`` and ``positions`` always exist; ``tags``,
``momenta``, ``masses``, ``initial_magmoms`` and ``initial_charges``
exist only once some atom has the field set. Indexing an Atoms object
gives Atom views that read and write these rows directly.
"""
import copy as _copy
import logging
import re
from typing import Any, Dict, Iterator, List, Optional, Sequence, Union

import numpy as np
from numpy.typing import ArrayLike, NDArray

from .atom import Atom
from .cell import Cell, CellLike
from .element_registry import elements
from .errors import ShapeMismatchError
from .fields import FIELD_NAMES, SINGULAR_NAMES, default_array

logger = logging.getLogger(__name__)

_FORMULA_TOKEN = re.compile(r"([A-Z][a-z]?)(\d*)")

# Arrays every Atoms object has.
_REQUIRED_ARRAYS = ("numbers", "positions")


def parse_formula(formula: str) -> List[str]:
    """
    Expand a chemical formula into a list of symbols.

    Example:
        >>> parse_formula("CH4")
        ['C', 'H', 'H', 'H', 'H']

    Raises:
        ValueError: If the formula contains anything but symbols and counts.
    """
    symbols: List[str] = []
    end = 0
    for match in _FORMULA_TOKEN.finditer(formula):
        if match.start() != end:
            break
        symbol, count = match.groups()
        symbols.extend([symbol] * (int(count) if count else 1))
        end = match.end()
    if end != len(formula):
        raise ValueError(f"Cannot parse chemical formula '{formula}'")
    return symbols


def _parse_pbc(pbc: Union[bool, Sequence[bool]]) -> NDArray[np.bool_]:
    """Broadcast one or three periodicity flags to a (3,) bool array."""
    flags = np.array(pbc, dtype=bool)
    if flags.shape not in ((), (3,)):
        raise ValueError(f"pbc must be one or three flags, got {pbc!r}")
    return np.broadcast_to(flags, (3,)).copy()


class Atoms:
    """
    Collection of atoms sharing one cell.

    Args:
        symbols: Chemical formula (``"H2O"``), a list of symbols or
            atomic numbers, or a list of Atom objects.
        positions: (N, 3) cartesian positions.
        numbers: Atomic numbers (use only one of symbols/numbers).
        tags: Integer tags.
        momenta: (N, 3) momenta.
        masses: Atomic masses in amu.
        magmoms: Magnetic moments, (N,) for collinear or (N, 3) for
            non-collinear calculations.
        charges: Initial atomic charges.
        scaled_positions: Like positions, but in units of the cell.
            Cannot be given together with positions.
        cell: Cell, 3x3 matrix or three lengths.
        pbc: Periodic boundary flags, one or three booleans.
        info: Free-form metadata, copied with the object.

    Example:
        >>> water = Atoms("H2O", positions=[(0.76, 0.59, 0), (-0.76, 0.59, 0),
        ...                                 (0, 0, 0)])
        >>> water[2].symbol
        'O'
        >>> water[0].tag = 1        # creates the 'tags' array
        >>> water.get_tags()
        array([1, 0, 0])
    """

    def __init__(
        self,
        symbols: Optional[Union[str, Sequence[Any]]] = None,
        positions: Optional[ArrayLike] = None,
        numbers: Optional[ArrayLike] = None,
        tags: Optional[ArrayLike] = None,
        momenta: Optional[ArrayLike] = None,
        masses: Optional[ArrayLike] = None,
        magmoms: Optional[ArrayLike] = None,
        charges: Optional[ArrayLike] = None,
        scaled_positions: Optional[ArrayLike] = None,
        cell: CellLike = None,
        pbc: Union[bool, Sequence[bool]] = False,
        info: Optional[Dict[str, Any]] = None,
    ) -> None:
        if symbols is not None and numbers is not None:
            raise ValueError("Use only one of symbols and numbers")
        if positions is not None and scaled_positions is not None:
            raise ValueError("Use only one of positions and scaled_positions")

        self.arrays: Dict[str, NDArray] = {}
        self.cell = Cell(cell)
        self.pbc = _parse_pbc(pbc)
        self.info: Dict[str, Any] = {} if info is None else dict(info)

        if symbols is not None and not isinstance(symbols, str) and any(
            isinstance(item, Atom) for item in symbols
        ):
            self._init_from_atoms(symbols)
        else:
            if isinstance(symbols, str):
                numbers = parse_formula(symbols)
            elif symbols is not None:
                numbers = symbols
            elif numbers is None:
                template = positions if positions is not None else scaled_positions
                numbers = [0] * (0 if template is None else len(template))
            self.new_array(
                "numbers",
                [elements.to_number(z) for z in numbers],
                dtype=np.int64,
            )
            if positions is None and scaled_positions is None:
                self.new_array("positions", np.zeros((len(self), 3)))

        if positions is not None:
            self.set_positions(positions)
        if scaled_positions is not None:
            self.set_scaled_positions(scaled_positions)
        if tags is not None:
            self.set_tags(tags)
        if momenta is not None:
            self.set_momenta(momenta)
        if masses is not None:
            self.set_masses(masses)
        if magmoms is not None:
            self.set_initial_magnetic_moments(magmoms)
        if charges is not None:
            self.set_initial_charges(charges)

    def _init_from_atoms(self, atoms: Sequence[Atom]) -> None:
        """Fill the arrays from the explicitly set fields of Atom objects."""
        if not all(isinstance(atom, Atom) for atom in atoms):
            raise TypeError("Cannot mix Atom objects with symbols")
        self.new_array("numbers", [atom.number for atom in atoms], dtype=np.int64)
        self.new_array(
            "positions", [atom.position for atom in atoms], dtype=np.float64
        )

        for name in ("tag", "momentum", "mass", "magmom", "charge"):
            raw = [atom.get_raw(name) for atom in atoms]
            if all(value is None for value in raw):
                continue
            if name == "magmom":
                values = self._merge_magmoms(raw)
            else:
                values = [
                    atom.get(name) if value is None else value
                    for atom, value in zip(atoms, raw)
                ]
            dtype = np.int64 if name == "tag" else np.float64
            self.new_array(FIELD_NAMES[name].plural, values, dtype=dtype)

    @staticmethod
    def _merge_magmoms(raw: List[Any]) -> List[Any]:
        """Fill unset magnetic moments; all set ones must share one arity."""
        arities = {np.ndim(value) for value in raw if value is not None}
        if len(arities) > 1:
            raise ShapeMismatchError("Cannot mix collinear and non-collinear magmoms")
        fill = np.zeros(3) if arities == {1} else 0.0
        return [fill if value is None else value for value in raw]

    # ------------------------------------------------------------------ #
    #  Array management
    # ------------------------------------------------------------------ #

    def __len__(self) -> int:
        return len(self.arrays["numbers"])

    def new_array(
        self, name: str, a: ArrayLike, dtype: Optional[Any] = None
    ) -> None:
        """
        Add a new per-atom array. The data is copied.

        Raises:
            ValueError: If the array already exists or its first dimension
                differs from the number of atoms.
        """
        if name in self.arrays:
            raise ValueError(f"Array '{name}' already present")
        array = np.array(a, dtype=dtype, order="C")
        if "numbers" in self.arrays and len(array) != len(self):
            raise ValueError(
                f"Array '{name}' has {len(array)} rows, expected {len(self)}"
            )
        self.arrays[name] = array

    def get_array(self, name: str, copy: bool = True) -> NDArray:
        """
        Get an array. Returns a copy unless copy=False.

        Raises:
            KeyError: If the array does not exist.
        """
        if copy:
            return self.arrays[name].copy()
        return self.arrays[name]

    def set_array(
        self, name: str, a: Optional[ArrayLike], dtype: Optional[Any] = None
    ) -> None:
        """
        Update, add or (with a=None) remove a per-atom array.

        An array with the same shape is updated in place; a different
        shape replaces it, e.g. when switching from collinear to
        non-collinear magnetic moments.
        """
        current = self.arrays.get(name)
        if a is None:
            if name in _REQUIRED_ARRAYS:
                raise ValueError(f"Array '{name}' cannot be removed")
            self.arrays.pop(name, None)
            return
        if current is None:
            self.new_array(name, a, dtype)
            return
        a = np.asarray(a, dtype=dtype)
        if a.shape == current.shape:
            current[:] = a
        else:
            del self.arrays[name]
            self.new_array(name, a, dtype)

    def has(self, name: str) -> bool:
        """Check for existence of an array."""
        return name in self.arrays

    def _get_field_array(self, plural: str) -> NDArray:
        """Copy of a field array, or its defaults when no atom has it set."""
        if plural in self.arrays:
            return self.arrays[plural].copy()
        return default_array(SINGULAR_NAMES[plural], len(self))

    # ------------------------------------------------------------------ #
    #  Per-atom quantities
    # ------------------------------------------------------------------ #

    def get_positions(self) -> NDArray[np.floating]:
        """Get array of positions."""
        return self.arrays["positions"].copy()

    def set_positions(self, positions: ArrayLike) -> None:
        """Set positions."""
        positions = np.asarray(positions, dtype=np.float64)
        if positions.shape != (len(self), 3):
            raise ShapeMismatchError(
                f"Positions must be ({len(self)}, 3), got {positions.shape}"
            )
        self.set_array("positions", positions)

    def get_scaled_positions(self) -> NDArray[np.floating]:
        """Get positions relative to the unit cell."""
        return self.cell.scaled_positions(self.arrays["positions"])

    def set_scaled_positions(self, scaled: ArrayLike) -> None:
        """Set positions relative to the unit cell."""
        self.set_positions(self.cell.cartesian_positions(scaled))

    def get_atomic_numbers(self) -> NDArray[np.integer]:
        """Get integer array of atomic numbers."""
        return self.arrays["numbers"].copy()

    def set_atomic_numbers(self, numbers: ArrayLike) -> None:
        """Set atomic numbers, validated against the element registry."""
        self.set_array(
            "numbers", [elements.to_number(int(z)) for z in np.ravel(numbers)]
        )

    def get_chemical_symbols(self) -> List[str]:
        """Get list of chemical symbol strings."""
        return [elements.get_symbol(z) for z in self.arrays["numbers"]]

    def set_chemical_symbols(self, symbols: Sequence[str]) -> None:
        """Set chemical symbols."""
        self.set_array("numbers", [elements.get_number(s) for s in symbols])

    def get_chemical_formula(self) -> str:
        """
        Get the formula, elements in order of first appearance.

        Example:
            >>> Atoms(["H", "H", "O"]).get_chemical_formula()
            'H2O'
        """
        counts: Dict[str, int] = {}
        for symbol in self.get_chemical_symbols():
            counts[symbol] = counts.get(symbol, 0) + 1
        return "".join(
            symbol if n == 1 else f"{symbol}{n}" for symbol, n in counts.items()
        )

    def get_tags(self) -> NDArray[np.integer]:
        """Get integer array of tags."""
        return self._get_field_array("tags")

    def set_tags(self, tags: Union[int, ArrayLike]) -> None:
        """Set tags for all atoms. A single integer applies to every atom."""
        if isinstance(tags, (int, np.integer)):
            tags = [tags] * len(self)
        self.set_array("tags", tags, dtype=np.int64)

    def get_momenta(self) -> NDArray[np.floating]:
        """Get array of momenta."""
        return self._get_field_array("momenta")

    def set_momenta(self, momenta: Optional[ArrayLike]) -> None:
        """Set momenta."""
        self.set_array("momenta", momenta, dtype=np.float64)

    def get_masses(self) -> NDArray[np.floating]:
        """
        Get array of masses in amu.

        Atoms without an explicit mass get the standard mass of their
        element.
        """
        if "masses" in self.arrays:
            return self.arrays["masses"].copy()
        return elements.get_masses(self.arrays["numbers"])

    def set_masses(self, masses: Optional[ArrayLike]) -> None:
        """Set atomic masses in amu. None restores the standard masses."""
        self.set_array("masses", masses, dtype=np.float64)

    def get_initial_magnetic_moments(self) -> NDArray[np.floating]:
        """Get array of initial magnetic moments, (N,) or (N, 3)."""
        return self._get_field_array("initial_magmoms")

    def set_initial_magnetic_moments(self, magmoms: Optional[ArrayLike]) -> None:
        """
        Set the initial magnetic moments.

        Use either one number per atom (collinear) or three
        (non-collinear).
        """
        if magmoms is not None:
            magmoms = np.asarray(magmoms, dtype=np.float64)
            if magmoms.shape not in ((len(self),), (len(self), 3)):
                raise ShapeMismatchError(
                    f"Magnetic moments must be ({len(self)},) or ({len(self)}, 3), "
                    f"got {magmoms.shape}"
                )
        self.set_array("initial_magmoms", magmoms, dtype=np.float64)

    def get_initial_charges(self) -> NDArray[np.floating]:
        """Get array of initial charges."""
        return self._get_field_array("initial_charges")

    def set_initial_charges(self, charges: Optional[ArrayLike]) -> None:
        """Set the initial charges."""
        self.set_array("initial_charges", charges, dtype=np.float64)

    # ------------------------------------------------------------------ #
    #  Sequence protocol
    # ------------------------------------------------------------------ #

    def __getitem__(self, i: Union[int, slice, ArrayLike]) -> Union[Atom, "Atoms"]:
        """
        Return an Atom view for an integer index, else a new Atoms object.

        The new Atoms object holds copies of the selected rows.
        """
        if isinstance(i, (int, np.integer)):
            n_atoms = len(self)
            if i < -n_atoms or i >= n_atoms:
                raise IndexError("Index out of range.")
            return Atom(atoms=self, index=int(i) % n_atoms)

        atoms = Atoms(
            cell=self.cell.copy(), pbc=self.pbc, info=_copy.deepcopy(self.info)
        )
        atoms.arrays = {name: a[i].copy() for name, a in self.arrays.items()}
        return atoms

    def __iter__(self) -> Iterator[Atom]:
        for i in range(len(self)):
            yield self[i]

    def __delitem__(self, i: Union[int, slice, ArrayLike]) -> None:
        """
        Delete atoms.

        Views of later atoms keep their old index, so they refer to a
        different atom afterwards; use pop() to keep a deleted atom.
        """
        mask = np.ones(len(self), dtype=bool)
        mask[i] = False
        self.arrays = {name: a[mask] for name, a in self.arrays.items()}

    def pop(self, i: int = -1) -> Atom:
        """Remove and return atom at index i (default last), detached."""
        atom = self[i]
        atom.cut_reference_to_atoms()
        del self[i]
        return atom

    def append(self, atom: Atom) -> None:
        """Append atom to end."""
        self.extend(Atoms([atom]))

    def extend(self, other: Union["Atoms", Atom, Sequence[Atom]]) -> None:
        """
        Extend with atoms from another Atoms object or a list of Atom.

        Arrays present on only one side are filled with defaults on the
        other side.

        Raises:
            ShapeMismatchError: If the two sides store an array with
                different row shapes (e.g. collinear vs non-collinear
                magnetic moments).
        """
        if isinstance(other, Atom):
            other = Atoms([other])
        elif not isinstance(other, Atoms):
            other = Atoms(list(other))

        merged: Dict[str, NDArray] = {}
        names = list(self.arrays) + [n for n in other.arrays if n not in self.arrays]
        for name in names:
            like = self.arrays.get(name, other.arrays.get(name))
            a = self._filled_array(name, like)
            b = other._filled_array(name, like)
            if a.shape[1:] != b.shape[1:]:
                raise ShapeMismatchError(
                    f"Cannot join '{name}' rows of shape {a.shape[1:]} "
                    f"and {b.shape[1:]}"
                )
            merged[name] = np.concatenate([a, b.astype(a.dtype, copy=False)])
        self.arrays = merged
        logger.debug("Extended %r with %d atoms", self, len(other))

    def _filled_array(self, name: str, like: NDArray) -> NDArray:
        """Own array, or one shaped like ``like`` holding the defaults."""
        if name in self.arrays:
            return self.arrays[name]
        if name == "masses":
            return self.get_masses()
        return np.zeros((len(self),) + like.shape[1:], dtype=like.dtype)

    # ------------------------------------------------------------------ #
    #  Copying and representation
    # ------------------------------------------------------------------ #

    def copy(self) -> "Atoms":
        """Return a copy with independent arrays, cell and info."""
        atoms = Atoms(
            cell=self.cell.copy(), pbc=self.pbc, info=_copy.deepcopy(self.info)
        )
        atoms.arrays = {name: a.copy() for name, a in self.arrays.items()}
        return atoms

    def __repr__(self) -> str:
        tokens = [f"symbols='{self.get_chemical_formula()}'"]
        if self.pbc.any() and not self.pbc.all():
            tokens.append(f"pbc={self.pbc.tolist()}")
        else:
            tokens.append(f"pbc={bool(self.pbc.all())}")
        if not self.cell.is_singular():
            tokens.append(f"cell={self.cell!r}")
        for name in sorted(self.arrays):
            if name not in _REQUIRED_ARRAYS:
                tokens.append(f"{name}=...")
        return "Atoms({})".format(", ".join(tokens))
