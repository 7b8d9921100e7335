"""
Exception types for atom and structure handling.

Every error raised by pyatoms derives from AtomError and from the
built-in exception a caller would naturally expect (KeyError for
lookups, ValueError for bad values), so both styles of handling work.
"""


class AtomError(Exception):
    """Base class for all pyatoms errors."""


class UnknownSymbolError(AtomError, KeyError):
    """Chemical symbol or atomic number missing from the element registry."""


class UnknownFieldError(AtomError, KeyError):
    """Attribute name outside the closed set of per-atom fields."""


class ShapeMismatchError(AtomError, ValueError):
    """
    Value does not fit the per-atom row it is written to.

    Raised for example when a scalar magnetic moment is written into a
    collection that stores non-collinear (3-component) moments.
    """


class IllegalDeletionError(AtomError, ValueError):
    """Field cannot be deleted (identity, position, or attached atom)."""


class DetachedAtomError(AtomError, RuntimeError):
    """Operation needs a parent collection but the atom is detached."""
