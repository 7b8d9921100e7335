"""
Unit cell geometry.

This module provides the Cell class used by Atoms to convert between
cartesian and fractional (scaled) coordinates.

Lattice vectors are stored as rows, so with row-vector positions:

    r = s @ L        s = r @ inv(L)
"""
from typing import Union

import numpy as np
from numpy.typing import ArrayLike, NDArray

CellLike = Union["Cell", ArrayLike, None]


class Cell:
    """
    Three lattice vectors describing a (possibly empty) unit cell.

    Args:
        lattice: 3x3 matrix with lattice vectors as rows, three lengths
            for an orthorhombic cell, or None for a zero cell (no
            periodicity, scaled coordinates undefined).

    Example:
        >>> cell = Cell([4.0, 5.0, 6.0])
        >>> cell.scaled_positions([2.0, 2.5, 3.0])
        array([0.5, 0.5, 0.5])
    """

    def __init__(self, lattice: CellLike = None) -> None:
        if isinstance(lattice, Cell):
            lattice = lattice.array
        self._array = self._parse_lattice(lattice)

    @staticmethod
    def _parse_lattice(lattice: ArrayLike) -> NDArray[np.floating]:
        """Normalize the accepted lattice inputs to a 3x3 float array."""
        if lattice is None:
            return np.zeros((3, 3), dtype=np.float64)
        array = np.asarray(lattice, dtype=np.float64)
        if array.shape == (3,):
            return np.diag(array)
        if array.shape != (3, 3):
            raise ValueError(
                f"Cell must be a 3x3 matrix or 3 lengths, got shape {array.shape}"
            )
        return array.copy()

    @property
    def array(self) -> NDArray[np.floating]:
        """The (3, 3) lattice matrix, rows are lattice vectors."""
        return self._array

    @array.setter
    def array(self, lattice: ArrayLike) -> None:
        self._array = self._parse_lattice(lattice)

    @property
    def volume(self) -> float:
        """Cell volume |a1 . (a2 x a3)|."""
        return float(abs(np.linalg.det(self._array)))

    def lengths(self) -> NDArray[np.floating]:
        """Return the lengths of the three lattice vectors."""
        return np.linalg.norm(self._array, axis=1)

    def is_singular(self) -> bool:
        """True when the cell has zero volume (e.g. the default empty cell)."""
        return self.volume < 1e-12

    def scaled_positions(self, positions: ArrayLike) -> NDArray[np.floating]:
        """
        Convert cartesian positions to fractional coordinates.

        Args:
            positions: (3,) vector or (N, 3) array of cartesian positions.

        Returns:
            Fractional coordinates with the same shape as the input.

        Raises:
            ValueError: If the cell is singular.
        """
        if self.is_singular():
            raise ValueError("Cannot compute scaled positions for a singular cell")
        positions = np.asarray(positions, dtype=np.float64)
        # Solve L^T s^T = r^T instead of forming the inverse.
        return np.linalg.solve(self._array.T, positions.T).T

    def cartesian_positions(self, scaled_positions: ArrayLike) -> NDArray[np.floating]:
        """
        Convert fractional coordinates to cartesian positions.

        Args:
            scaled_positions: (3,) vector or (N, 3) array.

        Returns:
            Cartesian positions with the same shape as the input.

        Raises:
            ValueError: If the cell is singular.
        """
        if self.is_singular():
            raise ValueError("Cannot compute cartesian positions for a singular cell")
        scaled_positions = np.asarray(scaled_positions, dtype=np.float64)
        return scaled_positions @ self._array

    def tolist(self) -> list:
        """Return the lattice as nested lists (for YAML output)."""
        return self._array.tolist()

    def copy(self) -> "Cell":
        """Create an independent copy of the cell."""
        return Cell(self._array.copy())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Cell):
            return NotImplemented
        return bool(np.array_equal(self._array, other._array))

    def __repr__(self) -> str:
        if np.count_nonzero(self._array - np.diag(np.diagonal(self._array))) == 0:
            return f"Cell({np.diagonal(self._array).tolist()})"
        return f"Cell({self._array.tolist()})"
