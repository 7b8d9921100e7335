"""
Element registry for chemical element properties.

This module provides the periodic table lookups needed by Atom and
Atoms: symbol to atomic number, atomic number to symbol, and atomic
number to standard atomic mass. A single registry instance is shared
process-wide (Singleton pattern).
"""
from dataclasses import dataclass
from typing import Dict, List, Optional, Union

import numpy as np

from .errors import UnknownSymbolError

Identifier = Union[str, int, np.integer]


@dataclass(frozen=True)
class ElementData:
    """
    Immutable data for a chemical element.

    Attributes:
        symbol: Chemical symbol (e.g., "Cu", "Ar", "H").
        name: Full element name (e.g., "Copper", "Argon").
        atomic_number: Atomic number Z (0 for the dummy atom X).
        atomic_mass: Standard atomic mass in amu (IUPAC 2016 values,
            mass of the most stable isotope for elements without one).

    Example:
        >>> from pyatoms.core.element_registry import ElementData
        >>> cu = ElementData("Cu", "Copper", 29, 63.546)
    """
    symbol: str
    name: str
    atomic_number: int
    atomic_mass: float


class ElementRegistry:
    """
    Registry for chemical element properties (Singleton pattern).

    Elements can be looked up by chemical symbol or by atomic number.
    Atomic number 0 is the dummy element ``X`` with unit mass, used for
    placeholder atoms.

    Example:
        >>> from pyatoms.core import elements
        >>> elements.get_number('Cu')
        29
        >>> elements.get_symbol(18)
        'Ar'
        >>> elements.get_mass('H')
        1.008
        >>> 'Fe' in elements
        True
    """

    _instance: Optional["ElementRegistry"] = None
    _initialized: bool = False

    def __new__(cls) -> "ElementRegistry":
        """Singleton: Only one registry instance exists."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self) -> None:
        """Initialize periodic table data (only once)."""
        if not ElementRegistry._initialized:
            self._elements_by_symbol: Dict[str, ElementData] = {}
            self._elements_by_number: Dict[int, ElementData] = {}
            self._initialize_periodic_table()
            ElementRegistry._initialized = True

    def _initialize_periodic_table(self) -> None:
        """
        Populate registry with standard element data.

        Data sources:
            - Atomic masses: IUPAC 2016 standard atomic weights
        """
        elements_data = [
            ElementData("X", "Dummy", 0, 1.0),
            ElementData("H", "Hydrogen", 1, 1.008),
            ElementData("He", "Helium", 2, 4.002602),
            ElementData("Li", "Lithium", 3, 6.94),
            ElementData("Be", "Beryllium", 4, 9.0121831),
            ElementData("B", "Boron", 5, 10.81),
            ElementData("C", "Carbon", 6, 12.011),
            ElementData("N", "Nitrogen", 7, 14.007),
            ElementData("O", "Oxygen", 8, 15.999),
            ElementData("F", "Fluorine", 9, 18.998403163),
            ElementData("Ne", "Neon", 10, 20.1797),
            ElementData("Na", "Sodium", 11, 22.98976928),
            ElementData("Mg", "Magnesium", 12, 24.305),
            ElementData("Al", "Aluminium", 13, 26.9815385),
            ElementData("Si", "Silicon", 14, 28.085),
            ElementData("P", "Phosphorus", 15, 30.973761998),
            ElementData("S", "Sulfur", 16, 32.06),
            ElementData("Cl", "Chlorine", 17, 35.45),
            ElementData("Ar", "Argon", 18, 39.948),
            ElementData("K", "Potassium", 19, 39.0983),
            ElementData("Ca", "Calcium", 20, 40.078),
            ElementData("Sc", "Scandium", 21, 44.955908),
            ElementData("Ti", "Titanium", 22, 47.867),
            ElementData("V", "Vanadium", 23, 50.9415),
            ElementData("Cr", "Chromium", 24, 51.9961),
            ElementData("Mn", "Manganese", 25, 54.938044),
            ElementData("Fe", "Iron", 26, 55.845),
            ElementData("Co", "Cobalt", 27, 58.933194),
            ElementData("Ni", "Nickel", 28, 58.6934),
            ElementData("Cu", "Copper", 29, 63.546),
            ElementData("Zn", "Zinc", 30, 65.38),
            ElementData("Ga", "Gallium", 31, 69.723),
            ElementData("Ge", "Germanium", 32, 72.63),
            ElementData("As", "Arsenic", 33, 74.921595),
            ElementData("Se", "Selenium", 34, 78.971),
            ElementData("Br", "Bromine", 35, 79.904),
            ElementData("Kr", "Krypton", 36, 83.798),
            ElementData("Rb", "Rubidium", 37, 85.4678),
            ElementData("Sr", "Strontium", 38, 87.62),
            ElementData("Y", "Yttrium", 39, 88.90584),
            ElementData("Zr", "Zirconium", 40, 91.224),
            ElementData("Nb", "Niobium", 41, 92.90637),
            ElementData("Mo", "Molybdenum", 42, 95.95),
            ElementData("Tc", "Technetium", 43, 97.90721),
            ElementData("Ru", "Ruthenium", 44, 101.07),
            ElementData("Rh", "Rhodium", 45, 102.9055),
            ElementData("Pd", "Palladium", 46, 106.42),
            ElementData("Ag", "Silver", 47, 107.8682),
            ElementData("Cd", "Cadmium", 48, 112.414),
            ElementData("In", "Indium", 49, 114.818),
            ElementData("Sn", "Tin", 50, 118.71),
            ElementData("Sb", "Antimony", 51, 121.76),
            ElementData("Te", "Tellurium", 52, 127.6),
            ElementData("I", "Iodine", 53, 126.90447),
            ElementData("Xe", "Xenon", 54, 131.293),
            ElementData("Cs", "Caesium", 55, 132.90545196),
            ElementData("Ba", "Barium", 56, 137.327),
            ElementData("La", "Lanthanum", 57, 138.90547),
            ElementData("Ce", "Cerium", 58, 140.116),
            ElementData("Pr", "Praseodymium", 59, 140.90766),
            ElementData("Nd", "Neodymium", 60, 144.242),
            ElementData("Pm", "Promethium", 61, 144.91276),
            ElementData("Sm", "Samarium", 62, 150.36),
            ElementData("Eu", "Europium", 63, 151.964),
            ElementData("Gd", "Gadolinium", 64, 157.25),
            ElementData("Tb", "Terbium", 65, 158.92535),
            ElementData("Dy", "Dysprosium", 66, 162.5),
            ElementData("Ho", "Holmium", 67, 164.93033),
            ElementData("Er", "Erbium", 68, 167.259),
            ElementData("Tm", "Thulium", 69, 168.93422),
            ElementData("Yb", "Ytterbium", 70, 173.054),
            ElementData("Lu", "Lutetium", 71, 174.9668),
            ElementData("Hf", "Hafnium", 72, 178.49),
            ElementData("Ta", "Tantalum", 73, 180.94788),
            ElementData("W", "Tungsten", 74, 183.84),
            ElementData("Re", "Rhenium", 75, 186.207),
            ElementData("Os", "Osmium", 76, 190.23),
            ElementData("Ir", "Iridium", 77, 192.217),
            ElementData("Pt", "Platinum", 78, 195.084),
            ElementData("Au", "Gold", 79, 196.966569),
            ElementData("Hg", "Mercury", 80, 200.592),
            ElementData("Tl", "Thallium", 81, 204.38),
            ElementData("Pb", "Lead", 82, 207.2),
            ElementData("Bi", "Bismuth", 83, 208.9804),
            ElementData("Po", "Polonium", 84, 208.98243),
            ElementData("At", "Astatine", 85, 209.98715),
            ElementData("Rn", "Radon", 86, 222.01758),
            ElementData("Fr", "Francium", 87, 223.01974),
            ElementData("Ra", "Radium", 88, 226.02541),
            ElementData("Ac", "Actinium", 89, 227.02775),
            ElementData("Th", "Thorium", 90, 232.0377),
            ElementData("Pa", "Protactinium", 91, 231.03588),
            ElementData("U", "Uranium", 92, 238.02891),
            ElementData("Np", "Neptunium", 93, 237.04817),
            ElementData("Pu", "Plutonium", 94, 244.06421),
            ElementData("Am", "Americium", 95, 243.06138),
            ElementData("Cm", "Curium", 96, 247.07035),
            ElementData("Bk", "Berkelium", 97, 247.07031),
            ElementData("Cf", "Californium", 98, 251.07959),
            ElementData("Es", "Einsteinium", 99, 252.083),
            ElementData("Fm", "Fermium", 100, 257.09511),
            ElementData("Md", "Mendelevium", 101, 258.09843),
            ElementData("No", "Nobelium", 102, 259.101),
            ElementData("Lr", "Lawrencium", 103, 262.11),
            ElementData("Rf", "Rutherfordium", 104, 267.122),
            ElementData("Db", "Dubnium", 105, 268.126),
            ElementData("Sg", "Seaborgium", 106, 271.134),
            ElementData("Bh", "Bohrium", 107, 270.133),
            ElementData("Hs", "Hassium", 108, 269.1338),
            ElementData("Mt", "Meitnerium", 109, 278.156),
            ElementData("Ds", "Darmstadtium", 110, 281.165),
            ElementData("Rg", "Roentgenium", 111, 281.166),
            ElementData("Cn", "Copernicium", 112, 285.177),
            ElementData("Nh", "Nihonium", 113, 286.182),
            ElementData("Fl", "Flerovium", 114, 289.19),
            ElementData("Mc", "Moscovium", 115, 289.194),
            ElementData("Lv", "Livermorium", 116, 293.204),
            ElementData("Ts", "Tennessine", 117, 293.208),
            ElementData("Og", "Oganesson", 118, 294.214),
        ]

        for element in elements_data:
            self._elements_by_symbol[element.symbol] = element
            self._elements_by_number[element.atomic_number] = element

    def get_element(self, identifier: Identifier) -> Optional[ElementData]:
        """
        Get element data by symbol or atomic number.

        Args:
            identifier: Element symbol (str, e.g., 'Cu') or atomic number
                (int or numpy integer, e.g., 29).

        Returns:
            ElementData if found, None otherwise.

        Raises:
            TypeError: If identifier is neither str nor integer.
        """
        if isinstance(identifier, str):
            return self._elements_by_symbol.get(identifier)
        elif isinstance(identifier, (int, np.integer)) and not isinstance(
            identifier, bool
        ):
            return self._elements_by_number.get(int(identifier))
        else:
            raise TypeError(
                f"Identifier must be str or int, got {type(identifier).__name__}"
            )

    def __getitem__(self, identifier: Identifier) -> ElementData:
        """
        Support indexing: registry['Cu'] or registry[29].

        Raises:
            UnknownSymbolError: If element not found.
        """
        element = self.get_element(identifier)
        if element is None:
            raise UnknownSymbolError(f"Element '{identifier}' not found")
        return element

    def get_number(self, symbol: str) -> int:
        """
        Get atomic number by chemical symbol.

        Raises:
            UnknownSymbolError: If the symbol is not a known element.
        """
        if not isinstance(symbol, str):
            raise UnknownSymbolError(f"Chemical symbol must be str, got {symbol!r}")
        return self[symbol].atomic_number

    def get_symbol(self, number: int) -> str:
        """
        Get chemical symbol by atomic number.

        Raises:
            UnknownSymbolError: If no element has this atomic number.
        """
        return self[number].symbol

    def get_mass(self, identifier: Identifier) -> float:
        """
        Get standard atomic mass by symbol or atomic number.

        Args:
            identifier: Chemical symbol or atomic number.

        Returns:
            Atomic mass in amu.

        Raises:
            UnknownSymbolError: If element not found in registry.

        Example:
            >>> from pyatoms.core import elements
            >>> elements.get_mass('Cu')
            63.546
        """
        return self[identifier].atomic_mass

    def get_masses(self, numbers) -> np.ndarray:
        """Return standard masses for an array of atomic numbers."""
        return np.array(
            [self.get_mass(int(z)) for z in np.ravel(numbers)], dtype=np.float64
        )

    def to_number(self, identifier: Identifier) -> int:
        """
        Normalize a symbol or atomic number to a validated atomic number.

        Raises:
            UnknownSymbolError: If the identifier is not a known element.
        """
        if isinstance(identifier, str):
            return self.get_number(identifier)
        try:
            return self[identifier].atomic_number
        except TypeError:
            raise UnknownSymbolError(f"Element '{identifier}' not found") from None

    def has_element(self, identifier: Identifier) -> bool:
        """Check if element exists in registry."""
        return self.get_element(identifier) is not None

    def list_elements(self) -> List[str]:
        """Return element symbols ordered by atomic number."""
        return [
            self._elements_by_number[z].symbol
            for z in sorted(self._elements_by_number)
        ]

    def __contains__(self, identifier: Identifier) -> bool:
        """Support 'in' operator."""
        return self.has_element(identifier)

    def __len__(self) -> int:
        """Return number of elements in registry."""
        return len(self._elements_by_symbol)


# Module-level convenience instance (Singleton)
elements = ElementRegistry()
