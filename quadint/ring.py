from abc import ABC, abstractmethod
from dataclasses import dataclass
from fractions import Fraction
from math import sqrt

from .arith import is_squarefree
from .utils import is_perfect_square

NORM_EUCLIDEAN_IMAGINARY_RADICANDS = (-11, -7, -3, -2, -1)
NORM_EUCLIDEAN_REAL_RADICANDS = (2, 3, 5, 6, 7, 11, 13, 17, 19, 21, 29, 33, 37, 41, 57, 73)
NORM_EUCLIDEAN_QUADRATIC_RADICANDS = NORM_EUCLIDEAN_IMAGINARY_RADICANDS + NORM_EUCLIDEAN_REAL_RADICANDS

# Imaginary quadratic rings of class number one
HEEGNER_NUMBERS = (-163, -67, -43, -19, -11, -7, -3, -2, -1)


@dataclass(frozen=True)
class PowerBasis:
    """
    Integral basis of a ring written in powers of its adjoined root a.

    The i-th basis element is:

        multipliers[i] * a**i + adjustment_multipliers[i] * a + additive_adjustments[i]

    So Z[sqrt(d)] has basis {1, a} and O_Q(sqrt(d)) has basis {1, a/2 + 1/2}.
    """
    multipliers: tuple[Fraction, ...]
    adjustment_multipliers: tuple[Fraction, ...]
    additive_adjustments: tuple[Fraction, ...]

    def __post_init__(self) -> None:
        n = len(self.multipliers)
        if n < 1 or len(self.adjustment_multipliers) != n or len(self.additive_adjustments) != n:
            raise ValueError("Power basis sequences must be non-empty and of equal length")

    @property
    def degree(self) -> int:
        return len(self.multipliers)


class IntegerRing(ABC):
    """A ring of algebraic integers."""

    __slots__ = ()

    @property
    @abstractmethod
    def max_algebraic_degree(self) -> int:
        """Largest algebraic degree of an element of this ring."""

    @property
    @abstractmethod
    def is_purely_real(self) -> bool:
        """True iff the ring embeds in the real numbers."""

    @property
    @abstractmethod
    def discriminant(self) -> int:
        """The discriminant of the ring's field."""

    @property
    @abstractmethod
    def power_basis(self) -> PowerBasis:
        """The integral basis in powers of the adjoined root."""


class AlgebraicInteger(ABC):
    """An element of an IntegerRing."""

    __slots__ = ()

    @property
    @abstractmethod
    def ring(self) -> IntegerRing:
        """The ring this number belongs to."""

    @abstractmethod
    def algebraic_degree(self) -> int:
        """Degree of the minimal polynomial over Z (0 for zero)."""

    @abstractmethod
    def norm(self) -> int:
        """Product of the number and its conjugates."""

    @abstractmethod
    def trace(self) -> int:
        """Sum of the number and its conjugates."""

    @abstractmethod
    def min_polynomial_coeffs(self) -> tuple[int, ...]:
        """Minimal polynomial coefficients, constant term first."""


class QuadraticRing(IntegerRing):
    """
    The ring of integers of Q(sqrt(d)) for a squarefree d other than 0 and 1.

    That ring is Z[sqrt(d)], except when d = 1 mod 4, where it also holds the "half-integers"
    (a + b*sqrt(d))/2 with a and b both odd.
    """

    __slots__ = ("_radicand",)

    def __init__(self, d: int) -> None:
        """
        Args:
            d: The radicand.

        Raises:
            TypeError: If d is not an integer.
            ValueError: If d is 0, 1, or has a square factor.
        """
        if isinstance(d, bool) or not isinstance(d, int):
            raise TypeError(f"The radicand must be an integer, not {type(d).__name__}")

        if d == 0 or is_perfect_square(d):
            raise ValueError(f"{d} is a perfect square; Q(sqrt({d})) is not a quadratic field")

        if not is_squarefree(d):
            raise ValueError(f"{d} is not squarefree")

        self._radicand = d

    @property
    def radicand(self) -> int:
        return self._radicand

    @property
    def has_half_integers(self) -> bool:
        """True iff d = 1 mod 4, so (1 + sqrt(d))/2 is an algebraic integer."""
        return self._radicand % 4 == 1

    @property
    def is_imaginary(self) -> bool:
        return self._radicand < 0

    @property
    def is_purely_real(self) -> bool:
        return self._radicand > 0

    @property
    def max_algebraic_degree(self) -> int:
        return 2

    @property
    def discriminant(self) -> int:
        d = self._radicand
        return d if d % 4 == 1 else 4 * d

    @property
    def abs_radicand_sqrt(self) -> float:
        """sqrt(|d|) as a float. Display and estimates only."""
        return sqrt(abs(self._radicand))

    @property
    def power_basis(self) -> PowerBasis:
        zero, one = Fraction(0), Fraction(1)
        if self.has_half_integers:
            half = Fraction(1, 2)
            return PowerBasis((one, half), (zero, zero), (zero, half))
        return PowerBasis((one, one), (zero, zero), (zero, zero))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, QuadraticRing):
            return NotImplemented
        return self._radicand == other._radicand

    def __hash__(self) -> int:
        return hash(("QuadraticRing", self._radicand))

    def __repr__(self) -> str:
        return f"QuadraticRing({self._radicand})"

    def __str__(self) -> str:
        if self.has_half_integers:
            return f"O_Q(sqrt({self._radicand}))"
        return f"Z[sqrt({self._radicand})]"
