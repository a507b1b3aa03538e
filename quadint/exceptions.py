"""
Algebraic error conditions.

Each exception carries the data needed to explain (and often recover from) the failure: the causing
numbers, the exact fractional quotient, a best-effort factorization, and so on.
"""
from fractions import Fraction
from functools import cmp_to_key
from math import ceil, floor, sqrt
from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from .quad import QuadraticInteger
    from .ring import IntegerRing, QuadraticRing

__all__ = [
    "AlgebraicError",
    "AlgebraicDegreeOverflowError",
    "NotDivisibleError",
    "NonEuclideanDomainError",
    "NonUniqueFactorizationError",
    "UnsupportedNumberDomainError",
    "ArithmeticRangeError",
]


class AlgebraicError(ArithmeticError):
    """Base class for conditions raised by the quadratic integer engine."""


class AlgebraicDegreeOverflowError(AlgebraicError):
    """
    The result of an operation has a higher algebraic degree than any ring involved can represent.

    Attributes:
        max_expected_degree: The largest degree the operands' rings support.
        necessary_degree: The degree the result would need (the product of the operands' degrees).
        causing_numbers: The operands.
    """

    def __init__(self, max_expected_degree: int, necessary_degree: int, *causing_numbers: Any,
                 message: Optional[str] = None) -> None:
        if message is None:
            message = (f"Result needs algebraic degree {necessary_degree}, "
                       f"but at most {max_expected_degree} is representable")
        super().__init__(message)
        self.max_expected_degree = max_expected_degree
        self.necessary_degree = necessary_degree
        self.causing_numbers = causing_numbers


class NotDivisibleError(AlgebraicError):
    """
    A division whose exact quotient is not an algebraic integer of the ring.

    The exact quotient is kept as fractions = (reg, surd), meaning reg + surd * sqrt(d).

    Attributes:
        dividend: The number that was divided.
        divisor: The number it was divided by.
        ring: The ring the division took place in.
        fractions: The exact quotient coordinates.
    """

    def __init__(self, dividend: "QuadraticInteger", divisor: "QuadraticInteger", ring: "QuadraticRing",
                 fractions: tuple[Fraction, Fraction]) -> None:
        reg, surd = fractions
        super().__init__(f"{dividend!r} is not divisible by {divisor!r} in {ring}; "
                         f"the exact quotient is {reg} + {surd}*sqrt({ring.radicand})")
        self.dividend = dividend
        self.divisor = divisor
        self.ring = ring
        self.fractions = (Fraction(reg), Fraction(surd))

    @property
    def numeric_real_part(self) -> float:
        """Approximate real part of the exact quotient."""
        reg, surd = self.fractions
        if self.ring.is_purely_real:
            return float(reg) + float(surd) * self.ring.abs_radicand_sqrt
        return float(reg)

    @property
    def numeric_imag_part(self) -> float:
        """Approximate imaginary part of the exact quotient (0.0 in a real ring)."""
        if self.ring.is_purely_real:
            return 0.0
        return float(self.fractions[1]) * self.ring.abs_radicand_sqrt

    def __abs__(self) -> float:
        return sqrt(self.numeric_real_part ** 2 + self.numeric_imag_part ** 2)

    def bounding_integers(self) -> tuple["QuadraticInteger", ...]:
        """
        The 4 algebraic integers at the corners of the lattice cell holding the exact quotient.

        Coordinates are taken over the integral basis {1, w}, where w = sqrt(d), or (1 + sqrt(d))/2
        when d = 1 mod 4, and each one is floored and ceiled independently. When a coordinate is
        already integral the corresponding corners coincide.

        Returns:
            tuple: (floor/floor, ceil/floor, floor/ceil, ceil/ceil)
        """
        from .quad import QuadraticInteger

        reg, surd = self.fractions
        if self.ring.has_half_integers:
            x, y = reg - surd, 2 * surd
        else:
            x, y = reg, surd

        corners = []
        for cy in (floor(y), ceil(y)):
            for cx in (floor(x), ceil(x)):
                corners.append(QuadraticInteger.from_coordinates(self.ring, cx, cy))
        return tuple(corners)

    def _ordered_corners(self) -> list["QuadraticInteger"]:
        """Bounding integers sorted by absolute value, then |norm|, then coordinates."""
        from .quad import compare_magnitude

        def _cmp(u: "QuadraticInteger", v: "QuadraticInteger") -> int:
            c = compare_magnitude(u, v)
            if c:
                return c
            nu, nv = abs(u.norm()), abs(v.norm())
            if nu != nv:
                return -1 if nu < nv else 1
            cu, cv = u.coordinates(), v.coordinates()
            return (cu > cv) - (cu < cv)

        return sorted(set(self.bounding_integers()), key=cmp_to_key(_cmp))

    def round_towards_zero(self) -> "QuadraticInteger":
        """The bounding integer closest to zero."""
        return self._ordered_corners()[0]

    def round_away_from_zero(self) -> "QuadraticInteger":
        """
        The bounding integer farthest from zero.

        Ties between equally distant corners still go to the smaller norm.
        """
        from .quad import compare_magnitude

        corners = self._ordered_corners()
        return next(c for c in corners if compare_magnitude(c, corners[-1]) == 0)


class NonEuclideanDomainError(AlgebraicError):
    """
    The Euclidean algorithm was asked to run in a ring that is not known to be norm-Euclidean.

    Attributes:
        attempted_numbers: The two numbers whose GCD was requested.
    """

    def __init__(self, a: "QuadraticInteger", b: "QuadraticInteger", message: Optional[str] = None) -> None:
        if message is None:
            message = f"{a.ring} is not a norm-Euclidean domain; the Euclidean GCD of {a!r} and {b!r} is undefined"
        super().__init__(message)
        self.attempted_numbers = (a, b)

    def try_euclidean_gcd_anyway(self) -> "QuadraticInteger":
        """
        Run the Euclidean descent regardless.

        Raises:
            NonEuclideanDomainError: If the descent stops decreasing, which is expected in most such rings.

        Returns:
            QuadraticInteger: A common divisor, normalized up to the finite units.
        """
        a, b = self.attempted_numbers
        return a.gcd(b)


class NonUniqueFactorizationError(AlgebraicError):
    """
    The number was factorized in a ring that is not a unique factorization domain.

    The carried factorization is valid, but may not be the only one. Each irreducible factor that is
    not prime is followed by two -1 entries marking that an alternate factorization may replace it.
    Markers only ever follow a non-unit factor. A unit needed to restore the product comes first and
    is a real factor, so -6 in Z[sqrt(-5)] carries [-1, 2, -1, -1, 3, -1, -1].

    Attributes:
        unfactorized_number: The number that was factorized.
        factors: The factors, with the -1 markers.
    """

    def __init__(self, number: "QuadraticInteger", factors: list["QuadraticInteger"],
                 message: Optional[str] = None) -> None:
        if message is None:
            message = f"{number.ring} is not a unique factorization domain; {number!r} may factor in several ways"
        super().__init__(message)
        self.unfactorized_number = number
        self.factors = tuple(factors)

    def try_to_factorize_anyway(self) -> list["QuadraticInteger"]:
        """The factorization carried by this error, -1 markers included."""
        return list(self.factors)


class UnsupportedNumberDomainError(AlgebraicError):
    """
    An algorithm was given a ring (or number) of a kind it does not implement.

    Attributes:
        causing_ring: The offending ring, if known.
        causing_numbers: The offending numbers, if any.
    """

    def __init__(self, message: str, ring: Optional["IntegerRing"] = None, *numbers: Any) -> None:
        super().__init__(message)
        if ring is None and numbers:
            ring = getattr(numbers[0], "ring", None)
        self.causing_ring = ring
        self.causing_numbers = numbers


class ArithmeticRangeError(AlgebraicError, OverflowError):
    """
    The answer exists but lies beyond the configured search or size bounds.

    Attributes:
        ring: The ring being searched.
        bound: The bound that was exceeded.
    """

    def __init__(self, message: str, ring: Optional["IntegerRing"] = None, bound: Optional[int] = None) -> None:
        super().__init__(message)
        self.ring = ring
        self.bound = bound
