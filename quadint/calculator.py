"""
Number-theoretic algorithms over the rational integers and quadratic rings.

Everything here is a plain function of its arguments. The only shared state is the prime cache used
by trial division (quadint.utils.PRIME_CACHE) and the per-ring memoisation of the unit and class
number searches.
"""
import logging

from functools import cache
from math import gcd, isqrt, pi, sqrt
from typing import Optional, Union

from sympy import divisors

from .arith import (is_rational_prime, is_squarefree, kernel, moebius_mu, random_squarefree_number,
                    random_squarefree_number_mod, rational_prime_factors, squarefree_decomposition, symbol_jacobi,
                    symbol_kronecker, symbol_legendre)
from .config import DEFAULT_LIMITS, SearchLimits
from .exceptions import NonEuclideanDomainError, NonUniqueFactorizationError, UnsupportedNumberDomainError
from .ideal import Ideal
from .quad import QuadraticInteger
from .ring import (HEEGNER_NUMBERS, NORM_EUCLIDEAN_IMAGINARY_RADICANDS, NORM_EUCLIDEAN_QUADRATIC_RADICANDS,
                   NORM_EUCLIDEAN_REAL_RADICANDS, AlgebraicInteger, IntegerRing, QuadraticRing)
from .units import divide_out_units, elements_of_norm, fundamental_unit

logger = logging.getLogger(__name__)

__all__ = [
    "NORM_EUCLIDEAN_QUADRATIC_RADICANDS", "NORM_EUCLIDEAN_IMAGINARY_RADICANDS", "NORM_EUCLIDEAN_REAL_RADICANDS",
    "HEEGNER_NUMBERS", "RING_GAUSSIAN", "IMAG_UNIT_I", "RING_EISENSTEIN", "COMPLEX_CUBIC_ROOT_OF_UNITY",
    "RING_ZPHI", "GOLDEN_RATIO",
    "euclidean_gcd", "is_prime", "is_irreducible", "prime_factors", "irreducible_factors", "is_ufd",
    "fundamental_unit", "divide_out_units", "elements_of_norm", "field_class_number",
    "symbol_legendre", "symbol_jacobi", "symbol_kronecker",
    "is_squarefree", "kernel", "moebius_mu", "squarefree_decomposition",
    "random_squarefree_number", "random_squarefree_number_mod",
]

RING_GAUSSIAN = QuadraticRing(-1)
IMAG_UNIT_I = QuadraticInteger(0, 1, RING_GAUSSIAN)
RING_EISENSTEIN = QuadraticRing(-3)
COMPLEX_CUBIC_ROOT_OF_UNITY = QuadraticInteger(-1, 1, RING_EISENSTEIN, 2)
RING_ZPHI = QuadraticRing(5)
GOLDEN_RATIO = QuadraticInteger(1, 1, RING_ZPHI, 2)

NUMBER_TYPES = Union[QuadraticInteger, int]


def _quadratic(x: object) -> QuadraticInteger:
    """Reject numbers from ring kinds the algorithms here do not handle."""
    if isinstance(x, QuadraticInteger):
        return x
    if isinstance(x, AlgebraicInteger):
        raise UnsupportedNumberDomainError(f"{type(x).__name__} numbers are not supported", x.ring, x)
    if x is None:
        raise TypeError("A number is required, not None")
    raise TypeError(f"Expected an int or QuadraticInteger, not {type(x).__name__}")


def _quadratic_ring(ring: object) -> QuadraticRing:
    if isinstance(ring, QuadraticRing):
        return ring
    if isinstance(ring, IntegerRing):
        raise UnsupportedNumberDomainError(f"{type(ring).__name__} rings are not supported", ring)
    raise TypeError(f"Expected a QuadraticRing, not {type(ring).__name__}")


# region GCD
def euclidean_gcd(a: NUMBER_TYPES, b: NUMBER_TYPES, limits: SearchLimits = DEFAULT_LIMITS) -> NUMBER_TYPES:
    """
    Greatest common divisor by the Euclidean algorithm.

    Two ints give their non-negative gcd. Quadratic integers must come from a norm-Euclidean ring
    (an int operand joins the ring of the other one); the result is the canonical associate
    (see divide_out_units).

    Raises:
        NonEuclideanDomainError: If the ring is not on the norm-Euclidean list.
        ArithmeticRangeError: If a step needs a wider quotient search than limits.euclidean_radius.
        AlgebraicDegreeOverflowError: If the operands come from different rings.
        UnsupportedNumberDomainError: For numbers of other ring kinds.

    Returns:
        The gcd.
    """
    if isinstance(a, int) and isinstance(b, int):
        return gcd(a, b)

    if isinstance(a, int):
        y = _quadratic(b)
        x = y._from_obj(a)
    else:
        pair = _quadratic(a)._align(b if isinstance(b, int) else _quadratic(b))
        assert pair is not None
        x, y = pair

    if x.ring.radicand not in NORM_EUCLIDEAN_QUADRATIC_RADICANDS:
        raise NonEuclideanDomainError(x, y)

    return divide_out_units(x.gcd(y, limits=limits, normalize=False), limits)
# endregion


# region primality
def _norm_is_prime_or_inert_square(x: QuadraticInteger) -> bool:
    n = abs(x.norm())
    if is_rational_prime(n):
        return True

    p = isqrt(n)
    return p * p == n and is_rational_prime(p) and symbol_kronecker(x.ring.discriminant, p) == -1


def is_prime(x: NUMBER_TYPES) -> bool:
    """
    Primality.

    A rational integer is prime when its absolute value is. A quadratic integer is prime when its
    norm is a rational prime up to sign, or the square of a rational prime p that is inert in the
    ring (Kronecker symbol (D/p) == -1), in which case it is an associate of p. Zero and units are
    never prime.
    """
    if isinstance(x, int):
        return is_rational_prime(x)

    return _norm_is_prime_or_inert_square(_quadratic(x))


def _smallest_divisor(x: QuadraticInteger, limits: SearchLimits) -> Optional[QuadraticInteger]:
    """A non-unit proper divisor of x of smallest absolute norm, or None if x is irreducible."""
    n = abs(x.norm())
    for m in divisors(n)[1:-1]:
        for ideal in Ideal.with_norm(x.ring, m):
            if not ideal.contains(x):
                continue

            generator = ideal.principal_generator(limits)
            if generator is not None:
                return generator

    return None


def is_irreducible(x: NUMBER_TYPES, limits: SearchLimits = DEFAULT_LIMITS) -> bool:
    """
    Irreducibility: x is neither zero nor a unit, and has no divisor of smaller norm other than units.

    Every prime is irreducible; in a ring without unique factorization the converse fails, e.g. 2 in
    Z[sqrt(-5)] is irreducible but not prime.
    """
    if isinstance(x, int):
        return is_rational_prime(x)

    x = _quadratic(x)
    if abs(x.norm()) < 2:
        return False
    if _norm_is_prime_or_inert_square(x):
        return True
    return _smallest_divisor(x, limits) is None
# endregion


# region factorization
def _factor_key(f: QuadraticInteger) -> tuple[int, tuple[int, int]]:
    return abs(f.norm()), f.numerators()


def irreducible_factors(x: NUMBER_TYPES, limits: SearchLimits = DEFAULT_LIMITS) -> list[NUMBER_TYPES]:
    """
    A factorization of x into irreducibles.

    Factors are canonical associates (divide_out_units) in ascending norm; a unit other than 1 needed
    to restore the product comes first. A unit factorizes as itself. For ints this is the rational
    prime factorization.

    Raises:
        ValueError: If x is zero.

    Returns:
        list: The factors, whose product is x.
    """
    if isinstance(x, int):
        return list(rational_prime_factors(x))

    x = _quadratic(x)
    if not x:
        raise ValueError("0 has no factorization")
    if x.is_unit():
        return [x]

    factors: list[QuadraticInteger] = []
    rest = x
    while abs(rest.norm()) > 1:
        divisor = _smallest_divisor(rest, limits)
        factor = divide_out_units(divisor if divisor is not None else rest, limits)
        logger.debug("Irreducible factor %r of %r (norm %d)", factor, x, factor.norm())

        factors.append(factor)
        rest = rest / factor

    factors.sort(key=_factor_key)
    if rest != 1:
        return [rest, *factors]
    return list(factors)


def prime_factors(x: NUMBER_TYPES, limits: SearchLimits = DEFAULT_LIMITS) -> list[NUMBER_TYPES]:
    """
    The prime factorization of x.

    Ints give their rational prime factors (with -1 first for negatives). Quadratic integers of a
    unique factorization domain give irreducible_factors(x).

    Raises:
        NonUniqueFactorizationError: If the ring is not a unique factorization domain. The error
            still carries a factorization, in which every irreducible factor that is not prime is
            followed by two -1 markers. A leading unit is a factor, never a marker.

    Returns:
        list: The factors.
    """
    if isinstance(x, int):
        return rational_prime_factors(x)

    x = _quadratic(x)
    factors = irreducible_factors(x, limits)
    if is_ufd(x.ring, limits):
        return factors

    marked: list[QuadraticInteger] = []
    for f in factors:
        marked.append(f)
        if not f.is_unit() and not is_prime(f):
            minus_one = QuadraticInteger(-1, 0, x.ring)
            marked.extend((minus_one, minus_one))

    raise NonUniqueFactorizationError(x, marked)


def is_ufd(ring: IntegerRing, limits: SearchLimits = DEFAULT_LIMITS) -> bool:
    """
    True iff the ring has unique factorization.

    Imaginary rings: exactly the Heegner numbers. Real rings: the norm-Euclidean ones, otherwise
    class number one.
    """
    ring = _quadratic_ring(ring)
    if ring.is_imaginary:
        return ring.radicand in HEEGNER_NUMBERS
    if ring.radicand in NORM_EUCLIDEAN_REAL_RADICANDS:
        return True
    return field_class_number(ring, limits) == 1
# endregion


# region class number
def _minkowski_bound(ring: QuadraticRing) -> int:
    """Every ideal class holds an ideal of norm at most this."""
    disc = ring.discriminant
    if disc < 0:
        return int(2 * sqrt(-disc) / pi)
    return int(sqrt(disc) / 2)


@cache
def field_class_number(ring: IntegerRing, limits: SearchLimits = DEFAULT_LIMITS) -> int:
    """
    The class number of the ring: the number of ideal classes, I ~ J iff I * conj(J) is principal.

    Every class holds an ideal of norm below the Minkowski bound, so the ideals up to that bound are
    enumerated and sorted into classes.

    Raises:
        ArithmeticRangeError: If a principal ideal search exceeds its limits.
        UnsupportedNumberDomainError: If the ring is not quadratic.
    """
    ring = _quadratic_ring(ring)
    if ring.radicand in HEEGNER_NUMBERS or ring.radicand in NORM_EUCLIDEAN_REAL_RADICANDS:
        return 1

    representatives = [Ideal(QuadraticInteger(1, 0, ring))]
    bound = _minkowski_bound(ring)
    for n in range(2, bound + 1):
        for ideal in Ideal.with_norm(ring, n):
            if not any((ideal * r.conjugate()).is_principal(limits) for r in representatives):
                representatives.append(ideal)

    logger.debug("Class number of %s is %d (Minkowski bound %d)", ring, len(representatives), bound)
    return len(representatives)
# endregion
