"""Units of quadratic rings and the searches built on them."""
import logging

from functools import cache
from math import isqrt
from typing import Iterator

from .config import DEFAULT_LIMITS, SearchLimits
from .exceptions import ArithmeticRangeError, UnsupportedNumberDomainError
from .quad import QuadraticInteger
from .ring import IntegerRing, QuadraticRing
from .utils import is_perfect_square

logger = logging.getLogger(__name__)


def _require_quadratic(ring: IntegerRing) -> QuadraticRing:
    if not isinstance(ring, QuadraticRing):
        raise UnsupportedNumberDomainError(f"{ring!r} is not a quadratic ring", ring)
    return ring


@cache
def fundamental_unit(ring: QuadraticRing, limits: SearchLimits = DEFAULT_LIMITS) -> QuadraticInteger:
    """
    The fundamental unit of a real quadratic ring, the smallest unit greater than 1.

    Found from the continued fraction of (P0 + sqrt(d))/Q0 (the PQa algorithm): with P0 = 1, Q0 = 2
    when d = 1 mod 4 (solving x^2 - d*y^2 = +-4 for the numerators of (x + y*sqrt(d))/2) and
    P0 = 0, Q0 = 1 otherwise (x^2 - d*y^2 = +-1). The first convergent reached when Q returns to Q0
    gives the unit, of norm 1 or -1.

    Args:
        ring: A real quadratic ring.
        limits: Bounds on the number of steps and the coordinate size.

    Raises:
        ValueError: If the ring is imaginary; its unit group is finite.
        UnsupportedNumberDomainError: If the ring is not quadratic.
        ArithmeticRangeError: If the unit's coordinates exceed limits.unit_coordinate_bits, or the
            expansion takes more than limits.unit_steps steps.

    Returns:
        QuadraticInteger: The fundamental unit.
    """
    ring = _require_quadratic(ring)
    if not ring.is_purely_real:
        raise ValueError(f"{ring} is imaginary; its unit group is finite and has no fundamental unit")

    d = ring.radicand
    p, q = (1, 2) if ring.has_half_integers else (0, 1)
    q0 = q
    root = isqrt(d)

    g_prev2, g_prev = -p, q
    b_prev2, b_prev = 1, 0
    bits = limits.unit_coordinate_bits
    for step in range(limits.unit_steps):
        a = (p + root) // q
        g = a * g_prev + g_prev2
        b = a * b_prev + b_prev2
        p = a * q - p
        q = (d - p * p) // q

        if bits is not None and max(g.bit_length(), b.bit_length()) > bits:
            raise ArithmeticRangeError(f"The fundamental unit of {ring} has coordinates wider than {bits} bits",
                                       ring, bits)

        if q == q0:
            unit = QuadraticInteger._make(ring, g, b) if q0 == 2 else QuadraticInteger(g, b, ring)
            logger.debug("Fundamental unit of %s is %r (norm %d) after %d steps", ring, unit, unit.norm(), step + 1)
            return unit

        g_prev2, g_prev = g_prev, g
        b_prev2, b_prev = b_prev, b

    raise ArithmeticRangeError(f"No fundamental unit of {ring} within {limits.unit_steps} steps",
                               ring, limits.unit_steps)


def _unit_ceiling(unit: QuadraticInteger) -> int:
    """An integer strictly above the (positive) real value of a unit (A + B*sqrt(d))/2."""
    a, b = unit.numerators()
    return (a + isqrt(b * b * unit.ring.radicand) + 1) // 2 + 1


def divide_out_units(x: QuadraticInteger, limits: SearchLimits = DEFAULT_LIMITS) -> QuadraticInteger:
    """
    The canonical associate of x.

    Imaginary rings: the associate in the primary sector (see QuadraticInteger._normalize_unit).
    Real rings: the positive associate a with sqrt(|N(x)|) <= a < sqrt(|N(x)|) * eps, eps being the
    fundamental unit. Comparisons are exact.

    Applying it twice changes nothing; units map to 1 and zero maps to itself.

    Returns:
        QuadraticInteger: The canonical associate.
    """
    if not isinstance(x, QuadraticInteger):
        raise UnsupportedNumberDomainError(f"Cannot divide out units of {x!r}", None, x)
    if not x or not x.ring.is_purely_real:
        return x._normalize_unit()

    n = abs(x.norm())
    eps = fundamental_unit(x.ring, limits)
    eps_inv = eps.conjugate() * eps.norm()
    upper = eps * eps * n

    s = -x if x.sign() < 0 else x
    while (s * s - n).sign() < 0:
        s = s * eps
    while (s * s - upper).sign() >= 0:
        s = s * eps_inv
    return s


def elements_of_norm(ring: QuadraticRing, n: int, limits: SearchLimits = DEFAULT_LIMITS) \
        -> Iterator[QuadraticInteger]:
    """
    Elements of absolute norm n, at least one from every class of associates.

    In imaginary rings every solution of A^2 + |d|*B^2 = 4n is produced. In real rings each
    associate class has a member with |B| <= 2*sqrt(n*eps/d) (eps the fundamental unit), and
    A^2 - d*B^2 = +-4n is solved over that range.

    Raises:
        ArithmeticRangeError: If the range to scan exceeds limits.principal_search.

    Yields:
        QuadraticInteger: (A + B*sqrt(d))/2 with |N| = n.
    """
    ring = _require_quadratic(ring)
    n = abs(n)
    d = ring.radicand

    if ring.is_imaginary:
        b_max = isqrt(4 * n // -d)
    else:
        b_max = isqrt(4 * n * _unit_ceiling(fundamental_unit(ring, limits)) // d) + 1

    if b_max + 1 > limits.principal_search:
        raise ArithmeticRangeError(f"Searching {ring} for norm {n} needs {b_max + 1} candidates",
                                   ring, limits.principal_search)

    targets = (4 * n,) if ring.is_imaginary else (4 * n, -4 * n)
    for b in range(b_max + 1):
        for target in targets:
            a2 = target + d * b * b
            if not is_perfect_square(a2):
                continue

            a = isqrt(a2)
            if (a ^ b) & 1 or (a & 1 and not ring.has_half_integers):
                continue

            for sa, sb in dict.fromkeys(((a, b), (a, -b), (-a, b), (-a, -b))):
                yield QuadraticInteger._make(ring, sa, sb)
