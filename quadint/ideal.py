import logging

from math import gcd, isqrt
from typing import Iterable, Iterator, Optional, Union

from .arith import is_rational_prime, symbol_kronecker
from .config import DEFAULT_LIMITS, SearchLimits
from .quad import QuadraticInteger
from .ring import HEEGNER_NUMBERS, NORM_EUCLIDEAN_QUADRATIC_RADICANDS, QuadraticRing
from .units import elements_of_norm
from .utils import xgcd

logger = logging.getLogger(__name__)

GENERATOR_TYPES = Union[QuadraticInteger, int]


def _hermite_basis(vectors: Iterable[tuple[int, int]]) -> tuple[int, int, int]:
    """
    Hermite normal form of the lattice spanned by integer vectors (x, y).

    Returns:
        tuple: (a, b, c) with a, c > 0 and 0 <= b < a, so the lattice is spanned by (a, 0) and (b, c);
            (0, 0, 0) for the zero lattice.

    Raises:
        ArithmeticError: If the vectors span a lattice of rank 1 (never the case for an ideal).
    """
    pivot: Optional[tuple[int, int]] = None
    rest = 0  # gcd of everything with y == 0
    for x, y in vectors:
        if not y:
            rest = gcd(rest, x)
            continue
        if pivot is None:
            pivot = (x, y)
            continue

        # Unimodular step: one vector with y == gcd, the other with y == 0
        px, py = pivot
        g, s, t = xgcd(py, y)
        pivot = (s * px + t * x, g)
        rest = gcd(rest, (y // g) * px - (py // g) * x)

    if pivot is None:
        if rest:
            raise ArithmeticError("Generators span a lattice of rank 1")
        return 0, 0, 0

    if not rest:
        raise ArithmeticError("Generators span a lattice of rank 1")

    b, c = pivot
    if c < 0:
        b, c = -b, -c
    return rest, b % rest, c


class Ideal:
    """
    Ideal of a quadratic ring generated by one or two algebraic integers.

    Internally the ideal is kept as its Hermite normal form (a, b, c): as an additive group it is
    spanned by a and b + c*w, where w is the ring's second integral basis element. Equality,
    containment and the norm all come from that form, so generator order and associate generators
    make no difference.
    """

    __slots__ = ("_generators", "_ring", "_hnf")

    _generators: tuple[QuadraticInteger, ...]
    _ring: QuadraticRing
    _hnf: tuple[int, int, int]

    def __init__(self, generator: GENERATOR_TYPES, generator2: Optional[GENERATOR_TYPES] = None) -> None:
        """
        Initialize an Ideal.

        Args:
            generator: The first generator.
            generator2: An optional second generator. Plain ints take the ring of the other generator.

        Raises:
            TypeError: If a generator is missing or no generator determines a ring.
            ValueError: If the generators belong to different rings.
        """
        given = (generator,) if generator2 is None else (generator, generator2)
        ring = None
        for g in given:
            if isinstance(g, QuadraticInteger):
                ring = g.ring
                break
            if isinstance(g, bool) or not isinstance(g, int):
                raise TypeError(f"Ideal generators must be QuadraticIntegers or ints, not {type(g).__name__}")

        if ring is None:
            raise TypeError("At least one generator must be a QuadraticInteger to determine the ring")

        generators = []
        for g in given:
            if isinstance(g, QuadraticInteger):
                if g.ring != ring:
                    raise ValueError(f"Generators from different rings: {ring} and {g.ring}")
                generators.append(g)
            elif isinstance(g, int) and not isinstance(g, bool):
                generators.append(QuadraticInteger(g, 0, ring))
            else:
                raise TypeError(f"Ideal generators must be QuadraticIntegers or ints, not {type(g).__name__}")

        self._ring = ring
        self._generators = tuple(generators)

        w = QuadraticInteger.omega(ring)
        vectors = []
        for g in generators:
            vectors.append(g.coordinates())
            vectors.append((g * w).coordinates())
        self._hnf = _hermite_basis(vectors)

    @classmethod
    def _from_hermite(cls, ring: QuadraticRing, a: int, b: int, c: int) -> "Ideal":
        return cls(QuadraticInteger(a, 0, ring), QuadraticInteger.from_coordinates(ring, b, c))

    @classmethod
    def with_norm(cls, ring: QuadraticRing, n: int) -> Iterator["Ideal"]:
        """
        Every ideal of norm n.

        An ideal is c times a primitive one, and the lattice {a', b' + w} is an ideal exactly when
        a' divides N(b' + w). So the ideals of norm n are c*{a', b' + w} with c^2 * a' == n,
        0 <= b' < a' and a' | N(b' + w).

        Yields:
            Ideal: The ideals, ordered by c and then b'.
        """
        if n < 1:
            return

        w = QuadraticInteger.omega(ring)
        for c in range(1, isqrt(n) + 1):
            if n % (c * c):
                continue

            a = n // (c * c)
            for b in range(a):
                if (w + b).norm() % a == 0:
                    yield cls._from_hermite(ring, c * a, c * b, c)

    @property
    def ring(self) -> QuadraticRing:
        return self._ring

    @property
    def generators(self) -> tuple[QuadraticInteger, ...]:
        return self._generators

    @property
    def hermite_basis(self) -> tuple[int, int, int]:
        """(a, b, c) such that the ideal is the additive group spanned by a and b + c*w."""
        return self._hnf

    def basis(self) -> tuple[QuadraticInteger, QuadraticInteger]:
        """The Z-basis matching hermite_basis."""
        a, b, c = self._hnf
        return QuadraticInteger(a, 0, self._ring), QuadraticInteger.from_coordinates(self._ring, b, c)

    def norm(self) -> int:
        """The index of the ideal in the ring, 0 for the zero ideal."""
        a, _, c = self._hnf
        return a * c

    # region containment
    def contains(self, other: Union[GENERATOR_TYPES, "Ideal"]) -> bool:
        """
        Membership of a number, or inclusion of another ideal.

        Numbers from another ring (except rational ones) are never contained.
        """
        if isinstance(other, Ideal):
            return other._ring == self._ring and all(self.contains(g) for g in other.basis())

        if isinstance(other, int) and not isinstance(other, bool):
            other = QuadraticInteger(other, 0, self._ring)
        if not isinstance(other, QuadraticInteger):
            raise TypeError(f"Cannot test membership of {type(other).__name__}")

        if other.ring != self._ring:
            if other.surd_part:
                return False
            other = QuadraticInteger(other.reg_part, 0, self._ring)

        a, b, c = self._hnf
        x, y = other.coordinates()
        if not a:
            return not x and not y

        if y % c:
            return False
        return (x - (y // c) * b) % a == 0

    def __contains__(self, other: object) -> bool:
        if isinstance(other, (Ideal, QuadraticInteger, int)):
            return self.contains(other)
        return False
    # endregion

    # region principality
    def principal_generator(self, limits: SearchLimits = DEFAULT_LIMITS) -> Optional[QuadraticInteger]:
        """
        A single generator of this ideal, or None if it is not principal.

        Norm-Euclidean rings reduce the generators with the Euclidean algorithm; everywhere else the
        ideal's elements of norm +-N(I) are searched, since any of them generates it.

        Raises:
            ArithmeticRangeError: If the search exceeds its limits.
        """
        if len(self._generators) == 1:
            return self._generators[0]

        n = self.norm()
        if n == 0:
            return QuadraticInteger(0, 0, self._ring)
        if n == 1:
            return QuadraticInteger(1, 0, self._ring)

        if self._ring.radicand in NORM_EUCLIDEAN_QUADRATIC_RADICANDS:
            g1, g2 = self._generators
            return g1.gcd(g2, limits=limits)

        for candidate in elements_of_norm(self._ring, n, limits):
            if self.contains(candidate):
                logger.debug("%r is generated by %r", self, candidate)
                return candidate

        return None

    def is_principal(self, limits: SearchLimits = DEFAULT_LIMITS) -> bool:
        """True iff the ideal is generated by a single element."""
        if len(self._generators) == 1 or self.norm() in (0, 1):
            return True
        if self._ring.radicand in NORM_EUCLIDEAN_QUADRATIC_RADICANDS or self._ring.radicand in HEEGNER_NUMBERS:
            return True
        return self.principal_generator(limits) is not None
    # endregion

    def is_maximal(self) -> bool:
        """
        True iff the ideal is a nonzero prime ideal.

        That is the case when the norm is a rational prime, and for the ideal generated by a rational
        prime p that stays inert (norm p^2, Kronecker symbol (D/p) == -1).
        """
        n = self.norm()
        if n < 2:
            return False
        if is_rational_prime(n):
            return True

        p = isqrt(n)
        return (p * p == n and is_rational_prime(p)
                and symbol_kronecker(self._ring.discriminant, p) == -1
                and self._hnf == (p, 0, p))

    def conjugate(self) -> "Ideal":
        first, second = self.basis()
        return Ideal(first.conjugate(), second.conjugate())

    def __mul__(self, other: "Ideal") -> "Ideal":
        if not isinstance(other, Ideal):
            return NotImplemented
        if other._ring != self._ring:
            raise ValueError(f"Cannot multiply ideals of {self._ring} and {other._ring}")

        w = QuadraticInteger.omega(self._ring)
        vectors = []
        for u in self.basis():
            for v in other.basis():
                uv = u * v
                vectors.append(uv.coordinates())
                vectors.append((uv * w).coordinates())

        return self._from_hermite(self._ring, *_hermite_basis(vectors))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Ideal):
            return NotImplemented
        return self._ring == other._ring and self._hnf == other._hnf

    def __hash__(self) -> int:
        return hash((self._ring, self._hnf))

    def __repr__(self) -> str:
        return f"Ideal({', '.join(repr(g) for g in self._generators)})"
