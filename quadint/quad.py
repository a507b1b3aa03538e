from fractions import Fraction
from functools import cache
from math import hypot
from typing import Optional, Union

from .arith import squarefree_decomposition
from .config import DEFAULT_LIMITS, SearchLimits
from .exceptions import AlgebraicDegreeOverflowError, ArithmeticRangeError, NonEuclideanDomainError, NotDivisibleError
from .ring import NORM_EUCLIDEAN_QUADRATIC_RADICANDS, AlgebraicInteger, QuadraticRing

OTHER_OP_TYPES = int
OP_TYPES = Union["QuadraticInteger", OTHER_OP_TYPES]


class QuadraticInteger(AlgebraicInteger):
    """
    Algebraic integer of a quadratic ring.

    Internally stored in "numerator units" as (A, B) representing:
        (A + B*sqrt(d)) / 2

    Integrality constraint:
        A and B have the same parity, and both are even unless d = 1 mod 4.

    Notes:
      - The public view is (reg_part, surd_part, denominator) with denominator 1 or 2, always
        in lowest terms.
      - Integral-basis coordinates (x, y) mean x + y*w, where w = sqrt(d), or (1 + sqrt(d))/2
        when d = 1 mod 4.
    """

    __slots__ = ("_a", "_b", "_ring")

    _a: int
    _b: int
    _ring: QuadraticRing

    def __init__(self, reg_part: int, surd_part: int, ring: QuadraticRing, denominator: int = 1) -> None:
        """
        Initialize a QuadraticInteger with value (reg_part + surd_part*sqrt(d)) / denominator.

        Args:
            reg_part: The rational part numerator.
            surd_part: The coefficient numerator of sqrt(d).
            ring: The ring the number belongs to.
            denominator: 1 or 2. 2 is only valid when d = 1 mod 4.

        Raises:
            TypeError: If the parts are not integers or ring is not a QuadraticRing.
            ValueError: If the denominator is not 1 or 2, or 2 is used outside a half-integer ring
                or with parts of different parity.
        """
        for part in (reg_part, surd_part, denominator):
            if isinstance(part, bool) or not isinstance(part, int):
                raise TypeError(f"QuadraticInteger parts must be integers, not {type(part).__name__}")
        if not isinstance(ring, QuadraticRing):
            raise TypeError(f"QuadraticInteger requires a QuadraticRing, not {type(ring).__name__}")

        if denominator == 1:
            a, b = 2 * reg_part, 2 * surd_part
        elif denominator == 2:
            if not ring.has_half_integers:
                raise ValueError(f"{ring} has no half-integers; denominator 2 is not allowed")
            if (reg_part ^ surd_part) & 1:
                raise ValueError("With denominator 2, reg_part and surd_part must have the same parity")
            a, b = reg_part, surd_part
        else:
            raise ValueError(f"Denominator must be 1 or 2, not {denominator}")

        self._a, self._b, self._ring = a, b, ring

    # region constructors / conversions
    @classmethod
    def _make(cls, ring: QuadraticRing, a: int, b: int) -> "QuadraticInteger":
        """Construct a new value from internal numerators A, B."""
        if ((a ^ b) & 1) or (a & 1 and not ring.has_half_integers):
            raise ArithmeticError("Non-integral result; parity constraint violated")

        obj = cls.__new__(cls)
        obj._a, obj._b, obj._ring = a, b, ring
        return obj

    @classmethod
    def from_coordinates(cls, ring: QuadraticRing, x: int, y: int) -> "QuadraticInteger":
        """The number x + y*w over the integral basis {1, w}."""
        if ring.has_half_integers:
            return cls._make(ring, 2 * x + y, y)
        return cls._make(ring, 2 * x, 2 * y)

    @classmethod
    def omega(cls, ring: QuadraticRing) -> "QuadraticInteger":
        """The second integral basis element: sqrt(d), or (1 + sqrt(d))/2 when d = 1 mod 4."""
        return cls.from_coordinates(ring, 0, 1)

    def _from_obj(self, n: OP_TYPES) -> "QuadraticInteger":
        """Convert an int to a QuadraticInteger of this ring"""
        if isinstance(n, QuadraticInteger):
            return n
        return self._make(self._ring, 2 * int(n), 0)

    def _align(self, other: object) -> Optional[tuple["QuadraticInteger", "QuadraticInteger"]]:
        """
        Bring both operands into one ring.

        A number without surd part is rational and fits any ring.

        Returns:
            Optional[tuple]: Both operands in a common ring, or None for unsupported types.

        Raises:
            AlgebraicDegreeOverflowError: If both operands are irrational and from different rings.
        """
        if isinstance(other, OTHER_OP_TYPES):
            return self, self._from_obj(other)

        if not isinstance(other, QuadraticInteger):
            return None

        if other._ring == self._ring:
            return self, other
        if not other._b:
            return self, self._make(self._ring, other._a, 0)
        if not self._b:
            return self._make(other._ring, self._a, 0), other

        raise AlgebraicDegreeOverflowError(2, self.algebraic_degree() * other.algebraic_degree(), self, other)
    # endregion

    @property
    def ring(self) -> QuadraticRing:
        return self._ring

    @property
    def denominator(self) -> int:
        """1, or 2 for a half-integer."""
        return 2 if self._a & 1 else 1

    @property
    def reg_part(self) -> int:
        return self._a if self._a & 1 else self._a // 2

    @property
    def surd_part(self) -> int:
        return self._b if self._a & 1 else self._b // 2

    def numerators(self) -> tuple[int, int]:
        """Return the stored numerator components (A, B) for (A + B*sqrt(d))/2."""
        return self._a, self._b

    def coordinates(self) -> tuple[int, int]:
        """Return (x, y) with self == x + y*w over the integral basis."""
        if self._ring.has_half_integers:
            return (self._a - self._b) // 2, self._b
        return self._a // 2, self._b // 2

    # region invariants
    def conjugate(self) -> "QuadraticInteger":
        """a + b*sqrt(d) -> a - b*sqrt(d)"""
        if not self._b:
            return self
        return self._make(self._ring, self._a, -self._b)

    def norm(self) -> int:
        """
        Field norm:
            N((A + B*sqrt(d))/2) = (A^2 - d*B^2)/4

        Negative values are possible in real rings.

        Raises:
            ArithmeticError: If there is a non-integral norm due to parity violation.

        Returns:
            int: The norm.
        """
        q, r = divmod(self._a * self._a - self._ring.radicand * self._b * self._b, 4)
        if r != 0:
            raise ArithmeticError("Non-integral norm; parity constraint violated")

        return q

    def trace(self) -> int:
        """Sum with the conjugate, which in numerator units is simply A."""
        return self._a

    def algebraic_degree(self) -> int:
        if self._b:
            return 2
        return 1 if self._a else 0

    def min_polynomial_coeffs(self) -> tuple[int, ...]:
        """
        Coefficients of the minimal polynomial, constant term first.

        Returns:
            tuple: (norm, -trace, 1) for degree 2, (-value, 1) for degree 1, (0, 1) for zero.
        """
        degree = self.algebraic_degree()
        if degree == 2:
            return self.norm(), -self.trace(), 1
        if degree == 1:
            return -(self._a // 2), 1
        return 0, 1

    def is_unit(self) -> bool:
        return abs(self.norm()) == 1
    # endregion

    # region arithmetic
    def __add__(self, other: OP_TYPES) -> "QuadraticInteger":
        pair = self._align(other)
        if pair is None:
            return NotImplemented

        x, y = pair
        return self._make(x._ring, x._a + y._a, x._b + y._b)

    def __radd__(self, other: OTHER_OP_TYPES) -> "QuadraticInteger":
        return self.__add__(other)

    def __sub__(self, other: OP_TYPES) -> "QuadraticInteger":
        pair = self._align(other)
        if pair is None:
            return NotImplemented

        x, y = pair
        return self._make(x._ring, x._a - y._a, x._b - y._b)

    def __rsub__(self, other: OTHER_OP_TYPES) -> "QuadraticInteger":
        return self.__neg__().__add__(other)

    def __neg__(self) -> "QuadraticInteger":
        return self._make(self._ring, -self._a, -self._b)

    def __pos__(self) -> "QuadraticInteger":
        return self

    def __mul__(self, other: OP_TYPES) -> "QuadraticInteger":
        if (isinstance(other, QuadraticInteger) and other._ring != self._ring
                and not self._a and not other._a and self._b and other._b):
            return self._surd_product(other)

        pair = self._align(other)
        if pair is None:
            return NotImplemented

        # (A + B*sqrt(d))/2 * (C + D*sqrt(d))/2 = (P + Q*sqrt(d))/4, stored back with denominator 2
        x, y = pair
        A, B, C, D = x._a, x._b, y._a, y._b
        P = A * C + x._ring.radicand * B * D
        Q = A * D + B * C

        if (P & 1) or (Q & 1):
            raise ArithmeticError("Non-integral product; parity constraint violated")

        return self._make(x._ring, P // 2, Q // 2)

    def __rmul__(self, other: OTHER_OP_TYPES) -> "QuadraticInteger":
        return self.__mul__(other)

    def _surd_product(self, other: "QuadraticInteger") -> "QuadraticInteger":
        """
        s*sqrt(d1) * t*sqrt(d2) = +-s*t*k*sqrt(m), where d1*d2 = k^2*m with m squarefree.

        The sign is negative when both radicands are negative, as sqrt(-1)*sqrt(-1) == -1.
        """
        d1, d2 = self._ring.radicand, other._ring.radicand
        k, m = squarefree_decomposition(d1 * d2)
        if d1 < 0 and d2 < 0:
            k = -k
        return QuadraticInteger(0, (self._b // 2) * (other._b // 2) * k, QuadraticRing(m))

    def __pow__(self, exp: int) -> "QuadraticInteger":
        e = int(exp)
        if e < 0:
            raise ValueError("Negative powers not supported")

        result = self._make(self._ring, 2, 0)  # multiplicative identity
        base = self
        while e:
            if e & 1:
                result = result * base

            e >>= 1
            if e:
                base = base * base

        return result
    # endregion

    # region division
    def __truediv__(self, other: OP_TYPES) -> "QuadraticInteger":
        """
        Exact division.

        Raises:
            ZeroDivisionError: If other is zero.
            NotDivisibleError: If the quotient is not an algebraic integer of the ring. The error
                carries the exact quotient and can round it to a nearby integer.

        Returns:
            QuadraticInteger: The quotient.
        """
        pair = self._align(other)
        if pair is None:
            return NotImplemented

        x, y = pair
        if not y:
            raise ZeroDivisionError(f"Division of {x!r} by zero")

        # x/y = x*conj(y)/N(y) = (P + Q*sqrt(d)) / (2*N(y))
        n = y.norm()
        num = x * y.conjugate()
        P, Q = num._a, num._b

        if P % n == 0 and Q % n == 0:
            A, B = P // n, Q // n
            if not ((A ^ B) & 1) and (x._ring.has_half_integers or not A & 1):
                return self._make(x._ring, A, B)

        raise NotDivisibleError(x, y, x._ring, (Fraction(P, 2 * n), Fraction(Q, 2 * n)))

    def __rtruediv__(self, other: OTHER_OP_TYPES) -> "QuadraticInteger":
        if isinstance(other, OTHER_OP_TYPES):
            return self._from_obj(other).__truediv__(self)

        return NotImplemented

    def divides_evenly(self, other: OP_TYPES) -> bool:
        """True iff other is a multiple of self."""
        if not self:
            return not other
        try:
            self._from_obj(other) / self
        except NotDivisibleError:
            return False
        return True

    def _division(self, other: OP_TYPES, radius: int = 1) -> tuple["QuadraticInteger", "QuadraticInteger"]:
        """
        Nearest-lattice division.

        Tries every quotient whose integral-basis coordinates lie within radius of the lattice cell
        holding the exact quotient (radius 1 is the cell's 4 corners), and keeps the one leaving
        the remainder of smallest absolute norm.

        Args:
            other: The divisor.
            radius: The neighbourhood to search.

        Returns:
            tuple: The quotient and remainder.
        """
        pair = self._align(other)
        if pair is None:
            raise TypeError(f"Unable to divide QuadraticInteger and type {type(other)}")

        x, y = pair
        try:
            return x / y, self._make(x._ring, 0, 0)
        except NotDivisibleError as e:
            fx, fy = e.bounding_integers()[0].coordinates()

        d, half = x._ring.radicand, x._ring.has_half_integers
        best: Optional[tuple[int, int, tuple[int, int]]] = None
        for cy in range(fy - radius + 1, fy + radius + 1):
            for cx in range(fx - radius + 1, fx + radius + 1):
                qa, qb = (2 * cx + cy, cy) if half else (2 * cx, 2 * cy)
                ra = x._a - (qa * y._a + d * qb * y._b) // 2
                rb = x._b - (qa * y._b + qb * y._a) // 2
                key = (abs(ra * ra - d * rb * rb), abs(qa * qa - d * qb * qb), (cx, cy))
                if best is None or key < best:
                    best = key

        assert best is not None
        q = self.from_coordinates(x._ring, *best[2])
        return q, x - q * y

    def __divmod__(self, other: OP_TYPES) -> tuple["QuadraticInteger", "QuadraticInteger"]:
        """
        Nearest-lattice division:
            self = q * other + r

        Raises:
            ZeroDivisionError: if other == 0

        Returns:
            (q, r) where r has small norm (typically abs(r.norm()) < abs(other.norm())).
        """
        return self._division(other)

    def __floordiv__(self, other: OP_TYPES) -> "QuadraticInteger":
        q, _ = divmod(self, other)
        return q

    def __rfloordiv__(self, other: OTHER_OP_TYPES) -> "QuadraticInteger":
        if isinstance(other, OTHER_OP_TYPES):
            return self._from_obj(other).__floordiv__(self)

        return NotImplemented

    def __mod__(self, other: OP_TYPES) -> "QuadraticInteger":
        _, r = divmod(self, other)
        return r
    # endregion

    # region GCD
    def _in_primary_sector(self) -> bool:
        """True iff self is the chosen representative among its associates by finite units."""
        a, b, d = self._a, self._b, self._ring.radicand
        if d == -1:
            return a > 0 and -a < b <= a
        if d == -3:
            return a > 0 and -a < 3 * b <= a
        return a > 0 or (a == 0 and b > 0)

    def _normalize_unit(self) -> "QuadraticInteger":
        """
        Deterministic associate choice up to the finite units.

        In imaginary rings this is the associate in the primary sector (argument in (-45, 45]
        degrees for Z[i], (-30, 30] for the Eisenstein integers, otherwise a positive real part or
        a positive imaginary part on the imaginary axis). In real rings only the sign is fixed,
        dividing out the fundamental unit is left to divide_out_units.

        Returns:
            QuadraticInteger: The unit normalized QuadraticInteger.
        """
        if not self:
            return self

        if self._ring.is_purely_real:
            return -self if self.sign() < 0 else self

        for u in torsion_units(self._ring):
            candidate = self * u
            if candidate._in_primary_sector():
                return candidate

        raise ArithmeticError(f"No associate of {self!r} in the primary sector")

    def gcd(self,
            other: OP_TYPES,
            *,
            limits: SearchLimits = DEFAULT_LIMITS,
            normalize: bool = True) -> "QuadraticInteger":
        """
        GCD via Euclidean algorithm.

        This does not check that the ring is norm-Euclidean; see calculator.euclidean_gcd.

        Each step searches ever wider around the exact quotient for a remainder of smaller norm. In an
        imaginary ring the norm is positive definite and radius 2 holds the nearest quotient. In a real
        ring a remainder of smaller norm can lie far out along the unit hyperbola, so the search
        doubles up to limits.euclidean_radius.

        Raises:
            NonEuclideanDomainError: If no smaller remainder exists and the ring is not norm-Euclidean.
            ArithmeticRangeError: If a norm-Euclidean ring needs a wider search than euclidean_radius.

        Returns:
            QuadraticInteger: The gcd.
        """
        pair = self._align(other)
        if pair is None:
            raise TypeError(f"Unable to divide QuadraticInteger and type {type(other)}")

        a, b = pair

        if not a:
            return b._normalize_unit() if normalize else b

        ring = a._ring
        widest = limits.euclidean_radius if ring.is_purely_real else min(2, limits.euclidean_radius)
        start = pair
        last = abs(b.norm())
        while b:
            radius = 1
            _, r = a._division(b, radius)
            while r and abs(r.norm()) >= last and radius < widest:
                radius = min(2 * radius, widest)
                _, r = a._division(b, radius)

            if r and abs(r.norm()) >= last:
                if ring.radicand not in NORM_EUCLIDEAN_QUADRATIC_RADICANDS:
                    raise NonEuclideanDomainError(*start,
                                                  message=f"Euclidean descent stalled on {a!r} and {b!r} in {ring}")
                raise ArithmeticRangeError(f"No remainder of norm below {last} within radius {widest} "
                                           f"dividing {a!r} by {b!r}", ring, widest)

            a, b = b, r
            last = abs(r.norm())

        return a._normalize_unit() if normalize else a
    # endregion

    # region numeric view
    def sign(self) -> int:
        """
        Exact sign of the value in a real ring.

        Raises:
            TypeError: In an imaginary ring.
        """
        if not self._ring.is_purely_real:
            raise TypeError(f"{self._ring} is not ordered")

        a, b = self._a, self._b
        if not b:
            return (a > 0) - (a < 0)
        if not a or (a > 0) == (b > 0):
            return 1 if (a or b) > 0 else -1

        # Opposite signs: the larger of a^2 and d*b^2 wins
        if a * a > self._ring.radicand * b * b:
            return 1 if a > 0 else -1
        return 1 if b > 0 else -1

    @property
    def real_part_numeric(self) -> float:
        if self._ring.is_purely_real:
            return (self._a + self._b * self._ring.abs_radicand_sqrt) / 2
        return self._a / 2

    @property
    def imag_part_numeric(self) -> float:
        if self._ring.is_purely_real:
            return 0.0
        return self._b * self._ring.abs_radicand_sqrt / 2

    def __abs__(self) -> float:
        """Approximate absolute value. Use norm() for exact work."""
        return hypot(self.real_part_numeric, self.imag_part_numeric)

    def __complex__(self) -> complex:
        return complex(self.real_part_numeric, self.imag_part_numeric)

    def __float__(self) -> float:
        if self._b and not self._ring.is_purely_real:
            raise TypeError(f"{self!r} is not a real number")
        return self.real_part_numeric

    def _compare(self, other: OP_TYPES) -> int:
        pair = self._align(other)
        if pair is None:
            raise TypeError(f"Unable to compare QuadraticInteger and type {type(other)}")

        x, y = pair
        if not x._ring.is_purely_real and (x._b or y._b):
            raise TypeError(f"{x._ring} is not ordered")
        return (x - y).sign() if x._ring.is_purely_real else (x._a > y._a) - (x._a < y._a)

    def __lt__(self, other: OP_TYPES) -> bool:
        return self._compare(other) < 0

    def __le__(self, other: OP_TYPES) -> bool:
        return self._compare(other) <= 0

    def __gt__(self, other: OP_TYPES) -> bool:
        return self._compare(other) > 0

    def __ge__(self, other: OP_TYPES) -> bool:
        return self._compare(other) >= 0
    # endregion

    def __bool__(self) -> bool:
        return (self._a | self._b) != 0

    def __eq__(self, other: object) -> bool:
        if isinstance(other, OTHER_OP_TYPES):
            return not self._b and self._a == 2 * other
        if not isinstance(other, QuadraticInteger):
            return NotImplemented

        if self._ring != other._ring:
            # Rationals compare by value across rings
            return not self._b and not other._b and self._a == other._a
        return self._a == other._a and self._b == other._b

    def __hash__(self) -> int:
        if not self._b:
            return hash(self._a // 2)
        return hash((self._ring.radicand, self._a, self._b))

    def __repr__(self) -> str:
        reg, surd = self.reg_part, self.surd_part
        if not surd:
            return str(reg)

        root = f"sqrt({self._ring.radicand})"
        mag = -surd if surd < 0 else surd
        term = root if mag == 1 else f"{mag}*{root}"
        if reg:
            core = f"{reg}{'+' if surd > 0 else '-'}{term}"
        else:
            core = term if surd > 0 else f"-{term}"

        return f"({core})/2" if self.denominator == 2 else core


@cache
def torsion_units(ring: QuadraticRing) -> tuple[QuadraticInteger, ...]:
    """
    The units of finite order: the 4th roots of unity in Z[i], the 6th roots in the Eisenstein
    integers, and +-1 everywhere else.
    """
    numerators: tuple[tuple[int, int], ...]
    if ring.radicand == -1:
        numerators = ((2, 0), (0, 2), (-2, 0), (0, -2))
    elif ring.radicand == -3:
        numerators = ((2, 0), (1, 1), (-1, 1), (-2, 0), (-1, -1), (1, -1))
    else:
        numerators = ((2, 0), (-2, 0))

    return tuple(QuadraticInteger._make(ring, a, b) for a, b in numerators)


def compare_magnitude(u: QuadraticInteger, v: OP_TYPES) -> int:
    """
    Exact comparison of absolute values.

    Returns:
        int: -1, 0 or 1 as |u| is smaller than, equal to, or larger than |v|.
    """
    pair = u._align(v)
    if pair is None:
        raise TypeError(f"Unable to compare QuadraticInteger and type {type(v)}")

    u, v = pair
    if u.ring.is_purely_real:
        return (u * u.sign() - v * v.sign()).sign()

    nu, nv = u.norm(), v.norm()
    return (nu > nv) - (nu < nv)
