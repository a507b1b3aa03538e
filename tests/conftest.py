from fractions import Fraction

import pytest

from quadint.ring import AlgebraicInteger, IntegerRing, PowerBasis


class CubicRing(IntegerRing):
    """A ring kind the algorithms do not handle"""

    @property
    def max_algebraic_degree(self):
        return 3

    @property
    def is_purely_real(self):
        return True

    @property
    def discriminant(self):
        return -108

    @property
    def power_basis(self):
        return PowerBasis((Fraction(1),) * 3, (Fraction(0),) * 3, (Fraction(0),) * 3)


class CubicInteger(AlgebraicInteger):
    """The cube root of 2"""

    def __init__(self):
        self._ring = CubicRing()

    @property
    def ring(self):
        return self._ring

    def algebraic_degree(self):
        return 3

    def norm(self):
        return 2

    def trace(self):
        return 0

    def min_polynomial_coeffs(self):
        return -2, 0, 0, 1


@pytest.fixture
def cubic_ring():
    return CubicRing()


@pytest.fixture
def cubic_integer():
    return CubicInteger()
