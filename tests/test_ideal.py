import pytest

from sympy import divisors

from quadint.arith import symbol_kronecker
from quadint.ideal import Ideal, _hermite_basis
from quadint.quad import QuadraticInteger
from quadint.ring import QuadraticRing


class IdealTests:
    """Support for testing Ideal"""
    minus5, gaussian, ten = None, None, None

    def setup_method(self, _):
        """Setup some test rings"""
        self.minus5 = QuadraticRing(-5)
        self.gaussian = QuadraticRing(-1)
        self.ten = QuadraticRing(10)

    def q(self, ring, a, b):
        return QuadraticInteger(a, b, ring)


class TestHermite:
    """Tests for the lattice reduction behind Ideal"""

    def test_reduce(self):
        """Generators collapse to (a, b, c)"""
        assert _hermite_basis([(4, 0), (0, 6), (2, 3)]) == (4, 2, 3)

    def test_zero(self):
        """The zero lattice"""
        assert _hermite_basis([]) == (0, 0, 0)
        assert _hermite_basis([(0, 0), (0, 0)]) == (0, 0, 0)

    def test_rank_one(self):
        """Rank 1 lattices are not ideals"""
        with pytest.raises(ArithmeticError):
            _hermite_basis([(1, 1), (2, 2)])
        with pytest.raises(ArithmeticError):
            _hermite_basis([(3, 0)])


class TestConstruction(IdealTests):
    """Tests for Ideal.__init__"""

    def test_generators(self):
        """Ints take the ring of the other generator"""
        ideal = Ideal(2, self.q(self.minus5, 1, 1))
        assert ideal.ring == self.minus5
        assert ideal.generators == (self.q(self.minus5, 2, 0), self.q(self.minus5, 1, 1))

    def test_no_ring(self):
        """Ints alone do not determine a ring"""
        with pytest.raises(TypeError):
            Ideal(2, 3)
        with pytest.raises(TypeError):
            Ideal(2)

    def test_mixed_rings(self):
        """Generators must share a ring"""
        with pytest.raises(ValueError):
            Ideal(self.q(self.minus5, 1, 1), self.q(self.gaussian, 1, 1))

    def test_bad_types(self):
        """Only numbers generate ideals"""
        with pytest.raises(TypeError):
            Ideal(self.q(self.minus5, 1, 1), 1.5)
        with pytest.raises(TypeError):
            Ideal(None, self.q(self.minus5, 1, 1))


class TestNorm(IdealTests):
    """Tests for Ideal.norm and the Hermite form"""

    def test_two_over_minus5(self):
        """<2> has norm 4, <2, 1 + sqrt(-5)> has norm 2"""
        two = Ideal(self.q(self.minus5, 2, 0))
        p2 = Ideal(2, self.q(self.minus5, 1, 1))
        assert two.norm() == 4
        assert p2.norm() == 2
        assert p2.hermite_basis == (2, 1, 1)
        assert p2 != two
        assert p2.contains(two)
        assert not two.contains(p2)

    def test_principal(self):
        """A principal ideal has the absolute norm of its generator"""
        for ring in (self.minus5, self.gaussian, self.ten, QuadraticRing(5), QuadraticRing(-3)):
            for a in range(-3, 4):
                for b in range(-3, 4):
                    if a or b:
                        x = self.q(ring, a, b)
                        assert Ideal(x).norm() == abs(x.norm())

    def test_half_ring(self):
        """Hermite form over the basis {1, (1 + sqrt(d))/2}"""
        ring = QuadraticRing(-3)
        assert Ideal(self.q(ring, 2, 0)).hermite_basis == (2, 0, 2)
        assert Ideal(QuadraticInteger(1, 1, ring, 2)).norm() == 1

    def test_zero(self):
        """The zero ideal"""
        zero = Ideal(self.q(self.minus5, 0, 0))
        assert zero.norm() == 0
        assert zero.contains(0)
        assert not zero.contains(1)

    def test_basis(self):
        """The Z-basis matches the Hermite form"""
        a, bc = Ideal(2, self.q(self.minus5, 1, 1)).basis()
        assert a == 2
        assert bc == self.q(self.minus5, 1, 1)

    def test_multiplicative(self):
        """N(IJ) == N(I)N(J)"""
        ideals = [i for n in range(1, 8) for i in Ideal.with_norm(self.minus5, n)]
        for i in ideals:
            for j in ideals[::2]:
                assert (i * j).norm() == i.norm() * j.norm()


class TestWithNorm(IdealTests):
    """Tests for Ideal.with_norm"""

    @pytest.mark.parametrize("d", [-5, -1, -3, 10, 5, -23])
    def test_count(self, d):
        """The number of ideals of norm n is the sum of (D/k) over the divisors k of n"""
        ring = QuadraticRing(d)
        for n in range(1, 40):
            found = list(Ideal.with_norm(ring, n))
            assert len(found) == sum(symbol_kronecker(ring.discriminant, k) for k in divisors(n))
            assert len(set(found)) == len(found)
            assert all(i.norm() == n and i.ring == ring for i in found)

    def test_nothing(self):
        """There are no ideals of norm < 1"""
        assert list(Ideal.with_norm(self.minus5, 0)) == []


class TestEquality(IdealTests):
    """Tests for Ideal.__eq__ and __hash__"""

    def test_generator_order(self):
        """Generator order does not matter"""
        x = self.q(self.minus5, 1, 1)
        assert Ideal(2, x) == Ideal(x, 2)
        assert hash(Ideal(2, x)) == hash(Ideal(x, 2))

    def test_redundant(self):
        """A generator that is a multiple of the other adds nothing"""
        x = self.q(self.minus5, 1, 1)
        assert Ideal(6, x) == Ideal(x)

    def test_associates(self):
        """Associate generators give the same ideal"""
        x = self.q(self.gaussian, 2, 1)
        assert Ideal(x) == Ideal(self.q(self.gaussian, -1, 2))
        assert Ideal(5, x) == Ideal(x)

    def test_other_types(self):
        """Ideals are not numbers"""
        assert Ideal(self.q(self.minus5, 2, 0)) != 2


class TestContains(IdealTests):
    """Tests for Ideal.contains"""

    def test_numbers(self):
        """Membership of numbers"""
        p2 = Ideal(2, self.q(self.minus5, 1, 1))
        assert p2.contains(self.q(self.minus5, 1, 1))
        assert p2.contains(self.q(self.minus5, 1, -1))
        assert p2.contains(6)
        assert not p2.contains(3)
        assert self.q(self.minus5, 3, 1) in p2
        assert self.q(self.minus5, 3, 2) not in p2
        assert "2" not in p2

    def test_other_ring(self):
        """Rational numbers of other rings can be contained, irrational ones never"""
        p2 = Ideal(2, self.q(self.minus5, 1, 1))
        assert p2.contains(self.q(self.gaussian, 4, 0))
        assert not p2.contains(self.q(self.gaussian, 1, 1))

    def test_ideals(self):
        """Inclusion of ideals"""
        p3 = Ideal(3, self.q(self.minus5, 1, 1))
        assert p3.contains(Ideal(self.q(self.minus5, 3, 0)))
        assert not p3.contains(Ideal(2, self.q(self.minus5, 1, 1)))
        assert Ideal(self.q(self.minus5, 3, 0)) in p3

    def test_bad_type(self):
        """Floats have no membership"""
        with pytest.raises(TypeError):
            Ideal(self.q(self.minus5, 2, 0)).contains(2.0)


class TestPrincipal(IdealTests):
    """Tests for Ideal.is_principal and principal_generator"""

    def test_minus5(self):
        """<2, 1 + sqrt(-5)> is not principal, <6, 1 + sqrt(-5)> is"""
        assert not Ideal(2, self.q(self.minus5, 1, 1)).is_principal()
        assert Ideal(2, self.q(self.minus5, 1, 1)).principal_generator() is None
        g = Ideal(6, self.q(self.minus5, 1, 1)).principal_generator()
        assert Ideal(g) == Ideal(self.q(self.minus5, 1, 1))

    def test_euclidean(self):
        """In norm-Euclidean rings the generators reduce by gcd"""
        ideal = Ideal(5, self.q(self.gaussian, 2, 1))
        assert ideal.is_principal()
        assert ideal.principal_generator() == self.q(self.gaussian, 2, 1)

    def test_real(self):
        """<6, 4 + sqrt(10)> is principal, <2, sqrt(10)> is not"""
        ideal = Ideal(6, self.q(self.ten, 4, 1))
        assert ideal.is_principal()
        g = ideal.principal_generator()
        assert abs(g.norm()) == 6
        assert Ideal(g) == ideal

        assert not Ideal(2, self.q(self.ten, 0, 1)).is_principal()

    def test_real_euclidean(self):
        """In Z[sqrt(11)] the generator comes from a Euclidean descent with far quotients"""
        ring = QuadraticRing(11)
        ideal = Ideal(QuadraticInteger(-162, -73, ring), QuadraticInteger(564, -72, ring))
        assert Ideal(ideal.principal_generator()) == ideal

    def test_trivial(self):
        """Single generators, the unit ideal and the zero ideal"""
        x = self.q(self.minus5, 2, 0)
        assert Ideal(x).principal_generator() == x
        assert Ideal(3, self.q(self.minus5, 2, 0)).principal_generator() == 1
        assert Ideal(3, self.q(self.minus5, 2, 0)).is_principal()
        assert Ideal(0, self.q(self.minus5, 0, 0)).principal_generator() == 0


class TestMaximal(IdealTests):
    """Tests for Ideal.is_maximal"""

    def test_minus5(self):
        """<2> is not maximal in Z[sqrt(-5)], <2, 1 + sqrt(-5)> is"""
        assert not Ideal(self.q(self.minus5, 2, 0)).is_maximal()
        assert Ideal(2, self.q(self.minus5, 1, 1)).is_maximal()

    def test_ten(self):
        """2 and sqrt(10) generate a maximal ideal of norm 2"""
        ideal = Ideal(2, self.q(self.ten, 0, 1))
        assert ideal.norm() == 2
        assert ideal.is_maximal()

    def test_inert(self):
        """An inert rational prime generates a maximal ideal"""
        assert Ideal(self.q(self.gaussian, 3, 0)).is_maximal()
        assert Ideal(self.q(QuadraticRing(-3), 2, 0)).is_maximal()
        assert not Ideal(self.q(self.gaussian, 5, 0)).is_maximal()

    def test_units(self):
        """The unit ideal and the zero ideal are not maximal"""
        assert not Ideal(self.q(self.gaussian, 1, 0)).is_maximal()
        assert not Ideal(self.q(self.gaussian, 0, 0)).is_maximal()


class TestOperations(IdealTests):
    """Tests for products and conjugates"""

    def test_square(self):
        """<2, 1 + sqrt(-5)>^2 == <2>"""
        p2 = Ideal(2, self.q(self.minus5, 1, 1))
        assert p2 * p2 == Ideal(self.q(self.minus5, 2, 0))

    def test_conjugate(self):
        """<3, 1 + sqrt(-5)> times its conjugate is <3>"""
        p3 = Ideal(3, self.q(self.minus5, 1, 1))
        assert p3.hermite_basis == (3, 1, 1)
        assert p3.conjugate().hermite_basis == (3, 2, 1)
        assert p3 * p3.conjugate() == Ideal(self.q(self.minus5, 3, 0))

    def test_mixed_product(self):
        """<2, 1 + sqrt(-5)><3, 1 + sqrt(-5)> == <1 + sqrt(-5)>"""
        p2 = Ideal(2, self.q(self.minus5, 1, 1))
        p3 = Ideal(3, self.q(self.minus5, 1, 1))
        assert p2 * p3 == Ideal(self.q(self.minus5, 1, 1))

    def test_product_rings(self):
        """Ideals of different rings do not multiply"""
        with pytest.raises(ValueError):
            Ideal(self.q(self.minus5, 2, 0)) * Ideal(self.q(self.gaussian, 2, 0))
        with pytest.raises(TypeError):
            Ideal(self.q(self.minus5, 2, 0)) * 2

    def test_repr(self):
        """repr lists the generators"""
        assert repr(Ideal(2, self.q(self.minus5, 1, 1))) == "Ideal(2, 1+sqrt(-5))"
