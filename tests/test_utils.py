from concurrent.futures import ThreadPoolExecutor

import pytest

from sympy import isprime, primerange

from quadint.arith import is_rational_prime, rational_prime_factors
from quadint.config import SearchLimits
from quadint.utils import PRIME_CACHE, PrimeCache, is_perfect_square, xgcd


class TestXgcd:
    """Tests for utils.xgcd"""

    @pytest.mark.parametrize("a, b", [(240, 46), (-240, 46), (240, -46), (0, 7), (7, 0), (0, 0), (17, 17), (-3, -9)])
    def test_bezout(self, a, b):
        """s*a + t*b == gcd(a, b) >= 0"""
        g, s, t = xgcd(a, b)
        assert g >= 0
        assert s * a + t * b == g
        if a or b:
            assert a % g == 0 and b % g == 0

    def test_value(self):
        """A known gcd"""
        assert xgcd(240, 46)[0] == 2


def test_is_perfect_square():
    """Squares and non-squares, negatives included"""
    assert is_perfect_square(0)
    assert is_perfect_square(1)
    assert is_perfect_square(144)
    assert not is_perfect_square(2)
    assert not is_perfect_square(-4)
    assert is_perfect_square(10 ** 40)


class TestPrimeCache:
    """Tests for utils.PrimeCache"""

    def test_primes_up_to(self):
        """Agrees with sympy"""
        cache = PrimeCache(initial_limit=16)
        assert cache.primes_up_to(1000) == tuple(primerange(2, 1001))
        assert cache.primes_up_to(1) == ()

    def test_growth(self):
        """The sieve at least doubles and never shrinks"""
        cache = PrimeCache(initial_limit=16)
        assert cache.limit == 16
        cache.extend(20)
        assert cache.limit >= 32
        before = cache.limit
        cache.extend(5)
        assert cache.limit == before

    def test_max_limit(self):
        """The sieve stops at max_limit"""
        cache = PrimeCache(initial_limit=10, max_limit=100)
        cache.extend(10 ** 6)
        assert cache.limit == 100
        assert list(cache) == list(primerange(2, 101))

    def test_bad_max_limit(self):
        """A cache needs room for at least one prime"""
        with pytest.raises(ValueError):
            PrimeCache(max_limit=1)

    def test_smallest_factor(self):
        """Trial division, also past the sieve"""
        cache = PrimeCache(initial_limit=10, max_limit=100)
        assert cache.smallest_factor(10403) == 101
        assert cache.smallest_factor(-91) == 7
        assert cache.smallest_factor(10007) == 10007
        assert cache.smallest_factor(1) is None
        assert cache.smallest_factor(0) is None

    def test_past_sieve(self):
        """Numbers far beyond the sieve are settled without unbounded trial division"""
        cache = PrimeCache(initial_limit=10, max_limit=1000)
        m31, m61 = 2 ** 31 - 1, 2 ** 61 - 1
        assert cache.smallest_factor(m61) == m61
        assert cache.smallest_factor(m31 * m61) == m31
        assert cache.smallest_factor(1009 * m61) == 1009
        assert cache.limit == 10
        assert is_rational_prime(-m61, cache)
        assert rational_prime_factors(-m31 * m61 * 4, cache) == [-1, 2, 2, m31, m61]

    def test_contains(self):
        """Membership is primality"""
        for n in range(-5, 200):
            assert (n in PRIME_CACHE) == (n >= 2 and isprime(n))
        assert "7" not in PRIME_CACHE

    def test_snapshot(self):
        """Snapshots are immutable and stay valid after growth"""
        cache = PrimeCache(initial_limit=16)
        old = cache.snapshot()
        cache.extend(1000)
        assert old == (2, 3, 5, 7, 11, 13)
        assert cache.snapshot()[:len(old)] == old

    def test_concurrent_extend(self):
        """Readers and writers from many threads see consistent snapshots"""
        cache = PrimeCache(initial_limit=16, max_limit=1 << 16)

        def work(n):
            primes = cache.primes_up_to(n)
            assert all(p <= n for p in primes)
            return len(primes)

        limits = [37 * i for i in range(1, 200)]
        with ThreadPoolExecutor(max_workers=8) as pool:
            counts = list(pool.map(work, limits))

        assert counts == [len(list(primerange(2, n + 1))) for n in limits]


class TestSearchLimits:
    """Tests for config.SearchLimits"""

    def test_defaults(self):
        """Default bounds"""
        limits = SearchLimits()
        assert limits.euclidean_radius == 128
        assert limits.unit_coordinate_bits == 64

    def test_frozen(self):
        """Limits are immutable and hashable"""
        limits = SearchLimits(unit_steps=10)
        with pytest.raises(AttributeError):
            limits.unit_steps = 20
        assert hash(limits) == hash(SearchLimits(unit_steps=10))

    @pytest.mark.parametrize("kwargs", [{"euclidean_radius": 0}, {"unit_steps": 0}, {"unit_coordinate_bits": 0},
                                        {"principal_search": 0}])
    def test_invalid(self, kwargs):
        """Non-positive bounds are rejected"""
        with pytest.raises(ValueError):
            SearchLimits(**kwargs)

    def test_unbounded_bits(self):
        """unit_coordinate_bits may be None"""
        assert SearchLimits(unit_coordinate_bits=None).unit_coordinate_bits is None
