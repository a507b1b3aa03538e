from bisect import bisect_right
from math import isqrt
from threading import RLock
from typing import Iterator, Optional

from sympy import factorint, isprime


def xgcd(a: int, b: int) -> tuple[int, int, int]:
    """
    Extended Euclid.

    Returns:
        tuple: (g, s, t) with s*a + t*b == g == gcd(a, b) and g >= 0.
    """
    old_r, r = a, b
    old_s, s = 1, 0
    old_t, t = 0, 1
    while r:
        q = old_r // r
        old_r, r = r, old_r - q * r
        old_s, s = s, old_s - q * s
        old_t, t = t, old_t - q * t

    if old_r < 0:
        return -old_r, -old_s, -old_t
    return old_r, old_s, old_t


def is_perfect_square(n: int) -> bool:
    """True iff n is the square of an integer."""
    if n < 0:
        return False
    r = isqrt(n)
    return r * r == n


class PrimeCache:
    """
    Growth-only cache of the rational primes, shared by the trial-division routines.

    Readers always work on an immutable snapshot (a tuple) of the primes sieved so far, so reading
    needs no locking. Extension happens under a single writer lock: the sieve is rebuilt to at least
    twice the old limit and the new snapshot is swapped in before the new limit is published.
    The cache never shrinks.

    Sieving stops at max_limit; numbers with a larger square root go to sympy once the cached primes
    are exhausted.
    """

    def __init__(self, initial_limit: int = 1 << 10, max_limit: int = 1 << 24) -> None:
        if max_limit < 2:
            raise ValueError("max_limit must be at least 2")

        self._lock = RLock()
        self._primes: tuple[int, ...] = ()
        self._limit = 1
        self.max_limit = max_limit
        self.extend(min(initial_limit, max_limit))

    @property
    def limit(self) -> int:
        """Every prime up to this bound is cached."""
        return self._limit

    def snapshot(self) -> tuple[int, ...]:
        """The primes cached so far, in ascending order."""
        return self._primes

    def extend(self, limit: int) -> tuple[int, ...]:
        """
        Make sure every prime up to limit (capped at max_limit) is cached.

        Returns:
            tuple: The current snapshot.
        """
        limit = min(limit, self.max_limit)
        if limit <= self._limit:
            return self._primes

        with self._lock:
            if limit <= self._limit:
                return self._primes

            new_limit = min(max(limit, 2 * self._limit), self.max_limit)
            sieve = bytearray([1]) * (new_limit + 1)
            sieve[0] = sieve[1] = 0
            for p in range(2, isqrt(new_limit) + 1):
                if sieve[p]:
                    sieve[p * p::p] = bytes(len(range(p * p, new_limit + 1, p)))

            # Snapshot first, limit second: a reader seeing the new limit also sees the new primes
            self._primes = tuple(i for i in range(2, new_limit + 1) if sieve[i])
            self._limit = new_limit
            return self._primes

    def primes_up_to(self, n: int) -> tuple[int, ...]:
        """All primes p <= n, as far as max_limit allows."""
        primes = self.extend(n)
        return primes[:bisect_right(primes, n)]

    def __iter__(self) -> Iterator[int]:
        """Iterate the cached primes, extending the sieve as needed, up to max_limit."""
        i = 0
        while True:
            primes = self._primes
            if i < len(primes):
                yield primes[i]
                i += 1
                continue

            if self._limit >= self.max_limit:
                return
            self.extend(2 * self._limit)

    def smallest_factor(self, n: int) -> Optional[int]:
        """
        Smallest prime factor of |n| by trial division over the cached primes.

        Numbers whose square root lies past max_limit are only divided by the primes cached so far,
        without growing the sieve, and then handed to sympy (isprime, then factorint).

        Returns:
            Optional[int]: The smallest prime factor, or None when |n| < 2.
        """
        n = abs(n)
        if n < 2:
            return None

        root = isqrt(n)
        beyond = root > self.max_limit
        for p in (self._primes if beyond else self.primes_up_to(root)):
            if n % p == 0:
                return p

        if not beyond or isprime(n):
            return n
        return min(factorint(n))

    def __contains__(self, n: object) -> bool:
        if not isinstance(n, int):
            return False
        return n >= 2 and self.smallest_factor(n) == n


PRIME_CACHE = PrimeCache()
