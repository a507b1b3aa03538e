"""Number theory over the rational integers: primality, squarefreeness and residue symbols."""
import random

from math import gcd
from typing import Optional

from sympy import factorint

from .utils import PRIME_CACHE, PrimeCache

_RANDOM = random.Random()


# region primes
def is_rational_prime(n: int, cache: Optional[PrimeCache] = None) -> bool:
    """
    Primality by trial division up to the square root of |n|.

    Negative numbers are prime when their absolute value is (so -2 and 2 are both prime).

    Args:
        n: The number to test.
        cache: The prime cache to use, by default the shared one.

    Returns:
        bool: True iff |n| is prime.
    """
    n = abs(n)
    if n < 2:
        return False
    return (cache or PRIME_CACHE).smallest_factor(n) == n


def rational_prime_factors(n: int, cache: Optional[PrimeCache] = None) -> list[int]:
    """
    Prime factors of n in ascending order, repeated by multiplicity.

    A negative n gets -1 as its first factor. 0 and 1 are returned as themselves.

    Returns:
        list: The factors, whose product is n.
    """
    cache = cache or PRIME_CACHE
    if n in (0, 1):
        return [n]

    factors = []
    if n < 0:
        factors.append(-1)
        n = -n

    while n > 1:
        p = cache.smallest_factor(n)
        assert p is not None
        while n % p == 0:
            factors.append(p)
            n //= p

    return factors


def is_squarefree(n: int) -> bool:
    """True iff no square of a prime divides n. 0 is not squarefree, 1 and -1 are."""
    if n == 0:
        return False
    return all(e == 1 for e in factorint(abs(n)).values())


def kernel(n: int) -> int:
    """Product of the distinct prime factors of n (its radical), signed like n."""
    if n == 0:
        raise ValueError("The kernel of 0 is undefined")

    k = 1
    for p in factorint(abs(n)):
        k *= p
    return -k if n < 0 else k


def moebius_mu(n: int) -> int:
    """Möbius function: 0 if n has a square factor, otherwise (-1)^(number of prime factors)."""
    if n == 0:
        raise ValueError("The Möbius function is not defined at 0")

    fac = factorint(abs(n))
    if any(e > 1 for e in fac.values()):
        return 0
    return -1 if len(fac) & 1 else 1


def squarefree_decomposition(n: int) -> tuple[int, int]:
    """
    Split n as k**2 * m with k > 0 and m squarefree (m carries the sign of n).

    Returns:
        tuple: (k, m)
    """
    if n == 0:
        raise ValueError("0 has no squarefree decomposition")

    k, m = 1, 1
    for p, e in factorint(abs(n)).items():
        k *= p ** (e // 2)
        if e & 1:
            m *= p
    return k, (-m if n < 0 else m)
# endregion


# region symbols
def symbol_legendre(a: int, p: int) -> int:
    """
    Legendre symbol (a/p) by Euler's criterion.

    Args:
        a: Any integer.
        p: An odd positive prime.

    Returns:
        int: -1, 0 or 1.

    Raises:
        ValueError: If p is even, not positive, or composite.
    """
    if p % 2 == 0:
        raise ValueError(f"{p} is even; use symbol_jacobi for odd moduli or symbol_kronecker for even ones")
    if p < 3 or not is_rational_prime(p):
        raise ValueError(f"{p} is not an odd positive prime; use symbol_jacobi instead")

    r = pow(a % p, (p - 1) // 2, p)
    if r == p - 1:
        return -1
    return r


def symbol_jacobi(a: int, m: int) -> int:
    """
    Jacobi symbol (a/m), the product of the Legendre symbols over the prime factors of m.

    Raises:
        ValueError: If m is even or negative.
    """
    if m % 2 == 0:
        raise ValueError(f"{m} is even; use symbol_kronecker instead")
    if m < 0:
        raise ValueError(f"{m} is negative; use symbol_kronecker instead")

    if m == 1:
        return 1
    if gcd(a, m) > 1:
        return 0

    result = 1
    for p in rational_prime_factors(m):
        result *= symbol_legendre(a, p)
    return result


def _kronecker_two(a: int) -> int:
    """(a/2): 0 for even a, 1 for a = ±1 mod 8, -1 for a = ±3 mod 8."""
    if a % 2 == 0:
        return 0
    return 1 if a % 8 in (1, 7) else -1


def symbol_kronecker(a: int, m: int) -> int:
    """
    Kronecker symbol (a/m) for any integers.

    (a/0) is 1 for a = ±1 and 0 otherwise; (a/-1) is -1 for negative a and 1 otherwise;
    (a/2) follows a mod 8; odd parts go through the Jacobi symbol.
    """
    if m == 0:
        return 1 if a in (1, -1) else 0
    if gcd(a, m) > 1:
        return 0

    result = 1
    if m < 0:
        m = -m
        if a < 0:
            result = -result

    while m % 2 == 0:
        m //= 2
        result *= _kronecker_two(a)

    if m > 1:
        result *= symbol_jacobi(a, m)
    return result
# endregion


# region random squarefree numbers
def random_squarefree_number(bound: int, rng: Optional[random.Random] = None) -> int:
    """
    A uniformly chosen squarefree number in [1, |bound|).

    Raises:
        ValueError: If |bound| < 2, leaving nothing to choose from.
    """
    bound = abs(bound)
    if bound < 2:
        raise ValueError(f"No squarefree number is below {bound}")

    rng = rng or _RANDOM
    while True:
        choice = rng.randrange(1, bound)
        if is_squarefree(choice):
            return choice


def random_squarefree_number_mod(residue: int, modulus: int, rng: Optional[random.Random] = None) -> int:
    """
    A random positive squarefree number congruent to residue modulo modulus.

    Raises:
        ZeroDivisionError: If modulus is 0.
        ValueError: If gcd(residue, modulus) has a square factor, in which case no such number exists.
    """
    if modulus == 0:
        raise ZeroDivisionError("Modulus 0 is not allowed")

    modulus = abs(modulus)
    common = gcd(residue, modulus)
    if not is_squarefree(common):
        raise ValueError(f"Every number congruent to {residue} mod {modulus} is divisible by a square")

    rng = rng or _RANDOM
    choice = modulus * rng.randrange(4096) + residue % modulus
    while not is_squarefree(choice):
        choice += modulus
    return choice
# endregion
