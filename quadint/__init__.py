from .config import DEFAULT_LIMITS, SearchLimits
from .exceptions import (AlgebraicDegreeOverflowError, AlgebraicError, ArithmeticRangeError, NonEuclideanDomainError,
                         NonUniqueFactorizationError, NotDivisibleError, UnsupportedNumberDomainError)
from .ideal import Ideal
from .quad import QuadraticInteger
from .ring import AlgebraicInteger, IntegerRing, PowerBasis, QuadraticRing
from .utils import PRIME_CACHE, PrimeCache

__all__ = [
    "AlgebraicDegreeOverflowError",
    "AlgebraicError",
    "AlgebraicInteger",
    "ArithmeticRangeError",
    "DEFAULT_LIMITS",
    "Ideal",
    "IntegerRing",
    "NonEuclideanDomainError",
    "NonUniqueFactorizationError",
    "NotDivisibleError",
    "PRIME_CACHE",
    "PowerBasis",
    "PrimeCache",
    "QuadraticInteger",
    "QuadraticRing",
    "SearchLimits",
    "UnsupportedNumberDomainError",
]
