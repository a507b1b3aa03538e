from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class SearchLimits:
    """
    Bounds for the searching algorithms.

    Every search either finishes inside these bounds or raises ArithmeticRangeError, so a caller
    never waits on an unbounded loop.

    Attributes:
        euclidean_radius: Widest neighbourhood (in integral-basis coordinates, around the lattice cell
            holding the exact quotient) tried by a Euclidean step looking for a smaller remainder.
        unit_steps: Maximum continued-fraction steps in the fundamental unit search.
        unit_coordinate_bits: Maximum bit length of a fundamental unit coordinate, None for unbounded.
        principal_search: Maximum number of candidate coordinates tried when looking for a generator
            of a given norm.
    """
    euclidean_radius: int = 128
    unit_steps: int = 100_000
    unit_coordinate_bits: Optional[int] = 64
    principal_search: int = 1_000_000

    def __post_init__(self) -> None:
        if self.euclidean_radius < 1:
            raise ValueError("euclidean_radius must be at least 1")
        if self.unit_steps < 1:
            raise ValueError("unit_steps must be at least 1")
        if self.unit_coordinate_bits is not None and self.unit_coordinate_bits < 1:
            raise ValueError("unit_coordinate_bits must be positive or None")
        if self.principal_search < 1:
            raise ValueError("principal_search must be at least 1")


DEFAULT_LIMITS = SearchLimits()
