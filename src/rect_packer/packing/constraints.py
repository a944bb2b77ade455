"""Constraints a packing solution must satisfy."""

from __future__ import annotations

from collections import Counter
from typing import Iterable

from rect_packer.geometry import fits_in_bin, rects_overlap
from rect_packer.solution import Solution


class Constraint:
    """Base class for packing constraints."""

    name = "constraint"

    def check(self, solution: Solution) -> bool:
        """
        Check if the solution satisfies the constraint.

        Args:
            solution: Solution to check

        Returns:
            True if constraint is satisfied, False otherwise
        """
        raise NotImplementedError


class BoundaryConstraint(Constraint):
    """Every placement lies fully inside its bin."""

    name = "boundary"

    def check(self, solution: Solution) -> bool:
        return all(
            fits_in_bin(p.x, p.y, p.width, p.height, b.side)
            for b in solution.bins
            for p in b.placements
        )


class NonOverlapConstraint(Constraint):
    """No two placements in the same bin overlap."""

    name = "non_overlap"

    def check(self, solution: Solution) -> bool:
        for b in solution.bins:
            bounds = [p.bounds for p in b.placements]
            for i in range(len(bounds)):
                for j in range(i + 1, len(bounds)):
                    if rects_overlap(bounds[i], bounds[j]):
                        return False
        return True


class ConservationConstraint(Constraint):
    """Each expected rectangle is placed exactly once and nothing else is."""

    name = "conservation"

    def __init__(self, expected_ids: Iterable[int]):
        self.expected = Counter(expected_ids)

    def check(self, solution: Solution) -> bool:
        return Counter(solution.placement_order()) == self.expected


def validate_solution(solution: Solution, expected_ids: Iterable[int]) -> list[str]:
    """Names of the constraints the solution violates (empty when valid)."""
    constraints: list[Constraint] = [
        BoundaryConstraint(),
        NonOverlapConstraint(),
        ConservationConstraint(expected_ids),
    ]
    return [c.name for c in constraints if not c.check(solution)]
