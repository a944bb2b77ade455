from __future__ import annotations

from typing import Iterable, Sequence

from rect_packer.geometry import overlap_area
from rect_packer.models import Placement


def used_area(placements: Iterable[Placement]) -> int:
    return sum(p.area for p in placements)


def bin_utilization(placements: Iterable[Placement], side: int) -> float:
    bin_area = side * side
    return 0.0 if bin_area == 0 else used_area(placements) / bin_area * 100.0


def solution_utilization(bins: Sequence[Sequence[Placement]], side: int) -> float:
    """Total placed area over total bin area, in percent."""
    total_area = len(bins) * side * side
    if total_area == 0:
        return 0.0
    return sum(used_area(b) for b in bins) / total_area * 100.0


def pairwise_overlap(placements: Sequence[Placement]) -> int:
    total = 0
    for i in range(len(placements)):
        for j in range(i + 1, len(placements)):
            total += overlap_area(placements[i].bounds, placements[j].bounds)
    return total


def total_overlap(bins: Iterable[Sequence[Placement]]) -> int:
    return sum(pairwise_overlap(b) for b in bins)
