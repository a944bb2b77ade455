"""
Mutable packing state shared by the greedy constructor and local search.

A Solution is an arena-style snapshot: the Rectangle definitions live in one
read-only table shared by every copy, and only the per-bin placement lists
are duplicated by copy(). Placements are frozen, so a copied bin can share
them safely; moving a rectangle always swaps in a new Placement.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Optional

from rect_packer.metrics import bin_utilization, solution_utilization, total_overlap, used_area
from rect_packer.models import BinResult, PackingResult, Placement, Rectangle


@dataclass
class Bin:
    id: int
    side: int
    placements: list[Placement] = field(default_factory=list)

    @property
    def used_area(self) -> int:
        return used_area(self.placements)

    @property
    def utilization(self) -> float:
        return bin_utilization(self.placements, self.side)

    def add(self, placement: Placement) -> None:
        self.placements.append(placement)

    def remove(self, rect_id: int) -> Placement:
        for i, p in enumerate(self.placements):
            if p.id == rect_id:
                return self.placements.pop(i)
        raise KeyError(f"Rectangle {rect_id} is not in bin {self.id}")

    def copy(self) -> "Bin":
        return Bin(id=self.id, side=self.side, placements=list(self.placements))


@dataclass
class Solution:
    side: int
    rectangles: Mapping[int, Rectangle]
    bins: list[Bin] = field(default_factory=list)

    def copy(self) -> "Solution":
        return Solution(
            side=self.side,
            rectangles=self.rectangles,
            bins=[b.copy() for b in self.bins],
        )

    @property
    def bin_count(self) -> int:
        return len(self.bins)

    @property
    def placed_count(self) -> int:
        return sum(len(b.placements) for b in self.bins)

    @property
    def utilization(self) -> float:
        return solution_utilization([b.placements for b in self.bins], self.side)

    def overlap_penalty(self) -> int:
        return total_overlap(b.placements for b in self.bins)

    def placement_order(self) -> list[int]:
        return [p.id for b in self.bins for p in b.placements]

    def non_empty_bins(self) -> list[Bin]:
        return [b for b in self.bins if b.placements]

    def new_bin(self) -> Bin:
        next_id = max((b.id for b in self.bins), default=-1) + 1
        created = Bin(id=next_id, side=self.side)
        self.bins.append(created)
        return created

    def drop_empty_bins(self) -> None:
        self.bins = self.non_empty_bins()

    def locate(self, rect_id: int) -> Optional[tuple[Bin, Placement]]:
        for b in self.bins:
            for p in b.placements:
                if p.id == rect_id:
                    return b, p
        return None

    def to_result(
        self,
        algorithm: str,
        execution_time_ms: float = 0.0,
        requested: Optional[int] = None,
        iterations: int = 0,
    ) -> PackingResult:
        if requested is None:
            requested = len(self.rectangles)
        placed = self.placed_count
        return PackingResult(
            bins=[
                BinResult(id=b.id, rectangles=list(b.placements), utilization=b.utilization)
                for b in self.bins
            ],
            total_boxes=self.bin_count,
            utilization=self.utilization,
            algorithm=algorithm,
            execution_time_ms=execution_time_ms,
            requested=requested,
            placed=placed,
            unplaced=max(0, requested - placed),
            overlap_penalty=float(self.overlap_penalty()),
            iterations=iterations,
        )
