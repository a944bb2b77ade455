"""
Neighborhood operators for local search over packing solutions.

Every operator returns a perturbed copy and never touches the solution it
was given. All random choices come from the operator's own random.Random,
so a seeded instance replays the same sequence of moves.
"""

from __future__ import annotations

import random
from enum import Enum
from typing import Optional, Union

from rect_packer.geometry import can_place_at, overlap_area, try_place
from rect_packer.packing.first_fit import first_fit
from rect_packer.solution import Bin, Solution

MOVE_ATTEMPTS = 15
MOVE_WINDOW = 0.3  # fraction of the bin side covered by a within-bin offset
TRANSFER_ATTEMPTS = 3
SPARSE_BIN_SIZE = 3
MAX_PULL_FORWARD = 5
OVERLAP_ATTEMPTS = 20


class NeighborhoodKind(str, Enum):
    GEOMETRY = "geometry"
    RULE = "rule"
    OVERLAP = "overlap"

    @property
    def label(self) -> str:
        return {
            NeighborhoodKind.GEOMETRY: "Geometry-Based",
            NeighborhoodKind.RULE: "Rule-Based",
            NeighborhoodKind.OVERLAP: "Overlap",
        }[self]

    @property
    def allows_overlap(self) -> bool:
        return self is NeighborhoodKind.OVERLAP


class GeometryNeighborhood:
    """
    Moves rectangles directly in coordinate space.

    Three equally likely moves:
    1. Move within bin - shift a rectangle by a small random offset
    2. Move between bins - transfer a rectangle to another bin
    3. Swap between bins - exchange two rectangles' positions across bins
    """

    def __init__(self, side: int, rng: Optional[random.Random] = None):
        self.side = side
        self.rng = rng or random.Random()

    def neighbor(self, solution: Solution, iteration: int, max_iterations: int) -> Solution:
        candidate = solution.copy()
        move = self.rng.randrange(3)
        if move == 0:
            self.move_within_bin(candidate)
        elif move == 1:
            self.move_between_bins(candidate)
        else:
            self.swap_between_bins(candidate)
        return candidate

    def move_within_bin(self, solution: Solution) -> bool:
        bins = solution.non_empty_bins()
        if not bins:
            return False

        target = self.rng.choice(bins)
        index = self.rng.randrange(len(target.placements))
        p = target.placements[index]
        half_window = max(1, int(self.side * MOVE_WINDOW / 2))

        for _ in range(MOVE_ATTEMPTS):
            x = p.x + self.rng.randint(-half_window, half_window)
            y = p.y + self.rng.randint(-half_window, half_window)
            x = max(0, min(self.side - p.width, x))
            y = max(0, min(self.side - p.height, y))
            if can_place_at(target.placements, self.side, p.width, p.height, x, y, exclude_id=p.id):
                target.placements[index] = p.moved_to(x, y)
                return True
        return False

    def move_between_bins(self, solution: Solution) -> bool:
        if solution.bin_count < 2:
            return False

        source = self.rng.choice(solution.non_empty_bins())
        p = self.rng.choice(source.placements)
        rect = solution.rectangles[p.id]
        others = [b for b in solution.bins if b is not source]

        for _ in range(TRANSFER_ATTEMPTS):
            target = self.rng.choice(others)
            placement = try_place(rect, target)
            if placement is not None:
                source.remove(p.id)
                target.add(placement)
                solution.drop_empty_bins()
                return True
        return False

    def swap_between_bins(self, solution: Solution) -> bool:
        bins = solution.non_empty_bins()
        if len(bins) < 2:
            return False

        first, second = self.rng.sample(bins, 2)
        i = self.rng.randrange(len(first.placements))
        j = self.rng.randrange(len(second.placements))
        a = first.placements.pop(i)
        b = second.placements.pop(j)

        if can_place_at(first.placements, self.side, b.width, b.height, a.x, a.y) and can_place_at(
            second.placements, self.side, a.width, a.height, b.x, b.y
        ):
            first.placements.insert(i, b.moved_to(a.x, a.y))
            second.placements.insert(j, a.moved_to(b.x, b.y))
            return True

        first.placements.insert(i, a)
        second.placements.insert(j, b)
        return False


class RuleNeighborhood:
    """
    Works on the order in which rectangles are packed, not on coordinates.

    The current placement order is read off the solution, perturbed, and
    all rectangles are re-packed first-fit in the new order.
    """

    def __init__(self, side: int, rng: Optional[random.Random] = None):
        self.side = side
        self.rng = rng or random.Random()

    def neighbor(self, solution: Solution, iteration: int, max_iterations: int) -> Solution:
        order = solution.placement_order()
        if not order:
            return solution.copy()

        order = self.pull_sparse_forward(order, solution.bins)
        order = self.perturb(order)
        return self.rebuild(order, solution)

    def pull_sparse_forward(self, order: list[int], bins: list[Bin]) -> list[int]:
        # Early positions win under first-fit, so items from nearly empty
        # bins get a chance to land somewhere else.
        sparse_ids = [p.id for b in bins if len(b.placements) < SPARSE_BIN_SIZE for p in b.placements]
        if not sparse_ids:
            return order

        order = list(order)
        rect_id = self.rng.choice(sparse_ids)
        index = order.index(rect_id)
        order.pop(index)
        order.insert(max(0, index - self.rng.randint(1, MAX_PULL_FORWARD)), rect_id)
        return order

    def perturb(self, order: list[int]) -> list[int]:
        order = list(order)
        if len(order) < 2:
            return order

        i, j = self.rng.sample(range(len(order)), 2)
        if self.rng.random() < 0.5:
            order[i], order[j] = order[j], order[i]
        else:
            order.insert(j, order.pop(i))
        return order

    def rebuild(self, order: list[int], solution: Solution) -> Solution:
        rebuilt = Solution(side=solution.side, rectangles=solution.rectangles)
        for rect_id in order:
            first_fit(rebuilt, solution.rectangles[rect_id])
        return rebuilt


class OverlapNeighborhood:
    """
    Relocates a rectangle while tolerating a shrinking amount of overlap.

    The tolerated overlap starts at 100% and decays linearly to 0% over the
    run. Solutions it produces may overlap; pair it with an objective that
    penalizes overlap area.
    """

    def __init__(self, side: int, rng: Optional[random.Random] = None):
        self.side = side
        self.rng = rng or random.Random()

    @staticmethod
    def allowed_overlap(iteration: int, max_iterations: int) -> float:
        return max(0.0, 100.0 * (1.0 - iteration / max_iterations))

    def neighbor(self, solution: Solution, iteration: int, max_iterations: int) -> Solution:
        candidate = solution.copy()
        bins = candidate.non_empty_bins()
        if not bins:
            return candidate

        target = self.rng.choice(bins)
        index = self.rng.randrange(len(target.placements))
        p = target.placements[index]
        allowed = self.allowed_overlap(iteration, max_iterations)

        for _ in range(OVERLAP_ATTEMPTS):
            x = self.rng.randint(0, self.side - p.width)
            y = self.rng.randint(0, self.side - p.height)
            if self.within_tolerance(target, index, x, y, allowed):
                target.placements[index] = p.moved_to(x, y)
                break
        return candidate

    def within_tolerance(self, target: Bin, index: int, x: int, y: int, allowed: float) -> bool:
        if allowed >= 100.0:
            return True

        moving = target.placements[index]
        new_bounds = (x, y, x + moving.width, y + moving.height)
        for k, other in enumerate(target.placements):
            if k == index:
                continue
            area = overlap_area(new_bounds, other.bounds)
            if area == 0:
                continue
            larger = max(moving.area, other.area)
            if area / larger * 100.0 > allowed:
                return False
        return True


AnyNeighborhood = Union[GeometryNeighborhood, RuleNeighborhood, OverlapNeighborhood]


def make_neighborhood(
    kind: NeighborhoodKind,
    side: int,
    rng: Optional[random.Random] = None,
) -> AnyNeighborhood:
    kind = NeighborhoodKind(kind)
    if kind is NeighborhoodKind.GEOMETRY:
        return GeometryNeighborhood(side, rng)
    if kind is NeighborhoodKind.RULE:
        return RuleNeighborhood(side, rng)
    return OverlapNeighborhood(side, rng)
