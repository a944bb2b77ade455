from __future__ import annotations

from rect_packer.solution import Solution

BIN_WEIGHT = 1000.0


class PackingObjective:
    """
    Fewer bins first, then higher utilization.

    With penalize_overlap the utilization is reduced by the total pairwise
    overlap area, which is how overlapping intermediate solutions are pushed
    back towards valid ones.
    """

    def __init__(self, penalize_overlap: bool = False):
        self.penalize_overlap = penalize_overlap

    def score(self, solution: Solution) -> float:
        score = solution.utilization
        if self.penalize_overlap:
            score -= solution.overlap_penalty()
        return score

    def key(self, solution: Solution) -> tuple[int, float]:
        return (solution.bin_count, -self.score(solution))

    def evaluate(self, solution: Solution) -> float:
        return solution.bin_count * BIN_WEIGHT - self.score(solution)

    def is_better(self, candidate: Solution, reference: Solution) -> bool:
        return self.key(candidate) < self.key(reference)
