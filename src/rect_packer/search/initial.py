"""Starting solutions for local search."""

from __future__ import annotations

import logging
from enum import Enum

from rect_packer.models import Placement, Rectangle
from rect_packer.packing.first_fit import build_greedy_solution, check_inputs, split_placeable
from rect_packer.packing.heuristics import SelectionCriterion
from rect_packer.solution import Solution

logger = logging.getLogger(__name__)


class InitialSolutionKind(str, Enum):
    GREEDY = "greedy"
    NAIVE = "naive"

    @property
    def label(self) -> str:
        return "Greedy" if self is InitialSolutionKind.GREEDY else "Naive"


def build_naive_solution(rectangles: list[Rectangle], side: int) -> tuple[Solution, list[Rectangle]]:
    """
    One bin per placeable rectangle, each at the origin in its given
    orientation, in input order. Too-large rectangles are returned apart.
    """
    check_inputs(rectangles, side)
    placeable, too_large = split_placeable(rectangles, side)
    if too_large:
        logger.warning(
            f"{len(too_large)} of {len(rectangles)} rectangles exceed bin side {side}: "
            f"{[r.id for r in too_large]}"
        )

    solution = Solution(side=side, rectangles={r.id: r for r in placeable})
    for rect in placeable:
        solution.new_bin().add(
            Placement(id=rect.id, width=rect.width, height=rect.height, rotated=rect.rotated, x=0, y=0)
        )
    return solution, too_large


def build_initial_solution(
    kind: InitialSolutionKind,
    rectangles: list[Rectangle],
    side: int,
    criterion: SelectionCriterion = SelectionCriterion.AREA,
) -> tuple[Solution, list[Rectangle]]:
    kind = InitialSolutionKind(kind)
    if kind is InitialSolutionKind.NAIVE:
        return build_naive_solution(rectangles, side)
    return build_greedy_solution(rectangles, side, criterion)
