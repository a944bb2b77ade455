# src/rect_packer/packing/first_fit.py

from __future__ import annotations

import logging
import time
from typing import Iterable

from rect_packer.geometry import is_placeable, try_place
from rect_packer.models import PackingResult, Placement, Rectangle
from rect_packer.packing.heuristics import SelectionCriterion, order_rectangles
from rect_packer.solution import Solution

logger = logging.getLogger(__name__)


def check_inputs(rectangles: list[Rectangle], side: int) -> None:
    if side <= 0:
        raise ValueError(f"Bin side must be positive, got {side}")
    if not rectangles:
        raise ValueError("At least one rectangle is required")
    ids = [r.id for r in rectangles]
    if len(set(ids)) != len(ids):
        raise ValueError("Rectangle ids must be unique within one packing run")


def split_placeable(rectangles: Iterable[Rectangle], side: int) -> tuple[list[Rectangle], list[Rectangle]]:
    placeable: list[Rectangle] = []
    too_large: list[Rectangle] = []
    for rect in rectangles:
        (placeable if is_placeable(rect, side) else too_large).append(rect)
    return placeable, too_large


def failure_label(base: str, too_large: int, side: int) -> str:
    return f"{base} (FAILED: {too_large} rectangles too large for box size {side})"


def first_fit(solution: Solution, rect: Rectangle) -> Placement:
    """
    Place rect into the first existing bin (creation order) where it fits,
    opening a new bin when none does.

    The caller guarantees rect is placeable, so a fresh bin always accepts it.
    """
    for target in solution.bins:
        placement = try_place(rect, target)
        if placement is not None:
            target.add(placement)
            return placement

    fresh = solution.new_bin()
    placement = try_place(rect, fresh)
    if placement is None:
        raise ValueError(
            f"Rectangle {rect.id} ({rect.width}x{rect.height}) does not fit an empty bin of side {solution.side}"
        )
    fresh.add(placement)
    return placement


def build_greedy_solution(
    rectangles: list[Rectangle],
    side: int,
    criterion: SelectionCriterion = SelectionCriterion.AREA,
) -> tuple[Solution, list[Rectangle]]:
    """
    First-fit decreasing construction, no backtracking.

    Returns the solution over all placeable rectangles together with the
    rectangles that were excluded because they exceed the bin in every
    orientation.
    """
    check_inputs(rectangles, side)
    placeable, too_large = split_placeable(rectangles, side)
    if too_large:
        logger.warning(
            f"{len(too_large)} of {len(rectangles)} rectangles exceed bin side {side}: "
            f"{[r.id for r in too_large]}"
        )

    solution = Solution(side=side, rectangles={r.id: r for r in placeable})
    for rect in order_rectangles(placeable, criterion):
        first_fit(solution, rect)

    return solution, too_large


def pack_rectangles(
    rectangles: list[Rectangle],
    side: int,
    criterion: SelectionCriterion = SelectionCriterion.AREA,
) -> PackingResult:
    """
    Greedy packer:
    - Orders rectangles by the selection criterion (descending, stable)
    - Places each one with the bottom-left rule into the first bin that fits
    - Opens a new bin only when no existing bin fits
    - Deterministic (no randomness)
    """
    start = time.perf_counter()
    solution, too_large = build_greedy_solution(rectangles, side, criterion)
    elapsed_ms = (time.perf_counter() - start) * 1000.0

    label = f"Greedy ({criterion.label})"
    if too_large:
        label = failure_label(label, len(too_large), side)

    result = solution.to_result(label, elapsed_ms, requested=len(rectangles))
    if result.placed + len(too_large) != result.requested:
        result.algorithm = f"{label} (WARNING: Only {result.placed}/{result.requested} rectangles placed)"

    logger.info(
        f"greedy criterion={criterion.value}, bins={result.total_boxes}, "
        f"utilization={result.utilization:.2f}, unplaced={result.unplaced}"
    )
    return result
