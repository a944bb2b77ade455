from __future__ import annotations

import logging
import random
import time
from typing import Optional

from rect_packer.models import PackingResult, Rectangle
from rect_packer.packing.constraints import ConservationConstraint
from rect_packer.packing.first_fit import failure_label
from rect_packer.packing.heuristics import SelectionCriterion
from rect_packer.search.engine import LocalSearch, SearchResult, SimulatedAnnealingAcceptance, StopCheck
from rect_packer.search.initial import InitialSolutionKind, build_initial_solution
from rect_packer.search.neighborhoods import NeighborhoodKind, make_neighborhood
from rect_packer.search.objective import PackingObjective
from rect_packer.solution import Solution

logger = logging.getLogger(__name__)


def check_budget(max_iterations: int) -> None:
    if max_iterations <= 0:
        raise ValueError(f"max_iterations must be positive, got {max_iterations}")


class LocalSearchPacker:
    """
    Greedy (or naive) start followed by simulated annealing with one
    neighborhood.

    A single seeded random.Random feeds both the neighborhood and the
    acceptance rule, so equal seeds give equal runs.
    """

    def __init__(
        self,
        side: int,
        neighborhood: NeighborhoodKind = NeighborhoodKind.GEOMETRY,
        seed: Optional[int] = None,
        early_stop_fraction: float = 0.2,
        initial: InitialSolutionKind = InitialSolutionKind.GREEDY,
    ):
        if side <= 0:
            raise ValueError(f"Bin side must be positive, got {side}")
        self.side = side
        self.kind = NeighborhoodKind(neighborhood)
        self.rng = random.Random(seed)
        self.early_stop_fraction = early_stop_fraction
        self.initial = InitialSolutionKind(initial)

    @property
    def label(self) -> str:
        return f"Local Search ({self.kind.label})"

    def search(
        self,
        initial: Solution,
        max_iterations: int,
        should_stop: Optional[StopCheck] = None,
    ) -> SearchResult[Solution]:
        conservation = ConservationConstraint(initial.placement_order())
        engine: LocalSearch[Solution] = LocalSearch(
            neighborhood=make_neighborhood(self.kind, self.side, self.rng),
            objective=PackingObjective(penalize_overlap=self.kind.allows_overlap),
            acceptance=SimulatedAnnealingAcceptance(self.rng),
            copy=Solution.copy,
            is_valid=conservation.check,
            early_stop_fraction=self.early_stop_fraction,
        )
        return engine.run(initial, max_iterations, should_stop=should_stop)

    def construct(
        self,
        rectangles: list[Rectangle],
        criterion: SelectionCriterion = SelectionCriterion.AREA,
    ) -> tuple[Solution, list[Rectangle]]:
        """Starting solution of the configured kind plus the rectangles too large to place."""
        return build_initial_solution(self.initial, rectangles, self.side, criterion)

    def improve(
        self,
        initial: Solution,
        requested: int,
        too_large: int,
        max_iterations: int,
        should_stop: Optional[StopCheck] = None,
        started: Optional[float] = None,
    ) -> PackingResult:
        check_budget(max_iterations)
        return self._improve(initial, requested, too_large, max_iterations, should_stop, started)

    def _improve(
        self,
        initial: Solution,
        requested: int,
        too_large: int,
        max_iterations: int,
        should_stop: Optional[StopCheck],
        started: Optional[float],
    ) -> PackingResult:
        if started is None:
            started = time.perf_counter()

        logger.info(
            f"local search start neighborhood={self.kind.value}, initial={self.initial.value}, "
            f"bins={initial.bin_count}, utilization={initial.utilization:.2f}, max_iterations={max_iterations}"
        )

        best = initial
        iterations = 0
        stopped = False
        if initial.placed_count:
            outcome = self.search(initial, max_iterations, should_stop=should_stop)
            best = outcome.solution
            iterations = outcome.iterations
            stopped = outcome.stopped

        label = f"{self.label} ({best.placed_count}/{requested} rectangles placed)"
        if too_large:
            label = failure_label(label, too_large, self.side)
        if stopped:
            label += " [stopped]"

        result = best.to_result(
            label,
            (time.perf_counter() - started) * 1000.0,
            requested=requested,
            iterations=iterations,
        )
        logger.info(
            f"local search done bins={result.total_boxes}, utilization={result.utilization:.2f}, "
            f"iterations={iterations}, overlap={result.overlap_penalty}"
        )
        return result

    def pack(
        self,
        rectangles: list[Rectangle],
        max_iterations: int = 1000,
        criterion: SelectionCriterion = SelectionCriterion.AREA,
        should_stop: Optional[StopCheck] = None,
    ) -> PackingResult:
        """
        Pack rectangles: initial construction, then local search.

        Rectangles that exceed the bin in every orientation are left out of
        the run and reported in the label and in PackingResult.unplaced.
        """
        started = time.perf_counter()
        check_budget(max_iterations)

        initial, too_large = self.construct(rectangles, criterion)
        return self._improve(
            initial,
            requested=len(rectangles),
            too_large=len(too_large),
            max_iterations=max_iterations,
            should_stop=should_stop,
            started=started,
        )
