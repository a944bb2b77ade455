"""
Generic local search / simulated annealing.

Nothing in this module knows about rectangles. The solution type is a type
parameter, and the caller supplies the problem-specific pieces as protocol
implementations plus a copy function.
"""

from __future__ import annotations

import logging
import math
import random
import time
from dataclasses import dataclass, field
from typing import Callable, Generic, Optional, Protocol, TypeVar

logger = logging.getLogger(__name__)

S = TypeVar("S")

StopCheck = Callable[[], bool]


class Neighborhood(Protocol[S]):
    def neighbor(self, solution: S, iteration: int, max_iterations: int) -> S:
        """Return one perturbed copy of solution; solution itself is left untouched."""
        ...


class ObjectiveFunction(Protocol[S]):
    def evaluate(self, solution: S) -> float:
        """Lower is better."""
        ...

    def is_better(self, candidate: S, reference: S) -> bool:
        ...


class AcceptanceCriterion(Protocol):
    def should_accept(
        self,
        current_objective: float,
        new_objective: float,
        iteration: int,
        max_iterations: int,
    ) -> bool:
        ...


class SimulatedAnnealingAcceptance:
    """
    Accept improvements always, worse moves with probability exp(-delta / T).

    T cools linearly from 1 to 0 over the run and is floored so the
    exponent stays finite at the end of the schedule.
    """

    def __init__(self, rng: Optional[random.Random] = None, floor: float = 0.1):
        self.rng = rng or random.Random()
        self.floor = floor

    def temperature(self, iteration: int, max_iterations: int) -> float:
        return 1.0 - iteration / max_iterations

    def should_accept(
        self,
        current_objective: float,
        new_objective: float,
        iteration: int,
        max_iterations: int,
    ) -> bool:
        if new_objective < current_objective:
            return True
        delta = new_objective - current_objective
        t = max(self.floor, self.temperature(iteration, max_iterations))
        return self.rng.random() < math.exp(-delta / t)


@dataclass
class SearchResult(Generic[S]):
    solution: S
    objective: float
    iterations: int
    elapsed_ms: float
    stopped: bool = False
    history: list[float] = field(default_factory=list)


def clamp_early_stop(fraction: float) -> float:
    return max(0.05, min(1.0, fraction))


class LocalSearch(Generic[S]):
    def __init__(
        self,
        neighborhood: Neighborhood[S],
        objective: ObjectiveFunction[S],
        acceptance: AcceptanceCriterion,
        copy: Callable[[S], S],
        is_valid: Optional[Callable[[S], bool]] = None,
        early_stop_fraction: float = 0.2,
    ):
        self.neighborhood = neighborhood
        self.objective = objective
        self.acceptance = acceptance
        self.copy = copy
        self.is_valid = is_valid
        self.early_stop_fraction = clamp_early_stop(early_stop_fraction)

    def run(
        self,
        initial: S,
        max_iterations: int,
        should_stop: Optional[StopCheck] = None,
    ) -> SearchResult[S]:
        """
        Run the search from initial for at most max_iterations.

        Stops early once the best solution has not improved for more than
        early_stop_fraction * max_iterations iterations and at least half
        the budget is spent, or as soon as should_stop() returns True. The
        returned solution is a private copy of the best one seen.
        """
        if max_iterations <= 0:
            raise ValueError(f"max_iterations must be positive, got {max_iterations}")

        start = time.perf_counter()

        current = self.copy(initial)
        current_objective = self.objective.evaluate(current)
        best = self.copy(current)
        best_objective = current_objective

        stall_limit = max(1, int(max_iterations * self.early_stop_fraction))
        stall = 0
        iterations = 0
        stopped = False
        history: list[float] = []

        for iteration in range(max_iterations):
            if should_stop is not None and should_stop():
                stopped = True
                logger.info(f"local search stopped on request after {iterations} iterations")
                break

            iterations = iteration + 1
            candidate = self.neighborhood.neighbor(current, iteration, max_iterations)

            if self.is_valid is not None and not self.is_valid(candidate):
                stall += 1
            else:
                candidate_objective = self.objective.evaluate(candidate)

                if self.objective.is_better(candidate, best):
                    best = self.copy(candidate)
                    best_objective = candidate_objective
                    stall = 0
                    logger.debug(f"iteration {iteration}: new best objective {best_objective:.4f}")
                else:
                    stall += 1

                if self.acceptance.should_accept(
                    current_objective, candidate_objective, iteration, max_iterations
                ):
                    current = candidate
                    current_objective = candidate_objective

            history.append(best_objective)

            # Early stopping: no improvement for a while, past the halfway mark
            if stall > stall_limit and iteration >= max_iterations * 0.5:
                logger.debug(f"early stop at iteration {iteration} (stall={stall})")
                break

        elapsed_ms = (time.perf_counter() - start) * 1000.0
        return SearchResult(
            solution=best,
            objective=best_objective,
            iterations=iterations,
            elapsed_ms=elapsed_ms,
            stopped=stopped,
            history=history,
        )
