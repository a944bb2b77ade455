"""Tests for the generic local search engine, using integers as solutions."""

from __future__ import annotations

import random

import pytest

from rect_packer.search.engine import LocalSearch, SimulatedAnnealingAcceptance, clamp_early_stop


class StepUp:
    """Always proposes x + 1."""

    def neighbor(self, solution: int, iteration: int, max_iterations: int) -> int:
        return solution + 1


class RandomStep:
    def __init__(self, seed: int):
        self.rng = random.Random(seed)

    def neighbor(self, solution: int, iteration: int, max_iterations: int) -> int:
        return solution + self.rng.choice((-1, 1))


class DistanceTo:
    def __init__(self, target: int):
        self.target = target

    def evaluate(self, solution: int) -> float:
        return float(abs(solution - self.target))

    def is_better(self, candidate: int, reference: int) -> bool:
        return self.evaluate(candidate) < self.evaluate(reference)


class AlwaysAccept:
    def should_accept(self, current_objective, new_objective, iteration, max_iterations) -> bool:
        return True


def identity(x: int) -> int:
    return x


def test_finds_target_and_stops_early():
    engine = LocalSearch(StepUp(), DistanceTo(10), AlwaysAccept(), copy=identity)

    result = engine.run(0, max_iterations=50)

    assert result.solution == 10
    assert result.objective == 0.0
    # best found at iteration 9; stall exceeds 10 at iteration 20, halfway mark is 25
    assert result.iterations == 26
    assert result.stopped is False


def test_best_history_never_increases():
    engine = LocalSearch(
        RandomStep(seed=3),
        DistanceTo(25),
        SimulatedAnnealingAcceptance(random.Random(3)),
        copy=identity,
    )

    result = engine.run(0, max_iterations=400)

    assert len(result.history) == result.iterations
    assert all(b <= a for a, b in zip(result.history, result.history[1:]))
    assert result.objective == min(result.history)


def test_should_stop_is_polled_every_iteration():
    calls = []

    def should_stop() -> bool:
        calls.append(1)
        return len(calls) > 5

    engine = LocalSearch(StepUp(), DistanceTo(100), AlwaysAccept(), copy=identity)
    result = engine.run(0, max_iterations=1000, should_stop=should_stop)

    assert result.stopped is True
    assert result.iterations == 5
    assert result.solution == 5


def test_invalid_neighbors_are_skipped():
    engine = LocalSearch(
        StepUp(), DistanceTo(10), AlwaysAccept(), copy=identity, is_valid=lambda x: False
    )

    result = engine.run(0, max_iterations=20)

    assert result.solution == 0
    assert set(result.history) == {10.0}


def test_non_positive_budget_raises():
    engine = LocalSearch(StepUp(), DistanceTo(10), AlwaysAccept(), copy=identity)
    with pytest.raises(ValueError):
        engine.run(0, max_iterations=0)


def test_annealing_always_accepts_improvement():
    acceptance = SimulatedAnnealingAcceptance(random.Random(0))

    assert all(acceptance.should_accept(10.0, 9.0, i, 100) for i in range(100))


def test_annealing_rejects_large_degradation():
    acceptance = SimulatedAnnealingAcceptance(random.Random(0))

    # exp(-1000 / 1.0) is effectively zero
    assert not any(acceptance.should_accept(0.0, 1000.0, 0, 100) for _ in range(50))


def test_annealing_temperature_is_floored():
    acceptance = SimulatedAnnealingAcceptance(random.Random(0), floor=0.1)

    assert acceptance.temperature(100, 100) == 0.0
    # equal objectives give exp(0) = 1, even when T would be 0
    assert acceptance.should_accept(5.0, 5.0, 100, 100) is True


def test_early_stop_fraction_is_clamped():
    assert clamp_early_stop(0.0) == 0.05
    assert clamp_early_stop(3.0) == 1.0
    assert clamp_early_stop(0.2) == 0.2
