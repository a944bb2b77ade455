from __future__ import annotations

import pytest

from rect_packer.geometry import rects_overlap
from rect_packer.models import Rectangle
from rect_packer.packing.constraints import validate_solution
from rect_packer.packing.first_fit import build_greedy_solution, pack_rectangles
from rect_packer.packing.heuristics import SelectionCriterion, order_rectangles


def make_rects(dims):
    return [Rectangle(id=i, width=w, height=h) for i, (w, h) in enumerate(dims)]


def assert_within_bin(side, placements):
    for p in placements:
        x1, y1, x2, y2 = p.bounds
        assert x1 >= 0 and y1 >= 0
        assert x2 <= side
        assert y2 <= side


def assert_no_overlaps(placements):
    bounds = [p.bounds for p in placements]
    for i in range(len(bounds)):
        for j in range(i + 1, len(bounds)):
            assert not rects_overlap(bounds[i], bounds[j])


MIXED = [(40, 30), (25, 60), (70, 20), (35, 35), (10, 90), (50, 50), (20, 20), (60, 15), (45, 45), (30, 80)]


def test_four_squares_fill_one_bin():
    rects = make_rects([(40, 40)] * 4)

    result = pack_rectangles(rects, 80, SelectionCriterion.AREA)

    assert result.total_boxes == 1
    assert result.utilization == pytest.approx(100.0)
    assert result.placed == 4
    assert result.success
    assert result.algorithm == "Greedy (Area Descending)"


def test_too_large_rectangle_is_reported_not_packed():
    rects = make_rects([(150, 60)])

    result = pack_rectangles(rects, 100, SelectionCriterion.AREA)

    assert result.total_boxes == 0
    assert result.placed == 0
    assert result.unplaced == 1
    assert result.success is False
    assert "FAILED: 1 rectangles too large for box size 100" in result.algorithm


def test_ten_squares_respect_grid_capacity():
    rects = make_rects([(30, 30)] * 10)

    result = pack_rectangles(rects, 100, SelectionCriterion.AREA)

    # 3 x 3 squares of side 30 fit a bin of side 100; the tenth needs a new bin
    assert all(len(b.rectangles) <= 9 for b in result.bins)
    assert len(result.bins[0].rectangles) == 9
    assert result.total_boxes == 2
    assert result.placed == 10


@pytest.mark.parametrize("criterion", list(SelectionCriterion))
def test_mixed_instance_is_valid_and_complete(criterion):
    rects = make_rects(MIXED)

    solution, too_large = build_greedy_solution(rects, 100, criterion)

    assert too_large == []
    assert validate_solution(solution, [r.id for r in rects]) == []
    assert sorted(solution.placement_order()) == [r.id for r in rects]
    for b in solution.bins:
        assert_within_bin(100, b.placements)
        assert_no_overlaps(b.placements)


def test_partial_input_excludes_only_too_large():
    rects = make_rects([(40, 40), (120, 10), (30, 30)])

    result = pack_rectangles(rects, 100)

    assert result.requested == 3
    assert result.placed == 2
    assert result.unplaced == 1
    assert result.total_boxes == 1
    assert "FAILED" in result.algorithm


def test_order_rectangles_is_descending_and_stable():
    rects = make_rects([(2, 5), (5, 2), (3, 3), (1, 10)])

    by_area = order_rectangles(rects, SelectionCriterion.AREA)
    by_height = order_rectangles(rects, SelectionCriterion.HEIGHT)

    assert [r.id for r in by_area] == [0, 1, 3, 2]
    assert [r.id for r in by_height] == [3, 0, 1, 2]


def test_greedy_is_deterministic():
    rects = make_rects(MIXED)

    first = pack_rectangles(rects, 100).model_dump(exclude={"execution_time_ms"})
    second = pack_rectangles(rects, 100).model_dump(exclude={"execution_time_ms"})

    assert first == second


def test_empty_input_raises():
    with pytest.raises(ValueError):
        pack_rectangles([], 100)


def test_non_positive_side_raises():
    with pytest.raises(ValueError):
        pack_rectangles(make_rects([(1, 1)]), 0)


def test_duplicate_ids_raise():
    rects = [Rectangle(id=1, width=2, height=2), Rectangle(id=1, width=3, height=3)]
    with pytest.raises(ValueError):
        pack_rectangles(rects, 10)


def test_utilization_is_idempotent():
    rects = make_rects(MIXED)
    solution, _ = build_greedy_solution(rects, 100)

    assert solution.utilization == solution.utilization
    assert [b.utilization for b in solution.bins] == [b.utilization for b in solution.bins]
    assert solution.overlap_penalty() == 0


def test_lost_rectangle_is_flagged_in_label(monkeypatch):
    rects = make_rects([(40, 40), (30, 30), (20, 20)])
    solution, too_large = build_greedy_solution(rects, 100)
    solution.bins[0].remove(2)
    monkeypatch.setattr(
        "rect_packer.packing.first_fit.build_greedy_solution",
        lambda rectangles, side, criterion: (solution, too_large),
    )

    result = pack_rectangles(rects, 100)

    assert result.algorithm == "Greedy (Area Descending) (WARNING: Only 2/3 rectangles placed)"
    assert result.placed == 2
    assert result.unplaced == 1
    assert result.success is False
