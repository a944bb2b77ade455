from __future__ import annotations

import pytest
from pydantic import ValidationError

from rect_packer.geometry import (
    can_place_at,
    candidate_points,
    is_placeable,
    overlap_area,
    rects_overlap,
    try_place,
)
from rect_packer.models import Placement, Rectangle
from rect_packer.solution import Bin


def test_rects_overlap_overlapping() -> None:
    """Test that overlapping rectangles are detected."""
    # a: (0, 0) to (2, 2)
    a = (0, 0, 2, 2)
    # b: (1, 1) to (3, 3) - overlaps with a
    b = (1, 1, 3, 3)

    assert rects_overlap(a, b) is True


def test_rects_overlap_not_overlapping() -> None:
    """Test that separate rectangles are not reported as overlapping."""
    a = (0, 0, 1, 1)
    b = (2, 2, 3, 3)

    assert rects_overlap(a, b) is False


def test_touching_edges_do_not_overlap() -> None:
    a = (0, 0, 5, 5)
    right = (5, 0, 10, 5)
    above = (0, 5, 5, 10)

    assert rects_overlap(a, right) is False
    assert rects_overlap(a, above) is False


def test_overlap_area() -> None:
    assert overlap_area((0, 0, 4, 4), (2, 2, 6, 6)) == 4
    assert overlap_area((0, 0, 4, 4), (4, 0, 8, 4)) == 0
    assert overlap_area((0, 0, 10, 10), (2, 3, 4, 5)) == 4


def test_candidate_points_sorted_bottom_left() -> None:
    placements = [
        Placement(id=0, width=5, height=3, x=0, y=0),
        Placement(id=1, width=2, height=4, x=5, y=0),
    ]

    points = candidate_points(placements)

    assert points[0] == (0, 0)
    assert points == sorted(points, key=lambda t: (t[1], t[0]))
    assert set(points) == {(0, 0), (5, 0), (0, 3), (7, 0), (5, 4)}


def test_try_place_empty_bin_uses_origin_unrotated() -> None:
    target = Bin(id=0, side=10)
    placement = try_place(Rectangle(id=3, width=4, height=7), target)

    assert placement is not None
    assert (placement.x, placement.y) == (0, 0)
    assert (placement.width, placement.height) == (4, 7)
    assert placement.rotated is False


def test_try_place_prefers_lowest_then_leftmost() -> None:
    target = Bin(id=0, side=10, placements=[Placement(id=0, width=5, height=5, x=0, y=0)])
    placement = try_place(Rectangle(id=1, width=5, height=5), target)

    assert placement is not None
    assert (placement.x, placement.y) == (5, 0)


def test_try_place_rotates_when_unrotated_does_not_fit() -> None:
    target = Bin(id=0, side=10, placements=[Placement(id=0, width=10, height=6, x=0, y=0)])
    placement = try_place(Rectangle(id=1, width=4, height=8), target)

    assert placement is not None
    assert placement.rotated is True
    assert (placement.width, placement.height) == (8, 4)
    assert (placement.x, placement.y) == (0, 6)


def test_try_place_full_bin_returns_none() -> None:
    target = Bin(id=0, side=10, placements=[Placement(id=0, width=10, height=10, x=0, y=0)])

    assert try_place(Rectangle(id=1, width=1, height=1), target) is None


def test_can_place_at_respects_bounds_and_exclusion() -> None:
    placements = [Placement(id=0, width=4, height=4, x=0, y=0)]

    assert can_place_at(placements, 10, 4, 4, 6, 6) is True
    assert can_place_at(placements, 10, 4, 4, 7, 0) is False
    assert can_place_at(placements, 10, 4, 4, 2, 2) is False
    assert can_place_at(placements, 10, 4, 4, 2, 2, exclude_id=0) is True


def test_is_placeable() -> None:
    assert is_placeable(Rectangle(id=0, width=150, height=60), 100) is False
    assert is_placeable(Rectangle(id=0, width=60, height=100), 100) is True


def test_rotation_round_trip() -> None:
    rect = Rectangle(id=7, width=3, height=9)
    once = rect.rotate()
    twice = once.rotate()

    assert (once.width, once.height, once.rotated) == (9, 3, True)
    assert once.id == rect.id and once.area == rect.area
    assert twice == rect


def test_rectangle_rejects_non_positive_dimensions() -> None:
    with pytest.raises(ValidationError):
        Rectangle(id=0, width=0, height=5)
    with pytest.raises(ValidationError):
        Rectangle(id=0, width=5, height=-1)
