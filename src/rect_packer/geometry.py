"""Geometry utilities: overlap tests and the bottom-left placement rule."""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, Optional

from rect_packer.models import Placement, Rectangle

if TYPE_CHECKING:
    from rect_packer.solution import Bin

Bounds = tuple[int, int, int, int]


def rects_overlap(a: Bounds, b: Bounds) -> bool:
    """
    Axis-aligned rectangle overlap test.

    a, b are bounds: (x1, y1, x2, y2)

    Overlap exists only if they overlap on BOTH axes with positive area.
    Touching edges (ax2 == bx1) is NOT considered overlap.
    """
    ax1, ay1, ax2, ay2 = a
    bx1, by1, bx2, by2 = b

    return (ax1 < bx2 and ax2 > bx1) and (ay1 < by2 and ay2 > by1)


def overlap_area(a: Bounds, b: Bounds) -> int:
    """Area of the axis-aligned intersection of two bounds, 0 if disjoint."""
    x1 = max(a[0], b[0])
    y1 = max(a[1], b[1])
    x2 = min(a[2], b[2])
    y2 = min(a[3], b[3])
    if x2 <= x1 or y2 <= y1:
        return 0
    return (x2 - x1) * (y2 - y1)


def fits_in_bin(x: int, y: int, width: int, height: int, side: int) -> bool:
    return x >= 0 and y >= 0 and x + width <= side and y + height <= side


def is_placeable(rect: Rectangle, side: int) -> bool:
    """A rectangle whose longer side exceeds the bin side fits in no orientation."""
    return max(rect.width, rect.height) <= side


def can_place_at(
    placements: Iterable[Placement],
    side: int,
    width: int,
    height: int,
    x: int,
    y: int,
    exclude_id: Optional[int] = None,
) -> bool:
    """
    Check if a width x height rectangle can sit at (x, y):
    - inside the bin bounds
    - no overlap with existing placements (the one with exclude_id is ignored)
    """
    if not fits_in_bin(x, y, width, height, side):
        return False

    new_bounds = (x, y, x + width, y + height)
    for p in placements:
        if exclude_id is not None and p.id == exclude_id:
            continue
        if rects_overlap(new_bounds, p.bounds):
            return False
    return True


def candidate_points(placements: Iterable[Placement]) -> list[tuple[int, int]]:
    """
    Bottom-left candidates:
      start with origin,
      add (x+w, y) and (x, y+h) for each placed rectangle.
    Sorted by (y, x) so the lowest, then left-most, point comes first.
    """
    points: set[tuple[int, int]] = {(0, 0)}
    for p in placements:
        points.add((p.x + p.width, p.y))
        points.add((p.x, p.y + p.height))

    return sorted(points, key=lambda t: (t[1], t[0]))


def orientations(rect: Rectangle) -> list[Rectangle]:
    """Unrotated first, then rotated. Squares have a single orientation."""
    if rect.width == rect.height:
        return [rect]
    return [rect, rect.rotate()]


def try_place(rect: Rectangle, target: "Bin") -> Optional[Placement]:
    """
    Find the first feasible position for rect in the target bin.

    Orientations are tried unrotated first; within one orientation the
    candidate points are walked in (y, x) order. Returns None if the
    rectangle does not fit anywhere.
    """
    points = candidate_points(target.placements)

    for oriented in orientations(rect):
        for (x, y) in points:
            if can_place_at(target.placements, target.side, oriented.width, oriented.height, x, y):
                return Placement(
                    id=oriented.id,
                    width=oriented.width,
                    height=oriented.height,
                    rotated=oriented.rotated,
                    x=x,
                    y=y,
                )
    return None
