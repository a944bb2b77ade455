"""Selection criteria for greedy packing."""

from __future__ import annotations

from enum import Enum
from typing import Iterable

from rect_packer.models import Rectangle


class SelectionCriterion(str, Enum):
    AREA = "area"
    HEIGHT = "height"

    @property
    def label(self) -> str:
        return "Area Descending" if self is SelectionCriterion.AREA else "Height Descending"

    def value_of(self, rect: Rectangle) -> int:
        """
        Greedy value of a rectangle under this criterion.

        HEIGHT uses the longer side so the value does not depend on how the
        rectangle happens to be oriented.
        """
        if self is SelectionCriterion.AREA:
            return rect.area
        return max(rect.width, rect.height)


def order_rectangles(rectangles: Iterable[Rectangle], criterion: SelectionCriterion) -> list[Rectangle]:
    """
    Sort rectangles by descending criterion value.

    Python's sort is stable, so ties keep their input order.
    """
    return sorted(rectangles, key=criterion.value_of, reverse=True)
