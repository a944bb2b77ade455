"""Data schemas for packing requests."""

from typing import List, Optional

from pydantic import BaseModel, Field

from rect_packer.config import ITERATION_PRESETS
from rect_packer.models import Rectangle
from rect_packer.packing.heuristics import SelectionCriterion
from rect_packer.search.initial import InitialSolutionKind
from rect_packer.search.neighborhoods import NeighborhoodKind


class RectangleSchema(BaseModel):
    """Schema for a rectangle type, repeated quantity times."""
    width: int = Field(gt=0, description="Width of the rectangle")
    height: int = Field(gt=0, description="Height of the rectangle")
    quantity: int = Field(default=1, ge=1, description="Number of identical rectangles")


class PackingRequest(BaseModel):
    """Schema for a packing request."""
    rectangles: List[RectangleSchema] = Field(min_length=1, description="Rectangles to pack")
    bin_side: int = Field(gt=0, description="Side length of the square bins")
    criterion: SelectionCriterion = Field(default=SelectionCriterion.AREA, description="Greedy ordering")
    neighborhood: Optional[NeighborhoodKind] = Field(
        default=None,
        description="Local search neighborhood; greedy only when omitted")
    initial: InitialSolutionKind = Field(
        default=InitialSolutionKind.GREEDY,
        description="Starting solution for local search")
    max_iterations: int = Field(default=ITERATION_PRESETS["standard"], gt=0, description="Local search budget")
    seed: Optional[int] = Field(default=None, description="Seed for reproducible local search")
    early_stop_fraction: float = Field(default=0.2, gt=0, le=1)

    def expand(self) -> List[Rectangle]:
        """One Rectangle per unit, with ids numbered from 0 in request order."""
        rectangles: List[Rectangle] = []
        for item in self.rectangles:
            for _ in range(item.quantity):
                rectangles.append(Rectangle(id=len(rectangles), width=item.width, height=item.height))
        return rectangles
