from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Rectangle(BaseModel):
    """Rectangle definition with identifier and integer dimensions."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(ge=0, description="Identifier, unique within one packing run")
    width: int = Field(gt=0, description="Width of the rectangle")
    height: int = Field(gt=0, description="Height of the rectangle")
    rotated: bool = Field(default=False, description="True if width/height are swapped")

    @property
    def area(self) -> int:
        return self.width * self.height

    def rotate(self) -> "Rectangle":
        """Return the same rectangle turned by 90 degrees."""
        return self.model_copy(
            update={"width": self.height, "height": self.width, "rotated": not self.rotated}
        )


class Placement(BaseModel):
    """Placement model representing rectangle position and oriented dimensions."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(description="Identifier of the placed rectangle")
    width: int = Field(gt=0, description="Placed width (after rotation)")
    height: int = Field(gt=0, description="Placed height (after rotation)")
    rotated: bool = Field(default=False, description="Whether the rectangle was turned")
    x: int = Field(ge=0, description="X coordinate of the lower-left corner")
    y: int = Field(ge=0, description="Y coordinate of the lower-left corner")

    @property
    def area(self) -> int:
        return self.width * self.height

    @property
    def bounds(self) -> tuple[int, int, int, int]:
        return (self.x, self.y, self.x + self.width, self.y + self.height)

    def moved_to(self, x: int, y: int) -> "Placement":
        return self.model_copy(update={"x": x, "y": y})


class BinResult(BaseModel):
    """One bin of a finished packing."""

    id: int
    rectangles: list[Placement] = Field(default_factory=list)
    utilization: float = Field(default=0.0, ge=0, description="Covered area in percent")


class PackingResult(BaseModel):
    """Standard result returned by the greedy and local search packers."""

    bins: list[BinResult] = Field(default_factory=list)
    total_boxes: int = 0
    utilization: float = 0.0
    algorithm: str = ""
    execution_time_ms: float = 0.0
    requested: int = 0
    placed: int = 0
    unplaced: int = 0
    overlap_penalty: float = 0.0
    iterations: int = 0

    @property
    def success(self) -> bool:
        return (
            self.unplaced == 0
            and self.placed == self.requested
            and self.overlap_penalty == 0
        )


class ComparisonResult(BaseModel):
    """Greedy and local search results computed on the same input."""

    greedy: PackingResult
    local_search: PackingResult

    @property
    def bins_saved(self) -> int:
        return self.greedy.total_boxes - self.local_search.total_boxes
