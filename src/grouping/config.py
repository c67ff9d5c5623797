from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class RowAssignment(str, Enum):
    # first existing row within tolerance wins (creation order)
    FIRST_FIT = "first_fit"
    # closest row anchor within tolerance wins; ties go to the older row
    NEAREST = "nearest"


@dataclass(frozen=True, slots=True)
class RowGroupingConfig:
    """
    Stage 2 row clustering parameters.

    `row_y_tolerance` is in recognizer pixels of the quadrant image; an element
    joins a row only when |row.y - element.y| < tolerance.
    """

    row_y_tolerance: float = 25.0
    assignment: RowAssignment = RowAssignment.FIRST_FIT

    def validate(self) -> None:
        if self.row_y_tolerance <= 0:
            raise ValueError("row_y_tolerance must be > 0")
        if not isinstance(self.assignment, RowAssignment):
            raise TypeError("assignment must be a RowAssignment")
