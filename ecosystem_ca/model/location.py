"""Grid coordinate value type for the ecosystem simulation."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Location:
    """A cell in the field. Coordinates are (row, col), row-major."""
    row: int
    col: int

    def __repr__(self) -> str:
        return f"Location({self.row}, {self.col})"
