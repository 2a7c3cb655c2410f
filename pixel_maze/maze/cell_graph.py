"""Cell adjacency over a calibrated maze image."""

from __future__ import annotations

from typing import Iterator, Tuple

from pixel_maze.maze.classifier import PixelClassifier
from pixel_maze.maze.maze_base import DIRECTIONS, Cell, GridGeometry


class CellGraph:
    """Four-connected grid whose edges are blocked by wall pixels.

    Two neighbouring cells are connected unless a wall pixel lies on the
    straight run between their center pixels.
    """

    def __init__(self, classifier: PixelClassifier, geometry: GridGeometry) -> None:
        self.classifier = classifier
        self.geometry = geometry

    @property
    def num_columns(self) -> int:
        return self.geometry.num_columns

    @property
    def num_rows(self) -> int:
        return self.geometry.num_rows

    def in_bounds(self, cell: Cell) -> bool:
        return self.geometry.contains(cell)

    def cell_center_pixel(self, cell: Cell) -> Tuple[int, int]:
        column, row = cell
        return self.geometry.cell_to_pixel(column), self.geometry.cell_to_pixel(row)

    def is_end(self, cell: Cell) -> bool:
        return self.classifier.is_end(*self.cell_center_pixel(cell))

    def neighbors(self, cell: Cell) -> Iterator[Cell]:
        """Yield the north, south, east and west neighbours, in that order."""
        column, row = cell
        for dx, dy in DIRECTIONS:
            yield column + dx, row + dy

    def has_wall_between(self, cell_a: Cell, cell_b: Cell) -> bool:
        (ax, ay), (bx, by) = cell_a, cell_b
        if abs(ax - bx) + abs(ay - by) != 1:
            raise ValueError(f"Cells {cell_a} and {cell_b} are not four-adjacent")
        if ay == by:
            return self._wall_on_row(min(ax, bx), max(ax, bx), ay)
        return self._wall_on_column(min(ay, by), max(ay, by), ax)

    def _wall_on_row(self, from_column: int, to_column: int, row: int) -> bool:
        geometry = self.geometry
        pixel_y = geometry.cell_to_pixel(row)
        for pixel_x in range(geometry.cell_to_pixel(from_column), geometry.cell_to_pixel(to_column) + 1):
            if self.classifier.is_wall(pixel_x, pixel_y):
                return True
        return False

    def _wall_on_column(self, from_row: int, to_row: int, column: int) -> bool:
        geometry = self.geometry
        pixel_x = geometry.cell_to_pixel(column)
        for pixel_y in range(geometry.cell_to_pixel(from_row), geometry.cell_to_pixel(to_row) + 1):
            if self.classifier.is_wall(pixel_x, pixel_y):
                return True
        return False


__all__ = ["CellGraph"]
