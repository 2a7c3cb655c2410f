"""Infer the maze cell size and the start cell from the start marker."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from pixel_maze.maze.classifier import PixelClassifier
from pixel_maze.maze.maze_base import Cell, GridGeometry

logger = logging.getLogger(__name__)

# Coarse to fine sampling steps used while looking for the start marker.
PROBE_INCREMENTS: Tuple[int, ...] = (64, 32, 16, 8, 4, 2, 1)


@dataclass(frozen=True)
class Calibration:
    cell_size: int
    origin_cell: Cell
    geometry: GridGeometry


class GridCalibrator:
    """Locate the start marker and derive the grid it sits on.

    The start marker is assumed to fill its cell except for a one-pixel
    border, so the cell size is the marker height plus that border.
    """

    def __init__(
        self,
        classifier: PixelClassifier,
        increments: Sequence[int] = PROBE_INCREMENTS,
    ) -> None:
        if not increments or any(step <= 0 for step in increments):
            raise ValueError("increments must be a non-empty sequence of positive steps")
        self.classifier = classifier
        self.increments = tuple(increments)

    def find_start_pixel(self, increment: int) -> Optional[Tuple[int, int]]:
        """Return the first start-colored pixel on a grid spaced ``increment`` apart."""

        for x in range(increment // 2, self.classifier.width, increment):
            for y in range(increment // 2, self.classifier.height, increment):
                if self.classifier.is_start(x, y):
                    return x, y
        return None

    def measure_marker(self, x: int, y: int) -> Tuple[int, int, int]:
        """Expand from a start pixel to the marker's left, top and bottom edges."""

        classifier = self.classifier
        x_start = x
        y_start = y
        y_end = y
        while x_start > 0 and classifier.is_start(x_start - 1, y):
            x_start -= 1
        while y_start > 0 and classifier.is_start(x, y_start - 1):
            y_start -= 1
        while y_end < classifier.height - 1 and classifier.is_start(x, y_end + 1):
            y_end += 1
        return x_start, y_start, y_end

    def calibrate(self) -> Optional[Calibration]:
        for increment in self.increments:
            hit = self.find_start_pixel(increment)
            if hit is None:
                continue
            x_start, y_start, y_end = self.measure_marker(*hit)
            cell_size = y_end - y_start + 2
            geometry = GridGeometry(
                cell_size=cell_size,
                width=self.classifier.width,
                height=self.classifier.height,
            )
            origin = (
                geometry.pixel_to_cell(x_start + cell_size // 2),
                geometry.pixel_to_cell(y_start + cell_size // 2),
            )
            logger.debug(
                "StartCell = [%d,%d], CellSize = %d (probe increment %d)",
                origin[0],
                origin[1],
                cell_size,
                increment,
            )
            return Calibration(cell_size=cell_size, origin_cell=origin, geometry=geometry)
        logger.warning("No start-colored pixel found at any probe increment")
        return None


__all__ = ["Calibration", "GridCalibrator", "PROBE_INCREMENTS"]
