"""Draw a solved path onto the maze image."""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from pixel_maze.base import PixelBuffer
from pixel_maze.maze.maze_base import Cell, Edge, GridGeometry, SolverConfig

logger = logging.getLogger(__name__)


class PathRenderer:
    """Stroke each path edge between the two cell centers it connects."""

    def __init__(self, geometry: GridGeometry, config: Optional[SolverConfig] = None) -> None:
        self.geometry = geometry
        self.config = config if config is not None else SolverConfig()

    def edge_points(self, edge: Edge) -> Sequence[int]:
        (from_column, from_row), (to_column, to_row) = edge
        to_pixel = self.geometry.cell_to_pixel
        return (to_pixel(from_column), to_pixel(from_row), to_pixel(to_column), to_pixel(to_row))

    def render(self, buffer: PixelBuffer, edges: Sequence[Edge]) -> int:
        """Draw ``edges`` from the end of the path back to the start.

        Returns the number of segments drawn.
        """
        if not edges:
            return 0
        draw = buffer.draw()
        for edge in reversed(edges):
            draw.line(self.edge_points(edge), fill=self.config.path_color, width=self.config.path_width)
            (fc, fr), (tc, tr) = edge
            logger.debug("[%d,%d] -> [%d,%d]", fc, fr, tc, tr)
        return len(edges)

    def render_path(self, buffer: PixelBuffer, path: Sequence[Cell]) -> int:
        return self.render(buffer, list(zip(path, path[1:])))


__all__ = ["PathRenderer"]
