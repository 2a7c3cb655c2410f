"""Shared types for locating and drawing a path through a maze image.

A maze image is read as a grid of equally sized square cells. Dark pixels are
walls, one flat color marks the start cell and another marks the end cell.
The start marker fills its cell except for a one-pixel border, which is what
lets the calibrator infer the cell size from the marker alone.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np
from PIL import Image, ImageDraw

from pixel_maze.base import RGB

Cell = Tuple[int, int]
Edge = Tuple[Cell, Cell]

# North, South, East, West as (dx, dy) in (column, row) space.
DIRECTIONS: Tuple[Cell, ...] = ((0, -1), (0, 1), (1, 0), (-1, 0))

START_COLOR: RGB = (255, 0, 0)
END_COLOR: RGB = (0, 0, 255)
PATH_COLOR: RGB = (50, 205, 50)
PATH_WIDTH = 4
WALL_THRESHOLD = 128

NO_START_MESSAGE = "No starting point in the maze was found!"
NO_SOLUTION_MESSAGE = "No solution to the maze was found!"
SOLVED_MESSAGE = "Maze solved."


class PixelClassification(IntEnum):
    UNKNOWN = 0
    WALL = 1
    START = 2
    END = 3
    FLOOR = 4


class SolveStatus(str, Enum):
    SOLVED = "solved"
    NO_START = "no_start"
    NO_SOLUTION = "no_solution"


def _check_color(name: str, value: Sequence[int]) -> RGB:
    if len(value) != 3:
        raise ValueError(f"{name} must have exactly three channels")
    channels = tuple(int(channel) for channel in value)
    if any(channel < 0 or channel > 255 for channel in channels):
        raise ValueError(f"{name} channels must be within 0-255")
    return channels  # type: ignore[return-value]


@dataclass
class SolverConfig:
    """Colors and thresholds consumed by the classifier and renderer."""

    start_color: RGB = START_COLOR
    end_color: RGB = END_COLOR
    path_color: RGB = PATH_COLOR
    path_width: int = PATH_WIDTH
    wall_threshold: int = WALL_THRESHOLD

    def __post_init__(self) -> None:
        self.start_color = _check_color("start_color", self.start_color)
        self.end_color = _check_color("end_color", self.end_color)
        self.path_color = _check_color("path_color", self.path_color)
        if self.start_color == self.end_color:
            raise ValueError("start_color and end_color must differ")
        if self.path_width <= 0:
            raise ValueError("path_width must be positive")
        if not 1 <= self.wall_threshold <= 256:
            raise ValueError("wall_threshold must be within 1-256")


@dataclass(frozen=True)
class GridGeometry:
    """Mapping between pixel coordinates and cell coordinates."""

    cell_size: int
    width: int
    height: int

    def __post_init__(self) -> None:
        if self.cell_size <= 0:
            raise ValueError("cell_size must be positive")

    @property
    def num_columns(self) -> int:
        return self.width // self.cell_size

    @property
    def num_rows(self) -> int:
        return self.height // self.cell_size

    def pixel_to_cell(self, pixel: int) -> int:
        return pixel // self.cell_size

    def cell_to_pixel(self, index: int) -> int:
        return index * self.cell_size + self.cell_size // 2

    def contains(self, cell: Cell) -> bool:
        column, row = cell
        return 0 <= column < self.num_columns and 0 <= row < self.num_rows


@dataclass
class MazeSolveResult:
    status: SolveStatus
    message: str
    start_cell: Optional[Cell] = None
    cell_size: Optional[int] = None
    grid_size: Optional[Tuple[int, int]] = None
    path: List[Cell] = field(default_factory=list)
    elapsed_ms: float = 0.0
    visited: Optional[np.ndarray] = field(default=None, repr=False, compare=False)

    @property
    def solved(self) -> bool:
        return self.status is SolveStatus.SOLVED

    @property
    def edges(self) -> List[Edge]:
        return list(zip(self.path, self.path[1:]))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "solved": self.solved,
            "message": self.message,
            "start_cell": list(self.start_cell) if self.start_cell is not None else None,
            "cell_size": self.cell_size,
            "grid_size": list(self.grid_size) if self.grid_size is not None else None,
            "path": [list(cell) for cell in self.path],
            "elapsed_ms": round(self.elapsed_ms, 3),
        }


def format_visited_grid(visited: np.ndarray) -> str:
    """Render a (rows, columns) visited grid as text, '#' for marked cells."""
    return "\n".join("".join(" #" if marked else " -" for marked in row) for row in visited)


def draw_path_line(
    image: Image.Image,
    points: List[Tuple[float, float]],
    color: RGB,
    thickness: int,
) -> None:
    """Draws a path (solution line) on the given image."""
    draw = ImageDraw.Draw(image)
    if len(points) >= 2:
        draw.line(points, fill=color, width=thickness, joint="curve")
    elif len(points) == 1:
        x, y = points[0]
        r = thickness / 2
        draw.ellipse((x - r, y - r, x + r, y + r), fill=color)


__all__ = [
    "Cell",
    "DIRECTIONS",
    "Edge",
    "END_COLOR",
    "GridGeometry",
    "MazeSolveResult",
    "NO_SOLUTION_MESSAGE",
    "NO_START_MESSAGE",
    "PATH_COLOR",
    "PATH_WIDTH",
    "PixelClassification",
    "SOLVED_MESSAGE",
    "START_COLOR",
    "SolveStatus",
    "SolverConfig",
    "WALL_THRESHOLD",
    "draw_path_line",
    "format_visited_grid",
]
