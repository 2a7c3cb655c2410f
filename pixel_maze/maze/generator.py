"""Generate maze images in the layout the solver reads.

Cells are ``cell_size`` pixels square with one-pixel black wall lines on
their top and left edges, so the canvas is one pixel wider and taller than the
grid. The start and end markers fill everything inside those lines.
"""

from __future__ import annotations

import argparse
import logging
import random
from collections import deque
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from PIL import Image, ImageDraw
from tqdm import tqdm

from pixel_maze.base import RGB, AbstractMazeGenerator, PathLike
from pixel_maze.maze.maze_base import END_COLOR, PATH_COLOR, START_COLOR, Cell, DIRECTIONS, draw_path_line

logger = logging.getLogger(__name__)

WALL_COLOR: RGB = (0, 0, 0)
FLOOR_COLOR: RGB = (255, 255, 255)


@dataclass
class MazePuzzleRecord:
    """Serializable metadata for a generated maze image pair."""

    id: str
    canvas_dimensions: Tuple[int, int]
    grid_size: Tuple[int, int]
    cell_size: int
    start_cell: Cell
    goal_cell: Cell
    image: str
    solution_image_path: str
    solution_path: List[Cell] = field(default_factory=list)
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "id": self.id,
            "canvas_dimensions": [int(self.canvas_dimensions[0]), int(self.canvas_dimensions[1])],
            "grid_size": [int(self.grid_size[0]), int(self.grid_size[1])],
            "cell_size": int(self.cell_size),
            "start_cell": list(self.start_cell),
            "goal_cell": list(self.goal_cell),
            "image": self.image,
            "solution_image_path": self.solution_image_path,
            "solution_path": [list(cell) for cell in self.solution_path],
        }
        for key, value in self.extra.items():
            if key not in payload:
                payload[key] = value
        return payload


@dataclass
class MazeLayout:
    """Open passages of a grid maze, indexed ``[row][column]``."""

    columns: int
    rows: int
    open_east: List[List[bool]]
    open_south: List[List[bool]]

    @classmethod
    def closed(cls, columns: int, rows: int) -> "MazeLayout":
        return cls(
            columns=columns,
            rows=rows,
            open_east=[[False] * columns for _ in range(rows)],
            open_south=[[False] * columns for _ in range(rows)],
        )

    @classmethod
    def empty(cls, columns: int, rows: int) -> "MazeLayout":
        """A layout with every interior wall removed."""
        return cls(
            columns=columns,
            rows=rows,
            open_east=[[column < columns - 1 for column in range(columns)] for _ in range(rows)],
            open_south=[[row < rows - 1] * columns for row in range(rows)],
        )

    def contains(self, cell: Cell) -> bool:
        column, row = cell
        return 0 <= column < self.columns and 0 <= row < self.rows

    def set_open(self, a: Cell, b: Cell, is_open: bool = True) -> None:
        (ac, ar), (bc, br) = sorted((a, b), key=lambda cell: (cell[1], cell[0]))
        if ar == br and bc == ac + 1:
            self.open_east[ar][ac] = is_open
        elif ac == bc and br == ar + 1:
            self.open_south[ar][ac] = is_open
        else:
            raise ValueError(f"Cells {a} and {b} are not four-adjacent")

    def is_open(self, a: Cell, b: Cell) -> bool:
        (ac, ar), (bc, br) = sorted((a, b), key=lambda cell: (cell[1], cell[0]))
        if ar == br and bc == ac + 1:
            return self.open_east[ar][ac]
        if ac == bc and br == ar + 1:
            return self.open_south[ar][ac]
        return False


class MazeGenerator(AbstractMazeGenerator[MazePuzzleRecord]):
    """Generate perfect mazes with a start marker and an end marker."""

    DEFAULT_OUTPUT_DIR: PathLike = "data/maze"
    DEFAULT_ROWS = 15
    DEFAULT_COLS = 15
    DEFAULT_CELL_SIZE = 16

    def __init__(
        self,
        output_dir: Optional[PathLike] = None,
        *,
        rows: int = DEFAULT_ROWS,
        cols: int = DEFAULT_COLS,
        cell_size: int = DEFAULT_CELL_SIZE,
        seed: Optional[int] = None,
        start_color: RGB = START_COLOR,
        end_color: RGB = END_COLOR,
        path_color: RGB = PATH_COLOR,
    ) -> None:
        if rows < 2 or cols < 2:
            raise ValueError("rows and cols must be at least 2")
        if cell_size < 4:
            raise ValueError("cell_size must be at least 4")
        super().__init__(output_dir if output_dir is not None else self.DEFAULT_OUTPUT_DIR)
        self.rows = int(rows)
        self.cols = int(cols)
        self.cell_size = int(cell_size)
        self.start_color = start_color
        self.end_color = end_color
        self.path_color = path_color
        self._rng = random.Random(seed)

        self.puzzle_dir = self.output_dir / "puzzles"
        self.solution_dir = self.output_dir / "solutions"
        self.puzzle_dir.mkdir(parents=True, exist_ok=True)
        self.solution_dir.mkdir(parents=True, exist_ok=True)

    @property
    def canvas_dimensions(self) -> Tuple[int, int]:
        return self.cols * self.cell_size + 1, self.rows * self.cell_size + 1

    def next_id(self) -> str:
        return "%032x" % self._rng.getrandbits(128)

    def create_puzzle(self, *, puzzle_id: Optional[str] = None) -> MazePuzzleRecord:
        puzzle_id = puzzle_id or self.next_id()
        layout = self.generate_layout()
        start = (0, 0)
        goal = (self.cols - 1, self.rows - 1)
        path = self.bfs_path(layout, start, goal)
        if not path:
            raise RuntimeError("Failed to generate maze path")

        puzzle_image = self.render(layout, start=start, goal=goal)
        solution_image = self.render(layout, start=start, goal=goal, path=path)

        puzzle_path = self.puzzle_dir / f"{puzzle_id}_puzzle.png"
        solution_path = self.solution_dir / f"{puzzle_id}_solution.png"
        puzzle_image.save(puzzle_path)
        solution_image.save(solution_path)
        logger.debug("Wrote maze %s (%dx%d cells)", puzzle_id, self.cols, self.rows)

        return MazePuzzleRecord(
            id=puzzle_id,
            canvas_dimensions=self.canvas_dimensions,
            grid_size=(self.cols, self.rows),
            cell_size=self.cell_size,
            start_cell=start,
            goal_cell=goal,
            image=self.relativize_path(puzzle_path),
            solution_image_path=self.relativize_path(solution_path),
            solution_path=path,
        )

    # ------------------------------------------------------------------

    def generate_layout(self) -> MazeLayout:
        """Carve a perfect maze with an iterative randomized backtracker."""
        layout = MazeLayout.closed(self.cols, self.rows)
        seen = [[False] * self.cols for _ in range(self.rows)]
        stack: List[Cell] = [(0, 0)]
        seen[0][0] = True
        while stack:
            column, row = stack[-1]
            candidates = [
                (column + dx, row + dy)
                for dx, dy in DIRECTIONS
                if layout.contains((column + dx, row + dy)) and not seen[row + dy][column + dx]
            ]
            if not candidates:
                stack.pop()
                continue
            nxt = self._rng.choice(candidates)
            layout.set_open((column, row), nxt)
            seen[nxt[1]][nxt[0]] = True
            stack.append(nxt)
        return layout

    @staticmethod
    def bfs_path(layout: MazeLayout, start: Cell, goal: Cell) -> List[Cell]:
        queue: deque[Cell] = deque([start])
        parents: Dict[Cell, Optional[Cell]] = {start: None}
        while queue:
            cell = queue.popleft()
            if cell == goal:
                break
            for dx, dy in DIRECTIONS:
                nxt = (cell[0] + dx, cell[1] + dy)
                if layout.contains(nxt) and nxt not in parents and layout.is_open(cell, nxt):
                    parents[nxt] = cell
                    queue.append(nxt)

        if goal not in parents:
            return []
        node: Optional[Cell] = goal
        result: List[Cell] = []
        while node is not None:
            result.append(node)
            node = parents[node]
        result.reverse()
        return result

    def cell_center(self, cell: Cell) -> Tuple[int, int]:
        column, row = cell
        half = self.cell_size // 2
        return column * self.cell_size + half, row * self.cell_size + half

    def render(
        self,
        layout: MazeLayout,
        *,
        start: Cell,
        goal: Cell,
        path: Optional[List[Cell]] = None,
        path_width: int = 4,
    ) -> Image.Image:
        size = self.cell_size
        width, height = self.canvas_dimensions
        canvas = Image.new("RGB", (width, height), FLOOR_COLOR)
        draw = ImageDraw.Draw(canvas)

        self._draw_marker(draw, start, self.start_color)
        self._draw_marker(draw, goal, self.end_color)

        draw.line((0, 0, width - 1, 0), fill=WALL_COLOR, width=1)
        draw.line((0, 0, 0, height - 1), fill=WALL_COLOR, width=1)
        for row in range(layout.rows):
            for column in range(layout.columns):
                left = column * size
                top = row * size
                if not layout.open_east[row][column]:
                    draw.line((left + size, top, left + size, top + size), fill=WALL_COLOR, width=1)
                if not layout.open_south[row][column]:
                    draw.line((left, top + size, left + size, top + size), fill=WALL_COLOR, width=1)

        if path:
            draw_path_line(canvas, [self.cell_center(cell) for cell in path], self.path_color, path_width)
        return canvas

    def _draw_marker(self, draw: ImageDraw.ImageDraw, cell: Cell, color: RGB) -> None:
        column, row = cell
        left = column * self.cell_size
        top = row * self.cell_size
        draw.rectangle((left + 1, top + 1, left + self.cell_size - 1, top + self.cell_size - 1), fill=color)

    @classmethod
    def _parse_args(cls, argv: Optional[List[str]] = None) -> argparse.Namespace:
        parser = argparse.ArgumentParser(description="Generate maze images for the pixel maze solver")
        parser.add_argument("count", type=int, help="Number of mazes to generate")
        parser.add_argument("--output-dir", type=Path, default=None, help="Where to save assets")
        parser.add_argument("--rows", type=int, default=cls.DEFAULT_ROWS)
        parser.add_argument("--cols", type=int, default=cls.DEFAULT_COLS)
        parser.add_argument("--cell-size", type=int, default=cls.DEFAULT_CELL_SIZE, help="Cell size in pixels")
        parser.add_argument("--seed", type=int, default=None)
        return parser.parse_args(argv)

    @classmethod
    def main(cls, argv: Optional[List[str]] = None) -> None:
        args = cls._parse_args(argv)
        logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
        generator = cls(
            output_dir=args.output_dir,
            rows=args.rows,
            cols=args.cols,
            cell_size=args.cell_size,
            seed=args.seed,
        )
        records = [generator.create_random_puzzle() for _ in tqdm(range(max(1, args.count)), desc="mazes")]
        metadata_path = generator.output_dir / "data.json"
        generator.write_metadata(records, metadata_path)
        logger.info("Wrote %d mazes to %s", len(records), metadata_path)


__all__ = ["MazeGenerator", "MazeLayout", "MazePuzzleRecord"]


def main(argv: Optional[List[str]] = None) -> None:
    MazeGenerator.main(argv)


if __name__ == "__main__":
    MazeGenerator.main()
