"""Depth-first maze search over a calibrated cell graph, plus the solve CLI."""

from __future__ import annotations

import argparse
import json
import logging
import sys
import time
from pathlib import Path
from typing import Iterable, List, Optional

import numpy as np

from pixel_maze.base import RGB, PixelBuffer
from pixel_maze.maze.calibration import GridCalibrator
from pixel_maze.maze.cell_graph import CellGraph
from pixel_maze.maze.classifier import PixelClassifier
from pixel_maze.maze.maze_base import (
    DIRECTIONS,
    NO_SOLUTION_MESSAGE,
    NO_START_MESSAGE,
    PATH_COLOR,
    PATH_WIDTH,
    SOLVED_MESSAGE,
    START_COLOR,
    END_COLOR,
    WALL_THRESHOLD,
    Cell,
    Edge,
    MazeSolveResult,
    SolverConfig,
    SolveStatus,
    format_visited_grid,
)
from pixel_maze.maze.renderer import PathRenderer

logger = logging.getLogger(__name__)

# The visited-grid dump gets unreadable on wide mazes.
MAX_GRID_DUMP_COLUMNS = 50


class MazeSolver:
    """Single-use depth-first search from the start cell to the end cell.

    The search walks the graph one cell at a time, trying north, south, east
    and west in that order. A cell is marked visited while it sits on the
    current branch and unmarked again when the branch dead-ends, so after a
    successful search exactly the cells of :attr:`path` remain marked.

    Frames live on an explicit stack rather than the Python call stack, which
    keeps long corridors well clear of the interpreter's recursion limit.
    """

    def __init__(self, graph: CellGraph) -> None:
        self.graph = graph
        self.visited = np.zeros((graph.num_rows, graph.num_columns), dtype=bool)
        self.path: List[Cell] = []
        self._used = False

    @property
    def edges(self) -> List[Edge]:
        return list(zip(self.path, self.path[1:]))

    def _enter(self, from_cell: Cell, to_cell: Cell) -> bool:
        if not self.graph.in_bounds(to_cell):
            return False
        column, row = to_cell
        if self.visited[row, column]:
            return False
        if from_cell != to_cell and self.graph.has_wall_between(from_cell, to_cell):
            return False
        self.visited[row, column] = True
        return True

    def solve(self, start_cell: Cell) -> bool:
        if self._used:
            raise RuntimeError("MazeSolver instances are single-use; build a new one per solve")
        self._used = True

        if not self._enter(start_cell, start_cell):
            return False
        if self.graph.is_end(start_cell):
            self.path = [start_cell]
            return True

        # Each frame is [cell, index of the next direction to try].
        stack: List[List] = [[start_cell, 0]]
        while stack:
            frame = stack[-1]
            cell, direction = frame
            if direction >= len(DIRECTIONS):
                stack.pop()
                self.visited[cell[1], cell[0]] = False
                continue
            frame[1] = direction + 1
            dx, dy = DIRECTIONS[direction]
            next_cell = (cell[0] + dx, cell[1] + dy)
            if not self._enter(cell, next_cell):
                continue
            if self.graph.is_end(next_cell):
                self.path = [entry[0] for entry in stack] + [next_cell]
                return True
            stack.append([next_cell, 0])
        return False

    def format_visited(self) -> str:
        return format_visited_grid(self.visited)


def solve_maze(
    buffer: PixelBuffer,
    config: Optional[SolverConfig] = None,
    *,
    render: bool = True,
) -> MazeSolveResult:
    """Calibrate, search and (optionally) draw the solution onto ``buffer``.

    Every call builds a fresh classifier cache and solver, so nothing carries
    over between images.
    """

    config = config if config is not None else SolverConfig()
    started = time.perf_counter()

    classifier = PixelClassifier(buffer, config)
    calibration = GridCalibrator(classifier).calibrate()
    if calibration is None:
        return MazeSolveResult(
            status=SolveStatus.NO_START,
            message=NO_START_MESSAGE,
            elapsed_ms=(time.perf_counter() - started) * 1000.0,
        )

    geometry = calibration.geometry
    graph = CellGraph(classifier, geometry)
    solver = MazeSolver(graph)
    solved = solver.solve(calibration.origin_cell)

    if solved and render:
        PathRenderer(geometry, config).render(buffer, solver.edges)

    elapsed_ms = (time.perf_counter() - started) * 1000.0
    logger.info("Solved = %s (finished in %d ms)", solved, elapsed_ms)
    return MazeSolveResult(
        status=SolveStatus.SOLVED if solved else SolveStatus.NO_SOLUTION,
        message=SOLVED_MESSAGE if solved else NO_SOLUTION_MESSAGE,
        start_cell=calibration.origin_cell,
        cell_size=calibration.cell_size,
        grid_size=(geometry.num_columns, geometry.num_rows),
        path=list(solver.path),
        elapsed_ms=elapsed_ms,
        visited=solver.visited,
    )


def parse_color(value: str) -> RGB:
    parts = [part.strip() for part in value.split(",")]
    if len(parts) != 3:
        raise argparse.ArgumentTypeError(f"expected R,G,B but got '{value}'")
    try:
        channels = tuple(int(part) for part in parts)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"color channels must be integers: '{value}'") from exc
    if any(channel < 0 or channel > 255 for channel in channels):
        raise argparse.ArgumentTypeError(f"color channels must be within 0-255: '{value}'")
    return channels  # type: ignore[return-value]


def _format_color(color: RGB) -> str:
    return ",".join(str(channel) for channel in color)


def _build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="pixel-maze-solve",
        description="Find a path through a maze image and draw it on a copy of the image.",
    )
    p.add_argument("input", type=Path, help="Maze image (JPG/PNG/BMP)")
    p.add_argument("output", type=Path, help="Where to write the solved image (.png, .bmp, .jpg)")
    p.add_argument("--start-color", type=parse_color, default=START_COLOR, help=f"Start marker color (default {_format_color(START_COLOR)})")
    p.add_argument("--end-color", type=parse_color, default=END_COLOR, help=f"End marker color (default {_format_color(END_COLOR)})")
    p.add_argument("--path-color", type=parse_color, default=PATH_COLOR, help=f"Solution line color (default {_format_color(PATH_COLOR)})")
    p.add_argument("--path-width", type=int, default=PATH_WIDTH, help="Solution line width in pixels")
    p.add_argument("--wall-threshold", type=int, default=WALL_THRESHOLD, help="Pixels with every channel below this are walls")
    p.add_argument("--show-grid", action="store_true", help="Print the visited cell grid after solving")
    p.add_argument("--json", action="store_true", help="Print the solve result as JSON")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return p


def main(argv: Optional[Iterable[str]] = None) -> int:
    parser = _build_arg_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    in_file = args.input.expanduser().resolve()
    out_file = args.output.expanduser().resolve()
    if not in_file.is_file():
        parser.error(f"input image not found: {in_file}")
    try:
        PixelBuffer.format_for(out_file)
    except ValueError as exc:
        parser.error(str(exc))
    try:
        config = SolverConfig(
            start_color=args.start_color,
            end_color=args.end_color,
            path_color=args.path_color,
            path_width=args.path_width,
            wall_threshold=args.wall_threshold,
        )
    except ValueError as exc:
        parser.error(str(exc))

    try:
        buffer = PixelBuffer.open(in_file)
    except OSError as exc:
        parser.error(f"could not read image {in_file}: {exc}")
    if out_file.exists():
        out_file.unlink()

    result = solve_maze(buffer, config)

    if args.show_grid and result.visited is not None and result.visited.shape[1] < MAX_GRID_DUMP_COLUMNS:
        print(format_visited_grid(result.visited))
        print(f"Start cell = [{result.start_cell[0]},{result.start_cell[1]}], cell size = {result.cell_size}")

    if result.solved:
        out_file.parent.mkdir(parents=True, exist_ok=True)
        buffer.save(out_file)

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    elif result.solved:
        print(f"Solution saved in {out_file}")
    else:
        print(result.message, file=sys.stderr)
    return 0 if result.solved else 1


if __name__ == "__main__":
    raise SystemExit(main())
