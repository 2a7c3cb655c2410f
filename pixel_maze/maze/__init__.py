"""Grid calibration, cell graph search and path rendering for maze images."""

__all__ = [
    "Calibration",
    "CellGraph",
    "GridCalibrator",
    "GridGeometry",
    "MazeGenerator",
    "MazeLayout",
    "MazePuzzleRecord",
    "MazeSolveResult",
    "MazeSolver",
    "PathRenderer",
    "PixelClassification",
    "PixelClassifier",
    "SolveStatus",
    "SolverConfig",
    "solve_maze",
]

from .maze_base import GridGeometry, MazeSolveResult, PixelClassification, SolverConfig, SolveStatus
from .classifier import PixelClassifier
from .calibration import Calibration, GridCalibrator
from .cell_graph import CellGraph
from .renderer import PathRenderer
from .solver import MazeSolver, solve_maze
from .generator import MazeGenerator, MazeLayout, MazePuzzleRecord
