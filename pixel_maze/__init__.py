"""Solve maze images: calibrate the cell grid, search it and draw the path."""

__all__ = [
    "PixelBuffer",
    "SolverConfig",
    "MazeSolveResult",
    "SolveStatus",
    "solve_maze",
]

from .base import PixelBuffer
from .maze import MazeSolveResult, SolveStatus, SolverConfig, solve_maze
