"""Per-pixel wall/marker classification with a lazily filled cache."""

from __future__ import annotations

from typing import Optional

import numpy as np

from pixel_maze.base import RGB, PixelBuffer
from pixel_maze.maze.maze_base import PixelClassification, SolverConfig


class PixelClassifier:
    """Classify pixels of a buffer as wall, start, end or floor.

    Start and end markers are flat fills, so they are matched exactly. Walls
    only need every channel below ``wall_threshold``, which accepts the dark
    grays that lossy encoders leave around black lines.
    """

    def __init__(self, buffer: PixelBuffer, config: Optional[SolverConfig] = None) -> None:
        self.buffer = buffer
        self.config = config if config is not None else SolverConfig()
        self._cache = np.zeros((buffer.height, buffer.width), dtype=np.uint8)

    @property
    def width(self) -> int:
        return self.buffer.width

    @property
    def height(self) -> int:
        return self.buffer.height

    @property
    def cached_count(self) -> int:
        return int(np.count_nonzero(self._cache))

    def classify_color(self, color: RGB) -> PixelClassification:
        if color == self.config.start_color:
            return PixelClassification.START
        if color == self.config.end_color:
            return PixelClassification.END
        threshold = self.config.wall_threshold
        if color[0] < threshold and color[1] < threshold and color[2] < threshold:
            return PixelClassification.WALL
        return PixelClassification.FLOOR

    def classify(self, x: int, y: int) -> PixelClassification:
        cached = self._cache[y, x]
        if cached != PixelClassification.UNKNOWN:
            return PixelClassification(int(cached))
        kind = self.classify_color(self.buffer.color_at(x, y))
        self._cache[y, x] = int(kind)
        return kind

    def is_wall(self, x: int, y: int) -> bool:
        return self.classify(x, y) is PixelClassification.WALL

    def is_start(self, x: int, y: int) -> bool:
        return self.classify(x, y) is PixelClassification.START

    def is_end(self, x: int, y: int) -> bool:
        return self.classify(x, y) is PixelClassification.END


__all__ = ["PixelClassifier"]
