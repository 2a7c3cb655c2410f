import pytest
from PIL import Image, ImageDraw

from pixel_maze.base import PixelBuffer
from pixel_maze.maze.maze_base import END_COLOR, START_COLOR

WHITE = (255, 255, 255)
BLACK = (0, 0, 0)


def three_by_three_image() -> Image.Image:
    """3x3 grid of 10px cells, walls between (0,0)-(1,0) and (1,1)-(1,2)."""
    image = Image.new("RGB", (30, 30), WHITE)
    draw = ImageDraw.Draw(image)
    draw.rectangle((1, 1, 9, 9), fill=START_COLOR)
    draw.rectangle((21, 21, 29, 29), fill=END_COLOR)
    draw.line((10, 0, 10, 9), fill=BLACK, width=1)
    draw.line((10, 20, 19, 20), fill=BLACK, width=1)
    return image


@pytest.fixture
def scenario_buffer() -> PixelBuffer:
    return PixelBuffer(three_by_three_image())
