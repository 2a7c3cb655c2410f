import numpy as np
import pytest
from PIL import Image

from pixel_maze.base import PixelBuffer


def test_color_at_reads_rgb_triples():
    image = Image.new("RGB", (4, 3), (10, 20, 30))
    image.putpixel((3, 2), (200, 100, 50))
    buffer = PixelBuffer(image)

    assert buffer.size == (4, 3)
    assert buffer.color_at(0, 0) == (10, 20, 30)
    assert buffer.color_at(3, 2) == (200, 100, 50)
    assert buffer.pixels.shape == (3, 4, 3)


def test_non_rgb_images_are_converted():
    image = Image.new("L", (2, 2), 0)
    buffer = PixelBuffer(image)
    assert buffer.image.mode == "RGB"
    assert buffer.color_at(1, 1) == (0, 0, 0)


def test_draw_refreshes_pixel_snapshot():
    buffer = PixelBuffer(Image.new("RGB", (5, 5), (255, 255, 255)))
    assert buffer.color_at(2, 2) == (255, 255, 255)

    buffer.draw().point((2, 2), fill=(1, 2, 3))
    assert buffer.color_at(2, 2) == (1, 2, 3)


@pytest.mark.parametrize(
    "name, expected",
    [("out.png", "PNG"), ("out.BMP", "BMP"), ("out.jpg", "JPEG"), ("out.jpeg", "JPEG")],
)
def test_format_for_known_extensions(name, expected):
    assert PixelBuffer.format_for(name) == expected


def test_format_for_rejects_unknown_extension():
    with pytest.raises(ValueError, match="Unsupported image extension"):
        PixelBuffer.format_for("solved.gif")


def test_save_and_open_bitmap(tmp_path):
    image = Image.new("RGB", (6, 4), (0, 0, 255))
    image.putpixel((1, 1), (255, 0, 0))
    target = PixelBuffer(image).save(tmp_path / "maze.bmp")

    reloaded = PixelBuffer.open(target)
    assert reloaded.size == (6, 4)
    assert reloaded.color_at(1, 1) == (255, 0, 0)
    assert np.array_equal(reloaded.pixels, np.asarray(image))
