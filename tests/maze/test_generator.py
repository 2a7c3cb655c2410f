import json
import tempfile
import unittest
from pathlib import Path

from PIL import Image

from pixel_maze.maze.generator import FLOOR_COLOR, WALL_COLOR, MazeGenerator, MazeLayout
from pixel_maze.maze.maze_base import END_COLOR, START_COLOR


class MazeGeneratorTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.tmp = tempfile.TemporaryDirectory()
        self.output_dir = Path(self.tmp.name) / "maze"
        self.generator = MazeGenerator(output_dir=self.output_dir, rows=9, cols=11, cell_size=14, seed=42)

    def tearDown(self) -> None:
        self.tmp.cleanup()

    def test_record_and_images(self) -> None:
        record = self.generator.create_puzzle(puzzle_id="maze-test")

        self.assertEqual(record.id, "maze-test")
        self.assertEqual(record.canvas_dimensions, (11 * 14 + 1, 9 * 14 + 1))
        self.assertEqual(record.grid_size, (11, 9))
        self.assertEqual(record.start_cell, (0, 0))
        self.assertEqual(record.goal_cell, (10, 8))
        self.assertEqual(record.solution_path[0], (0, 0))
        self.assertEqual(record.solution_path[-1], (10, 8))
        self.assertEqual(record.image, "puzzles/maze-test_puzzle.png")

        puzzle_path = self.output_dir / record.image
        solution_path = self.output_dir / record.solution_image_path
        self.assertTrue(puzzle_path.exists())
        self.assertTrue(solution_path.exists())
        with Image.open(puzzle_path) as image:
            self.assertEqual(image.size, record.canvas_dimensions)

    def test_marker_layout_matches_calibration_border(self) -> None:
        layout = MazeLayout.empty(11, 9)
        image = self.generator.render(layout, start=(0, 0), goal=(10, 8))

        self.assertEqual(image.getpixel((0, 0)), WALL_COLOR)
        self.assertEqual(image.getpixel((1, 1)), START_COLOR)
        self.assertEqual(image.getpixel((13, 13)), START_COLOR)
        self.assertEqual(image.getpixel((14, 7)), FLOOR_COLOR)
        self.assertEqual(image.getpixel((10 * 14 + 7, 8 * 14 + 7)), END_COLOR)
        self.assertEqual(image.getpixel((11 * 14, 7)), WALL_COLOR)

    def test_solution_path_follows_open_passages(self) -> None:
        record = self.generator.create_puzzle()
        layout_cells = record.solution_path
        for a, b in zip(layout_cells, layout_cells[1:]):
            self.assertEqual(abs(a[0] - b[0]) + abs(a[1] - b[1]), 1)
        self.assertEqual(len(layout_cells), len(set(layout_cells)))

    def test_same_seed_same_layout(self) -> None:
        other = MazeGenerator(output_dir=Path(self.tmp.name) / "other", rows=9, cols=11, cell_size=14, seed=42)
        self.assertEqual(self.generator.generate_layout(), other.generate_layout())

    def test_perfect_maze_connects_every_cell(self) -> None:
        layout = self.generator.generate_layout()
        opened = sum(row.count(True) for row in layout.open_east) + sum(row.count(True) for row in layout.open_south)
        self.assertEqual(opened, 11 * 9 - 1)
        for row in range(9):
            for column in range(11):
                self.assertTrue(MazeGenerator.bfs_path(layout, (0, 0), (column, row)))

    def test_metadata_appends(self) -> None:
        metadata = self.output_dir / "data.json"
        self.generator.generate_dataset(2, metadata_path=metadata)
        self.generator.generate_dataset(1, metadata_path=metadata)

        payload = json.loads(metadata.read_text(encoding="utf-8"))
        self.assertEqual(len(payload), 3)
        self.assertEqual(payload[0]["cell_size"], 14)
        self.assertEqual(payload[0]["start_cell"], [0, 0])

    def test_cli_writes_metadata(self) -> None:
        out_dir = Path(self.tmp.name) / "cli"
        MazeGenerator.main(["2", "--output-dir", str(out_dir), "--rows", "5", "--cols", "6", "--cell-size", "8", "--seed", "1"])

        payload = json.loads((out_dir / "data.json").read_text(encoding="utf-8"))
        self.assertEqual(len(payload), 2)
        self.assertEqual(payload[0]["grid_size"], [6, 5])

    def test_invalid_arguments(self) -> None:
        with self.assertRaises(ValueError):
            MazeGenerator(output_dir=self.output_dir, rows=1, cols=4)
        with self.assertRaises(ValueError):
            MazeGenerator(output_dir=self.output_dir, cell_size=3)
        with self.assertRaises(ValueError):
            MazeLayout.closed(3, 3).set_open((0, 0), (1, 1))


if __name__ == "__main__":
    unittest.main()
