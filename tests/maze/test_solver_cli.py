import contextlib
import io
import json
import tempfile
import unittest
from pathlib import Path

from PIL import Image

from pixel_maze.base import PixelBuffer
from pixel_maze.maze.generator import MazeGenerator
from pixel_maze.maze.maze_base import NO_START_MESSAGE, PATH_COLOR
from pixel_maze.maze.solver import main, parse_color


class SolverCliTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.tmp = tempfile.TemporaryDirectory()
        self.root = Path(self.tmp.name)
        generator = MazeGenerator(output_dir=self.root / "maze", rows=6, cols=8, cell_size=10, seed=3)
        self.record = generator.create_puzzle(puzzle_id="cli")
        self.maze_path = generator.output_dir / self.record.image

    def tearDown(self) -> None:
        self.tmp.cleanup()

    def _run(self, *argv: str):
        stdout, stderr = io.StringIO(), io.StringIO()
        with contextlib.redirect_stdout(stdout), contextlib.redirect_stderr(stderr):
            code = main(list(argv))
        return code, stdout.getvalue(), stderr.getvalue()

    def test_solves_and_saves_png(self) -> None:
        out = self.root / "solved.png"
        code, stdout, _ = self._run(str(self.maze_path), str(out))

        self.assertEqual(code, 0)
        self.assertIn("Solution saved in", stdout)
        solved = PixelBuffer.open(out)
        (ac, ar), (bc, br) = self.record.solution_path[:2]
        self.assertEqual(solved.color_at((ac + bc) * 5 + 5, (ar + br) * 5 + 5), PATH_COLOR)

    def test_bitmap_output_and_custom_path_color(self) -> None:
        out = self.root / "solved.bmp"
        code, _, _ = self._run(str(self.maze_path), str(out), "--path-color", "255,0,255", "--path-width", "3")

        self.assertEqual(code, 0)
        with Image.open(out) as image:
            self.assertEqual(image.format, "BMP")
        solved = PixelBuffer.open(out)
        (ac, ar), (bc, br) = self.record.solution_path[-2:]
        self.assertEqual(solved.color_at((ac + bc) * 5 + 5, (ar + br) * 5 + 5), (255, 0, 255))

    def test_json_report(self) -> None:
        out = self.root / "solved.png"
        code, stdout, _ = self._run(str(self.maze_path), str(out), "--json")

        self.assertEqual(code, 0)
        payload = json.loads(stdout)
        self.assertEqual(payload["status"], "solved")
        self.assertEqual(payload["cell_size"], 10)
        self.assertEqual(payload["path"], [list(cell) for cell in self.record.solution_path])

    def test_show_grid_prints_visited_cells(self) -> None:
        out = self.root / "solved.png"
        code, stdout, _ = self._run(str(self.maze_path), str(out), "--show-grid")

        self.assertEqual(code, 0)
        grid_lines = [line for line in stdout.splitlines() if line.startswith(" #") or line.startswith(" -")]
        self.assertEqual(len(grid_lines), 6)
        self.assertEqual(sum(line.count("#") for line in grid_lines), len(self.record.solution_path))
        self.assertIn("Start cell = [0,0], cell size = 10", stdout)

    def test_missing_start_exits_without_output(self) -> None:
        blank = self.root / "blank.png"
        Image.new("RGB", (40, 40), (255, 255, 255)).save(blank)
        out = self.root / "solved.png"
        out.write_bytes(b"stale")

        code, _, stderr = self._run(str(blank), str(out))

        self.assertEqual(code, 1)
        self.assertIn(NO_START_MESSAGE, stderr)
        self.assertFalse(out.exists())

    def test_usage_errors_exit_with_code_two(self) -> None:
        cases = [
            (str(self.root / "missing.png"), str(self.root / "out.png")),
            (str(self.maze_path), str(self.root / "out.gif")),
            (str(self.maze_path), str(self.root / "out.png"), "--start-color", "0,0,255"),
            (str(self.maze_path), str(self.root / "out.png"), "--end-color", "1,2"),
        ]
        for argv in cases:
            with self.subTest(argv=argv):
                with self.assertRaises(SystemExit) as ctx:
                    self._run(*argv)
                self.assertEqual(ctx.exception.code, 2)

    def test_undecodable_input_is_a_usage_error(self) -> None:
        bogus = self.root / "bogus.png"
        bogus.write_text("not an image", encoding="utf-8")
        with self.assertRaises(SystemExit) as ctx:
            self._run(str(bogus), str(self.root / "out.png"))
        self.assertEqual(ctx.exception.code, 2)

    def test_parse_color(self) -> None:
        self.assertEqual(parse_color("1, 2,3"), (1, 2, 3))


if __name__ == "__main__":
    unittest.main()
