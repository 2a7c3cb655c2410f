"""Shared pixel buffer and generator scaffolding for maze images."""

from __future__ import annotations

import dataclasses
import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Generic, Iterable, List, Optional, Tuple, TypeVar, Union

import numpy as np
from PIL import Image, ImageDraw

PathLike = Union[str, Path]
RGB = Tuple[int, int, int]
RecordT = TypeVar("RecordT")

# Output formats accepted by PixelBuffer.save, keyed by file extension.
IMAGE_FORMATS: Dict[str, str] = {
    ".bmp": "BMP",
    ".png": "PNG",
    ".jpg": "JPEG",
    ".jpeg": "JPEG",
}


class PixelBuffer:
    """Addressable RGB surface backed by a Pillow image.

    Reads go through a numpy snapshot of the image so that repeated lookups do
    not pay the per-call overhead of ``Image.getpixel``. Drawing through
    :meth:`draw` mutates the wrapped image and drops the snapshot.
    """

    def __init__(self, image: Image.Image) -> None:
        if image.mode != "RGB":
            image = image.convert("RGB")
        self.image = image
        self._pixels: Optional[np.ndarray] = None

    @classmethod
    def open(cls, path: PathLike) -> "PixelBuffer":
        with Image.open(path) as src:
            return cls(src.convert("RGB"))

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height

    @property
    def size(self) -> Tuple[int, int]:
        return self.image.size

    @property
    def pixels(self) -> np.ndarray:
        if self._pixels is None:
            self._pixels = np.asarray(self.image, dtype=np.uint8)
        return self._pixels

    def color_at(self, x: int, y: int) -> RGB:
        r, g, b = self.pixels[y, x]
        return int(r), int(g), int(b)

    def draw(self) -> ImageDraw.ImageDraw:
        self._pixels = None
        return ImageDraw.Draw(self.image)

    @staticmethod
    def format_for(path: PathLike) -> str:
        suffix = Path(path).suffix.lower()
        try:
            return IMAGE_FORMATS[suffix]
        except KeyError as exc:
            supported = ", ".join(sorted(IMAGE_FORMATS))
            raise ValueError(f"Unsupported image extension '{suffix}' (expected one of {supported})") from exc

    def save(self, path: PathLike) -> Path:
        target = Path(path)
        self.image.save(target, format=self.format_for(target))
        return target


class AbstractMazeGenerator(ABC, Generic[RecordT]):
    """Base class for dataset builders that emit maze image records."""

    def __init__(self, output_dir: PathLike) -> None:
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)

    @abstractmethod
    def create_puzzle(self, *args, **kwargs) -> RecordT:
        """Create a maze from the provided resources."""

    def create_random_puzzle(self) -> RecordT:
        """Create a single randomized maze instance."""
        return self.create_puzzle()

    def generate_dataset(
        self,
        count: int,
        *,
        metadata_path: Optional[PathLike] = None,
        append: bool = True,
    ) -> List[RecordT]:
        """Generate a batch of mazes and optionally persist metadata."""
        records = [self.create_random_puzzle() for _ in range(count)]
        if metadata_path is not None:
            self.write_metadata(records, metadata_path, append=append)
        return records

    def write_metadata(
        self,
        records: Iterable[RecordT],
        metadata_path: PathLike,
        *,
        append: bool = True,
    ) -> None:
        """Serialize maze records to JSON, appending if requested."""

        path = Path(metadata_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        existing: List[Dict[str, Any]] = []
        if append and path.exists():
            existing = json.loads(path.read_text(encoding="utf-8"))
        payload = [self.record_to_dict(record) for record in records]
        path.write_text(json.dumps(existing + payload, indent=2), encoding="utf-8")

    def record_to_dict(self, record: RecordT) -> Dict[str, Any]:
        if hasattr(record, "to_dict"):
            return getattr(record, "to_dict")()
        return dataclasses.asdict(record)

    def relativize_path(self, path: Path) -> str:
        """Map an absolute path into the generator output directory when possible."""

        try:
            return path.relative_to(self.output_dir).as_posix()
        except ValueError:
            return path.as_posix()


__all__ = [
    "AbstractMazeGenerator",
    "IMAGE_FORMATS",
    "PathLike",
    "PixelBuffer",
    "RGB",
]
