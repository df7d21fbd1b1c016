"""Pytest fixtures for facecrop tests."""

from pathlib import Path

import pytest
from PIL import Image

from facecrop.models import BoundingBox, DetectedFace


class FakeDetector:
    """Detector returning a fixed list of faces for every image.

    Raises for images whose width equals ``fail_on_width`` to simulate a
    detector crash on one input.
    """

    def __init__(self, faces: list[DetectedFace] | None = None, fail_on_width: int | None = None):
        self.faces = faces or []
        self.fail_on_width = fail_on_width
        self.calls = 0

    def detect(self, image: Image.Image) -> list[DetectedFace]:
        self.calls += 1
        if self.fail_on_width is not None and image.width == self.fail_on_width:
            raise RuntimeError("detector exploded")
        return list(self.faces)


def face(x: float, y: float, width: float, height: float, confidence: float = 0.9) -> DetectedFace:
    return DetectedFace(bbox=BoundingBox(x=x, y=y, width=width, height=height), confidence=confidence)


@pytest.fixture
def make_image(tmp_path):
    """Write a solid-color image and return its path."""

    def _make(name: str = "photo.jpg", size: tuple[int, int] = (500, 500), directory: Path | None = None) -> Path:
        directory = directory or tmp_path / "input"
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / name
        Image.new("RGB", size, (200, 180, 160)).save(path)
        return path

    return _make


@pytest.fixture
def corrupt_image(tmp_path):
    """Write a file with an image extension that isn't an image."""
    directory = tmp_path / "input"
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / "broken.jpg"
    path.write_bytes(b"definitely not a jpeg")
    return path


@pytest.fixture
def output_dir(tmp_path):
    path = tmp_path / "output"
    path.mkdir()
    return path


@pytest.fixture
def centered_face():
    """50x50 face at (100, 100), the standard face for 500x500 test images."""
    return face(100, 100, 50, 50, confidence=0.9)
