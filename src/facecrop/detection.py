"""Face detection.

Detectors turn a decoded RGB image into ``DetectedFace`` boxes in source
image pixels. The crop geometry never depends on which detector produced
the boxes.
"""

import logging
from pathlib import Path
from typing import Protocol, runtime_checkable

import cv2
import numpy as np
from PIL import Image

from facecrop.errors import DetectorInitError
from facecrop.models import BoundingBox, DetectedFace
from facecrop.settings import Settings, get_settings

logger = logging.getLogger(__name__)


@runtime_checkable
class FaceDetector(Protocol):
    """Protocol for face detectors.

    All detectors must implement this interface to be interchangeable.
    """

    def detect(self, image: Image.Image) -> list[DetectedFace]:
        """Detect faces in an image.

        Args:
            image: RGB image

        Returns:
            Detected faces, possibly empty
        """
        ...


def resolve_cascade_path(cascade_file: str) -> Path:
    """Find a cascade XML file.

    Accepts an explicit path, or a file name from the cascades bundled with
    OpenCV.
    """
    candidate = Path(cascade_file).expanduser()
    if candidate.is_file():
        return candidate
    return Path(cv2.data.haarcascades) / cascade_file


def sort_faces(faces: list[DetectedFace]) -> list[DetectedFace]:
    """Order faces top-to-bottom, then left-to-right, so face indices are stable."""
    return sorted(faces, key=lambda face: (face.bbox.y, face.bbox.x))


class HaarCascadeDetector:
    """Face detector using OpenCV's Haar cascade classifier.

    Confidence is the cascade's level weight for each detection, which is
    unbounded rather than a [0, 1] probability.
    """

    def __init__(
        self,
        cascade_file: str = "haarcascade_frontalface_default.xml",
        scale_factor: float = 1.1,
        min_neighbors: int = 5,
        min_face_size: int = 30,
    ):
        try:
            cascade_path = resolve_cascade_path(cascade_file)
            self.classifier = cv2.CascadeClassifier(str(cascade_path))
        except Exception as e:
            raise DetectorInitError(f"Failed to load Haar cascade {cascade_file}: {e}") from e
        if self.classifier.empty():
            raise DetectorInitError(f"Failed to load Haar cascade from {cascade_path}")

        self.cascade_path = cascade_path
        self.scale_factor = scale_factor
        self.min_neighbors = min_neighbors
        self.min_face_size = min_face_size
        logger.debug("Loaded Haar cascade %s", cascade_path)

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "HaarCascadeDetector":
        """Build a detector from runtime settings."""
        settings = settings or get_settings()
        return cls(
            cascade_file=settings.cascade_file,
            scale_factor=settings.scale_factor,
            min_neighbors=settings.min_neighbors,
            min_face_size=settings.min_face_size,
        )

    def detect(self, image: Image.Image) -> list[DetectedFace]:
        gray = cv2.cvtColor(np.asarray(image.convert("RGB")), cv2.COLOR_RGB2GRAY)

        rects, _levels, weights = self.classifier.detectMultiScale3(
            gray,
            scaleFactor=self.scale_factor,
            minNeighbors=self.min_neighbors,
            minSize=(self.min_face_size, self.min_face_size),
            outputRejectLevels=True,
        )
        if len(rects) == 0:
            return []

        scores = np.asarray(weights, dtype=np.float64).reshape(-1)
        faces = [
            DetectedFace(
                bbox=BoundingBox(x=float(x), y=float(y), width=float(w), height=float(h)),
                confidence=float(scores[i]) if i < len(scores) else 0.0,
            )
            for i, (x, y, w, h) in enumerate(rects)
        ]
        logger.debug("Haar cascade found %d faces", len(faces))
        return sort_faces(faces)
