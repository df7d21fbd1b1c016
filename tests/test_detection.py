"""Unit tests for face detection helpers."""

from pathlib import Path

import cv2
import pytest
from PIL import Image

from conftest import face
from facecrop.detection import FaceDetector, HaarCascadeDetector, resolve_cascade_path, sort_faces
from facecrop.errors import DetectorInitError
from facecrop.settings import Settings


def test_sort_faces_top_to_bottom_then_left_to_right():
    faces = [face(300, 100, 10, 10), face(10, 400, 10, 10), face(50, 100, 10, 10)]

    ordered = sort_faces(faces)

    assert [(f.bbox.x, f.bbox.y) for f in ordered] == [(50, 100), (300, 100), (10, 400)]


def test_resolve_bundled_cascade():
    path = resolve_cascade_path("haarcascade_frontalface_default.xml")

    assert path == Path(cv2.data.haarcascades) / "haarcascade_frontalface_default.xml"


def test_resolve_explicit_cascade_path(tmp_path):
    cascade = tmp_path / "custom.xml"
    cascade.write_text("<opencv_storage/>")

    assert resolve_cascade_path(str(cascade)) == cascade


def test_missing_cascade_raises():
    with pytest.raises(DetectorInitError):
        HaarCascadeDetector(cascade_file="no_such_cascade.xml")


def test_missing_cascade_classifier_api_raises_init_error(monkeypatch):
    monkeypatch.delattr(cv2, "CascadeClassifier")

    with pytest.raises(DetectorInitError):
        HaarCascadeDetector()


def test_cascade_constructor_error_raises_init_error(monkeypatch):
    def broken_classifier(path):
        raise cv2.error("cannot parse cascade")

    monkeypatch.setattr(cv2, "CascadeClassifier", broken_classifier)

    with pytest.raises(DetectorInitError):
        HaarCascadeDetector()


def test_haar_detector_from_settings():
    settings = Settings(scale_factor=1.2, min_neighbors=3, min_face_size=40)

    detector = HaarCascadeDetector.from_settings(settings)

    assert isinstance(detector, FaceDetector)
    assert detector.scale_factor == 1.2
    assert detector.min_neighbors == 3
    assert detector.min_face_size == 40


def test_haar_detector_blank_image_has_no_faces():
    detector = HaarCascadeDetector()

    assert detector.detect(Image.new("RGB", (200, 200), (255, 255, 255))) == []
