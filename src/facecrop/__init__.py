"""Batch face cropping.

Detects faces in images and writes one crop per face, sized either in
absolute pixels or relative to the detected face.
"""

from facecrop.errors import (
    DecodeFailure,
    DetectorInitError,
    FaceCropError,
    FatalIOFailure,
    InvalidBoundingBox,
    InvalidGeometry,
    WriteFailure,
)
from facecrop.filtering import apply_size_filter, evaluate_face
from facecrop.geometry import calculate_crop
from facecrop.models import (
    BoundingBox,
    CropConfig,
    CropRectangle,
    CropResult,
    CropStrategy,
    DetectedFace,
    DiscardReason,
    ImageDimensions,
)

try:
    from facecrop._version import __version__, __version_tuple__
except ImportError:
    __version__ = "0.0.0+unknown"
    __version_tuple__ = (0, 0, 0, "unknown", "unknown")

__all__ = [
    "__version__",
    "__version_tuple__",
    "BoundingBox",
    "CropConfig",
    "CropRectangle",
    "CropResult",
    "CropStrategy",
    "DetectedFace",
    "DiscardReason",
    "ImageDimensions",
    "FaceCropError",
    "InvalidBoundingBox",
    "InvalidGeometry",
    "DecodeFailure",
    "WriteFailure",
    "FatalIOFailure",
    "DetectorInitError",
    "calculate_crop",
    "apply_size_filter",
    "evaluate_face",
]
