"""Exceptions raised while cropping faces.

Per-face errors (``InvalidBoundingBox``, ``InvalidGeometry``) and per-image
errors (``DecodeFailure``, ``WriteFailure``) are recovered by the batch
driver. ``FatalIOFailure`` and ``DetectorInitError`` abort the run.
"""


class FaceCropError(Exception):
    """Base exception for facecrop errors."""

    pass


class InvalidBoundingBox(FaceCropError):
    """Raised when a detected face box has zero or negative width/height."""

    pass


class InvalidGeometry(FaceCropError):
    """Raised when a crop rectangle collapses after clipping to the image."""

    pass


class DecodeFailure(FaceCropError):
    """Raised when an input image cannot be opened or decoded."""

    pass


class WriteFailure(FaceCropError):
    """Raised when a crop cannot be written to the output directory."""

    pass


class FatalIOFailure(FaceCropError):
    """Raised when input/output paths are unusable for the whole batch."""

    pass


class DetectorInitError(FaceCropError):
    """Raised when the face detector cannot be constructed."""

    pass
