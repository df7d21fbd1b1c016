"""Data model for face crops.

Coordinate System Notes:
- All coordinates are absolute pixels relative to the source image
- Origin is top-left (0,0)
- Detector boxes are floats and may extend outside the image
- Crop rectangles are ints and always lie fully inside the image
"""

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class CropStrategy(str, Enum):
    """How the crop size is derived."""

    ABSOLUTE = "absolute"
    RELATIVE = "relative"


class DiscardReason(str, Enum):
    """Why a detected face produced no output crop."""

    INVALID_BOUNDING_BOX = "invalid_bounding_box"
    OUT_OF_BOUNDS = "out_of_bounds"
    TOO_SMALL = "too_small"


@dataclass(frozen=True)
class BoundingBox:
    """Detected face box in pixel coordinates.

    Attributes:
        x: Left edge in pixels
        y: Top edge in pixels
        width: Box width in pixels
        height: Box height in pixels
    """

    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        """Right edge in pixels."""
        return self.x + self.width

    @property
    def bottom(self) -> float:
        """Bottom edge in pixels."""
        return self.y + self.height

    @property
    def center_x(self) -> float:
        """Horizontal center position in pixels."""
        return self.x + self.width / 2.0

    @property
    def is_degenerate(self) -> bool:
        """True when the box has no area."""
        return self.width <= 0 or self.height <= 0


@dataclass(frozen=True)
class ImageDimensions:
    """Size of a decoded source image."""

    width: int
    height: int


@dataclass(frozen=True)
class CropRectangle:
    """Crop region in pixel coordinates, contained in the source image."""

    x: int
    y: int
    width: int
    height: int

    @property
    def right(self) -> int:
        """Right edge (exclusive) in pixels."""
        return self.x + self.width

    @property
    def bottom(self) -> int:
        """Bottom edge (exclusive) in pixels."""
        return self.y + self.height

    @property
    def box(self) -> tuple[int, int, int, int]:
        """Region as (left, top, right, bottom), the form Pillow's crop expects."""
        return (self.x, self.y, self.right, self.bottom)

    def is_inside(self, dims: ImageDimensions) -> bool:
        """Check that the rectangle lies completely inside an image."""
        return self.x >= 0 and self.y >= 0 and self.right <= dims.width and self.bottom <= dims.height


@dataclass(frozen=True)
class DetectedFace:
    """One face reported by a detector."""

    bbox: BoundingBox
    confidence: float = 0.0


class CropConfig(BaseModel):
    """Validated, immutable crop parameters.

    ``target_width``/``target_height`` are the crop size for the absolute
    strategy, the resize target when ``resize`` is set, and the minimum size
    when ``filter_by_size`` is set.
    """

    model_config = ConfigDict(frozen=True)

    strategy: CropStrategy = CropStrategy.RELATIVE
    aspect_ratio: float = Field(default=1.0, gt=0.0)
    top_padding: float = Field(default=0.1, ge=0.0, le=1.0)
    proportion_of_face: float = Field(default=0.3, gt=0.0, le=1.0)
    target_height: int = Field(default=1024, gt=0)
    target_width: int = Field(default=1024, gt=0)
    resize: bool = False
    filter_by_size: bool = False


@dataclass(frozen=True)
class CropResult:
    """Outcome of evaluating one face: a kept rectangle or a discard."""

    rectangle: CropRectangle | None = None
    reason: DiscardReason | None = None
    message: str = ""

    @property
    def kept(self) -> bool:
        """True when the crop should be written."""
        return self.reason is None and self.rectangle is not None

    @classmethod
    def keep(cls, rectangle: CropRectangle) -> "CropResult":
        return cls(rectangle=rectangle)

    @classmethod
    def discard(
        cls, reason: DiscardReason, message: str = "", rectangle: CropRectangle | None = None
    ) -> "CropResult":
        return cls(rectangle=rectangle, reason=reason, message=message)
