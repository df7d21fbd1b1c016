"""Keep/discard decisions for computed crops."""

import logging

from facecrop.errors import InvalidBoundingBox, InvalidGeometry
from facecrop.geometry import calculate_crop
from facecrop.models import (
    BoundingBox,
    CropConfig,
    CropRectangle,
    CropResult,
    DiscardReason,
    ImageDimensions,
)

logger = logging.getLogger(__name__)


def apply_size_filter(rect: CropRectangle, config: CropConfig) -> CropResult:
    """Decide whether a crop is large enough to keep.

    Compares the clipped crop, before any resize, against the target size.
    Resizing would always meet the target, so this is a quality gate on the
    source pixels.

    Args:
        rect: Clipped crop rectangle
        config: Crop parameters

    Returns:
        Kept result, or a ``TOO_SMALL`` discard
    """
    if not config.filter_by_size:
        return CropResult.keep(rect)

    if rect.width < config.target_width or rect.height < config.target_height:
        return CropResult.discard(
            DiscardReason.TOO_SMALL,
            f"Crop {rect.width}x{rect.height} is smaller than {config.target_width}x{config.target_height}",
            rectangle=rect,
        )

    return CropResult.keep(rect)


def evaluate_face(bbox: BoundingBox, image_dims: ImageDimensions, config: CropConfig) -> CropResult:
    """Calculate and filter the crop for one face.

    Geometry errors become discard results so callers can skip the face
    and move on.
    """
    try:
        rect = calculate_crop(bbox, image_dims, config)
    except InvalidBoundingBox as e:
        return CropResult.discard(DiscardReason.INVALID_BOUNDING_BOX, str(e))
    except InvalidGeometry as e:
        return CropResult.discard(DiscardReason.OUT_OF_BOUNDS, str(e))

    return apply_size_filter(rect, config)
