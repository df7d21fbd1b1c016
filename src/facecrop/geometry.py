"""Crop geometry for detected faces.

Maps a face bounding box, the source image size and a ``CropConfig`` to a
crop rectangle in pixel coordinates.

Both strategies place the crop the same way:
- The crop is horizontally centered on the face center
- ``top_padding`` of the crop height sits above the face's top edge

They differ only in how the crop size is chosen:
- Absolute: ``target_width`` x ``target_height`` pixels
- Relative: the face takes up ``proportion_of_face`` of the crop height,
  and the width follows from ``aspect_ratio``

The result is clipped to the image: on each axis the crop keeps its size and
is shifted inside the image when it fits, otherwise it spans the whole axis.
"""

import logging
import math

from facecrop.errors import InvalidBoundingBox, InvalidGeometry
from facecrop.models import (
    BoundingBox,
    CropConfig,
    CropRectangle,
    CropStrategy,
    ImageDimensions,
)

logger = logging.getLogger(__name__)


def desired_crop_size(bbox: BoundingBox, config: CropConfig) -> tuple[float, float]:
    """Calculate the unclipped crop size.

    Args:
        bbox: Detected face box
        config: Crop parameters

    Returns:
        Tuple of (width, height) in pixels, before clipping
    """
    if config.strategy is CropStrategy.ABSOLUTE:
        return float(config.target_width), float(config.target_height)

    crop_height = bbox.height / config.proportion_of_face
    crop_width = crop_height * config.aspect_ratio
    return crop_width, crop_height


def desired_crop_origin(
    bbox: BoundingBox, crop_width: float, crop_height: float, top_padding: float
) -> tuple[float, float]:
    """Calculate the unclipped top-left corner of the crop.

    Args:
        bbox: Detected face box
        crop_width: Crop width in pixels
        crop_height: Crop height in pixels
        top_padding: Fraction of the crop height to leave above the face

    Returns:
        Tuple of (x, y) in pixels, possibly negative or past the image edge
    """
    crop_x = bbox.center_x - crop_width / 2.0
    crop_y = bbox.y - crop_height * top_padding
    return crop_x, crop_y


def _clip_axis(origin: float, extent: float, limit: int) -> tuple[int, int]:
    """Fit one axis of the crop into ``[0, limit]``.

    Returns:
        Tuple of (origin, extent) as ints
    """
    if extent >= limit:
        return 0, limit

    size = round(extent)
    start = math.floor(min(max(origin, 0.0), limit - extent))
    start = min(max(start, 0), limit - size)
    return start, size


def _overlaps_image(bbox: BoundingBox, image_dims: ImageDimensions) -> bool:
    return bbox.right > 0 and bbox.bottom > 0 and bbox.x < image_dims.width and bbox.y < image_dims.height


def calculate_crop(bbox: BoundingBox, image_dims: ImageDimensions, config: CropConfig) -> CropRectangle:
    """Calculate the crop rectangle for one detected face.

    Args:
        bbox: Detected face box in source image pixels
        image_dims: Source image size
        config: Crop parameters

    Returns:
        Crop rectangle contained in the image

    Raises:
        InvalidBoundingBox: If the face box has no area
        InvalidGeometry: If the face lies outside the image or the crop
            collapses to zero width or height
    """
    if bbox.is_degenerate:
        raise InvalidBoundingBox(f"Face box has no area: {bbox.width}x{bbox.height}")

    if not _overlaps_image(bbox, image_dims):
        raise InvalidGeometry(
            f"Face box at ({bbox.x}, {bbox.y}) lies outside the {image_dims.width}x{image_dims.height} image"
        )

    crop_width, crop_height = desired_crop_size(bbox, config)
    crop_x, crop_y = desired_crop_origin(bbox, crop_width, crop_height, config.top_padding)

    x, width = _clip_axis(crop_x, crop_width, image_dims.width)
    y, height = _clip_axis(crop_y, crop_height, image_dims.height)

    if width <= 0 or height <= 0:
        raise InvalidGeometry(f"Crop collapsed to {width}x{height} after clipping")

    logger.debug(
        "Crop (%.1f, %.1f, %.1f, %.1f) clipped to (%d, %d, %d, %d)",
        crop_x,
        crop_y,
        crop_width,
        crop_height,
        x,
        y,
        width,
        height,
    )
    return CropRectangle(x=x, y=y, width=width, height=height)
