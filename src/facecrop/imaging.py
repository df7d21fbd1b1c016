"""Image decode, crop, resize and encode using Pillow."""

from pathlib import Path

from PIL import Image, ImageOps, UnidentifiedImageError

from facecrop.errors import DecodeFailure, WriteFailure
from facecrop.models import CropRectangle, ImageDimensions

IMAGE_EXTENSIONS = frozenset({".jpg", ".jpeg", ".png"})


def decode(image_path: Path) -> tuple[Image.Image, ImageDimensions]:
    """Load an image as RGB with EXIF orientation applied.

    Args:
        image_path: Path to input image file

    Returns:
        Tuple of (image, dimensions)

    Raises:
        DecodeFailure: If the file is missing, unreadable or not an image
    """
    try:
        with Image.open(image_path) as img:
            image = ImageOps.exif_transpose(img).convert("RGB")
            image.load()
    except (OSError, UnidentifiedImageError, Image.DecompressionBombError, ValueError) as e:
        raise DecodeFailure(f"Failed to decode {image_path}: {e}") from e

    return image, ImageDimensions(width=image.width, height=image.height)


def crop(image: Image.Image, rect: CropRectangle) -> Image.Image:
    """Cut a rectangle out of an image."""
    return image.crop(rect.box)


def resize(
    image: Image.Image,
    target_width: int,
    target_height: int,
    resample: int = Image.Resampling.LANCZOS,
) -> Image.Image:
    """Stretch an image to exact dimensions.

    Args:
        image: Image to resize
        target_width: Target width in pixels
        target_height: Target height in pixels
        resample: Resampling filter (default: LANCZOS for high quality)

    Returns:
        Resized image

    Raises:
        ValueError: If the target size is invalid
    """
    if target_width <= 0 or target_height <= 0:
        raise ValueError(f"Invalid target size: {(target_width, target_height)}")
    return image.resize((target_width, target_height), resample=resample)


def encode(image: Image.Image, output_path: Path, quality: int = 95) -> Path:
    """Write an image, choosing the format from the file extension.

    Raises:
        WriteFailure: If the file cannot be written
    """
    try:
        image.save(output_path, quality=quality)
    except (OSError, ValueError) as e:
        raise WriteFailure(f"Failed to write {output_path}: {e}") from e
    return output_path
