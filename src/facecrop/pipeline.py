"""Batch driver: detect, crop, filter, resize and write faces for many images.

Failures are isolated at the smallest unit that can be skipped:
- A face whose crop cannot be computed, or is too small, is skipped
- A crop that cannot be written is skipped
- An image that cannot be decoded or detected is skipped
Only problems with the input/output paths themselves abort the batch.
"""

import logging
import threading
from collections import Counter
from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from functools import partial
from pathlib import Path

from facecrop import imaging
from facecrop.detection import FaceDetector
from facecrop.errors import DecodeFailure, DetectorInitError, FatalIOFailure, WriteFailure
from facecrop.filtering import evaluate_face
from facecrop.models import CropConfig, DiscardReason

logger = logging.getLogger(__name__)


@dataclass
class ImageReport:
    """What happened to one input image."""

    image_path: Path
    faces_detected: int = 0
    written: list[Path] = field(default_factory=list)
    discarded: Counter = field(default_factory=Counter)
    write_failures: int = 0
    error: str | None = None

    @property
    def failed(self) -> bool:
        return self.error is not None


@dataclass
class BatchStats:
    """Counts accumulated over a batch run."""

    images_total: int = 0
    images_processed: int = 0
    images_failed: int = 0
    images_without_faces: int = 0
    faces_detected: int = 0
    crops_written: int = 0
    faces_discarded: Counter = field(default_factory=Counter)
    write_failures: int = 0
    failed_images: list[Path] = field(default_factory=list)

    @property
    def faces_skipped(self) -> int:
        """Faces that produced no output for any discard reason."""
        return sum(self.faces_discarded.values())

    def add(self, report: ImageReport) -> None:
        if report.failed:
            self.images_failed += 1
            self.failed_images.append(report.image_path)
            return

        self.images_processed += 1
        self.faces_detected += report.faces_detected
        if report.faces_detected == 0:
            self.images_without_faces += 1
        self.crops_written += len(report.written)
        self.faces_discarded.update(report.discarded)
        self.write_failures += report.write_failures


def collect_input_paths(image_path_or_dir: Path) -> list[Path]:
    """Resolve the input argument to a list of image files.

    A file is used as-is. A directory contributes its direct children with a
    .jpg, .jpeg or .png extension, sorted by name.

    Raises:
        FatalIOFailure: If the path doesn't exist or the directory is unreadable
    """
    if not image_path_or_dir.exists():
        raise FatalIOFailure(f"Input path does not exist: {image_path_or_dir}")

    if image_path_or_dir.is_file():
        logger.info("Received file %s", image_path_or_dir)
        return [image_path_or_dir]

    logger.info("Received directory %s", image_path_or_dir)
    try:
        entries = sorted(image_path_or_dir.iterdir())
    except OSError as e:
        raise FatalIOFailure(f"Failed to read input directory {image_path_or_dir}: {e}") from e

    image_paths = []
    for path in entries:
        if path.is_file() and path.suffix.lower() in imaging.IMAGE_EXTENSIONS:
            logger.debug("Found image %s", path)
            image_paths.append(path)
    return image_paths


def prepare_output_dir(output_dir: Path) -> Path:
    """Create the output directory if needed.

    Raises:
        FatalIOFailure: If the path is a file or cannot be created
    """
    if output_dir.exists() and not output_dir.is_dir():
        raise FatalIOFailure(f"Output path is not a directory: {output_dir}")
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise FatalIOFailure(f"Failed to create output directory {output_dir}: {e}") from e
    return output_dir


def output_filename(image_path: Path, face_index: int, confidence: float) -> str:
    """Name a crop after its source image, face index and detector confidence.

    The source extension is kept in the name so that same-stem inputs such as
    a.jpg and a.png write distinct crops.

    Example:
        >>> output_filename(Path("a.png"), 0, 0.9)
        'a_png-0-0.900.jpg'
    """
    suffix = image_path.suffix.lstrip(".")
    base = f"{image_path.stem}_{suffix}" if suffix else image_path.stem
    return f"{base}-{face_index}-{confidence:.3f}.jpg"


def process_image(
    image_path: Path,
    output_dir: Path,
    config: CropConfig,
    detector: FaceDetector,
    jpeg_quality: int = 95,
) -> ImageReport:
    """Detect and write every face crop of one image.

    Args:
        image_path: Path to input image file
        output_dir: Existing directory for crops
        config: Crop parameters
        detector: Face detector
        jpeg_quality: JPEG quality for written crops

    Returns:
        Report of detected, written and skipped faces
    """
    report = ImageReport(image_path=image_path)

    try:
        image, dims = imaging.decode(image_path)
    except DecodeFailure as e:
        logger.warning("Skipping image %s: %s", image_path.name, e)
        report.error = str(e)
        return report

    faces = detector.detect(image)
    report.faces_detected = len(faces)
    logger.debug("Detected %d faces in %s", len(faces), image_path)
    if not faces:
        logger.warning("No faces in image %s. Skipping", image_path.name)
        return report

    for i, face in enumerate(faces):
        result = evaluate_face(face.bbox, dims, config)
        if not result.kept:
            report.discarded[result.reason] += 1
            if result.reason is DiscardReason.TOO_SMALL:
                logger.warning("Face %d in image %s is too small. Skipping: %s", i, image_path.name, result.message)
            else:
                logger.warning("Face %d in image %s skipped: %s", i, image_path.name, result.message)
            continue

        cropped = imaging.crop(image, result.rectangle)
        if config.resize:
            cropped = imaging.resize(cropped, config.target_width, config.target_height)

        output_path = output_dir / output_filename(image_path, i, face.confidence)
        try:
            imaging.encode(cropped, output_path, quality=jpeg_quality)
        except WriteFailure as e:
            logger.error("Face %d in image %s not saved: %s", i, image_path.name, e)
            report.write_failures += 1
            continue

        report.written.append(output_path)
        logger.info("Saved face %d in image %s to %s", i, image_path.name, output_path)

    return report


def process_batch(
    image_paths: Iterable[Path],
    output_dir: Path,
    config: CropConfig,
    detector_factory: Callable[[], FaceDetector],
    workers: int = 1,
    jpeg_quality: int = 95,
    progress_callback: Callable[[int, int], None] | None = None,
) -> BatchStats:
    """Process images one at a time, or on a thread pool when ``workers > 1``.

    Each worker thread builds its own detector from ``detector_factory``.
    An unexpected error in one image marks that image failed and the batch
    continues. A detector that fails to initialise aborts the batch.

    Args:
        image_paths: Images to process
        output_dir: Existing directory for crops
        config: Crop parameters
        detector_factory: Callable returning a face detector
        workers: Number of worker threads
        jpeg_quality: JPEG quality for written crops
        progress_callback: Optional callback function (current, total) -> None

    Returns:
        Aggregated batch statistics
    """
    paths = list(image_paths)
    stats = BatchStats(images_total=len(paths))

    def record(image_path: Path, run: Callable[[], ImageReport]) -> None:
        try:
            report = run()
        except DetectorInitError:
            raise
        except Exception as e:
            logger.exception("Failed to process image %s", image_path)
            report = ImageReport(image_path=image_path, error=str(e))
        stats.add(report)
        if progress_callback:
            progress_callback(stats.images_processed + stats.images_failed, stats.images_total)

    if workers <= 1:
        detector = detector_factory()
        for image_path in paths:
            record(image_path, partial(process_image, image_path, output_dir, config, detector, jpeg_quality))
        return stats

    local = threading.local()

    def work(image_path: Path) -> ImageReport:
        if not hasattr(local, "detector"):
            local.detector = detector_factory()
        return process_image(image_path, output_dir, config, local.detector, jpeg_quality)

    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = {executor.submit(work, image_path): image_path for image_path in paths}
        for future in as_completed(futures):
            record(futures[future], future.result)

    return stats


def run_batch(
    image_path_or_dir: Path,
    output_dir: Path,
    config: CropConfig,
    detector_factory: Callable[[], FaceDetector],
    workers: int = 1,
    jpeg_quality: int = 95,
    progress_callback: Callable[[int, int], None] | None = None,
) -> BatchStats:
    """Resolve inputs, create the output directory and process every image.

    Raises:
        FatalIOFailure: If the input path or output directory is unusable
    """
    image_paths = collect_input_paths(image_path_or_dir)
    prepare_output_dir(output_dir)
    return process_batch(
        image_paths,
        output_dir,
        config,
        detector_factory,
        workers=workers,
        jpeg_quality=jpeg_quality,
        progress_callback=progress_callback,
    )
