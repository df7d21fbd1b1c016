"""Command-line interface for facecrop."""

import logging
from functools import partial
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskProgressColumn,
    TextColumn,
)
from rich.table import Table

from . import __version__
from .detection import HaarCascadeDetector
from .errors import DetectorInitError, FatalIOFailure
from .logging_utils import configure_logging
from .models import CropConfig, CropStrategy, DiscardReason
from .pipeline import BatchStats, run_batch
from .settings import get_settings

app = typer.Typer(
    name="facecrop",
    help=(
        "Extract crops of all faces within an image (.png|.jpeg|.jpg) or directory of images. "
        "Crops are either absolute (pixels) or relative to the face size, and can be "
        "resized and/or filtered by size."
    ),
    context_settings={"help_option_names": ["-h", "--help"]},
    add_completion=False,
)

console = Console(stderr=True)
logger = logging.getLogger(__name__)


def version_callback(value: bool) -> None:
    """Print version and exit if --version flag is provided."""
    if value:
        typer.echo(f"facecrop version {__version__}")
        raise typer.Exit()


def print_stats(stats: BatchStats) -> None:
    """Print a summary table of a batch run."""
    table = Table(title="Summary", show_header=True, header_style="bold cyan")
    table.add_column("Item", style="dim")
    table.add_column("Count", justify="right")

    table.add_row("Images found", str(stats.images_total))
    table.add_row("Images processed", str(stats.images_processed))
    table.add_row("Images failed", str(stats.images_failed))
    table.add_row("Images without faces", str(stats.images_without_faces))
    table.add_row("Faces detected", str(stats.faces_detected))
    table.add_row("Crops written", str(stats.crops_written))
    for reason in DiscardReason:
        table.add_row(f"Faces skipped ({reason.value})", str(stats.faces_discarded.get(reason, 0)))
    table.add_row("Write failures", str(stats.write_failures))

    console.print(table)
    for image_path in stats.failed_images:
        console.print(f"  [red]✗[/red] {image_path}")


@app.command()
def crop(
    image_path_or_dir: Path = typer.Argument(
        ...,
        help="Path to the image file or directory to process",
    ),
    output_dir: Path = typer.Argument(
        ...,
        help="Path to write output files to",
    ),
    strategy: CropStrategy = typer.Option(
        CropStrategy.RELATIVE,
        "--strategy",
        "-s",
        case_sensitive=False,
        help="Crop strategy: 'absolute' (pixels) or 'relative' (to face size)",
    ),
    aspect_ratio: float = typer.Option(
        1.0,
        "--aspect_ratio",
        "--aspect-ratio",
        "-a",
        help="Width:height ratio of the crop. 1.0 is square, 1.5 is 1.5 times as wide as tall",
    ),
    top_padding: float = typer.Option(
        0.1,
        "--top-padding",
        "-t",
        help="Fraction of the crop height (0.0-1.0) to pad above the face",
    ),
    proportion_of_face: float = typer.Option(
        0.3,
        "--proportion-of-face",
        "-p",
        help="Fraction of the crop height (0.0-1.0) the face should take up (relative strategy)",
    ),
    height: int = typer.Option(
        1024,
        "--height",
        help="Crop height for the absolute strategy; resize and filter target otherwise",
    ),
    width: int = typer.Option(
        1024,
        "--width",
        help="Crop width for the absolute strategy; resize and filter target otherwise",
    ),
    resize: bool = typer.Option(
        False,
        "--resize",
        "-r",
        help="Resize each crop to --width x --height",
    ),
    filter_by_size: bool = typer.Option(
        False,
        "--filter-by-size",
        "-f",
        help="Skip crops smaller than --width x --height (checked before resizing)",
    ),
    workers: int | None = typer.Option(
        None,
        "--workers",
        "-j",
        min=1,
        help="Number of images to process in parallel (default: FACECROP_WORKERS or 1)",
    ),
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase log verbosity (repeatable)",
    ),
    version: bool | None = typer.Option(
        None,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """Detect faces and write one crop per face.

    \b
    Example (face fills 30% of a square crop):
        facecrop ./photos ./crops

    \b
    Example (fixed 512x768 crops, drop anything smaller):
        facecrop ./photos ./crops -s absolute --width 512 --height 768 -f
    """
    configure_logging(verbose, console=console)
    settings = get_settings()
    workers = workers or settings.workers

    try:
        config = CropConfig(
            strategy=strategy,
            aspect_ratio=aspect_ratio,
            top_padding=top_padding,
            proportion_of_face=proportion_of_face,
            target_height=height,
            target_width=width,
            resize=resize,
            filter_by_size=filter_by_size,
        )
    except ValidationError as e:
        console.print("[red]Error:[/red] Invalid crop parameters")
        for error in e.errors():
            field = ".".join(str(part) for part in error["loc"])
            console.print(f"  {field}: {error['msg']}")
        raise typer.Exit(1) from None

    console.print("[bold cyan]Face Cropping[/bold cyan]")
    console.print(f"Input: {image_path_or_dir}")
    console.print(f"Output: {output_dir}")
    console.print(f"Strategy: {config.strategy.value}")
    if config.strategy is CropStrategy.RELATIVE:
        console.print(f"Aspect ratio: {config.aspect_ratio}, proportion of face: {config.proportion_of_face}")
    console.print(f"Top padding: {config.top_padding}")
    console.print(f"Target size: {config.target_width}×{config.target_height}")
    console.print(f"Resize: {config.resize}, filter by size: {config.filter_by_size}, workers: {workers}")
    console.print()
    logger.debug("Running with %s", config.model_dump())

    try:
        detector_factory = partial(HaarCascadeDetector.from_settings, settings)

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            console=console,
        ) as progress:
            task = progress.add_task("Cropping faces...", total=None)

            def update_progress(current: int, total: int) -> None:
                progress.update(task, completed=current, total=total)

            stats = run_batch(
                image_path_or_dir,
                output_dir,
                config,
                detector_factory,
                workers=workers,
                jpeg_quality=settings.jpeg_quality,
                progress_callback=update_progress,
            )

    except (FatalIOFailure, DetectorInitError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from None

    console.print(f"[green]✓[/green] Wrote {stats.crops_written} crops to {output_dir}")
    print_stats(stats)


if __name__ == "__main__":
    app()
