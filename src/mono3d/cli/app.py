"""CLI application entry point for mono3d.

This module provides the main CLI interface using Typer.
"""

import time
import warnings
from pathlib import Path
from typing import Annotated

import typer
from pydantic import ValidationError

from mono3d import __version__
from mono3d.advisory import request_advice
from mono3d.cli.output import (
    console,
    print_advice,
    print_contour_summary,
    print_error,
    print_header,
    print_image_info,
    print_nothing_to_export,
    print_step,
    print_success,
    print_warning,
)
from mono3d.config import LoggingConfig, MeshSettings, Mono3DSettings, OutputMode
from mono3d.core import MeshPipeline, MeshResult
from mono3d.exceptions import (
    ImageDecodeError,
    MeshBuildError,
    MeshExportError,
    Mono3DError,
)
from mono3d.io import ImageReader, MeshWriter
from mono3d.utils import configure_logging

# Create the Typer app
app = typer.Typer(
    name="mono3d",
    help="Convert images into 3D-printable STL solids.",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]Mono3D[/bold blue] v{__version__}")
        raise typer.Exit()


@app.command()
def convert(
    input_image: Annotated[
        Path,
        typer.Argument(
            help="Path to input image (PNG, JPEG, ...)",
            show_default=False,
        ),
    ],
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Output path (default: {name}-{mode}.stl)",
        ),
    ] = None,
    mode: Annotated[
        str,
        typer.Option(
            "--mode",
            "-m",
            help="Output mode (vector|relief)",
        ),
    ] = "vector",
    resolution: Annotated[
        int,
        typer.Option(
            "--resolution",
            "-r",
            help="Sampling grid size in pixels",
            min=2,
            max=2048,
        ),
    ] = 512,
    threshold: Annotated[
        float,
        typer.Option(
            "--threshold",
            "-t",
            help="Iso-level separating shape from background (0-1)",
            min=0.0,
            max=1.0,
        ),
    ] = 0.15,
    contrast: Annotated[
        float,
        typer.Option(
            "--contrast",
            help="Contrast stretch applied before tracing (1 = off)",
            min=1.0,
        ),
    ] = 8.0,
    simplification: Annotated[
        float,
        typer.Option(
            "--simplification",
            "-s",
            help="Path simplification tolerance in pixels",
            min=0.0,
        ),
    ] = 0.15,
    height: Annotated[
        float,
        typer.Option(
            "--height",
            help="Extrusion height / relief amplitude in mm",
        ),
    ] = 10.0,
    base_thickness: Annotated[
        float,
        typer.Option(
            "--base-thickness",
            help="Base slab thickness / relief offset in mm",
            min=0.0,
        ),
    ] = 2.0,
    base: Annotated[
        bool,
        typer.Option(
            "--base/--no-base",
            help="Add a flat base slab under vector shapes",
        ),
    ] = True,
    invert: Annotated[
        bool,
        typer.Option(
            "--invert",
            "-i",
            help="Treat dark areas as the shape",
        ),
    ] = False,
    world_size: Annotated[
        float,
        typer.Option(
            "--world-size",
            help="Side length of the output footprint in mm",
        ),
    ] = 100.0,
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            help="Trace and report without writing a file",
        ),
    ] = False,
    advise: Annotated[
        bool,
        typer.Option(
            "--advise",
            help="Apply advisory setting suggestions on top of the options",
        ),
    ] = False,
    log_file: Annotated[
        Path | None,
        typer.Option(
            "--log-file",
            help="Write detailed logs to file",
        ),
    ] = None,
    log_level: Annotated[
        str,
        typer.Option(
            "--log-level",
            help="Logging level (DEBUG|INFO|WARNING|ERROR)",
        ),
    ] = "WARNING",
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Verbose console output",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Minimal console output",
        ),
    ] = False,
    _version: Annotated[  # noqa: ARG001
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Convert an image into a 3D-printable STL.

    Vector mode traces the image outline at the threshold, nests the
    contours into solids and holes and extrudes them with vertical walls.
    Relief mode displaces a grid by brightness to make a lithophane.

    Example:
        mono3d logo.png

    This will create logo-vector.stl next to the input image.
    """
    # Validate mutually exclusive options
    if verbose and quiet:
        print_error("Cannot use --verbose and --quiet together")
        raise typer.Exit(code=1)

    # Validate input file exists
    if not input_image.exists():
        print_error(
            f"Input file not found: {input_image}",
            details=f"The file '{input_image}' does not exist or is not accessible.",
        )
        raise typer.Exit(code=1)

    if not input_image.is_file():
        print_error(
            f"Input path is not a file: {input_image}",
            details="Please provide a path to an image file.",
        )
        raise typer.Exit(code=1)

    # Validate mode argument
    try:
        output_mode = OutputMode(mode.lower())
    except ValueError:
        print_error(
            f"Invalid mode: {mode}",
            details="Valid values: vector, relief",
        )
        raise typer.Exit(code=1)

    try:
        settings = Mono3DSettings(
            mesh=MeshSettings(
                height_scale=height,
                base_thickness=base_thickness,
                resolution=resolution,
                invert=invert,
                mask_threshold=threshold,
                contrast=contrast,
                simplification=simplification,
                enable_base=base,
                flat_top=output_mode is OutputMode.VECTOR,
                world_size=world_size,
            ),
            logging=LoggingConfig(
                log_file=log_file,
                log_level=log_level if not quiet else "WARNING",
            ),
        )
    except ValidationError as e:
        print_error("Invalid settings", details=str(e))
        raise typer.Exit(code=1)

    if not quiet:
        print_header(__version__)

    logger = configure_logging(
        log_file=settings.logging.log_file,
        console_level=settings.logging.log_level,
        file_level=settings.logging.file_log_level,
        quiet=quiet,
    )

    try:
        start = time.perf_counter()

        if advise:
            # No advisory client ships, so this yields the default presets
            advice = request_advice(input_image.read_bytes(), client=None)
            settings = settings.model_copy(update={"mesh": advice.apply(settings.mesh)})
            output_mode = settings.mesh.mode
            if not quiet:
                print_step("Advisory suggestions")
                print_advice(advice.summary, advice.use_case, advice.suggested_settings)

        if not quiet:
            print_step("Loading image")

        with ImageReader(input_image, settings.mesh.resolution) as reader:
            pixels = reader.pixels()
            source_size = reader.source_size

        if not quiet:
            print_image_info(str(input_image), source_size, settings.mesh.resolution)
            if output_mode is OutputMode.VECTOR:
                print_step("Tracing contours")
            else:
                print_step("Building relief")

        pipeline = MeshPipeline(settings.mesh, logger=logger)
        with warnings.catch_warnings():
            warnings.simplefilter("ignore")
            result = pipeline.run(pixels)

        if not quiet:
            _print_result_summary(result, verbose)

        if result.is_empty:
            print_nothing_to_export(
                f"No shape found at threshold {settings.mesh.mask_threshold}; "
                "try a lower threshold or --invert."
            )
            raise typer.Exit(code=0)

        if dry_run:
            if not quiet:
                console.print(
                    f"\n[bold green]Dry run complete[/bold green] · "
                    f"{result.mesh.triangle_count:,} triangles, no file written"
                )
            raise typer.Exit(code=0)

        output_path = output or MeshWriter.get_output_path(input_image, output_mode)

        if not quiet:
            print_step("Writing STL")

        MeshWriter(output_path).write(result.mesh)

        if not quiet:
            print_success(
                output_path=str(output_path),
                file_size=_format_file_size(output_path),
                total_time_s=time.perf_counter() - start,
                mode=output_mode.value,
                triangles=result.mesh.triangle_count,
                stage_ms=result.stats.stage_ms if verbose else None,
            )

    except ImageDecodeError as e:
        print_error(f"Could not load image: {e.reason}")
        raise typer.Exit(code=1)
    except MeshBuildError as e:
        print_error(f"Could not build mesh: {e.reason}")
        raise typer.Exit(code=1)
    except MeshExportError as e:
        print_error(f"Could not save mesh: {e.reason}")
        raise typer.Exit(code=1)
    except Mono3DError as e:
        print_error(str(e))
        raise typer.Exit(code=1)
    except typer.Exit:
        # Re-raise typer.Exit to allow clean exits
        raise
    except Exception as e:
        print_error(f"Unexpected error: {e}")
        raise typer.Exit(code=1)


def _print_result_summary(result: MeshResult, verbose: bool) -> None:
    """Print contour or relief statistics for a finished run."""
    stats = result.stats
    if result.mode is OutputMode.VECTOR:
        print_contour_summary(
            loops=stats.loops_traced,
            kept=stats.loops_kept,
            polygons=stats.polygon_count,
            holes=stats.hole_count,
            dropped=stats.dropped_holes,
            verbose=verbose,
            reduction=stats.reduction_ratio,
        )
    else:
        console.print(f"  {result.mesh.triangle_count:,} triangles")

    for message in stats.warnings:
        print_warning(message)


def _format_file_size(path: Path) -> str:
    """Format file size in human-readable form.

    Args:
        path: Path to file

    Returns:
        Human-readable file size (e.g., "428 KB")
    """
    try:
        size_bytes = path.stat().st_size
        if size_bytes < 1024:
            return f"{size_bytes} B"
        elif size_bytes < 1024 * 1024:
            return f"{size_bytes / 1024:.0f} KB"
        else:
            return f"{size_bytes / (1024 * 1024):.1f} MB"
    except OSError:
        return "unknown"


def cli() -> None:
    """Entry point for the CLI application."""
    app()


def main() -> None:
    """Entry point for the CLI application (alias for cli)."""
    cli()


if __name__ == "__main__":
    cli()
