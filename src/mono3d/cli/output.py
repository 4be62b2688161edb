"""Rich console output helpers for the CLI.

This module provides user-friendly console output using Rich library
with formatted step, summary and error messages.
"""

from rich.console import Console
from rich.text import Text

console = Console()

# Unicode symbols for consistent visual language
SYM_STEP = "▸"  # Step indicator
SYM_OK = "✓"  # Success
SYM_ERR = "✗"  # Error
SYM_WARN = "!"  # Warning
SYM_DOT = "·"  # Separator/secondary info


def print_header(version: str) -> None:
    """Print application header.

    Args:
        version: Application version string
    """
    console.print(f"\n[bold]Mono3D[/bold] v{version}")
    console.print("─" * 44)


def print_step(message: str) -> None:
    """Print a processing step indicator.

    Args:
        message: Step description message
    """
    console.print(f"\n{SYM_STEP} {message}")


def print_image_info(image_path: str, source_size: tuple[int, int], resolution: int) -> None:
    """Print image information.

    Args:
        image_path: Path to the image file
        source_size: Original (width, height) in pixels
        resolution: Working grid resolution
    """
    # Use Text to safely handle paths with special characters
    line1 = Text("  ")
    line1.append(image_path)
    console.print(line1)
    width, height = source_size
    console.print(f"  {width}×{height} px {SYM_DOT} sampled at {resolution}×{resolution}")


def print_advice(summary: str, use_case: str, suggested: dict[str, object]) -> None:
    """Print the advisory suggestion applied to the settings.

    Args:
        summary: Rationale from the advisory service
        use_case: Detected use case
        suggested: Setting overrides that were applied
    """
    line = Text(f"  {use_case} {SYM_DOT} ")
    line.append(summary)
    console.print(line)
    if suggested:
        overrides = f" {SYM_DOT} ".join(f"{name}={value}" for name, value in suggested.items())
        console.print(Text(f"  {overrides}", style="dim"))


def print_contour_summary(
    loops: int,
    kept: int,
    polygons: int,
    holes: int,
    dropped: int,
    verbose: bool,
    reduction: float = 0.0,
) -> None:
    """Print tracing and nesting results.

    Args:
        loops: Loops traced
        kept: Loops surviving simplification
        polygons: Solid polygons
        holes: Attached holes
        dropped: Holes without an enclosing solid
        verbose: Whether to show simplification details
        reduction: Fraction of points removed by simplification
    """
    console.print(
        f"  [green]{polygons}[/green] solids {SYM_DOT} {holes} holes {SYM_DOT} {loops} loops"
    )
    if dropped:
        console.print(f"  [yellow]{dropped} orphan holes dropped[/yellow]")
    if verbose:
        console.print(f"  {kept} loops kept {SYM_DOT} {reduction:.0%} points simplified away")


def print_warning(message: str) -> None:
    """Print a non-fatal warning."""
    console.print(f"  [yellow]{SYM_WARN} {message}[/yellow]")


def _format_time(seconds: float) -> str:
    """Format seconds into human-readable time string."""
    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    elif seconds < 60:
        return f"{seconds:.1f}s"
    else:
        mins = int(seconds // 60)
        secs = seconds % 60
        return f"{mins}m {secs:.1f}s"


def print_success(
    output_path: str,
    file_size: str,
    total_time_s: float,
    mode: str,
    triangles: int,
    stage_ms: dict[str, float] | None = None,
) -> None:
    """Print success message with summary.

    Args:
        output_path: Path to output file
        file_size: Human-readable file size string
        total_time_s: Total processing time in seconds
        mode: Output mode name
        triangles: Number of triangles written
        stage_ms: Optional per-stage timings in milliseconds
    """
    time_str = _format_time(total_time_s)

    console.print(f"\n[bold green]{SYM_OK} Complete[/bold green] in {time_str}")

    line = Text("  ")
    line.append(output_path, style="bold")
    line.append(f" ({file_size})")
    console.print(line)

    console.print(f"  {mode} mode {SYM_DOT} {triangles:,} triangles")

    if stage_ms:
        timing_str = f" {SYM_DOT} ".join(f"{name} {ms:.1f}ms" for name, ms in stage_ms.items())
        console.print(f"  {timing_str}")


def print_nothing_to_export(reason: str) -> None:
    """Print the empty-result notice."""
    console.print(f"\n{SYM_DOT} [bold]Nothing to export[/bold]")
    console.print(f"  {reason}")


def print_error(message: str, details: str | None = None) -> None:
    """Print error message.

    Args:
        message: Main error message
        details: Optional detailed error information
    """
    console.print(f"\n[bold red]{SYM_ERR} Error:[/bold red] {message}")
    if details:
        console.print(f"  {details}")
