"""Rich console output helpers for the CLI.

This module provides user-friendly console output using Rich library
with progress bars, tables, and formatted messages.
"""


from rich.console import Console
from rich.progress import (
    BarColumn,
    Progress,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)
from rich.table import Table
from rich.text import Text

from contourcam.utils import JobStats

console = Console()

# Unicode symbols for consistent visual language
SYM_STEP = "▸"  # Step indicator
SYM_OK = "✓"  # Success
SYM_ERR = "✗"  # Error
SYM_WARN = "!"  # Warning
SYM_DOT = "·"  # Separator/secondary info


def create_progress() -> Progress:
    """Create a rich progress bar for job processing.

    Returns:
        Configured Progress instance with bar and time elapsed.
    """
    return Progress(
        TextColumn("  "),
        BarColumn(bar_width=40, complete_style="green", finished_style="green"),
        TaskProgressColumn(),
        TimeElapsedColumn(),
        console=console,
        transient=False,
    )


def print_header(version: str) -> None:
    """Print application header.

    Args:
        version: Application version string
    """
    console.print(f"\n[bold]contourcam[/bold] v{version}")
    console.print("─" * 44)


def print_step(message: str) -> None:
    """Print a processing step indicator.

    Args:
        message: Step description message
    """
    console.print(f"\n{SYM_STEP} {message}")


def print_fab_info(config_path: str, name: str, job_count: int, outdir: str) -> None:
    """Print fabrication file information."""
    # Use Text to safely handle paths with special characters
    line1 = Text("  ")
    line1.append(config_path)
    line1.append(f" ({name})")
    console.print(line1)
    line2 = Text(f"  {job_count} jobs {SYM_DOT} output to ")
    line2.append(outdir)
    console.print(line2)


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


def print_processing_info(workers: int, is_auto: bool = False) -> None:
    """Print processing configuration.

    Args:
        workers: Number of parallel workers
        is_auto: Whether the count was auto-detected
    """
    auto_suffix = " (auto)" if is_auto else ""
    console.print(f"  {workers} workers{auto_suffix} {SYM_DOT} Ctrl+C to cancel")


def print_summary(stats: JobStats, verbose: bool = False) -> None:
    """Print run summary with totals and per-job errors.

    Args:
        stats: Statistics of the finished run
        verbose: Whether to list every written file
    """
    time_str = _format_time(stats.duration_seconds)

    if stats.error_count:
        console.print(f"\n[bold yellow]{SYM_WARN} Finished with errors[/bold yellow] in {time_str}")
    else:
        console.print(f"\n[bold green]{SYM_OK} Complete[/bold green] in {time_str}")

    error_style = "red" if stats.error_count > 0 else "green"
    problem_style = "yellow" if stats.problems > 0 else "green"
    console.print(
        f"  {stats.processed_count} jobs {SYM_DOT} {stats.contours} contours {SYM_DOT} "
        f"{stats.holes} holes {SYM_DOT} "
        f"[{problem_style}]{stats.problems} unmerged edges[/{problem_style}] {SYM_DOT} "
        f"{stats.shape_errors} skipped shapes {SYM_DOT} "
        f"[{error_style}]{stats.error_count} errors[/{error_style}]"
    )

    if stats.errors:
        table = Table(show_header=True, header_style="bold", box=None, padding=(0, 2))
        table.add_column("Job")
        table.add_column("Error", style="red")
        for job_name, message in stats.errors:
            table.add_row(job_name, message)
        console.print(table)

    if verbose:
        for path in stats.outputs:
            line = Text("  ")
            line.append(str(path), style="bold")
            console.print(line)


def print_preview_result(output_path: str, contours: int, problems: int, errors: int) -> None:
    """Print the outcome of a preview run."""
    line = Text("  ")
    line.append(output_path, style="bold")
    console.print(f"\n[bold green]{SYM_OK} Preview written[/bold green]")
    console.print(line)
    problem_style = "yellow" if problems > 0 else "green"
    console.print(
        f"  {contours} contours {SYM_DOT} "
        f"[{problem_style}]{problems} unmerged edges[/{problem_style}] {SYM_DOT} "
        f"{errors} skipped shapes"
    )


def print_warning(message: str) -> None:
    """Print a non-fatal warning."""
    console.print(f"  [yellow]{SYM_WARN}[/yellow] {message}")


def print_error(message: str, details: str | None = None) -> None:
    """Print error message.

    Args:
        message: Main error message
        details: Optional detailed error information
    """
    console.print(f"\n[bold red]{SYM_ERR} Error:[/bold red] {message}")
    if details:
        console.print(f"  {details}")


def print_cancellation_notice() -> None:
    """Print cancellation acknowledgment."""
    console.print(f"\n{SYM_DOT} Cancelling... waiting for in-progress jobs")
