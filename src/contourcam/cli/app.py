"""CLI application entry point for contourcam.

This module provides the main CLI interface using Typer.
"""

import os
from pathlib import Path
from typing import Annotated

import typer

from contourcam import __version__
from contourcam.cli.output import (
    console,
    create_progress,
    print_cancellation_notice,
    print_error,
    print_fab_info,
    print_header,
    print_preview_result,
    print_processing_info,
    print_step,
    print_summary,
    print_warning,
)
from contourcam.config import (
    ContourCamSettings,
    LoggingConfig,
    ProcessingConfig,
    load_fab_config,
)
from contourcam.core.processor import JobProcessor, build_contours
from contourcam.exceptions import ConfigError, ContourCamError, SvgLoadError
from contourcam.io import SvgReader, render_preview, save_preview
from contourcam.utils import configure_logging

# Create the Typer app
app = typer.Typer(
    name="contourcam",
    help="Turn SVG artwork into merged contours and G-code for a CNC router.",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]contourcam[/bold blue] v{__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
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
    """Turn SVG artwork into merged contours and G-code for a CNC router."""


@app.command()
def run(
    config_file: Annotated[
        Path,
        typer.Argument(
            help="Path to the YAML fabrication file",
            show_default=False,
        ),
    ],
    workers: Annotated[
        int | None,
        typer.Option(
            "--workers",
            "-j",
            help="Number of parallel workers (default: auto)",
            min=1,
        ),
    ] = None,
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
) -> None:
    """Run every job of a fabrication file.

    Each job reads its SVG artwork, merges the grown shapes into contours
    (or collects circles as holes) and writes a G-code program and an SVG
    preview to the output directory.

    Example:
        contourcam run panel.yaml

    This will write out/panel-<job>.nc and out/panel-<job>.svg for every job.
    """
    # Validate mutually exclusive options
    if verbose and quiet:
        print_error("Cannot use --verbose and --quiet together")
        raise typer.Exit(code=1)

    if not config_file.is_file():
        print_error(
            f"Configuration file not found: {config_file}",
            details=f"The file '{config_file}' does not exist or is not accessible.",
        )
        raise typer.Exit(code=1)

    if not quiet:
        print_header(__version__)

    settings = ContourCamSettings(
        processing=ProcessingConfig(
            max_workers=workers,
        ),
        logging=LoggingConfig(
            log_file=log_file,
            log_level=log_level if not quiet else "ERROR",
        ),
    )

    try:
        if not quiet:
            print_step("Loading configuration")

        fab = load_fab_config(config_file)

        if not quiet:
            print_fab_info(
                config_path=str(config_file),
                name=fab.name,
                job_count=len(fab.jobs),
                outdir=str(fab.outdir),
            )
            actual_workers = min(workers or os.cpu_count() or 1, len(fab.jobs))
            print_step("Processing")
            print_processing_info(actual_workers, is_auto=(workers is None))

        processor = JobProcessor(settings, quiet=quiet)

        try:
            if not quiet:
                with create_progress() as progress:
                    task_id = progress.add_task(
                        f"Processing {len(fab.jobs)} jobs",
                        total=len(fab.jobs),
                    )

                    def update_progress(completed: int, *_: object) -> None:
                        progress.update(task_id, completed=completed)

                    stats = processor.process(
                        fab,
                        max_workers=workers,
                        progress_callback=update_progress,
                    )
            else:
                stats = processor.process(fab, max_workers=workers)
        except KeyboardInterrupt:
            if not quiet:
                print_cancellation_notice()
            raise typer.Exit(code=130) from None  # Standard Unix SIGINT exit code

        if not quiet:
            print_summary(stats, verbose=verbose)

        if stats.error_count:
            raise typer.Exit(code=1)

    except ConfigError as e:
        print_error(f"Invalid configuration: {e.reason}")
        raise typer.Exit(code=1)
    except ContourCamError as e:
        print_error(str(e))
        raise typer.Exit(code=1)
    except typer.Exit:
        # Re-raise typer.Exit to allow clean exits
        raise
    except Exception as e:
        print_error(f"Unexpected error: {e}")
        raise typer.Exit(code=1)


@app.command()
def preview(
    input_svg: Annotated[
        Path,
        typer.Argument(
            help="Path to input SVG artwork",
            show_default=False,
        ),
    ],
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Output path (default: {name}-preview.svg)",
        ),
    ] = None,
    offset: Annotated[
        float,
        typer.Option(
            "--offset",
            help="Grow every shape by this distance before merging",
            min=0.0,
        ),
    ] = 0.0,
    resolution: Annotated[
        float,
        typer.Option(
            "--resolution",
            "-r",
            help="Maximum arc length per tessellated segment",
            min=0.001,
        ),
    ] = 0.1,
    log_file: Annotated[
        Path | None,
        typer.Option(
            "--log-file",
            help="Write detailed logs to file",
        ),
    ] = None,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Minimal console output",
        ),
    ] = False,
) -> None:
    """Merge the shapes of one SVG file and write a preview of the contours.

    Example:
        contourcam preview logo.svg --offset 1.5

    This will create logo-preview.svg showing the original shapes, the merged
    contours and any edges that could not be merged.
    """
    if not input_svg.is_file():
        print_error(
            f"Input file not found: {input_svg}",
            details=f"The file '{input_svg}' does not exist or is not accessible.",
        )
        raise typer.Exit(code=1)

    actual_output_path = output or input_svg.with_name(f"{input_svg.stem}-preview.svg")

    configure_logging(log_file=log_file, console_level="ERROR", quiet=True)

    try:
        if not quiet:
            print_header(__version__)
            print_step("Reading artwork")

        primitives = SvgReader(input_svg).load()
        shapes, errors = primitives.shapes(resolution)
        errors = [*primitives.errors, *errors]

        if not quiet:
            for source, reason in errors:
                print_warning(f"{source}: {reason}")
            print_step("Merging contours")

        repository, originals = build_contours(shapes, offset)
        document = render_preview(
            repository.contours,
            repository.problems,
            originals,
            primitives.holes(),
        )
        save_preview(document, actual_output_path)

        if not quiet:
            print_preview_result(
                output_path=str(actual_output_path),
                contours=len(repository),
                problems=len(repository.problems),
                errors=len(errors),
            )

    except SvgLoadError as e:
        print_error(f"Could not load SVG: {e.reason}")
        raise typer.Exit(code=1)
    except ContourCamError as e:
        print_error(str(e))
        raise typer.Exit(code=1)
    except Exception as e:
        print_error(f"Unexpected error: {e}")
        raise typer.Exit(code=1)


def cli() -> None:
    """Entry point for the CLI application."""
    app()


def main() -> None:
    """Entry point for the CLI application (alias for cli)."""
    cli()


if __name__ == "__main__":
    cli()
