"""Job orchestration: from SVG artwork to G-code and preview files.

This module resolves machining parameters for each job kind, runs the
geometry pipeline and writes the results. Jobs are independent, so several
of them can run in worker processes.

Key components:
- resolve_job: Offset, passes and holes for a job and its bit
- build_contours: Grow shapes and merge them in a ContourRepository
- process_job: Top-level picklable function for parallel execution
- JobProcessor: Main orchestrator class for a fabrication file
"""

import time
import traceback
from collections.abc import Callable
from concurrent.futures import ProcessPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from pydantic import TypeAdapter

from contourcam.config import (
    BitShape,
    BoreJob,
    ContourCamSettings,
    CutJob,
    DrillJob,
    EngraveJob,
    FabConfig,
    JobConfig,
    SharedConfig,
)
from contourcam.core.contour import Contour
from contourcam.core.repository import ContourRepository
from contourcam.core.shape import Shape
from contourcam.core.toolpath import depth_schedule, plan_boring, plan_contours, plan_drilling
from contourcam.domain import EPSILON, Edge, Hole, MotionCommand, Point
from contourcam.exceptions import JobConfigError
from contourcam.io import GCodeWriter, SvgReader, render_preview
from contourcam.utils import JobLogger, JobStats, configure_logging

_JOB_ADAPTER: TypeAdapter[JobConfig] = TypeAdapter(JobConfig)


def job_label(job: JobConfig, index: int) -> str:
    """Name used for a job's output files and log records."""
    return job.name or f"{index + 1}-{job.kind}"


@dataclass
class JobPlan:
    """Machining parameters resolved for one job.

    Attributes:
        offset: Distance every shape is grown by before merging
        depths: Pass depths for contour jobs, empty for hole jobs
        uses_contours: Whether the job machines merged contours
    """

    offset: float = 0.0
    depths: list[float] = field(default_factory=list)
    uses_contours: bool = True


def resolve_job(job: JobConfig, label: str = "job") -> JobPlan:
    """Resolve the machining parameters of a job for its bit.

    Raises:
        JobConfigError: If the bit cannot perform the job
    """
    bit = job.bit
    if isinstance(job, EngraveJob):
        if bit.shape is not BitShape.V:
            raise JobConfigError(label, "engraving needs a v bit")
        return JobPlan(offset=job.offset, depths=[job.depth])

    if bit.shape is not BitShape.SQUARE or bit.radius is None:
        raise JobConfigError(label, f"{job.kind} needs a square bit with a radius")

    if isinstance(job, CutJob):
        return JobPlan(offset=bit.radius, depths=depth_schedule(job.depth, job.depth_per_pass))
    return JobPlan(uses_contours=False)


def build_contours(
    shapes: list[Shape], offset: float
) -> tuple[ContourRepository, list[list[Point]]]:
    """Grow every shape and merge the results.

    Args:
        shapes: Shapes to machine, grown in place
        offset: Tool-compensation offset

    Returns:
        Tuple of (repository after merge_all, outlines of the shapes before growth)
    """
    originals = [shape.boundary() for shape in shapes]
    repository = ContourRepository()
    for shape in shapes:
        shape.grow(offset)
        repository.add(Contour.from_shape(shape))
    repository.merge_all()
    return repository, originals


def select_holes(
    holes: list[Hole], job: DrillJob | BoreJob, bit_radius: float
) -> tuple[list[Hole], list[tuple[str, str]]]:
    """Filter circles by the job's radius range and fit them to the bit.

    Drilled holes take the bit radius. Bored holes keep their radius and must
    be wider than the bit; narrower ones are reported as errors.

    Returns:
        Tuple of (holes to machine, (source, reason) errors)
    """
    selected: list[Hole] = []
    errors: list[tuple[str, str]] = []
    for hole in holes:
        if not job.accepts(hole.radius):
            continue
        if isinstance(job, DrillJob):
            selected.append(Hole(center=hole.center, radius=bit_radius))
        elif hole.radius - bit_radius <= EPSILON:
            errors.append(
                (
                    f"circle at ({hole.center.x:g}, {hole.center.y:g})",
                    f"radius {hole.radius:g} is too small to bore with a bit of radius {bit_radius:g}",
                )
            )
        else:
            selected.append(hole)
    return selected, errors


def process_job(
    job_dict: dict[str, Any],
    shared_dict: dict[str, Any],
    label: str = "job",
) -> dict[str, Any]:
    """Run one job from artwork to program text.

    Top-level function designed to be picklable for use with ProcessPoolExecutor.
    Validates the job, reads its SVG, builds toolpaths and renders the outputs.

    Args:
        job_dict: Serialized job (from model_dump())
        shared_dict: Serialized shared configuration
        label: Job name for reporting

    Returns:
        Dictionary containing either:
        - Success: {"gcode": str, "preview": str, "contours": int, "holes": int,
          "problems": int, "shape_errors": [(source, reason)], "duration_ms": float}
        - Error: {"error": str, "job": str, "traceback": str, "duration_ms": float}
    """
    start_time = time.time()

    try:
        job = _JOB_ADAPTER.validate_python(job_dict)
        shared = SharedConfig(**shared_dict)
        plan = resolve_job(job, label)

        primitives = SvgReader(job.input, curve_tolerance=shared.curve_tolerance).load()
        shape_errors = list(primitives.errors)

        contours: list[Contour] = []
        problems: list[Edge] = []
        originals: list[list[Point]] = []
        holes: list[Hole] = []

        if plan.uses_contours:
            shapes, errors = primitives.shapes(shared.resolution)
            shape_errors.extend(errors)
            repository, originals = build_contours(shapes, plan.offset)
            contours = repository.contours
            problems = repository.problems
            loops = [loop for contour in contours for loop in contour.loops()]
            commands = plan_contours(loops, plan.depths, job.feed, job.rpm, shared.safe_height)
        else:
            bit_radius = job.bit.radius or 0.0
            holes, errors = select_holes(primitives.holes(), job, bit_radius)
            shape_errors.extend(errors)
            commands = _plan_holes(job, holes, bit_radius, shared.safe_height)

        duration_ms = (time.time() - start_time) * 1000
        return {
            "gcode": GCodeWriter().render(commands) + "\n",
            "preview": render_preview(contours, problems, originals, holes),
            "contours": len(contours),
            "holes": len(holes),
            "problems": len(problems),
            "shape_errors": shape_errors,
            "duration_ms": duration_ms,
        }

    except Exception as e:
        duration_ms = (time.time() - start_time) * 1000
        tb = traceback.format_exc()
        return {
            "error": str(e),
            "job": label,
            "traceback": tb,
            "duration_ms": duration_ms,
        }


def _plan_holes(
    job: DrillJob | BoreJob, holes: list[Hole], bit_radius: float, safe_height: float
) -> list[MotionCommand]:
    if isinstance(job, BoreJob):
        return plan_boring(
            holes, job.depth, job.depth_per_turn, bit_radius, job.feed, job.rpm, safe_height
        )
    return plan_drilling(holes, job.depth, job.feed, job.rpm, safe_height)


class JobProcessor:
    """Orchestrates the jobs of a fabrication file.

    Manages the complete workflow:
    1. Serialize every job with the shared settings
    2. Run the jobs, in worker processes when more than one worker is allowed
    3. Write <outdir>/<name>-<job>.nc and .svg for every successful job
    4. Collect results and update statistics

    Example:
        settings = ContourCamSettings()
        processor = JobProcessor(settings)
        stats = processor.process(load_fab_config(Path("panel.yaml")), max_workers=4)
    """

    def __init__(self, config: ContourCamSettings, quiet: bool = False) -> None:
        """Initialize job processor with configuration.

        Args:
            config: Application settings containing processing and logging config
            quiet: Suppress console log output
        """
        self.config = config
        self.logger = configure_logging(
            log_file=config.logging.log_file,
            console_level=config.logging.log_level,
            file_level=config.logging.file_log_level,
            quiet=quiet,
        )
        self.job_logger = JobLogger(self.logger)

    def process(
        self,
        fab: FabConfig,
        max_workers: int | None = None,
        progress_callback: Callable[[int, int, str, bool], None] | None = None,
    ) -> JobStats:
        """Run every job of a fabrication file.

        Args:
            fab: Loaded fabrication file, paths already resolved
            max_workers: Maximum worker processes (None = config default)
            progress_callback: Optional callback(completed, total, job_name, success)
                for progress updates

        Returns:
            JobStats with counts, timing, and error details

        Raises:
            KeyboardInterrupt: If processing is cancelled by user
        """
        stats = self.job_logger.stats
        stats.start_time = time.time()

        if max_workers is None:
            max_workers = self.config.processing.max_workers

        shared_dict = fab.shared.model_dump()
        tasks = {
            job_label(job, index): job.model_dump(mode="json")
            for index, job in enumerate(fab.jobs)
        }

        self.logger.info(
            "Starting fabrication",
            name=fab.name,
            jobs=len(tasks),
            outdir=str(fab.outdir),
            max_workers=max_workers,
        )

        total = len(tasks)
        completed = 0

        if max_workers == 1 or total == 1:
            for label, job_dict in tasks.items():
                self.job_logger.log_job_start(label, job_dict["kind"])
                result = process_job(job_dict, shared_dict, label)
                success = self._handle_result(fab, label, result)
                completed += 1
                if progress_callback is not None:
                    progress_callback(completed, total, label, success)
        else:
            self._process_parallel(
                fab, tasks, shared_dict, max_workers, progress_callback
            )

        stats.end_time = time.time()

        self.logger.info(
            "Fabrication complete",
            processed=stats.processed_count,
            errors=stats.error_count,
            contours=stats.contours,
            holes=stats.holes,
            problems=stats.problems,
            duration_seconds=round(stats.duration_seconds, 2),
        )

        return stats

    def _process_parallel(
        self,
        fab: FabConfig,
        tasks: dict[str, dict[str, Any]],
        shared_dict: dict[str, Any],
        max_workers: int | None,
        progress_callback: Callable[[int, int, str, bool], None] | None,
    ) -> None:
        total = len(tasks)
        completed = 0
        pending_futures: dict = {}

        with ProcessPoolExecutor(max_workers=max_workers) as executor:
            for label, job_dict in tasks.items():
                self.job_logger.log_job_start(label, job_dict["kind"])
                future = executor.submit(process_job, job_dict, shared_dict, label)
                pending_futures[future] = label

            try:
                for future in as_completed(pending_futures):
                    label = pending_futures.pop(future)
                    success = False

                    try:
                        success = self._handle_result(fab, label, future.result())
                    except Exception as e:
                        # Executor-level error
                        self.job_logger.log_job_error(label, e, traceback.format_exc())

                    completed += 1
                    if progress_callback is not None:
                        progress_callback(completed, total, label, success)

            except KeyboardInterrupt:
                self.logger.info("Cancellation requested by user")
                for f in pending_futures:
                    f.cancel()
                executor.shutdown(wait=True, cancel_futures=True)
                raise

    def _handle_result(self, fab: FabConfig, label: str, result: dict[str, Any]) -> bool:
        if "error" in result:
            self.job_logger.log_job_error(
                label, result["error"], traceback=result.get("traceback")
            )
            return False

        for source, reason in result["shape_errors"]:
            self.job_logger.log_shape_error(label, source, reason)
        self.job_logger.log_problems(label, result["problems"])

        self._save(fab, label, "nc", result["gcode"])
        self._save(fab, label, "svg", result["preview"])

        self.job_logger.log_job_complete(
            label,
            contours=result["contours"],
            holes=result["holes"],
            duration_ms=result.get("duration_ms", 0.0),
        )
        return True

    def _save(self, fab: FabConfig, label: str, suffix: str, text: str) -> None:
        path = output_path(fab, label, suffix)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        self.job_logger.log_output(label, path)


def output_path(fab: FabConfig, label: str, suffix: str) -> Path:
    """Output file of a job: <outdir>/<name>-<job>.<suffix>."""
    return fab.outdir / f"{fab.name}-{label}.{suffix}"
