"""Logging utilities for contourcam."""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

import structlog


@dataclass
class JobStats:
    """Statistics from a fabrication run."""

    processed_count: int = 0
    error_count: int = 0
    contours: int = 0
    holes: int = 0
    problems: int = 0
    shape_errors: int = 0
    outputs: list[Path] = field(default_factory=list)
    errors: list[tuple[str, str]] = field(default_factory=list)
    start_time: float | None = None
    end_time: float | None = None

    @property
    def duration_seconds(self) -> float:
        """Calculate processing duration."""
        if self.start_time and self.end_time:
            return self.end_time - self.start_time
        return 0.0


_installed_handlers: list[logging.Handler] = []


def configure_logging(
    log_file: Path | None = None,
    console_level: str = "INFO",
    file_level: str = "DEBUG",
    quiet: bool = False,
) -> structlog.stdlib.BoundLogger:
    """Configure dual-output structured logging.

    Args:
        log_file: Path to log file (auto-generated if None)
        console_level: Logging level for console output
        file_level: Logging level for file output
        quiet: If True, suppress console output

    Returns:
        Configured structlog logger
    """
    if log_file is None:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = Path(f"contourcam_{timestamp}.log")

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(getattr(logging, file_level.upper()))
    file_handler.setFormatter(
        logging.Formatter("%(asctime)s | %(levelname)-8s | %(name)s | %(message)s")
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    # Reconfiguring replaces the handlers installed by the previous call
    while _installed_handlers:
        old = _installed_handlers.pop()
        root_logger.removeHandler(old)
        old.close()

    handlers: list[logging.Handler] = [file_handler]
    if not quiet:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(getattr(logging, console_level.upper()))
        console_handler.setFormatter(logging.Formatter("%(message)s"))
        handlers.append(console_handler)

    for handler in handlers:
        root_logger.addHandler(handler)
    _installed_handlers.extend(handlers)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logger = structlog.get_logger("contourcam")
    logger.info("Logging initialized", log_file=str(log_file), level=file_level)

    return logger


class JobLogger:
    """Logger for tracking job progress and statistics."""

    def __init__(self, logger: structlog.stdlib.BoundLogger) -> None:
        self._logger = logger
        self._stats = JobStats()

    def log_job_start(self, job_name: str, kind: str) -> None:
        """Log start of a job."""
        self._logger.debug("Processing job", job=job_name, kind=kind)

    def log_job_complete(
        self,
        job_name: str,
        contours: int,
        holes: int,
        duration_ms: float,
    ) -> None:
        """Log successful job processing."""
        self._logger.info(
            "Job processed",
            job=job_name,
            contours=contours,
            holes=holes,
            duration_ms=round(duration_ms, 2),
        )
        self._stats.processed_count += 1
        self._stats.contours += contours
        self._stats.holes += holes

    def log_job_error(
        self,
        job_name: str,
        error: Exception | str,
        traceback: str | None = None,
    ) -> None:
        """Log job processing error."""
        self._logger.error(
            "Job processing failed",
            job=job_name,
            error=str(error),
            error_type=type(error).__name__ if isinstance(error, Exception) else None,
            traceback=traceback,
        )
        self._stats.error_count += 1
        self._stats.errors.append((job_name, str(error)))

    def log_shape_error(self, job_name: str, source: str, reason: str) -> None:
        """Log an artwork element that could not be turned into a shape."""
        self._logger.warning("Shape skipped", job=job_name, source=source, reason=reason)
        self._stats.shape_errors += 1

    def log_problems(self, job_name: str, count: int) -> None:
        """Log unstitched edges left over from failed merges."""
        if count:
            self._logger.warning("Unmerged edges", job=job_name, edges=count)
        self._stats.problems += count

    def log_output(self, job_name: str, path: Path) -> None:
        """Log a written output file."""
        self._logger.debug("Output written", job=job_name, path=str(path))
        self._stats.outputs.append(path)

    @property
    def stats(self) -> JobStats:
        """Get current processing statistics."""
        return self._stats
