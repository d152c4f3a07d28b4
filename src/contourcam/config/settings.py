"""Configuration settings for contourcam.

Two kinds of configuration live here:
- Application settings (processing, logging), built from CLI arguments
- The fabrication file: a YAML document listing the jobs to run on one
  piece of stock, loaded with load_fab_config()
"""

from enum import Enum
from pathlib import Path
from typing import Annotated, Literal, Union

import yaml
from pydantic import BaseModel, Field, ValidationError, model_validator

from contourcam.exceptions import ConfigError


class BitShape(str, Enum):
    """Cutting bit profile."""

    V = "v"
    SQUARE = "square"


class BitConfig(BaseModel):
    """The bit mounted for a job."""

    shape: BitShape = Field(description="Bit profile")
    radius: float | None = Field(
        default=None,
        gt=0,
        description="Bit radius, required for square end mills",
    )

    @model_validator(mode="after")
    def _square_needs_radius(self) -> "BitConfig":
        if self.shape is BitShape.SQUARE and self.radius is None:
            raise ValueError("a square bit needs a radius")
        return self


class SharedConfig(BaseModel):
    """Settings shared by every job of a fabrication file."""

    resolution: float = Field(
        default=0.1,
        gt=0,
        description="Maximum arc length per tessellated segment",
    )
    safe_height: float = Field(
        default=5.0,
        gt=0,
        description="Retract height above the work surface",
    )
    curve_tolerance: float = Field(
        default=0.01,
        gt=0,
        description="Maximum deviation when flattening Bezier curves",
    )


class _JobBase(BaseModel):
    name: str | None = Field(default=None, description="Job name used for output files")
    input: Path = Field(description="SVG artwork, relative to the fabrication file")
    bit: BitConfig
    feed: float = Field(gt=0, description="Cutting feed rate")
    rpm: float = Field(gt=0, description="Spindle speed")
    depth: float = Field(gt=0, description="Final depth below the surface")


class _HoleFilter(BaseModel):
    radius_min: float | None = Field(default=None, ge=0, description="Smallest circle to use")
    radius_max: float | None = Field(default=None, gt=0, description="Largest circle to use")

    @model_validator(mode="after")
    def _ordered_range(self) -> "_HoleFilter":
        if (
            self.radius_min is not None
            and self.radius_max is not None
            and self.radius_min > self.radius_max
        ):
            raise ValueError("radius_min is larger than radius_max")
        return self

    def accepts(self, radius: float) -> bool:
        if self.radius_min is not None and radius < self.radius_min:
            return False
        if self.radius_max is not None and radius > self.radius_max:
            return False
        return True


class EngraveJob(_JobBase):
    """Trace the artwork at one depth with a V bit."""

    kind: Literal["engrave"] = "engrave"
    offset: float = Field(default=0.0, ge=0, description="Outline growth before tracing")


class CutJob(_JobBase):
    """Cut around the artwork in several passes with a square bit."""

    kind: Literal["cut"] = "cut"
    depth_per_pass: float = Field(gt=0, description="Maximum depth of one pass")


class DrillJob(_JobBase, _HoleFilter):
    """Plunge at the center of every circle."""

    kind: Literal["drill"] = "drill"


class BoreJob(_JobBase, _HoleFilter):
    """Helix out every circle to its full size."""

    kind: Literal["bore"] = "bore"
    depth_per_turn: float = Field(gt=0, description="Depth gained per helix turn")


JobConfig = Annotated[
    Union[EngraveJob, CutJob, DrillJob, BoreJob],
    Field(discriminator="kind"),
]


class FabConfig(BaseModel):
    """A fabrication file: shared settings plus the jobs to run."""

    name: str = Field(description="Project name, prefix of every output file")
    outdir: Path = Field(default=Path("out"), description="Output directory")
    shared: SharedConfig = Field(default_factory=SharedConfig)
    jobs: list[JobConfig] = Field(min_length=1)

    def relative_to(self, base: Path) -> "FabConfig":
        """Resolve the output directory and job inputs against base."""
        return self.model_copy(
            update={
                "outdir": base / self.outdir,
                "jobs": [job.model_copy(update={"input": base / job.input}) for job in self.jobs],
            }
        )


class ProcessingConfig(BaseModel):
    """Configuration for job processing."""

    max_workers: int | None = Field(
        default=None,
        description="Max worker processes (None = auto)",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    log_file: Path | None = Field(
        default=None,
        description="Path to log file",
    )
    log_level: str = Field(
        default="WARNING",
        description="Console log level",
    )
    file_log_level: str = Field(
        default="DEBUG",
        description="File log level (more verbose)",
    )


class ContourCamSettings(BaseModel):
    """Main application settings."""

    processing: ProcessingConfig = Field(default_factory=ProcessingConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def get_default_settings() -> ContourCamSettings:
    """Get default application settings."""
    return ContourCamSettings()


def load_fab_config(path: Path) -> FabConfig:
    """Load and validate a YAML fabrication file.

    Relative paths inside the file are resolved against the file's directory.

    Args:
        path: Path to the YAML file

    Returns:
        Validated FabConfig

    Raises:
        ConfigError: If the file cannot be read, parsed or validated
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(str(path), str(e)) from e

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigError(str(path), f"not valid YAML: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(str(path), "expected a mapping at the top level")

    try:
        config = FabConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(str(path), str(e)) from e

    return config.relative_to(path.parent)
