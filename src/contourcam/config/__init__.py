"""Configuration management for contourcam.

This module provides configuration management using Pydantic models.
Application settings come from CLI arguments or defaults; jobs come from a
YAML fabrication file.

Key classes:
- FabConfig: A fabrication file (shared settings and jobs)
- EngraveJob, CutJob, DrillJob, BoreJob: Job kinds
- ProcessingConfig: Job processing settings
- LoggingConfig: Logging settings
- ContourCamSettings: Main application settings
"""

from contourcam.config.settings import (
    BitConfig,
    BitShape,
    BoreJob,
    ContourCamSettings,
    CutJob,
    DrillJob,
    EngraveJob,
    FabConfig,
    JobConfig,
    LoggingConfig,
    ProcessingConfig,
    SharedConfig,
    get_default_settings,
    load_fab_config,
)

__all__ = [
    "BitConfig",
    "BitShape",
    "BoreJob",
    "ContourCamSettings",
    "CutJob",
    "DrillJob",
    "EngraveJob",
    "FabConfig",
    "JobConfig",
    "LoggingConfig",
    "ProcessingConfig",
    "SharedConfig",
    "get_default_settings",
    "load_fab_config",
]
