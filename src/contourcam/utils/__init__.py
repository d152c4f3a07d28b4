"""Utility functions for contourcam.

This module provides utility functions including:

- Logging setup and configuration
- Job statistics tracking
"""

from contourcam.utils.logging import (
    JobLogger,
    JobStats,
    configure_logging,
)

__all__ = [
    "JobLogger",
    "JobStats",
    "configure_logging",
]
