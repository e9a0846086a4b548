"""Configuration module for the turnaround service.

Available Configurations:
- TurnaroundConfig: Policy switches, logging environment and badge metadata
"""

from turnaround.config.turnaround_config import (
    DEFAULT_TURNAROUND_CONFIG,
    TurnaroundConfig,
)

__all__ = [
    "TurnaroundConfig",
    "DEFAULT_TURNAROUND_CONFIG",
]
