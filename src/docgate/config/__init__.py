"""Configuration management for docgate.

This package provides the ClientProfile configuration system,
including YAML serialization and dotted-key overrides.
"""

from docgate.config.profile import (
    DEFAULT_ENDPOINT_URL,
    ClientProfile,
    GateConfig,
    SubmitterConfig,
)

__all__ = [
    "DEFAULT_ENDPOINT_URL",
    "ClientProfile",
    "GateConfig",
    "SubmitterConfig",
]
