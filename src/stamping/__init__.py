"""Stamping descriptors into build artifacts."""

from stamping.config import (
    BuildConfig,
    ConfigError,
    DescriptorSource,
    StampConfig,
    load_config,
    resolve_output_dir,
)
from stamping.write import stamp_artifact

__all__ = [
    "BuildConfig",
    "ConfigError",
    "DescriptorSource",
    "StampConfig",
    "load_config",
    "resolve_output_dir",
    "stamp_artifact",
]
