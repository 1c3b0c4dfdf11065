from __future__ import annotations

from pathlib import Path
from typing import Any

import tomllib
from pydantic import BaseModel, ConfigDict, Field

CONFIG_FILENAME = "descriptor.toml"
DEFAULT_OUTPUT_DIR = ".descriptor"


class DescriptorSource(BaseModel):
    """Literal identity facts declared for an artifact.

    Values are kept raw here; identity validation happens when the
    descriptor is declared so malformed literals surface as
    ``MalformedIdentity`` rather than config errors.
    """

    model_config = ConfigDict(extra="forbid")

    title: Any = None
    description: str = ""
    configuration_tag: str = Field(
        default="", description="Build-environment label, not validated"
    )
    organization: Any = None
    product_name: Any = None
    copyright: str = ""
    trademark: str = ""
    culture: str = Field(default="", description="Empty means culture-neutral")
    unique_id: Any = None
    assembly_version: Any = None
    file_version: Any = None
    interop_visible: bool = False
    compliance_checked: bool = False
    internal_access_grant: str | None = Field(
        default=None,
        description="Name of the one counterpart artifact allowed to see internals",
    )

    def declared_fields(self) -> dict[str, Any]:
        """Return the literal fields to pass to ``declare``, without the grant."""
        fields = self.model_dump(exclude={"internal_access_grant"})
        return {key: value for key, value in fields.items() if value is not None}


class BuildConfig(BaseModel):
    """Build-system settings for stamping."""

    model_config = ConfigDict(extra="forbid")

    exclude_tests: bool = Field(
        default=False,
        description="Omit the internal access grant from the stamped artifact",
    )
    output_dir: str = Field(
        default=DEFAULT_OUTPUT_DIR,
        description="Output directory for the metadata block",
    )


class StampConfig(BaseModel):
    """Configuration loaded from descriptor.toml."""

    model_config = ConfigDict(extra="forbid")

    descriptor: DescriptorSource | None = None
    build: BuildConfig = Field(default_factory=BuildConfig)


class ConfigError(Exception):
    """Raised when the config file is missing, unreadable or invalid."""


def resolve_output_dir(root: Path, output_dir: str) -> Path:
    """Resolve a config-provided output_dir safely within the artifact root.

    The output_dir must be a non-empty relative path that remains within the
    root after resolution. Absolute paths and paths that escape the root are
    rejected.
    """
    if not output_dir:
        msg = "output_dir must be a non-empty relative path"
        raise ConfigError(msg)

    if output_dir.startswith("~"):
        msg = "output_dir must be a relative path within the artifact root"
        raise ConfigError(msg)

    output_path = Path(output_dir)
    if output_path.is_absolute():
        msg = "output_dir must be a relative path within the artifact root"
        raise ConfigError(msg)

    try:
        resolved_root = root.resolve()
        resolved_output = (resolved_root / output_path).resolve()
    except OSError as exc:
        msg = f"Failed to resolve output_dir '{output_dir}': {exc}"
        raise ConfigError(msg) from exc

    try:
        resolved_output.relative_to(resolved_root)
    except ValueError as exc:
        msg = f"output_dir '{output_dir}' escapes the artifact root"
        raise ConfigError(msg) from exc

    return resolved_output


def load_config(root: Path) -> StampConfig:
    """Load configuration from descriptor.toml if it exists."""
    config_path = Path(root) / CONFIG_FILENAME

    if not config_path.is_file():
        return StampConfig()

    try:
        with config_path.open("rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML in {config_path}: {e}"
        raise ConfigError(msg) from e

    try:
        return StampConfig.model_validate(data)
    except Exception as e:
        msg = f"Invalid config in {config_path}: {e}"
        raise ConfigError(msg) from e


def require_descriptor_source(root: Path, config: StampConfig) -> DescriptorSource:
    if config.descriptor is None:
        msg = f"No [descriptor] section in {Path(root) / CONFIG_FILENAME}"
        raise ConfigError(msg)
    return config.descriptor
