"""Validation and loading of stamped metadata blocks."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import orjson
from pydantic import ValidationError

from contract.artifacts import (
    DESCRIPTOR_BLOCK,
    METADATA_SCHEMA_VERSION,
    SCHEMA_VERSION_KEY,
)
from descriptor.declare import as_malformed_identity
from descriptor.models import ModuleDescriptor

if TYPE_CHECKING:
    from pathlib import Path


@dataclass(frozen=True)
class ValidationMessage:
    artifact: str
    path: Path
    message: str

    def location(self) -> str:
        return str(self.path)

    def to_dict(self) -> dict[str, object]:
        return {
            "artifact": self.artifact,
            "path": str(self.path),
            "message": self.message,
        }


@dataclass
class ValidationResult:
    errors: list[ValidationMessage] = field(default_factory=list)
    warnings: list[ValidationMessage] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def validate_metadata_block(
    artifacts_dir: Path, *, strict_schema_version: bool = False
) -> ValidationResult:
    result = ValidationResult()

    if not artifacts_dir.exists():
        result.errors.append(
            ValidationMessage(
                artifact="artifacts_dir",
                path=artifacts_dir,
                message="Artifacts directory does not exist.",
            )
        )
        return result

    if not artifacts_dir.is_dir():
        result.errors.append(
            ValidationMessage(
                artifact="artifacts_dir",
                path=artifacts_dir,
                message="Artifacts path is not a directory.",
            )
        )
        return result

    path = artifacts_dir / DESCRIPTOR_BLOCK.filename
    artifact = "descriptor"
    if not path.exists():
        result.errors.append(
            ValidationMessage(
                artifact=artifact,
                path=path,
                message="Required metadata block is missing.",
            )
        )
        return result

    try:
        raw = orjson.loads(path.read_bytes())
    except (OSError, orjson.JSONDecodeError) as exc:
        result.errors.append(
            ValidationMessage(
                artifact=artifact,
                path=path,
                message=f"Invalid JSON: {exc}.",
            )
        )
        return result

    if not isinstance(raw, dict):
        result.errors.append(
            ValidationMessage(
                artifact=artifact,
                path=path,
                message="Expected JSON object for descriptor.json.",
            )
        )
        return result

    data = dict(raw)
    schema_present = SCHEMA_VERSION_KEY in data
    schema_version = data.pop(SCHEMA_VERSION_KEY, METADATA_SCHEMA_VERSION)

    try:
        ModuleDescriptor.model_validate(data)
    except ValidationError as exc:
        result.errors.append(
            ValidationMessage(
                artifact=artifact,
                path=path,
                message=f"Schema validation failed: {as_malformed_identity(exc)}.",
            )
        )
        return result

    _check_schema_version(
        artifact,
        path,
        schema_present,
        schema_version,
        result,
        strict_schema_version=strict_schema_version,
    )
    return result


def load_descriptor(artifacts_dir: Path) -> ModuleDescriptor:
    """Load the descriptor stamped into ``artifacts_dir``.

    Raises:
        FileNotFoundError: If the metadata block is missing.
        ValueError: If the block is not a JSON object.
        MalformedIdentity: If a field in the block is malformed.
    """
    path = artifacts_dir / DESCRIPTOR_BLOCK.filename
    if not path.is_file():
        msg = f"Metadata block does not exist: {path}"
        raise FileNotFoundError(msg)

    raw: Any = orjson.loads(path.read_bytes())
    if not isinstance(raw, dict):
        msg = f"Expected JSON object in {path}"
        raise ValueError(msg)
    raw.pop(SCHEMA_VERSION_KEY, None)

    try:
        return ModuleDescriptor.model_validate(raw)
    except ValidationError as exc:
        raise as_malformed_identity(exc) from exc


def _check_schema_version(
    artifact_name: str,
    path: Path,
    schema_present: bool,
    schema_version: object,
    result: ValidationResult,
    *,
    strict_schema_version: bool,
) -> None:
    if schema_present and schema_version != METADATA_SCHEMA_VERSION:
        result.errors.append(
            ValidationMessage(
                artifact=artifact_name,
                path=path,
                message=(
                    "Schema version mismatch: "
                    f"expected {METADATA_SCHEMA_VERSION}, got {schema_version}."
                ),
            )
        )
        return

    if not schema_present:
        message = (
            f"Missing {SCHEMA_VERSION_KEY}; defaulted to {METADATA_SCHEMA_VERSION}."
        )
        if strict_schema_version:
            result.errors.append(
                ValidationMessage(artifact=artifact_name, path=path, message=message)
            )
        else:
            result.warnings.append(
                ValidationMessage(artifact=artifact_name, path=path, message=message)
            )


__all__ = [
    "ValidationMessage",
    "ValidationResult",
    "load_descriptor",
    "validate_metadata_block",
]
