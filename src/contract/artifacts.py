"""Metadata block contract definitions.

This module defines the stable boundary between the stamping step and every
tool that inspects a stamped artifact: the block filename, its format and
its schema version.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import orjson

if TYPE_CHECKING:
    from pathlib import Path

    from descriptor.models import ModuleDescriptor

# Schema version of the embedded metadata block.
METADATA_SCHEMA_VERSION = 1

DESCRIPTOR_JSON = "descriptor.json"
SCHEMA_VERSION_KEY = "schemaVersion"


@dataclass(frozen=True)
class MetadataBlockSpec:
    """Specification for the metadata block embedded in an artifact."""

    filename: str
    format: str
    required_fields_note: str


DESCRIPTOR_BLOCK = MetadataBlockSpec(
    filename=DESCRIPTOR_JSON,
    format="json",
    required_fields_note="ModuleDescriptor fields keyed by alias, plus schemaVersion.",
)


def build_block(descriptor: ModuleDescriptor) -> dict[str, object]:
    block = descriptor.to_block()
    block[SCHEMA_VERSION_KEY] = METADATA_SCHEMA_VERSION
    return block


def dump_block(descriptor: ModuleDescriptor) -> bytes:
    """Serialize a descriptor into its byte-deterministic block form."""
    opts = orjson.OPT_SORT_KEYS | orjson.OPT_INDENT_2
    return orjson.dumps(build_block(descriptor), option=opts) + b"\n"


def write_block(path: Path, descriptor: ModuleDescriptor) -> None:
    path.write_bytes(dump_block(descriptor))
