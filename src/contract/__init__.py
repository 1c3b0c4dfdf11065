"""Stable metadata block contract for stamped artifacts.

Treat these exports as the authoritative boundary between the stamping step
and the tools that inspect an artifact.
"""

from contract.artifacts import (
    DESCRIPTOR_BLOCK,
    DESCRIPTOR_JSON,
    METADATA_SCHEMA_VERSION,
    SCHEMA_VERSION_KEY,
    MetadataBlockSpec,
    build_block,
    dump_block,
    write_block,
)


def __getattr__(name: str) -> object:
    if name in {
        "ValidationMessage",
        "ValidationResult",
        "load_descriptor",
        "validate_metadata_block",
    }:
        from contract.validation import (
            ValidationMessage,
            ValidationResult,
            load_descriptor,
            validate_metadata_block,
        )

        return {
            "ValidationMessage": ValidationMessage,
            "ValidationResult": ValidationResult,
            "load_descriptor": load_descriptor,
            "validate_metadata_block": validate_metadata_block,
        }[name]

    msg = f"module 'contract' has no attribute {name!r}"
    raise AttributeError(msg)


__all__ = [
    "DESCRIPTOR_BLOCK",
    "DESCRIPTOR_JSON",
    "METADATA_SCHEMA_VERSION",
    "SCHEMA_VERSION_KEY",
    "MetadataBlockSpec",
    "ValidationMessage",
    "ValidationResult",
    "build_block",
    "dump_block",
    "load_descriptor",
    "validate_metadata_block",
    "write_block",
]
