"""Build-time module descriptors.

A descriptor stamps an artifact with identity, version, visibility and
compliance facts. It is declared once and read-only afterwards.
"""

from descriptor.declare import DescriptorBuilder, DescriptorState, declare, query
from descriptor.errors import (
    DescriptorError,
    DescriptorSealed,
    GrantConflict,
    MalformedIdentity,
    UnknownField,
)
from descriptor.identity import VersionQuad, parse_unique_id, parse_version
from descriptor.models import ModuleDescriptor

__all__ = [
    "DescriptorBuilder",
    "DescriptorError",
    "DescriptorSealed",
    "DescriptorState",
    "GrantConflict",
    "MalformedIdentity",
    "ModuleDescriptor",
    "UnknownField",
    "VersionQuad",
    "declare",
    "parse_unique_id",
    "parse_version",
    "query",
]
