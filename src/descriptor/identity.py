"""Parsing of identity literals: unique ids, four-part versions, grant names."""

from __future__ import annotations

import re
import uuid
from collections.abc import Sequence
from typing import NamedTuple

from descriptor.errors import MalformedIdentity

# Upper bound for a single assembly version component (UInt16.MaxValue - 1).
MAX_VERSION_COMPONENT = 65534

_CANONICAL_UUID = re.compile(
    r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"
)
_VERSION_COMPONENT = re.compile(r"^[0-9]+$")
_GRANT_FORBIDDEN = re.compile(r"[*?,;\s]")


class VersionQuad(NamedTuple):
    """A ``major.minor.patch.build`` version.

    Tuple comparison gives the ordering: ``1.4.1.0 < 1.4.2.0 < 1.4.2.1``.
    """

    major: int
    minor: int
    patch: int
    build: int

    def __str__(self) -> str:
        return ".".join(str(part) for part in self)


def parse_version(value: object, *, field: str = "version") -> VersionQuad:
    """Parse a dotted string or a 4-sequence of ints into a VersionQuad.

    Raises:
        MalformedIdentity: If the literal does not have exactly four
            non-negative integer components within range.
    """
    if isinstance(value, str):
        raw_parts: Sequence[object] = value.strip().split(".")
        if not all(_VERSION_COMPONENT.fullmatch(str(part)) for part in raw_parts):
            raise MalformedIdentity(
                field, value, "components must be non-negative integers"
            )
        if any(
            len(str(part).lstrip("0")) > len(str(MAX_VERSION_COMPONENT))
            for part in raw_parts
        ):
            raise MalformedIdentity(
                field, value, f"component exceeds {MAX_VERSION_COMPONENT}"
            )
        parts = [int(str(part)) for part in raw_parts]
    elif isinstance(value, (bytes, bytearray)):
        raise MalformedIdentity(field, value, "expected 'a.b.c.d' or four integers")
    elif isinstance(value, Sequence):
        if not all(
            isinstance(part, int) and not isinstance(part, bool) for part in value
        ):
            raise MalformedIdentity(field, value, "components must be integers")
        parts = list(value)
    else:
        raise MalformedIdentity(field, value, "expected 'a.b.c.d' or four integers")

    if len(parts) != 4:
        raise MalformedIdentity(
            field, value, f"expected 4 components, got {len(parts)}"
        )
    for part in parts:
        if part < 0:
            raise MalformedIdentity(field, value, "negative component")
        if part > MAX_VERSION_COMPONENT:
            raise MalformedIdentity(
                field, value, f"component exceeds {MAX_VERSION_COMPONENT}"
            )
    return VersionQuad(*parts)


def parse_unique_id(value: object, *, field: str = "unique_id") -> str:
    """Return the lowercase canonical text of a 128-bit identifier.

    Only the hyphenated ``8-4-4-4-12`` form is accepted; braces, URNs and
    bare hex are rejected.
    """
    if isinstance(value, uuid.UUID):
        return str(value)
    if not isinstance(value, str) or not _CANONICAL_UUID.fullmatch(value):
        raise MalformedIdentity(
            field, value, "expected canonical 8-4-4-4-12 hex form"
        )
    return str(uuid.UUID(value))


def check_counterpart_name(
    value: object, *, field: str = "internal_access_grant"
) -> str:
    """Validate the name of the single artifact an internal-access grant targets."""
    if not isinstance(value, str) or not value:
        raise MalformedIdentity(field, value, "counterpart name must be non-empty")
    if _GRANT_FORBIDDEN.search(value):
        raise MalformedIdentity(
            field, value, "counterpart name must name exactly one artifact"
        )
    return value


__all__ = [
    "MAX_VERSION_COMPONENT",
    "VersionQuad",
    "check_counterpart_name",
    "parse_unique_id",
    "parse_version",
]
