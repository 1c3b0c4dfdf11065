"""Errors raised while declaring a module descriptor."""

from __future__ import annotations


class DescriptorError(Exception):
    """Base class for descriptor build failures."""


class MalformedIdentity(DescriptorError, ValueError):
    """Raised when a declared literal cannot form a valid descriptor field."""

    def __init__(self, field: str, literal: object, reason: str = "") -> None:
        self.field = field
        self.literal = literal
        self.reason = reason
        msg = f"Malformed {field}: {literal!r}"
        if reason:
            msg = f"{msg} ({reason})"
        super().__init__(msg)


class GrantConflict(DescriptorError):
    """Raised when a second, different internal-access grant is requested."""


class DescriptorSealed(DescriptorError):
    """Raised when a declared descriptor builder is used again."""


class UnknownField(KeyError):
    """Raised when querying a name that is not a descriptor field."""

    def __str__(self) -> str:
        return f"Unknown descriptor field: {self.args[0]!r}"


__all__ = [
    "DescriptorError",
    "DescriptorSealed",
    "GrantConflict",
    "MalformedIdentity",
    "UnknownField",
]
