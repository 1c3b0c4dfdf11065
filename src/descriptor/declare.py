"""Declaring a module descriptor at build time."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any

from pydantic import ValidationError

from descriptor.errors import DescriptorSealed, GrantConflict, MalformedIdentity
from descriptor.identity import check_counterpart_name
from descriptor.models import ModuleDescriptor, field_names, resolve_field_name

logger = logging.getLogger(__name__)


class DescriptorState(str, Enum):
    """Lifecycle of a descriptor builder."""

    UNDECLARED = "undeclared"
    DECLARED = "declared"


class DescriptorBuilder:
    """Collects the build-time facts of one artifact and seals them once.

    ``exclude_tests`` mirrors the build flag that drops the internal-access
    grant: when set, ``grant_internal_access`` is skipped and the resulting
    descriptor keeps its internals sealed to every other artifact.
    """

    def __init__(self, *, exclude_tests: bool = False) -> None:
        self.exclude_tests = exclude_tests
        self._state = DescriptorState.UNDECLARED
        self._grant: str | None = None
        self._descriptor: ModuleDescriptor | None = None

    @property
    def state(self) -> DescriptorState:
        return self._state

    @property
    def descriptor(self) -> ModuleDescriptor | None:
        return self._descriptor

    def grant_internal_access(self, counterpart_name: str) -> None:
        """Let exactly one named counterpart artifact see internal members."""
        self._ensure_undeclared()
        if self.exclude_tests:
            logger.info(
                "Tests excluded; skipping internal access grant to %s",
                counterpart_name,
            )
            return

        name = check_counterpart_name(counterpart_name)
        if self._grant is not None and self._grant != name:
            msg = (
                f"Internal access already granted to {self._grant!r}; "
                f"cannot also grant {name!r}"
            )
            raise GrantConflict(msg)
        self._grant = name

    def declare(self, **fields: Any) -> ModuleDescriptor:
        """Validate the literal fields and seal the descriptor.

        Raises:
            MalformedIdentity: If any literal is malformed. The builder
                stays undeclared and no descriptor is produced.
            DescriptorSealed: If the builder already declared.
        """
        self._ensure_undeclared()

        data: dict[str, Any] = {}
        for key, value in fields.items():
            name = resolve_field_name(key)
            if name in data:
                msg = f"field {name!r} given more than once (as {key!r})"
                raise TypeError(msg)
            data[name] = value
        if "internal_access_grant" in data:
            msg = "use grant_internal_access() to attach an internal access grant"
            raise TypeError(msg)
        data["internal_access_grant"] = self._grant

        try:
            descriptor = ModuleDescriptor.model_validate(data)
        except ValidationError as exc:
            raise as_malformed_identity(exc) from exc

        self._descriptor = descriptor
        self._state = DescriptorState.DECLARED
        logger.debug(
            "Declared %s %s (grant: %s)",
            descriptor.title,
            descriptor.assembly_version,
            descriptor.internal_access_grant,
        )
        return descriptor

    def _ensure_undeclared(self) -> None:
        if self._state is DescriptorState.DECLARED:
            msg = "Descriptor already declared; rebuild to produce a new one"
            raise DescriptorSealed(msg)


def as_malformed_identity(exc: ValidationError) -> MalformedIdentity:
    """Surface the first validation failure as a MalformedIdentity."""
    error = exc.errors()[0]
    original = error.get("ctx", {}).get("error")
    if isinstance(original, MalformedIdentity):
        return original
    loc = error.get("loc") or ("descriptor",)
    field = ".".join(str(part) for part in loc)
    field = field_names().get(field, field)
    literal = None if error.get("type") == "missing" else error.get("input")
    return MalformedIdentity(field, literal, error.get("msg", ""))


def declare(
    *,
    exclude_tests: bool = False,
    internal_access_grant: str | None = None,
    **fields: Any,
) -> ModuleDescriptor:
    """Declare a descriptor in one step.

    ``internal_access_grant`` (or its alias ``internalAccessGrant``) is
    applied through ``grant_internal_access`` and therefore honours
    ``exclude_tests``.
    """
    grant = fields.pop("internalAccessGrant", internal_access_grant)
    builder = DescriptorBuilder(exclude_tests=exclude_tests)
    if grant is not None:
        builder.grant_internal_access(grant)
    return builder.declare(**fields)


def query(descriptor: ModuleDescriptor, field: str) -> Any:
    """Read one declared field; accepts python names and aliases."""
    return descriptor.query(field)


__all__ = [
    "DescriptorBuilder",
    "DescriptorState",
    "as_malformed_identity",
    "declare",
    "query",
]
