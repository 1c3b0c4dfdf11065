"""Module descriptor model.

A descriptor is the frozen record of identity, version and policy facts
attached to one build artifact. Field names follow Python conventions;
each field also carries the camelCase alias used in the metadata block and
accepted by ``query``.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from descriptor.errors import MalformedIdentity, UnknownField
from descriptor.identity import (
    VersionQuad,
    check_counterpart_name,
    parse_unique_id,
    parse_version,
)


class ModuleDescriptor(BaseModel):
    """Build-time identity facts of a single artifact."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    title: str
    description: str = ""
    configuration_tag: str = Field(default="", alias="configurationTag")
    organization: str
    product_name: str = Field(alias="productName")
    copyright: str = ""
    trademark: str = ""
    culture: str = Field(
        default="", description="Empty string means culture-neutral"
    )
    unique_id: str = Field(alias="uniqueId")
    assembly_version: VersionQuad = Field(alias="assemblyVersion")
    file_version: VersionQuad = Field(alias="fileVersion")
    interop_visible: bool = Field(default=False, alias="interopVisible")
    compliance_checked: bool = Field(default=False, alias="complianceChecked")
    internal_access_grant: str | None = Field(
        default=None, alias="internalAccessGrant"
    )

    @field_validator("title", "organization", "product_name", mode="before")
    @classmethod
    def _require_text(cls, v: Any, info: ValidationInfo) -> Any:
        if not isinstance(v, str) or not v.strip():
            raise MalformedIdentity(info.field_name, v, "must be non-empty")
        return v

    @field_validator("unique_id", mode="before")
    @classmethod
    def _parse_unique_id(cls, v: Any) -> str:
        return parse_unique_id(v)

    @field_validator("assembly_version", "file_version", mode="before")
    @classmethod
    def _parse_version(cls, v: Any, info: ValidationInfo) -> VersionQuad:
        return parse_version(v, field=info.field_name)

    @field_validator("internal_access_grant", mode="before")
    @classmethod
    def _check_grant(cls, v: Any) -> str | None:
        if v is None:
            return None
        return check_counterpart_name(v)

    @property
    def is_culture_neutral(self) -> bool:
        return self.culture == ""

    def can_access_internals(self, requester: str) -> bool:
        """Return True only for the exact artifact named by the grant."""
        return (
            self.internal_access_grant is not None
            and requester == self.internal_access_grant
        )

    def query(self, field: str) -> Any:
        """Return the declared value of ``field`` (python name or alias)."""
        return getattr(self, resolve_field_name(field))

    def to_block(self) -> dict[str, object]:
        """Return the metadata block representation keyed by alias.

        Versions become dotted strings; an absent grant becomes ``None``.
        """
        block: dict[str, object] = {}
        for name, info in type(self).model_fields.items():
            value = getattr(self, name)
            if isinstance(value, VersionQuad):
                value = str(value)
            block[info.alias or name] = value
        return block


def field_names() -> dict[str, str]:
    """Map every accepted field spelling to its python attribute name."""
    names: dict[str, str] = {}
    for name, info in ModuleDescriptor.model_fields.items():
        names[name] = name
        if info.alias:
            names[info.alias] = name
    return names


def resolve_field_name(field: str) -> str:
    try:
        return field_names()[field]
    except KeyError:
        raise UnknownField(field) from None


__all__ = ["ModuleDescriptor", "field_names", "resolve_field_name"]
