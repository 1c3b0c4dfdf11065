from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from contract.artifacts import DESCRIPTOR_JSON, write_block
from descriptor.declare import DescriptorBuilder
from stamping.config import load_config, require_descriptor_source, resolve_output_dir

if TYPE_CHECKING:
    from pathlib import Path

    from stamping.config import StampConfig

logger = logging.getLogger(__name__)


def stamp_artifact(
    *,
    root: Path,
    out_dir: Path | None = None,
    config: StampConfig | None = None,
    exclude_tests: bool | None = None,
) -> dict[str, object]:
    """Declare the artifact's descriptor and embed its metadata block.

    Args:
        root: Root directory of the artifact (holds descriptor.toml)
        out_dir: Optional output directory for the metadata block
        config: Optional configuration; loaded from root when omitted
        exclude_tests: Overrides ``[build] exclude_tests`` when not None

    Returns:
        Dictionary with the declared descriptor and the written path.

    Raises:
        ConfigError: If the configuration is missing or invalid.
        MalformedIdentity: If a declared literal is malformed. Nothing is
            written in that case.
    """
    if config is None:
        config = load_config(root)

    source = require_descriptor_source(root, config)

    if exclude_tests is None:
        exclude_tests = config.build.exclude_tests

    builder = DescriptorBuilder(exclude_tests=exclude_tests)
    if source.internal_access_grant is not None:
        builder.grant_internal_access(source.internal_access_grant)
    descriptor = builder.declare(**source.declared_fields())

    if out_dir is None:
        out_dir = resolve_output_dir(root, config.build.output_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    block_path = out_dir / DESCRIPTOR_JSON
    write_block(block_path, descriptor)
    logger.info(
        "Stamped %s %s into %s",
        descriptor.title,
        descriptor.assembly_version,
        block_path,
    )

    return {
        "descriptor": descriptor,
        "exclude_tests": exclude_tests,
        "block_path": str(block_path),
    }
