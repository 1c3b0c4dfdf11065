from __future__ import annotations

from pathlib import Path

import pytest

from stamping.config import (
    DEFAULT_OUTPUT_DIR,
    ConfigError,
    load_config,
    require_descriptor_source,
    resolve_output_dir,
)


def _write_config(root: Path, toml_content: str) -> None:
    (root / "descriptor.toml").write_text(toml_content, encoding="utf-8")


def test_missing_config_uses_defaults(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert config.descriptor is None
    assert config.build.exclude_tests is False
    assert config.build.output_dir == DEFAULT_OUTPUT_DIR


def test_missing_descriptor_section_rejected_for_stamping(tmp_path: Path) -> None:
    _write_config(tmp_path, "[build]\nexclude_tests = true")

    config = load_config(tmp_path)

    assert config.build.exclude_tests is True
    with pytest.raises(ConfigError, match=r"No \[descriptor\] section"):
        require_descriptor_source(tmp_path, config)


def test_invalid_toml_rejected(tmp_path: Path) -> None:
    _write_config(tmp_path, "[descriptor\ntitle = ")

    with pytest.raises(ConfigError, match="Invalid TOML"):
        load_config(tmp_path)


def test_unknown_top_level_key_rejected(tmp_path: Path) -> None:
    _write_config(tmp_path, "bogus_key = true")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_unknown_descriptor_key_rejected(tmp_path: Path) -> None:
    _write_config(
        tmp_path,
        """
[descriptor]
title = "X"
public_key_token = "abc"
""".strip(),
    )

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_unknown_build_key_rejected(tmp_path: Path) -> None:
    _write_config(tmp_path, "[build]\nsign = true")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_valid_config_accepted(tmp_path: Path) -> None:
    _write_config(
        tmp_path,
        """
[descriptor]
title = "Apache.Ignite.Core"
organization = "Apache Software Foundation"
product_name = "Apache Ignite"
unique_id = "97db45a8-f922-456a-a819-7b3c6e5e03ba"
assembly_version = "1.4.1.0"
file_version = [1, 4, 1, 0]
compliance_checked = true
internal_access_grant = "Apache.Ignite.Core.Tests"

[build]
output_dir = "out/meta"
""".strip(),
    )

    config = load_config(tmp_path)
    source = require_descriptor_source(tmp_path, config)

    assert source.title == "Apache.Ignite.Core"
    assert source.internal_access_grant == "Apache.Ignite.Core.Tests"
    assert config.build.output_dir == "out/meta"

    fields = source.declared_fields()
    assert "internal_access_grant" not in fields
    assert fields["file_version"] == [1, 4, 1, 0]
    assert fields["interop_visible"] is False


def test_resolve_output_dir_within_root(tmp_path: Path) -> None:
    resolved = resolve_output_dir(tmp_path, ".descriptor")

    assert resolved == (tmp_path / ".descriptor").resolve()


@pytest.mark.parametrize("output_dir", ["", "~/meta", "/abs/meta", "../outside"])
def test_resolve_output_dir_rejects_escape(tmp_path: Path, output_dir: str) -> None:
    with pytest.raises(ConfigError):
        resolve_output_dir(tmp_path, output_dir)
