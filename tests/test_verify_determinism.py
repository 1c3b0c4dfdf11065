from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest

from stamping.write import stamp_artifact
from verify.verify import DeterminismResult, verify_determinism

if TYPE_CHECKING:
    from pathlib import Path

CONFIG = """
[descriptor]
title = "Apache.Ignite.Core"
organization = "Apache Software Foundation"
product_name = "Apache Ignite"
unique_id = "97db45a8-f922-456a-a819-7b3c6e5e03ba"
assembly_version = "1.4.1.0"
file_version = "1.4.1.0"
compliance_checked = true
internal_access_grant = "Apache.Ignite.Core.Tests"
""".strip()


def _write_artifact_root(root: Path, content: str = CONFIG) -> None:
    root.mkdir(parents=True, exist_ok=True)
    (root / "descriptor.toml").write_text(content, encoding="utf-8")


def test_verify_determinism_requires_artifacts_dir(tmp_path: Path) -> None:
    root = tmp_path / "artifact"
    _write_artifact_root(root)

    missing_dir = tmp_path / "missing"
    with pytest.raises(FileNotFoundError, match="Artifacts directory does not exist"):
        verify_determinism(root=root, artifacts_dir=missing_dir)


def test_verify_determinism_rejects_file_path(tmp_path: Path) -> None:
    root = tmp_path / "artifact"
    _write_artifact_root(root)
    file_path = tmp_path / "file"
    file_path.write_text("", encoding="utf-8")

    with pytest.raises(NotADirectoryError):
        verify_determinism(root=root, artifacts_dir=file_path)


def test_restamp_with_unchanged_literals_is_identical(tmp_path: Path) -> None:
    root = tmp_path / "artifact"
    _write_artifact_root(root)
    out_dir = tmp_path / "out"
    stamp_artifact(root=root, out_dir=out_dir)

    result = verify_determinism(root=root, artifacts_dir=out_dir)

    assert result == DeterminismResult(ok=True)


def test_changed_unique_id_is_a_mismatch(tmp_path: Path) -> None:
    root = tmp_path / "artifact"
    _write_artifact_root(root)
    out_dir = tmp_path / "out"
    stamp_artifact(root=root, out_dir=out_dir)

    _write_artifact_root(
        root,
        CONFIG.replace(
            "97db45a8-f922-456a-a819-7b3c6e5e03ba",
            "00000000-0000-0000-0000-000000000001",
        ),
    )
    result = verify_determinism(root=root, artifacts_dir=out_dir)

    assert result == DeterminismResult(
        ok=False, mismatches=("descriptor.json",), missing=(), extra=()
    )


def test_exclude_tests_override_changes_block(tmp_path: Path) -> None:
    root = tmp_path / "artifact"
    _write_artifact_root(root)
    out_dir = tmp_path / "out"
    stamp_artifact(root=root, out_dir=out_dir, exclude_tests=True)

    assert json.loads((out_dir / "descriptor.json").read_text())[
        "internalAccessGrant"
    ] is None
    assert verify_determinism(root=root, artifacts_dir=out_dir, exclude_tests=True).ok
    assert not verify_determinism(root=root, artifacts_dir=out_dir).ok


def test_other_build_outputs_beside_block_are_ignored(tmp_path: Path) -> None:
    root = tmp_path / "artifact"
    _write_artifact_root(root)
    build_dir = tmp_path / "build"
    build_dir.mkdir()
    (build_dir / "app.bin").write_bytes(b"\x00\x01")
    (build_dir / "lib").mkdir()
    (build_dir / "lib" / "core.so").write_bytes(b"\x7fELF")
    stamp_artifact(root=root, out_dir=build_dir)

    result = verify_determinism(root=root, artifacts_dir=build_dir)

    assert result == DeterminismResult(ok=True)


def test_block_absent_from_build_dir_is_missing(tmp_path: Path) -> None:
    root = tmp_path / "artifact"
    _write_artifact_root(root)
    build_dir = tmp_path / "build"
    build_dir.mkdir()
    (build_dir / "app.bin").write_bytes(b"\x00\x01")

    result = verify_determinism(root=root, artifacts_dir=build_dir)

    assert result == DeterminismResult(
        ok=False, mismatches=(), missing=("descriptor.json",), extra=()
    )


def test_block_not_restamped_is_extra(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    root = tmp_path / "artifact"
    _write_artifact_root(root)
    artifacts_dir = tmp_path / "artifacts"
    artifacts_dir.mkdir()
    (artifacts_dir / "descriptor.json").write_text("{}", encoding="utf-8")

    def _fake_stamp_artifact(
        *, root: Path, out_dir: Path, exclude_tests: bool | None
    ) -> dict[str, object]:
        return {"block_path": str(out_dir / "descriptor.json")}

    monkeypatch.setattr("verify.verify.stamp_artifact", _fake_stamp_artifact)

    result = verify_determinism(root=root, artifacts_dir=artifacts_dir)

    assert result == DeterminismResult(
        ok=False, mismatches=(), missing=(), extra=("descriptor.json",)
    )


def test_restamped_block_differing_is_mismatch(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    root = tmp_path / "artifact"
    _write_artifact_root(root)
    artifacts_dir = tmp_path / "artifacts"
    artifacts_dir.mkdir()
    (artifacts_dir / "descriptor.json").write_text("original", encoding="utf-8")
    (artifacts_dir / "notes.txt").write_text("unrelated", encoding="utf-8")

    def _fake_stamp_artifact(
        *, root: Path, out_dir: Path, exclude_tests: bool | None
    ) -> dict[str, object]:
        (out_dir / "descriptor.json").write_text("restamped", encoding="utf-8")
        return {"block_path": str(out_dir / "descriptor.json")}

    monkeypatch.setattr("verify.verify.stamp_artifact", _fake_stamp_artifact)

    result = verify_determinism(root=root, artifacts_dir=artifacts_dir)

    assert result == DeterminismResult(
        ok=False, mismatches=("descriptor.json",), missing=(), extra=()
    )
