"""Determinism verification for stamped metadata blocks."""

from __future__ import annotations

import filecmp
import logging
import tempfile
from dataclasses import dataclass, field
from pathlib import Path

from contract.artifacts import DESCRIPTOR_BLOCK
from stamping.write import stamp_artifact

logger = logging.getLogger(__name__)

# Only files owned by the metadata contract are compared; other build outputs
# sharing the directory are ignored.
BLOCK_FILES = frozenset({Path(DESCRIPTOR_BLOCK.filename)})


@dataclass(frozen=True)
class DeterminismResult:
    ok: bool
    mismatches: tuple[str, ...] = field(default_factory=tuple)
    missing: tuple[str, ...] = field(default_factory=tuple)
    extra: tuple[str, ...] = field(default_factory=tuple)


def _list_files(root: Path) -> set[Path]:
    return {path for path in root.rglob("*") if path.is_file()}


def _list_relative_files(root: Path) -> set[Path]:
    return {path.relative_to(root) for path in _list_files(root)}


def verify_determinism(
    *, root: Path, artifacts_dir: Path, exclude_tests: bool | None = None
) -> DeterminismResult:
    """Verify that restamping from unchanged literals reproduces the block.

    Restamps into a temporary directory and compares byte-for-byte against
    the existing artifacts directory, so a changed unique id or version shows
    up as a mismatch. Only the metadata block files are compared, so other
    build outputs in the same directory do not affect the result.

    Args:
        root: Artifact root holding descriptor.toml.
        artifacts_dir: Directory containing the existing metadata block.
        exclude_tests: Build flag override used for the restamp.

    Returns:
        DeterminismResult with ok status. ``missing`` lists block files the
        restamp produced but artifacts_dir lacks; ``extra`` lists block files
        present in artifacts_dir that the restamp did not produce.

    Raises:
        FileNotFoundError: If artifacts_dir does not exist.
        NotADirectoryError: If artifacts_dir is not a directory.
    """
    if not artifacts_dir.exists():
        msg = f"Artifacts directory does not exist: {artifacts_dir}"
        raise FileNotFoundError(msg)
    if not artifacts_dir.is_dir():
        msg = f"Artifacts path is not a directory: {artifacts_dir}"
        raise NotADirectoryError(msg)
    with tempfile.TemporaryDirectory() as temp_dir:
        temp_path = Path(temp_dir)
        stamp_artifact(root=root, out_dir=temp_path, exclude_tests=exclude_tests)

        original_files = _list_relative_files(artifacts_dir) & BLOCK_FILES
        regenerated_files = _list_relative_files(temp_path) & BLOCK_FILES

        missing = sorted(str(path) for path in regenerated_files - original_files)
        extra = sorted(str(path) for path in original_files - regenerated_files)

        mismatches: list[str] = []
        for path in sorted(original_files & regenerated_files):
            if not filecmp.cmp(artifacts_dir / path, temp_path / path, shallow=False):
                mismatches.append(str(path))

    ok = not missing and not extra and not mismatches
    if not ok:
        logger.warning(
            "Restamp of %s differs: %d missing, %d extra, %d mismatched",
            artifacts_dir,
            len(missing),
            len(extra),
            len(mismatches),
        )
    return DeterminismResult(
        ok=ok,
        mismatches=tuple(mismatches),
        missing=tuple(missing),
        extra=tuple(extra),
    )
