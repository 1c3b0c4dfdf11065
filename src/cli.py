"""Command-line interface for artifact descriptors."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import orjson

from contract.artifacts import build_block
from contract.validation import load_descriptor, validate_metadata_block
from descriptor.errors import DescriptorError, UnknownField
from stamping.config import ConfigError, load_config, resolve_output_dir
from stamping.write import stamp_artifact
from verify.verify import verify_determinism

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _add_common_paths(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "root",
        nargs="?",
        default=".",
        help="Artifact root holding descriptor.toml (default: .)",
    )


def _add_artifacts_dir(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--artifacts-dir",
        default=None,
        help="Directory holding descriptor.json (default: config output dir)",
    )


def _add_tests_flag(parser: argparse.ArgumentParser) -> None:
    group = parser.add_mutually_exclusive_group()
    group.add_argument(
        "--exclude-tests",
        dest="exclude_tests",
        action="store_true",
        default=None,
        help="Omit the internal access grant (overrides config)",
    )
    group.add_argument(
        "--include-tests",
        dest="exclude_tests",
        action="store_false",
        help="Keep the internal access grant (overrides config)",
    )
    parser.set_defaults(exclude_tests=None)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="descriptor")
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    stamp_parser = subparsers.add_parser(
        "stamp", help="Declare the descriptor and write the metadata block"
    )
    _add_common_paths(stamp_parser)
    stamp_parser.add_argument(
        "--out-dir",
        default=None,
        help="Output directory for the metadata block (default: config output dir)",
    )
    _add_tests_flag(stamp_parser)

    show_parser = subparsers.add_parser("show", help="Query a stamped descriptor")
    _add_common_paths(show_parser)
    _add_artifacts_dir(show_parser)
    show_parser.add_argument(
        "--field",
        default=None,
        help="Print a single field (python name or camelCase alias)",
    )

    validate_parser = subparsers.add_parser(
        "validate", help="Validate the metadata block"
    )
    _add_common_paths(validate_parser)
    _add_artifacts_dir(validate_parser)
    validate_parser.add_argument(
        "--strict-schema-version",
        action="store_true",
        help="Treat a missing schemaVersion as an error",
    )

    verify_parser = subparsers.add_parser(
        "verify", help="Verify that restamping reproduces the metadata block"
    )
    _add_common_paths(verify_parser)
    _add_artifacts_dir(verify_parser)
    _add_tests_flag(verify_parser)

    return parser


def _resolve_output_dir(out_dir: str | None) -> Path | None:
    if out_dir is None:
        return None
    return Path(out_dir).expanduser().resolve()


def _resolve_artifacts_dir(root: Path, artifacts_dir: str | None) -> Path:
    if artifacts_dir is None:
        config = load_config(root)
        return resolve_output_dir(root, config.build.output_dir)
    return Path(artifacts_dir).expanduser().resolve()


def _handle_stamp(root: Path, out_dir: str | None, exclude_tests: bool | None) -> int:
    try:
        result = stamp_artifact(
            root=root,
            out_dir=_resolve_output_dir(out_dir),
            exclude_tests=exclude_tests,
        )
    except (ConfigError, DescriptorError) as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 1
    sys.stdout.write(f"{result['block_path']}\n")
    return 0


def _handle_show(root: Path, artifacts_dir: str | None, field: str | None) -> int:
    resolved_artifacts_dir = _resolve_artifacts_dir(root, artifacts_dir)
    try:
        descriptor = load_descriptor(resolved_artifacts_dir)
    except (FileNotFoundError, ValueError) as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 1

    if field is None:
        payload: object = build_block(descriptor)
    else:
        try:
            payload = descriptor.query(field)
        except UnknownField as exc:
            sys.stderr.write(f"error: {exc}\n")
            return 2
        if isinstance(payload, tuple):
            payload = str(payload)

    opts = orjson.OPT_SORT_KEYS | orjson.OPT_INDENT_2
    sys.stdout.write(orjson.dumps(payload, option=opts).decode("utf-8") + "\n")
    return 0


def _handle_validate(
    root: Path, artifacts_dir: str | None, *, strict_schema_version: bool
) -> int:
    resolved_artifacts_dir = _resolve_artifacts_dir(root, artifacts_dir)
    result = validate_metadata_block(
        resolved_artifacts_dir, strict_schema_version=strict_schema_version
    )
    for warning in result.warnings:
        sys.stderr.write(f"{warning.location()}: warning: {warning.message}\n")
    if result.errors:
        for error in result.errors:
            sys.stderr.write(f"{error.location()}: {error.message}\n")
        return 1
    return 0


def _handle_verify(
    root: Path, artifacts_dir: str | None, exclude_tests: bool | None
) -> int:
    resolved_artifacts_dir = _resolve_artifacts_dir(root, artifacts_dir)
    try:
        result = verify_determinism(
            root=root,
            artifacts_dir=resolved_artifacts_dir,
            exclude_tests=exclude_tests,
        )
    except (FileNotFoundError, NotADirectoryError) as exc:
        sys.stderr.write(f"artifacts-dir: {resolved_artifacts_dir}\n")
        sys.stderr.write(f"error: {exc}\n")
        return 2
    except (ConfigError, DescriptorError) as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 2
    if not result.ok:
        for label, paths in (
            ("missing", result.missing),
            ("extra", result.extra),
            ("mismatches", result.mismatches),
        ):
            for path in paths:
                sys.stderr.write(f"{label}: {path}\n")
        return 1
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format=LOG_FORMAT,
    )

    root = Path(args.root).expanduser().resolve()

    try:
        if args.command == "stamp":
            return _handle_stamp(root, args.out_dir, args.exclude_tests)

        if args.command == "show":
            return _handle_show(root, args.artifacts_dir, args.field)

        if args.command == "validate":
            return _handle_validate(
                root,
                args.artifacts_dir,
                strict_schema_version=args.strict_schema_version,
            )

        if args.command == "verify":
            return _handle_verify(root, args.artifacts_dir, args.exclude_tests)
    except ConfigError as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 1

    raise AssertionError


if __name__ == "__main__":
    raise SystemExit(main())
