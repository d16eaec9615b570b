"""
cli.py

Responsibility: CLI entrypoint for Packagify.

High-level flow (`render` / `build`):
1) Load sources from paths (or the config `sources:`) -> `SourceBatch`
2) Select files, name, platforms, swift-tools-version -> `PackageModel`
3) Render `Package.swift` (or take a hand-edited manifest via --manifest-file)
4) `build` only: write the package tree under --output

This module should orchestrate behavior but keep concerns isolated:
- Source discovery: `sources.py`
- Package model: `model.py`
- Manifest rendering: `manifest.py`
- Writing to disk: `materializer.py`
- Package description files: `config.py`
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from packagify.config import ConfigError, PackageConfig, load_config
from packagify.manifest import render
from packagify.materializer import FilesystemError, is_safe_dir_name, materialize
from packagify.model import (
    DEFAULT_PACKAGE_NAME,
    PackageModel,
    Platform,
    apply_selection,
    ensure_name,
    parse_version,
    rename,
    resolve_manifest_version,
    set_platform,
    with_manifest_version,
)
from packagify.sources import AccessError, SourceBatch, empty_source_file, load_sources

logger = logging.getLogger(__name__)


class CLIError(RuntimeError):
    pass


def _load_config(args: argparse.Namespace) -> PackageConfig:
    if args.config:
        return load_config(args.config)
    return PackageConfig()


def _load_batch(args: argparse.Namespace, config: PackageConfig) -> SourceBatch:
    if args.empty:
        return SourceBatch(files=(empty_source_file(),))
    paths = list(args.paths) or list(config.sources)
    if not paths:
        raise CLIError("No source paths given (pass files/a folder, --config with `sources`, or --empty)")
    return load_sources(paths)


def _parse_platform_arg(raw: str) -> tuple[Platform, float | None]:
    """
    Parse `KIND` or `KIND=VERSION` (e.g. `iOS=15`, `macos=12.0`).
    """
    kind, sep, version_text = raw.partition("=")
    try:
        platform = Platform.parse(kind)
    except ValueError as e:
        raise CLIError(str(e)) from e
    if not sep:
        return platform, None
    version = parse_version(version_text)
    if version is None:
        raise CLIError(f"Invalid version for platform {platform.label}: {version_text!r}")
    return platform, version


def _build_model(args: argparse.Namespace, config: PackageConfig, batch: SourceBatch) -> PackageModel:
    if not batch.files:
        raise CLIError("No Swift files were found, please select a different folder or Swift files")

    if args.select:
        selected = args.select
    elif config.include is not None:
        selected = list(config.include)
    else:
        selected = [f.name for f in batch.files]
    model = apply_selection(batch.files, selected)
    if not model.source_files:
        raise CLIError(f"None of the selected files were found: {', '.join(selected)}")

    names = [f.name for f in model.source_files]
    duplicates = sorted({n for n in names if names.count(n) > 1})
    if duplicates:
        raise CLIError(f"Source file names must be unique within a package: {', '.join(duplicates)}")

    model = ensure_name(rename(model, args.name if args.name is not None else (config.name or DEFAULT_PACKAGE_NAME)))
    if not is_safe_dir_name(model.normalized_name):
        raise CLIError(f"Invalid package name: {model.name!r} (it must be a single directory name)")

    for platform, version in config.platforms.items():
        model = set_platform(model, platform, True, version)
    for raw in args.platform or []:
        platform, version = _parse_platform_arg(raw)
        model = set_platform(model, platform, True, version)

    explicit = config.swift_tools_version
    if args.tools_version is not None:
        explicit = parse_version(args.tools_version)
        if explicit is None:
            raise CLIError(f"Invalid swift-tools-version: {args.tools_version!r}")
    return with_manifest_version(model, resolve_manifest_version(explicit))


def _prepare(args: argparse.Namespace) -> PackageModel:
    config = _load_config(args)
    return _build_model(args, config, _load_batch(args, config))


def scan_cmd(args: argparse.Namespace) -> int:
    config = _load_config(args)
    batch = _load_batch(args, config)
    for source in batch.files:
        print(source.name)
    for failure in batch.failures:
        print(f"unreadable: {failure.path} ({failure.reason})", file=sys.stderr)
    return 0 if batch.files else 1


def render_cmd(args: argparse.Namespace) -> int:
    model = _prepare(args)
    print(render(model))
    return 0


def build_cmd(args: argparse.Namespace) -> int:
    model = _prepare(args)

    if args.manifest_file:
        # A hand-edited manifest supersedes the rendered one; sources still come from the model.
        try:
            manifest_text = Path(args.manifest_file).read_text(encoding="utf-8")
        except OSError as e:
            raise CLIError(f"Unable to read manifest file: {args.manifest_file}") from e
    else:
        manifest_text = render(model)

    root = materialize(manifest_text, model, Path(args.output).resolve())
    print(root)
    return 0


def _add_common_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("paths", nargs="*", help="Swift files or a folder containing Swift files")
    p.add_argument("--config", default=None, help="Package description file (YAML or markdown frontmatter)")
    p.add_argument("--empty", action="store_true", help="Start from an empty Source.swift instead of paths")


def _add_model_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--name", default=None, help=f"Package name (default: {DEFAULT_PACKAGE_NAME!r}); spaces become _")
    p.add_argument(
        "--select",
        action="append",
        default=None,
        metavar="FILE",
        help="Source file name to include (repeatable; default: all found files)",
    )
    p.add_argument(
        "--platform",
        action="append",
        default=None,
        metavar="KIND[=VERSION]",
        help="Supported platform, e.g. iOS=15 or tvOS (repeatable)",
    )
    p.add_argument("--tools-version", default=None, help="swift-tools-version (default: 6.0)")


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="packagify", description="Packagify - turn Swift files into a Swift package")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = p.add_subparsers(dest="command", required=True)

    s = sub.add_parser("scan", help="List the Swift files found in the given paths")
    _add_common_args(s)
    s.set_defaults(func=scan_cmd)

    r = sub.add_parser("render", help="Print the generated Package.swift")
    _add_common_args(r)
    _add_model_args(r)
    r.set_defaults(func=render_cmd)

    b = sub.add_parser("build", help="Write Package.swift and Sources/<Name>/ to disk")
    _add_common_args(b)
    _add_model_args(b)
    b.add_argument("--output", default="generated", help="Directory to create the package in (default: generated)")
    b.add_argument(
        "--manifest-file",
        default=None,
        help="Use this (hand-edited) manifest text instead of the generated one",
    )
    b.set_defaults(func=build_cmd)
    return p


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        return int(args.func(args))
    except (CLIError, ConfigError, AccessError, FilesystemError) as e:
        logger.error("%s", e)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
