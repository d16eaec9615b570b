"""
materializer.py

Responsibility: Write a package tree to disk.

    <destination>/<Name>/
    ├── Package.swift
    └── Sources/
        └── <Name>/
            └── *.swift

The manifest text is written as given (it may have been edited after rendering);
the source files are always exactly `model.source_files`.
A stale package directory is removed first, so re-running yields the same tree.
Nothing is rolled back on failure: the caller removes a partial tree before retrying.
"""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path

from packagify.manifest import MANIFEST_FILENAME
from packagify.model import PackageModel

logger = logging.getLogger(__name__)

SOURCES_DIRNAME = "Sources"


class FilesystemError(OSError):
    def __init__(self, message: str, path: Path) -> None:
        super().__init__(message)
        self.path = path


def _fail(action: str, path: Path, e: OSError) -> FilesystemError:
    return FilesystemError(f"Failed to {action}: {path} ({e.strerror or e})", path)


def is_safe_dir_name(name: str) -> bool:
    """True when `name` is a single path component that stays inside its parent."""
    if not name or name in (".", ".."):
        return False
    return not any(sep and sep in name for sep in (os.sep, os.altsep, "/"))


def package_root(model: PackageModel, destination_root: str | Path) -> Path:
    """
    Return `<destination_root>/<Name>`.

    Raises FilesystemError when the name would escape `destination_root`.
    """
    destination = Path(destination_root)
    root = destination / model.normalized_name
    if not is_safe_dir_name(model.normalized_name) or root.resolve().parent != destination.resolve():
        raise FilesystemError(f"Package name does not name a directory inside {destination}: {model.name!r}", root)
    return root


def materialize(manifest_text: str, model: PackageModel, destination_root: str | Path) -> Path:
    """
    Create the package directory for `model` under `destination_root` and return it.

    Raises FilesystemError (chained to the OSError) on the first failing step.
    """
    root = package_root(model, destination_root)

    if root.exists() or root.is_symlink():
        logger.debug("Removing stale package directory %s", root)
        try:
            if root.is_dir() and not root.is_symlink():
                shutil.rmtree(root)
            else:
                root.unlink()
        except OSError as e:
            raise _fail("remove stale package directory", root, e) from e

    try:
        root.mkdir(parents=True)
    except OSError as e:
        raise _fail("create package directory", root, e) from e

    manifest_path = root / MANIFEST_FILENAME
    try:
        manifest_path.write_text(manifest_text, encoding="utf-8", newline="\n")
    except OSError as e:
        raise _fail("write manifest", manifest_path, e) from e

    sources_dir = root / SOURCES_DIRNAME / model.normalized_name
    try:
        sources_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise _fail("create sources directory", sources_dir, e) from e

    for source in model.source_files:
        dst_path = sources_dir / source.name
        try:
            dst_path.write_bytes(source.content)
        except OSError as e:
            raise _fail("write source file", dst_path, e) from e

    logger.info("Wrote package %s (%d source files)", root, len(model.source_files))
    return root
