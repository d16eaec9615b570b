"""
sources.py

Responsibility: Turn filesystem paths into Swift source files.

- `classify()` tags a single path as a source file, a directory or something else.
- `collect_source_files()` extracts the `.swift` files sitting directly inside a folder.
- `load_sources()` applies the multi-path rule used by every entry point
  (positional CLI paths and config `sources:`).

Batch rule: the first directory in a batch wins. Its files are the whole result and
every other path of the batch is discarded. Without a directory the result is every
source file of the batch, in order.

This module intentionally does NOT know about manifests, platforms or the CLI.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

logger = logging.getLogger(__name__)

SOURCE_EXTENSION = "swift"
HIDDEN_PREFIX = "."
EMPTY_SOURCE_NAME = "Source.swift"
EMPTY_SOURCE_CONTENT = b"import Foundation\n"


class AccessError(OSError):
    pass


class EntryKind(Enum):
    SOURCE_FILE = "source_file"
    DIRECTORY = "directory"
    OTHER = "other"


@dataclass(frozen=True)
class SourceFile:
    """A Swift file selected (or selectable) for the package."""

    name: str
    content: bytes


@dataclass(frozen=True)
class Entry:
    """A classified filesystem path. Directories carry their path, files their bytes."""

    name: str
    kind: EntryKind
    path: Path
    content: bytes | None = None


@dataclass(frozen=True)
class ReadFailure:
    path: Path
    reason: str


@dataclass(frozen=True)
class SourceBatch:
    files: tuple[SourceFile, ...] = ()
    failures: tuple[ReadFailure, ...] = ()


def has_source_extension(name: str) -> bool:
    return Path(name).suffix[1:].lower() == SOURCE_EXTENSION


def _read_bytes(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except OSError as e:
        raise AccessError(f"Unable to read file: {path} ({e.strerror or e})") from e


def classify(path: str | Path) -> Entry:
    """
    Classify a single path.

    Directories are not traversed here; everything else is read in full.
    Raises AccessError when the read cannot be performed.
    """
    p = Path(path)
    if p.is_dir():
        return Entry(name=p.name, kind=EntryKind.DIRECTORY, path=p)
    kind = EntryKind.SOURCE_FILE if has_source_extension(p.name) else EntryKind.OTHER
    return Entry(name=p.name, kind=kind, path=p, content=_read_bytes(p))


def _list_directory(directory: Path) -> list[os.DirEntry[str]]:
    try:
        with os.scandir(directory) as it:
            return list(it)
    except OSError as e:
        raise AccessError(f"Unable to list directory: {directory} ({e.strerror or e})") from e


def _collect(directory: Path, failures: list[ReadFailure] | None) -> list[SourceFile]:
    files: list[SourceFile] = []
    for child in _list_directory(directory):
        if child.name.startswith(HIDDEN_PREFIX):
            continue
        if not has_source_extension(child.name) or child.is_dir():
            continue
        try:
            content = _read_bytes(Path(child.path))
        except AccessError as e:
            if failures is None:
                raise
            logger.warning("Skipping unreadable source file %s: %s", child.path, e)
            failures.append(ReadFailure(path=Path(child.path), reason=str(e)))
            continue
        files.append(SourceFile(name=child.name, content=content))
    return files


def collect_source_files(directory: str | Path) -> list[SourceFile]:
    """
    Return the `.swift` files directly inside `directory` (non-recursive, hidden
    entries skipped), in filesystem enumeration order.

    Fail-fast: an unlisted directory or an unreadable file raises AccessError.
    """
    return _collect(Path(directory), failures=None)


def load_sources(paths: list[str | Path] | tuple[str | Path, ...]) -> SourceBatch:
    """
    Apply the batch rule to `paths`.

    A path that fails to classify is reported in `failures` and only that entry is
    dropped. Inside the winning directory, unreadable files are skipped and reported.
    """
    files: list[SourceFile] = []
    failures: list[ReadFailure] = []

    for raw in paths:
        path = Path(raw)
        try:
            entry = classify(path)
        except AccessError as e:
            logger.warning("Ignoring %s: %s", path, e)
            failures.append(ReadFailure(path=path, reason=str(e)))
            continue

        if entry.kind is EntryKind.DIRECTORY:
            logger.debug("Directory %s found, discarding the rest of the batch", path)
            dir_failures: list[ReadFailure] = []
            try:
                dir_files = _collect(entry.path, dir_failures)
            except AccessError as e:
                logger.warning("Ignoring %s: %s", path, e)
                return SourceBatch(failures=(ReadFailure(path=path, reason=str(e)),))
            return SourceBatch(files=tuple(dir_files), failures=tuple(dir_failures))
        elif entry.kind is EntryKind.SOURCE_FILE and entry.content is not None:
            files.append(SourceFile(name=entry.name, content=entry.content))
        else:
            logger.debug("Dropping non-source file %s", path)

    return SourceBatch(files=tuple(files), failures=tuple(failures))


def empty_source_file() -> SourceFile:
    """Starter file for packages that are meant to be written from scratch."""
    return SourceFile(name=EMPTY_SOURCE_NAME, content=EMPTY_SOURCE_CONTENT)
