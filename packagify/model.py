"""
model.py

Responsibility: The immutable description of a package to generate.

Every mutation (`apply_selection`, `set_platform`, `rename`, `with_manifest_version`)
returns a new `PackageModel`; callers own the current value and re-render from it.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Iterable

from packagify.sources import SourceFile

DEFAULT_MANIFEST_VERSION = 6.0
DEFAULT_PACKAGE_NAME = "My Swift Package"
ERROR_NAME = "ERROR"

# Seam for a toolchain probe (e.g. parsing `swift --version`); returns None when unknown.
ManifestVersionProvider = Callable[[], float | None]


class Platform(Enum):
    """Supported platform kinds, in the order they are offered to the user."""

    IOS = ("iOS", 13.0)
    MACOS = ("macOS", 11.0)
    MAC_CATALYST = ("macCatalyst", 13.0)
    DRIVERKIT = ("driverKit", 19.0)
    TVOS = ("tvOS", 13.0)
    VISIONOS = ("visionOS", 1.0)
    WATCHOS = ("watchOS", 6.0)

    def __init__(self, label: str, default_version: float) -> None:
        self.label = label
        self.default_version = default_version

    @property
    def identifier(self) -> str:
        return f".{self.label}"

    @classmethod
    def parse(cls, text: str) -> Platform:
        key = text.strip().lower()
        for platform in cls:
            if platform.label.lower() == key or platform.name.lower() == key:
                return platform
        choices = ", ".join(p.label for p in cls)
        raise ValueError(f"Unknown platform: {text!r} (expected one of: {choices})")


@dataclass(frozen=True)
class PlatformConstraint:
    platform: Platform
    minimum_version: float


@dataclass(frozen=True)
class PackageModel:
    """Name, selected sources, platform constraints and swift-tools-version of a package."""

    name: str
    source_files: tuple[SourceFile, ...] = ()
    platforms: tuple[PlatformConstraint, ...] = ()
    manifest_syntax_version: float | None = None

    @property
    def normalized_name(self) -> str:
        return self.name.replace(" ", "_")

    @property
    def effective_manifest_version(self) -> float:
        if self.manifest_syntax_version is None:
            return DEFAULT_MANIFEST_VERSION
        return self.manifest_syntax_version


def apply_selection(
    all_files: Iterable[SourceFile],
    selected_names: Iterable[str],
    model: PackageModel | None = None,
) -> PackageModel:
    """
    Keep the files of `all_files` whose names are selected, in `all_files` order.
    """
    wanted = set(selected_names)
    selected = tuple(f for f in all_files if f.name in wanted)
    if model is None:
        return PackageModel(name=DEFAULT_PACKAGE_NAME, source_files=selected)
    return replace(model, source_files=selected)


def set_platform(
    model: PackageModel,
    platform: Platform,
    enabled: bool,
    min_version: float | None = None,
) -> PackageModel:
    """
    Enable or disable a platform. Re-enabling an existing kind replaces its version
    in place (last write wins); a new kind is appended.
    """
    if not enabled:
        return replace(model, platforms=tuple(c for c in model.platforms if c.platform is not platform))

    version = platform.default_version if min_version is None else float(min_version)
    constraint = PlatformConstraint(platform=platform, minimum_version=version)

    platforms: list[PlatformConstraint] = []
    placed = False
    for existing in model.platforms:
        if existing.platform is platform:
            if not placed:
                platforms.append(constraint)
                placed = True
            continue
        platforms.append(existing)
    if not placed:
        platforms.append(constraint)
    return replace(model, platforms=tuple(platforms))


def rename(model: PackageModel, name: str) -> PackageModel:
    return replace(model, name=name)


def with_manifest_version(model: PackageModel, version: float | None) -> PackageModel:
    return replace(model, manifest_syntax_version=None if version is None else float(version))


def ensure_name(model: PackageModel) -> PackageModel:
    """Substitute the sentinel name for an empty one; rendering assumes a non-empty name."""
    if model.name.strip():
        return model
    return replace(model, name=ERROR_NAME)


def trim_to_major_minor(version: str) -> str:
    parts = version.split(".")
    if len(parts) < 2:
        return version
    return f"{parts[0]}.{parts[1]}"


def parse_version(text: str | float | int | None, default: float | None = None) -> float | None:
    """
    Lenient version parsing for user-entered values: "v13.4.1" -> 13.4, "15" -> 15.0.

    Anything that does not yield a number returns `default`.
    """
    if text is None:
        return default
    if isinstance(text, (int, float)) and not isinstance(text, bool):
        return float(text)
    filtered = re.sub(r"[^0-9.]", "", str(text))
    try:
        return float(trim_to_major_minor(filtered))
    except ValueError:
        return default


def resolve_manifest_version(
    explicit: float | None,
    provider: ManifestVersionProvider | None = None,
) -> float:
    """Explicit value first, then the injected provider, then 6.0."""
    if explicit is not None:
        return float(explicit)
    if provider is not None:
        probed = provider()
        if probed is not None:
            return float(probed)
    return DEFAULT_MANIFEST_VERSION
