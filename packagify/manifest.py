"""
manifest.py

Responsibility: Deterministically render a `PackageModel` into `Package.swift` text.

Rules:
- The package name is emitted with spaces replaced by underscores, everywhere.
- Platform entries keep model order and are joined by ",\n".
- Platform versions drop a trailing ".0" (13.0 -> 13) except for tvOS, which always
  keeps the full decimal form.
- Dependencies and resources always render empty.

This module intentionally does NOT touch the filesystem.
"""

from __future__ import annotations

from jinja2 import Environment, StrictUndefined

from packagify.model import PackageModel, Platform, PlatformConstraint

MANIFEST_FILENAME = "Package.swift"
PLATFORM_SEPARATOR = ",\n"

# Platforms whose version is never shortened.
_FULL_VERSION_PLATFORMS = frozenset({Platform.TVOS})

MANIFEST_TEMPLATE = """\
// swift-tools-version: {{ tools_version }}
import PackageDescription

let package = Package(
    name: "{{ name }}",
    platforms: [
        {{ platforms }}
    ],
    products: [
        .library(
            name: "{{ name }}",
            targets: ["{{ name }}"]
        ),
    ],
    dependencies: [],
    targets: [
        .target(
            name: "{{ name }}",
            dependencies: [],
            path: "Sources/{{ name }}",
            resources: []
        )
    ]
)"""

_env = Environment(
    autoescape=False,
    undefined=StrictUndefined,
    keep_trailing_newline=True,
)
_template = _env.from_string(MANIFEST_TEMPLATE)


def format_decimal(value: float) -> str:
    """Full decimal form: 6 -> "6.0", 13.5 -> "13.5"."""
    return repr(float(value))


def format_platform_version(constraint: PlatformConstraint) -> str:
    text = format_decimal(constraint.minimum_version)
    if constraint.platform in _FULL_VERSION_PLATFORMS:
        return text
    if text.endswith(".0"):
        return text[: -len(".0")]
    return text


def format_platform(constraint: PlatformConstraint) -> str:
    return f"{constraint.platform.identifier}(.v{format_platform_version(constraint)})"


def render(model: PackageModel) -> str:
    """
    Render the manifest for `model`. Pure and total; the caller guarantees a non-empty
    name (see `model.ensure_name`).
    """
    platforms = PLATFORM_SEPARATOR.join(format_platform(c) for c in model.platforms)
    return _template.render(
        tools_version=format_decimal(model.effective_manifest_version),
        name=model.normalized_name,
        platforms=platforms,
    )
