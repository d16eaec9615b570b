"""
config.py

Responsibility: Load a package description file into a typed, deterministic config.

Accepted formats:
- A plain YAML document (e.g. `packagify.yaml`).
- A markdown file starting with YAML frontmatter delimited by '---'.

Recognised keys:
- name: str
- swift_tools_version: number or string ("5.9", "6.0.3" -> 6.0)
- sources: list of paths, relative to the description file
- include: list of source file names to select (default: all)
- platforms: mapping of platform kind -> minimum version (null = platform default)

The CLI treats the parsed result as defaults that its own flags override.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from packagify.model import Platform, parse_version


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class PackageConfig:
    """Package description read from disk."""

    name: str | None = None
    swift_tools_version: float | None = None
    sources: tuple[Path, ...] = ()
    include: tuple[str, ...] | None = None
    platforms: dict[Platform, float | None] = field(default_factory=dict)


def _split_frontmatter(text: str) -> str:
    """
    If the text begins with YAML frontmatter delimited by '---', return the YAML part.
    Otherwise the whole text is treated as YAML.
    """
    if not text.startswith("---\n"):
        return text

    end = text.find("\n---\n", 4)
    if end == -1:
        raise ConfigError("YAML frontmatter starts with '---' but no closing '---' was found.")
    return text[4:end]


def _string_list(data: dict[str, Any], key: str) -> tuple[str, ...] | None:
    raw = data.get(key)
    if raw is None:
        return None
    if isinstance(raw, str):
        raw = [raw]
    if not isinstance(raw, list):
        raise ConfigError(f"`{key}` must be a list when provided.")
    return tuple(str(item) for item in raw)


def _parse_platforms(raw: Any) -> dict[Platform, float | None]:
    if raw is None:
        return {}
    if isinstance(raw, list):
        # Shorthand: a plain list of kinds, each at its default version.
        raw = {item: None for item in raw}
    if not isinstance(raw, dict):
        raise ConfigError("`platforms` must be a mapping of platform -> version when provided.")

    platforms: dict[Platform, float | None] = {}
    for key, value in raw.items():
        try:
            platform = Platform.parse(str(key))
        except ValueError as e:
            raise ConfigError(str(e)) from e
        if value is None:
            platforms[platform] = None
            continue
        version = parse_version(value)
        if version is None:
            raise ConfigError(f"Invalid version for platform {platform.label}: {value!r}")
        platforms[platform] = version
    return platforms


def load_config(config_path: str | Path) -> PackageConfig:
    """
    Parse a package description file into a `PackageConfig`.
    """
    path = Path(config_path)
    if not path.exists():
        raise ConfigError(f"Config file does not exist: {path}")
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Unable to read config file: {path}") from e

    try:
        data = yaml.safe_load(_split_frontmatter(text)) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError("Package description must be a mapping/object at the top level.")

    name = data.get("name")
    if name is not None:
        name = str(name).strip() or None

    tools_raw = data.get("swift_tools_version")
    swift_tools_version = None
    if tools_raw is not None:
        swift_tools_version = parse_version(tools_raw)
        if swift_tools_version is None:
            raise ConfigError(f"Invalid `swift_tools_version`: {tools_raw!r}")

    base_dir = path.parent
    sources = tuple(base_dir / s for s in (_string_list(data, "sources") or ()))

    return PackageConfig(
        name=name,
        swift_tools_version=swift_tools_version,
        sources=sources,
        include=_string_list(data, "include"),
        platforms=_parse_platforms(data.get("platforms")),
    )
