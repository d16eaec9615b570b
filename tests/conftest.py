"""Shared pytest fixtures for packagify tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from packagify.sources import SourceFile


@pytest.fixture
def swift_dir(tmp_path: Path) -> Path:
    """A folder with two Swift files, a hidden one, a non-Swift file and a subfolder."""
    folder = tmp_path / "MyFolder"
    folder.mkdir()
    (folder / "fileD.swift").write_bytes(b"struct D {}\n")
    (folder / "fileE.SWIFT").write_bytes(b"struct E {}\n")
    (folder / ".hidden.swift").write_bytes(b"struct Hidden {}\n")
    (folder / "notes.txt").write_bytes(b"not swift\n")
    nested = folder / "Nested"
    nested.mkdir()
    (nested / "Deep.swift").write_bytes(b"struct Deep {}\n")
    return folder


@pytest.fixture
def abc_files() -> list[SourceFile]:
    return [
        SourceFile(name="a.swift", content=b"let a = 1\n"),
        SourceFile(name="b.swift", content=b"let b = 2\n"),
        SourceFile(name="c.swift", content=b"let c = 3\n"),
    ]
