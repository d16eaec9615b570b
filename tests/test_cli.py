from __future__ import annotations

from pathlib import Path

from packagify.cli import main


def _write(path: Path, content: bytes = b"let x = 1\n") -> Path:
    path.write_bytes(content)
    return path


def test_scan_lists_files(tmp_path: Path, swift_dir: Path, capsys) -> None:
    code = main(["scan", str(_write(tmp_path / "A.swift")), str(swift_dir)])
    out = capsys.readouterr().out.split()
    assert code == 0
    assert sorted(out) == ["fileD.swift", "fileE.SWIFT"]


def test_scan_nothing_found(tmp_path: Path) -> None:
    assert main(["scan", str(_write(tmp_path / "notes.txt"))]) == 1


def test_render_with_options(tmp_path: Path, capsys) -> None:
    a = _write(tmp_path / "A.swift")
    b = _write(tmp_path / "B.swift")
    code = main(
        [
            "render",
            str(a),
            str(b),
            "--name",
            "My Tool",
            "--select",
            "B.swift",
            "--platform",
            "iOS=15",
            "--platform",
            "tvos",
            "--tools-version",
            "5.9",
        ]
    )
    out = capsys.readouterr().out
    assert code == 0
    assert out.startswith("// swift-tools-version: 5.9\n")
    assert '    name: "My_Tool",' in out
    assert ".iOS(.v15),\n.tvOS(.v13.0)\n" in out


def test_build_writes_package(tmp_path: Path, capsys) -> None:
    a = _write(tmp_path / "A.swift", b"struct A {}\n")
    out_dir = tmp_path / "out"
    code = main(["build", str(a), "--name", "Kit", "--output", str(out_dir)])

    root = out_dir / "Kit"
    assert code == 0
    assert capsys.readouterr().out.strip() == str(root.resolve())
    assert (root / "Package.swift").read_text(encoding="utf-8").startswith("// swift-tools-version: 6.0")
    assert (root / "Sources" / "Kit" / "A.swift").read_bytes() == b"struct A {}\n"


def test_build_with_edited_manifest(tmp_path: Path) -> None:
    a = _write(tmp_path / "A.swift")
    edited = tmp_path / "Edited.swift"
    edited.write_text("// edited by hand\n", encoding="utf-8")
    out_dir = tmp_path / "out"

    assert main(["build", str(a), "--manifest-file", str(edited), "--output", str(out_dir)]) == 0
    root = out_dir / "My_Swift_Package"
    assert (root / "Package.swift").read_text(encoding="utf-8") == "// edited by hand\n"
    assert (root / "Sources" / "My_Swift_Package" / "A.swift").exists()


def test_build_from_config(tmp_path: Path) -> None:
    src = tmp_path / "src"
    src.mkdir()
    _write(src / "One.swift")
    _write(src / "Two.swift")
    config = tmp_path / "packagify.yaml"
    config.write_text(
        "name: Configured\nsources: [src]\ninclude: [Two.swift]\nplatforms:\n  macOS: 12\n",
        encoding="utf-8",
    )
    out_dir = tmp_path / "out"

    assert main(["build", "--config", str(config), "--output", str(out_dir)]) == 0
    root = out_dir / "Configured"
    assert [p.name for p in (root / "Sources" / "Configured").iterdir()] == ["Two.swift"]
    assert ".macOS(.v12)" in (root / "Package.swift").read_text(encoding="utf-8")


def test_build_empty_starter(tmp_path: Path) -> None:
    out_dir = tmp_path / "out"
    assert main(["build", "--empty", "--name", "", "--output", str(out_dir)]) == 0
    starter = out_dir / "ERROR" / "Sources" / "ERROR" / "Source.swift"
    assert starter.read_bytes() == b"import Foundation\n"


def test_errors_return_exit_code(tmp_path: Path) -> None:
    a = _write(tmp_path / "A.swift")
    assert main(["render", str(a), "--platform", "linux"]) == 1
    assert main(["render", str(a), "--select", "Missing.swift"]) == 1
    assert main(["render"]) == 1
    assert main(["render", "--config", str(tmp_path / "missing.yaml"), str(a)]) == 1


def test_build_rejects_unsafe_names(tmp_path: Path) -> None:
    a = _write(tmp_path / "A.swift")
    out_dir = tmp_path / "out"
    out_dir.mkdir()
    victim = tmp_path / "victim"
    victim.mkdir()
    (victim / "data.txt").write_text("data")

    for name in ("..", ".", str(victim)):
        assert main(["build", str(a), "--name", name, "--output", str(out_dir)]) == 1

    assert a.exists()
    assert out_dir.is_dir()
    assert (victim / "data.txt").read_text() == "data"


def test_build_rejects_duplicate_source_names(tmp_path: Path) -> None:
    d1 = tmp_path / "d1"
    d2 = tmp_path / "d2"
    d1.mkdir()
    d2.mkdir()
    one = _write(d1 / "A.swift", b"one")
    two = _write(d2 / "A.swift", b"two")
    out_dir = tmp_path / "out"

    assert main(["build", str(one), str(two), "--name", "Kit", "--output", str(out_dir)]) == 1
    assert not (out_dir / "Kit").exists()


def test_config_with_empty_include_selects_nothing(tmp_path: Path) -> None:
    a = _write(tmp_path / "A.swift")
    config = tmp_path / "packagify.yaml"
    config.write_text("include: []\n", encoding="utf-8")

    assert main(["render", str(a), "--config", str(config)]) == 1
