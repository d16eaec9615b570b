"""
packagify package

This package turns loose Swift files (or a folder of them) into a Swift package
project as a CLI-first utility.

Key responsibilities are split across modules:
- `sources.py`: classify dropped paths and collect `.swift` files from a folder
- `model.py`: immutable package model (selection, platforms, tools version)
- `manifest.py`: deterministic `Package.swift` rendering
- `materializer.py`: write `Package.swift` and `Sources/<Name>/` to disk
- `config.py`: YAML package description files
- `cli.py`: CLI entrypoint and orchestration (sources -> model -> render -> write)
"""

from __future__ import annotations

import logging

__all__ = ["__version__"]

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())
