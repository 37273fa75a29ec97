"""Centralized version management for PaperFX."""

from pathlib import Path

# Path: _version.py -> paperfx -> project root
_version_file = Path(__file__).parent.parent / "VERSION"
VERSION = _version_file.read_text().strip() if _version_file.exists() else "0.0.0"
