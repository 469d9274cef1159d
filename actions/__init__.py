"""Schema-driven interactive action resolution and dispatch."""

from pathlib import Path

SETTINGS_DIR = Path(__file__).resolve().parent / "settings"
