"""YAML-based color theme for TUI Todo.

Loads colors from default_theme.yaml and optionally merges
user overrides from {config_dir}/theme.yaml.
"""

from __future__ import annotations

import shutil
import sys
from pathlib import Path
from typing import NamedTuple

import yaml

from tui_todo.models import Mode

THEME_FILE = "theme.yaml"


class ColorPair(NamedTuple):
    """Foreground and background colors for one element."""

    fg: str
    bg: str

    @property
    def style(self) -> str:
        return f"{self.fg} on {self.bg}"


# ── Module-level variables (populated by _apply) ──────────────────

ITEM: ColorPair
ITEM_SELECTED: ColorPair
ITEM_DONE: ColorPair

MODE_NORMAL: ColorPair
MODE_INSERT: ColorPair
MODE_COLORS: dict[Mode, ColorPair]

CARET: ColorPair


# ── Internal helpers ──────────────────────────────────────────────

def _load_yaml(path: Path) -> dict:
    """Load a YAML file and return a dict (empty dict on error)."""
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
        return data if isinstance(data, dict) else {}
    except Exception:
        return {}


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge *override* into *base* (returns a new dict)."""
    result = dict(base)
    for key, val in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(val, dict):
            result[key] = _deep_merge(result[key], val)
        else:
            result[key] = val
    return result


def _pair(d: object, fg: str = "black", bg: str = "white") -> ColorPair:
    """Convert a {fg: ..., bg: ...} dict to a ColorPair."""
    if not isinstance(d, dict):
        return ColorPair(fg, bg)
    return ColorPair(str(d.get("fg", fg)), str(d.get("bg", bg)))


def _apply(data: dict) -> None:
    """Map parsed YAML data onto module-level constants."""
    mod = sys.modules[__name__]

    item = data.get("item", {})
    if not isinstance(item, dict):
        item = {}
    mod.ITEM = _pair(item.get("normal"), bg="grey70")
    mod.ITEM_SELECTED = _pair(item.get("selected"))
    mod.ITEM_DONE = _pair(item.get("done"), fg="grey35", bg="grey70")

    mode = data.get("mode", {})
    if not isinstance(mode, dict):
        mode = {}
    mod.MODE_NORMAL = _pair(mode.get("normal"), bg="bright_green")
    mod.MODE_INSERT = _pair(mode.get("insert"), bg="bright_blue")
    mod.MODE_COLORS = {
        Mode.NORMAL: mod.MODE_NORMAL,
        Mode.INSERT: mod.MODE_INSERT,
    }

    mod.CARET = _pair(data.get("caret"), fg="white", bg="black")


# ── Public API ────────────────────────────────────────────────────

def init_theme(config_dir: Path) -> Path:
    """Copy default_theme.yaml → {config_dir}/theme.yaml.

    Raises FileExistsError if the destination already exists.
    """
    dest = config_dir / THEME_FILE
    if dest.exists():
        raise FileExistsError(str(dest))
    dest.parent.mkdir(parents=True, exist_ok=True)
    src = Path(__file__).parent / "default_theme.yaml"
    shutil.copy2(src, dest)
    return dest


def load_theme(config_dir: Path | None = None) -> None:
    """Load the default theme and optionally merge user overrides."""
    default_path = Path(__file__).parent / "default_theme.yaml"
    data = _load_yaml(default_path)

    if config_dir is not None:
        override_path = config_dir / THEME_FILE
        if override_path.is_file():
            override = _load_yaml(override_path)
            if override:
                data = _deep_merge(data, override)

    _apply(data)


# Apply default theme on module import
load_theme()
