"""User configuration management using tomlkit."""

from __future__ import annotations

import logging
import os
from pathlib import Path

import tomlkit

from tui_todo.models import MAX_TEXT_LENGTH, AppConfig
from tui_todo.storage import DATA_FILE

CONFIG_DIR_ENV = "TUI_TODO_HOME"
CONFIG_FILE = "config.toml"
LOG_FILE = "tui-todo.log"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def default_config_dir() -> Path:
    """Return $TUI_TODO_HOME, or ~/.tui-todo."""
    env = os.environ.get(CONFIG_DIR_ENV)
    if env:
        return Path(env).expanduser()
    return Path.home() / ".tui-todo"


def _get_config_path(config_dir: Path) -> Path:
    return config_dir / CONFIG_FILE


def _section(doc, name: str) -> dict:
    section = doc.get(name, {})
    return section if isinstance(section, dict) else {}


def load_config(config_dir: Path) -> AppConfig:
    """Load configuration from config.toml. Missing or broken files give defaults."""
    config_path = _get_config_path(config_dir)
    config = AppConfig()

    if not config_path.exists():
        return config

    try:
        content = config_path.read_text(encoding="utf-8")
        doc = tomlkit.parse(content)
    except Exception:
        return config

    storage = _section(doc, "storage")
    config.data_file = str(storage.get("data_file", ""))
    config.backup = bool(storage.get("backup", True))

    editor = _section(doc, "editor")
    try:
        max_length = int(editor.get("max_length", MAX_TEXT_LENGTH))
    except (TypeError, ValueError):
        max_length = MAX_TEXT_LENGTH
    config.max_length = max_length if max_length > 0 else MAX_TEXT_LENGTH

    autosave = _section(doc, "autosave")
    config.autosave = bool(autosave.get("enabled", False))
    try:
        config.autosave_delay = max(0.1, float(autosave.get("delay", 2.0)))
    except (TypeError, ValueError):
        config.autosave_delay = 2.0

    log = _section(doc, "logging")
    config.log_file = str(log.get("file", ""))
    level = str(log.get("level", "WARNING")).upper()
    config.log_level = level if level in LOG_LEVELS else "WARNING"

    return config


def save_config(config_dir: Path, config: AppConfig) -> Path:
    """Save configuration to config.toml and return its path."""
    config_path = _get_config_path(config_dir)
    config_path.parent.mkdir(parents=True, exist_ok=True)

    doc = tomlkit.document()

    storage = tomlkit.table()
    storage.add("data_file", config.data_file)
    storage.add("backup", config.backup)
    doc.add("storage", storage)

    editor = tomlkit.table()
    editor.add("max_length", config.max_length)
    doc.add("editor", editor)

    autosave = tomlkit.table()
    autosave.add("enabled", config.autosave)
    autosave.add("delay", config.autosave_delay)
    doc.add("autosave", autosave)

    log = tomlkit.table()
    log.add("file", config.log_file)
    log.add("level", config.log_level)
    doc.add("logging", log)

    config_path.write_text(tomlkit.dumps(doc), encoding="utf-8")
    return config_path


def resolve_data_path(config_dir: Path, config: AppConfig, override: str | None = None) -> Path:
    """Pick the data file: explicit override, then config, then the default."""
    raw = override or config.data_file
    if not raw:
        return config_dir / DATA_FILE
    path = Path(raw).expanduser()
    return path if path.is_absolute() else config_dir / path


def configure_logging(config_dir: Path, config: AppConfig) -> Path | None:
    """Send package logs to a file; the terminal is owned by the TUI.

    Returns the log path, or None if the file could not be opened.
    """
    log_path = Path(config.log_file).expanduser() if config.log_file else config_dir / LOG_FILE
    package_logger = logging.getLogger("tui_todo")
    package_logger.setLevel(config.log_level)
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_path, encoding="utf-8")
    except OSError:
        package_logger.addHandler(logging.NullHandler())
        return None
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    package_logger.addHandler(handler)
    return log_path
