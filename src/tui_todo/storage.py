"""JSON persistence for the todo list with atomic writes and tolerant reads."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from tui_todo.models import MAX_TEXT_LENGTH, ListState, Mode, TextCursor, TodoItem

logger = logging.getLogger(__name__)

DATA_FILE = "todos.json"


class StorageError(Exception):
    """Base class for persistence failures."""


class StorageSetupError(StorageError):
    """The storage directory or file could not be created."""


class StorageWriteError(StorageError):
    """The list could not be written to disk."""


# ── Codec ──


def _first(data: dict, *keys: str) -> Any:
    for key in keys:
        if key in data:
            return data[key]
    return None


def _item_from_dict(data: dict, max_length: int) -> TodoItem | None:
    text = data.get("text")
    if not isinstance(text, str):
        return None
    done = _first(data, "is_done", "done")
    position = _first(data, "position", "cursorPosition")
    if not isinstance(position, int) or isinstance(position, bool):
        position = len(text)
    cursor = TextCursor.from_text(text, position, limit=max_length)
    return TodoItem(text=cursor, done=done is True)


def state_from_dict(data: dict, max_length: int = MAX_TEXT_LENGTH) -> ListState:
    """Build a ListState from decoded JSON. Unknown keys are ignored."""
    raw_items = _first(data, "todos", "items")
    items: list[TodoItem] = []
    if isinstance(raw_items, list):
        for raw in raw_items:
            if isinstance(raw, dict):
                item = _item_from_dict(raw, max_length)
                if item is not None:
                    items.append(item)

    selected = _first(data, "select", "selected")
    if not isinstance(selected, int) or isinstance(selected, bool):
        selected = 0

    try:
        mode = Mode(_first(data, "state", "mode"))
    except ValueError:
        mode = Mode.NORMAL
    if not items:
        mode = Mode.NORMAL

    return ListState(items=items, selected=selected, mode=mode, max_length=max_length)


def state_to_dict(state: ListState) -> dict:
    return {
        "todos": [
            {
                "text": item.text.text,
                "is_done": item.done,
                "position": item.text.cursor,
            }
            for item in state.items
        ],
        "select": state.selected,
        "state": state.mode.value,
    }


# ── Store ──


class TodoStore:
    """Reads and writes one todo list file."""

    def __init__(self, path: Path, backup: bool = True, max_length: int = MAX_TEXT_LENGTH) -> None:
        self.path = Path(path)
        self.backup = backup
        self.max_length = max_length

    def ensure(self) -> None:
        """Create the parent directory and an empty data file if missing."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            if not self.path.exists():
                self.path.touch()
        except OSError as e:
            logger.error("Cannot create storage at %s: %s", self.path, e)
            raise StorageSetupError(f"cannot create {self.path}: {e.strerror or e}") from e

    def load(self) -> ListState:
        """Load the saved list, or a default one-item list if none can be read."""
        self.ensure()
        try:
            content = self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Cannot read %s (%s); starting with an empty list", self.path, e)
            return ListState.default(self.max_length)

        if not content.strip():
            return ListState.default(self.max_length)
        try:
            data = json.loads(content)
        except ValueError as e:
            logger.warning("Malformed todo file %s (%s); starting with an empty list", self.path, e)
            return ListState.default(self.max_length)
        if not isinstance(data, dict):
            logger.warning("Unexpected JSON in %s; starting with an empty list", self.path)
            return ListState.default(self.max_length)

        state = state_from_dict(data, self.max_length)
        logger.info("Loaded %d item(s) from %s", len(state.items), self.path)
        return state

    def save(self, state: ListState) -> None:
        """Write *state* to disk atomically.

        1. Copy the current file to ``.bak`` (best effort)
        2. Write to a temp file in the same directory
        3. Atomic rename (os.replace) temp -> target
        """
        target = self.path
        try:
            content = json.dumps(state_to_dict(state), ensure_ascii=False).encode("utf-8")
        except UnicodeEncodeError as e:
            logger.error("Cannot encode %s: %s", target, e)
            raise StorageWriteError(f"cannot write {target}: text is not valid UTF-8") from e

        if self.backup and target.exists():
            bak_path = target.with_suffix(target.suffix + ".bak")
            try:
                bak_path.write_bytes(target.read_bytes())
            except OSError:
                pass  # Best effort backup

        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=target.parent, suffix=".tmp", prefix=".tui-todo-")
        except OSError as e:
            logger.error("Cannot save %s: %s", target, e)
            raise StorageWriteError(f"cannot write {target}: {e.strerror or e}") from e

        try:
            try:
                with os.fdopen(fd, "wb") as f:
                    f.write(content)
                os.replace(tmp_path, target)
            except BaseException:
                try:
                    os.unlink(tmp_path)
                except OSError:
                    pass
                raise
        except OSError as e:
            logger.error("Cannot save %s: %s", target, e)
            raise StorageWriteError(f"cannot write {target}: {e.strerror or e}") from e

        logger.info("Saved %d item(s) to %s", len(state.items), target)
