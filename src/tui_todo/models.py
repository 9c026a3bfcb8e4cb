"""Data models for TUI Todo."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tui_todo.storage import TodoStore

MAX_TEXT_LENGTH = 100

DONE_MARK = "[*]"
OPEN_MARK = "[ ]"


class Mode(Enum):
    """Interaction mode of the list."""

    NORMAL = "Normal"
    INSERT = "Insert"


@dataclass
class TextCursor:
    """Editable text buffer with an insertion point.

    ``cursor`` is an insertion point, so it ranges over ``0..len(content)``
    inclusive. Inserting places the character at the cursor and advances it;
    deleting removes the character just before the cursor.
    """

    content: list[str] = field(default_factory=list)
    cursor: int = 0
    limit: int = field(default=MAX_TEXT_LENGTH, compare=False)

    def __post_init__(self) -> None:
        self.cursor = max(0, min(self.cursor, len(self.content)))

    @classmethod
    def from_text(cls, text: str, cursor: int | None = None, limit: int = MAX_TEXT_LENGTH) -> TextCursor:
        """Build a buffer from a string. Cursor defaults to end of text."""
        content = list(text)
        return cls(content, len(content) if cursor is None else cursor, limit)

    @property
    def text(self) -> str:
        return "".join(self.content)

    def __len__(self) -> int:
        return len(self.content)

    def move_left(self) -> None:
        if self.cursor > 0:
            self.cursor -= 1

    def move_right(self) -> None:
        if self.cursor < len(self.content):
            self.cursor += 1

    def insert(self, ch: str) -> None:
        """Insert one character at the cursor. Ignored once the limit is reached."""
        if len(self.content) >= self.limit:
            return
        self.content.insert(self.cursor, ch)
        self.cursor += 1

    def delete(self) -> None:
        """Backspace: remove the character before the cursor."""
        if self.cursor == 0:
            return
        del self.content[self.cursor - 1]
        self.cursor -= 1

    def render_text(self, marker: str = "") -> str:
        """Return the text, with *marker* spliced in at the cursor if given."""
        if not marker:
            return self.text
        return "".join(self.content[: self.cursor]) + marker + "".join(self.content[self.cursor :])


@dataclass
class TodoItem:
    """A single todo entry."""

    text: TextCursor = field(default_factory=TextCursor)
    done: bool = False

    @property
    def is_empty(self) -> bool:
        return not self.text.content

    @property
    def mark(self) -> str:
        return DONE_MARK if self.done else OPEN_MARK

    def toggle_done(self) -> None:
        self.done = not self.done

    def render(self) -> str:
        return f" {self.mark} {self.text.render_text()} "

    # Text editing is delegated to the buffer.

    def move_left(self) -> None:
        self.text.move_left()

    def move_right(self) -> None:
        self.text.move_right()

    def insert(self, ch: str) -> None:
        self.text.insert(ch)

    def delete(self) -> None:
        self.text.delete()


@dataclass
class ListState:
    """The editable todo list: items, selection and mode.

    Whenever ``items`` is non-empty, ``0 <= selected < len(items)`` holds after
    every public operation. On an empty list ``selected`` is 0 and all item
    operations are no-ops.
    """

    items: list[TodoItem] = field(default_factory=list)
    selected: int = 0
    mode: Mode = Mode.NORMAL
    max_length: int = field(default=MAX_TEXT_LENGTH, compare=False)

    def __post_init__(self) -> None:
        self.clamp()

    @classmethod
    def default(cls, max_length: int = MAX_TEXT_LENGTH) -> ListState:
        """One blank item, Normal mode."""
        return cls(
            items=[TodoItem(TextCursor(limit=max_length))],
            max_length=max_length,
        )

    @property
    def selected_item(self) -> TodoItem | None:
        if not self.items:
            return None
        return self.items[self.selected]

    def clamp(self) -> None:
        """Pull ``selected`` back into range for the current item count."""
        if not self.items:
            self.selected = 0
        else:
            self.selected = max(0, min(self.selected, len(self.items) - 1))

    # ── Navigation ──

    def up(self) -> None:
        if self.selected > 0:
            self.selected -= 1

    def down(self) -> None:
        if self.items and self.selected < len(self.items) - 1:
            self.selected += 1

    def left(self) -> None:
        item = self.selected_item
        if item is not None:
            item.move_left()

    def right(self) -> None:
        item = self.selected_item
        if item is not None:
            item.move_right()

    # ── List mutation ──

    def add(self) -> None:
        """Append a blank item, select it and start editing it."""
        self.items.append(TodoItem(TextCursor(limit=self.max_length)))
        self.selected = len(self.items) - 1
        self.mode = Mode.INSERT

    def remove(self) -> None:
        """Remove the selected item and move the selection up one."""
        if not self.items:
            return
        del self.items[self.selected]
        self.up()
        self.clamp()

    def toggle_done(self) -> None:
        item = self.selected_item
        if item is not None:
            item.toggle_done()

    # ── Text editing on the selected item ──

    def insert(self, ch: str) -> None:
        item = self.selected_item
        if item is not None:
            item.insert(ch)

    def delete(self) -> None:
        item = self.selected_item
        if item is not None:
            item.delete()

    # ── Saving ──

    def prune_empty(self) -> int:
        """Drop items with empty text. Returns how many were removed."""
        kept = [item for item in self.items if not item.is_empty]
        removed = len(self.items) - len(kept)
        self.items = kept
        self.clamp()
        return removed

    def save(self, store: TodoStore) -> None:
        """Prune empty items, then persist exactly what remains."""
        self.prune_empty()
        store.save(self)

    def done_count(self) -> int:
        return sum(1 for item in self.items if item.done)


@dataclass
class AppConfig:
    """User configuration stored in ~/.tui-todo/config.toml."""

    data_file: str = ""  # empty = <config dir>/todos.json
    backup: bool = True
    max_length: int = MAX_TEXT_LENGTH
    autosave: bool = False
    autosave_delay: float = 2.0
    log_file: str = ""  # empty = <config dir>/tui-todo.log
    log_level: str = "WARNING"
