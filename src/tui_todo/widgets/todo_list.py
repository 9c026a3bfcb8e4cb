"""Todo list and mode badge widgets."""

from __future__ import annotations

from rich.text import Text
from textual.widgets import Static

from tui_todo.models import ListState, Mode, TodoItem
from tui_todo import theme


def item_text(item: TodoItem, selected: bool = False, caret: bool = False) -> Text:
    """Render one item as a styled line, optionally with a block caret."""
    if selected:
        style = theme.ITEM_SELECTED.style
    elif item.done:
        style = theme.ITEM_DONE.style
    else:
        style = theme.ITEM.style

    if not caret:
        return Text(item.render(), style=style)

    buffer = item.text
    before = "".join(buffer.content[: buffer.cursor])
    at = buffer.content[buffer.cursor] if buffer.cursor < len(buffer) else " "
    after = "".join(buffer.content[buffer.cursor + 1 :])
    line = Text(style=style)
    line.append(f" {item.mark} {before}")
    line.append(at, style=theme.CARET.style)
    line.append(f"{after} ")
    return line


def list_text(state: ListState) -> Text:
    """Render the whole list; the caret is shown on the selected item in Insert mode."""
    lines = [
        item_text(
            item,
            selected=i == state.selected,
            caret=i == state.selected and state.mode is Mode.INSERT,
        )
        for i, item in enumerate(state.items)
    ]
    return Text("\n").join(lines)


class TodoList(Static):
    """The list of todo items."""

    DEFAULT_CSS = """
    TodoList {
        width: 100%;
        height: 1fr;
    }
    """

    def show(self, state: ListState) -> None:
        self.update(list_text(state))


class ModeBadge(Static):
    """One-line indicator of the current mode."""

    DEFAULT_CSS = """
    ModeBadge {
        width: 100%;
        height: 1;
    }
    """

    def show(self, mode: Mode) -> None:
        self.update(Text(mode.value, style=theme.MODE_COLORS[mode].style))
