"""Main Textual App for TUI Todo."""

from __future__ import annotations

import logging
import os

from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.timer import Timer
from textual.widgets import Header

from tui_todo.keymap import EventKind, Outcome, decode_key, route
from tui_todo.models import AppConfig, ListState, Mode
from tui_todo.screens.confirm_screen import ConfirmScreen
from tui_todo.storage import StorageError, TodoStore
from tui_todo.widgets.todo_list import ModeBadge, TodoList

logger = logging.getLogger(__name__)

# Events that change what gets written to disk.
_EDIT_EVENTS = frozenset({
    EventKind.TOGGLE_DONE,
    EventKind.ADD_ITEM,
    EventKind.DELETE_ITEM,
    EventKind.CHARACTER,
    EventKind.BACKSPACE,
})


class TodoApp(App):
    """TUI Todo Application.

    Each key press is decoded for the current mode, routed to the list state,
    and followed by a redraw. Quitting from Normal mode saves first.
    """

    TITLE = "TUI Todo"
    ENABLE_COMMAND_PALETTE = False
    CSS = """
    Screen {
        align: center middle;
    }
    #list-area {
        width: 70%;
        height: 90%;
    }
    """

    BINDINGS = [
        Binding("ctrl+s", "save", "Save", priority=True),
    ]

    def __init__(
        self,
        store: TodoStore,
        state: ListState | None = None,
        config: AppConfig | None = None,
        no_color: bool = False,
    ) -> None:
        if no_color:
            os.environ["NO_COLOR"] = "1"
        super().__init__()
        self.store = store
        self.config = config or AppConfig()
        self.state = state if state is not None else ListState.default(self.config.max_length)
        self._modified: bool = False
        self._autosave_timer: Timer | None = None

    def compose(self) -> ComposeResult:
        yield Header()
        with Vertical(id="list-area"):
            yield TodoList(id="todo-list")
            yield ModeBadge(id="mode-badge")

    def on_mount(self) -> None:
        self._refresh_ui()

    # ── UI Refresh ──

    def _refresh_ui(self) -> None:
        self.query_one(TodoList).show(self.state)
        self.query_one(ModeBadge).show(self.state.mode)
        self._update_title()

    def _update_title(self) -> None:
        total = len(self.state.items)
        mod = " [*]" if self._modified else ""
        self.title = f"TUI Todo - {self.state.done_count()}/{total} done{mod}"

    # ── Input ──

    def on_key(self, event: events.Key) -> None:
        """Decode the key for the current mode and apply it to the list."""
        if len(self.screen_stack) > 1:
            return  # a modal owns the keyboard
        decoded = decode_key(event.key, event.character, self.state.mode)
        if decoded is None:
            return
        event.prevent_default()
        event.stop()
        if route(self.state, decoded) is Outcome.QUIT:
            self.action_quit_app()
            return
        if decoded.kind in _EDIT_EVENTS:
            self._mark_modified()
        self._refresh_ui()

    # ── Saving ──

    def _save(self) -> bool:
        """Prune and save. Reports failures and returns False instead of raising.

        If pruning removed items while editing, the list drops back to Normal
        mode so typing cannot continue in a different item.
        """
        before = len(self.state.items)
        try:
            self.state.save(self.store)
        except StorageError as e:
            logger.error("Save failed: %s", e)
            self.notify(f"Save failed: {e}", severity="error")
            saved = False
        else:
            self._modified = False
            saved = True
        if self.state.mode is Mode.INSERT and len(self.state.items) < before:
            self.state.mode = Mode.NORMAL
        self._refresh_ui()
        return saved

    def _mark_modified(self) -> None:
        self._modified = True
        if self.config.autosave:
            self._schedule_autosave()

    def _cancel_autosave(self) -> None:
        if self._autosave_timer is not None:
            self._autosave_timer.stop()
            self._autosave_timer = None

    def _schedule_autosave(self) -> None:
        self._cancel_autosave()
        self._autosave_timer = self.set_timer(self.config.autosave_delay, self._do_autosave)

    def _do_autosave(self) -> None:
        self._autosave_timer = None
        if not self._modified:
            return
        if self.state.mode is not Mode.NORMAL:
            # Pruning would pull the item being typed out from under the caret.
            self._schedule_autosave()
            return
        self._save()

    # ── Actions ──

    def action_save(self) -> None:
        self._cancel_autosave()
        if self._save():
            self.notify("Saved", severity="information")

    def action_quit_app(self) -> None:
        self._cancel_autosave()
        if self._save():
            self.exit()
            return
        self.push_screen(
            ConfirmScreen(
                "Your todos could not be saved. Quit without saving?",
                yes_label="Quit",
                no_label="Stay",
            ),
            callback=self._on_quit_confirmed,
        )

    def _on_quit_confirmed(self, confirmed: bool | None) -> None:
        if confirmed:
            self.exit(return_code=1, message="Todos were not saved.")
