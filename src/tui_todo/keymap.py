"""Key decoding and the Normal/Insert input router."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable

from tui_todo.models import ListState, Mode


class EventKind(Enum):
    """Logical input events understood by the router."""

    QUIT = "quit"
    ENTER_INSERT = "enter_insert"
    EXIT_INSERT = "exit_insert"
    TOGGLE_DONE = "toggle_done"
    MOVE_UP = "move_up"
    MOVE_DOWN = "move_down"
    MOVE_LEFT = "move_left"
    MOVE_RIGHT = "move_right"
    ADD_ITEM = "add_item"
    DELETE_ITEM = "delete_item"
    CHARACTER = "character"
    BACKSPACE = "backspace"


@dataclass(frozen=True)
class InputEvent:
    """A decoded input event. ``char`` is only set for CHARACTER."""

    kind: EventKind
    char: str = ""


class Outcome(Enum):
    """What the driver should do after routing an event."""

    CONTINUE = "continue"
    QUIT = "quit"


# Textual key names → events. h/l and left/right in Normal mode are reserved
# for subtask folding and intentionally absent.
NORMAL_KEYS: dict[str, EventKind] = {
    "escape": EventKind.QUIT,
    "enter": EventKind.ENTER_INSERT,
    "i": EventKind.ENTER_INSERT,
    "r": EventKind.ENTER_INSERT,
    "space": EventKind.TOGGLE_DONE,
    "o": EventKind.TOGGLE_DONE,
    "j": EventKind.MOVE_DOWN,
    "down": EventKind.MOVE_DOWN,
    "k": EventKind.MOVE_UP,
    "up": EventKind.MOVE_UP,
    "n": EventKind.ADD_ITEM,
    "d": EventKind.DELETE_ITEM,
}

INSERT_KEYS: dict[str, EventKind] = {
    "escape": EventKind.EXIT_INSERT,
    "up": EventKind.MOVE_UP,
    "down": EventKind.MOVE_DOWN,
    "left": EventKind.MOVE_LEFT,
    "right": EventKind.MOVE_RIGHT,
    "backspace": EventKind.BACKSPACE,
}

# Keys that are swallowed in Insert mode rather than typed.
INSERT_RESERVED = frozenset({"enter", "tab", "shift+tab"})


def decode_key(key: str, character: str | None, mode: Mode) -> InputEvent | None:
    """Map a Textual key to a logical event for *mode*, or None if unmapped."""
    if mode is Mode.NORMAL:
        kind = NORMAL_KEYS.get(key)
        return InputEvent(kind) if kind is not None else None

    kind = INSERT_KEYS.get(key)
    if kind is not None:
        return InputEvent(kind)
    if key in INSERT_RESERVED:
        return None
    if character and len(character) == 1 and character.isprintable():
        return InputEvent(EventKind.CHARACTER, character)
    return None


# ── Routing ──

Handler = Callable[[ListState, InputEvent], Outcome]


def _quit(state: ListState, event: InputEvent) -> Outcome:
    return Outcome.QUIT


def _set_mode(mode: Mode) -> Handler:
    def handler(state: ListState, event: InputEvent) -> Outcome:
        state.mode = mode
        return Outcome.CONTINUE

    return handler


def _call(method: str) -> Handler:
    def handler(state: ListState, event: InputEvent) -> Outcome:
        getattr(state, method)()
        return Outcome.CONTINUE

    return handler


def _type_char(state: ListState, event: InputEvent) -> Outcome:
    if event.char:
        state.insert(event.char)
    return Outcome.CONTINUE


ROUTES: dict[Mode, dict[EventKind, Handler]] = {
    Mode.NORMAL: {
        EventKind.QUIT: _quit,
        EventKind.ENTER_INSERT: _set_mode(Mode.INSERT),
        EventKind.TOGGLE_DONE: _call("toggle_done"),
        EventKind.MOVE_DOWN: _call("down"),
        EventKind.MOVE_UP: _call("up"),
        EventKind.ADD_ITEM: _call("add"),
        EventKind.DELETE_ITEM: _call("remove"),
    },
    Mode.INSERT: {
        EventKind.EXIT_INSERT: _set_mode(Mode.NORMAL),
        EventKind.MOVE_UP: _call("up"),
        EventKind.MOVE_DOWN: _call("down"),
        EventKind.MOVE_LEFT: _call("left"),
        EventKind.MOVE_RIGHT: _call("right"),
        EventKind.CHARACTER: _type_char,
        EventKind.BACKSPACE: _call("delete"),
    },
}


def route(state: ListState, event: InputEvent) -> Outcome:
    """Apply *event* to *state* according to its current mode.

    Defined for every (mode, event) pair: anything without a route is a no-op.
    Saving on QUIT is left to the caller.
    """
    handler = ROUTES[state.mode].get(event.kind)
    if handler is None:
        return Outcome.CONTINUE
    return handler(state, event)
