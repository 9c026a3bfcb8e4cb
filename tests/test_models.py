"""Tests for data models."""

import random

import pytest

from tui_todo.models import (
    MAX_TEXT_LENGTH,
    AppConfig,
    ListState,
    Mode,
    TextCursor,
    TodoItem,
)


def _item(text: str, done: bool = False) -> TodoItem:
    return TodoItem(TextCursor.from_text(text), done=done)


def _texts(state: ListState) -> list[str]:
    return [item.text.text for item in state.items]


class TestTextCursor:
    def test_default_empty(self):
        buf = TextCursor()
        assert buf.text == ""
        assert buf.cursor == 0
        assert len(buf) == 0

    def test_insert_advances_cursor(self):
        buf = TextCursor()
        buf.insert("a")
        buf.insert("b")
        assert buf.text == "ab"
        assert buf.cursor == 2

    def test_insert_in_middle(self):
        buf = TextCursor.from_text("ac")
        buf.move_left()
        buf.insert("b")
        assert buf.text == "abc"
        assert buf.cursor == 2

    def test_insert_at_start(self):
        buf = TextCursor.from_text("bc", cursor=0)
        buf.insert("a")
        assert buf.text == "abc"
        assert buf.cursor == 1

    def test_move_left_floors_at_zero(self):
        buf = TextCursor.from_text("x", cursor=0)
        buf.move_left()
        assert buf.cursor == 0

    def test_move_right_stops_at_end(self):
        buf = TextCursor.from_text("xy")
        assert buf.cursor == 2
        buf.move_right()
        assert buf.cursor == 2

    def test_delete_removes_char_before_cursor(self):
        buf = TextCursor.from_text("abc")
        buf.delete()
        assert buf.text == "ab"
        assert buf.cursor == 2

    def test_delete_in_middle(self):
        buf = TextCursor.from_text("abc", cursor=2)
        buf.delete()
        assert buf.text == "ac"
        assert buf.cursor == 1

    def test_delete_at_start_is_noop(self):
        buf = TextCursor.from_text("abc", cursor=0)
        buf.delete()
        assert buf.text == "abc"
        assert buf.cursor == 0

    def test_delete_on_empty_is_noop(self):
        buf = TextCursor()
        before = TextCursor(list(buf.content), buf.cursor)
        buf.delete()
        buf.delete()
        assert buf == before

    def test_limit_saturates(self):
        buf = TextCursor.from_text("x" * MAX_TEXT_LENGTH)
        buf.insert("y")
        assert buf.text == "x" * MAX_TEXT_LENGTH
        assert buf.cursor == MAX_TEXT_LENGTH

    def test_limit_reached_by_typing(self):
        buf = TextCursor()
        for _ in range(MAX_TEXT_LENGTH + 5):
            buf.insert("z")
        assert len(buf) == MAX_TEXT_LENGTH

    def test_custom_limit(self):
        buf = TextCursor(limit=3)
        for ch in "abcdef":
            buf.insert(ch)
        assert buf.text == "abc"

    def test_oversized_content_is_kept(self):
        text = "q" * (MAX_TEXT_LENGTH + 10)
        buf = TextCursor.from_text(text)
        buf.insert("r")
        assert buf.text == text

    def test_cursor_clamped_on_construction(self):
        assert TextCursor.from_text("abc", cursor=10).cursor == 3
        assert TextCursor.from_text("abc", cursor=-4).cursor == 0

    def test_render_text_plain(self):
        assert TextCursor.from_text("hello", cursor=2).render_text() == "hello"

    def test_render_text_with_marker(self):
        buf = TextCursor.from_text("hello", cursor=2)
        assert buf.render_text("|") == "he|llo"

    def test_insert_then_left_restores_position(self):
        buf = TextCursor.from_text("ac", cursor=1)
        buf.insert("b")
        buf.move_left()
        assert buf.cursor == 1
        assert buf.render_text("|") == "a|bc"

    def test_unicode_characters(self):
        buf = TextCursor()
        for ch in "héllo 日本":
            buf.insert(ch)
        buf.delete()
        assert buf.text == "héllo 日"
        assert buf.cursor == 7

    def test_random_operations_keep_cursor_in_range(self):
        rng = random.Random(1234)
        buf = TextCursor(limit=20)
        for _ in range(2000):
            op = rng.choice(["insert", "delete", "left", "right"])
            if op == "insert":
                buf.insert(rng.choice("abcxyz "))
            elif op == "delete":
                buf.delete()
            elif op == "left":
                buf.move_left()
            else:
                buf.move_right()
            assert 0 <= buf.cursor <= len(buf.content)
            assert len(buf.content) <= 20


class TestTodoItem:
    def test_default(self):
        item = TodoItem()
        assert item.done is False
        assert item.is_empty
        assert item.render() == " [ ]  "

    def test_render_open(self):
        assert _item("buy milk").render() == " [ ] buy milk "

    def test_render_done(self):
        assert _item("buy milk", done=True).render() == " [*] buy milk "

    def test_toggle_done(self):
        item = _item("x")
        item.toggle_done()
        assert item.done is True
        item.toggle_done()
        assert item.done is False

    def test_delegates_editing(self):
        item = TodoItem()
        item.insert("a")
        item.insert("c")
        item.move_left()
        item.insert("b")
        item.move_right()
        item.delete()
        assert item.text.text == "ab"
        assert item.text.cursor == 2


class TestListStateDefaults:
    def test_default_has_one_blank_item(self):
        state = ListState.default()
        assert len(state.items) == 1
        assert state.items[0].is_empty
        assert state.selected == 0
        assert state.mode is Mode.NORMAL

    def test_default_passes_limit(self):
        state = ListState.default(max_length=5)
        assert state.items[0].text.limit == 5

    def test_selection_clamped_on_construction(self):
        state = ListState(items=[_item("a"), _item("b")], selected=9)
        assert state.selected == 1

    def test_empty_list_selection_is_zero(self):
        state = ListState(items=[], selected=3)
        assert state.selected == 0
        assert state.selected_item is None


class TestNavigation:
    def test_down_moves(self):
        state = ListState(items=[_item("a"), _item("b")])
        state.down()
        assert state.selected == 1

    def test_down_stops_at_last(self):
        state = ListState(items=[_item("a"), _item("b"), _item("c")], selected=2)
        state.down()
        assert state.selected == 2

    def test_up_floors_at_zero(self):
        state = ListState(items=[_item("a"), _item("b")])
        state.up()
        assert state.selected == 0

    def test_navigation_on_empty_list(self):
        state = ListState(items=[])
        state.down()
        state.up()
        state.left()
        state.right()
        assert state.selected == 0

    def test_left_right_move_text_cursor(self):
        state = ListState(items=[_item("abc")])
        state.left()
        state.left()
        assert state.items[0].text.cursor == 1
        state.right()
        assert state.items[0].text.cursor == 2


class TestMutation:
    def test_add_appends_and_enters_insert(self):
        state = ListState(items=[_item("a"), _item("b")])
        state.add()
        assert len(state.items) == 3
        assert state.selected == 2
        assert state.items[2].is_empty
        assert state.mode is Mode.INSERT

    def test_add_on_empty_list(self):
        state = ListState(items=[])
        state.add()
        assert state.selected == 0
        assert state.mode is Mode.INSERT

    def test_add_uses_state_limit(self):
        state = ListState(items=[], max_length=2)
        state.add()
        for ch in "abc":
            state.insert(ch)
        assert state.items[0].text.text == "ab"

    def test_remove_selects_previous(self):
        state = ListState(items=[_item("a"), _item("b"), _item("c")], selected=1)
        state.remove()
        assert _texts(state) == ["a", "c"]
        assert state.selected == 0

    def test_remove_first(self):
        state = ListState(items=[_item("a"), _item("b")], selected=0)
        state.remove()
        assert _texts(state) == ["b"]
        assert state.selected == 0

    def test_remove_last(self):
        state = ListState(items=[_item("a"), _item("b"), _item("c")], selected=2)
        state.remove()
        assert _texts(state) == ["a", "b"]
        assert state.selected == 1

    def test_remove_only_item_then_navigate(self):
        state = ListState(items=[_item("a")])
        state.remove()
        assert state.items == []
        assert state.selected == 0
        state.down()
        state.up()
        assert state.selected == 0

    def test_remove_on_empty_is_noop(self):
        state = ListState(items=[])
        state.remove()
        assert state.items == []

    def test_remove_ignores_content(self):
        state = ListState(items=[_item("keep"), _item("", done=True)], selected=1)
        state.remove()
        assert _texts(state) == ["keep"]

    def test_toggle_done_selected(self):
        state = ListState(items=[_item("a"), _item("b")], selected=1)
        state.toggle_done()
        assert state.items[1].done is True
        assert state.items[0].done is False

    def test_toggle_done_on_empty_is_noop(self):
        state = ListState(items=[])
        state.toggle_done()
        assert state.items == []

    def test_insert_and_delete_on_selected(self):
        state = ListState(items=[_item("buy milk", done=True), TodoItem()], selected=1)
        state.insert("x")
        assert state.items[1].text.text == "x"
        assert state.items[1].text.cursor == 1
        state.delete()
        assert state.items[1].text.text == ""

    def test_done_count(self):
        state = ListState(items=[_item("a", True), _item("b"), _item("c", True)])
        assert state.done_count() == 2

    def test_random_operations_keep_selection_in_range(self):
        rng = random.Random(42)
        state = ListState.default()
        ops = [state.up, state.down, state.add, state.remove, state.toggle_done,
               state.left, state.right, state.delete, state.prune_empty]
        for _ in range(3000):
            op = rng.choice(ops + [lambda: state.insert(rng.choice("ab"))])
            op()
            if state.items:
                assert 0 <= state.selected < len(state.items)
            else:
                assert state.selected == 0


class FakeStore:
    def __init__(self):
        self.saved = []

    def save(self, state):
        self.saved.append([item.text.text for item in state.items])


class FakeModeStore:
    def __init__(self):
        self.modes = []

    def save(self, state):
        self.modes.append(state.mode)


class TestPruneAndSave:
    def test_prune_removes_empty(self):
        state = ListState(items=[_item("a"), TodoItem(), _item("b"), TodoItem()])
        removed = state.prune_empty()
        assert removed == 2
        assert _texts(state) == ["a", "b"]

    def test_prune_reclamps_selection(self):
        state = ListState(items=[_item("a"), TodoItem(), TodoItem()], selected=2)
        state.prune_empty()
        assert state.selected == 0

    def test_prune_everything(self):
        state = ListState.default()
        state.prune_empty()
        assert state.items == []
        assert state.selected == 0

    def test_prune_does_not_change_mode(self):
        state = ListState(items=[_item("a")])
        state.add()
        assert state.prune_empty() == 1
        assert state.mode is Mode.INSERT
        assert state.selected == 0

    def test_save_persists_current_mode(self):
        store = FakeModeStore()
        state = ListState(items=[_item("a")])
        state.add()
        state.save(store)
        assert store.modes == [Mode.INSERT]

    def test_save_prunes_before_persisting(self):
        store = FakeStore()
        state = ListState(items=[_item("a"), TodoItem(), _item("b")], selected=2)
        state.save(store)
        assert store.saved == [["a", "b"]]
        assert _texts(state) == ["a", "b"]
        assert state.selected == 1


class TestAppConfig:
    def test_defaults(self):
        config = AppConfig()
        assert config.data_file == ""
        assert config.backup is True
        assert config.max_length == MAX_TEXT_LENGTH
        assert config.autosave is False
        assert config.autosave_delay == pytest.approx(2.0)
        assert config.log_level == "WARNING"
