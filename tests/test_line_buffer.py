"""Tests for cmdshell.history.LineBuffer."""

from __future__ import annotations

import random

from cmdshell.history import HISTORY_SENTINEL, LineBuffer


def _buffer_with(*lines: str) -> LineBuffer:
    """Commit ``lines`` oldest first, so the last one is the newest entry."""
    buf = LineBuffer()
    for line in lines:
        buf.commit(line)
    return buf


# ---------------------------------------------------------------------------
# Editing
# ---------------------------------------------------------------------------


class TestEditing:
    def test_starts_live_and_empty(self) -> None:
        buf = LineBuffer()
        assert buf.effective_input() == ""
        assert buf.history_index == HISTORY_SENTINEL
        assert not buf.is_browsing

    def test_append_and_backspace_match_string_model(self) -> None:
        rng = random.Random(1234)
        for _ in range(50):
            buf = LineBuffer()
            expected = ""
            for _ in range(rng.randint(0, 40)):
                if rng.random() < 0.35:
                    buf.backspace()
                    expected = expected[:-1]
                else:
                    chunk = rng.choice(["a", "b", " ", "xyz", "é"])
                    buf.append(chunk)
                    expected += chunk
                assert buf.effective_input() == expected

    def test_backspace_on_empty_is_noop(self) -> None:
        buf = LineBuffer()
        buf.backspace()
        buf.backspace()
        assert buf.effective_input() == ""
        assert buf.history_index == HISTORY_SENTINEL

    def test_reset_clears_line_but_keeps_history(self) -> None:
        buf = _buffer_with("one")
        buf.append("draft")
        buf.reset()
        assert buf.effective_input() == ""
        assert buf.history == ("one",)


# ---------------------------------------------------------------------------
# History navigation
# ---------------------------------------------------------------------------


class TestHistoryNavigation:
    def test_up_on_empty_history_stays_live_and_empty(self) -> None:
        buf = LineBuffer()
        buf.append("typed")
        buf.history_up()
        assert buf.history_index == HISTORY_SENTINEL
        assert buf.effective_input() == ""

    def test_up_visits_newest_to_oldest_then_wraps_to_blank(self) -> None:
        buf = _buffer_with("first", "second", "third")
        seen = []
        for _ in range(3):
            buf.history_up()
            seen.append(buf.effective_input())
        assert seen == ["third", "second", "first"]

        buf.history_up()
        assert buf.history_index == HISTORY_SENTINEL
        assert buf.effective_input() == ""

    def test_up_len_plus_one_times_returns_to_live_empty(self) -> None:
        for n in range(0, 6):
            buf = _buffer_with(*[f"cmd{i}" for i in range(n)])
            for _ in range(n + 1):
                buf.history_up()
            assert buf.history_index == HISTORY_SENTINEL
            assert buf.effective_input() == ""

    def test_down_from_live_jumps_to_oldest(self) -> None:
        buf = _buffer_with("first", "second", "third")
        buf.history_down()
        assert buf.history_index == 2
        assert buf.effective_input() == "first"

        buf.history_down()
        assert buf.effective_input() == "second"
        buf.history_down()
        assert buf.effective_input() == "third"

    def test_down_past_newest_returns_to_live_with_last_browsed_text(self) -> None:
        buf = _buffer_with("first", "second")
        buf.history_up()
        assert buf.effective_input() == "second"
        buf.history_down()
        assert buf.history_index == HISTORY_SENTINEL
        assert buf.effective_input() == "second"

    def test_down_on_empty_history_stays_live(self) -> None:
        buf = LineBuffer()
        buf.history_down()
        assert buf.history_index == HISTORY_SENTINEL

    def test_index_stays_in_range(self) -> None:
        buf = _buffer_with("a", "b")
        rng = random.Random(7)
        for _ in range(200):
            if rng.random() < 0.5:
                buf.history_up()
            else:
                buf.history_down()
            assert HISTORY_SENTINEL <= buf.history_index <= len(buf.history) - 1


# ---------------------------------------------------------------------------
# Browse mode write-through
# ---------------------------------------------------------------------------


class TestBrowseWriteThrough:
    def test_append_while_browsing_edits_a_copy(self) -> None:
        buf = _buffer_with("greet bob")
        buf.history_up()
        buf.append("by")
        assert buf.effective_input() == "greet bobby"
        assert buf.history_index == HISTORY_SENTINEL
        assert buf.history == ("greet bob",)

    def test_backspace_while_browsing_edits_a_copy(self) -> None:
        buf = _buffer_with("ls")
        buf.history_up()
        buf.backspace()
        assert buf.effective_input() == "l"
        assert not buf.is_browsing
        assert buf.history == ("ls",)

    def test_effective_input_refreshes_current_input(self) -> None:
        buf = _buffer_with("status")
        buf.history_up()
        assert buf.effective_input() == "status"
        assert buf.current_input == "status"


# ---------------------------------------------------------------------------
# Commit
# ---------------------------------------------------------------------------


class TestCommit:
    def test_commit_prepends_and_resets(self) -> None:
        buf = LineBuffer()
        buf.append("one")
        buf.commit("one")
        buf.append("two")
        buf.commit("two")
        assert buf.history == ("two", "one")
        assert buf.effective_input() == ""
        assert buf.history_index == HISTORY_SENTINEL

    def test_commit_while_browsing_returns_to_live(self) -> None:
        buf = _buffer_with("again")
        buf.history_up()
        buf.commit(buf.effective_input())
        assert buf.history == ("again", "again")
        assert not buf.is_browsing

    def test_history_snapshot_is_immutable(self) -> None:
        buf = _buffer_with("x")
        snapshot = buf.history
        buf.commit("y")
        assert snapshot == ("x",)
