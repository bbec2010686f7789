"""Tests for novametrics.terminal (curses is mocked throughout)."""

from __future__ import annotations

import curses
from unittest.mock import MagicMock, patch

import pytest

from novametrics.navigation import Key
from novametrics.panels import Panel, PanelSet
from novametrics.terminal import (
    MIN_COLS,
    MIN_ROWS,
    CursesSurface,
    TerminalError,
    decode_key,
    wrap_text,
)

# ── decode_key ─────────────────────────────────────────────────────────────


@pytest.mark.parametrize(
    ("code", "expected"),
    [
        (curses.KEY_UP, Key.UP),
        (curses.KEY_DOWN, Key.DOWN),
        (curses.KEY_ENTER, Key.ENTER),
        (10, Key.ENTER),
        (13, Key.ENTER),
        (ord("q"), Key.QUIT),
        (ord("1"), Key.ONE),
        (ord("2"), Key.TWO),
        (ord("3"), Key.THREE),
        (ord("Q"), None),
        (ord("x"), None),
        (ord("4"), None),
        (curses.KEY_LEFT, None),
        (curses.KEY_RESIZE, None),
        (-1, None),
    ],
)
def test_decode_key(code: int, expected: Key | None) -> None:
    assert decode_key(code) is expected


# ── wrap_text ──────────────────────────────────────────────────────────────


def test_wrap_keeps_short_lines() -> None:
    assert wrap_text("CPU: 1.00%\nMemory: 2 KB", 40) == ["CPU: 1.00%", "Memory: 2 KB"]


def test_wrap_splits_long_lines() -> None:
    assert wrap_text("one two three four", 9) == ["one two", "three", "four"]


def test_wrap_keeps_blank_lines() -> None:
    assert wrap_text("a\n\nb", 10) == ["a", "", "b"]


def test_wrap_zero_width() -> None:
    assert wrap_text("anything", 0) == []


# ── CursesSurface ──────────────────────────────────────────────────────────


def _panels() -> PanelSet:
    return PanelSet(
        Panel("Welcome", "NovaMetrics", highlighted=True),
        Panel("Metrics", "CPU: 20.00%\nMemory: 6000 KB"),
        Panel("Instructions", "Press 'q' to quit."),
    )


def _window(rows: int, cols: int) -> MagicMock:
    win = MagicMock()
    win.getmaxyx.return_value = (rows, cols)
    return win


@pytest.fixture
def mock_curses():
    with patch("novametrics.terminal.curses") as mocked:
        mocked.error = curses.error
        mocked.KEY_UP = curses.KEY_UP
        mocked.KEY_DOWN = curses.KEY_DOWN
        mocked.KEY_ENTER = curses.KEY_ENTER
        mocked.KEY_RESIZE = curses.KEY_RESIZE
        mocked.color_pair.return_value = 0
        mocked.A_BOLD = 0
        mocked.A_NORMAL = 0
        yield mocked


class TestRawMode:
    def test_enter_and_exit(self, mock_curses: MagicMock) -> None:
        stdscr = _window(24, 80)
        mock_curses.initscr.return_value = stdscr
        with CursesSurface(25) as surface:
            assert surface.stdscr is stdscr
            mock_curses.raw.assert_called_once()
            mock_curses.noecho.assert_called_once()
            stdscr.keypad.assert_called_with(True)
            stdscr.timeout.assert_called_once_with(25)
        mock_curses.noraw.assert_called_once()
        mock_curses.echo.assert_called_once()
        mock_curses.endwin.assert_called_once()
        assert surface.stdscr is None

    def test_exit_restores_on_exception(self, mock_curses: MagicMock) -> None:
        mock_curses.initscr.return_value = _window(24, 80)
        with pytest.raises(RuntimeError):
            with CursesSurface():
                raise RuntimeError("boom")
        mock_curses.endwin.assert_called_once()

    def test_init_failure_raises_terminal_error(self, mock_curses: MagicMock) -> None:
        mock_curses.initscr.return_value = _window(24, 80)
        mock_curses.raw.side_effect = curses.error("raw failed")
        with pytest.raises(TerminalError, match="terminal initialisation failed"):
            CursesSurface().enter_raw_mode()
        mock_curses.endwin.assert_called_once()

    def test_cursor_hiding_optional(self, mock_curses: MagicMock) -> None:
        mock_curses.initscr.return_value = _window(24, 80)
        mock_curses.curs_set.side_effect = curses.error("unsupported")
        surface = CursesSurface()
        surface.enter_raw_mode()
        assert surface.stdscr is not None

    def test_exit_without_enter_is_noop(self, mock_curses: MagicMock) -> None:
        CursesSurface().exit_raw_mode()
        mock_curses.endwin.assert_not_called()


class TestPollKey:
    def test_decodes_getch(self, mock_curses: MagicMock) -> None:
        surface = CursesSurface()
        surface.stdscr = _window(24, 80)
        surface.stdscr.getch.return_value = curses.KEY_DOWN
        assert surface.poll_key() is Key.DOWN

    def test_timeout_is_none(self, mock_curses: MagicMock) -> None:
        surface = CursesSurface()
        surface.stdscr = _window(24, 80)
        surface.stdscr.getch.return_value = -1
        assert surface.poll_key() is None

    def test_read_failure(self, mock_curses: MagicMock) -> None:
        surface = CursesSurface()
        surface.stdscr = _window(24, 80)
        surface.stdscr.getch.side_effect = curses.error("read")
        with pytest.raises(TerminalError, match="input read failed"):
            surface.poll_key()

    def test_resize_repaints_last_frame(self, mock_curses: MagicMock) -> None:
        surface = CursesSurface()
        surface.stdscr = _window(24, 80)
        surface.paint(_panels())
        surface.stdscr.reset_mock()
        surface.stdscr.getmaxyx.return_value = (30, 100)
        surface.stdscr.getch.return_value = curses.KEY_RESIZE

        assert surface.poll_key() is None
        mock_curses.update_lines_cols.assert_called_once()
        surface.stdscr.clear.assert_called_once()
        # Repainted at the new width without any new content
        assert [c.args[1] for c in surface.stdscr.subwin.call_args_list] == [96, 96, 96]

    def test_resize_before_first_paint(self, mock_curses: MagicMock) -> None:
        surface = CursesSurface()
        surface.stdscr = _window(24, 80)
        surface.stdscr.getch.return_value = curses.KEY_RESIZE
        assert surface.poll_key() is None
        surface.stdscr.clear.assert_called_once()
        surface.stdscr.subwin.assert_not_called()


class TestPaint:
    def test_three_boxes(self, mock_curses: MagicMock) -> None:
        surface = CursesSurface()
        surface.stdscr = _window(24, 80)
        surface.paint(_panels())
        calls = surface.stdscr.subwin.call_args_list
        # (h, w, y, x): title, body, footer stacked inside a 2-cell margin
        assert [c.args for c in calls] == [
            (3, 76, 2, 2),
            (14, 76, 5, 2),
            (3, 76, 19, 2),
        ]
        surface.stdscr.refresh.assert_called_once()

    def test_panel_text_written(self, mock_curses: MagicMock) -> None:
        surface = CursesSurface()
        surface.stdscr = _window(24, 80)
        sub = MagicMock()
        surface.stdscr.subwin.return_value = sub
        surface.paint(_panels())
        written = [c.args[2] for c in sub.addstr.call_args_list if len(c.args) > 2]
        assert "NovaMetrics" in written
        assert "Memory: 6000 KB" in written

    def test_too_small(self, mock_curses: MagicMock) -> None:
        surface = CursesSurface()
        surface.stdscr = _window(MIN_ROWS - 1, MIN_COLS)
        surface.paint(_panels())
        surface.stdscr.subwin.assert_not_called()
        message = surface.stdscr.addstr.call_args.args[2]
        assert message.startswith("Terminal too small")
