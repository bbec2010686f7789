"""curses terminal surface: raw mode session, key decoding and panel painting."""

from __future__ import annotations

import curses
import logging
import textwrap
from typing import Any

from novametrics.navigation import Key
from novametrics.panels import Panel, PanelSet

logger = logging.getLogger(__name__)

# ── Constants ──────────────────────────────────────────────────────────────

MARGIN = 2
TITLE_ROWS = 3
FOOTER_ROWS = 3
MIN_COLS = 24
MIN_ROWS = 2 * MARGIN + TITLE_ROWS + FOOTER_ROWS + 3

# Curses colour-pair IDs
C_TITLE = 1
C_HIGHLIGHT = 2
C_DIM = 3

_ENTER_CODES = {curses.KEY_ENTER, 10, 13}

_CHAR_KEYS: dict[int, Key] = {
    ord("q"): Key.QUIT,
    ord("1"): Key.ONE,
    ord("2"): Key.TWO,
    ord("3"): Key.THREE,
}


class TerminalError(Exception):
    """The terminal could not be set up or read from."""


def decode_key(code: int) -> Key | None:
    """Map a curses key code to a navigation Key (None = ignore)."""
    if code == curses.KEY_UP:
        return Key.UP
    if code == curses.KEY_DOWN:
        return Key.DOWN
    if code in _ENTER_CODES:
        return Key.ENTER
    return _CHAR_KEYS.get(code)


# ── Colour helpers ─────────────────────────────────────────────────────────


def _init_colors() -> None:
    curses.start_color()
    curses.use_default_colors()
    curses.init_pair(C_TITLE, curses.COLOR_CYAN, -1)
    curses.init_pair(C_HIGHLIGHT, curses.COLOR_YELLOW, -1)
    curses.init_pair(C_DIM, curses.COLOR_WHITE, -1)


# ── Drawing primitives ─────────────────────────────────────────────────────


def _safe(win: Any, *args: Any) -> None:
    """addstr wrapper that swallows out-of-bounds errors."""
    try:
        win.addstr(*args)
    except curses.error:
        pass


def wrap_text(text: str, width: int) -> list[str]:
    """Wrap each line of *text* to *width*, keeping blank lines."""
    if width < 1:
        return []
    lines: list[str] = []
    for line in text.splitlines():
        lines.extend(textwrap.wrap(line.strip(), width) or [""])
    return lines


def _draw_panel(win: Any, y: int, x: int, h: int, w: int, panel: Panel) -> None:
    """Draw a bordered, titled box with the panel's wrapped text inside."""
    try:
        sub = win.subwin(h, w, y, x)
    except curses.error:
        return
    attr = curses.color_pair(C_HIGHLIGHT) if panel.highlighted else 0
    sub.attron(attr)
    try:
        sub.box()
    except curses.error:
        pass
    sub.attroff(attr)

    if panel.label and len(panel.label) + 4 < w:
        label_attr = curses.color_pair(C_HIGHLIGHT if panel.highlighted else C_TITLE)
        _safe(sub, 0, 2, f" {panel.label} ", label_attr | curses.A_BOLD)

    text_attr = curses.color_pair(C_HIGHLIGHT) if panel.highlighted else curses.A_NORMAL
    for row, line in enumerate(wrap_text(panel.text, w - 4)[: h - 2], start=1):
        _safe(sub, row, 2, line, text_attr)


# ── Surface ────────────────────────────────────────────────────────────────


class CursesSurface:
    """TerminalSurface on top of curses.

    Use as a context manager: raw mode is entered on ``__enter__`` and
    always restored on ``__exit__``, whatever ended the session.
    """

    def __init__(self, poll_timeout_ms: int = 10) -> None:
        self.poll_timeout_ms = poll_timeout_ms
        self.stdscr: Any = None
        self._last_panels: PanelSet | None = None

    def __enter__(self) -> CursesSurface:
        self.enter_raw_mode()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.exit_raw_mode()

    def enter_raw_mode(self) -> None:
        try:
            self.stdscr = curses.initscr()
            curses.noecho()
            curses.raw()
            self.stdscr.keypad(True)
            if curses.has_colors():
                _init_colors()
            self.stdscr.timeout(self.poll_timeout_ms)
        except curses.error as e:
            self.exit_raw_mode()
            raise TerminalError(f"terminal initialisation failed: {e}") from e
        try:
            curses.curs_set(0)
        except curses.error:
            logger.debug("terminal cannot hide the cursor")
        logger.debug("raw mode on, poll timeout %d ms", self.poll_timeout_ms)

    def exit_raw_mode(self) -> None:
        if self.stdscr is None:
            return
        try:
            self.stdscr.keypad(False)
            self.clear()
            curses.noraw()
            curses.echo()
        except curses.error:
            logger.debug("partial terminal restore", exc_info=True)
        finally:
            curses.endwin()
            self.stdscr = None
        logger.debug("raw mode off")

    def clear(self) -> None:
        self.stdscr.erase()
        self.stdscr.refresh()

    def poll_key(self) -> Key | None:
        """Wait at most poll_timeout_ms for a key press.

        A resize is not a navigation key: the last frame is repainted at the
        new size and None is returned.
        """
        try:
            code = self.stdscr.getch()
        except curses.error as e:
            raise TerminalError(f"input read failed: {e}") from e
        if code == curses.KEY_RESIZE:
            self._repaint_after_resize()
            return None
        return decode_key(code)

    def _repaint_after_resize(self) -> None:
        curses.update_lines_cols()
        self.stdscr.clear()
        if self._last_panels is not None:
            self.paint(self._last_panels)

    def paint(self, panels: PanelSet) -> None:
        self._last_panels = panels
        stdscr = self.stdscr
        stdscr.erase()
        max_y, max_x = stdscr.getmaxyx()

        if max_y < MIN_ROWS or max_x < MIN_COLS:
            _safe(stdscr, 0, 0, f"Terminal too small (need {MIN_COLS}x{MIN_ROWS}+)")
            stdscr.refresh()
            return

        width = max_x - 2 * MARGIN
        body_rows = max_y - 2 * MARGIN - TITLE_ROWS - FOOTER_ROWS
        y = MARGIN
        _draw_panel(stdscr, y, MARGIN, TITLE_ROWS, width, panels.title)
        y += TITLE_ROWS
        _draw_panel(stdscr, y, MARGIN, body_rows, width, panels.body)
        y += body_rows
        _draw_panel(stdscr, y, MARGIN, FOOTER_ROWS, width, panels.footer)
        stdscr.refresh()
