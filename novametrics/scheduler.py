"""Redraw scheduling: navigation forces a redraw, otherwise the timer does."""

from __future__ import annotations

from dataclasses import dataclass

from novametrics.navigation import Screen, Step

REFRESH_INTERVAL = 2.0  # seconds


def should_redraw(
    dirty: bool,
    last_refresh: float,
    now: float,
    interval: float = REFRESH_INTERVAL,
) -> bool:
    return dirty or (now - last_refresh) > interval


@dataclass
class DashboardState:
    """Everything the loop carries between iterations."""

    screen: Screen = Screen.WELCOME
    dirty: bool = True
    last_refresh: float = 0.0

    def apply(self, step: Step) -> None:
        self.screen = step.screen
        if step.dirty:
            self.dirty = True

    def redraw_due(self, now: float, interval: float = REFRESH_INTERVAL) -> bool:
        return should_redraw(self.dirty, self.last_refresh, now, interval)

    def mark_refreshed(self, now: float) -> None:
        self.dirty = False
        self.last_refresh = now
