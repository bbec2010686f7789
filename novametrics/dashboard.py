"""Interactive terminal dashboard for live CPU, memory and battery metrics.

Seven screens, navigated with the arrow keys (and Enter, or 1/2/3 in the
linear navigation mode). The view refreshes every two seconds and right
after every recognised key press.

Usage:
    novametrics
    NOVAMETRICS_CONFIG=path/to/config.toml novametrics
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from collections.abc import Callable
from typing import Protocol

from novametrics.config import (
    config_path_from_env,
    configure_logging,
    load_config,
    navigation_mode,
    poll_timeout,
)
from novametrics.navigation import Key, NavigationMode, transition
from novametrics.panels import PanelSet, render_panels
from novametrics.provider import MetricsProvider, PsutilMetricsProvider
from novametrics.scheduler import REFRESH_INTERVAL, DashboardState
from novametrics.terminal import CursesSurface, TerminalError

logger = logging.getLogger(__name__)


class Surface(Protocol):
    def poll_key(self) -> Key | None: ...

    def paint(self, panels: PanelSet) -> None: ...


# ── Main loop ──────────────────────────────────────────────────────────────


def run_loop(
    surface: Surface,
    provider: MetricsProvider,
    mode: NavigationMode = NavigationMode.CIRCULAR,
    clock: Callable[[], float] = time.monotonic,
    interval: float = REFRESH_INTERVAL,
    state: DashboardState | None = None,
) -> DashboardState:
    """Poll, navigate and redraw until the quit key is pressed."""
    if state is None:
        state = DashboardState()

    while True:
        step = transition(state.screen, surface.poll_key(), mode)
        if step.quit:
            logger.info("quit requested on %s", state.screen.name)
            return state
        if step.dirty:
            logger.debug("%s -> %s", state.screen.name, step.screen.name)
        state.apply(step)

        now = clock()
        if state.redraw_due(now, interval):
            surface.paint(render_panels(state.screen, provider, mode))
            state.mark_refreshed(now)
            logger.debug("redrew %s", state.screen.name)


# ── CLI entry point ────────────────────────────────────────────────────────


def main() -> int:
    parser = argparse.ArgumentParser(
        description="NovaMetrics: live CPU, memory and battery dashboard.",
        epilog="Set NOVAMETRICS_CONFIG to use a config file other than "
        "~/.config/novametrics/config.toml.",
    )
    parser.parse_args()

    config = load_config(config_path_from_env())
    configure_logging(config)
    mode = navigation_mode(config)
    poll_ms = poll_timeout(config)

    provider = PsutilMetricsProvider()
    provider.warm_up()

    logger.info("starting in %s mode", mode.value)
    try:
        with CursesSurface(poll_ms) as surface:
            run_loop(surface, provider, mode)
    except TerminalError as e:
        logger.error("%s", e)
        print(f"novametrics: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        pass
    return 0


if __name__ == "__main__":
    sys.exit(main())
