"""Screen navigation for the dashboard.

Two interaction modes exist and never mix:

* ``circular`` (default): Up/Down walk the top-level screens and loop
  around the detail screens, Enter drills down.
* ``linear``: Up/Down walk one straight list, and 1/2/3 jump from the
  detailed-metrics menu straight to the CPU/Memory/Battery screens.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Screen(Enum):
    WELCOME = "welcome"
    METRICS = "metrics"
    INSTRUCTIONS = "instructions"
    DETAILED_METRICS = "detailed_metrics"
    CPU_DETAILS = "cpu_details"
    MEMORY_DETAILS = "memory_details"
    BATTERY_DETAILS = "battery_details"


class Key(Enum):
    UP = "up"
    DOWN = "down"
    ENTER = "enter"
    QUIT = "quit"
    ONE = "1"
    TWO = "2"
    THREE = "3"


class NavigationMode(Enum):
    CIRCULAR = "circular"
    LINEAR = "linear"


@dataclass(frozen=True)
class Step:
    """Outcome of one key press."""

    screen: Screen
    dirty: bool = False
    quit: bool = False


# ── Transition tables ──────────────────────────────────────────────────────

_S = Screen

CIRCULAR_TABLE: dict[tuple[Screen, Key], Screen] = {
    (_S.WELCOME, Key.UP): _S.WELCOME,
    (_S.WELCOME, Key.DOWN): _S.METRICS,
    (_S.METRICS, Key.UP): _S.WELCOME,
    (_S.METRICS, Key.DOWN): _S.INSTRUCTIONS,
    (_S.METRICS, Key.ENTER): _S.DETAILED_METRICS,
    (_S.INSTRUCTIONS, Key.UP): _S.METRICS,
    (_S.INSTRUCTIONS, Key.DOWN): _S.INSTRUCTIONS,
    (_S.DETAILED_METRICS, Key.UP): _S.BATTERY_DETAILS,
    (_S.DETAILED_METRICS, Key.DOWN): _S.CPU_DETAILS,
    (_S.DETAILED_METRICS, Key.ENTER): _S.CPU_DETAILS,
    (_S.CPU_DETAILS, Key.UP): _S.DETAILED_METRICS,
    (_S.CPU_DETAILS, Key.DOWN): _S.MEMORY_DETAILS,
    (_S.CPU_DETAILS, Key.ENTER): _S.MEMORY_DETAILS,
    (_S.MEMORY_DETAILS, Key.UP): _S.CPU_DETAILS,
    (_S.MEMORY_DETAILS, Key.DOWN): _S.BATTERY_DETAILS,
    (_S.MEMORY_DETAILS, Key.ENTER): _S.BATTERY_DETAILS,
    (_S.BATTERY_DETAILS, Key.UP): _S.MEMORY_DETAILS,
    (_S.BATTERY_DETAILS, Key.DOWN): _S.DETAILED_METRICS,
    (_S.BATTERY_DETAILS, Key.ENTER): _S.WELCOME,
}

LINEAR_TABLE: dict[tuple[Screen, Key], Screen] = {
    (_S.WELCOME, Key.UP): _S.WELCOME,
    (_S.WELCOME, Key.DOWN): _S.METRICS,
    (_S.METRICS, Key.UP): _S.WELCOME,
    (_S.METRICS, Key.DOWN): _S.DETAILED_METRICS,
    (_S.DETAILED_METRICS, Key.UP): _S.METRICS,
    (_S.DETAILED_METRICS, Key.DOWN): _S.CPU_DETAILS,
    (_S.DETAILED_METRICS, Key.ONE): _S.CPU_DETAILS,
    (_S.DETAILED_METRICS, Key.TWO): _S.MEMORY_DETAILS,
    (_S.DETAILED_METRICS, Key.THREE): _S.BATTERY_DETAILS,
    (_S.CPU_DETAILS, Key.UP): _S.DETAILED_METRICS,
    (_S.CPU_DETAILS, Key.DOWN): _S.MEMORY_DETAILS,
    (_S.MEMORY_DETAILS, Key.UP): _S.CPU_DETAILS,
    (_S.MEMORY_DETAILS, Key.DOWN): _S.BATTERY_DETAILS,
    (_S.BATTERY_DETAILS, Key.UP): _S.MEMORY_DETAILS,
    (_S.BATTERY_DETAILS, Key.DOWN): _S.BATTERY_DETAILS,
    # Not reachable in this mode, but never a dead end if started there.
    (_S.INSTRUCTIONS, Key.UP): _S.METRICS,
    (_S.INSTRUCTIONS, Key.DOWN): _S.INSTRUCTIONS,
}

_TABLES: dict[NavigationMode, dict[tuple[Screen, Key], Screen]] = {
    NavigationMode.CIRCULAR: CIRCULAR_TABLE,
    NavigationMode.LINEAR: LINEAR_TABLE,
}


def transition(
    current: Screen,
    key: Key | None,
    mode: NavigationMode = NavigationMode.CIRCULAR,
) -> Step:
    """Compute the screen that follows *current* when *key* is pressed.

    Quit wins in every state. A pair found in the mode's table yields its
    target and marks the step dirty, even when the target is *current*.
    Anything else leaves the screen unchanged and clean.
    """
    if key is Key.QUIT:
        return Step(current, quit=True)
    if key is None:
        return Step(current)
    target = _TABLES[mode].get((current, key))
    if target is None:
        return Step(current)
    return Step(target, dirty=True)
