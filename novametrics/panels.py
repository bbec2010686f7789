"""Panel content for each screen.

Only the screen being rendered touches the provider, and only when the
loop asks for a redraw.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple

from novametrics.navigation import NavigationMode, Screen
from novametrics.provider import MetricsProvider

APP_NAME = "NovaMetrics"

NO_BATTERY_TEXT = "Battery Details:\n- No battery information available."

DETAILED_MENU_TEXT = "Detailed Metrics:\n1. CPU\n2. Memory\n3. Battery"

_HELP_TEXT: dict[NavigationMode, str] = {
    NavigationMode.CIRCULAR: (
        "Up/Down: move between Welcome, Metrics and Instructions\n"
        "Enter on Metrics: open the detailed metrics menu\n"
        "Up/Down/Enter in the detail screens: cycle CPU, Memory, Battery\n"
        "Enter on Battery: back to Welcome\n"
        "q: quit"
    ),
    NavigationMode.LINEAR: (
        "Up/Down: move through Welcome, Metrics, Detailed Metrics, "
        "CPU, Memory and Battery\n"
        "1/2/3 on Detailed Metrics: jump to CPU, Memory or Battery\n"
        "q: quit"
    ),
}

_FOOTER_TEXT: dict[NavigationMode, str] = {
    NavigationMode.CIRCULAR: (
        "Use arrow keys to navigate, Enter to drill down. Press 'q' to quit."
    ),
    NavigationMode.LINEAR: (
        "Use arrow keys to navigate, 1-3 to pick a detail. Press 'q' to quit."
    ),
}


@dataclass(frozen=True)
class Panel:
    label: str
    text: str
    highlighted: bool = False


class PanelSet(NamedTuple):
    title: Panel
    body: Panel
    footer: Panel


# ── Body builders ──────────────────────────────────────────────────────────


def metrics_summary(metrics: MetricsProvider) -> str:
    return (
        f"CPU: {metrics.aggregate_cpu_usage():.2f}%\n"
        f"Memory: {metrics.memory_snapshot().used_kb} KB\n"
        f"Battery: {metrics.battery_percentage():.2f}%"
    )


def cpu_details(metrics: MetricsProvider) -> str:
    cpu = metrics.cpu_snapshot()
    return (
        "CPU Details:\n"
        f"- Name: {cpu.name}\n"
        f"- Frequency: {cpu.frequency_mhz:.0f} MHz\n"
        f"- Usage: {cpu.usage_percent:.2f}%"
    )


def memory_details(metrics: MetricsProvider) -> str:
    mem = metrics.memory_snapshot()
    return (
        "Memory Details:\n"
        f"- Total: {mem.total_kb} KB\n"
        f"- Used: {mem.used_kb} KB\n"
        f"- Free: {mem.free_kb} KB"
    )


def battery_details(metrics: MetricsProvider) -> str:
    battery = metrics.battery_snapshot()
    if battery is None:
        return NO_BATTERY_TEXT
    temperature = battery.temperature_c if battery.temperature_c is not None else 0.0
    return (
        "Battery Details:\n"
        f"- Status: {battery.state.value}\n"
        f"- Energy: {battery.energy_wh:.2f} Wh\n"
        f"- Temperature: {temperature:.1f}°C"
    )


def _body_text(screen: Screen, metrics: MetricsProvider, mode: NavigationMode) -> str:
    if screen is Screen.METRICS:
        return metrics_summary(metrics)
    if screen is Screen.DETAILED_METRICS:
        return DETAILED_MENU_TEXT
    if screen is Screen.CPU_DETAILS:
        return cpu_details(metrics)
    if screen is Screen.MEMORY_DETAILS:
        return memory_details(metrics)
    if screen is Screen.BATTERY_DETAILS:
        return battery_details(metrics)
    return _HELP_TEXT[mode]


def render_panels(
    screen: Screen,
    metrics: MetricsProvider,
    mode: NavigationMode = NavigationMode.CIRCULAR,
) -> PanelSet:
    """Build the title, body and footer panels for *screen*."""
    return PanelSet(
        title=Panel("Welcome", APP_NAME, highlighted=screen is Screen.WELCOME),
        body=Panel(
            "Metrics",
            _body_text(screen, metrics, mode),
            highlighted=screen in (Screen.METRICS, Screen.INSTRUCTIONS),
        ),
        footer=Panel("Instructions", _FOOTER_TEXT[mode]),
    )
