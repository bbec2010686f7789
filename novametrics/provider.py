"""Host metric snapshots.

CPU and memory come from psutil. Battery details are read from
/sys/class/power_supply directly because psutil only exposes the charge
percentage; the CPU model name comes from /proc/cpuinfo for the same reason.
"""

from __future__ import annotations

import logging
import platform
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Protocol

import psutil

logger = logging.getLogger(__name__)

POWER_SUPPLY_DIR = Path("/sys/class/power_supply")
CPUINFO_PATH = Path("/proc/cpuinfo")


# ── Data types ─────────────────────────────────────────────────────────────


class BatteryState(Enum):
    UNKNOWN = "Unknown"
    CHARGING = "Charging"
    DISCHARGING = "Discharging"
    EMPTY = "Empty"
    FULL = "Full"


# sysfs "status" strings → BatteryState
_SYSFS_STATES: dict[str, BatteryState] = {
    "charging": BatteryState.CHARGING,
    "discharging": BatteryState.DISCHARGING,
    "empty": BatteryState.EMPTY,
    "full": BatteryState.FULL,
    "not charging": BatteryState.FULL,
}


@dataclass(frozen=True)
class CpuSnapshot:
    name: str
    frequency_mhz: float
    usage_percent: float


@dataclass(frozen=True)
class MemorySnapshot:
    total_kb: int
    used_kb: int
    free_kb: int


@dataclass(frozen=True)
class BatterySnapshot:
    state: BatteryState
    energy_wh: float
    temperature_c: float | None = None


class MetricsProvider(Protocol):
    def cpu_snapshot(self) -> CpuSnapshot: ...

    def memory_snapshot(self) -> MemorySnapshot: ...

    def battery_snapshot(self) -> BatterySnapshot | None: ...

    def aggregate_cpu_usage(self) -> float: ...

    def battery_percentage(self) -> float: ...


# ── sysfs / procfs readers ─────────────────────────────────────────────────


def _read_sysfs(path: Path) -> str | None:
    try:
        return path.read_text(encoding="utf-8").strip()
    except OSError:
        return None


def _read_sysfs_int(path: Path) -> int | None:
    raw = _read_sysfs(path)
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError:
        return None


def _find_battery_dir(base: Path) -> Path | None:
    """First power_supply entry whose type is Battery."""
    try:
        entries = sorted(base.iterdir())
    except OSError:
        return None
    for entry in entries:
        if _read_sysfs(entry / "type") == "Battery":
            return entry
    return None


def read_battery(base: Path = POWER_SUPPLY_DIR) -> BatterySnapshot | None:
    """Read the first battery under *base*, or None when there is none."""
    bat = _find_battery_dir(base)
    if bat is None:
        logger.debug("no battery found under %s", base)
        return None

    status = (_read_sysfs(bat / "status") or "").lower()
    state = _SYSFS_STATES.get(status, BatteryState.UNKNOWN)

    # energy_now is µWh; batteries reporting charge give µAh and µV instead
    energy_uwh = _read_sysfs_int(bat / "energy_now")
    if energy_uwh is not None:
        energy_wh = energy_uwh / 1_000_000
    else:
        charge = _read_sysfs_int(bat / "charge_now")
        voltage = _read_sysfs_int(bat / "voltage_now")
        if charge is None or voltage is None:
            logger.debug("battery %s reports no energy or charge", bat.name)
            energy_wh = 0.0
        else:
            energy_wh = (charge / 1_000_000) * (voltage / 1_000_000)

    temp_tenths = _read_sysfs_int(bat / "temp")
    temperature = temp_tenths / 10.0 if temp_tenths is not None else None
    return BatterySnapshot(state, energy_wh, temperature)


def read_cpu_name(path: Path = CPUINFO_PATH) -> str:
    try:
        with open(path, encoding="utf-8") as f:
            for line in f:
                if line.startswith("model name"):
                    return line.split(":", 1)[1].strip()
    except OSError:
        logger.debug("cannot read %s", path)
    return platform.processor() or "Unknown CPU"


# ── Provider ───────────────────────────────────────────────────────────────


class PsutilMetricsProvider:
    """MetricsProvider backed by psutil and Linux sysfs/procfs."""

    def __init__(
        self,
        power_supply_dir: Path = POWER_SUPPLY_DIR,
        cpuinfo_path: Path = CPUINFO_PATH,
    ) -> None:
        self.power_supply_dir = power_supply_dir
        self.cpuinfo_path = cpuinfo_path
        self._cpu_name: str | None = None

    def warm_up(self) -> None:
        """Prime psutil's internal deltas so the first reading isn't 0.0."""
        psutil.cpu_percent(interval=None, percpu=True)

    def cpu_snapshot(self) -> CpuSnapshot:
        if self._cpu_name is None:
            self._cpu_name = read_cpu_name(self.cpuinfo_path)
        freq = psutil.cpu_freq()
        per_core = psutil.cpu_percent(interval=None, percpu=True)
        return CpuSnapshot(
            name=self._cpu_name,
            frequency_mhz=float(freq.current) if freq else 0.0,
            usage_percent=float(per_core[0]) if per_core else 0.0,
        )

    def memory_snapshot(self) -> MemorySnapshot:
        vm = psutil.virtual_memory()
        return MemorySnapshot(
            total_kb=vm.total // 1024,
            used_kb=vm.used // 1024,
            free_kb=vm.free // 1024,
        )

    def battery_snapshot(self) -> BatterySnapshot | None:
        return read_battery(self.power_supply_dir)

    def aggregate_cpu_usage(self) -> float:
        per_core = psutil.cpu_percent(interval=None, percpu=True)
        if not per_core:
            return 0.0
        return sum(per_core) / len(per_core)

    def battery_percentage(self) -> float:
        try:
            battery = psutil.sensors_battery()
        except AttributeError:
            return 0.0
        if battery is None:
            return 0.0
        return float(battery.percent)
