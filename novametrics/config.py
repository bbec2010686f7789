"""Configuration loading for novametrics.

Loads settings from TOML config files with sensible defaults.
Search order: $NOVAMETRICS_CONFIG → ~/.config/novametrics/config.toml → defaults only.
"""

from __future__ import annotations

import logging
import os
import sys
import tomllib
from pathlib import Path
from typing import Any

from novametrics.navigation import NavigationMode

DEFAULT_CONFIG: dict[str, Any] = {
    "navigation": NavigationMode.CIRCULAR.value,
    "poll_timeout_ms": 10,
    "logging": {
        "file": "",
        "level": "WARNING",
    },
}

ENV_VAR = "NOVAMETRICS_CONFIG"
_DEFAULT_PATH = Path.home() / ".config" / "novametrics" / "config.toml"


def _deep_merge(base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
    """Merge overlay into base. Nested dicts are merged at the first level only."""
    merged = dict(base)
    for key, value in overlay.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = {**merged[key], **value}
        else:
            merged[key] = value
    return merged


def config_path_from_env() -> Path | None:
    """Return the explicit config path from the environment, if set."""
    raw = os.environ.get(ENV_VAR, "").strip()
    return Path(raw).expanduser() if raw else None


def load_config(path: Path | None = None) -> dict[str, Any]:
    """Load configuration, merging user TOML over defaults.

    Args:
        path: Explicit config file path (from $NOVAMETRICS_CONFIG). If None,
              tries the default location ~/.config/novametrics/config.toml.

    Returns:
        Merged configuration dict.

    Raises:
        SystemExit: If an explicit path doesn't exist or can't be parsed.
    """
    if path is not None:
        if not path.is_file():
            print(f"novametrics: config file not found: {path}", file=sys.stderr)
            raise SystemExit(1)
        try:
            user_config = tomllib.loads(path.read_text(encoding="utf-8"))
        except tomllib.TOMLDecodeError as e:
            print(f"novametrics: invalid TOML in {path}: {e}", file=sys.stderr)
            raise SystemExit(1) from e
        return _deep_merge(DEFAULT_CONFIG, user_config)

    # Try default location silently
    if _DEFAULT_PATH.is_file():
        try:
            user_config = tomllib.loads(_DEFAULT_PATH.read_text(encoding="utf-8"))
            return _deep_merge(DEFAULT_CONFIG, user_config)
        except tomllib.TOMLDecodeError:
            print(
                f"novametrics: warning: ignoring invalid TOML in {_DEFAULT_PATH}",
                file=sys.stderr,
            )

    return dict(DEFAULT_CONFIG)


def navigation_mode(config: dict[str, Any]) -> NavigationMode:
    """Resolve the configured navigation mode, exiting on unknown values."""
    raw = str(config.get("navigation", DEFAULT_CONFIG["navigation"])).lower()
    try:
        return NavigationMode(raw)
    except ValueError:
        choices = ", ".join(m.value for m in NavigationMode)
        print(
            f"novametrics: unknown navigation mode {raw!r} (expected one of: {choices})",
            file=sys.stderr,
        )
        raise SystemExit(1) from None


def poll_timeout(config: dict[str, Any]) -> int:
    """Resolve the input poll timeout in ms, exiting unless it is a positive int."""
    raw = config.get("poll_timeout_ms", DEFAULT_CONFIG["poll_timeout_ms"])
    # bool is an int subclass; TOML true/false is not a timeout
    if isinstance(raw, bool) or not isinstance(raw, int) or raw <= 0:
        print(
            f"novametrics: poll_timeout_ms must be a positive integer, got {raw!r}",
            file=sys.stderr,
        )
        raise SystemExit(1)
    return raw


def configure_logging(config: dict[str, Any]) -> logging.Logger:
    """Attach a handler to the package logger.

    curses owns the terminal, so records only ever go to a file. With no
    file configured a NullHandler keeps the root logger's stderr fallback
    from painting over the dashboard.

    Raises:
        SystemExit: If [logging] is not a table or the log file can't be opened.
    """
    log_cfg = config.get("logging", DEFAULT_CONFIG["logging"])
    if not isinstance(log_cfg, dict):
        print(
            f"novametrics: [logging] must be a table, got {log_cfg!r}",
            file=sys.stderr,
        )
        raise SystemExit(1)

    handler: logging.Handler
    log_file = str(log_cfg.get("file", "") or "")
    if log_file:
        path = Path(log_file).expanduser()
        try:
            handler = logging.FileHandler(path, encoding="utf-8")
        except OSError as e:
            print(f"novametrics: cannot open log file {path}: {e}", file=sys.stderr)
            raise SystemExit(1) from e
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(name)s %(levelname)s %(message)s")
        )
    else:
        handler = logging.NullHandler()

    logger = logging.getLogger("novametrics")
    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()

    level_name = str(log_cfg.get("level", "WARNING")).upper()
    logger.setLevel(getattr(logging, level_name, logging.WARNING))
    logger.propagate = False
    logger.addHandler(handler)
    return logger
