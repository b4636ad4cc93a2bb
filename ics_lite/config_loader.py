"""ics_lite.config_loader

YAML config loader for the ics_lite command line.

Exposes a typed dataclass `Config` and a `load_config()` helper that accepts
an optional path override.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("ics_lite.yaml")


@dataclass
class Config:
    """Typed configuration for ics_lite.

    Fields:
        sources: ICS paths or URLs parsed when none is given on the command line
        max_repeats: repeat cap per recurring event (0 disables expansion)
        convert_dates_to_utc: normalize every instant to UTC
        request_timeout: read timeout for remote sources, in seconds
        log_level: logging level name
    """

    sources: list[str] = field(default_factory=list)
    max_repeats: int = 1000
    convert_dates_to_utc: bool = False
    request_timeout: float = 30.0
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> Config:
        """Create Config from a plain mapping, applying defaults and validation.

        Numeric-like values are coerced, a scalar ``sources`` becomes a
        one-item list, and a negative ``max_repeats`` is clamped to 0. Each
        coercion logs a warning.
        """
        if data is None:
            data = {}

        sources_raw = data.get("sources", [])
        if sources_raw is None:
            sources_raw = []
        if not isinstance(sources_raw, (list, tuple)):
            logger.warning("Config `sources` is not a list; coercing to single-item list")
            sources_list: list[str] = [str(sources_raw)]
        else:
            sources_list = [str(s) for s in sources_raw]

        max_repeats_raw = data.get("max_repeats", 1000)
        try:
            max_repeats = int(max_repeats_raw)
        except (TypeError, ValueError):
            logger.warning("Config max_repeats=%r is not an int; using default 1000", max_repeats_raw)
            max_repeats = 1000
        if max_repeats < 0:
            logger.warning("max_repeats %d below minimum; coercing to 0", max_repeats)
            max_repeats = 0

        timeout_raw = data.get("request_timeout", 30.0)
        try:
            request_timeout = float(timeout_raw)
        except (TypeError, ValueError):
            logger.warning("Config request_timeout=%r is not a number; using default 30.0", timeout_raw)
            request_timeout = 30.0

        convert_raw = data.get("convert_dates_to_utc", False)
        if isinstance(convert_raw, str):
            convert_dates_to_utc = convert_raw.strip().lower() in ("1", "true", "yes", "on")
        else:
            convert_dates_to_utc = bool(convert_raw)

        log_level = data.get("log_level", "INFO")
        log_level = str(log_level).upper() if log_level is not None else "INFO"

        return cls(
            sources=sources_list,
            max_repeats=max_repeats,
            convert_dates_to_utc=convert_dates_to_utc,
            request_timeout=request_timeout,
            log_level=log_level,
        )


def load_config(path: str | None = None) -> Config:
    """Load configuration from a YAML file and return a Config instance.

    Args:
        path: Optional path to the config file. Defaults to ./ics_lite.yaml.

    Returns:
        Config dataclass instance with values from file (or defaults).

    Behavior:
    - If file is missing: returns Config() with defaults.
    - If file exists but top-level is not a mapping: raises ValueError.
    - If file is not valid YAML: raises ValueError.
    """
    p = Path(path) if path else Path.cwd() / DEFAULT_CONFIG_PATH
    logger.debug("Attempting to load config from %s", p)
    if not p.exists():
        logger.info("Config file %s not found; using defaults", p)
        return Config()

    try:
        raw = yaml.safe_load(p.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        logger.warning("Config file %s is not valid YAML: %s", p, exc)
        raise ValueError(f"Invalid YAML in config file {p}: {exc}") from exc
    # safe_load returns None for empty files
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        logger.warning("Config file %s parsed but top-level is not a mapping: %r", p, raw)
        raise ValueError("Config file must contain a mapping at top level")  # noqa: TRY004
    cfg = Config.from_dict(raw)
    logger.info("Loaded configuration from %s", p)
    logger.debug("Configuration values: %s", cfg)
    return cfg
