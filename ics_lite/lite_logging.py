"""
Central logging configuration for ics_lite.

Keeps the parser's own modules at the requested verbosity while holding
chatty third-party loggers (HTTP client, icalendar) at WARNING.
"""

import logging
import os
from typing import Optional

ENV_DEBUG = "ICS_LITE_DEBUG"
ENV_LOG_LEVEL = "ICS_LITE_LOG_LEVEL"

_TRUTHY = ("1", "true", "yes", "on")

# Third-party libraries that generate excessive debug logs
THIRD_PARTY_LOGGERS: dict[str, int] = {
    "httpx": logging.WARNING,
    "httpcore": logging.WARNING,
    "icalendar": logging.WARNING,
}

LITE_MODULES = [
    "ics_lite",
    "ics_lite.lite_parser",
    "ics_lite.lite_event_parser",
    "ics_lite.lite_rrule_expander",
    "ics_lite.lite_event_merger",
    "ics_lite.lite_fetcher",
    "ics_lite.timezone_utils",
]


def env_debug_enabled() -> bool:
    """True when ICS_LITE_DEBUG holds a truthy value."""
    return os.getenv(ENV_DEBUG, "").strip().lower() in _TRUTHY


def configure_lite_logging(debug_mode: bool = False, force_debug: Optional[bool] = None) -> None:
    """
    Configure logging levels for ics_lite modules.

    Args:
        debug_mode: Whether to enable debug logging for ics_lite modules
        force_debug: Override debug mode setting (None to use env var detection)

    Environment Variables:
        ICS_LITE_DEBUG: Set to '1', 'true', 'yes' to force debug logging
        ICS_LITE_LOG_LEVEL: Override root log level (DEBUG, INFO, WARNING, ERROR)
    """
    env_log_level = os.getenv(ENV_LOG_LEVEL, "").upper()

    if force_debug is not None:
        final_debug = force_debug
    elif env_debug_enabled():
        final_debug = True
    else:
        final_debug = debug_mode

    root_level = logging.DEBUG if final_debug else logging.INFO
    if env_log_level in ("DEBUG", "INFO", "WARNING", "ERROR"):
        root_level = getattr(logging, env_log_level)

    # Handlers are installed by ics_lite._init_logging; only levels are set here
    root_logger = logging.getLogger()
    root_logger.setLevel(root_level)

    logger_config = dict(THIRD_PARTY_LOGGERS)
    lite_level = logging.DEBUG if final_debug else logging.INFO
    for module in LITE_MODULES:
        logger_config[module] = lite_level

    for logger_name, level in logger_config.items():
        logging.getLogger(logger_name).setLevel(level)

    if final_debug:
        root_logger.debug("Debug logging enabled for ics_lite modules")


def get_logging_status() -> dict[str, str]:
    """
    Get current logging configuration status.

    Returns:
        Dictionary mapping logger names to their current levels
    """
    status = {"root": logging.getLevelName(logging.getLogger().level)}
    for logger_name in ["ics_lite", *THIRD_PARTY_LOGGERS]:
        status[logger_name] = logging.getLevelName(logging.getLogger(logger_name).level)
    return status
