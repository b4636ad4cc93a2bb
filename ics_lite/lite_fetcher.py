"""ICS document loading for ics_lite.

A source is either an ``http://``/``https://`` URL, fetched with httpx, or a
path on the local filesystem. ``parse_calendar`` loads a source, optionally
copies the raw text to a writer and hands it to the parser.
"""

import logging
from pathlib import Path
from typing import Optional, Protocol

import httpx

from . import __version__
from .lite_exceptions import LiteICSSourceError
from .lite_models import LiteCalendar, TraceErrorFunc
from .lite_parser import parse_ical_content

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0

DEFAULT_HEADERS = {
    "User-Agent": f"ics-lite/{__version__}",
    "Accept": "text/calendar, text/plain;q=0.9, */*;q=0.8",
}


class TextWriter(Protocol):
    """Anything with a ``write(str)`` method (open files, StringIO, ...)."""

    def write(self, text: str, /) -> object: ...


def is_remote(url: str) -> bool:
    """True for http(s) URLs."""
    return url.lower().startswith(("http://", "https://"))


def _fetch_remote(url: str, timeout: float) -> str:
    """GET ``url`` and return the decoded body."""
    client_timeout = httpx.Timeout(connect=10.0, read=timeout, write=10.0, pool=30.0)
    try:
        with httpx.Client(
            timeout=client_timeout, follow_redirects=True, headers=DEFAULT_HEADERS
        ) as client:
            response = client.get(url)
            response.raise_for_status()
    except httpx.TimeoutException as e:
        logger.warning("Timeout fetching ICS from %s", url)
        raise LiteICSSourceError(f"Request timeout after {timeout}s: {url}") from e
    except httpx.HTTPStatusError as e:
        logger.warning("HTTP error fetching ICS from %s: %s", url, e.response.status_code)
        raise LiteICSSourceError(
            f"HTTP {e.response.status_code}: {e.response.reason_phrase} ({url})"
        ) from e
    except httpx.HTTPError as e:
        logger.warning("Network error fetching ICS from %s: %s", url, e)
        raise LiteICSSourceError(f"Network error: {e}") from e

    logger.debug("Fetched ICS from %s - %d bytes", url, len(response.content))
    return response.text


def _read_local(path: str) -> str:
    """Read a local ICS file as UTF-8."""
    try:
        return Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise LiteICSSourceError(f"Unable to read ICS file {path}: {e}") from e


def load_ics(url: str, timeout: float = DEFAULT_TIMEOUT_SECONDS) -> str:
    """Load the raw text of an ICS document.

    Args:
        url: http(s) URL or local filesystem path
        timeout: Read timeout for remote sources, in seconds

    Returns:
        Document text

    Raises:
        LiteICSSourceError: If the document cannot be fetched or read
    """
    if not url:
        raise LiteICSSourceError("No ICS source given")
    if is_remote(url):
        return _fetch_remote(url, timeout)
    return _read_local(url)


def parse_calendar(
    url: str,
    max_repeats: int,
    writer: Optional[TextWriter] = None,
    convert_dates_to_utc: bool = False,
    trace_error_func: Optional[TraceErrorFunc] = None,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
) -> LiteCalendar:
    """Load and parse a calendar from a path or URL.

    Args:
        url: http(s) URL or local filesystem path
        max_repeats: Repeat cap per recurring event; 0 disables expansion
        writer: Optional sink receiving the raw document before parsing
        convert_dates_to_utc: Normalize every instant to UTC
        trace_error_func: Receives timezone diagnostics
        timeout: Read timeout for remote sources, in seconds

    Returns:
        Parsed LiteCalendar

    Raises:
        LiteICSSourceError: If the document cannot be loaded
        LiteICSParseError: If the document cannot be parsed
    """
    content = load_ics(url, timeout=timeout)
    if writer is not None:
        writer.write(content)

    return parse_ical_content(
        content,
        url=url,
        max_repeats=max_repeats,
        convert_dates_to_utc=convert_dates_to_utc,
        trace_error_func=trace_error_func,
    )
