"""Content-line field extraction for ICS event blocks.

A block is unfolded into logical content lines once (icalendar's
``Contentlines``), each line is split into name, parameters and raw value,
and fields are then looked up by a linear scan keyed on the property name.
Lines that belong to nested components (VALARM and friends) are skipped so
their SUMMARY/DESCRIPTION never shadow the event's own.
"""

import logging
import re
from typing import NamedTuple, Optional

from icalendar.parser import Contentline, Contentlines, q_split

logger = logging.getLogger(__name__)

_NAME_DELIMITER_RE = re.compile(r"[;:]")


class LiteContentLine(NamedTuple):
    """One unfolded content line.

    Attributes:
        name: Upper-cased property name (e.g. "DTSTART")
        params: Upper-cased parameter names mapped to unquoted values
        value: Raw value after the first unquoted colon
    """

    name: str
    params: dict[str, str]
    value: str

    def param(self, key: str, default: str = "") -> str:
        """Return a parameter value by case-insensitive name."""
        return self.params.get(key.upper(), default)


def unfold_lines(text: str) -> list[str]:
    """Unfold RFC 5545 continuation lines and split into logical lines.

    Args:
        text: Raw ICS text (CRLF or LF line endings)

    Returns:
        Non-empty logical lines with continuation markers removed
    """
    return [str(line) for line in Contentlines.from_ical(text) if line]


def _param_text(value: object) -> str:
    if isinstance(value, (list, tuple)):
        return ",".join(str(v) for v in value)
    return str(value)


def parse_content_line(line: str) -> LiteContentLine:
    """Split a logical line into name, parameters and raw value.

    The value is kept verbatim (no backslash unescaping). Lines icalendar
    refuses to tokenize fall back to a plain split with no parameters.
    """
    head_and_value = q_split(line, ":", maxsplit=1)
    value = head_and_value[1] if len(head_and_value) > 1 else ""

    try:
        name, params, _ = Contentline(line).parts()
        parsed_params = {str(k).upper(): _param_text(v) for k, v in params.items()}
    except ValueError as e:
        logger.debug("Falling back to plain split for content line %r: %s", line, e)
        name = _NAME_DELIMITER_RE.split(head_and_value[0], maxsplit=1)[0]
        parsed_params = {}

    return LiteContentLine(str(name).strip().upper(), parsed_params, value)


class LiteFieldExtractor:
    """Tag-anchored field lookup over one event block."""

    def __init__(self, block: str) -> None:
        """Unfold and tokenize a block.

        Args:
            block: Raw text of a single VEVENT block (BEGIN/END lines included)
        """
        self.lines = self._top_level_lines(unfold_lines(block))

    @staticmethod
    def _top_level_lines(raw_lines: list[str]) -> list[LiteContentLine]:
        lines: list[LiteContentLine] = []
        depth = 0
        for raw in raw_lines:
            line = parse_content_line(raw)
            if line.name == "BEGIN":
                depth += 1
                continue
            if line.name == "END":
                depth = max(depth - 1, 0)
                continue
            # depth 1 is the event itself; bare snippets without BEGIN are depth 0
            if depth <= 1:
                lines.append(line)
        return lines

    def find(self, tag: str) -> Optional[LiteContentLine]:
        """Return the first line whose property name is ``tag``."""
        tag = tag.upper()
        for line in self.lines:
            if line.name == tag:
                return line
        return None

    def find_all(self, tag: str) -> list[LiteContentLine]:
        """Return every line whose property name is ``tag``, in order."""
        tag = tag.upper()
        return [line for line in self.lines if line.name == tag]

    def extract(self, tag: str) -> str:
        """Return the trimmed value of the first ``tag`` line, or ""."""
        line = self.find(tag)
        if line is None:
            return ""
        return line.value.strip()

    def extract_int(self, tag: str, default: int = 0) -> int:
        """Return the ``tag`` value as int; absent or malformed gives ``default``."""
        raw = self.extract(tag)
        try:
            return int(raw)
        except ValueError:
            return default


def extract_field(tag: str, block: str) -> str:
    """Extract a single tagged value from a block of ICS text.

    Args:
        tag: Property name, e.g. "SUMMARY"
        block: Raw block text

    Returns:
        The value with surrounding whitespace removed, or "" when absent
    """
    return LiteFieldExtractor(block).extract(tag)
