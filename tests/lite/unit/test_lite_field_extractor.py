"""Unit tests for ics_lite.lite_field_extractor."""

import pytest

from ics_lite.lite_field_extractor import (
    LiteFieldExtractor,
    extract_field,
    parse_content_line,
    unfold_lines,
)

pytestmark = pytest.mark.unit

BLOCK = """BEGIN:VEVENT
UID:abc-123@example.com
SUMMARY:  Quarterly planning
DESCRIPTION:First line\\nsecond line
SEQUENCE:4
LOCATION;LANGUAGE=en:Room 1
ATTENDEE;CN=Jane Doe;ROLE=CHAIR:mailto:jane@example.com
ATTENDEE;CN="Smith, John":mailto:john@example.com
BEGIN:VALARM
ACTION:DISPLAY
SUMMARY:Alarm summary
DESCRIPTION:Reminder
END:VALARM
END:VEVENT
"""


class TestUnfoldLines:
    """Tests for continuation-line unfolding."""

    def test_unfold_lines_when_continuation_then_joined(self) -> None:
        """A line break followed by a space is removed."""
        text = "SUMMARY:Long sum\r\n mary\r\nUID:1\r\n"
        assert unfold_lines(text) == ["SUMMARY:Long summary", "UID:1"]

    def test_unfold_lines_when_tab_continuation_then_joined(self) -> None:
        """A line break followed by a tab is removed too."""
        assert unfold_lines("DESCRIPTION:a\n\tb\n") == ["DESCRIPTION:ab"]

    def test_unfold_lines_when_blank_lines_then_dropped(self) -> None:
        """Empty lines do not show up as content lines."""
        assert unfold_lines("A:1\n\nB:2") == ["A:1", "B:2"]


class TestParseContentLine:
    """Tests for splitting a logical line."""

    def test_parse_content_line_when_params_then_split(self) -> None:
        """Name, parameters and value are separated."""
        line = parse_content_line("DTSTART;TZID=Europe/Madrid:20150930T150000")

        assert line.name == "DTSTART"
        assert line.param("TZID") == "Europe/Madrid"
        assert line.value == "20150930T150000"

    def test_parse_content_line_when_lowercase_param_then_case_insensitive(self) -> None:
        """Parameter lookup ignores case."""
        line = parse_content_line("DTSTART;value=DATE:20160122")
        assert line.param("VALUE") == "DATE"
        assert line.param("value") == "DATE"

    def test_parse_content_line_when_quoted_param_then_unquoted(self) -> None:
        """Quoted parameter values may contain the ':' and ';' delimiters."""
        line = parse_content_line('ATTENDEE;CN="Doe; Jane: PhD":mailto:jane@example.com')

        assert line.param("CN") == "Doe; Jane: PhD"
        assert line.value == "mailto:jane@example.com"

    def test_parse_content_line_when_escaped_text_then_value_kept_raw(self) -> None:
        """Backslash escapes are not interpreted."""
        line = parse_content_line("DESCRIPTION:a\\nb\\, c")
        assert line.value == "a\\nb\\, c"

    def test_parse_content_line_when_missing_param_then_default(self) -> None:
        """Absent parameters fall back to the given default."""
        line = parse_content_line("SUMMARY:Hello")
        assert line.param("TZID") == ""
        assert line.param("TZID", "UTC") == "UTC"


class TestLiteFieldExtractor:
    """Tests for tag-anchored lookups over a block."""

    def test_extract_when_present_then_value_trimmed(self) -> None:
        """Surrounding whitespace is stripped."""
        extractor = LiteFieldExtractor(BLOCK)
        assert extractor.extract("SUMMARY") == "Quarterly planning"

    def test_extract_when_absent_then_empty_string(self) -> None:
        """A missing tag is an empty value, not an error."""
        extractor = LiteFieldExtractor(BLOCK)
        assert extractor.extract("STATUS") == ""

    def test_extract_when_tag_has_params_then_value_returned(self) -> None:
        """Parameters between the tag and the colon are skipped."""
        extractor = LiteFieldExtractor(BLOCK)
        assert extractor.extract("LOCATION") == "Room 1"

    def test_extract_when_nested_component_then_event_value_wins(self) -> None:
        """VALARM properties never shadow the event's own."""
        extractor = LiteFieldExtractor(BLOCK)

        assert extractor.extract("DESCRIPTION") == "First line\\nsecond line"
        assert extractor.extract("ACTION") == ""

    def test_extract_when_tag_is_prefix_of_other_tag_then_no_match(self) -> None:
        """DTSTAMP is not mistaken for a DTSTART-like prefix match."""
        extractor = LiteFieldExtractor("BEGIN:VEVENT\nDTSTAMP:20240101T000000Z\nEND:VEVENT\n")
        assert extractor.find("DTSTA") is None

    def test_find_all_when_repeated_then_document_order(self) -> None:
        """Every matching line is returned in order."""
        extractor = LiteFieldExtractor(BLOCK)
        names = [line.param("CN") for line in extractor.find_all("ATTENDEE")]
        assert names == ["Jane Doe", "Smith, John"]

    def test_extract_int_when_valid_then_parsed(self) -> None:
        """Numeric fields are converted."""
        assert LiteFieldExtractor(BLOCK).extract_int("SEQUENCE") == 4

    def test_extract_int_when_malformed_then_default(self) -> None:
        """Malformed integers silently become the default."""
        extractor = LiteFieldExtractor("SEQUENCE:two\n")
        assert extractor.extract_int("SEQUENCE") == 0
        assert extractor.extract_int("PRIORITY", default=5) == 5

    def test_extractor_when_bare_snippet_then_lines_available(self) -> None:
        """Snippets without BEGIN/END lines are still searchable."""
        extractor = LiteFieldExtractor("DTSTART;TZID=Europe/Madrid:20150930T150000\n")
        assert extractor.find("DTSTART") is not None


class TestExtractField:
    """Tests for the module-level helper."""

    def test_extract_field_when_present_then_value(self) -> None:
        """The helper mirrors LiteFieldExtractor.extract."""
        assert extract_field("UID", BLOCK) == "abc-123@example.com"

    def test_extract_field_when_empty_block_then_empty_string(self) -> None:
        """An empty block yields an empty value."""
        assert extract_field("UID", "") == ""
