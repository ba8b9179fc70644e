"""Unit tests for timestamp layouts and the canonical format."""

from datetime import datetime, timedelta, timezone

import pytest

from opml_outline.timestamps import (
    CANONICAL_LAYOUT,
    LAYOUTS,
    format_timestamp,
    match_layout,
    parse_timestamp,
)

CANONICAL = "Tue, 12 Jul 2005 23:56:35 GMT"
INSTANT = datetime(2005, 7, 12, 23, 56, 35, tzinfo=timezone.utc)


def layout(name: str):
    return next(entry for entry in LAYOUTS if entry.name == name)


class TestLayoutTable:
    """Tests for the ordered layout table."""

    def test_fifteen_layouts_in_priority_order(self):
        """Test the table holds every historical layout in a fixed order."""
        assert [entry.name for entry in LAYOUTS] == [
            "ANSIC",
            "UnixDate",
            "RubyDate",
            "RFC822",
            "RFC822Z",
            "RFC850",
            "RFC1123",
            "RFC1123Z",
            "RFC3339",
            "RFC3339Nano",
            "Kitchen",
            "Stamp",
            "StampMilli",
            "StampMicro",
            "StampNano",
        ]

    def test_canonical_layout_is_in_table(self):
        """Test the encoder's layout is one the decoder accepts."""
        assert layout(CANONICAL_LAYOUT).pattern.match(CANONICAL)

    @pytest.mark.parametrize(
        "name,text,expected",
        [
            ("ANSIC", "Tue Jul 12 23:56:35 2005", INSTANT),
            ("UnixDate", "Tue Jul 12 23:56:35 GMT 2005", INSTANT),
            ("RubyDate", "Tue Jul 12 23:56:35 +0000 2005", INSTANT),
            ("RFC822", "12 Jul 05 23:56 GMT", INSTANT.replace(second=0)),
            ("RFC822Z", "12 Jul 05 23:56 +0000", INSTANT.replace(second=0)),
            ("RFC850", "Tuesday, 12-Jul-05 23:56:35 GMT", INSTANT),
            ("RFC1123", "Tue, 12 Jul 2005 23:56:35 GMT", INSTANT),
            ("RFC1123Z", "Tue, 12 Jul 2005 23:56:35 +0000", INSTANT),
            ("RFC3339", "2005-07-12T23:56:35Z", INSTANT),
            ("RFC3339Nano", "2005-07-12T23:56:35.5Z", INSTANT.replace(microsecond=500000)),
            ("Kitchen", "11:56PM", datetime(1, 1, 1, 23, 56, tzinfo=timezone.utc)),
            ("Stamp", "Jul 12 23:56:35", datetime(1, 7, 12, 23, 56, 35, tzinfo=timezone.utc)),
            (
                "StampMilli",
                "Jul 12 23:56:35.123",
                datetime(1, 7, 12, 23, 56, 35, 123000, tzinfo=timezone.utc),
            ),
            (
                "StampMicro",
                "Jul 12 23:56:35.123456",
                datetime(1, 7, 12, 23, 56, 35, 123456, tzinfo=timezone.utc),
            ),
            (
                "StampNano",
                "Jul 12 23:56:35.123456789",
                datetime(1, 7, 12, 23, 56, 35, 123456, tzinfo=timezone.utc),
            ),
        ],
    )
    def test_each_layout_parses_its_own_form(self, name, text, expected):
        """Test every layout matches text written in that layout."""
        assert match_layout(text, layout(name)) == expected
        assert parse_timestamp(text) == expected

    def test_layout_rejects_other_forms(self):
        """Test a layout returns None for text in another layout."""
        assert match_layout("2005-07-12T23:56:35Z", layout("RFC1123")) is None
        assert match_layout(CANONICAL, layout("ANSIC")) is None


class TestParseTimestamp:
    """Tests for multi-layout timestamp parsing."""

    @pytest.mark.parametrize(
        "text",
        [
            "Tue Jul 12 23:56:35 2005",
            "Tue Jul 12 23:56:35 UTC 2005",
            "Tue Jul 12 23:56:35 +0000 2005",
            "Tuesday, 12-Jul-05 23:56:35 GMT",
            "Tue, 12 Jul 2005 23:56:35 +0000",
            "2005-07-12T23:56:35Z",
            "2005-07-12T23:56:35.000000000Z",
        ],
    )
    def test_any_full_layout_gives_same_instant_as_canonical(self, text):
        """Test the same instant comes out whichever layout it was written in."""
        assert parse_timestamp(text) == parse_timestamp(CANONICAL)

    def test_result_is_timezone_aware(self):
        """Test layouts without a zone are read as UTC."""
        parsed = parse_timestamp("Tue Jul 12 23:56:35 2005")

        assert parsed.tzinfo is not None
        assert parsed.utcoffset() == timedelta(0)

    def test_named_zone_offsets(self):
        """Test RFC 822 zone names carry their defined offsets."""
        assert parse_timestamp("Tue, 12 Jul 2005 16:56:35 PDT") == INSTANT
        assert parse_timestamp("Tue, 12 Jul 2005 18:56:35 EST") == INSTANT
        assert parse_timestamp("Tue, 12 Jul 2005 23:56:35 UTC") == INSTANT

    def test_unknown_zone_name_is_offset_zero(self):
        """Test an unrecognised zone abbreviation is recorded at offset zero."""
        assert parse_timestamp("Tue, 12 Jul 2005 23:56:35 CEST") == INSTANT

    def test_numeric_offsets(self):
        """Test numeric zones in both +hhmm and +hh:mm forms."""
        assert parse_timestamp("Tue, 12 Jul 2005 16:56:35 -0700") == INSTANT
        assert parse_timestamp("2005-07-13T05:26:35+05:30") == INSTANT

    def test_space_padded_day(self):
        """Test the ANSIC day accepts one or two spaces before a single digit."""
        expected = datetime(2006, 1, 2, 15, 4, 5, tzinfo=timezone.utc)

        assert parse_timestamp("Mon Jan  2 15:04:05 2006") == expected
        assert parse_timestamp("Mon Jan 2 15:04:05 2006") == expected

    def test_two_digit_year_pivot(self):
        """Test two-digit years from 69 are 19xx and below 69 are 20xx."""
        assert parse_timestamp("12 Jul 69 00:00 GMT").year == 1969
        assert parse_timestamp("12 Jul 68 00:00 GMT").year == 2068

    def test_names_are_case_insensitive(self):
        """Test month and weekday names match in any case."""
        assert parse_timestamp("tue, 12 JUL 2005 23:56:35 GMT") == INSTANT

    def test_weekday_not_checked_against_date(self):
        """Test a valid weekday name that disagrees with the date is accepted."""
        assert parse_timestamp("Mon, 12 Jul 2005 23:56:35 GMT") == INSTANT

    def test_fraction_after_seconds_in_any_layout(self):
        """Test fractional seconds are accepted even where a layout has none."""
        parsed = parse_timestamp("Tue, 12 Jul 2005 23:56:35.25 GMT")

        assert parsed == INSTANT.replace(microsecond=250000)

    def test_kitchen_twelve_o_clock(self):
        """Test 12AM is midnight and 12PM is noon."""
        assert parse_timestamp("12:00AM").hour == 0
        assert parse_timestamp("12:00PM").hour == 12

    def test_surrounding_whitespace_ignored(self):
        """Test whitespace around the value is ignored."""
        assert parse_timestamp(f"\n  {CANONICAL}\t") == INSTANT

    @pytest.mark.parametrize(
        "text",
        [
            "",
            "not a date",
            "Tue, 31 Feb 2005 23:56:35 GMT",
            "Tue, 12 Foo 2005 23:56:35 GMT",
            "Xyz, 12 Jul 2005 23:56:35 GMT",
            "Tue, 12 Jul 2005 25:56:35 GMT",
            "Tue, 12 Jul 2005 23:56:35 +2500",
            "13:04PM",
            "2005-07-12 23:56:35",
            "12/07/2005",
        ],
    )
    def test_unparseable_text_raises(self, text):
        """Test text matching no layout raises ValueError."""
        with pytest.raises(ValueError, match="no known layout"):
            parse_timestamp(text)


class TestFormatTimestamp:
    """Tests for the canonical timestamp format."""

    def test_offset_zero_uses_gmt(self):
        """Test UTC instants are written with the GMT zone name."""
        assert format_timestamp(INSTANT) == CANONICAL

    def test_other_offsets_are_numeric(self):
        """Test non-zero offsets are written as +hhmm."""
        pacific = INSTANT.astimezone(timezone(timedelta(hours=-7)))
        india = INSTANT.astimezone(timezone(timedelta(hours=5, minutes=30)))

        assert format_timestamp(pacific) == "Tue, 12 Jul 2005 16:56:35 -0700"
        assert format_timestamp(india) == "Wed, 13 Jul 2005 05:26:35 +0530"

    def test_naive_datetime_is_utc(self):
        """Test a naive datetime is written as if it were UTC."""
        assert format_timestamp(datetime(2005, 7, 12, 23, 56, 35)) == CANONICAL

    def test_fraction_is_dropped(self):
        """Test sub-second precision is not written."""
        assert format_timestamp(INSTANT.replace(microsecond=999999)) == CANONICAL

    def test_early_years_are_zero_padded(self):
        """Test dates from date-less layouts format and parse back."""
        kitchen = parse_timestamp("11:56PM")
        formatted = format_timestamp(kitchen)

        assert formatted == "Mon, 01 Jan 0001 23:56:00 GMT"
        assert parse_timestamp(formatted) == kitchen

    def test_format_then_parse_keeps_instant(self):
        """Test the canonical form parses back to the same instant."""
        pacific = INSTANT.astimezone(timezone(timedelta(hours=-7)))

        assert parse_timestamp(format_timestamp(pacific)) == INSTANT
