"""Timestamp conversion for OPML date fields.

OPML tools wrote dates in whatever layout their platform favoured, so the
decoder accepts a table of historical layouts and takes the first that matches.
The encoder always writes the RFC 1123 layout used by the OPML 2.0 examples
(``Mon, 31 Oct 2005 19:23:00 GMT``).

Layouts are written in a small strftime-like notation and compiled to regular
expressions once at import time. Parsing never depends on the process locale.

Directives:
    %a  abbreviated weekday name       %A  full weekday name
    %b  abbreviated month name         %m  two-digit month
    %d  two-digit day                  %e  day, optionally space-padded
    %H  hour (0-23, one or two digits) %I  hour (1-12, one or two digits)
    %M  two-digit minute               %S  two-digit second
    %Y  four-digit year                %y  two-digit year
    %Z  zone abbreviation              %z  numeric zone (+hhmm)
    %:z numeric zone (+hh:mm) or "Z"   %p  AM/PM
    %f  fractional seconds (any digits); %3f, %6f, %9f fix the digit count

A fractional-seconds suffix is also accepted after %S when the layout does not
spell one out.
"""

import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
MONTHS = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)

_WEEKDAY_ABBR = {name[:3].lower() for name in WEEKDAYS}
_WEEKDAY_FULL = {name.lower() for name in WEEKDAYS}
_MONTH_ABBR = {name[:3].lower(): number for number, name in enumerate(MONTHS, start=1)}

# RFC 822 section 5.1 zones; any other abbreviation is recorded at offset zero
ZONE_OFFSETS = {
    "UT": 0,
    "UTC": 0,
    "GMT": 0,
    "EST": -5 * 60,
    "EDT": -4 * 60,
    "CST": -6 * 60,
    "CDT": -5 * 60,
    "MST": -7 * 60,
    "MDT": -6 * 60,
    "PST": -8 * 60,
    "PDT": -7 * 60,
}

_DIRECTIVES = {
    "a": r"(?P<weekday>[A-Za-z]{3})",
    "A": r"(?P<weekday_full>[A-Za-z]{6,9})",
    "b": r"(?P<month_name>[A-Za-z]{3})",
    "m": r"(?P<month>\d{2})",
    "d": r"(?P<day>\d{2})",
    "e": r" ?(?P<day>\d{1,2})",
    "H": r"(?P<hour>\d{1,2})",
    "I": r"(?P<hour12>\d{1,2})",
    "M": r"(?P<minute>\d{2})",
    "S": r"(?P<second>\d{2})",
    "Y": r"(?P<year>\d{4})",
    "y": r"(?P<year2>\d{2})",
    "Z": r"(?P<zone>[A-Z]{3,5})",
    "z": r"(?P<offset>[+-]\d{4})",
    ":z": r"(?P<offset>Z|[+-]\d{2}:\d{2})",
    "p": r"(?P<ampm>AM|PM)",
}

_OPTIONAL_FRACTION = r"(?:[.,](?P<fraction>\d+))?"
_TOKEN = re.compile(r"%(:z|\d?f|[aAbmdeHIMSYyZzp])")


def _compile(layout: str) -> re.Pattern:
    """Translate a layout string into an anchored regular expression."""
    parts = []
    pos = 0
    for match in _TOKEN.finditer(layout):
        parts.append(re.escape(layout[pos:match.start()]))
        directive = match.group(1)
        if directive.endswith("f"):
            digits = directive[:-1]
            parts.append(rf"(?P<fraction>\d{{{digits}}})" if digits else r"(?P<fraction>\d+)")
        else:
            parts.append(_DIRECTIVES[directive])
            # Seconds may carry a fraction the layout doesn't mention
            if directive == "S" and not re.match(r"[.,]%\d?f", layout[match.end():]):
                parts.append(_OPTIONAL_FRACTION)
        pos = match.end()
    parts.append(re.escape(layout[pos:]))
    return re.compile("".join(parts) + r"\Z")


@dataclass(frozen=True)
class TimestampLayout:
    """Named timestamp layout with its compiled matcher."""

    name: str
    layout: str

    @property
    def pattern(self) -> re.Pattern:
        return _PATTERNS[self.name]


# Tried in this order; the first layout that parses wins.
LAYOUTS: tuple[TimestampLayout, ...] = (
    TimestampLayout("ANSIC", "%a %b %e %H:%M:%S %Y"),
    TimestampLayout("UnixDate", "%a %b %e %H:%M:%S %Z %Y"),
    TimestampLayout("RubyDate", "%a %b %d %H:%M:%S %z %Y"),
    TimestampLayout("RFC822", "%d %b %y %H:%M %Z"),
    TimestampLayout("RFC822Z", "%d %b %y %H:%M %z"),
    TimestampLayout("RFC850", "%A, %d-%b-%y %H:%M:%S %Z"),
    TimestampLayout("RFC1123", "%a, %d %b %Y %H:%M:%S %Z"),
    TimestampLayout("RFC1123Z", "%a, %d %b %Y %H:%M:%S %z"),
    TimestampLayout("RFC3339", "%Y-%m-%dT%H:%M:%S%:z"),
    TimestampLayout("RFC3339Nano", "%Y-%m-%dT%H:%M:%S.%f%:z"),
    TimestampLayout("Kitchen", "%I:%M%p"),
    TimestampLayout("Stamp", "%b %e %H:%M:%S"),
    TimestampLayout("StampMilli", "%b %e %H:%M:%S.%3f"),
    TimestampLayout("StampMicro", "%b %e %H:%M:%S.%6f"),
    TimestampLayout("StampNano", "%b %e %H:%M:%S.%9f"),
)

_PATTERNS = {layout.name: _compile(layout.layout) for layout in LAYOUTS}

CANONICAL_LAYOUT = "RFC1123"


def _zone_from(fields: dict) -> timezone:
    zone = fields.get("zone")
    if zone is not None:
        return timezone(timedelta(minutes=ZONE_OFFSETS.get(zone, 0)))

    offset = fields.get("offset")
    if offset is None or offset == "Z":
        return timezone.utc

    sign = -1 if offset[0] == "-" else 1
    digits = offset[1:].replace(":", "")
    hours, minutes = int(digits[:2]), int(digits[2:])
    if hours > 23 or minutes > 59:
        raise ValueError(f"zone offset out of range: {offset}")
    return timezone(sign * timedelta(hours=hours, minutes=minutes))


def _build(fields: dict) -> datetime:
    """Assemble a datetime from the named groups of a layout match.

    Raises:
        ValueError: If a name is unknown or a value is out of range
    """
    if fields.get("weekday") is not None and fields["weekday"].lower() not in _WEEKDAY_ABBR:
        raise ValueError(f"unknown weekday: {fields['weekday']}")
    if fields.get("weekday_full") is not None and fields["weekday_full"].lower() not in _WEEKDAY_FULL:
        raise ValueError(f"unknown weekday: {fields['weekday_full']}")

    # Layouts without a date fall back to the earliest representable day
    year, month, day = 1, 1, 1
    if fields.get("year") is not None:
        year = int(fields["year"])
    elif fields.get("year2") is not None:
        short = int(fields["year2"])
        year = 1900 + short if short >= 69 else 2000 + short

    if fields.get("month_name") is not None:
        try:
            month = _MONTH_ABBR[fields["month_name"].lower()]
        except KeyError:
            raise ValueError(f"unknown month: {fields['month_name']}") from None
    elif fields.get("month") is not None:
        month = int(fields["month"])

    if fields.get("day") is not None:
        day = int(fields["day"])

    if fields.get("hour12") is not None:
        hour = int(fields["hour12"])
        if hour > 12:
            raise ValueError(f"hour out of range: {hour}")
        if fields["ampm"] == "PM" and hour < 12:
            hour += 12
        elif fields["ampm"] == "AM" and hour == 12:
            hour = 0
    else:
        hour = int(fields.get("hour") or 0)

    minute = int(fields.get("minute") or 0)
    second = int(fields.get("second") or 0)
    microsecond = 0
    if fields.get("fraction"):
        # Finer than microseconds is truncated
        microsecond = int(fields["fraction"][:6].ljust(6, "0"))

    return datetime(year, month, day, hour, minute, second, microsecond, tzinfo=_zone_from(fields))


def match_layout(text: str, layout: TimestampLayout) -> Optional[datetime]:
    """Parse text with a single layout.

    Returns:
        Timezone-aware datetime, or None if the layout doesn't fit
    """
    match = layout.pattern.match(text)
    if match is None:
        return None
    try:
        return _build(match.groupdict())
    except ValueError:
        return None


def parse_timestamp(text: str) -> datetime:
    """Parse a timestamp written in any known layout.

    Surrounding whitespace is ignored. Layouts without a zone are read as UTC.

    Args:
        text: Timestamp text from the wire

    Returns:
        Timezone-aware datetime

    Raises:
        ValueError: If no layout matches

    Examples:
        >>> parse_timestamp("Tue, 12 Jul 2005 23:56:35 GMT")
        datetime.datetime(2005, 7, 12, 23, 56, 35, tzinfo=datetime.timezone.utc)
    """
    candidate = text.strip()
    for layout in LAYOUTS:
        parsed = match_layout(candidate, layout)
        if parsed is not None:
            return parsed
    raise ValueError(f"timestamp matches no known layout: {text!r}")


def format_timestamp(value: datetime) -> str:
    """Format a datetime in the canonical RFC 1123 layout.

    Naive datetimes are taken as UTC. Offset-zero instants are written with the
    "GMT" zone name, any other offset numerically (+hhmm).

    The layout has whole seconds only: microseconds are dropped, so a value
    with a fraction does not parse back to the same instant.

    Examples:
        >>> format_timestamp(datetime(2005, 10, 31, 19, 23, tzinfo=timezone.utc))
        'Mon, 31 Oct 2005 19:23:00 GMT'
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)

    offset = value.utcoffset() or timedelta(0)
    total_minutes = int(offset.total_seconds()) // 60
    if total_minutes == 0:
        zone = "GMT"
    else:
        sign = "-" if total_minutes < 0 else "+"
        hours, minutes = divmod(abs(total_minutes), 60)
        zone = f"{sign}{hours:02d}{minutes:02d}"

    return (
        f"{WEEKDAYS[value.weekday()][:3]}, {value.day:02d} {MONTHS[value.month - 1][:3]} "
        f"{value.year:04d} {value.hour:02d}:{value.minute:02d}:{value.second:02d} {zone}"
    )
