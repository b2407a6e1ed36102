# =============================================================================
# lib/ical.py - iCalendar Rendering
# =============================================================================
# Minimal RFC 5545 writer for rehearsal feeds. Only the fields the feed needs
# are supported; optional fields that are empty are left out entirely.
# Content lines longer than 75 octets are folded (CRLF + one space).
# =============================================================================

from dataclasses import dataclass
from datetime import date, datetime, time, timezone

CRLF = "\r\n"

PRODID = "-//Rehearsalist//Band Rehearsals//EN"

MAX_LINE_OCTETS = 75


def escape_text(value: str) -> str:
    """Escape a TEXT property value (backslash, semicolon, comma, newline)."""
    return (
        value.replace("\\", "\\\\")
        .replace(";", "\\;")
        .replace(",", "\\,")
        .replace("\r\n", "\\n")
        .replace("\n", "\\n")
    )


def fold_line(line: str) -> str:
    """
    Fold a content line so no physical line exceeds 75 octets of UTF-8.

    Continuation lines start with a single space, which counts toward their
    75 octets. Multi-byte characters are never split.
    """
    if len(line.encode("utf-8")) <= MAX_LINE_OCTETS:
        return line

    parts: list[str] = []
    current: list[str] = []
    size = 0
    limit = MAX_LINE_OCTETS
    for char in line:
        width = len(char.encode("utf-8"))
        if size + width > limit:
            parts.append("".join(current))
            current, size = [], 0
            limit = MAX_LINE_OCTETS - 1
        current.append(char)
        size += width
    parts.append("".join(current))
    return (CRLF + " ").join(parts)


def format_timestamp(moment: datetime) -> str:
    """UTC timestamp in basic format, e.g. 20261017T093000Z."""
    return moment.astimezone(timezone.utc).strftime("%Y%m%dT%H%M%SZ")


def format_start(day: date, start: time | None) -> str:
    """
    DTSTART value: YYYYMMDD, or YYYYMMDDTHHMM00 when a start time is known.

    Seconds are always written as 00.
    """
    value = day.strftime("%Y%m%d")
    if start is not None:
        value += f"T{start.hour:02d}{start.minute:02d}00"
    return value


@dataclass
class CalendarEvent:
    uid: str
    start_date: date
    summary: str
    status: str
    start_time: time | None = None
    location: str | None = None
    description: str | None = None

    def to_lines(self, stamp: datetime) -> list[str]:
        lines = [
            "BEGIN:VEVENT",
            f"UID:{self.uid}",
            f"DTSTAMP:{format_timestamp(stamp)}",
            f"DTSTART:{format_start(self.start_date, self.start_time)}",
            f"SUMMARY:{escape_text(self.summary)}",
        ]
        if self.location:
            lines.append(f"LOCATION:{escape_text(self.location)}")
        if self.description:
            lines.append(f"DESCRIPTION:{escape_text(self.description)}")
        lines.append(f"STATUS:{self.status}")
        lines.append("END:VEVENT")
        return lines


def render_calendar(
    name: str,
    description: str,
    events: list[CalendarEvent],
    stamp: datetime,
) -> str:
    """
    Render a VCALENDAR document with one VEVENT per event.

    Lines are CRLF-separated and folded at 75 octets. `stamp` is written as
    every event's DTSTAMP.
    """
    lines = [
        "BEGIN:VCALENDAR",
        "VERSION:2.0",
        f"PRODID:{PRODID}",
        "CALSCALE:GREGORIAN",
        "METHOD:PUBLISH",
        f"X-WR-CALNAME:{escape_text(name)}",
        f"X-WR-CALDESC:{escape_text(description)}",
        "X-WR-TIMEZONE:UTC",
    ]
    for event in events:
        lines.extend(event.to_lines(stamp))
    lines.append("END:VCALENDAR")
    return CRLF.join(fold_line(line) for line in lines)
