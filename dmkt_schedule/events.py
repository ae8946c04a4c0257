"""
Turn schedule lines into calendar events.

Each <p> line of a day becomes exactly one event:
- "20:00〜ライブ配信"  -> timed event at 20:00, title "ライブ配信"
- a line mentioning the weekly デミカツ通信 stream -> timed event at 20:00
- anything else        -> all-day event

Events carry a UID hashed from title + start time so re-running the
scraper over an unchanged page produces an identical feed.
"""
from __future__ import annotations

import base64
import hashlib
import logging
import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterable, List, NamedTuple

from .errors import DurationError, MonthLabelError
from .schedule_html import MonthSchedule

logger = logging.getLogger(__name__)

UID_NAMESPACE = "dmkt-schedule"
EVENT_DURATION = timedelta(hours=1)

MONTH_LABEL_FORMAT = "%Y.%m"
UID_TIME_FORMAT = "%Y%m%dT%H%M%S"

# "9:30〜特別番組"; the title may be preceded by a half- or full-width space
_TIMED_RE = re.compile(r"([0-9]+):([0-9]+)〜[ 　]?(.*)")

RECURRING_MARKER = "「アイカツアカデミー！配信部」デミカツ通信"
RECURRING_HOUR = 20


@dataclass(frozen=True)
class Event:
    uid: str
    title: str
    all_day: bool
    start_date: date
    start: datetime
    end: datetime

    def to_dict(self) -> dict:
        return {
            "uid": self.uid,
            "title": self.title,
            "all_day": self.all_day,
            "start_date": self.start_date.isoformat(),
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
        }


class LineKind(NamedTuple):
    hours: int
    minutes: int
    all_day: bool
    title: str


def parse_month_label(label: str) -> datetime:
    """Parse a header label like '2024.3' into midnight of the 1st."""
    try:
        return datetime.strptime(label.strip(), MONTH_LABEL_FORMAT)
    except ValueError as e:
        raise MonthLabelError(f"Invalid month label: {label!r}") from e


def classify_line(line: str) -> LineKind:
    """Decide whether *line* is timed, the recurring stream, or all-day."""
    m = _TIMED_RE.search(line)
    if m:
        try:
            hours, minutes = int(m.group(1)), int(m.group(2))
        except ValueError as e:
            # more digits than int() will convert
            raise DurationError(f"Invalid time in {line[:40]!r}") from e
        return LineKind(hours, minutes, False, m.group(3))
    if RECURRING_MARKER in line:
        return LineKind(RECURRING_HOUR, 0, False, line)
    return LineKind(0, 0, True, line)


def make_uid(title: str, start: datetime) -> str:
    """
    Content hash of title + start time.

    sha256, base32 with the extended-hex alphabet, no padding, lower case.
    """
    digest = hashlib.sha256(
        (UID_NAMESPACE + title + start.strftime(UID_TIME_FORMAT)).encode("utf-8")
    ).digest()
    return base64.b32hexencode(digest).decode("ascii").rstrip("=").lower()


def build_event(anchor: datetime, day_of_month: int, line: str) -> Event:
    kind = classify_line(line)
    try:
        day = anchor + timedelta(days=day_of_month - 1)
        start = day + timedelta(hours=kind.hours, minutes=kind.minutes)
        end = start + EVENT_DURATION
    except OverflowError as e:
        raise DurationError(
            f"Start time out of range for day {day_of_month} of {anchor:%Y-%m}: {line!r}"
        ) from e
    return Event(
        uid=make_uid(kind.title, start),
        title=kind.title,
        all_day=kind.all_day,
        start_date=day.date(),
        start=start,
        end=end,
    )


def normalize_schedule(months: Iterable[MonthSchedule]) -> List[Event]:
    """All events in page order: month, then day, then line."""
    events: List[Event] = []
    for i, month in enumerate(months):
        anchor = parse_month_label(month.label)
        logger.debug("Month %d: %s", i, anchor.date().isoformat())
        for entry in month.days:
            for line in entry.lines:
                event = build_event(anchor, entry.day_of_month, line)
                logger.debug("Event %s %s %s", event.uid, event.start.isoformat(), event.title)
                events.append(event)
    return events
