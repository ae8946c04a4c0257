"""
Export schedule events to ICS, CSV, and JSON.
"""
from __future__ import annotations

import csv
import io
import json
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Sequence

import icalendar
import pytz

from .events import Event

# Times on the schedule page are Japan local time
DEFAULT_TZ = "Asia/Tokyo"
CALENDAR_NAME = "アイカツアカデミー！スケジュール"

CSV_FIELDS = ["uid", "title", "all_day", "start_date", "start", "end"]


def build_calendar(
    events: Sequence[Event],
    tz_name: str = DEFAULT_TZ,
    generated_at: datetime | None = None,
) -> icalendar.Calendar:
    """Build an iCalendar feed; events keep the order they are given in."""
    tz = pytz.timezone(tz_name)
    stamp = generated_at or datetime.now(timezone.utc)

    cal = icalendar.Calendar()
    cal.add("prodid", "-//dmkt-schedule//Aikatsu Academy Schedule//JA")
    cal.add("version", "2.0")
    cal.add("calscale", "GREGORIAN")
    cal.add("x-wr-calname", CALENDAR_NAME)
    cal.add("x-wr-timezone", tz_name)

    for ev in events:
        event = icalendar.Event()
        event.add("uid", ev.uid)
        event.add("summary", ev.title)
        event.add("dtstamp", stamp)
        if ev.all_day:
            # DATE values; DTEND is exclusive
            event.add("dtstart", ev.start_date)
            event.add("dtend", ev.start_date + timedelta(days=1))
        else:
            event.add("dtstart", tz.localize(ev.start))
            event.add("dtend", tz.localize(ev.end))
        cal.add_component(event)

    return cal


def render_ics(events: Sequence[Event], tz_name: str = DEFAULT_TZ, generated_at: datetime | None = None) -> bytes:
    return build_calendar(events, tz_name, generated_at).to_ical()


def render_csv(events: Sequence[Event]) -> bytes:
    buf = io.StringIO()
    w = csv.DictWriter(buf, fieldnames=CSV_FIELDS)
    w.writeheader()
    w.writerows(ev.to_dict() for ev in events)
    return buf.getvalue().encode("utf-8")


def render_json(events: Sequence[Event]) -> bytes:
    return json.dumps([ev.to_dict() for ev in events], indent=2, ensure_ascii=False).encode("utf-8")


def render(events: Sequence[Event], fmt: str, tz_name: str = DEFAULT_TZ) -> bytes:
    """Render to the given format: ics, csv, or json."""
    fmt = fmt.lower()
    if fmt == "ics":
        return render_ics(events, tz_name)
    elif fmt == "csv":
        return render_csv(events)
    elif fmt == "json":
        return render_json(events)
    else:
        raise ValueError(f"Unsupported format: {fmt}. Use ics, csv, or json.")


def export(events: Sequence[Event], out_path: str | Path, fmt: str, tz_name: str = DEFAULT_TZ) -> None:
    """Write events to *out_path* in the given format."""
    Path(out_path).write_bytes(render(events, fmt, tz_name))
