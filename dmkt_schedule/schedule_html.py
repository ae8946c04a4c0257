"""
Parse the Aikatsu Academy! schedule page into months of day entries.

The real HTML structure:
- p-schedule-header: a swiper carousel with one ``swiper-slide`` per
  visible month, whose text is the month label, e.g. "2024.3".
- p-schedule-body: a flat run of ``p-schedule-body__item`` blocks, one per
  day, each with a ``num`` div holding the day of month and one <p> per
  schedule line:

    <div class="p-schedule-body__item">
      <div class="num">1</div>
      <p>20:00〜ライブ配信</p>
    </div>

There is no month marker on the day blocks; a new month starts whenever
the day number goes back to 1.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Sequence, Tuple

from .dom import collect_text, find_all, find_first, first_text, parse_html
from .errors import ScheduleStructureError

logger = logging.getLogger(__name__)

HEADER_CLASS = "p-schedule-header"
SLIDE_CLASS = "swiper-slide"
BODY_CLASS = "p-schedule-body"
ITEM_CLASS = "p-schedule-body__item"
DAY_NUM_CLASS = "num"
LINE_TAG = "p"


@dataclass(frozen=True)
class DayEntry:
    day_of_month: int
    lines: Tuple[str, ...]


@dataclass(frozen=True)
class MonthSchedule:
    label: str
    days: Tuple[DayEntry, ...]


# ──────────────────────────────────────────────────────────────────
#  Extraction steps
# ──────────────────────────────────────────────────────────────────

def _require(root, klass: str):
    node = find_first(root, "div", klass)
    if node is None:
        raise ScheduleStructureError(f"Schedule container div.{klass} not found")
    return node


def extract_months(root) -> List[str]:
    """Month labels from the header carousel, in display order."""
    header = _require(root, HEADER_CLASS)
    months = [first_text(slide).strip() for slide in find_all(header, "div", SLIDE_CLASS)]
    logger.debug("Extracted month labels: %s", months)
    return months


def _parse_day(item) -> int:
    num = find_first(item, "div", DAY_NUM_CLASS)
    if num is None:
        raise ScheduleStructureError("Schedule item has no div.num day number")
    text = first_text(num)
    try:
        return int(text)
    except ValueError as e:
        raise ScheduleStructureError(f"Day of month is not a number: {text!r}") from e


def extract_day_entries(root) -> List[DayEntry]:
    """One DayEntry per schedule item, in document order."""
    body = _require(root, BODY_CLASS)
    entries: List[DayEntry] = []
    for item in find_all(body, "div", ITEM_CLASS):
        entries.append(DayEntry(_parse_day(item), tuple(collect_text(item, LINE_TAG))))
    logger.debug("Extracted %d day entries", len(entries))
    return entries


def group_by_month(entries: Sequence[DayEntry]) -> List[List[DayEntry]]:
    """
    Split the flat day run into months.

    A group starts at every day 1. The first entry always opens a group,
    even when the page starts mid-month, and no empty group is created.
    """
    groups: List[List[DayEntry]] = []
    for entry in entries:
        if entry.day_of_month == 1 or not groups:
            groups.append([])
        groups[-1].append(entry)
    return groups


# ──────────────────────────────────────────────────────────────────
#  Public API
# ──────────────────────────────────────────────────────────────────

def parse_schedule(root) -> List[MonthSchedule]:
    """Pair every month label with its group of day entries."""
    groups = group_by_month(extract_day_entries(root))
    months = extract_months(root)
    if len(months) != len(groups):
        raise ScheduleStructureError(
            f"Found {len(months)} month label(s) but {len(groups)} month(s) of days"
        )
    return [MonthSchedule(label, tuple(days)) for label, days in zip(months, groups)]


def parse_schedule_html(
    html_path: str | Path | None = None,
    html_content: str | bytes | None = None,
) -> List[MonthSchedule]:
    """
    Parse the schedule page.

    :param html_path: Path to a saved copy of the page.
    :param html_content: Raw HTML (alternative to html_path).
    :returns: One MonthSchedule per displayed month, in page order.
    """
    if html_content is not None:
        html = html_content
    elif html_path is not None:
        html = Path(html_path).read_text(encoding="utf-8", errors="ignore")
    else:
        raise ValueError("Provide either html_path or html_content.")

    soup = parse_html(html)
    return parse_schedule(soup)
