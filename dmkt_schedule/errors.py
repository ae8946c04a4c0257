"""
Exceptions raised by the scraping pipeline.

Every error carries the name of the pipeline step that failed so the CLI
can report it in its structured log line.
"""
from __future__ import annotations


class ScheduleError(Exception):
    step = "pipeline"


class ScheduleStructureError(ScheduleError):
    """A required element is missing or a day number is not an integer."""

    step = "extract"


class MonthLabelError(ScheduleError):
    step = "month"


class DurationError(ScheduleError):
    step = "normalize"


class FetchError(ScheduleError):
    step = "fetch"


class UploadError(ScheduleError):
    step = "upload"


class ConfigError(ScheduleError):
    step = "config"
