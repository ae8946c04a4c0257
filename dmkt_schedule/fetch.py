"""
Download the schedule page.
"""
from __future__ import annotations

import logging

import requests

from .errors import FetchError

logger = logging.getLogger(__name__)

USER_AGENT = "Mozilla/5.0 (compatible; dmkt-schedule)"


def fetch_schedule_html(url: str, timeout: float = 30) -> bytes:
    """GET *url* and return the raw body."""
    logger.info("Fetching schedule page", extra={"url": url})
    try:
        resp = requests.get(url, headers={"User-Agent": USER_AGENT}, timeout=timeout)
        resp.raise_for_status()
    except requests.RequestException as e:
        raise FetchError(f"Failed to get schedule page {url}: {e}") from e
    return resp.content
