"""
Scrape the Aikatsu Academy! schedule page and publish it as an iCalendar feed.
"""

__version__ = "0.1.0"
