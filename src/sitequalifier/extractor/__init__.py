"""
SiteQualifier content extraction.

A shared headless Chromium renders each website; the rendered DOM snapshot
is reduced to title, meta description, headings, hero text and paragraph
text by a pure BeautifulSoup pass.
"""

from .browser import BrowserSession
from .models import PageFields
from .page_parser import extract_page_fields
from .scraper import INSUFFICIENT_CONTENT_ERROR, ContentScraper

__all__ = [
    "BrowserSession",
    "ContentScraper",
    "INSUFFICIENT_CONTENT_ERROR",
    "PageFields",
    "extract_page_fields",
]
