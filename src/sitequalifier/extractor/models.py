"""
Data models for page extraction.
"""

from __future__ import annotations

from dataclasses import dataclass

CONTENT_SEPARATOR = "\n\n"


@dataclass(slots=True, frozen=True)
class PageFields:
    """Text fields pulled out of a rendered page."""

    title: str = ""
    meta_description: str = ""
    h1: str = ""
    headings: str = ""
    hero_text: str = ""
    body_text: str = ""

    def to_content(self) -> str:
        """Join the non-empty fields, most summarising first."""
        parts = [
            self.title,
            self.meta_description,
            self.h1,
            self.headings,
            self.hero_text,
            self.body_text,
        ]
        return CONTENT_SEPARATOR.join(part for part in parts if part)
