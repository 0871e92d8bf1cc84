"""
BeautifulSoup-based field extraction from a rendered DOM snapshot.

The browser contributes one thing BeautifulSoup cannot compute: the font
size of each ``p``/``span``/``div``, written into ``FONT_SIZE_ATTR`` before
the snapshot is taken. Everything else is a pure function of the HTML.
"""

from __future__ import annotations

from typing import Iterable, Optional

from bs4 import BeautifulSoup, Tag

from .models import PageFields

FONT_SIZE_ATTR = "data-computed-font-px"

REMOVE_SELECTORS = [
    "script",
    "style",
    "nav",
    "header",
    "footer",
    "noscript",
    "iframe",
    "svg",
    "button",
    "input",
    "form",
    "aside",
    ".sidebar",
    "#sidebar",
    ".menu",
    ".footer",
    ".header",
]

HEADING_SELECTOR = "h1, h2, h3, h4, h5, h6"
HERO_SELECTOR = "p, span, div"
HEADING_SEPARATOR = " | "

MIN_PARAGRAPH_LENGTH = 20
MIN_HERO_LENGTH = 50
DEFAULT_BODY_LIMIT = 15000
DEFAULT_HERO_LIMIT = 5000
DEFAULT_HERO_MIN_FONT_PX = 16.0

# Run in the page before the snapshot is taken.
ANNOTATE_FONT_SIZES_JS = f"""() => {{
    document.querySelectorAll('{HERO_SELECTOR}').forEach(el => {{
        const size = parseFloat(window.getComputedStyle(el).fontSize);
        el.setAttribute('{FONT_SIZE_ATTR}', Number.isFinite(size) ? String(size) : '0');
    }});
}}"""


def _text(element: Tag) -> str:
    return element.get_text().strip()


def _font_size(element: Tag) -> float:
    raw = element.get(FONT_SIZE_ATTR)
    if not isinstance(raw, str):
        return 0.0
    try:
        return float(raw)
    except ValueError:
        return 0.0


def _meta_content(soup: BeautifulSoup, **attrs: str) -> str:
    tag = soup.find("meta", attrs=attrs)
    if tag is None:
        return ""
    content = tag.get("content")
    return content.strip() if isinstance(content, str) else ""


def _remove_noise(soup: BeautifulSoup) -> None:
    for selector in REMOVE_SELECTORS:
        for element in soup.select(selector):
            # Nested matches are already gone with their ancestor
            if not element.decomposed:
                element.decompose()


def _join_capped(texts: Iterable[str], limit: int, separator: str = " ") -> str:
    return separator.join(texts)[:limit]


def extract_page_fields(
    html: str,
    *,
    body_limit: int = DEFAULT_BODY_LIMIT,
    hero_limit: int = DEFAULT_HERO_LIMIT,
    hero_min_font_px: float = DEFAULT_HERO_MIN_FONT_PX,
) -> PageFields:
    """Extract the marketing-relevant text fields of a page.

    Args:
        html: Rendered DOM snapshot, ideally annotated with ``FONT_SIZE_ATTR``
        body_limit: Cap on concatenated paragraph text
        hero_limit: Cap on concatenated hero text
        hero_min_font_px: Minimum font size for an element to count as hero text

    Returns:
        PageFields; fields that are absent from the page are empty strings
    """
    soup = BeautifulSoup(html, "html.parser")

    # SVG <title> elements label icons, not the document
    title_tag = next((tag for tag in soup.find_all("title") if tag.find_parent("svg") is None), None)
    title = " ".join(title_tag.get_text().split()) if title_tag is not None else ""

    meta_description = _meta_content(soup, name="description") or _meta_content(soup, property="og:description")

    _remove_noise(soup)

    first_h1: Optional[Tag] = soup.find("h1")
    h1 = _text(first_h1) if first_h1 is not None else ""

    headings = HEADING_SEPARATOR.join(
        text for text in (_text(heading) for heading in soup.select(HEADING_SELECTOR)) if text
    )

    body_text = _join_capped(
        (text for text in (_text(p) for p in soup.find_all("p")) if len(text) > MIN_PARAGRAPH_LENGTH),
        body_limit,
    )

    hero_text = _join_capped(
        (
            text
            for element, text in ((el, _text(el)) for el in soup.select(HERO_SELECTOR))
            if _font_size(element) >= hero_min_font_px and len(text) > MIN_HERO_LENGTH
        ),
        hero_limit,
    )

    return PageFields(
        title=title,
        meta_description=meta_description,
        h1=h1,
        headings=headings,
        hero_text=hero_text,
        body_text=body_text,
    )
