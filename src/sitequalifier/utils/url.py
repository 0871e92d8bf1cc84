"""
URL normalization for user-supplied website addresses.
"""

from __future__ import annotations

SUPPORTED_SCHEMES = ("http://", "https://")
DEFAULT_SCHEME = "https://"


def normalize_url(raw: str) -> str:
    """
    Turn a user-supplied address into a fetchable absolute URL.

    Trims whitespace, drops one trailing slash and prepends ``https://``
    when no scheme is present. Domain syntax is not validated; a bad
    address surfaces later as a navigation error.

    The scheme check is case-sensitive, so ``"HTTP://x.com"`` gets a
    second scheme prepended.

    Examples:
        >>> normalize_url("example.com/")
        'https://example.com'
        >>> normalize_url("  http://example.com/pricing ")
        'http://example.com/pricing'
    """
    url = raw.strip()
    if url.endswith("/"):
        url = url[:-1]
    if not url.startswith(SUPPORTED_SCHEMES):
        url = DEFAULT_SCHEME + url
    return url
