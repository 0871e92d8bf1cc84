"""
Tests for URL normalization.
"""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from sitequalifier.utils.url import normalize_url

# Host plus optional path, optionally with scheme, optionally with one trailing slash
website_addresses = st.from_regex(
    r"(https?://)?[a-z0-9-]{1,20}(\.[a-z]{2,6}){1,2}(/[a-z0-9_-]{1,10}){0,3}/?",
    fullmatch=True,
)
padding = st.sampled_from(["", " ", "\t", "  \n"])


@pytest.mark.unit
class TestNormalizeUrl:
    """Test normalize_url."""

    def test_adds_https_and_strips_trailing_slash(self):
        assert normalize_url("example.com/") == "https://example.com"

    def test_keeps_http_scheme(self):
        assert normalize_url("http://example.com") == "http://example.com"

    def test_keeps_https_scheme_and_path(self):
        assert normalize_url("https://example.com/pricing") == "https://example.com/pricing"

    def test_trims_surrounding_whitespace(self):
        assert normalize_url("  acme.io \n") == "https://acme.io"

    def test_removes_only_one_trailing_slash(self):
        assert normalize_url("example.com//") == "https://example.com/"

    def test_scheme_detection_is_case_sensitive(self):
        # An upper-case scheme is not recognised, so https:// is prepended
        assert normalize_url("HTTP://x.com") == "https://HTTP://x.com"

    def test_domain_is_not_validated(self):
        assert normalize_url("badsite.invalid") == "https://badsite.invalid"

    @given(website_addresses, padding, padding)
    def test_normalization_is_idempotent(self, address, before, after):
        once = normalize_url(before + address + after)
        assert normalize_url(once) == once

    @given(website_addresses)
    def test_result_always_has_a_scheme(self, address):
        assert normalize_url(address).startswith(("http://", "https://"))
