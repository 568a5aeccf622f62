"""
Tests for extractor.domain module (URL to bare hostname).
"""

import pytest

from citation_watcher.extractor.domain import extract_domain


class TestExtractDomain:
    """Test suite for extract_domain()."""

    @pytest.mark.parametrize(
        ("url", "expected"),
        [
            ("https://www.example.com/page", "example.com"),
            ("http://sub.example.org:8080/a?b=c", "sub.example.org"),
            ("https://WWW.Example.COM", "example.com"),
            ("https://notwww.example.com/x", "notwww.example.com"),
            ("https://example.com", "example.com"),
        ],
    )
    def test_parsed_urls(self, url, expected):
        assert extract_domain(url) == expected

    def test_schemeless_string_uses_first_segment(self):
        assert extract_domain("example.com/page/x") == "example.com"

    def test_schemeless_www_is_stripped(self):
        assert extract_domain("www.example.com/path") == "example.com"

    def test_protocol_relative_url_uses_authority_segment(self):
        assert extract_domain("//cdn.example.com/lib.js") == "cdn.example.com"

    def test_unparsable_url_falls_back_to_split(self):
        # Unbalanced IPv6 bracket makes the URL parser raise
        assert extract_domain("http://[::1/x") == "[::1"

    def test_plain_text_is_returned_unchanged(self):
        assert extract_domain("not a url") == "not a url"

    def test_empty_string_is_returned_unchanged(self):
        assert extract_domain("") == ""

    def test_empty_authority_returns_original(self):
        assert extract_domain("http:///path") == "http:///path"
