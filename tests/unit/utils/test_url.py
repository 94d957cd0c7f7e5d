import pytest

from zenrows_fetch.utils.url import extract_domain


@pytest.mark.parametrize(
    "url, expected",
    [
        ("https://www.Example.com/path?q=1", "example.com"),
        ("http://example.com:8080/", "example.com"),
        ("example.com/page", "example.com"),
        ("", ""),
    ],
)
def test_extract_domain(url, expected):
    assert extract_domain(url) == expected


def test_extract_domain_malformed_url_returns_empty():
    assert extract_domain("http://[::1") == ""
