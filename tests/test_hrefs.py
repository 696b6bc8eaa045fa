import pytest

from NoteBlocks.hrefs import sanitize_href


def test_accepts_web_and_mail_links():
    assert sanitize_href("https://example.com") == "https://example.com"
    assert sanitize_href("  http://example.com/a?b=1  ") == "http://example.com/a?b=1"
    assert sanitize_href("MAILTO:me@example.org") == "MAILTO:me@example.org"


@pytest.mark.parametrize(
    "raw",
    [
        "javascript:alert(1)",
        "data:text/html,x",
        "file:///etc/passwd",
        "/relative",
        "example.com",
        "",
        "   ",
        None,
        "http://",
        "https:///path-only",
        "https://exa\nmple.com",
        "ftp://example.com",
    ],
)
def test_rejects_unsafe_or_incomplete(raw):
    assert sanitize_href(raw) is None
