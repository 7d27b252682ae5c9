"""Unit tests for core/validate.py"""

from mdlogseq.core.models import ParseConfig
from mdlogseq.core.validate import sanitize_html, validate_markdown_content


def test_validate_normalizes_newlines_and_blank_runs():
    """CRLF/CR become LF, blank runs collapse to one blank line, ends are trimmed."""
    content = "\r\n  line1\r\n\r\n\r\n\r\nline2\rline3  \n"
    assert validate_markdown_content(content) == "line1\n\nline2\nline3"


def test_validate_removes_script_and_iframe():
    """Script and iframe elements are removed with their bodies."""
    content = "a<script type='x'>alert(1)</script>b<iframe src='x'>frame</iframe>c"
    assert validate_markdown_content(content) == "abc"


def test_validate_removes_javascript_urls():
    """javascript: schemes are stripped."""
    assert validate_markdown_content("[x](JavaScript:alert(1))") == "[x](alert(1))"


def test_validate_removes_event_handlers():
    """on* attributes are removed from tags."""
    content = '<img src="a.png" onerror="bad()" onload=\'worse()\'>'
    assert validate_markdown_content(content) == '<img src="a.png">'


def test_validate_leaves_prose_alone():
    """Text that merely looks like an attribute outside a tag is kept."""
    content = "set onload=1 in the config"
    assert validate_markdown_content(content) == content


def test_validate_without_sanitizing():
    """sanitize_html=False keeps HTML but still normalizes."""
    content = "<script>x()</script>\r\n\r\n\r\ntext"
    result = validate_markdown_content(content, ParseConfig(sanitize_html=False))
    assert result == "<script>x()</script>\n\ntext"


def test_sanitize_html_strips_unsafe_parts():
    """sanitize_html drops scripts, handlers and javascript: links."""
    html = '<a href="javascript:alert(1)" onclick="x()">link</a><script>bad()</script>'
    assert sanitize_html(html) == "<a>link</a>"


def test_sanitize_html_keeps_safe_markup():
    """Harmless markup survives."""
    html = '<p class="note">Hello <b>world</b></p>'
    assert sanitize_html(html) == html
