"""Pre-parse content cleanup and HTML sanitization"""

import logging
import re

from bs4 import BeautifulSoup

from mdlogseq.core.models import ParseConfig


logger = logging.getLogger(__name__)

SCRIPT_RE     = re.compile(r'<script[^>]*>[\s\S]*?</script>', re.IGNORECASE)
IFRAME_RE     = re.compile(r'<iframe[^>]*>[\s\S]*?</iframe>', re.IGNORECASE)
JS_URL_RE     = re.compile(r'javascript:', re.IGNORECASE)
# event handler attribute inside a tag, with its value
HANDLER_RE    = re.compile(
    r'(<[^>]*?)\s+on\w+\s*=\s*(?:"[^"]*"|\'[^\']*\'|[^\s>]*)', re.IGNORECASE
)
BLANK_RUN_RE  = re.compile(r'\n{3,}')
TAG_RE        = re.compile(r'<[^>]+>')

UNSAFE_ELEMENTS = ('script', 'iframe', 'object', 'embed', 'style')
URL_ATTRIBUTES = ('href', 'src', 'action', 'formaction')


def validate_markdown_content(content: str, config: ParseConfig = None) -> str:
    """Strip dangerous HTML (when sanitizing), normalize newlines, collapse blank runs, trim."""
    config = config or ParseConfig()
    cleaned = content

    if config.sanitize_html:
        cleaned = SCRIPT_RE.sub('', cleaned)
        cleaned = IFRAME_RE.sub('', cleaned)
        cleaned = JS_URL_RE.sub('', cleaned)
        while HANDLER_RE.search(cleaned):
            cleaned = HANDLER_RE.sub(r'\1', cleaned)

    cleaned = cleaned.replace('\r\n', '\n').replace('\r', '\n')
    cleaned = BLANK_RUN_RE.sub('\n\n', cleaned)
    return cleaned.strip()


def sanitize_html(html: str) -> str:
    """Return html with unsafe elements, event handlers, and javascript: URLs removed.

    Never raises: if the HTML cannot be processed, all tags are stripped and
    only the text is kept.
    """
    try:
        soup = BeautifulSoup(html, 'html.parser')
        for tag in soup.find_all(UNSAFE_ELEMENTS):
            tag.decompose()
        for tag in soup.find_all(True):
            for attr in list(tag.attrs):
                value = tag.attrs[attr]
                if attr.lower().startswith('on'):
                    del tag.attrs[attr]
                elif attr.lower() in URL_ATTRIBUTES and isinstance(value, str) \
                        and value.strip().lower().startswith('javascript:'):
                    del tag.attrs[attr]
        return str(soup)
    except Exception as e:
        logger.warning("HTML sanitizer failed, stripping tags instead: %s", e)
        return TAG_RE.sub('', html)
