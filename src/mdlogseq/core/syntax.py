"""Regex extraction of Logseq page links, block refs, tags, and properties"""

import re
from typing import Any


PAGE_LINK_RE = re.compile(r'\[\[([^\]]+)\]\]')
BLOCK_REF_RE = re.compile(r'\(\(([^)]+)\)\)')
TAG_RE       = re.compile(r'#([\w-]+)')
PROPERTY_RE  = re.compile(r'^([\w-]+)::\s*(.+)$', re.MULTILINE)


def extract_logseq_syntax(text: str) -> dict[str, Any]:
    """Return only the annotation kinds present in text; {} when there are none.

    Keys: page_links, block_refs, tags (lists in match order) and properties
    (a dict, last duplicate key wins).
    """
    found: dict[str, Any] = {}

    page_links = PAGE_LINK_RE.findall(text)
    if page_links:
        found['page_links'] = page_links

    block_refs = BLOCK_REF_RE.findall(text)
    if block_refs:
        found['block_refs'] = block_refs

    tags = TAG_RE.findall(text)
    if tags:
        found['tags'] = tags

    properties = {key: value.strip() for key, value in PROPERTY_RE.findall(text)}
    if properties:
        found['properties'] = properties

    return found


def analyze_logseq_content(content: str) -> dict[str, Any]:
    """Summarize which Logseq constructs appear in content."""
    syntax = extract_logseq_syntax(content)
    return {
        "has_page_links": bool(syntax.get('page_links')),
        "has_block_refs": bool(syntax.get('block_refs')),
        "has_tags":       bool(syntax.get('tags')),
        "has_properties": bool(syntax.get('properties')),
        "page_links":     syntax.get('page_links', []),
        "block_refs":     syntax.get('block_refs', []),
        "tags":           syntax.get('tags', []),
        "properties":     syntax.get('properties', {}),
        "is_logseq_formatted": bool(syntax),
    }
