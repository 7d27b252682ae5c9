"""Frontmatter extraction, markdown-it tokenization, and markdown-to-block parsing"""

import logging
import re
from pathlib import Path
from typing import Any

import yaml
from markdown_it import MarkdownIt
from markdown_it.tree import SyntaxTreeNode
from mdit_py_plugins.dollarmath import dollarmath_plugin

from mdlogseq.core.extract.fallback import parse_markdown_with_fallback
from mdlogseq.core.extract.handlers import node_to_blocks
from mdlogseq.core.models import ParseConfig, ParsedBlock, SourceDoc
from mdlogseq.core.validate import validate_markdown_content


logger = logging.getLogger(__name__)

FRONTMATTER_RE = re.compile(r'^---\s*\n(.*?)\n---\s*\n', re.DOTALL)
DEFAULT_PRESET = 'gfm-like'
PRESETS = ('commonmark', 'default', 'js-default', 'zero', 'gfm-like')


def check_preset(preset: str) -> str:
    if preset not in PRESETS:
        raise ValueError(f"Unknown parser preset '{preset}'; use one of: {', '.join(PRESETS)}")
    return preset


def make_parser(preset: str = DEFAULT_PRESET) -> MarkdownIt:
    """Build a MarkdownIt instance for the given preset name, with $$ math support."""
    check_preset(preset)
    return MarkdownIt(preset, options_update={"linkify": False}).use(dollarmath_plugin)


def build_tree(text: str, preset: str = DEFAULT_PRESET) -> SyntaxTreeNode:
    return SyntaxTreeNode(make_parser(preset).parse(text))


def _strip_frontmatter(text: str) -> tuple[dict[str, Any], str]:
    """Return (frontmatter_dict, body) with YAML header removed."""
    m = FRONTMATTER_RE.match(text)
    if m:
        try:
            fm = yaml.safe_load(m.group(1)) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML frontmatter: {e}") from e
        if not isinstance(fm, dict):
            raise ValueError(f"Invalid YAML frontmatter: expected a mapping, got {type(fm).__name__}")
        return fm, text[m.end():]
    return {}, text


def read_markdown_file(path: Path) -> SourceDoc:
    """Read a markdown file and split off its frontmatter."""
    raw = path.read_text(encoding='utf-8')
    frontmatter, body = _strip_frontmatter(raw)
    return SourceDoc(path=path, raw=raw, markdown=body, frontmatter=frontmatter)


def _tree_to_blocks(text: str, config: ParseConfig, preset: str) -> list[ParsedBlock] | None:
    """Convert via the syntax tree; None when the tree could not be built or walked."""
    try:
        tree = build_tree(text, preset)
        return [block for node in tree.children for block in node_to_blocks(node, config)]
    except Exception as e:
        logger.warning("Markdown tree parsing failed, using line parser: %s", e, exc_info=True)
        return None


def parse_markdown_to_blocks(
    text: str,
    config: ParseConfig = None,
    preset: str = DEFAULT_PRESET,
    ) -> list[ParsedBlock]:
    """Parse markdown into a flat, document-ordered list of typed blocks.

    An unknown preset raises ValueError; any other tree failure switches to
    the line parser.
    """
    check_preset(preset)
    config = config or ParseConfig()
    validated = validate_markdown_content(text, config)
    if not validated:
        return []

    blocks = _tree_to_blocks(validated, config, preset)
    if blocks is None:
        return parse_markdown_with_fallback(validated)
    return [b for b in blocks if b.content.strip()]


def parse_logseq_markdown(text: str) -> list[ParsedBlock]:
    """Parse with the default Logseq-preserving configuration."""
    return parse_markdown_to_blocks(text, ParseConfig())
