"""Recursive expansion of list nodes into leveled, task-aware ParsedBlocks"""

import re

from markdown_it.tree import SyntaxTreeNode

from mdlogseq.core.extract.render import inline_of, node_to_markdown
from mdlogseq.core.models import BlockMetadata, BlockType, LogseqSyntax, ParseConfig, ParsedBlock
from mdlogseq.core.syntax import extract_logseq_syntax


LIST_TYPES = ('bullet_list', 'ordered_list')
ITEM_CHECKBOX_RE = re.compile(r'^\s*(?:[*_`]+)?\[(\s|x|X)?\](?:[*_`]+)?\s*')


def _checkbox(text: str) -> tuple[bool | None, str]:
    """Return (checked, text without checkbox); checked is None when there is no checkbox."""
    m = ITEM_CHECKBOX_RE.match(text)
    if not m:
        return None, text
    return (m.group(1) or '').lower() == 'x', text[m.end():]


def _item_text(item: SyntaxTreeNode, config: ParseConfig) -> str:
    """Concatenate an item's own content, skipping nested lists."""
    parts = []
    for child in item.children:
        if child.type in LIST_TYPES:
            continue
        if child.type == 'paragraph':
            inline = inline_of(child)
            parts.append(node_to_markdown(inline, config) if inline is not None else '')
        else:
            parts.append(node_to_markdown(child, config))
    return ''.join(parts)


def process_list_items(
    list_node: SyntaxTreeNode,
    parent_level: int = 0,
    config: ParseConfig = None,
    ) -> list[ParsedBlock]:
    """Expand a list into blocks in document order: each item, then its descendants.

    Nested lists go one level deeper, clamped at config.max_nesting_level so
    content past the cap is kept at the cap rather than dropped.
    """
    config = config or ParseConfig()
    cap = config.max_nesting_level
    level = min(parent_level, cap)
    blocks: list[ParsedBlock] = []

    for item in list_node.children:
        checked, text = _checkbox(_item_text(item, config))
        text = text.strip()

        if text:
            meta = {}
            if checked is not None:
                meta['task_list'] = True
                meta['checked'] = checked
            if config.preserve_logseq_syntax:
                syntax = extract_logseq_syntax(text)
                if syntax:
                    meta['logseq_syntax'] = LogseqSyntax(**syntax)
            blocks.append(ParsedBlock(
                content=text,
                type=BlockType.list,
                level=level,
                metadata=BlockMetadata(**meta) if meta else None,
            ))

        for child in item.children:
            if child.type in LIST_TYPES:
                blocks.extend(process_list_items(child, min(level + 1, cap), config))

    return blocks
