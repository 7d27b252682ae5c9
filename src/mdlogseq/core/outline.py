"""Markdown to Logseq outline trees, plus flat-block reconstruction and rendering helpers"""

import logging
import re
from datetime import date
from typing import Any, Callable, Literal

from markdown_it.tree import SyntaxTreeNode

from mdlogseq.core.extract.render import inline_of, node_to_markdown
from mdlogseq.core.models import BlockNode, BlockType, OutlineBlock, ParseConfig, ParsedBlock
from mdlogseq.core.parse import DEFAULT_PRESET, build_tree, check_preset
from mdlogseq.core.tasks import (
    normalize_task_marker,
    preprocess_task_markers_in_markdown,
    split_and_normalize_tasks_recursively,
)
from mdlogseq.core.validate import validate_markdown_content


logger = logging.getLogger(__name__)

RenderMode = Literal['readable', 'compact']

LIST_TYPES = ('bullet_list', 'ordered_list')
# node kinds folded into the open text block
PROSE_TYPES = ('paragraph', 'fence', 'code_block', 'blockquote', 'hr')
TAG_RE = re.compile(r'<[^>]+>')


def _text(node: SyntaxTreeNode, config: ParseConfig) -> str:
    if node.type == 'html_block':
        return TAG_RE.sub('', node.content).strip()
    return node_to_markdown(node, config)


def convert_list_item(item: SyntaxTreeNode, config: ParseConfig) -> OutlineBlock | None:
    """Item text becomes the block; nested lists become its children. Empty items are dropped."""
    content = ''
    children: list[OutlineBlock] = []
    for child in item.children:
        if child.type == 'paragraph':
            inline = inline_of(child)
            content = node_to_markdown(inline, config) if inline is not None else ''
        elif child.type in LIST_TYPES:
            children.extend(convert_list(child, config))
    if not content.strip():
        return None
    return OutlineBlock(content=normalize_task_marker(content), children=children)


def convert_list(list_node: SyntaxTreeNode, config: ParseConfig) -> list[OutlineBlock]:
    blocks = []
    for item in list_node.children:
        block = convert_list_item(item, config)
        if block is not None:
            blocks.append(block)
    return blocks


def tree_to_outline(tree: SyntaxTreeNode, config: ParseConfig = None) -> list[OutlineBlock]:
    """Group top-level nodes the way a reader outlines them.

    A heading opens a text block; following prose is appended to it and lists
    become its children. Lists with no open block become roots.
    """
    config = config or ParseConfig()
    blocks: list[OutlineBlock] = []
    current: OutlineBlock | None = None

    def append(part: str) -> None:
        nonlocal current
        if current is None:
            current = OutlineBlock(content=part)
        else:
            current.content += ('\n\n' if current.content.strip() else '') + part

    for node in tree.children:
        if node.type == 'heading':
            if current is not None and current.content.strip():
                blocks.append(current)
            current = OutlineBlock(content=node_to_markdown(node, config))
        elif node.type in PROSE_TYPES:
            append(_text(node, config))
        elif node.type in LIST_TYPES:
            items = convert_list(node, config)
            if current is not None:
                current.children.extend(items)
            else:
                blocks.extend(items)
        else:
            text = _text(node, config)
            if text.strip():
                append(text)

    if current is not None and current.content.strip():
        blocks.append(current)
    return blocks


def markdown_to_logseq_blocks(markdown: str, preset: str = DEFAULT_PRESET) -> list[OutlineBlock]:
    """Parse markdown into an outline, one task per block."""
    check_preset(preset)
    if not markdown or not markdown.strip():
        return []
    try:
        cleaned = validate_markdown_content(markdown)
        tree = build_tree(preprocess_task_markers_in_markdown(cleaned), preset)
        outline = tree_to_outline(tree)
    except Exception as e:
        logger.warning("Outline parsing failed, keeping markdown as one block: %s", e, exc_info=True)
        return [OutlineBlock(content=markdown.strip())]
    return [b for block in outline for b in split_and_normalize_tasks_recursively(block)]


def _to_node(block: OutlineBlock) -> BlockNode:
    return BlockNode(text=block.content, children=[_to_node(c) for c in block.children])


def markdown_to_blocks(markdown: str) -> list[BlockNode]:
    """Parse markdown into the BlockNode forest accepted by insert_block_tree."""
    return [_to_node(b) for b in markdown_to_logseq_blocks(markdown)]


def logseq_blocks_to_strings(blocks: list[OutlineBlock]) -> list[str]:
    """Flatten an outline in pre-order, dropping blank contents."""
    result: list[str] = []

    def walk(block: OutlineBlock) -> None:
        result.append(block.content)
        for child in block.children:
            walk(child)

    for block in blocks:
        walk(block)
    return [s for s in result if s.strip()]


def render_blocks_from_markdown(
    markdown: str,
    mode: RenderMode = 'readable',
    to_blocks: Callable[[str], list[BlockNode]] = markdown_to_blocks,
    ) -> list[BlockNode]:
    """readable: the full forest. compact: one block whose text joins every line in pre-order."""
    roots = to_blocks(markdown)
    if mode == 'readable':
        return roots

    lines: list[str] = []

    def walk(nodes: list[BlockNode]) -> None:
        for n in nodes:
            if n.text.strip():
                lines.append(n.text.strip())
            walk(n.children)

    walk(roots)
    return [BlockNode(text='\n'.join(lines))]


def _node_text(block: ParsedBlock) -> str:
    meta = block.metadata
    if block.type == BlockType.list and meta and meta.task_list:
        return ('DONE ' if meta.checked else 'TODO ') + block.content
    return block.content


def blocks_to_tree(blocks: list[ParsedBlock]) -> list[BlockNode]:
    """Rebuild parent/child edges of a flat block list from level deltas.

    Headings nest under the nearest shallower heading; other blocks go under
    the current heading; list items nest under the nearest preceding item one
    level up.
    """
    roots: list[BlockNode] = []
    headings: list[tuple[int, BlockNode]] = []
    items: list[tuple[int, BlockNode]] = []

    def attach(parent: BlockNode | None, node: BlockNode) -> None:
        (parent.children if parent is not None else roots).append(node)

    for block in blocks:
        node = BlockNode(text=_node_text(block))
        if block.type == BlockType.heading:
            items.clear()
            while headings and headings[-1][0] >= block.level:
                headings.pop()
            attach(headings[-1][1] if headings else None, node)
            headings.append((block.level, node))
        elif block.type == BlockType.list:
            while items and items[-1][0] >= block.level:
                items.pop()
            if items:
                parent = items[-1][1]
            else:
                parent = headings[-1][1] if headings else None
            attach(parent, node)
            items.append((block.level, node))
        else:
            items.clear()
            attach(headings[-1][1] if headings else None, node)

    return roots


def blocks_to_markdown(blocks: list[ParsedBlock]) -> str:
    """Join block contents with blank lines, indenting list items by level."""
    parts = []
    for block in blocks:
        if block.type == BlockType.list and block.level > 0:
            parts.append('  ' * block.level + block.content)
        else:
            parts.append(block.content)
    return '\n\n'.join(parts)


def _property_value(value: Any) -> str:
    if isinstance(value, (list, tuple)):
        return ', '.join(_property_value(v) for v in value)
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def frontmatter_to_properties(frontmatter: dict[str, Any]) -> str:
    """Render a frontmatter mapping as a Logseq properties block (key:: value lines)."""
    return '\n'.join(
        f"{key}:: {_property_value(value)}"
        for key, value in frontmatter.items()
        if value is not None and _property_value(value).strip()
    )
