"""Per-node conversion of top-level syntax-tree nodes into ParsedBlocks"""

from typing import Any, Callable, Union

from markdown_it.tree import SyntaxTreeNode

from mdlogseq.core.extract.lists import process_list_items
from mdlogseq.core.extract.render import (
    cell_texts,
    heading_level,
    inline_of,
    node_to_markdown,
    table_rows,
)
from mdlogseq.core.models import BlockMetadata, BlockType, LogseqSyntax, ParseConfig, ParsedBlock
from mdlogseq.core.syntax import extract_logseq_syntax


HandlerResult = Union[ParsedBlock, list[ParsedBlock], None]
Handler = Callable[[SyntaxTreeNode, str, ParseConfig], HandlerResult]


def _syntax(text: str, config: ParseConfig) -> dict[str, Any]:
    return extract_logseq_syntax(text) if config.preserve_logseq_syntax else {}


def _block(content: str, block_type: BlockType, config: ParseConfig, level: int = 0, **meta) -> ParsedBlock | None:
    """Build a ParsedBlock; metadata is attached only when something was found."""
    if not content.strip():
        return None
    syntax = _syntax(content, config)
    if syntax:
        meta['logseq_syntax'] = LogseqSyntax(**syntax)
    fields = {k: v for k, v in meta.items() if v is not None}
    return ParsedBlock(
        content=content,
        type=block_type,
        level=level,
        metadata=BlockMetadata(**fields) if fields else None,
    )


def handle_heading(node: SyntaxTreeNode, content: str, config: ParseConfig) -> HandlerResult:
    return _block(content, BlockType.heading, config, level=heading_level(node))


def handle_list(node: SyntaxTreeNode, content: str, config: ParseConfig) -> HandlerResult:
    return process_list_items(node, 0, config)


def handle_code(node: SyntaxTreeNode, content: str, config: ParseConfig) -> HandlerResult:
    # language is always present for code, even when empty
    return _block(content.strip(), BlockType.code, config, language=(node.info or '').strip())


def handle_math(node: SyntaxTreeNode, content: str, config: ParseConfig) -> HandlerResult:
    return _block(content.strip(), BlockType.math, config)


def handle_table(node: SyntaxTreeNode, content: str, config: ParseConfig) -> HandlerResult:
    head, _ = table_rows(node)
    headers = cell_texts(head[0], config) if head else []
    return _block(content, BlockType.table, config, table_headers=headers or None)


def handle_blockquote(node: SyntaxTreeNode, content: str, config: ParseConfig) -> HandlerResult:
    return _block(content, BlockType.blockquote, config)


def handle_thematic_break(node: SyntaxTreeNode, content: str, config: ParseConfig) -> HandlerResult:
    return ParsedBlock(content='---', type=BlockType.thematic_break, level=0)


def handle_html(node: SyntaxTreeNode, content: str, config: ParseConfig) -> HandlerResult:
    if not config.allow_html:
        return None
    return _block(content.strip(), BlockType.html, config)


def _lone_image(node: SyntaxTreeNode) -> SyntaxTreeNode | None:
    """Return the image when a paragraph holds nothing else but whitespace and breaks."""
    inline = inline_of(node)
    if inline is None:
        return None
    meaningful = [
        c for c in inline.children
        if c.type not in ('softbreak', 'hardbreak') and not (c.type == 'text' and not c.content.strip())
    ]
    if len(meaningful) == 1 and meaningful[0].type == 'image':
        return meaningful[0]
    return None


def handle_paragraph(node: SyntaxTreeNode, content: str, config: ParseConfig) -> HandlerResult:
    image = _lone_image(node)
    if image is not None:
        return _block(
            content.strip(), BlockType.image, config,
            url=image.attrs.get('src') or None,
            alt=image.content or None,
        )
    return _block(content.strip(), BlockType.paragraph, config)


def handle_default(node: SyntaxTreeNode, content: str, config: ParseConfig) -> HandlerResult:
    return _block(content.strip(), BlockType.paragraph, config)


NODE_HANDLERS: dict[str, Handler] = {
    'heading':      handle_heading,
    'bullet_list':  handle_list,
    'ordered_list': handle_list,
    'fence':        handle_code,
    'code_block':   handle_code,
    'math_block':   handle_math,
    'math_block_label': handle_math,
    'table':        handle_table,
    'blockquote':   handle_blockquote,
    'hr':           handle_thematic_break,
    'html_block':   handle_html,
    'paragraph':    handle_paragraph,
}


def node_to_blocks(node: SyntaxTreeNode, config: ParseConfig) -> list[ParsedBlock]:
    """Dispatch one top-level node to its handler; unknown kinds become paragraphs."""
    handler = NODE_HANDLERS.get(node.type, handle_default)
    content = '' if handler is handle_list else node_to_markdown(node, config)
    result = handler(node, content, config)
    if result is None:
        return []
    if isinstance(result, ParsedBlock):
        return [result]
    return result
