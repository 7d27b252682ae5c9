"""Render markdown-it syntax-tree nodes back to markdown text"""

from markdown_it.tree import SyntaxTreeNode

from mdlogseq.core.models import ParseConfig
from mdlogseq.core.validate import sanitize_html


def _join(node: SyntaxTreeNode, config: ParseConfig, sep: str = '') -> str:
    return sep.join(node_to_markdown(child, config) for child in node.children)


def fence(info: str, body: str) -> str:
    return f"```{info}\n{body}\n```"


def heading_level(node: SyntaxTreeNode) -> int:
    """Return the heading depth (1-6) from an hN tag; 1 when the tag is unexpected."""
    if node.tag and node.tag[0] == 'h' and node.tag[1:].isdigit():
        return max(1, min(6, int(node.tag[1:])))
    return 1


def inline_of(node: SyntaxTreeNode) -> SyntaxTreeNode | None:
    """Return the inline child of a paragraph/heading/cell node, if any."""
    for child in node.children:
        if child.type == 'inline':
            return child
    return None


def cell_texts(row: SyntaxTreeNode, config: ParseConfig) -> list[str]:
    return [node_to_markdown(cell, config).strip() for cell in row.children]


def table_rows(node: SyntaxTreeNode) -> tuple[list[SyntaxTreeNode], list[SyntaxTreeNode]]:
    """Split a table node into (header rows, body rows)."""
    head: list[SyntaxTreeNode] = []
    body: list[SyntaxTreeNode] = []
    for section in node.children:
        target = head if section.type == 'thead' else body
        target.extend(r for r in section.children if r.type == 'tr')
    return head, body


def table_to_markdown(node: SyntaxTreeNode, config: ParseConfig) -> str:
    head, body = table_rows(node)
    headers = cell_texts(head[0], config) if head else []
    lines = [
        f"| {' | '.join(headers)} |",
        f"| {' | '.join('---' for _ in headers)} |",
    ]
    lines.extend(f"| {' | '.join(cell_texts(row, config))} |" for row in body)
    return '\n'.join(lines)


def html_to_markdown(raw: str, config: ParseConfig) -> str:
    if not config.allow_html:
        return ''
    return sanitize_html(raw) if config.sanitize_html else raw


def node_to_markdown(node: SyntaxTreeNode, config: ParseConfig = None) -> str:
    """Render a node and its children as markdown source."""
    config = config or ParseConfig()
    t = node.type

    if t == 'text':
        return node.content
    if t in ('softbreak', 'hardbreak'):
        return '\n'
    if t == 'em':
        return f"*{_join(node, config)}*"
    if t == 'strong':
        return f"**{_join(node, config)}**"
    if t == 's':
        return f"~~{_join(node, config)}~~"
    if t == 'code_inline':
        return f"`{node.content}`"
    if t in ('fence', 'code_block'):
        return fence((node.info or '').strip(), node.content.rstrip('\n'))
    if t in ('math_block', 'math_block_label'):
        return f"$$\n{node.content.strip()}\n$$"
    if t == 'math_inline':
        return f"${node.content}$"
    if t == 'math_inline_double':
        return f"$${node.content}$$"
    if t == 'link':
        return f"[{_join(node, config)}]({node.attrs.get('href', '')})"
    if t == 'image':
        title = node.attrs.get('title')
        suffix = f' "{title}"' if title else ''
        return f"![{node.content}]({node.attrs.get('src', '')}{suffix})"
    if t == 'heading':
        return '#' * heading_level(node) + ' ' + _join(node, config)
    if t == 'blockquote':
        return '\n'.join(f"> {line}" for line in _join(node, config, '\n').split('\n'))
    if t in ('bullet_list', 'ordered_list'):
        start = int(node.attrs.get('start', 1)) if t == 'ordered_list' else 1
        items = []
        for i, item in enumerate(node.children):
            marker = f"{start + i}." if t == 'ordered_list' else '-'
            items.append(f"{marker} {node_to_markdown(item, config)}")
        return '\n'.join(items)
    if t == 'list_item':
        return _join(node, config, '\n')
    if t == 'table':
        return table_to_markdown(node, config)
    if t == 'hr':
        return '---'
    if t == 'html_block':
        return html_to_markdown(node.content, config)
    if t == 'html_inline':
        return node.content if config.allow_html else ''

    if node.children:
        return _join(node, config)
    return node.content if node.type != 'root' else ''
