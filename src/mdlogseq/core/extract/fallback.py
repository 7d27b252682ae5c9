"""Line-oriented parser used when the markdown-it tree cannot be built"""

import re

from mdlogseq.core.models import BlockMetadata, BlockType, LogseqSyntax, ParsedBlock
from mdlogseq.core.syntax import extract_logseq_syntax


HEADING_RE    = re.compile(r'^(#{1,6})\s+(.+)$')
TASK_RE       = re.compile(r'^(\s*)([-*+])\s+\[([ xX])\]\s+(.+)$')
LIST_RE       = re.compile(r'^(\s*)([-*+]|\d+\.)\s+(.+)$')
BLOCKQUOTE_RE = re.compile(r'^>\s*(.*)$')
# a list marker (optionally with a checkbox) and nothing else
EMPTY_ITEM_RE = re.compile(r'^\s*(?:[-*+]|\d+\.)(?:\s+\[[ xX]?\])?\s*$')


def _indent_level(line: str) -> int:
    """Two spaces (or one tab) per level."""
    width = len(line) - len(line.lstrip(' \t'))
    return (width + line[:width].count('\t')) // 2


def _with_syntax(text: str, **meta) -> BlockMetadata | None:
    syntax = extract_logseq_syntax(text)
    if syntax:
        meta['logseq_syntax'] = LogseqSyntax(**syntax)
    return BlockMetadata(**meta) if meta else None


def parse_markdown_with_fallback(content: str) -> list[ParsedBlock]:
    """Split content into blocks line by line. Never raises.

    Returns at least one block for non-blank content.
    """
    blocks: list[ParsedBlock] = []
    paragraph: list[str] = []
    code: list[str] = []
    language = ''
    in_code = False

    def flush() -> None:
        text = '\n'.join(paragraph).strip()
        paragraph.clear()
        if text:
            blocks.append(ParsedBlock(
                content=text, type=BlockType.paragraph, level=0, metadata=_with_syntax(text),
            ))

    for line in content.split('\n'):
        stripped = line.strip()

        if stripped.startswith('```'):
            if in_code:
                blocks.append(ParsedBlock(
                    content=f"```{language}\n" + '\n'.join(code) + "\n```",
                    type=BlockType.code,
                    level=0,
                    metadata=BlockMetadata(language=language),
                ))
                code.clear()
                in_code, language = False, ''
            else:
                flush()
                in_code, language = True, stripped[3:].strip()
            continue

        if in_code:
            code.append(line)
            continue

        if not stripped:
            flush()
            continue

        if EMPTY_ITEM_RE.match(line):
            flush()
            continue

        heading = HEADING_RE.match(stripped)
        task = TASK_RE.match(line)
        item = LIST_RE.match(line)
        quote = BLOCKQUOTE_RE.match(stripped)

        if heading:
            flush()
            blocks.append(ParsedBlock(
                content=stripped, type=BlockType.heading,
                level=len(heading.group(1)), metadata=_with_syntax(stripped),
            ))
        elif task:
            flush()
            text = task.group(4).strip()
            blocks.append(ParsedBlock(
                content=text, type=BlockType.list, level=_indent_level(line),
                metadata=_with_syntax(text, task_list=True, checked=task.group(3).lower() == 'x'),
            ))
        elif item:
            flush()
            text = item.group(3).strip()
            blocks.append(ParsedBlock(
                content=text, type=BlockType.list, level=_indent_level(line),
                metadata=_with_syntax(text),
            ))
        elif quote:
            flush()
            blocks.append(ParsedBlock(
                content=stripped, type=BlockType.blockquote, level=0,
                metadata=_with_syntax(quote.group(1)),
            ))
        elif stripped == '---':
            flush()
            blocks.append(ParsedBlock(content='---', type=BlockType.thematic_break, level=0))
        else:
            paragraph.append(line)

    # an unterminated fence is kept as plain text
    if in_code:
        paragraph.append(f"```{language}")
        paragraph.extend(code)
    flush()

    if not blocks and content.strip():
        blocks.append(ParsedBlock(content=content.strip(), type=BlockType.paragraph, level=0))
    return blocks
