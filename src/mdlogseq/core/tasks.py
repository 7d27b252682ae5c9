"""Checkbox to TODO/DONE rewriting and splitting of multi-task blocks"""

import re

from mdlogseq.core.models import OutlineBlock


TASK_KEYWORDS = ('TODO', 'DOING', 'DONE', 'WAITING', 'LATER', 'NOW', 'CANCELED')

# Checkbox may be wrapped in emphasis or code markers, e.g. **[x]** or `[ ]`
_BOX = r'(?:[*_`]+)?\[(\s|x|X)?\](?:[*_`]+)?'

LIST_CHECKBOX_RE = re.compile(r'^\s*(?:[-*]|\d+\.)\s+?' + _BOX + r'\s*(.*)\Z')
BARE_CHECKBOX_RE = re.compile(r'^\s*' + _BOX + r'\s*(.*)\Z')

LIST_CHECKBOX_LINE_RE = re.compile(r'^(\s*)((?:[-*]|\d+\.)\s+)' + _BOX + r'\s*(.*)$')
BARE_CHECKBOX_LINE_RE = re.compile(r'^\s*' + _BOX + r'\s*(.*)$')

TASK_LINE_RE = re.compile(r'^(?:' + '|'.join(TASK_KEYWORDS) + r')\s+.+')


def _status(marker: str | None) -> str:
    return 'DONE' if (marker or '').lower() == 'x' else 'TODO'


def normalize_task_marker(text: str) -> str:
    """Rewrite a leading checkbox as a TODO/DONE keyword; other text is returned as-is."""
    m = LIST_CHECKBOX_RE.match(text) or BARE_CHECKBOX_RE.match(text)
    if not m:
        return text
    return f"{_status(m.group(1))} {m.group(2)}"


def preprocess_task_markers_in_markdown(md: str) -> str:
    """Apply the checkbox rewrite to every line before parsing.

    List markers and indentation are kept. A bare checkbox line gets a blank
    line in front of it when the previous line has text, so it parses as its
    own block instead of continuing a paragraph.
    """
    out: list[str] = []
    for line in re.split(r'\r?\n', md):
        m = LIST_CHECKBOX_LINE_RE.match(line)
        if m:
            indent, marker, box, rest = m.groups()
            out.append(f"{indent}{marker}{_status(box)} {rest}".rstrip())
            continue

        m = BARE_CHECKBOX_LINE_RE.match(line)
        if m:
            box, rest = m.groups()
            if out and out[-1].strip():
                out.append('')
            out.append(f"{_status(box)} {rest}".rstrip())
            continue

        out.append(line)
    return '\n'.join(out)


def split_and_normalize_tasks_recursively(block: OutlineBlock) -> list[OutlineBlock]:
    """Normalize a block's tasks, exploding it into siblings when it holds several.

    Only the first sibling keeps the block's children.
    """
    content = normalize_task_marker(block.content)
    lines = re.split(r'\r?\n', content)
    children = [c for child in block.children for c in split_and_normalize_tasks_recursively(child)]

    task_lines = [line for line in lines if TASK_LINE_RE.match(line.strip())]
    if len(task_lines) >= 2:
        parts = [line.strip() for line in lines if line.strip()]
        return [
            OutlineBlock(content=part, children=children if i == 0 else [])
            for i, part in enumerate(parts)
        ]

    return [OutlineBlock(content=content, children=children)]
