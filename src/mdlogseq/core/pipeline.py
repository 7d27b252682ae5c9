"""Pipeline step functions: parse, outline, and insert orchestration"""

import logging
from pathlib import Path
from typing import Optional

from mdlogseq.client.base import BlockClient
from mdlogseq.client.insert import insert_block_tree
from mdlogseq.core.models import BlockNode, InsertPosition, ParseConfig, ParsedBlock, SourceDoc
from mdlogseq.core.outline import frontmatter_to_properties, render_blocks_from_markdown
from mdlogseq.core.parse import DEFAULT_PRESET, parse_markdown_to_blocks, read_markdown_file


logger = logging.getLogger(__name__)


def build_roots(doc: SourceDoc, mode: str = 'readable') -> list[BlockNode]:
    """Outline a document; frontmatter becomes a leading properties block."""
    roots = render_blocks_from_markdown(doc.markdown, mode)
    properties = frontmatter_to_properties(doc.frontmatter)
    if properties:
        roots.insert(0, BlockNode(text=properties))
    return roots


def run_parse(path: Path, config: ParseConfig, preset: str = DEFAULT_PRESET) -> list[ParsedBlock]:
    """Parse a markdown file into its flat block list."""
    doc = read_markdown_file(path)
    return parse_markdown_to_blocks(doc.markdown, config, preset)


def run_outline(path: Path, mode: str = 'readable') -> list[BlockNode]:
    """Parse a markdown file into the BlockNode forest that would be inserted."""
    return build_roots(read_markdown_file(path), mode)


def run_insert(
    client: BlockClient,
    page: str,
    path: Path,
    position: Optional[InsertPosition] = None,
    ) -> tuple[list[str], int]:
    """Insert a markdown file into page. Returns (created root uuids, roots attempted).

    Fewer uuids than roots means some subtrees were skipped.
    """
    roots = run_outline(path)
    if not roots:
        return [], 0
    created = insert_block_tree(client, page, position, roots)
    if len(created) < len(roots):
        logger.warning("Inserted %d of %d root blocks into %s", len(created), len(roots), page)
    return created, len(roots)
