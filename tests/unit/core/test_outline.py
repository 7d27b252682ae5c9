"""Unit tests for core/outline.py"""

from datetime import date

import pytest

from mdlogseq.core.models import BlockMetadata, BlockNode, BlockType, OutlineBlock, ParsedBlock
from mdlogseq.core.outline import (
    blocks_to_markdown,
    blocks_to_tree,
    frontmatter_to_properties,
    logseq_blocks_to_strings,
    markdown_to_blocks,
    markdown_to_logseq_blocks,
    render_blocks_from_markdown,
    tree_to_outline,
)
from mdlogseq.core.parse import build_tree


def _raise(*args, **kwargs):
    raise RuntimeError("tree failure")


def _shape(blocks):
    """Reduce an outline to (content, [children]) tuples for comparison."""
    return [(b.content, _shape(b.children)) for b in blocks]


def test_heading_collects_prose_and_lists():
    """A heading block absorbs following prose; lists become its children."""
    md = "# Title\n\nIntro text\n\n- one\n- two\n  - nested"
    assert _shape(markdown_to_logseq_blocks(md)) == [
        ("# Title\n\nIntro text", [("one", []), ("two", [("nested", [])])]),
    ]


def test_new_heading_closes_block():
    """Each heading starts a new root."""
    md = "# A\n\ntext a\n\n## B\n\ntext b"
    assert [b.content for b in markdown_to_logseq_blocks(md)] == ["# A\n\ntext a", "## B\n\ntext b"]


def test_lists_without_heading_are_roots():
    """With no open block, list items become roots."""
    assert _shape(markdown_to_logseq_blocks("- a\n- b")) == [("a", []), ("b", [])]


def test_checkbox_items_become_tasks():
    """Checkbox items are rewritten as TODO/DONE blocks."""
    md = "- [ ] write\n- [x] ship"
    assert [b.content for b in markdown_to_logseq_blocks(md)] == ["TODO write", "DONE ship"]


def test_bare_tasks_split_into_siblings():
    """Consecutive bare checkbox lines become sibling blocks."""
    md = "# Plan\n\n[ ] one\n[x] two"
    assert [b.content for b in markdown_to_logseq_blocks(md)] == ["# Plan", "TODO one", "DONE two"]


@pytest.mark.parametrize("md", ["", "   \n  "])
def test_blank_markdown(md):
    """Blank markdown produces no blocks."""
    assert markdown_to_logseq_blocks(md) == []


def test_outline_failure_keeps_text(monkeypatch):
    """If the tree cannot be built the whole text becomes one block."""
    monkeypatch.setattr("mdlogseq.core.outline.build_tree", _raise)
    assert _shape(markdown_to_logseq_blocks("  some text  ")) == [("some text", [])]


def test_tree_to_outline_html_block():
    """HTML blocks contribute their text only."""
    tree = build_tree("<div><b>bold</b> words</div>")
    assert [b.content for b in tree_to_outline(tree)] == ["bold words"]


def test_markdown_to_blocks_returns_nodes():
    """markdown_to_blocks produces BlockNode trees."""
    roots = markdown_to_blocks("# T\n\n- a")
    assert roots == [BlockNode(text="# T", children=[BlockNode(text="a")])]


def test_logseq_blocks_to_strings_preorder():
    """Strings come out in pre-order, skipping blanks."""
    blocks = [
        OutlineBlock("a", [OutlineBlock("a1"), OutlineBlock("  ")]),
        OutlineBlock("b"),
    ]
    assert logseq_blocks_to_strings(blocks) == ["a", "a1", "b"]


def test_render_readable_and_compact():
    """compact mode folds the forest into a single block."""
    md = "# T\n\n- a\n- b"
    readable = render_blocks_from_markdown(md)
    compact = render_blocks_from_markdown(md, mode="compact")
    assert len(readable) == 1 and len(readable[0].children) == 2
    assert compact == [BlockNode(text="# T\na\nb")]


def _pb(content, block_type, level=0, **meta):
    return ParsedBlock(
        content=content, type=block_type, level=level,
        metadata=BlockMetadata(**meta) if meta else None,
    )


def test_blocks_to_tree_rebuilds_structure():
    """Headings nest by depth, lists by level, other blocks under the current heading."""
    blocks = [
        _pb("# One", BlockType.heading, 1),
        _pb("intro", BlockType.paragraph),
        _pb("item", BlockType.list, 0),
        _pb("sub", BlockType.list, 1, task_list=True, checked=False),
        _pb("## Two", BlockType.heading, 2),
        _pb("done", BlockType.list, 0, task_list=True, checked=True),
        _pb("# Three", BlockType.heading, 1),
    ]
    tree = blocks_to_tree(blocks)
    assert [n.text for n in tree] == ["# One", "# Three"]
    one = tree[0]
    assert [n.text for n in one.children] == ["intro", "item", "## Two"]
    assert [n.text for n in one.children[1].children] == ["TODO sub"]
    assert [n.text for n in one.children[2].children] == ["DONE done"]


def test_blocks_to_tree_without_headings():
    """Without headings, top-level items are roots."""
    blocks = [_pb("a", BlockType.list, 0), _pb("b", BlockType.list, 1), _pb("c", BlockType.list, 0)]
    tree = blocks_to_tree(blocks)
    assert [n.text for n in tree] == ["a", "c"]
    assert [n.text for n in tree[0].children] == ["b"]


def test_blocks_to_markdown():
    """Blocks join with blank lines; nested list items are indented."""
    blocks = [
        _pb("# Heading", BlockType.heading, 1),
        _pb("Paragraph content", BlockType.paragraph),
        _pb("List item", BlockType.list, 1),
    ]
    assert blocks_to_markdown(blocks) == "# Heading\n\nParagraph content\n\n  List item"


def test_frontmatter_to_properties():
    """Frontmatter renders as key:: value lines."""
    fm = {"title": "Doc", "tags": ["a", "b"], "date": date(2024, 1, 2), "empty": None, "blank": ""}
    assert frontmatter_to_properties(fm) == "title:: Doc\ntags:: a, b\ndate:: 2024-01-02"


def test_frontmatter_to_properties_empty():
    """No frontmatter gives an empty string."""
    assert frontmatter_to_properties({}) == ""


def test_outline_unknown_preset_rejected():
    """An unknown preset raises instead of collapsing to one block."""
    with pytest.raises(ValueError, match="Unknown parser preset"):
        markdown_to_logseq_blocks("# T", preset="nope")
