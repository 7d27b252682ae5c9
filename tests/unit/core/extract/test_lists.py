"""Unit tests for core/extract/lists.py"""

from mdlogseq.core.extract.lists import process_list_items
from mdlogseq.core.models import ParseConfig


def test_items_in_document_order(tree_of):
    """Each item precedes its descendants, which precede its next sibling."""
    md = "- a\n  - a1\n  - a2\n- b\n  - b1"
    blocks = process_list_items(tree_of(md)[0])
    assert [(b.content, b.level) for b in blocks] == [
        ("a", 0), ("a1", 1), ("a2", 1), ("b", 0), ("b1", 1),
    ]


def test_parent_level_offsets_items(tree_of):
    """parent_level sets the level of the outermost items."""
    blocks = process_list_items(tree_of("- a\n  - b")[0], parent_level=2)
    assert [b.level for b in blocks] == [2, 3]


def test_cap_applies_to_parent_level(tree_of):
    """A parent level past the cap is clamped too."""
    blocks = process_list_items(tree_of("- a")[0], parent_level=7, config=ParseConfig(max_nesting_level=3))
    assert blocks[0].level == 3


def test_nested_checkbox_items(tree_of):
    """Task metadata is found on nested items too."""
    blocks = process_list_items(tree_of("- parent\n  - [x] done child")[0])
    assert blocks[1].content == "done child"
    assert blocks[1].metadata.task_list is True
    assert blocks[1].metadata.checked is True
    assert blocks[0].metadata is None


def test_empty_items_skipped(tree_of):
    """Items with no text produce no block."""
    blocks = process_list_items(tree_of("- a\n-\n- b")[0])
    assert [b.content for b in blocks] == ["a", "b"]


def test_item_inline_markup_kept(tree_of):
    """Item text keeps its inline markdown."""
    blocks = process_list_items(tree_of("- **bold** [[Page]]")[0])
    assert blocks[0].content == "**bold** [[Page]]"
    assert blocks[0].metadata.logseq_syntax.page_links == ["Page"]


def test_syntax_skipped_when_not_preserved(tree_of):
    """No syntax metadata when preservation is off."""
    blocks = process_list_items(tree_of("- #tag")[0], config=ParseConfig(preserve_logseq_syntax=False))
    assert blocks[0].metadata is None
