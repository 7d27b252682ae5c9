"""Shared fixtures for core unit tests"""

import pytest

from mdlogseq.core.models import ParseConfig
from mdlogseq.core.parse import build_tree


SAMPLE_MD = """\
# Heading 1

A paragraph with **bold** text.

## Heading 2

- item one
- item two

```python
print("hello")
```

---

Footer paragraph.
"""

SAMPLE_FM_MD = """\
---
title: Test Doc
tags: [a, b]
---

# Title

Body content.
"""

NESTED_MD = """\
- a
  - b
    - c
      - d
"""


@pytest.fixture(name="config")
def config_fixture():
    return ParseConfig()


@pytest.fixture(name="sample_tree")
def sample_tree_fixture():
    return build_tree(SAMPLE_MD)


@pytest.fixture(name="tree_of")
def tree_of_fixture():
    """Build a syntax tree from a markdown snippet and return its top-level nodes."""
    def _tree_of(text: str):
        return build_tree(text).children
    return _tree_of


@pytest.fixture(name="sample_md")
def sample_md_fixture():
    return SAMPLE_MD


@pytest.fixture(name="sample_fm_md")
def sample_fm_md_fixture():
    return SAMPLE_FM_MD


@pytest.fixture(name="nested_md")
def nested_md_fixture():
    return NESTED_MD


@pytest.fixture(name="broken_tree")
def broken_tree_fixture(monkeypatch):
    """Make syntax-tree construction fail so callers take the line parser."""
    def _raise(*args, **kwargs):
        raise RuntimeError("tree failure")
    monkeypatch.setattr("mdlogseq.core.parse.build_tree", _raise)
