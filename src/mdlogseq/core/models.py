"""Data models for parsed blocks, outline trees, and insertion positions"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


DEFAULT_MAX_NESTING = 10


class BlockType(str, Enum):
    """Restrict parsed blocks to the markdown constructs the host understands"""
    heading = "heading"
    list = "list"
    paragraph = "paragraph"
    code = "code"
    table = "table"
    blockquote = "blockquote"
    image = "image"
    thematic_break = "thematic_break"
    math = "math"
    html = "html"


class LogseqSyntax(BaseModel):
    """Logseq annotations found in a block's text; unset fields had no matches."""
    page_links: Optional[list[str]] = None
    block_refs: Optional[list[str]] = None
    tags:       Optional[list[str]] = None
    properties: Optional[dict[str, str]] = None


class BlockMetadata(BaseModel):
    task_list:     Optional[bool] = None
    checked:       Optional[bool] = None
    language:      Optional[str] = None      # code blocks only; "" when the fence has no info string
    url:           Optional[str] = None
    alt:           Optional[str] = None
    table_headers: Optional[list[str]] = None
    logseq_syntax: Optional[LogseqSyntax] = None


class ParsedBlock(BaseModel):
    """A single typed block produced from one markdown node."""
    model_config = ConfigDict(frozen=True)

    content:  str
    type:     BlockType
    level:    int = Field(default=0, ge=0)  # heading depth, list depth, else 0
    metadata: Optional[BlockMetadata] = None

    @field_validator("content")
    @classmethod
    def _non_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("block content must not be blank")
        return v


class BlockNode(BaseModel):
    """Tree form handed to the insertion translator."""
    text: str
    children: list["BlockNode"] = []


class InsertPosition(BaseModel):
    """Where the first root goes: after > before > parent > the target itself."""
    parent_block_id: Optional[str] = None
    after_block_id:  Optional[str] = None
    before_block_id: Optional[str] = None


class ParseConfig(BaseModel):
    allow_html:             bool = True
    sanitize_html:          bool = True
    preserve_logseq_syntax: bool = True
    max_nesting_level:      int = DEFAULT_MAX_NESTING

    @field_validator("max_nesting_level")
    @classmethod
    def _clamp_nesting(cls, v: int) -> int:
        """A cap below 1 would flatten everything to nothing; clamp instead of rejecting."""
        return max(1, v)


@dataclass
class SourceDoc:
    """A markdown file split into frontmatter and body; not persisted."""
    path:        Path
    raw:         str               # full file content (includes frontmatter)
    markdown:    str               # body only (frontmatter stripped)
    frontmatter: dict[str, Any]


@dataclass
class OutlineBlock:
    """Intermediate outline node; not serialized."""
    content:  str
    children: list["OutlineBlock"] = field(default_factory=list)
