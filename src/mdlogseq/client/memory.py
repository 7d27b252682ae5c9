from dataclasses import dataclass, field
from typing import Optional
from uuid import uuid4

from mdlogseq.client.base import BlockClient
from mdlogseq.core.models import BlockNode


@dataclass
class MemoryBlock:
    uuid: str
    content: str
    page: str
    parent: Optional[str] = None          # None for page-level blocks
    children: list[str] = field(default_factory=list)


@dataclass
class MemoryClient(BlockClient):
    """In-memory outline that mimics the host's insertBlock placement rules."""
    pages:  dict[str, list[str]] = field(default_factory=dict)
    blocks: dict[str, MemoryBlock] = field(default_factory=dict)
    calls:  list[tuple[str, str, dict]] = field(default_factory=list)

    def _siblings(self, block: MemoryBlock) -> list[str]:
        if block.parent is None:
            return self.pages[block.page]
        return self.blocks[block.parent].children

    def insert_block(self, anchor: str, content: str, opts: dict[str, bool]) -> dict[str, str]:
        self.calls.append((anchor, content, dict(opts)))
        uuid = str(uuid4())

        target = self.blocks.get(anchor)
        if target is None:
            # anchor names a page: append at page level
            self.pages.setdefault(anchor, []).append(uuid)
            self.blocks[uuid] = MemoryBlock(uuid=uuid, content=content, page=anchor)
        elif opts.get("sibling"):
            siblings = self._siblings(target)
            index = siblings.index(anchor) + (0 if opts.get("before") else 1)
            siblings.insert(index, uuid)
            self.blocks[uuid] = MemoryBlock(uuid=uuid, content=content, page=target.page, parent=target.parent)
        else:
            target.children.append(uuid)
            self.blocks[uuid] = MemoryBlock(uuid=uuid, content=content, page=target.page, parent=anchor)

        return {"uuid": uuid}

    def add_placeholder(self, page: str, uuid: str) -> None:
        """Stand in for an existing block so position anchors resolve; shown as a block ref."""
        self.pages.setdefault(page, []).append(uuid)
        self.blocks[uuid] = MemoryBlock(uuid=uuid, content=f"(({uuid}))", page=page)

    def outline(self, page: str) -> list[BlockNode]:
        """Return a page's blocks as a BlockNode forest in display order."""
        def node(uuid: str) -> BlockNode:
            block = self.blocks[uuid]
            return BlockNode(text=block.content, children=[node(c) for c in block.children])
        return [node(u) for u in self.pages.get(page, [])]
