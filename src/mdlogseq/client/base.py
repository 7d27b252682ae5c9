from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any


class BlockClient(ABC):
    """The host's single-block insertion primitive."""

    @abstractmethod
    def insert_block(self, anchor: str, content: str, opts: dict[str, bool]) -> Any:
        """Create one block next to or under anchor.

        opts carries sibling (bool) and optionally before (bool). Returns the
        host's created-block reference in whatever shape it uses.
        """
        raise NotImplementedError
