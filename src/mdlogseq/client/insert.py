"""Replay a BlockNode forest as ordered, anchor-chained single-block inserts"""

import logging
from typing import Any, Optional

from mdlogseq.client.base import BlockClient
from mdlogseq.core.models import BlockNode, InsertPosition


logger = logging.getLogger(__name__)


def parse_created_uuid(created: Any) -> Optional[str]:
    """Extract the new block's uuid from a host insert result.

    Tries, in order: a plain id string, {uuid}, {block: {uuid}}, and a list
    whose first item has a uuid. Returns None for anything else.
    """
    if not created:
        return None
    if isinstance(created, str):
        return created
    if isinstance(created, dict):
        if created.get('uuid'):
            return str(created['uuid'])
        nested = created.get('block')
        if isinstance(nested, dict) and isinstance(nested.get('uuid'), str) and nested['uuid']:
            return nested['uuid']
        return None
    if isinstance(created, list) and isinstance(created[0], dict):
        uuid = created[0].get('uuid')
        if isinstance(uuid, str) and uuid:
            return uuid
    return None


def resolve_anchor(target: str, position: Optional[InsertPosition]) -> tuple[str, dict[str, bool]]:
    """Return (anchor, opts) for the first root: after > before > parent > target."""
    if position is not None:
        if position.after_block_id:
            return position.after_block_id, {"sibling": True}
        if position.before_block_id:
            return position.before_block_id, {"sibling": True, "before": True}
        if position.parent_block_id:
            return position.parent_block_id, {"sibling": False}
    return target, {"sibling": False}


def insert_block_tree(
    client: BlockClient,
    target: str,
    position: Optional[InsertPosition],
    roots: list[BlockNode],
    ) -> list[str]:
    """Insert roots (and their subtrees) depth-first, returning the created root uuids.

    Every root after the first is placed as the sibling after the previously
    created root, so order does not depend on the host's defaults. A root whose
    insert yields no uuid is logged and skipped with its children; later
    siblings keep chaining from the last root that was created. Host errors
    propagate and nothing already created is rolled back.
    """
    anchor, base_opts = resolve_anchor(target, position)
    created_roots: list[str] = []
    last_created: Optional[str] = None

    for block in roots:
        if last_created is None:
            current_anchor, opts = anchor, base_opts
        else:
            current_anchor, opts = last_created, {"sibling": True, "before": False}

        uuid = parse_created_uuid(client.insert_block(current_anchor, block.text, opts))
        if uuid is None:
            logger.warning("No block uuid returned for %r; skipping its subtree", block.text[:60])
            continue

        created_roots.append(uuid)
        last_created = uuid

        if block.children:
            insert_block_tree(client, uuid, InsertPosition(parent_block_id=uuid), block.children)

    return created_roots
