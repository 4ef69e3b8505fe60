"""
Tree addressing for the sequence graph.

Node ids double as positions in an implicit binary tree: the children of
node P live at 2P and 2P + 1, so parent/child relationships are recomputed
from the ids alone and no pointer tables are kept.
"""

from typing import Iterator, Optional

from .types import NodeKind, ROOT_ID


def child_id(parent_id: int, parent_kind: NodeKind, branch: int = 0) -> int:
    """
    Compute the id of a parent's child.

    A timer only ever has one child, which always takes the 2P slot. The
    root's single child is moved from slot 0 (the root itself) to slot 1.
    """
    if branch not in (0, 1):
        raise ValueError(f"branch must be 0 or 1, got {branch}")

    offset = 0 if parent_kind == NodeKind.TIMER else branch
    computed = parent_id * 2 + offset
    return 1 if computed == ROOT_ID else computed


def parent_id(node_id: int) -> Optional[int]:
    """Return the parent id, or None for the root."""
    if node_id <= ROOT_ID:
        return None
    return node_id // 2


def ancestor_ids(node_id: int) -> Iterator[int]:
    """Yield the ancestors of a node nearest-first, ending with the root."""
    current = parent_id(node_id)
    while current is not None:
        yield current
        current = parent_id(current)


def is_ancestor(ancestor: int, descendant: int) -> bool:
    """
    True when `descendant` lies in the subtree rooted at `ancestor`.

    A node counts as its own ancestor; callers that need strict descendants
    exclude the equal case themselves.
    """
    while descendant >= ancestor:
        if descendant == ancestor:
            return True
        if descendant == ROOT_ID:
            return False
        descendant //= 2
    return False


def is_strict_descendant(ancestor: int, node_id: int) -> bool:
    return node_id != ancestor and is_ancestor(ancestor, node_id)
