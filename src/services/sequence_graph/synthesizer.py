"""
Creation of new nodes and edges when an action is attached.

For every branch of an action the synthesizer grows a short path under the
configured node: a DELAY timer (skipped directly under the root) followed by
a placeholder leaf the user can fill in next.
"""

from typing import List, Tuple

from .actions import ActionSpec
from .addressing import child_id
from .types import Command, DelayConfig, Edge, Node, NodeKind, Position, ROOT_ID

# Canvas geometry, used only to keep branches apart on screen
NODE_WIDTH = 266
TIMER_WIDTH = 150
X_DISTANCE_OF_CHILD = 300
ROW_HEIGHT = 120

NEGATIVE_VERDICT_MARKERS = ('still not', 'not found')


def is_negative_verdict(label: str) -> bool:
    lowered = (label or '').lower()
    return any(marker in lowered for marker in NEGATIVE_VERDICT_MARKERS)


def _child_position(parent: Node, child_kind: NodeKind) -> Position:
    if parent.kind == NodeKind.TIMER:
        dx = (TIMER_WIDTH - NODE_WIDTH) / 2
    elif child_kind == NodeKind.TIMER:
        dx = (NODE_WIDTH - TIMER_WIDTH) / 2
    else:
        dx = 0
    return parent.position.shifted(dx, ROW_HEIGHT)


def _new_child(parent: Node, branch: int, kind: NodeKind) -> Node:
    position = _child_position(parent, kind)
    if parent.kind == NodeKind.DUAL_BRANCH:
        position = position.shifted(X_DISTANCE_OF_CHILD if branch else -X_DISTANCE_OF_CHILD)

    if kind == NodeKind.TIMER:
        return Node(
            id=child_id(parent.id, parent.kind, branch),
            kind=NodeKind.TIMER,
            command=Command.DELAY,
            label='Delay',
            config=DelayConfig(count=0, unit='Days'),
            position=position,
        )
    return Node(
        id=child_id(parent.id, parent.kind, branch),
        kind=NodeKind.LEAF,
        position=position,
    )


def _source_handle(parent: Node, branch: int) -> str:
    if parent.kind == NodeKind.DUAL_BRANCH:
        return 'right' if branch else 'left'
    return 'bottom'


def synthesize(parent: Node, branch: int, action: ActionSpec) -> Tuple[List[Node], List[Edge]]:
    """
    Grow one branch path under `parent`.

    Returns the new nodes and edges in creation order (timer before leaf).
    When `parent` is dual-branch, the edge leaving it carries the branch's
    verdict label.
    """
    new_nodes: List[Node] = []
    new_edges: List[Edge] = []

    kinds = [NodeKind.LEAF] if parent.id == ROOT_ID else [NodeKind.TIMER, NodeKind.LEAF]

    current = parent
    for kind in kinds:
        node = _new_child(current, branch, kind)

        label = ''
        if current is parent and parent.kind == NodeKind.DUAL_BRANCH:
            label = action.verdict(branch)

        new_edges.append(Edge(
            source=current.id,
            target=node.id,
            label=label,
            negative=is_negative_verdict(label),
            source_handle=_source_handle(current, branch),
        ))
        new_nodes.append(node)
        current = node

    return new_nodes, new_edges
