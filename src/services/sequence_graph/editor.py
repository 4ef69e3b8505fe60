"""
Editing operations on a sequence graph.

This module contains functionality for:
- Attaching an action to a node (pruning and re-growing its subtree)
- Detaching a node's action and subtree
- Pruning edges of a removed subtree
- Configuring node payloads and toggling END leaves

Every operation takes a graph and returns a new one; the input is never
modified.
"""

import logging
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from .actions import ActionSpec
from .addressing import is_strict_descendant
from .synthesizer import synthesize
from .types import (
    Command,
    Edge,
    Node,
    NodeKind,
    ROOT_ID,
    SequenceGraph,
    config_type_for,
    default_config,
)

logger = logging.getLogger(__name__)

# Applied after a first-time attach so the lengthened chain stays under the root
UPLIFT_OFFSET = -150

END_LABEL = 'End of the sequence'
PLACEHOLDER_LABEL = 'Set Action'


def prune_edges(target_id: int, edges: Iterable[Edge]) -> Tuple[Edge, ...]:
    """Keep only edges with neither endpoint strictly below `target_id`."""
    return tuple(
        edge for edge in edges
        if not is_strict_descendant(target_id, edge.source)
        and not is_strict_descendant(target_id, edge.target)
    )


def _without_descendants(graph: SequenceGraph, target_id: int) -> Dict[int, Node]:
    return {
        node_id: node for node_id, node in graph.nodes.items()
        if not is_strict_descendant(target_id, node_id)
    }


def attach_action(
    graph: SequenceGraph,
    target_id: int,
    action: ActionSpec,
    on_connect: Optional[Callable[[Edge], None]] = None,
) -> SequenceGraph:
    """
    Give `target_id` the action `action` and grow its branches.

    Any existing subtree below the target is discarded first. Attaching to
    the root creates node 1 and configures that instead. The returned graph
    already contains the new edges; `on_connect` is additionally called with
    each of them.
    """
    target = graph.get(target_id)
    if target is None:
        logger.warning(f"Attach ignored: node {target_id} not in graph")
        return graph
    if target.kind == NodeKind.TIMER:
        logger.warning(f"Attach ignored: node {target_id} is a timer")
        return graph

    nodes = _without_descendants(graph, target_id)
    edges: List[Edge] = list(prune_edges(target_id, graph.edges))
    removed_any = len(nodes) != len(graph.nodes)

    new_edges: List[Edge] = []

    if target.is_root:
        children, child_edges = synthesize(target, 0, action)
        for child in children:
            nodes[child.id] = child
        new_edges.extend(child_edges)
        target = children[0]

    target = target.with_changes(
        kind=NodeKind.DUAL_BRANCH if action.is_dual else NodeKind.SINGLE_BRANCH,
        command=action.command,
        label=action.title,
        icon=action.icon,
        config=default_config(action.command),
    )
    nodes[target.id] = target

    for branch in range(action.branches):
        children, child_edges = synthesize(target, branch, action)
        for child in children:
            nodes[child.id] = child
        new_edges.extend(child_edges)

    if not removed_any:
        nodes = {
            node_id: node.with_changes(position=node.position.shifted(dy=UPLIFT_OFFSET))
            for node_id, node in nodes.items()
        }

    edges.extend(new_edges)
    if on_connect is not None:
        for edge in new_edges:
            on_connect(edge)

    logger.info(
        f"Attached {action.command.value} to node {target.id} "
        f"({len(new_edges)} new edges, replaced subtree: {removed_any})"
    )
    return SequenceGraph(nodes=nodes, edges=tuple(edges))


def detach_subtree(graph: SequenceGraph, target_id: int) -> SequenceGraph:
    """Remove everything below `target_id` and turn it back into a placeholder."""
    if target_id == ROOT_ID or target_id not in graph:
        return graph

    nodes = _without_descendants(graph, target_id)
    nodes[target_id] = nodes[target_id].with_changes(
        kind=NodeKind.LEAF,
        command=Command.NONE,
        label=None,
        icon=None,
        config=default_config(Command.NONE),
    )

    logger.info(f"Detached subtree at node {target_id}")
    return SequenceGraph(nodes=nodes, edges=prune_edges(target_id, graph.edges))


def _replace_node(graph: SequenceGraph, node: Node) -> SequenceGraph:
    nodes = dict(graph.nodes)
    nodes[node.id] = node
    return SequenceGraph(nodes=nodes, edges=graph.edges)


def configure_node(graph: SequenceGraph, node_id: int, value: Dict[str, Any]) -> SequenceGraph:
    """
    Replace a node's payload from a canvas value dict.

    Only keys relevant to the node's command are read; a `label` key also
    renames the node.
    """
    node = graph.get(node_id)
    if node is None or node.is_root or node.is_placeholder:
        return graph

    value = value or {}
    config = config_type_for(node.command).from_value(value)
    label = value.get('label') or node.label
    return _replace_node(graph, node.with_changes(config=config, label=label))


def mark_leaf_as_end(graph: SequenceGraph, node_id: int) -> SequenceGraph:
    """Close a placeholder leaf with an END step."""
    node = graph.get(node_id)
    if node is None or node.kind != NodeKind.LEAF or node.command != Command.NONE:
        return graph
    return _replace_node(graph, node.with_changes(
        command=Command.END,
        label=END_LABEL,
        config=default_config(Command.END),
    ))


def revert_end_to_leaf(graph: SequenceGraph, node_id: int) -> SequenceGraph:
    """Turn an END step back into a placeholder leaf."""
    node = graph.get(node_id)
    if node is None or node.command != Command.END:
        return graph
    return _replace_node(graph, node.with_changes(
        kind=NodeKind.LEAF,
        command=Command.NONE,
        label=PLACEHOLDER_LABEL,
        config=default_config(Command.NONE),
    ))
