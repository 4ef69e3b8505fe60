"""
Conversion between sequence graphs and their JSON forms.

This module contains functionality for:
- Rendering a graph as canvas diagram JSON ({nodes, edges})
- Parsing canvas diagram JSON back into a graph
- Rebuilding a graph from a flat runner step list
- Picking the right source out of a stored template or campaign payload
"""

import logging
from typing import Any, Dict, List, Optional

from .actions import get_action
from .addressing import child_id, parent_id
from .synthesizer import is_negative_verdict
from .types import (
    Command,
    DiagramError,
    Edge,
    Node,
    NodeKind,
    Position,
    ROOT_ID,
    SequenceGraph,
    config_type_for,
)

logger = logging.getLogger(__name__)

KIND_BY_COMMAND = {
    Command.DELAY: NodeKind.TIMER,
    Command.LIKE: NodeKind.SINGLE_BRANCH,
    Command.FOLLOW: NodeKind.SINGLE_BRANCH,
    Command.ENDORSE: NodeKind.SINGLE_BRANCH,
    Command.WITHDRAW_INVITE: NodeKind.SINGLE_BRANCH,
    Command.MESSAGE: NodeKind.DUAL_BRANCH,
    Command.INVITE: NodeKind.DUAL_BRANCH,
    Command.INEMAIL: NodeKind.DUAL_BRANCH,
    Command.END: NodeKind.LEAF,
    Command.NONE: NodeKind.LEAF,
}

ICON_BY_COMMAND = {
    Command.DELAY: 'lucide:clock',
    Command.LIKE: 'lucide:thumbs-up',
    Command.FOLLOW: 'lucide:user-plus',
    Command.ENDORSE: 'lucide:award',
    Command.WITHDRAW_INVITE: 'lucide:user-minus',
    Command.MESSAGE: 'lucide:message-square',
    Command.INVITE: 'lucide:user-plus',
    Command.INEMAIL: 'lucide:mail',
    Command.END: 'lucide:check-circle',
}

NEGATIVE_LABEL_STYLE = {'fill': '#dc2626', 'fontWeight': 600, 'fontSize': 11}
NEGATIVE_LABEL_BG_STYLE = {'fill': '#fee2e2', 'fillOpacity': 0.95}
POSITIVE_LABEL_STYLE = {'fill': '#16a34a', 'fontWeight': 600, 'fontSize': 11}
POSITIVE_LABEL_BG_STYLE = {'fill': '#dcfce7', 'fillOpacity': 0.95}


def parse_node_id(raw: Any) -> int:
    """Parse a string or integer node id; ids are non-negative integers."""
    if isinstance(raw, bool):
        raise DiagramError(f"Invalid node id: {raw!r}")
    if isinstance(raw, int):
        node_id = raw
    else:
        text = str(raw).strip() if raw is not None else ''
        if not (text.isascii() and text.isdigit()):
            raise DiagramError(f"Invalid node id: {raw!r}")
        node_id = int(text)
    if node_id < 0:
        raise DiagramError(f"Invalid node id: {raw!r}")
    return node_id


# Rendering

def node_to_dict(node: Node) -> Dict[str, Any]:
    value: Optional[Dict[str, Any]] = None
    if node.label or not node.is_placeholder:
        value = {'label': node.label}
        if node.icon:
            value['icon'] = node.icon
        value.update(node.config.to_value())

    return {
        'id': str(node.id),
        'type': node.kind.value,
        'data': {'command': node.command.value, 'value': value},
        'position': node.position.to_dict(),
    }


def edge_to_dict(edge: Edge) -> Dict[str, Any]:
    result: Dict[str, Any] = {
        'id': edge.id,
        'source': str(edge.source),
        'target': str(edge.target),
        'sourceHandle': edge.source_handle,
        'targetHandle': edge.target_handle,
        'type': 'smoothstep',
        'animated': True,
        'label': edge.label,
    }
    if edge.label:
        result.update({
            'labelStyle': NEGATIVE_LABEL_STYLE if edge.negative else POSITIVE_LABEL_STYLE,
            'labelShowBg': True,
            'labelBgPadding': [6, 4],
            'labelBgBorderRadius': 4,
            'labelBgStyle': NEGATIVE_LABEL_BG_STYLE if edge.negative else POSITIVE_LABEL_BG_STYLE,
        })
    return result


def graph_to_diagram(graph: SequenceGraph) -> Dict[str, List[Dict[str, Any]]]:
    return {
        'nodes': [node_to_dict(node) for node in graph],
        'edges': [edge_to_dict(edge) for edge in graph.edges],
    }


# Parsing

def _object_field(data: Dict[str, Any], key: str, node_id: int) -> Dict[str, Any]:
    """Return an optional nested object, treating a missing one as empty."""
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise DiagramError(f"Node {node_id}: {key} must be an object")
    return value


def node_from_dict(data: Dict[str, Any]) -> Node:
    if not isinstance(data, dict):
        raise DiagramError(f"Node must be an object, got {type(data).__name__}")

    node_id = parse_node_id(data.get('id'))
    payload = _object_field(data, 'data', node_id)
    command = Command.parse(payload.get('command') or Command.NONE.value)
    value = _object_field(payload, 'value', node_id)

    if data.get('type'):
        kind = NodeKind.parse(data['type'])
    elif node_id == ROOT_ID:
        kind = NodeKind.ROOT
    else:
        kind = KIND_BY_COMMAND[command]

    position = _object_field(data, 'position', node_id)
    return Node(
        id=node_id,
        kind=kind,
        command=command,
        label=value.get('label'),
        icon=value.get('icon'),
        config=config_type_for(command).from_value(value),
        position=Position(position.get('x', 0), position.get('y', 0)),
    )


def edge_from_dict(data: Dict[str, Any]) -> Edge:
    if not isinstance(data, dict):
        raise DiagramError(f"Edge must be an object, got {type(data).__name__}")

    label = data.get('label') or ''
    if not isinstance(label, str):
        label = str(label)
    return Edge(
        source=parse_node_id(data.get('source')),
        target=parse_node_id(data.get('target')),
        label=label,
        negative=is_negative_verdict(label),
        source_handle=data.get('sourceHandle') or 'bottom',
        target_handle=data.get('targetHandle') or 'top',
    )


def graph_from_diagram(diagram: Dict[str, Any]) -> SequenceGraph:
    """Parse canvas JSON; raises DiagramError for malformed input."""
    if not isinstance(diagram, dict):
        raise DiagramError("Diagram must be an object with nodes and edges")

    raw_nodes = diagram.get('nodes') or []
    raw_edges = diagram.get('edges') or []
    if not isinstance(raw_nodes, list) or not isinstance(raw_edges, list):
        raise DiagramError("Diagram nodes and edges must be lists")

    nodes: Dict[int, Node] = {}
    for raw in raw_nodes:
        node = node_from_dict(raw)
        if node.id in nodes:
            raise DiagramError(f"Duplicate node id: {node.id}")
        nodes[node.id] = node

    edges = tuple(edge_from_dict(raw) for raw in raw_edges)
    return SequenceGraph(nodes=nodes, edges=edges)


def _edge_between(parent: Node, target_id: int) -> Edge:
    if parent.kind != NodeKind.DUAL_BRANCH:
        return Edge(source=parent.id, target=target_id)

    branch = target_id - parent.id * 2
    action = get_action(parent.command)
    label = action.verdict(branch) if action else ''
    return Edge(
        source=parent.id,
        target=target_id,
        label=label,
        negative=is_negative_verdict(label),
        source_handle='right' if branch else 'left',
    )


def graph_from_sequence(sequence: List[Dict[str, Any]]) -> SequenceGraph:
    """
    Rebuild a graph from runner steps.

    Node kinds are inferred from commands and edges from the id arithmetic.
    Timers left without a child get a placeholder leaf so the rebuilt tree
    can be edited further.
    """
    graph = SequenceGraph.initial()
    nodes: Dict[int, Node] = {ROOT_ID: graph.root.with_changes(position=Position(100, 100))}

    for index, step in enumerate(sequence):
        if not isinstance(step, dict):
            raise DiagramError(f"Step at index {index} must be an object")
        node_id = parse_node_id(step.get('id'))
        if node_id == ROOT_ID or node_id in nodes:
            raise DiagramError(f"Step at index {index} has an invalid or duplicate id: {node_id}")
        command = Command.parse(step.get('type'))

        nodes[node_id] = Node(
            id=node_id,
            kind=KIND_BY_COMMAND[command],
            command=command,
            label=step.get('name') or f"Step {node_id}",
            icon=ICON_BY_COMMAND.get(command),
            config=config_type_for(command).from_payload(_object_field(step, 'data', node_id)),
            position=Position(100, 100 + (index + 1) * 120),
        )

    for node in list(nodes.values()):
        if node.kind != NodeKind.TIMER:
            continue
        leaf_id = child_id(node.id, NodeKind.TIMER)
        if leaf_id not in nodes:
            nodes[leaf_id] = Node(id=leaf_id, kind=NodeKind.LEAF, position=node.position.shifted(dy=120))

    edges = []
    for node_id in nodes:
        parent = parent_id(node_id)
        if parent is not None and parent in nodes:
            edges.append(_edge_between(nodes[parent], node_id))

    return SequenceGraph(nodes=nodes, edges=tuple(edges))


def graph_from_template(template: Optional[Dict[str, Any]]) -> SequenceGraph:
    """
    Load a graph from a stored template or campaign payload.

    A diagram wins over a flat sequence; with neither, a bare root is returned.
    """
    if not isinstance(template, dict):
        return SequenceGraph.initial()

    diagram = template.get('diagram')
    if isinstance(diagram, dict) and diagram.get('nodes'):
        return graph_from_diagram(diagram)

    if template.get('nodes'):
        return graph_from_diagram(template)

    sequence = template.get('sequence')
    if isinstance(sequence, list) and sequence:
        logger.info(f"Rebuilding diagram from {len(sequence)} sequence steps")
        return graph_from_sequence(sequence)

    return SequenceGraph.initial()
