"""
Request parsing shared by the sequence routes.
"""

from typing import Any, Dict

from src.services.sequence_graph import DiagramError, SequenceGraph, graph_from_template
from src.services.sequence_graph.diagram import parse_node_id


def graph_from_request(data: Dict[str, Any]) -> SequenceGraph:
    """Load the graph a request operates on; raises DiagramError if absent."""
    if not data or not any(key in data for key in ('diagram', 'nodes', 'sequence')):
        raise DiagramError("A diagram or sequence is required")
    return graph_from_template(data)


def node_id_from_request(data: Dict[str, Any]) -> int:
    if 'node_id' not in data:
        raise DiagramError("node_id is required")
    return parse_node_id(data['node_id'])


def flag(data: Dict[str, Any], name: str, default: bool = False) -> bool:
    value = data.get(name, default)
    if isinstance(value, str):
        return value.lower() == 'true'
    return bool(value)
