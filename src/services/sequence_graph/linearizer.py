"""
Linearization and validation of sequence graphs.

This module contains functionality for:
- Flattening a graph into the runner's step list
- Validating a graph before it is saved or submitted
- Closing childless DELAY nodes with END leaves
- Building the submission payload
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .addressing import child_id
from .diagram import graph_to_diagram
from .types import (
    Command,
    DELAY_UNITS,
    Edge,
    Node,
    NodeKind,
    ROOT_ID,
    SequenceGraph,
)

logger = logging.getLogger(__name__)

DEFAULT_SEQUENCE_TYPE = 'LINKEDIN'
END_LABEL = 'End of the sequence'


@dataclass(frozen=True)
class SequenceStep:
    id: int
    type: Command
    name: str
    data: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'type': self.type.value,
            'name': self.name,
            'data': self.data,
        }


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    error_message: Optional[str] = None
    error_node_ids: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {'is_valid': self.is_valid}
        if not self.is_valid:
            result['error_message'] = self.error_message
            result['error_node_ids'] = list(self.error_node_ids)
        return result


VALID = ValidationResult(is_valid=True)


def linearize(graph: SequenceGraph) -> List[SequenceStep]:
    """
    Flatten the graph into runner steps.

    Steps follow the graph's own node order; parents are not guaranteed to
    precede their children.
    """
    steps = []
    for node in graph:
        if node.is_root or node.is_placeholder:
            continue
        steps.append(SequenceStep(
            id=node.id,
            type=node.command,
            name=node.label or f"Step {node.id}",
            data=node.config.to_payload(),
        ))
    return steps


def _is_blank(value: Optional[str]) -> bool:
    return not (value or '').strip()


def check_required_content(steps: List[SequenceStep]) -> ValidationResult:
    """Every MESSAGE and INEMAIL step needs its texts filled in."""
    for step in steps:
        if step.type == Command.MESSAGE:
            required = (
                ('message_template', "Please enter a message"),
                ('alternative_message', "Please enter an alternative message"),
            )
        elif step.type == Command.INEMAIL:
            required = (
                ('subject_template', "Please enter a subject INEMAIL"),
                ('message_template', "Please enter a message INEMAIL"),
                ('alternative_subject', "Please enter an alternative subject INEMAIL"),
                ('alternative_message', "Please enter an alternative message INEMAIL"),
            )
        else:
            continue

        for key, message in required:
            if _is_blank(step.data.get(key)):
                return ValidationResult(False, message, [str(step.id)])
    return VALID


def validate_structure(graph: SequenceGraph) -> ValidationResult:
    if graph.root is None:
        return ValidationResult(False, "Sequence must start with a root node.", [str(ROOT_ID)])

    has_action = any(
        not node.is_root and node.command not in (Command.NONE, Command.END)
        for node in graph
    )
    if not has_action:
        return ValidationResult(
            False,
            "Sequence must contain at least one action (message, invite, etc.).",
            [str(ROOT_ID)],
        )
    return VALID


def validate_delays(graph: SequenceGraph) -> ValidationResult:
    for node in graph:
        if node.command != Command.DELAY:
            continue
        label = node.label or 'Delay'
        count = getattr(node.config, 'count', None)
        unit = getattr(node.config, 'unit', None)

        if count is None or count < 0:
            return ValidationResult(
                False,
                f'DELAY node "{label}" must have a valid delay value (0 or greater).',
                [str(node.id)],
            )
        if unit not in DELAY_UNITS:
            return ValidationResult(
                False,
                f'DELAY node "{label}" must have a valid time unit (Days or Hours).',
                [str(node.id)],
            )
    return VALID


def validate(graph: SequenceGraph) -> ValidationResult:
    """Run every check in order and return the first failure."""
    steps = linearize(graph)
    if not steps:
        return ValidationResult(
            False,
            "Invalid Sequence! You need to add at least one action to your sequence.",
        )

    for result in (
        check_required_content(steps),
        validate_structure(graph),
        validate_delays(graph),
    ):
        if not result.is_valid:
            return result
    return VALID


def ensure_terminals(graph: SequenceGraph) -> SequenceGraph:
    """Attach an END leaf under every DELAY node that has no child."""
    nodes = dict(graph.nodes)
    edges = list(graph.edges)

    for node in graph:
        if node.command != Command.DELAY:
            continue
        left = node.id * 2
        if left in nodes or left + 1 in nodes:
            continue

        end_node = Node(
            id=child_id(node.id, NodeKind.TIMER),
            kind=NodeKind.LEAF,
            command=Command.END,
            label=END_LABEL,
            position=node.position.shifted(dy=120),
        )
        nodes[end_node.id] = end_node
        edges.append(Edge(source=node.id, target=end_node.id))
        logger.info(f"Closed DELAY node {node.id} with END node {end_node.id}")

    return SequenceGraph(nodes=nodes, edges=tuple(edges))


def build_submission_payload(
    graph: SequenceGraph,
    name: str,
    sequence_type: str = DEFAULT_SEQUENCE_TYPE,
) -> Dict[str, Any]:
    """Assemble the payload sent to persistence and the runner."""
    return {
        'name': name,
        'sequence_type': sequence_type,
        'sequence': [step.to_dict() for step in linearize(graph)],
        'diagram': graph_to_diagram(graph),
    }


def prepare_submission(
    graph: SequenceGraph,
    name: str,
    sequence_type: str = DEFAULT_SEQUENCE_TYPE,
) -> Tuple[ValidationResult, Optional[Dict[str, Any]]]:
    """
    Close DELAY nodes, validate and build the payload.

    The payload is None when validation fails.
    """
    closed = ensure_terminals(graph)
    result = validate(closed)
    if not result.is_valid:
        return result, None
    return result, build_submission_payload(closed, name, sequence_type)
