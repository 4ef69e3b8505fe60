"""
Sequence graph engine package.

This package contains the sequence builder's graph functionality:
- types.py: Commands, node kinds, config variants, Node/Edge/SequenceGraph
- addressing.py: Id arithmetic and the ancestor check
- actions.py: Catalog of attachable actions
- synthesizer.py: Creation of timer/leaf nodes for a new action
- editor.py: Attach, detach and configure operations
- legality.py: Ancestor-path rules for LinkedIn actions
- linearizer.py: Step list, validation, END terminals, submission payload
- diagram.py: Canvas JSON and flat sequence conversion
"""

from .actions import ACTION_CATALOG, ActionSpec, get_action
from .addressing import ancestor_ids, child_id, is_ancestor, parent_id
from .diagram import graph_from_diagram, graph_from_sequence, graph_from_template, graph_to_diagram
from .editor import (
    attach_action,
    configure_node,
    detach_subtree,
    mark_leaf_as_end,
    prune_edges,
    revert_end_to_leaf,
)
from .legality import LegalityResult, check_action, get_validation_state
from .linearizer import (
    SequenceStep,
    ValidationResult,
    build_submission_payload,
    ensure_terminals,
    linearize,
    prepare_submission,
    validate,
)
from .synthesizer import synthesize
from .types import Command, DiagramError, Edge, Node, NodeKind, SequenceGraph

__all__ = [
    'ACTION_CATALOG', 'ActionSpec', 'get_action',
    'ancestor_ids', 'child_id', 'is_ancestor', 'parent_id',
    'graph_from_diagram', 'graph_from_sequence', 'graph_from_template', 'graph_to_diagram',
    'attach_action', 'configure_node', 'detach_subtree', 'mark_leaf_as_end',
    'prune_edges', 'revert_end_to_leaf',
    'LegalityResult', 'check_action', 'get_validation_state',
    'SequenceStep', 'ValidationResult', 'build_submission_payload',
    'ensure_terminals', 'linearize', 'prepare_submission', 'validate',
    'synthesize',
    'Command', 'DiagramError', 'Edge', 'Node', 'NodeKind', 'SequenceGraph',
]
