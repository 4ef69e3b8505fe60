"""
Sequence editing operations.

This module contains functionality for:
- Attaching an action to a node
- Detaching a node's action and subtree
- Configuring a node's payload
- Marking a leaf as END and reverting it
"""

import logging
from flask import request, jsonify

from src.services.sequence_graph import (
    DiagramError,
    attach_action,
    check_action,
    configure_node,
    detach_subtree,
    get_action,
    graph_to_diagram,
    mark_leaf_as_end,
    revert_end_to_leaf,
)
from src.services.sequence_graph.diagram import edge_to_dict
from src.utils.error_handling import (
    create_error_response,
    handle_diagram_error,
    handle_not_found_error,
    handle_validation_error,
)
from .payloads import flag, graph_from_request, node_id_from_request

logger = logging.getLogger(__name__)

# Import the blueprint from the package
from . import sequence_bp


@sequence_bp.route('/sequence/attach', methods=['POST'])
def attach():
    """Attach an action to a node and return the regrown diagram."""
    try:
        data = request.get_json(silent=True) or {}
        graph = graph_from_request(data)
        node_id = node_id_from_request(data)

        action = get_action(data.get('command'))
        if action is None:
            return handle_validation_error(f"Unknown action: {data.get('command')}")

        if node_id not in graph:
            return handle_not_found_error("Node", str(node_id))

        legality = check_action(
            action.command,
            node_id,
            graph,
            already_connected=flag(data, 'already_connected')
        )
        if not legality.allowed and not flag(data, 'force'):
            return create_error_response(
                'ACTION_NOT_ALLOWED',
                legality.reason,
                {'node_id': str(node_id), 'command': action.command.value}
            )

        new_edges = []
        next_graph = attach_action(graph, node_id, action, on_connect=new_edges.append)

        return jsonify({
            'diagram': graph_to_diagram(next_graph),
            'new_edges': [edge_to_dict(edge) for edge in new_edges],
            'legality': legality.to_dict()
        }), 200

    except DiagramError as e:
        return handle_diagram_error(e)
    except Exception as e:
        logger.error(f"Error attaching action: {str(e)}")
        return jsonify({'error': str(e)}), 500


@sequence_bp.route('/sequence/detach', methods=['POST'])
def detach():
    """Remove a node's action and everything below it."""
    try:
        data = request.get_json(silent=True) or {}
        graph = graph_from_request(data)
        node_id = node_id_from_request(data)

        next_graph = detach_subtree(graph, node_id)
        return jsonify({'diagram': graph_to_diagram(next_graph)}), 200

    except DiagramError as e:
        return handle_diagram_error(e)
    except Exception as e:
        logger.error(f"Error detaching subtree: {str(e)}")
        return jsonify({'error': str(e)}), 500


@sequence_bp.route('/sequence/configure', methods=['POST'])
def configure():
    """Set the message, subject or delay settings of a node."""
    try:
        data = request.get_json(silent=True) or {}
        graph = graph_from_request(data)
        node_id = node_id_from_request(data)

        value = data.get('value')
        if not isinstance(value, dict):
            return handle_validation_error("value must be an object")
        if node_id not in graph:
            return handle_not_found_error("Node", str(node_id))

        next_graph = configure_node(graph, node_id, value)
        return jsonify({'diagram': graph_to_diagram(next_graph)}), 200

    except DiagramError as e:
        return handle_diagram_error(e)
    except Exception as e:
        logger.error(f"Error configuring node: {str(e)}")
        return jsonify({'error': str(e)}), 500


@sequence_bp.route('/sequence/end', methods=['POST'])
def toggle_end():
    """Mark a placeholder leaf as the end of its path, or undo that."""
    try:
        data = request.get_json(silent=True) or {}
        graph = graph_from_request(data)
        node_id = node_id_from_request(data)

        if flag(data, 'end', default=True):
            next_graph = mark_leaf_as_end(graph, node_id)
        else:
            next_graph = revert_end_to_leaf(graph, node_id)
        return jsonify({'diagram': graph_to_diagram(next_graph)}), 200

    except DiagramError as e:
        return handle_diagram_error(e)
    except Exception as e:
        logger.error(f"Error toggling END node: {str(e)}")
        return jsonify({'error': str(e)}), 500
