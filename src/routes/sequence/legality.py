"""
Action catalog and legality checks.
"""

import logging
from flask import request, jsonify

from src.services.sequence_graph import (
    ACTION_CATALOG,
    DiagramError,
    check_action,
    get_validation_state,
)
from src.utils.error_handling import handle_diagram_error, handle_not_found_error
from .payloads import flag, graph_from_request, node_id_from_request

logger = logging.getLogger(__name__)

# Import the blueprint from the package
from . import sequence_bp


@sequence_bp.route('/sequence/actions', methods=['GET'])
def get_actions():
    """List the actions that can be attached to a node."""
    return jsonify({
        'actions': [action.to_dict() for action in ACTION_CATALOG]
    }), 200


@sequence_bp.route('/sequence/legality', methods=['POST'])
def get_legality():
    """Report which actions may be attached at a node."""
    try:
        data = request.get_json(silent=True) or {}
        graph = graph_from_request(data)
        node_id = node_id_from_request(data)
        already_connected = flag(data, 'already_connected')

        if node_id not in graph:
            return handle_not_found_error("Node", str(node_id))

        actions = {
            action.command.value: check_action(action.command, node_id, graph, already_connected).to_dict()
            for action in ACTION_CATALOG
        }

        return jsonify({
            'node_id': str(node_id),
            'validation_state': get_validation_state(node_id, graph, already_connected),
            'actions': actions
        }), 200

    except DiagramError as e:
        return handle_diagram_error(e)
    except Exception as e:
        logger.error(f"Error checking action legality: {str(e)}")
        return jsonify({'error': str(e)}), 500
