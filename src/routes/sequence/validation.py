"""
Sequence validation and serialization.

This module contains functionality for:
- Sequence validation
- Linearization into runner steps
- Closing DELAY nodes with END leaves
"""

import logging
from flask import request, jsonify

from src.services.sequence_graph import (
    DiagramError,
    ensure_terminals,
    graph_to_diagram,
    linearize,
    validate,
)
from src.utils.error_handling import handle_diagram_error
from .payloads import graph_from_request

logger = logging.getLogger(__name__)

# Import the blueprint from the package
from . import sequence_bp


@sequence_bp.route('/sequence/validate', methods=['POST'])
def validate_sequence():
    """Validate a diagram before it is saved or submitted."""
    try:
        data = request.get_json(silent=True) or {}
        graph = graph_from_request(data)

        result = validate(graph)
        return jsonify(result.to_dict()), 200

    except DiagramError as e:
        return handle_diagram_error(e)
    except Exception as e:
        logger.error(f"Error validating sequence: {str(e)}")
        return jsonify({'error': str(e)}), 500


@sequence_bp.route('/sequence/linearize', methods=['POST'])
def linearize_sequence():
    """Flatten a diagram into the runner's step list."""
    try:
        data = request.get_json(silent=True) or {}
        graph = graph_from_request(data)

        steps = [step.to_dict() for step in linearize(graph)]
        return jsonify({
            'sequence': steps,
            'total_steps': len(steps)
        }), 200

    except DiagramError as e:
        return handle_diagram_error(e)
    except Exception as e:
        logger.error(f"Error linearizing sequence: {str(e)}")
        return jsonify({'error': str(e)}), 500


@sequence_bp.route('/sequence/ensure-terminals', methods=['POST'])
def close_delay_nodes():
    """Give every childless DELAY node an END leaf."""
    try:
        data = request.get_json(silent=True) or {}
        graph = graph_from_request(data)

        return jsonify({'diagram': graph_to_diagram(ensure_terminals(graph))}), 200

    except DiagramError as e:
        return handle_diagram_error(e)
    except Exception as e:
        logger.error(f"Error adding END nodes: {str(e)}")
        return jsonify({'error': str(e)}), 500
