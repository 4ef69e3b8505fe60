import logging
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity

from src.models import db, SequenceTemplate
from src.routes.sequence.payloads import graph_from_request
from src.services.sequence_graph import DiagramError, prepare_submission
from src.services.sequence_runner_client import SequenceRunnerClient, SequenceRunnerAPIError
from src.utils.error_handling import (
    handle_diagram_error,
    handle_external_api_error,
    handle_invalid_sequence,
    handle_not_found_error,
    handle_validation_error,
)

logger = logging.getLogger(__name__)

template_bp = Blueprint('template', __name__)


def _save_template(template, payload, created):
    """
    Store a submission payload on the template and forward it to the runner.

    Nothing is committed unless the runner (when configured) accepted the
    payload.
    """
    template.apply_payload(payload)
    if created:
        db.session.add(template)

    runner = SequenceRunnerClient()
    if runner.is_configured:
        try:
            if created:
                runner.create_template(payload)
            else:
                runner.update_template(template.id, payload)
        except SequenceRunnerAPIError as e:
            db.session.rollback()
            return handle_external_api_error(e, "sequence runner")

    db.session.commit()
    logger.info(f"Saved template {template.id} with {template.step_count} steps")

    return jsonify({
        'message': 'Template created successfully' if created else 'Template updated successfully',
        'template': template.to_dict(),
        'forwarded_to_runner': runner.is_configured
    }), 201 if created else 200


@template_bp.route('/templates', methods=['POST'])
@jwt_required()
def create_template():
    """Validate a diagram and save it as a reusable sequence template."""
    try:
        data = request.get_json(silent=True) or {}

        name = (data.get('name') or '').strip()
        if not name:
            return handle_validation_error("Template name is required")

        graph = graph_from_request(data)
        sequence_type = data.get('sequence_type') or current_app.config['DEFAULT_SEQUENCE_TYPE']
        validation, payload = prepare_submission(graph, name, sequence_type)
        if not validation.is_valid:
            return handle_invalid_sequence(validation)

        template = SequenceTemplate(created_by=get_jwt_identity())
        return _save_template(template, payload, created=True)

    except DiagramError as e:
        return handle_diagram_error(e)
    except Exception as e:
        db.session.rollback()
        logger.error(f"Error creating template: {str(e)}")
        return jsonify({'error': str(e)}), 500


@template_bp.route('/templates', methods=['GET'])
@jwt_required()
def get_templates():
    """Get all sequence templates."""
    try:
        templates = SequenceTemplate.query.order_by(SequenceTemplate.created_at.desc()).all()
        return jsonify({
            'templates': [template.to_dict() for template in templates],
            'total': len(templates)
        }), 200

    except Exception as e:
        logger.error(f"Error listing templates: {str(e)}")
        return jsonify({'error': str(e)}), 500


@template_bp.route('/templates/<template_id>', methods=['GET'])
@jwt_required()
def get_template(template_id):
    """Get a specific sequence template."""
    try:
        template = db.session.get(SequenceTemplate, template_id)
        if not template:
            return handle_not_found_error("Template", template_id)

        return jsonify({'template': template.to_dict()}), 200

    except Exception as e:
        logger.error(f"Error getting template: {str(e)}")
        return jsonify({'error': str(e)}), 500


@template_bp.route('/templates/<template_id>', methods=['PUT'])
@jwt_required()
def update_template(template_id):
    """Replace a template's diagram (and optionally its name)."""
    try:
        template = db.session.get(SequenceTemplate, template_id)
        if not template:
            return handle_not_found_error("Template", template_id)

        data = request.get_json(silent=True) or {}
        name = data.get('name')
        name = template.name if name is None else str(name).strip()
        if not name:
            return handle_validation_error("Template name is required")
        sequence_type = data.get('sequence_type') or template.sequence_type

        graph = graph_from_request(data)
        validation, payload = prepare_submission(graph, name, sequence_type)
        if not validation.is_valid:
            return handle_invalid_sequence(validation)

        return _save_template(template, payload, created=False)

    except DiagramError as e:
        return handle_diagram_error(e)
    except Exception as e:
        db.session.rollback()
        logger.error(f"Error updating template: {str(e)}")
        return jsonify({'error': str(e)}), 500


@template_bp.route('/templates/<template_id>', methods=['DELETE'])
@jwt_required()
def delete_template(template_id):
    """Delete a sequence template."""
    try:
        template = db.session.get(SequenceTemplate, template_id)
        if not template:
            return handle_not_found_error("Template", template_id)

        # Campaigns keep their copied sequence; only the back-reference goes
        for campaign in template.campaigns:
            campaign.template_id = None

        db.session.delete(template)
        db.session.commit()

        return jsonify({'message': 'Template deleted successfully'}), 200

    except Exception as e:
        db.session.rollback()
        logger.error(f"Error deleting template: {str(e)}")
        return jsonify({'error': str(e)}), 500
