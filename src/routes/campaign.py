import logging
from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required

from src.models import db, Campaign, SequenceTemplate
from src.routes.sequence.payloads import graph_from_request
from src.services.sequence_graph import (
    DiagramError,
    graph_from_template,
    graph_to_diagram,
    prepare_submission,
)
from src.services.sequence_runner_client import SequenceRunnerClient, SequenceRunnerAPIError
from src.utils.error_handling import (
    handle_diagram_error,
    handle_external_api_error,
    handle_invalid_sequence,
    handle_not_found_error,
    handle_validation_error,
)

logger = logging.getLogger(__name__)

campaign_bp = Blueprint('campaign', __name__)


@campaign_bp.route('/campaigns', methods=['POST'])
@jwt_required()
def create_campaign():
    """Create a new campaign."""
    try:
        data = request.get_json(silent=True) or {}

        if not data.get('name'):
            return handle_validation_error("Campaign name is required")

        campaign = Campaign(
            name=data['name'],
            status=data.get('status', 'draft'),
            sequence_type=data.get('sequence_type', 'LINKEDIN')
        )

        db.session.add(campaign)
        db.session.commit()

        return jsonify({
            'message': 'Campaign created successfully',
            'campaign': campaign.to_dict()
        }), 201

    except Exception as e:
        db.session.rollback()
        logger.error(f"Error creating campaign: {str(e)}")
        return jsonify({'error': str(e)}), 500


@campaign_bp.route('/campaigns/<campaign_id>', methods=['GET'])
@jwt_required()
def get_campaign(campaign_id):
    """Get a specific campaign."""
    campaign = db.session.get(Campaign, campaign_id)
    if not campaign:
        return handle_not_found_error("Campaign", campaign_id)

    return jsonify({'campaign': campaign.to_dict()}), 200


@campaign_bp.route('/campaigns/<campaign_id>/sequence', methods=['GET'])
@jwt_required()
def get_campaign_sequence(campaign_id):
    """Get a campaign's sequence together with an editable diagram."""
    try:
        campaign = db.session.get(Campaign, campaign_id)
        if not campaign:
            return handle_not_found_error("Campaign", campaign_id)

        graph = graph_from_template({
            'diagram': campaign.diagram_json,
            'sequence': campaign.sequence_json
        })

        return jsonify({
            'campaign_id': campaign_id,
            'sequence': campaign.sequence,
            'diagram': graph_to_diagram(graph),
            'has_sequence': campaign.has_sequence
        }), 200

    except DiagramError as e:
        return handle_diagram_error(e)
    except Exception as e:
        logger.error(f"Error getting campaign sequence: {str(e)}")
        return jsonify({'error': str(e)}), 500


def _apply_sequence(campaign, graph, template_id=None):
    """
    Validate a graph, store it on the campaign and forward it to the runner.

    Nothing is committed unless the runner (when configured) accepted the
    sequence.
    """
    validation, payload = prepare_submission(graph, campaign.name, campaign.sequence_type)
    if not validation.is_valid:
        return handle_invalid_sequence(validation)

    campaign.sequence_json = payload['sequence']
    campaign.diagram_json = payload['diagram']
    if template_id:
        campaign.template_id = template_id

    runner = SequenceRunnerClient()
    if runner.is_configured:
        try:
            runner.set_campaign_sequence(campaign.id, payload)
        except SequenceRunnerAPIError as e:
            db.session.rollback()
            return handle_external_api_error(e, "sequence runner")

    db.session.commit()
    logger.info(f"Campaign {campaign.id} sequence set ({len(payload['sequence'])} steps)")

    return jsonify({
        'message': 'Campaign sequence updated successfully',
        'campaign': campaign.to_dict(),
        'forwarded_to_runner': runner.is_configured
    }), 200


@campaign_bp.route('/campaigns/<campaign_id>/sequence', methods=['PUT'])
@jwt_required()
def update_campaign_sequence(campaign_id):
    """Set a campaign's sequence from a diagram or flat sequence."""
    try:
        campaign = db.session.get(Campaign, campaign_id)
        if not campaign:
            return handle_not_found_error("Campaign", campaign_id)

        data = request.get_json(silent=True) or {}
        graph = graph_from_request(data)
        return _apply_sequence(campaign, graph)

    except DiagramError as e:
        return handle_diagram_error(e)
    except Exception as e:
        db.session.rollback()
        logger.error(f"Error updating campaign sequence: {str(e)}")
        return jsonify({'error': str(e)}), 500


@campaign_bp.route('/campaigns/<campaign_id>/sequence/from-template/<template_id>', methods=['POST'])
@jwt_required()
def apply_template_to_campaign(campaign_id, template_id):
    """Copy a template's sequence onto a campaign."""
    try:
        campaign = db.session.get(Campaign, campaign_id)
        if not campaign:
            return handle_not_found_error("Campaign", campaign_id)

        template = db.session.get(SequenceTemplate, template_id)
        if not template:
            return handle_not_found_error("Template", template_id)

        graph = graph_from_template(template.to_dict())
        return _apply_sequence(campaign, graph, template_id=template.id)

    except DiagramError as e:
        return handle_diagram_error(e)
    except Exception as e:
        db.session.rollback()
        logger.error(f"Error applying template to campaign: {str(e)}")
        return jsonify({'error': str(e)}), 500
