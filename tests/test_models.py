"""
Unit tests for Database Models.

This module tests the template and campaign models, their serialization
and the relationship between them.
"""

import pytest
from src.models import Campaign, SequenceTemplate
from src.services.sequence_graph import prepare_submission


class TestSequenceTemplate:
    """Test SequenceTemplate model."""

    def test_apply_payload(self, message_graph):
        _, payload = prepare_submission(message_graph, 'Welcome flow', 'LINKEDIN')
        template = SequenceTemplate()
        template.apply_payload(payload)

        assert template.name == 'Welcome flow'
        assert template.sequence_type == 'LINKEDIN'
        assert template.step_count == 5
        assert template.diagram_json == payload['diagram']

    def test_template_to_dict(self, sample_template):
        data = sample_template.to_dict()

        assert data['name'] == 'Connect and follow up'
        assert data['created_by'] == 'test-user'
        assert data['step_count'] == 5
        assert data['sequence'][0]['type'] == 'INVITE'
        assert 'nodes' in data['diagram']
        assert data['created_at'] is not None
        assert 'id' in data

    def test_template_repr(self):
        template = SequenceTemplate(name='Welcome flow')
        assert 'Welcome flow' in str(template)

    def test_step_count_without_sequence(self):
        assert SequenceTemplate(name='Empty').step_count == 0


class TestCampaign:
    """Test Campaign model."""

    def test_campaign_creation(self, sample_campaign):
        assert sample_campaign.id is not None
        assert sample_campaign.status == 'draft'
        assert sample_campaign.sequence_type == 'LINKEDIN'
        assert not sample_campaign.has_sequence
        assert sample_campaign.sequence == []

    def test_campaign_to_dict(self, sample_campaign):
        data = sample_campaign.to_dict()

        assert data['name'] == 'Test Campaign'
        assert data['status'] == 'draft'
        assert data['sequence'] == []
        assert data['diagram'] is None
        assert data['has_sequence'] is False
        assert data['template_id'] is None

    def test_campaign_template_relationship(self, db_session, sample_campaign, sample_template):
        sample_campaign.template_id = sample_template.id
        sample_campaign.sequence_json = sample_template.sequence_json
        db_session.commit()

        assert sample_campaign.template is sample_template
        assert sample_campaign in sample_template.campaigns
        assert sample_campaign.has_sequence

    def test_campaign_repr(self):
        campaign = Campaign(name='Test Campaign')
        assert 'Test Campaign' in str(campaign)
