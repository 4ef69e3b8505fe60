"""
Pytest configuration and fixtures for Sequence Builder API tests.

This module provides:
- Test database setup and teardown
- Flask test client and JWT headers
- Sample sequence graphs
- Common test data
"""

import pytest
from flask_jwt_extended import create_access_token

from src.main import create_app
from src.extensions import db
from src.models import Campaign, SequenceTemplate
from src.services.sequence_graph import (
    SequenceGraph,
    attach_action,
    configure_node,
    get_action,
    graph_to_diagram,
    prepare_submission,
)

# Test configuration
TEST_CONFIG = {
    'TESTING': True,
    'SECRET_KEY': 'test-secret-key',
    'JWT_SECRET_KEY': 'test-jwt-secret-with-enough-length-for-hs256',
    'API_ACCESS_KEY': 'test-access-key',
    'SEQUENCE_RUNNER_API_URL': None,
    'SEQUENCE_RUNNER_API_KEY': None,
    'CORS_ORIGINS': ['http://localhost:3000'],
    'LOG_LEVEL': 'DEBUG'
}


@pytest.fixture
def app(monkeypatch):
    """Create and configure a new app instance for each test."""
    monkeypatch.delenv('SEQUENCE_RUNNER_API_URL', raising=False)
    monkeypatch.delenv('SEQUENCE_RUNNER_API_KEY', raising=False)

    app = create_app('testing')
    app.config.update(TEST_CONFIG)

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    """A test client for the app."""
    return app.test_client()


@pytest.fixture
def db_session(app):
    """Database session for tests."""
    with app.app_context():
        yield db.session


@pytest.fixture
def auth_headers(app):
    """Headers carrying a valid JWT."""
    with app.app_context():
        token = create_access_token(identity='test-user')
    return {
        'Content-Type': 'application/json',
        'Authorization': f'Bearer {token}'
    }


@pytest.fixture
def json_headers():
    """Headers for JSON requests."""
    return {
        'Content-Type': 'application/json'
    }


@pytest.fixture
def invite_graph():
    """Root -> INVITE with both verdict branches grown (timers 2 and 3, leaves 4 and 6)."""
    return attach_action(SequenceGraph.initial(), 0, get_action('INVITE'))


@pytest.fixture
def message_graph(invite_graph):
    """INVITE followed by a filled-in MESSAGE on the Connected branch."""
    graph = attach_action(invite_graph, 6, get_action('MESSAGE'))
    return configure_node(graph, 6, {
        'message': 'Thanks for connecting, {{first_name}}!',
        'alternativeMessage': 'Thanks for connecting!'
    })


@pytest.fixture
def valid_diagram(message_graph):
    """Canvas JSON of a sequence that passes validation."""
    return graph_to_diagram(message_graph)


@pytest.fixture
def sample_template(db_session, message_graph):
    """Create a sample template for testing."""
    _, payload = prepare_submission(message_graph, 'Connect and follow up')
    template = SequenceTemplate(created_by='test-user')
    template.apply_payload(payload)
    db_session.add(template)
    db_session.commit()
    return template


@pytest.fixture
def sample_campaign(db_session):
    """Create a sample campaign for testing."""
    campaign = Campaign(
        name="Test Campaign",
        status="draft"
    )
    db_session.add(campaign)
    db_session.commit()
    return campaign
