"""
Unit tests for SequenceRunnerClient class.

This module tests the runner client with mocked HTTP calls.
"""

import pytest
from unittest.mock import Mock, patch
import requests
from src.services.sequence_runner_client import SequenceRunnerClient, SequenceRunnerAPIError


class TestSequenceRunnerClient:
    """Test cases for SequenceRunnerClient class."""

    @pytest.fixture
    def mock_env(self):
        """Mock environment variables."""
        with patch.dict('os.environ', {
            'SEQUENCE_RUNNER_API_KEY': 'test-runner-key',
            'SEQUENCE_RUNNER_API_URL': 'https://runner.example.com/'
        }):
            yield

    @pytest.fixture
    def client(self, mock_env):
        """Create a SequenceRunnerClient instance for testing."""
        return SequenceRunnerClient()

    @pytest.fixture
    def mock_response(self):
        """Create a mock response object."""
        response = Mock()
        response.content = b'{"status": "success"}'
        response.json.return_value = {'status': 'success'}
        response.raise_for_status.return_value = None
        return response

    @pytest.fixture
    def payload(self):
        return {
            'name': 'Welcome flow',
            'sequence_type': 'LINKEDIN',
            'sequence': [{'id': 1, 'type': 'LIKE', 'name': 'Like post', 'data': {}}],
            'diagram': {'nodes': [], 'edges': []}
        }

    def test_init_from_env(self, client):
        assert client.api_key == 'test-runner-key'
        assert client.base_url == 'https://runner.example.com'
        assert client.timeout == 30
        assert client.is_configured

    def test_init_with_arguments(self, mock_env):
        client = SequenceRunnerClient('custom-key', 'https://other.example.com')
        assert client.api_key == 'custom-key'
        assert client.base_url == 'https://other.example.com'

    def test_not_configured(self):
        with patch.dict('os.environ', {}, clear=True):
            client = SequenceRunnerClient()
            assert client.api_key is None
            assert not client.is_configured

    def test_request_without_url(self):
        with patch.dict('os.environ', {}, clear=True):
            client = SequenceRunnerClient(api_key='key')
            with pytest.raises(SequenceRunnerAPIError, match='No sequence runner URL'):
                client.create_template({})

    def test_request_without_key(self):
        with patch.dict('os.environ', {}, clear=True):
            client = SequenceRunnerClient(base_url='https://runner.example.com')
            with pytest.raises(SequenceRunnerAPIError, match='API key'):
                client.create_template({})

    @patch('requests.request')
    def test_create_template(self, mock_request, client, mock_response, payload):
        mock_request.return_value = mock_response

        result = client.create_template(payload)

        assert result == {'status': 'success'}
        mock_request.assert_called_once()
        args, kwargs = mock_request.call_args
        assert args == ('POST', 'https://runner.example.com/api/templates')
        assert kwargs['headers']['X-API-KEY'] == 'test-runner-key'
        assert kwargs['headers']['Content-Type'] == 'application/json'
        assert kwargs['json'] == payload
        assert kwargs['timeout'] == 30

    @patch('requests.request')
    def test_update_template(self, mock_request, client, mock_response, payload):
        mock_request.return_value = mock_response

        client.update_template('tpl-1', payload)

        args, _ = mock_request.call_args
        assert args == ('PUT', 'https://runner.example.com/api/templates/tpl-1')

    @patch('requests.request')
    def test_set_campaign_sequence(self, mock_request, client, mock_response, payload):
        mock_request.return_value = mock_response

        client.set_campaign_sequence('camp-1', payload)

        args, kwargs = mock_request.call_args
        assert args == ('PUT', 'https://runner.example.com/api/campaigns/sequence')
        assert kwargs['json'] == {
            'campaignId': 'camp-1',
            'payload': {
                'sequence_type': 'LINKEDIN',
                'sequence': payload['sequence'],
                'diagram': payload['diagram']
            }
        }

    @patch('requests.request')
    def test_empty_response_body(self, mock_request, client, mock_response, payload):
        mock_response.content = b''
        mock_request.return_value = mock_response

        assert client.create_template(payload) == {}

    @patch('requests.request')
    def test_http_error(self, mock_request, client, payload):
        error_response = Mock()
        error_response.status_code = 422
        error_response.text = 'Invalid sequence'
        response = Mock()
        response.raise_for_status.side_effect = requests.exceptions.HTTPError(response=error_response)
        mock_request.return_value = response

        with pytest.raises(SequenceRunnerAPIError) as exc_info:
            client.set_campaign_sequence('camp-1', payload)

        assert exc_info.value.status_code == 422
        assert exc_info.value.response_data == 'Invalid sequence'

    @patch('requests.request')
    def test_connection_error(self, mock_request, client, payload):
        mock_request.side_effect = requests.exceptions.ConnectionError('refused')

        with pytest.raises(SequenceRunnerAPIError) as exc_info:
            client.create_template(payload)

        assert exc_info.value.status_code is None
