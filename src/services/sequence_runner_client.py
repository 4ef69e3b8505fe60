import os
import logging
import requests
from flask import current_app

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30


class SequenceRunnerAPIError(Exception):
    """Custom exception for sequence runner API errors."""
    def __init__(self, message, status_code=None, response_data=None):
        super().__init__(message)
        self.status_code = status_code
        self.response_data = response_data


class SequenceRunnerClient:
    """Client for pushing validated sequences to the external sequence runner."""

    def __init__(self, api_key=None, base_url=None):
        """Initialize the runner client."""
        self.api_key = api_key or self._get_setting('SEQUENCE_RUNNER_API_KEY')
        self.base_url = (base_url or self._get_setting('SEQUENCE_RUNNER_API_URL') or '').rstrip('/')
        self.timeout = int(self._get_setting('SEQUENCE_RUNNER_TIMEOUT') or DEFAULT_TIMEOUT)

        if not self.api_key:
            logger.warning("No sequence runner API key provided")

    @staticmethod
    def _get_setting(name):
        """Get a setting from the environment or Flask config."""
        value = os.environ.get(name)
        if value:
            return value

        try:
            if current_app:
                return current_app.config.get(name)
        except RuntimeError:
            # No application context
            pass

        return None

    @property
    def is_configured(self):
        return bool(self.base_url)

    def _make_request(self, method, endpoint, **kwargs):
        """Make a request to the sequence runner API."""
        if not self.base_url:
            raise SequenceRunnerAPIError("No sequence runner URL configured")
        if not self.api_key:
            raise SequenceRunnerAPIError("No sequence runner API key available")

        url = f"{self.base_url}{endpoint}"
        headers = {
            'X-API-KEY': self.api_key,
        }
        if 'json' in kwargs and kwargs['json'] is not None:
            headers['Content-Type'] = 'application/json'

        if 'headers' in kwargs and kwargs['headers']:
            kwargs['headers'] = {**headers, **kwargs['headers']}
        else:
            kwargs['headers'] = headers
        kwargs.setdefault('timeout', self.timeout)

        try:
            response = requests.request(method, url, **kwargs)
            response.raise_for_status()
            return response.json() if response.content else {}
        except requests.exceptions.RequestException as e:
            logger.error(f"Sequence runner request failed: {str(e)}")
            if hasattr(e, 'response') and e.response is not None:
                logger.error(f"Response status: {e.response.status_code}")
                logger.error(f"Response body: {e.response.text}")
                raise SequenceRunnerAPIError(
                    f"Sequence runner request failed: {str(e)}",
                    status_code=e.response.status_code,
                    response_data=e.response.text
                )
            raise SequenceRunnerAPIError(f"Sequence runner request failed: {str(e)}")

    def create_template(self, payload):
        """Create a sequence template on the runner."""
        return self._make_request('POST', '/api/templates', json=payload)

    def update_template(self, template_id, payload):
        """Replace a sequence template on the runner."""
        return self._make_request('PUT', f'/api/templates/{template_id}', json=payload)

    def set_campaign_sequence(self, campaign_id, payload):
        """
        Set the sequence a campaign executes.

        The payload is the submission payload without the template name:
        sequence_type, sequence and diagram.
        """
        body = {
            'campaignId': campaign_id,
            'payload': {
                'sequence_type': payload['sequence_type'],
                'sequence': payload['sequence'],
                'diagram': payload['diagram'],
            }
        }
        logger.info(f"Pushing {len(payload['sequence'])} steps for campaign {campaign_id} to runner")
        return self._make_request('PUT', '/api/campaigns/sequence', json=body)
