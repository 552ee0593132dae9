"""
Shared fixtures for the form service tests.
"""

import sys
from pathlib import Path
from unittest.mock import patch

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from app import create_app
from config import Config
from services.forms import ProviderAPIError


class TestConfig(Config):
    """Config with no key from the environment, so tests control the credential."""
    __test__ = False
    JOTFORM_API_KEY = None
    JOTFORM_API_URL = 'https://api.jotform.test'
    JOTFORM_TIMEOUT = 5
    QUESTION_UPDATES_ABORT_ON_FAILURE = False


class FakeJotFormClient:
    """
    Records every JotForm call instead of making it.

    failures maps a call name ('delete_question', 'add_questions', ...)
    or a (name, question_id) pair to the status code it should fail with;
    a status of None simulates a network fault (no response).
    """

    def __init__(self, api_key, failures=None, create_response=None):
        self.api_key = api_key
        self.failures = failures or {}
        self.create_response = create_response or {
            'responseCode': 200,
            'content': {'id': '2401', 'url': 'https://form.jotform.com/2401'}
        }
        self.calls = []

    def _record(self, name, *args, question_id=None):
        self.calls.append((name,) + args)
        key = (name, question_id) if (name, question_id) in self.failures else name
        if key in self.failures:
            status = self.failures[key]
            raise ProviderAPIError(
                f"Failed to {name}",
                status_code=status,
                response_body='{"message": "error"}' if status else None
            )
        return {'responseCode': 200, 'content': {}}

    def create_form(self, payload):
        self._record('create_form', payload)
        return self.create_response

    def update_properties(self, form_id, properties):
        return self._record('update_properties', form_id, properties)

    def update_question(self, form_id, question_id, question_data):
        return self._record('update_question', form_id, question_id, question_data,
                            question_id=question_id)

    def delete_question(self, form_id, question_id):
        return self._record('delete_question', form_id, question_id, question_id=question_id)

    def add_questions(self, form_id, questions):
        return self._record('add_questions', form_id, questions)


@pytest.fixture
def fake_clients():
    """Patch the routes' client factory; yields the list of clients created."""
    created = []
    options = {}

    def factory(api_key, **kwargs):
        client = FakeJotFormClient(api_key, **options)
        created.append(client)
        return client

    with patch('routes.forms.JotFormClient', side_effect=factory):
        yield created, options


@pytest.fixture
def app():
    app = create_app(TestConfig)
    app.config['TESTING'] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def full_config():
    """A configuration document exercising every section."""
    return {
        'title': 'Client Intake',
        'apiKey': 'body-key',
        'properties': {'pageColor': '#FFFFFF', 'customFlag': 'on'},
        'eligibilityQuestions': [
            {'text': 'Are you 18 or older?', 'name': 'isAdult', 'required': True},
            {'text': 'Do you live in Texas?', 'name': 'isTexasResident'},
        ],
        'personalInfoFields': {
            'includeName': True,
            'includeAddress': True,
            'includeEmail': True,
            'includePhone': True,
        },
        'legalTextBlocks': [
            {'content': 'Privacy notice', 'name': 'privacyNotice'},
            {'content': 'Terms of service'},
            {'content': 'Arbitration clause'},
        ],
        'signatureFields': [
            {'text': 'Signature', 'name': 'clientSignature', 'required': True},
            {'text': 'Witness', 'name': 'witnessSignature', 'size': '400'},
        ],
        'hiddenFields': [
            {'name': 'source', 'text': 'website'},
            {'name': 'campaign', 'text': 'spring'},
        ],
        'widgets': [
            {'type': 'userAgent', 'name': 'userAgent', 'text': 'User Agent'},
            {'type': 'geoStamp', 'name': 'geoStamp', 'text': 'Location'},
        ],
        'includeCaptcha': True,
        'emailNotification': {'to': 'intake@example.com'},
        'enableConditionals': True,
        'showPersonalInfoOnlyIfEligible': True,
    }
