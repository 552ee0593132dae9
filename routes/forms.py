# routes/forms.py
"""
Form creation and update endpoints.

Both endpoints take a JSON body and answer with JSON:
- 400 for requests rejected before contacting JotForm
- JotForm's own status (with its raw body) when JotForm rejects a call
- 500 for anything unexpected, including a malformed body
"""

import logging

from flask import Blueprint, current_app, jsonify, request

from services.forms import (
    FormDispatcher,
    JotFormClient,
    ProviderAPIError,
    ValidationError
)

logger = logging.getLogger(__name__)

forms_bp = Blueprint('forms', __name__)


def _build_dispatcher() -> FormDispatcher:
    """Build a dispatcher from the app configuration."""
    config = current_app.config

    def client_factory(api_key):
        return JotFormClient(
            api_key,
            api_url=config['JOTFORM_API_URL'],
            timeout=config['JOTFORM_TIMEOUT']
        )

    return FormDispatcher(
        client_factory=client_factory,
        configured_api_key=config.get('JOTFORM_API_KEY'),
        abort_on_failure=config.get('QUESTION_UPDATES_ABORT_ON_FAILURE', False)
    )


def _provider_error_response(error: ProviderAPIError):
    """Pass JotForm's status and raw body through; no response at all is a 500."""
    if error.status_code is None:
        return jsonify({'error': 'Internal server error', 'message': str(error)}), 500
    return jsonify({'error': str(error), 'details': error.response_body}), error.status_code


# =============================================================================
# CREATE
# =============================================================================

@forms_bp.route('/create-form', methods=['POST'])
def create_form():
    """Compile a form configuration document and create the form on JotForm."""
    try:
        body = request.get_json(force=True)
        result = _build_dispatcher().create_from_body(body)

        return jsonify({
            'success': True,
            'formId': result.form_id,
            'formUrl': result.form_url,
            'data': result.data
        })

    except ValidationError as e:
        return jsonify({'error': str(e)}), 400
    except ProviderAPIError as e:
        return _provider_error_response(e)
    except Exception as e:
        logger.exception("Unexpected error creating form")
        return jsonify({'error': 'Internal server error', 'message': str(e)}), 500


# =============================================================================
# UPDATE
# =============================================================================

@forms_bp.route('/update-form', methods=['POST'])
def update_form():
    """
    Update an existing form.

    updateType selects the operation:
    - properties: replace the given property values
    - questions: delete/update listed questions, then bulk-add newQuestions
    - conditions: replace the form's visibility conditions
    """
    try:
        body = request.get_json(force=True)
        result = _build_dispatcher().update_from_body(body)

        return jsonify({
            'success': True,
            'message': result.message,
            'data': result.data
        })

    except ValidationError as e:
        return jsonify({'error': str(e)}), 400
    except ProviderAPIError as e:
        return _provider_error_response(e)
    except Exception as e:
        logger.exception("Unexpected error updating form")
        return jsonify({'error': 'Internal server error', 'message': str(e)}), 500
