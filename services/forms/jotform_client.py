"""
JotForm Client

Thin wrapper around the JotForm REST API for creating and updating forms.
Handles authentication, request building, and error handling.

Endpoints used:
    PUT    /form                          create a form
    POST   /form/{id}/properties          update properties (incl. conditions)
    POST   /form/{id}/question/{qid}      update a question
    DELETE /form/{id}/question/{qid}      delete a question
    PUT    /form/{id}/questions           add questions in bulk
"""

import json
import logging
from typing import Any, Dict, List

import requests

from .exceptions import ProviderAPIError

logger = logging.getLogger(__name__)

DEFAULT_API_URL = 'https://api.jotform.com'
DEFAULT_TIMEOUT = 30


def _form_value(value: Any) -> str:
    """Render a value for a form-encoded JotForm field."""
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if value is None:
        return ''
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    return str(value)


def _bracketed(prefix: str, values: Dict[str, Any]) -> Dict[str, str]:
    """Flatten {key: value} into JotForm's prefix[key]=value form fields."""
    return {f"{prefix}[{key}]": _form_value(value) for key, value in values.items()}


class JotFormClient:
    """
    Client for JotForm API operations.

    One instance per request: the API key is resolved per request
    (request body first, then configuration).
    """

    def __init__(self, api_key: str, api_url: str = DEFAULT_API_URL, timeout: int = DEFAULT_TIMEOUT):
        self.api_key = api_key
        self.api_url = api_url.rstrip('/')
        self.timeout = timeout

    def create_form(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Create a new form.

        Returns:
            JotForm response; content.id and content.url identify the form
        """
        return self._request('PUT', '/form', 'create form', json=payload)

    def update_properties(self, form_id: str, properties: Dict[str, Any]) -> Dict[str, Any]:
        """Replace the given form properties (shallow, per key)."""
        return self._request(
            'POST',
            f"/form/{form_id}/properties",
            'update form properties',
            data=_bracketed('properties', properties)
        )

    def update_question(self, form_id: str, question_id: str, question_data: Dict[str, Any]) -> Dict[str, Any]:
        return self._request(
            'POST',
            f"/form/{form_id}/question/{question_id}",
            f"update question {question_id}",
            data=_bracketed('question', question_data)
        )

    def delete_question(self, form_id: str, question_id: str) -> Dict[str, Any]:
        return self._request(
            'DELETE',
            f"/form/{form_id}/question/{question_id}",
            f"delete question {question_id}"
        )

    def add_questions(self, form_id: str, questions: List[Dict[str, Any]]) -> Dict[str, Any]:
        """
        Add questions in bulk.

        JotForm expects the questions keyed by their 1-based index.
        """
        payload = {
            'questions': {str(index): question for index, question in enumerate(questions, start=1)}
        }
        return self._request('PUT', f"/form/{form_id}/questions", 'add questions', json=payload)

    def _request(self, method: str, path: str, operation: str, **kwargs) -> Dict[str, Any]:
        """
        Issue one API call and return the parsed JSON body.

        Raises:
            ProviderAPIError: on a non-success status (with the raw body attached)
                or when no response was received
        """
        url = f"{self.api_url}{path}"
        logger.info(f"JotForm {method} {path}")

        try:
            response = requests.request(
                method,
                url,
                params={'apiKey': self.api_key},
                timeout=self.timeout,
                **kwargs
            )
            response.raise_for_status()
            return response.json()

        except requests.exceptions.RequestException as e:
            error_body = None
            status_code = None

            if getattr(e, 'response', None) is not None:
                status_code = e.response.status_code
                try:
                    error_body = e.response.text
                except Exception:
                    pass

            logger.error(f"JotForm {operation} failed: {status_code or 'no response'}")
            if error_body:
                logger.error(f"Response body: {error_body}")

            raise ProviderAPIError(
                f"Failed to {operation}",
                status_code=status_code,
                response_body=error_body
            )
