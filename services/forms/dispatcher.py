"""
Form Dispatcher

Sends compiled forms and update requests to JotForm.

Create: compile -> assemble -> one create-form call.
Update: branches on the update kind (properties, questions, conditions).
"""

import json
import logging
from typing import Any, Callable, List, Optional

from .assembler import FormAssembler
from .compiler import FieldCompiler
from .conditions import encode_conditions
from .exceptions import ProviderAPIError, ValidationError
from .jotform_client import JotFormClient
from .types import (
    UPDATE_TYPES,
    CreateResult,
    FormDocument,
    QuestionUpdate,
    StepResult,
    UpdateRequest,
    UpdateResult
)

logger = logging.getLogger(__name__)


def resolve_api_key(request_key: Optional[str], configured_key: Optional[str]) -> str:
    """
    Pick the API key for a request: the request's own key wins.

    Raises:
        ValidationError: when neither is set
    """
    api_key = request_key or configured_key
    if not api_key:
        raise ValidationError("API key not configured", field='apiKey')
    return api_key


def request_api_key(body: Any) -> Optional[str]:
    """Read the apiKey of a raw request body without parsing anything else."""
    if isinstance(body, dict):
        return body.get('apiKey') or None
    return None


class FormDispatcher:
    """
    Runs create and update operations against JotForm.

    Args:
        client_factory: Builds a JotFormClient from an API key
        configured_api_key: Fallback key when the request carries none
        abort_on_failure: In a questions update, stop at the first failed
            delete/update call instead of continuing and reporting it
    """

    def __init__(
        self,
        client_factory: Callable[[str], JotFormClient] = JotFormClient,
        configured_api_key: Optional[str] = None,
        abort_on_failure: bool = False
    ):
        self.client_factory = client_factory
        self.configured_api_key = configured_api_key
        self.abort_on_failure = abort_on_failure

    # =========================================================================
    # CREATE
    # =========================================================================

    def create_form(self, document: FormDocument) -> CreateResult:
        """
        Compile, assemble and create a form.

        Raises:
            ValidationError: no API key available
            ProviderAPIError: JotForm rejected the request
        """
        api_key = resolve_api_key(document.api_key, self.configured_api_key)

        compiled = FieldCompiler.compile(document)
        payload = FormAssembler.assemble(document, compiled)

        client = self.client_factory(api_key)
        try:
            result = client.create_form(payload)
        except ProviderAPIError as e:
            raise ProviderAPIError(
                "Failed to create form",
                status_code=e.status_code,
                response_body=e.response_body
            )

        content = result.get('content') or {}
        form_id = content.get('id')
        logger.info(f"Created form {form_id} with {len(compiled.questions)} question(s)")

        return CreateResult(form_id=form_id, form_url=content.get('url'), data=result)

    def create_from_body(self, body: Any) -> CreateResult:
        """Create from a raw request body; the credential is checked before the body is parsed."""
        resolve_api_key(request_api_key(body), self.configured_api_key)
        return self.create_form(FormDocument.from_dict(body))

    # =========================================================================
    # UPDATE
    # =========================================================================

    def update_form(self, update: UpdateRequest) -> UpdateResult:
        """
        Apply an update request to an existing form.

        Raises:
            ValidationError: missing key, form id, payload or unknown kind
            ProviderAPIError: JotForm rejected the (final) request
        """
        api_key = resolve_api_key(update.api_key, self.configured_api_key)

        if not update.form_id:
            raise ValidationError("Form ID is required", field='formId')

        if update.update_type not in UPDATE_TYPES:
            raise ValidationError(
                "Invalid update type. Must be: properties, questions, or conditions",
                field='updateType'
            )

        client = self.client_factory(api_key)
        handler = getattr(self, f"_update_{update.update_type}")

        try:
            return handler(client, update)
        except ProviderAPIError as e:
            raise ProviderAPIError(
                "Failed to update form",
                status_code=e.status_code,
                response_body=e.response_body
            )

    def update_from_body(self, body: Any) -> UpdateResult:
        resolve_api_key(request_api_key(body), self.configured_api_key)
        return self.update_form(UpdateRequest.from_dict(body))

    def _update_properties(self, client: JotFormClient, update: UpdateRequest) -> UpdateResult:
        properties = update.parse_properties()
        if properties is None:
            raise ValidationError(
                "Properties data required for properties update",
                field='properties'
            )

        result = client.update_properties(update.form_id, properties)
        logger.info(f"Updated {len(properties)} property key(s) on form {update.form_id}")
        return UpdateResult(message="Form properties updated successfully", data=result)

    def _update_questions(self, client: JotFormClient, update: UpdateRequest) -> UpdateResult:
        question_updates = update.parse_question_updates()
        new_questions = update.parse_new_questions()

        steps = self.run_question_steps(client, update.form_id, question_updates)
        failed = [step.to_dict() for step in steps if not step.success]

        data = {
            'steps': [step.to_dict() for step in steps],
            'failedSteps': failed,
        }

        if not new_questions:
            return UpdateResult(message="Questions updated successfully", data=data)

        data['result'] = client.add_questions(update.form_id, new_questions)
        logger.info(f"Added {len(new_questions)} question(s) to form {update.form_id}")
        return UpdateResult(message="Form questions updated successfully", data=data)

    def run_question_steps(
        self,
        client: JotFormClient,
        form_id: str,
        question_updates: List[QuestionUpdate]
    ) -> List[StepResult]:
        """
        Run delete/update calls one after another, recording each outcome.

        There is no rollback: a failure leaves earlier steps applied.
        With abort_on_failure the first failure is raised; otherwise it
        is logged and the remaining steps still run.
        """
        steps = []

        for question_update in question_updates:
            if question_update.action == 'delete':
                call = lambda: client.delete_question(form_id, question_update.question_id)
            elif question_update.action == 'update' and question_update.question_data:
                call = lambda: client.update_question(
                    form_id, question_update.question_id, question_update.question_data
                )
            else:
                # 'add' goes through newQuestions
                logger.debug(
                    f"Skipping '{question_update.action}' for question {question_update.question_id}"
                )
                continue

            try:
                call()
                steps.append(StepResult(
                    action=question_update.action,
                    question_id=question_update.question_id,
                    success=True
                ))
            except ProviderAPIError as e:
                logger.warning(
                    f"Question {question_update.action} failed for "
                    f"{form_id}/{question_update.question_id}: {e.status_code}"
                )
                if self.abort_on_failure:
                    raise
                steps.append(StepResult(
                    action=question_update.action,
                    question_id=question_update.question_id,
                    success=False,
                    status_code=e.status_code,
                    error=e.response_body or str(e)
                ))

        return steps

    def _update_conditions(self, client: JotFormClient, update: UpdateRequest) -> UpdateResult:
        conditions = update.parse_conditions()
        if conditions is None:
            raise ValidationError(
                "Conditions data required for conditions update",
                field='conditions'
            )

        encoded = encode_conditions(conditions)

        result = client.update_properties(update.form_id, {'conditions': json.dumps(encoded)})
        logger.info(f"Replaced conditions on form {update.form_id} ({len(encoded)} condition(s))")
        return UpdateResult(message="Form conditions updated successfully", data=result)
