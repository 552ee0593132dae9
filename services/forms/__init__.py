"""
Form Provisioning System

A configuration-driven system for creating and updating JotForm forms.
A form configuration document is compiled into ordered JotForm
questions, combined with default styling, and sent to the JotForm API.

Usage:
    from services.forms import FormDocument, FieldCompiler, FormAssembler, FormDispatcher

    document = FormDocument.from_dict(request_body)
    compiled = FieldCompiler.compile(document)
    payload = FormAssembler.assemble(document, compiled)

    # Or, end to end
    result = FormDispatcher(configured_api_key=key).create_form(document)
"""

from .types import (
    EligibilityQuestion,
    PersonalInfoSelection,
    LegalTextBlock,
    SignatureField,
    HiddenField,
    Widget,
    EmailNotification,
    ConditionalVisibility,
    FormDocument,
    FieldDescriptor,
    ConditionTerm,
    ConditionAction,
    VisibilityCondition,
    CompiledForm,
    QuestionUpdate,
    UpdateRequest,
    StepResult,
    CreateResult,
    UpdateResult,
    UPDATE_TYPES
)

from .exceptions import (
    FormError,
    ValidationError,
    ProviderAPIError,
    ConfigurationError
)

from .compiler import FieldCompiler
from .conditions import derive_visibility_conditions, encode_conditions
from .assembler import FormAssembler
from .jotform_client import JotFormClient
from .dispatcher import FormDispatcher, request_api_key, resolve_api_key
from .loader import load_form_document, load_update_request

__all__ = [
    # Types
    'EligibilityQuestion',
    'PersonalInfoSelection',
    'LegalTextBlock',
    'SignatureField',
    'HiddenField',
    'Widget',
    'EmailNotification',
    'ConditionalVisibility',
    'FormDocument',
    'FieldDescriptor',
    'ConditionTerm',
    'ConditionAction',
    'VisibilityCondition',
    'CompiledForm',
    'QuestionUpdate',
    'UpdateRequest',
    'StepResult',
    'CreateResult',
    'UpdateResult',
    'UPDATE_TYPES',

    # Exceptions
    'FormError',
    'ValidationError',
    'ProviderAPIError',
    'ConfigurationError',

    # Services
    'FieldCompiler',
    'FormAssembler',
    'JotFormClient',
    'FormDispatcher',
    'resolve_api_key',
    'request_api_key',
    'derive_visibility_conditions',
    'encode_conditions',
    'load_form_document',
    'load_update_request',
]
