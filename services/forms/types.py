"""
Form Service Type Definitions

Dataclasses for the form configuration document, the compiled
JotForm questions and conditions, and update requests.
Configuration sections are immutable once parsed from the request body.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .exceptions import ValidationError


# =============================================================================
# PARSING HELPERS
# =============================================================================

def _entries(data: Dict[str, Any], key: str) -> List[Dict[str, Any]]:
    """Return the list under key, rejecting anything that is not a list of objects."""
    return _entry_list(data.get(key), key)


def _entry_list(value: Any, key: str) -> List[Dict[str, Any]]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValidationError(f"'{key}' must be a list", field=key)
    for entry in value:
        if not isinstance(entry, dict):
            raise ValidationError(f"Every entry in '{key}' must be an object", field=key)
    return value


def _require(entry: Dict[str, Any], key: str, section: str) -> Any:
    value = entry.get(key)
    if value is None or value == '':
        raise ValidationError(f"'{key}' is required for every entry in '{section}'", field=section)
    return value


def _section(data: Dict[str, Any], key: str) -> Optional[Dict[str, Any]]:
    return _mapping(data.get(key), key)


def _mapping(value: Any, key: str) -> Optional[Dict[str, Any]]:
    if value is None:
        return None
    if not isinstance(value, dict):
        raise ValidationError(f"'{key}' must be an object", field=key)
    return value


# =============================================================================
# CONFIGURATION DOCUMENT
# =============================================================================

@dataclass(frozen=True)
class EligibilityQuestion:
    """A yes/no question the respondent must answer to be eligible."""
    text: str
    name: str
    required: bool = False


@dataclass(frozen=True)
class PersonalInfoSelection:
    """Which personal-info fields to include. Order is fixed by the compiler."""
    include_name: bool = False
    include_address: bool = False
    include_email: bool = False
    include_phone: bool = False

    @property
    def any_selected(self) -> bool:
        return self.include_name or self.include_address or self.include_email or self.include_phone


@dataclass(frozen=True)
class LegalTextBlock:
    content: str
    name: Optional[str] = None


@dataclass(frozen=True)
class SignatureField:
    """
    A signature box.

    Attributes:
        text: Prompt shown above the box
        name: JotForm field name
        required: Whether a signature is mandatory
        size: Box width in pixels, as JotForm expects it (string)
    """
    text: str
    name: str
    required: bool = False
    size: Optional[str] = None


@dataclass(frozen=True)
class HiddenField:
    name: str
    text: str


@dataclass(frozen=True)
class Widget:
    """An invisible data collector ('userAgent' or 'geoStamp')."""
    type: str
    name: str
    text: str = ''


@dataclass(frozen=True)
class EmailNotification:
    to: str
    subject: Optional[str] = None
    sender: Optional[str] = None


@dataclass(frozen=True)
class ConditionalVisibility:
    enabled: bool = False
    show_personal_info_only_if_eligible: bool = False

    @property
    def gates_personal_info(self) -> bool:
        return self.enabled and self.show_personal_info_only_if_eligible


@dataclass(frozen=True)
class FormDocument:
    """
    A complete form configuration, parsed from a create-form request.

    This is the only input to the field compiler; every section is
    optional and independently checked for presence.
    """
    title: Optional[str] = None
    api_key: Optional[str] = None
    properties: Dict[str, Any] = field(default_factory=dict)
    eligibility_questions: Tuple[EligibilityQuestion, ...] = ()
    personal_info: PersonalInfoSelection = PersonalInfoSelection()
    legal_text_blocks: Tuple[LegalTextBlock, ...] = ()
    signature_fields: Tuple[SignatureField, ...] = ()
    hidden_fields: Tuple[HiddenField, ...] = ()
    widgets: Tuple[Widget, ...] = ()
    include_captcha: bool = False
    email_notification: Optional[EmailNotification] = None
    conditional_visibility: ConditionalVisibility = ConditionalVisibility()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'FormDocument':
        """
        Create a FormDocument from a parsed JSON/YAML body.

        Accepts conditional flags either at top level
        (enableConditionals, showPersonalInfoOnlyIfEligible) or nested
        under conditionalVisibility.
        """
        if not isinstance(data, dict):
            raise ValidationError("Request body must be a JSON object")

        properties = _section(data, 'properties') or {}

        eligibility = tuple(
            EligibilityQuestion(
                text=q.get('text', ''),
                name=_require(q, 'name', 'eligibilityQuestions'),
                required=bool(q.get('required', False))
            )
            for q in _entries(data, 'eligibilityQuestions')
        )

        personal_data = _section(data, 'personalInfoFields') or {}
        personal_info = PersonalInfoSelection(
            include_name=bool(personal_data.get('includeName', False)),
            include_address=bool(personal_data.get('includeAddress', False)),
            include_email=bool(personal_data.get('includeEmail', False)),
            include_phone=bool(personal_data.get('includePhone', False))
        )

        legal_blocks = tuple(
            LegalTextBlock(
                content=_require(b, 'content', 'legalTextBlocks'),
                name=b.get('name') or None
            )
            for b in _entries(data, 'legalTextBlocks')
        )

        signatures = tuple(
            SignatureField(
                text=s.get('text', ''),
                name=_require(s, 'name', 'signatureFields'),
                required=bool(s.get('required', False)),
                size=str(s['size']) if s.get('size') else None
            )
            for s in _entries(data, 'signatureFields')
        )

        hidden = tuple(
            HiddenField(
                name=_require(h, 'name', 'hiddenFields'),
                text=str(h.get('text') or h.get('value') or '')
            )
            for h in _entries(data, 'hiddenFields')
        )

        widgets = tuple(
            Widget(
                type=_require(w, 'type', 'widgets'),
                name=_require(w, 'name', 'widgets'),
                text=w.get('text', '')
            )
            for w in _entries(data, 'widgets')
        )

        email = None
        email_data = _section(data, 'emailNotification')
        if email_data is not None:
            email = EmailNotification(
                to=_require(email_data, 'to', 'emailNotification'),
                subject=email_data.get('subject') or None,
                sender=email_data.get('from') or None
            )

        nested = _section(data, 'conditionalVisibility') or {}
        conditional = ConditionalVisibility(
            enabled=bool(data.get('enableConditionals', nested.get('enabled', False))),
            show_personal_info_only_if_eligible=bool(
                data.get('showPersonalInfoOnlyIfEligible',
                         nested.get('showPersonalInfoOnlyIfEligible', False))
            )
        )

        return cls(
            title=data.get('title') or None,
            api_key=data.get('apiKey') or None,
            properties=dict(properties),
            eligibility_questions=eligibility,
            personal_info=personal_info,
            legal_text_blocks=legal_blocks,
            signature_fields=signatures,
            hidden_fields=hidden,
            widgets=widgets,
            include_captcha=bool(data.get('includeCaptcha', False)),
            email_notification=email,
            conditional_visibility=conditional
        )


# =============================================================================
# COMPILER OUTPUT
# =============================================================================

@dataclass
class FieldDescriptor:
    """
    One compiled JotForm question.

    Attributes:
        kind: JotForm control type (e.g. 'control_radio')
        text: Display text
        position: 1-based order within the form
        name: Unique field name
        attributes: Kind-specific JotForm attributes (string values)
        section: Which part of the form produced this field; not sent to JotForm
    """
    kind: str
    text: str
    position: int
    name: str
    attributes: Dict[str, str] = field(default_factory=dict)
    section: str = ''

    def to_provider_format(self) -> Dict[str, Any]:
        """Convert to the JotForm question format."""
        question = {
            'type': self.kind,
            'text': self.text,
            'order': str(self.position),
            'name': self.name,
        }
        question.update(self.attributes)
        return question


@dataclass(frozen=True)
class ConditionTerm:
    field: str
    operator: str
    value: str


@dataclass(frozen=True)
class ConditionAction:
    field: str
    visibility: str


@dataclass
class VisibilityCondition:
    """
    A rule that shows or hides fields based on other fields' values.

    Fields are referenced by position (as strings), which is how
    JotForm addresses questions in condition terms.
    """
    terms: List[ConditionTerm]
    actions: List[ConditionAction]
    link: str = 'All'
    id: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'VisibilityCondition':
        if not isinstance(data, dict):
            raise ValidationError("Every condition must be an object", field='conditions')
        link = data.get('link')
        if link not in ('All', 'Any'):
            raise ValidationError("Condition link must be 'All' or 'Any'", field='conditions')
        terms = [
            ConditionTerm(
                field=str(_require(t, 'field', 'terms')),
                operator=_require(t, 'operator', 'terms'),
                value=str(t.get('value', ''))
            )
            for t in _entries(data, 'terms')
        ]
        actions = [
            ConditionAction(
                field=str(_require(a, 'field', 'actions')),
                visibility=_require(a, 'visibility', 'actions')
            )
            for a in _entries(data, 'actions')
        ]
        return cls(terms=terms, actions=actions, link=link, id=data.get('id') or None)


@dataclass
class CompiledForm:
    """Ordered questions plus the conditions derived from their positions."""
    questions: List[FieldDescriptor]
    conditions: List[VisibilityCondition] = field(default_factory=list)

    def positions_for(self, section: str) -> List[int]:
        """Positions of every question produced by the given section, in order."""
        return [q.position for q in self.questions if q.section == section]


# =============================================================================
# UPDATE REQUESTS
# =============================================================================

UPDATE_TYPES = ('properties', 'questions', 'conditions')


@dataclass(frozen=True)
class QuestionUpdate:
    question_id: str
    action: str
    question_data: Optional[Dict[str, Any]] = None
    new_order: Optional[int] = None


@dataclass
class UpdateRequest:
    """
    A request to modify an existing JotForm form.

    update_type is kept as received; the dispatcher rejects unknown kinds.
    The kind-specific payloads are kept raw and only parsed by the
    update that uses them, so a field that belongs to another kind
    never masks the key, form id or kind checks.
    """
    form_id: Optional[str]
    update_type: Optional[str]
    api_key: Optional[str] = None
    properties: Any = None
    question_updates: Any = None
    new_questions: Any = None
    conditions: Any = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'UpdateRequest':
        if not isinstance(data, dict):
            raise ValidationError("Request body must be a JSON object")

        form_id = data.get('formId')
        return cls(
            form_id=str(form_id) if form_id else None,
            update_type=data.get('updateType'),
            api_key=data.get('apiKey') or None,
            properties=data.get('properties'),
            question_updates=data.get('questionUpdates'),
            new_questions=data.get('newQuestions'),
            conditions=data.get('conditions')
        )

    def parse_properties(self) -> Optional[Dict[str, Any]]:
        return _mapping(self.properties, 'properties')

    def parse_question_updates(self) -> List[QuestionUpdate]:
        return [
            QuestionUpdate(
                question_id=str(_require(u, 'questionId', 'questionUpdates')),
                action=_require(u, 'action', 'questionUpdates'),
                question_data=u.get('questionData'),
                new_order=u.get('newOrder')
            )
            for u in _entry_list(self.question_updates, 'questionUpdates')
        ]

    def parse_new_questions(self) -> List[Dict[str, Any]]:
        return _entry_list(self.new_questions, 'newQuestions')

    def parse_conditions(self) -> Optional[List[VisibilityCondition]]:
        if self.conditions is None:
            return None
        return [
            VisibilityCondition.from_dict(c)
            for c in _entry_list(self.conditions, 'conditions')
        ]


# =============================================================================
# RESULTS
# =============================================================================

@dataclass
class StepResult:
    """Outcome of one delete/update call in a questions update."""
    action: str
    question_id: str
    success: bool
    status_code: Optional[int] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'action': self.action,
            'questionId': self.question_id,
            'success': self.success,
            'statusCode': self.status_code,
            'error': self.error
        }


@dataclass
class CreateResult:
    form_id: Optional[str]
    form_url: Optional[str]
    data: Dict[str, Any]


@dataclass
class UpdateResult:
    message: str
    data: Any = None
