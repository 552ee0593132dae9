"""
Field Compiler

Expands a FormDocument into the ordered list of JotForm questions.

The assembly order is fixed; visibility conditions address questions
by position, so every position is assigned here in one numbering pass
and later read back from the compiled output.

Order:
    hidden fields (prepended after the rest is built)
    header
    eligibility questions
    first legal text block
    personal info (name, address, email, phone)
    page break
    remaining legal text blocks
    signatures
    captcha
    submit
    widgets (appended last)
"""

import json
import logging
from typing import List

from .conditions import derive_visibility_conditions
from .types import CompiledForm, FieldDescriptor, FormDocument

logger = logging.getLogger(__name__)

DEFAULT_HEADER_TEXT = 'Form Title'
DEFAULT_SIGNATURE_SIZE = '600'
PAGE_BREAK_NAME = 'pageBreak2'

# JotForm widget ids for the invisible data collectors
WIDGETS = {
    'userAgent': {
        'cfname': 'Get User Agent',
        'selectedField': '543ea3eb3066feaa30000036',
    },
    'geoStamp': {
        'cfname': 'Geo Stamp',
        'selectedField': '5935688a725d1797050002e7',
    },
}

# Personal info fields in their fixed order
PERSONAL_INFO_FIELDS = (
    ('include_name', 'control_fullname', 'Name *', 'name', {
        'required': 'Yes',
        'labelAlign': 'Auto',
        'validation': 'None',
        'sublabels': json.dumps({
            'prefix': 'Prefix',
            'first': 'First Name',
            'middle': 'Middle Name',
            'last': 'Last Name',
            'suffix': 'Suffix'
        }),
        'size': '20',
        'readonly': 'No',
    }),
    ('include_address', 'control_address', 'Address *', 'address', {
        'required': 'Yes',
        'labelAlign': 'Auto',
        'validation': 'None',
        'sublabels': json.dumps({
            'addr_line1': 'Street Address',
            'addr_line2': 'Street Address Line 2',
            'city': 'City',
            'state': 'State',
            'postal': 'Zip Code',
            'country': 'Country'
        }),
        'size': '20',
        'readonly': 'No',
    }),
    ('include_email', 'control_email', 'Email *', 'email', {
        'required': 'Yes',
        'labelAlign': 'Auto',
        'validation': 'Email',
        'size': '20',
        'readonly': 'No',
    }),
    ('include_phone', 'control_phone', 'Phone Number *', 'phoneNumber', {
        'required': 'Yes',
        'labelAlign': 'Auto',
        'validation': 'None',
        'countryCode': 'No',
        'inputMask': 'enable',
        'inputMaskValue': '(###) ###-####',
        'size': '20',
        'readonly': 'No',
        'sublabels': json.dumps({
            'country': 'Country Code',
            'area': 'Area Code',
            'phone': 'Phone Number',
            'full': 'Phone Number',
            'masked': 'Please enter a valid phone number.'
        }),
    }),
)


def _yes_no(flag: bool) -> str:
    return 'Yes' if flag else 'No'


def _legal_text_name(block, index: int) -> str:
    return block.name or f"legalText{index}"


class FieldCompiler:
    """
    Compiles form configuration into JotForm questions.

    Pure and deterministic: the same document always yields the same
    questions, names and positions. Visibility conditions are derived
    from the compiled positions by the conditions module.
    """

    @classmethod
    def compile(cls, document: FormDocument) -> CompiledForm:
        """
        Build the ordered questions and their derived visibility conditions.

        Args:
            document: Parsed form configuration

        Returns:
            CompiledForm with contiguous positions 1..N
        """
        questions = cls.build_questions(document)
        compiled = CompiledForm(questions=questions)
        compiled.conditions = derive_visibility_conditions(document, compiled)

        logger.debug(
            f"Compiled {len(questions)} question(s) and "
            f"{len(compiled.conditions)} condition(s) for '{document.title}'"
        )
        return compiled

    @classmethod
    def build_questions(cls, document: FormDocument) -> List[FieldDescriptor]:
        """Build every question in assembly order and number them 1..N."""
        questions = cls._build_body(document)
        questions = cls._hidden_fields(document) + questions
        questions += cls._widgets(document)

        for position, question in enumerate(questions, start=1):
            question.position = position

        return questions

    @classmethod
    def _build_body(cls, document: FormDocument) -> List[FieldDescriptor]:
        """Header through submit button; positions are assigned afterwards."""
        questions = [
            FieldDescriptor(
                kind='control_head',
                text=document.title or DEFAULT_HEADER_TEXT,
                position=0,
                name='header',
                section='header'
            )
        ]

        for question in document.eligibility_questions:
            questions.append(FieldDescriptor(
                kind='control_radio',
                text=question.text,
                position=0,
                name=question.name,
                attributes={
                    'required': _yes_no(question.required),
                    'options': 'Yes|No',
                },
                section='eligibility'
            ))

        # First legal block sits before personal info so it can be gated with it
        legal_blocks = document.legal_text_blocks
        if legal_blocks:
            questions.append(cls._legal_text(legal_blocks[0], 0, 'legal_first'))

        for flag, kind, text, name, attributes in PERSONAL_INFO_FIELDS:
            if getattr(document.personal_info, flag):
                questions.append(FieldDescriptor(
                    kind=kind,
                    text=text,
                    position=0,
                    name=name,
                    attributes=dict(attributes),
                    section='personal'
                ))

        questions.append(FieldDescriptor(
            kind='control_pagebreak',
            text='Page Break',
            position=0,
            name=PAGE_BREAK_NAME,
            section='page_break'
        ))

        for index, block in enumerate(legal_blocks[1:], start=1):
            questions.append(cls._legal_text(block, index, 'legal'))

        for signature in document.signature_fields:
            questions.append(FieldDescriptor(
                kind='control_signature',
                text=signature.text,
                position=0,
                name=signature.name,
                attributes={
                    'required': _yes_no(signature.required),
                    'size': signature.size or DEFAULT_SIGNATURE_SIZE,
                    'labelAlign': 'Auto',
                    'validation': 'None',
                },
                section='signature'
            ))

        if document.include_captcha:
            questions.append(FieldDescriptor(
                kind='control_captcha',
                text='Please verify that you are human',
                position=0,
                name='captcha',
                attributes={
                    'captchaType': 'invisible',
                    'useInvisibleRecaptcha': 'Yes',
                },
                section='captcha'
            ))

        questions.append(FieldDescriptor(
            kind='control_button',
            text='Submit',
            position=0,
            name='submit',
            section='submit'
        ))

        return questions

    @classmethod
    def _legal_text(cls, block, index: int, section: str) -> FieldDescriptor:
        return FieldDescriptor(
            kind='control_text',
            text=block.content,
            position=0,
            name=_legal_text_name(block, index),
            section=section
        )

    @classmethod
    def _hidden_fields(cls, document: FormDocument) -> List[FieldDescriptor]:
        return [
            FieldDescriptor(
                kind='control_textbox',
                text=hidden.text,
                position=0,
                name=hidden.name,
                attributes={
                    'hidden': 'Yes',
                    'labelAlign': 'Auto',
                    'validation': 'None',
                    'size': '20',
                    'required': 'No',
                    'readonly': 'No',
                },
                section='hidden'
            )
            for hidden in document.hidden_fields
        ]

    @classmethod
    def _widgets(cls, document: FormDocument) -> List[FieldDescriptor]:
        widgets = []
        for widget in document.widgets:
            widget_info = WIDGETS.get(widget.type)
            if widget_info is None:
                logger.warning(f"Skipping widget '{widget.name}' with unknown type '{widget.type}'")
                continue
            widgets.append(FieldDescriptor(
                kind='control_widget',
                # Empty text so the widget never shows a label
                text='',
                position=0,
                name=widget.name,
                attributes={
                    'cfname': widget_info['cfname'],
                    'selectedField': widget_info['selectedField'],
                    'static': 'No',
                    'hidden': 'Yes',
                },
                section='widget'
            ))
        return widgets
