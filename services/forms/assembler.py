"""
Form Assembler

Combines compiled questions with default form styling, notification
emails and visibility conditions into a JotForm create-form payload.
"""

import logging
from typing import Any, Dict, List

from .conditions import encode_conditions
from .types import CompiledForm, FormDocument

logger = logging.getLogger(__name__)

DEFAULT_FORM_TITLE = 'New Form'
DEFAULT_EMAIL_SENDER = 'default'
DEFAULT_EMAIL_SUBJECT = 'New Form Submission'

# Presentational defaults; document properties override these per key
DEFAULT_PROPERTIES = {
    'height': '600',
    'formWidth': '752',
    'labelWidth': '230',
    'font': 'Inter',
    'fontsize': '14',
    'fontcolor': '#121212',
    'background': 'rgba(255,255,255,0)',
    'pageColor': '#F3F3FE',
    'alignment': 'Top',
    'lineSpacing': '4',
    'styles': 'nova',
    'themeID': '5e6b428acc8c4e222d1beb91',
    'showProgressBar': 'disable',
    'errorNavigation': 'Yes',
    'highlightLine': 'Enabled',
    'responsive': 'No',
}


class FormAssembler:
    """
    Builds the JotForm create-form payload.

    Payload shape:
        {
            'properties': {...},
            'questions': [...],
            'emails': [...]
        }
    """

    @classmethod
    def assemble(cls, document: FormDocument, compiled: CompiledForm) -> Dict[str, Any]:
        """
        Assemble the payload for a compiled document.

        Args:
            document: Parsed form configuration
            compiled: Output of FieldCompiler.compile for the same document

        Returns:
            Dict ready to send to JotForm's create-form endpoint
        """
        properties = cls.build_properties(document)

        if compiled.conditions:
            properties['conditions'] = encode_conditions(compiled.conditions)

        return {
            'properties': properties,
            'questions': [q.to_provider_format() for q in compiled.questions],
            'emails': cls.build_emails(document)
        }

    @classmethod
    def build_properties(cls, document: FormDocument) -> Dict[str, Any]:
        """Shallow-merge document properties over the defaults."""
        properties = {'title': document.title or DEFAULT_FORM_TITLE}
        properties.update(DEFAULT_PROPERTIES)
        properties.update(document.properties)
        return properties

    @classmethod
    def build_emails(cls, document: FormDocument) -> List[Dict[str, str]]:
        notification = document.email_notification
        if notification is None:
            return []

        return [{
            'type': 'notification',
            'name': 'notification',
            'from': notification.sender or DEFAULT_EMAIL_SENDER,
            'to': notification.to,
            'subject': notification.subject or DEFAULT_EMAIL_SUBJECT,
            'html': 'true'
        }]
