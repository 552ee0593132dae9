"""
Visibility Conditions

Derives JotForm show/hide conditions from compiled questions and
encodes conditions into the JotForm properties format.

Derivation reads positions from the compiled output rather than
recomputing offsets, so hidden fields and any other insertions are
accounted for automatically.
"""

import json
import logging
import uuid
from typing import Any, Dict, List

from .types import (
    CompiledForm,
    ConditionAction,
    ConditionTerm,
    FormDocument,
    VisibilityCondition
)

logger = logging.getLogger(__name__)

AFFIRMATIVE_ANSWER = 'Yes'

# Sections revealed once every eligibility question is answered 'Yes'
GATED_SECTIONS = ('legal_first', 'personal')


def derive_visibility_conditions(
    document: FormDocument,
    compiled: CompiledForm
) -> List[VisibilityCondition]:
    """
    Build the 'show personal info only if eligible' condition.

    Produces at most one condition: every eligibility question must
    equal 'Yes' for the first legal block and the personal info fields
    to be shown. Returns an empty list when the feature is off, when
    there are no eligibility questions, or when nothing would be shown.
    """
    if not document.conditional_visibility.gates_personal_info:
        return []

    eligibility_positions = compiled.positions_for('eligibility')
    if not eligibility_positions:
        return []

    gated_positions = sorted(
        position
        for section in GATED_SECTIONS
        for position in compiled.positions_for(section)
    )
    if not gated_positions:
        logger.debug("Conditionals enabled but no personal info to gate; skipping")
        return []

    terms = [
        ConditionTerm(field=str(position), operator='equals', value=AFFIRMATIVE_ANSWER)
        for position in eligibility_positions
    ]
    actions = [
        ConditionAction(field=str(position), visibility='Show')
        for position in gated_positions
    ]
    return [VisibilityCondition(terms=terms, actions=actions, link='All')]


def _new_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex}"


def encode_condition(condition: VisibilityCondition, index: int) -> Dict[str, Any]:
    """
    Convert a condition into the JotForm properties format.

    Terms and actions are JSON-encoded strings, and each one gets a
    freshly generated id. A condition that already carries an id keeps it.
    """
    terms = [
        {
            'id': _new_id('term'),
            'field': term.field,
            'operator': term.operator,
            'value': term.value,
            'isError': False
        }
        for term in condition.terms
    ]
    actions = [
        {
            'id': _new_id('action'),
            'visibility': action.visibility,
            'isError': False,
            'field': action.field
        }
        for action in condition.actions
    ]
    return {
        'id': condition.id or _new_id('condition'),
        'index': str(index),
        'link': condition.link,
        'priority': str(index),
        'type': 'field',
        'terms': json.dumps(terms),
        'action': json.dumps(actions)
    }


def encode_conditions(conditions: List[VisibilityCondition]) -> List[Dict[str, Any]]:
    """Encode a list of conditions, indexing and prioritising them in order."""
    return [encode_condition(condition, index) for index, condition in enumerate(conditions)]
