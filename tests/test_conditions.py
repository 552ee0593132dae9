"""
Visibility Condition Tests

Run with: python -m pytest tests/test_conditions.py -v
"""

import json

import pytest

from services.forms import (
    FieldCompiler,
    FormDocument,
    ValidationError,
    VisibilityCondition,
    encode_conditions
)


def gated_config(**overrides):
    config = {
        'title': 'T',
        'eligibilityQuestions': [
            {'text': 'Q1', 'name': 'q1'},
            {'text': 'Q2', 'name': 'q2'},
        ],
        'personalInfoFields': {'includeName': True, 'includeEmail': True},
        'enableConditionals': True,
        'showPersonalInfoOnlyIfEligible': True,
    }
    config.update(overrides)
    return config


def derive(config):
    return FieldCompiler.compile(FormDocument.from_dict(config)).conditions


class TestDerivation:
    """The 'show personal info only if eligible' condition."""

    def test_single_all_condition(self):
        """One term per eligibility question, one Show action per personal field."""
        conditions = derive(gated_config())

        assert len(conditions) == 1
        condition = conditions[0]
        assert condition.link == 'All'
        assert [(t.field, t.operator, t.value) for t in condition.terms] == [
            ('2', 'equals', 'Yes'),
            ('3', 'equals', 'Yes'),
        ]
        assert [(a.field, a.visibility) for a in condition.actions] == [
            ('4', 'Show'),
            ('5', 'Show'),
        ]

    def test_first_legal_block_is_gated(self):
        conditions = derive(gated_config(legalTextBlocks=[
            {'content': 'Notice'},
            {'content': 'Terms'},
        ]))
        # header 1, q1 2, q2 3, legalText0 4, name 5, email 6
        assert [a.field for a in conditions[0].actions] == ['4', '5', '6']

    def test_positions_follow_hidden_fields(self):
        """Hidden fields shift the referenced positions along with the questions."""
        config = gated_config(hiddenFields=[{'name': 'h1', 'text': 'v'}])
        compiled = FieldCompiler.compile(FormDocument.from_dict(config))
        by_position = {q.position: q for q in compiled.questions}

        condition = compiled.conditions[0]
        assert [by_position[int(t.field)].name for t in condition.terms] == ['q1', 'q2']
        assert [by_position[int(a.field)].name for a in condition.actions] == ['name', 'email']

    def test_every_reference_exists(self, full_config):
        compiled = FieldCompiler.compile(FormDocument.from_dict(full_config))
        positions = {str(q.position) for q in compiled.questions}

        for condition in compiled.conditions:
            assert {t.field for t in condition.terms} <= positions
            assert {a.field for a in condition.actions} <= positions

    def test_full_config_condition(self, full_config):
        condition = derive(full_config)[0]
        assert [t.field for t in condition.terms] == ['4', '5']
        assert [a.field for a in condition.actions] == ['6', '7', '8', '9', '10']

    def test_nested_conditional_section(self):
        config = gated_config()
        del config['enableConditionals']
        del config['showPersonalInfoOnlyIfEligible']
        config['conditionalVisibility'] = {'enabled': True, 'showPersonalInfoOnlyIfEligible': True}
        assert len(derive(config)) == 1

    @pytest.mark.parametrize('overrides', [
        {'enableConditionals': False},
        {'showPersonalInfoOnlyIfEligible': False},
        {'personalInfoFields': {}},
        {'eligibilityQuestions': []},
    ])
    def test_no_condition(self, overrides):
        """Disabled, nothing to show, or nothing to test: no condition."""
        assert derive(gated_config(**overrides)) == []

    def test_legal_text_alone_is_gated(self):
        conditions = derive(gated_config(personalInfoFields={}, legalTextBlocks=[{'content': 'Notice'}]))
        assert [a.field for a in conditions[0].actions] == ['4']


class TestEncoding:
    """JotForm's condition format."""

    def test_encoded_shape(self):
        encoded = encode_conditions(derive(gated_config()))

        assert len(encoded) == 1
        condition = encoded[0]
        assert condition['index'] == '0'
        assert condition['priority'] == '0'
        assert condition['link'] == 'All'
        assert condition['type'] == 'field'
        assert condition['id'].startswith('condition_')

        terms = json.loads(condition['terms'])
        actions = json.loads(condition['action'])
        assert [t['field'] for t in terms] == ['2', '3']
        assert all(t['value'] == 'Yes' and t['isError'] is False for t in terms)
        assert [a['visibility'] for a in actions] == ['Show', 'Show']

    def test_ids_are_unique(self):
        encoded = encode_conditions(derive(gated_config()))
        ids = [t['id'] for t in json.loads(encoded[0]['terms'])]
        ids += [a['id'] for a in json.loads(encoded[0]['action'])]
        assert len(ids) == len(set(ids))

    def test_supplied_id_is_kept(self):
        condition = VisibilityCondition.from_dict({
            'id': 'existing',
            'link': 'Any',
            'terms': [{'field': '3', 'operator': 'equals', 'value': 'No'}],
            'actions': [{'field': '5', 'visibility': 'Hide'}],
        })
        encoded = encode_conditions([condition, condition])

        assert encoded[0]['id'] == 'existing'
        assert [c['index'] for c in encoded] == ['0', '1']
        assert encoded[0]['link'] == 'Any'

    def test_invalid_link_rejected(self):
        with pytest.raises(ValidationError):
            VisibilityCondition.from_dict({'link': 'Some', 'terms': [], 'actions': []})
