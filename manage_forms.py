#!/usr/bin/env python3
"""
Form Management Script
Compiles, creates and updates JotForm forms from configuration files.

Usage:
    python manage_forms.py compile forms/intake.yml
    python manage_forms.py create forms/intake.yml
    python manage_forms.py update updates/add-consent.yml
"""

import argparse
import json
import logging
import sys

from config import Config
from services.forms import (
    FieldCompiler,
    FormAssembler,
    FormDispatcher,
    FormError,
    JotFormClient,
    load_form_document,
    load_update_request
)

logger = logging.getLogger(__name__)


def build_dispatcher(config_class=Config) -> FormDispatcher:
    """Create a dispatcher with the specified config."""
    def client_factory(api_key):
        return JotFormClient(
            api_key,
            api_url=config_class.JOTFORM_API_URL,
            timeout=config_class.JOTFORM_TIMEOUT
        )

    return FormDispatcher(
        client_factory=client_factory,
        configured_api_key=config_class.JOTFORM_API_KEY,
        abort_on_failure=config_class.QUESTION_UPDATES_ABORT_ON_FAILURE
    )


def compile_form(path: str) -> dict:
    """Compile a configuration file into the create-form payload, without calling JotForm."""
    document = load_form_document(path)
    compiled = FieldCompiler.compile(document)
    return FormAssembler.assemble(document, compiled)


def create_form(path: str) -> dict:
    result = build_dispatcher().create_form(load_form_document(path))
    return {'formId': result.form_id, 'formUrl': result.form_url}


def update_form(path: str) -> dict:
    result = build_dispatcher().update_form(load_update_request(path))
    return {'message': result.message, 'data': result.data}


COMMANDS = {
    'compile': compile_form,
    'create': create_form,
    'update': update_form,
}


def main(argv=None):
    parser = argparse.ArgumentParser(description='Manage JotForm forms from configuration files')
    parser.add_argument('command', choices=sorted(COMMANDS), help='Operation to run')
    parser.add_argument('path', help='YAML or JSON configuration file')
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=Config.LOG_LEVEL,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    try:
        output = COMMANDS[args.command](args.path)
    except FormError as e:
        print(f"Error: {e}", file=sys.stderr)
        if getattr(e, 'response_body', None):
            print(e.response_body, file=sys.stderr)
        return 1

    print(json.dumps(output, indent=2))
    return 0


if __name__ == '__main__':
    sys.exit(main())
