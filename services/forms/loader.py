"""
Configuration File Loader

Reads form configuration documents and update requests from YAML or
JSON files, for use from the command line. The HTTP endpoints take the
same structures as JSON request bodies.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Union

import yaml

from .exceptions import ConfigurationError
from .types import FormDocument, UpdateRequest

logger = logging.getLogger(__name__)


def load_mapping(path: Union[str, Path]) -> Dict[str, Any]:
    """
    Load a YAML or JSON file whose top level is a mapping.

    .json files are parsed as JSON; everything else as YAML.
    """
    path = Path(path)
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}")

    text = path.read_text()
    try:
        if path.suffix.lower() == '.json':
            data = json.loads(text)
        else:
            data = yaml.safe_load(text)
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"{path.name}: {e}")

    if not isinstance(data, dict):
        raise ConfigurationError(f"{path.name}: top level must be a mapping")

    logger.debug(f"Loaded configuration from {path}")
    return data


def load_form_document(path: Union[str, Path]) -> FormDocument:
    """Load a form configuration document from a file."""
    return FormDocument.from_dict(load_mapping(path))


def load_update_request(path: Union[str, Path]) -> UpdateRequest:
    """Load an update request from a file."""
    return UpdateRequest.from_dict(load_mapping(path))
