"""
Rule Loader
Loads a rules document from a file path or from an inline JSON payload
"""
import json
import logging
import os
from typing import Optional

from pydantic import ValidationError

from services.errors import RuleInputMissing, RuleParseError, RuleReadError, RuleSchemaError
from services.rules.schema import RuleDocument, describe_validation_error

logger = logging.getLogger(__name__)


def read_rules_payload(specifier: str) -> str:
    """
    Return the JSON payload named by specifier

    An existing file is read; anything else is taken as the payload itself.
    """
    if not isinstance(specifier, str) or not specifier.strip():
        raise RuleInputMissing(specifier)

    if os.path.isfile(specifier):
        try:
            with open(specifier, "r", encoding="utf-8") as f:
                payload = f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise RuleReadError(specifier, str(e))

        logger.info(f"Loaded parsing rules from file: {specifier}")
        return payload

    logger.debug("Parsing rules provided inline")
    return specifier


def parse_rules(payload: str) -> RuleDocument:
    """Parse and validate a JSON rules payload"""
    try:
        raw = json.loads(payload)
    except json.JSONDecodeError as e:
        raise RuleParseError(str(e), payload)

    if not isinstance(raw, dict):
        raise RuleSchemaError(f"expected a JSON object, got {type(raw).__name__}")

    try:
        return RuleDocument.model_validate(raw)
    except ValidationError as e:
        raise RuleSchemaError(describe_validation_error(e))


def load_rules(specifier: Optional[str]) -> RuleDocument:
    """
    Load a rules document

    Args:
        specifier: path to a JSON rules file, or the JSON itself

    Returns:
        RuleDocument with raw variables and rules

    Raises:
        RuleInputMissing: specifier is empty or not a string
        RuleReadError: the file exists but could not be read
        RuleParseError: the payload is not valid JSON
        RuleSchemaError: the JSON is not shaped like a rules document
    """
    payload = read_rules_payload(specifier)
    return parse_rules(payload)
