"""
Replacement rule configuration.

Builds ReplacementRules from configuration records, either already parsed
or loaded from a JSON or YAML file. Records use the plugin configuration
names (``property``, ``propertyOutputSuffix``, ``forceValueEvaluation``...)
and are validated against RULES_SCHEMA before conversion.
"""

import json
import logging
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import jsonschema
import yaml

from .exceptions import ConfigurationError
from .rules import ReplacementRule, TransformationRule

logger = logging.getLogger(__name__)


TRANSFORMATION_RULE_SCHEMA = {
    "type": "object",
    "properties": {
        "apply": {"type": "string"},
        "action": {"type": "string"},
    },
    "required": ["apply", "action"],
    "additionalProperties": False,
}

REPLACEMENT_RULE_SCHEMA = {
    "type": "object",
    "properties": {
        "property": {"type": ["string", "null"]},
        "token": {"type": ["string", "null"]},
        "value": {"type": ["string", "null"]},
        "regex": {"type": "boolean"},
        "forceValueEvaluation": {"type": "boolean"},
        "propertyOutputSuffix": {"type": ["string", "null"]},
        "transformationRules": {
            "type": "array",
            "items": TRANSFORMATION_RULE_SCHEMA,
        },
    },
    "additionalProperties": False,
}

RULES_SCHEMA = {
    "type": "array",
    "items": REPLACEMENT_RULE_SCHEMA,
}

# Top-level key accepted when a rule file holds a mapping instead of a list
RULES_KEY = "replacementProperties"


def rule_from_config(record: Mapping[str, Any]) -> ReplacementRule:
    """
    Build a single rule from a configuration record.

    Args:
        record: Mapping using configuration field names

    Returns:
        ReplacementRule

    Raises:
        ConfigurationError: If the record is invalid
    """
    try:
        jsonschema.validate(instance=record, schema=REPLACEMENT_RULE_SCHEMA)
    except jsonschema.exceptions.ValidationError as e:
        raise ConfigurationError(f"Invalid replacement rule: {e.message}") from e

    return ReplacementRule(
        target_key=record.get("property"),
        token=record.get("token"),
        value=record.get("value"),
        regex=record.get("regex", True),
        force_value_evaluation=record.get("forceValueEvaluation", False),
        property_output_suffix=record.get("propertyOutputSuffix"),
        transformation_rules=tuple(
            TransformationRule.from_names(item["apply"], item["action"])
            for item in record.get("transformationRules", [])
        ),
    )


def rules_from_config(records: Sequence[Mapping[str, Any]] | None) -> list[ReplacementRule]:
    """
    Build rules from a list of configuration records, keeping their order.

    Args:
        records: Parsed configuration records; None yields no rules

    Raises:
        ConfigurationError: If any record is invalid
    """
    if records is None:
        return []

    try:
        jsonschema.validate(instance=records, schema=RULES_SCHEMA)
    except jsonschema.exceptions.ValidationError as e:
        location = "/".join(str(part) for part in e.absolute_path) or "<root>"
        raise ConfigurationError(
            f"Invalid replacement rules at {location}: {e.message}"
        ) from e

    return [rule_from_config(record) for record in records]


def load_rules(path: str | Path) -> list[ReplacementRule]:
    """
    Load rules from a JSON or YAML file.

    The file holds either a list of records or a mapping with a
    ``replacementProperties`` list.

    Args:
        path: Path to a .json, .yaml or .yml file

    Returns:
        Rules in file order

    Raises:
        ConfigurationError: If the file cannot be parsed or is invalid
        FileNotFoundError: If the file does not exist
    """
    path = Path(path)
    text = path.read_text(encoding="utf-8")

    try:
        if path.suffix.lower() == ".json":
            data = json.loads(text)
        elif path.suffix.lower() in (".yaml", ".yml"):
            data = yaml.safe_load(text)
        else:
            raise ConfigurationError(f"Unsupported rule file type: {path.suffix or path.name}")
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Failed to parse rule file {path}: {e}") from e

    if isinstance(data, Mapping):
        data = data.get(RULES_KEY)

    rules = rules_from_config(data)
    logger.info(f"Loaded {len(rules)} replacement rule(s) from {path}")
    return rules
