"""
Schema Validation - JSON Schema validation of listener configuration.

Listener configuration documents name a load balancer, a target group
lookup table and the listeners that should exist on the load balancer.
"""

import logging
from typing import Any, Dict, Optional, Tuple

from jsonschema import Draft7Validator, ValidationError

logger = logging.getLogger(__name__)

LISTENER_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "required": ["port", "default_target_group"],
    "properties": {
        "port": {"type": "integer", "minimum": 1, "maximum": 65535},
        "scheme": {"type": "string", "enum": ["HTTP", "HTTPS"]},
        "certificate_arn": {"type": "string", "minLength": 1},
        "ssl_policy": {"type": "string", "minLength": 1},
        "default_target_group": {"type": "string", "minLength": 1},
    },
    "additionalProperties": False,
    "if": {"properties": {"scheme": {"const": "HTTPS"}}, "required": ["scheme"]},
    "then": {"required": ["certificate_arn"]},
}

LISTENER_CONFIG_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "required": ["load_balancer_arn", "listeners"],
    "properties": {
        "load_balancer_arn": {"type": "string", "minLength": 1},
        "target_groups": {
            "type": "object",
            "additionalProperties": {"type": "string"},
        },
        "listeners": {"type": "array", "items": LISTENER_SCHEMA},
    },
}


def validate_listener_config(
    doc: Any, schema: Optional[Dict[str, Any]] = None
) -> Tuple[bool, Optional[str]]:
    """
    Validate a listener configuration document.

    Args:
        doc: The parsed YAML/JSON document
        schema: Schema to validate against (defaults to LISTENER_CONFIG_SCHEMA)

    Returns:
        Tuple of (is_valid, error_message)
    """
    schema = schema or LISTENER_CONFIG_SCHEMA
    try:
        validator = Draft7Validator(schema)
        errors = sorted(
            validator.iter_errors(doc),
            key=lambda e: [str(p) for p in e.absolute_path],
        )

        if not errors:
            return True, None

        # Collect all validation errors
        error_messages = []
        for error in errors:
            path = ".".join(str(p) for p in error.absolute_path) or "(root)"
            error_messages.append(f"{path}: {error.message}")

        return False, "; ".join(error_messages)

    except ValidationError as e:
        return False, f"Validation error: {str(e)}"


def check_listener_references(doc: Dict[str, Any]) -> Tuple[bool, Optional[str]]:
    """
    Cross-field checks the schema cannot express.

    Listeners are unique by port, and every default target group must be
    present in the target group table.
    """
    target_groups = doc.get("target_groups") or {}
    seen = set()
    for i, listener in enumerate(doc.get("listeners", [])):
        port = listener["port"]
        if port in seen:
            return False, f"listeners.{i}.port: duplicate port {port}"
        seen.add(port)

        name = listener["default_target_group"]
        if name not in target_groups:
            return False, (
                f"listeners.{i}.default_target_group: "
                f"unknown target group '{name}'"
            )
    return True, None
