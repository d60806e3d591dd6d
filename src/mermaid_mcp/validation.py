"""
Input validation for Mermaid MCP tool arguments.

Provides reusable primitive validators that produce clear error messages,
plus a schema-driven validator that checks a tool's ``arguments`` mapping
against the JSON-schema subset used by the tool registry and collects every
violation instead of stopping at the first one.
"""

from __future__ import annotations

from typing import Any

from mermaid_mcp.errors import SchemaError


# ---------------------------------------------------------------------------
# Validation result
# ---------------------------------------------------------------------------

class ValidationError(Exception):
    """Raised when a single value fails validation."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


# ---------------------------------------------------------------------------
# Primitive validators
# ---------------------------------------------------------------------------

def validate_non_empty_string(value: Any, field_name: str) -> str:
    """Ensure *value* is a non-empty string after stripping whitespace."""
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"'{field_name}' must be a non-empty string.")
    return value.strip()


def validate_string(value: Any, field_name: str, *, allow_empty: bool = True) -> str:
    """Ensure *value* is a string (optionally non-empty)."""
    if not isinstance(value, str):
        raise ValidationError(f"'{field_name}' must be a string, got {type(value).__name__}.")
    if not allow_empty and not value.strip():
        raise ValidationError(f"'{field_name}' must not be empty.")
    return value


def validate_enum(value: Any, field_name: str, allowed: list[str]) -> str:
    """Validate that a string value is exactly one of the allowed choices."""
    if not isinstance(value, str):
        raise ValidationError(
            f"'{field_name}' must be a string, got {type(value).__name__}."
        )
    if value not in allowed:
        choices = ", ".join(allowed)
        raise ValidationError(
            f"'{field_name}' must be one of [{choices}], got '{value}'."
        )
    return value


def validate_dict(value: Any, field_name: str) -> dict:
    """Ensure *value* is a dict."""
    if not isinstance(value, dict):
        raise ValidationError(
            f"'{field_name}' must be a dict/object, got {type(value).__name__}."
        )
    return value


# ---------------------------------------------------------------------------
# Schema validation
# ---------------------------------------------------------------------------

def _validate_property(value: Any, name: str, prop_schema: dict[str, Any]) -> Any:
    """Validate one property value against its schema entry."""
    if prop_schema.get("type") == "string":
        if "enum" in prop_schema:
            return validate_enum(value, name, list(prop_schema["enum"]))
        if prop_schema.get("minLength", 0) > 0:
            # Blank-only values are rejected, but the original value is kept.
            validate_non_empty_string(value, name)
            return value
        return validate_string(value, name)
    return value


def validate_arguments(arguments: Any, schema: dict[str, Any]) -> dict[str, Any]:
    """Validate *arguments* against an object *schema*.

    Supports ``properties`` with ``type: string`` plus ``enum`` and
    ``minLength``, and the ``required`` list.  Unknown keys are dropped.

    Returns the cleaned arguments.  Raises :class:`SchemaError` listing every
    ``{"path", "message"}`` violation.
    """
    if arguments is None:
        arguments = {}
    try:
        validate_dict(arguments, "arguments")
    except ValidationError as exc:
        raise SchemaError([{"path": "arguments", "message": exc.message}]) from exc

    properties: dict[str, Any] = schema.get("properties", {})
    required = set(schema.get("required", []))
    violations: list[dict[str, str]] = []
    cleaned: dict[str, Any] = {}

    for name, prop_schema in properties.items():
        if name not in arguments or arguments[name] is None:
            if name in required:
                violations.append({"path": name, "message": f"'{name}' is required."})
            continue
        try:
            cleaned[name] = _validate_property(arguments[name], name, prop_schema)
        except ValidationError as exc:
            violations.append({"path": name, "message": exc.message})

    if violations:
        raise SchemaError(violations)
    return cleaned
