"""
JSON Schema checks for prdman documents.

Three kinds of document are checked: record JSON typed on the command
line, import files, and the store file itself (on load and before every
save). Schemas live next to the package as prdman/schemas/<name>.schema.json.

Only strict JSON is accepted: NaN and Infinity are rejected while parsing,
since the schemas cannot tell them apart from real numbers.
"""

import json
from pathlib import Path
from typing import Any

import jsonschema

SCHEMAS_DIR = Path(__file__).parent.parent / "schemas"

_schemas: dict[str, dict] = {}


class ValidationError(Exception):
    """A document does not match its schema (or is not JSON at all)."""

    def __init__(self, schema_name: str, message: str, path: str = None):
        self.schema_name = schema_name
        self.message = message
        self.path = path
        where = f" at {path}" if path else ""
        super().__init__(f"[{schema_name}] {message}{where}")


def _schema(schema_name: str) -> dict:
    schema = _schemas.get(schema_name)
    if schema is None:
        schema_path = SCHEMAS_DIR / f"{schema_name}.schema.json"
        if not schema_path.exists():
            raise ValidationError(schema_name, f"No schema file at {schema_path}")
        schema = _schemas[schema_name] = json.loads(schema_path.read_text())
    return schema


def reject_constant(name: str):
    """parse_constant hook for json.loads: refuse NaN, Infinity and -Infinity."""
    raise ValueError(f"{name} is not a valid JSON number")


def validate(data: Any, schema_name: str) -> None:
    """
    Check a decoded value against the named schema.

    Raises:
        ValidationError: with the failing location as a dotted path
    """
    try:
        jsonschema.validate(instance=data, schema=_schema(schema_name))
    except jsonschema.ValidationError as e:
        location = ".".join(str(p) for p in e.absolute_path) or "(root)"
        raise ValidationError(schema_name, e.message, location) from None


def validate_json(text: str, schema_name: str) -> Any:
    """
    Parse strict JSON text, check it, and return the decoded value.

    Raises:
        ValidationError: if the text is not JSON or doesn't match
    """
    try:
        data = json.loads(text, parse_constant=reject_constant)
    except ValueError as e:
        # JSONDecodeError, or a NaN/Infinity literal
        raise ValidationError(schema_name, f"Invalid JSON: {e}") from None

    validate(data, schema_name)
    return data


def validate_before_write(data: Any, schema_name: str, filepath: Path) -> None:
    """
    Check data that is about to be written to filepath.

    Raises:
        ValidationError: if it doesn't match; nothing should be written
    """
    try:
        validate(data, schema_name)
    except ValidationError as e:
        raise ValidationError(
            schema_name,
            f"Refusing to write invalid data to {filepath}: {e}"
        ) from None
