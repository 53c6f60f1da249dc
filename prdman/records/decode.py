"""
Boundary decoding: JSON text from the command line or an import file
into typed record values.

Validation happens here, once. The repository trusts what it is given.
"""

from typing import Any

from prdman.lib.validate import ValidationError, validate_json
from prdman.records.errors import InvalidInputError
from prdman.records.models import (
    PATCH_FIELDS,
    ImportBatch,
    RecordInput,
    RecordKind,
    Status,
)


def _decode(text: str, schema_name: str, kind: RecordKind) -> Any:
    try:
        return validate_json(text, schema_name)
    except ValidationError as e:
        reason = e.message + (f" at {e.path}" if e.path else "")
        raise InvalidInputError(kind, reason) from None


def parse_record_input(text: str, kind: RecordKind) -> RecordInput:
    """Decode a full record from JSON.

    Raises:
        InvalidInputError: if the JSON is malformed or doesn't match
    """
    return RecordInput.from_dict(_decode(text, "record_input", kind))


def parse_record_patch(text: str, kind: RecordKind) -> dict[str, Any]:
    """Decode a partial update from JSON.

    Returns a dict of only the fields present, keyed by Record attribute
    name. An explicit empty list is kept (it clears the field on update);
    an omitted field is absent. Unknown keys and 'id' are dropped.

    Raises:
        InvalidInputError: if the JSON is malformed or doesn't match
    """
    data = _decode(text, "record_patch", kind)

    updates = {}
    for key, attr in PATCH_FIELDS.items():
        if key in data:
            updates[attr] = data[key]

    if "status" in updates:
        updates["status"] = Status(updates["status"])
    for attr in ("steps", "acceptance_criteria"):
        if attr in updates:
            updates[attr] = list(updates[attr])

    return updates


def parse_import_file(text: str, kind: RecordKind) -> ImportBatch:
    """Decode an import file: {"id": <collection>, "items": [...]}.

    Raises:
        InvalidInputError: if the JSON is malformed or doesn't match
    """
    data = _decode(text, "import_file", kind)
    return ImportBatch(
        collection_id=data["id"],
        items=[RecordInput.from_dict(item) for item in data["items"]],
    )


def input_help(kind: RecordKind) -> str:
    """Describe the expected record JSON."""
    return f"""
Expected {kind.title} structure:
{{
  "id": "XXX-YYYY",              // required, e.g., "AUTH-0001"
  "priority": 1,                 // required, number
  "name": "{kind.title} name",  // required, string
  "description": "Details...",   // required, string
  "steps": ["Step 1", "Step 2"], // required, string[]
  "acceptanceCriteria": ["..."], // optional, string[]
  "status": "todo",              // required: "todo" | "done" | "sent-back"
  "note": "..."                  // optional, string
}}
""".strip()


def import_file_help(kind: RecordKind) -> str:
    """Describe the expected import file."""
    return f"""
Expected import file structure:
{{
  "id": "{kind.collection_noun.lower()}-id",  // required, {kind.collection_noun} to import into
  "items": [                 // required, array of {kind.noun} objects
    {{
      "id": "XXX-YYYY",
      "priority": 1,
      "name": "{kind.title} name",
      "description": "Details...",
      "steps": ["Step 1", "Step 2"],
      "acceptanceCriteria": ["..."],  // optional
      "status": "todo",
      "note": "..."                   // optional
    }}
  ]
}}
""".strip()
