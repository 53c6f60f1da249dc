"""
Error kinds raised by the record repository, the password verifier and
the input decoders.

Every error carries enough context to build a user-facing message; the
message itself is the exception's str().
"""

from pathlib import Path

from prdman.records.models import RecordKind


class RecordError(Exception):
    """Base class for expected, user-facing failures."""


class NotFoundError(RecordError):
    """No record with the given id exists in the collection."""

    def __init__(self, kind: RecordKind, collection_id: str, record_id: str):
        self.kind = kind
        self.collection_id = collection_id
        self.record_id = record_id
        super().__init__(
            f"{kind.title} '{record_id}' not found in {kind.collection_noun} '{collection_id}'"
        )


class LockedError(RecordError):
    """The target record is locked."""

    def __init__(self, kind: RecordKind, record_id: str):
        self.kind = kind
        self.record_id = record_id
        super().__init__(f"{kind.title} '{record_id}' is locked. Use 'unlock' command first.")


class DuplicateIdError(RecordError):
    """A record with this id already exists in the collection."""

    def __init__(self, kind: RecordKind, collection_id: str, record_id: str):
        self.kind = kind
        self.collection_id = collection_id
        self.record_id = record_id
        super().__init__(
            f"{kind.title} with ID '{record_id}' already exists in "
            f"{kind.collection_noun} '{collection_id}'"
        )


class CollectionHasLockedRecordsError(RecordError):
    """Collection deletion refused: some records are locked."""

    def __init__(self, kind: RecordKind, collection_id: str, locked_ids: list[str]):
        self.kind = kind
        self.collection_id = collection_id
        self.locked_ids = list(locked_ids)
        super().__init__(
            f"Cannot delete {kind.collection_noun} '{collection_id}': "
            f"{len(self.locked_ids)} {kind.count_noun}(s) are locked: "
            f"[{', '.join(self.locked_ids)}]. Use --password to force."
        )


class InvalidPasswordError(RecordError):
    def __init__(self):
        super().__init__("Invalid password")


class PasswordNotConfiguredError(RecordError):
    def __init__(self, password_path: Path):
        self.password_path = password_path
        super().__init__(f"Password not configured. Please create {password_path} file.")


class InvalidInputError(RecordError):
    """Record JSON failed to decode or validate."""

    def __init__(self, kind: RecordKind, reason: str):
        self.kind = kind
        self.reason = reason
        super().__init__(f"Invalid {kind.noun} input: {reason}")
