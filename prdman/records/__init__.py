"""
Records module for prdman.

Holds the record model, the collection-keyed repository that enforces
lock rules, boundary decoding, and the persistence adapters.
"""

from prdman.records.models import (
    KINDS,
    PRD_KIND,
    STORY_KIND,
    DeleteResult,
    ImportBatch,
    ImportResult,
    Record,
    RecordInput,
    RecordKind,
    Status,
)
from prdman.records.errors import (
    CollectionHasLockedRecordsError,
    DuplicateIdError,
    InvalidInputError,
    InvalidPasswordError,
    LockedError,
    NotFoundError,
    PasswordNotConfiguredError,
    RecordError,
)
from prdman.records.repository import Repository
from prdman.records.storage import JsonFileStore, MemoryStore, StorageError

__all__ = [
    "KINDS",
    "PRD_KIND",
    "STORY_KIND",
    "DeleteResult",
    "ImportBatch",
    "ImportResult",
    "Record",
    "RecordInput",
    "RecordKind",
    "Status",
    "CollectionHasLockedRecordsError",
    "DuplicateIdError",
    "InvalidInputError",
    "InvalidPasswordError",
    "LockedError",
    "NotFoundError",
    "PasswordNotConfiguredError",
    "RecordError",
    "Repository",
    "JsonFileStore",
    "MemoryStore",
    "StorageError",
]
