"""
Persistence for the collection store.

The whole store (collection key -> list of records) is loaded and saved
as a unit. The repository only depends on the CollectionStore protocol,
so the backing can be a JSON file or memory.

No file locking: two processes writing the same file race and the last
writer wins.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Protocol

from prdman.lib.validate import (
    ValidationError,
    reject_constant,
    validate,
    validate_before_write,
)
from prdman.records.models import Record

logger = logging.getLogger(__name__)

StoreData = dict[str, list[Record]]


class StorageError(Exception):
    """The store could not be read or written. Not recoverable."""


class CollectionStore(Protocol):
    def load(self) -> StoreData:
        ...

    def save(self, data: StoreData) -> None:
        ...


def encode_store(data: StoreData) -> dict:
    return {key: [record.to_dict() for record in records] for key, records in data.items()}


def decode_store(raw: dict) -> StoreData:
    return {key: [Record.from_dict(item) for item in items] for key, items in raw.items()}


class JsonFileStore:
    """Store backed by a single JSON file."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> StoreData:
        """Load the store. A missing or blank file is an empty store.

        Raises:
            StorageError: if the file can't be read or is invalid
        """
        if not self.path.exists():
            logger.debug(f"No store at {self.path}, starting empty")
            return {}

        try:
            content = self.path.read_text()
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(f"Failed to read {self.path}: {e}") from e

        if content.strip() == "":
            return {}

        try:
            raw = json.loads(content, parse_constant=reject_constant)
            validate(raw, "store")
            data = decode_store(raw)
        except json.JSONDecodeError as e:
            raise StorageError(f"Corrupt store {self.path}: {e}") from e
        except ValidationError as e:
            raise StorageError(f"Invalid store {self.path}: {e}") from e
        except ValueError as e:
            # Bad timestamp, status, or a NaN/Infinity literal
            raise StorageError(f"Invalid value in store {self.path}: {e}") from e

        logger.debug(f"Loaded {sum(len(v) for v in data.values())} record(s) from {self.path}")
        return data

    def save(self, data: StoreData) -> None:
        """Replace the file with the given store.

        Writes to a temp file in the same directory, then renames over
        the target so readers never see a partial file.

        Raises:
            StorageError: if the data is invalid or the write fails
        """
        raw = encode_store(data)
        try:
            validate_before_write(raw, "store", self.path)
        except ValidationError as e:
            raise StorageError(str(e)) from e

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w") as f:
                    json.dump(raw, f, indent=2)
                    f.write("\n")
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StorageError(f"Failed to write {self.path}: {e}") from e

        logger.debug(f"Saved {len(raw)} collection(s) to {self.path}")


class MemoryStore:
    """Store kept in memory as a serialized snapshot.

    Callers never share objects with stored state, same as the file store.
    """

    def __init__(self, data: StoreData | None = None):
        self._raw: dict = encode_store(data or {})

    def load(self) -> StoreData:
        return decode_store(json.loads(json.dumps(self._raw)))

    def save(self, data: StoreData) -> None:
        self._raw = json.loads(json.dumps(encode_store(data)))

    def clear(self) -> None:
        self._raw = {}
