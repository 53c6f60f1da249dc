"""
Record repository.

Sole reader and writer of the collection store. Every operation loads the
full store, changes it in memory and saves it back in one write.

Lock rules:
  - update and delete refuse a locked record
  - update_status, lock and unlock never look at the lock
  - delete_collection refuses if any record is locked, and names them all
  - delete_collection_force ignores locks

Password checks belong to the caller; nothing here verifies one.
"""

from dataclasses import replace
from datetime import datetime
from typing import Any, Callable

from prdman.records.errors import (
    CollectionHasLockedRecordsError,
    DuplicateIdError,
    LockedError,
    NotFoundError,
)
from prdman.records.models import (
    PRD_KIND,
    DeleteResult,
    ImportBatch,
    ImportResult,
    Record,
    RecordInput,
    RecordKind,
    Status,
    utcnow,
)
from prdman.records.storage import CollectionStore, StoreData

# Attributes an update can never change
_PROTECTED_FIELDS = ("id", "created_at", "updated_at", "locked")


class Repository:
    """Collection-keyed record store for one record kind."""

    def __init__(
        self,
        store: CollectionStore,
        kind: RecordKind = PRD_KIND,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.store = store
        self.kind = kind
        self.clock = clock

    def _records(self, data: StoreData, collection_id: str) -> list[Record]:
        return list(data.get(collection_id, []))

    def _index_of(self, records: list[Record], collection_id: str, record_id: str) -> int:
        for i, record in enumerate(records):
            if record.id == record_id:
                return i
        raise NotFoundError(self.kind, collection_id, record_id)

    def _put(self, data: StoreData, collection_id: str, records: list[Record]) -> None:
        """Write a collection back, dropping it once it is empty."""
        if records:
            data[collection_id] = records
        else:
            data.pop(collection_id, None)
        self.store.save(data)

    def create(self, collection_id: str, item: RecordInput) -> Record:
        """Add a new record.

        Raises:
            DuplicateIdError: if the id is already used in this collection
        """
        data = self.store.load()
        records = self._records(data, collection_id)

        if any(r.id == item.id for r in records):
            raise DuplicateIdError(self.kind, collection_id, item.id)

        record = item.to_record(self.clock())
        records.append(record)
        self._put(data, collection_id, records)
        return record

    def update(self, collection_id: str, record_id: str, updates: dict[str, Any]) -> Record:
        """Apply a partial update.

        Each field present in updates replaces the stored value outright
        (lists are replaced, not merged). id, created_at and locked are
        kept regardless of what updates contains.

        Raises:
            NotFoundError: if the record doesn't exist
            LockedError: if the record is locked
        """
        data = self.store.load()
        records = self._records(data, collection_id)
        index = self._index_of(records, collection_id, record_id)

        existing = records[index]
        if existing.locked:
            raise LockedError(self.kind, record_id)

        changes = {k: v for k, v in updates.items() if k not in _PROTECTED_FIELDS}
        for attr in ("steps", "acceptance_criteria"):
            if attr in changes:
                changes[attr] = list(changes[attr])

        updated = replace(existing, **changes, updated_at=self.clock())
        records[index] = updated
        self._put(data, collection_id, records)
        return updated

    def update_status(self, collection_id: str, record_id: str, status: Status) -> Record:
        """Set status. Works on locked records.

        Raises:
            NotFoundError: if the record doesn't exist
        """
        return self._modify(collection_id, record_id, status=status)

    def delete(self, collection_id: str, record_id: str) -> None:
        """Remove a single record.

        Raises:
            NotFoundError: if the record doesn't exist
            LockedError: if the record is locked
        """
        data = self.store.load()
        records = self._records(data, collection_id)
        index = self._index_of(records, collection_id, record_id)

        if records[index].locked:
            raise LockedError(self.kind, record_id)

        del records[index]
        self._put(data, collection_id, records)

    def list_records(self, collection_id: str) -> list[Record]:
        """Records in a collection by ascending priority, ties in insertion order."""
        data = self.store.load()
        return sorted(self._records(data, collection_id), key=lambda r: r.priority)

    def get(self, collection_id: str, record_id: str) -> Record:
        """
        Raises:
            NotFoundError: if the record doesn't exist
        """
        data = self.store.load()
        records = self._records(data, collection_id)
        return records[self._index_of(records, collection_id, record_id)]

    def lock(self, collection_id: str, record_id: str) -> Record:
        """
        Raises:
            NotFoundError: if the record doesn't exist
        """
        return self._modify(collection_id, record_id, locked=True)

    def unlock(self, collection_id: str, record_id: str) -> Record:
        """
        Raises:
            NotFoundError: if the record doesn't exist
        """
        return self._modify(collection_id, record_id, locked=False)

    def _modify(self, collection_id: str, record_id: str, **changes) -> Record:
        data = self.store.load()
        records = self._records(data, collection_id)
        index = self._index_of(records, collection_id, record_id)

        updated = replace(records[index], **changes, updated_at=self.clock())
        records[index] = updated
        self._put(data, collection_id, records)
        return updated

    def list_collections(self) -> list[str]:
        """Collection keys holding at least one record, sorted."""
        data = self.store.load()
        return sorted(key for key, records in data.items() if records)

    def import_batch(self, batch: ImportBatch) -> ImportResult:
        """Add records in order, skipping ids already present.

        An id seen earlier in the same batch counts as present, so the
        first occurrence wins. Saves once at the end.
        """
        data = self.store.load()
        records = self._records(data, batch.collection_id)
        seen = {r.id for r in records}

        created = 0
        skipped = 0
        for item in batch.items:
            if item.id in seen:
                skipped += 1
                continue
            records.append(item.to_record(self.clock()))
            seen.add(item.id)
            created += 1

        self._put(data, batch.collection_id, records)
        return ImportResult(created=created, skipped=skipped)

    def delete_collection(self, collection_id: str) -> DeleteResult:
        """Delete every record in a collection, unless any is locked.

        All or nothing: if one record is locked, nothing is deleted.

        Raises:
            CollectionHasLockedRecordsError: listing every locked id
        """
        data = self.store.load()
        records = self._records(data, collection_id)
        if not records:
            return DeleteResult(deleted=0)

        locked_ids = [r.id for r in records if r.locked]
        if locked_ids:
            raise CollectionHasLockedRecordsError(self.kind, collection_id, locked_ids)

        self._put(data, collection_id, [])
        return DeleteResult(deleted=len(records))

    def delete_collection_force(self, collection_id: str) -> DeleteResult:
        """Delete every record in a collection, locked or not."""
        data = self.store.load()
        records = self._records(data, collection_id)
        if not records:
            return DeleteResult(deleted=0)

        self._put(data, collection_id, [])
        return DeleteResult(deleted=len(records))
