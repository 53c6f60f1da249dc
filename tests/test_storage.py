"""Tests for prdman.records.storage module."""

import json
import pytest
from datetime import datetime, timezone

from prdman.records.models import PRD_KIND, Record, RecordInput, Status
from prdman.records.repository import Repository
from prdman.records.storage import (
    JsonFileStore,
    MemoryStore,
    StorageError,
    decode_store,
    encode_store,
)


def sample_record(record_id="AUTH-0001", **overrides):
    now = datetime(2026, 3, 4, 5, 6, 7, 123456, tzinfo=timezone.utc)
    fields = dict(
        id=record_id,
        priority=1,
        name="Login",
        description="Implement login",
        steps=["Form", "Submit"],
        status=Status.TODO,
        created_at=now,
        updated_at=now,
    )
    fields.update(overrides)
    return Record(**fields)


class TestJsonFileStoreLoad:
    def test_missing_file_is_empty(self, tmp_path):
        assert JsonFileStore(tmp_path / "data.json").load() == {}

    def test_blank_file_is_empty(self, tmp_path):
        path = tmp_path / "data.json"
        path.write_text("")
        assert JsonFileStore(path).load() == {}

        path.write_text("  \n\t")
        assert JsonFileStore(path).load() == {}

    def test_corrupt_json_raises(self, tmp_path):
        path = tmp_path / "data.json"
        path.write_text("{not json")

        with pytest.raises(StorageError, match="Corrupt store"):
            JsonFileStore(path).load()

    def test_schema_mismatch_raises(self, tmp_path):
        path = tmp_path / "data.json"
        path.write_text(json.dumps({"AUTH": [{"id": "AUTH-0001"}]}))

        with pytest.raises(StorageError, match="Invalid store"):
            JsonFileStore(path).load()

    def test_bad_timestamp_raises(self, tmp_path):
        raw = encode_store({"AUTH": [sample_record()]})
        raw["AUTH"][0]["createdAt"] = "yesterday"
        path = tmp_path / "data.json"
        path.write_text(json.dumps(raw))

        with pytest.raises(StorageError):
            JsonFileStore(path).load()

    def test_invalid_utf8_raises(self, tmp_path):
        path = tmp_path / "data.json"
        path.write_bytes(b'{"AUTH": [\xff\xfe]}')

        with pytest.raises(StorageError, match="Failed to read"):
            JsonFileStore(path).load()

    def test_nan_priority_raises(self, tmp_path):
        raw = encode_store({"AUTH": [sample_record()]})
        text = json.dumps(raw).replace('"priority": 1', '"priority": NaN')
        path = tmp_path / "data.json"
        path.write_text(text)

        with pytest.raises(StorageError, match="Invalid value in store"):
            JsonFileStore(path).load()

    def test_reads_zulu_timestamps_and_defaults(self, tmp_path):
        path = tmp_path / "data.json"
        path.write_text(json.dumps({
            "AUTH": [{
                "id": "AUTH-0001",
                "priority": 1,
                "name": "Login",
                "description": "",
                "steps": [],
                "status": "sent-back",
                "createdAt": "2024-01-02T03:04:05.678Z",
                "updatedAt": "2024-01-02T03:04:05.678Z",
            }]
        }))

        record = JsonFileStore(path).load()["AUTH"][0]

        assert record.created_at == datetime(2024, 1, 2, 3, 4, 5, 678000, tzinfo=timezone.utc)
        assert record.locked is False
        assert record.acceptance_criteria == []
        assert record.note is None
        assert record.status == Status.SENT_BACK


class TestJsonFileStoreSave:
    def test_creates_parent_dirs(self, tmp_path):
        path = tmp_path / "nested" / "dir" / "data.json"

        JsonFileStore(path).save({"AUTH": [sample_record()]})

        assert path.exists()

    def test_writes_camel_case_json(self, tmp_path):
        path = tmp_path / "data.json"

        JsonFileStore(path).save({"AUTH": [sample_record(note="n", locked=True)]})

        raw = json.loads(path.read_text())
        item = raw["AUTH"][0]
        assert item["acceptanceCriteria"] == []
        assert item["createdAt"] == "2026-03-04T05:06:07.123456+00:00"
        assert item["locked"] is True
        assert item["note"] == "n"

    def test_omits_missing_note(self, tmp_path):
        path = tmp_path / "data.json"

        JsonFileStore(path).save({"AUTH": [sample_record()]})

        assert "note" not in json.loads(path.read_text())["AUTH"][0]

    def test_leaves_no_temp_files(self, tmp_path):
        path = tmp_path / "data.json"
        store = JsonFileStore(path)

        store.save({"AUTH": [sample_record()]})
        store.save({})

        assert [p.name for p in tmp_path.iterdir()] == ["data.json"]

    def test_refuses_invalid_data(self, tmp_path):
        path = tmp_path / "data.json"

        with pytest.raises(StorageError, match="Refusing to write"):
            JsonFileStore(path).save({"AUTH": [sample_record(name="")]})

        assert not path.exists()


class TestRoundTrip:
    def test_save_load_is_identity(self, tmp_path):
        store = JsonFileStore(tmp_path / "data.json")
        repo = Repository(store, PRD_KIND)
        repo.create("AUTH", RecordInput("AUTH-0001", 2, "A", "", ["s"], Status.TODO, ["c"], "note"))
        repo.create("AUTH", RecordInput("AUTH-0002", 1.5, "B", "d", [], Status.DONE))
        repo.create("BILLING", RecordInput("BILL-0001", 1, "C", "", [], Status.SENT_BACK))
        repo.lock("AUTH", "AUTH-0002")
        repo.update("AUTH", "AUTH-0001", {"steps": []})

        loaded = store.load()
        store.save(loaded)

        assert store.load() == loaded

    def test_encode_decode(self):
        data = {"AUTH": [sample_record(), sample_record("AUTH-0002", locked=True)]}
        assert decode_store(encode_store(data)) == data


class TestMemoryStore:
    def test_starts_empty(self):
        assert MemoryStore().load() == {}

    def test_snapshot_isolation(self):
        store = MemoryStore()
        data = {"AUTH": [sample_record()]}
        store.save(data)

        data["AUTH"][0].name = "changed"
        loaded = store.load()
        loaded["AUTH"].clear()

        assert store.load()["AUTH"][0].name == "Login"

    def test_clear(self):
        store = MemoryStore({"AUTH": [sample_record()]})
        store.clear()
        assert store.load() == {}
