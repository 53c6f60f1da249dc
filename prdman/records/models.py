"""
Data models for prdman records.

A record is a small tracked item (a PRD item or a story) stored under a
collection key. RecordKind describes the nouns a given flavour of record
uses so one repository can serve both.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional


class Status(Enum):
    """Record status. Any status may move to any other."""

    TODO = "todo"
    DONE = "done"
    SENT_BACK = "sent-back"


def parse_status(value: str | None) -> Status | None:
    """Parse a status string into Status.

    Returns None if status is unknown.
    """
    if value is None:
        return None
    for status in Status:
        if status.value == value:
            return status
    return None


@dataclass(frozen=True)
class RecordKind:
    """Naming for one flavour of record."""
    name: str               # "prd", "story"
    noun: str               # "PRD item", "story"
    plural: str             # "PRD items", "stories"
    count_noun: str         # used as "<count_noun>(s)"
    collection_noun: str    # "feature", "PRD"
    collection_plural: str  # "features", "PRDs"
    data_file: str          # file name under the base directory

    @property
    def title(self) -> str:
        return self.noun[0].upper() + self.noun[1:]


PRD_KIND = RecordKind(
    name="prd",
    noun="PRD item",
    plural="PRD items",
    count_noun="PRD",
    collection_noun="feature",
    collection_plural="features",
    data_file="data.json",
)

STORY_KIND = RecordKind(
    name="story",
    noun="story",
    plural="stories",
    count_noun="story",
    collection_noun="PRD",
    collection_plural="PRDs",
    data_file="stories.json",
)

KINDS = {kind.name: kind for kind in (PRD_KIND, STORY_KIND)}


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(value: datetime) -> str:
    return value.isoformat()


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp, accepting a trailing 'Z'."""
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)


@dataclass
class Record:
    """A stored record with its bookkeeping fields."""
    id: str                                    # AUTH-0001
    priority: float                            # display order, ascending
    name: str
    description: str
    steps: list[str]
    status: Status
    created_at: datetime
    updated_at: datetime
    acceptance_criteria: list[str] = field(default_factory=list)
    note: Optional[str] = None
    locked: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Serialize using the on-disk (camelCase) field names."""
        data = {
            "id": self.id,
            "priority": self.priority,
            "name": self.name,
            "description": self.description,
            "steps": list(self.steps),
            "acceptanceCriteria": list(self.acceptance_criteria),
            "status": self.status.value,
        }
        if self.note is not None:
            data["note"] = self.note
        data["createdAt"] = format_timestamp(self.created_at)
        data["updatedAt"] = format_timestamp(self.updated_at)
        data["locked"] = self.locked
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Record":
        return cls(
            id=data["id"],
            priority=data["priority"],
            name=data["name"],
            description=data["description"],
            steps=list(data["steps"]),
            status=Status(data["status"]),
            created_at=parse_timestamp(data["createdAt"]),
            updated_at=parse_timestamp(data["updatedAt"]),
            acceptance_criteria=list(data.get("acceptanceCriteria", [])),
            note=data.get("note"),
            locked=data.get("locked", False),
        )


@dataclass
class RecordInput:
    """User-supplied fields for a new record."""
    id: str
    priority: float
    name: str
    description: str
    steps: list[str]
    status: Status
    acceptance_criteria: list[str] = field(default_factory=list)
    note: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RecordInput":
        return cls(
            id=data["id"],
            priority=data["priority"],
            name=data["name"],
            description=data["description"],
            steps=list(data["steps"]),
            status=Status(data["status"]),
            acceptance_criteria=list(data.get("acceptanceCriteria", [])),
            note=data.get("note"),
        )

    def to_record(self, now: datetime) -> Record:
        """Stamp a new, unlocked record."""
        return Record(
            id=self.id,
            priority=self.priority,
            name=self.name,
            description=self.description,
            steps=list(self.steps),
            status=self.status,
            created_at=now,
            updated_at=now,
            acceptance_criteria=list(self.acceptance_criteria),
            note=self.note,
            locked=False,
        )


# Fields a partial update may carry, keyed by on-disk name
PATCH_FIELDS = {
    "priority": "priority",
    "name": "name",
    "description": "description",
    "steps": "steps",
    "acceptanceCriteria": "acceptance_criteria",
    "status": "status",
    "note": "note",
}


@dataclass
class ImportBatch:
    """Records to import into a single collection."""
    collection_id: str
    items: list[RecordInput] = field(default_factory=list)


@dataclass
class ImportResult:
    created: int
    skipped: int


@dataclass
class DeleteResult:
    deleted: int
