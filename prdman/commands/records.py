"""
prdman create / update / update-status / list / details.
"""

import sys

from prdman.lib.config import AppConfig
from prdman.lib.constants import STATUSES
from prdman.commands.formatting import (
    format_record_detail,
    format_record_line,
    upper_first,
)
from prdman.records.decode import input_help, parse_record_input, parse_record_patch
from prdman.records.errors import InvalidInputError, RecordError
from prdman.records.models import parse_status
from prdman.records.repository import Repository


def cmd_create(args, repo: Repository, config: AppConfig) -> int:
    """Create a record from a JSON argument."""
    kind = repo.kind
    try:
        item = parse_record_input(args.json, kind)
    except InvalidInputError as e:
        print(f"ERROR: {e}\n\n{input_help(kind)}", file=sys.stderr)
        return 2

    try:
        record = repo.create(args.collection, item)
    except RecordError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    print(f"Created {kind.noun}: {record.id}")
    print(format_record_detail(record))
    return 0


def cmd_update(args, repo: Repository, config: AppConfig) -> int:
    """Apply a partial JSON update. Refused for locked records."""
    kind = repo.kind
    try:
        updates = parse_record_patch(args.json, kind)
    except InvalidInputError as e:
        print(f"ERROR: {e}\n\n{input_help(kind)}", file=sys.stderr)
        return 2

    if list(updates) == ["status"]:
        print("Tip: Use 'update-status' command to update status (bypasses lock check)")

    try:
        record = repo.update(args.collection, args.record_id, updates)
    except RecordError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    print(f"Updated {kind.noun}: {record.id}")
    print(format_record_detail(record))
    return 0


def cmd_update_status(args, repo: Repository, config: AppConfig) -> int:
    """Set status only. Works on locked records."""
    status = parse_status(args.status)
    if status is None:
        print(f"ERROR: Unknown status '{args.status}' (expected one of: {', '.join(STATUSES)})", file=sys.stderr)
        return 2

    try:
        record = repo.update_status(args.collection, args.record_id, status)
    except RecordError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    print(f"Updated status of {record.id} to: {status.value}")
    return 0


def cmd_list(args, repo: Repository, config: AppConfig) -> int:
    """List records in a collection, or the collections themselves."""
    kind = repo.kind
    collection = getattr(args, "collection", None)

    if not collection:
        collections = repo.list_collections()
        if not collections:
            print(f"No {kind.collection_plural} found")
            return 0

        print(f"{upper_first(kind.collection_plural)}:")
        print()
        for key in collections:
            print(f"  {key}")
        return 0

    records = repo.list_records(collection)
    if not records:
        print(f"No {kind.plural} found for {kind.collection_noun}: {collection}")
        return 0

    print(f"{upper_first(kind.plural)} for {kind.collection_noun}: {collection}")
    print()
    for record in records:
        print(format_record_line(record))
    return 0


def cmd_details(args, repo: Repository, config: AppConfig) -> int:
    """Show one record in full."""
    try:
        record = repo.get(args.collection, args.record_id)
    except RecordError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    print(format_record_detail(record))
    return 0
