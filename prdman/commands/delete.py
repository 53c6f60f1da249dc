"""
prdman delete - remove one record, or a whole collection.

Collection deletion lists what will go, refuses while any record is
locked unless --password is given and correct, and asks for
confirmation unless --yes.
"""

import logging
import sys

from prdman.lib.config import AppConfig
from prdman.lib.password import PasswordVerifier
from prdman.commands.formatting import format_deletion_line
from prdman.records.errors import CollectionHasLockedRecordsError, RecordError
from prdman.records.repository import Repository

logger = logging.getLogger(__name__)


def _confirm(message: str) -> bool:
    try:
        response = input(f"{message} [y/N]: ").strip().lower()
    except (EOFError, KeyboardInterrupt):
        print()
        return False
    return response in ('y', 'yes')


def cmd_delete(args, repo: Repository, config: AppConfig) -> int:
    """Delete a record, or every record in a collection if no id given."""
    kind = repo.kind
    collection = args.collection

    if args.record_id:
        try:
            repo.delete(collection, args.record_id)
        except RecordError as e:
            print(f"ERROR: {e}", file=sys.stderr)
            return 1
        print(f"Deleted {kind.noun}: {args.record_id}")
        return 0

    records = repo.list_records(collection)
    if not records:
        print(f"No {kind.plural} found for {kind.collection_noun} '{collection}'")
        return 0

    locked_ids = [r.id for r in records if r.locked]

    print(f"The following {len(records)} {kind.count_noun}(s) will be deleted:")
    print()
    for record in records:
        print(format_deletion_line(record))
    print()

    if locked_ids and args.password is None:
        print(f"ERROR: {CollectionHasLockedRecordsError(kind, collection, locked_ids)}", file=sys.stderr)
        return 1

    if locked_ids:
        try:
            PasswordVerifier(config.password_path).verify(args.password)
        except RecordError as e:
            print(f"ERROR: {e}", file=sys.stderr)
            return 1

    if not args.yes:
        question = (
            f"Are you sure you want to delete all {len(records)} {kind.count_noun}(s) "
            f"from {kind.collection_noun} '{collection}'?"
        )
        if not _confirm(question):
            print("Deletion cancelled.")
            return 1

    try:
        if locked_ids:
            logger.info(f"Force deleting {collection} with locked: {', '.join(locked_ids)}")
            result = repo.delete_collection_force(collection)
        else:
            result = repo.delete_collection(collection)
    except RecordError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    print(f"Deleted {result.deleted} {kind.count_noun}(s) from {kind.collection_noun} '{collection}'")
    return 0
