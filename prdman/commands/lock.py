"""
prdman lock / unlock - password-gated lock flag changes.
"""

import sys

from prdman.lib.config import AppConfig
from prdman.lib.password import PasswordVerifier
from prdman.records.errors import RecordError
from prdman.records.repository import Repository


def cmd_lock(args, repo: Repository, config: AppConfig) -> int:
    """Lock a record. Locked records refuse update and delete."""
    try:
        PasswordVerifier(config.password_path).verify(args.password)
        repo.lock(args.collection, args.record_id)
    except RecordError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    print(f"Locked {repo.kind.noun}: {args.record_id}")
    return 0


def cmd_unlock(args, repo: Repository, config: AppConfig) -> int:
    """Unlock a record."""
    try:
        PasswordVerifier(config.password_path).verify(args.password)
        repo.unlock(args.collection, args.record_id)
    except RecordError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    print(f"Unlocked {repo.kind.noun}: {args.record_id}")
    return 0
