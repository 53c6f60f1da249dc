"""
prdman import - bulk-load records from a JSON file.
"""

import sys
from pathlib import Path

from prdman.lib.config import AppConfig
from prdman.records.decode import import_file_help, parse_import_file
from prdman.records.errors import InvalidInputError
from prdman.records.repository import Repository


def cmd_import(args, repo: Repository, config: AppConfig) -> int:
    """Import records; ids already present are skipped, not errors."""
    kind = repo.kind
    path = Path(args.file_path)

    try:
        content = path.read_text()
    except (OSError, UnicodeDecodeError):
        error = InvalidInputError(kind, f"Failed to read file: {path}")
        print(f"ERROR: {error}\n\n{import_file_help(kind)}", file=sys.stderr)
        return 2

    try:
        batch = parse_import_file(content, kind)
    except InvalidInputError as e:
        print(f"ERROR: {e}\n\n{import_file_help(kind)}", file=sys.stderr)
        return 2

    result = repo.import_batch(batch)

    print(f"Imported {kind.plural} for {kind.collection_noun}: {batch.collection_id}")
    print(f"  Created: {result.created}")
    print(f"  Skipped (duplicate IDs): {result.skipped}")
    return 0
