#!/usr/bin/env python3
"""prdman CLI entrypoint."""

import argparse
import logging
import os
import sys
from pathlib import Path

from prdman.lib.config import AppConfig, ConfigError, load_config
from prdman.lib.constants import DEFAULT_HOME, HOME_ENV_VAR, RECORD_ID_PATTERN, STATUSES
from prdman.commands import delete as cmd_delete_module
from prdman.commands import importing as cmd_import_module
from prdman.commands import lock as cmd_lock_module
from prdman.commands import records as cmd_records_module
from prdman.records.models import KINDS
from prdman.records.repository import Repository
from prdman.records.storage import JsonFileStore, StorageError

logger = logging.getLogger(__name__)


def get_base_dir(args) -> Path:
    """Resolve the base directory from --home, $PRDMAN_HOME, or the default."""
    if getattr(args, 'home', None):
        return Path(args.home).expanduser()
    return Path(os.environ.get(HOME_ENV_VAR) or DEFAULT_HOME).expanduser()


def get_context(args) -> tuple[Repository, AppConfig]:
    """Load config and build the repository for the selected kind."""
    config = load_config(get_base_dir(args))

    level = logging.DEBUG if getattr(args, 'verbose', False) else config.log_level
    logging.basicConfig(level=level, stream=sys.stderr, format="%(message)s")

    kind = KINDS[getattr(args, 'kind', None) or config.default_kind]
    store = JsonFileStore(config.data_path(kind.data_file))
    logger.debug(f"Using {kind.name} store at {store.path}")
    return Repository(store, kind), config


def record_id_arg(value: str) -> str:
    if not RECORD_ID_PATTERN.fullmatch(value):
        raise argparse.ArgumentTypeError(f"invalid record ID '{value}' (expected format: XXX-YYYY)")
    return value


def collection_arg(value: str) -> str:
    if not value:
        raise argparse.ArgumentTypeError("collection key must not be empty")
    return value


def cmd_create(args):
    repo, config = get_context(args)
    return cmd_records_module.cmd_create(args, repo, config)


def cmd_update(args):
    repo, config = get_context(args)
    return cmd_records_module.cmd_update(args, repo, config)


def cmd_update_status(args):
    repo, config = get_context(args)
    return cmd_records_module.cmd_update_status(args, repo, config)


def cmd_list(args):
    repo, config = get_context(args)
    return cmd_records_module.cmd_list(args, repo, config)


def cmd_details(args):
    repo, config = get_context(args)
    return cmd_records_module.cmd_details(args, repo, config)


def cmd_delete(args):
    repo, config = get_context(args)
    return cmd_delete_module.cmd_delete(args, repo, config)


def cmd_lock(args):
    repo, config = get_context(args)
    return cmd_lock_module.cmd_lock(args, repo, config)


def cmd_unlock(args):
    repo, config = get_context(args)
    return cmd_lock_module.cmd_unlock(args, repo, config)


def cmd_import(args):
    repo, config = get_context(args)
    return cmd_import_module.cmd_import(args, repo, config)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='prdman', description='PRD Management CLI')
    parser.add_argument('--home', help=f'Base directory (default: ${HOME_ENV_VAR} or {DEFAULT_HOME})')
    parser.add_argument('--kind', '-k', choices=sorted(KINDS), help='Record kind (default from prdman.env, else prd)')
    parser.add_argument('--verbose', '-v', action='store_true', help='Debug logging to stderr')
    subparsers = parser.add_subparsers(dest='command', required=True)

    # prdman create
    p_create = subparsers.add_parser('create', help='Create a new record')
    p_create.add_argument('collection', type=collection_arg, help='Collection key (feature or PRD)')
    p_create.add_argument('json', help='Record as JSON string')
    p_create.set_defaults(func=cmd_create)

    # prdman update
    p_update = subparsers.add_parser('update', help='Update a record (blocked if locked)')
    p_update.add_argument('collection', type=collection_arg, help='Collection key')
    p_update.add_argument('record_id', type=record_id_arg, help='Record ID (format: XXX-YYYY)')
    p_update.add_argument('json', help='Fields to change as JSON string')
    p_update.set_defaults(func=cmd_update)

    # prdman update-status
    p_status = subparsers.add_parser('update-status', help='Update status (ignores lock)')
    p_status.add_argument('collection', type=collection_arg, help='Collection key')
    p_status.add_argument('record_id', type=record_id_arg, help='Record ID (format: XXX-YYYY)')
    p_status.add_argument('status', help=f"New status ({', '.join(STATUSES)})")
    p_status.set_defaults(func=cmd_update_status)

    # prdman delete
    p_delete = subparsers.add_parser('delete', help='Delete a record or entire collection (blocked if locked)')
    p_delete.add_argument('collection', type=collection_arg, help='Collection key')
    p_delete.add_argument('record_id', nargs='?', type=record_id_arg,
                          help='Record ID - if omitted, deletes entire collection')
    p_delete.add_argument('--password', '-p', help='Password to force deletion of locked records')
    p_delete.add_argument('--yes', '-y', action='store_true', help='Skip confirmation prompt')
    p_delete.set_defaults(func=cmd_delete)

    # prdman list
    p_list = subparsers.add_parser('list', help='List records by priority (or collections if none given)')
    p_list.add_argument('collection', nargs='?', help='Collection key')
    p_list.set_defaults(func=cmd_list)

    # prdman details
    p_details = subparsers.add_parser('details', help='Show details of a record')
    p_details.add_argument('collection', type=collection_arg, help='Collection key')
    p_details.add_argument('record_id', type=record_id_arg, help='Record ID (format: XXX-YYYY)')
    p_details.set_defaults(func=cmd_details)

    # prdman lock / unlock
    for name, func, verb in (('lock', cmd_lock, 'Lock'), ('unlock', cmd_unlock, 'Unlock')):
        p = subparsers.add_parser(name, help=f'{verb} a record (requires password)')
        p.add_argument('collection', type=collection_arg, help='Collection key')
        p.add_argument('record_id', type=record_id_arg, help='Record ID (format: XXX-YYYY)')
        p.add_argument('--password', '-p', required=True, help='Password for lock/unlock operations')
        p.set_defaults(func=func)

    # prdman import
    p_import = subparsers.add_parser('import', help='Import records from a JSON file')
    p_import.add_argument('file_path', help='Path to JSON file to import')
    p_import.set_defaults(func=cmd_import)

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        return args.func(args)
    except (ConfigError, StorageError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2


if __name__ == '__main__':
    sys.exit(main())
