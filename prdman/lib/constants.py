"""Shared constants for prdman."""

import re

# Record IDs: uppercase prefix, hyphen, four digits (e.g. AUTH-0001).
# Always checked with fullmatch; a trailing newline is not an ID.
RECORD_ID_PATTERN = re.compile(r'[A-Z]+-[0-9]{4}')

STATUSES = ("todo", "done", "sent-back")

DEFAULT_HOME = "~/.config/prdman"
HOME_ENV_VAR = "PRDMAN_HOME"
CONFIG_FILENAME = "prdman.env"
DEFAULT_PASSWORD_FILE = "password"
