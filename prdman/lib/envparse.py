"""
Safe .env file parser for prdman.env.

Reads KEY=value lines without shell execution. Values containing
shell syntax are rejected outright rather than interpreted.
"""

import re
from pathlib import Path

FORBIDDEN_PATTERNS = [
    r'`',           # backticks
    r'\$\(',        # command substitution
    r'\$\{',        # variable expansion
    r';',           # command chaining
    r'&&',          # AND chaining
    r'\|',          # pipes and OR chaining
]

KEY_PATTERN = re.compile(r'^[A-Z][A-Z0-9_]*$')


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ('"', "'"):
        return value[1:-1]
    return value


def parse_env(text: str) -> dict[str, str]:
    """
    Parse env-file text into a dict.

    Raises:
        ValueError: on a malformed line, a bad key, or a forbidden pattern
    """
    result = {}
    for lineno, raw in enumerate(text.splitlines(), 1):
        line = raw.strip()
        if not line or line.startswith('#'):
            continue

        key, sep, value = line.partition('=')
        if not sep:
            raise ValueError(f"Line {lineno}: expected KEY=value")

        key = key.strip()
        if not KEY_PATTERN.match(key):
            raise ValueError(f"Line {lineno}: invalid key '{key}'")

        value = _unquote(value.strip())
        if any(re.search(p, value) for p in FORBIDDEN_PATTERNS):
            raise ValueError(f"Line {lineno}: forbidden pattern in value for {key}")

        result[key] = value

    return result


def load_env(filepath: Path) -> dict[str, str]:
    """
    Parse an env file from disk.

    Raises:
        FileNotFoundError: if the file doesn't exist
        ValueError: if the contents are invalid
    """
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"Env file not found: {path}")
    return parse_env(path.read_text())
