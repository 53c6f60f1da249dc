"""
Shared password check for lock, unlock and forced deletion.

The secret is a plain text file. Surrounding whitespace in the file is
ignored; the candidate is compared as given.
"""

from pathlib import Path

from prdman.lib.config import ConfigError
from prdman.records.errors import InvalidPasswordError, PasswordNotConfiguredError


class PasswordVerifier:
    def __init__(self, password_path: Path):
        self.password_path = Path(password_path)

    def verify(self, candidate: str) -> None:
        """Check candidate against the stored secret.

        Raises:
            PasswordNotConfiguredError: if no password file exists
            InvalidPasswordError: if candidate doesn't match exactly
            ConfigError: if the password file exists but can't be read
        """
        if not self.password_path.exists():
            raise PasswordNotConfiguredError(self.password_path)

        try:
            stored = self.password_path.read_text().strip()
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigError(f"Failed to read password file {self.password_path}: {e}") from e

        if stored != candidate:
            raise InvalidPasswordError()
