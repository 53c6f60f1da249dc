"""
Configuration loader for prdman.

Everything lives under one base directory (default ~/.config/prdman):
the data files, the password file, and an optional prdman.env.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from . import envparse
from .constants import CONFIG_FILENAME, DEFAULT_PASSWORD_FILE

logger = logging.getLogger(__name__)

VALID_KINDS = ("prd", "story")
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


class ConfigError(Exception):
    """prdman.env could not be parsed."""


@dataclass
class AppConfig:
    """Settings resolved from the base directory and prdman.env"""
    base_dir: Path
    password_path: Path
    default_kind: str = "prd"
    log_level: str = "WARNING"

    def data_path(self, data_file: str) -> Path:
        return self.base_dir / data_file


def load_config(base_dir: Path) -> AppConfig:
    """Load prdman.env from base_dir and return AppConfig.

    A missing prdman.env means all defaults.

    Raises:
        ConfigError: if prdman.env exists but is invalid
    """
    base_dir = Path(base_dir).expanduser()
    env_path = base_dir / CONFIG_FILENAME

    try:
        env = envparse.load_env(env_path)
    except FileNotFoundError:
        env = {}
    except ValueError as e:
        raise ConfigError(f"{env_path}: {e}") from None

    password_path = Path(env.get("PASSWORD_FILE", DEFAULT_PASSWORD_FILE)).expanduser()
    if not password_path.is_absolute():
        password_path = base_dir / password_path

    default_kind = env.get("DEFAULT_KIND", "prd")
    if default_kind not in VALID_KINDS:
        logger.warning(
            f"Unknown DEFAULT_KIND '{default_kind}' in {env_path}, "
            f"expected one of {VALID_KINDS}. Using 'prd'."
        )
        default_kind = "prd"

    log_level = env.get("LOG_LEVEL", "WARNING").upper()
    if log_level not in VALID_LOG_LEVELS:
        logger.warning(f"Unknown LOG_LEVEL '{log_level}' in {env_path}. Using WARNING.")
        log_level = "WARNING"

    return AppConfig(
        base_dir=base_dir,
        password_path=password_path,
        default_kind=default_kind,
        log_level=log_level,
    )
