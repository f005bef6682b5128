"""Runtime configuration read from the environment (with .env fallback)."""

import os
from os import getenv
from pathlib import Path
from typing import Dict, Iterable, Optional

PROJECT_ROOT = Path(__file__).parent.parent

ENV_FILE_PATHS = [
    Path("/opt/sift/.env"),
    PROJECT_ROOT / ".env",
    PROJECT_ROOT.parent / ".env",
]

DEFAULT_DATABASE_URL = "postgresql+asyncpg://postgres:postgres@db:5432/sift"


def find_env_file(paths: Optional[Iterable[Path]] = None) -> Optional[Path]:
    for env_file in paths or ENV_FILE_PATHS:
        if env_file.exists() and env_file.is_file():
            return env_file
    return None


def read_env_file(env_file: Path) -> Dict[str, str]:
    """Parse KEY=VALUE lines, skipping blanks and comments and stripping quotes."""
    env_vars = {}
    with open(env_file, "r") as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue
            key, value = line.split("=", 1)
            key = key.strip()
            value = value.strip()
            if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
                value = value[1:-1]
            if key:
                env_vars[key] = value
    return env_vars


def load_env_file(paths: Optional[Iterable[Path]] = None) -> int:
    """
    Load the first .env file found into os.environ.

    Variables already present in the environment are never overridden.
    Returns the number of variables that were set.
    """
    env_file = find_env_file(paths)
    if env_file is None:
        return 0
    loaded_count = 0
    for key, value in read_env_file(env_file).items():
        if value and key not in os.environ:
            os.environ[key] = value
            loaded_count += 1
    return loaded_count


def is_debug() -> bool:
    return getenv("APP_DEBUG", "false").lower() == "true"


def get_database_url() -> str:
    # Production should always set DATABASE_URL
    return getenv("DATABASE_URL") or DEFAULT_DATABASE_URL


def should_create_all() -> bool:
    """Auto-create tables on startup (dev only unless forced)."""
    forced = getenv("SIFT_CREATE_ALL", "").lower() == "true"
    return forced or is_debug()
