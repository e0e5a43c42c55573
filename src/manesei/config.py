"""Configuration constants for the Manesei wiki."""

import os
from pathlib import Path

# Directory with notes. First directory which is found is used.
NOTES_DIRECTORIES: list[Path] = [
    Path("notes"),
    Path("~/.local/share/manesei/notes").expanduser(),
]

# Overrides NOTES_DIRECTORIES when set.
NOTES_DIR_ENV: str = "MANESEI_NOTES_DIR"

# History of every note lives below this directory inside the notes directory.
HISTORY_DIRNAME: str = ".history"

DEFAULT_HOST: str = "127.0.0.1"
DEFAULT_PORT: int = 8000

SITE_NAME: str = "Manesei"

# The synthetic root document stored at the empty slug.
ROOT_TITLE: str = "🌱"
ROOT_CONTENT: str = "# Manesei"


def resolve_notes_directory(override: Path | None = None) -> Path:
    """Return the notes directory to serve.

    An explicit override wins, then the environment variable, then the first
    existing entry of NOTES_DIRECTORIES. When none exists, the first entry is
    created.
    """
    if override is not None:
        return override.expanduser()
    env = os.environ.get(NOTES_DIR_ENV)
    if env:
        return Path(env).expanduser()
    for candidate in NOTES_DIRECTORIES:
        if candidate.is_dir():
            return candidate
    default = NOTES_DIRECTORIES[0]
    default.mkdir(parents=True, exist_ok=True)
    return default
