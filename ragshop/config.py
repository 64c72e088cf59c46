"""Environment configuration."""

from __future__ import annotations

import os

from dotenv import load_dotenv

DEFAULT_QDRANT_HOST = "http://localhost:6333"


def load_env(file: str | os.PathLike[str]) -> None:
    """Load variables from a dotenv file without overriding ones already set."""
    if not os.path.isfile(file):
        raise FileNotFoundError(f"error loading env file {file}: no such file")
    load_dotenv(file, override=False)


def qdrant_host() -> str:
    """Return the Qdrant base URL, falling back to the local default."""
    return os.environ.get("QDRANT_HOST") or DEFAULT_QDRANT_HOST