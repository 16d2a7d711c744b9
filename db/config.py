"""
db/config.py

Environment-driven configuration for the record store connection.
"""

from __future__ import annotations

import os
from pathlib import Path

_CLOUD_ENVIRONMENTS = frozenset({"prod", "production", "staging", "cloud"})
_ENV_FILES = (".env", ".env.local")


def load_env_files() -> None:
    """
    Load KEY=VALUE pairs from `.env` then `.env.local` at the project root.

    Variables already present in the process environment win.
    """

    project_root = Path(__file__).resolve().parents[1]
    for filename in _ENV_FILES:
        env_path = project_root / filename
        if not env_path.is_file():
            continue
        for key, value in _parse_env_lines(env_path.read_text(encoding="utf-8")):
            os.environ.setdefault(key, value)


def _parse_env_lines(text: str) -> list[tuple[str, str]]:
    pairs: list[tuple[str, str]] = []
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        if key:
            pairs.append((key, value.strip().strip('"').strip("'")))
    return pairs


def normalize_postgres_url(url: str) -> str:
    """
    Rewrite postgres URLs to the psycopg driver form SQLAlchemy expects.
    """

    for prefix in ("postgres://", "postgresql://"):
        if url.startswith(prefix):
            return "postgresql+psycopg://" + url[len(prefix):]
    return url


def resolve_database_url() -> str:
    """
    Resolve the record store URL.

    Priority:
    1) DATABASE_URL
    2) CLOUD_DATABASE_URL when ENVIRONMENT is cloud-like
    3) LOCAL_DATABASE_URL
    """

    load_env_files()

    candidates = [os.getenv("DATABASE_URL")]
    if os.getenv("ENVIRONMENT", "local").strip().lower() in _CLOUD_ENVIRONMENTS:
        candidates.append(os.getenv("CLOUD_DATABASE_URL"))
    candidates.append(os.getenv("LOCAL_DATABASE_URL"))

    for url in candidates:
        if url and url.strip():
            return normalize_postgres_url(url.strip())

    raise RuntimeError(
        "No database URL configured. Set DATABASE_URL, or configure "
        "LOCAL_DATABASE_URL / CLOUD_DATABASE_URL."
    )
