"""
Environment helpers.

- `load_dotenv_if_present()`: one-time `.env` loading (does not override existing env vars)
- `resolve_config_path()`: resolve `GEOWEIGHT_CONFIG_PATH`, relative to the `.env` that was
  loaded when there is one, otherwise to the working directory
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from dotenv import find_dotenv, load_dotenv


@lru_cache
def load_dotenv_if_present() -> Path | None:
    """Load the nearest `.env` (searching up from the working directory) once."""
    found = find_dotenv(usecwd=True)
    if not found:
        return None
    load_dotenv(dotenv_path=found, override=False)
    return Path(found).resolve()


def resolve_config_path(path: str | Path) -> Path:
    """Resolve a possibly-relative config path."""
    p = Path(path).expanduser()
    if p.is_absolute():
        return p
    env_path = load_dotenv_if_present()
    base = env_path.parent if env_path is not None else Path.cwd()
    return (base / p).resolve()
