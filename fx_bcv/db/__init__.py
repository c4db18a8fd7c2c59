"""Helpers for locating the on-disk cache file."""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Final, Mapping

__all__ = ["APP_NAME", "DATA_FILE_NAME", "DATA_PATH_ENV", "default_cache_path"]

APP_NAME: Final[str] = "dobs"
DATA_FILE_NAME: Final[str] = "dobsdata.json"
DATA_PATH_ENV: Final[str] = "DOBS_DATA_PATH"


def default_cache_path(environ: Mapping[str, str] | None = None) -> Path:
    """Return the cache file path, honouring ``DOBS_DATA_PATH`` when set.

    Without an override the file lives in the per-user application data
    directory: ``%APPDATA%\\dobs`` on Windows, ``$XDG_DATA_HOME/dobs`` (or
    ``~/.local/share/dobs``) elsewhere.
    """

    env = os.environ if environ is None else environ
    override = env.get(DATA_PATH_ENV)
    if override:
        return Path(override).expanduser()
    if sys.platform == "win32" and env.get("APPDATA"):
        base = Path(env["APPDATA"])
    elif env.get("XDG_DATA_HOME"):
        base = Path(env["XDG_DATA_HOME"])
    else:
        base = Path.home() / ".local" / "share"
    return base / APP_NAME / DATA_FILE_NAME
