"""
Key-value JSON storage for persisted client state.

Each record lives in its own file under the data directory
(e.g. ``player-storage.json``). Reads and writes never raise: persistence
failing must not crash playback.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Optional

from loguru import logger

from .config import get_data_dir


def get_storage_path(name: str, data_dir: Optional[Path] = None) -> Path:
    """Path of the file backing the record called ``name``."""
    return (data_dir or get_data_dir()) / f"{name}.json"


def load_record(name: str, data_dir: Optional[Path] = None) -> Optional[dict[str, Any]]:
    """Load a persisted record.

    Args:
        name: Record name (e.g. "player-storage")
        data_dir: Directory holding the records (default: data dir)

    Returns:
        The stored dict, or None if missing or unreadable
    """
    path = get_storage_path(name, data_dir)
    if not path.exists():
        logger.info(f"No saved state found for {name}")
        return None

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError:
        logger.exception(f"Error reading {path}")
        return None
    except json.JSONDecodeError:
        logger.exception(f"Error deserializing {path}")
        return None

    if not isinstance(data, dict):
        logger.warning(f"Ignoring {path}: expected an object, got {type(data).__name__}")
        return None

    return data


def save_record(name: str, data: dict[str, Any], data_dir: Optional[Path] = None) -> bool:
    """Persist a record atomically (write to temp file, then rename).

    Returns:
        True on success, False if the write failed
    """
    path = get_storage_path(name, data_dir)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{name}-", suffix=".tmp", dir=path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
            os.replace(tmp_name, path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
    except (OSError, TypeError, ValueError):
        logger.exception(f"Failed to save {name}")
        return False

    logger.debug(f"Saved {name} to {path}")
    return True


def delete_record(name: str, data_dir: Optional[Path] = None) -> None:
    """Remove a persisted record if present."""
    path = get_storage_path(name, data_dir)
    try:
        path.unlink(missing_ok=True)
    except OSError:
        logger.exception(f"Failed to delete {path}")
