from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from moofy.errors import StorageError

_log = logging.getLogger(__name__)


def category_dir(data_dir: str | Path, category: str) -> Path:
    return Path(data_dir) / category


def record_file(data_dir: str | Path, category: str, record_id: int) -> Path:
    return category_dir(data_dir, category) / f"{record_id}.json"


def read_record(path: Path) -> Any:
    """Return the decoded JSON document at *path*, or ``None`` if unusable.

    A missing or empty file is a brand-new record and is not logged. An
    unreadable or corrupted file is logged and then treated the same way.
    """

    if not path.exists():
        return None
    try:
        raw = path.read_text(encoding="utf-8")
        if not raw.strip():
            return None
        return json.loads(raw)
    except (ValueError, RecursionError) as exc:
        # Corrupted, badly encoded or partially written file → start fresh
        _log.warning("Ignoring corrupted record %s: %s", path, exc)
        return None
    except OSError as exc:
        _log.warning("Could not read record %s: %s", path, exc)
        return None


def write_record(path: Path, data: Any) -> None:
    """Overwrite *path* with *data* as JSON.

    The parent directory must already exist. Raises :class:`StorageError`.
    """

    try:
        text = json.dumps(data, ensure_ascii=False, indent=2)
        path.write_text(text, encoding="utf-8")
    except (OSError, TypeError, ValueError) as exc:
        raise StorageError(path, exc) from exc
