"""Snapshot and settings file I/O.

Documents are picked by suffix: ``.json`` for the app snapshot, ``.yaml``
or ``.yml`` for settings. Writes go through a locked temp file that is
renamed over the target, so a reader never sees half a snapshot.
"""

from __future__ import annotations

import fcntl
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Callable

import yaml

logger = logging.getLogger(__name__)


def _dump_json(data: dict[str, Any]) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


def _dump_yaml(data: dict[str, Any]) -> str:
    return yaml.dump(data, default_flow_style=False, allow_unicode=True, sort_keys=False)


_FORMATS: dict[str, tuple[Callable[[str], Any], Callable[[dict[str, Any]], str]]] = {
    ".json": (json.loads, _dump_json),
    ".yaml": (yaml.safe_load, _dump_yaml),
    ".yml": (yaml.safe_load, _dump_yaml),
}


def _format_for(path: Path) -> tuple[Callable[[str], Any], Callable[[dict[str, Any]], str]]:
    try:
        return _FORMATS[path.suffix.lower()]
    except KeyError:
        raise ValueError(f"Unsupported document type: {path.name}") from None


def read_document(path: Path) -> dict[str, Any]:
    """Parse a JSON or YAML mapping; missing, blank or non-mapping files give ``{}``.

    Malformed content propagates as ``ValueError`` (JSON) or
    ``yaml.YAMLError`` so callers choose how to recover.
    """
    parse, _ = _format_for(path)
    if not path.exists():
        return {}
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    result = parse(text)
    return result if isinstance(result, dict) else {}


def write_document(path: Path, data: dict[str, Any]) -> None:
    """Serialize *data* by suffix and atomically replace *path*."""
    _, dump = _format_for(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, temp_path = tempfile.mkstemp(dir=path.parent, prefix=f".{path.stem}_", suffix=path.suffix)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            fcntl.flock(f.fileno(), fcntl.LOCK_EX)
            try:
                f.write(dump(data))
                f.flush()
                os.fsync(f.fileno())
            finally:
                fcntl.flock(f.fileno(), fcntl.LOCK_UN)
        os.replace(temp_path, path)
    except Exception:
        if os.path.exists(temp_path):
            os.unlink(temp_path)
        raise
    logger.debug("Wrote %s", path)
