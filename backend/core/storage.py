"""
JSON-file document store.

Each collection is one JSON array on disk. Writes go to a temp file and are
moved into place, and every read-modify-write on a collection runs under that
collection's lock, so a single document update is applied atomically within
the process.
"""

import os, json, re, tempfile, shutil, threading, uuid, logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Dict, List

from backend.core.exceptions import InvalidIdError

logger = logging.getLogger(__name__)

OBJECT_ID_PATTERN = re.compile(r"^[0-9a-fA-F]{24}$")

_locks: Dict[str, threading.RLock] = {}
_locks_guard = threading.Lock()


def _lock_for(path: str) -> threading.RLock:
    key = os.path.abspath(path)
    with _locks_guard:
        if key not in _locks:
            _locks[key] = threading.RLock()
        return _locks[key]


@contextmanager
def locked(path: str):
    """Hold the collection lock for a read-modify-write sequence."""
    lock = _lock_for(path)
    with lock:
        yield


def load_json(path: str) -> List[dict]:
    if not os.path.exists(path):
        return []
    with locked(path):
        with open(path, "r", encoding="utf-8") as f:
            content = f.read().strip()
    if not content:
        return []
    try:
        return json.loads(content)
    except json.JSONDecodeError:
        logger.exception("Corrupted collection file %s", path)
        raise


def save_json(path: str, data: List[dict]) -> None:
    """Safely write a collection to disk (atomic write)."""
    directory = os.path.dirname(os.path.abspath(path))
    os.makedirs(directory, exist_ok=True)
    with locked(path):
        tmp_fd, tmp_path = tempfile.mkstemp(dir=directory)
        os.close(tmp_fd)
        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            shutil.move(tmp_path, path)
        finally:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)


def new_object_id() -> str:
    return uuid.uuid4().hex[:24]


def is_object_id(value: str) -> bool:
    return bool(value) and bool(OBJECT_ID_PATTERN.match(value))


def ensure_object_id(value: str, resource: str) -> str:
    if not is_object_id(value):
        raise InvalidIdError(resource)
    return value


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
