from __future__ import annotations

import json
import re
import threading
from pathlib import Path

from contact_wizard.application.exceptions import PersistenceError
from contact_wizard.application.ports.key_value_store import KeyValueStorePort


_SAFE_KEY = re.compile(r"^[A-Za-z0-9_.\-]+$")


class JsonKeyValueStore(KeyValueStorePort):
    """One JSON document per key under `data_dir`; writes go through a temp file and an atomic rename."""

    def __init__(self, data_dir: str = "./data/drafts") -> None:
        self._data_dir = Path(data_dir)
        self._data_dir.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()

    def _get_file_path(self, key: str) -> Path:
        if not _SAFE_KEY.match(key):
            raise PersistenceError(f"Invalid store key: {key!r}")
        return self._data_dir / f"{key}.json"

    def get(self, key: str) -> str | None:
        file_path = self._get_file_path(key)
        if not file_path.exists():
            return None
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            raise PersistenceError(f"Could not read {file_path.name}: {e}") from e
        value = data.get("value") if isinstance(data, dict) else None
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        file_path = self._get_file_path(key)
        temp_path = file_path.with_suffix(".json.tmp")
        with self._lock:
            try:
                with open(temp_path, "w", encoding="utf-8") as f:
                    json.dump({"key": key, "value": value, "version": 1}, f, indent=2, ensure_ascii=False)
                temp_path.replace(file_path)
            except OSError as e:
                if temp_path.exists():
                    try:
                        temp_path.unlink()
                    except OSError:
                        pass
                raise PersistenceError(f"Could not write {file_path.name}: {e}") from e

    def remove(self, key: str) -> None:
        file_path = self._get_file_path(key)
        with self._lock:
            try:
                file_path.unlink(missing_ok=True)
            except OSError as e:
                raise PersistenceError(f"Could not delete {file_path.name}: {e}") from e
