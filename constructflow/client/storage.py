# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Client-local persistent storage: string keys and values kept in one JSON file."""
import json
import os
from pathlib import Path
from typing import Dict, Optional

from constructflow.core.config import settings
from constructflow.core.logging import get_logger

logger = get_logger(__name__)


class LocalStorage:
    def __init__(self, path: Optional[str] = None):
        self._path = Path(path or settings.CLIENT_STORAGE_PATH)

    @property
    def path(self) -> Path:
        return self._path

    def _read(self) -> Dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.error("Unreadable client storage at %s: %s", self._path, exc)
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: Dict[str, str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_name(self._path.name + ".tmp")
        tmp.write_text(json.dumps(data), encoding="utf-8")
        os.replace(tmp, self._path)

    def get_item(self, key: str) -> Optional[str]:
        value = self._read().get(key)
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def remove_item(self, key: str) -> None:
        data = self._read()
        if data.pop(key, None) is not None:
            self._write(data)

    def clear(self) -> None:
        self._write({})
