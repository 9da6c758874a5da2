"""
Key-value string storage

A small preferences-style store: string keys mapped to string values. The
file-backed store keeps one JSON object on disk and rewrites it atomically.
"""

import json
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Optional, Union

from loguru import logger

from ..domain.common.exceptions import CacheException


class KeyValueStore(ABC):
    """Abstract string key-value store."""

    @abstractmethod
    def get_string(self, key: str) -> Optional[str]:
        pass

    @abstractmethod
    def set_string(self, key: str, value: str) -> None:
        pass

    @abstractmethod
    def remove(self, key: str) -> None:
        pass

    @abstractmethod
    def clear(self) -> None:
        pass

    @abstractmethod
    def keys(self) -> List[str]:
        pass

    def contains(self, key: str) -> bool:
        return self.get_string(key) is not None


class InMemoryKeyValueStore(KeyValueStore):
    """Process-local store, used in tests and for throwaway sessions."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get_string(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set_string(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def clear(self) -> None:
        self._data.clear()

    def keys(self) -> List[str]:
        return list(self._data)


class JsonFileKeyValueStore(KeyValueStore):
    """
    Store backed by a single JSON file.

    Every write rewrites the whole file through a temporary file in the same
    directory followed by os.replace, so readers never see a partial file.
    A missing file is an empty store; an unreadable or corrupt file raises
    CacheException.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path).expanduser()

    def _load(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise CacheException(f"Failed to read local store {self.path}: {e}")
        if not isinstance(data, dict):
            raise CacheException(f"Local store {self.path} is not a JSON object")
        return data

    def _save(self, data: Dict[str, str]) -> None:
        temp_file = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                mode="w",
                encoding="utf-8",
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
                delete=False,
            ) as f:
                temp_file = f.name
                json.dump(data, f, indent=2, sort_keys=True)
            os.replace(temp_file, self.path)
            temp_file = None
        except OSError as e:
            raise CacheException(f"Failed to write local store {self.path}: {e}")
        finally:
            if temp_file is not None:
                Path(temp_file).unlink(missing_ok=True)
        logger.debug(f"Wrote {len(data)} keys to {self.path}")

    def get_string(self, key: str) -> Optional[str]:
        value = self._load().get(key)
        return value if isinstance(value, str) else None

    def set_string(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._save(data)

    def remove(self, key: str) -> None:
        data = self._load()
        if key in data:
            del data[key]
            self._save(data)

    def clear(self) -> None:
        self._save({})

    def keys(self) -> List[str]:
        return list(self._load())
