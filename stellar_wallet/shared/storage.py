"""Persistent key-value storage for cached wallet values (never key material)."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)


class StorageProtocol(Protocol):
    def get(self, key: str) -> str | None: ...
    def set(self, key: str, value: str) -> None: ...
    def save(self) -> None: ...


class MemoryStorage:
    def __init__(self, initial: dict[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})
        self.saves = 0

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def save(self) -> None:
        self.saves += 1


class JsonFileStorage:
    """Values for one wallet address, kept in ``<storage_dir>/storage_<address>.json``.

    ``set`` only touches memory; ``save`` writes the whole file through a
    temporary sibling so a crash never leaves half-written JSON behind.
    """

    STORAGE_VERSION = 1

    def __init__(self, storage_dir: Path, address: str):
        self.storage_dir = Path(storage_dir)
        self.storage_dir.mkdir(parents=True, exist_ok=True)
        self.storage_file = self.storage_dir / f"storage_{address}.json"
        self._data: dict[str, str] = {}
        self._load()

    def _load(self) -> None:
        if not self.storage_file.exists():
            return
        try:
            with open(self.storage_file, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Failed to load wallet storage, starting fresh: %s", e)
            return

        if data.get("version", 0) != self.STORAGE_VERSION:
            logger.warning("Wallet storage version mismatch, starting fresh")
            return
        self._data = {str(k): str(v) for k, v in data.get("values", {}).items()}

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def save(self) -> None:
        payload = {
            "version": self.STORAGE_VERSION,
            "values": self._data,
            "updated_at": datetime.now(timezone.utc).isoformat(),
        }
        tmp_file = self.storage_file.with_suffix(".json.tmp")
        with open(tmp_file, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2)
        tmp_file.replace(self.storage_file)
