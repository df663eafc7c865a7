"""Key-value storage in a local YAML file."""

import os
import tempfile
from pathlib import Path
from typing import Any, Optional

import yaml

from tipster_monitor.core import KeyValueStore, StorageError


class YamlFileStore(KeyValueStore):
    """Store keys as a single YAML mapping on disk."""

    def __init__(self, path: Path) -> None:
        self.path = path

    async def get(self, key: str) -> Optional[Any]:
        return self._load().get(key)

    async def set(self, key: str, value: Any) -> None:
        data = self._load()
        data[key] = value
        self._save(data)

    async def delete(self, key: str) -> None:
        data = self._load()
        if key in data:
            del data[key]
            self._save(data)

    def _load(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise StorageError(f"Could not read {self.path}: {e}") from e

        if not isinstance(data, dict):
            raise StorageError(f"Unexpected content in {self.path}")
        return data

    def _save(self, data: dict[str, Any]) -> None:
        # Atomic replace: readers see the old or the new file, never a partial one
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    yaml.dump(data, f, allow_unicode=True, default_flow_style=False, sort_keys=False)
                os.replace(tmp_name, self.path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except (OSError, yaml.YAMLError) as e:
            raise StorageError(f"Could not write {self.path}: {e}") from e
