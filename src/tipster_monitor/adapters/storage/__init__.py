"""Storage adapters for seen posts."""

from tipster_monitor.adapters.storage.vercel_kv_store import VercelKVStore
from tipster_monitor.adapters.storage.yaml_file_store import YamlFileStore

__all__ = ["VercelKVStore", "YamlFileStore"]
