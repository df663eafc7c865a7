"""Vercel KV (Upstash Redis REST API) storage adapter."""

import json
from typing import Any, Optional

import httpx

from tipster_monitor.core import KeyValueStore, StorageError


class VercelKVStore(KeyValueStore):
    """Store JSON values in Vercel KV over its REST API."""

    def __init__(self, url: str, token: str, timeout: float = 30.0) -> None:
        self.url = url.rstrip("/")
        self.token = token
        self.timeout = timeout

    async def get(self, key: str) -> Optional[Any]:
        result = await self._command("get", key)
        if result is None:
            return None

        try:
            return json.loads(result)
        except (TypeError, json.JSONDecodeError):
            # Plain string values are returned as-is
            return result

    async def set(self, key: str, value: Any) -> None:
        await self._command("set", key, body=json.dumps(value))

    async def delete(self, key: str) -> None:
        await self._command("del", key)

    async def _command(self, command: str, key: str, body: Optional[str] = None) -> Any:
        """Run one REST command and return its `result` field."""
        url = f"{self.url}/{command}/{key}"
        headers = {"Authorization": f"Bearer {self.token}"}

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            try:
                if command == "get":
                    response = await client.get(url, headers=headers)
                else:
                    response = await client.post(url, headers=headers, content=body)
            except httpx.HTTPError as e:
                raise StorageError(f"KV {command} failed: {e}") from e

        try:
            data = response.json()
        except ValueError:
            data = {}

        if not response.is_success or "error" in data:
            detail = data.get("error") or response.text[:200]
            raise StorageError(f"KV {command} failed: HTTP {response.status_code}: {detail}")

        return data.get("result")
