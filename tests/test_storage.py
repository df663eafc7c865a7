"""Tests for storage adapters."""

import json
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from tipster_monitor.adapters.storage import VercelKVStore, YamlFileStore
from tipster_monitor.core import SeenSetStore, StorageError


@pytest.mark.asyncio
async def test_yaml_store_roundtrip(tmp_path) -> None:
    path = tmp_path / "state" / "seen_posts.yaml"
    store = YamlFileStore(path)

    assert await store.get("seen_posts") is None

    await store.set("seen_posts", ["https://a/", "https://b/"])
    assert path.exists()

    # New instance reads the same file
    store2 = YamlFileStore(path)
    assert await store2.get("seen_posts") == ["https://a/", "https://b/"]

    await store2.delete("seen_posts")
    assert await store.get("seen_posts") is None


@pytest.mark.asyncio
async def test_yaml_store_keeps_other_keys(tmp_path) -> None:
    store = YamlFileStore(tmp_path / "kv.yaml")

    await store.set("one", [1])
    await store.set("two", [2])
    await store.delete("one")

    assert await store.get("two") == [2]
    assert list(tmp_path.iterdir()) == [tmp_path / "kv.yaml"]


@pytest.mark.asyncio
async def test_yaml_store_corrupt_file(tmp_path) -> None:
    path = tmp_path / "seen_posts.yaml"
    path.write_text("- just\n- a list\n", encoding="utf-8")
    store = YamlFileStore(path)

    with pytest.raises(StorageError):
        await store.get("seen_posts")

    # Tracker degrades to empty set
    assert await SeenSetStore(store).load() == set()


@pytest.mark.asyncio
async def test_yaml_store_invalid_yaml(tmp_path) -> None:
    path = tmp_path / "seen_posts.yaml"
    path.write_text("seen_posts: [unclosed\n", encoding="utf-8")

    with pytest.raises(StorageError):
        await YamlFileStore(path).get("seen_posts")


@pytest.mark.asyncio
async def test_vercel_kv_get() -> None:
    store = VercelKVStore("https://kv.example.com/", "secret")

    with patch("httpx.AsyncClient") as mock_client:
        mock_get = AsyncMock(return_value=httpx.Response(200, json={"result": '["https://a/"]'}))
        mock_client.return_value.__aenter__.return_value.get = mock_get

        assert await store.get("seen_posts") == ["https://a/"]
        assert mock_get.call_args.args[0] == "https://kv.example.com/get/seen_posts"
        assert mock_get.call_args.kwargs["headers"]["Authorization"] == "Bearer secret"


@pytest.mark.asyncio
async def test_vercel_kv_get_missing() -> None:
    store = VercelKVStore("https://kv.example.com", "secret")

    with patch("httpx.AsyncClient") as mock_client:
        mock_client.return_value.__aenter__.return_value.get = AsyncMock(
            return_value=httpx.Response(200, json={"result": None})
        )

        assert await store.get("seen_posts") is None


@pytest.mark.asyncio
async def test_vercel_kv_set_and_delete() -> None:
    store = VercelKVStore("https://kv.example.com", "secret")

    with patch("httpx.AsyncClient") as mock_client:
        mock_post = AsyncMock(return_value=httpx.Response(200, json={"result": "OK"}))
        mock_client.return_value.__aenter__.return_value.post = mock_post

        await store.set("seen_posts", ["https://a/"])
        assert mock_post.call_args.args[0] == "https://kv.example.com/set/seen_posts"
        assert json.loads(mock_post.call_args.kwargs["content"]) == ["https://a/"]

        await store.delete("seen_posts")
        assert mock_post.call_args.args[0] == "https://kv.example.com/del/seen_posts"


@pytest.mark.asyncio
async def test_vercel_kv_errors() -> None:
    store = VercelKVStore("https://kv.example.com", "secret")

    with patch("httpx.AsyncClient") as mock_client:
        client = mock_client.return_value.__aenter__.return_value
        client.get = AsyncMock(return_value=httpx.Response(401, json={"error": "Unauthorized"}))
        client.post = AsyncMock(side_effect=httpx.ConnectError("no route"))

        with pytest.raises(StorageError, match="Unauthorized"):
            await store.get("seen_posts")

        with pytest.raises(StorageError, match="no route"):
            await store.set("seen_posts", [])
