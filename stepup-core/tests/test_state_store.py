"""
Tests for state stores.
"""

import json
from unittest.mock import AsyncMock

import pytest

from stepup_core.exceptions import StateNotFoundError
from stepup_core.state.store import InMemoryStateStore, RedisStateStore


class TestInMemoryStateStore:
    """Tests for the in-memory store."""

    @pytest.mark.asyncio
    async def test_save_and_load(self):
        store = InMemoryStateStore()
        state_id = await store.save({"Attributes": {"mobile": ["+31612345678"]}}, "stepup:request")

        assert await store.load(state_id, "stepup:request") == {
            "Attributes": {"mobile": ["+31612345678"]}
        }

    @pytest.mark.asyncio
    async def test_each_save_gets_new_id(self):
        store = InMemoryStateStore()

        first = await store.save({"a": 1}, "stepup:request")
        second = await store.save({"a": 1}, "stepup:request")

        assert first != second

    @pytest.mark.asyncio
    async def test_loaded_state_is_a_copy(self):
        """Mutating a loaded mapping does not change the stored entry."""
        store = InMemoryStateStore()
        state_id = await store.save({"Attributes": {"mobile": ["1"]}}, "stepup:request")

        loaded = await store.load(state_id, "stepup:request")
        loaded["Attributes"]["mobile"].append("2")

        assert (await store.load(state_id, "stepup:request"))["Attributes"]["mobile"] == ["1"]

    @pytest.mark.asyncio
    async def test_namespace_isolation(self):
        store = InMemoryStateStore()
        state_id = await store.save({"a": 1}, "stepup:request")

        with pytest.raises(StateNotFoundError):
            await store.load(state_id, "other:stage")

    @pytest.mark.asyncio
    async def test_unknown_id(self):
        store = InMemoryStateStore()

        with pytest.raises(StateNotFoundError):
            await store.load("missing", "stepup:request")

    @pytest.mark.asyncio
    async def test_expired_entry(self, monkeypatch):
        store = InMemoryStateStore(ttl_seconds=60)
        monkeypatch.setattr("stepup_core.state.store.time.time", lambda: 1000.0)
        state_id = await store.save({"a": 1}, "stepup:request")

        monkeypatch.setattr("stepup_core.state.store.time.time", lambda: 1061.0)
        with pytest.raises(StateNotFoundError):
            await store.load(state_id, "stepup:request")


class TestRedisStateStore:
    """Tests for the Redis store against a mocked client."""

    @pytest.mark.asyncio
    async def test_save_sets_json_with_ttl(self):
        redis_client = AsyncMock()
        store = RedisStateStore(redis_client, ttl_seconds=120)

        state_id = await store.save({"stepup:recipient": "31612345678"}, "stepup:request")

        redis_client.set.assert_awaited_once()
        args, kwargs = redis_client.set.call_args
        assert args[0] == f"stepup:state:stepup:request:{state_id}"
        assert json.loads(args[1]) == {"stepup:recipient": "31612345678"}
        assert kwargs["ex"] == 120

    @pytest.mark.asyncio
    async def test_load_decodes_json(self):
        redis_client = AsyncMock()
        redis_client.get.return_value = b'{"stepup:timestamp": 1700000000}'
        store = RedisStateStore(redis_client)

        state = await store.load("abc", "stepup:request")

        redis_client.get.assert_awaited_once_with("stepup:state:stepup:request:abc")
        assert state == {"stepup:timestamp": 1700000000}

    @pytest.mark.asyncio
    async def test_load_missing(self):
        redis_client = AsyncMock()
        redis_client.get.return_value = None
        store = RedisStateStore(redis_client)

        with pytest.raises(StateNotFoundError):
            await store.load("abc", "stepup:request")
