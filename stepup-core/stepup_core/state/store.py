"""
State Store
===========
Persistence for the opaque state round-tripped through the browser.

Every save returns a fresh identifier. Entries are scoped by namespace,
so an identifier issued for one stage cannot be loaded under another.
"""

import copy
import json
import secrets
import time
from abc import ABC, abstractmethod
from typing import Dict, Any, Tuple
import structlog

from ..exceptions import StateNotFoundError

logger = structlog.get_logger(__name__)


def generate_state_id() -> str:
    """Generate an unguessable state identifier."""
    return secrets.token_urlsafe(32)


class StateStore(ABC):
    """Saves and loads state mappings under generated identifiers."""

    @abstractmethod
    async def save(self, data: Dict[str, Any], namespace: str) -> str:
        """
        Persist a state mapping.

        Args:
            data: JSON-serializable mapping
            namespace: Stage the state belongs to

        Returns:
            New state identifier
        """
        pass

    @abstractmethod
    async def load(self, state_id: str, namespace: str) -> Dict[str, Any]:
        """
        Load a state mapping.

        Raises:
            StateNotFoundError: if the identifier is unknown or expired
        """
        pass


class InMemoryStateStore(StateStore):
    """
    Dict-backed state store.

    For development and testing only.
    Use RedisStateStore when running more than one process.
    """

    def __init__(self, ttl_seconds: int = 3600):
        self.ttl_seconds = ttl_seconds
        self._entries: Dict[Tuple[str, str], Tuple[float, Dict[str, Any]]] = {}

    async def save(self, data: Dict[str, Any], namespace: str) -> str:
        self._cleanup()
        state_id = generate_state_id()
        self._entries[(namespace, state_id)] = (time.time(), copy.deepcopy(data))
        return state_id

    async def load(self, state_id: str, namespace: str) -> Dict[str, Any]:
        self._cleanup()
        entry = self._entries.get((namespace, state_id))
        if entry is None:
            logger.warning("State not found", namespace=namespace)
            raise StateNotFoundError(state_id, namespace)
        return copy.deepcopy(entry[1])

    def _cleanup(self) -> None:
        """Remove expired entries."""
        current_time = time.time()
        expired = [
            key for key, (saved_at, _) in self._entries.items()
            if current_time - saved_at > self.ttl_seconds
        ]
        for key in expired:
            del self._entries[key]


class RedisStateStore(StateStore):
    """
    Redis-backed state store.

    Values are stored as JSON with a TTL so abandoned flows clean up.
    """

    def __init__(self, redis_client, ttl_seconds: int = 3600, prefix: str = "stepup:state"):
        """
        Args:
            redis_client: Async Redis client (``redis.asyncio.Redis``)
            ttl_seconds: Lifetime of each stored entry
            prefix: Key prefix
        """
        self.redis = redis_client
        self.ttl_seconds = ttl_seconds
        self.prefix = prefix

    @classmethod
    def from_url(cls, redis_url: str, ttl_seconds: int = 3600) -> "RedisStateStore":
        """Create a store backed by a new async Redis connection pool."""
        import redis.asyncio as redis
        return cls(redis.from_url(redis_url, decode_responses=True), ttl_seconds=ttl_seconds)

    def get_key(self, namespace: str, state_id: str) -> str:
        return f"{self.prefix}:{namespace}:{state_id}"

    async def save(self, data: Dict[str, Any], namespace: str) -> str:
        state_id = generate_state_id()
        await self.redis.set(
            self.get_key(namespace, state_id),
            json.dumps(data, separators=(",", ":")),
            ex=self.ttl_seconds,
        )
        return state_id

    async def load(self, state_id: str, namespace: str) -> Dict[str, Any]:
        raw = await self.redis.get(self.get_key(namespace, state_id))
        if raw is None:
            logger.warning("State not found", namespace=namespace)
            raise StateNotFoundError(state_id, namespace)
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8")
        return json.loads(raw)
