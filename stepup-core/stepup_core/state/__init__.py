"""
State Storage
=============
Stores that carry a pending verification between requests.
"""

from .store import StateStore, InMemoryStateStore, RedisStateStore, generate_state_id

__all__ = [
    "StateStore",
    "InMemoryStateStore",
    "RedisStateStore",
    "generate_state_id",
]
