"""
OTP Hashing
===========
Salted one-way hashing of short codes.

New hashes use Argon2id. Verification also accepts bcrypt hashes
(``$2a$``, ``$2b$``, ``$2y$``) so codes hashed by older deployments
keep validating. Both libraries compare in constant time.
"""

from functools import lru_cache
from typing import Optional, Protocol

import bcrypt
from argon2 import PasswordHasher, Type
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError

BCRYPT_PREFIXES = ("$2a$", "$2b$", "$2y$")


class SecretHasher(Protocol):
    """Produces and checks salted hashes of a plaintext secret."""

    def hash(self, plaintext: str) -> str:
        ...

    def verify(self, hash: str, candidate: str) -> bool:
        ...


@lru_cache(maxsize=1)
def get_cached_hasher() -> PasswordHasher:
    """Get the Argon2id hasher used for one-time codes."""
    # Codes live for minutes, so the cost is lower than for passwords
    return PasswordHasher(
        time_cost=2,
        memory_cost=19456,
        parallelism=1,
        hash_len=32,
        salt_len=16,
        type=Type.ID,
    )


class Argon2SecretHasher:
    """SecretHasher backed by argon2-cffi, with bcrypt verification for legacy hashes."""

    def __init__(self, hasher: Optional[PasswordHasher] = None):
        self._hasher = hasher or get_cached_hasher()

    def hash(self, plaintext: str) -> str:
        if not plaintext:
            raise ValueError("Cannot hash an empty secret")
        return self._hasher.hash(plaintext)

    def verify(self, hash: str, candidate: str) -> bool:
        if not hash or not candidate:
            return False

        if hash.startswith("$argon2"):
            try:
                return self._hasher.verify(hash, candidate)
            except (VerifyMismatchError, VerificationError, InvalidHashError):
                return False

        if hash.startswith(BCRYPT_PREFIXES):
            # PHP writes $2y$, which the bcrypt package reads as $2b$
            normalized = "$2b$" + hash[4:]
            try:
                return bcrypt.checkpw(candidate.encode("utf-8"), normalized.encode("utf-8"))
            except ValueError:
                return False

        return False
