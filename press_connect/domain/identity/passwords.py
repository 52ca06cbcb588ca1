"""bcrypt password hashing.

bcrypt only accepts 72 bytes of input, so passwords are first reduced to the
base64 of their SHA-256 digest (44 bytes). Any length of password is accepted
and every byte of it counts.

Hashing is CPU-bound, so the async helpers run it in a worker thread to keep
the event loop responsive during login storms.
"""

import asyncio
import base64
import hashlib
import secrets
from functools import lru_cache

import bcrypt


def _prehash(password: str) -> bytes:
    return base64.b64encode(hashlib.sha256(password.encode("utf-8")).digest())


def hash_password(password: str, rounds: int = 12) -> str:
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(_prehash(password), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(_prehash(password), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False


@lru_cache
def _dummy_hash(rounds: int) -> str:
    return hash_password(secrets.token_hex(16), rounds)


def dummy_verify(password: str, rounds: int = 12) -> bool:
    """Burn one bcrypt comparison at the same cost as a real one; always False."""
    verify_password(password, _dummy_hash(rounds))
    return False


async def hash_password_async(password: str, rounds: int = 12) -> str:
    return await asyncio.to_thread(hash_password, password, rounds)


async def verify_password_async(
    password: str, password_hash: str | None, rounds: int = 12
) -> bool:
    if password_hash is None:
        return await asyncio.to_thread(dummy_verify, password, rounds)
    return await asyncio.to_thread(verify_password, password, password_hash)
