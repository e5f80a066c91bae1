from __future__ import annotations

import os

from chunkint_core.errors import ChunkIntConfigError

# Word width is fixed by the uint32 storage dtype.
WORD_BITS = 32
WORD_MASK = (1 << WORD_BITS) - 1
HEX_CHARS_PER_WORD = 2 * (WORD_BITS // 8)

NULL_CHUNK = -1
SIGN_POSITIVE = 1


def _env_positive_int(name: str, default: int) -> int:
    value = os.environ.get(name, "").strip()
    if not value:
        return default
    if not value.isdigit() or int(value) <= 0:
        raise ChunkIntConfigError(name=name, value=value)
    return int(value)


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in (
        "1",
        "true",
        "yes",
        "on",
    )


# Chunk word capacity C. Read once; every component shares it.
CHUNK_WORDS = _env_positive_int("CHUNKINT_CHUNK_WORDS", 4)
POOL_CHUNKS = _env_positive_int("CHUNKINT_POOL_CHUNKS", 4096)

TEST_GUARDS = _env_flag("CHUNKINT_TEST_GUARDS")
CROSSCHECK = TEST_GUARDS or _env_flag("CHUNKINT_CROSSCHECK")

__all__ = [
    "WORD_BITS",
    "WORD_MASK",
    "HEX_CHARS_PER_WORD",
    "NULL_CHUNK",
    "SIGN_POSITIVE",
    "CHUNK_WORDS",
    "POOL_CHUNKS",
    "TEST_GUARDS",
    "CROSSCHECK",
    "_env_positive_int",
    "_env_flag",
]
