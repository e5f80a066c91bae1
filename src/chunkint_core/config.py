from __future__ import annotations

from dataclasses import dataclass

from chunkint_core.constants import CHUNK_WORDS, POOL_CHUNKS
from chunkint_core.errors import ChunkIntConfigError


@dataclass(frozen=True, slots=True)
class PoolConfig:
    """Chunk pool DI bundle.

    capacity:    number of chunks the pool can hand out.
    chunk_words: words per chunk (C). Defaults to CHUNKINT_CHUNK_WORDS.
    """

    capacity: int = POOL_CHUNKS
    chunk_words: int = CHUNK_WORDS

    def __post_init__(self):
        if int(self.capacity) <= 0:
            raise ChunkIntConfigError(name="capacity", value=self.capacity)
        if int(self.chunk_words) <= 0:
            raise ChunkIntConfigError(name="chunk_words", value=self.chunk_words)


DEFAULT_POOL_CONFIG = PoolConfig()

__all__ = [
    "PoolConfig",
    "DEFAULT_POOL_CONFIG",
]
