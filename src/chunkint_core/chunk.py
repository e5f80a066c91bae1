"""Chunk pool: the fixed-capacity word blocks numbers are built from.

A chunk is a row of `words` plus a valid length and prev/next links, all
stored column-wise in one pool. Chunk ids are row indices; NULL_CHUNK (-1)
marks a missing link.
"""

from __future__ import annotations

import logging
from typing import List, NamedTuple, Sequence, Tuple

import jax.numpy as jnp
import numpy as np

from chunkint_core.alloc import alloc_chunks, free_chunks, free_count, host_flag
from chunkint_core.config import DEFAULT_POOL_CONFIG, PoolConfig
from chunkint_core.constants import NULL_CHUNK, WORD_MASK
from chunkint_core.host import _host_int_value, _host_words

logger = logging.getLogger(__name__)


class ChunkPool(NamedTuple):
    words: jnp.ndarray
    length: jnp.ndarray
    prev_link: jnp.ndarray
    next_link: jnp.ndarray
    free_stack: jnp.ndarray
    free_top: jnp.ndarray
    corrupt: jnp.ndarray


def init_chunk_pool(cfg: PoolConfig = DEFAULT_POOL_CONFIG) -> ChunkPool:
    capacity = int(cfg.capacity)
    chunk_words = int(cfg.chunk_words)
    return ChunkPool(
        words=jnp.zeros((capacity, chunk_words), dtype=jnp.uint32),
        length=jnp.zeros((capacity,), dtype=jnp.int32),
        prev_link=jnp.full((capacity,), NULL_CHUNK, dtype=jnp.int32),
        next_link=jnp.full((capacity,), NULL_CHUNK, dtype=jnp.int32),
        # Popped from the top, so chunk 0 is handed out first.
        free_stack=jnp.arange(capacity - 1, -1, -1, dtype=jnp.int32),
        free_top=jnp.array(capacity, dtype=jnp.int32),
        corrupt=jnp.array(False, dtype=jnp.bool_),
    )


def chunk_capacity(pool: ChunkPool) -> int:
    return int(pool.words.shape[1])


def pool_capacity(pool: ChunkPool) -> int:
    return int(pool.words.shape[0])


def pool_free_count(pool: ChunkPool) -> int:
    return free_count(pool)


def pool_corrupt(pool: ChunkPool) -> bool:
    return host_flag(pool.corrupt)


def make_chunk(pool: ChunkPool) -> Tuple[ChunkPool, int, bool]:
    """Allocate an empty, unlinked chunk (valid length 0, zeroed words)."""
    pool2, ids, ok = alloc_chunks(pool, 1)
    if not ok:
        logger.warning(
            "chunk allocation failed (free=%d, corrupt=%s)",
            pool_free_count(pool),
            pool_corrupt(pool),
        )
        return pool, NULL_CHUNK, False
    chunk = _host_int_value(ids[0])
    pool2 = pool2._replace(
        words=pool2.words.at[chunk].set(jnp.uint32(0)),
        length=pool2.length.at[chunk].set(0),
        prev_link=pool2.prev_link.at[chunk].set(NULL_CHUNK),
        next_link=pool2.next_link.at[chunk].set(NULL_CHUNK),
    )
    return pool2, chunk, True


def chunk_len(pool: ChunkPool, chunk: int) -> int:
    return _host_int_value(pool.length[chunk])


def chunk_next(pool: ChunkPool, chunk: int) -> int:
    return _host_int_value(pool.next_link[chunk])


def chunk_prev(pool: ChunkPool, chunk: int) -> int:
    return _host_int_value(pool.prev_link[chunk])


def chunk_word(pool: ChunkPool, chunk: int, index: int) -> int:
    return _host_int_value(pool.words[chunk, index])


def chunk_words(pool: ChunkPool, chunk: int) -> np.ndarray:
    n = chunk_len(pool, chunk)
    return _host_words(pool.words[chunk, :n])


def set_chunk_len(pool: ChunkPool, chunk: int, length: int) -> ChunkPool:
    return pool._replace(length=pool.length.at[chunk].set(int(length)))


def set_chunk_word(pool: ChunkPool, chunk: int, index: int, value: int) -> ChunkPool:
    word = np.uint32(int(value) & WORD_MASK)
    return pool._replace(words=pool.words.at[chunk, index].set(word))


def set_chunk_words(pool: ChunkPool, chunk: int, values: Sequence[int]) -> ChunkPool:
    """Overwrite the leading words of `chunk` and set its valid length."""
    n = len(values)
    if n > chunk_capacity(pool):
        raise ValueError(f"{n} words exceed chunk capacity {chunk_capacity(pool)}")
    row = np.zeros((chunk_capacity(pool),), dtype=np.uint32)
    row[:n] = np.asarray(values, dtype=np.uint32)
    return pool._replace(
        words=pool.words.at[chunk].set(jnp.asarray(row)),
        length=pool.length.at[chunk].set(n),
    )


def link_chunks(pool: ChunkPool, first: int, second: int) -> ChunkPool:
    return pool._replace(
        next_link=pool.next_link.at[first].set(second),
        prev_link=pool.prev_link.at[second].set(first),
    )


def chain_ids(pool: ChunkPool, head: int) -> List[int]:
    ids: List[int] = []
    chunk = head
    limit = pool_capacity(pool)
    while chunk != NULL_CHUNK:
        ids.append(chunk)
        if len(ids) > limit:
            raise RuntimeError("CORRUPT: chunk chain cycle detected")
        chunk = chunk_next(pool, chunk)
    return ids


def trim_at(pool: ChunkPool, chunk: int) -> Tuple[ChunkPool, int]:
    """Detach everything after `chunk`; `chunk` becomes the chain tail.

    Returns the head of the detached sub-chain (NULL_CHUNK if none). The
    caller owns the detached chain and must release it.
    """
    detached = chunk_next(pool, chunk)
    pool = pool._replace(next_link=pool.next_link.at[chunk].set(NULL_CHUNK))
    if detached != NULL_CHUNK:
        pool = pool._replace(prev_link=pool.prev_link.at[detached].set(NULL_CHUNK))
    return pool, detached


def free_chain(pool: ChunkPool, head: int) -> Tuple[ChunkPool, int]:
    """Release every chunk from `head` to the end of its chain."""
    if head == NULL_CHUNK:
        return pool, 0
    ids = chain_ids(pool, head)
    idx = jnp.asarray(ids, dtype=jnp.int32)
    pool = pool._replace(
        length=pool.length.at[idx].set(0),
        prev_link=pool.prev_link.at[idx].set(NULL_CHUNK),
        next_link=pool.next_link.at[idx].set(NULL_CHUNK),
    )
    pool = free_chunks(pool, idx)
    if pool_corrupt(pool):
        logger.error("free stack overflow while releasing %d chunks", len(ids))
    return pool, len(ids)


__all__ = [
    "ChunkPool",
    "init_chunk_pool",
    "chunk_capacity",
    "pool_capacity",
    "pool_free_count",
    "pool_corrupt",
    "make_chunk",
    "chunk_len",
    "chunk_next",
    "chunk_prev",
    "chunk_word",
    "chunk_words",
    "set_chunk_len",
    "set_chunk_word",
    "set_chunk_words",
    "link_chunks",
    "chain_ids",
    "trim_at",
    "free_chain",
]
