"""Number container: an unsigned integer held in a chain of pool chunks.

Words are stored least-significant first. Interior chunks are always full;
only the tail may hold fewer than C valid words. A container never has an
empty chain.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, NamedTuple, Optional, Sequence, Tuple

import jax.numpy as jnp
import numpy as np

from chunkint_core.chunk import (
    ChunkPool,
    chain_ids,
    chunk_capacity,
    chunk_len,
    chunk_prev,
    free_chain,
    link_chunks,
    make_chunk,
    set_chunk_words,
    trim_at,
)
from chunkint_core.constants import NULL_CHUNK, SIGN_POSITIVE, WORD_BITS, WORD_MASK
from chunkint_core.host import _host_words
from chunkint_core.status import Status

logger = logging.getLogger(__name__)


class Number(NamedTuple):
    head: int
    tail: int
    count: int
    # Kept apart from the magnitude; arithmetic here is unsigned only.
    sign: int
    # Bumped on every structural mutation; cursors compare against it.
    generation: int


def construct(pool: ChunkPool) -> Tuple[ChunkPool, Optional[Number], Status]:
    """Create a number with one chunk holding a single zero word."""
    pool2, chunk, ok = make_chunk(pool)
    if not ok:
        return pool, None, Status.ALLOCATION_FAILURE
    pool2 = set_chunk_words(pool2, chunk, [0])
    number = Number(
        head=chunk,
        tail=chunk,
        count=1,
        sign=SIGN_POSITIVE,
        generation=0,
    )
    return pool2, number, Status.OK


def destroy(pool: ChunkPool, number: Optional[Number]) -> ChunkPool:
    if number is None:
        return pool
    pool, released = free_chain(pool, number.head)
    logger.debug("released %d chunks (head=%d)", released, number.head)
    return pool


def length(number: Optional[Number]) -> int:
    """Chunk count; 0 for an absent number."""
    if number is None:
        return 0
    return int(number.count)


def append(
    pool: ChunkPool, number: Optional[Number], chunk: Optional[int]
) -> Tuple[ChunkPool, Optional[Number], Status]:
    """Attach `chunk` as the new tail of `number`."""
    if number is None or chunk is None or chunk == NULL_CHUNK:
        return pool, number, Status.NULL_ARGUMENT
    pool = link_chunks(pool, number.tail, chunk)
    number = number._replace(
        tail=chunk,
        count=number.count + 1,
        generation=number.generation + 1,
    )
    return pool, number, Status.OK


def chunks_required(word_count: int, chunk_words: int) -> int:
    # The chain never drops below one chunk, even for zero words.
    return max(1, -(-int(word_count) // int(chunk_words)))


def _normalize_words(word_count: int, words: Sequence[int]) -> np.ndarray:
    n = int(word_count)
    if n < 0:
        raise ValueError(f"word_count must be non-negative, got {n}")
    if len(words) < n:
        raise ValueError(f"word_count={n} exceeds the {len(words)} words supplied")
    return np.array([int(w) & WORD_MASK for w in list(words)[:n]], dtype=np.uint32)


def bulk_load(
    pool: ChunkPool,
    number: Optional[Number],
    word_count: int,
    words: Optional[Sequence[int]],
) -> Tuple[ChunkPool, Optional[Number], Status]:
    """Replace the contents of `number` with the first `word_count` words.

    Words are packed C per chunk in the order given. Surplus chunks are cut
    off and released in full; missing chunks are allocated up front so a
    failed allocation leaves both pool and number as they were.
    """
    if number is None or words is None:
        return pool, number, Status.NULL_ARGUMENT
    values = _normalize_words(word_count, words)
    cap = chunk_capacity(pool)
    required = chunks_required(values.shape[0], cap)
    pool0, number0 = pool, number

    if number.count > required:
        ids = chain_ids(pool, number.head)
        cut = ids[required - 1]
        pool, detached = trim_at(pool, cut)
        pool, released = free_chain(pool, detached)
        logger.debug(
            "bulk_load truncated chain at chunk %d, released %d chunks",
            cut,
            released,
        )
        number = number._replace(tail=cut, count=required)
    elif number.count < required:
        grown = required - number.count
        for _ in range(grown):
            pool, chunk, ok = make_chunk(pool)
            if not ok:
                logger.warning(
                    "bulk_load needs %d more chunks; allocation failed", grown
                )
                return pool0, number0, Status.ALLOCATION_FAILURE
            pool, number, _ = append(pool, number, chunk)
        logger.debug("bulk_load appended %d chunks", grown)

    for i, chunk in enumerate(chain_ids(pool, number.head)):
        pool = set_chunk_words(pool, chunk, values[i * cap:(i + 1) * cap])
    number = number._replace(generation=number0.generation + 1)
    return pool, number, Status.OK


def word_count(pool: ChunkPool, number: Optional[Number]) -> int:
    if number is None:
        return 0
    ids = chain_ids(pool, number.head)
    return int(np.asarray(pool.length[jnp.asarray(ids, dtype=jnp.int32)]).sum())


def to_words(pool: ChunkPool, number: Optional[Number]) -> np.ndarray:
    """All valid words, least-significant first, as one uint32 array."""
    if number is None:
        return np.zeros((0,), dtype=np.uint32)
    ids = jnp.asarray(chain_ids(pool, number.head), dtype=jnp.int32)
    rows = _host_words(pool.words[ids])
    lens = np.asarray(pool.length[ids])
    parts = [rows[k, : int(lens[k])] for k in range(rows.shape[0])]
    return np.concatenate(parts).astype(np.uint32)


def words_to_int(words: Iterable[int]) -> int:
    value = 0
    for shift, word in enumerate(words):
        value |= (int(word) & WORD_MASK) << (shift * WORD_BITS)
    return value


def int_to_words(value: int) -> List[int]:
    value = int(value)
    if value < 0:
        raise ValueError("only unsigned values are representable")
    words = [value & WORD_MASK]
    value >>= WORD_BITS
    while value:
        words.append(value & WORD_MASK)
        value >>= WORD_BITS
    return words


def to_int(pool: ChunkPool, number: Optional[Number]) -> Optional[int]:
    if number is None:
        return None
    return words_to_int(to_words(pool, number))


def from_int(
    pool: ChunkPool, number: Optional[Number], value: int
) -> Tuple[ChunkPool, Optional[Number], Status]:
    words = int_to_words(value)
    return bulk_load(pool, number, len(words), words)


def check_invariants(pool: ChunkPool, number: Number) -> List[str]:
    """Return a description of every violated container invariant."""
    problems: List[str] = []
    cap = chunk_capacity(pool)
    ids = chain_ids(pool, number.head)
    if not ids:
        return ["chain is empty"]
    if number.count < 1:
        problems.append(f"count={number.count} < 1")
    if number.count != len(ids):
        problems.append(f"count={number.count} but chain holds {len(ids)} chunks")
    if ids[-1] != number.tail:
        problems.append(f"tail={number.tail} but chain ends at {ids[-1]}")
    if chunk_prev(pool, number.head) != NULL_CHUNK:
        problems.append("head has a predecessor")
    for pos, chunk in enumerate(ids):
        n = chunk_len(pool, chunk)
        if n < 0 or n > cap:
            problems.append(f"chunk {chunk} length {n} outside [0, {cap}]")
        if pos < len(ids) - 1 and n != cap:
            problems.append(f"interior chunk {chunk} holds {n} of {cap} words")
        if pos > 0 and chunk_prev(pool, chunk) != ids[pos - 1]:
            problems.append(f"chunk {chunk} back link broken")
    return problems


__all__ = [
    "Number",
    "construct",
    "destroy",
    "length",
    "append",
    "chunks_required",
    "bulk_load",
    "word_count",
    "to_words",
    "words_to_int",
    "int_to_words",
    "to_int",
    "from_int",
    "check_invariants",
]
