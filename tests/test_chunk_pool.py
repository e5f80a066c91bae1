import jax.numpy as jnp
import pytest

from chunkint_core import chunk as ch
from chunkint_core.alloc import alloc_chunks, free_chunks
from chunkint_core.config import PoolConfig
from chunkint_core.constants import NULL_CHUNK

pytestmark = pytest.mark.m1


def _chain(pool, ids):
    for a, b in zip(ids, ids[1:]):
        pool = ch.link_chunks(pool, a, b)
    return pool


def test_pool_init_free_stack():
    pool = ch.init_chunk_pool(PoolConfig(capacity=4, chunk_words=3))
    assert ch.pool_capacity(pool) == 4
    assert ch.chunk_capacity(pool) == 3
    assert ch.pool_free_count(pool) == 4
    assert list(map(int, pool.free_stack)) == [3, 2, 1, 0]
    assert not ch.pool_corrupt(pool)


def test_make_chunk_is_empty_and_unlinked(pool):
    pool, chunk, ok = ch.make_chunk(pool)
    assert ok
    assert chunk == 0
    assert ch.chunk_len(pool, chunk) == 0
    assert ch.chunk_next(pool, chunk) == NULL_CHUNK
    assert ch.chunk_prev(pool, chunk) == NULL_CHUNK
    assert ch.pool_free_count(pool) == 63


def test_make_chunk_exhaustion_returns_pool_unchanged(tiny_pool):
    pool = tiny_pool
    for _ in range(4):
        pool, _, ok = ch.make_chunk(pool)
        assert ok
    before = pool
    after, chunk, ok = ch.make_chunk(pool)
    assert not ok
    assert chunk == NULL_CHUNK
    assert after is before


def test_set_chunk_words_sets_length(pool):
    pool, chunk, _ = ch.make_chunk(pool)
    pool = ch.set_chunk_words(pool, chunk, [7, 0xFFFFFFFF])
    assert ch.chunk_len(pool, chunk) == 2
    assert ch.chunk_word(pool, chunk, 1) == 0xFFFFFFFF
    assert list(map(int, ch.chunk_words(pool, chunk))) == [7, 0xFFFFFFFF]


def test_set_chunk_words_rejects_overflow(pool):
    pool, chunk, _ = ch.make_chunk(pool)
    with pytest.raises(ValueError):
        ch.set_chunk_words(pool, chunk, [1, 2, 3, 4, 5])


def test_trim_at_detaches_suffix(pool):
    ids = []
    for _ in range(4):
        pool, chunk, _ = ch.make_chunk(pool)
        ids.append(chunk)
    pool = _chain(pool, ids)
    pool, detached = ch.trim_at(pool, ids[1])
    assert detached == ids[2]
    assert ch.chain_ids(pool, ids[0]) == ids[:2]
    assert ch.chain_ids(pool, detached) == ids[2:]
    assert ch.chunk_prev(pool, detached) == NULL_CHUNK


def test_trim_at_tail_detaches_nothing(pool):
    pool, chunk, _ = ch.make_chunk(pool)
    pool, detached = ch.trim_at(pool, chunk)
    assert detached == NULL_CHUNK


def test_free_chain_releases_every_chunk(pool):
    ids = []
    for _ in range(5):
        pool, chunk, _ = ch.make_chunk(pool)
        ids.append(chunk)
    pool = _chain(pool, ids)
    assert ch.pool_free_count(pool) == 59
    pool, released = ch.free_chain(pool, ids[0])
    assert released == 5
    assert ch.pool_free_count(pool) == 64


def test_free_chain_null_is_noop(pool):
    after, released = ch.free_chain(pool, NULL_CHUNK)
    assert released == 0
    assert after is pool


def test_free_overflow_marks_corrupt(tiny_pool):
    pool = free_chunks(tiny_pool, jnp.asarray([0], dtype=jnp.int32))
    assert ch.pool_corrupt(pool)
    _, _, ok = alloc_chunks(pool, 1)
    assert not ok


def test_alloc_zero_chunks(tiny_pool):
    pool, ids, ok = alloc_chunks(tiny_pool, 0)
    assert ok
    assert ids.size == 0
    assert pool is tiny_pool
