import random

import pytest

from chunkint_core.chunk import init_chunk_pool, pool_free_count
from chunkint_core.config import PoolConfig
from chunkint_core.constants import WORD_MASK
from chunkint_core.status import Status
from chunkint_vm_core import arith
from chunkint_vm_core import number as num

pytestmark = pytest.mark.m3

MAX = WORD_MASK


def _loaded(pool, words):
    pool, n, _ = num.construct(pool)
    pool, n, status = num.bulk_load(pool, n, len(words), words)
    assert status == Status.OK
    return pool, n


def _add(pool, lhs, rhs):
    pool, a = _loaded(pool, lhs)
    pool, b = _loaded(pool, rhs)
    pool, a, status = arith.add(pool, a, b)
    assert status == Status.OK
    assert num.check_invariants(pool, a) == []
    return pool, a, list(map(int, num.to_words(pool, a)))


def test_add_small(pool):
    _, _, words = _add(pool, [1], [2])
    assert words == [3]


def test_add_zero_is_identity(pool):
    for x in ([0], [5], [MAX, 1, 2, 3, 4], [MAX] * 6):
        _, _, words = _add(pool, x, [0])
        assert words == x


def test_add_to_zero_accumulator(pool):
    _, _, words = _add(pool, [0], [7, 8, 9])
    assert words == [7, 8, 9]


def test_single_word_carry(pool):
    _, a, words = _add(pool, [MAX], [1])
    assert words == [0, 1]
    assert num.length(a) == 1


def test_single_word_carry_grows_chunks():
    pool = init_chunk_pool(PoolConfig(capacity=8, chunk_words=1))
    pool, a, words = _add(pool, [MAX], [1])
    assert words == [0, 1]
    assert num.length(a) == 2


def test_multi_word_ripple(pool):
    _, _, words = _add(pool, [MAX, MAX], [1])
    assert words == [0, 0, 1]


def test_ripple_across_chunk_boundary(pool):
    _, a, words = _add(pool, [MAX] * 4, [1])
    assert words == [0, 0, 0, 0, 1]
    assert num.length(a) == 2


def test_carry_in_with_both_words_saturated(pool):
    _, _, words = _add(pool, [MAX, MAX], [1, MAX])
    assert words == [0, MAX, 1]


def test_shorter_addend_leaves_high_words(pool):
    _, _, words = _add(pool, [1, 2, 3, 4, 5], [1])
    assert words == [2, 2, 3, 4, 5]


def test_longer_addend_grows_accumulator(pool):
    _, a, words = _add(pool, [1], [1, 2, 3, 4, 5, 6])
    assert words == [2, 2, 3, 4, 5, 6]
    assert num.length(a) == 2


def test_empty_accumulator_gets_landing_slot(pool):
    _, _, words = _add(pool, [], [4, 5])
    assert words == [4, 5]


def test_empty_addend_is_noop(pool):
    _, _, words = _add(pool, [4, 5], [])
    assert words == [4, 5]


def test_addend_is_not_modified(pool):
    pool, a = _loaded(pool, [MAX])
    pool, b = _loaded(pool, [MAX, MAX])
    pool, a, _ = arith.add(pool, a, b)
    assert list(map(int, num.to_words(pool, b))) == [MAX, MAX]


def test_add_self_doubles(pool):
    pool, a = _loaded(pool, [MAX, 3])
    free_before = pool_free_count(pool)
    pool, a, status = arith.add(pool, a, a)
    assert status == Status.OK
    assert num.to_int(pool, a) == 2 * ((3 << 32) | MAX)
    assert pool_free_count(pool) == free_before


def test_add_null_arguments(pool):
    pool, a = _loaded(pool, [1])
    after, same, status = arith.add(pool, a, None)
    assert status == Status.NULL_ARGUMENT
    assert after is pool and same is a
    _, _, status = arith.add(pool, None, a)
    assert status == Status.NULL_ARGUMENT


def test_add_allocation_failure_is_atomic():
    pool = init_chunk_pool(PoolConfig(capacity=2, chunk_words=1))
    pool, a = _loaded(pool, [MAX])
    pool, b = _loaded(pool, [1])
    after, same, status = arith.add(pool, a, b)
    assert status == Status.ALLOCATION_FAILURE
    assert after is pool and same is a
    assert list(map(int, num.to_words(pool, a))) == [MAX]


def test_add_matches_python_ints(pool):
    rng = random.Random(1234)
    for _ in range(12):
        lhs = rng.getrandbits(rng.randint(1, 300))
        rhs = rng.getrandbits(rng.randint(1, 300))
        pool, a = _loaded(pool, num.int_to_words(lhs))
        pool, b = _loaded(pool, num.int_to_words(rhs))
        pool, a, status = arith.add(pool, a, b)
        assert status == Status.OK
        assert num.to_int(pool, a) == lhs + rhs
        assert num.check_invariants(pool, a) == []
        pool = num.destroy(pool, a)
        pool = num.destroy(pool, b)
