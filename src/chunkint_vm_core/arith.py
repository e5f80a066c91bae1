from __future__ import annotations

import logging
from typing import Optional, Tuple

from chunkint_core.chunk import ChunkPool
from chunkint_core.constants import WORD_BITS, WORD_MASK
from chunkint_core.status import Status
from chunkint_vm_core.cursor import (
    advance,
    advance_with_growth,
    exhausted,
    open_cursor,
    read,
    write,
)
from chunkint_vm_core.number import Number, bulk_load, construct, destroy, to_words

logger = logging.getLogger(__name__)


def _add_word(carry: int, lv: int, rv: int = 0) -> Tuple[int, int]:
    total = carry + lv + rv
    return total & WORD_MASK, total >> WORD_BITS


def _add_aliased(
    pool: ChunkPool, number: Number
) -> Tuple[ChunkPool, Optional[Number], Status]:
    # x += x: read from a private copy so growth never feeds the addend.
    words = to_words(pool, number)
    pool2, copy, status = construct(pool)
    if status != Status.OK:
        return pool, number, status
    pool2, copy, status = bulk_load(pool2, copy, len(words), words)
    if status != Status.OK:
        return pool, number, status
    pool2, result, status = add(pool2, number, copy)
    if status != Status.OK:
        return pool, number, status
    return destroy(pool2, copy), result, Status.OK


def add(
    pool: ChunkPool, acc: Optional[Number], addend: Optional[Number]
) -> Tuple[ChunkPool, Optional[Number], Status]:
    """In-place `acc += addend`.

    Returns the updated pool and accumulator. The accumulator grows only
    when a word actually has to be written past its end, so no leading
    zero words are introduced. Any allocation failure returns the inputs
    untouched.
    """
    if acc is None or addend is None:
        return pool, acc, Status.NULL_ARGUMENT
    if acc.head == addend.head:
        return _add_aliased(pool, acc)

    pool0, acc0 = pool, acc
    a = open_cursor(pool, acc)
    b = open_cursor(pool, addend)
    if exhausted(b):
        return pool, acc, Status.OK
    if exhausted(a):
        pool, acc, a, status = advance_with_growth(pool, acc, a)
        if status != Status.OK:
            return pool0, acc0, status

    carry = 0
    while True:
        total, carry = _add_word(carry, read(pool, acc, a), read(pool, addend, b))
        pool = write(pool, acc, a, total)
        b = advance(pool, addend, b)
        if exhausted(b):
            break
        pool, acc, a, status = advance_with_growth(pool, acc, a)
        if status != Status.OK:
            logger.warning("add: accumulator growth failed mid-sum")
            return pool0, acc0, status

    # Ripple the carry through saturated words, growing past the end if needed.
    while carry:
        pool, acc, a, status = advance_with_growth(pool, acc, a)
        if status != Status.OK:
            logger.warning("add: accumulator growth failed during carry ripple")
            return pool0, acc0, status
        total, carry = _add_word(carry, read(pool, acc, a))
        pool = write(pool, acc, a, total)

    return pool, acc, Status.OK


__all__ = [
    "add",
]
