from __future__ import annotations

import logging
from typing import NamedTuple, Optional, Tuple

from chunkint_core.chunk import (
    ChunkPool,
    chunk_capacity,
    chunk_len,
    chunk_next,
    chunk_word,
    make_chunk,
    set_chunk_len,
    set_chunk_word,
    set_chunk_words,
)
from chunkint_core.constants import NULL_CHUNK
from chunkint_core.errors import ChunkIntCursorError
from chunkint_core.status import Status
from chunkint_vm_core.number import Number, append

logger = logging.getLogger(__name__)


class Cursor(NamedTuple):
    """Position inside one number: (chunk, index), or exhausted.

    `head` identifies the number the cursor was opened on and `generation`
    the structural version it saw. Only `advance_with_growth` may change
    the number's structure while the cursor stays usable.
    """

    head: int
    chunk: int
    index: int
    generation: int


def _require_cursor(number: Number, cursor: Cursor, context: str) -> None:
    if cursor.head != number.head:
        raise ChunkIntCursorError(
            f"{context}: cursor belongs to the number at chunk {cursor.head}, "
            f"not {number.head}",
            context=context,
        )
    if cursor.generation != number.generation:
        raise ChunkIntCursorError(
            f"{context}: cursor opened at generation {cursor.generation} "
            f"used after structural mutation (now {number.generation})",
            context=context,
        )


def _first_nonempty(pool: ChunkPool, chunk: int) -> int:
    while chunk != NULL_CHUNK and chunk_len(pool, chunk) == 0:
        chunk = chunk_next(pool, chunk)
    return chunk


def exhausted(cursor: Optional[Cursor]) -> bool:
    return cursor is None or cursor.chunk == NULL_CHUNK


def open_cursor(pool: ChunkPool, number: Optional[Number]) -> Optional[Cursor]:
    """Cursor on the first valid word; exhausted if the number holds none."""
    if number is None:
        return None
    return Cursor(
        head=number.head,
        chunk=_first_nonempty(pool, number.head),
        index=0,
        generation=number.generation,
    )


def advance(
    pool: ChunkPool, number: Number, cursor: Optional[Cursor]
) -> Optional[Cursor]:
    if cursor is None:
        return None
    _require_cursor(number, cursor, "advance")
    if cursor.chunk == NULL_CHUNK:
        return cursor
    index = cursor.index + 1
    if index < chunk_len(pool, cursor.chunk):
        return cursor._replace(index=index)
    chunk = _first_nonempty(pool, chunk_next(pool, cursor.chunk))
    return cursor._replace(chunk=chunk, index=0)


def advance_with_growth(
    pool: ChunkPool, number: Number, cursor: Cursor
) -> Tuple[ChunkPool, Number, Cursor, Status]:
    """Advance, extending `number` by one zero word when past its end.

    Spare room in the tail chunk is used first; otherwise a fresh
    single-word chunk is appended. On allocation failure everything is
    returned unchanged with Status.ALLOCATION_FAILURE.
    """
    moved = advance(pool, number, cursor)
    if not exhausted(moved):
        return pool, number, moved, Status.OK

    tail = number.tail
    used = chunk_len(pool, tail)
    if used < chunk_capacity(pool):
        grown = set_chunk_word(pool, tail, used, 0)
        grown = set_chunk_len(grown, tail, used + 1)
        number2 = number._replace(generation=number.generation + 1)
        logger.debug("extended tail chunk %d to %d words", tail, used + 1)
        return grown, number2, Cursor(number.head, tail, used, number2.generation), Status.OK

    grown, chunk, ok = make_chunk(pool)
    if not ok:
        return pool, number, cursor, Status.ALLOCATION_FAILURE
    grown = set_chunk_words(grown, chunk, [0])
    grown, number2, status = append(grown, number, chunk)
    if status != Status.OK:
        return pool, number, cursor, status
    logger.debug("appended chunk %d (chunks=%d)", chunk, number2.count)
    return grown, number2, Cursor(number.head, chunk, 0, number2.generation), Status.OK


def read(pool: ChunkPool, number: Number, cursor: Optional[Cursor]) -> int:
    """Word under the cursor; 0 past the end (implicit leading zero)."""
    if exhausted(cursor):
        return 0
    _require_cursor(number, cursor, "read")
    return chunk_word(pool, cursor.chunk, cursor.index)


def write(
    pool: ChunkPool, number: Number, cursor: Optional[Cursor], value: int
) -> ChunkPool:
    if exhausted(cursor):
        raise ChunkIntCursorError(
            "write: cursor is exhausted; grow with advance_with_growth first",
            context="write",
        )
    _require_cursor(number, cursor, "write")
    return set_chunk_word(pool, cursor.chunk, cursor.index, value)


__all__ = [
    "Cursor",
    "exhausted",
    "open_cursor",
    "advance",
    "advance_with_growth",
    "read",
    "write",
]
