"""Host-facing handle API over the functional chunk/number core.

`ChunkIntVM` owns one chunk pool and a table of integer handles. Status
results from the core are turned into exceptions here.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence

import numpy as np

from chunkint_baseline.kernels import add_words
from chunkint_core.chunk import init_chunk_pool, pool_corrupt, pool_free_count
from chunkint_core.config import DEFAULT_POOL_CONFIG, PoolConfig
from chunkint_core.constants import CROSSCHECK
from chunkint_core.errors import ChunkIntCorruptError, ChunkIntNullArgumentError
from chunkint_core.status import Status, raise_if_bad
from chunkint_vm_core import arith as _arith
from chunkint_vm_core import number as _number
from chunkint_vm_core.number import Number
from chunkint_vm_core.render import render as _render

logger = logging.getLogger(__name__)

Handle = int


class ChunkIntVM:
    def __init__(
        self,
        cfg: PoolConfig = DEFAULT_POOL_CONFIG,
        *,
        crosscheck: Optional[bool] = None,
    ):
        self.cfg = cfg
        self.pool = init_chunk_pool(cfg)
        self.numbers: Dict[Handle, Number] = {}
        self.crosscheck = CROSSCHECK if crosscheck is None else bool(crosscheck)
        self._next_handle = 1

    def _require_number(self, handle: Optional[Handle], context: str) -> Number:
        if handle is None or handle not in self.numbers:
            raise ChunkIntNullArgumentError(argument="handle", context=context)
        return self.numbers[handle]

    def _check_pool(self, context: str) -> None:
        if pool_corrupt(self.pool):
            raise ChunkIntCorruptError(context=context)

    @property
    def free_chunks(self) -> int:
        return pool_free_count(self.pool)

    def construct(self) -> Handle:
        self._check_pool("construct")
        pool, number, status = _number.construct(self.pool)
        raise_if_bad(status, "construct")
        self.pool = pool
        handle = self._next_handle
        self._next_handle += 1
        self.numbers[handle] = number
        logger.debug("constructed number %d at chunk %d", handle, number.head)
        return handle

    def destroy(self, handle: Optional[Handle]) -> None:
        number = self.numbers.pop(handle, None) if handle is not None else None
        if number is None:
            return
        self.pool = _number.destroy(self.pool, number)
        self._check_pool("destroy")

    def length(self, handle: Optional[Handle]) -> int:
        if handle is None:
            return 0
        return _number.length(self.numbers.get(handle))

    def number(self, handle: Handle) -> Number:
        return self._require_number(handle, "number")

    def bulk_load(
        self,
        handle: Handle,
        words: Optional[Sequence[int]],
        word_count: Optional[int] = None,
    ) -> None:
        number = self._require_number(handle, "bulk_load")
        if words is None:
            raise_if_bad(Status.NULL_ARGUMENT, "bulk_load", argument="words")
        if word_count is None:
            word_count = len(words)
        pool, number, status = _number.bulk_load(self.pool, number, word_count, words)
        raise_if_bad(status, "bulk_load")
        self.pool = pool
        self.numbers[handle] = number

    def load_int(self, handle: Handle, value: int) -> None:
        self.bulk_load(handle, _number.int_to_words(value))

    def add(self, handle: Handle, other: Handle) -> Handle:
        """`handle += other`; returns `handle`."""
        acc = self._require_number(handle, "add")
        addend = self._require_number(other, "add")
        self._check_pool("add")
        expected = None
        if self.crosscheck:
            expected = add_words(
                _number.to_words(self.pool, acc),
                _number.to_words(self.pool, addend),
            )
        pool, acc, status = _arith.add(self.pool, acc, addend)
        raise_if_bad(status, "add")
        if expected is not None:
            got = _number.to_words(pool, acc)
            if not np.array_equal(got, expected):
                raise ChunkIntCorruptError(
                    f"CORRUPT: chunked add {got.tolist()} != reference {expected.tolist()}",
                    context="add",
                )
        self.pool = pool
        self.numbers[handle] = acc
        return handle

    def render(self, handle: Optional[Handle]) -> Optional[str]:
        if handle is None:
            return None
        return _render(self.pool, self.numbers.get(handle))

    def words(self, handle: Handle) -> List[int]:
        number = self._require_number(handle, "words")
        return [int(w) for w in _number.to_words(self.pool, number)]

    def to_int(self, handle: Handle) -> int:
        number = self._require_number(handle, "to_int")
        return _number.to_int(self.pool, number)

    def check(self, handle: Handle) -> List[str]:
        return _number.check_invariants(self.pool, self._require_number(handle, "check"))


__all__ = [
    "Handle",
    "ChunkIntVM",
]
