"""Root-level re-export of the chunked big-integer surface.

Keeps `import chunkint_vm as cv` working from the repo root (scripts,
tests) alongside the src/ packages.
"""

from chunkint_core.chunk import (
    ChunkPool,
    init_chunk_pool,
    make_chunk,
    trim_at,
    free_chain,
    pool_free_count,
)
from chunkint_core.config import DEFAULT_POOL_CONFIG, PoolConfig
from chunkint_core.constants import (
    CHUNK_WORDS,
    HEX_CHARS_PER_WORD,
    NULL_CHUNK,
    WORD_BITS,
    WORD_MASK,
)
from chunkint_core.errors import (
    ChunkIntAllocationError,
    ChunkIntConfigError,
    ChunkIntCorruptError,
    ChunkIntCursorError,
    ChunkIntNullArgumentError,
)
from chunkint_core.status import Status, raise_if_bad
from chunkint_vm_core.arith import add
from chunkint_vm_core.cursor import (
    Cursor,
    advance,
    advance_with_growth,
    exhausted,
    open_cursor,
    read,
    write,
)
from chunkint_vm_core.facade import ChunkIntVM
from chunkint_vm_core.number import (
    Number,
    append,
    bulk_load,
    construct,
    destroy,
    length,
    to_int,
    to_words,
)
from chunkint_vm_core.render import render, render_buffer_size

__all__ = [
    "ChunkPool",
    "init_chunk_pool",
    "make_chunk",
    "trim_at",
    "free_chain",
    "pool_free_count",
    "DEFAULT_POOL_CONFIG",
    "PoolConfig",
    "CHUNK_WORDS",
    "HEX_CHARS_PER_WORD",
    "NULL_CHUNK",
    "WORD_BITS",
    "WORD_MASK",
    "ChunkIntAllocationError",
    "ChunkIntConfigError",
    "ChunkIntCorruptError",
    "ChunkIntCursorError",
    "ChunkIntNullArgumentError",
    "Status",
    "raise_if_bad",
    "add",
    "Cursor",
    "advance",
    "advance_with_growth",
    "exhausted",
    "open_cursor",
    "read",
    "write",
    "ChunkIntVM",
    "Number",
    "append",
    "bulk_load",
    "construct",
    "destroy",
    "length",
    "to_int",
    "to_words",
    "render",
    "render_buffer_size",
]
