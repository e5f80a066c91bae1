from __future__ import annotations

from typing import Optional

import numpy as np

from chunkint_core.chunk import ChunkPool
from chunkint_core.constants import HEX_CHARS_PER_WORD, WORD_BITS
from chunkint_vm_core.number import Number, to_words, word_count

# Shared lookup table; frombuffer over bytes is read-only.
HEX_DIGITS = np.frombuffer(b"0123456789abcdef", dtype=np.uint8)
# Most-significant nibble first.
_NIBBLE_SHIFTS = np.arange(WORD_BITS - 4, -4, -4, dtype=np.uint32)


def hex_words(words: np.ndarray) -> str:
    words = np.asarray(words, dtype=np.uint32)
    if words.size == 0:
        return ""
    nibbles = (words[:, None] >> _NIBBLE_SHIFTS[None, :]) & np.uint32(0xF)
    return HEX_DIGITS[nibbles].tobytes().decode("ascii")


def render_buffer_size(pool: ChunkPool, number: Optional[Number]) -> int:
    """Exact C-style buffer size for `render`: hex digits plus terminator."""
    if number is None:
        return 0
    return word_count(pool, number) * HEX_CHARS_PER_WORD + 1


def render(pool: ChunkPool, number: Optional[Number]) -> Optional[str]:
    """Fixed-width lowercase hex of every valid word, in storage order."""
    if number is None:
        return None
    text = hex_words(to_words(pool, number))
    assert len(text) + 1 == render_buffer_size(pool, number)
    return text


__all__ = [
    "HEX_DIGITS",
    "hex_words",
    "render_buffer_size",
    "render",
]
