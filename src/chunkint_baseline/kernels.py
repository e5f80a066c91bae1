"""Contiguous-word reference adder.

Operates on plain uint32 arrays (least-significant word first) with a
single lax.scan carry chain, independent of the chunk/cursor machinery.
"""

from jax import jit, lax
import jax.numpy as jnp
import numpy as np


@jit
def kernel_add_words(acc, addend):
    def body(carry, pair):
        lv, rv = pair
        pair_sum = lv + rv
        c1 = pair_sum < lv
        total = pair_sum + carry
        c2 = total < pair_sum
        return (c1 | c2).astype(jnp.uint32), total

    carry, out = lax.scan(body, jnp.uint32(0), (acc, addend))
    return out, carry


def add_words(acc, addend) -> np.ndarray:
    """Sum of two word arrays, one word longer only when the top carries."""
    acc = np.asarray(acc, dtype=np.uint32)
    addend = np.asarray(addend, dtype=np.uint32)
    n = max(acc.shape[0], addend.shape[0])
    if n == 0:
        return np.zeros((0,), dtype=np.uint32)
    lhs = np.zeros((n,), dtype=np.uint32)
    rhs = np.zeros((n,), dtype=np.uint32)
    lhs[: acc.shape[0]] = acc
    rhs[: addend.shape[0]] = addend
    out, carry = kernel_add_words(jnp.asarray(lhs), jnp.asarray(rhs))
    out = np.asarray(out, dtype=np.uint32)
    if int(carry):
        out = np.concatenate([out, np.array([1], dtype=np.uint32)])
    return out


__all__ = [
    "kernel_add_words",
    "add_words",
]
