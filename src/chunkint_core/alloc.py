"""Free-stack allocator for chunk ids.

These helpers assume a state object with fields:
  free_stack, free_top, corrupt
and a `_replace` method (e.g. NamedTuple).

Failed allocations hand back the state they were given, so callers can
abort an operation without undoing anything.
"""

from typing import Tuple

import jax.numpy as jnp

from chunkint_core.host import _host_bool_value, _host_int_value


def host_flag(value: jnp.ndarray) -> bool:
    return _host_bool_value(value)


def alloc_chunks(state, count: int) -> Tuple[object, jnp.ndarray, bool]:
    n = int(count)
    if n == 0:
        return state, jnp.zeros((0,), dtype=jnp.int32), True
    if host_flag(state.corrupt):
        return state, jnp.zeros((n,), dtype=jnp.int32), False
    free_top = _host_int_value(state.free_top)
    if free_top < n:
        return state, jnp.zeros((n,), dtype=jnp.int32), False
    ids = state.free_stack[free_top - n:free_top]
    return state._replace(free_top=jnp.int32(free_top - n)), ids, True


def free_chunks(state, ids: jnp.ndarray):
    ids = jnp.asarray(ids, dtype=jnp.int32)
    if ids.size == 0:
        return state
    if host_flag(state.corrupt):
        return state
    count = int(ids.shape[0])
    free_top = _host_int_value(state.free_top)
    cap = int(state.free_stack.shape[0])
    if free_top + count > cap:
        return state._replace(corrupt=jnp.bool_(True))
    free_stack = state.free_stack.at[free_top:free_top + count].set(ids)
    return state._replace(free_stack=free_stack, free_top=jnp.int32(free_top + count))


def free_count(state) -> int:
    return _host_int_value(state.free_top)


__all__ = [
    "host_flag",
    "alloc_chunks",
    "free_chunks",
    "free_count",
]
