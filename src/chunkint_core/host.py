"""Device-to-host reads of pool arrays."""

from __future__ import annotations

import jax
import numpy as np


def _host_int_value(value) -> int:
    if isinstance(value, (bool, np.bool_)):
        raise TypeError("expected an integer scalar, got a boolean")
    return int(jax.device_get(value))


def _host_bool_value(value) -> bool:
    return bool(jax.device_get(value))


def _host_words(value) -> np.ndarray:
    return np.asarray(jax.device_get(value), dtype=np.uint32)


__all__ = [
    "_host_int_value",
    "_host_bool_value",
    "_host_words",
]
