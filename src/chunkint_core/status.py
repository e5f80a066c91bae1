from __future__ import annotations

from enum import IntEnum

from chunkint_core.errors import (
    ChunkIntAllocationError,
    ChunkIntCorruptError,
    ChunkIntNullArgumentError,
)


class Status(IntEnum):
    OK = 0
    NULL_ARGUMENT = 1
    ALLOCATION_FAILURE = 2
    CORRUPT = 3


def coerce_status(value: Status | int | bool) -> Status:
    """Normalize allocator `ok` flags and raw codes to Status."""
    if isinstance(value, Status):
        return value
    if isinstance(value, bool):
        return Status.OK if value else Status.ALLOCATION_FAILURE
    return Status(int(value))


def raise_if_bad(
    status: Status | int | bool,
    context: str | None = None,
    *,
    argument: str = "handle",
) -> None:
    status = coerce_status(status)
    if status == Status.OK:
        return
    if status == Status.NULL_ARGUMENT:
        raise ChunkIntNullArgumentError(argument=argument, context=context)
    if status == Status.ALLOCATION_FAILURE:
        raise ChunkIntAllocationError(context=context)
    raise ChunkIntCorruptError(context=context)


__all__ = [
    "Status",
    "coerce_status",
    "raise_if_bad",
]
