from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ChunkIntNullArgumentError(ValueError):
    argument: str
    context: str | None = None

    def __str__(self) -> str:
        if self.context:
            return f"{self.context}: required argument {self.argument!r} is absent"
        return f"required argument {self.argument!r} is absent"


@dataclass(frozen=True)
class ChunkIntAllocationError(MemoryError):
    requested: int = 1
    available: int | None = None
    context: str | None = None

    def __str__(self) -> str:
        where = f"{self.context}: " if self.context else ""
        if self.available is None:
            return f"{where}chunk pool exhausted"
        return (
            f"{where}chunk pool exhausted "
            f"(requested={self.requested}, available={self.available})"
        )


@dataclass(frozen=True)
class ChunkIntCursorError(RuntimeError):
    message: str
    context: str | None = None

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class ChunkIntConfigError(ValueError):
    name: str
    value: object

    def __str__(self) -> str:
        return f"{self.name} must be a positive integer, got {self.value!r}"


@dataclass(frozen=True)
class ChunkIntCorruptError(RuntimeError):
    message: str = "CORRUPT: chunk pool free stack overflow"
    context: str | None = None

    def __str__(self) -> str:
        return self.message


__all__ = [
    "ChunkIntNullArgumentError",
    "ChunkIntAllocationError",
    "ChunkIntCursorError",
    "ChunkIntConfigError",
    "ChunkIntCorruptError",
]
