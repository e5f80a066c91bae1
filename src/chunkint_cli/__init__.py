"""CLI helpers and the host-facing shell."""

from chunkint_cli.repl import (
    main,
    repl,
    run_program_lines,
)

__all__ = [
    "main",
    "repl",
    "run_program_lines",
]
