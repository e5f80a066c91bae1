import argparse
import shlex
import sys
from typing import Dict, List, Optional

from chunkint_core.config import DEFAULT_POOL_CONFIG, PoolConfig
from chunkint_core.errors import ChunkIntNullArgumentError
from chunkint_vm_core.facade import ChunkIntVM

HELP = """\
   new NAME                 allocate a number (value 0)
   load NAME W0 [W1 ...]    hex words, least significant first
   int NAME DECIMAL         load a decimal value
   add DST SRC              DST += SRC
   show NAME                hex words in storage order
   value NAME               decimal value
   len NAME                 chunk count
   free NAME                release a number
   exit"""


def _lookup(names: Dict[str, int], name: str) -> int:
    if name not in names:
        raise ChunkIntNullArgumentError(argument=name, context="unknown name")
    return names[name]


def run_program_lines(lines: List[str], vm: ChunkIntVM, names: Dict[str, int]) -> List[str]:
    """Execute shell commands; returns the lines printed."""
    out: List[str] = []
    for raw in lines:
        parts = shlex.split(raw, comments=True)
        if not parts:
            continue
        cmd, args = parts[0], parts[1:]
        if cmd == "new":
            (name,) = args
            if name in names:
                vm.destroy(names[name])
            names[name] = vm.construct()
        elif cmd == "load":
            name, words = args[0], args[1:]
            vm.bulk_load(_lookup(names, name), [int(w, 16) for w in words])
        elif cmd == "int":
            name, value = args
            vm.load_int(_lookup(names, name), int(value))
        elif cmd == "add":
            dst, src = args
            vm.add(_lookup(names, dst), _lookup(names, src))
            out.append(f"   └─ {dst} = {vm.render(names[dst])}")
        elif cmd == "show":
            (name,) = args
            out.append(f"   └─ {name} = {vm.render(_lookup(names, name))}")
        elif cmd == "value":
            (name,) = args
            out.append(f"   └─ {name} = {vm.to_int(_lookup(names, name))}")
        elif cmd == "len":
            (name,) = args
            out.append(f"   └─ {name}: {vm.length(names.get(name))} chunks")
        elif cmd == "free":
            (name,) = args
            vm.destroy(names.pop(name, None))
        elif cmd == "help":
            out.append(HELP)
        else:
            raise ValueError(f"unknown command: {cmd!r}")
    for line in out:
        print(line)
    return out


def repl(vm: Optional[ChunkIntVM] = None):
    vm = vm or ChunkIntVM()
    names: Dict[str, int] = {}
    print("\nchunkint shell (type 'help')")
    while True:
        try:
            inp = input("\n#> ").strip()
        except EOFError:
            break
        if inp == "exit":
            break
        if not inp:
            continue
        try:
            run_program_lines([inp], vm, names)
        except Exception as e:
            print(f"   ERROR: {e}")
    return vm


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="chunkint", description="Chunked big-integer shell.")
    parser.add_argument("--pool-chunks", type=int, default=DEFAULT_POOL_CONFIG.capacity)
    parser.add_argument("--chunk-words", type=int, default=DEFAULT_POOL_CONFIG.chunk_words)
    parser.add_argument(
        "-c",
        "--command",
        action="append",
        default=[],
        help="run a command (repeatable) instead of starting the shell",
    )
    parser.add_argument("path", nargs="?", help="file of commands, one per line")
    args = parser.parse_args(argv)

    cfg = PoolConfig(capacity=args.pool_chunks, chunk_words=args.chunk_words)
    vm = ChunkIntVM(cfg)
    lines = list(args.command)
    if args.path:
        with open(args.path, "r", encoding="utf-8") as handle:
            lines.extend(handle.read().splitlines())
    if not lines:
        repl(vm)
        return 0
    try:
        run_program_lines(lines, vm, {})
    except Exception as e:
        print(f"   ERROR: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
