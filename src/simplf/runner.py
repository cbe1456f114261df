from __future__ import annotations

import argparse
import logging
import sys
import traceback
from pathlib import Path
from typing import List, Optional, Sequence, TextIO, Tuple

from .evaluator import Interpreter
from .lower import lower
from .parser import ParseError, parse_source
from .tree import Expression, Stmt, render
from .types import SfValue, SimplfRuntimeError
from .utils import debug_py_trace_enabled

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_USAGE = 64
EXIT_DATAERR = 65
EXIT_SOFTWARE = 70

# Each language call nests several Python frames.
RECURSION_LIMIT = 10_000

def parse(source: str) -> List[Stmt]:
    """Parse and lower source text into statements ready for the interpreter."""
    statements = parse_source(source)
    logger.debug("parsed %d top-level statements", len(statements))
    lowered = lower(statements)
    logger.debug("lowered program")
    return lowered

def report_runtime_error(err: SimplfRuntimeError, stream: Optional[TextIO]=None) -> None:
    out = stream if stream is not None else sys.stderr
    print(err.message, file=out)

    if err.line is not None:
        print(f"[line {err.line}]", file=out)

    if debug_py_trace_enabled() and err.__traceback__ is not None:
        print("\nPython traceback:", file=out)
        print("".join(traceback.format_tb(err.__traceback__)), file=out, end="")

def raise_recursion_limit(limit: int=RECURSION_LIMIT) -> None:
    if sys.getrecursionlimit() < limit:
        sys.setrecursionlimit(limit)
        logger.debug("recursion limit raised to %d", limit)

def make_interpreter(out: Optional[TextIO]=None) -> Interpreter:
    return Interpreter(out=out, reporter=report_runtime_error)

def run(source: str, interpreter: Optional[Interpreter]=None) -> bool:
    """Run a program. Raises ParseError; returns False if a runtime error was reported."""
    interp = interpreter if interpreter is not None else make_interpreter()
    statements = parse(source)
    logger.debug("executing program")
    return interp.interpret(statements)

def repl_eval(text: str, interpreter: Interpreter) -> Tuple[Optional[SfValue], bool]:
    """
    Evaluate one REPL input against a persistent interpreter.

    Returns (value, ok). A lone expression, with or without its trailing
    semicolon, yields its value for echoing; statements yield None.
    Runtime errors propagate to the caller.
    """
    try:
        statements = parse(text)
    except ParseError:
        # `1 + 2` is accepted as shorthand for `1 + 2;`
        try:
            statements = parse(text.rstrip() + ";")
        except ParseError:
            pass
        else:
            if _is_lone_expression(statements):
                return interpreter.evaluate(statements[0].expression), True
        raise

    if _is_lone_expression(statements):
        return interpreter.evaluate(statements[0].expression), True

    for stmt in statements:
        interpreter.execute(stmt)

    return None, True

def _is_lone_expression(statements: List[Stmt]) -> bool:
    return len(statements) == 1 and isinstance(statements[0], Expression)

def _load_source(arg: str) -> str:
    """
    Resolve CLI input into source text.
    - "-" => read stdin.
    - Otherwise treat the argument as a script path.
    """
    if arg == "-":
        return sys.stdin.read()

    return Path(arg).read_text(encoding="utf-8")

def run_file(path: str, dump_ast: bool=False) -> int:
    try:
        source = _load_source(path)
    except OSError as exc:
        print(f"Could not read {path}: {exc.strerror}", file=sys.stderr)
        return EXIT_USAGE
    except UnicodeDecodeError as exc:
        print(f"Could not read {path}: not valid UTF-8 (byte {exc.start})", file=sys.stderr)
        return EXIT_USAGE

    try:
        statements = parse(source)
    except ParseError as exc:
        print(exc, file=sys.stderr)
        return EXIT_DATAERR

    if dump_ast:
        print(render(statements))
        return EXIT_OK

    try:
        ok = make_interpreter().interpret(statements)
    except RecursionError:
        print("Stack overflow.", file=sys.stderr)
        return EXIT_SOFTWARE

    return EXIT_OK if ok else EXIT_SOFTWARE

def build_arg_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="simplf", description="Run a Simplf script, or start the REPL.")
    ap.add_argument("script", nargs="?", help="script path, or - for stdin; omit for the REPL")
    ap.add_argument("--dump-ast", action="store_true", help="print the lowered program instead of running it")
    ap.add_argument("--verbose", "-v", action="store_true", help="log pipeline phases to stderr")
    return ap

def main(argv: Optional[Sequence[str]]=None) -> int:
    args = build_arg_parser().parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    raise_recursion_limit()

    if args.script is None:
        from .repl import repl
        repl()
        return EXIT_OK

    return run_file(args.script, dump_ast=args.dump_ast)

if __name__ == "__main__":
    sys.exit(main())
