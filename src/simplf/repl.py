"""Interactive REPL for Simplf, powered by prompt_toolkit."""

from __future__ import annotations

import logging
import re
import sys
import traceback
from typing import Optional, TextIO

from lark import UnexpectedCharacters
from prompt_toolkit import PromptSession
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.shortcuts import clear

from .eval.common import stringify
from .evaluator import Interpreter
from .parser import ParseError, make_parser
from .repl_highlight import SimplfLexer
from .runner import make_interpreter, repl_eval
from .types import SfNil, SimplfRuntimeError
from .runner import raise_recursion_limit
from .utils import debug_py_trace_enabled, set_debug_py_trace

logger = logging.getLogger(__name__)

# Zero-width and invisible characters to strip from input.
_INVISIBLE_RE = re.compile("[\u200b\u200c\u200d\ufeff\u00a0\r]")

# Slash commands: name => (description, argument_hint).
_SLASH_CMDS = {
    "/clear": ("Clear the terminal screen", ""),
    "/env": ("List the variables currently in scope", ""),
    "/py-traceback": ("Toggle Python traceback on errors", "[on|off]"),
    "/reset": ("Reset the REPL environment", ""),
}

# /py-traceback arguments.
_SWITCH_WORDS = {
    "on": True, "1": True, "true": True, "yes": True,
    "off": False, "0": False, "false": False, "no": False,
}

_OPENERS = {"(": ")", "{": "}"}
_CLOSERS = {")", "}"}


def is_complete(text: str) -> bool:
    """Return True once every `(` and `{` is closed and no string is left open."""
    depth = 0

    try:
        for tok in make_parser().lex(text):
            value = str(tok)
            if value in _OPENERS:
                depth += 1
            elif value in _CLOSERS:
                depth -= 1
    except UnexpectedCharacters as exc:
        # An unterminated string keeps the input open; anything else is the parser's to report.
        return getattr(exc, "char", None) != '"'

    return depth <= 0


def slash_completer() -> WordCompleter:
    """Complete slash commands; the whole input is the word, so only a leading `/` matches."""
    return WordCompleter(
        list(_SLASH_CMDS),
        meta_dict={cmd: desc for cmd, (desc, _hint) in _SLASH_CMDS.items()},
        sentence=True,
    )


class ReplSession:
    """Interpreter state shared across REPL inputs; /reset swaps in a fresh one."""

    def __init__(self, out: Optional[TextIO]=None):
        self.out = out
        self.interpreter: Interpreter = make_interpreter(out=out)

    def reset(self) -> None:
        self.interpreter = make_interpreter(out=self.out)

    def env_listing(self) -> list[str]:
        env = self.interpreter.environment
        lines = []
        for name in env.visible_names():
            binding = env.lookup(name)
            lines.append(f"{name} = {stringify(binding.value)}")
        return lines


def handle_slash(line: str, session: ReplSession, out: Optional[TextIO]=None, err: Optional[TextIO]=None) -> bool:
    """Handle slash commands. Returns True if the line was a command."""
    out = out if out is not None else sys.stdout
    err = err if err is not None else sys.stderr

    stripped = line.strip()
    if not stripped.startswith("/"):
        return False

    parts = stripped.split(None, 1)
    cmd = parts[0]
    arg = parts[1] if len(parts) > 1 else ""

    if cmd == "/clear":
        clear()
        return True

    if cmd == "/env":
        listing = session.env_listing()
        if not listing:
            print("(no variables)", file=out)
        for entry in listing:
            print(entry, file=out)
        return True

    if cmd == "/py-traceback":
        word = arg.lower()
        if word and word not in _SWITCH_WORDS:
            print("Usage: /py-traceback [on|off]", file=err)
            return True

        set_debug_py_trace(_SWITCH_WORDS[word] if word else not debug_py_trace_enabled())
        print(f"Python traceback: {'on' if debug_py_trace_enabled() else 'off'}", file=out)
        return True

    if cmd == "/reset":
        session.reset()
        print("Environment reset.", file=out)
        return True

    print(f"Unknown command: {cmd}", file=err)
    return True


def normalize(text: str) -> str:
    """Strip invisible characters from input."""
    return _INVISIBLE_RE.sub("", text)


def eval_input(text: str, session: ReplSession, out: Optional[TextIO]=None, err: Optional[TextIO]=None) -> bool:
    """Evaluate one submitted input, echoing a bare expression's value. Returns False on error."""
    out = out if out is not None else sys.stdout
    err = err if err is not None else sys.stderr

    try:
        value, _ = repl_eval(text, session.interpreter)
    except (ParseError, SimplfRuntimeError) as exc:
        print(f"Error: {exc}", file=err)
        if debug_py_trace_enabled() and isinstance(exc, SimplfRuntimeError) and exc.__traceback__ is not None:
            print("\nPython traceback:", file=err)
            print("".join(traceback.format_tb(exc.__traceback__)), file=err, end="")
        return False
    except RecursionError:
        print("Error: Stack overflow.", file=err)
        return False

    if value is not None and not isinstance(value, SfNil):
        print(stringify(value), file=out)

    return True


def repl() -> None:
    """Interactive read-eval-print loop with prompt_toolkit."""
    raise_recursion_limit()
    session_state = ReplSession()

    history = InMemoryHistory()
    lexer = SimplfLexer()

    bindings = KeyBindings()

    @bindings.add("backspace")
    def _backspace(event):
        buf = event.app.current_buffer
        buf.delete_before_cursor(1)
        if buf.text.startswith("/"):
            buf.start_completion()

    @bindings.add("enter")
    def _enter(event):
        buf = event.app.current_buffer
        text = buf.text

        if text.startswith("/") or is_complete(text):
            buf.validate_and_handle()
            return

        buf.insert_text("\n    ")

    session: PromptSession[str] = PromptSession(
        history=history,
        lexer=lexer,
        completer=slash_completer(),
        complete_while_typing=True,
        key_bindings=bindings,
        multiline=True,
        prompt_continuation="... ",
    )

    print("simplf repl (Ctrl-D to exit, / for commands)")

    while True:
        try:
            text = session.prompt(">>> ")
        except EOFError:
            print()
            break
        except KeyboardInterrupt:
            print("KeyboardInterrupt")
            continue

        text = normalize(text)
        if not text.strip():
            continue

        if handle_slash(text, session_state):
            continue

        logger.debug("evaluating %d chars", len(text))
        eval_input(text, session_state)
