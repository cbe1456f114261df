from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterator, List, Optional

from lark import Token
from typing_extensions import TypeAlias

if TYPE_CHECKING:
    from .tree import Stmt

# ---------- Value Model ----------

@dataclass
class SfNil:
    def __repr__(self) -> str:
        return "nil"

@dataclass
class SfNumber:
    value: float
    def __repr__(self) -> str:
        text = str(self.value)
        return text[:-2] if text.endswith(".0") else text

@dataclass
class SfString:
    value: str
    def __repr__(self) -> str:
        return f'"{self.value}"'

@dataclass
class SfBool:
    value: bool
    def __repr__(self) -> str:
        return "true" if self.value else "false"

@dataclass(eq=False)
class SfFunction:
    name: str
    params: List[str]
    body: List['Stmt']
    closure: 'Environment'  # environment captured at the declaration
    def arity(self) -> int:
        return len(self.params)
    def __repr__(self) -> str:
        return f"<fn {self.name}>"

SfValue: TypeAlias = (
    SfNil
    | SfNumber
    | SfString
    | SfBool
    | SfFunction
)

# ---------- Environment ----------

@dataclass
class Binding:
    """One named value cell. The name never changes once created; the value does."""
    name: str
    value: SfValue
    next: Optional['Binding'] = field(default=None, repr=False)

class Environment:
    """
    Persistent, chainable variable bindings.

    ``define`` never touches the receiver: it returns a new environment whose
    binding list is the receiver's list with one binding prepended, and whose
    parent is the receiver. A closure holding an older environment therefore
    never sees names declared after it was captured. ``assign`` is the only
    mutation, and it writes into an existing binding cell, so every holder of
    an environment sharing that cell observes the change.

    Calling the constructor opens an empty frame (the global scope, a block,
    or a call). Environments made by ``define`` share their frame's tail with
    every ancestor up to that frame, so lookups jump straight from the end of
    a frame to ``enclosing``, the environment the frame was opened in.
    """
    __slots__ = ('parent', 'bindings', 'enclosing')

    def __init__(self, parent: Optional['Environment']=None):
        self.parent = parent
        self.bindings: Optional[Binding] = None
        self.enclosing = parent

    def define(self, name: str, value: SfValue) -> 'Environment':
        env = Environment.__new__(Environment)
        env.parent = self
        env.bindings = Binding(str(name), value, self.bindings)
        env.enclosing = self.enclosing
        return env

    def get(self, name: Token) -> SfValue:
        binding = self.lookup(name)
        if binding is None:
            raise SimplfUndefinedVariable(name)

        return binding.value

    def assign(self, name: Token, value: SfValue) -> None:
        binding = self.lookup(name)
        if binding is None:
            raise SimplfUndefinedVariable(name)

        binding.value = value

    def lookup(self, name: str) -> Optional[Binding]:
        env: Optional[Environment] = self

        while env is not None:
            binding = env.bindings

            while binding is not None:
                if binding.name == name:
                    return binding
                binding = binding.next

            env = env.enclosing

        return None

    def __contains__(self, name: str) -> bool:
        return self.lookup(name) is not None

    def visible_names(self) -> Iterator[str]:
        """Yield each visible name once, innermost binding first."""
        seen = set()
        env: Optional[Environment] = self

        while env is not None:
            binding = env.bindings

            while binding is not None:
                if binding.name not in seen:
                    seen.add(binding.name)
                    yield binding.name
                binding = binding.next

            env = env.enclosing

    def __repr__(self) -> str:
        names = ", ".join(self.visible_names())
        return f"<env {names}>"

# ---------- Exceptions (keep Simplf* canonical) ----------

class SimplfRuntimeError(Exception):
    token: Optional[Token]
    message: str

    def __init__(self, token: Optional[Token], message: str):
        super().__init__(message)
        self.token = token
        self.message = message

    @property
    def line(self) -> Optional[int]:
        return getattr(self.token, "line", None)

    def __str__(self) -> str:  # pragma: no cover - trivial formatting
        line = self.line
        col = getattr(self.token, "column", None)

        if line is None:
            return self.message

        if col is None:
            return f"{self.message} (line {line})"

        return f"{self.message} (line {line}, col {col})"

class SimplfUndefinedVariable(SimplfRuntimeError):
    def __init__(self, name: Token):
        super().__init__(name, f"Undefined variable '{name}'.")
        self.name = str(name)

class SimplfTypeError(SimplfRuntimeError):
    pass

class SimplfDivisionByZero(SimplfRuntimeError):
    pass

class SimplfNotCallable(SimplfRuntimeError):
    pass

class SimplfArityError(SimplfRuntimeError):
    def __init__(self, token: Optional[Token], expected: int, got: int):
        super().__init__(token, f"Expected {expected} arguments but got {got}.")
        self.expected = expected
        self.got = got

class SimplfReturnSignal(Exception):
    """Internal control-flow exception used to implement `return`."""
    def __init__(self, value: SfValue):
        self.value = value
