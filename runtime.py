"""Runtime values, environments and control-flow results.

`RuntimeValue` is an immutable tagged value. Arrays hold a tuple of
`RuntimeValue`s, so copying a value never shares storage and an indexed
write always builds a new array.

`Environment` maps names to values and remembers the declared type of each
slot, so a later assignment to a `double` variable still stores a float even
when the right-hand side computed an integer.

`ExecResult` is what every statement execution returns: a `Signal` telling
the enclosing construct whether to carry on, leave a loop, skip to the next
iteration or return from the current function.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Optional, Dict, Tuple, Union
from errors import RuntimeFault

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


class ValueKind(Enum):
    INTEGER = auto()
    FLOAT = auto()
    STRING = auto()
    BOOL = auto()
    VOID = auto()
    ARRAY = auto()

    def __str__(self) -> str:
        return self.name.lower()


@dataclass(frozen=True)
class RuntimeValue:
    kind: ValueKind
    value: Union[int, float, str, bool, None, Tuple[RuntimeValue, ...]] = None

    @classmethod
    def integer(cls, value: int) -> RuntimeValue:
        return cls(ValueKind.INTEGER, wrap_int64(value))

    @classmethod
    def floating(cls, value: float) -> RuntimeValue:
        return cls(ValueKind.FLOAT, float(value))

    @classmethod
    def string(cls, value: str) -> RuntimeValue:
        return cls(ValueKind.STRING, value)

    @classmethod
    def boolean(cls, value: bool) -> RuntimeValue:
        return cls(ValueKind.BOOL, bool(value))

    @classmethod
    def void(cls) -> RuntimeValue:
        return cls(ValueKind.VOID, None)

    @classmethod
    def array(cls, elements) -> RuntimeValue:
        return cls(ValueKind.ARRAY, tuple(elements))

    @property
    def is_number(self) -> bool:
        return self.kind in (ValueKind.INTEGER, ValueKind.FLOAT)

    def as_float(self) -> float:
        return float(self.value)

    def __str__(self) -> str:
        return format_value(self)


def wrap_int64(value: int) -> int:
    """Two's-complement wraparound to a signed 64-bit integer."""
    value &= (1 << 64) - 1
    if value > INT64_MAX:
        value -= 1 << 64
    return value


def trunc_div(left: int, right: int) -> int:
    """Integer division rounding toward zero."""
    quotient = abs(left) // abs(right)
    return quotient if (left < 0) == (right < 0) else -quotient


def c_mod(left: int, right: int) -> int:
    """Remainder whose sign follows the dividend."""
    return left - trunc_div(left, right) * right


def format_value(value: RuntimeValue) -> str:
    """Text written by `print`."""
    match value.kind:
        case ValueKind.INTEGER:
            return str(value.value)
        case ValueKind.FLOAT:
            return format(value.value, "g")
        case ValueKind.BOOL:
            return "true" if value.value else "false"
        case ValueKind.STRING:
            return value.value
        case ValueKind.ARRAY:
            return "[Array]"
        case ValueKind.VOID:
            return ""


def concat_text(value: RuntimeValue) -> str:
    """Text used when a value is joined onto a string with `+`."""
    if value.kind == ValueKind.FLOAT:
        return "%f" % value.value
    return format_value(value)


def default_value(type_name: str) -> RuntimeValue:
    """Value of a declared variable that has no initializer."""
    if type_name.endswith("[]"):
        return RuntimeValue.array(())
    match type_name:
        case "byte" | "short" | "int" | "long":
            return RuntimeValue.integer(0)
        case "float" | "double":
            return RuntimeValue.floating(0.0)
        case "bool":
            return RuntimeValue.boolean(False)
        case "string" | "char":
            return RuntimeValue.string("")
        case _:
            return RuntimeValue.void()


def coerce(value: RuntimeValue, type_name: Optional[str]) -> RuntimeValue:
    """Adapt a value to the slot it is stored in.

    Integers stored in `float`/`double` slots (or arrays of them) become floats.
    Everything else is stored unchanged.
    """
    if type_name in ("float", "double") and value.kind == ValueKind.INTEGER:
        return RuntimeValue.floating(value.value)
    if type_name in ("float[]", "double[]") and value.kind == ValueKind.ARRAY:
        return RuntimeValue.array(coerce(v, type_name[:-2]) for v in value.value)
    return value


class Environment:
    def __init__(self, parent: Optional[Environment] = None):
        self.values: Dict[str, RuntimeValue] = {}
        self.types: Dict[str, Optional[str]] = {}
        self.parent = parent

    def define(self, name: str, value: RuntimeValue, type_name: Optional[str] = None) -> None:
        """Bind a name in this scope, shadowing any outer binding."""
        self.values[name] = coerce(value, type_name)
        self.types[name] = type_name

    def resolve(self, name: str, line: int = 0) -> Environment:
        """Return the innermost environment that binds `name`."""
        env: Optional[Environment] = self
        while env is not None:
            if name in env.values:
                return env
            env = env.parent
        raise RuntimeFault(f"Undefined variable '{name}'.", line)

    def get(self, name: str, line: int = 0) -> RuntimeValue:
        return self.resolve(name, line).values[name]

    def assign(self, name: str, value: RuntimeValue, line: int = 0) -> RuntimeValue:
        """Update an existing binding and return the stored value."""
        env = self.resolve(name, line)
        stored = coerce(value, env.types[name])
        env.values[name] = stored
        return stored

    def __contains__(self, name: str) -> bool:
        env: Optional[Environment] = self
        while env is not None:
            if name in env.values:
                return True
            env = env.parent
        return False


class Signal(Enum):
    NORMAL = auto()
    BREAK = auto()
    CONTINUE = auto()
    RETURN = auto()


@dataclass(frozen=True)
class ExecResult:
    signal: Signal = Signal.NORMAL
    value: RuntimeValue = field(default_factory=RuntimeValue.void)

    @property
    def is_normal(self) -> bool:
        return self.signal == Signal.NORMAL


NORMAL = ExecResult()
