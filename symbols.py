"""Declared types and symbol tables.

This module defines the numeric promotion lattice used by the type checker
(`rank`, `can_assign`, `promote`), a `Symbol` dataclass for variables, a
`FunctionSignature` for functions and `SymbolTable`, which supports nested
scopes via an optional parent link.

Declared types are strings: a base type (`byte` through `double`, `bool`,
`char`, `string`, `void`), or a base type followed by `[]` for a
one-dimensional array. Two internal sentinels never appear in
source programs:

- `array`: the type of an empty array literal, accepted by every `T[]`.
- `dynamic`: the type of an `input(...)` expression, accepted by every type.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional, Dict, List
from errors import SemanticError

EMPTY_ARRAY = "array"
DYNAMIC = "dynamic"

RANKS = {
    "byte": 1,
    "short": 2,
    "int": 3,
    "long": 4,
    "float": 5,
    "double": 6,
}

# Literal leniency: an int (e.g. the literal 10) may initialize any numeric type.
IMPLICIT_WIDENINGS = {
    "int": {"byte", "short", "long", "float", "double"},
    "float": {"double"},
}


def rank(type_name: str) -> int:
    """Numeric rank of a type, 0 for non-numeric types."""
    return RANKS.get(type_name, 0)


def is_numeric(type_name: str) -> bool:
    return rank(type_name) > 0


def is_integer(type_name: str) -> bool:
    return 0 < rank(type_name) <= RANKS["long"]


def is_array(type_name: str) -> bool:
    return type_name.endswith("[]")


def element_type(type_name: str) -> str:
    return type_name[:-2]


def can_assign(target: str, source: str) -> bool:
    """Can a value of type `source` be stored in a slot of type `target`?"""
    if target == source:
        return True
    if source == DYNAMIC:
        return True
    if source == EMPTY_ARRAY and is_array(target):
        return True
    if target == "string" or source == "string":
        return False
    if target in IMPLICIT_WIDENINGS.get(source, ()):
        return True
    if is_numeric(target) and is_numeric(source):
        return rank(target) >= rank(source)
    return False


def promote(left: str, right: str) -> Optional[str]:
    """Result type of a numeric binary operation, None if either side is not numeric."""
    if not is_numeric(left) or not is_numeric(right):
        return None
    return left if rank(left) >= rank(right) else right


@dataclass
class Symbol:
    name: str
    type: str
    is_const: bool = False

    def __repr__(self) -> str:
        return f"Symbol({self.name}, {self.type}, is_const={self.is_const})"


@dataclass
class FunctionSignature:
    name: str
    return_type: str
    parameters: List[str] = field(default_factory=list)


class SymbolTable:
    def __init__(self, parent: Optional[SymbolTable] = None):
        self.symbols: Dict[str, Symbol] = {}
        self.parent = parent

    def declare(self, name: str, type_: str, is_const: bool = False, line: int = 0) -> Symbol:
        """Declare a new variable in the current scope."""
        if name in self.symbols:
            raise SemanticError(f"Variable '{name}' already declared in this scope.", line)

        symbol = Symbol(name, type_, is_const)
        self.symbols[name] = symbol
        return symbol

    def lookup(self, name: str, line: int = 0) -> Symbol:
        """Look up a variable in the current and parent scopes."""
        if name in self.symbols:
            return self.symbols[name]
        elif self.parent:
            return self.parent.lookup(name, line)
        else:
            raise SemanticError(f"Undefined variable '{name}'.", line)

    def exists(self, name: str) -> bool:
        """Check if variable is declared in any scope."""
        if name in self.symbols:
            return True
        elif self.parent:
            return self.parent.exists(name)
        return False
