"""Python naming rules for generated wrappers.

Generated code must never bind a Python keyword or shadow a builtin:

- a *parameter* whose op-level name is reserved gets a trailing ``_``
  (``lambda`` -> ``lambda_``), while the op-level name is still used when
  talking to the op builder;
- a *function* whose generated name is reserved is not emitted at all
  (see :mod:`eager_opgen.codegen.module`).

The rules live on a small immutable :class:`PythonNaming` object that the
generator receives as a parameter, so tests can inject a different
reserved-word set without touching module state.
"""

from __future__ import annotations

import keyword
from dataclasses import dataclass
from typing import FrozenSet

# Builtins that generated code must not shadow.
# fmt: off
_BUILTIN_NAMES = frozenset({
    "abs", "all", "any", "ascii", "bin", "bool", "breakpoint", "bytearray",
    "bytes", "callable", "chr", "classmethod", "compile", "complex",
    "copyright", "credits", "delattr", "dict", "dir", "divmod", "enumerate",
    "eval", "exec", "exit", "filter", "float", "format", "frozenset",
    "getattr", "globals", "hasattr", "hash", "help", "hex", "id", "input",
    "int", "isinstance", "issubclass", "iter", "len", "license", "list",
    "locals", "map", "max", "memoryview", "min", "next", "object", "oct",
    "open", "ord", "pow", "print", "property", "quit", "range", "repr",
    "reversed", "round", "set", "setattr", "slice", "sorted",
    "staticmethod", "str", "sum", "super", "tuple", "type", "vars", "zip",
})
# fmt: on

PYTHON_RESERVED: FrozenSet[str] = frozenset(keyword.kwlist) | _BUILTIN_NAMES


def lower_case_op_name(op_name: str) -> str:
    """Convert a CamelCase op name to its snake_case function name.

    A ``_`` joiner is inserted before an upper-case letter when the previous
    letter is lower case, or when the next letter is lower case (the end of
    an acronym)::

        >>> lower_case_op_name("ConcatV2")
        'concat_v2'
        >>> lower_case_op_name("HTTPServer")
        'http_server'
        >>> lower_case_op_name("Conv2D")
        'conv2d'
    """
    result = []
    last_index = len(op_name) - 1
    for i, c in enumerate(op_name):
        if c.isupper() and i > 0:
            prev_lower = op_name[i - 1].islower()
            next_lower = i < last_index and op_name[i + 1].islower()
            if (prev_lower or next_lower) and result[-1] != "_":
                result.append("_")
        result.append(c.lower())
    return "".join(result)


@dataclass(frozen=True)
class PythonNaming:
    """Reserved-word predicate and name sanitizer.

    Attributes:
        reserved: Names generated code may not bind.
    """

    reserved: FrozenSet[str] = PYTHON_RESERVED

    def is_reserved(self, name: str) -> bool:
        return name in self.reserved

    def avoid_reserved(self, name: str) -> str:
        """Return *name*, suffixed with ``_`` if it is reserved."""
        if self.is_reserved(name):
            return name + "_"
        return name

    def function_name(self, op_name: str, hidden: bool = False) -> str:
        """Generated function name for *op_name*; hidden ops get a ``_`` prefix."""
        name = lower_case_op_name(op_name)
        if hidden:
            name = "_" + name
        return name


DEFAULT_NAMING = PythonNaming()
