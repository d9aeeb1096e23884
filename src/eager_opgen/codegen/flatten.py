"""Flatten structured arguments into one sequence expression, and back.

The execution primitive takes a single flat list of inputs, while ops
mix singular arguments with variable-length list arguments.
:func:`flatten` builds the flat-list expression with as few ``+``
operators as possible: runs of singular arguments share one list display,
runs of list arguments are concatenated directly::

    [a, b, c] + list(d) + [e, f]

It also records one *size expression* per argument so that
:func:`unflatten` can regroup a flat result later:

- ``""`` for a singular argument (exactly one element),
- ``_attr_N`` for a list counted by the ``number_attr`` ``N``,
- ``len(param)`` for any other list.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from eager_opgen.codegen.classifier import AttrClassification, attr_var_name
from eager_opgen.descriptor.model import OperationDescriptor


@dataclass(frozen=True)
class FlatItem:
    """One argument as seen by the codec.

    Attributes:
        param: Python variable holding the argument.
        is_list: Whether the argument is list-shaped.
        size: Size expression (``""`` for singular arguments).
    """

    param: str
    is_list: bool
    size: str = ""


@dataclass(frozen=True)
class Flattened:
    """Result of :func:`flatten`."""

    expr: str
    sizes: Tuple[str, ...]


class _State(enum.Enum):
    STARTING = "starting"
    WAS_LIST = "was_list"
    WAS_SOLO = "was_solo"


def flatten(items: Sequence[FlatItem]) -> Flattened:
    """Build the flat-list expression for *items*, in order."""
    parts: List[str] = []
    state = _State.STARTING
    for item in items:
        if item.is_list:
            if state is _State.WAS_SOLO:
                parts.append("] + ")
            elif state is _State.WAS_LIST:
                parts.append(" + ")
            parts.append(f"list({item.param})")
            state = _State.WAS_LIST
        else:
            if state is _State.WAS_SOLO:
                parts.append(", ")
            elif state is _State.WAS_LIST:
                parts.append(" + [")
            else:
                parts.append("[")
            parts.append(item.param)
            state = _State.WAS_SOLO
    if state is _State.STARTING:
        return Flattened("[]", ())
    if state is _State.WAS_SOLO:
        parts.append("]")
    return Flattened("".join(parts), tuple(item.size for item in items))


def input_items(op: OperationDescriptor, classification: AttrClassification,
                indices: Optional[Sequence[int]] = None) -> List[FlatItem]:
    """Codec items for the inputs at *indices* (all inputs if None)."""
    if indices is None:
        indices = range(len(op.inputs))
    items = []
    for i in indices:
        arg = op.inputs[i]
        param = classification.input_params[i]
        if not arg.is_list:
            items.append(FlatItem(param, False))
        elif arg.number_attr:
            items.append(FlatItem(param, True, attr_var_name(arg.number_attr)))
        else:
            items.append(FlatItem(param, True, f"len({param})"))
    return items


def flatten_inputs(op: OperationDescriptor, classification: AttrClassification,
                   indices: Optional[Sequence[int]] = None) -> Flattened:
    """Flatten the inputs at *indices* (all inputs if None)."""
    return flatten(input_items(op, classification, indices))


def unflatten(sizes: Sequence[str], var: str, indent: str = "") -> List[str]:
    """Emit statements regrouping the flat list *var* by *sizes*.

    Positions are collapsed left to right, so when position ``i`` is
    handled every earlier position already occupies exactly one element
    and its slice starts at ``i``.  Singular positions (empty size) are
    left alone.
    """
    lines = []
    last = len(sizes) - 1
    for i, size in enumerate(sizes):
        if not size:
            continue
        expr = f"{var}[:{i}] + " if i > 0 else ""
        if i < last:
            if i == 0:
                expr += f"[{var}[:{size}]] + {var}[{size}:]"
            else:
                expr += f"[{var}[{i}:{i} + {size}]] + {var}[{i} + {size}:]"
        else:
            expr += f"[{var}[{i}:]]"
        lines.append(f"{indent}{var} = {expr}")
    return lines
