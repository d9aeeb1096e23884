"""Docstrings for generated wrappers.

Kept deliberately small: a summary line, an optional description, one
``Args:`` entry per parameter and a ``Returns:`` section.
"""

from __future__ import annotations

import textwrap
from typing import List

from eager_opgen.codegen.classifier import AttrClassification
from eager_opgen.config import INDENT, RIGHT_MARGIN
from eager_opgen.descriptor.model import ArgSpec, AttrSpec, OperationDescriptor


def _escape(text: str) -> str:
    return text.replace('"""', '\\"\\"\\"')


def _fill(text: str, indent: str, hanging: str) -> List[str]:
    return textwrap.fill(
        _escape(text), width=RIGHT_MARGIN,
        initial_indent=indent, subsequent_indent=hanging,
    ).splitlines()


def _arg_phrase(arg: ArgSpec) -> str:
    if arg.type_list_attr:
        return "A list of `Tensor` objects."
    if arg.number_attr:
        if arg.dtype:
            return f"A list of `Tensor` objects with type `{arg.dtype}`."
        return "A list of `Tensor` objects with the same type."
    if arg.dtype:
        return f"A `Tensor` of type `{arg.dtype}`."
    return "A `Tensor`."


def _attr_phrase(attr: AttrSpec, default_expr: str = "") -> str:
    kind = attr.type
    if default_expr:
        phrase = f"An optional `{kind}`."
        if attr.type not in ("tensor", "list(tensor)"):
            phrase += f" Defaults to `{default_expr}`."
        return phrase
    article = "An" if kind == "int" else "A"
    return f"{article} `{kind}`."


def _entry(name: str, phrase: str, description: str) -> List[str]:
    text = f"{name}: {phrase}"
    if description:
        text += " " + description
    return _fill(text, INDENT * 2, INDENT * 4)


def _returns(op: OperationDescriptor) -> List[str]:
    if not op.outputs:
        return [INDENT * 2 + "The created Operation."]
    if len(op.outputs) == 1:
        out = op.outputs[0]
        return _fill(_arg_phrase(out) + (" " + out.description if out.description else ""),
                     INDENT * 2, INDENT * 2)
    names = ", ".join(out.name for out in op.outputs)
    lines = [INDENT * 2 + f"A tuple of `Tensor` objects ({names})."]
    lines.append("")
    for out in op.outputs:
        lines.extend(_entry(out.name, _arg_phrase(out), out.description))
    return lines


def emit_docstring(op: OperationDescriptor,
                   classification: AttrClassification) -> List[str]:
    """Return the docstring lines (indented one level) for *op*'s wrapper."""
    summary = _escape(op.summary or f"Wrapper for the `{op.name}` op.")
    lines = [f'{INDENT}r"""{summary}']
    if op.description:
        lines.append("")
        for paragraph in op.description.split("\n\n"):
            lines.extend(_fill(" ".join(paragraph.split()), INDENT, INDENT))
            lines.append("")
        lines.pop()

    lines.append("")
    lines.append(f"{INDENT}Args:")
    for arg, param in zip(op.inputs, classification.input_params):
        lines.extend(_entry(param, _arg_phrase(arg), arg.description))
    for attr_name in classification.signature_attrs:
        attr = op.find_attr(attr_name)
        lines.extend(_entry(
            classification.attr_params[attr_name],
            _attr_phrase(attr, classification.defaults.get(attr_name, "")),
            attr.description,
        ))
    lines.append(f"{INDENT * 2}name: A name for the operation (optional).")
    lines.append("")
    lines.append(f"{INDENT}Returns:")
    lines.extend(_returns(op))
    lines.append(f'{INDENT}"""')
    return lines
