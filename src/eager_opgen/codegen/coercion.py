"""Emit the statements that normalize caller-supplied attribute values.

For every non-inferred attribute the wrapper body gets, in order:

1. ``if param is None: param = <default>`` when the attribute has a
   default (callers may pass ``None`` explicitly);
2. a list/tuple check for ``list(...)`` attributes;
3. one ``_execute.make_<kind>(value, "param")`` call (element-wise for
   list forms) that rebinds the parameter to its canonical value.

``func`` attributes are passed through untouched.  Any other type tag
raises :class:`~eager_opgen.exceptions.UnsupportedAttrTypeError`.
"""

from __future__ import annotations

from typing import Dict, List, Tuple

from eager_opgen._exceptions import UnsupportedAttrTypeError
from eager_opgen.codegen.classifier import AttrClassification
from eager_opgen.config import INDENT
from eager_opgen.descriptor.model import OperationDescriptor, is_list_type, list_element_type

# Scalar type tag -> (maker function, comprehension variable).
_MAKERS: Dict[str, Tuple[str, str]] = {
    "string": ("make_str", "_s"),
    "int": ("make_int", "_i"),
    "float": ("make_float", "_f"),
    "bool": ("make_bool", "_b"),
    "type": ("make_type", "_t"),
    "shape": ("make_shape", "_s"),
    "tensor": ("make_tensor", "_t"),
}


def expect_list_arg(param: str, op_name: str, indent: str = INDENT) -> List[str]:
    """Emit a runtime check that *param* is a list or tuple."""
    return [
        f"{indent}if not isinstance({param}, (list, tuple)):",
        f"{indent}  raise TypeError(",
        f"{indent}      \"Expected list for '{param}' argument to \"",
        f"{indent}      \"'{op_name}' Op, not %r.\" % {param})",
    ]


def coercion_call(attr_type: str, param: str) -> str:
    """Right-hand side that coerces *param* to *attr_type*.

    Raises:
        KeyError: If *attr_type* is not coercible.
    """
    if is_list_type(attr_type):
        maker, var = _MAKERS[list_element_type(attr_type)]
        return f'[_execute.{maker}({var}, "{param}") for {var} in {param}]'
    maker, _ = _MAKERS[attr_type]
    return f'_execute.{maker}({param}, "{param}")'


def emit_attr_coercions(op: OperationDescriptor,
                        classification: AttrClassification,
                        op_name: str,
                        indent: str = INDENT) -> List[str]:
    """Emit default guards, list checks and coercions for every non-inferred attr.

    Args:
        op: The operation.
        classification: Result of :func:`~eager_opgen.codegen.classifier.classify`.
        op_name: Name used in generated error messages.
        indent: Indentation of the emitted statements.

    Raises:
        UnsupportedAttrTypeError: For an attribute type outside the
            supported set.
    """
    lines: List[str] = []
    for attr in op.attrs:
        if classification.is_inferred(attr.name):
            continue
        param = classification.attr_params[attr.name]
        if attr.name in classification.defaults:
            lines.append(f"{indent}if {param} is None:")
            lines.append(f"{indent}  {param} = {classification.defaults[attr.name]}")
        if attr.type == "func":
            continue
        try:
            call = coercion_call(attr.type, param)
        except KeyError:
            raise UnsupportedAttrTypeError(op.name, attr.name, attr.type) from None
        if is_list_type(attr.type):
            lines.extend(expect_list_arg(param, op_name, indent))
        lines.append(f"{indent}{param} = {call}")
    return lines
