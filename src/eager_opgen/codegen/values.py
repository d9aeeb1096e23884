"""Render attribute default values as Python source expressions.

Each supported attribute type has one renderer; :func:`render_default`
dispatches on the type tag and fails with
:class:`~eager_opgen.exceptions.UnsupportedAttrTypeError` for anything
outside the closed set.

``tensor`` defaults are special: they are embedded as escaped,
triple-quoted protobuf text and rebuilt at call time through
``_execute.make_tensor``.  The line wrapper treats that literal as one
token, so it is never broken across lines.
"""

from __future__ import annotations

import json
import math
from typing import Any, Callable, Dict, Sequence

from eager_opgen._exceptions import DescriptorError, UnsupportedAttrTypeError
from eager_opgen.descriptor.dtypes import dtype_to_python
from eager_opgen.descriptor.model import AttrSpec, is_list_type, list_element_type


def quote_string(value: str) -> str:
    """Double-quoted Python string literal for *value*."""
    return json.dumps(value)


def tensor_pb_string(pbtxt: str) -> str:
    """Triple-quoted literal holding tensor protobuf text."""
    escaped = pbtxt.replace("\\", "\\\\").replace('"', '\\"')
    return '"""' + escaped + '"""'


def vector_to_tuple(items: Sequence[str]) -> str:
    """Render a tuple display: ``(a,)`` for one item, ``(a, b)`` otherwise."""
    if len(items) == 1:
        return f"({items[0]},)"
    return "(" + ", ".join(items) + ")"


def _render_string(value: Any) -> str:
    if not isinstance(value, str):
        raise DescriptorError(f"expected a string, got {value!r}")
    return quote_string(value)


def _render_int(value: Any) -> str:
    if isinstance(value, bool) or not isinstance(value, int):
        raise DescriptorError(f"expected an int, got {value!r}")
    return str(value)


def _render_float(value: Any) -> str:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise DescriptorError(f"expected a float, got {value!r}")
    value = float(value)
    if math.isnan(value):
        return "float('nan')"
    if math.isinf(value):
        return "float('-inf')" if value < 0 else "float('inf')"
    return repr(value)


def _render_bool(value: Any) -> str:
    if not isinstance(value, bool):
        raise DescriptorError(f"expected a bool, got {value!r}")
    return "True" if value else "False"


def _render_type(value: Any) -> str:
    if not isinstance(value, str):
        raise DescriptorError(f"expected a data type name, got {value!r}")
    return dtype_to_python(value)


def _render_shape(value: Any) -> str:
    # None is an unknown rank, -1 an unknown dimension.
    if value is None:
        return "None"
    if not isinstance(value, (list, tuple)):
        raise DescriptorError(f"expected a list of dimensions, got {value!r}")
    dims = []
    for dim in value:
        if dim is None or (isinstance(dim, int) and dim < 0):
            dims.append("None")
        else:
            dims.append(_render_int(dim))
    return "[" + ", ".join(dims) + "]"


def _render_func(value: Any) -> str:
    return _render_string(value)


_RENDERERS: Dict[str, Callable[[Any], str]] = {
    "string": _render_string,
    "int": _render_int,
    "float": _render_float,
    "bool": _render_bool,
    "type": _render_type,
    "shape": _render_shape,
    "func": _render_func,
}


def render_value(attr_type: str, value: Any) -> str:
    """Render *value* of a non-tensor attribute type.

    Raises:
        KeyError: If *attr_type* has no renderer.
        DescriptorError: If *value* does not match *attr_type*.
    """
    if is_list_type(attr_type):
        if attr_type == "list(func)":
            raise KeyError(attr_type)
        element = _RENDERERS[list_element_type(attr_type)]
        if not isinstance(value, (list, tuple)):
            raise DescriptorError(f"expected a list, got {value!r}")
        return "[" + ", ".join(element(v) for v in value) + "]"
    return _RENDERERS[attr_type](value)


def render_default(attr: AttrSpec, op_name: str) -> str:
    """Render the default value of *attr* as a Python expression.

    Args:
        attr: An attribute that has a default value.
        op_name: Op name, for error messages.

    Raises:
        UnsupportedAttrTypeError: If the attribute type is not supported.
        DescriptorError: If the default value does not match the type.
    """
    try:
        if attr.type == "tensor":
            if not isinstance(attr.default, str):
                raise DescriptorError(
                    f"expected tensor protobuf text, got {attr.default!r}"
                )
            return (
                f"_execute.make_tensor({tensor_pb_string(attr.default)}, "
                f'"{attr.name}")'
            )
        if attr.type == "list(tensor)":
            if not isinstance(attr.default, (list, tuple)):
                raise DescriptorError(f"expected a list, got {attr.default!r}")
            pbtxt = [tensor_pb_string(pb) for pb in attr.default]
            return (
                f'[_execute.make_tensor(_pb, "{attr.name}") for _pb in '
                f"{vector_to_tuple(pbtxt) if pbtxt else '()'}]"
            )
        return render_value(attr.type, attr.default)
    except KeyError:
        raise UnsupportedAttrTypeError(op_name, attr.name, attr.type) from None
    except DescriptorError as exc:
        raise DescriptorError(
            f"Op '{op_name}' attr '{attr.name}' ({attr.type}) has a bad default: {exc}"
        ) from None
