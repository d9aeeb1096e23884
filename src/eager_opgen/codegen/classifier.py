"""Attribute classification: which attrs are inferred, required or defaulted.

An attribute is *inferred* when some input uses it as its ``type_attr``,
``type_list_attr`` or ``number_attr``; its value is computed from the
actual arguments at call time and it never appears in the wrapper's
signature.  The remaining attributes become parameters, those without a
default first (Python requires defaulted parameters to come last).

The result is an immutable :class:`AttrClassification` that every later
stage reads; nothing downstream mutates it.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, List, Mapping, Tuple

from eager_opgen._logging import get_logger, op_logger
from eager_opgen.codegen.values import render_default
from eager_opgen.descriptor.model import OperationDescriptor
from eager_opgen.naming import DEFAULT_NAMING, PythonNaming

logger = get_logger(__name__)

INFERRED_ATTR_PREFIX = "_attr_"


def attr_var_name(attr_name: str) -> str:
    """Local variable holding an inferred attribute, e.g. ``_attr_T``."""
    return INFERRED_ATTR_PREFIX + attr_name


@dataclass(frozen=True)
class AttrClassification:
    """How each attribute of one op is supplied.

    Attributes:
        inferred: Inferred attr -> name of the first input it was seen on.
            Only used for diagnostics in generated error messages.
        attr_to_args: Attr -> indices of every input referencing it, in
            input order.
        required: Non-inferred attrs without a default, descriptor order.
        defaulted: Non-inferred attrs with a default, descriptor order.
        defaults: Defaulted attr -> rendered default expression.
        input_params: Parameter name for each input, input order.
        attr_params: Non-inferred attr -> parameter name.
        attr_expressions: Every attr -> the expression holding its value
            inside the wrapper body.
    """

    inferred: Mapping[str, str]
    attr_to_args: Mapping[str, Tuple[int, ...]]
    required: Tuple[str, ...]
    defaulted: Tuple[str, ...]
    defaults: Mapping[str, str]
    input_params: Tuple[str, ...]
    attr_params: Mapping[str, str]
    attr_expressions: Mapping[str, str]

    @property
    def signature_attrs(self) -> Tuple[str, ...]:
        """Non-inferred attrs in signature order."""
        return self.required + self.defaulted

    @property
    def param_names(self) -> Tuple[str, ...]:
        """All parameters except the trailing ``name``, in signature order."""
        return self.input_params + tuple(
            self.attr_params[a] for a in self.signature_attrs
        )

    def is_inferred(self, attr_name: str) -> bool:
        return attr_name in self.inferred


def classify(op: OperationDescriptor,
             naming: PythonNaming = DEFAULT_NAMING) -> AttrClassification:
    """Classify the attributes of *op*.

    Raises:
        UnsupportedAttrTypeError: If a defaulted attribute has a type
            whose default cannot be rendered.
    """
    inferred: Dict[str, str] = {}
    attr_to_args: Dict[str, List[int]] = {}

    def add_attr_for_arg(attr_name: str, index: int) -> None:
        inferred.setdefault(attr_name, op.inputs[index].name)
        attr_to_args.setdefault(attr_name, []).append(index)

    for i, arg in enumerate(op.inputs):
        if arg.type_attr:
            add_attr_for_arg(arg.type_attr, i)
        elif arg.type_list_attr:
            add_attr_for_arg(arg.type_list_attr, i)
        if arg.number_attr:
            add_attr_for_arg(arg.number_attr, i)

    required: List[str] = []
    defaulted: List[str] = []
    defaults: Dict[str, str] = {}
    for attr in op.attrs:
        if attr.name in inferred:
            continue
        if attr.has_default:
            defaults[attr.name] = render_default(attr, op.name)
            defaulted.append(attr.name)
        else:
            required.append(attr.name)

    input_params = tuple(naming.avoid_reserved(arg.name) for arg in op.inputs)
    attr_params = {name: naming.avoid_reserved(name) for name in required + defaulted}

    attr_expressions: Dict[str, str] = {}
    for attr in op.attrs:
        if attr.name in inferred:
            attr_expressions[attr.name] = attr_var_name(attr.name)
        else:
            attr_expressions[attr.name] = attr_params[attr.name]

    op_logger(logger, op.name).debug(
        "inferred=%s required=%s defaulted=%s", sorted(inferred), required, defaulted,
    )
    return AttrClassification(
        inferred=MappingProxyType(inferred),
        attr_to_args=MappingProxyType({k: tuple(v) for k, v in attr_to_args.items()}),
        required=tuple(required),
        defaulted=tuple(defaulted),
        defaults=MappingProxyType(defaults),
        input_params=input_params,
        attr_params=MappingProxyType(attr_params),
        attr_expressions=MappingProxyType(attr_expressions),
    )
