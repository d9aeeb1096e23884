"""Declarative operation descriptors.

An :class:`OperationDescriptor` describes one operation at the level the
wrapper generator needs: its ordered inputs and outputs, its attributes
(with optional defaults), and whether it is stateful.  Descriptors are
immutable; the generator only ever reads them.

Argument element types come from exactly one source:

- a fixed data type (``type="DT_FLOAT"``),
- a ``type``-typed attribute (``type_attr="T"``), or
- a ``list(type)``-typed attribute (``type_list_attr="Tlist"``).

An argument with a ``number_attr`` or a ``type_list_attr`` is *list-shaped*
(its arity varies per call); every other argument is *singular*.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from eager_opgen._exceptions import DescriptorError
from eager_opgen.descriptor.dtypes import canonical_dtype


SCALAR_ATTR_TYPES = (
    "string", "int", "float", "bool", "type", "shape", "tensor",
)

# Attribute types the generator knows how to expose and coerce.  ``func``
# may appear in a signature but is passed through without coercion.
SUPPORTED_ATTR_TYPES = frozenset(
    SCALAR_ATTR_TYPES
    + tuple(f"list({t})" for t in SCALAR_ATTR_TYPES)
    + ("func",)
)


class _NoDefault:
    """Marker for an attribute without a default value."""

    _instance: Optional["_NoDefault"] = None

    def __new__(cls) -> "_NoDefault":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "NO_DEFAULT"

    def __bool__(self) -> bool:
        return False


NO_DEFAULT: Any = _NoDefault()


def is_list_type(attr_type: str) -> bool:
    """Whether *attr_type* is a ``list(...)`` form."""
    return attr_type.startswith("list(") and attr_type.endswith(")")


def list_element_type(attr_type: str) -> str:
    """``"list(int)"`` -> ``"int"``; scalar tags are returned unchanged."""
    if is_list_type(attr_type):
        return attr_type[len("list("):-1]
    return attr_type


@dataclass(frozen=True)
class ArgSpec:
    """One input or output argument of an operation.

    Attributes:
        name: Argument name as declared by the op.
        type: Fixed element data type (``DT_FLOAT`` or ``float32``).
        type_attr: Name of a ``type`` attr that supplies the element type.
        type_list_attr: Name of a ``list(type)`` attr that supplies one
            element type per list entry.
        number_attr: Name of an ``int`` attr that supplies the list length.
        is_ref: Aliasing (reference) semantics.  Any ref argument disables
            eager execution for the whole op.
        description: Free text for the generated docstring.
    """

    name: str
    type: Optional[str] = None
    type_attr: Optional[str] = None
    type_list_attr: Optional[str] = None
    number_attr: Optional[str] = None
    is_ref: bool = False
    description: str = ""

    def __post_init__(self) -> None:
        if not self.name:
            raise DescriptorError("Argument name cannot be empty")

        sources = [s for s in (self.type, self.type_attr, self.type_list_attr) if s]
        if len(sources) != 1:
            raise DescriptorError(
                f"Argument '{self.name}' must have exactly one of "
                f"'type', 'type_attr' or 'type_list_attr', got {len(sources)}"
            )

        if self.type:
            canonical_dtype(self.type)

    @property
    def is_list(self) -> bool:
        """True if the argument's arity varies per call."""
        return bool(self.number_attr or self.type_list_attr)

    @property
    def dtype(self) -> Optional[str]:
        """Python-side name of the fixed element type, if any."""
        return canonical_dtype(self.type) if self.type else None


@dataclass(frozen=True)
class InputArg(ArgSpec):
    """An operation input."""


@dataclass(frozen=True)
class OutputArg(ArgSpec):
    """An operation output."""


@dataclass(frozen=True)
class AttrSpec:
    """One attribute of an operation.

    Attributes:
        name: Attribute name.
        type: Type tag, e.g. ``"int"`` or ``"list(shape)"``.  Tags outside
            :data:`SUPPORTED_ATTR_TYPES` are kept so the generator can
            report them; see :attr:`is_supported`.
        default: Default value, or :data:`NO_DEFAULT`.
        description: Free text for the generated docstring.
    """

    name: str
    type: str
    default: Any = NO_DEFAULT
    description: str = ""

    def __post_init__(self) -> None:
        if not self.name:
            raise DescriptorError("Attribute name cannot be empty")
        if not self.type:
            raise DescriptorError(f"Attribute '{self.name}' has no type")

    @property
    def has_default(self) -> bool:
        return self.default is not NO_DEFAULT

    @property
    def is_list(self) -> bool:
        return is_list_type(self.type)

    @property
    def is_supported(self) -> bool:
        return self.type in SUPPORTED_ATTR_TYPES


# Which attribute type each kind of argument reference must point at.
_REFERENCE_TYPES = (
    ("type_attr", "type"),
    ("type_list_attr", "list(type)"),
    ("number_attr", "int"),
)


@dataclass(frozen=True)
class OperationDescriptor:
    """Declarative description of one operation.

    Attributes:
        name: Unique, stable op name (e.g. ``"ConcatV2"``).
        inputs: Ordered input arguments.
        outputs: Ordered output arguments.
        attrs: Ordered attributes.
        is_stateful: Whether the op has side effects.
        summary: One-line description for the generated docstring.
        description: Longer description for the generated docstring.
    """

    name: str
    inputs: Tuple[InputArg, ...] = ()
    outputs: Tuple[OutputArg, ...] = ()
    attrs: Tuple[AttrSpec, ...] = ()
    is_stateful: bool = False
    summary: str = ""
    description: str = ""
    _attr_index: Dict[str, AttrSpec] = field(
        default_factory=dict, init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        if not self.name:
            raise DescriptorError("OperationDescriptor.name cannot be empty")
        if self.name[0].isdigit() or not self.name.replace("_", "").isalnum():
            raise DescriptorError(
                f"Op name '{self.name}' must be an identifier, e.g. 'ConcatV2'"
            )

        # Accept any sequence; store tuples so descriptors stay immutable.
        object.__setattr__(self, "inputs", tuple(self.inputs))
        object.__setattr__(self, "outputs", tuple(self.outputs))
        object.__setattr__(self, "attrs", tuple(self.attrs))

        index: Dict[str, AttrSpec] = {}
        for attr in self.attrs:
            if attr.name in index:
                raise DescriptorError(
                    f"Op '{self.name}' declares attr '{attr.name}' twice"
                )
            index[attr.name] = attr
        object.__setattr__(self, "_attr_index", index)

        for label, args in (("input", self.inputs), ("output", self.outputs)):
            seen = set()
            for arg in args:
                if arg.name in seen:
                    raise DescriptorError(
                        f"Op '{self.name}' declares {label} '{arg.name}' twice"
                    )
                seen.add(arg.name)
                self._check_references(label, arg)

        clashes = set(self.input_names) & set(index)
        if clashes:
            raise DescriptorError(
                f"Op '{self.name}' uses {sorted(clashes)} as both input and attr name"
            )

    def _check_references(self, label: str, arg: ArgSpec) -> None:
        for field_name, expected in _REFERENCE_TYPES:
            attr_name = getattr(arg, field_name)
            if not attr_name:
                continue
            attr = self._attr_index.get(attr_name)
            if attr is None:
                raise DescriptorError(
                    f"Op '{self.name}' {label} '{arg.name}' refers to "
                    f"undeclared attr '{attr_name}' ({field_name})"
                )
            if attr.type != expected:
                raise DescriptorError(
                    f"Op '{self.name}' {label} '{arg.name}' uses attr "
                    f"'{attr_name}' as {field_name}, which must have type "
                    f"'{expected}', not '{attr.type}'"
                )

    @property
    def input_names(self) -> Tuple[str, ...]:
        return tuple(arg.name for arg in self.inputs)

    @property
    def output_names(self) -> Tuple[str, ...]:
        return tuple(arg.name for arg in self.outputs)

    @property
    def has_ref_args(self) -> bool:
        """True if any input or output has aliasing semantics."""
        return any(arg.is_ref for arg in self.inputs + self.outputs)

    def find_attr(self, name: str) -> Optional[AttrSpec]:
        """Look up an attribute by name."""
        return self._attr_index.get(name)

    def to_dict(self, include_docs: bool = True) -> Dict[str, Any]:
        """Serialize to the JSON shape read by :mod:`eager_opgen.descriptor.loader`."""

        def arg_dict(arg: ArgSpec) -> Dict[str, Any]:
            d: Dict[str, Any] = {"name": arg.name}
            for key in ("type", "type_attr", "type_list_attr", "number_attr"):
                value = getattr(arg, key)
                if value:
                    d[key] = value
            if arg.is_ref:
                d["is_ref"] = True
            if include_docs and arg.description:
                d["description"] = arg.description
            return d

        def attr_dict(attr: AttrSpec) -> Dict[str, Any]:
            d: Dict[str, Any] = {"name": attr.name, "type": attr.type}
            if attr.has_default:
                d["default"] = attr.default
            if include_docs and attr.description:
                d["description"] = attr.description
            return d

        result: Dict[str, Any] = {
            "name": self.name,
            "inputs": [arg_dict(a) for a in self.inputs],
            "outputs": [arg_dict(a) for a in self.outputs],
            "attrs": [attr_dict(a) for a in self.attrs],
        }
        if self.is_stateful:
            result["is_stateful"] = True
        if include_docs:
            if self.summary:
                result["summary"] = self.summary
            if self.description:
                result["description"] = self.description
        return result
