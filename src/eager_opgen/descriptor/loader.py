"""Load operation descriptors from JSON.

File format::

    {
      "ops": [
        {
          "name": "Concat",
          "inputs": [{"name": "values", "type_attr": "T", "number_attr": "N"}],
          "outputs": [{"name": "output", "type_attr": "T"}],
          "attrs": [{"name": "N", "type": "int"}, {"name": "T", "type": "type"}],
          "is_stateful": false,
          "summary": "Concatenates tensors."
        }
      ]
    }

A bare list of op objects is accepted as well.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Mapping, Union

from eager_opgen._exceptions import DescriptorError
from eager_opgen._logging import get_logger
from eager_opgen.descriptor.model import (
    NO_DEFAULT,
    AttrSpec,
    InputArg,
    OperationDescriptor,
    OutputArg,
)

logger = get_logger(__name__)

_ARG_KEYS = frozenset({
    "name", "type", "type_attr", "type_list_attr", "number_attr", "is_ref", "description",
})
_ATTR_KEYS = frozenset({"name", "type", "default", "description"})
_OP_KEYS = frozenset({
    "name", "inputs", "outputs", "attrs", "is_stateful", "summary", "description",
})


def _check_keys(kind: str, data: Any, allowed: frozenset, where: str) -> None:
    if not isinstance(data, Mapping):
        raise DescriptorError(f"{where}: {kind} must be an object, got {type(data).__name__}")
    unknown = set(data) - allowed
    if unknown:
        raise DescriptorError(f"{where}: unknown {kind} keys {sorted(unknown)}")
    if "name" not in data:
        raise DescriptorError(f"{where}: {kind} is missing 'name'")


def _arg_from_dict(cls, data: Any, where: str):
    _check_keys("argument", data, _ARG_KEYS, where)
    return cls(
        name=data["name"],
        type=data.get("type"),
        type_attr=data.get("type_attr"),
        type_list_attr=data.get("type_list_attr"),
        number_attr=data.get("number_attr"),
        is_ref=bool(data.get("is_ref", False)),
        description=data.get("description", ""),
    )


def _attr_from_dict(data: Any, where: str) -> AttrSpec:
    _check_keys("attr", data, _ATTR_KEYS, where)
    return AttrSpec(
        name=data["name"],
        type=data.get("type", ""),
        default=data.get("default", NO_DEFAULT),
        description=data.get("description", ""),
    )


def descriptor_from_dict(data: Any) -> OperationDescriptor:
    """Build one :class:`OperationDescriptor` from its JSON object.

    Raises:
        DescriptorError: On unknown keys, missing names or any model check.
    """
    _check_keys("op", data, _OP_KEYS, "descriptor")
    where = f"op '{data['name']}'"
    for key in ("inputs", "outputs", "attrs"):
        if not isinstance(data.get(key, []), list):
            raise DescriptorError(f"{where}: '{key}' must be a list")
    return OperationDescriptor(
        name=data["name"],
        inputs=[_arg_from_dict(InputArg, a, where) for a in data.get("inputs", [])],
        outputs=[_arg_from_dict(OutputArg, a, where) for a in data.get("outputs", [])],
        attrs=[_attr_from_dict(a, where) for a in data.get("attrs", [])],
        is_stateful=bool(data.get("is_stateful", False)),
        summary=data.get("summary", ""),
        description=data.get("description", ""),
    )


def descriptors_from_dict(data: Union[Dict[str, Any], List[Any]]) -> List[OperationDescriptor]:
    """Build descriptors from a decoded descriptor file.

    Raises:
        DescriptorError: If the document is malformed or names an op twice.
    """
    if isinstance(data, Mapping):
        if "ops" not in data:
            raise DescriptorError("Descriptor file must contain an 'ops' list")
        data = data["ops"]
    if not isinstance(data, list):
        raise DescriptorError("'ops' must be a list of op objects")

    ops = [descriptor_from_dict(item) for item in data]
    seen = set()
    for op in ops:
        if op.name in seen:
            raise DescriptorError(f"Op '{op.name}' is described twice")
        seen.add(op.name)
    return ops


def load_descriptors(path: Union[str, Path]) -> List[OperationDescriptor]:
    """Read and validate a descriptor file.

    Raises:
        DescriptorError: If the file cannot be read, is not JSON, or
            describes invalid ops.
    """
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise DescriptorError(f"Cannot read descriptor file '{path}': {exc}") from exc
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise DescriptorError(f"Descriptor file '{path}' is not valid JSON: {exc}") from exc
    ops = descriptors_from_dict(data)
    logger.debug("Loaded %d descriptors from %s", len(ops), path)
    return ops
