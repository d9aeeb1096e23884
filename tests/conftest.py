"""Shared test fixtures for eager-opgen.

Generated wrappers call into a runtime (``_execute``, ``_context``,
``_ops``, ``_dtypes``, ``_op_def_lib``).  :class:`FakeRuntime` provides
all of them in one namespace, records every call, and lets a test choose
graph or eager mode and the flat results the op "returns".  Wrappers are
exec'd into that namespace, so tests check behaviour rather than text.
"""

from __future__ import annotations

import collections
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

import pytest

from eager_opgen.codegen.synthesizer import GeneratedWrapper, generate_wrapper
from eager_opgen.descriptor.model import OperationDescriptor
from eager_opgen.naming import lower_case_op_name


class FakeDType:
    def __init__(self, name: str, enum: int) -> None:
        self.name = name
        self.as_datatype_enum = enum

    def __repr__(self) -> str:
        return f"tf.{self.name}"


DTYPES = {
    name: FakeDType(name, enum)
    for enum, name in enumerate(
        ["float32", "float64", "int32", "int64", "string", "bool"], start=1
    )
}


class FakeTensor:
    def __init__(self, value: Any, dtype: FakeDType) -> None:
        self.value = value
        self.dtype = dtype

    def __repr__(self) -> str:
        return f"FakeTensor({self.value!r}, {self.dtype!r})"


def _infer_dtype(value: Any) -> FakeDType:
    if isinstance(value, FakeTensor):
        return value.dtype
    if isinstance(value, bool):
        return DTYPES["bool"]
    if isinstance(value, int):
        return DTYPES["int32"]
    if isinstance(value, str):
        return DTYPES["string"]
    return DTYPES["float32"]


def _as_tensor(value: Any, dtype: Optional[FakeDType] = None) -> FakeTensor:
    if isinstance(value, FakeTensor):
        return value
    return FakeTensor(value, dtype or _infer_dtype(value))


class FakeOp:
    def __init__(self, outputs: List[Any], attrs: Dict[str, Any]) -> None:
        self.outputs = outputs
        self._attrs = attrs

    def get_attr(self, name: str) -> Any:
        return self._attrs[name]


class FakeExecute:
    """Stand-in for the ``_execute`` module."""

    def __init__(self, runtime: "FakeRuntime") -> None:
        self._runtime = runtime

    @staticmethod
    def make_int(v, arg_name):
        if isinstance(v, bool) or not isinstance(v, int):
            raise TypeError(f"Expected int for argument '{arg_name}' not {v!r}.")
        return v

    @staticmethod
    def make_float(v, arg_name):
        if not isinstance(v, (int, float)):
            raise TypeError(f"Expected float for argument '{arg_name}' not {v!r}.")
        return float(v)

    @staticmethod
    def make_str(v, arg_name):
        if not isinstance(v, str):
            raise TypeError(f"Expected string for argument '{arg_name}' not {v!r}.")
        return v

    @staticmethod
    def make_bool(v, arg_name):
        if not isinstance(v, bool):
            raise TypeError(f"Expected bool for argument '{arg_name}' not {v!r}.")
        return v

    @staticmethod
    def make_type(v, arg_name):
        if isinstance(v, str):
            v = DTYPES[v]
        return v.as_datatype_enum

    @staticmethod
    def make_shape(v, arg_name):
        return None if v is None else list(v)

    @staticmethod
    def make_tensor(v, arg_name):
        return ("tensor", arg_name, v)

    @staticmethod
    def args_to_matching_eager(values, default_dtype=None):
        values = list(values)
        dtype = None
        for v in values:
            if isinstance(v, FakeTensor):
                dtype = v.dtype
                break
        if dtype is None:
            dtype = default_dtype or (_infer_dtype(values[0]) if values else DTYPES["float32"])
        return dtype, [_as_tensor(v, dtype) for v in values]

    @staticmethod
    def convert_to_mixed_eager_tensors(values):
        tensors = [_as_tensor(v) for v in values]
        return [t.dtype for t in tensors], tensors

    @staticmethod
    def args_to_mixed_eager_tensors(lists):
        lists = [list(values) for values in lists]
        types = [_infer_dtype(v) for v in lists[0]]
        return types, [[_as_tensor(v, t) for v, t in zip(values, types)] for values in lists]

    def execute(self, op_name, num_outputs, inputs, attrs, name=None):
        self._runtime.calls.append(("execute", op_name, num_outputs, list(inputs), attrs, name))
        if op_name in self._runtime.results:
            return list(self._runtime.results[op_name])
        return [f"{op_name}:{i}" for i in range(num_outputs)]

    def record_gradient(self, op_name, inputs, attrs, result, name=None):
        self._runtime.calls.append(("record_gradient", op_name, list(inputs), attrs))
        return result


class FakeOpDefLib:
    def __init__(self, runtime: "FakeRuntime") -> None:
        self._runtime = runtime

    def _apply_op_helper(self, op_type_name, name=None, **keywords):
        self._runtime.calls.append(("apply_op", op_type_name, keywords, name))
        outputs = list(self._runtime.results.get(op_type_name, []))
        attrs = dict(self._runtime.graph_attrs.get(op_type_name, {}))
        return None, None, FakeOp(outputs, attrs)


class FakeRuntime:
    """Namespace that generated wrappers run against."""

    def __init__(self) -> None:
        self.graph_mode = False
        self.calls: List[tuple] = []
        self.results: Dict[str, List[Any]] = {}
        self.graph_attrs: Dict[str, Dict[str, Any]] = {}
        self.registered_shapes: List[str] = []
        self.namespace: Dict[str, Any] = {
            "_collections": collections,
            "_execute": FakeExecute(self),
            "_context": SimpleNamespace(in_graph_mode=lambda: self.graph_mode),
            "_ops": SimpleNamespace(
                convert_to_tensor=lambda v, dtype: _as_tensor(v, dtype),
                convert_n_to_tensor=lambda vs, dtype: [_as_tensor(v, dtype) for v in vs],
                RegisterShape=self._register_shape,
            ),
            "_dtypes": SimpleNamespace(**DTYPES),
            "_op_def_lib": FakeOpDefLib(self),
        }

    def _register_shape(self, op_name: str):
        self.registered_shapes.append(op_name)
        return lambda shape_fn: shape_fn

    def load(self, wrapper: GeneratedWrapper):
        """Exec *wrapper* and return the generated function."""
        exec(wrapper.output_tuple_code + wrapper.code, self.namespace)
        return self.namespace[wrapper.function_name]

    def wrap(self, op: OperationDescriptor, function_name: Optional[str] = None):
        """Generate, exec and return the wrapper for *op*."""
        return self.load(generate_wrapper(op, function_name or lower_case_op_name(op.name)))

    def calls_named(self, kind: str) -> List[tuple]:
        return [c for c in self.calls if c[0] == kind]


@pytest.fixture
def runtime() -> FakeRuntime:
    """Fresh fake runtime, eager mode."""
    return FakeRuntime()

