"""Tests for the batch driver that assembles generated modules."""

from __future__ import annotations

import json
import logging
import re
from types import SimpleNamespace

from eager_opgen.codegen.module import (
    ModuleGenerator,
    generate_module,
    module_footer,
    module_header,
    shape_stub,
    skip_marker,
)
from eager_opgen.config import GeneratorOptions
from eager_opgen.descriptor.model import AttrSpec, InputArg, OperationDescriptor, OutputArg


def _add_n() -> OperationDescriptor:
    return OperationDescriptor(
        name="AddN",
        inputs=[InputArg("inputs", type_attr="T", number_attr="N")],
        outputs=[OutputArg("sum", type_attr="T")],
        attrs=[AttrSpec("N", "int"), AttrSpec("T", "type")],
        summary="Adds all input tensors element-wise.",
    )


def _unique() -> OperationDescriptor:
    return OperationDescriptor(
        name="Unique",
        inputs=[InputArg("x", type_attr="T")],
        outputs=[OutputArg("y", type_attr="T"), OutputArg("idx", type="DT_INT32")],
        attrs=[AttrSpec("T", "type")],
    )


def _weird() -> OperationDescriptor:
    return OperationDescriptor(
        name="Weird",
        inputs=[InputArg("x", type="DT_FLOAT")],
        attrs=[AttrSpec("p", "placeholder")],
    )


def _print() -> OperationDescriptor:
    # Generates a function named "print", which is reserved.
    return OperationDescriptor(name="Print", inputs=[InputArg("x", type="DT_FLOAT")])


def _embedded_ops(source: str) -> list:
    match = re.search(r'_op_def_lib = _InitOpDefLibrary\(r"""(.*)"""\)', source)
    assert match is not None
    return json.loads(match.group(1))["ops"]


class TestPieces:
    def test_skip_marker(self) -> None:
        assert skip_marker("weird", "placeholder") == (
            "# No definition for weird since we don't support attrs with type\n"
            "# 'placeholder' right now.\n\n"
        )

    def test_shape_stub(self) -> None:
        assert shape_stub("AddN") == '_ops.RegisterShape("AddN")(None)\n\n'

    def test_header_imports_runtime_aliases(self) -> None:
        header = module_header()
        assert "MACHINE GENERATED" in header
        assert "import collections as _collections" in header
        assert "import execute as _execute" in header
        assert "import op_def_library as _op_def_library" in header

    def test_footer_strips_docs(self) -> None:
        footer = module_footer([_add_n()])
        assert footer.startswith("def _InitOpDefLibrary(op_list_json):")
        assert "Adds all input tensors" not in footer
        assert _embedded_ops(footer) == [_add_n().to_dict(include_docs=False)]
        assert '# {' in footer


class TestModuleGenerator:
    def test_ops_in_input_order(self) -> None:
        source = generate_module([_unique(), _add_n()])
        assert source.index("def unique(") < source.index("def add_n(")
        assert [op["name"] for op in _embedded_ops(source)] == ["Unique", "AddN"]
        compile(source, "<generated>", "exec")

    def test_shape_stubs(self) -> None:
        assert '_ops.RegisterShape("AddN")(None)' in generate_module([_add_n()])
        assert "RegisterShape" not in generate_module([_add_n()], require_shapes=True)

    def test_hidden_ops(self) -> None:
        source = generate_module([_add_n()], hidden_ops=["AddN"])
        assert "def _add_n(inputs, name=None):" in source
        assert "'add_n' Op" in source

    def test_unsupported_attr_becomes_marker(self, caplog) -> None:
        generator = ModuleGenerator()
        with caplog.at_level(logging.WARNING, logger="eager_opgen"):
            source = generator.generate([_weird(), _add_n()])
        assert skip_marker("weird", "placeholder") in source
        assert "def weird(" not in source
        assert '_ops.RegisterShape("Weird")(None)' in source
        assert [op["name"] for op in _embedded_ops(source)] == ["Weird", "AddN"]
        assert "def add_n(" in source
        (skipped,) = generator.skipped
        assert (skipped.op_name, skipped.attr_name, skipped.attr_type) == (
            "Weird", "p", "placeholder")
        (record,) = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert record.op == "Weird"
        assert record.getMessage() == "Weird: skipped, attr 'p' has unsupported type 'placeholder'"
        compile(source, "<generated>", "exec")

    def test_reserved_function_name_omitted(self, caplog) -> None:
        with caplog.at_level(logging.DEBUG, logger="eager_opgen"):
            source = generate_module([_print(), _add_n()])
        assert "def print(" not in source
        assert 'RegisterShape("Print")' not in source
        assert [op["name"] for op in _embedded_ops(source)] == ["AddN"]
        assert "Print: omitted, 'print' is a reserved name" in caplog.text

    def test_output_tuple_declared_once_per_batch(self) -> None:
        generator = ModuleGenerator(GeneratorOptions(require_shapes=True))
        source = generator.generate([_unique(), _add_n(), _unique()])
        assert source.count("_UniqueOutput = _collections.namedtuple(") == 1
        assert source.count("def unique(x, name=None):") == 2
        assert generator.declared_tuples == frozenset({"_UniqueOutput"})

    def test_each_batch_declares_its_own_tuples(self, runtime) -> None:
        generator = ModuleGenerator(GeneratorOptions(require_shapes=True))
        generator.generate([_unique()])
        second = generator.generate([_unique()])
        assert "_UniqueOutput = _collections.namedtuple(" in second
        body = second[len(module_header()):second.index("def _InitOpDefLibrary")]
        exec(body, runtime.namespace)
        result = runtime.namespace["unique"](3.0)
        assert (result.y, result.idx) == ("Unique:0", "Unique:1")

    def test_skipped_lists_latest_batch(self) -> None:
        generator = ModuleGenerator()
        generator.generate([_weird()])
        assert [s.op_name for s in generator.skipped] == ["Weird"]
        generator.generate([_add_n()])
        assert generator.skipped == []

    def test_skipped_op_does_not_claim_tuple_name(self) -> None:
        broken = OperationDescriptor(
            name="Unique",
            inputs=[InputArg("x", type_attr="T")],
            outputs=[OutputArg("y", type_attr="T"), OutputArg("idx", type="DT_INT32")],
            attrs=[AttrSpec("T", "type"), AttrSpec("p", "placeholder")],
        )
        source = ModuleGenerator().generate([broken, _unique()])
        assert source.count("_UniqueOutput = _collections.namedtuple(") == 1
        assert source.index("# No definition for unique") < source.index("_UniqueOutput = ")


class TestGeneratedModuleRuns:
    def test_exec_module_body(self, runtime) -> None:
        registered = []
        libraries = []

        class FakeLibrary:
            def add_op_list(self, op_list):
                self.op_list = op_list
                libraries.append(self)

        runtime.namespace.update(
            _json=json,
            _op_def_registry=SimpleNamespace(register_op_list=registered.append),
            _op_def_library=SimpleNamespace(OpDefLibrary=FakeLibrary),
        )
        source = generate_module([_add_n(), _unique()])
        exec(source[len(module_header()):], runtime.namespace)

        assert runtime.registered_shapes == ["AddN", "Unique"]
        assert [op["name"] for op in registered[0]["ops"]] == ["AddN", "Unique"]
        assert runtime.namespace["_op_def_lib"] is libraries[0]

        result = runtime.namespace["unique"](3.0)
        assert result.y == "Unique:0"
        assert result.idx == "Unique:1"
        assert runtime.namespace["add_n"]([1.0]) == "AddN:0"
