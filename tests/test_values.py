"""Tests for rendering attribute defaults as Python expressions."""

from __future__ import annotations

import pytest

from eager_opgen._exceptions import DescriptorError, UnsupportedAttrTypeError
from eager_opgen.codegen.values import (
    quote_string,
    render_default,
    render_value,
    tensor_pb_string,
    vector_to_tuple,
)
from eager_opgen.descriptor.model import AttrSpec


class TestRenderValue:
    @pytest.mark.parametrize("attr_type, value, expected", [
        ("string", "SAME", '"SAME"'),
        ("string", 'say "hi"', '"say \\"hi\\""'),
        ("int", -3, "-3"),
        ("float", 0.5, "0.5"),
        ("float", 2, "2.0"),
        ("float", float("inf"), "float('inf')"),
        ("float", float("-inf"), "float('-inf')"),
        ("float", float("nan"), "float('nan')"),
        ("bool", False, "False"),
        ("type", "DT_FLOAT", "_dtypes.float32"),
        ("shape", [2, -1, 3], "[2, None, 3]"),
        ("shape", None, "None"),
        ("shape", [], "[]"),
        ("func", "my_fn", '"my_fn"'),
        ("list(int)", [1, 2], "[1, 2]"),
        ("list(int)", [], "[]"),
        ("list(type)", ["DT_INT32", "int64"], "[_dtypes.int32, _dtypes.int64]"),
        ("list(shape)", [[1], None], "[[1], None]"),
        ("list(string)", ["a"], '["a"]'),
    ])
    def test_render(self, attr_type, value, expected) -> None:
        assert render_value(attr_type, value) == expected

    @pytest.mark.parametrize("attr_type, value", [
        ("int", True),
        ("int", 1.5),
        ("bool", 1),
        ("string", 3),
        ("list(int)", 3),
        ("type", 7),
    ])
    def test_mismatch(self, attr_type, value) -> None:
        with pytest.raises(DescriptorError):
            render_value(attr_type, value)

    def test_unknown_type(self) -> None:
        with pytest.raises(KeyError):
            render_value("placeholder", 1)
        with pytest.raises(KeyError):
            render_value("list(func)", [])


class TestHelpers:
    def test_quote_string(self) -> None:
        assert quote_string("a\nb") == '"a\\nb"'

    def test_tensor_pb_string_escapes(self) -> None:
        assert tensor_pb_string('dtype: DT_STRING string_val: "x\\y"') == (
            '"""dtype: DT_STRING string_val: \\"x\\\\y\\""""'
        )

    def test_vector_to_tuple(self) -> None:
        assert vector_to_tuple(["a"]) == "(a,)"
        assert vector_to_tuple(["a", "b"]) == "(a, b)"


class TestRenderDefault:
    def test_tensor(self) -> None:
        attr = AttrSpec("value", "tensor", default="dtype: DT_FLOAT float_val: 1")
        assert render_default(attr, "Const") == (
            '_execute.make_tensor("""dtype: DT_FLOAT float_val: 1""", "value")'
        )

    def test_list_tensor(self) -> None:
        attr = AttrSpec("values", "list(tensor)", default=["a: 1", "b: 2"])
        assert render_default(attr, "Op") == (
            '[_execute.make_tensor(_pb, "values") for _pb in ("""a: 1""", """b: 2""")]'
        )

    def test_empty_list_tensor(self) -> None:
        attr = AttrSpec("values", "list(tensor)", default=[])
        assert render_default(attr, "Op") == (
            '[_execute.make_tensor(_pb, "values") for _pb in ()]'
        )

    def test_scalar(self) -> None:
        assert render_default(AttrSpec("axis", "int", default=0), "Op") == "0"

    def test_unsupported(self) -> None:
        attr = AttrSpec("p", "placeholder", default=1)
        with pytest.raises(UnsupportedAttrTypeError) as exc_info:
            render_default(attr, "Weird")
        assert exc_info.value.op_name == "Weird"
        assert exc_info.value.attr_type == "placeholder"

    def test_bad_default_names_op_and_attr(self) -> None:
        attr = AttrSpec("axis", "int", default="zero")
        with pytest.raises(DescriptorError, match="Op 'Op' attr 'axis'"):
            render_default(attr, "Op")
