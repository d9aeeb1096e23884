"""Tests for generator options and the hidden-ops file."""

from __future__ import annotations

import pytest

from eager_opgen._exceptions import ConfigError
from eager_opgen.config import (
    INDENT,
    RIGHT_MARGIN,
    GeneratorOptions,
    load_hidden_ops,
    parse_hidden_ops,
)


class TestConstants:
    def test_formatting_constants(self) -> None:
        assert RIGHT_MARGIN == 78
        assert INDENT == "  "


class TestHiddenOps:
    def test_parse_mixed_separators_and_comments(self) -> None:
        text = "Add, Sub\n# private ops\nMul   Div  # trailing\n\n"
        assert parse_hidden_ops(text) == frozenset({"Add", "Sub", "Mul", "Div"})

    def test_parse_rejects_bad_name(self) -> None:
        with pytest.raises(ConfigError, match="'Not-An-Op'"):
            parse_hidden_ops("Add Not-An-Op")

    def test_load(self, tmp_path) -> None:
        path = tmp_path / "hidden.txt"
        path.write_text("Add,Sub\n", encoding="utf-8")
        assert load_hidden_ops(str(path)) == frozenset({"Add", "Sub"})

    def test_load_missing_file(self, tmp_path) -> None:
        with pytest.raises(ConfigError, match="Cannot read hidden ops file"):
            load_hidden_ops(str(tmp_path / "missing.txt"))


class TestGeneratorOptions:
    def test_defaults(self) -> None:
        options = GeneratorOptions()
        assert options.hidden_ops == frozenset()
        assert options.require_shapes is False

    def test_hidden_ops_frozen(self) -> None:
        options = GeneratorOptions(hidden_ops={"Add"})
        assert isinstance(options.hidden_ops, frozenset)

    def test_with_hidden_ops(self) -> None:
        options = GeneratorOptions(hidden_ops=frozenset({"Add"}), require_shapes=True)
        merged = options.with_hidden_ops(["Sub"])
        assert merged.hidden_ops == frozenset({"Add", "Sub"})
        assert merged.require_shapes is True
        assert options.hidden_ops == frozenset({"Add"})

    def test_from_env(self, tmp_path) -> None:
        path = tmp_path / "hidden.txt"
        path.write_text("Secret\n", encoding="utf-8")
        options = GeneratorOptions.from_env({
            "EAGER_OPGEN_HIDDEN_OPS_FILE": str(path),
            "EAGER_OPGEN_REQUIRE_SHAPES": "1",
        })
        assert options.hidden_ops == frozenset({"Secret"})
        assert options.require_shapes is True

    def test_from_empty_env(self) -> None:
        assert GeneratorOptions.from_env({}) == GeneratorOptions()
