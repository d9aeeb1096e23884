"""Synthesize one wrapper function with a graph branch and an eager branch.

Given an :class:`~eager_opgen.descriptor.model.OperationDescriptor`, the
generated wrapper looks like::

    def concat(values, axis, name=None):
      r\"\"\"...\"\"\"
      <list checks, inferred lengths>            # shared
      <attr defaults and coercions>              # shared
      if _context.in_graph_mode():
        _, _, _op = _op_def_lib._apply_op_helper(...)
        <collect outputs, _inputs_flat, _attrs from the op>
      else:
        <infer type attrs, cast inputs>
        _inputs_flat = ...
        _attrs = (...)
        _result = _execute.execute("Concat", ...)
      _result = _execute.record_gradient(...)    # if the op has outputs
      <regroup the flat result>
      return _result

Every section is produced by its own method and returned as a list of
lines, so each fragment can be checked on its own.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from eager_opgen._logging import get_logger, op_logger
from eager_opgen.codegen.classifier import AttrClassification, attr_var_name, classify
from eager_opgen.codegen.coercion import emit_attr_coercions, expect_list_arg
from eager_opgen.codegen.docstring import emit_docstring
from eager_opgen.codegen.flatten import flatten_inputs, unflatten
from eager_opgen.codegen.values import render_value, vector_to_tuple
from eager_opgen.codegen.wrap import word_wrap
from eager_opgen.config import INDENT
from eager_opgen.descriptor.dtypes import dtype_to_python
from eager_opgen.descriptor.model import OperationDescriptor
from eager_opgen.naming import DEFAULT_NAMING, PythonNaming

logger = get_logger(__name__)

_BRANCH = INDENT * 2
_CONTINUATION = INDENT * 4


@dataclass(frozen=True)
class GeneratedWrapper:
    """Source text for one op.

    Attributes:
        op_name: Descriptor name (``"ConcatV2"``).
        function_name: Generated function name (``"concat_v2"``).
        code: The ``def`` statement, ending with a blank line.
        output_tuple: Name of the aggregate result type (``"_FooOutput"``)
            when the op has several outputs, else None.
        output_tuple_code: Declaration of :attr:`output_tuple`, to be
            emitted once per module before the function.
    """

    op_name: str
    function_name: str
    code: str
    output_tuple: Optional[str] = None
    output_tuple_code: str = ""


class WrapperSynthesizer:
    """Builds the wrapper for one op.

    Args:
        op: The operation to wrap.
        function_name: Name of the generated function.  A leading ``_``
            (hidden op) is dropped from the name used in error messages.
        naming: Reserved-word rules for parameter names.

    Raises:
        UnsupportedAttrTypeError: From construction or :meth:`generate`
            when an attribute type cannot be exposed.
    """

    def __init__(self, op: OperationDescriptor, function_name: str,
                 naming: PythonNaming = DEFAULT_NAMING) -> None:
        self.op = op
        self.function_name = function_name
        self.op_name = function_name[1:] if function_name.startswith("_") else function_name
        self.naming = naming
        self.classification: AttrClassification = classify(op, naming)

    # ------------------------------------------------------------------
    # Signature
    # ------------------------------------------------------------------

    def parameters(self) -> List[str]:
        """Parameter list entries: inputs, required attrs, defaulted attrs, name."""
        c = self.classification
        params = list(c.input_params)
        params.extend(c.attr_params[a] for a in c.required)
        params.extend(f"{c.attr_params[a]}={c.defaults[a]}" for a in c.defaulted)
        params.append("name=None")
        return params

    def signature(self) -> List[str]:
        text = word_wrap(f"def {self.function_name}(", ", ".join(self.parameters()) + "):")
        return text.split("\n")

    # ------------------------------------------------------------------
    # Shared prologue
    # ------------------------------------------------------------------

    def list_validations(self) -> List[str]:
        """Check list inputs and compute inferred ``int`` attrs from their lengths.

        Every input sharing a ``number_attr`` must have the same length as
        the first one; a mismatch raises ``ValueError`` at call time.
        """
        c = self.classification
        lines: List[str] = []
        for attr in self.op.attrs:
            if attr.type != "int" or attr.name not in c.attr_to_args:
                continue
            var = attr_var_name(attr.name)
            for j, index in enumerate(c.attr_to_args[attr.name]):
                param = c.input_params[index]
                lines.extend(expect_list_arg(param, self.op_name))
                if j == 0:
                    lines.append(f"{INDENT}{var} = len({param})")
                    continue
                lines.extend([
                    f"{INDENT}if len({param}) != {var}:",
                    f"{INDENT}  raise ValueError(",
                    f"{INDENT}      \"List argument '{param}' to '{self.op_name}' "
                    f"Op with length %d \"",
                    f"{INDENT}      \"must match length %d of argument "
                    f"'{c.inferred[attr.name]}'.\" %",
                    f"{INDENT}      (len({param}), {var}))",
                ])
        return lines

    def attr_coercions(self) -> List[str]:
        return emit_attr_coercions(self.op, self.classification, self.op_name)

    # ------------------------------------------------------------------
    # Graph branch
    # ------------------------------------------------------------------

    def _apply_op_call(self) -> List[str]:
        c = self.classification
        args = [f'"{self.op.name}"']
        args.extend(f"{p}={p}" for p in c.param_names)
        args.append("name=name)")
        text = word_wrap(_CONTINUATION, ", ".join(args))
        return [f"{_BRANCH}_, _, _op = _op_def_lib._apply_op_helper("] + text.split("\n")

    def _attrs_tuple(self, value_for) -> List[str]:
        if not self.op.attrs:
            return [f"{_BRANCH}_attrs = None"]
        values = ", ".join(
            f'"{attr.name}", {value_for(attr.name)}' for attr in self.op.attrs
        )
        return word_wrap(f"{_BRANCH}_attrs = (", values + ")").split("\n")

    def _has_single_list_output(self) -> bool:
        return len(self.op.outputs) == 1 and self.op.outputs[0].is_list

    def graph_branch(self) -> List[str]:
        lines = [f"{INDENT}if _context.in_graph_mode():"]
        lines.extend(self._apply_op_call())
        if not self.op.outputs:
            lines.append(f"{_BRANCH}return _op")
            return lines
        lines.append(f"{_BRANCH}_result = _op.outputs[:]")
        if self.op.is_stateful and self._has_single_list_output():
            # Stateful ops may produce an empty output list.
            lines.append(f"{_BRANCH}if not _result:")
            lines.append(f"{_BRANCH}  return _op")
        lines.append(f"{_BRANCH}_inputs_flat = "
                     f"{flatten_inputs(self.op, self.classification).expr}")
        lines.extend(self._attrs_tuple(lambda name: f'_op.get_attr("{name}")'))
        return lines

    # ------------------------------------------------------------------
    # Eager branch
    # ------------------------------------------------------------------

    def eager_inferred_attrs(self) -> List[str]:
        """Convert inputs to eager tensors and read off inferred type attrs."""
        c = self.classification
        lines: List[str] = []
        for attr in self.op.attrs:
            indices = c.attr_to_args.get(attr.name)
            if not indices:
                continue
            var = attr_var_name(attr.name)
            params = [c.input_params[i] for i in indices]
            if attr.type == "type":
                flat = flatten_inputs(self.op, c, indices)
                args = flat.expr
                if attr.has_default:
                    args += ", " + render_value("type", attr.default)
                if len(indices) == 1:
                    target = params[0] if flat.sizes[0] else f"({params[0]},)"
                else:
                    target = f"_inputs_{attr.name}"
                lines.extend(word_wrap(
                    f"{_BRANCH}{var}, {target} = _execute.args_to_matching_eager(",
                    args + ")",
                ).split("\n"))
                if len(indices) > 1:
                    lines.extend(unflatten(flat.sizes, target, _BRANCH))
                    lines.append(f"{_BRANCH}{vector_to_tuple(params)} = {target}")
                lines.append(f"{_BRANCH}{var} = {var}.as_datatype_enum")
            elif attr.type == "list(type)":
                # Defaults are ignored here: the list is always taken from
                # the actual arguments.
                if len(indices) > 1:
                    inputs_var = vector_to_tuple(params)
                    conversion = "_execute.args_to_mixed_eager_tensors"
                else:
                    inputs_var = params[0]
                    conversion = "_execute.convert_to_mixed_eager_tensors"
                lines.append(f"{_BRANCH}{var}, {inputs_var} = {conversion}({inputs_var})")
                lines.append(f"{_BRANCH}{var} = [_t.as_datatype_enum for _t in {var}]")
        return lines

    def eager_input_casts(self) -> List[str]:
        """Cast inputs with a fixed element type to tensors of that type."""
        lines = []
        for arg, param in zip(self.op.inputs, self.classification.input_params):
            if arg.type_attr or arg.type_list_attr:
                continue
            fn = "n_" if arg.number_attr else ""
            lines.append(
                f"{_BRANCH}{param} = _ops.convert_{fn}to_tensor("
                f"{param}, {dtype_to_python(arg.type)})"
            )
        return lines

    def output_sizes(self) -> Tuple[str, ...]:
        """Size expression per output; ``""`` for singular outputs.

        The expressions only use values computed before the branch point,
        so they hold in both the graph and the eager path.
        """
        c = self.classification
        sizes = []
        for out in self.op.outputs:
            if out.number_attr:
                sizes.append(c.attr_expressions[out.number_attr])
            elif out.type_list_attr:
                attr = out.type_list_attr
                if c.is_inferred(attr):
                    first = c.input_params[c.attr_to_args[attr][0]]
                    sizes.append(f"len({first})")
                else:
                    sizes.append(f"len({c.attr_expressions[attr]})")
            else:
                sizes.append("")
        return tuple(sizes)

    def num_outputs_expr(self) -> str:
        """Expression for the total number of flat outputs."""
        sizes = self.output_sizes()
        parts = [s for s in sizes if s]
        fixed = sum(1 for s in sizes if not s)
        if fixed:
            parts.append(str(fixed))
        return " + ".join(parts) or "0"

    def eager_branch(self) -> List[str]:
        lines = [f"{INDENT}else:"]
        if self.op.has_ref_args:
            lines.extend([
                f"{_BRANCH}raise RuntimeError(",
                f"{_CONTINUATION}\"{self.op_name} op does not support eager execution.\")",
            ])
            return lines
        c = self.classification
        lines.extend(self.eager_inferred_attrs())
        lines.extend(self.eager_input_casts())
        lines.append(f"{_BRANCH}_inputs_flat = {flatten_inputs(self.op, c).expr}")
        lines.extend(self._attrs_tuple(lambda name: c.attr_expressions[name]))
        execute_args = (
            f'"{self.op.name}", {self.num_outputs_expr()}, '
            f"inputs=_inputs_flat, attrs=_attrs, name=name)"
        )
        lines.extend(word_wrap(f"{_BRANCH}_result = _execute.execute(", execute_args).split("\n"))
        return lines

    # ------------------------------------------------------------------
    # Shared epilogue
    # ------------------------------------------------------------------

    @property
    def output_tuple_name(self) -> Optional[str]:
        if len(self.op.outputs) > 1:
            return f"_{self.op.name}Output"
        return None

    def output_tuple_declaration(self) -> str:
        """Module-level declaration of the aggregate result type, or ``""``."""
        tuple_name = self.output_tuple_name
        if tuple_name is None:
            return ""
        names_var = f"_{self.function_name}_outputs"
        fields = ", ".join(
            f'"{self.naming.avoid_reserved(out.name)}"' for out in self.op.outputs
        )
        lines = [word_wrap(f"{names_var} = [", fields + "]")]
        lines.append(f"{tuple_name} = _collections.namedtuple(")
        lines.append(f'{_CONTINUATION}"{self.op.name}", {names_var})')
        return "\n".join(lines) + "\n\n\n"

    def epilogue(self) -> List[str]:
        if not self.op.outputs:
            return [f"{INDENT}return _result"]
        lines = [
            f"{INDENT}_result = _execute.record_gradient(",
            f'{INDENT * 3}"{self.op.name}", _inputs_flat, _attrs, _result, name)',
        ]
        sizes = self.output_sizes()
        if len(sizes) == 1:
            if not sizes[0]:
                lines.append(f"{INDENT}_result, = _result")
        else:
            lines.extend(unflatten(sizes, "_result", INDENT))
            lines.append(f"{INDENT}_result = {self.output_tuple_name}._make(_result)")
        lines.append(f"{INDENT}return _result")
        return lines

    # ------------------------------------------------------------------

    def generate(self) -> GeneratedWrapper:
        """Assemble the full wrapper."""
        op_logger(logger, self.op.name).debug("synthesizing %s", self.function_name)
        lines: List[str] = []
        lines.extend(self.signature())
        lines.extend(emit_docstring(self.op, self.classification))
        lines.extend(self.list_validations())
        lines.extend(self.attr_coercions())
        lines.extend(self.graph_branch())
        lines.extend(self.eager_branch())
        lines.extend(self.epilogue())
        return GeneratedWrapper(
            op_name=self.op.name,
            function_name=self.function_name,
            code="\n".join(lines) + "\n\n\n",
            output_tuple=self.output_tuple_name,
            output_tuple_code=self.output_tuple_declaration(),
        )


def generate_wrapper(op: OperationDescriptor, function_name: str,
                     naming: PythonNaming = DEFAULT_NAMING) -> GeneratedWrapper:
    """Generate the wrapper for *op* (see :class:`WrapperSynthesizer`)."""
    return WrapperSynthesizer(op, function_name, naming).generate()
