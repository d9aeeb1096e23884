"""Batch driver: assemble one generated module from many descriptors.

A generated module is laid out as::

    <header: docstring and runtime imports>
    <per op, in input order>
        [output tuple declaration]        # first op to declare the name
        def <wrapper>(...): ...           # or a skip marker comment
        [_ops.RegisterShape("Op")(None)]  # unless require_shapes
    <footer: _InitOpDefLibrary and the embedded descriptor list>

Per-op outcomes:

- the wrapper is emitted normally;
- an attribute type cannot be exposed: a skip marker comment replaces
  the wrapper (logged at WARNING, recorded in
  :attr:`ModuleGenerator.skipped`), the shape stub and footer entry stay;
- the generated function name is a reserved Python name: the op is left
  out entirely (logged at DEBUG).
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Iterable, List, Optional, Set

from eager_opgen._exceptions import UnsupportedAttrTypeError
from eager_opgen._logging import get_logger, op_logger
from eager_opgen.codegen.synthesizer import WrapperSynthesizer
from eager_opgen.config import GeneratorOptions
from eager_opgen.descriptor.model import OperationDescriptor
from eager_opgen.naming import DEFAULT_NAMING, PythonNaming

logger = get_logger(__name__)

# Runtime modules the generated code talks to, by alias.
RUNTIME_IMPORTS = (
    ("tensorflow.python.eager", "context", "_context"),
    ("tensorflow.python.eager", "execute", "_execute"),
    ("tensorflow.python.framework", "dtypes", "_dtypes"),
    ("tensorflow.python.framework", "op_def_library", "_op_def_library"),
    ("tensorflow.python.framework", "op_def_registry", "_op_def_registry"),
    ("tensorflow.python.framework", "ops", "_ops"),
)

_MODULE_DOCSTRING = '''"""Python wrappers around operations.

This file is MACHINE GENERATED! Do not edit.
"""
'''

_INIT_OP_DEF_LIBRARY = """def _InitOpDefLibrary(op_list_json):
  op_list = _json.loads(op_list_json)
  _op_def_registry.register_op_list(op_list)
  op_def_lib = _op_def_library.OpDefLibrary()
  op_def_lib.add_op_list(op_list)
  return op_def_lib
"""


@dataclass(frozen=True)
class SkippedOp:
    """An op whose wrapper was replaced by a skip marker."""

    op_name: str
    function_name: str
    attr_name: str
    attr_type: str


def skip_marker(function_name: str, attr_type: str) -> str:
    return (
        f"# No definition for {function_name} since we don't support attrs with type\n"
        f"# '{attr_type}' right now.\n\n"
    )


def shape_stub(op_name: str) -> str:
    return f'_ops.RegisterShape("{op_name}")(None)\n\n'


def module_header() -> str:
    lines = [_MODULE_DOCSTRING, "import collections as _collections", "import json as _json", ""]
    lines.extend(f"from {package} import {module} as {alias}"
                 for package, module, alias in RUNTIME_IMPORTS)
    return "\n".join(lines) + "\n\n\n"


def module_footer(ops: Iterable[OperationDescriptor]) -> str:
    """``_InitOpDefLibrary`` plus the embedded descriptor list.

    Descriptions are stripped from the embedded list; a readable copy
    is written above it as comments.
    """
    op_list = {"ops": [op.to_dict(include_docs=False) for op in ops]}
    readable = json.dumps(op_list, indent=2).splitlines()
    lines = [_INIT_OP_DEF_LIBRARY, ""]
    lines.extend(f"# {line}" for line in readable)
    lines.append(f'_op_def_lib = _InitOpDefLibrary(r"""{json.dumps(op_list)}""")')
    return "\n".join(lines) + "\n"


class ModuleGenerator:
    """Generates modules for batches of descriptors.

    Each call to :meth:`generate` is one batch.  Output tuple names
    declared within a batch are remembered so an aggregate result type
    is declared once per module; :attr:`skipped` lists the ops skipped
    by the latest batch.

    Args:
        options: Hidden ops and the shape-stub switch.
        naming: Reserved-word rules.
    """

    def __init__(self, options: Optional[GeneratorOptions] = None,
                 naming: PythonNaming = DEFAULT_NAMING) -> None:
        self.options = options or GeneratorOptions()
        self.naming = naming
        self.skipped: List[SkippedOp] = []
        self._declared_tuples: Set[str] = set()

    @property
    def declared_tuples(self) -> frozenset:
        return frozenset(self._declared_tuples)

    def function_name(self, op: OperationDescriptor) -> str:
        return self.naming.function_name(op.name, op.name in self.options.hidden_ops)

    def add(self, op: OperationDescriptor) -> Optional[str]:
        """Return the module text for *op*, or None if the op is left out."""
        log = op_logger(logger, op.name)
        function_name = self.function_name(op)
        if self.naming.is_reserved(function_name):
            log.debug("omitted, '%s' is a reserved name", function_name)
            return None

        try:
            wrapper = WrapperSynthesizer(op, function_name, self.naming).generate()
        except UnsupportedAttrTypeError as exc:
            log.warning("skipped, attr '%s' has unsupported type '%s'",
                        exc.attr_name, exc.attr_type)
            self.skipped.append(
                SkippedOp(op.name, function_name, exc.attr_name, exc.attr_type)
            )
            text = skip_marker(function_name, exc.attr_type)
        else:
            text = ""
            if wrapper.output_tuple and wrapper.output_tuple not in self._declared_tuples:
                self._declared_tuples.add(wrapper.output_tuple)
                text = wrapper.output_tuple_code
            text += wrapper.code

        if not self.options.require_shapes:
            text += shape_stub(op.name)
        return text

    def generate(self, descriptors: Iterable[OperationDescriptor]) -> str:
        """Return the full module source for *descriptors*, in input order."""
        self.skipped = []
        self._declared_tuples = set()
        parts = [module_header()]
        listed = []
        for op in descriptors:
            text = self.add(op)
            if text is None:
                continue
            parts.append(text)
            listed.append(op)
        parts.append(module_footer(listed))
        logger.info("Generated %d wrappers (%d skipped)",
                    len(listed) - len(self.skipped), len(self.skipped))
        return "".join(parts)


def generate_module(descriptors: Iterable[OperationDescriptor],
                    hidden_ops: Iterable[str] = (),
                    require_shapes: bool = False) -> str:
    """Convenience wrapper around :class:`ModuleGenerator`.

    Example::

        from eager_opgen import generate_module, load_descriptors

        source = generate_module(load_descriptors("ops.json"),
                                 hidden_ops=["Add"])
    """
    options = GeneratorOptions(hidden_ops=frozenset(hidden_ops),
                               require_shapes=require_shapes)
    return ModuleGenerator(options).generate(descriptors)
