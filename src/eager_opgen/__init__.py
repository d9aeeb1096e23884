"""eager-opgen: generate Python wrappers for graph/eager operations.

Given declarative operation descriptors (typed inputs, typed outputs and
parametric attributes), eager-opgen writes a Python module with one
wrapper function per op.  Each wrapper

- infers type and length attributes from its actual arguments,
- normalizes the remaining attributes to canonical values,
- builds a graph node when the runtime is in graph mode, and
- executes the op immediately otherwise,

and returns the results regrouped to match the op's declared outputs.

Quick start::

    import eager_opgen

    ops = eager_opgen.load_descriptors("math_ops.json")
    source = eager_opgen.generate_module(ops, hidden_ops=["AddV2"])

Or from the command line::

    eager-opgen generate math_ops.json -o gen_math_ops.py

Environment Variables
---------------------
``EAGER_OPGEN_LOG_LEVEL``
    DEBUG, INFO, WARNING (default), ERROR or CRITICAL.
``EAGER_OPGEN_HIDDEN_OPS_FILE`` / ``EAGER_OPGEN_REQUIRE_SHAPES``
    See :mod:`eager_opgen.config`.
"""

from __future__ import annotations

__version__ = "0.3.0"

from eager_opgen._logging import get_logger, set_log_level  # noqa: E402
from eager_opgen.codegen import (  # noqa: E402
    ModuleGenerator,
    WrapperSynthesizer,
    classify,
    generate_module,
    generate_wrapper,
)
from eager_opgen.config import GeneratorOptions  # noqa: E402
from eager_opgen.descriptor import (  # noqa: E402
    AttrSpec,
    InputArg,
    OperationDescriptor,
    OutputArg,
    load_descriptors,
)
from eager_opgen.exceptions import (  # noqa: E402
    ConfigError,
    DescriptorError,
    OpGenError,
    UnsupportedAttrTypeError,
)

__all__ = [
    "__version__",
    "AttrSpec",
    "ConfigError",
    "DescriptorError",
    "GeneratorOptions",
    "InputArg",
    "ModuleGenerator",
    "OpGenError",
    "OperationDescriptor",
    "OutputArg",
    "UnsupportedAttrTypeError",
    "WrapperSynthesizer",
    "classify",
    "generate_module",
    "generate_wrapper",
    "get_logger",
    "load_descriptors",
    "set_log_level",
]
