"""Code generation: from an operation descriptor to Python source text.

Stages, leaves first:

- :mod:`~eager_opgen.codegen.values`: default values as Python literals
- :mod:`~eager_opgen.codegen.classifier`: inferred/required/defaulted attrs
- :mod:`~eager_opgen.codegen.flatten`: flat input lists and their inverse
- :mod:`~eager_opgen.codegen.coercion`: attr default guards and coercions
- :mod:`~eager_opgen.codegen.docstring`: wrapper docstrings
- :mod:`~eager_opgen.codegen.wrap`: 78-column line wrapping
- :mod:`~eager_opgen.codegen.synthesizer`: one wrapper, graph and eager paths
- :mod:`~eager_opgen.codegen.module`: a whole generated module
"""

from eager_opgen.codegen.classifier import AttrClassification, classify
from eager_opgen.codegen.module import ModuleGenerator, SkippedOp, generate_module
from eager_opgen.codegen.synthesizer import GeneratedWrapper, WrapperSynthesizer, generate_wrapper
from eager_opgen.codegen.wrap import word_wrap

__all__ = [
    "AttrClassification",
    "GeneratedWrapper",
    "ModuleGenerator",
    "SkippedOp",
    "WrapperSynthesizer",
    "classify",
    "generate_module",
    "generate_wrapper",
    "word_wrap",
]
