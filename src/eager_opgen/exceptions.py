"""Public exception hierarchy for eager-opgen.

All eager-opgen exceptions inherit from :class:`OpGenError`, so callers
can ``except OpGenError`` to catch any library error, or be specific with
a subclass.

Example::

    from eager_opgen.exceptions import DescriptorError, OpGenError

    try:
        source = eager_opgen.generate_module(load_descriptors(path))
    except DescriptorError:
        print("Fix the descriptor file first")
    except OpGenError as e:
        print(f"eager-opgen error: {e}")
"""

from eager_opgen._exceptions import (  # noqa: F401
    ConfigError,
    DescriptorError,
    OpGenError,
    UnsupportedAttrTypeError,
)

__all__ = [
    "OpGenError",
    "ConfigError",
    "DescriptorError",
    "UnsupportedAttrTypeError",
]
