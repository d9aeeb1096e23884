"""Custom exception hierarchy for eager-opgen.

Provides distinct exception types so callers can tell generator errors
apart from unrelated failures in their except clauses.

Usage::

    from eager_opgen._exceptions import DescriptorError

    try:
        ops = load_descriptors("ops.json")
    except DescriptorError as e:
        print(f"Bad descriptor file: {e}")
"""

from __future__ import annotations


class OpGenError(Exception):
    """Base exception for all eager-opgen errors.

    Catch this to handle any error raised by the library without
    catching unrelated exceptions.
    """


class DescriptorError(OpGenError):
    """Raised when an operation descriptor is malformed.

    Examples:
    - an input names a ``number_attr`` that the op does not declare
    - a ``type_attr`` points at an attribute that is not of type ``type``
    - a descriptor file is not valid JSON or misses required keys
    """


class UnsupportedAttrTypeError(OpGenError):
    """Raised when an attribute's type tag is outside the supported set.

    The batch driver catches this and replaces the op's wrapper with a
    skip marker; the rest of the batch is unaffected.
    """

    def __init__(self, op_name: str, attr_name: str, attr_type: str) -> None:
        self.op_name = op_name
        self.attr_name = attr_name
        self.attr_type = attr_type
        super().__init__(
            f"Op '{op_name}' attr '{attr_name}' has unsupported type '{attr_type}'"
        )


class ConfigError(OpGenError):
    """Raised when generator options or the hidden-ops file are invalid."""
