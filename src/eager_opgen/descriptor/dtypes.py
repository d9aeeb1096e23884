"""Element data types accepted by operation descriptors.

Descriptors name fixed element types either by their registry enum name
(``DT_FLOAT``) or by their Python-side name (``float32``).  Generated code
always refers to the Python-side name through the ``_dtypes`` module alias,
e.g. ``_dtypes.float32``.
"""

from __future__ import annotations

from typing import Dict

from eager_opgen._exceptions import DescriptorError

# fmt: off
_ENUM_TO_PYTHON: Dict[str, str] = {
    "DT_FLOAT":      "float32",
    "DT_DOUBLE":     "float64",
    "DT_HALF":       "float16",
    "DT_BFLOAT16":   "bfloat16",
    "DT_INT8":       "int8",
    "DT_INT16":      "int16",
    "DT_INT32":      "int32",
    "DT_INT64":      "int64",
    "DT_UINT8":      "uint8",
    "DT_UINT16":     "uint16",
    "DT_UINT32":     "uint32",
    "DT_UINT64":     "uint64",
    "DT_BOOL":       "bool",
    "DT_STRING":     "string",
    "DT_COMPLEX64":  "complex64",
    "DT_COMPLEX128": "complex128",
    "DT_QINT8":      "qint8",
    "DT_QUINT8":     "quint8",
    "DT_QINT16":     "qint16",
    "DT_QUINT16":    "quint16",
    "DT_QINT32":     "qint32",
    "DT_RESOURCE":   "resource",
    "DT_VARIANT":    "variant",
}
# fmt: on

_PYTHON_NAMES = frozenset(_ENUM_TO_PYTHON.values())

DTYPES_MODULE_PREFIX = "_dtypes."


def canonical_dtype(name: str) -> str:
    """Return the Python-side name for a data type.

    Accepts ``DT_FLOAT``, ``DT_FLOAT_REF`` (the ``_REF`` suffix is dropped,
    aliasing is carried by ``is_ref`` instead) or ``float32``.

    Raises:
        DescriptorError: If the name is not a known data type.
    """
    key = name.strip()
    if key.upper().startswith("DT_"):
        key = key.upper()
        if key.endswith("_REF"):
            key = key[: -len("_REF")]
        if key in _ENUM_TO_PYTHON:
            return _ENUM_TO_PYTHON[key]
    elif key.lower() in _PYTHON_NAMES:
        return key.lower()
    raise DescriptorError(
        f"Unknown data type '{name}'. "
        f"Supported: {sorted(_PYTHON_NAMES)}"
    )


def is_known_dtype(name: str) -> bool:
    """Whether *name* is a data type :func:`canonical_dtype` accepts."""
    try:
        canonical_dtype(name)
    except DescriptorError:
        return False
    return True


def dtype_to_python(name: str, prefix: str = DTYPES_MODULE_PREFIX) -> str:
    """Render a data type as a Python expression, e.g. ``_dtypes.int32``."""
    return prefix + canonical_dtype(name)
