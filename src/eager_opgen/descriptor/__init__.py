"""Operation descriptors: the model, element data types, and the JSON loader."""

from eager_opgen.descriptor.dtypes import canonical_dtype, dtype_to_python, is_known_dtype
from eager_opgen.descriptor.loader import (
    descriptor_from_dict,
    descriptors_from_dict,
    load_descriptors,
)
from eager_opgen.descriptor.model import (
    NO_DEFAULT,
    SUPPORTED_ATTR_TYPES,
    ArgSpec,
    AttrSpec,
    InputArg,
    OperationDescriptor,
    OutputArg,
)

__all__ = [
    "NO_DEFAULT",
    "SUPPORTED_ATTR_TYPES",
    "ArgSpec",
    "AttrSpec",
    "InputArg",
    "OperationDescriptor",
    "OutputArg",
    "canonical_dtype",
    "descriptor_from_dict",
    "descriptors_from_dict",
    "dtype_to_python",
    "is_known_dtype",
    "load_descriptors",
]
