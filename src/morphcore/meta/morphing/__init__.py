"""Tag driven morphing of records for morphcore."""

from .engine import (
    Morph,
    default_morph,
    morph_struct,
    register_transformer,
    tagged,
)
from .transformers import (
    Transformer,
    ParameterlessTransformer,
    IntParameterTransformer,
    FuncTransformer,
    TrimTransformer,
    LowerTransformer,
    UpperTransformer,
    TruncateTransformer,
    CeilTransformer,
    FloorTransformer,
    RoundTransformer,
    PrecisionTransformer,
    builtin_transformers,
)
from .values import Category, ValueRef, category_of, kind_name
from .parameters import ParameterStore, ParamsKey, ReadWriteLock
from .errors import (
    MorphError,
    NotAPointerError,
    NotAStructError,
    InvalidTagNameError,
    InvalidTransformerError,
    UnknownTagError,
    InvalidDiveError,
    ReservedTagOverrideError,
    UnexpectedValueError,
    InvalidParametersError,
    MissingParametersError,
    format_exception,
)
from . import tags

__all__ = [
    # Engine
    "Morph",
    "default_morph",
    "morph_struct",
    "register_transformer",
    "tagged",
    "tags",
    # Transformers
    "Transformer",
    "ParameterlessTransformer",
    "IntParameterTransformer",
    "FuncTransformer",
    "TrimTransformer",
    "LowerTransformer",
    "UpperTransformer",
    "TruncateTransformer",
    "CeilTransformer",
    "FloorTransformer",
    "RoundTransformer",
    "PrecisionTransformer",
    "builtin_transformers",
    # Values and parameters
    "Category",
    "ValueRef",
    "category_of",
    "kind_name",
    "ParameterStore",
    "ParamsKey",
    "ReadWriteLock",
    # Errors
    "MorphError",
    "NotAPointerError",
    "NotAStructError",
    "InvalidTagNameError",
    "InvalidTransformerError",
    "UnknownTagError",
    "InvalidDiveError",
    "ReservedTagOverrideError",
    "UnexpectedValueError",
    "InvalidParametersError",
    "MissingParametersError",
    "format_exception",
]
