"""
Re-export transformers module for cleaner imports.

This allows: from morphcore.transformers import FuncTransformer
Instead of: from morphcore.meta.morphing.transformers import FuncTransformer
"""

from .meta.morphing.transformers import (
    Transformer,
    ParameterlessTransformer,
    IntParameterTransformer,
    FuncTransformer,
    builtin_transformers,
)
from .meta.morphing.parameters import ParameterStore, ParamsKey
from .meta.morphing.values import Category, ValueRef

__all__ = [
    # Protocol
    "Transformer",
    "ParameterlessTransformer",
    "IntParameterTransformer",
    "FuncTransformer",
    "builtin_transformers",
    # Values and parameters
    "Category",
    "ValueRef",
    "ParameterStore",
    "ParamsKey",
]
