"""
Re-export exceptions module for cleaner imports.

This allows: from morphcore.exceptions import MorphError
Instead of: from morphcore.meta.morphing.errors import MorphError
"""

from .meta.morphing.errors import (
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

__all__ = [
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
