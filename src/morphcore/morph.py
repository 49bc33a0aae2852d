"""
Re-export morph module for cleaner imports.

This allows: from morphcore.morph import Morph, tagged
Instead of: from morphcore.meta.morphing.engine import Morph, tagged
"""

from .meta.morphing.engine import (
    Morph,
    default_morph,
    morph_struct,
    register_transformer,
    tagged,
)
from .meta.morphing.tags import (
    DEFAULT_TAG,
    TAG_SEPARATOR,
    PARAMS_SIGN,
    NAVIGATIONAL_TAGS,
    TAG_TRIM,
    TAG_LOWER,
    TAG_UPPER,
    TAG_TRUNCATE,
    TAG_CEIL,
    TAG_FLOOR,
    TAG_ROUND,
    TAG_PRECISION,
    TAG_DIVE,
    TAG_KEYS,
    TAG_EXIT,
    TAG_IGNORE,
)

__all__ = [
    # Core classes
    "Morph",
    # Main API functions
    "default_morph",
    "morph_struct",
    "register_transformer",
    "tagged",
    # Tags
    "DEFAULT_TAG",
    "TAG_SEPARATOR",
    "PARAMS_SIGN",
    "NAVIGATIONAL_TAGS",
    "TAG_TRIM",
    "TAG_LOWER",
    "TAG_UPPER",
    "TAG_TRUNCATE",
    "TAG_CEIL",
    "TAG_FLOOR",
    "TAG_ROUND",
    "TAG_PRECISION",
    "TAG_DIVE",
    "TAG_KEYS",
    "TAG_EXIT",
    "TAG_IGNORE",
]
