"""
morphcore: Declarative, tag-driven normalization of dataclass records.

This library provides:
- Morph, an engine that walks a record and applies chains of tagged transformations
- Built-in transformers (trim, lower, upper, truncate, ceil, floor, round, precision)
- A Transformer protocol to register custom transformations
- Navigation tags to dive into sequences and mappings, and into mapping keys
"""

__version__ = "0.1.0"
__author__ = "Sébastien Gachoud"
__license__ = "MIT"

__all__ = [
    # Version info
    "__version__",
    "__author__",
    "__license__",
]
