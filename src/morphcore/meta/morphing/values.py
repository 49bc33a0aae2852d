"""
MIT License

Copyright (c) 2025 Sébastien Gachoud

Permission is hereby granted, free of charge, to any person obtaining a copy
of this software and associated documentation files (the "Software"), to deal
in the Software without restriction, including without limitation the rights
to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
copies of the Software, and to permit persons to whom the Software is
furnished to do so, subject to the following conditions:

The above copyright notice and this permission notice shall be included in all
copies or substantial portions of the Software.

THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
SOFTWARE.

-------------------------------------------------------------------------------

Author: Sébastien Gachoud
Created: 2025-08-02
Description: Runtime categories of the values met while morphing, and the handle given to
            transformers to read and replace a value.
🦙
"""

__author__ = "Sébastien Gachoud"
__license__ = "MIT"

from collections.abc import MutableMapping, MutableSequence
from dataclasses import is_dataclass
from decimal import Decimal
from enum import Enum
from typing import Any


class Category(Enum):
    """Closed set of value categories the engine branches on."""

    NONE = "none"
    RECORD = "struct"
    SEQUENCE = "sequence"
    MAPPING = "map"
    STRING = "string"
    BOOLEAN = "bool"
    INTEGER = "int"
    FLOAT = "float"
    DECIMAL = "decimal"
    OTHER = "other"


def is_record(value: Any) -> bool:
    """Check if a value is a record. A record is a dataclass instance, not a dataclass."""
    return is_dataclass(value) and not isinstance(value, type)


def category_of(value: Any) -> Category:
    """Get the category of a value.

    Args:
        value (Any): The value to categorize.

    Returns:
        Category: The category of the value.
    """
    match value:
        case None:
            return Category.NONE
        case str():
            return Category.STRING
        # bool before int, bool is an int.
        case bool():
            return Category.BOOLEAN
        case int():
            return Category.INTEGER
        case float():
            return Category.FLOAT
        case Decimal():
            return Category.DECIMAL
        case _ if is_record(value):
            return Category.RECORD
        case MutableMapping():
            return Category.MAPPING
        case MutableSequence() | tuple():
            return Category.SEQUENCE
    return Category.OTHER


def kind_name(value: Any) -> str:
    """Name of the kind of a value, for error messages. Uses the type name for OTHER."""
    category = category_of(value)
    if category is Category.OTHER:
        return type(value).__name__
    return category.value


class ValueRef:
    """Transient handle on the value being morphed.

    Transformers read `value` and assign the transformed value back to it. The engine
    writes the final value back to the field, item or mapping entry it came from once the
    whole chain succeeded. A handle never outlives one step of a traversal.
    """

    __slots__ = ("value",)

    def __init__(self, value: Any) -> None:
        self.value = value

    @property
    def category(self) -> Category:
        """Category of the current value."""
        return category_of(self.value)

    @property
    def kind(self) -> str:
        """Kind name of the current value."""
        return kind_name(self.value)

    def __repr__(self) -> str:
        return f"ValueRef({self.value!r})"
