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
Description: Errors raised while configuring a morph engine, compiling annotations and
            morphing records. All of them derive from MorphError and can be formatted with
            their traceback.
🦙
"""

__author__ = "Sébastien Gachoud"
__license__ = "MIT"

import traceback


def format_exception(e: BaseException) -> str:
    """Format the provided exception to a string with its traceback.

    Args:
        e (BaseException): The exception to format.

    Returns:
        str: The string representation of the exception with its traceback.
    """
    return "".join(traceback.format_exception(type(e), e, e.__traceback__))


class MorphError(Exception):
    """Base error of the morphing engine."""

    def traceback_format(self) -> str:
        """Format the error to a string with its traceback.

        Returns:
            str: The string representation of the error with its traceback.
        """
        return format_exception(self)


# Entry point and configuration errors.


class NotAPointerError(MorphError):
    """Signals that the provided value cannot be morphed in place."""

    def __init__(self, reason: str = "the provided value is not a pointer") -> None:
        super().__init__(reason)


class NotAStructError(MorphError):
    """Signals that the provided value is not a record (dataclass instance)."""

    def __init__(self, kind: str) -> None:
        super().__init__(f"the provided value is not a struct: {kind}")
        self.kind = kind


class InvalidTagNameError(MorphError):
    """Signals a blank tag name."""

    def __init__(self, tag: str) -> None:
        super().__init__(f"invalid tag name: '{tag}'")
        self.tag = tag


class InvalidTransformerError(MorphError):
    """Signals that no usable transformer was provided for a registration."""

    def __init__(self, tag: str) -> None:
        super().__init__(f"invalid transformer for tag: '{tag}'")
        self.tag = tag


# Annotation errors.


class UnknownTagError(MorphError):
    """Signals a tag that is neither registered nor navigational."""

    def __init__(self, tag: str) -> None:
        super().__init__(f"unknown tag: '{tag}'")
        self.tag = tag


class InvalidDiveError(MorphError):
    """Signals a dive into a value that is neither a sequence nor a mapping."""

    def __init__(self, kind: str) -> None:
        super().__init__(f"cannot dive into kind: {kind}")
        self.kind = kind


class ReservedTagOverrideError(MorphError):
    """Signals an attempt to register a transformer under a navigational tag."""

    def __init__(self, tag: str) -> None:
        super().__init__(f"cannot override reserved tag: '{tag}'")
        self.tag = tag


# Transformation errors.


class UnexpectedValueError(MorphError):
    """Signals a tag applied to a value of the wrong kind."""

    def __init__(self, kind: str, tag: str) -> None:
        super().__init__(f"unexpected value: '{kind}' for tag: '{tag}'")
        self.kind = kind
        self.tag = tag


class InvalidParametersError(MorphError):
    """Signals parameters that a transformer cannot parse."""

    def __init__(self, params: str | None, tag: str) -> None:
        super().__init__(f"invalid parameters '{params or ''}' for tag: '{tag}'")
        self.params = params
        self.tag = tag


class MissingParametersError(MorphError):
    """Signals a transformation whose parameters were never cached."""

    def __init__(self, tag: str) -> None:
        super().__init__(f"missing parameters for tag: '{tag}'")
        self.tag = tag
