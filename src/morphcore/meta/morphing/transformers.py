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
Description: The transformer protocol and the built-in transformers. A transformer caches
            its parameters once per tagged field, then transforms values in place through
            a ValueRef. Built-in transformers: trim, lower, upper, truncate, ceil, floor,
            round and precision.
🦙
"""

from __future__ import annotations

__author__ = "Sébastien Gachoud"
__license__ = "MIT"

from decimal import ROUND_CEILING, ROUND_DOWN, ROUND_FLOOR, ROUND_HALF_UP, Decimal, localcontext
from typing import Any, Callable, Self

from . import tags
from .errors import InvalidParametersError, MissingParametersError, UnexpectedValueError
from .parameters import ParameterStore
from .values import Category, ValueRef

type Transform = Callable[[ValueRef, Any], None]
type Cacher = Callable[[str | None, Any], None]


class Transformer:
    """Base class of the transformations associated to a tag.

    `cache` is called once per tagged field, when the annotation is compiled, and before any
    call to `transform` with the same key. `transform` replaces `ref.value` with the
    transformed value. It must check the kind of the value first and raise an
    UnexpectedValueError if it cannot handle it.
    """

    tag: str = ""

    def cache(self, params: str | None, params_key: Any) -> None:
        """Parse and store the parameters of a tag.

        Args:
            params (str | None): The raw parameters, None if the tag has none.
            params_key (Any): The key to store the parsed parameters with.

        Raises:
            InvalidParametersError: Raised when the parameters cannot be parsed.
        """
        raise NotImplementedError

    def transform(self, ref: ValueRef, params_key: Any) -> None:
        """Transform the referenced value.

        Args:
            ref (ValueRef): Handle on the value to transform.
            params_key (Any): The key the parameters were cached with.

        Raises:
            UnexpectedValueError: Raised when the value is not of a supported kind.
        """
        raise NotImplementedError


def is_transformer(candidate: Any) -> bool:
    """Check if an object provides the transformer protocol."""
    return callable(getattr(candidate, "cache", None)) and callable(
        getattr(candidate, "transform", None)
    )


class ParameterlessTransformer(Transformer):
    """Transformer taking no parameters. Caching does nothing."""

    def cache(self, params: str | None, params_key: Any) -> None:
        _ = params, params_key


class IntParameterTransformer(Transformer):
    """Transformer taking a single non-negative integer parameter.

    The parameter is made of ASCII digits with an optional leading "+". Whitespaces,
    underscores and signs other than "+" are rejected.
    """

    def __init__(self, store: ParameterStore) -> None:
        self._store = store

    def cache(self, params: str | None, params_key: Any) -> None:
        digits = (params or "").removeprefix("+")
        if not (digits.isascii() and digits.isdigit()):
            raise InvalidParametersError(params, self.tag)
        self._store.put(params_key, int(digits))

    def parameter(self, params_key: Any) -> int:
        """Get the cached parameter.

        Raises:
            MissingParametersError: Raised when nothing was cached for the key.
        """
        value = self._store.get(params_key)
        if value is None:
            raise MissingParametersError(self.tag)
        return value


class FuncTransformer(ParameterlessTransformer):
    """House a transformation given as a callable. Can be used as a decorator.

    Examples:
        >>> @FuncTransformer
        ... def swap(ref, _key):
        ...     ref.value = ref.value[::-1]
        >>> morph.register("swap", swap)
    """

    def __init__(self, func: Transform, cacher: Cacher | None = None, tag: str = "") -> None:
        self._func = func
        self._cacher = cacher
        self.tag = tag or getattr(func, "__name__", "")

    def set_cacher(self, cacher: Cacher) -> Self:
        """Set the callable parsing the parameters. Can be used as a decorator.

        Args:
            cacher (Cacher): Called with the raw parameters and the parameters key.

        Returns:
            Self: The transformer.
        """
        self._cacher = cacher
        return self

    def cache(self, params: str | None, params_key: Any) -> None:
        if self._cacher is not None:
            self._cacher(params, params_key)

    def transform(self, ref: ValueRef, params_key: Any) -> None:
        self._func(ref, params_key)


# Strings


class _StringTransformer(ParameterlessTransformer):
    def apply(self, value: str) -> str:
        raise NotImplementedError

    def transform(self, ref: ValueRef, params_key: Any) -> None:
        if ref.category is not Category.STRING:
            raise UnexpectedValueError(ref.kind, self.tag)
        ref.value = self.apply(ref.value)


class TrimTransformer(_StringTransformer):
    """Strips leading and trailing whitespaces: " value " -> "value"."""

    tag = tags.TAG_TRIM

    def apply(self, value: str) -> str:
        return value.strip()


class LowerTransformer(_StringTransformer):
    """"VALUE" -> "value"."""

    tag = tags.TAG_LOWER

    def apply(self, value: str) -> str:
        return value.lower()


class UpperTransformer(_StringTransformer):
    """"value" -> "VALUE"."""

    tag = tags.TAG_UPPER

    def apply(self, value: str) -> str:
        return value.upper()


class TruncateTransformer(IntParameterTransformer):
    """Keeps the first N characters: "truncate=3", "value" -> "val"."""

    tag = tags.TAG_TRUNCATE

    def transform(self, ref: ValueRef, params_key: Any) -> None:
        if ref.category is not Category.STRING:
            raise UnexpectedValueError(ref.kind, self.tag)
        limit = self.parameter(params_key)
        if len(ref.value) > limit:
            ref.value = ref.value[:limit]


# Numbers


def _apply_to_number(ref: ValueRef, tag: str, f: Callable[[Decimal], Decimal]) -> None:
    """Apply f to a float or a Decimal. Floats go through the decimal of their shortest repr
    and are converted back to float.
    """
    match ref.category:
        case Category.DECIMAL:
            if ref.value.is_finite():
                ref.value = f(ref.value)
        case Category.FLOAT:
            d = Decimal(repr(ref.value))
            if d.is_finite():
                ref.value = float(f(d))
        case _:
            raise UnexpectedValueError(ref.kind, tag)


class CeilTransformer(ParameterlessTransformer):
    """1.45 -> 2.0"""

    tag = tags.TAG_CEIL

    def transform(self, ref: ValueRef, params_key: Any) -> None:
        _apply_to_number(ref, self.tag, lambda d: d.to_integral_value(ROUND_CEILING))


class FloorTransformer(ParameterlessTransformer):
    """1.65 -> 1.0"""

    tag = tags.TAG_FLOOR

    def transform(self, ref: ValueRef, params_key: Any) -> None:
        _apply_to_number(ref, self.tag, lambda d: d.to_integral_value(ROUND_FLOOR))


class RoundTransformer(ParameterlessTransformer):
    """Rounds half away from zero: 1.5 -> 2.0, -1.5 -> -2.0, 1.45 -> 1.0"""

    tag = tags.TAG_ROUND

    def transform(self, ref: ValueRef, params_key: Any) -> None:
        _apply_to_number(ref, self.tag, lambda d: d.to_integral_value(ROUND_HALF_UP))


class PrecisionTransformer(IntParameterTransformer):
    """Keeps N decimal digits, truncating toward zero: "precision=2", 1.499 -> 1.49"""

    tag = tags.TAG_PRECISION

    def transform(self, ref: ValueRef, params_key: Any) -> None:
        if ref.category not in (Category.FLOAT, Category.DECIMAL):
            raise UnexpectedValueError(ref.kind, self.tag)
        digits = self.parameter(params_key)

        def limit(d: Decimal) -> Decimal:
            _, coefficient, exponent = d.as_tuple()
            if exponent >= -digits:  # type: ignore[operator]
                return d
            # The result keeps fewer digits than d, d may hold more than the context allows.
            with localcontext() as context:
                context.prec = max(context.prec, len(coefficient))
                return d.quantize(Decimal(1).scaleb(-digits), rounding=ROUND_DOWN)

        _apply_to_number(ref, self.tag, limit)


def builtin_transformers(store: ParameterStore) -> dict[str, Transformer]:
    """Create the built-in transformers, keyed by their tag.

    Args:
        store (ParameterStore): The store used by the transformers taking parameters.

    Returns:
        dict[str, Transformer]: The transformers.
    """
    transformers: list[Transformer] = [
        TrimTransformer(),
        LowerTransformer(),
        UpperTransformer(),
        TruncateTransformer(store),
        CeilTransformer(),
        FloorTransformer(),
        RoundTransformer(),
        PrecisionTransformer(store),
    ]
    return {t.tag: t for t in transformers}
