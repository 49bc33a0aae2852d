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
Description: The morph engine. It walks a record, finds the tagged fields and applies their
            chains of transformations in place:
            - records found in fields are always morphed, unless the field is ignored
            - "dive" applies the rest of the chain to each item of a sequence or a mapping
            - "keys" ... "exit" applies a separate chain to the keys of a mapping
            The engine can be extended with custom transformers, see Morph.register.
🦙
"""

from __future__ import annotations

__author__ = "Sébastien Gachoud"
__license__ = "MIT"

import dataclasses
import logging
from collections.abc import MutableMapping, MutableSequence
from functools import lru_cache
from typing import Any, Self

from .cache import ShapeCache, ShapeDescriptor, is_frozen
from .chain import Chain, InstructionKind
from .errors import InvalidDiveError, InvalidTagNameError, NotAPointerError, NotAStructError
from .parameters import ParameterStore, ReadWriteLock
from .registry import TransformerRegistry
from .tags import DEFAULT_TAG
from .transformers import Transformer, builtin_transformers
from .values import Category, ValueRef, category_of, is_record, kind_name

logger = logging.getLogger(__name__)


class Morph:
    """Transforms the data of records according to the tags of their fields.

    Tags are read from the metadata of the dataclass fields, under the key "morph" unless
    another one is selected with `with_tag`.

    Transformational tags: trim, lower, upper, truncate=N, ceil, floor, round, precision=N.
    Navigational tags: "-" (ignore), dive, keys, exit.

    Examples:
        >>> @dataclass
        ... class Inner:
        ...     name: str = tagged("trim")

        >>> @dataclass
        ... class Model:
        ...     name: str = tagged("trim,lower,truncate=5")
        ...     inner: Inner = field(default_factory=Inner)  # always morphed
        ...     ignored: Inner = tagged("-", default_factory=Inner)
        ...     inners: list[Inner] = tagged("dive", default_factory=list)
        ...     names: list[str] = tagged("dive,trim", default_factory=list)
        ...     numbers: list[float] = tagged("dive,precision=2", default_factory=list)
        ...     mapping: dict[str, str] = tagged("dive,keys,trim,exit,trim", default_factory=dict)

        >>> data = Model(...)
        >>> Morph().struct(data)
    """

    def __init__(self, tag_name: str = DEFAULT_TAG) -> None:
        # One lock for the registry, the parameters and the shapes.
        lock = ReadWriteLock()
        self.parameters = ParameterStore(lock)
        self.__registry = TransformerRegistry(lock, builtin_transformers(self.parameters))
        self.__shapes = ShapeCache(self.__registry.get, lock=lock)
        self.with_tag(tag_name)

    # Configuration

    @property
    def tag_name(self) -> str:
        """The metadata key the field tags are read from."""
        return self.__shapes.tag_name

    def with_tag(self, tag_name: str) -> Self:
        """Select the metadata key the field tags are read from.

        Args:
            tag_name (str): The metadata key. Surrounding whitespaces are ignored.

        Raises:
            InvalidTagNameError: Raised when the key is blank.

        Returns:
            Self: The engine.
        """
        name = (tag_name or "").strip()
        if not name:
            raise InvalidTagNameError(tag_name)
        # Clears the cached shapes.
        self.__shapes.tag_name = name
        logger.debug("Morph now reads tags from '%s'.", name)
        return self

    def register(self, tag: str, transformer: Transformer) -> None:
        """Register a custom transformer, or override a built-in one, for a tag.

        Navigational tags are reserved. The cached shapes are cleared so that the next records
        are morphed with the new transformer.

        Examples:
            >>> @dataclass
            ... class Model:
            ...     value: str = tagged("reverse")

            >>> @FuncTransformer
            ... def reverse(ref, _params_key):
            ...     ref.value = ref.value[::-1]

            >>> morph.register("reverse", reverse)

        Args:
            tag (str): The tag name.
            transformer (Transformer): The transformer.

        Raises:
            InvalidTagNameError: Raised when the tag is blank.
            ReservedTagOverrideError: Raised when the tag is a navigational tag.
            InvalidTransformerError: Raised when the transformer is missing.
        """
        self.__registry.register(tag, transformer)
        self.__shapes.clear()

    def get_transformer(self, tag: str) -> Transformer | None:
        """Get the transformer registered for a tag, None if there is none."""
        return self.__registry.get(tag)

    def has_transformer(self, tag: str) -> bool:
        """Check if a transformer is registered for a tag."""
        return tag in self.__registry

    def list_registered_tags(self) -> list[str]:
        """Get all registered tags for debugging/introspection."""
        return self.__registry.tags()

    def shape_descriptor(self, shape: type) -> ShapeDescriptor:
        """Get the descriptor of a record type, compiling it if needed."""
        return self.__shapes.get(shape)

    def is_cached(self, shape: type) -> bool:
        """Check if the descriptor of a record type is cached."""
        return shape in self.__shapes

    def clear_cache(self) -> None:
        """Clear the cached shapes. They are compiled again on their next use."""
        self.__shapes.clear()

    # Morphing

    def struct(self, record: Any) -> None:
        """Morph a record in place.

        Args:
            record (Any): The record, a dataclass instance.

        Raises:
            NotAPointerError: Raised when no record is given, or when the record is frozen.
            NotAStructError: Raised when the value is not a dataclass instance.
            MorphError: The first error met while morphing. The fields morphed before the error
                keep their new values.
        """
        if record is None:
            raise NotAPointerError()
        if not is_record(record):
            raise NotAStructError(kind_name(record))
        if is_frozen(type(record)):
            raise NotAPointerError(
                f"the provided struct '{type(record).__qualname__}' is frozen and cannot be"
                " morphed in place"
            )
        self._morph_struct(record)

    def _morph_struct(self, record: Any) -> Any:
        """Morph the fields of a record. Frozen records are rebuilt if any field changed.

        Returns:
            Any: The record, or its rebuilt copy.
        """
        descriptor = self.__shapes.get(type(record))

        if descriptor.frozen:
            changes: dict[str, Any] = {}
            for field in descriptor.fields:
                value = getattr(record, field.name, None)
                morphed = self._morph_field(value, field.chain)
                if morphed is not value:
                    changes[field.name] = morphed
            return dataclasses.replace(record, **changes) if changes else record

        for field in descriptor.fields:
            value = getattr(record, field.name, None)
            morphed = self._morph_field(value, field.chain)
            if morphed is not value:
                setattr(record, field.name, morphed)
        return record

    def _morph_field(self, value: Any, chain: Chain | None) -> Any:
        """Apply a chain to a value.

        Args:
            value (Any): The value of a field, of an item or of a mapping key or value.
            chain (Chain | None): The chain to apply.

        Returns:
            Any: The morphed value. The caller writes it back when it is another object.
        """
        if value is None:
            return value
        if is_record(value):
            return self._morph_struct(value)
        if not chain:
            return value

        ref = ValueRef(value)
        for position, instruction in enumerate(chain):
            match instruction.kind:
                case InstructionKind.DIVE:
                    ref.value = self._dive(ref.value, chain[position + 1:])
                    break
                case InstructionKind.TRANSFORM:
                    instruction.transformer.transform(ref, instruction.params_key)  # type: ignore[union-attr]
                case _:
                    continue
        return ref.value

    def _dive(self, value: Any, chain: Chain) -> Any:
        match category_of(value):
            case Category.SEQUENCE:
                return self._morph_sequence(value, chain)
            case Category.MAPPING:
                return self._morph_mapping(value, chain)
            case Category.NONE:
                return value
        raise InvalidDiveError(kind_name(value))

    def _morph_sequence(self, items: Any, chain: Chain) -> Any:
        """Apply a chain to each item. Tuples are rebuilt when an item changed."""
        if isinstance(items, MutableSequence):
            for index, item in enumerate(items):
                morphed = self._morph_field(item, chain)
                if morphed is not item:
                    items[index] = morphed
            return items

        morphed_items = [self._morph_field(item, chain) for item in items]
        if all(morphed is item for morphed, item in zip(morphed_items, items)):
            return items
        if hasattr(items, "_make"):
            return items._make(morphed_items)
        return type(items)(morphed_items)

    def _morph_mapping(self, mapping: MutableMapping[Any, Any], chain: Chain) -> Any:
        """Apply a chain to each value of a mapping, and to each key when the chain starts
        with a keys instruction holding a keys chain.

        Keys and values are morphed from a snapshot of the entries. With keys, the content of
        the mapping is replaced once all the entries are morphed.
        """
        head = chain[0] if chain else None
        if head is not None and head.kind is InstructionKind.KEYS and head.keys_chain:
            values_chain = chain[1:]
            entries = [
                (
                    self._morph_field(key, head.keys_chain),
                    self._morph_field(value, values_chain),
                )
                for key, value in list(mapping.items())
            ]
            mapping.clear()
            mapping.update(entries)
            return mapping

        for key, value in list(mapping.items()):
            morphed = self._morph_field(value, chain)
            if morphed is not value:
                mapping[key] = morphed
        return mapping


def tagged(tags: str, *, tag_name: str = DEFAULT_TAG, **kwargs: Any) -> Any:
    """Create a dataclass field holding morph tags in its metadata.

    Examples:
        >>> @dataclass
        ... class Model:
        ...     name: str = tagged("trim,lower", default="")
        ...     names: list[str] = tagged("dive,trim", default_factory=list)

    Args:
        tags (str): The tags, e.g. "dive,trim".
        tag_name (str): The metadata key. Defaults to "morph".
        kwargs (Any): Forwarded to dataclasses.field. A given metadata is kept.

    Returns:
        Any: The dataclass field.
    """
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[tag_name] = tags
    return dataclasses.field(metadata=metadata, **kwargs)


@lru_cache(1)
def default_morph() -> Morph:
    """Default morph engine. Allows to register custom transformers used by morph_struct.

    Returns:
        Morph: the engine instance.
    """
    return Morph()


def morph_struct(record: Any) -> None:
    """This function is a shortcut to `default_morph().struct()`."""
    default_morph().struct(record)


def register_transformer(tag: str, transformer: Transformer) -> None:
    """This function is a shortcut to `default_morph().register()`."""
    default_morph().register(tag, transformer)
