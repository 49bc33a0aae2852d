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
Description: Cache of the shape descriptors. A shape descriptor lists the morphable fields
            of a record type with their compiled chains. It is built the first time a record
            of that type is morphed and reused afterwards.
🦙
"""

from __future__ import annotations

__author__ = "Sébastien Gachoud"
__license__ = "MIT"

import dataclasses
import logging
from dataclasses import dataclass

from .chain import Chain, Resolver, compile_chain
from .parameters import ReadWriteLock
from .tags import DEFAULT_TAG, TAG_IGNORE

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class FieldDescriptor:
    """A morphable field: its index among the dataclass fields, its name and its chain."""

    index: int
    name: str
    chain: Chain | None = None


@dataclass(frozen=True, slots=True)
class ShapeDescriptor:
    """The morphable fields of a record type, in declaration order."""

    shape: type
    fields: tuple[FieldDescriptor, ...]
    frozen: bool = False


def is_frozen(shape: type) -> bool:
    """Check if a dataclass is frozen."""
    params = getattr(shape, "__dataclass_params__", None)
    return bool(params and params.frozen)


class ShapeCache:
    """Shape descriptors keyed by record type.

    Two threads missing the same shape at the same time may both build its descriptor, the
    last one stored wins. Building is pure and gives equal descriptors, so either is fine.
    A build that fails is not stored and is retried on the next lookup. A build overlapping
    a clear, or a change of tag name, is returned to its caller but not stored.
    """

    __shapes: dict[type, ShapeDescriptor]

    def __init__(
        self,
        resolve: Resolver,
        tag_name: str = DEFAULT_TAG,
        lock: ReadWriteLock | None = None,
    ) -> None:
        self.__resolve = resolve
        self.__lock = lock or ReadWriteLock()
        self.__shapes = {}
        self.__tag_name = tag_name
        # Bumped on each clear.
        self.__generation = 0

    @property
    def tag_name(self) -> str:
        """The metadata key the annotations are read from."""
        with self.__lock.read():
            return self.__tag_name

    @tag_name.setter
    def tag_name(self, tag_name: str) -> None:
        """Select the metadata key. The cached descriptors are cleared."""
        with self.__lock.write():
            self.__tag_name = tag_name
            self.__clear()

    def get(self, shape: type) -> ShapeDescriptor:
        """Get the descriptor of a record type, building it on the first request.

        Args:
            shape (type): The record type.

        Raises:
            UnknownTagError: Raised when a field annotation holds an unknown tag.
            InvalidParametersError: Raised when a field annotation holds invalid parameters.

        Returns:
            ShapeDescriptor: The descriptor.
        """
        with self.__lock.read():
            descriptor = self.__shapes.get(shape)
            generation = self.__generation
            tag_name = self.__tag_name
        if descriptor is not None:
            return descriptor

        # Built outside of the lock: compiling calls the transformers.
        descriptor = self.build(shape, tag_name)
        with self.__lock.write():
            if generation == self.__generation:
                self.__shapes[shape] = descriptor
        return descriptor

    def build(self, shape: type, tag_name: str | None = None) -> ShapeDescriptor:
        """Build the descriptor of a record type without caching it.

        Private fields, fields annotated with the ignore tag and, for frozen records, fields
        that cannot be passed to the constructor are left out.

        Args:
            shape (type): The record type.
            tag_name (str | None): The metadata key to read. Defaults to the current one.

        Returns:
            ShapeDescriptor: The descriptor.
        """
        if tag_name is None:
            tag_name = self.tag_name
        frozen = is_frozen(shape)
        descriptors: list[FieldDescriptor] = []
        for index, field in enumerate(dataclasses.fields(shape)):
            if field.name.startswith("_"):
                continue
            # Frozen records are rebuilt with dataclasses.replace.
            if frozen and not field.init:
                continue
            raw = field.metadata.get(tag_name, "")
            if raw == TAG_IGNORE:
                continue
            chain = compile_chain(raw, shape, index, self.__resolve) if raw else None
            descriptors.append(FieldDescriptor(index, field.name, chain))

        logger.debug(
            "Built shape descriptor for %s with %d field(s) using tag '%s'.",
            shape.__qualname__,
            len(descriptors),
            tag_name,
        )
        return ShapeDescriptor(shape, tuple(descriptors), frozen)

    def clear(self) -> None:
        """Remove all the cached descriptors."""
        with self.__lock.write():
            self.__clear()
        logger.debug("Cleared shape descriptors cache.")

    def __clear(self) -> None:
        # Write lock held by the caller.
        self.__shapes.clear()
        self.__generation += 1

    def __contains__(self, shape: type) -> bool:
        with self.__lock.read():
            return shape in self.__shapes

    def __len__(self) -> int:
        with self.__lock.read():
            return len(self.__shapes)
