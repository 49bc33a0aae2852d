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
Description: Registry of the transformers associated to tag names.
🦙
"""

__author__ = "Sébastien Gachoud"
__license__ = "MIT"

import logging
from collections.abc import Mapping

from .errors import InvalidTagNameError, InvalidTransformerError, ReservedTagOverrideError
from .parameters import ReadWriteLock
from .tags import NAVIGATIONAL_TAGS
from .transformers import Transformer, is_transformer

logger = logging.getLogger(__name__)


class TransformerRegistry:
    """Tag name to transformer mapping. Navigational tags are reserved."""

    __transformers: dict[str, Transformer]

    def __init__(
        self,
        lock: ReadWriteLock | None = None,
        transformers: Mapping[str, Transformer] | None = None,
    ) -> None:
        self.__lock = lock or ReadWriteLock()
        self.__transformers = dict(transformers or {})

    def register(self, tag: str, transformer: Transformer) -> None:
        """Register a transformer for a tag. Replaces any transformer registered before.

        Args:
            tag (str): The tag name. Surrounding whitespaces are ignored.
            transformer (Transformer): The transformer to associate to the tag.

        Raises:
            InvalidTagNameError: Raised when the tag is blank.
            ReservedTagOverrideError: Raised when the tag is a navigational tag.
            InvalidTransformerError: Raised when the transformer is missing or does not
                provide cache and transform.
        """
        name = (tag or "").strip()
        if not name:
            raise InvalidTagNameError(tag)
        if name in NAVIGATIONAL_TAGS:
            raise ReservedTagOverrideError(name)
        if transformer is None or not is_transformer(transformer):
            raise InvalidTransformerError(name)

        with self.__lock.write():
            self.__transformers[name] = transformer
        logger.debug("Registered transformer %r for tag '%s'.", transformer, name)

    def get(self, tag: str) -> Transformer | None:
        """Get the transformer of a tag, None if the tag is not registered."""
        with self.__lock.read():
            return self.__transformers.get(tag)

    def __contains__(self, tag: str) -> bool:
        with self.__lock.read():
            return tag in self.__transformers

    def tags(self) -> list[str]:
        """Get all registered tags for debugging/introspection."""
        with self.__lock.read():
            return list(self.__transformers)
