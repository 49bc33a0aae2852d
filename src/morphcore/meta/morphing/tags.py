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
Description: Tag names and grammar of the morph annotations.
            An annotation is a list of tags separated by TAG_SEPARATOR. A tag is either a bare
            name ("trim") or a name with parameters ("truncate=5").
🦙
"""

__author__ = "Sébastien Gachoud"
__license__ = "MIT"

from typing import Final

# transformational tags
TAG_TRIM: Final = "trim"
TAG_LOWER: Final = "lower"
TAG_UPPER: Final = "upper"
TAG_TRUNCATE: Final = "truncate"
TAG_CEIL: Final = "ceil"
TAG_FLOOR: Final = "floor"
TAG_ROUND: Final = "round"
TAG_PRECISION: Final = "precision"

# navigational tags
TAG_DIVE: Final = "dive"
"""Enters a sequence or a mapping. The rest of the chain is applied to each item."""
TAG_KEYS: Final = "keys"
"""Right after a dive into a mapping, the following tags apply to the keys until TAG_EXIT."""
TAG_EXIT: Final = "exit"
"""Ends the keys chain. The following tags apply to the mapping values."""
TAG_IGNORE: Final = "-"
"""As the whole annotation, the field is skipped, including the recursion into records."""

NAVIGATIONAL_TAGS: Final = frozenset((TAG_DIVE, TAG_KEYS, TAG_EXIT, TAG_IGNORE))

DEFAULT_TAG: Final = "morph"
"""Metadata key read on dataclass fields unless another one is selected."""
TAG_SEPARATOR: Final = ","
PARAMS_SIGN: Final = "="


def split_tags(raw: str) -> list[str]:
    """Split a raw annotation into its tags. Empty tags are dropped.

    Args:
        raw (str): The raw annotation, e.g. "dive,keys,trim,exit,trim".

    Returns:
        list[str]: The tags in order of appearance.
    """
    return [tag for tag in raw.split(TAG_SEPARATOR) if tag]


def split_params(tag: str) -> tuple[str, str | None]:
    """Split a tag into its name and its parameters.

    The parameters start after the first PARAMS_SIGN. A sign in first position is part of
    the name.

    Args:
        tag (str): A single tag, e.g. "truncate=5".

    Returns:
        tuple[str, str | None]: The name and the raw parameters, None if there are none.
    """
    sign_index = tag.find(PARAMS_SIGN)
    if sign_index > 0:
        return tag[:sign_index], tag[sign_index + 1:]
    return tag, None
