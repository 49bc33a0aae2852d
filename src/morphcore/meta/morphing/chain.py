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
Description: Compilation of a raw annotation into a chain of instructions. Each tag is
            resolved to a transformer or to a navigational instruction, and the
            transformers parameters are cached while compiling. The tags following "keys"
            up to "exit" are compiled into a separate chain applied to mapping keys.
🦙
"""

from __future__ import annotations

__author__ = "Sébastien Gachoud"
__license__ = "MIT"

from dataclasses import dataclass, replace
from enum import Enum, auto
from typing import Callable

from .errors import UnknownTagError
from .parameters import ParamsKey
from .tags import NAVIGATIONAL_TAGS, TAG_DIVE, TAG_EXIT, TAG_KEYS, split_params, split_tags
from .transformers import Transformer

type Chain = tuple[Instruction, ...]
type Resolver = Callable[[str], Transformer | None]


class InstructionKind(Enum):
    """What the traversal does with an instruction."""

    TRANSFORM = auto()
    DIVE = auto()
    KEYS = auto()
    SKIP = auto()


@dataclass(frozen=True, slots=True)
class Instruction:
    """A compiled tag. Shared read-only by every record of the shape it was compiled for."""

    tag: str
    kind: InstructionKind
    params: str | None
    params_key: ParamsKey
    transformer: Transformer | None = None
    keys_chain: Chain | None = None

    def __str__(self) -> str:
        text = self.tag if self.params is None else f"{self.tag}={self.params}"
        if self.keys_chain:
            text += "(" + ",".join(map(str, self.keys_chain)) + ")"
        return text


def _instruction_kind(tag: str) -> InstructionKind:
    if tag == TAG_DIVE:
        return InstructionKind.DIVE
    if tag == TAG_KEYS:
        return InstructionKind.KEYS
    if tag in NAVIGATIONAL_TAGS:
        return InstructionKind.SKIP
    return InstructionKind.TRANSFORM


def compile_tag(raw_tag: str, params_key: ParamsKey, resolve: Resolver) -> Instruction:
    """Compile a single tag. The parameters of a transformer are cached right away.

    Args:
        raw_tag (str): The tag, with its parameters if any. E.g. "truncate=5".
        params_key (ParamsKey): The key to cache the parameters with.
        resolve (Resolver): Gives the transformer registered for a tag name, or None.

    Raises:
        UnknownTagError: Raised when the tag is neither registered nor navigational.
        InvalidParametersError: Raised by the transformer when the parameters are invalid.

    Returns:
        Instruction: The compiled instruction.
    """
    tag, params = split_params(raw_tag)
    kind = _instruction_kind(tag)
    transformer = None
    if kind is InstructionKind.TRANSFORM:
        transformer = resolve(tag)
        if transformer is None:
            raise UnknownTagError(tag)
        transformer.cache(params, params_key)
    return Instruction(tag, kind, params, params_key, transformer)


def compile_chain(
    raw: str, shape: type, field_index: int, resolve: Resolver
) -> Chain | None:
    """Compile a raw annotation into a chain of instructions.

    Each tag gets its own parameters key built from the shape, the field index and the tag
    position in the annotation.

    Examples:
        "trim,lower"                -> (trim, lower)
        "dive,keys,trim,exit,upper" -> (dive, keys(trim), upper)
        "dive,keys"                 -> (dive, keys)  keys are visited but not transformed.

    Args:
        raw (str): The raw annotation.
        shape (type): The record type owning the field.
        field_index (int): The index of the field in the record type.
        resolve (Resolver): Gives the transformer registered for a tag name, or None.

    Raises:
        UnknownTagError: Raised when a tag is neither registered nor navigational.
        InvalidParametersError: Raised by a transformer when its parameters are invalid.

    Returns:
        Chain | None: The chain, None when the annotation holds no tag.
    """
    raw_tags = split_tags(raw)
    if not raw_tags:
        return None

    def compile_at(position: int) -> Instruction:
        return compile_tag(raw_tags[position], ParamsKey(shape, field_index, position), resolve)

    chain: list[Instruction] = []
    position = 0
    while position < len(raw_tags):
        instruction = compile_at(position)
        position += 1

        if instruction.kind is InstructionKind.KEYS and position < len(raw_tags):
            keys_chain: list[Instruction] = []
            while position < len(raw_tags) and raw_tags[position] != TAG_EXIT:
                keys_chain.append(compile_at(position))
                position += 1
            # Skip the exit tag, the chain goes on with the values.
            position += 1
            instruction = replace(instruction, keys_chain=tuple(keys_chain) or None)

        chain.append(instruction)

    return tuple(chain)
