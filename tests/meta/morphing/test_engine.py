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
Created: 2025-08-03
Description: Tests for the morph engine.
🦙
"""

__author__ = "Sébastien Gachoud"
__license__ = "MIT"

from collections import namedtuple
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

import pytest

from morphcore.exceptions import (
    InvalidDiveError,
    InvalidParametersError,
    NotAPointerError,
    NotAStructError,
    UnexpectedValueError,
    UnknownTagError,
)
from morphcore.morph import Morph, tagged
from morphcore.transformers import FuncTransformer

Pair = namedtuple("Pair", ["first", "second"])


@pytest.fixture
def morph() -> Morph:
    """Fresh engine."""
    return Morph()


# =============================================================================
# Scalars
# =============================================================================


class TestScalars:
    """Test the transformation of scalar fields."""

    def test_trim_lower(self, morph: Morph):
        """Test chaining string transformations."""

        @dataclass
        class Person:
            """Test"""

            name: str = tagged("trim,lower")

        person = Person(" Bob ")
        morph.struct(person)

        assert person.name == "bob"

    def test_transformations_in_order(self, morph: Morph):
        """Test that the transformations are applied in the order of the tags."""

        @dataclass
        class Model:
            """Test"""

            first: str = tagged("trim,upper,truncate=3")
            second: str = tagged("truncate=3,trim")

        data = Model(" hello ", " hello ")
        morph.struct(data)

        assert data.first == "HEL"
        assert data.second == "he"

    def test_precision(self, morph: Morph):
        """Test limiting the decimal digits of a float."""

        @dataclass
        class Model:
            """Test"""

            number: float = tagged("precision=2")

        data = Model(1.567)
        morph.struct(data)

        assert data.number == 1.56

    def test_numbers(self, morph: Morph):
        """Test the rounding of floats and decimals."""

        @dataclass
        class Model:
            """Test"""

            ceil: float = tagged("ceil", default=1.45)
            floor: float = tagged("floor", default=1.65)
            round: Decimal = tagged("round", default=Decimal("2.5"))

        data = Model()
        morph.struct(data)

        assert data.ceil == 2.0
        assert data.floor == 1.0
        assert data.round == Decimal("3")

    @pytest.mark.parametrize("tags, expected", [("truncate=3", "123"), ("truncate=10", "123456")])
    def test_truncate(self, morph: Morph, tags, expected):
        """Test truncating a string."""

        @dataclass
        class Model:
            """Test"""

            value: str = tagged(tags)

        data = Model("123456")
        morph.struct(data)

        assert data.value == expected

    @pytest.mark.parametrize("tags", ["truncate=-1", "truncate=baba", "truncate", "precision=", "precision=-2"])
    def test_invalid_parameters(self, morph: Morph, tags):
        """Test that invalid parameters are rejected and the record is untouched."""

        @dataclass
        class Model:
            """Test"""

            other: str = tagged("trim", default=" a ")
            value: Any = tagged(tags, default="123456")

        data = Model()
        with pytest.raises(InvalidParametersError):
            morph.struct(data)

        assert data.other == " a "
        assert data.value == "123456"

    def test_unexpected_value(self, morph: Morph):
        """Test that a tag applied to the wrong kind of value is rejected."""

        @dataclass
        class Model:
            """Test"""

            value: Any = tagged("trim")

        with pytest.raises(UnexpectedValueError) as exc_info:
            morph.struct(Model(12))

        assert exc_info.value.kind == "int"
        assert exc_info.value.tag == "trim"

    def test_unknown_tag(self, morph: Morph):
        """Test that an unknown tag is rejected when the record is morphed."""

        @dataclass
        class Model:
            """Test"""

            value: str = tagged("trim, lower")

        with pytest.raises(UnknownTagError) as exc_info:
            morph.struct(Model(" A "))

        assert exc_info.value.tag == " lower"


# =============================================================================
# Fields selection
# =============================================================================


class TestFields:
    """Test which fields are morphed."""

    def test_untagged_record_is_untouched(self, morph: Morph):
        """Test that a record without tags keeps the same values."""

        @dataclass
        class Model:
            """Test"""

            name: str = " name "
            numbers: list[float] = field(default_factory=lambda: [1.567, 2.5])
            mapping: dict[str, str] = field(default_factory=lambda: {" k ": " v "})
            number: float = 1.567

        data = Model()
        values = dict(vars(data))
        morph.struct(data)

        assert vars(data) == values
        assert all(getattr(data, name) is value for name, value in values.items())

    def test_empty_tags(self, morph: Morph):
        """Test that annotations without tags do nothing."""

        @dataclass
        class Model:
            """Test"""

            empty: str = tagged("", default=" a ")
            separator: str = tagged(",", default=" b ")

        data = Model()
        morph.struct(data)

        assert data.empty == " a "
        assert data.separator == " b "

    def test_private_fields_are_skipped(self, morph: Morph):
        """Test that fields starting with an underscore are never morphed."""

        @dataclass
        class Model:
            """Test"""

            _secret: str = tagged("trim", default=" secret ")

        data = Model()
        morph.struct(data)

        assert data._secret == " secret "

    def test_inherited_fields(self, morph: Morph):
        """Test that the tags of the base records apply."""

        @dataclass
        class Base:
            """Test"""

            name: str = tagged("trim", default=" base ")

        @dataclass
        class Child(Base):
            """Test"""

            title: str = tagged("upper", default="child")

        data = Child()
        morph.struct(data)

        assert data.name == "base"
        assert data.title == "CHILD"

    def test_none_values(self, morph: Morph):
        """Test that missing values are left missing for any chain."""

        @dataclass
        class Model:
            """Test"""

            name: str | None = tagged("trim,lower", default=None)
            names: list[str] | None = tagged("dive,trim", default=None)
            mapping: dict[str, str] | None = tagged("dive,keys,trim,exit,trim", default=None)
            items: list[str | None] = tagged("dive,trim", default_factory=lambda: [None, " a "])

        data = Model()
        morph.struct(data)

        assert data.name is None
        assert data.names is None
        assert data.mapping is None
        assert data.items == [None, "a"]

    def test_other_tag_name(self):
        """Test that the engine reads the selected metadata key."""

        @dataclass
        class Model:
            """Test"""

            name: str = tagged("upper", tag_name="change", default="name")
            other: str = tagged("upper", default="other")

        data = Model()
        Morph("change").struct(data)

        assert data.name == "NAME"
        assert data.other == "other"


# =============================================================================
# Records
# =============================================================================


@dataclass
class Inner:
    """Nested record."""

    name: str = tagged("trim", default=" inner ")


@dataclass(frozen=True)
class FrozenInner:
    """Nested immutable record."""

    name: str = tagged("trim", default=" frozen ")
    label: str = field(default="label", init=False)


class TestRecords:
    """Test the recursion into records."""

    def test_nested_record(self, morph: Morph):
        """Test that nested records are morphed without tags."""

        @dataclass
        class Model:
            """Test"""

            inner: Inner = field(default_factory=Inner)

        data = Model()
        inner = data.inner
        morph.struct(data)

        assert data.inner is inner
        assert inner.name == "inner"

    def test_ignored_record(self, morph: Morph):
        """Test that the ignore tag stops the recursion."""

        @dataclass
        class Model:
            """Test"""

            inner: Inner = tagged("-", default_factory=Inner)

        data = Model()
        morph.struct(data)

        assert data.inner.name == " inner "

    def test_deeply_nested_records(self, morph: Morph):
        """Test the recursion over several levels."""

        @dataclass
        class Middle:
            """Test"""

            inner: Inner = field(default_factory=Inner)
            inners: list[Inner] = tagged("dive", default_factory=lambda: [Inner(), Inner(" b ")])

        @dataclass
        class Model:
            """Test"""

            middle: Middle = field(default_factory=Middle)

        data = Model()
        morph.struct(data)

        assert data.middle.inner.name == "inner"
        assert [i.name for i in data.middle.inners] == ["inner", "b"]

    def test_frozen_nested_record(self, morph: Morph):
        """Test that a nested frozen record is rebuilt with its new values."""

        @dataclass
        class Model:
            """Test"""

            inner: FrozenInner = field(default_factory=FrozenInner)
            inners: list[FrozenInner] = tagged("dive", default_factory=lambda: [FrozenInner()])

        data = Model()
        original = data.inner
        morph.struct(data)

        assert data.inner is not original
        assert data.inner.name == "frozen"
        assert data.inner.label == "label"
        assert original.name == " frozen "
        assert data.inners[0].name == "frozen"

    def test_unchanged_frozen_record_is_kept(self, morph: Morph):
        """Test that a frozen record is not rebuilt when nothing changed."""

        @dataclass
        class Model:
            """Test"""

            inner: FrozenInner = field(default_factory=lambda: FrozenInner("frozen"))

        data = Model()
        original = data.inner
        morph.struct(data)

        assert data.inner is original


# =============================================================================
# Sequences
# =============================================================================


class TestSequences:
    """Test diving into sequences."""

    def test_dive_list(self, morph: Morph):
        """Test that the rest of the chain applies to each item."""

        @dataclass
        class Model:
            """Test"""

            tags: list[str] = tagged("dive,trim,lower")

        tags = [" A ", " b "]
        data = Model(tags)
        morph.struct(data)

        assert data.tags == ["a", "b"]
        assert data.tags is tags

    def test_nested_dives(self, morph: Morph):
        """Test diving into sequences of sequences."""

        @dataclass
        class Model:
            """Test"""

            matrix: list[list[float]] = tagged("dive,dive,round")

        data = Model([[1.4, 1.6], [], [-2.5]])
        morph.struct(data)

        assert data.matrix == [[1.0, 2.0], [], [-3.0]]

    def test_tuples_are_rebuilt(self, morph: Morph):
        """Test that immutable sequences are replaced by transformed copies."""

        @dataclass
        class Model:
            """Test"""

            names: tuple[str, ...] = tagged("dive,trim")
            pair: Pair = tagged("dive,upper")

        data = Model((" a ", " b "), Pair("x", "y"))
        morph.struct(data)

        assert data.names == ("a", "b")
        assert isinstance(data.pair, Pair)
        assert data.pair == Pair("X", "Y")

    def test_unchanged_tuple_is_kept(self, morph: Morph):
        """Test that a tuple is not rebuilt when no item changed."""

        @dataclass
        class Model:
            """Test"""

            names: tuple[str, ...] = tagged("dive,trim")

        names = ("a", "b")
        data = Model(names)
        morph.struct(data)

        assert data.names is names

    def test_dive_fails_fast(self, morph: Morph):
        """Test that the items before the failing one keep their new values."""

        @dataclass
        class Model:
            """Test"""

            items: list[Any] = tagged("dive,trim")

        data = Model([" a ", 1, " b "])
        with pytest.raises(UnexpectedValueError):
            morph.struct(data)

        assert data.items == ["a", 1, " b "]

    def test_fields_before_the_error_keep_their_values(self, morph: Morph):
        """Test that the fields morphed before an error are not rolled back."""

        @dataclass
        class Model:
            """Test"""

            name: str = tagged("trim", default=" name ")
            value: Any = tagged("lower", default=12)
            last: str = tagged("trim", default=" last ")

        data = Model()
        with pytest.raises(UnexpectedValueError):
            morph.struct(data)

        assert data.name == "name"
        assert data.last == " last "

    @pytest.mark.parametrize("value, kind", [("string", "string"), (12, "int"), (1.5, "float")])
    def test_invalid_dive(self, morph: Morph, value, kind):
        """Test that diving into a scalar fails with its kind."""

        @dataclass
        class Model:
            """Test"""

            value: Any = tagged("dive,trim")

        with pytest.raises(InvalidDiveError) as exc_info:
            morph.struct(Model(value))

        assert exc_info.value.kind == kind

    def test_dive_tag_on_record(self, morph: Morph):
        """Test that a record is recursed into whatever its tags."""

        @dataclass
        class Model:
            """Test"""

            value: Any = tagged("dive,trim")

        data = Model(Inner())
        morph.struct(data)

        assert data.value.name == "inner"

    def test_dive_without_more_tags(self, morph: Morph):
        """Test that a lone dive leaves scalar items untouched."""

        @dataclass
        class Model:
            """Test"""

            names: list[str] = tagged("dive")

        data = Model([" a "])
        morph.struct(data)

        assert data.names == [" a "]


# =============================================================================
# Mappings
# =============================================================================


class TestMappings:
    """Test diving into mappings."""

    def test_keys_and_values(self, morph: Morph):
        """Test transforming both the keys and the values."""

        @dataclass
        class Model:
            """Test"""

            mapping: dict[str, str] = tagged("dive,keys,trim,exit,trim")

        mapping = {" K ": " V "}
        data = Model(mapping)
        morph.struct(data)

        assert data.mapping == {"K": "V"}
        assert data.mapping is mapping

    @pytest.mark.parametrize(
        "tags, expected",
        [
            ("dive,trim", {" k ": "v"}),
            ("dive,keys", {" k ": " v "}),
            ("dive,keys,exit", {" k ": " v "}),
            ("dive,keys,trim", {"k": " v "}),
            ("dive,keys,trim,exit", {"k": " v "}),
            ("dive,keys,exit,trim", {" k ": "v"}),
            ("dive,keys,trim,upper,exit,trim", {"K": "v"}),
        ],
    )
    def test_keys_chain_variants(self, morph: Morph, tags, expected):
        """Test the placements of keys and exit."""

        @dataclass
        class Model:
            """Test"""

            mapping: dict[str, str] = tagged(tags)

        data = Model({" k ": " v "})
        morph.struct(data)

        assert data.mapping == expected

    def test_every_entry_is_transformed(self, morph: Morph):
        """Test that each key maps to its transformed value under its transformed key."""

        @dataclass
        class Model:
            """Test"""

            mapping: dict[str, str] = tagged("dive,keys,trim,lower,exit,trim,upper")

        original = {f" Key{i} ": f" value{i} " for i in range(50)}
        data = Model(dict(original))
        morph.struct(data)

        assert len(data.mapping) == len(original)
        for key, value in original.items():
            assert data.mapping[key.strip().lower()] == value.strip().upper()

    def test_renamed_keys_are_not_lost(self, morph: Morph):
        """Test that renaming a key to another existing key does not lose entries."""

        @FuncTransformer
        def shift(ref, _params_key):
            ref.value = chr(ord(ref.value) + 1)

        morph.register("shift", shift)

        @dataclass
        class Model:
            """Test"""

            mapping: dict[str, int] = tagged("dive,keys,shift,exit")

        data = Model({"a": 1, "b": 2, "c": 3})
        morph.struct(data)

        assert data.mapping == {"b": 1, "c": 2, "d": 3}

    def test_error_leaves_the_mapping_untouched(self, morph: Morph):
        """Test that an error while transforming keys keeps the original entries."""

        @dataclass
        class Model:
            """Test"""

            mapping: dict[Any, str] = tagged("dive,keys,trim,exit,trim")

        data = Model({" a ": " a ", 1: " b "})
        with pytest.raises(UnexpectedValueError):
            morph.struct(data)

        assert data.mapping == {" a ": " a ", 1: " b "}

    def test_records_in_mappings(self, morph: Morph):
        """Test that records held by a mapping are morphed."""

        @dataclass
        class Model:
            """Test"""

            inners: dict[str, Inner] = tagged("dive,keys,upper,exit")
            frozen: dict[str, FrozenInner] = tagged("dive")

        data = Model({"a": Inner()}, {"b": FrozenInner()})
        morph.struct(data)

        assert data.inners == {"A": Inner("inner")}
        assert data.frozen["b"].name == "frozen"

    def test_mixed_values(self, morph: Morph):
        """Test a mapping holding both records and scalars."""

        @dataclass
        class Model:
            """Test"""

            mapping: dict[str, Any] = tagged("dive,ceil")

        data = Model({"inner": Inner(), "number": 1.2, "missing": None})
        morph.struct(data)

        assert data.mapping == {"inner": Inner("inner"), "number": 2.0, "missing": None}

    def test_dive_into_mappings_of_sequences(self, morph: Morph):
        """Test diving into the sequences held by a mapping."""

        @dataclass
        class Model:
            """Test"""

            mapping: dict[str, list[str]] = tagged("dive,keys,upper,exit,dive,trim")

        data = Model({"a": [" x ", " y "]})
        morph.struct(data)

        assert data.mapping == {"A": ["x", "y"]}


# =============================================================================
# Entry point
# =============================================================================


class TestEntryPoint:
    """Test the values accepted by the engine."""

    def test_none(self, morph: Morph):
        """Test that morphing nothing is rejected."""
        with pytest.raises(NotAPointerError):
            morph.struct(None)

    @pytest.mark.parametrize("value, kind", [(12, "int"), ("record", "string"), ([], "sequence"), ({}, "map")])
    def test_not_a_record(self, morph: Morph, value, kind):
        """Test that values other than records are rejected with their kind."""
        with pytest.raises(NotAStructError) as exc_info:
            morph.struct(value)

        assert exc_info.value.kind == kind
        assert kind in str(exc_info.value)

    def test_record_type(self, morph: Morph):
        """Test that a record type is not a record."""
        with pytest.raises(NotAStructError):
            morph.struct(Inner)

    def test_frozen_record(self, morph: Morph):
        """Test that a frozen record cannot be morphed in place."""
        record = FrozenInner()
        with pytest.raises(NotAPointerError, match="FrozenInner"):
            morph.struct(record)

        assert record.name == " frozen "


# =============================================================================
# Compilation
# =============================================================================


class TestCompilation:
    """Test that records are morphed with compiled chains."""

    def test_compiled_once(self, morph: Morph):
        """Test that the parameters are cached once per shape."""
        calls = []
        counting = FuncTransformer(lambda ref, key: None, tag="counting")
        counting.set_cacher(lambda params, key: calls.append(params))
        morph.register("counting", counting)

        @dataclass
        class Model:
            """Test"""

            first: str = tagged("counting=1", default="")
            second: list[str] = tagged("dive,counting=2", default_factory=list)

        for _ in range(3):
            morph.struct(Model())

        assert calls == ["1", "2"]
        assert morph.is_cached(Model)

        morph.clear_cache()
        morph.struct(Model())

        assert calls == ["1", "2", "1", "2"]

    def test_registration_during_compilation(self, morph: Morph):
        """Test that a shape compiled while a tag is registered again is not kept."""
        new = FuncTransformer(lambda ref, key: setattr(ref, "value", "new"), tag="swap")
        old = FuncTransformer(lambda ref, key: setattr(ref, "value", "old"), tag="swap")
        old.set_cacher(lambda params, key: morph.register("swap", new))
        morph.register("swap", old)

        @dataclass
        class Model:
            """Test"""

            value: str = tagged("swap", default="")

        data = Model()
        morph.struct(data)

        assert data.value == "old"
        assert not morph.is_cached(Model)

        data = Model()
        morph.struct(data)

        assert data.value == "new"
        assert morph.is_cached(Model)

    def test_failed_compilation_is_retried(self, morph: Morph):
        """Test that registering a missing tag lets the same shape be morphed."""

        @dataclass
        class Model:
            """Test"""

            name: str = tagged("shout", default="name")

        with pytest.raises(UnknownTagError):
            morph.struct(Model())
        assert not morph.is_cached(Model)

        @FuncTransformer
        def shout(ref, _params_key):
            ref.value = ref.value.upper() + "!"

        morph.register("shout", shout)
        data = Model()
        morph.struct(data)

        assert data.name == "NAME!"

    def test_override_applies_to_cached_shapes(self, morph: Morph):
        """Test that overriding a tag applies to shapes compiled before."""

        @dataclass
        class Model:
            """Test"""

            name: str = tagged("trim", default=" name ")

        morph.struct(Model())
        assert morph.is_cached(Model)

        morph.register("trim", FuncTransformer(lambda ref, key: setattr(ref, "value", "trimmed")))
        data = Model()
        morph.struct(data)

        assert data.name == "trimmed"

    def test_parameters_of_keys_and_values(self, morph: Morph):
        """Test that keys and values of one field keep their own parameters."""

        @dataclass
        class Model:
            """Test"""

            mapping: dict[str, str] = tagged("dive,keys,truncate=1,exit,truncate=3")

        data = Model({"key": "value"})
        morph.struct(data)

        assert data.mapping == {"k": "val"}

    def test_concurrent_morphs(self, morph: Morph):
        """Test that one engine morphs records from several threads."""

        @dataclass
        class Model:
            """Test"""

            name: str = tagged("trim,lower")
            names: list[str] = tagged("dive,trim,upper")
            mapping: dict[str, float] = tagged("dive,keys,trim,exit,precision=1")

        def run(i: int) -> Model:
            data = Model(f" Name{i} ", [f" a{i} "], {f" k{i} ": 1.29})
            morph.struct(data)
            return data

        with ThreadPoolExecutor(max_workers=8) as executor:
            results = list(executor.map(run, range(200)))

        for i, data in enumerate(results):
            assert data.name == f"name{i}"
            assert data.names == [f"A{i}"]
            assert data.mapping == {f"k{i}": 1.2}
