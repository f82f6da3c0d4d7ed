# Copyright 2025 Hathor Labs
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#    http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

from collections import deque, namedtuple
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum, IntEnum
from typing import Any, NamedTuple

import pytest
from pydantic import AnyUrl

from bonjson import (
    Codable,
    DataCorruptedError,
    InvalidValueError,
    KeyNotFoundError,
    TypeMismatchError,
    decode,
    encode,
)
from bonjson.value import ArrayValue, BigNumberValue, ObjectValue, SignedIntegerValue, StringValue


class Color(Enum):
    RED = 'red'
    GREEN = 'green'


class Level(IntEnum):
    LOW = 1
    HIGH = 2


class Span(NamedTuple):
    start: int
    end: int = 0


@dataclass
class Person:
    name: str
    age: int
    nickname: str | None
    tags: list[str] = field(default_factory=list)


@dataclass
class Team:
    people: list[Person]


class Point(Codable):
    def __init__(self, x: int, y: int) -> None:
        self.x = x
        self.y = y

    def encode_to(self, encoder):
        keyed = encoder.keyed_container()
        keyed.encode_int(self.x, 'x')
        keyed.encode_int(self.y, 'y')

    @classmethod
    def decode_from(cls, decoder):
        keyed = decoder.keyed_container()
        return cls(keyed.decode_int('x'), keyed.decode_int('y'))


def test_null_and_bool() -> None:
    assert encode(None).hex() == '00'
    assert encode(True).hex() == '02'
    assert decode(None, b'\x00') is None
    assert decode(bool, b'\x01') is False
    with pytest.raises(TypeMismatchError):
        decode(None, encode(1))
    with pytest.raises(TypeMismatchError):
        decode(bool, encode(1))


def test_optional() -> None:
    assert decode(int | None, b'\x00') is None
    assert decode(int | None, encode(5)) == 5
    assert encode(None, int | None).hex() == '00'


def test_enum() -> None:
    data = encode(Color.RED)
    assert data.hex() == '0703726564'
    assert decode(Color, data) is Color.RED
    assert decode(Level, encode(Level.HIGH)) is Level.HIGH
    assert encode(Level.LOW).hex() == '81'


def test_enum_invalid_value() -> None:
    with pytest.raises(DataCorruptedError) as exc_info:
        decode(Color, encode('blue'))
    assert exc_info.value.debug_description == "Invalid Color value: 'blue'"


def test_enum_wrong_member_type() -> None:
    with pytest.raises(InvalidValueError):
        encode(Level.LOW, Color)


def test_dict_int_keys() -> None:
    data = encode({1: 'a', 2: 'b'})
    assert decode(dict[str, str], data) == {'1': 'a', '2': 'b'}
    assert decode(dict[int, str], data) == {1: 'a', 2: 'b'}


def test_dict_int_keys_only_canonical_names() -> None:
    data = encode({'1': 'a', ' 1': 'b', '1_000': 'c', '+2': 'd', '01': 'e', '-0': 'f', '\u0663': 'g'})
    assert decode(dict[int, str], data) == {1: 'a'}
    assert decode(dict[int, str], encode({'-12': 'x', '0': 'y'})) == {-12: 'x', 0: 'y'}


def test_dict_enum_keys() -> None:
    data = encode({Color.RED: 1})
    assert data.hex() == '0c0703726564810d'
    assert decode(dict[Color, int], data) == {Color.RED: 1}
    # names that are not members are skipped
    assert decode(dict[Color, int], encode({'red': 1, 'blue': 2})) == {Color.RED: 1}


def test_dict_mixed_keys() -> None:
    with pytest.raises(InvalidValueError):
        encode({1: 'a', 'b': 2})
    with pytest.raises(InvalidValueError):
        encode({'a': 1}, dict[int, int])


def test_namedtuple() -> None:
    data = encode(Span(1, 2))
    assert decode(dict, data) == {'start': 1, 'end': 2}
    assert decode(Span, data) == Span(1, 2)
    assert decode(Span, encode({'start': 3})) == Span(3, 0)
    with pytest.raises(KeyNotFoundError) as exc_info:
        decode(Span, encode({'end': 3}))
    assert exc_info.value.path == ['start']


def test_untyped_namedtuple() -> None:
    Raw = namedtuple('Raw', 'a b')
    data = encode(Raw(1, 'x'))
    assert decode(dict, data) == {'a': 1, 'b': 'x'}
    assert decode(Raw, data) == Raw(1, 'x')


def test_tuples() -> None:
    assert decode(tuple[int, str], encode((1, 'a'))) == (1, 'a')
    assert decode(tuple[int, ...], encode([1, 2, 3])) == (1, 2, 3)
    assert decode(tuple, encode([1, 'a'])) == (1, 'a')


def test_fixed_tuple_count_mismatch() -> None:
    with pytest.raises(DataCorruptedError) as exc_info:
        decode(tuple[int, str], encode([1]))
    assert exc_info.value.debug_description == 'Expected an array of 2 elements but found 1'
    with pytest.raises(InvalidValueError):
        encode((1,), tuple[int, str])


def test_collections() -> None:
    data = encode([3, 1, 2])
    assert decode(list[int], data) == [3, 1, 2]
    assert decode(deque[int], data) == deque([3, 1, 2])
    assert decode(set[int], data) == {1, 2, 3}
    assert decode(frozenset[int], data) == frozenset({1, 2, 3})
    assert decode(list[str], encode(frozenset({'a'}))) == ['a']
    with pytest.raises(TypeMismatchError):
        decode(list[int], encode({'a': 1}))


def test_collection_member_error_path() -> None:
    with pytest.raises(TypeMismatchError) as exc_info:
        decode(list[int], encode([1, 'two']))
    assert exc_info.value.path == [1]


def test_url() -> None:
    url = AnyUrl('https://example.com/a')
    data = encode(url)
    assert decode(str, data) == 'https://example.com/a'
    assert str(decode(AnyUrl, data)) == 'https://example.com/a'


def test_invalid_url() -> None:
    with pytest.raises(DataCorruptedError) as exc_info:
        decode(dict[str, AnyUrl], encode({'home': 'not a url'}))
    assert exc_info.value.path == ['home']


def test_generic_values_keep_duplicates() -> None:
    value = ObjectValue((('a', SignedIntegerValue(1)), ('a', SignedIntegerValue(2))))
    data = encode(value)
    assert data.hex() == '0c07016181070161820d'
    assert decode(ObjectValue, data) == value
    # typed mappings only see the first pair of a name
    assert decode(dict[str, int], data) == {'a': 1}


def test_generic_value_mismatch() -> None:
    assert decode(ArrayValue, encode(['x'])) == ArrayValue((StringValue('x'),))
    with pytest.raises(TypeMismatchError):
        decode(ArrayValue, encode({'a': 1}))


def test_big_numbers() -> None:
    assert encode(BigNumberValue(15, -1, True)).hex() == '06017f0f'
    assert encode(Decimal('-1.5')).hex() == '06017f0f'
    assert decode(Decimal, bytes.fromhex('06017f0f')) == Decimal('-1.5')
    with pytest.raises(InvalidValueError):
        encode(Decimal('NaN'))


def test_codable() -> None:
    data = encode(Point(1, 2))
    assert decode(dict, data) == {'x': 1, 'y': 2}
    point = decode(Point, data)
    assert (point.x, point.y) == (1, 2)


def test_dataclass_defaults_and_optionals() -> None:
    person = Person('Ana', 30, None, ['a'])
    data = encode(person)
    assert decode(dict, data) == {'name': 'Ana', 'age': 30, 'nickname': None, 'tags': ['a']}
    assert decode(Person, data) == person
    assert decode(Person, encode({'name': 'Bo', 'age': 5})) == Person('Bo', 5, None, [])


def test_dataclass_missing_field_path() -> None:
    with pytest.raises(KeyNotFoundError) as exc_info:
        decode(Team, encode({'people': [{'name': 'Ana'}]}))
    assert exc_info.value.path == ['people', 0, 'age']


def test_dataclass_wrong_instance() -> None:
    with pytest.raises(InvalidValueError):
        encode(Span(1, 2), Person)


def test_any() -> None:
    value: Any = {'a': [1, 2.5, None, True, 'x', b'\x01']}
    assert decode(Any, encode(value)) == {'a': [1, 2.5, None, True, 'x', 'AQ==']}
