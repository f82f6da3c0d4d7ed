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

import pytest

from bonjson import BonjsonDecoder, KeyNotFoundError, TypeMismatchError, ValueNotFoundError, encode
from bonjson.coding_key import IndexKey, IntKeyType, StrKey
from bonjson.decoder import ValueDecoder
from bonjson.types import INT_WIDTHS, UInt8
from bonjson.value import ArrayValue, SignedIntegerValue, StringValue


def _decoder(value) -> ValueDecoder:
    config = BonjsonDecoder(user_info={'who': 'test'})
    return ValueDecoder(config, config.decode_value(encode(value)), ())


def test_keyed_view() -> None:
    keyed = _decoder({'name': 'Ana', 'age': 30, 'nick': None, 'tags': ['a']}).keyed_container()
    assert keyed.all_keys == ['name', 'age', 'nick', 'tags']
    assert keyed.contains('age')
    assert not keyed.contains('missing')
    assert keyed.decode_str('name') == 'Ana'
    assert keyed.decode_int('age') == 30
    assert keyed.decode_int('age', width=INT_WIDTHS[UInt8]) == 30
    assert keyed.decode_nil('nick')
    assert not keyed.decode_nil('name')
    assert keyed.decode(list[str], 'tags') == ['a']
    assert keyed.decode_if_present(int, 'nick') is None
    assert keyed.decode_if_present(int, 'missing') is None
    assert keyed.decode_if_present(int, 'age') == 30


def test_keyed_view_missing_key() -> None:
    keyed = _decoder({'name': 'Ana'}).keyed_container()
    with pytest.raises(KeyNotFoundError) as exc_info:
        keyed.decode_int('age')
    assert exc_info.value.key == StrKey('age')
    assert exc_info.value.path == ['age']
    assert exc_info.value.debug_description == "No value associated with key 'age'"


def test_keyed_view_duplicated_names() -> None:
    decoder = ValueDecoder(BonjsonDecoder(), BonjsonDecoder().decode_value(bytes.fromhex(
        '0c 070161 81 070162 82 070161 83 0d'.replace(' ', ''),
    )), ())
    keyed = decoder.keyed_container()
    assert keyed.all_keys == ['a', 'b']
    assert keyed.decode_int('a') == 1


def test_keys_as_skips_invalid_keys() -> None:
    keyed = _decoder({'1': 'a', 'x': 'b', '20': 'c'}).keyed_container()
    assert keyed.keys_as(IntKeyType()) == [1, 20]


def test_keyed_view_nested_paths() -> None:
    keyed = _decoder({'a': {'b': [1, 'x']}}).keyed_container()
    inner = keyed.nested_keyed_container('a')
    assert inner.coding_path == (StrKey('a'),)
    unkeyed = inner.nested_unkeyed_container('b')
    assert unkeyed.decode_int() == 1
    with pytest.raises(TypeMismatchError) as exc_info:
        unkeyed.decode_int()
    assert exc_info.value.path == ['a', 'b', 1]


def test_keyed_view_on_array() -> None:
    with pytest.raises(TypeMismatchError) as exc_info:
        _decoder([1]).keyed_container()
    assert exc_info.value.expected == 'object'
    assert exc_info.value.debug_description == 'Expected object but found array of 1 elements'


def test_unkeyed_view_on_object() -> None:
    with pytest.raises(TypeMismatchError) as exc_info:
        _decoder({}).unkeyed_container()
    assert exc_info.value.expected == 'array'


def test_super_decoder() -> None:
    keyed = _decoder({'super': {'x': 1}, 'other': 2}).keyed_container()
    assert keyed.super_decoder().keyed_container().decode_int('x') == 1
    assert keyed.super_decoder('other').single_value_container().decode_int() == 2


def test_unkeyed_view_cursor() -> None:
    unkeyed = _decoder([None, 'a', 2, [3], {'k': True}]).unkeyed_container()
    assert unkeyed.count == 5
    assert unkeyed.current_index == 0
    assert unkeyed.decode_nil()
    # decode_nil only consumes nulls
    assert not unkeyed.decode_nil()
    assert unkeyed.current_index == 1
    assert unkeyed.decode_str() == 'a'
    assert unkeyed.decode_uint() == 2
    assert unkeyed.nested_unkeyed_container().decode_int() == 3
    assert unkeyed.nested_keyed_container().decode_bool('k')
    assert unkeyed.is_at_end
    with pytest.raises(ValueNotFoundError) as exc_info:
        unkeyed.decode_int()
    assert exc_info.value.path == [5]
    assert exc_info.value.debug_description == 'Unkeyed container is at end'


def test_unkeyed_failed_read_does_not_advance() -> None:
    unkeyed = _decoder([1, 2]).unkeyed_container()
    with pytest.raises(TypeMismatchError) as exc_info:
        unkeyed.decode_str()
    assert exc_info.value.path == [0]
    assert unkeyed.current_index == 0
    assert unkeyed.decode(int) == 1
    assert unkeyed.super_decoder().coding_path == (IndexKey(1),)
    assert unkeyed.is_at_end


def test_single_value_view() -> None:
    single = _decoder('text').single_value_container()
    assert not single.decode_nil()
    assert single.decode_str() == 'text'
    assert single.decode_value() == StringValue('text')
    assert single.decode(str) == 'text'
    with pytest.raises(TypeMismatchError) as exc_info:
        single.decode_bool()
    assert exc_info.value.debug_description == "Expected Bool but found string 'text'"


def test_single_value_generic() -> None:
    single = _decoder([1]).single_value_container()
    assert single.decode_value() == ArrayValue((SignedIntegerValue(1),))


def test_binary_mismatch() -> None:
    with pytest.raises(TypeMismatchError) as exc_info:
        _decoder('abc').single_value_container().decode_binary()
    assert exc_info.value.expected == 'binary data'


def test_user_info_and_config() -> None:
    decoder = _decoder(None)
    assert decoder.user_info == {'who': 'test'}
    assert decoder.config.max_depth == 200
