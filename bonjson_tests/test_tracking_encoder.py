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

import math
from typing import Any, Callable

import pytest

from bonjson import BonjsonEncoder, Codable, InvalidValueError, decode, encode
from bonjson.coding import Decoder, Encoder


class Custom(Codable):
    """Writes itself with whatever function it's given, handy to drive the containers by hand."""

    def __init__(self, write: Callable[[Encoder], None]) -> None:
        self.write = write

    def encode_to(self, encoder: Encoder) -> None:
        self.write(encoder)

    @classmethod
    def decode_from(cls, decoder: Decoder) -> 'Custom':
        raise NotImplementedError


def _hex(write: Callable[[Encoder], None]) -> str:
    return encode(Custom(write)).hex()


def test_empty_containers() -> None:
    assert encode([]).hex() == '0b0d'
    assert encode({}).hex() == '0c0d'
    assert encode({'a': [], 'b': {}}).hex() == '0c0701610b0d0701620c0d0d'
    assert _hex(lambda encoder: encoder.keyed_container()) == '0c0d'
    assert _hex(lambda encoder: encoder.unkeyed_container()) == '0b0d'


def test_nothing_written() -> None:
    with pytest.raises(InvalidValueError) as exc_info:
        _hex(lambda encoder: None)
    assert 'did not encode any values' in str(exc_info.value)


def test_nested_containers_are_opened_lazily() -> None:
    def write(encoder: Encoder) -> None:
        keyed = encoder.keyed_container()
        nested = keyed.nested_unkeyed_container('n')
        nested.encode_int(1)
        # writing to the parent closes the nested container
        keyed.encode_int(2, 'b')

    assert _hex(write) == '0c07016e0b810d070162820d'


def test_unused_nested_container_is_written_empty() -> None:
    def write(encoder: Encoder) -> None:
        encoder.keyed_container().nested_keyed_container('n')

    assert _hex(write) == '0c07016e0c0d0d'


def test_degenerate_scope_writes_nothing() -> None:
    def write(encoder: Encoder) -> None:
        keyed = encoder.keyed_container()
        keyed.encode_int(1, 'a')
        # nothing is requested from the nested encoder, so not even its name is written
        keyed.super_encoder()

    assert _hex(write) == '0c070161810d'


def test_super_encoder() -> None:
    def write(encoder: Encoder) -> None:
        keyed = encoder.keyed_container()
        keyed.super_encoder().single_value_container().encode_str('base')
        keyed.super_encoder('extra').keyed_container().encode_bool(True, 'x')

    assert decode(dict, bytes.fromhex(_hex(write))) == {'super': 'base', 'extra': {'x': True}}


def test_nested_containers_as_context_managers() -> None:
    def write(encoder: Encoder) -> None:
        unkeyed = encoder.unkeyed_container()
        with unkeyed.nested_keyed_container() as keyed:
            keyed.encode_str('v', 'k')
            with keyed.nested_unkeyed_container('list') as inner:
                inner.encode_nil()
                inner.encode_float(0.5)
        unkeyed.encode_uint(7)
        assert unkeyed.count == 2

    assert decode(Any, bytes.fromhex(_hex(write))) == [{'k': 'v', 'list': [None, 0.5]}, 7]


def test_closed_container_cannot_be_used() -> None:
    def write(encoder: Encoder) -> None:
        keyed = encoder.keyed_container()
        nested = keyed.nested_unkeyed_container('n')
        keyed.encode_int(2, 'b')
        nested.encode_int(3)

    with pytest.raises(InvalidValueError) as exc_info:
        _hex(write)
    assert exc_info.value.path == ['n']


def test_error_from_nested_container_is_deferred() -> None:
    captured = []

    def write(encoder: Encoder) -> None:
        keyed = encoder.keyed_container()
        keyed.close()
        # getting the container works, using it raises
        nested = keyed.nested_keyed_container('x')
        captured.append(nested)
        nested.encode_int(1, 'y')

    with pytest.raises(InvalidValueError) as exc_info:
        _hex(write)
    assert len(captured) == 1
    assert 'already closed' in str(exc_info.value)


def test_conflicting_requests() -> None:
    def write(encoder: Encoder) -> None:
        encoder.keyed_container()
        encoder.unkeyed_container().encode_int(1)

    with pytest.raises(InvalidValueError) as exc_info:
        _hex(write)
    assert 'Unkeyed container requested, but keyed was requested before' in str(exc_info.value)


def test_conflicting_requests_without_writes() -> None:
    def write(encoder: Encoder) -> None:
        encoder.unkeyed_container()
        encoder.single_value_container()

    with pytest.raises(InvalidValueError):
        _hex(write)


def test_same_container_requested_twice() -> None:
    def write(encoder: Encoder) -> None:
        encoder.unkeyed_container().encode_int(1)
        encoder.unkeyed_container().encode_int(2)

    assert _hex(write) == '0b81820d'


def test_single_value_holds_one_value() -> None:
    def write(encoder: Encoder) -> None:
        single = encoder.single_value_container()
        single.encode_int(1)
        single.encode_int(2)

    with pytest.raises(InvalidValueError) as exc_info:
        _hex(write)
    assert 'only hold one value' in str(exc_info.value)


def test_single_value_hands_over() -> None:
    def write(encoder: Encoder) -> None:
        encoder.single_value_container().encode({'a': 1})

    assert _hex(write) == '0c070161810d'


def test_error_paths() -> None:
    with pytest.raises(InvalidValueError) as exc_info:
        encode({'a': [1, math.inf]})
    assert exc_info.value.path == ['a', 1]
    assert 'Use ConvertToStringFloatPolicy' in str(exc_info.value)


def test_wrong_primitive() -> None:
    def write(encoder: Encoder) -> None:
        encoder.keyed_container().encode_bool('yes', 'flag')  # type: ignore[arg-type]

    with pytest.raises(InvalidValueError) as exc_info:
        _hex(write)
    assert exc_info.value.path == ['flag']


@pytest.mark.parametrize('value, expected', [
    (None, '00'),
    (True, '02'),
    (-1, '037f'),
    (2**63, '04' + '80' * 9 + '01'),
    ('a', '070161'),
    (1.5, '053ff8000000000000'),
])
def test_scalars(value, expected) -> None:
    assert encode(value).hex() == expected


@pytest.mark.parametrize('value', [2**64, -2**63 - 1, object(), {1: 'a', 'b': 2}])
def test_unsupported_values(value) -> None:
    with pytest.raises(InvalidValueError):
        encode(value)


def test_string_chunks() -> None:
    encoder = BonjsonEncoder(max_string_chunk=4)
    data = encoder.encode('abcdefghij')
    assert data.hex() == '080461626364' + '080465666768' + '0902696a'
    assert decode(str, data) == 'abcdefghij'


def test_invalid_configuration() -> None:
    from pydantic import ValidationError
    with pytest.raises(ValidationError):
        BonjsonEncoder(max_string_chunk=2)
    with pytest.raises(ValidationError):
        BonjsonEncoder(unknown=True)


def test_user_info() -> None:
    seen = []

    def write(encoder: Encoder) -> None:
        seen.append(dict(encoder.user_info))
        encoder.single_value_container().encode_nil()

    BonjsonEncoder(user_info={'version': 2}).encode(Custom(write))
    assert seen == [{'version': 2}]
