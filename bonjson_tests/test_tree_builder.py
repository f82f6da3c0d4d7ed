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
from structlog.testing import capture_logs

from bonjson.engine import DecodeStatus
from bonjson.exception import DataCorruptedError, DecoderError
from bonjson.parser import TreeBuilder, parse_value
from bonjson.value import (
    ArrayValue,
    BigNumberValue,
    BinaryValue,
    BoolValue,
    FloatValue,
    NullValue,
    ObjectValue,
    SignedIntegerValue,
    StringValue,
    UnsignedIntegerValue,
)


def _parse(hex_data: str):
    return parse_value(bytes.fromhex(hex_data.replace(' ', '')))


@pytest.mark.parametrize('hex_data, expected', [
    ('00', NullValue()),
    ('02', BoolValue(True)),
    ('037f', SignedIntegerValue(-1)),
    ('048001', UnsignedIntegerValue(128)),
    ('053ff8000000000000', FloatValue(1.5)),
    ('06017f0f', BigNumberValue(15, -1, True)),
    ('070161', StringValue('a')),
    ('0a020102', BinaryValue(b'\x01\x02')),
    ('0b0d', ArrayValue()),
    ('0c0d', ObjectValue()),
    ('0b 81 0b 82 0d 0c 0d 0d', ArrayValue((
        SignedIntegerValue(1),
        ArrayValue((SignedIntegerValue(2),)),
        ObjectValue(),
    ))),
])
def test_values(hex_data, expected) -> None:
    assert _parse(hex_data) == expected


def test_duplicate_names_are_kept_in_order() -> None:
    value = _parse('0c 070161 81 070162 82 070161 83 0d')
    assert isinstance(value, ObjectValue)
    assert value.keys() == ['a', 'b', 'a']
    assert value.get('a') == SignedIntegerValue(1)
    assert value.to_python() == {'a': 1, 'b': 2}


def test_chunked_string() -> None:
    assert _parse('0801 61 0802 6263 0901 64') == StringValue('abcd')


def test_chunked_name_and_value() -> None:
    value = _parse('0c 0801 6b 0901 79 0801 76 0900 0d')
    assert value == ObjectValue((('ky', StringValue('v')),))


def test_nested_objects() -> None:
    value = _parse('0c 070161 0c 070162 0b 80 0d 0d 070163 00 0d')
    assert value == ObjectValue((
        ('a', ObjectValue((('b', ArrayValue((SignedIntegerValue(0),))),))),
        ('c', NullValue()),
    ))


def test_object_inside_array_inside_object() -> None:
    value = _parse('0c 070161 0b 0c 0d 81 0d 070162 82 0d')
    assert value == ObjectValue((
        ('a', ArrayValue((ObjectValue(), SignedIntegerValue(1)))),
        ('b', SignedIntegerValue(2)),
    ))


def test_non_string_name_is_dropped() -> None:
    with capture_logs() as logs:
        value = _parse('0c 81 070161 82 0d')
    assert value == ObjectValue((('a', SignedIntegerValue(2)),))
    assert [log['event'] for log in logs] == ['non-string object name dropped']
    assert logs[0]['log_level'] in ('warn', 'warning')


def test_container_name_is_dropped() -> None:
    with capture_logs():
        value = _parse('0c 0b 0d 070161 81 0d')
    assert value == ObjectValue((('a', SignedIntegerValue(1)),))


def test_unbalanced_containers() -> None:
    with pytest.raises(DataCorruptedError) as exc_info:
        _parse('0d')
    assert 'Unbalanced containers' in str(exc_info.value)
    assert exc_info.value.path == []


def test_no_value() -> None:
    with pytest.raises(DataCorruptedError) as exc_info:
        _parse('')
    assert str(exc_info.value) == 'Data corrupted at <root>: No value decoded from BONJSON data'


@pytest.mark.parametrize('hex_data, status', [
    ('0b', DecodeStatus.UNCLOSED_CONTAINERS),
    ('0b0d0d', DecodeStatus.TRAILING_DATA),
    ('03', DecodeStatus.INCOMPLETE),
    ('0e', DecodeStatus.INVALID_DATA),
    ('0701ff', DecodeStatus.INVALID_UTF8),
])
def test_engine_errors(hex_data, status) -> None:
    with pytest.raises(DecoderError) as exc_info:
        _parse(hex_data)
    assert exc_info.value.status is status
    assert str(exc_info.value) == f'Decoder error: {status.describe()}'


def test_max_depth() -> None:
    data = bytes.fromhex('0b' * 3 + '0d' * 3)
    assert parse_value(data, max_depth=3) == ArrayValue((ArrayValue((ArrayValue(),)),))
    with pytest.raises(DecoderError) as exc_info:
        parse_value(data, max_depth=2)
    assert exc_info.value.status is DecodeStatus.MAX_DEPTH_EXCEEDED


def test_builder_driven_directly() -> None:
    builder = TreeBuilder()
    assert builder.on_begin_array() is DecodeStatus.OK
    assert builder.on_string_chunk('x', False) is DecodeStatus.OK
    assert builder.on_string_chunk('y', True) is DecodeStatus.OK
    assert builder.on_unsigned_integer(2**64 - 1) is DecodeStatus.OK
    assert builder.result is None
    assert builder.on_end_container() is DecodeStatus.OK
    assert builder.result == ArrayValue((StringValue('xy'), UnsignedIntegerValue(2**64 - 1)))
    assert builder.on_end_container() is DecodeStatus.UNBALANCED_CONTAINERS
    assert builder.unbalanced
