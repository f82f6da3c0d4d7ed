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

import pytest

from bonjson.engine import EncodeContext, EncodeStatus

OK = EncodeStatus.OK


def _hex(*calls) -> str:
    ctx = EncodeContext()
    for name, *args in calls:
        assert getattr(ctx, name)(*args) is OK, name
    assert ctx.end_encode() is OK
    return ctx.get_bytes().hex()


@pytest.mark.parametrize('calls, expected', [
    ([('add_null',)], '00'),
    ([('add_boolean', False)], '01'),
    ([('add_boolean', True)], '02'),
    ([('add_signed_integer', 0)], '80'),
    ([('add_signed_integer', 127)], 'ff'),
    ([('add_signed_integer', 128)], '038001'),
    ([('add_signed_integer', -1)], '037f'),
    ([('add_unsigned_integer', 5)], '85'),
    ([('add_unsigned_integer', 128)], '048001'),
    ([('add_unsigned_integer', 2**64 - 1)], '04' + 'ff' * 9 + '01'),
    ([('add_float', 1.5)], '053ff8000000000000'),
    ([('add_big_number', 15, -1, True)], '06017f0f'),
    ([('add_string', '')], '0700'),
    ([('add_string', 'a')], '070161'),
    ([('add_binary', b'\x01\x02')], '0a020102'),
    ([('begin_array',), ('end_container',)], '0b0d'),
    ([('begin_object',), ('end_container',)], '0c0d'),
    ([('begin_object',), ('add_string', 'k'), ('add_string', 'v'), ('end_container',)], '0c07016b0701760d'),
    ([('begin_array',), ('begin_object',), ('end_container',), ('add_null',), ('end_container',)], '0b0c0d000d'),
])
def test_wire_layout(calls, expected) -> None:
    assert _hex(*calls) == expected


def test_string_chunks() -> None:
    ctx = EncodeContext(max_string_chunk=4)
    assert ctx.add_string('abcdefghij') is OK
    assert ctx.get_bytes().hex() == '080461626364' + '080465666768' + '0902696a'


def test_string_chunks_keep_code_points() -> None:
    ctx = EncodeContext(max_string_chunk=4)
    # 3 bytes each, a chunk never splits one of them
    assert ctx.add_string('€€') is OK
    assert ctx.get_bytes().hex() == '0803e282ac' + '0903e282ac'


def test_short_string_is_not_chunked() -> None:
    ctx = EncodeContext(max_string_chunk=4)
    assert ctx.add_string('abcd') is OK
    assert ctx.get_bytes().hex() == '070461626364'


def test_object_name_must_be_string() -> None:
    ctx = EncodeContext()
    assert ctx.begin_object() is OK
    assert ctx.add_null() is EncodeStatus.EXPECTED_OBJECT_NAME
    assert ctx.add_signed_integer(1) is EncodeStatus.EXPECTED_OBJECT_NAME
    assert ctx.begin_array() is EncodeStatus.EXPECTED_OBJECT_NAME
    # nothing was written by the failed calls
    assert ctx.get_bytes().hex() == '0c'


def test_object_cannot_close_after_name() -> None:
    ctx = EncodeContext()
    assert ctx.begin_object() is OK
    assert ctx.add_string('a') is OK
    assert ctx.end_container() is EncodeStatus.EXPECTED_OBJECT_VALUE
    assert ctx.add_null() is OK
    assert ctx.end_container() is OK


def test_close_too_many() -> None:
    ctx = EncodeContext()
    assert ctx.end_container() is EncodeStatus.CLOSED_TOO_MANY_CONTAINERS
    assert ctx.begin_array() is OK
    assert ctx.end_container() is OK
    assert ctx.end_container() is EncodeStatus.CLOSED_TOO_MANY_CONTAINERS


def test_end_with_open_containers() -> None:
    ctx = EncodeContext()
    assert ctx.begin_array() is OK
    assert ctx.end_encode() is EncodeStatus.CONTAINERS_ARE_STILL_OPEN
    assert ctx.end_container() is OK
    assert ctx.end_encode() is OK


def test_already_ended() -> None:
    ctx = EncodeContext()
    assert ctx.add_null() is OK
    assert ctx.end_encode() is OK
    assert ctx.add_null() is EncodeStatus.ALREADY_ENDED
    assert ctx.end_container() is EncodeStatus.ALREADY_ENDED
    assert ctx.end_encode() is EncodeStatus.ALREADY_ENDED


def test_multiple_top_level_values() -> None:
    ctx = EncodeContext()
    assert not ctx.has_value
    assert ctx.add_null() is OK
    assert ctx.has_value
    assert ctx.add_null() is EncodeStatus.MULTIPLE_TOP_LEVEL_VALUES


@pytest.mark.parametrize('name, args', [
    ('add_signed_integer', (2**63,)),
    ('add_signed_integer', (-2**63 - 1,)),
    ('add_unsigned_integer', (-1,)),
    ('add_unsigned_integer', (2**64,)),
    ('add_big_number', (2**64, 0, False)),
    ('add_big_number', (1, 2**31, False)),
])
def test_value_out_of_range(name, args) -> None:
    ctx = EncodeContext()
    assert getattr(ctx, name)(*args) is EncodeStatus.VALUE_OUT_OF_RANGE
    assert not ctx.has_value


@pytest.mark.parametrize('value', [math.inf, -math.inf, math.nan])
def test_non_finite_float(value) -> None:
    ctx = EncodeContext()
    assert ctx.add_float(value) is EncodeStatus.INVALID_DATA


def test_unencodable_string() -> None:
    ctx = EncodeContext()
    assert ctx.add_string('\ud800') is EncodeStatus.INVALID_DATA


def test_max_depth() -> None:
    ctx = EncodeContext(max_depth=2)
    assert ctx.begin_array() is OK
    assert ctx.begin_array() is OK
    assert ctx.depth == 2
    assert ctx.begin_object() is EncodeStatus.MAX_DEPTH_EXCEEDED
    assert ctx.add_null() is OK


def test_every_status_has_a_description() -> None:
    from bonjson.engine import DecodeStatus
    for status in [*EncodeStatus, *DecodeStatus]:
        assert status.describe()
