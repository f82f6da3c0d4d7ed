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
from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from bonjson import (
    Base64BlobPolicy,
    BonjsonDecoder,
    BonjsonEncoder,
    ConvertToStringFloatPolicy,
    CustomBlobPolicy,
    CustomDatePolicy,
    DataCorruptedError,
    FormattedDatePolicy,
    InvalidValueError,
    Iso8601DatePolicy,
    MillisecondsSinceEpochDatePolicy,
    RawBlobPolicy,
    TypeMismatchError,
    decode,
    encode,
)

DATE = datetime(2020, 1, 1, tzinfo=timezone.utc)
TIMESTAMP = 1577836800.0


def test_seconds_since_epoch_is_default() -> None:
    data = encode(DATE)
    assert decode(float, data) == TIMESTAMP
    assert decode(datetime, data) == DATE


def test_naive_dates_are_utc() -> None:
    assert decode(float, encode(datetime(2020, 1, 1))) == TIMESTAMP


def test_naive_dates_read_back_aware() -> None:
    value = decode(datetime, encode(datetime(2020, 1, 1)))
    assert value.tzinfo is not None
    assert value == DATE
    assert value != datetime(2020, 1, 1)


def test_milliseconds_since_epoch() -> None:
    policy = MillisecondsSinceEpochDatePolicy()
    data = BonjsonEncoder(date_policy=policy).encode(DATE)
    assert decode(float, data) == TIMESTAMP * 1000
    assert BonjsonDecoder(date_policy=policy).decode(datetime, data) == DATE


def test_iso8601() -> None:
    policy = Iso8601DatePolicy()
    date = datetime(2020, 1, 1, 3, 0, tzinfo=timezone(timedelta(hours=3)))
    data = BonjsonEncoder(date_policy=policy).encode(date)
    assert decode(str, data) == '2020-01-01T00:00:00Z'
    assert BonjsonDecoder(date_policy=policy).decode(datetime, data) == DATE


def test_iso8601_invalid() -> None:
    decoder = BonjsonDecoder(date_policy=Iso8601DatePolicy())
    with pytest.raises(DataCorruptedError) as exc_info:
        decoder.decode(dict[str, datetime], encode({'when': 'yesterday'}))
    assert exc_info.value.path == ['when']
    assert exc_info.value.debug_description == 'Invalid ISO8601 date string: yesterday'


def test_formatted() -> None:
    policy = FormattedDatePolicy(format='%Y/%m/%d')
    data = BonjsonEncoder(date_policy=policy).encode(DATE)
    assert decode(str, data) == '2020/01/01'
    assert BonjsonDecoder(date_policy=policy).decode(datetime, data) == DATE
    with pytest.raises(DataCorruptedError):
        BonjsonDecoder(date_policy=policy).decode(datetime, encode('01-01-2020'))


def test_custom_date() -> None:
    policy = CustomDatePolicy(
        encode=lambda value, encoder: encoder.single_value_container().encode_int(value.year),
        decode=lambda decoder: datetime(decoder.single_value_container().decode_int(), 1, 1, tzinfo=timezone.utc),
    )
    data = BonjsonEncoder(date_policy=policy).encode([DATE])
    assert decode(list[int], data) == [2020]
    assert BonjsonDecoder(date_policy=policy).decode(list[datetime], data) == [DATE]


def test_date_from_string_with_default_policy() -> None:
    with pytest.raises(TypeMismatchError):
        decode(datetime, encode('2020-01-01T00:00:00Z'))


def test_invalid_timestamp() -> None:
    with pytest.raises(DataCorruptedError):
        decode(datetime, encode(1e20))


def test_blobs_are_base64_by_default() -> None:
    data = encode(b'hi')
    assert decode(str, data) == 'aGk='
    # decoding expects raw binary data unless asked otherwise
    with pytest.raises(TypeMismatchError):
        decode(bytes, data)
    assert BonjsonDecoder(blob_policy=Base64BlobPolicy()).decode(bytes, data) == b'hi'


def test_invalid_base64() -> None:
    with pytest.raises(DataCorruptedError):
        BonjsonDecoder(blob_policy=Base64BlobPolicy()).decode(bytes, encode('not base64!'))


def test_raw_blobs() -> None:
    data = BonjsonEncoder(blob_policy=RawBlobPolicy()).encode(bytearray(b'hi'))
    assert data.hex() == '0a026869'
    assert decode(bytes, data) == b'hi'


def test_custom_blob() -> None:
    policy = CustomBlobPolicy(encode=lambda value, encoder: encoder.single_value_container().encode_str(value.hex()))
    data = BonjsonEncoder(blob_policy=policy).encode({'key': b'\x01\xff'})
    assert decode(dict[str, str], data) == {'key': '01ff'}
    with pytest.raises(TypeMismatchError):
        BonjsonDecoder(blob_policy=policy).decode(dict[str, bytes], data)
    policy = CustomBlobPolicy(
        encode=lambda value, encoder: encoder.single_value_container().encode_str(value.hex()),
        decode=lambda decoder: bytes.fromhex(decoder.single_value_container().decode_str()),
    )
    assert BonjsonDecoder(blob_policy=policy).decode(dict[str, bytes], data) == {'key': b'\x01\xff'}


def test_non_finite_floats_are_refused_by_default() -> None:
    for value in (math.inf, -math.inf, math.nan):
        with pytest.raises(InvalidValueError):
            encode(value)


def test_non_finite_float_sentinels() -> None:
    policy = ConvertToStringFloatPolicy()
    data = BonjsonEncoder(float_policy=policy).encode([math.inf, -math.inf, math.nan, 1.0])
    assert decode(list, data) == ['Infinity', '-Infinity', 'NaN', 1.0]
    values = BonjsonDecoder(float_policy=policy).decode(list[float], data)
    assert values[:2] == [math.inf, -math.inf]
    assert math.isnan(values[2])
    assert values[3] == 1.0


def test_custom_sentinels() -> None:
    policy = ConvertToStringFloatPolicy(positive_infinity='+inf', negative_infinity='-inf', nan='nan')
    data = BonjsonEncoder(float_policy=policy).encode(-math.inf)
    assert decode(str, data) == '-inf'
    assert BonjsonDecoder(float_policy=policy).decode(float, data) == -math.inf
    # other strings are still a mismatch
    with pytest.raises(TypeMismatchError):
        BonjsonDecoder(float_policy=policy).decode(float, encode('Infinity'))


def test_sentinels_must_be_distinct() -> None:
    with pytest.raises(ValidationError):
        ConvertToStringFloatPolicy(nan='Infinity')


def test_configurations_are_frozen() -> None:
    encoder = BonjsonEncoder()
    with pytest.raises(ValidationError):
        encoder.max_string_chunk = 10  # type: ignore[misc]
