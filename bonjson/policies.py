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

"""
Pluggable behaviors for the values that have no direct representation: dates, binary blobs and non-finite floats.

Policies are immutable and can be shared by any number of encoders and decoders.

>>> policy = ConvertToStringFloatPolicy(positive_infinity='+inf', negative_infinity='-inf', nan='nan')
>>> policy.sentinel_for(float('-inf'))
'-inf'
>>> policy.float_for('+inf')
inf
>>> RaiseFloatPolicy().sentinel_for(float('nan')) is None
True
"""

from __future__ import annotations

import base64
import binascii
import math
from abc import ABC, abstractmethod
from collections.abc import Callable
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from pydantic import model_validator
from typing_extensions import Self, override

from bonjson.exception import DataCorruptedError
from bonjson.utils.pydantic import BaseModel

if TYPE_CHECKING:
    from bonjson.coding import Decoder, Encoder

__all__ = [
    'Base64BlobPolicy',
    'BlobPolicy',
    'ConvertToStringFloatPolicy',
    'CustomBlobPolicy',
    'CustomDatePolicy',
    'DatePolicy',
    'FloatPolicy',
    'FormattedDatePolicy',
    'Iso8601DatePolicy',
    'MillisecondsSinceEpochDatePolicy',
    'RaiseFloatPolicy',
    'RawBlobPolicy',
    'SecondsSinceEpochDatePolicy',
]

ISO8601_FORMAT = '%Y-%m-%dT%H:%M:%SZ'


def _as_utc(value: datetime) -> datetime:
    """Naive datetimes are taken to be in UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _from_timestamp(timestamp: float, decoder: Decoder) -> datetime:
    try:
        return datetime.fromtimestamp(timestamp, tz=timezone.utc)
    except (OverflowError, OSError, ValueError) as e:
        raise DataCorruptedError(f'Timestamp {timestamp} is not a valid date', decoder.coding_path) from e


class DatePolicy(BaseModel, ABC):
    @abstractmethod
    def encode_date(self, value: datetime, encoder: Encoder) -> None:
        raise NotImplementedError

    @abstractmethod
    def decode_date(self, decoder: Decoder) -> datetime:
        raise NotImplementedError


class SecondsSinceEpochDatePolicy(DatePolicy):
    """Dates are floats counting seconds since 1970-01-01T00:00:00Z."""

    @override
    def encode_date(self, value: datetime, encoder: Encoder) -> None:
        encoder.single_value_container().encode_float(_as_utc(value).timestamp())

    @override
    def decode_date(self, decoder: Decoder) -> datetime:
        return _from_timestamp(decoder.single_value_container().decode_float(), decoder)


class MillisecondsSinceEpochDatePolicy(DatePolicy):
    """Dates are floats counting milliseconds since 1970-01-01T00:00:00Z."""

    @override
    def encode_date(self, value: datetime, encoder: Encoder) -> None:
        encoder.single_value_container().encode_float(_as_utc(value).timestamp() * 1000.0)

    @override
    def decode_date(self, decoder: Decoder) -> datetime:
        return _from_timestamp(decoder.single_value_container().decode_float() / 1000.0, decoder)


class Iso8601DatePolicy(DatePolicy):
    """Dates are internet date-time strings in UTC, fractions of seconds are not kept."""

    @override
    def encode_date(self, value: datetime, encoder: Encoder) -> None:
        text = _as_utc(value).astimezone(timezone.utc).strftime(ISO8601_FORMAT)
        encoder.single_value_container().encode_str(text)

    @override
    def decode_date(self, decoder: Decoder) -> datetime:
        text = decoder.single_value_container().decode_str()
        try:
            value = datetime.fromisoformat(text)
        except ValueError as e:
            raise DataCorruptedError(f'Invalid ISO8601 date string: {text}', decoder.coding_path) from e
        return _as_utc(value).astimezone(timezone.utc)


class FormattedDatePolicy(DatePolicy):
    """Dates are strings in a `strftime` format, parsed dates without a timezone are taken to be in UTC."""

    format: str

    @override
    def encode_date(self, value: datetime, encoder: Encoder) -> None:
        encoder.single_value_container().encode_str(value.strftime(self.format))

    @override
    def decode_date(self, decoder: Decoder) -> datetime:
        text = decoder.single_value_container().decode_str()
        try:
            value = datetime.strptime(text, self.format)
        except ValueError as e:
            raise DataCorruptedError(f'Invalid date string: {text}', decoder.coding_path) from e
        return _as_utc(value)


class CustomDatePolicy(DatePolicy):
    """Both directions are delegated to the given callables, which get direct access to the encoder/decoder."""

    encode: Callable[..., None]
    decode: Callable[..., datetime]

    @override
    def encode_date(self, value: datetime, encoder: Encoder) -> None:
        self.encode(value, encoder)

    @override
    def decode_date(self, decoder: Decoder) -> datetime:
        return self.decode(decoder)


class BlobPolicy(BaseModel, ABC):
    @abstractmethod
    def encode_blob(self, value: bytes, encoder: Encoder) -> None:
        raise NotImplementedError

    @abstractmethod
    def decode_blob(self, decoder: Decoder) -> bytes:
        raise NotImplementedError


class Base64BlobPolicy(BlobPolicy):
    """Blobs are base64 strings."""

    @override
    def encode_blob(self, value: bytes, encoder: Encoder) -> None:
        encoder.single_value_container().encode_str(base64.b64encode(value).decode('ascii'))

    @override
    def decode_blob(self, decoder: Decoder) -> bytes:
        text = decoder.single_value_container().decode_str()
        try:
            return base64.b64decode(text, validate=True)
        except binascii.Error as e:
            raise DataCorruptedError(f'Invalid base64 string: {text}', decoder.coding_path) from e


class RawBlobPolicy(BlobPolicy):
    """Blobs are written as binary values."""

    @override
    def encode_blob(self, value: bytes, encoder: Encoder) -> None:
        encoder.single_value_container().encode_binary(value)

    @override
    def decode_blob(self, decoder: Decoder) -> bytes:
        return decoder.single_value_container().decode_binary()


class CustomBlobPolicy(BlobPolicy):
    """Encoding is delegated to `encode`, decoding to `decode` when given and otherwise expects binary values."""

    encode: Callable[..., None]
    decode: Callable[..., bytes] | None = None

    @override
    def encode_blob(self, value: bytes, encoder: Encoder) -> None:
        self.encode(value, encoder)

    @override
    def decode_blob(self, decoder: Decoder) -> bytes:
        if self.decode is None:
            return decoder.single_value_container().decode_binary()
        return self.decode(decoder)


class FloatPolicy(BaseModel, ABC):
    @abstractmethod
    def sentinel_for(self, value: float) -> str | None:
        """String to write in place of a non-finite float, None if they can't be written."""
        raise NotImplementedError

    @abstractmethod
    def float_for(self, value: str) -> float | None:
        """Non-finite float represented by a string, None if the string doesn't represent one."""
        raise NotImplementedError


class RaiseFloatPolicy(FloatPolicy):
    """Non-finite floats are refused."""

    @override
    def sentinel_for(self, value: float) -> None:
        return None

    @override
    def float_for(self, value: str) -> None:
        return None


class ConvertToStringFloatPolicy(FloatPolicy):
    """Non-finite floats are replaced by the given strings."""

    positive_infinity: str = 'Infinity'
    negative_infinity: str = '-Infinity'
    nan: str = 'NaN'

    @model_validator(mode='after')
    def _validate_distinct(self) -> Self:
        if len({self.positive_infinity, self.negative_infinity, self.nan}) != 3:
            raise ValueError('the strings for +infinity, -infinity and nan must all be different')
        return self

    @override
    def sentinel_for(self, value: float) -> str:
        if math.isnan(value):
            return self.nan
        assert math.isinf(value), 'only non-finite floats need a sentinel'
        return self.positive_infinity if value > 0 else self.negative_infinity

    @override
    def float_for(self, value: str) -> float | None:
        if value == self.positive_infinity:
            return math.inf
        if value == self.negative_infinity:
            return -math.inf
        if value == self.nan:
            return math.nan
        return None
