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
Typed BONJSON encoding and decoding.

>>> data = encode({'name': 'Test', 'values': [1, 2.5, None]})
>>> decode(dict[str, Any], data)
{'name': 'Test', 'values': [1, 2.5, None]}

Use `BonjsonEncoder` and `BonjsonDecoder` to change the policies for dates, binary blobs and non-finite floats.
"""

from typing import Any

from bonjson.codable import Codable, Decodable, Encodable
from bonjson.decoder import BonjsonDecoder
from bonjson.encoder import BonjsonEncoder
from bonjson.exception import (
    BonjsonError,
    DataCorruptedError,
    DecoderError,
    DecodingError,
    EncoderError,
    EncodingError,
    InvalidValueError,
    KeyNotFoundError,
    TypeMismatchError,
    ValueNotFoundError,
)
from bonjson.parser import parse_value
from bonjson.policies import (
    Base64BlobPolicy,
    ConvertToStringFloatPolicy,
    CustomBlobPolicy,
    CustomDatePolicy,
    FormattedDatePolicy,
    Iso8601DatePolicy,
    MillisecondsSinceEpochDatePolicy,
    RaiseFloatPolicy,
    RawBlobPolicy,
    SecondsSinceEpochDatePolicy,
)
from bonjson.value import BonjsonValue

__version__ = '0.1.0'

__all__ = [
    'Base64BlobPolicy',
    'BonjsonDecoder',
    'BonjsonEncoder',
    'BonjsonError',
    'BonjsonValue',
    'Codable',
    'ConvertToStringFloatPolicy',
    'CustomBlobPolicy',
    'CustomDatePolicy',
    'DataCorruptedError',
    'Decodable',
    'DecoderError',
    'DecodingError',
    'Encodable',
    'EncoderError',
    'EncodingError',
    'FormattedDatePolicy',
    'InvalidValueError',
    'Iso8601DatePolicy',
    'KeyNotFoundError',
    'MillisecondsSinceEpochDatePolicy',
    'RaiseFloatPolicy',
    'RawBlobPolicy',
    'SecondsSinceEpochDatePolicy',
    'TypeMismatchError',
    'ValueNotFoundError',
    'decode',
    'encode',
    'parse_value',
]

_DEFAULT_ENCODER = BonjsonEncoder()
_DEFAULT_DECODER = BonjsonDecoder()


def encode(value: Any, type_: Any = None) -> bytes:
    """Encode a value with the default configuration."""
    return _DEFAULT_ENCODER.encode(value, type_)


def decode(type_: Any, data: bytes | memoryview) -> Any:
    """Decode a document as the given type with the default configuration."""
    return _DEFAULT_DECODER.decode(type_, data)
