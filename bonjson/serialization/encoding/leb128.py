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
This module implements LEB128 for signed and unsigned integers.

LEB128 or Little Endian Base 128 is a variable-length code compression used to store arbitrarily large
integers in a small number of bytes. Each byte carries 7 bits of data and 1 continuation bit.

References:
- https://en.wikipedia.org/wiki/LEB128
- https://webassembly.github.io/spec/core/binary/values.html#integers

>>> from bonjson.serialization import Deserializer, Serializer
>>> se = Serializer.build_bytes_serializer()
>>> encode_leb128(se, 300, signed=False)  # writes ac02
>>> encode_leb128(se, 624485, signed=True)  # writes e58e26
>>> encode_leb128(se, -123456, signed=True)  # writes c0bb78
>>> bytes(se.finalize()).hex()
'ac02e58e26c0bb78'

>>> de = Deserializer.build_bytes_deserializer(bytes.fromhex('ac02e58e26c0bb78'))
>>> decode_leb128(de, signed=False)
300
>>> decode_leb128(de, signed=True)
624485
>>> decode_leb128(de, signed=True)
-123456
>>> de.finalize()

The number of bytes read can be bounded, which is useful to refuse values that would not fit a 64-bit integer anyway:

>>> de = Deserializer.build_bytes_deserializer(bytes.fromhex('ffffffff7f'))
>>> try:
...     decode_leb128(de, signed=False, max_bytes=4)
... except TooLongError as e:
...     print(e)
more than 4 bytes used by a leb128 value
"""

from bonjson.serialization.deserializer import Deserializer
from bonjson.serialization.exceptions import TooLongError
from bonjson.serialization.serializer import Serializer

# a 64-bit value never needs more than 10 groups of 7 bits
MAX_LEB128_64BIT_BYTES = 10


def encode_leb128(serializer: Serializer, value: int, *, signed: bool) -> None:
    """ Encodes an integer using LEB128.

    Caller must explicitly choose `signed=True` or `signed=False`.
    """
    if not signed and value < 0:
        raise ValueError('cannot encode value <0 as unsigned')
    while True:
        byte = value & 0b0111_1111
        value >>= 7
        if signed:
            done = (value == 0 and (byte & 0b0100_0000) == 0) or (value == -1 and (byte & 0b0100_0000) != 0)
        else:
            done = value == 0
        if done:
            serializer.write_byte(byte)
            break
        serializer.write_byte(byte | 0b1000_0000)


def decode_leb128(deserializer: Deserializer, *, signed: bool, max_bytes: int | None = None) -> int:
    """ Decodes a LEB128-encoded integer.

    Caller must explicitly choose `signed=True` or `signed=False`.
    """
    result = 0
    shift = 0
    count = 0
    while True:
        if max_bytes is not None and count >= max_bytes:
            raise TooLongError(f'more than {max_bytes} bytes used by a leb128 value')
        byte = deserializer.read_byte()
        count += 1
        result |= (byte & 0b0111_1111) << shift
        shift += 7
        if (byte & 0b1000_0000) == 0:
            if signed and (byte & 0b0100_0000) != 0:
                return result | -(1 << shift)
            return result
