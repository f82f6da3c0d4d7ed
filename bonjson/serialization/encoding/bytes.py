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

r"""
This module implements encoding of byte sequences by prefixing them with their length as a LEB128 unsigned integer,
and of utf-8 strings on top of that.

>>> from bonjson.serialization import Deserializer, Serializer
>>> se = Serializer.build_bytes_serializer()
>>> encode_bytes(se, b'test')  # writes 0474657374
>>> encode_utf8(se, 'π')  # writes 02cf80
>>> bytes(se.finalize()).hex()
'047465737402cf80'

>>> de = Deserializer.build_bytes_deserializer(bytes.fromhex('047465737402cf80'))
>>> decode_bytes(de)
b'test'
>>> decode_utf8(de)
'π'
>>> de.finalize()

Invalid utf-8 is reported as a BadDataError:

>>> de = Deserializer.build_bytes_deserializer(b'\x01\xff')
>>> try:
...     decode_utf8(de)
... except BadDataError as e:
...     print(e)
invalid utf-8 sequence
"""

from bonjson.serialization.deserializer import Deserializer
from bonjson.serialization.encoding.leb128 import MAX_LEB128_64BIT_BYTES, decode_leb128, encode_leb128
from bonjson.serialization.exceptions import BadDataError
from bonjson.serialization.serializer import Serializer


def encode_bytes(serializer: Serializer, data: bytes | memoryview) -> None:
    """ Encodes a byte-sequence adding a length prefix.
    """
    encode_leb128(serializer, len(data), signed=False)
    serializer.write_bytes(data)


def decode_bytes(deserializer: Deserializer) -> bytes:
    """ Decodes a byte-sequence with a length prefix.
    """
    size = decode_leb128(deserializer, signed=False, max_bytes=MAX_LEB128_64BIT_BYTES)
    return bytes(deserializer.read_bytes(size))


def encode_utf8(serializer: Serializer, value: str) -> None:
    encode_bytes(serializer, value.encode('utf-8'))


def decode_utf8(deserializer: Deserializer) -> str:
    data = decode_bytes(deserializer)
    try:
        return data.decode('utf-8')
    except UnicodeDecodeError as e:
        raise BadDataError('invalid utf-8 sequence') from e
