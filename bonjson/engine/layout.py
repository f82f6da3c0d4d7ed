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
Wire layout used by the default engine, every item starts with a single tag byte:

    00                      null
    01 / 02                 false / true
    03 [signed leb128]      signed integer
    04 [unsigned leb128]    unsigned integer
    05 [8 bytes]            float64, big-endian IEEE-754
    06 [sign][exp][sig]     big number: sign byte (0 or 1), signed leb128 exponent, unsigned leb128 significand
    07 [len][utf-8]         string
    08 [len][utf-8]         string chunk, more chunks follow
    09 [len][utf-8]         last string chunk
    0a [len][bytes]         binary data
    0b / 0c                 begin array / begin object
    0d                      end container
    80..ff                  small integer 0..127 packed in the tag itself

Objects are a sequence of name/value pairs where names are strings.
"""

from enum import IntEnum, unique

INT64_MIN = -2**63
INT64_MAX = 2**63 - 1
UINT64_MAX = 2**64 - 1
INT32_MIN = -2**31
INT32_MAX = 2**31 - 1

SMALL_INT_FLAG = 0x80
SMALL_INT_MAX = 0x7f

# container nesting limit of both the encoder and the decoder
DEFAULT_MAX_DEPTH = 200


@unique
class Tag(IntEnum):
    NULL = 0x00
    FALSE = 0x01
    TRUE = 0x02
    SIGNED_INT = 0x03
    UNSIGNED_INT = 0x04
    FLOAT = 0x05
    BIG_NUMBER = 0x06
    STRING = 0x07
    STRING_CHUNK = 0x08
    STRING_LAST_CHUNK = 0x09
    BINARY = 0x0a
    BEGIN_ARRAY = 0x0b
    BEGIN_OBJECT = 0x0c
    END_CONTAINER = 0x0d
