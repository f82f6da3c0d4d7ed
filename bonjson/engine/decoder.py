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
Push-style decoder. The document is walked once and every item is reported to a `DecodeCallbacks` implementation,
decoding stops at the first status other than OK, be it from the document or from a callback.

Object names are reported as plain string events, it is up to the callbacks to pair them with values.

>>> class Printer:
...     def __getattr__(self, name):
...         def callback(*args):
...             print(name, *args)
...             return DecodeStatus.OK
...         return callback
>>> decode(bytes.fromhex('0b8103e8070d'), Printer())
on_begin_array
on_signed_integer 1
on_signed_integer 1000
on_end_container
on_end_data
(<DecodeStatus.OK: 0>, 6)

>>> decode(bytes.fromhex('0b81'), Printer())
on_begin_array
on_signed_integer 1
(<DecodeStatus.UNCLOSED_CONTAINERS: 2>, 2)
"""

from typing import Protocol

from structlog import get_logger

from bonjson.engine.layout import (
    DEFAULT_MAX_DEPTH,
    INT32_MAX,
    INT32_MIN,
    INT64_MAX,
    INT64_MIN,
    SMALL_INT_FLAG,
    SMALL_INT_MAX,
    UINT64_MAX,
    Tag,
)
from bonjson.engine.status import DecodeStatus
from bonjson.serialization import BadDataError, Deserializer, OutOfDataError, SerializationError
from bonjson.serialization.encoding.bytes import decode_bytes, decode_utf8
from bonjson.serialization.encoding.leb128 import MAX_LEB128_64BIT_BYTES, decode_leb128

logger = get_logger()


class DecodeCallbacks(Protocol):
    def on_null(self) -> DecodeStatus: ...

    def on_boolean(self, value: bool) -> DecodeStatus: ...

    def on_signed_integer(self, value: int) -> DecodeStatus: ...

    def on_unsigned_integer(self, value: int) -> DecodeStatus: ...

    def on_float(self, value: float) -> DecodeStatus: ...

    def on_big_number(self, significand: int, exponent: int, is_negative: bool) -> DecodeStatus: ...

    def on_string(self, value: str) -> DecodeStatus: ...

    def on_string_chunk(self, value: str, is_last: bool) -> DecodeStatus: ...

    def on_binary_data(self, value: bytes) -> DecodeStatus: ...

    def on_begin_array(self) -> DecodeStatus: ...

    def on_begin_object(self) -> DecodeStatus: ...

    def on_end_container(self) -> DecodeStatus: ...

    def on_end_data(self) -> DecodeStatus: ...


class _DecodeRun:
    __slots__ = ('_de', '_callbacks', '_max_depth', '_depth', '_in_chunk')

    def __init__(self, data: bytes | memoryview, callbacks: DecodeCallbacks, max_depth: int) -> None:
        self._de = Deserializer.build_bytes_deserializer(data)
        self._callbacks = callbacks
        self._max_depth = max_depth
        self._depth = 0
        self._in_chunk = False

    @property
    def consumed(self) -> int:
        return self._de.cur_pos()

    def run(self) -> DecodeStatus:
        has_root = False
        while not self._de.is_empty():
            if has_root:
                return DecodeStatus.TRAILING_DATA
            try:
                status = self._decode_item()
            except OutOfDataError:
                return DecodeStatus.INCOMPLETE
            except BadDataError:
                return DecodeStatus.INVALID_UTF8
            except SerializationError:
                return DecodeStatus.INVALID_DATA
            if status is not DecodeStatus.OK:
                return status
            has_root = self._depth == 0 and not self._in_chunk
        if self._in_chunk:
            return DecodeStatus.INCOMPLETE
        if self._depth > 0:
            return DecodeStatus.UNCLOSED_CONTAINERS
        return self._callbacks.on_end_data()

    def _decode_item(self) -> DecodeStatus:
        tag = self._de.read_byte()
        cb = self._callbacks

        if self._in_chunk and tag not in (Tag.STRING_CHUNK, Tag.STRING_LAST_CHUNK):
            logger.debug('string chunk interrupted', tag=tag, pos=self.consumed)
            return DecodeStatus.INVALID_DATA

        if tag & SMALL_INT_FLAG:
            return cb.on_signed_integer(tag & SMALL_INT_MAX)

        match tag:
            case Tag.NULL:
                return cb.on_null()
            case Tag.FALSE:
                return cb.on_boolean(False)
            case Tag.TRUE:
                return cb.on_boolean(True)
            case Tag.SIGNED_INT:
                value = decode_leb128(self._de, signed=True, max_bytes=MAX_LEB128_64BIT_BYTES)
                if not (INT64_MIN <= value <= INT64_MAX):
                    return DecodeStatus.VALUE_OUT_OF_RANGE
                return cb.on_signed_integer(value)
            case Tag.UNSIGNED_INT:
                value = decode_leb128(self._de, signed=False, max_bytes=MAX_LEB128_64BIT_BYTES)
                if value > UINT64_MAX:
                    return DecodeStatus.VALUE_OUT_OF_RANGE
                return cb.on_unsigned_integer(value)
            case Tag.FLOAT:
                (fvalue,) = self._de.read_struct('>d')
                return cb.on_float(fvalue)
            case Tag.BIG_NUMBER:
                return self._decode_big_number()
            case Tag.STRING:
                return cb.on_string(decode_utf8(self._de))
            case Tag.STRING_CHUNK | Tag.STRING_LAST_CHUNK:
                is_last = tag == Tag.STRING_LAST_CHUNK
                self._in_chunk = not is_last
                return cb.on_string_chunk(decode_utf8(self._de), is_last)
            case Tag.BINARY:
                return cb.on_binary_data(decode_bytes(self._de))
            case Tag.BEGIN_ARRAY | Tag.BEGIN_OBJECT:
                if self._depth >= self._max_depth:
                    return DecodeStatus.MAX_DEPTH_EXCEEDED
                self._depth += 1
                return cb.on_begin_array() if tag == Tag.BEGIN_ARRAY else cb.on_begin_object()
            case Tag.END_CONTAINER:
                if self._depth == 0:
                    status = cb.on_end_container()
                    return status if status is not DecodeStatus.OK else DecodeStatus.UNBALANCED_CONTAINERS
                self._depth -= 1
                return cb.on_end_container()
            case _:
                logger.debug('unknown tag', tag=tag, pos=self.consumed)
                return DecodeStatus.INVALID_DATA

    def _decode_big_number(self) -> DecodeStatus:
        sign = self._de.read_byte()
        if sign not in (0, 1):
            return DecodeStatus.INVALID_DATA
        exponent = decode_leb128(self._de, signed=True, max_bytes=MAX_LEB128_64BIT_BYTES)
        significand = decode_leb128(self._de, signed=False, max_bytes=MAX_LEB128_64BIT_BYTES)
        if not (INT32_MIN <= exponent <= INT32_MAX) or significand > UINT64_MAX:
            return DecodeStatus.VALUE_OUT_OF_RANGE
        return self._callbacks.on_big_number(significand, exponent, sign == 1)


def decode(
    data: bytes | memoryview,
    callbacks: DecodeCallbacks,
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> tuple[DecodeStatus, int]:
    """Decode a whole document, returns the final status and how many bytes were consumed."""
    run = _DecodeRun(data, callbacks, max_depth)
    status = run.run()
    return status, run.consumed
