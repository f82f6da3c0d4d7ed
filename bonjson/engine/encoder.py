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
Primitive push-style encoder. Values are appended one at a time and every call reports an EncodeStatus instead of
raising, the caller decides what to do with a failure.

>>> ctx = EncodeContext()
>>> ctx.begin_object()
<EncodeStatus.OK: 0>
>>> ctx.add_string('a')
<EncodeStatus.OK: 0>
>>> ctx.add_signed_integer(1)
<EncodeStatus.OK: 0>
>>> ctx.end_container()
<EncodeStatus.OK: 0>
>>> ctx.end_encode()
<EncodeStatus.OK: 0>
>>> ctx.get_bytes().hex()
'0c070161810d'

Names in objects must be strings:

>>> ctx = EncodeContext()
>>> ctx.begin_object()
<EncodeStatus.OK: 0>
>>> ctx.add_boolean(True)
<EncodeStatus.EXPECTED_OBJECT_NAME: 1>
"""

import math
from collections.abc import Iterator
from dataclasses import dataclass

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
from bonjson.engine.status import EncodeStatus
from bonjson.serialization import Serializer
from bonjson.serialization.encoding.bytes import encode_bytes
from bonjson.serialization.encoding.leb128 import encode_leb128


@dataclass(slots=True)
class _OpenContainer:
    is_object: bool
    expecting_name: bool = True


class EncodeContext:
    """Keeps track of open containers so that only well-formed documents can be produced."""

    __slots__ = ('_serializer', '_stack', '_max_depth', '_max_string_chunk', '_has_root', '_ended')

    def __init__(
        self,
        serializer: Serializer | None = None,
        *,
        max_depth: int = DEFAULT_MAX_DEPTH,
        max_string_chunk: int | None = None,
    ) -> None:
        self._serializer = serializer if serializer is not None else Serializer.build_bytes_serializer()
        self._stack: list[_OpenContainer] = []
        self._max_depth = max_depth
        self._max_string_chunk = max_string_chunk
        self._has_root = False
        self._ended = False

    @property
    def depth(self) -> int:
        return len(self._stack)

    @property
    def has_value(self) -> bool:
        """Whether a top-level value was started."""
        return self._has_root

    def get_bytes(self) -> bytes:
        """Return everything written so far."""
        from bonjson.serialization.bytes_serializer import BytesSerializer
        if not isinstance(self._serializer, BytesSerializer):
            raise TypeError('get_bytes() is only available when writing to the default serializer')
        return bytes(self._serializer.finalize())

    def _begin_value(self, *, is_name: bool = False) -> EncodeStatus:
        if self._ended:
            return EncodeStatus.ALREADY_ENDED
        if not self._stack:
            if self._has_root:
                return EncodeStatus.MULTIPLE_TOP_LEVEL_VALUES
            self._has_root = True
            return EncodeStatus.OK
        top = self._stack[-1]
        if top.is_object:
            if top.expecting_name and not is_name:
                return EncodeStatus.EXPECTED_OBJECT_NAME
            top.expecting_name = not top.expecting_name
        return EncodeStatus.OK

    def _write_tag(self, tag: Tag) -> None:
        self._serializer.write_byte(tag)

    def begin_object(self) -> EncodeStatus:
        return self._begin_container(is_object=True)

    def begin_array(self) -> EncodeStatus:
        return self._begin_container(is_object=False)

    def _begin_container(self, *, is_object: bool) -> EncodeStatus:
        if len(self._stack) >= self._max_depth:
            return EncodeStatus.MAX_DEPTH_EXCEEDED
        status = self._begin_value()
        if status is not EncodeStatus.OK:
            return status
        self._write_tag(Tag.BEGIN_OBJECT if is_object else Tag.BEGIN_ARRAY)
        self._stack.append(_OpenContainer(is_object=is_object))
        return EncodeStatus.OK

    def end_container(self) -> EncodeStatus:
        if self._ended:
            return EncodeStatus.ALREADY_ENDED
        if not self._stack:
            return EncodeStatus.CLOSED_TOO_MANY_CONTAINERS
        top = self._stack[-1]
        if top.is_object and not top.expecting_name:
            return EncodeStatus.EXPECTED_OBJECT_VALUE
        self._stack.pop()
        self._write_tag(Tag.END_CONTAINER)
        return EncodeStatus.OK

    def end_encode(self) -> EncodeStatus:
        """Finish the document, no other call is accepted afterwards."""
        if self._ended:
            return EncodeStatus.ALREADY_ENDED
        if self._stack:
            return EncodeStatus.CONTAINERS_ARE_STILL_OPEN
        self._ended = True
        return EncodeStatus.OK

    def add_null(self) -> EncodeStatus:
        status = self._begin_value()
        if status is EncodeStatus.OK:
            self._write_tag(Tag.NULL)
        return status

    def add_boolean(self, value: bool) -> EncodeStatus:
        status = self._begin_value()
        if status is EncodeStatus.OK:
            self._write_tag(Tag.TRUE if value else Tag.FALSE)
        return status

    def add_signed_integer(self, value: int) -> EncodeStatus:
        if not (INT64_MIN <= value <= INT64_MAX):
            return EncodeStatus.VALUE_OUT_OF_RANGE
        status = self._begin_value()
        if status is EncodeStatus.OK:
            self._write_integer(value, Tag.SIGNED_INT, signed=True)
        return status

    def add_unsigned_integer(self, value: int) -> EncodeStatus:
        if not (0 <= value <= UINT64_MAX):
            return EncodeStatus.VALUE_OUT_OF_RANGE
        status = self._begin_value()
        if status is EncodeStatus.OK:
            self._write_integer(value, Tag.UNSIGNED_INT, signed=False)
        return status

    def _write_integer(self, value: int, tag: Tag, *, signed: bool) -> None:
        if 0 <= value <= SMALL_INT_MAX:
            self._serializer.write_byte(SMALL_INT_FLAG | value)
            return
        self._write_tag(tag)
        encode_leb128(self._serializer, value, signed=signed)

    def add_float(self, value: float) -> EncodeStatus:
        if not math.isfinite(value):
            return EncodeStatus.INVALID_DATA
        status = self._begin_value()
        if status is EncodeStatus.OK:
            self._write_tag(Tag.FLOAT)
            self._serializer.write_struct('>d', value)
        return status

    def add_big_number(self, significand: int, exponent: int, is_negative: bool) -> EncodeStatus:
        if not (0 <= significand <= UINT64_MAX) or not (INT32_MIN <= exponent <= INT32_MAX):
            return EncodeStatus.VALUE_OUT_OF_RANGE
        status = self._begin_value()
        if status is EncodeStatus.OK:
            self._write_tag(Tag.BIG_NUMBER)
            self._serializer.write_byte(1 if is_negative else 0)
            encode_leb128(self._serializer, exponent, signed=True)
            encode_leb128(self._serializer, significand, signed=False)
        return status

    def add_string(self, value: str) -> EncodeStatus:
        try:
            data = value.encode('utf-8')
        except UnicodeEncodeError:
            return EncodeStatus.INVALID_DATA
        status = self._begin_value(is_name=True)
        if status is not EncodeStatus.OK:
            return status
        if self._max_string_chunk is None or len(data) <= self._max_string_chunk:
            self._write_tag(Tag.STRING)
            encode_bytes(self._serializer, data)
            return status
        chunks = list(_split_utf8(value, self._max_string_chunk))
        for i, chunk in enumerate(chunks):
            self._write_tag(Tag.STRING_LAST_CHUNK if i == len(chunks) - 1 else Tag.STRING_CHUNK)
            encode_bytes(self._serializer, chunk)
        return status

    def add_binary(self, value: bytes | memoryview) -> EncodeStatus:
        status = self._begin_value()
        if status is EncodeStatus.OK:
            self._write_tag(Tag.BINARY)
            encode_bytes(self._serializer, value)
        return status


def _split_utf8(value: str, limit: int) -> Iterator[bytes]:
    """Split the utf-8 encoding of value in pieces of at most `limit` bytes, never inside a code point."""
    current = bytearray()
    for char in value:
        encoded = char.encode('utf-8')
        if current and len(current) + len(encoded) > limit:
            yield bytes(current)
            current.clear()
        current += encoded
    if current:
        yield bytes(current)
