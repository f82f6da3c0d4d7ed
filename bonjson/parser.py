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
Builds a generic value tree out of the events reported by the engine's decoder.

>>> parse_value(bytes.fromhex('0c07016181070162 0b 0d 0d'.replace(' ', '')))
ObjectValue(pairs=(('a', SignedIntegerValue(value=1)), ('b', ArrayValue(elements=()))))
"""

from __future__ import annotations

from dataclasses import dataclass, field

from structlog import get_logger
from typing_extensions import override

from bonjson.engine import DEFAULT_MAX_DEPTH, DecodeCallbacks, DecodeStatus, decode
from bonjson.exception import DataCorruptedError, DecoderError
from bonjson.value import (
    ArrayValue,
    BigNumberValue,
    BinaryValue,
    BonjsonValue,
    BoolValue,
    FloatValue,
    NullValue,
    ObjectValue,
    SignedIntegerValue,
    StringValue,
    UnsignedIntegerValue,
)

logger = get_logger()


@dataclass(slots=True)
class _ArrayFrame:
    elements: list[BonjsonValue] = field(default_factory=list)

    def build(self) -> ArrayValue:
        return ArrayValue(tuple(self.elements))


@dataclass(slots=True)
class _ObjectFrame:
    pairs: list[tuple[str, BonjsonValue]] = field(default_factory=list)
    pending_key: str | None = None

    def build(self) -> ObjectValue:
        return ObjectValue(tuple(self.pairs))


class TreeBuilder(DecodeCallbacks):
    """Engine callbacks that accumulate a single root value using a stack of open containers."""

    __slots__ = ('log', '_stack', '_expecting_key', '_chunks', '_result', '_unbalanced')

    def __init__(self) -> None:
        self.log = logger.new()
        self._stack: list[_ArrayFrame | _ObjectFrame] = []
        self._expecting_key = False
        self._chunks: list[str] = []
        self._result: BonjsonValue | None = None
        self._unbalanced = False

    @property
    def result(self) -> BonjsonValue | None:
        return self._result

    @property
    def unbalanced(self) -> bool:
        """Whether decoding stopped because a container was closed without being opened."""
        return self._unbalanced

    def _add_value(self, value: BonjsonValue) -> DecodeStatus:
        if not self._stack:
            self._result = value
            return DecodeStatus.OK
        top = self._stack[-1]
        if isinstance(top, _ArrayFrame):
            top.elements.append(value)
        elif self._expecting_key:
            if isinstance(value, StringValue):
                top.pending_key = value.value
                self._expecting_key = False
            else:
                self.log.warn('non-string object name dropped', value=value.describe())
        else:
            assert top.pending_key is not None
            top.pairs.append((top.pending_key, value))
            top.pending_key = None
            self._expecting_key = True
        return DecodeStatus.OK

    @override
    def on_null(self) -> DecodeStatus:
        return self._add_value(NullValue())

    @override
    def on_boolean(self, value: bool) -> DecodeStatus:
        return self._add_value(BoolValue(value))

    @override
    def on_signed_integer(self, value: int) -> DecodeStatus:
        return self._add_value(SignedIntegerValue(value))

    @override
    def on_unsigned_integer(self, value: int) -> DecodeStatus:
        return self._add_value(UnsignedIntegerValue(value))

    @override
    def on_float(self, value: float) -> DecodeStatus:
        return self._add_value(FloatValue(value))

    @override
    def on_big_number(self, significand: int, exponent: int, is_negative: bool) -> DecodeStatus:
        return self._add_value(BigNumberValue(significand, exponent, is_negative))

    @override
    def on_string(self, value: str) -> DecodeStatus:
        return self._add_value(StringValue(value))

    @override
    def on_string_chunk(self, value: str, is_last: bool) -> DecodeStatus:
        self._chunks.append(value)
        if not is_last:
            return DecodeStatus.OK
        joined = ''.join(self._chunks)
        self._chunks.clear()
        return self._add_value(StringValue(joined))

    @override
    def on_binary_data(self, value: bytes) -> DecodeStatus:
        return self._add_value(BinaryValue(value))

    @override
    def on_begin_array(self) -> DecodeStatus:
        self._stack.append(_ArrayFrame())
        self._expecting_key = False
        return DecodeStatus.OK

    @override
    def on_begin_object(self) -> DecodeStatus:
        self._stack.append(_ObjectFrame())
        self._expecting_key = True
        return DecodeStatus.OK

    @override
    def on_end_container(self) -> DecodeStatus:
        if not self._stack:
            self._unbalanced = True
            return DecodeStatus.UNBALANCED_CONTAINERS
        frame = self._stack.pop()
        if self._stack and isinstance(self._stack[-1], _ObjectFrame):
            # a container that took the place of a name is dropped like any other non-string name
            self._expecting_key = self._stack[-1].pending_key is None
        return self._add_value(frame.build())

    @override
    def on_end_data(self) -> DecodeStatus:
        return DecodeStatus.OK


def parse_value(data: bytes | memoryview, *, max_depth: int = DEFAULT_MAX_DEPTH) -> BonjsonValue:
    """Decode a whole document into a generic value.

    Raises DecoderError when the engine rejects the document and DataCorruptedError when the document is structurally
    wrong (unbalanced containers or no value at all).
    """
    builder = TreeBuilder()
    status, consumed = decode(data, builder, max_depth=max_depth)
    if builder.unbalanced:
        raise DataCorruptedError('Unbalanced containers: a container was closed that was never opened')
    if status is not DecodeStatus.OK:
        builder.log.debug('decode failed', status=status.name, consumed=consumed, size=len(data))
        raise DecoderError(status)
    if builder.result is None:
        raise DataCorruptedError('No value decoded from BONJSON data')
    return builder.result
