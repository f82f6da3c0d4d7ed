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
Typed encoder. Values are walked through the `Encoder` protocol and turned into engine calls as they go.

The kind of container a value needs is only known once its codec asks for one, and a container that is asked for
might never get any element. Every scope tracks what was requested and only opens the real container right before
the first element is written. When the scope finishes:

- a container that was opened is closed;
- a container that was requested but never opened is written as an empty container;
- a scope that never requested anything writes nothing.

>>> from bonjson import encode
>>> encode({'a': [], 'b': {}}).hex()
'0c0701610b0d0701620c0d0d'
"""

from __future__ import annotations

import math
from collections.abc import Callable, Mapping
from decimal import Decimal
from enum import Enum
from types import TracebackType
from typing import TYPE_CHECKING, Any, TypeAlias

from pydantic import Field
from structlog import get_logger
from typing_extensions import Self, override

from bonjson.coding import Encoder
from bonjson.coding_key import SUPER_KEY, CodingKey, IndexKey, as_coding_key
from bonjson.engine import EncodeContext, EncodeStatus
from bonjson.exception import EncoderError, EncodingError, InvalidValueError
from bonjson.policies import (
    Base64BlobPolicy,
    BlobPolicy,
    DatePolicy,
    FloatPolicy,
    RaiseFloatPolicy,
    SecondsSinceEpochDatePolicy,
)
from bonjson.types import INT64, UINT64
from bonjson.utils.pydantic import BaseModel
from bonjson.utils.typing import pretty_type
from bonjson.value import BigNumberValue

if TYPE_CHECKING:
    from bonjson.bon_types import BonType

logger = get_logger()

_Emitter: TypeAlias = Callable[[EncodeContext], EncodeStatus]


class ContainerKind(Enum):
    NONE = 'none'
    KEYED = 'keyed'
    UNKEYED = 'unkeyed'
    SINGLE = 'single value'


class BonjsonEncoder(BaseModel):
    """Encoding configuration, can be shared and reused for any number of calls."""

    date_policy: DatePolicy = SecondsSinceEpochDatePolicy()
    blob_policy: BlobPolicy = Base64BlobPolicy()
    float_policy: FloatPolicy = RaiseFloatPolicy()
    user_info: dict[str, Any] = Field(default_factory=dict)
    # strings longer than this (in utf-8 bytes) are written in chunks
    max_string_chunk: int | None = Field(default=None, ge=4)

    def encode(self, value: Any, type_: Any = None) -> bytes:
        """Encode a value, `type_` is the annotation to encode it as, by default it's taken from the value itself."""
        from bonjson.bon_types import bon_type_for_value, make_bon_type
        log = logger.new()
        if type_ is not None:
            bon_type = make_bon_type(type_)
        else:
            try:
                bon_type = bon_type_for_value(value)
            except TypeError as e:
                raise InvalidValueError(value, str(e)) from e
        type_name = pretty_type(type_ if type_ is not None else type(value))
        log.debug('encode started', type=type_name)

        context = EncodeContext(max_string_chunk=self.max_string_chunk)
        root = TrackingEncoder(_EncodingRun(self, context), None, None)
        bon_type.encode(root, value)
        root.finish()
        if not context.has_value:
            raise InvalidValueError(value, f'Top-level {type_name} did not encode any values.')
        _check_status(context.end_encode(), ())
        data = context.get_bytes()
        log.debug('encode finished', type=type_name, size=len(data))
        return data


class _EncodingRun:
    """State shared by every scope of a single encode call."""

    __slots__ = ('config', 'context')

    def __init__(self, config: BonjsonEncoder, context: EncodeContext) -> None:
        self.config = config
        self.context = context


def _check_status(status: EncodeStatus, coding_path: tuple[CodingKey, ...]) -> None:
    if status is not EncodeStatus.OK:
        raise EncoderError(status, coding_path)


class TrackingEncoder(Encoder):
    """ One scope of the traversal, that is, one value being written.

    Nested scopes write their own prefix (the parent's container start and the object name) lazily, so a scope that
    writes nothing leaves no trace in the output.
    """

    __slots__ = (
        '_run',
        '_parent',
        '_key',
        '_coding_path',
        '_kind',
        '_started',
        '_prefixed',
        '_closed',
        '_has_single_value',
        '_open_child',
        '_deferred_error',
        '_count',
    )

    def __init__(self, run: _EncodingRun, parent: TrackingEncoder | None, key: CodingKey | None) -> None:
        self._run = run
        self._parent = parent
        self._key = key
        parent_path = parent.coding_path if parent is not None else ()
        self._coding_path: tuple[CodingKey, ...] = parent_path if key is None else (*parent_path, key)
        self._kind = ContainerKind.NONE
        self._started = False
        self._prefixed = False
        self._closed = False
        self._has_single_value = False
        self._open_child: TrackingEncoder | None = None
        self._deferred_error: EncodingError | None = None
        # number of elements of an unkeyed container, nested containers included
        self._count = 0

    @property
    @override
    def coding_path(self) -> tuple[CodingKey, ...]:
        return self._coding_path

    @property
    @override
    def user_info(self) -> Mapping[str, Any]:
        return self._run.config.user_info

    @property
    @override
    def config(self) -> BonjsonEncoder:
        return self._run.config

    @property
    def kind(self) -> ContainerKind:
        return self._kind

    @override
    def keyed_container(self) -> KeyedEncodingContainer:
        self._request(ContainerKind.KEYED)
        return KeyedEncodingContainer(self)

    @override
    def unkeyed_container(self) -> UnkeyedEncodingContainer:
        self._request(ContainerKind.UNKEYED)
        return UnkeyedEncodingContainer(self)

    @override
    def single_value_container(self) -> SingleValueEncodingContainer:
        self._request(ContainerKind.SINGLE)
        return SingleValueEncodingContainer(self)

    def _request(self, kind: ContainerKind) -> None:
        # XXX: errors can't be raised from here, they are raised once the container is used
        if self._closed:
            self._defer(InvalidValueError(None, 'Encoder was already finished', self._coding_path))
        elif self._kind is ContainerKind.NONE or self._kind is kind:
            self._kind = kind
        else:
            self._defer(InvalidValueError(
                None,
                f'{kind.value.capitalize()} container requested, but {self._kind.value} was requested before',
                self._coding_path,
            ))

    def _defer(self, error: EncodingError) -> None:
        if self._deferred_error is None:
            self._deferred_error = error

    def check_usable(self) -> None:
        """Raise any deferred error, or an error if this scope was already finished."""
        if self._deferred_error is not None:
            error, self._deferred_error = self._deferred_error, None
            raise error
        if self._closed:
            raise InvalidValueError(None, 'Container was already closed', self._coding_path)

    def _check(self, status: EncodeStatus) -> None:
        _check_status(status, self._coding_path)

    def _emit_prefix(self) -> None:
        if self._prefixed:
            return
        self._prefixed = True
        parent = self._parent
        if parent is None:
            return
        parent._ensure_started()
        if parent._kind is ContainerKind.KEYED:
            assert self._key is not None
            parent._check(self._run.context.add_string(self._key.string_value))

    def _ensure_started(self) -> None:
        if self._started:
            return
        self._emit_prefix()
        context = self._run.context
        if self._kind is ContainerKind.KEYED:
            self._check(context.begin_object())
        else:
            assert self._kind is ContainerKind.UNKEYED
            self._check(context.begin_array())
        self._started = True

    def _close_child(self) -> None:
        child, self._open_child = self._open_child, None
        if child is not None:
            child.finish()

    def finish(self) -> None:
        """Close this scope, writing an empty container if one was requested but never opened."""
        if self._closed:
            return
        self._close_child()
        self._closed = True
        if self._deferred_error is not None:
            error, self._deferred_error = self._deferred_error, None
            raise error
        if self._kind in (ContainerKind.KEYED, ContainerKind.UNKEYED):
            self._ensure_started()
            self._check(self._run.context.end_container())

    def write_element(self, emitter: _Emitter, key: CodingKey | None) -> None:
        """Write a primitive element of this keyed (with key) or unkeyed (without key) container."""
        self.check_usable()
        self._close_child()
        self._ensure_started()
        context = self._run.context
        if key is not None:
            self._check(context.add_string(key.string_value))
            _check_status(emitter(context), (*self._coding_path, key))
        else:
            _check_status(emitter(context), (*self._coding_path, IndexKey(self._count)))
            self._count += 1

    def write_single(self, emitter: _Emitter) -> None:
        self.check_usable()
        if self._has_single_value:
            raise InvalidValueError(None, 'A single value container can only hold one value', self._coding_path)
        self._emit_prefix()
        self._check(emitter(self._run.context))
        self._has_single_value = True

    def next_key(self, key: str | int | CodingKey | None) -> CodingKey:
        """Key of the next element, keyed containers name it, unkeyed containers use the element index."""
        if key is not None:
            return as_coding_key(key)
        index = IndexKey(self._count)
        self._count += 1
        return index

    def encode_child(self, bon_type: BonType, value: Any, key: CodingKey) -> None:
        """Write a value in a new nested scope that is finished right away."""
        self.check_usable()
        self._close_child()
        child = TrackingEncoder(self._run, self, key)
        bon_type.encode(child, value)
        child.finish()

    def encode_in_place(self, bon_type: BonType, value: Any) -> None:
        """Hand this scope over to another codec, only possible while nothing was written."""
        self.check_usable()
        if self._has_single_value or self._started:
            raise InvalidValueError(value, 'A single value container can only hold one value', self._coding_path)
        self._kind = ContainerKind.NONE
        bon_type.encode(self, value)

    def nested_child(self, key: CodingKey, kind: ContainerKind) -> TrackingEncoder:
        """Open a nested scope that stays open until it's closed or its parent writes again."""
        child = TrackingEncoder(self._run, self, key)
        try:
            self.check_usable()
            self._close_child()
        except EncodingError as e:
            child._defer(e)
        else:
            self._open_child = child
        child._request(kind)
        return child

    def resolve(self, value: Any, type_: Any, key: CodingKey | None = None) -> BonType:
        """BonType for an annotation, or for the runtime type of the value when no annotation is given."""
        from bonjson.bon_types import bon_type_for_value, make_bon_type
        if type_ is not None:
            return make_bon_type(type_)
        try:
            return bon_type_for_value(value)
        except TypeError as e:
            coding_path = self._coding_path if key is None else (*self._coding_path, key)
            raise InvalidValueError(value, str(e), coding_path) from e

    def float_emitter(self, value: float, coding_path: tuple[CodingKey, ...]) -> _Emitter:
        if not isinstance(value, (float, int)) or isinstance(value, bool):
            raise InvalidValueError(value, 'Expected a float', coding_path)
        value = float(value)
        if math.isfinite(value):
            return lambda context: context.add_float(value)
        sentinel = self._run.config.float_policy.sentinel_for(value)
        if sentinel is None:
            raise InvalidValueError(
                value,
                f'Unable to encode {value} directly in BONJSON. Use ConvertToStringFloatPolicy to convert to a string '
                'representation.',
                coding_path,
            )
        return lambda context: context.add_string(sentinel)


def _null_emitter(context: EncodeContext) -> EncodeStatus:
    return context.add_null()


def _bool_emitter(value: bool, coding_path: tuple[CodingKey, ...]) -> _Emitter:
    if not isinstance(value, bool):
        raise InvalidValueError(value, 'Expected a bool', coding_path)
    return lambda context: context.add_boolean(value)


def _str_emitter(value: str, coding_path: tuple[CodingKey, ...]) -> _Emitter:
    if not isinstance(value, str):
        raise InvalidValueError(value, 'Expected a str', coding_path)
    return lambda context: context.add_string(value)


def _int_emitter(value: int, coding_path: tuple[CodingKey, ...]) -> _Emitter:
    if not isinstance(value, int) or isinstance(value, bool):
        raise InvalidValueError(value, 'Expected an int', coding_path)
    if INT64.check(value):
        return lambda context: context.add_signed_integer(value)
    if UINT64.check(value):
        return lambda context: context.add_unsigned_integer(value)
    raise InvalidValueError(value, 'Integer does not fit in 64 bits', coding_path)


def _uint_emitter(value: int, coding_path: tuple[CodingKey, ...]) -> _Emitter:
    if not isinstance(value, int) or isinstance(value, bool):
        raise InvalidValueError(value, 'Expected an int', coding_path)
    if not UINT64.check(value):
        raise InvalidValueError(value, 'Integer does not fit in an unsigned 64-bit integer', coding_path)
    return lambda context: context.add_unsigned_integer(value)


class _ContainerBase:
    __slots__ = ('_encoder',)

    def __init__(self, encoder: TrackingEncoder) -> None:
        self._encoder = encoder

    @property
    def coding_path(self) -> tuple[CodingKey, ...]:
        return self._encoder.coding_path

    def close(self) -> None:
        """Finish this container, it's also closed when its parent writes again or finishes."""
        self._encoder.finish()

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        if exc_type is None:
            self.close()


class KeyedEncodingContainer(_ContainerBase):
    """Writes an object, every element has a name."""

    __slots__ = ()

    def _path(self, key: CodingKey) -> tuple[CodingKey, ...]:
        return (*self._encoder.coding_path, key)

    def encode_nil(self, key: str | CodingKey) -> None:
        self._encoder.write_element(_null_emitter, as_coding_key(key))

    def encode_bool(self, value: bool, key: str | CodingKey) -> None:
        k = as_coding_key(key)
        self._encoder.write_element(_bool_emitter(value, self._path(k)), k)

    def encode_str(self, value: str, key: str | CodingKey) -> None:
        k = as_coding_key(key)
        self._encoder.write_element(_str_emitter(value, self._path(k)), k)

    def encode_int(self, value: int, key: str | CodingKey) -> None:
        """Write an integer as signed when it fits in 64 bits, as unsigned otherwise."""
        k = as_coding_key(key)
        self._encoder.write_element(_int_emitter(value, self._path(k)), k)

    def encode_uint(self, value: int, key: str | CodingKey) -> None:
        k = as_coding_key(key)
        self._encoder.write_element(_uint_emitter(value, self._path(k)), k)

    def encode_float(self, value: float, key: str | CodingKey) -> None:
        k = as_coding_key(key)
        self._encoder.write_element(self._encoder.float_emitter(value, self._path(k)), k)

    def encode(self, value: Any, key: str | CodingKey, type_: Any = None) -> None:
        """Write any supported value, `type_` defaults to the value's runtime type."""
        k = as_coding_key(key)
        self._encoder.encode_child(self._encoder.resolve(value, type_, k), value, k)

    def encode_with(self, bon_type: BonType, value: Any, key: str | CodingKey) -> None:
        self._encoder.encode_child(bon_type, value, as_coding_key(key))

    def nested_keyed_container(self, key: str | CodingKey) -> KeyedEncodingContainer:
        return KeyedEncodingContainer(self._encoder.nested_child(as_coding_key(key), ContainerKind.KEYED))

    def nested_unkeyed_container(self, key: str | CodingKey) -> UnkeyedEncodingContainer:
        return UnkeyedEncodingContainer(self._encoder.nested_child(as_coding_key(key), ContainerKind.UNKEYED))

    def super_encoder(self, key: str | CodingKey | None = None) -> TrackingEncoder:
        """Encoder for a nested value named `key` (`super` by default), usually used for a parent class' fields."""
        k = as_coding_key(key) if key is not None else SUPER_KEY
        return self._encoder.nested_child(k, ContainerKind.NONE)


class UnkeyedEncodingContainer(_ContainerBase):
    """Writes an array."""

    __slots__ = ()

    @property
    def count(self) -> int:
        return self._encoder._count

    def _element_path(self) -> tuple[CodingKey, ...]:
        return (*self._encoder.coding_path, IndexKey(self.count))

    def encode_nil(self) -> None:
        self._encoder.write_element(_null_emitter, None)

    def encode_bool(self, value: bool) -> None:
        self._encoder.write_element(_bool_emitter(value, self._element_path()), None)

    def encode_str(self, value: str) -> None:
        self._encoder.write_element(_str_emitter(value, self._element_path()), None)

    def encode_int(self, value: int) -> None:
        self._encoder.write_element(_int_emitter(value, self._element_path()), None)

    def encode_uint(self, value: int) -> None:
        self._encoder.write_element(_uint_emitter(value, self._element_path()), None)

    def encode_float(self, value: float) -> None:
        self._encoder.write_element(self._encoder.float_emitter(value, self._element_path()), None)

    def encode(self, value: Any, type_: Any = None) -> None:
        bon_type = self._encoder.resolve(value, type_, IndexKey(self.count))
        self._encoder.encode_child(bon_type, value, self._encoder.next_key(None))

    def encode_with(self, bon_type: BonType, value: Any) -> None:
        self._encoder.encode_child(bon_type, value, self._encoder.next_key(None))

    def nested_keyed_container(self) -> KeyedEncodingContainer:
        key = self._encoder.next_key(None)
        return KeyedEncodingContainer(self._encoder.nested_child(key, ContainerKind.KEYED))

    def nested_unkeyed_container(self) -> UnkeyedEncodingContainer:
        key = self._encoder.next_key(None)
        return UnkeyedEncodingContainer(self._encoder.nested_child(key, ContainerKind.UNKEYED))

    def super_encoder(self) -> TrackingEncoder:
        return self._encoder.nested_child(self._encoder.next_key(None), ContainerKind.NONE)


class SingleValueEncodingContainer(_ContainerBase):
    """Writes exactly one primitive, or hands the whole scope over to another codec with `encode`."""

    __slots__ = ()

    def encode_nil(self) -> None:
        self._encoder.write_single(_null_emitter)

    def encode_bool(self, value: bool) -> None:
        self._encoder.write_single(_bool_emitter(value, self.coding_path))

    def encode_str(self, value: str) -> None:
        self._encoder.write_single(_str_emitter(value, self.coding_path))

    def encode_int(self, value: int) -> None:
        self._encoder.write_single(_int_emitter(value, self.coding_path))

    def encode_uint(self, value: int) -> None:
        self._encoder.write_single(_uint_emitter(value, self.coding_path))

    def encode_float(self, value: float) -> None:
        self._encoder.write_single(self._encoder.float_emitter(value, self.coding_path))

    def encode_binary(self, value: bytes) -> None:
        """Write raw binary data, codecs for `bytes` go through the blob policy instead."""
        data = bytes(value)
        self._encoder.write_single(lambda context: context.add_binary(data))

    def encode_big_number(self, significand: int, exponent: int, is_negative: bool) -> None:
        self._encoder.write_single(lambda context: context.add_big_number(significand, exponent, is_negative))

    def encode_decimal(self, value: Decimal) -> None:
        try:
            number = BigNumberValue.from_decimal(value)
        except ValueError as e:
            raise InvalidValueError(value, str(e), self.coding_path) from e
        self.encode_big_number(number.significand, number.exponent, number.is_negative)

    def encode(self, value: Any, type_: Any = None) -> None:
        self._encoder.encode_in_place(self._encoder.resolve(value, type_), value)

    def encode_with(self, bon_type: BonType, value: Any) -> None:
        self._encoder.encode_in_place(bon_type, value)
