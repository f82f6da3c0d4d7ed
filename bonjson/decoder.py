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
Typed decoder. The document is first parsed into a generic value tree, which is then walked guided by the requested
type. Every step of the walk is a `ValueDecoder` wrapping one generic value, codecs read it through one of three
views: keyed (objects), unkeyed (arrays) and single value.

Numbers are converted exactly, a value that doesn't fit the requested type is an error instead of being truncated:

>>> from bonjson import decode
>>> from bonjson.types import UInt8
>>> decode(UInt8, bytes.fromhex('81'))
1
>>> try:
...     decode(UInt8, bytes.fromhex('03e807'))
... except DataCorruptedError as e:
...     print(e)
Data corrupted at <root>: Value 1000 cannot be converted to UInt8
"""

from __future__ import annotations

import math
import struct
from collections.abc import Callable, Mapping
from decimal import Decimal
from typing import TYPE_CHECKING, Any, TypeVar

from pydantic import Field
from structlog import get_logger
from typing_extensions import override

from bonjson.coding import Decoder
from bonjson.coding_key import SUPER_KEY, CodingKey, IndexKey, KeyType, StrKeyType, as_coding_key
from bonjson.engine import DEFAULT_MAX_DEPTH
from bonjson.exception import DataCorruptedError, KeyNotFoundError, TypeMismatchError, ValueNotFoundError
from bonjson.parser import parse_value
from bonjson.policies import (
    BlobPolicy,
    DatePolicy,
    FloatPolicy,
    RaiseFloatPolicy,
    RawBlobPolicy,
    SecondsSinceEpochDatePolicy,
)
from bonjson.types import INT64, UINT64, IntWidth
from bonjson.utils.pydantic import BaseModel
from bonjson.utils.typing import pretty_type
from bonjson.value import (
    ArrayValue,
    BigNumberValue,
    BinaryValue,
    BonjsonValue,
    BoolValue,
    FloatValue,
    ObjectValue,
    SignedIntegerValue,
    StringValue,
    UnsignedIntegerValue,
)

if TYPE_CHECKING:
    from bonjson.bon_types import BonType

logger = get_logger()

K = TypeVar('K')
T = TypeVar('T')

_Path = tuple[CodingKey, ...]


class BonjsonDecoder(BaseModel):
    """Decoding configuration, can be shared and reused for any number of calls."""

    date_policy: DatePolicy = SecondsSinceEpochDatePolicy()
    # binary values are expected by default, use Base64BlobPolicy to read base64 strings instead
    blob_policy: BlobPolicy = RawBlobPolicy()
    float_policy: FloatPolicy = RaiseFloatPolicy()
    user_info: dict[str, Any] = Field(default_factory=dict)
    max_depth: int = Field(default=DEFAULT_MAX_DEPTH, ge=1)

    def decode(self, type_: Any, data: bytes | memoryview) -> Any:
        """Decode a whole document as the given type annotation."""
        from bonjson.bon_types import make_bon_type
        bon_type = make_bon_type(type_)
        log = logger.new()
        log.debug('decode started', type=pretty_type(type_), size=len(data))
        root = parse_value(data, max_depth=self.max_depth)
        result = bon_type.decode(ValueDecoder(self, root, ()))
        log.debug('decode finished', type=pretty_type(type_))
        return result

    def decode_value(self, data: bytes | memoryview) -> BonjsonValue:
        """Decode a whole document into a generic value, without mapping it to any type."""
        return parse_value(data, max_depth=self.max_depth)


def _mismatch(expected: str, found: BonjsonValue, path: _Path) -> TypeMismatchError:
    return TypeMismatchError(expected, f'Expected {expected} but found {found.describe()}', path)


def _not_convertible(value: object, type_name: str, path: _Path) -> DataCorruptedError:
    return DataCorruptedError(f'Value {value} cannot be converted to {type_name}', path)


def unbox_bool(value: BonjsonValue, path: _Path) -> bool:
    if not isinstance(value, BoolValue):
        raise _mismatch('Bool', value, path)
    return value.value


def unbox_str(value: BonjsonValue, path: _Path) -> str:
    if not isinstance(value, StringValue):
        raise _mismatch('String', value, path)
    return value.value


def unbox_int(value: BonjsonValue, path: _Path, width: IntWidth | None = None) -> int:
    """ Read an integer, converting exactly from any numeric value.

    Without a width any value in the int64 and uint64 ranges is accepted. Floats are accepted when they have no
    fractional part.
    """
    type_name = width.name if width is not None else 'int'
    match value:
        case SignedIntegerValue() | UnsignedIntegerValue():
            number = value.value
        case FloatValue():
            if not math.isfinite(value.value) or not value.value.is_integer():
                raise _not_convertible(value.value, type_name, path)
            number = int(value.value)
        case _:
            raise _mismatch('number', value, path)
    if width is not None:
        in_range = width.check(number)
    else:
        in_range = INT64.min_value <= number <= UINT64.max_value
    if not in_range:
        raise _not_convertible(number, type_name, path)
    return number


def unbox_float(value: BonjsonValue, path: _Path, policy: FloatPolicy) -> float:
    """ Read a float from any numeric value.

    Strings are only accepted when the float policy recognizes them as one of its non-finite sentinels.
    """
    match value:
        case FloatValue():
            return value.value
        case SignedIntegerValue() | UnsignedIntegerValue():
            return float(value.value)
        case BigNumberValue():
            return value.to_float()
        case StringValue():
            number = policy.float_for(value.value)
            if number is None:
                raise TypeMismatchError('Double', f"Expected Double but found string '{value.value}'", path)
            return number
        case _:
            raise _mismatch('Double', value, path)


def unbox_float32(value: BonjsonValue, path: _Path, policy: FloatPolicy) -> float:
    number = unbox_float(value, path, policy)
    if isinstance(value, BigNumberValue) and not math.isfinite(number):
        raise _not_convertible(value.to_decimal(), 'Float32', path)
    try:
        (result,) = struct.unpack('>f', struct.pack('>f', number))
    except OverflowError as e:
        raise _not_convertible(number, 'Float32', path) from e
    return result


def unbox_binary(value: BonjsonValue, path: _Path) -> bytes:
    if not isinstance(value, BinaryValue):
        raise TypeMismatchError('binary data', f'Expected binary data but found {value.describe()}', path)
    return value.value


def unbox_decimal(value: BonjsonValue, path: _Path) -> Decimal:
    match value:
        case BigNumberValue():
            return value.to_decimal()
        case SignedIntegerValue() | UnsignedIntegerValue():
            return Decimal(value.value)
        case FloatValue():
            if not math.isfinite(value.value):
                raise _not_convertible(value.value, 'Decimal', path)
            return Decimal(repr(value.value))
        case _:
            raise _mismatch('number', value, path)


class ValueDecoder(Decoder):
    """A generic value and the coding path it was found at."""

    __slots__ = ('_config', '_value', '_coding_path')

    def __init__(self, config: BonjsonDecoder, value: BonjsonValue, coding_path: _Path) -> None:
        self._config = config
        self._value = value
        self._coding_path = coding_path

    @property
    @override
    def coding_path(self) -> _Path:
        return self._coding_path

    @property
    @override
    def user_info(self) -> Mapping[str, Any]:
        return self._config.user_info

    @property
    @override
    def config(self) -> BonjsonDecoder:
        return self._config

    @property
    def value(self) -> BonjsonValue:
        return self._value

    def child(self, value: BonjsonValue, key: CodingKey) -> ValueDecoder:
        return ValueDecoder(self._config, value, (*self._coding_path, key))

    @override
    def keyed_container(self) -> KeyedDecodingContainer:
        if not isinstance(self._value, ObjectValue):
            raise _mismatch('object', self._value, self._coding_path)
        return KeyedDecodingContainer(self, self._value)

    @override
    def unkeyed_container(self) -> UnkeyedDecodingContainer:
        if not isinstance(self._value, ArrayValue):
            raise _mismatch('array', self._value, self._coding_path)
        return UnkeyedDecodingContainer(self, self._value)

    @override
    def single_value_container(self) -> SingleValueDecodingContainer:
        return SingleValueDecodingContainer(self)

    def decode_with(self, bon_type: BonType[T]) -> T:
        return bon_type.decode(self)


def _make_bon_type(type_: Any) -> BonType:
    from bonjson.bon_types import make_bon_type
    return make_bon_type(type_)


class KeyedDecodingContainer:
    """ Read access to an object by name.

    Lookups return the first pair with the requested name, a name that is not present raises KeyNotFoundError.
    """

    __slots__ = ('_decoder', '_object')

    def __init__(self, decoder: ValueDecoder, obj: ObjectValue) -> None:
        self._decoder = decoder
        self._object = obj

    @property
    def coding_path(self) -> _Path:
        return self._decoder.coding_path

    @property
    def all_keys(self) -> list[str]:
        """Names in document order, repeated names only appear once."""
        return self.keys_as(StrKeyType())

    def keys_as(self, key_type: KeyType[K]) -> list[K]:
        """Names converted with the given key type, names the key type doesn't accept are left out."""
        result: list[K] = []
        seen: set[str] = set()
        for name in self._object.keys():
            if name in seen:
                continue
            seen.add(name)
            key = key_type.from_string(name)
            if key is not None:
                result.append(key)
        return result

    def contains(self, key: str | CodingKey) -> bool:
        return as_coding_key(key).string_value in self._object

    def _lookup(self, key: str | CodingKey) -> tuple[BonjsonValue, _Path]:
        coding_key = as_coding_key(key)
        value = self._object.get(coding_key.string_value)
        if value is None:
            raise KeyNotFoundError(
                coding_key,
                self.coding_path,
                f"No value associated with key '{coding_key.string_value}'",
            )
        return value, (*self.coding_path, coding_key)

    def decode_nil(self, key: str | CodingKey) -> bool:
        """Whether the value for the name is null."""
        value, _ = self._lookup(key)
        return value.is_null

    def decode_bool(self, key: str | CodingKey) -> bool:
        return unbox_bool(*self._lookup(key))

    def decode_str(self, key: str | CodingKey) -> str:
        return unbox_str(*self._lookup(key))

    def decode_int(self, key: str | CodingKey, width: IntWidth | None = None) -> int:
        return unbox_int(*self._lookup(key), width)

    def decode_uint(self, key: str | CodingKey) -> int:
        return unbox_int(*self._lookup(key), UINT64)

    def decode_float(self, key: str | CodingKey) -> float:
        return unbox_float(*self._lookup(key), self._decoder.config.float_policy)

    def decode_binary(self, key: str | CodingKey) -> bytes:
        return unbox_binary(*self._lookup(key))

    def decode(self, type_: Any, key: str | CodingKey) -> Any:
        return self.decode_with(_make_bon_type(type_), key)

    def decode_with(self, bon_type: BonType[T], key: str | CodingKey) -> T:
        return bon_type.decode(self._child(key))

    def decode_if_present(self, type_: Any, key: str | CodingKey) -> Any:
        """Like `decode`, but a missing name or a null value give None."""
        coding_key = as_coding_key(key)
        value = self._object.get(coding_key.string_value)
        if value is None or value.is_null:
            return None
        return _make_bon_type(type_).decode(self._decoder.child(value, coding_key))

    def _child(self, key: str | CodingKey) -> ValueDecoder:
        value, path = self._lookup(key)
        return self._decoder.child(value, path[-1])

    def nested_keyed_container(self, key: str | CodingKey) -> KeyedDecodingContainer:
        return self._child(key).keyed_container()

    def nested_unkeyed_container(self, key: str | CodingKey) -> UnkeyedDecodingContainer:
        return self._child(key).unkeyed_container()

    def super_decoder(self, key: str | CodingKey | None = None) -> ValueDecoder:
        """Decoder for the value named `key`, `super` by default."""
        return self._child(key if key is not None else SUPER_KEY)


class UnkeyedDecodingContainer:
    """ Sequential read access to an array.

    The cursor only moves forward when a read succeeds, reading past the end raises ValueNotFoundError.
    """

    __slots__ = ('_decoder', '_array', '_index')

    def __init__(self, decoder: ValueDecoder, array: ArrayValue) -> None:
        self._decoder = decoder
        self._array = array
        self._index = 0

    @property
    def coding_path(self) -> _Path:
        return self._decoder.coding_path

    @property
    def count(self) -> int:
        return len(self._array)

    @property
    def is_at_end(self) -> bool:
        return self._index >= len(self._array)

    @property
    def current_index(self) -> int:
        return self._index

    def _peek(self, expected: str) -> tuple[BonjsonValue, _Path]:
        path = (*self.coding_path, IndexKey(self._index))
        if self.is_at_end:
            raise ValueNotFoundError(expected, 'Unkeyed container is at end', path)
        return self._array.elements[self._index], path

    def _read(self, expected: str, unbox: Callable[[BonjsonValue, _Path], T]) -> T:
        result = unbox(*self._peek(expected))
        self._index += 1
        return result

    def decode_nil(self) -> bool:
        """Consume the next value only if it is null."""
        value, _ = self._peek('null')
        if value.is_null:
            self._index += 1
            return True
        return False

    def decode_bool(self) -> bool:
        return self._read('Bool', unbox_bool)

    def decode_str(self) -> str:
        return self._read('String', unbox_str)

    def decode_int(self, width: IntWidth | None = None) -> int:
        return self._read('int', lambda value, path: unbox_int(value, path, width))

    def decode_uint(self) -> int:
        return self._read('int', lambda value, path: unbox_int(value, path, UINT64))

    def decode_float(self) -> float:
        policy = self._decoder.config.float_policy
        return self._read('Double', lambda value, path: unbox_float(value, path, policy))

    def decode_binary(self) -> bytes:
        return self._read('binary data', unbox_binary)

    def decode(self, type_: Any) -> Any:
        bon_type = _make_bon_type(type_)
        return self._read(pretty_type(type_), lambda value, path: bon_type.decode(self._decoder.child(value, path[-1])))

    def decode_with(self, bon_type: BonType[T]) -> T:
        return self._read('value', lambda value, path: bon_type.decode(self._decoder.child(value, path[-1])))

    def nested_keyed_container(self) -> KeyedDecodingContainer:
        return self._read('object', lambda value, path: self._decoder.child(value, path[-1]).keyed_container())

    def nested_unkeyed_container(self) -> UnkeyedDecodingContainer:
        return self._read('array', lambda value, path: self._decoder.child(value, path[-1]).unkeyed_container())

    def super_decoder(self) -> ValueDecoder:
        return self._read('value', lambda value, path: self._decoder.child(value, path[-1]))


class SingleValueDecodingContainer:
    """Reads the decoder's value as a primitive, or hands it over to another codec."""

    __slots__ = ('_decoder',)

    def __init__(self, decoder: ValueDecoder) -> None:
        self._decoder = decoder

    @property
    def coding_path(self) -> _Path:
        return self._decoder.coding_path

    def decode_nil(self) -> bool:
        return self._decoder.value.is_null

    def decode_bool(self) -> bool:
        return unbox_bool(self._decoder.value, self.coding_path)

    def decode_str(self) -> str:
        return unbox_str(self._decoder.value, self.coding_path)

    def decode_int(self, width: IntWidth | None = None) -> int:
        return unbox_int(self._decoder.value, self.coding_path, width)

    def decode_uint(self) -> int:
        return unbox_int(self._decoder.value, self.coding_path, UINT64)

    def decode_float(self) -> float:
        return unbox_float(self._decoder.value, self.coding_path, self._decoder.config.float_policy)

    def decode_float32(self) -> float:
        return unbox_float32(self._decoder.value, self.coding_path, self._decoder.config.float_policy)

    def decode_binary(self) -> bytes:
        """Read a binary value, codecs for `bytes` go through the blob policy instead."""
        return unbox_binary(self._decoder.value, self.coding_path)

    def decode_decimal(self) -> Decimal:
        return unbox_decimal(self._decoder.value, self.coding_path)

    def decode_value(self) -> BonjsonValue:
        """The generic value itself."""
        return self._decoder.value

    def decode(self, type_: Any) -> Any:
        return _make_bon_type(type_).decode(self._decoder)

    def decode_with(self, bon_type: BonType[T]) -> T:
        return bon_type.decode(self._decoder)
