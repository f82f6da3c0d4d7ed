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
Mappings are written as objects, so keys must have a string form. `str`, `int` and `Enum` keys are supported, see
`bonjson.coding_key.KeyType`. Names that can't be converted back into a key are skipped when decoding:

>>> from bonjson import decode, encode
>>> data = encode({'1': 'a', 'x': 'b', '2': 'c'})
>>> decode(dict[int, str], data)
{1: 'a', 2: 'c'}
"""

from __future__ import annotations

from collections.abc import Hashable, Iterable, Mapping
from enum import Enum
from typing import Any, TypeVar, get_args, get_origin

from typing_extensions import Self, override

from bonjson.bon_types.bon_type import BonType
from bonjson.coding import Decoder, Encoder
from bonjson.coding_key import EnumKeyType, IntKeyType, KeyType, StrKey, StrKeyType
from bonjson.exception import InvalidValueError
from bonjson.utils.typing import is_subclass, unwrap_newtype

T = TypeVar('T')
H = TypeVar('H', bound=Hashable)


def key_type_for(type_: Any) -> KeyType:
    """ KeyType to use for a mapping key annotation, raises TypeError for unsupported keys.

    >>> key_type_for(int)
    IntKeyType()
    """
    actual = unwrap_newtype(type_)
    if is_subclass(actual, Enum):
        return EnumKeyType(actual)
    if is_subclass(actual, bool):
        raise TypeError('bool is not supported as a mapping key')
    if is_subclass(actual, int):
        return IntKeyType()
    if is_subclass(actual, str):
        return StrKeyType()
    raise TypeError(f'mapping keys must be str, int or Enum, got {actual!r}')


class DictBonType(BonType[Mapping[H, T]]):
    """ Represents builtin `dict` values, written as objects in iteration order.
    """

    __slots__ = ('_key', '_value')

    _key: KeyType[H]
    _value: BonType[T]

    def __init__(self, key: KeyType[H], value: BonType[T]) -> None:
        self._key = key
        self._value = value

    def _build(self, items: Iterable[tuple[H, T]]) -> Mapping[H, T]:
        return dict(items)

    @override
    @classmethod
    def _from_type(cls, type_: Any, /, *, type_map: BonType.TypeMap) -> Self:
        origin_type = get_origin(type_) or type_
        if not isinstance(origin_type, type) or not issubclass(origin_type, Mapping):
            raise TypeError('expected Mapping type')
        # a bare mapping holds str keys and values of any type
        args = get_args(type_) or (str, Any)
        if len(args) != 2:
            raise TypeError(f'expected {origin_type.__name__}[<key type>, <value type>]')
        key_type, value_type = args
        return cls(key_type_for(key_type), BonType.from_type(value_type, type_map=type_map))

    @override
    def _check_value(self, value: Mapping[H, T], /) -> None:
        if not isinstance(value, Mapping):
            raise TypeError('expected Mapping type')

    @override
    def _encode(self, encoder: Encoder, value: Mapping[H, T], /) -> None:
        keyed = encoder.keyed_container()
        for k, v in value.items():
            try:
                name = self._key.to_string(k)
            except TypeError as e:
                raise InvalidValueError(k, str(e), keyed.coding_path) from e
            keyed.encode_with(self._value, v, StrKey(name))

    @override
    def _decode(self, decoder: Decoder, /) -> Mapping[H, T]:
        keyed = decoder.keyed_container()
        items: list[tuple[H, T]] = []
        for name in keyed.all_keys:
            key = self._key.from_string(name)
            if key is None:
                continue
            items.append((key, keyed.decode_with(self._value, StrKey(name))))
        return self._build(items)
