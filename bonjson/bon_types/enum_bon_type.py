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

from __future__ import annotations

from enum import Enum
from typing import TypeVar

from typing_extensions import Self, override

from bonjson.bon_types.bon_type import BonType
from bonjson.coding import Decoder, Encoder
from bonjson.exception import DataCorruptedError
from bonjson.utils.typing import is_subclass

E = TypeVar('E', bound=Enum)


class EnumBonType(BonType[E]):
    """ Represents Enum members, written as their value.

    All values of the enum must have the same type, that type decides how the value is written and read.
    """

    __slots__ = ('_enum_class', '_raw')

    _enum_class: type[E]
    _raw: BonType

    def __init__(self, enum_class: type[E], raw: BonType) -> None:
        self._enum_class = enum_class
        self._raw = raw

    @override
    @classmethod
    def _from_type(cls, type_: type[E], /, *, type_map: BonType.TypeMap) -> Self:
        if not is_subclass(type_, Enum):
            raise TypeError('expected Enum subclass')
        raw_types = {type(member.value) for member in type_}
        if len(raw_types) != 1:
            raise TypeError(f'all values of {type_.__name__} must have the same type')
        raw_type, = raw_types
        return cls(type_, BonType.from_type(raw_type, type_map=type_map))

    @override
    def _check_value(self, value: E, /) -> None:
        if not isinstance(value, self._enum_class):
            raise TypeError(f'expected {self._enum_class.__name__}')

    @override
    def _encode(self, encoder: Encoder, value: E, /) -> None:
        self._raw.encode(encoder, value.value)

    @override
    def _decode(self, decoder: Decoder, /) -> E:
        raw = self._raw.decode(decoder)
        try:
            return self._enum_class(raw)
        except ValueError as e:
            raise DataCorruptedError(
                f'Invalid {self._enum_class.__name__} value: {raw!r}',
                decoder.coding_path,
            ) from e
