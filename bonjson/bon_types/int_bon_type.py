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
Integers. Plain `int` covers the union of the signed and unsigned 64-bit ranges, the fixed-width NewTypes from
`bonjson.types` restrict it further:

>>> from bonjson.types import Int8
>>> from bonjson.bon_types import make_bon_type
>>> make_bon_type(Int8)
SizedIntBonType(Int8)
>>> make_bon_type(int)
IntBonType()
"""

from __future__ import annotations

from typing import Any

from typing_extensions import Self, override

from bonjson.bon_types.bon_type import BonType
from bonjson.coding import Decoder, Encoder
from bonjson.types import INT64, INT_WIDTHS, UINT64, IntWidth


class IntBonType(BonType[int]):
    """ Represents builtin `int` values that fit in either a signed or an unsigned 64-bit integer.
    """

    __slots__ = ()

    @override
    @classmethod
    def _from_type(cls, type_: type[int], /, *, type_map: BonType.TypeMap) -> Self:
        if type_ is not int:
            raise TypeError('expected int type')
        return cls()

    @override
    def _check_value(self, value: int, /) -> None:
        if not isinstance(value, int) or isinstance(value, bool):
            raise TypeError('expected integer')
        if not (INT64.min_value <= value <= UINT64.max_value):
            raise ValueError('Integer does not fit in 64 bits')

    @override
    def _encode(self, encoder: Encoder, value: int, /) -> None:
        encoder.single_value_container().encode_int(value)

    @override
    def _decode(self, decoder: Decoder, /) -> int:
        return decoder.single_value_container().decode_int()

    def __repr__(self) -> str:
        return 'IntBonType()'


class SizedIntBonType(BonType[int]):
    """ Represents integers restricted to a fixed width, like `Int8` or `UInt32`.
    """

    __slots__ = ('_width',)

    _width: IntWidth

    def __init__(self, width: IntWidth) -> None:
        self._width = width

    @property
    def width(self) -> IntWidth:
        return self._width

    @override
    @classmethod
    def _from_type(cls, type_: Any, /, *, type_map: BonType.TypeMap) -> Self:
        width = INT_WIDTHS.get(type_)
        if width is None:
            raise TypeError('expected one of the fixed-width integer types')
        return cls(width)

    @override
    def _check_value(self, value: int, /) -> None:
        if not isinstance(value, int) or isinstance(value, bool):
            raise TypeError('expected integer')
        if not self._width.check(value):
            raise ValueError(f'Integer does not fit in {self._width.name}')

    @override
    def _encode(self, encoder: Encoder, value: int, /) -> None:
        single = encoder.single_value_container()
        if self._width.signed:
            single.encode_int(value)
        else:
            single.encode_uint(value)

    @override
    def _decode(self, decoder: Decoder, /) -> int:
        return decoder.single_value_container().decode_int(self._width)

    def __repr__(self) -> str:
        return f'SizedIntBonType({self._width.name})'
