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

from decimal import Decimal

from typing_extensions import Self, override

from bonjson.bon_types.bon_type import BonType
from bonjson.coding import Decoder, Encoder


class DecimalBonType(BonType[Decimal]):
    """ Represents `Decimal` values, written as big numbers so no precision is lost.
    """

    __slots__ = ()

    @override
    @classmethod
    def _from_type(cls, type_: type[Decimal], /, *, type_map: BonType.TypeMap) -> Self:
        if type_ is not Decimal:
            raise TypeError('expected Decimal type')
        return cls()

    @override
    def _check_value(self, value: Decimal, /) -> None:
        if not isinstance(value, Decimal):
            raise TypeError('expected Decimal')
        if not value.is_finite():
            raise ValueError('Decimal must be finite')

    @override
    def _encode(self, encoder: Encoder, value: Decimal, /) -> None:
        encoder.single_value_container().encode_decimal(value)

    @override
    def _decode(self, decoder: Decoder, /) -> Decimal:
        return decoder.single_value_container().decode_decimal()
