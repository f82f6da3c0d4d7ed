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

from datetime import datetime

from typing_extensions import Self, override

from bonjson.bon_types.bon_type import BonType
from bonjson.coding import Decoder, Encoder
from bonjson.utils.typing import is_subclass


class DateBonType(BonType[datetime]):
    """ Represents `datetime` values, the representation is chosen by the date policy in use.

    Naive values are written as UTC and always read back as aware UTC datetimes, so a round trip only gives back an
    equal value for aware datetimes.
    """

    __slots__ = ()

    @override
    @classmethod
    def _from_type(cls, type_: type[datetime], /, *, type_map: BonType.TypeMap) -> Self:
        if not is_subclass(type_, datetime):
            raise TypeError('expected datetime type')
        return cls()

    @override
    def _check_value(self, value: datetime, /) -> None:
        if not isinstance(value, datetime):
            raise TypeError('expected datetime')

    @override
    def _encode(self, encoder: Encoder, value: datetime, /) -> None:
        encoder.config.date_policy.encode_date(value, encoder)

    @override
    def _decode(self, decoder: Decoder, /) -> datetime:
        return decoder.config.date_policy.decode_date(decoder)
