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

from types import NoneType

from typing_extensions import Self, override

from bonjson.bon_types.bon_type import BonType
from bonjson.coding import Decoder, Encoder
from bonjson.exception import TypeMismatchError


class NullBonType(BonType[None]):
    """ Represents `None` values, always written as null.
    """

    __slots__ = ()

    @override
    @classmethod
    def _from_type(cls, type_: type[None], /, *, type_map: BonType.TypeMap) -> Self:
        if type_ not in (None, NoneType):
            raise TypeError('expected None type')
        return cls()

    @override
    def _check_value(self, value: None, /) -> None:
        if value is not None:
            raise TypeError('expected None')

    @override
    def _encode(self, encoder: Encoder, value: None, /) -> None:
        encoder.single_value_container().encode_nil()

    @override
    def _decode(self, decoder: Decoder, /) -> None:
        single = decoder.single_value_container()
        if not single.decode_nil():
            found = single.decode_value().describe()
            raise TypeMismatchError('null', f'Expected null but found {found}', decoder.coding_path)
        return None
