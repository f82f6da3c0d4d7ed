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

from typing import Any

from typing_extensions import Self, override

from bonjson.bon_types.bon_type import BonType
from bonjson.codable import Decodable, Encodable
from bonjson.coding import Decoder, Encoder
from bonjson.utils.typing import is_subclass


class CodableBonType(BonType[Any]):
    """ Represents classes that implement `Encodable` and/or `Decodable`, they drive the containers themselves.
    """

    __slots__ = ('_class',)

    _class: type

    def __init__(self, class_: type) -> None:
        self._class = class_

    @override
    @classmethod
    def _from_type(cls, type_: Any, /, *, type_map: BonType.TypeMap) -> Self:
        if not is_subclass(type_, (Encodable, Decodable)):
            raise TypeError('expected Encodable or Decodable class')
        return cls(type_)

    @override
    def _check_value(self, value: Any, /) -> None:
        if not isinstance(value, self._class):
            raise TypeError(f'expected {self._class.__name__} instance')
        if not isinstance(value, Encodable):
            raise TypeError(f'{self._class.__name__} is not Encodable')

    @override
    def _encode(self, encoder: Encoder, value: Any, /) -> None:
        value.encode_to(encoder)

    @override
    def _decode(self, decoder: Decoder, /) -> Any:
        if not issubclass(self._class, Decodable):
            raise TypeError(f'{self._class.__name__} is not Decodable')
        return self._class.decode_from(decoder)
