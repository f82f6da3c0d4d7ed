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

import struct
from typing import Any

from typing_extensions import Self, override

from bonjson.bon_types.bon_type import BonType
from bonjson.coding import Decoder, Encoder
from bonjson.types import Float32


class FloatBonType(BonType[float]):
    """ Represents builtin `float` values, integers are accepted too.

    Non-finite values are handled by the float policy of the encoder and decoder.
    """

    __slots__ = ()

    @override
    @classmethod
    def _from_type(cls, type_: type[float], /, *, type_map: BonType.TypeMap) -> Self:
        if type_ is not float:
            raise TypeError('expected float type')
        return cls()

    @override
    def _check_value(self, value: float, /) -> None:
        if not isinstance(value, (float, int)) or isinstance(value, bool):
            raise TypeError('expected float')

    @override
    def _encode(self, encoder: Encoder, value: float, /) -> None:
        encoder.single_value_container().encode_float(float(value))

    @override
    def _decode(self, decoder: Decoder, /) -> float:
        return decoder.single_value_container().decode_float()


class Float32BonType(FloatBonType):
    """ Represents floats restricted to the single precision range, decoded values are rounded to single precision.
    """

    __slots__ = ()

    @override
    @classmethod
    def _from_type(cls, type_: Any, /, *, type_map: BonType.TypeMap) -> Self:
        if type_ is not Float32:
            raise TypeError('expected Float32 type')
        return cls()

    @override
    def _check_value(self, value: float, /) -> None:
        super()._check_value(value)
        try:
            struct.pack('>f', value)
        except OverflowError as e:
            raise ValueError('Float does not fit in Float32') from e

    @override
    def _decode(self, decoder: Decoder, /) -> float:
        return decoder.single_value_container().decode_float32()
