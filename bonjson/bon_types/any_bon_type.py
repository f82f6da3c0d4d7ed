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
Codecs for values whose shape is only known at runtime.

`typing.Any` writes any supported value according to its runtime type and reads back natural Python values, while
`BonjsonValue` (and its subclasses) read and write the generic value tree itself:

>>> from bonjson import decode, encode
>>> decode(Any, encode({'a': [1, 2.5, None]}))
{'a': [1, 2.5, None]}
>>> decode(BonjsonValue, bytes.fromhex('0b810d'))
ArrayValue(elements=(SignedIntegerValue(value=1),))
"""

from __future__ import annotations

from typing import Any

from typing_extensions import Self, override

from bonjson.bon_types.bon_type import BonType
from bonjson.coding import Decoder, Encoder
from bonjson.exception import TypeMismatchError
from bonjson.utils.typing import is_subclass
from bonjson.value import (
    ArrayValue,
    BigNumberValue,
    BinaryValue,
    BonjsonValue,
    BoolValue,
    FloatValue,
    NullValue,
    ObjectValue,
    SignedIntegerValue,
    StringValue,
    UnsignedIntegerValue,
)


class AnyBonType(BonType[Any]):
    """ Represents `typing.Any`, the codec is picked from the runtime type of each value that is written.
    """

    __slots__ = ()

    @override
    @classmethod
    def _from_type(cls, type_: Any, /, *, type_map: BonType.TypeMap) -> Self:
        if type_ is not Any:
            raise TypeError('expected typing.Any')
        return cls()

    @override
    def _check_value(self, value: Any, /) -> None:
        from bonjson.bon_types import bon_type_for_value
        bon_type_for_value(value)

    @override
    def _encode(self, encoder: Encoder, value: Any, /) -> None:
        from bonjson.bon_types import bon_type_for_value
        bon_type_for_value(value).encode(encoder, value)

    @override
    def _decode(self, decoder: Decoder, /) -> Any:
        return decoder.single_value_container().decode_value().to_python()


class ValueBonType(BonType[BonjsonValue]):
    """ Represents generic values, which are written exactly as they are, duplicated object names included.
    """

    __slots__ = ('_value_class',)

    _value_class: type[BonjsonValue]

    def __init__(self, value_class: type[BonjsonValue] = BonjsonValue) -> None:
        self._value_class = value_class

    @override
    @classmethod
    def _from_type(cls, type_: Any, /, *, type_map: BonType.TypeMap) -> Self:
        if not is_subclass(type_, BonjsonValue):
            raise TypeError('expected BonjsonValue type')
        return cls(type_)

    @override
    def _check_value(self, value: BonjsonValue, /) -> None:
        if not isinstance(value, self._value_class):
            raise TypeError(f'expected {self._value_class.__name__}')

    @override
    def _encode(self, encoder: Encoder, value: BonjsonValue, /) -> None:
        match value:
            case ArrayValue():
                unkeyed = encoder.unkeyed_container()
                for element in value:
                    unkeyed.encode_with(_GENERIC, element)
            case ObjectValue():
                keyed = encoder.keyed_container()
                for name, element in value.pairs:
                    keyed.encode_with(_GENERIC, element, name)
            case NullValue():
                encoder.single_value_container().encode_nil()
            case BoolValue():
                encoder.single_value_container().encode_bool(value.value)
            case SignedIntegerValue():
                encoder.single_value_container().encode_int(value.value)
            case UnsignedIntegerValue():
                encoder.single_value_container().encode_uint(value.value)
            case FloatValue():
                encoder.single_value_container().encode_float(value.value)
            case BigNumberValue():
                encoder.single_value_container().encode_big_number(value.significand, value.exponent, value.is_negative)
            case StringValue():
                encoder.single_value_container().encode_str(value.value)
            case BinaryValue():
                encoder.single_value_container().encode_binary(value.value)
            case _:
                raise TypeError(f'unsupported generic value: {type(value).__name__}')

    @override
    def _decode(self, decoder: Decoder, /) -> BonjsonValue:
        value = decoder.single_value_container().decode_value()
        if not isinstance(value, self._value_class):
            expected = self._value_class.kind
            raise TypeMismatchError(expected, f'Expected {expected} but found {value.describe()}', decoder.coding_path)
        return value


_GENERIC = ValueBonType()
