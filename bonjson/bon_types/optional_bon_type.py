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

from types import NoneType, UnionType
# XXX: ignore attr-defined because mypy doesn't recognize it, even though all version of python that we support have
#      this defined, even if it's an internal class
from typing import TypeVar, _UnionGenericAlias as UnionGenericAlias, get_args  # type: ignore[attr-defined]

from typing_extensions import Self, override

from bonjson.bon_types.bon_type import BonType
from bonjson.coding import Decoder, Encoder

V = TypeVar('V')


class OptionalBonType(BonType[V | None]):
    """ Represents a value that is either `V` or `None`, `None` is written as null.
    """

    __slots__ = ('_value',)

    _value: BonType[V]

    def __init__(self, bon_type: BonType[V]) -> None:
        self._value = bon_type

    @property
    def value_bon_type(self) -> BonType[V]:
        return self._value

    @override
    @classmethod
    def _from_type(cls, type_: type[V | None], /, *, type_map: BonType.TypeMap) -> Self:
        if not isinstance(type_, (UnionType, UnionGenericAlias)):
            raise TypeError('expected type union')
        args = get_args(type_)
        assert args, 'union always has args'
        if len(args) != 2 or NoneType not in args:
            raise TypeError('type must be either `None | T` or `T | None`')
        not_none_type, = tuple(set(args) - {NoneType})  # get the type that is not None
        return cls(BonType.from_type(not_none_type, type_map=type_map))

    @override
    def _check_value(self, value: V | None, /) -> None:
        # the wrapped type checks the value itself when it's written
        pass

    @override
    def _encode(self, encoder: Encoder, value: V | None, /) -> None:
        if value is None:
            encoder.single_value_container().encode_nil()
        else:
            self._value.encode(encoder, value)

    @override
    def _decode(self, decoder: Decoder, /) -> V | None:
        if decoder.single_value_container().decode_nil():
            return None
        return self._value.decode(decoder)
