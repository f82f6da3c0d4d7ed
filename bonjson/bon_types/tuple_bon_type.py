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

from collections.abc import Iterable
from typing import Any, get_args, get_origin

from typing_extensions import Self, override

from bonjson.bon_types.bon_type import BonType
from bonjson.coding import Decoder, Encoder
from bonjson.exception import DataCorruptedError


class TupleBonType(BonType[tuple]):
    """ Represents tuple values, which can either be homogeneous-type variable size or heterogeneous-type fixed size.

    Both are written as arrays, a fixed size tuple must be read from an array of exactly the same size.
    """

    __slots__ = ('_varsize', '_args')

    _varsize: bool
    _args: tuple[BonType, ...]

    def __init__(self, args: BonType | Iterable[BonType]) -> None:
        if isinstance(args, BonType):
            self._varsize = True
            self._args = (args,)
        else:
            self._varsize = False
            self._args = tuple(args)

    @override
    @classmethod
    def _from_type(cls, type_: Any, /, *, type_map: BonType.TypeMap) -> Self:
        if type_ is tuple:
            return cls(BonType.from_type(Any, type_map=type_map))
        origin_type = get_origin(type_)
        if origin_type is None or not issubclass(origin_type, tuple):
            raise TypeError('expected tuple[<args...>]')
        args = list(get_args(type_))
        if args and args[-1] == Ellipsis:
            if len(args) != 2:
                raise TypeError('ellipsis only allowed with one type: tuple[T, ...]')
            arg, _ellipsis = args
            return cls(BonType.from_type(arg, type_map=type_map))
        else:
            return cls([BonType.from_type(arg, type_map=type_map) for arg in args])

    @override
    def _check_value(self, value: tuple, /) -> None:
        if not isinstance(value, (tuple, list)):
            raise TypeError('expected tuple-like')
        if not self._varsize and len(value) != len(self._args):
            raise ValueError(f'expected a tuple of {len(self._args)} elements, got {len(value)}')

    @override
    def _encode(self, encoder: Encoder, value: tuple, /) -> None:
        unkeyed = encoder.unkeyed_container()
        if self._varsize:
            item, = self._args
            for i in value:
                unkeyed.encode_with(item, i)
        else:
            for i, arg_bon_type in zip(value, self._args):
                unkeyed.encode_with(arg_bon_type, i)

    @override
    def _decode(self, decoder: Decoder, /) -> tuple:
        unkeyed = decoder.unkeyed_container()
        if self._varsize:
            item, = self._args
            items = []
            while not unkeyed.is_at_end:
                items.append(unkeyed.decode_with(item))
            return tuple(items)
        if unkeyed.count != len(self._args):
            raise DataCorruptedError(
                f'Expected an array of {len(self._args)} elements but found {unkeyed.count}',
                decoder.coding_path,
            )
        return tuple(unkeyed.decode_with(arg_bon_type) for arg_bon_type in self._args)
