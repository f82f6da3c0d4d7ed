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

from abc import ABC, abstractmethod
from collections import deque
from collections.abc import Collection, Hashable, Iterable, Set
from typing import Any, TypeVar, get_args, get_origin

from typing_extensions import Self, override

from bonjson.bon_types.bon_type import BonType
from bonjson.coding import Decoder, Encoder

T = TypeVar('T')
H = TypeVar('H', bound=Hashable)


class _CollectionBonType(BonType[Collection[T]], ABC):
    """ Used as base for BonType classes that represent collections, they are all written as arrays.
    """

    __slots__ = ('_item',)

    _item: BonType[T]

    def __init__(self, item_bon_type: BonType[T], /) -> None:
        self._item = item_bon_type

    @abstractmethod
    def _build(self, items: Iterable[T]) -> Collection[T]:
        """ How to build the concrete collection from an iterable of items.
        """
        raise NotImplementedError

    @override
    @classmethod
    def _from_type(cls, type_: type[Collection[T]], /, *, type_map: BonType.TypeMap) -> Self:
        member_type = cls._get_member_type(type_)
        member_bon_type = BonType.from_type(member_type, type_map=type_map)
        return cls(member_bon_type)

    @classmethod
    def _get_member_type(cls, type_: Any) -> Any:
        origin_type: type = get_origin(type_) or type_
        if not isinstance(origin_type, type) or not issubclass(origin_type, Collection):
            raise TypeError('expected Collection type')
        args = get_args(type_) or (Any,)
        if len(args) != 1:
            raise TypeError(f'expected {origin_type.__name__}[<type>]')
        return args[0]

    @override
    def _check_value(self, value: Collection[T], /) -> None:
        if not isinstance(value, Collection) or isinstance(value, (str, bytes, bytearray)):
            raise TypeError('expected Collection type')

    @override
    def _encode(self, encoder: Encoder, value: Collection[T], /) -> None:
        unkeyed = encoder.unkeyed_container()
        for item in value:
            unkeyed.encode_with(self._item, item)

    @override
    def _decode(self, decoder: Decoder, /) -> Collection[T]:
        unkeyed = decoder.unkeyed_container()
        items: list[T] = []
        while not unkeyed.is_at_end:
            items.append(unkeyed.decode_with(self._item))
        return self._build(items)


class ListBonType(_CollectionBonType[T]):
    """ Represents builtin `list` values.
    """

    __slots__ = ()

    @override
    def _build(self, items: Iterable[T]) -> list[T]:
        return list(items)


class DequeBonType(_CollectionBonType[T]):
    """ Represents `collections.deque` values.
    """

    __slots__ = ()

    @override
    def _build(self, items: Iterable[T]) -> deque[T]:
        return deque(items)


class SetBonType(_CollectionBonType[H]):
    """ Represents builtin `set` values.
    """

    __slots__ = ()

    @override
    def _build(self, items: Iterable[H]) -> Set[H]:
        return set(items)

    @override
    @classmethod
    def _get_member_type(cls, type_: Any) -> Any:
        origin_type: type = get_origin(type_) or type_
        if not isinstance(origin_type, type) or not issubclass(origin_type, Set):
            raise TypeError('expected Set type')
        return super()._get_member_type(type_)


class FrozenSetBonType(SetBonType[H]):
    """ Represents builtin `frozenset` values.
    """

    __slots__ = ()

    @override
    def _build(self, items: Iterable[H]) -> frozenset[H]:
        return frozenset(items)
