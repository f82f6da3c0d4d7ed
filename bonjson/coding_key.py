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
Coding keys identify where a value lives inside a document, they make up the coding path reported by errors.

>>> StrKey('name')
StrKey('name')
>>> IndexKey(3).string_value
'Index 3'
>>> render_path((StrKey('items'), IndexKey(0), StrKey('id')))
'items[0].id'

Key types know how to convert mapping keys to and from object names:

>>> IntKeyType().from_string('12')
12
>>> IntKeyType().from_string('twelve') is None
True
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from collections.abc import Iterable
from enum import Enum
from typing import Generic, TypeVar

from typing_extensions import override

K = TypeVar('K')
E = TypeVar('E', bound=Enum)
_INT_KEY_RE = re.compile(r'0|-?[1-9][0-9]*')


class CodingKey(ABC):
    """Either an object name or a position in an array."""

    __slots__ = ()

    @property
    @abstractmethod
    def string_value(self) -> str:
        raise NotImplementedError

    @property
    def int_value(self) -> int | None:
        return None

    @property
    def path_item(self) -> str | int:
        """The plain key, as used in `BonjsonError.path`."""
        return self.string_value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CodingKey):
            return NotImplemented
        return type(self) is type(other) and self.path_item == other.path_item

    def __hash__(self) -> int:
        return hash((type(self), self.path_item))

    def __repr__(self) -> str:
        return f'{type(self).__name__}({self.path_item!r})'


class StrKey(CodingKey):
    __slots__ = ('_value',)

    def __init__(self, value: str) -> None:
        self._value = value

    @property
    @override
    def string_value(self) -> str:
        return self._value


class IndexKey(CodingKey):
    __slots__ = ('_index',)

    def __init__(self, index: int) -> None:
        self._index = index

    @property
    @override
    def string_value(self) -> str:
        return f'Index {self._index}'

    @property
    @override
    def int_value(self) -> int:
        return self._index

    @property
    @override
    def path_item(self) -> int:
        return self._index


# name used by super_encoder/super_decoder when no key is given
SUPER_KEY = StrKey('super')


def as_coding_key(key: str | int | CodingKey) -> CodingKey:
    if isinstance(key, CodingKey):
        return key
    if isinstance(key, bool):
        raise TypeError('bool is not a valid key')
    if isinstance(key, int):
        return IndexKey(key)
    if isinstance(key, str):
        return StrKey(key)
    raise TypeError(f'invalid key type: {type(key).__name__}')


def render_path(coding_path: Iterable[CodingKey]) -> str:
    """Human readable coding path, `<root>` for the empty path."""
    result = ''
    for key in coding_path:
        if isinstance(key, IndexKey):
            result += f'[{key.int_value}]'
        elif result:
            result += f'.{key.string_value}'
        else:
            result = key.string_value
    return result or '<root>'


class KeyType(ABC, Generic[K]):
    """Converts between mapping keys and object names.

    `from_string` returns None when a name is not a valid key, callers are expected to skip those names.
    """

    __slots__ = ()

    @abstractmethod
    def from_string(self, value: str, /) -> K | None:
        raise NotImplementedError

    @abstractmethod
    def from_index(self, index: int, /) -> K:
        raise NotImplementedError

    @abstractmethod
    def to_string(self, key: K, /) -> str:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f'{type(self).__name__}()'


class StrKeyType(KeyType[str]):
    __slots__ = ()

    @override
    def from_string(self, value: str, /) -> str:
        return value

    @override
    def from_index(self, index: int, /) -> str:
        return f'Index {index}'

    @override
    def to_string(self, key: str, /) -> str:
        if not isinstance(key, str):
            raise TypeError('expected str key')
        return key


class IntKeyType(KeyType[int]):
    __slots__ = ()

    @override
    def from_string(self, value: str, /) -> int | None:
        # only the form written by to_string, so distinct names never share a key
        if _INT_KEY_RE.fullmatch(value) is None:
            return None
        return int(value)

    @override
    def from_index(self, index: int, /) -> int:
        return index

    @override
    def to_string(self, key: int, /) -> str:
        if not isinstance(key, int) or isinstance(key, bool):
            raise TypeError('expected int key')
        return str(key)


class EnumKeyType(KeyType[E]):
    """Enum members are named by their raw value, only str and int valued enums are supported."""

    __slots__ = ('_enum_class',)

    def __init__(self, enum_class: type[E]) -> None:
        self._enum_class = enum_class

    def __repr__(self) -> str:
        return f'EnumKeyType({self._enum_class.__name__})'

    @override
    def from_string(self, value: str, /) -> E | None:
        for member in self._enum_class:
            if str(member.value) == value:
                return member
        return None

    @override
    def from_index(self, index: int, /) -> E:
        return self._enum_class(index)

    @override
    def to_string(self, key: E, /) -> str:
        if not isinstance(key, self._enum_class):
            raise TypeError(f'expected {self._enum_class.__name__} key')
        if not isinstance(key.value, (str, int)):
            raise TypeError(f'{self._enum_class.__name__} values must be str or int to be used as keys')
        return str(key.value)
