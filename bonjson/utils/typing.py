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

from types import NoneType, UnionType
from typing import Any


def is_subclass(cls: Any, class_or_tuple: type | tuple[type, ...] | UnionType, /) -> bool:
    """ Reimplements issubclass() with support for recursive NewType classes and non-class arguments.

    Normal behavior from `issubclass`:

    >>> is_subclass(bool, int)
    True
    >>> is_subclass(bool, bytes | str)
    False

    But `is_subclass` also works when a NewType is given as arg 1:

    >>> from typing import NewType
    >>> N = NewType('N', int)
    >>> is_subclass(N, int)
    True
    >>> M = NewType('M', N)
    >>> is_subclass(M, int | str)
    True

    And anything that isn't a class is simply not a subclass:

    >>> is_subclass(list[int], list)
    False
    """
    cls = unwrap_newtype(cls)
    if not isinstance(cls, type):
        return False
    return issubclass(cls, class_or_tuple)


def unwrap_newtype(type_: Any, /) -> Any:
    """ Follow NewType definitions down to the actual type.

    >>> from typing import NewType
    >>> N = NewType('N', int)
    >>> unwrap_newtype(NewType('M', N))
    <class 'int'>
    """
    while (super_type := getattr(type_, '__supertype__', None)) is not None:
        type_ = super_type
    return type_


def pretty_type(type_: Any) -> str:
    """ Shows a cleaner string representation for a type.

    >>> pretty_type(int)
    'int'
    >>> pretty_type(None)
    'None'
    >>> pretty_type(list[int])
    'list[int]'
    """
    if type_ is NoneType or type_ is None:
        return 'None'
    elif hasattr(type_, '__args__'):
        return str(type_)
    else:
        return getattr(type_, '__name__', repr(type_))
