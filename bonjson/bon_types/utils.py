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

from collections.abc import Mapping
from dataclasses import is_dataclass
from enum import Enum
from functools import reduce
from operator import or_
from types import NoneType, UnionType
# XXX: ignore attr-defined because mypy doesn't recognize it, even though all version of python that we support have
#      this defined, even if it's an internal class
from typing import _UnionGenericAlias  # type: ignore[attr-defined]
from typing import TYPE_CHECKING, Any, NamedTuple, TypeAlias, Union, cast, get_args, get_origin

from structlog import get_logger

from bonjson.codable import Decodable, Encodable
from bonjson.utils.typing import is_subclass, pretty_type

if TYPE_CHECKING:
    from bonjson.bon_types.bon_type import BonType


logger = get_logger()

TypeAliasMap: TypeAlias = Mapping[Any, type]
TypeToBonTypeMap: TypeAlias = Mapping[Any, type['BonType']]


class Dataclass:
    """Stands for any dataclass when used as a key of a TypeToBonTypeMap."""


def is_namedtuple_type(type_: Any) -> bool:
    """ Whether the given type was created with `typing.NamedTuple` or `collections.namedtuple`.

    >>> class Point(NamedTuple):
    ...     x: int
    ...     y: int
    >>> is_namedtuple_type(Point)
    True
    >>> is_namedtuple_type(tuple)
    False
    """
    return is_subclass(type_, tuple) and hasattr(type_, '_fields')


# XXX: _verbose argument is used to help with doctest
def get_aliased_type(type_: Any, alias_map: TypeAliasMap, *, _verbose: bool = True) -> Any:
    """ Map a type to its usable alias including the type's arguments.

    For example, `OrderedDict` is mapped to `dict` and `bytearray` to `bytes` in the default alias map:

    >>> from collections import OrderedDict
    >>> from bonjson.bon_types import DEFAULT_TYPE_ALIAS_MAP as alias_map
    >>> get_aliased_type(tuple[str, OrderedDict[str, bytearray], bool], alias_map, _verbose=False)
    tuple[str, dict[str, bytes], bool]
    """
    new_type, replaced = _get_aliased_type(type_, alias_map)
    if replaced and _verbose:
        logger.debug('type replaced', old=pretty_type(type_), new=pretty_type(new_type))
    return new_type


def _get_aliased_type(type_: Any, alias_map: TypeAliasMap) -> tuple[Any, bool]:
    """ Implementation of get_aliased_type with indication of whether there was a replacement.
    """
    origin_type = get_origin(type_) or type_
    aliased_origin: Any
    replaced = False

    # XXX: special case, replace typing.Union with types.UnionType
    if origin_type is Union:
        aliased_origin = UnionType
    elif _is_hashable(origin_type) and origin_type in alias_map:
        aliased_origin = alias_map[origin_type]
        replaced = True
    else:
        aliased_origin = origin_type

    type_args = get_args(type_)
    if not type_args:
        # normal case when there aren't type arguments, `tuple[()]` is kept as is
        return (aliased_origin if replaced else type_), replaced

    # use _get_aliased_type for recursion so we don't log multiple times when a replacement happens
    aliased_args_replaced = [
        (arg, False) if arg is Ellipsis else _get_aliased_type(arg, alias_map)
        for arg in type_args
    ]
    aliased_args, args_replaced = zip(*aliased_args_replaced)
    replaced |= any(args_replaced)

    # XXX: special case, UnionType can't be instantiated directly, this is the simplest way to do it
    if aliased_origin is UnionType:
        final_type = reduce(or_, aliased_args)  # = type_args[0] | type_args[1] | ... | type_args[N]
        assert isinstance(final_type, (UnionType, _UnionGenericAlias)), '| of types results in union'
        return final_type, replaced

    assert hasattr(aliased_origin, '__class_getitem__'), 'we must have an indexable class at this point'
    return aliased_origin[*aliased_args], replaced


def _is_hashable(obj: Any) -> bool:
    try:
        hash(obj)
    except TypeError:
        return False
    return True


def get_usable_origin_type(type_: Any, /, *, type_map: 'BonType.TypeMap', _verbose: bool = True) -> Any:
    """ Map a type annotation into a key that exists in `type_map.bon_types_map`.

    Aliases are applied first, then the origin is looked up, and finally structural kinds are recognized (codable
    classes, named tuples, dataclasses and enums). NewTypes that are not in the map are replaced by their supertype. A
    TypeError is raised if the type is not supported:

    >>> from collections import OrderedDict
    >>> from bonjson.bon_types import DEFAULT_TYPE_MAP
    >>> get_usable_origin_type(OrderedDict[str, int], type_map=DEFAULT_TYPE_MAP, _verbose=False)
    <class 'dict'>
    >>> get_usable_origin_type(int | None, type_map=DEFAULT_TYPE_MAP, _verbose=False)
    <class 'types.UnionType'>
    >>> try:
    ...     get_usable_origin_type(int | str, type_map=DEFAULT_TYPE_MAP, _verbose=False)
    ... except TypeError as e:
    ...     print(e)
    type int | str is not supported, the only supported unions are `T | None`
    """
    if isinstance(type_, str):
        raise TypeError('string annotations are not supported, resolve them with typing.get_type_hints first')

    aliased_type = get_aliased_type(type_, type_map.alias_map, _verbose=_verbose)
    origin = get_origin(aliased_type) or aliased_type
    bon_types_map = type_map.bon_types_map

    if origin is UnionType:
        args = get_args(aliased_type)
        if NoneType not in args or len(args) != 2:
            raise TypeError(f'type {pretty_type(type_)} is not supported, the only supported unions are `T | None`')

    if _is_hashable(origin) and origin in bon_types_map:
        return origin

    if Encodable in bon_types_map and is_subclass(origin, (Encodable, Decodable)):
        return Encodable

    if NamedTuple in bon_types_map and is_namedtuple_type(origin):
        return NamedTuple

    if Dataclass in bon_types_map and isinstance(origin, type) and is_dataclass(origin):
        return Dataclass

    if Enum in bon_types_map and is_subclass(origin, Enum):
        return Enum

    for base in getattr(origin, '__mro__', ())[1:]:
        if base in bon_types_map and base is not object:
            return base

    super_type = getattr(origin, '__supertype__', None)
    if super_type is not None:
        return get_usable_origin_type(super_type, type_map=type_map, _verbose=_verbose)

    raise TypeError(f'type {pretty_type(type_)} is not supported by any BonType class')


def unwrap_usable_type(type_: Any, usable_origin: Any) -> Any:
    """ NewTypes resolved through their supertype are replaced by the supertype, anything else is kept."""
    while getattr(type_, '__supertype__', None) is not None and type_ is not usable_origin:
        type_ = cast(Any, type_).__supertype__
    return type_
