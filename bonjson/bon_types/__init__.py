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

from collections import OrderedDict, abc, deque
from datetime import datetime
from decimal import Decimal
from enum import Enum
from functools import cache
from types import NoneType, UnionType
from typing import Any, NamedTuple, TypeVar, Union

from pydantic import AnyUrl

from bonjson.bon_types.any_bon_type import AnyBonType, ValueBonType
from bonjson.bon_types.bon_type import BonType
from bonjson.bon_types.bool_bon_type import BoolBonType
from bonjson.bon_types.bytes_bon_type import BytesBonType
from bonjson.bon_types.codable_bon_type import CodableBonType
from bonjson.bon_types.collection_bon_type import DequeBonType, FrozenSetBonType, ListBonType, SetBonType
from bonjson.bon_types.dataclass_bon_type import DataclassBonType
from bonjson.bon_types.date_bon_type import DateBonType
from bonjson.bon_types.decimal_bon_type import DecimalBonType
from bonjson.bon_types.enum_bon_type import EnumBonType
from bonjson.bon_types.float_bon_type import Float32BonType, FloatBonType
from bonjson.bon_types.int_bon_type import IntBonType, SizedIntBonType
from bonjson.bon_types.map_bon_type import DictBonType
from bonjson.bon_types.namedtuple_bon_type import NamedTupleBonType
from bonjson.bon_types.null_bon_type import NullBonType
from bonjson.bon_types.optional_bon_type import OptionalBonType
from bonjson.bon_types.str_bon_type import StrBonType
from bonjson.bon_types.tuple_bon_type import TupleBonType
from bonjson.bon_types.url_bon_type import UrlBonType
from bonjson.bon_types.utils import Dataclass, TypeAliasMap, TypeToBonTypeMap, is_namedtuple_type
from bonjson.codable import Encodable
from bonjson.types import INT_WIDTHS, Float32
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

__all__ = [
    'DEFAULT_TYPE_ALIAS_MAP',
    'DEFAULT_TYPE_MAP',
    'DEFAULT_TYPE_TO_BON_TYPE_MAP',
    'AnyBonType',
    'BonType',
    'BoolBonType',
    'BytesBonType',
    'CodableBonType',
    'DataclassBonType',
    'DateBonType',
    'DecimalBonType',
    'DequeBonType',
    'DictBonType',
    'EnumBonType',
    'Float32BonType',
    'FloatBonType',
    'FrozenSetBonType',
    'IntBonType',
    'ListBonType',
    'NamedTupleBonType',
    'NullBonType',
    'OptionalBonType',
    'SetBonType',
    'SizedIntBonType',
    'StrBonType',
    'TupleBonType',
    'TypeAliasMap',
    'TypeToBonTypeMap',
    'UrlBonType',
    'ValueBonType',
    'bon_type_for_value',
    'make_bon_type',
]

T = TypeVar('T')

DEFAULT_TYPE_ALIAS_MAP: TypeAliasMap = {
    # XXX: technically types.UnionType is not a type, so mypy complains, but for our purposes it is a type
    Union: UnionType,  # type: ignore[dict-item]
    OrderedDict: dict,
    bytearray: bytes,
    memoryview: bytes,
    abc.Sequence: list,
    abc.MutableSequence: list,
    abc.Mapping: dict,
    abc.MutableMapping: dict,
    abc.Set: set,
    abc.MutableSet: set,
}

# Mapping between types and BonType classes.
DEFAULT_TYPE_TO_BON_TYPE_MAP: TypeToBonTypeMap = {
    # builtin types:
    # XXX: ignored dict-item because technically None is not a type, type[None]/NoneType is
    None: NullBonType,  # type: ignore[dict-item]
    NoneType: NullBonType,
    bool: BoolBonType,
    bytes: BytesBonType,
    dict: DictBonType,
    float: FloatBonType,
    frozenset: FrozenSetBonType,
    int: IntBonType,
    list: ListBonType,
    set: SetBonType,
    str: StrBonType,
    tuple: TupleBonType,
    # other Python types:
    # XXX: ignored dict-item because Union is not considered a type, so mypy fails it, but it works for our case
    Union: OptionalBonType,  # type: ignore[dict-item]
    UnionType: OptionalBonType,
    Any: AnyBonType,
    NamedTuple: NamedTupleBonType,
    Dataclass: DataclassBonType,
    Enum: EnumBonType,
    Encodable: CodableBonType,
    datetime: DateBonType,
    deque: DequeBonType,
    Decimal: DecimalBonType,
    AnyUrl: UrlBonType,
    # bonjson types:
    **{int_type: SizedIntBonType for int_type in INT_WIDTHS},
    Float32: Float32BonType,
    # XXX: value classes are dataclasses too, they must be listed explicitly so they aren't treated as such
    **{
        value_type: ValueBonType
        for value_type in (
            BonjsonValue,
            NullValue,
            BoolValue,
            SignedIntegerValue,
            UnsignedIntegerValue,
            FloatValue,
            BigNumberValue,
            StringValue,
            BinaryValue,
            ArrayValue,
            ObjectValue,
        )
    },
}

DEFAULT_TYPE_MAP = BonType.TypeMap(DEFAULT_TYPE_ALIAS_MAP, DEFAULT_TYPE_TO_BON_TYPE_MAP)


@cache
def make_bon_type(type_: type[T], /) -> BonType[T]:
    """ Like BonType.from_type, but with the default maps, results are cached.

    If you need to customize the mapping use `BonType.from_type` instead.
    """
    return BonType.from_type(type_, type_map=DEFAULT_TYPE_MAP)


def bon_type_for_value(value: Any, /) -> BonType:
    """ BonType for the runtime type of a value, raises TypeError when the value is not supported.

    Containers are given `Any` members, so each member is dispatched on its own runtime type:

    >>> bon_type_for_value([1, 'a']) is make_bon_type(list[Any])
    True
    >>> bon_type_for_value({1: 'a'}) is make_bon_type(dict[int, Any])
    True
    """
    type_ = type(value)
    if isinstance(value, abc.Mapping):
        key_types = {type(k) for k in value}
        if len(key_types) > 1:
            raise TypeError('all keys of a mapping must have the same type')
        key_type = key_types.pop() if key_types else str
        return make_bon_type(dict[key_type, Any])  # type: ignore[valid-type]
    if is_namedtuple_type(type_):
        return make_bon_type(type_)
    if isinstance(value, tuple):
        return make_bon_type(tuple[Any, ...])
    for collection_type in (list, frozenset, set, deque):
        if isinstance(value, collection_type):
            return make_bon_type(collection_type[Any])  # type: ignore[index]
    return make_bon_type(type_)
