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
from typing import TYPE_CHECKING, Any, Generic, NamedTuple, TypeVar, final

from typing_extensions import Self

from bonjson.bon_types.utils import (
    TypeAliasMap,
    TypeToBonTypeMap,
    get_aliased_type,
    get_usable_origin_type,
    unwrap_usable_type,
)
from bonjson.exception import InvalidValueError

if TYPE_CHECKING:
    from bonjson.coding import Decoder, Encoder

T = TypeVar('T')


class BonType(ABC, Generic[T]):
    """ This class is used to model a type with a known type signature and how it maps to and from generic values.

    Instances are built once per annotation (see `bonjson.bon_types.make_bon_type`) and are then used to drive the
    encoder and decoder containers, compound types hold the BonType of their members.
    """

    class TypeMap(NamedTuple):
        alias_map: TypeAliasMap
        bon_types_map: TypeToBonTypeMap

    # XXX: subclasses must override this if they need any properties
    __slots__ = ()

    @final
    @staticmethod
    def from_type(type_: Any, /, *, type_map: TypeMap) -> BonType:
        """ Instantiate a BonType instance from a type signature using the given maps.

        A `bon_types_map` associates concrete types to concrete BonType classes, while an `alias_map` associates
        types with substitute types to use instead.
        """
        usable_origin = get_usable_origin_type(type_, type_map=type_map)
        bon_type = type_map.bon_types_map[usable_origin]
        actual_type = unwrap_usable_type(type_, usable_origin)
        # XXX: first we try to create the bon_type without making an alias, this ensures that an invalid annotation
        #      would not be accepted
        _ = bon_type._from_type(actual_type, type_map=type_map)
        # XXX: then we create the actual bon_type with type-alias
        aliased_type = get_aliased_type(actual_type, type_map.alias_map)
        return bon_type._from_type(aliased_type, type_map=type_map)

    @classmethod
    def _from_type(cls, type_: Any, /, *, type_map: TypeMap) -> Self:
        """ Instantiate a BonType instance from a type signature.

        The implementation is expected to inspect the given type's origin and args to check for compatibility and to
        use `BonType.from_type`, forwarding the given `type_map`, for the types of its members.
        """
        # XXX: a BonType that is only meant for local use does not need to implement _from_type
        raise TypeError(f'{cls} is not compatible with use in a BonType.TypeMap')

    @final
    def encode(self, encoder: Encoder, value: T, /) -> None:
        """ Write the value through the encoder, the value is checked first (shallow check only).
        """
        # XXX: subclasses must implement BonType._encode, not BonType.encode
        try:
            self._check_value(value)
        except (TypeError, ValueError) as e:
            raise InvalidValueError(value, str(e), encoder.coding_path) from e
        self._encode(encoder, value)

    @final
    def decode(self, decoder: Decoder, /) -> T:
        """ Read a value out of the decoder.
        """
        # XXX: subclasses must implement BonType._decode, not BonType.decode
        return self._decode(decoder)

    @abstractmethod
    def _check_value(self, value: T, /) -> None:
        """ Raise TypeError (or ValueError) if the value can't be written by this BonType.

        Only the value itself is checked, compound types check their members when they are written.
        """
        raise NotImplementedError

    @abstractmethod
    def _encode(self, encoder: Encoder, value: T, /) -> None:
        raise NotImplementedError

    @abstractmethod
    def _decode(self, decoder: Decoder, /) -> T:
        raise NotImplementedError
