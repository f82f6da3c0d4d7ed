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

from typing import Any, TypeVar

from typing_extensions import Self, override

from bonjson.bon_types.bon_type import BonType
from bonjson.bon_types.dataclass_bon_type import FieldSpec, decode_fields, resolve_type_hints
from bonjson.bon_types.utils import is_namedtuple_type
from bonjson.coding import Decoder, Encoder

N = TypeVar('N', bound=tuple)


class NamedTupleBonType(BonType[N]):
    """ Represents named tuples, written as objects keyed by field name like dataclasses.

    Fields without annotations (from `collections.namedtuple`) accept any value.
    """

    __slots__ = ('_fields', '_actual_type')

    _fields: dict[str, FieldSpec]
    _actual_type: type[N]

    def __init__(self, namedtuple: type[N], fields_: dict[str, FieldSpec]) -> None:
        self._actual_type = namedtuple
        self._fields = fields_

    @override
    @classmethod
    def _from_type(cls, type_: type[N], /, *, type_map: BonType.TypeMap) -> Self:
        if not is_namedtuple_type(type_):
            raise TypeError('expected NamedTuple type')
        hints = resolve_type_hints(type_)
        defaults = getattr(type_, '_field_defaults', {})
        fields_: dict[str, FieldSpec] = {}
        for field_name in type_._fields:  # type: ignore[attr-defined]
            field_type = hints.get(field_name, Any)
            fields_[field_name] = FieldSpec(BonType.from_type(field_type, type_map=type_map), field_name in defaults)
        return cls(type_, fields_)

    @override
    def _check_value(self, value: N, /) -> None:
        if not isinstance(value, tuple):
            raise TypeError('expected tuple or namedtuple')
        if len(value) != len(self._fields):
            raise TypeError('wrong number of arguments')

    @override
    def _encode(self, encoder: Encoder, value: N, /) -> None:
        keyed = encoder.keyed_container()
        for (field_name, spec), item in zip(self._fields.items(), value):
            keyed.encode_with(spec.bon_type, item, field_name)

    @override
    def _decode(self, decoder: Decoder, /) -> N:
        return self._actual_type(**decode_fields(decoder, self._fields))
