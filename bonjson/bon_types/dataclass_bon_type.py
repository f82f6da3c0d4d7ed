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
Dataclasses are written as objects keyed by field name, in field order:

>>> from dataclasses import dataclass, field
>>> from bonjson import decode, encode
>>> @dataclass
... class Person:
...     name: str
...     age: int | None
...     tags: list[str] = field(default_factory=list)
>>> data = encode(Person('Ana', None))
>>> decode(dict, data)
{'name': 'Ana', 'age': None, 'tags': []}

Missing names fall back to the field default, then to None for optional fields:

>>> decode(Person, encode({'name': 'Bo'}))
Person(name='Bo', age=None, tags=[])
"""

from __future__ import annotations

from dataclasses import MISSING, fields, is_dataclass
from typing import TYPE_CHECKING, Any, NamedTuple, TypeVar, get_type_hints

from typing_extensions import Self, override

from bonjson.bon_types.bon_type import BonType
from bonjson.bon_types.optional_bon_type import OptionalBonType
from bonjson.coding import Decoder, Encoder

if TYPE_CHECKING:
    from _typeshed import DataclassInstance

D = TypeVar('D', bound='DataclassInstance')


class FieldSpec(NamedTuple):
    bon_type: BonType
    # whether the constructor has a default for this field
    has_default: bool

    @property
    def is_optional(self) -> bool:
        return isinstance(self.bon_type, OptionalBonType)


def resolve_type_hints(type_: type) -> dict[str, Any]:
    """Annotations of a class with string annotations resolved, raises TypeError when they can't be resolved."""
    try:
        return get_type_hints(type_)
    except NameError as e:
        raise TypeError(f'could not resolve the annotations of {type_.__name__}: {e}') from e


def decode_fields(decoder: Decoder, specs: dict[str, FieldSpec]) -> dict[str, Any]:
    """ Read the fields of a keyed value into constructor arguments.

    Fields missing from the object are left out when they have a default, set to None when they are optional and
    reported as KeyNotFoundError otherwise.
    """
    keyed = decoder.keyed_container()
    kwargs: dict[str, Any] = {}
    for name, spec in specs.items():
        if keyed.contains(name) or not (spec.has_default or spec.is_optional):
            kwargs[name] = keyed.decode_with(spec.bon_type, name)
        elif not spec.has_default:
            kwargs[name] = None
    return kwargs


class DataclassBonType(BonType[D]):
    __slots__ = ('_fields', '_class')

    _fields: dict[str, FieldSpec]
    _class: type[D]

    def __init__(self, fields_: dict[str, FieldSpec], class_: type[D]):
        self._fields = fields_
        self._class = class_

    @override
    @classmethod
    def _from_type(cls, type_: type[D], /, *, type_map: BonType.TypeMap) -> Self:
        if not isinstance(type_, type) or not is_dataclass(type_):
            raise TypeError('expected a dataclass')
        hints = resolve_type_hints(type_)
        # XXX: the order is important, but `dict` and `fields` should have a stable order
        values: dict[str, FieldSpec] = {}
        for field_ in fields(type_):
            if not field_.init:
                continue
            has_default = field_.default is not MISSING or field_.default_factory is not MISSING
            values[field_.name] = FieldSpec(BonType.from_type(hints[field_.name], type_map=type_map), has_default)
        return cls(values, type_)

    @override
    def _check_value(self, value: D, /) -> None:
        if not isinstance(value, self._class):
            raise TypeError(f'expected {self._class.__name__} instance')

    @override
    def _encode(self, encoder: Encoder, value: D, /) -> None:
        keyed = encoder.keyed_container()
        for field_name, spec in self._fields.items():
            keyed.encode_with(spec.bon_type, getattr(value, field_name), field_name)

    @override
    def _decode(self, decoder: Decoder, /) -> D:
        return self._class(**decode_fields(decoder, self._fields))
