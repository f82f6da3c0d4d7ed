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

from typing import Any

from pydantic import AnyUrl, TypeAdapter, ValidationError
from typing_extensions import Self, override

from bonjson.bon_types.bon_type import BonType
from bonjson.coding import Decoder, Encoder
from bonjson.exception import DataCorruptedError
from bonjson.utils.typing import is_subclass


class UrlBonType(BonType[AnyUrl]):
    """ Represents pydantic URL values (`AnyUrl` and its subclasses), written as their string form.
    """

    __slots__ = ('_url_type', '_adapter')

    _url_type: type[AnyUrl]
    _adapter: TypeAdapter

    def __init__(self, url_type: type[AnyUrl]) -> None:
        self._url_type = url_type
        self._adapter = TypeAdapter(url_type)

    @override
    @classmethod
    def _from_type(cls, type_: Any, /, *, type_map: BonType.TypeMap) -> Self:
        if not is_subclass(type_, AnyUrl):
            raise TypeError('expected AnyUrl type')
        return cls(type_)

    @override
    def _check_value(self, value: AnyUrl, /) -> None:
        if not isinstance(value, AnyUrl):
            raise TypeError('expected AnyUrl')

    @override
    def _encode(self, encoder: Encoder, value: AnyUrl, /) -> None:
        encoder.single_value_container().encode_str(str(value))

    @override
    def _decode(self, decoder: Decoder, /) -> AnyUrl:
        text = decoder.single_value_container().decode_str()
        try:
            return self._adapter.validate_python(text)
        except ValidationError as e:
            raise DataCorruptedError(f'Invalid URL string: {text}', decoder.coding_path) from e
