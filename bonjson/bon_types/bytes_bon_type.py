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

from typing_extensions import Self, override

from bonjson.bon_types.bon_type import BonType
from bonjson.coding import Decoder, Encoder


class BytesBonType(BonType[bytes]):
    """ Represents binary blobs, how they are written is up to the blob policy in use.
    """

    __slots__ = ()

    @override
    @classmethod
    def _from_type(cls, type_: Any, /, *, type_map: BonType.TypeMap) -> Self:
        if type_ not in (bytes, bytearray, memoryview):
            raise TypeError('expected bytes-like type')
        return cls()

    @override
    def _check_value(self, value: bytes, /) -> None:
        if not isinstance(value, (bytes, bytearray, memoryview)):
            raise TypeError('expected bytes-like')

    @override
    def _encode(self, encoder: Encoder, value: bytes, /) -> None:
        encoder.config.blob_policy.encode_blob(bytes(value), encoder)

    @override
    def _decode(self, decoder: Decoder, /) -> bytes:
        return decoder.config.blob_policy.decode_blob(decoder)
