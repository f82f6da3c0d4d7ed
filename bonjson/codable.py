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
Classes can take full control of how they are written and read by implementing these interfaces, they are driven
through the same containers the builtin codecs use:

>>> from bonjson import decode, encode
>>> class Point(Codable):
...     def __init__(self, x: int, y: int) -> None:
...         self.x, self.y = x, y
...     def encode_to(self, encoder):
...         unkeyed = encoder.unkeyed_container()
...         unkeyed.encode_int(self.x)
...         unkeyed.encode_int(self.y)
...     @classmethod
...     def decode_from(cls, decoder):
...         unkeyed = decoder.unkeyed_container()
...         return cls(unkeyed.decode_int(), unkeyed.decode_int())
>>> encode(Point(1, 2)).hex()
'0b81820d'
>>> vars(decode(Point, bytes.fromhex('0b81820d')))
{'x': 1, 'y': 2}
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from typing_extensions import Self

if TYPE_CHECKING:
    from bonjson.coding import Decoder, Encoder


class Encodable(ABC):
    __slots__ = ()

    @abstractmethod
    def encode_to(self, encoder: Encoder) -> None:
        """Write this instance through one of the encoder's containers."""
        raise NotImplementedError


class Decodable(ABC):
    __slots__ = ()

    @classmethod
    @abstractmethod
    def decode_from(cls, decoder: Decoder) -> Self:
        """Build an instance out of the decoder's value."""
        raise NotImplementedError


class Codable(Encodable, Decodable):
    __slots__ = ()
