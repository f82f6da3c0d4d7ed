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
Abstract coding protocol. Codecs and policies only ever talk to these interfaces, the concrete implementations live in
`bonjson.encoder` and `bonjson.decoder`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from bonjson.coding_key import CodingKey

if TYPE_CHECKING:
    from bonjson.decoder import (
        BonjsonDecoder,
        KeyedDecodingContainer,
        SingleValueDecodingContainer,
        UnkeyedDecodingContainer,
    )
    from bonjson.encoder import (
        BonjsonEncoder,
        KeyedEncodingContainer,
        SingleValueEncodingContainer,
        UnkeyedEncodingContainer,
    )


class Encoder(ABC):
    """Receives a single value, which must be written through exactly one kind of container."""

    __slots__ = ()

    @property
    @abstractmethod
    def coding_path(self) -> tuple[CodingKey, ...]:
        raise NotImplementedError

    @property
    @abstractmethod
    def user_info(self) -> Mapping[str, Any]:
        raise NotImplementedError

    @property
    @abstractmethod
    def config(self) -> BonjsonEncoder:
        """The configuration this value is written with, policies are read from here."""
        raise NotImplementedError

    @abstractmethod
    def keyed_container(self) -> KeyedEncodingContainer:
        """Write the value as an object."""
        raise NotImplementedError

    @abstractmethod
    def unkeyed_container(self) -> UnkeyedEncodingContainer:
        """Write the value as an array."""
        raise NotImplementedError

    @abstractmethod
    def single_value_container(self) -> SingleValueEncodingContainer:
        """Write the value as a single primitive."""
        raise NotImplementedError


class Decoder(ABC):
    """Gives access to a single decoded value through the view that matches the expected shape."""

    __slots__ = ()

    @property
    @abstractmethod
    def coding_path(self) -> tuple[CodingKey, ...]:
        raise NotImplementedError

    @property
    @abstractmethod
    def user_info(self) -> Mapping[str, Any]:
        raise NotImplementedError

    @property
    @abstractmethod
    def config(self) -> BonjsonDecoder:
        raise NotImplementedError

    @abstractmethod
    def keyed_container(self) -> KeyedDecodingContainer:
        """Read the value as an object, raises TypeMismatchError otherwise."""
        raise NotImplementedError

    @abstractmethod
    def unkeyed_container(self) -> UnkeyedDecodingContainer:
        """Read the value as an array, raises TypeMismatchError otherwise."""
        raise NotImplementedError

    @abstractmethod
    def single_value_container(self) -> SingleValueDecodingContainer:
        raise NotImplementedError
