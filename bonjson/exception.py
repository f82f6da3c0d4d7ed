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
All errors raised by encoding and decoding derive from BonjsonError. Each error knows the coding path where it
happened, `path` gives the same information as plain names and indexes:

>>> from bonjson.coding_key import StrKey
>>> e = KeyNotFoundError(StrKey('age'), (StrKey('person'),), "key 'age' not found")
>>> e.path
['person', 'age']
>>> str(e)
"Key 'age' not found at person.age: key 'age' not found"
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from bonjson.coding_key import CodingKey, render_path
from bonjson.engine.status import DecodeStatus, EncodeStatus


class BonjsonError(Exception):
    """Base class for exceptions in bonjson."""

    def __init__(self, debug_description: str, coding_path: Iterable[CodingKey] = ()) -> None:
        self.debug_description = debug_description
        self.coding_path: tuple[CodingKey, ...] = tuple(coding_path)
        super().__init__(debug_description)

    @property
    def path(self) -> list[str | int]:
        return [key.path_item for key in self.coding_path]

    def _location(self) -> str:
        return render_path(self.coding_path)

    def __str__(self) -> str:
        return f'{self.debug_description} at {self._location()}'


class EncodingError(BonjsonError):
    """Raised when a value cannot be encoded."""


class InvalidValueError(EncodingError):
    """Raised when a value (or the way it was written) cannot be represented."""

    def __init__(self, value: Any, debug_description: str, coding_path: Iterable[CodingKey] = ()) -> None:
        self.value = value
        super().__init__(debug_description, coding_path)

    def __str__(self) -> str:
        return f'Invalid value {self.value!r} at {self._location()}: {self.debug_description}'


class EncoderError(EncodingError):
    """Raised when the engine refuses an operation."""

    def __init__(self, status: EncodeStatus, coding_path: Iterable[CodingKey] = ()) -> None:
        self.status = status
        super().__init__(status.describe(), coding_path)

    def __str__(self) -> str:
        return f'Encoder error at {self._location()}: {self.debug_description}'


class DecodingError(BonjsonError):
    """Raised when a document cannot be decoded into the requested type."""


class TypeMismatchError(DecodingError):
    """Raised when the value found is not of the kind the requested type needs."""

    def __init__(self, expected: str, debug_description: str, coding_path: Iterable[CodingKey] = ()) -> None:
        self.expected = expected
        super().__init__(debug_description, coding_path)

    def __str__(self) -> str:
        return f'Type mismatch for {self.expected} at {self._location()}: {self.debug_description}'


class ValueNotFoundError(DecodingError):
    """Raised when a value is missing, for example when reading past the end of an array."""

    def __init__(self, expected: str, debug_description: str, coding_path: Iterable[CodingKey] = ()) -> None:
        self.expected = expected
        super().__init__(debug_description, coding_path)

    def __str__(self) -> str:
        return f'Value not found for {self.expected} at {self._location()}: {self.debug_description}'


class KeyNotFoundError(DecodingError):
    """Raised when an object has no pair with the requested name, the coding path ends with the missing key."""

    def __init__(self, key: CodingKey, coding_path: Iterable[CodingKey], debug_description: str) -> None:
        self.key = key
        super().__init__(debug_description, (*coding_path, key))

    def __str__(self) -> str:
        return f"Key '{self.key.string_value}' not found at {self._location()}: {self.debug_description}"


class DataCorruptedError(DecodingError):
    """Raised when a value is present but is not valid, like a number that does not fit the requested type."""

    def __str__(self) -> str:
        return f'Data corrupted at {self._location()}: {self.debug_description}'


class DecoderError(DecodingError):
    """Raised when the engine rejects the document."""

    def __init__(self, status: DecodeStatus) -> None:
        self.status = status
        super().__init__(status.describe())

    def __str__(self) -> str:
        return f'Decoder error: {self.debug_description}'
