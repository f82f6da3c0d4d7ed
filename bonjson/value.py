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
Generic value model, every document decodes into a tree of these values before being mapped into Python types.

>>> obj = ObjectValue((('a', SignedIntegerValue(1)), ('b', NullValue()), ('a', StringValue('x'))))
>>> obj.get('a')
SignedIntegerValue(value=1)
>>> obj.keys()
['a', 'b', 'a']
>>> obj.to_python()
{'a': 1, 'b': None}
>>> from_python({'n': [1.5, -2, 2**64 - 1]}) == ObjectValue((
...     ('n', ArrayValue((FloatValue(1.5), SignedIntegerValue(-2), UnsignedIntegerValue(2**64 - 1)))),
... ))
True
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, ClassVar, TypeAlias

from bonjson.engine.layout import INT64_MAX, INT64_MIN, UINT64_MAX

PythonValue: TypeAlias = dict | list | str | int | float | bool | bytes | Decimal | None


@dataclass(frozen=True, slots=True)
class BonjsonValue(ABC):
    """Base class of every generic value."""

    # short name used in error messages
    kind: ClassVar[str] = 'value'

    @property
    def is_null(self) -> bool:
        return False

    @abstractmethod
    def to_python(self) -> PythonValue:
        raise NotImplementedError

    def describe(self) -> str:
        """Short description used when reporting type mismatches."""
        return f'{self.kind} {self.to_python()!r}'


@dataclass(frozen=True, slots=True)
class NullValue(BonjsonValue):
    kind: ClassVar[str] = 'null'

    @property
    def is_null(self) -> bool:
        return True

    def to_python(self) -> None:
        return None

    def describe(self) -> str:
        return 'null'


@dataclass(frozen=True, slots=True)
class BoolValue(BonjsonValue):
    kind: ClassVar[str] = 'boolean'
    value: bool

    def to_python(self) -> bool:
        return self.value


@dataclass(frozen=True, slots=True)
class SignedIntegerValue(BonjsonValue):
    kind: ClassVar[str] = 'signed integer'
    value: int

    def to_python(self) -> int:
        return self.value


@dataclass(frozen=True, slots=True)
class UnsignedIntegerValue(BonjsonValue):
    kind: ClassVar[str] = 'unsigned integer'
    value: int

    def to_python(self) -> int:
        return self.value


@dataclass(frozen=True, slots=True)
class FloatValue(BonjsonValue):
    kind: ClassVar[str] = 'float'
    value: float

    def to_python(self) -> float:
        return self.value


@dataclass(frozen=True, slots=True)
class BigNumberValue(BonjsonValue):
    """Arbitrary precision decimal: (-1 if is_negative else 1) * significand * 10**exponent."""
    kind: ClassVar[str] = 'big number'
    significand: int
    exponent: int
    is_negative: bool

    def to_python(self) -> Decimal:
        return self.to_decimal()

    def to_decimal(self) -> Decimal:
        return Decimal((1 if self.is_negative else 0, tuple(int(d) for d in str(self.significand)), self.exponent))

    def to_float(self) -> float:
        """Nearest float, out of range exponents give an infinity or a zero of the same sign."""
        return float(self.to_decimal())

    @classmethod
    def from_decimal(cls, value: Decimal) -> BigNumberValue:
        """Convert a finite Decimal, raises ValueError when it can't be represented."""
        if not value.is_finite():
            raise ValueError(f'{value} is not finite')
        sign, digits, exponent = value.as_tuple()
        assert isinstance(exponent, int)
        significand = int(''.join(map(str, digits))) if digits else 0
        # drop trailing zeros so more values fit the significand
        while significand and significand % 10 == 0 and significand > UINT64_MAX:
            significand //= 10
            exponent += 1
        if significand > UINT64_MAX:
            raise ValueError(f'{value} has too many significant digits')
        return cls(significand, exponent, bool(sign))


@dataclass(frozen=True, slots=True)
class StringValue(BonjsonValue):
    kind: ClassVar[str] = 'string'
    value: str

    def to_python(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class BinaryValue(BonjsonValue):
    kind: ClassVar[str] = 'binary'
    value: bytes

    def to_python(self) -> bytes:
        return self.value

    def describe(self) -> str:
        return f'binary of {len(self.value)} bytes'


@dataclass(frozen=True, slots=True)
class ArrayValue(BonjsonValue):
    kind: ClassVar[str] = 'array'
    elements: tuple[BonjsonValue, ...] = ()

    def __len__(self) -> int:
        return len(self.elements)

    def __iter__(self) -> Iterator[BonjsonValue]:
        return iter(self.elements)

    def to_python(self) -> list:
        return [element.to_python() for element in self.elements]

    def describe(self) -> str:
        return f'array of {len(self.elements)} elements'


@dataclass(frozen=True, slots=True)
class ObjectValue(BonjsonValue):
    """Name/value pairs in document order, duplicated names are kept."""
    kind: ClassVar[str] = 'object'
    pairs: tuple[tuple[str, BonjsonValue], ...] = ()

    def __len__(self) -> int:
        return len(self.pairs)

    def get(self, key: str) -> BonjsonValue | None:
        """Value of the first pair with the given name."""
        for name, value in self.pairs:
            if name == key:
                return value
        return None

    def __contains__(self, key: object) -> bool:
        return any(name == key for name, _ in self.pairs)

    def keys(self) -> list[str]:
        return [name for name, _ in self.pairs]

    def to_python(self) -> dict:
        result: dict[str, Any] = {}
        for name, value in self.pairs:
            if name not in result:
                result[name] = value.to_python()
        return result

    def describe(self) -> str:
        return f'object of {len(self.pairs)} pairs'


def from_python(value: Any) -> BonjsonValue:
    """Build a generic value from natural Python values, raises TypeError or ValueError on unsupported values."""
    match value:
        case BonjsonValue():
            return value
        case None:
            return NullValue()
        case bool():
            return BoolValue(value)
        case int():
            if INT64_MIN <= value <= INT64_MAX:
                return SignedIntegerValue(value)
            if 0 <= value <= UINT64_MAX:
                return UnsignedIntegerValue(value)
            raise ValueError(f'integer {value} is outside of the 64-bit range')
        case float():
            return FloatValue(value)
        case Decimal():
            return BigNumberValue.from_decimal(value)
        case str():
            return StringValue(value)
        case bytes() | bytearray() | memoryview():
            return BinaryValue(bytes(value))
        case Mapping():
            pairs = []
            for k, v in value.items():
                if not isinstance(k, str):
                    raise TypeError(f'object names must be str, got {type(k).__name__}')
                pairs.append((k, from_python(v)))
            return ObjectValue(tuple(pairs))
        case list() | tuple():
            return ArrayValue(tuple(from_python(i) for i in value))
        case _:
            raise TypeError(f'{type(value).__name__} has no generic value representation')
