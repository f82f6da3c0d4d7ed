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
Fixed-size numeric types. These are only annotations, at runtime the values are plain `int` and `float`, the codec
built for an annotation enforces the range:

>>> INT_WIDTHS[UInt8].check(255)
True
>>> INT_WIDTHS[UInt8].check(256)
False
>>> INT_WIDTHS[Int64].name
'Int64'
"""

from typing import NamedTuple, NewType

Int8 = NewType('Int8', int)
Int16 = NewType('Int16', int)
Int32 = NewType('Int32', int)
Int64 = NewType('Int64', int)
UInt8 = NewType('UInt8', int)
UInt16 = NewType('UInt16', int)
UInt32 = NewType('UInt32', int)
UInt64 = NewType('UInt64', int)

Float32 = NewType('Float32', float)


class IntWidth(NamedTuple):
    name: str
    signed: bool
    bits: int

    @property
    def min_value(self) -> int:
        return -(2**(self.bits - 1)) if self.signed else 0

    @property
    def max_value(self) -> int:
        return 2**(self.bits - 1) - 1 if self.signed else 2**self.bits - 1

    def check(self, value: int) -> bool:
        return self.min_value <= value <= self.max_value


INT_WIDTHS: dict[object, IntWidth] = {
    Int8: IntWidth('Int8', True, 8),
    Int16: IntWidth('Int16', True, 16),
    Int32: IntWidth('Int32', True, 32),
    Int64: IntWidth('Int64', True, 64),
    UInt8: IntWidth('UInt8', False, 8),
    UInt16: IntWidth('UInt16', False, 16),
    UInt32: IntWidth('UInt32', False, 32),
    UInt64: IntWidth('UInt64', False, 64),
}

INT64 = INT_WIDTHS[Int64]
UINT64 = INT_WIDTHS[UInt64]
