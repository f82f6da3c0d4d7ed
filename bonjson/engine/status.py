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

from enum import IntEnum, unique


@unique
class EncodeStatus(IntEnum):
    """Result of every primitive call on an EncodeContext."""
    OK = 0
    EXPECTED_OBJECT_NAME = 1
    EXPECTED_OBJECT_VALUE = 2
    CLOSED_TOO_MANY_CONTAINERS = 3
    CONTAINERS_ARE_STILL_OPEN = 4
    VALUE_OUT_OF_RANGE = 5
    INVALID_DATA = 6
    MAX_DEPTH_EXCEEDED = 7
    MULTIPLE_TOP_LEVEL_VALUES = 8
    ALREADY_ENDED = 9

    def describe(self) -> str:
        return _ENCODE_DESCRIPTIONS[self]


@unique
class DecodeStatus(IntEnum):
    """Result of a decode run, callbacks also return one of these to continue (OK) or abort."""
    OK = 0
    INCOMPLETE = 1
    UNCLOSED_CONTAINERS = 2
    UNBALANCED_CONTAINERS = 3
    INVALID_DATA = 4
    INVALID_UTF8 = 5
    MAX_DEPTH_EXCEEDED = 6
    TRAILING_DATA = 7
    VALUE_OUT_OF_RANGE = 8
    COULD_NOT_PROCESS_DATA = 9

    def describe(self) -> str:
        return _DECODE_DESCRIPTIONS[self]


_ENCODE_DESCRIPTIONS: dict[EncodeStatus, str] = {
    EncodeStatus.OK: 'successful completion',
    EncodeStatus.EXPECTED_OBJECT_NAME: 'expected an object element name, but got a non-string value',
    EncodeStatus.EXPECTED_OBJECT_VALUE: 'attempted to close an object while it is expecting a value for the last name',
    EncodeStatus.CLOSED_TOO_MANY_CONTAINERS: 'attempted to close more containers than there are open',
    EncodeStatus.CONTAINERS_ARE_STILL_OPEN: 'attempted to end the encoding while there are still open containers',
    EncodeStatus.VALUE_OUT_OF_RANGE: 'value is outside of the range supported by this encoding',
    EncodeStatus.INVALID_DATA: 'value cannot be represented in this encoding',
    EncodeStatus.MAX_DEPTH_EXCEEDED: 'maximum container depth exceeded',
    EncodeStatus.MULTIPLE_TOP_LEVEL_VALUES: 'only one top-level value can be encoded',
    EncodeStatus.ALREADY_ENDED: 'the encoding has already ended',
}

_DECODE_DESCRIPTIONS: dict[DecodeStatus, str] = {
    DecodeStatus.OK: 'successful completion',
    DecodeStatus.INCOMPLETE: 'the document ended prematurely',
    DecodeStatus.UNCLOSED_CONTAINERS: 'not all containers have been closed yet',
    DecodeStatus.UNBALANCED_CONTAINERS: 'a container was closed that was never opened',
    DecodeStatus.INVALID_DATA: 'the document contains invalid data',
    DecodeStatus.INVALID_UTF8: 'a string contains an invalid utf-8 sequence',
    DecodeStatus.MAX_DEPTH_EXCEEDED: 'maximum container depth exceeded',
    DecodeStatus.TRAILING_DATA: 'there is data after the end of the top-level value',
    DecodeStatus.VALUE_OUT_OF_RANGE: 'a value is outside of the range supported by this encoding',
    DecodeStatus.COULD_NOT_PROCESS_DATA: 'a callback could not process the data',
}
