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

import json
import sys
from argparse import ArgumentParser, Namespace

from structlog import get_logger

logger = get_logger()


def create_parser() -> ArgumentParser:
    from bonjson_cli.util import create_parser
    parser = create_parser()
    parser.add_argument('input', nargs='?', default='-', help='JSON file to read, `-` for stdin')
    parser.add_argument('--output', '-o', help='Where to write the BONJSON document, stdout by default')
    parser.add_argument('--hex', action='store_true', help='Write the document as a hex string')
    parser.add_argument('--chunk', type=int, help='Split strings longer than this many bytes into chunks')
    parser.add_argument('--sentinels', action='store_true',
                        help='Write non-finite floats as "Infinity", "-Infinity" and "NaN" strings')
    return parser


def read_input(path: str) -> str:
    if path == '-':
        return sys.stdin.read()
    with open(path, 'r', encoding='utf-8') as fp:
        return fp.read()


def write_output(data: bytes, args: Namespace) -> None:
    if args.hex:
        text = data.hex()
        if args.output:
            with open(args.output, 'w') as fp:
                fp.write(text + '\n')
        else:
            print(text)
    elif args.output:
        with open(args.output, 'wb') as fp:
            fp.write(data)
    else:
        sys.stdout.buffer.write(data)
        sys.stdout.flush()


def execute(args: Namespace) -> int:
    from bonjson import BonjsonEncoder, EncodingError
    from bonjson.value import from_python
    from bonjson_cli.util import float_policy

    try:
        document = json.loads(read_input(args.input))
    except json.JSONDecodeError as e:
        logger.error('invalid JSON input', input=args.input, error=str(e))
        return 1

    try:
        value = from_python(document)
    except (TypeError, ValueError) as e:
        logger.error('unsupported JSON value', input=args.input, error=str(e))
        return 1

    encoder = BonjsonEncoder(float_policy=float_policy(args.sentinels), max_string_chunk=args.chunk)
    try:
        data = encoder.encode(value)
    except EncodingError as e:
        logger.error('could not encode document', input=args.input, error=str(e))
        return 1
    logger.debug('document encoded', size=len(data))
    write_output(data, args)
    return 0


def main() -> int:
    parser = create_parser()
    args = parser.parse_args()
    return execute(args)
