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
    parser.add_argument('input', nargs='?', default='-', help='BONJSON file to read, `-` for stdin')
    parser.add_argument('--indent', type=int, help='Indent the JSON output by this many spaces')
    parser.add_argument('--sentinels', action='store_true',
                        help='Print non-finite floats as "Infinity", "-Infinity" and "NaN" strings')
    parser.add_argument('--max-depth', type=int, help='Maximum container depth accepted')
    return parser


def read_input(path: str) -> bytes:
    if path == '-':
        return sys.stdin.buffer.read()
    with open(path, 'rb') as fp:
        return fp.read()


def execute(args: Namespace) -> int:
    from bonjson import BonjsonDecoder, DecodingError
    from bonjson_cli.util import float_policy, value_to_json

    decoder = BonjsonDecoder() if args.max_depth is None else BonjsonDecoder(max_depth=args.max_depth)
    data = read_input(args.input)
    try:
        value = decoder.decode_value(data)
    except DecodingError as e:
        logger.error('could not decode document', input=args.input, error=str(e))
        return 1
    print(json.dumps(value_to_json(value, float_policy(args.sentinels)), indent=args.indent))
    return 0


def main() -> int:
    parser = create_parser()
    args = parser.parse_args()
    return execute(args)
