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

import os
import tempfile
import unittest
from contextlib import redirect_stdout
from io import StringIO

from structlog.testing import capture_logs

from bonjson import decode
from bonjson_cli import from_json


def _errors(logs: list[dict]) -> list[str]:
    return [entry['event'] for entry in logs if entry['log_level'] == 'error']


class FromJsonTest(unittest.TestCase):
    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmpdir.cleanup)

    def _write(self, text: str) -> str:
        path = os.path.join(self.tmpdir.name, 'input.json')
        with open(path, 'w', encoding='utf-8') as fp:
            fp.write(text)
        return path

    def _run(self, text: str, *argv: str) -> tuple[int, str]:
        args = from_json.create_parser().parse_args([self._write(text), *argv])
        f = StringIO()
        with redirect_stdout(f):
            code = from_json.execute(args)
        return code, f.getvalue()

    def test_hex(self):
        code, output = self._run('{"a": 1}', '--hex')
        self.assertEqual(code, 0)
        self.assertEqual(output.strip(), '0c070161810d')

    def test_output_file(self):
        out = os.path.join(self.tmpdir.name, 'out.bonjson')
        code, output = self._run('{"name": "Test", "values": [1, 2.5, null]}', '--output', out)

        self.assertEqual(code, 0)
        self.assertEqual(output, '')
        with open(out, 'rb') as fp:
            data = fp.read()
        self.assertEqual(decode(dict, data), {'name': 'Test', 'values': [1, 2.5, None]})

    def test_hex_output_file(self):
        out = os.path.join(self.tmpdir.name, 'out.txt')
        code, _ = self._run('[true]', '--hex', '-o', out)

        self.assertEqual(code, 0)
        with open(out) as fp:
            self.assertEqual(fp.read(), '0b020d\n')

    def test_chunk(self):
        code, output = self._run('"abcdefghij"', '--hex', '--chunk', '4')
        self.assertEqual(code, 0)
        self.assertEqual(output.strip(), '080461626364080465666768' + '0902696a')

    def test_sentinels(self):
        code, output = self._run('[Infinity]', '--hex', '--sentinels')
        self.assertEqual(code, 0)
        self.assertEqual(output.strip(), '0b0708496e66696e6974790d')

    def test_invalid_json(self):
        with capture_logs() as logs:
            code, output = self._run('{"a": ', '--hex')
        self.assertEqual(code, 1)
        self.assertEqual(output, '')
        self.assertEqual(_errors(logs), ['invalid JSON input'])

    def test_integer_out_of_range(self):
        with capture_logs() as logs:
            code, _ = self._run(str(2**64), '--hex')
        self.assertEqual(code, 1)
        self.assertEqual(_errors(logs), ['unsupported JSON value'])

    def test_non_finite_without_sentinels(self):
        with capture_logs() as logs:
            code, output = self._run('[Infinity]', '--hex')
        self.assertEqual(code, 1)
        self.assertEqual(output, '')
        self.assertEqual(_errors(logs), ['could not encode document'])
