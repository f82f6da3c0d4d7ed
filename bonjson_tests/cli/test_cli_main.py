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

import sys
import unittest
from contextlib import redirect_stdout
from io import StringIO
from unittest.mock import patch

from structlog.testing import capture_logs

from bonjson_cli import main


class CliMainTest(unittest.TestCase):
    def setUp(self):
        self._argv = sys.argv
        # logging setup reconfigures structlog globally, keep it out of the test process
        patcher = patch('bonjson_cli.util.setup_logging')
        self.setup_logging = patcher.start()
        self.addCleanup(patcher.stop)

    def tearDown(self):
        sys.argv = self._argv

    def test_init(self):
        cli = main.CliManager()

        f = StringIO()
        with capture_logs():
            with redirect_stdout(f):
                cli.help()
        output = f.getvalue().strip().splitlines()

        self.assertIn('Available subcommands:', output)
        self.assertTrue(any('[convert]' in line for line in output))
        self.assertTrue(any(line.strip().startswith('dump') for line in output))
        self.assertTrue(any(line.strip().startswith('from-json') for line in output))

    def test_no_command_prints_help(self):
        cli = main.CliManager()
        sys.argv = ['bonjson-cli']

        f = StringIO()
        with redirect_stdout(f):
            self.assertEqual(cli.execute_from_command_line(), 0)
        self.assertIn('Available subcommands:', f.getvalue())

    def test_unknown_command(self):
        cli = main.CliManager()
        sys.argv = ['bonjson-cli', 'frobnicate']

        f = StringIO()
        with redirect_stdout(f):
            self.assertEqual(cli.execute_from_command_line(), -1)
        self.assertIn('Unknown command: "frobnicate"', f.getvalue())
        self.setup_logging.assert_not_called()

    def test_help(self):
        cli = main.CliManager()

        f = StringIO()
        with self.assertRaises(SystemExit) as cm:
            with capture_logs():
                with redirect_stdout(f):
                    sys.argv = ['bonjson-cli', 'dump', '--help']
                    cli.execute_from_command_line()

        # Must exit with code 0
        self.assertEqual(cm.exception.args[0], 0)

        output = f.getvalue()
        self.assertIn('--indent', output)
        self.assertIn('--max-depth', output)

    def test_logging_options_are_consumed(self):
        cli = main.CliManager()
        sys.argv = ['bonjson-cli', 'from-json', '--json-logs', '--debug', '--hex', 'input.json']

        with patch.object(cli.command_list['from-json'], 'main', return_value=0) as command_main:
            self.assertEqual(cli.execute_from_command_line(), 0)

        command_main.assert_called_once_with()
        self.assertEqual(sys.argv[1:], ['--hex', 'input.json'])
        kwargs = self.setup_logging.call_args.kwargs
        self.assertEqual(kwargs['logging_output'].name, 'JSON')
        self.assertTrue(kwargs['logging_options'].debug)
