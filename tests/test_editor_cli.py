"""
Test suite for the editor adapter and the command line interface.

Author: xwest
"""

import unittest
import sys
import os
import io
import json
import tempfile
from contextlib import redirect_stdout, redirect_stderr
from unittest import mock

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from qbit import ParserConfig
from qbit.editor import EditorRecord, EditorResult, check_source, check_syntax
from qbit.cli import main, build_arg_parser


class TestEditor(unittest.TestCase):
    """Test cases for editor records."""

    def test_success_with_warning(self):
        result = check_source("let X = 1;")

        self.assertTrue(result.success)
        self.assertEqual(result.errors, ())
        self.assertEqual(len(result.warnings), 1)

        record = result.warnings[0]
        self.assertEqual((record.line, record.column, record.length), (1, 5, 1))
        self.assertTrue(record.message.startswith("expected 'x'\n"))

    def test_failure_has_single_error(self):
        result = check_source("let X = ;")

        self.assertFalse(result.success)
        self.assertEqual(result.warnings, ())
        self.assertEqual(len(result.errors), 1)
        self.assertEqual((result.errors[0].line, result.errors[0].column), (1, 9))

    def test_lexer_error_record(self):
        record = check_source("a = 1;\nb = 2 @ 3;").errors[0]
        self.assertEqual((record.line, record.column, record.length), (2, 7, 1))
        self.assertTrue(record.message.startswith("Lexer error: Invalid token ('@')"))

    def test_config_is_respected(self):
        config = ParserConfig(allow_trailing_commas=False)
        self.assertTrue(check_source("f(1,);").success)
        self.assertFalse(check_source("f(1,);", config).success)

    def test_json(self):
        result = EditorResult(
            success=False,
            errors=(EditorRecord("Missing ';'", 3, 4, 1),),
        )
        self.assertEqual(json.loads(result.to_json()), {
            "success": False,
            "errors": [{"message": "Missing ';'", "line": 3, "column": 4, "length": 1}],
            "warnings": [],
        })

    def test_check_syntax(self):
        self.assertEqual(check_syntax("let ok = 1;"), [])
        records = check_syntax("x = ")
        self.assertEqual(len(records), 1)
        self.assertEqual(records[0].length, 1)


class TestCommandLine(unittest.TestCase):
    """Test cases for the qbit command."""

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()

    def tearDown(self):
        self.temp_dir.cleanup()

    def _write(self, source: str) -> str:
        path = os.path.join(self.temp_dir.name, "script.qb")
        with open(path, "w", encoding="utf-8") as f:
            f.write(source)
        return path

    def _run(self, argv):
        stdout, stderr = io.StringIO(), io.StringIO()
        with redirect_stdout(stdout), redirect_stderr(stderr):
            status = main(argv)
        return status, stdout.getvalue(), stderr.getvalue()

    def test_program_output(self):
        status, out, err = self._run([self._write("let X = 1;")])

        self.assertEqual(status, 0)
        self.assertIn("Let(name='X'", out)
        self.assertIn("WARN[W001]: expected 'x'", out)
        self.assertEqual(err, "")

    def test_syntax_error_exit_status(self):
        status, out, err = self._run([self._write("let x = ;")])

        self.assertEqual(status, 1)
        self.assertEqual(out, "")
        self.assertIn("ERROR[Q002]: Expected expression, found ';'", err)
        self.assertIn("  --> 1:9", err)

    def test_json_output(self):
        status, out, _ = self._run([self._write("fn f( {"), "--json"])

        self.assertEqual(status, 1)
        data = json.loads(out)
        self.assertFalse(data["success"])
        self.assertEqual(len(data["errors"]), 1)
        self.assertEqual(data["warnings"], [])

    def test_expression_from_stdin(self):
        with mock.patch('sys.stdin', io.StringIO("1 + 2 * 3")):
            status, out, _ = self._run(["-", "--expr"])

        self.assertEqual(status, 0)
        self.assertEqual(out.splitlines()[0], "1 + 2 * 3")

    def test_expression_json(self):
        with mock.patch('sys.stdin', io.StringIO("1 +")):
            status, out, _ = self._run(["-", "--expr", "--json"])
        self.assertEqual(status, 1)
        self.assertFalse(json.loads(out)["success"])

    def test_options_reach_parser(self):
        path = self._write("f(1,);")
        self.assertEqual(self._run([path])[0], 0)
        self.assertEqual(self._run([path, "--no-trailing-commas"])[0], 1)

        deep = self._write("((1));")
        status, _, err = self._run([deep, "--max-depth", "2"])
        self.assertEqual(status, 1)
        self.assertIn("Maximum recursion depth (2)", err)

    def test_bad_depth_is_usage_error(self):
        with self.assertRaises(SystemExit) as cm:
            self._run([self._write("1;"), "--max-depth", "0"])
        self.assertEqual(cm.exception.code, 2)

    def test_missing_file_is_usage_error(self):
        with self.assertRaises(SystemExit) as cm:
            self._run([os.path.join(self.temp_dir.name, "missing.qb")])
        self.assertEqual(cm.exception.code, 2)

    def test_default_depth(self):
        args = build_arg_parser().parse_args(["x.qb"])
        self.assertEqual(args.max_depth, 1000)
        self.assertFalse(args.no_trailing_commas)


if __name__ == '__main__':
    unittest.main()
