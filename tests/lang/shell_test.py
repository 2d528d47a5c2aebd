import io
import unittest
from contextlib import redirect_stdout
from unittest import mock

from bytecalc.lang.error import ErrorHandler
from bytecalc.lang.session import Session
from bytecalc.lang.shell import Shell


def run_shell(lines, show_bytecode=True):
    sess = Session(ErrorHandler(), Session.SH_FILE, cmd_line=True)
    shell = Shell(sess, show_bytecode, stdin=io.StringIO("\n".join(lines) + "\n"), stdout=io.StringIO())
    shell.use_rawinput = False

    out = io.StringIO()
    with redirect_stdout(out):
        shell.cmdloop(intro="")
    return out.getvalue()


class ShellTestCase(unittest.TestCase):

    def test_evaluates_lines(self):
        output = run_shell(["3+4*2", "(3+4)*2", "exit"])
        self.assertIn("Bytecode:\n  PUSH 3\n  PUSH 4\n  PUSH 2\n  MUL\n  ADD\nResult: 11", output)
        self.assertIn("Result: 14", output)
        self.assertTrue(output.rstrip().endswith("Goodbye!"))

    def test_errors_do_not_stop_loop(self):
        output = run_shell(["10/0", "2 3", "-5", "1+1", "EXIT"])
        self.assertIn("division by zero", output)
        self.assertIn("trailing input", output)
        self.assertIn("Result: 2", output)
        self.assertIn("Goodbye!", output)

    def test_stops_at_exit(self):
        output = run_shell(["Exit", "1+1"])
        self.assertNotIn("Result", output)

    def test_long_literal_does_not_stop_loop(self):
        output = run_shell(["9" * 5000, "1+1", "exit"])
        self.assertIn("does not fit in a ", output)
        self.assertIn("Result: 2", output)

    def test_unexpected_error_does_not_stop_loop(self):
        with mock.patch("bytecalc.lang.session.execute", side_effect=[ValueError("broken"), 2]):
            output = run_shell(["1+2", "1+1", "exit"])
        self.assertIn("[internal]", output)
        self.assertIn("ValueError", output)
        self.assertIn("Result: 2", output)
        self.assertIn("Goodbye!", output)

    def test_no_bytecode(self):
        output = run_shell(["6*7", "exit"], show_bytecode=False)
        self.assertIn("Result: 42", output)
        self.assertNotIn("Bytecode:", output)

    def test_eof(self):
        output = run_shell(["  ", "1+2"])
        self.assertIn("Result: 3", output)
        self.assertIn("Goodbye!", output)


if __name__ == '__main__':
    unittest.main()
