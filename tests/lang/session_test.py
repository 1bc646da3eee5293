import contextlib
import io
import os
import tempfile
import unittest

from chi.lang.error import ErrorHandler, GenericException
from chi.lang.session import Session
from chi.lang.shell import Shell

PROGRAM = """-- identity
(λx.x) (
  λy.y)

{- dispatch on the
   second binding -}
case C(D(), E()) of {
  C(x, x) → x
}
"""


class SessionTestCase(unittest.TestCase):

    def setUp(self):
        self.tmp_dir = tempfile.TemporaryDirectory()

    def tearDown(self):
        self.tmp_dir.cleanup()

    def write(self, code):
        path = os.path.join(self.tmp_dir.name, "test.chi")
        with open(path, "w", encoding="utf-8") as file:
            file.write(code)
        return path

    def test_preprocess_line(self):
        statements = []
        add_to_prev = False
        for line_num, line in enumerate(["f (\n", "x)\n", "\n", "y\n", "{- a\n", "b -} z\n"]):
            __, add_to_prev = Session.preprocess_line(line, line_num + 1, add_to_prev, statements)

        self.assertEqual([("f (\nx)\n", 1), ("y\n", 4), ("{- a\nb -} z\n", 5)], statements)

    def test_run(self):
        sess = Session(ErrorHandler(), self.write(PROGRAM))
        sess.run()
        self.assertEqual(["λy.y", "E()"], sess.results)

    def test_modes(self):
        cases = [
            ("decompile", "concrete", "λx.Suc(x)", "Lambda(Zero(), Const(Zero(), Cons(Var(Zero()), Nil())))"),
            ("interpret", "concrete", "case C(λx.x, Zero()) of { C(f, x) → f x }", "Zero()"),
            ("eval", "abstract", "λx.Suc(x)", "lambda x (const Suc (cons (var x) nil))"),
        ]
        for mode, syntax, code, expected in cases:
            sess = Session(ErrorHandler(), self.write(code), mode=mode, syntax=syntax)
            sess.run()
            self.assertEqual([expected], sess.results, mode)

    def test_bad_files(self):
        self.assertRaises(GenericException, Session, ErrorHandler(), os.path.join(self.tmp_dir.name, "missing.chi"))
        self.assertRaises(GenericException, Session, ErrorHandler(), Session.SH_FILE)

    def test_command_line(self):
        error_handler = ErrorHandler()
        sess = Session(error_handler, Session.SH_FILE, cmd_line=True)
        self.assertFalse(error_handler.fatal)

        sess.add("λx.x y", 1)
        sess.run()
        self.assertEqual("λx.(x y)", sess.pop())
        self.assertEqual([], sess.results)


class ShellTestCase(unittest.TestCase):

    def setUp(self):
        self.shell = Shell(Session(ErrorHandler(), Session.SH_FILE, cmd_line=True))

    def run_command(self, line):
        output = io.StringIO()
        with contextlib.redirect_stdout(output):
            self.shell.onecmd(line)
        return output.getvalue()

    def test_default(self):
        self.assertEqual("λx.(x y)\n", self.run_command("λx.x y"))

        self.assertEqual("", self.run_command("case C() of {"))
        self.assertEqual(Shell.secondary_prompt, self.shell.prompt)
        self.assertEqual("D()\n", self.run_command("C() → D() }"))
        self.assertEqual(Shell._tmp_prompt, self.shell.prompt)

    def test_errors_are_not_fatal(self):
        self.assertIn("error", self.run_command("λx x"))
        self.assertEqual("x\n", self.run_command("x"))

    def test_settings(self):
        self.run_command("mode decompile")
        self.assertEqual("decompile", self.shell.sess.mode)
        self.assertEqual("Var(Zero())\n", self.run_command("x"))

        self.run_command("syntax abstract")
        self.assertEqual("const Var (cons (const Zero (nil)) nil)\n", self.run_command("x"))

        self.assertIn("warning", self.run_command("mode fast"))
        self.assertEqual("decompile", self.shell.sess.mode)

        self.assertEqual("variables: x = 0\nconstructors: \n", self.run_command("context"))

    def test_exit(self):
        self.assertTrue(self.shell.onecmd("exit"))


if __name__ == '__main__':
    unittest.main()
