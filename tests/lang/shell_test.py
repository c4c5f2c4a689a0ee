import io
import unittest
from contextlib import redirect_stdout

from lampool.lang.error import ErrorHandler
from lampool.lang.session import Session
from lampool.lang.shell import Shell


def make_shell(text):
    shell = Shell(Session(ErrorHandler(color=False)), stdin=io.StringIO(text), stdout=io.StringIO())
    shell.use_rawinput = False
    return shell


class ShellTestCase(unittest.TestCase):

    def test_cmdloop_until_quit(self):
        shell = make_shell("\\ x . x\n:q\n\\ y . y\n")
        with redirect_stdout(io.StringIO()) as out:
            shell.cmdloop(intro="")

        self.assertIn("[ ν0, λ0 ]", out.getvalue())
        self.assertEqual(1, len(shell.sess.results))

    def test_cmdloop_until_eof(self):
        shell = make_shell("\\ x . x\n\\ y . \\ z . y\n")
        with redirect_stdout(io.StringIO()):
            shell.cmdloop(intro="")

        self.assertEqual(2, len(shell.sess.results))
        self.assertIn("λ> ", shell.stdout.getvalue())

    def test_eof_is_a_variable(self):
        shell = make_shell("EOF\n\\ x . x\n")
        with redirect_stdout(io.StringIO()) as out:
            shell.cmdloop(intro="")

        self.assertIn("compiler::pool::undeclared_variable", out.getvalue())
        self.assertEqual(1, len(shell.sess.results))

    def test_cmdqueue(self):
        shell = make_shell(":q\n")
        shell.cmdqueue.append("\\ x . x")
        with redirect_stdout(io.StringIO()):
            shell.cmdloop(intro="")

        self.assertEqual(1, len(shell.sess.results))
        self.assertTrue(shell.sess.done)

    def test_terms_are_not_cmd_commands(self):
        shell = make_shell("")
        with redirect_stdout(io.StringIO()) as out:
            stop = shell.onecmd("help x")

        self.assertFalse(stop)
        self.assertIn("compiler::pool::undeclared_variable", out.getvalue())

    def test_prompt_tracks_previous_line(self):
        shell = make_shell("")
        with redirect_stdout(io.StringIO()):
            for line in ("x", "\\ x . x"):
                line = shell.precmd(line)
                shell.postcmd(shell.onecmd(line), line)
                if line == "x":
                    self.assertEqual("1✗  λ> ", shell.prompt)

        self.assertEqual("λ> ", shell.prompt)

    def test_prompt_setting(self):
        shell = make_shell(":set prompt lam> \n")
        with redirect_stdout(io.StringIO()):
            shell.cmdloop(intro="")
        self.assertEqual("lam> ", shell.prompt)


if __name__ == '__main__':
    unittest.main()
