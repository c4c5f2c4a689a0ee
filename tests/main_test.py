import io
import os
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout

from lampool.main import main


class MainTestCase(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)

    def write(self, text):
        path = os.path.join(self.tmp.name, "prog.lc")
        with open(path, "w", encoding="utf-8") as file:
            file.write(text)
        return path

    def run_main(self, *argv):
        with redirect_stdout(io.StringIO()) as out:
            status = main(["--no-color", *argv])
        return status, out.getvalue()

    def test_file(self):
        path = self.write("\\ x . x\n\n:set show none\n\\ y . y\n")
        status, out = self.run_main(path)
        self.assertEqual(0, status)
        self.assertEqual("[ ν0, λ0 ]\n", out)

    def test_file_with_errors(self):
        path = self.write("\\ x . x\nfoo\n\\ y . y\n")
        status, out = self.run_main(path)
        self.assertEqual(1, status)
        self.assertIn(f"--> {path}:2:1", out)
        self.assertEqual(2, out.count("[ ν0, λ0 ]"))

    def test_file_quit(self):
        path = self.write(":q\nfoo\n")
        self.assertEqual((0, ""), self.run_main(path))

    def test_missing_file(self):
        status, out = self.run_main(os.path.join(self.tmp.name, "missing.lc"))
        self.assertEqual(1, status)
        self.assertIn("could not be opened", out)

    def test_flags(self):
        path = self.write("\\ x . x\n")
        status, out = self.run_main("--show", "parser", "--bench", "compiler", path)
        self.assertEqual(0, status)
        self.assertIn("Abs 'x' @ 2..7", out)
        self.assertIn("[compiler: ", out)
        self.assertNotIn("ν0", out)

    def test_bad_stage(self):
        with redirect_stderr(io.StringIO()) as err:
            with self.assertRaises(SystemExit) as ctx:
                main(["--show", "bogus"])
        self.assertEqual(2, ctx.exception.code)
        self.assertIn("unknown stage 'bogus'", err.getvalue())


if __name__ == '__main__':
    unittest.main()
