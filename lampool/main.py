"""Runs lampool either in command-line mode or over the lines of a file. Called from the lampool executable script.

Each line is lexed, parsed and lowered into a de Bruijn term pool; lines starting with ':' are commands.
"""

import argparse
import logging
import sys

from lampool.lang.error import Diagnostic, ErrorHandler
from lampool.lang.session import Session
from lampool.lang.settings import Settings, Stages
from lampool.lang.shell import Shell


def stages(value):
    """argparse type for --bench and --show."""
    try:
        return Stages.parse(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"unknown stage '{e.args[0]}' (choose from {', '.join(Stages.ALL)})")


def build_parser():
    parser = argparse.ArgumentParser(prog="lampool", description="Lambda calculus front-end: source to term pool.")
    parser.add_argument("file", help="file whose lines to run (if empty, goes to command-line mode)", nargs="?")
    parser.add_argument("--prompt", default=Settings.prompt, help="prompt of the command-line mode")
    parser.add_argument("--bench", type=stages, default=Stages(), help="stages to time: all, none or a comma list")
    parser.add_argument("--show", type=stages, default=Stages(("compiler",)),
                        help="stages whose output to print: all, none or a comma list")
    parser.add_argument("--no-color", action="store_true", help="don't colour diagnostics")
    parser.add_argument("--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser


def run_file(sess, path):
    """Runs every line of path through sess. Returns the exit status: 1 if any error was reported."""
    handler = sess.error_handler
    try:
        with open(path, "r", encoding="utf-8") as file:
            for line_num, line in enumerate(file, 1):
                if sess.run(line, first_line=line_num):
                    break
    except OSError:
        handler.report(Diagnostic(f"'{path}' could not be opened", code="repl::input::unreadable_file"))

    return 1 if handler.errors else 0


def main(argv=None):
    """Runs lampool interpreter. Called from lampool executable script."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(levelname)s %(name)s: %(message)s")

    handler = ErrorHandler(name=args.file or "repl", color=not args.no_color)
    sess = Session(handler, Settings(prompt=args.prompt, bench=args.bench, show=args.show))

    if args.file is not None:
        return run_file(sess, args.file)

    try:
        Shell(sess).cmdloop()
    except KeyboardInterrupt:
        print()
    return 0


if __name__ == "__main__":
    sys.exit(main())
