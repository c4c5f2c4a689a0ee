"""Session control for lampool. A session runs one line at a time: lines starting with ':' are commands, every other
line goes through the pipeline (lexer, parser, compiler). Used by both the interactive shell and file mode.
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable

from lampool.lang.error import Diagnostic, Label, Severity
from lampool.lang.settings import Settings, Stages
from lampool.pure.lexer import lex, partition
from lampool.pure.parser import parse
from lampool.pure.pool import lower

logger = logging.getLogger(__name__)


class UnknownCommand(Diagnostic):
    code = "repl::command::unknown"
    help = "sometimes we just miss it! Type ':help' for the list of commands"

    def __init__(self, name):
        super().__init__(f"unknown command '{name}'")
        self.name = name


class MissingArg(Diagnostic):
    code = "repl::command::missing_arg"
    help = "are you sure this is the command?"

    def __init__(self, arg):
        super().__init__(f"missing argument: {arg}")
        self.arg = arg


class InvalidValue(Diagnostic):
    code = "repl::command::set::invalid_value"
    help = "are you sure this is the setting?"

    def __init__(self, setting, value):
        super().__init__(f"invalid setting value: {setting} doesn't accept '{value}'")
        self.setting = setting
        self.value = value


class UnknownSetting(Diagnostic):
    code = "repl::command::set::unknown_setting"
    help = "mistyping maybe?"

    def __init__(self, setting):
        super().__init__(f"unknown '{setting}' setting")
        self.setting = setting


@dataclass(frozen=True)
class Command:
    name: str
    alias: str
    desc: str
    func: Callable


def format_elapsed(seconds):
    if seconds < 1e-3:
        return f"{seconds * 1e6:.1f}µs"
    if seconds < 1:
        return f"{seconds * 1e3:.2f}ms"
    return f"{seconds:.3f}s"


class Session:
    """Governs a lampool session: settings, the error handler and the results of the lines run so far."""

    def __init__(self, error_handler, settings=None):
        self.error_handler = error_handler
        self.settings = settings if settings is not None else Settings()

        self.results = []   # pools of the expressions lowered so far
        self.done = False   # set by :quit

    @property
    def prompt(self):
        """The configured prompt, prefixed with the error/warning counts of the previous line (if any)."""
        handler = self.error_handler
        counts = []
        if handler.errors:
            counts.append(handler.paint(f"{handler.errors}✗", handler.ERROR, attrs=["bold"]))
        if handler.warnings:
            counts.append(handler.paint(f"{handler.warnings}!", handler.WARNING, attrs=["bold"]))

        if counts:
            return " ".join(counts) + "  " + self.settings.prompt
        return self.settings.prompt

    def run(self, line, first_line=1):
        """Runs a single line, reporting any Diagnostic through the error handler. Returns whether or not the
        session is over.
        """
        line = line.rstrip("\r\n")
        if not line.strip():
            return self.done

        self.error_handler.register_source(line, first_line)
        with self.error_handler:
            if line.startswith(":"):
                self.command(line[1:])
            else:
                self.expression(line)
        return self.done

    def bench(self, stage, func, *args):
        """Calls func(*args), printing how long it took if stage is being benchmarked."""
        if stage not in self.settings.bench:
            return func(*args)

        start = time.perf_counter()
        try:
            return func(*args)
        finally:
            elapsed = format_elapsed(time.perf_counter() - start)
            print(self.error_handler.paint(f"[{stage}: {elapsed}]", attrs=["dark"]))

    def expression(self, source):
        """Lexes, parses and lowers source. Lexer errors are each reported and stop the pipeline before parsing;
        parser and compiler errors are raised. Returns the lowered Pool, or None if lexing failed.
        """
        show = self.settings.show

        tokens, errors = partition(self.bench("lexer", lambda: list(lex(source))))
        logger.debug("lexed %d tokens and %d invalid char sequences", len(tokens), len(errors))
        for error in errors:
            self.error_handler.report(error, source)

        if "lexer" in show:
            labels = [Label(token.span, str(token.kind)) for token in tokens]
            self.error_handler.report(Diagnostic("lexer's output", labels, severity=Severity.ADVICE), source)

        if errors:
            return None

        ast = self.bench("parser", parse, tokens)
        if "parser" in show:
            print(ast.display(source))

        pool = self.bench("compiler", lower, ast, source)
        if "compiler" in show:
            print(pool)

        self.results.append(pool)
        return pool

    def command(self, line):
        """Dispatches line (without its leading ':') to the command named by its first word."""
        name, __, args = line.partition(" ")
        for command in COMMANDS:
            if name in (command.name, command.alias):
                logger.debug("dispatching :%s with %r", command.name, args)
                if "command" in self.settings.show:
                    print(f"[command: {command.name} {args!r}]")
                return self.bench("command", command.func, self, args)

        raise UnknownCommand(name)

    def quit(self, args):
        """Ends the session."""
        self.done = True

    def set(self, args):
        """Changes a setting: `set <setting> <value>`."""
        setting, sep, value = args.partition(" ")
        if not setting:
            raise MissingArg("setting")
        if not sep or not value:
            raise MissingArg("value")

        if setting == "prompt":
            self.settings.prompt = value
        elif setting in ("bench", "show"):
            try:
                stages = Stages.parse(value)
            except ValueError as e:
                raise InvalidValue(setting, e.args[0]) from None
            setattr(self.settings, setting, stages)
        else:
            raise UnknownSetting(setting)

    def help(self, args):
        """Prints the available commands and settings."""
        print("Type a lambda term, e.g. '\\x y. x y', to see its de Bruijn term pool.\n\nCommands:")
        for command in COMMANDS:
            print(f"  :{command.name:<5} (:{command.alias})  {command.desc}")

        print(f"\nSettings (`:set <setting> <value>`):\n"
              f"  prompt  any text (now '{self.settings.prompt}')\n"
              f"  bench   all, none or some of {','.join(Stages.ALL)} (now {self.settings.bench})\n"
              f"  show    all, none or some of {','.join(Stages.ALL)} (now {self.settings.show})")


COMMANDS = [
    Command("quit", "q", "quits the terminal", Session.quit),
    Command("set", "s", "manual settings", Session.set),
    Command("help", "h", "shows this message", Session.help),
]
