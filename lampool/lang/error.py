"""Diagnostics for lampool. Every error raised by the pipeline is a Diagnostic: it carries a stable code, a message,
labelled source spans and a help hint. Only Diagnostics should be encountered during a run; if another type of error
makes it all the way to ErrorHandler, it is assumed to be an internal issue.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional

from termcolor import colored

from lampool.pure.span import Span


class Severity(Enum):
    ERROR = auto()
    WARNING = auto()
    ADVICE = auto()


@dataclass(frozen=True)
class Label:
    """A span of the source together with the text printed next to its caret."""
    span: Span
    text: Optional[str] = None


class Diagnostic(Exception):
    """Base class of every lampool error/warning. Subclasses set code and help as class attributes; the constructor
    arguments override them for one-off reports (e.g. the lexer dump).
    """
    code = None
    help = None
    severity = Severity.ERROR

    def __init__(self, message, labels=(), code=None, help=None, severity=None):
        super().__init__(message)
        self.message = message
        self.labels = tuple(labels)

        if code is not None:
            self.code = code
        if help is not None:
            self.help = help
        if severity is not None:
            self.severity = severity

    @property
    def span(self):
        """Span of the primary (first) label, or None if this diagnostic points nowhere."""
        return self.labels[0].span if self.labels else None

    def __eq__(self, other):
        if not isinstance(other, Diagnostic) or type(self) is not type(other):
            return NotImplemented
        return (self.code, self.message, self.labels) == (other.code, other.message, other.labels)

    def __hash__(self):
        return hash((type(self), self.code, self.message, self.labels))

    def __repr__(self):
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r}, labels={self.labels!r})"


class ErrorHandler:
    """Renders Diagnostics as caret reports and counts them. Also a context manager that reports Diagnostics raised in
    its body instead of letting them propagate.
    """
    ERROR = "red"
    WARNING = "magenta"
    ADVICE = "cyan"

    def __init__(self, name="repl", color=True):
        self.name = name    # used as the file name in reports
        self.color = color
        self.source = ""    # source of the line being processed
        self.first_line = 1  # line number of source's first line in its file

        self.errors = 0
        self.warnings = 0

    def register_source(self, source, first_line=1):
        """Registers the source that later reports point into. Should be called before running a line."""
        self.source = source
        self.first_line = first_line

    def reset(self):
        """Forgets the error/warning counts of the previous line."""
        self.errors = 0
        self.warnings = 0

    def paint(self, text, color=None, attrs=None):
        """termcolor's colored, unless colours are turned off."""
        if not self.color:
            return text
        return colored(text, color, attrs=attrs)

    @staticmethod
    def locate(source, offset):
        """Returns (line number, column, line text) of the byte offset within source. Line numbers start at 1,
        columns (counted in characters) at 0.
        """
        offset = len(source.encode()[:offset].decode(errors="ignore"))
        start = source.rfind("\n", 0, offset) + 1
        end = source.find("\n", offset)
        if end == -1:
            end = len(source)
        return source.count("\n", 0, offset) + 1, offset - start, source[start:end]

    def color_of(self, severity):
        return {Severity.ERROR: self.ERROR, Severity.WARNING: self.WARNING}.get(severity, self.ADVICE)

    def diagnose(self, label, source, color, gutter):
        """Returns the source line under label followed by a caret line underlining the label's span."""
        line_num, col, line = self.locate(source, label.span.offset)
        end_num, end_col, __ = self.locate(source, label.span.end)
        if end_num != line_num:
            end_col = len(line)
        line_num += self.first_line - 1
        width = max(end_col - col, 1)

        marker = "^" + "~" * (width - 1)
        if label.text:
            marker += " " + label.text

        pad = " " * gutter
        return (f" {str(line_num).rjust(gutter)} | {line}\n"
                f" {pad} | {' ' * col}{self.paint(marker, color, attrs=['bold'])}")

    def render(self, diagnostic, source=None):
        """Renders diagnostic against source (defaults to the registered source) as a multi-line report."""
        if source is None:
            source = self.source
        color = self.color_of(diagnostic.severity)

        header = diagnostic.severity.name.lower()
        if diagnostic.code:
            header += f"[{diagnostic.code}]"
        lines = [self.paint(header, color, attrs=["bold"]) + ": " + diagnostic.message]

        labels = sorted(diagnostic.labels, key=lambda label: (label.span.offset, label.span.length))
        if labels:
            gutter = len(str(source.count("\n") + self.first_line))
            line_num, col, __ = self.locate(source, labels[0].span.offset)

            lines.append(f"{' ' * (gutter + 1)}--> {self.name}:{line_num + self.first_line - 1}:{col + 1}")
            lines.append(f" {' ' * gutter} |")
            for label in labels:
                lines.append(self.diagnose(label, source, color, gutter))

        if diagnostic.help:
            lines.append(f"  {self.paint('help', attrs=['bold'])}: {diagnostic.help}")
        return "\n".join(lines)

    def report(self, diagnostic, source=None):
        """Counts and prints diagnostic."""
        if diagnostic.severity is Severity.ERROR:
            self.errors += 1
        elif diagnostic.severity is Severity.WARNING:
            self.warnings += 1
        print(self.render(diagnostic, source))

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None or issubclass(exc_type, SystemExit):
            return False

        if issubclass(exc_type, Diagnostic):
            self.report(exc_val)
        elif issubclass(exc_type, KeyboardInterrupt):
            self.report(Diagnostic("keyboard interrupt", code="repl::interrupted"))
        elif issubclass(exc_type, RecursionError):
            msg = "expression is nested too deeply"
            self.report(Diagnostic(msg, code="repl::recursion_limit", help="try splitting it into smaller terms"))
        else:
            msg = f"unknown error: '{exc_type.__name__}: {exc_val}'"
            self.report(Diagnostic(msg, code="repl::internal", help="this shouldn't happen, please report it"))
            return False

        return True
