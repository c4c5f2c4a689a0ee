r"""Lexical analysis of pure lambda calculus source. Tokens are defined as follows:

```
<function>    ::= "\" | "fn" | "λ"      ; starts an abstraction
<abstraction> ::= "=>" | "."            ; separates binders from the abstraction body
<lparen>      ::= "("
<rparen>      ::= ")"
<variable>    ::= [A-Za-z]+             ; greedy: "fnord" is a variable, not "fn" + "ord"
```

Whitespace (space, tab, newline, form feed) separates tokens and is skipped. Anything else is an invalid char sequence,
which is reported without stopping the lexer.
"""

import re
from dataclasses import dataclass
from enum import Enum, auto

from lampool.lang.error import Diagnostic, Label
from lampool.pure.span import Span


class TokenKind(Enum):
    FUNCTION = auto()
    ABSTRACTION = auto()
    LPAREN = auto()
    RPAREN = auto()
    VARIABLE = auto()

    def __str__(self):
        return self.name


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    span: Span

    def text(self, source):
        return self.span.slice(source)


class InvalidCharSeq(Diagnostic):
    """A run of characters that belongs to no token."""
    code = "lexer::invalid_char_seq"
    help = "these chars don't belong to this code. Haven't you mistyped?"

    def __init__(self, at):
        super().__init__("invalid char sequence", [Label(at, "here")])
        self.at = at


WHITESPACE = re.compile(r"[ \t\n\f]+")

# order matters: "fn" must win over a two-letter variable, but only when no letter follows it
TOKENS = re.compile("|".join(f"(?P<{kind.name}>{pattern})" for kind, pattern in [
    (TokenKind.FUNCTION, r"\\|fn(?![A-Za-z])|λ"),
    (TokenKind.ABSTRACTION, r"=>|\."),
    (TokenKind.LPAREN, r"\("),
    (TokenKind.RPAREN, r"\)"),
    (TokenKind.VARIABLE, r"[A-Za-z]+"),
]))


def lex(source):
    """Lazily yields a Token or an InvalidCharSeq for every lexeme of source, in source order. Spans are byte
    offsets into the UTF-8 encoding of source.
    """
    pos = 0     # index into source
    offset = 0  # the same position, in bytes
    while pos < len(source):
        match = WHITESPACE.match(source, pos) or TOKENS.match(source, pos)
        if match:
            end = match.end()
        else:
            end = pos + 1
            while end < len(source) and not WHITESPACE.match(source, end) and not TOKENS.match(source, end):
                end += 1

        length = len(source[pos:end].encode())
        if match is None:
            yield InvalidCharSeq(Span(offset, length))
        elif match.re is TOKENS:
            yield Token(TokenKind[match.lastgroup], Span(offset, length))
        pos, offset = end, offset + length


def partition(items):
    """Splits the output of lex into (tokens, errors)."""
    tokens, errors = [], []
    for item in items:
        if isinstance(item, Token):
            tokens.append(item)
        else:
            errors.append(item)
    return tokens, errors
