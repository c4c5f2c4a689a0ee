r"""Predictive parser from tokens to the AST of pure lambda calculus.

```
<expr> ::= <app>
<app>  ::= <atom> <atom>*                               ; associating by left: a b c d = (((a b) c) d)
<atom> ::= <abs> | "(" <app> ")" | <variable>
<abs>  ::= <function> <variable>+ <abstraction> <app>   ; curried: \x y.b = \x.\y.b
```

Abstraction bodies are greedy: `\x.x y` = `\x.(x y)` != `(\x.x) y`.
"""

from functools import partial

from lampool.lang.error import Diagnostic, Label
from lampool.pure.lexer import TokenKind
from lampool.pure.span import Span, over
from lampool.pure.syntax import Abs, App, Var

ATOM_STARTS = (TokenKind.FUNCTION, TokenKind.LPAREN, TokenKind.VARIABLE)


class UnexpectedEof(Diagnostic):
    """The token stream ended before a required token. at is the span of the last token, or (0, 0) if there was
    none.
    """
    code = "parser::unexpected_eof"
    help = "maybe you've left some parenthesis opened"

    def __init__(self, at):
        super().__init__("unexpected end of file", [Label(at, "bit of a sudden, isn't it?")])
        self.at = at


class UnexpectedToken(Diagnostic):
    """The next token was not of the required kind. expected is None when the parser wanted the input to end."""
    code = "parser::unexpected_token"

    def __init__(self, expected, found, at):
        if expected is None:
            help = "expected end of input, maybe there's an unmatched parenthesis"
        else:
            help = f"so far, we were expecting a {expected}"

        super().__init__(f"unexpected token {found}", [Label(at, "here")], help=help)
        self.expected = expected
        self.found = found
        self.at = at


class Parser:
    """Parses a list of successfully lexed tokens. The cursor idx only moves forward."""

    def __init__(self, tokens):
        self.tokens = list(tokens)
        self.idx = 0

    @property
    def exhausted(self):
        return self.idx >= len(self.tokens)

    def peek(self, offset=0):
        """Returns the token offset positions past the cursor, raising UnexpectedEof if there is none."""
        try:
            return self.tokens[self.idx + offset]
        except IndexError:
            at = self.tokens[-1].span if self.tokens else Span(0, 0)
            raise UnexpectedEof(at) from None

    def current(self):
        return self.peek(0)

    def advance(self):
        """Consumes and returns the current token."""
        token = self.current()
        self.idx += 1
        return token

    def check(self, kind):
        """Consumes the current token and returns True if it is of kind; otherwise returns False."""
        if self.current().kind is kind:
            self.idx += 1
            return True
        return False

    def expect(self, kind):
        """Consumes and returns the current token, which must be of kind."""
        token = self.current()
        if token.kind is not kind:
            raise UnexpectedToken(kind, token.kind, token.span)
        self.idx += 1
        return token

    def parse(self):
        """Parses the whole token list as a single expression."""
        node = self.parse_app()
        if not self.exhausted:
            token = self.current()
            raise UnexpectedToken(None, token.kind, token.span)
        return node

    def starts_atom(self):
        """Whether or not the current token can begin an atom. Any other token (or the end of input) makes parse_atom
        fail before consuming anything.
        """
        return not self.exhausted and self.tokens[self.idx].kind in ATOM_STARTS

    def parse_app(self):
        """Parses one or more atoms as a left-leaning spine of Apps. The application ends at the first token that
        can't begin an atom; a failure after an atom consumed tokens is a real syntax error and propagates.

        Parentheses and abstraction bodies open nested applications. These are kept on an explicit stack of frames
        instead of the Python stack, so deeply nested terms parse fine. A frame is (close, lhs): close turns the
        finished application into the atom it belongs to (None for the outermost one) and lhs is the spine built
        so far.
        """
        frames = [(None, None)]
        while True:
            close, lhs = frames[-1]
            if lhs is None or self.starts_atom():
                node = self.parse_atom(frames)
                if node is None:  # a nested application was opened
                    continue
            else:
                frames.pop()
                if close is None:
                    return lhs
                node = close(lhs)

            close, lhs = frames[-1]
            frames[-1] = (close, node if lhs is None else App(over(lhs.span, node.span), lhs, node))

    def parse_atom(self, frames):
        """Parses a variable and returns it, or consumes the opening of a parenthesised term or an abstraction and
        pushes a frame for its inner application, returning None.
        """
        if self.check(TokenKind.LPAREN):
            frames.append((self.close_paren, None))
            return None

        if self.current().kind is TokenKind.FUNCTION:
            params = self.parse_binders()
            frames.append((partial(self.close_abs, params), None))
            return None

        return Var(self.expect(TokenKind.VARIABLE).span)

    def parse_binders(self):
        """Consumes `<function> <variable>+ <abstraction>`, returning the binder spans."""
        self.expect(TokenKind.FUNCTION)

        params = []
        while self.current().kind is TokenKind.VARIABLE:
            params.append(self.advance().span)

        if not params:
            self.expect(TokenKind.VARIABLE)  # always raises

        self.expect(TokenKind.ABSTRACTION)
        return params

    def close_paren(self, inner):
        self.expect(TokenKind.RPAREN)
        return inner

    @staticmethod
    def close_abs(params, body):
        """Desugars the binders of an abstraction into nested unary Abs. Each Abs spans from its binder name through
        the end of the body.
        """
        node = body
        for param in reversed(params):
            node = Abs(over(param, node.span), param, node)
        return node


def parse(tokens):
    """Parses tokens (only successfully lexed ones) into an AST."""
    return Parser(tokens).parse()
