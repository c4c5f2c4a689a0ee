import types
import unittest

from lampool.pure.lexer import InvalidCharSeq, Token, TokenKind, lex, partition
from lampool.pure.span import Span

F, A, L, R, V = (TokenKind.FUNCTION, TokenKind.ABSTRACTION, TokenKind.LPAREN, TokenKind.RPAREN,
                 TokenKind.VARIABLE)


def kinds(source):
    return [item.kind for item in lex(source)]


class LexTestCase(unittest.TestCase):

    def test_kinds(self):
        cases = {
            "\\ x . x": [F, V, A, V],
            "fn x => x": [F, V, A, V],
            "λx.x": [F, V, A, V],
            "(a b)": [L, V, V, R],
            "fnord": [V],
            "fn": [F],
            "f n": [V, V],
            "fn(x)": [F, L, V, R],
            "xs=>ys": [V, A, V],
            "": [],
            " \t\n\f": [],
        }
        for case, expected in cases.items():
            self.assertEqual(expected, kinds(case), case)

    def test_spans(self):
        cases = {
            "λx.x": [Token(F, Span(0, 2)), Token(V, Span(2, 1)), Token(A, Span(3, 1)), Token(V, Span(4, 1))],
            "  xy\t\n\fz": [Token(V, Span(2, 2)), Token(V, Span(7, 1))],
            "fn abc => abc": [Token(F, Span(0, 2)), Token(V, Span(3, 3)), Token(A, Span(7, 2)), Token(V, Span(10, 3))],
        }
        for case, expected in cases.items():
            self.assertEqual(expected, list(lex(case)), case)

    def test_invalid_char_seq(self):
        cases = {
            "\\ x . $x": [Token(F, Span(0, 1)), Token(V, Span(2, 1)), Token(A, Span(4, 1)),
                          InvalidCharSeq(Span(6, 1)), Token(V, Span(7, 1))],
            "a $%& b": [Token(V, Span(0, 1)), InvalidCharSeq(Span(2, 3)), Token(V, Span(6, 1))],
            "a=b": [Token(V, Span(0, 1)), InvalidCharSeq(Span(1, 1)), Token(V, Span(2, 1))],
            "==>": [InvalidCharSeq(Span(0, 1)), Token(A, Span(1, 2))],
            "$ $": [InvalidCharSeq(Span(0, 1)), InvalidCharSeq(Span(2, 1))],
            "x1": [Token(V, Span(0, 1)), InvalidCharSeq(Span(1, 1))],
            "λx.é x": [Token(F, Span(0, 2)), Token(V, Span(2, 1)), Token(A, Span(3, 1)), InvalidCharSeq(Span(4, 2)),
                       Token(V, Span(7, 1))],
        }
        for case, expected in cases.items():
            self.assertEqual(expected, list(lex(case)), case)

    def test_invalid_char_seq_diagnostic(self):
        error = InvalidCharSeq(Span(3, 2))
        self.assertEqual("lexer::invalid_char_seq", error.code)
        self.assertEqual(Span(3, 2), error.at)
        self.assertEqual(Span(3, 2), error.span)
        self.assertEqual("here", error.labels[0].text)
        self.assertTrue(error.help)

    def test_lazy(self):
        items = lex("x $ y")
        self.assertIsInstance(items, types.GeneratorType)
        self.assertEqual(Token(V, Span(0, 1)), next(items))

    def test_span_faithfulness(self):
        """Joining the bytes under every token gives the source minus whitespace and invalid runs."""
        cases = ["\\ x . x", "(λf.λx. f (f x)) g", "fn a b => b a", "a $%& b", "x1 y2\n\tz", "==>=>", "λé.ü é"]
        for case in cases:
            data = case.encode()
            tokens, errors = partition(lex(case))

            rejected = set()
            for error in errors:
                rejected.update(range(error.at.offset, error.at.end))
            expected = bytes(byte for idx, byte in enumerate(data) if idx not in rejected and byte not in b" \t\n\f")

            self.assertEqual(expected, b"".join(data[token.span.offset:token.span.end] for token in tokens), case)

    def test_partition(self):
        tokens, errors = partition(lex("a ? b"))
        self.assertEqual([Token(V, Span(0, 1)), Token(V, Span(4, 1))], tokens)
        self.assertEqual([InvalidCharSeq(Span(2, 1))], errors)


if __name__ == '__main__':
    unittest.main()
