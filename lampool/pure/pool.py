"""Lowering of the AST into a term pool: a flat, topologically ordered list of terms that refer to each other by
position (TermIdx, a plain int) and to their binders by de Bruijn index.

Pool invariants:
- every index referenced by the term at position i is smaller than i, so the root is the last term
- every Var(k) sits under more than k Abs on its path from the root (the term is closed)
- each AST node produces exactly one term
"""

import logging
from dataclasses import dataclass
from typing import Tuple

from lampool.lang.error import Diagnostic, Label
from lampool.pure import syntax

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Var:
    """index is the de Bruijn index: the number of binders between this use and its own, innermost = 0."""
    index: int

    def __str__(self):
        return f"ν{self.index}"


@dataclass(frozen=True)
class Abs:
    inner: int

    def __str__(self):
        return f"λ{self.inner}"


@dataclass(frozen=True)
class App:
    lhs: int
    rhs: int

    def __str__(self):
        return f"{self.lhs}⋅{self.rhs}"


class UndeclaredVariable(Diagnostic):
    """A variable with no enclosing binder of the same name."""
    code = "compiler::pool::undeclared_variable"
    help = "perhaps it was mistyped?"

    def __init__(self, at):
        super().__init__("undeclared variable", [Label(at, "this ident is unknown here")])
        self.at = at


@dataclass(frozen=True)
class Pool:
    terms: Tuple = ()

    @classmethod
    def compile(cls, ast, source):
        """Lowers ast, whose spans point into source, into a Pool. Raises UndeclaredVariable on the first free
        variable met in left-to-right order.

        The walk is post-order and uses an explicit work stack, so arbitrarily deep terms don't exhaust the Python
        stack. scopes holds the binder names of the enclosing Abs, innermost last.
        """
        data = source.encode()
        terms = []
        scopes = []
        results = []
        work = [(ast, False)]

        while work:
            node, visited = work.pop()

            if isinstance(node, syntax.Var):
                name = node.name(data)
                for index, scope in enumerate(reversed(scopes)):
                    if scope == name:
                        break
                else:
                    raise UndeclaredVariable(node.span)
                terms.append(Var(index))

            elif isinstance(node, syntax.Abs):
                if not visited:
                    scopes.append(node.name(data))
                    work.append((node, True))
                    work.append((node.body, False))
                    continue
                scopes.pop()
                terms.append(Abs(results.pop()))

            elif isinstance(node, syntax.App):
                if not visited:
                    work.append((node, True))
                    work.append((node.rhs, False))
                    work.append((node.lhs, False))
                    continue
                rhs = results.pop()
                terms.append(App(results.pop(), rhs))

            else:
                raise TypeError(f"cannot lower {type(node).__name__}")

            results.append(len(terms) - 1)

        logger.debug("lowered %d AST nodes into a pool", len(terms))
        return cls(tuple(terms))

    @property
    def root(self):
        """Index of the root term."""
        if not self.terms:
            raise ValueError("empty pool has no root")
        return len(self.terms) - 1

    def __len__(self):
        return len(self.terms)

    def __iter__(self):
        return iter(self.terms)

    def __getitem__(self, idx):
        return self.terms[idx]

    def __str__(self):
        return "[ " + ", ".join(str(term) for term in self.terms) + " ]"


def lower(ast, source):
    """Lowers ast into a Pool, resolving names against source."""
    return Pool.compile(ast, source)
