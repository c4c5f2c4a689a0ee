"""Abstract syntax tree of pure lambda calculus, as produced by the parser.

Nodes never store identifier text: a Var's name, like an Abs's binder, is recovered by slicing the source with the
node's spans. Every node's span covers the spans of its children.
"""

from dataclasses import dataclass

from lampool.pure.span import Span


class Node:
    """Superclass of every AST node. Subclasses are frozen dataclasses with a leading span field."""
    span: Span

    @property
    def children(self):
        """Sub-nodes of this node, left to right."""
        return ()

    def label(self, source):
        """One-line description of this node, without its children. Used by display."""
        return type(self).__name__

    def display(self, source, indents=0):
        """Displays the tree with readable format, one node per line.

        Format:
        <label> @ <span>
            <label> @ <span>
                ...
        """
        data = source.encode()
        lines = []
        stack = [(self, indents)]
        while stack:
            node, depth = stack.pop()
            lines.append(f"{'    ' * depth}{node.label(data)} @ {node.span}")
            stack.extend((child, depth + 1) for child in reversed(node.children))
        return "\n".join(lines)

    def walk(self):
        """Yields this node and all of its descendants, in pre-order."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))


@dataclass(frozen=True)
class Var(Node):
    """Use site of a variable."""
    span: Span

    def name(self, source):
        return self.span.slice(source)

    def label(self, source):
        return f"Var '{self.name(source)}'"


@dataclass(frozen=True)
class Abs(Node):
    """Abstraction over a single parameter; param locates the binder name in the source."""
    span: Span
    param: Span
    body: Node

    @property
    def children(self):
        return (self.body,)

    def name(self, source):
        return self.param.slice(source)

    def label(self, source):
        return f"Abs '{self.name(source)}'"


@dataclass(frozen=True)
class App(Node):
    span: Span
    lhs: Node
    rhs: Node

    @property
    def children(self):
        return self.lhs, self.rhs
