"""Source spans shared by every stage of the pipeline.

A span is a half-open range `[offset, offset + length)` of bytes in the UTF-8 encoding of the source, so `λ` is two
bytes wide. Only the error renderer converts offsets back to character columns.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Span:
    """Half-open byte range of the source. Spans are values: copy and compare them freely."""
    offset: int
    length: int

    def __post_init__(self):
        if self.offset < 0 or self.length < 0:
            raise ValueError(f"invalid span ({self.offset}, {self.length})")

    @property
    def end(self):
        return self.offset + self.length

    def slice(self, source):
        """Returns the text covered by this span. source is either the source string or its UTF-8 encoding."""
        if isinstance(source, str):
            source = source.encode()
        return source[self.offset:self.end].decode()

    def covers(self, other):
        """Whether or not other lies entirely within this span."""
        return self.offset <= other.offset and other.end <= self.end

    def __str__(self):
        return f"{self.offset}..{self.end}"


def over(left, right):
    """Returns the span running from the start of left to the end of right. left must not start after right."""
    return Span(left.offset, right.end - left.offset)
