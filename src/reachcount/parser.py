"""Parse "node: successor successor ..." connection lines into edges.

One line per source node:

    svr: aaa bbb
    aaa: fft

Each line yields one (source, successor) edge per successor, in line
order.  Blank lines are skipped.  A line without a colon, with an
empty source or with no successors is an error.
"""
from __future__ import annotations

from typing import Iterable

from reachcount.graph.adjacency import Edge


class ParseError(ValueError):
    """Raised for a malformed connection line."""

    def __init__(self, message: str, line: str, lineno: int | None = None) -> None:
        self.line = line
        self.lineno = lineno
        where = f"line {lineno}: " if lineno is not None else ""
        super().__init__(f"{where}{message}: {line!r}")


def parse_line(line: str, lineno: int | None = None) -> list[Edge]:
    src, sep, rest = line.partition(":")
    if not sep:
        raise ParseError("missing ':'", line, lineno)
    src = src.strip()
    if not src:
        raise ParseError("empty source node", line, lineno)
    outputs = rest.split()
    if not outputs:
        raise ParseError("no successors", line, lineno)
    return [(src, dst) for dst in outputs]


def parse_connections(lines: Iterable[str]) -> list[Edge]:
    """Edges from every non-blank line of *lines*."""
    edges: list[Edge] = []
    for lineno, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        edges.extend(parse_line(line, lineno))
    return edges
