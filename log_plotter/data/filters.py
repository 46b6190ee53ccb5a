"""
Line filtering.

A line is considered only when it contains every filter term. Matching is
plain substring containment: case-sensitive, unordered, unanchored.
"""

from typing import Iterable, Sequence


def matches(line: str, terms: Iterable[str]) -> bool:
    """
    Check whether a line contains all terms.

    An empty set of terms matches every line.
    """
    return all(term in line for term in terms)


class LineFilter:
    """Binds a fixed set of AND-combined terms."""

    def __init__(self, terms: Sequence[str] = ()):
        self.terms = tuple(terms)

    def matches(self, line: str) -> bool:
        return matches(line, self.terms)

    def __call__(self, line: str) -> bool:
        return self.matches(line)

    def __repr__(self) -> str:
        return f"LineFilter({list(self.terms)!r})"
